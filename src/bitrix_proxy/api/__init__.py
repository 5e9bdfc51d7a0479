"""HTTP boundary (FastAPI) and command line interface (typer)."""
