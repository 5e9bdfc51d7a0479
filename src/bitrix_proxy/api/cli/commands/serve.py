"""Serve command - Run the HTTP boundary with uvicorn."""

import os

import typer
import uvicorn

from bitrix_proxy.application.settings import CONFIG_PATH_ENV, load_settings
from bitrix_proxy.core.domain.errors import ConfigError


def serve(
    ctx: typer.Context,
    host: str = typer.Option(None, "--host", help="Bind address (default: MCP_HOST or 0.0.0.0)"),
    port: int = typer.Option(None, "--port", "-p", help="Bind port (default: MCP_PORT or 3000)"),
):
    """Start the HTTP server."""
    global_opts = ctx.obj or {}
    config_path = global_opts.get("config_path")
    if config_path:
        # the app loads its own settings on startup
        os.environ[CONFIG_PATH_ENV] = config_path

    try:
        settings = load_settings(config_path)
    except ConfigError as e:
        typer.secho(f"Configuration error: {e.message}", fg=typer.colors.RED)
        raise typer.Exit(1)

    if not settings.bitrix.webhook_url:
        typer.secho(
            "BITRIX_WEBHOOK_URL is not set; tool calls will fail until it is configured",
            fg=typer.colors.YELLOW,
        )

    uvicorn.run(
        "bitrix_proxy.api.server:app",
        host=host or settings.server.host,
        port=port or settings.server.port,
        log_level=settings.server.log_level.lower(),
    )
