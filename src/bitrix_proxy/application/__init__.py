"""Application layer: dispatching, configuration loading and the proxy service."""
