from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from bitrix_proxy import __version__
from bitrix_proxy.api.dependencies import get_proxy_service
from bitrix_proxy.api.errors import (
    envelope_http_exception_handler,
    proxy_error_handler,
    unhandled_error_handler,
)
from bitrix_proxy.api.log_config import configure_logging
from bitrix_proxy.api.routes import health, mcp
from bitrix_proxy.core.domain.errors import ProxyError

# Configure logging based on LOGLEVEL environment variable
configure_logging()

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the proxy service at startup and release its HTTP session at shutdown."""
    service = get_proxy_service()
    await logger.ainfo(
        "fastapi.startup",
        message="Bitrix24 tool proxy starting...",
        tools=len(service.dispatcher.list_tools()),
    )
    yield
    await logger.ainfo("fastapi.shutdown", message="Bitrix24 tool proxy shutting down...")
    await service.close()
    get_proxy_service.cache_clear()


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Bitrix24 Tool Proxy",
        description="Semantic CRM tools translated into Bitrix24 REST calls",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_exception_handler(HTTPException, envelope_http_exception_handler)
    app.add_exception_handler(ProxyError, proxy_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(mcp.router, prefix="/mcp", tags=["mcp"])
    app.include_router(health.router, prefix="/mcp", tags=["health"])

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=3000)
