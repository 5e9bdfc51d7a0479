"""FastAPI dependency injection providers.

Centralizes creation of the settings and of the proxy service. The service
owns the process-wide rate limiter, so exactly one instance exists per
process; ``lru_cache`` keeps it testable via ``get_proxy_service.cache_clear()``
and ``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache

from bitrix_proxy.application.dispatcher import ToolDispatcher
from bitrix_proxy.application.proxy_service import ToolProxyService
from bitrix_proxy.application.settings import load_settings
from bitrix_proxy.core.domain.config_schema import ProxySettings
from bitrix_proxy.infrastructure.bitrix import BitrixTransport, RateLimiter

# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_settings() -> ProxySettings:
    """Provide settings loaded from YAML and environment."""
    return load_settings()


# ---------------------------------------------------------------------------
# ToolProxyService
# ---------------------------------------------------------------------------


def build_proxy_service(settings: ProxySettings) -> ToolProxyService:
    """Wire dispatcher, rate limiter and transport for ``settings``."""
    rate_limiter = RateLimiter(settings.bitrix.requests_per_second)
    transport = BitrixTransport(settings.bitrix, rate_limiter)
    return ToolProxyService(ToolDispatcher(), transport)


@lru_cache(maxsize=1)
def get_proxy_service() -> ToolProxyService:
    """Provide the shared ToolProxyService instance."""
    return build_proxy_service(get_settings())
