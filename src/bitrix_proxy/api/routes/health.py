from fastapi import APIRouter

from bitrix_proxy.api.schemas.envelope import EnvelopeResponse

router = APIRouter()


@router.get("/health", response_model=EnvelopeResponse)
async def health_check() -> EnvelopeResponse:
    """Liveness check: is the service running?"""
    return EnvelopeResponse(data={"status": "healthy"})
