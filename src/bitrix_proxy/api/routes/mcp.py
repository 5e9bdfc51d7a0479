"""Tool discovery and invocation routes."""

from typing import Any

from fastapi import APIRouter, Depends, Request, status

from bitrix_proxy.api.dependencies import get_proxy_service
from bitrix_proxy.api.errors import http_exception
from bitrix_proxy.api.schemas.envelope import CallToolRequest, EnvelopeResponse, ErrorEnvelope
from bitrix_proxy.application.proxy_service import ToolProxyService

router = APIRouter()

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorEnvelope},
    415: {"model": ErrorEnvelope},
    500: {"model": ErrorEnvelope},
    502: {"model": ErrorEnvelope},
}


def _is_json(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    return content_type.split(";", 1)[0].strip().lower() == "application/json"


@router.get("/list_tools", response_model=EnvelopeResponse)
async def list_tools(
    service: ToolProxyService = Depends(get_proxy_service),
) -> EnvelopeResponse:
    """List every tool with its parameters."""
    return EnvelopeResponse(data={"tools": service.list_tools()})


@router.post(
    "/call_tool",
    response_model=EnvelopeResponse,
    responses=_ERROR_RESPONSES,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": CallToolRequest.model_json_schema()}
            },
        }
    },
)
async def call_tool(
    request: Request,
    service: ToolProxyService = Depends(get_proxy_service),
) -> EnvelopeResponse:
    """Invoke a tool: ``{tool, args}`` in, unwrapped Bitrix24 result out."""
    if not _is_json(request):
        raise http_exception(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            code="UNSUPPORTED_MEDIA_TYPE",
            message="Content-Type must be application/json",
        )
    try:
        body = await request.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        raise http_exception(
            status_code=status.HTTP_400_BAD_REQUEST,
            code="INVALID_PAYLOAD",
            message="Request body must be a JSON object",
        )

    result = await service.call_tool(body.get("tool"), body.get("args"))
    return EnvelopeResponse(data=result)


@router.get("/ping", response_model=EnvelopeResponse, response_model_exclude_none=True)
async def ping() -> EnvelopeResponse:
    return EnvelopeResponse()
