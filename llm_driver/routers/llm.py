from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from llm_driver.anthropic.driver import from_format, post_request, pre_request, to_format
from llm_driver.anthropic.transport import configure_request, subrequest
from llm_driver.core.settings import GatewaySettings
from llm_driver.core.types import CanonicalRequest, RouteType
from llm_driver.dependencies import get_settings

router = APIRouter(prefix="/v1", tags=["llm"])

# Entity and hop-by-hop headers describe the upstream body, not the one we emit.
_UNFORWARDED_HEADERS = frozenset(
    {
        "connection",
        "content-encoding",
        "content-length",
        "content-type",
        "keep-alive",
        "transfer-encoding",
    }
)


@router.post("/chat")
async def chat(
    payload: CanonicalRequest,
    settings: GatewaySettings = Depends(get_settings),
) -> Response:
    return await _proxy(payload, RouteType.CHAT, settings)


@router.post("/completions")
async def completions(
    payload: CanonicalRequest,
    settings: GatewaySettings = Depends(get_settings),
) -> Response:
    return await _proxy(payload, RouteType.COMPLETIONS, settings)


async def _proxy(
    payload: CanonicalRequest,
    route: RouteType,
    settings: GatewaySettings,
) -> Response:
    pre_request(payload)

    model = settings.to_model_config()
    body, content_type = to_format(payload, model, route)

    upstream = configure_request(model, route, settings.to_auth_config())
    if content_type is not None:
        upstream.headers["Content-Type"] = content_type

    raw_response, status_code, upstream_headers = await subrequest(
        body,
        upstream,
        timeout=settings.timeout,
    )
    canonical = from_format(raw_response, model, route)

    response = Response(
        content=canonical,
        status_code=status_code,
        media_type="application/json",
    )
    for name, value in post_request(upstream_headers):
        if name.lower() not in _UNFORWARDED_HEADERS:
            response.headers.append(name, value)
    return response
