from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit, urlunsplit

import httpx

from llm_driver.core.errors import UpstreamError
from llm_driver.core.types import AuthConfig, ModelConfig, ModelOptions, RouteType

from .driver import DRIVER_NAME

logger = logging.getLogger(__name__)

UPSTREAM_URL_FORMAT = "https://api.anthropic.com:443"


@dataclass(frozen=True)
class Operation:
    path: str
    method: str


OPERATION_MAP: dict[RouteType, Operation] = {
    RouteType.COMPLETIONS: Operation(path="/v1/complete", method="POST"),
    RouteType.CHAT: Operation(path="/v1/messages", method="POST"),
}


@dataclass
class UpstreamRequest:
    url: str
    method: str
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, str] = field(default_factory=dict)


def configure_request(
    model: ModelConfig,
    route_type: RouteType | str,
    auth: AuthConfig | None = None,
) -> UpstreamRequest:
    route = RouteType.parse(route_type, provider=DRIVER_NAME)
    options = model.options or ModelOptions()
    operation = OPERATION_MAP.get(route)

    if options.upstream_url:
        url = options.upstream_url
    elif operation is not None:
        url = _with_path(UPSTREAM_URL_FORMAT, operation.path)
    else:
        # preserve has no routed path
        url = UPSTREAM_URL_FORMAT

    headers = {
        "Accept": "application/json",
        "Content-Type": "application/json",
    }
    if options.provider_version:
        headers["anthropic-version"] = options.provider_version

    params: dict[str, str] = {}
    if auth is not None:
        if auth.header_name and auth.header_value:
            headers[auth.header_name] = auth.header_value
        if auth.param_name and auth.param_value and auth.param_location == "query":
            params[auth.param_name] = auth.param_value

    return UpstreamRequest(
        url=url,
        method=operation.method if operation is not None else "POST",
        headers=headers,
        params=params,
    )


async def subrequest(
    body: Any,
    upstream: UpstreamRequest,
    *,
    timeout: float | httpx.Timeout | None = 60.0,
    client: httpx.AsyncClient | None = None,
) -> tuple[bytes, int, list[tuple[str, str]]]:
    if isinstance(body, dict):
        content: str | bytes = json.dumps(body, ensure_ascii=False)
    elif isinstance(body, (str, bytes)):
        content = body
    else:
        raise TypeError("body must be dict, str or bytes")

    try:
        if client is not None:
            response = await _send(client, upstream, content)
        else:
            async with httpx.AsyncClient(timeout=timeout) as owned_client:
                response = await _send(owned_client, upstream, content)
    except httpx.HTTPError as exc:
        logger.warning("request to %s failed: %s", upstream.url, exc)
        raise UpstreamError(
            status_code=502,
            message=f"request to ai service failed: {exc}",
            code="upstream_unreachable",
        ) from exc

    if response.status_code > 299:
        logger.warning("upstream %s answered %d", upstream.url, response.status_code)
        raise UpstreamError(
            status_code=response.status_code,
            message=f"status code {response.status_code}",
            code="upstream_error",
            body=response.content,
        )

    return response.content, response.status_code, response.headers.multi_items()


async def _send(
    client: httpx.AsyncClient,
    upstream: UpstreamRequest,
    content: str | bytes,
) -> httpx.Response:
    return await client.request(
        upstream.method,
        upstream.url,
        content=content,
        headers=upstream.headers,
        params=upstream.params or None,
    )


def _with_path(base_url: str, path: str) -> str:
    parts = urlsplit(base_url)
    return urlunsplit((parts.scheme, parts.netloc, path, "", ""))
