from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar, assert_never

from pydantic import BaseModel, ValidationError

from llm_driver.core.errors import (
    BuildError,
    GatewayError,
    NormalizationFault,
    TransformError,
)
from llm_driver.core.types import CanonicalRequest, ModelConfig, RouteType

from .adapter import (
    JSON_CONTENT_TYPE,
    build_completion_request,
    build_messages_request,
    normalize_completion_response,
    normalize_messages_response,
)

logger = logging.getLogger(__name__)

DRIVER_NAME = "anthropic"

# Upstream response headers that must never reach the caller.
CLEAR_RESPONSE_HEADERS = ("x-api-key",)

_ModelT = TypeVar("_ModelT", bound=BaseModel)


def to_format(
    request: CanonicalRequest | Mapping[str, Any],
    model: ModelConfig | Mapping[str, Any],
    route_type: RouteType | str,
) -> tuple[Any, str | None]:
    route = RouteType.parse(route_type, provider=DRIVER_NAME)
    logger.debug("converting from canonical type to %s://%s", DRIVER_NAME, route.value)

    builder: Callable[[CanonicalRequest, ModelConfig], dict[str, Any]]
    match route:
        case RouteType.PRESERVE:
            return request, None
        case RouteType.CHAT:
            builder = build_messages_request
        case RouteType.COMPLETIONS:
            builder = build_completion_request
        case _:
            assert_never(route)

    prefix = f"error transforming to {DRIVER_NAME}://{route.value}"
    try:
        model_config = _coerce(ModelConfig, model, BuildError)
        canonical = _coerce(CanonicalRequest, request, BuildError)
        body = builder(canonical, model_config)
    except TransformError as exc:
        raise _contextualize(exc, prefix, route) from exc
    except Exception as exc:
        raise BuildError(
            message=f"{prefix}: {exc}",
            provider=DRIVER_NAME,
            route_type=route.value,
        ) from exc

    return body, JSON_CONTENT_TYPE


def from_format(
    response: str | bytes,
    model: ModelConfig | Mapping[str, Any],
    route_type: RouteType | str,
) -> str | bytes:
    route = RouteType.parse(route_type, provider=DRIVER_NAME)
    logger.debug("converting from %s://%s type to canonical", DRIVER_NAME, route.value)

    normalizer: Callable[[str | bytes], str]
    match route:
        case RouteType.PRESERVE:
            return response
        case RouteType.CHAT:
            normalizer = normalize_messages_response
        case RouteType.COMPLETIONS:
            normalizer = normalize_completion_response
        case _:
            assert_never(route)

    prefix = f"transformation failed from type {DRIVER_NAME}://{route.value}"
    try:
        _coerce(ModelConfig, model, NormalizationFault)
        return normalizer(response)
    except TransformError as exc:
        raise _contextualize(exc, prefix, route) from exc
    except Exception as exc:
        raise NormalizationFault(
            message=f"{prefix}: unexpected error: {exc}",
            provider=DRIVER_NAME,
            route_type=route.value,
        ) from exc


def pre_request(request: CanonicalRequest) -> None:
    if request.model_extra and request.model_extra.get("model") is not None:
        raise GatewayError(
            status_code=400,
            message="cannot use own model for this instance",
            code="model_not_allowed",
            param="model",
        )


def post_request(headers: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
    blocked = {name.lower() for name in CLEAR_RESPONSE_HEADERS}
    return [(name, value) for name, value in headers if name.lower() not in blocked]


def _coerce(
    model_type: type[_ModelT],
    value: _ModelT | Mapping[str, Any],
    error_type: type[TransformError],
) -> _ModelT:
    if isinstance(value, model_type):
        return value

    try:
        return model_type.model_validate(value)
    except ValidationError as exc:
        errors = exc.errors()
        first_error = errors[0]["msg"] if errors else "invalid input"
        raise error_type(message=f"invalid {model_type.__name__}: {first_error}") from exc


def _contextualize(exc: TransformError, prefix: str, route: RouteType) -> TransformError:
    return dataclasses.replace(
        exc,
        message=f"{prefix}: {exc.message}",
        provider=DRIVER_NAME,
        route_type=route.value,
    )
