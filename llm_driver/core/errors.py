from __future__ import annotations

import json
from dataclasses import dataclass
from typing import ClassVar


@dataclass
class GatewayError(Exception):
    status_code: int
    message: str
    code: str | None = None
    param: str | None = None

    def __str__(self) -> str:
        return self.message


@dataclass
class UpstreamError(GatewayError):
    """Raised when the upstream provider call fails or answers non-2xx."""

    body: bytes | None = None

    def detail(self) -> str:
        try:
            payload = json.loads(self.body) if self.body else None
        except ValueError:
            return self.message

        error = payload.get("error") if isinstance(payload, dict) else None
        upstream_message = error.get("message") if isinstance(error, dict) else None
        if not isinstance(upstream_message, str) or not upstream_message:
            return self.message

        return f"{self.message}: {upstream_message}"


@dataclass
class TransformError(Exception):
    """Base class for failures while translating to or from a provider format."""

    message: str
    provider: str | None = None
    route_type: str | None = None

    status_code: ClassVar[int] = 500
    code: ClassVar[str] = "transform_error"

    def __str__(self) -> str:
        return self.message


@dataclass
class MissingInput(TransformError):
    status_code: ClassVar[int] = 400
    code: ClassVar[str] = "missing_input"


@dataclass
class UnsupportedRoute(TransformError):
    status_code: ClassVar[int] = 400
    code: ClassVar[str] = "unsupported_route"


@dataclass
class BuildError(TransformError):
    status_code: ClassVar[int] = 500
    code: ClassVar[str] = "build_error"


@dataclass
class DecodeError(TransformError):
    status_code: ClassVar[int] = 502
    code: ClassVar[str] = "decode_error"


@dataclass
class MissingField(TransformError):
    """The success discriminator is absent, so the body is most likely an upstream error."""

    field_name: str | None = None

    status_code: ClassVar[int] = 502
    code: ClassVar[str] = "missing_field"


@dataclass
class NormalizationFault(TransformError):
    status_code: ClassVar[int] = 502
    code: ClassVar[str] = "normalization_fault"
