from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .errors import UnsupportedRoute

NO_USAGE_DATA = "no usage data returned from upstream"
"""Usage value emitted when the upstream response carries no token accounting."""


class RouteType(str, Enum):
    CHAT = "llm/v1/chat"
    COMPLETIONS = "llm/v1/completions"
    PRESERVE = "preserve"

    @classmethod
    def parse(cls, value: RouteType | str, *, provider: str | None = None) -> RouteType:
        if isinstance(value, cls):
            return value

        try:
            return cls(value)
        except ValueError:
            raise UnsupportedRoute(
                message=f"no transformer for {provider}://{value}",
                provider=provider,
                route_type=str(value),
            ) from None


class CanonicalMessage(BaseModel):
    # A missing or unrecognized role marks a system instruction.
    role: str | None = None
    content: str

    model_config = ConfigDict(extra="allow")


class CanonicalRequest(BaseModel):
    prompt: str | None = None
    messages: list[CanonicalMessage] | None = None

    model_config = ConfigDict(extra="allow")


class ModelOptions(BaseModel):
    temperature: float | None = None
    max_tokens: int | None = None
    upstream_url: str | None = None
    provider_version: str | None = Field(default=None, alias="anthropic_version")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class ModelConfig(BaseModel):
    name: str
    provider: str = "anthropic"
    options: ModelOptions | None = None

    model_config = ConfigDict(frozen=True)


class AuthConfig(BaseModel):
    header_name: str | None = None
    header_value: str | None = None
    param_name: str | None = None
    param_value: str | None = None
    param_location: Literal["query", "body"] | None = None

    model_config = ConfigDict(frozen=True)


class CanonicalUsage(BaseModel):
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None


class ChoiceMessage(BaseModel):
    role: Literal["assistant"] = "assistant"
    content: str


class CanonicalChoice(BaseModel):
    index: int = 0
    message: ChoiceMessage | None = None
    text: str | None = None
    finish_reason: Any = None


class CanonicalResponse(BaseModel):
    choices: list[CanonicalChoice]
    usage: CanonicalUsage | str | None = None
    model: Any = None
    object: Literal["chat.content", "text_completion"]

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True)
