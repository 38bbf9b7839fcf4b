from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class MessagesRequest(BaseModel):
    """Body for the structured-turns Messages API."""

    model: str
    messages: list[dict[str, Any]]
    system: str | None = None
    max_tokens: int | None = None
    temperature: float | None = None

    model_config = ConfigDict(extra="forbid")


class CompletionRequest(BaseModel):
    """Body for the legacy single-prompt Text Completions API."""

    model: str
    prompt: str
    max_tokens_to_sample: int | None = None
    temperature: float | None = None

    model_config = ConfigDict(extra="forbid")
