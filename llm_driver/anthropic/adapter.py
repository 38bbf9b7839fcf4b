from __future__ import annotations

import json
from typing import Any

from llm_driver.core.errors import DecodeError, MissingField, NormalizationFault
from llm_driver.core.types import (
    NO_USAGE_DATA,
    CanonicalChoice,
    CanonicalRequest,
    CanonicalResponse,
    CanonicalUsage,
    ChoiceMessage,
    ModelConfig,
    ModelOptions,
)

from .prompt import to_claude_messages, to_claude_prompt
from .schemas import CompletionRequest, MessagesRequest

JSON_CONTENT_TYPE = "application/json"


def build_messages_request(request: CanonicalRequest, model: ModelConfig) -> dict[str, Any]:
    turns, system = to_claude_messages(request)
    options = model.options or ModelOptions()

    body = MessagesRequest(
        model=model.name,
        messages=[turn.model_dump(exclude_none=True) for turn in turns],
        system=system,
        max_tokens=options.max_tokens,
        temperature=options.temperature,
    )
    return body.model_dump(exclude_none=True)


def build_completion_request(request: CanonicalRequest, model: ModelConfig) -> dict[str, Any]:
    prompt = to_claude_prompt(request)
    options = model.options or ModelOptions()

    body = CompletionRequest(
        model=model.name,
        prompt=prompt,
        max_tokens_to_sample=options.max_tokens,
        temperature=options.temperature,
    )
    return body.model_dump(exclude_none=True)


def normalize_messages_response(payload: str | bytes) -> str:
    response = _decode_response(payload)

    if response.get("content") is None:
        raise MissingField(
            message="'content' not in anthropic://llm/v1/chat response",
            field_name="content",
        )

    canonical = CanonicalResponse(
        choices=[
            CanonicalChoice(
                index=0,
                message=ChoiceMessage(content=_join_content_text(response["content"])),
                finish_reason=response.get("stop_reason"),
            )
        ],
        usage=_usage_payload(response.get("usage")),
        model=response.get("model"),
        object="chat.content",
    )
    return canonical.to_json()


def normalize_completion_response(payload: str | bytes) -> str:
    response = _decode_response(payload)

    completion = response.get("completion")
    if completion is None:
        raise MissingField(
            message="'completion' not in anthropic://llm/v1/completions response",
            field_name="completion",
        )

    if not isinstance(completion, str):
        raise NormalizationFault(
            message=f"'completion' must be a string, got {type(completion).__name__}"
        )

    canonical = CanonicalResponse(
        choices=[
            CanonicalChoice(
                index=0,
                text=completion,
                finish_reason=response.get("stop_reason"),
            )
        ],
        model=response.get("model"),
        object="text_completion",
    )
    return canonical.to_json()


def _decode_response(payload: str | bytes) -> dict[str, Any]:
    try:
        response = json.loads(payload)
    except (TypeError, ValueError) as exc:
        raise DecodeError(message=f"failed to decode anthropic response: {exc}") from exc

    if not isinstance(response, dict):
        raise NormalizationFault(
            message=f"anthropic response must be a JSON object, got {type(response).__name__}"
        )

    return response


def _join_content_text(content: Any) -> str:
    if not isinstance(content, list):
        raise NormalizationFault(
            message=f"'content' must be a list, got {type(content).__name__}"
        )

    texts: list[str] = []
    for index, fragment in enumerate(content):
        text = fragment.get("text") if isinstance(fragment, dict) else None
        if not isinstance(text, str):
            raise NormalizationFault(message=f"content[{index}] has no text")
        texts.append(text)

    return "\n".join(texts)


def _usage_payload(usage: Any) -> CanonicalUsage | str:
    if usage is None:
        return NO_USAGE_DATA

    if not isinstance(usage, dict):
        raise NormalizationFault(
            message=f"'usage' must be an object, got {type(usage).__name__}"
        )

    prompt_tokens = _token_count(usage, "input_tokens")
    completion_tokens = _token_count(usage, "output_tokens")

    total_tokens = None
    if prompt_tokens is not None and completion_tokens is not None:
        total_tokens = prompt_tokens + completion_tokens

    return CanonicalUsage(
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=total_tokens,
    )


def _token_count(usage: dict[str, Any], key: str) -> int | None:
    value = usage.get(key)
    if value is None:
        return None

    if isinstance(value, bool) or not isinstance(value, int):
        raise NormalizationFault(message=f"usage.{key} must be an integer")

    return value
