from __future__ import annotations

import logging

from llm_driver.core.errors import MissingInput
from llm_driver.core.types import CanonicalMessage, CanonicalRequest

logger = logging.getLogger(__name__)

_TURN_PREFIXES = {
    "assistant": "Assistant: ",
    "user": "Human: ",
}
_TURN_SEPARATOR = "\n\n"
_ASSISTANT_MARKER = "Assistant:"


def flatten_prompt(prompt: str) -> str:
    return f"Human: {prompt}{_TURN_SEPARATOR}{_ASSISTANT_MARKER}"


def flatten_messages(messages: list[CanonicalMessage]) -> str:
    parts: list[str] = []

    for message in messages:
        # System instructions carry no role label and open the transcript as-is.
        parts.append(_TURN_PREFIXES.get(message.role or "", ""))
        parts.append(message.content)
        parts.append(_TURN_SEPARATOR)

    parts.append(_ASSISTANT_MARKER)
    return "".join(parts)


def split_messages(
    messages: list[CanonicalMessage],
) -> tuple[list[CanonicalMessage], str | None]:
    turns: list[CanonicalMessage] = []
    system: str | None = None

    for index, message in enumerate(messages):
        if message.role in _TURN_PREFIXES:
            turns.append(message)
            continue

        if system is not None:
            logger.debug(
                "messages[%d] replaces an earlier system instruction", index
            )
        system = message.content

    return turns, system


def to_claude_prompt(request: CanonicalRequest) -> str:
    _require_single_input(request)

    if request.prompt is not None:
        return flatten_prompt(request.prompt)

    return flatten_messages(request.messages)


def to_claude_messages(
    request: CanonicalRequest,
) -> tuple[list[CanonicalMessage], str | None]:
    _require_single_input(request)

    if request.messages is None:
        raise MissingInput(message="request is missing .messages command")

    return split_messages(request.messages)


def _require_single_input(request: CanonicalRequest) -> None:
    if request.prompt is None and request.messages is None:
        raise MissingInput(message="request is missing .prompt and .messages commands")

    if request.prompt is not None and request.messages is not None:
        raise MissingInput(
            message="request must contain only one of .prompt and .messages commands"
        )
