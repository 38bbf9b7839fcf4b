from __future__ import annotations

import pytest

from llm_driver.anthropic.prompt import (
    flatten_messages,
    flatten_prompt,
    split_messages,
    to_claude_messages,
    to_claude_prompt,
)
from llm_driver.core.errors import MissingInput
from llm_driver.core.types import CanonicalMessage, CanonicalRequest


def _messages(*pairs: tuple[str | None, str]) -> list[CanonicalMessage]:
    return [CanonicalMessage(role=role, content=content) for role, content in pairs]


def test_flatten_prompt_wraps_single_turn():
    assert flatten_prompt("Hello") == "Human: Hello\n\nAssistant:"


def test_flatten_messages_labels_turns_and_leaves_system_unlabeled():
    messages = _messages(
        ("system", "You are concise."),
        ("user", "First message"),
        ("assistant", "Prior answer"),
        ("user", "Second message"),
    )

    prompt = flatten_messages(messages)

    assert prompt == (
        "You are concise.\n\n"
        "Human: First message\n\n"
        "Assistant: Prior answer\n\n"
        "Human: Second message\n\n"
        "Assistant:"
    )


@pytest.mark.parametrize(
    "messages",
    [
        [],
        _messages(("user", "Hi")),
        _messages((None, "Rules"), ("user", "Hi"), ("assistant", "Yo"), ("tool", "x")),
    ],
)
def test_flatten_messages_separator_per_turn_and_open_assistant_marker(messages):
    prompt = flatten_messages(messages)

    assert prompt.endswith("Assistant:")
    assert prompt.count("\n\n") == len(messages)


def test_split_messages_extracts_system_and_preserves_turn_order():
    messages = _messages(
        ("user", "one"),
        ("system", "Be brief."),
        ("assistant", "two"),
        ("user", "three"),
    )

    turns, system = split_messages(messages)

    assert system == "Be brief."
    assert [(turn.role, turn.content) for turn in turns] == [
        ("user", "one"),
        ("assistant", "two"),
        ("user", "three"),
    ]


def test_split_messages_keeps_only_last_system_instruction():
    messages = _messages(
        ("system", "first rules"),
        ("user", "Hi"),
        (None, "second rules"),
        ("developer", "final rules"),
    )

    turns, system = split_messages(messages)

    assert system == "final rules"
    assert len(turns) == 1
    assert all(turn.role in {"user", "assistant"} for turn in turns)


def test_split_messages_without_system_returns_none():
    turns, system = split_messages(_messages(("user", "Hi"), ("assistant", "Hello")))

    assert system is None
    assert len(turns) == 2


def test_to_claude_prompt_prefers_prompt_mode():
    assert to_claude_prompt(CanonicalRequest(prompt="Hello")) == "Human: Hello\n\nAssistant:"


def test_to_claude_prompt_flattens_messages_mode():
    request = CanonicalRequest(messages=_messages(("user", "Hi")))

    assert to_claude_prompt(request) == "Human: Hi\n\nAssistant:"


def test_to_claude_prompt_with_empty_message_list():
    assert to_claude_prompt(CanonicalRequest(messages=[])) == "Assistant:"


def test_to_claude_prompt_requires_an_input():
    with pytest.raises(MissingInput, match="missing .prompt and .messages"):
        to_claude_prompt(CanonicalRequest())


def test_to_claude_prompt_rejects_both_inputs():
    request = CanonicalRequest(prompt="Hello", messages=_messages(("user", "Hi")))

    with pytest.raises(MissingInput, match="only one of"):
        to_claude_prompt(request)


def test_to_claude_messages_requires_message_list():
    with pytest.raises(MissingInput, match="missing .messages"):
        to_claude_messages(CanonicalRequest(prompt="Hello"))
