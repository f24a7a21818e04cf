"""Tests for siagent/ai/prompts.py - message assembly."""

import json

from siagent.ai.prompts import (
    ASSISTANT_PERSONA,
    build_analysis_messages,
    build_chat_messages,
    build_codegen_messages,
)


def test_chat_without_context():
    """User message is the bare prompt."""
    messages = build_chat_messages("What is 2+2?")

    assert [m.role for m in messages] == ["system", "user"]
    assert messages[0].content == ASSISTANT_PERSONA
    assert messages[1].content == "What is 2+2?"


def test_chat_with_context():
    """Context is prepended to the prompt."""
    messages = build_chat_messages("Summarize", context="A long document")

    assert messages[1].content == "Context: A long document\n\nPrompt: Summarize"


def test_analysis_messages():
    """Analysis asks for the structured JSON shape."""
    messages = build_analysis_messages("list all books")

    assert messages[0].role == "system"
    for key in ("intent", "suggestedEndpoint", "suggestedMethod", "parameters", "complexity"):
        assert key in messages[0].content
    assert messages[1].content == "Analyze this API request: list all books"


def test_codegen_minimal():
    """Optional lines are omitted when not supplied."""
    messages = build_codegen_messages("a todo list API")
    user = messages[1].content

    assert user.startswith("Generate an API for: a todo list API")
    assert "Preferred HTTP method" not in user
    assert "Input schema requirements" not in user
    assert "Output schema requirements" not in user
    assert "controllerCode" in messages[0].content


def test_codegen_with_all_options():
    """Method and schemas each get their own line."""
    input_schema = {"type": "object", "properties": {"title": {"type": "string"}}}
    output_schema = {"type": "object"}
    messages = build_codegen_messages("create a todo", "POST", input_schema, output_schema)
    user_lines = messages[1].content.split("\n")

    assert "Preferred HTTP method: POST" in user_lines
    assert f"Input schema requirements: {json.dumps(input_schema)}" in user_lines
    assert f"Output schema requirements: {json.dumps(output_schema)}" in user_lines


def test_codegen_does_not_mutate_inputs():
    schema = {"type": "object"}
    build_codegen_messages("x", "GET", schema, schema)
    assert schema == {"type": "object"}


def test_builders_are_reproducible():
    """Identical inputs give identical messages."""
    assert build_codegen_messages("x", "GET") == build_codegen_messages("x", "GET")
    assert build_chat_messages("p", "c") == build_chat_messages("p", "c")
