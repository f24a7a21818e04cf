"""
Response Interpreter - Pull a JSON object out of free-form model output.

Models asked for JSON often wrap it in prose or markdown code fences. The
scanner here finds the first balanced ``{...}`` span, ignoring braces that
appear inside string literals, and parses it strictly. Anything that does not
parse yields the caller's fallback.
"""

import json
from typing import Any, TypeVar

from siagent.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def find_json_object(text: str) -> str | None:
    """
    Return the first balanced brace-delimited span in ``text``.

    Example: 'noise {"a": {"b": 1}} more {"c": 2}' -> '{"a": {"b": 1}}'

    Returns None when there is no opening brace or it is never closed.
    """
    if not text:
        return None

    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False

    for i in range(start, len(text)):
        ch = text[i]

        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]

    return None


def extract_json(raw_text: str, fallback: T) -> dict[str, Any] | T:
    """
    Parse the first JSON object embedded in ``raw_text``.

    Args:
        raw_text: Model output
        fallback: Value returned when no object can be parsed

    Returns:
        The parsed object, which replaces the fallback entirely, or
        ``fallback`` itself (unmodified) on failure
    """
    span = find_json_object(raw_text)
    if span is None:
        logger.warning(
            "ai.interpret.fallback",
            reason="no_json_object",
            text_length=len(raw_text or ""),
        )
        return fallback

    try:
        parsed = json.loads(span)
    except json.JSONDecodeError as e:
        logger.warning(
            "ai.interpret.fallback",
            reason="invalid_json",
            error_message=str(e),
            text_length=len(raw_text),
        )
        return fallback

    if not isinstance(parsed, dict):
        logger.warning(
            "ai.interpret.fallback",
            reason="not_an_object",
            parsed_type=type(parsed).__name__,
            text_length=len(raw_text),
        )
        return fallback

    return parsed
