"""Prompt assembly for each AI operation.

Every builder returns a fresh message list and leaves its inputs untouched.
"""

import json
from typing import Any

from .types import ChatMessage

ASSISTANT_PERSONA = (
    "You are a helpful AI assistant for the SI-AGENT platform. "
    "Provide clear, concise, and accurate responses."
)

ANALYSIS_INSTRUCTIONS = """Analyze API requests and return structured information as JSON:
{
  "intent": "Brief description of what the API should do",
  "suggestedEndpoint": "/api/suggested-path",
  "suggestedMethod": "GET|POST|PUT|DELETE",
  "parameters": ["param1", "param2"],
  "complexity": "simple|medium|complex"
}"""

CODEGEN_INSTRUCTIONS = """You are an expert API developer. Generate Express.js API code based on user descriptions.

Return a JSON response with the following structure:
{
  "endpoint": "/api/example",
  "method": "GET|POST|PUT|DELETE",
  "controllerCode": "// Express controller code",
  "serviceCode": "// Business logic service code",
  "schema": {
    "input": { /* JSON schema for input */ },
    "output": { /* JSON schema for output */ }
  }
}

Make the code production-ready with proper error handling, validation, and TypeScript types."""


def build_chat_messages(prompt: str, context: str | None = None) -> list[ChatMessage]:
    if context:
        user_content = f"Context: {context}\n\nPrompt: {prompt}"
    else:
        user_content = prompt
    return [
        ChatMessage(role="system", content=ASSISTANT_PERSONA),
        ChatMessage(role="user", content=user_content),
    ]


def build_analysis_messages(prompt: str) -> list[ChatMessage]:
    return [
        ChatMessage(role="system", content=ANALYSIS_INSTRUCTIONS),
        ChatMessage(role="user", content=f"Analyze this API request: {prompt}"),
    ]


def build_codegen_messages(
    description: str,
    method: str | None = None,
    input_schema: Any = None,
    output_schema: Any = None,
) -> list[ChatMessage]:
    """Build the code generation conversation.

    Method and schema lines are only present when the caller supplied them.
    """
    lines = [f"Generate an API for: {description}", ""]
    if method:
        lines.append(f"Preferred HTTP method: {method}")
    if input_schema:
        lines.append(f"Input schema requirements: {json.dumps(input_schema)}")
    if output_schema:
        lines.append(f"Output schema requirements: {json.dumps(output_schema)}")
    if len(lines) > 2:
        lines.append("")
    lines.append("Please generate complete, working code that follows best practices.")

    return [
        ChatMessage(role="system", content=CODEGEN_INSTRUCTIONS),
        ChatMessage(role="user", content="\n".join(lines)),
    ]
