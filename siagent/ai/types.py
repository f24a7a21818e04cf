"""AI request and response data structures."""

import uuid
from dataclasses import asdict, dataclass, field
from typing import Any, Literal, TypedDict

from .errors import MalformedResponseError


@dataclass(frozen=True)
class ChatMessage:
    """A single chat turn sent upstream."""

    role: Literal["system", "user"]
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class CompletionRequest:
    """Request data for a chat completion."""

    model: str
    messages: tuple[ChatMessage, ...]
    max_tokens: int | None = None
    temperature: float | None = None

    def to_payload(self) -> dict[str, Any]:
        """Render the JSON body sent to the completions endpoint.

        Sampling fields are only included when set.
        """
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [m.to_dict() for m in self.messages],
        }
        if self.max_tokens is not None:
            payload["max_tokens"] = self.max_tokens
        if self.temperature is not None:
            payload["temperature"] = self.temperature
        return payload


@dataclass
class Usage:
    """Token accounting reported by the upstream."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass
class CompletionResponse:
    """Response data from a chat completion."""

    choices: list[dict[str, Any]]
    usage: Usage | None = None
    model: str | None = None
    raw: dict[str, Any] | None = None
    request_id: str = ""
    elapsed_ms: int = 0

    def __post_init__(self):
        if not self.request_id:
            self.request_id = str(uuid.uuid4())

    @property
    def first_content(self) -> str | None:
        """Content of the first choice, or None when there is none."""
        if not self.choices:
            return None
        choice = self.choices[0]
        if not isinstance(choice, dict):
            return None
        message = choice.get("message")
        if not isinstance(message, dict):
            return None
        content = message.get("content")
        return content if isinstance(content, str) else None

    @classmethod
    def from_dict(cls, data: Any, elapsed_ms: int = 0) -> "CompletionResponse":
        """Build a response from a decoded JSON body.

        Raises:
            MalformedResponseError: If the body is not a completion object
        """
        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"Expected a JSON object from OpenRouter, got {type(data).__name__}"
            )

        choices = data.get("choices", [])
        if not isinstance(choices, list):
            raise MalformedResponseError("OpenRouter response 'choices' is not a list")

        usage = None
        raw_usage = data.get("usage")
        if isinstance(raw_usage, dict):
            usage = Usage(
                prompt_tokens=raw_usage.get("prompt_tokens", 0),
                completion_tokens=raw_usage.get("completion_tokens", 0),
                total_tokens=raw_usage.get("total_tokens", 0),
            )

        return cls(
            choices=choices,
            usage=usage,
            model=data.get("model"),
            raw=data,
            request_id=str(data.get("id") or ""),
            elapsed_ms=elapsed_ms,
        )


class ApiSchema(TypedDict):
    input: Any
    output: Any


class PromptAnalysis(TypedDict):
    """Structured reading of a natural language API request."""

    intent: str
    suggestedEndpoint: str
    suggestedMethod: Literal["GET", "POST", "PUT", "DELETE"]
    parameters: list[str]
    complexity: Literal["simple", "medium", "complex"]


class GeneratedApiArtifact(TypedDict):
    """Generated endpoint code and its schemas."""

    endpoint: str
    method: str
    controllerCode: str
    serviceCode: str
    schema: ApiSchema


@dataclass
class ConnectionTestResult:
    """Outcome of a connectivity probe."""

    success: bool
    model: str
    response: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
