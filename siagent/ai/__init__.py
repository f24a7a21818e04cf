"""AI service layer - OpenRouter-backed API generation."""

from .config import AIConfig, load_config, load_config_from_env
from .errors import (
    AITimeoutError,
    MalformedResponseError,
    NetworkUnreachableError,
    TransportError,
    TransportErrorKind,
    UpstreamError,
)
from .service import AIService
from .types import (
    ChatMessage,
    CompletionResponse,
    ConnectionTestResult,
    GeneratedApiArtifact,
    PromptAnalysis,
)

__all__ = [
    "AIService",
    "AIConfig",
    "load_config",
    "load_config_from_env",
    "ChatMessage",
    "CompletionResponse",
    "ConnectionTestResult",
    "GeneratedApiArtifact",
    "PromptAnalysis",
    "TransportError",
    "TransportErrorKind",
    "AITimeoutError",
    "NetworkUnreachableError",
    "UpstreamError",
    "MalformedResponseError",
]
