"""AI service facade: the public operations built on the transport."""

from typing import Any

from siagent.logger import get_logger

from .config import AIConfig, load_config_from_env
from .interpreter import extract_json
from .prompts import (
    build_analysis_messages,
    build_chat_messages,
    build_codegen_messages,
)
from .transport import OpenRouterTransport
from .types import ConnectionTestResult, GeneratedApiArtifact, PromptAnalysis

logger = get_logger(__name__)

NO_RESPONSE = "No response generated"
FALLBACK_ENDPOINT = "/api/generated"
TEST_PROMPT = (
    'Hello! Please respond with "AI service is working correctly" '
    "to confirm the connection."
)


class AIService:
    """Prompt analysis, code generation and plain chat over OpenRouter.

    Holds only immutable configuration, so one instance may serve
    concurrent callers.
    """

    def __init__(self, config: AIConfig, transport: OpenRouterTransport | None = None):
        self.config = config
        self.transport = transport or OpenRouterTransport(config)

    @classmethod
    def from_env(cls) -> "AIService":
        """Create a service from OPENROUTER_* environment variables.

        Raises:
            ValueError: If OPENROUTER_API_KEY is not set
        """
        return cls(load_config_from_env())

    @property
    def model(self) -> str:
        return self.config.model

    def generate_response(
        self,
        prompt: str,
        context: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        """Answer a prompt, optionally with extra context.

        Returns:
            The model's reply, or "No response generated" when it has none

        Raises:
            TransportError: If the upstream call fails
        """
        messages = build_chat_messages(prompt, context)
        try:
            response = self.transport.send(
                messages, max_tokens=max_tokens, temperature=temperature
            )
        except Exception as e:
            logger.error(
                "ai.generate_response.error",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise

        return response.first_content or NO_RESPONSE

    def parse_api_prompt(self, prompt: str) -> PromptAnalysis:
        """Analyze a natural language API request.

        Raises:
            TransportError: If the upstream call fails
        """
        fallback: PromptAnalysis = {
            "intent": prompt[:100],
            "suggestedEndpoint": FALLBACK_ENDPOINT,
            "suggestedMethod": "GET",
            "parameters": [],
            "complexity": "medium",
        }

        try:
            response = self.transport.send(
                build_analysis_messages(prompt), max_tokens=500, temperature=0.2
            )
        except Exception as e:
            logger.error(
                "ai.parse_api_prompt.error",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise

        return extract_json(response.first_content or "", fallback)

    def generate_api_code(
        self,
        description: str,
        method: str | None = None,
        input_schema: Any = None,
        output_schema: Any = None,
    ) -> GeneratedApiArtifact:
        """Generate endpoint code from a description.

        Raises:
            TransportError: If the upstream call fails
        """
        messages = build_codegen_messages(description, method, input_schema, output_schema)
        try:
            # Low temperature keeps generated code consistent
            response = self.transport.send(messages, max_tokens=2000, temperature=0.3)
        except Exception as e:
            logger.error(
                "ai.generate_api_code.error",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise

        content = response.first_content or ""
        fallback: GeneratedApiArtifact = {
            "endpoint": FALLBACK_ENDPOINT,
            "method": method or "GET",
            "controllerCode": f"// Generated from: {description}\n{content}",
            "serviceCode": "// Service logic would go here",
            "schema": {
                "input": input_schema or {},
                "output": output_schema or {},
            },
        }
        return extract_json(content, fallback)

    def test_connection(self) -> ConnectionTestResult:
        """Probe the upstream with a short greeting. Never raises."""
        try:
            reply = self.generate_response(TEST_PROMPT, max_tokens=50, temperature=0.1)
        except Exception as e:
            logger.error(
                "ai.test_connection.failed",
                error_type=type(e).__name__,
                error_message=str(e),
                model=self.model,
            )
            return ConnectionTestResult(
                success=False,
                model=self.model,
                response=str(e) or "Connection test failed",
            )

        return ConnectionTestResult(success=True, model=self.model, response=reply)
