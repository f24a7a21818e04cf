"""OpenRouter HTTP transport."""

import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from pathlib import Path
from typing import Sequence

import requests

from siagent.logger import get_logger

from .config import AIConfig
from .errors import (
    AITimeoutError,
    MalformedResponseError,
    NetworkUnreachableError,
    TransportError,
    UpstreamError,
)
from .trace import record_error_trace, record_trace
from .types import ChatMessage, CompletionRequest, CompletionResponse

logger = get_logger(__name__)


class OpenRouterTransport:
    """Sends chat-completion requests to an OpenAI-compatible endpoint."""

    def __init__(self, config: AIConfig, session: requests.Session | None = None):
        self.config = config
        # requests' module-level API by default; a Session may be injected
        self._http = session or requests

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self.config.referer,
            "X-Title": self.config.app_title,
        }

    def send(
        self,
        messages: Sequence[ChatMessage],
        model_override: str | None = None,
        *,
        max_tokens: int | None = None,
        temperature: float | None = None,
        timeout_s: float | None = None,
    ) -> CompletionResponse:
        """Execute one completion request.

        Args:
            messages: Ordered chat messages, system first
            model_override: Model to use instead of the configured one
            max_tokens: Optional completion token cap
            temperature: Optional sampling temperature
            timeout_s: Deadline for the round trip (defaults to config)

        Returns:
            Parsed completion response

        Raises:
            AITimeoutError: If the deadline is exceeded
            NetworkUnreachableError: If the host cannot be reached
            UpstreamError: For non-success HTTP status codes
            MalformedResponseError: If the body is not a completion document
        """
        request = CompletionRequest(
            model=model_override or self.config.model,
            messages=tuple(messages),
            max_tokens=max_tokens,
            temperature=temperature,
        )
        deadline = timeout_s if timeout_s is not None else self.config.timeout_s
        url = self.config.completions_url

        logger.info(
            "ai.request",
            event="ai.request",
            method="POST",
            url=url,
            model=request.model,
            messages_count=len(request.messages),
            timeout_s=deadline,
            api_key="SET" if self.config.api_key else "NOT_SET",
        )

        start_time = time.time()
        try:
            response = self._post(url, request, deadline)
        except TransportError as e:
            elapsed_ms = int((time.time() - start_time) * 1000)
            trace_file = self._write_trace(record_error_trace, request, e, self.config, elapsed_ms)
            logger.error(
                "ai.response",
                event="ai.response",
                outcome="error",
                error_kind=e.kind.value,
                error_message=e.message,
                status=getattr(e, "status_code", None),
                model=request.model,
                elapsed_ms=elapsed_ms,
                trace_file=str(trace_file) if trace_file else None,
            )
            raise

        trace_file = self._write_trace(record_trace, request, response, self.config)
        logger.info(
            "ai.response",
            event="ai.response",
            outcome="success",
            status=200,
            model=response.model or request.model,
            request_id=response.request_id,
            elapsed_ms=response.elapsed_ms,
            usage=response.usage.to_dict() if response.usage else None,
            trace_file=str(trace_file) if trace_file else None,
        )
        return response

    def _write_trace(self, record, *args) -> Path | None:
        """Write a trace file; a failed write is logged and never masks the call."""
        try:
            return record(*args)
        except OSError as e:
            logger.warning(
                "ai.trace.error",
                event="ai.trace.error",
                error_type=type(e).__name__,
                error_message=str(e),
                trace_dir=str(self.config.trace_dir),
            )
            return None

    def _post(
        self, url: str, request: CompletionRequest, timeout_s: float
    ) -> CompletionResponse:
        """POST the request and read the whole body within ``timeout_s``.

        requests applies its timeout per socket operation, so the round trip
        runs on a worker and the caller stops waiting at the deadline. On
        expiry the response (if any) is closed, which aborts the worker's read.
        """
        start_time = time.time()
        in_flight: dict[str, requests.Response] = {}

        def _call() -> requests.Response:
            response = self._http.post(
                url,
                headers=self._headers(),
                json=request.to_payload(),
                timeout=timeout_s,
                stream=True,
            )
            in_flight["response"] = response
            # Load the body while the deadline is still being enforced
            response.content
            return response

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="siagent-ai")
        future = executor.submit(_call)
        try:
            response = future.result(timeout=timeout_s)
        except FutureTimeoutError as e:
            future.cancel()
            if "response" in in_flight:
                in_flight["response"].close()
            raise AITimeoutError() from e
        except requests.Timeout as e:
            # Checked before ConnectionError: ConnectTimeout is both
            raise AITimeoutError() from e
        except requests.ConnectionError as e:
            raise NetworkUnreachableError() from e
        except requests.RequestException as e:
            raise NetworkUnreachableError(
                f"Failed to communicate with AI service: {e}"
            ) from e
        finally:
            executor.shutdown(wait=False)

        elapsed_ms = int((time.time() - start_time) * 1000)

        if not 200 <= response.status_code < 300:
            raise UpstreamError(
                response.status_code,
                body=response.text,
                reason=response.reason or "",
            )

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponseError(
                f"OpenRouter returned a non-JSON body (HTTP {response.status_code})"
            ) from e

        return CompletionResponse.from_dict(data, elapsed_ms=elapsed_ms)
