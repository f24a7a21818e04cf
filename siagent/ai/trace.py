"""Trace recording for upstream AI calls."""

import json
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any

from .config import AIConfig, compute_config_hash
from .errors import TransportError
from .types import CompletionRequest, CompletionResponse


def _trace_dir(base: Path) -> Path:
    date_str = datetime.now().strftime("%Y%m%d")
    trace_dir = Path(base) / date_str
    trace_dir.mkdir(parents=True, exist_ok=True)
    return trace_dir


def _request_section(request: CompletionRequest) -> dict[str, Any]:
    return {
        "messages": [m.to_dict() for m in request.messages],
        "max_tokens": request.max_tokens,
        "temperature": request.temperature,
    }


def record_trace(
    request: CompletionRequest,
    response: CompletionResponse,
    config: AIConfig,
) -> Path | None:
    """Record a successful call to ``config.trace_dir``.

    Returns:
        Path to trace file, or None when tracing is disabled
    """
    if config.trace_dir is None:
        return None

    trace_data = {
        "request_id": response.request_id,
        "timestamp": datetime.now().isoformat(),
        "model": response.model or request.model,
        "config_hash": compute_config_hash(config),
        "request": _request_section(request),
        "response": {
            "text": response.first_content,
            "usage": response.usage.to_dict() if response.usage else None,
            "elapsed_ms": response.elapsed_ms,
        },
        "success": True,
    }

    trace_file = _trace_dir(config.trace_dir) / f"{response.request_id}.json"
    with open(trace_file, "w") as f:
        json.dump(trace_data, f, indent=2)

    return trace_file


def record_error_trace(
    request: CompletionRequest,
    error: TransportError,
    config: AIConfig,
    elapsed_ms: int,
) -> Path | None:
    """Record a failed call to ``config.trace_dir``.

    Returns:
        Path to trace file, or None when tracing is disabled
    """
    if config.trace_dir is None:
        return None

    request_id = str(uuid.uuid4())
    error_section: dict[str, Any] = {
        "kind": error.kind.value,
        "type": type(error).__name__,
        "message": error.message,
        "elapsed_ms": elapsed_ms,
    }
    if getattr(error, "status_code", None) is not None:
        error_section["status_code"] = error.status_code
        error_section["body"] = error.body

    trace_data = {
        "request_id": request_id,
        "timestamp": datetime.now().isoformat(),
        "model": request.model,
        "config_hash": compute_config_hash(config),
        "request": _request_section(request),
        "error": error_section,
        "success": False,
    }

    trace_file = _trace_dir(config.trace_dir) / f"{request_id}.json"
    with open(trace_file, "w") as f:
        json.dump(trace_data, f, indent=2)

    return trace_file
