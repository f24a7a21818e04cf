#!/usr/bin/env python3
"""
SI-AGENT AI API Server

Exposes the AI service operations as JSON endpoints.

Usage:
    python api_server.py
    python api_server.py --port 3001
"""

import argparse
import json
import sys
from datetime import datetime, timezone
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Callable
from urllib.parse import urlsplit

from dotenv import load_dotenv

from siagent.ai import AIService, TransportError
from siagent.logger import get_logger

load_dotenv()

logger = get_logger("api_server")


class RequestError(Exception):
    """Client-side problem with an API request."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _require(body: dict, key: str, message: str) -> str:
    value = body.get(key)
    if not value:
        raise RequestError(message, 400)
    if not isinstance(value, str):
        raise RequestError(f"'{key}' must be a string", 400)
    return value


# --- ROUTE HANDLERS ---

def handle_test(service: AIService, body: dict) -> dict:
    result = service.test_connection()
    return {
        "success": True,
        "data": result.to_dict(),
        "message": "AI service is working" if result.success else "AI service test failed",
    }


def handle_generate(service: AIService, body: dict) -> dict:
    prompt = _require(body, "prompt", "Prompt is required")
    response = service.generate_response(
        prompt,
        context=body.get("context"),
        max_tokens=body.get("maxTokens"),
        temperature=body.get("temperature"),
    )
    return {"success": True, "data": {"response": response, "prompt": prompt}}


def handle_parse_prompt(service: AIService, body: dict) -> dict:
    prompt = _require(body, "prompt", "Prompt is required")
    analysis = service.parse_api_prompt(prompt)
    return {"success": True, "data": {"analysis": analysis, "originalPrompt": prompt}}


def handle_generate_code(service: AIService, body: dict) -> dict:
    description = _require(body, "description", "API description is required")
    artifact = service.generate_api_code(
        description,
        method=body.get("method"),
        input_schema=body.get("inputSchema"),
        output_schema=body.get("outputSchema"),
    )
    return {
        "success": True,
        "data": {
            **artifact,
            "description": description,
            "generatedAt": datetime.now(timezone.utc).isoformat(),
        },
    }


def handle_health(service: AIService, body: dict) -> dict:
    return {"status": "ok"}


ROUTES: dict[tuple[str, str], Callable[[AIService, dict], dict]] = {
    ("GET", "/health"): handle_health,
    ("GET", "/api/ai/test"): handle_test,
    ("POST", "/api/ai/generate"): handle_generate,
    ("POST", "/api/ai/parse-prompt"): handle_parse_prompt,
    ("POST", "/api/ai/generate-code"): handle_generate_code,
}


def error_payload(message: str, status_code: int, path: str) -> dict:
    return {
        "success": False,
        "message": message,
        "statusCode": status_code,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "path": path,
    }


def dispatch(
    service: AIService, method: str, path: str, raw_body: bytes | str | None = None
) -> tuple[int, dict]:
    """Route one request and return (status_code, payload)."""
    route_path = urlsplit(path).path.rstrip("/") or "/"
    handler = ROUTES.get((method.upper(), route_path))
    if handler is None:
        return 404, error_payload(f"Route not found: {method} {route_path}", 404, path)

    try:
        body: Any = {}
        if raw_body:
            try:
                body = json.loads(raw_body)
            except ValueError:
                # JSONDecodeError, or UnicodeDecodeError for non-UTF-8 bytes
                raise RequestError("Invalid JSON body", 400)
            if not isinstance(body, dict):
                raise RequestError("Request body must be a JSON object", 400)
        return 200, handler(service, body)

    except RequestError as e:
        return e.status_code, error_payload(e.message, e.status_code, path)
    except TransportError as e:
        logger.error(
            f"Error {e.http_status}: {e.message}",
            error_kind=e.kind.value,
            path=path,
            method=method,
        )
        return e.http_status, error_payload(
            f"Failed to communicate with AI service: {e.message}", e.http_status, path
        )
    except Exception as e:
        logger.error(
            "Error 500: Internal Server Error",
            error_type=type(e).__name__,
            error_message=str(e),
            path=path,
            method=method,
        )
        return 500, error_payload("Internal Server Error", 500, path)


# --- HTTP HANDLER ---

class AIRequestHandler(BaseHTTPRequestHandler):
    """Serve AI endpoints from the server's shared AIService."""

    def handle(self):
        try:
            super().handle()
        except BrokenPipeError:
            pass

    def finish(self):
        try:
            super().finish()
        except BrokenPipeError:
            pass

    def _respond(self, status: int, payload: dict) -> None:
        data = json.dumps(payload).encode("utf-8")
        try:
            self.send_response(status)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(data)))
            self.end_headers()
            self.wfile.write(data)
        except BrokenPipeError:
            return

    def do_GET(self):
        status, payload = dispatch(self.server.service, "GET", self.path)
        self._respond(status, payload)

    def do_POST(self):
        content_length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(content_length) if content_length else b""
        status, payload = dispatch(self.server.service, "POST", self.path, body)
        self._respond(status, payload)

    def log_message(self, format, *args):
        logger.info(
            "http.request",
            client=self.address_string(),
            request_line=format % args,
        )


class QuietHTTPServer(ThreadingHTTPServer):
    """Threaded HTTP server that suppresses BrokenPipeError noise."""

    daemon_threads = True

    def __init__(self, server_address, handler_class, service: AIService):
        super().__init__(server_address, handler_class)
        self.service = service

    def handle_error(self, request, client_address):
        exc_type, exc, _ = sys.exc_info()
        if isinstance(exc, BrokenPipeError):
            return
        super().handle_error(request, client_address)


def run_server(host: str = "0.0.0.0", port: int = 3001):
    """Run the API server."""
    try:
        service = AIService.from_env()
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    server = QuietHTTPServer((host, port), AIRequestHandler, service)
    print("SI-AGENT AI API Server")
    print(f"Listening on http://{host}:{port}")
    print(f"Model: {service.model}")
    print("")
    print("Routes:")
    for method, path in ROUTES:
        print(f"  {method:<5} {path}")
    print("")
    print("Press Ctrl+C to stop.\n")

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\nShutting down.")
        server.server_close()


def main():
    parser = argparse.ArgumentParser(description="SI-AGENT AI API Server")
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Interface to bind (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=3001,
        help="Port to listen on (default: 3001)",
    )
    args = parser.parse_args()

    run_server(host=args.host, port=args.port)


if __name__ == "__main__":
    main()
