"""
AI Service Health Check - Validate configuration and test upstream connectivity.

Usage:
    python -m siagent.ai.health
    python -m siagent.ai.health --config config/ai.yaml
    python -m siagent.ai.health --check-only
    python -m siagent.ai.health --json
"""

import argparse
import json
import sys
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any

from siagent.logger import get_logger

from .config import AIConfig, load_config, load_config_from_env
from .service import AIService

logger = get_logger(__name__)


@dataclass
class HealthReport:
    """Result of a health check run."""

    healthy: bool
    model: str | None = None
    base_url: str | None = None
    latency_ms: int | None = None
    response: str | None = None
    error: str | None = None
    warnings: list[str] = field(default_factory=list)
    timestamp: str | None = None


def check_config(config_path: str | None = None) -> dict[str, Any]:
    """Validate configuration without touching the network.

    Args:
        config_path: Optional YAML file; the environment is used when omitted

    Returns:
        Dict with:
        - valid: bool
        - errors: list of str
        - warnings: list of str
        - config: AIConfig or None
    """
    result: dict[str, Any] = {
        "valid": False,
        "errors": [],
        "warnings": [],
        "config": None,
    }

    try:
        config = load_config(config_path) if config_path else load_config_from_env()
    except FileNotFoundError as e:
        result["errors"].append(str(e))
        return result
    except ValueError as e:
        result["errors"].append(str(e))
        return result
    except Exception as e:
        result["errors"].append(f"Failed to parse configuration: {e}")
        return result

    if config.timeout_s > 120:
        result["warnings"].append(
            f"Timeout {config.timeout_s}s is unusually long for an interactive request"
        )
    if not config.base_url.startswith("https://"):
        result["warnings"].append(f"Base URL is not HTTPS: {config.base_url}")

    result["config"] = config
    result["valid"] = True
    return result


def run_health_check(service: AIService) -> HealthReport:
    """Run a live connection test against the upstream.

    Args:
        service: Configured AI service

    Returns:
        HealthReport with latency and outcome
    """
    report = HealthReport(
        healthy=False,
        model=service.config.model,
        base_url=service.config.base_url,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )

    start_time = time.time()
    result = service.test_connection()
    report.latency_ms = int((time.time() - start_time) * 1000)

    if result.success:
        report.healthy = True
        report.response = result.response
    else:
        report.error = result.response

    logger.info(
        "ai.health",
        healthy=report.healthy,
        model=report.model,
        latency_ms=report.latency_ms,
    )
    return report


def format_health_status(healthy: bool) -> str:
    """Format health status with emoji."""
    return "✓" if healthy else "✗"


def print_health_report(report: HealthReport) -> None:
    print("AI Service Health Check")
    print("=" * 60)
    print()
    print(f"Model:    {report.model}")
    print(f"Base URL: {report.base_url}")
    print()

    status = format_health_status(report.healthy)
    if report.healthy:
        print(f"  {status} Connected (latency: {report.latency_ms}ms)")
        print(f"    Response: {report.response}")
    elif report.latency_ms is not None:
        print(f"  {status} Unhealthy: {report.error} (latency: {report.latency_ms}ms)")
    else:
        print(f"  {status} Unhealthy: {report.error}")

    if report.warnings:
        print()
        print("Warnings:")
        for warning in report.warnings:
            print(f"  - {warning}")

    print()
    print("Status: ✓ HEALTHY" if report.healthy else "Status: ✗ UNHEALTHY")


def print_health_json(report: HealthReport) -> None:
    print(json.dumps(asdict(report), indent=2))


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Validate AI configuration and test OpenRouter connectivity"
    )
    parser.add_argument(
        "--config",
        help="Path to YAML configuration file (default: read OPENROUTER_* environment)",
    )
    parser.add_argument(
        "--check-only",
        action="store_true",
        help="Validate configuration without calling the upstream",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON",
    )

    args = parser.parse_args(argv)

    checked = check_config(args.config)
    config: AIConfig | None = checked["config"]

    if not checked["valid"]:
        report = HealthReport(healthy=False, error="; ".join(checked["errors"]))
    elif args.check_only:
        report = HealthReport(
            healthy=True,
            model=config.model,
            base_url=config.base_url,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
    else:
        report = run_health_check(AIService(config))
    report.warnings.extend(checked["warnings"])

    if args.json:
        print_health_json(report)
    else:
        print_health_report(report)

    return 0 if report.healthy else 1


if __name__ == "__main__":
    sys.exit(main())
