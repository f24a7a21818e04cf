"""Tests for AI service health checks."""

import json
from unittest.mock import MagicMock, patch

import pytest

from siagent.ai.config import AIConfig
from siagent.ai.health import (
    HealthReport,
    check_config,
    format_health_status,
    main,
    print_health_json,
    run_health_check,
)
from siagent.ai.types import ConnectionTestResult


def make_service(result: ConnectionTestResult):
    service = MagicMock()
    service.config = AIConfig(api_key="k", model="test/model")
    service.test_connection.return_value = result
    return service


class TestRunHealthCheck:
    """Test live connection checks."""

    def test_healthy(self):
        service = make_service(ConnectionTestResult(True, "test/model", "AI service is working correctly"))

        report = run_health_check(service)

        assert report.healthy is True
        assert report.model == "test/model"
        assert report.response == "AI service is working correctly"
        assert report.error is None
        assert report.latency_ms >= 0

    def test_unhealthy(self):
        service = make_service(ConnectionTestResult(False, "test/model", "Network error - Cannot reach OpenRouter API"))

        report = run_health_check(service)

        assert report.healthy is False
        assert "Cannot reach" in report.error


class TestCheckConfig:
    """Test configuration validation without network."""

    @patch("siagent.ai.health.load_config_from_env")
    def test_valid_env(self, mock_load):
        mock_load.return_value = AIConfig(api_key="k")

        result = check_config()

        assert result["valid"] is True
        assert result["errors"] == []
        assert result["warnings"] == []

    @patch("siagent.ai.health.load_config_from_env")
    def test_missing_key(self, mock_load):
        mock_load.side_effect = ValueError("OPENROUTER_API_KEY is required")

        result = check_config()

        assert result["valid"] is False
        assert result["errors"] == ["OPENROUTER_API_KEY is required"]

    def test_missing_file(self):
        result = check_config("/nonexistent/ai.yaml")

        assert result["valid"] is False
        assert "not found" in result["errors"][0]

    @patch("siagent.ai.health.load_config_from_env")
    def test_warnings(self, mock_load):
        mock_load.return_value = AIConfig(api_key="k", base_url="http://localhost:8080/v1", timeout_s=300)

        result = check_config()

        assert result["valid"] is True
        assert len(result["warnings"]) == 2


def test_format_health_status():
    assert format_health_status(True) == "✓"
    assert format_health_status(False) == "✗"


def test_print_health_json(capsys):
    print_health_json(HealthReport(healthy=True, model="m", latency_ms=12))

    data = json.loads(capsys.readouterr().out)
    assert data["healthy"] is True
    assert data["latency_ms"] == 12


class TestMain:
    """Test CLI exit codes."""

    @patch("siagent.ai.health.load_config_from_env")
    def test_check_only(self, mock_load, capsys):
        mock_load.return_value = AIConfig(api_key="k")

        assert main(["--check-only"]) == 0
        assert "HEALTHY" in capsys.readouterr().out

    @patch("siagent.ai.health.load_config_from_env")
    def test_invalid_config(self, mock_load, capsys):
        mock_load.side_effect = ValueError("OPENROUTER_API_KEY is required")

        assert main(["--json"]) == 1
        data = json.loads(capsys.readouterr().out)
        assert data["healthy"] is False
        assert "OPENROUTER_API_KEY" in data["error"]

    @patch("siagent.ai.health.AIService")
    @patch("siagent.ai.health.load_config_from_env")
    def test_live_check(self, mock_load, mock_service_cls, capsys):
        mock_load.return_value = AIConfig(api_key="k", model="test/model")
        mock_service_cls.return_value = make_service(
            ConnectionTestResult(False, "test/model", "Request timeout")
        )

        assert main([]) == 1
        assert "Unhealthy: Request timeout" in capsys.readouterr().out
