"""Tests for AI configuration loading and validation."""

import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from siagent.ai.config import (
    AIConfig,
    compute_config_hash,
    load_config,
    load_config_from_env,
)


def create_test_config(content: dict) -> Path:
    """Create a temporary config file for testing."""
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        yaml.dump(content, f)
        return Path(f.name)


def test_defaults():
    config = AIConfig(api_key="k")

    assert config.model == "deepseek/deepseek-chat-v3.1:free"
    assert config.base_url == "https://openrouter.ai/api/v1"
    assert config.timeout_s == 30
    assert config.trace_dir is None
    assert config.completions_url == "https://openrouter.ai/api/v1/chat/completions"


def test_missing_api_key():
    """Construction fails without an API key."""
    with pytest.raises(ValueError, match="OPENROUTER_API_KEY is required"):
        AIConfig(api_key="")


def test_invalid_timeout():
    with pytest.raises(ValueError, match="timeout_s must be positive"):
        AIConfig(api_key="k", timeout_s=0)


def test_describe_hides_key():
    """Only a presence flag is exposed."""
    described = AIConfig(api_key="super-secret").describe()

    assert described["api_key"] == "SET"
    assert "super-secret" not in str(described)


def test_load_from_env_mapping():
    config = load_config_from_env({
        "OPENROUTER_API_KEY": "k",
        "OPENROUTER_BASE_URL": "http://localhost:8080/v1",
        "OPENROUTER_TIMEOUT_S": "12.5",
        "SIAGENT_TRACE_DIR": "/tmp/traces",
    })

    assert config.api_key == "k"
    assert config.model == "deepseek/deepseek-chat-v3.1:free"
    assert config.base_url == "http://localhost:8080/v1"
    assert config.timeout_s == 12.5
    assert config.trace_dir == Path("/tmp/traces")


def test_load_from_env_bad_timeout():
    with pytest.raises(ValueError, match="Invalid timeout_s"):
        load_config_from_env({"OPENROUTER_API_KEY": "k", "OPENROUTER_TIMEOUT_S": "soon"})


@patch.dict("os.environ", {"TEST_API_KEY": "test-key"})
def test_load_valid_config():
    """Test loading a valid YAML configuration."""
    config_path = create_test_config({
        "ai": {
            "api_key_env": "TEST_API_KEY",
            "model": "anthropic/claude-sonnet-4",
            "timeout_s": 45,
        }
    })

    try:
        config = load_config(config_path)
        assert config.api_key == "test-key"
        assert config.model == "anthropic/claude-sonnet-4"
        assert config.timeout_s == 45
        assert config.base_url == "https://openrouter.ai/api/v1"
    finally:
        config_path.unlink()


def test_load_missing_file():
    with pytest.raises(FileNotFoundError):
        load_config("/nonexistent/path.yaml")


def test_load_missing_ai_section():
    config_path = create_test_config({"other": "data"})

    try:
        with pytest.raises(ValueError, match="missing 'ai' section"):
            load_config(config_path)
    finally:
        config_path.unlink()


@patch.dict("os.environ", {}, clear=True)
@patch("siagent.ai.config.load_dotenv")
def test_load_missing_env_var(mock_load_dotenv):
    config_path = create_test_config({"ai": {"api_key_env": "MISSING_KEY"}})

    try:
        with pytest.raises(ValueError, match="Missing environment variable: MISSING_KEY"):
            load_config(config_path)
    finally:
        config_path.unlink()


def test_config_hash_excludes_key():
    """Hash depends on settings, not on the secret."""
    first = compute_config_hash(AIConfig(api_key="one"))
    second = compute_config_hash(AIConfig(api_key="two"))
    other_model = compute_config_hash(AIConfig(api_key="one", model="x/y"))

    assert first == second
    assert first != other_model
    assert len(first) == 64


def test_example_config_file_loads():
    """The shipped config/ai.yaml is valid."""
    example = Path(__file__).parent.parent / "config" / "ai.yaml"

    with patch.dict("os.environ", {"OPENROUTER_API_KEY": "k"}):
        config = load_config(example)

    assert config.timeout_s == 30
    assert config.app_title == "SI-AGENT"
