"""AI service configuration loading and validation."""

import hashlib
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

DEFAULT_MODEL = "deepseek/deepseek-chat-v3.1:free"
DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_TIMEOUT_S = 30
DEFAULT_API_KEY_ENV = "OPENROUTER_API_KEY"


@dataclass(frozen=True)
class AIConfig:
    """Immutable settings for the AI service, fixed at construction."""

    api_key: str
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    timeout_s: float = DEFAULT_TIMEOUT_S
    referer: str = "http://localhost:3001"
    app_title: str = "SI-AGENT"
    trace_dir: Path | None = None

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Validate configuration.

        Raises:
            ValueError: If configuration is invalid
        """
        if not self.api_key:
            raise ValueError(f"{DEFAULT_API_KEY_ENV} is required")
        if not self.model:
            raise ValueError("Model not specified in configuration")
        if not self.base_url:
            raise ValueError("Base URL not specified in configuration")
        if self.timeout_s is None or self.timeout_s <= 0:
            raise ValueError(f"timeout_s must be positive, got {self.timeout_s}")

    @property
    def completions_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/chat/completions"

    def describe(self) -> dict[str, Any]:
        """Return a log-safe view of the configuration (no secrets)."""
        return {
            "model": self.model,
            "base_url": self.base_url,
            "timeout_s": self.timeout_s,
            "referer": self.referer,
            "app_title": self.app_title,
            "trace_dir": str(self.trace_dir) if self.trace_dir else None,
            "api_key": "SET" if self.api_key else "NOT_SET",
        }


def _parse_timeout(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid timeout_s value: {value!r}") from e


def load_config_from_env(env: Mapping[str, str] | None = None) -> AIConfig:
    """Build configuration from environment variables.

    Loads a ``.env`` file first when reading the real process environment.

    Args:
        env: Optional mapping to read instead of ``os.environ``

    Returns:
        Validated AI configuration

    Raises:
        ValueError: If the API key is missing or a value is invalid
    """
    if env is None:
        load_dotenv()
        env = os.environ

    trace_dir = env.get("SIAGENT_TRACE_DIR")
    return AIConfig(
        api_key=env.get(DEFAULT_API_KEY_ENV, ""),
        model=env.get("OPENROUTER_MODEL") or DEFAULT_MODEL,
        base_url=env.get("OPENROUTER_BASE_URL") or DEFAULT_BASE_URL,
        timeout_s=_parse_timeout(env.get("OPENROUTER_TIMEOUT_S") or DEFAULT_TIMEOUT_S),
        trace_dir=Path(trace_dir) if trace_dir else None,
    )


def load_config(path: str | Path) -> AIConfig:
    """Load and validate AI configuration from a YAML file.

    The file holds an ``ai`` section; the API key itself is read from the
    environment variable named by ``api_key_env``.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated AI configuration

    Raises:
        FileNotFoundError: If config file not found
        ValueError: If configuration is invalid
        yaml.YAMLError: If YAML is malformed
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f)

    if not data or "ai" not in data:
        raise ValueError("Configuration file missing 'ai' section")

    ai_config = data["ai"] or {}

    load_dotenv()
    api_key_env = ai_config.get("api_key_env", DEFAULT_API_KEY_ENV)
    api_key = os.getenv(api_key_env)
    if not api_key:
        raise ValueError(f"Missing environment variable: {api_key_env}")

    trace_dir = ai_config.get("trace_dir")
    return AIConfig(
        api_key=api_key,
        model=ai_config.get("model", DEFAULT_MODEL),
        base_url=ai_config.get("base_url", DEFAULT_BASE_URL),
        timeout_s=_parse_timeout(ai_config.get("timeout_s", DEFAULT_TIMEOUT_S)),
        referer=ai_config.get("referer", "http://localhost:3001"),
        app_title=ai_config.get("app_title", "SI-AGENT"),
        trace_dir=Path(trace_dir) if trace_dir else None,
    )


def compute_config_hash(config: AIConfig) -> str:
    """Compute hash of configuration for reproducibility tracking.

    Excludes the API key from the hash.

    Args:
        config: AI configuration

    Returns:
        SHA256 hex digest of configuration
    """
    config_dict = {
        "model": config.model,
        "base_url": config.base_url,
        "timeout_s": config.timeout_s,
        "referer": config.referer,
        "app_title": config.app_title,
    }
    config_json = json.dumps(config_dict, sort_keys=True)
    return hashlib.sha256(config_json.encode()).hexdigest()
