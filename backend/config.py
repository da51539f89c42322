"""
Application configuration with Docker secrets support.

Secrets are read using the _read_secret() pattern:
  1. Direct env var (e.g., MISTRAL_API_KEY)
  2. File-based env var (e.g., MISTRAL_API_KEY_FILE → reads file path)
  3. Next accepted name, if several are given
  4. Raises ConfigurationError if none is set

Search-provider keys are optional and only required when that provider is
selected, so they are re-read on every access.
"""

import os
import logging

from errors import ConfigurationError

logger = logging.getLogger(__name__)


def _read_single(env_var: str, file_env_var: str | None = None) -> str | None:
    if file_env_var is None:
        file_env_var = f"{env_var}_FILE"

    # Priority 1: Direct env var
    value = os.environ.get(env_var)
    if value:
        return value

    # Priority 2: File-based (Docker secrets pattern)
    file_path = os.environ.get(file_env_var)
    if file_path:
        try:
            with open(file_path, "r") as f:
                value = f.read().strip()
            if value:
                return value
        except FileNotFoundError:
            logger.error(f"Secret file not found: {file_path} (from {file_env_var})")
        except PermissionError:
            logger.error(f"Permission denied reading: {file_path} (from {file_env_var})")
    return None


def _read_secret(*env_vars: str, label: str | None = None) -> str:
    """Read a secret from the first configured env var or Docker secrets file.

    Args:
        env_vars: Accepted environment variable names, in priority order.
            Each is checked directly, then through its ``_FILE`` variant.
        label: Human-readable name used in the error message.

    Returns:
        The secret value.

    Raises:
        ConfigurationError: If no source provides a value.
    """
    for env_var in env_vars:
        value = _read_single(env_var)
        if value:
            return value

    names = " or ".join(env_vars)
    prefix = f"{label} not configured" if label else "Secret not configured"
    raise ConfigurationError(
        f"{prefix}. Set {names} env var or a matching _FILE variable pointing to a file."
    )


class Settings:
    """Application settings loaded from environment and Docker secrets."""

    def __init__(self):
        # Storage
        self.storage_backend = os.environ.get("STORAGE_BACKEND", "memory").lower()
        self.database_url = os.environ.get("DATABASE_URL", "sqlite+aiosqlite://")

        # Completion service (Mistral's OpenAI-compatible endpoint)
        self._llm_api_key: str | None = None
        self.llm_model = os.environ.get("LLM_MODEL", "mistral-small-latest")
        self.llm_base_url = os.environ.get("LLM_BASE_URL", "https://api.mistral.ai/v1")

        # Upstream HTTP
        self.http_timeout = float(os.environ.get("HTTP_TIMEOUT", "15"))
        self.cors_origins = [
            o.strip() for o in os.environ.get("CORS_ORIGINS", "*").split(",") if o.strip()
        ]

    @property
    def llm_api_key(self) -> str:
        if self._llm_api_key is None:
            self._llm_api_key = _read_secret(
                "MISTRAL_API_KEY", "VITE_MISTRAL_API_KEY", label="Mistral AI API key"
            )
        return self._llm_api_key

    @property
    def tavily_api_key(self) -> str:
        return _read_secret("TAVILY_API_KEY", label="Tavily API key")

    @property
    def serper_api_key(self) -> str:
        return _read_secret("SERPER_API_KEY", label="Serper API key")


settings = Settings()
