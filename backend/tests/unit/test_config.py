"""Tests for config._read_secret() and Settings."""

import os
from unittest.mock import patch

import pytest

from config import Settings, _read_secret, _read_single
from errors import ConfigurationError


class TestReadSecret:
    """_read_secret() reads from env var or file, in priority order."""

    def test_direct_env_var(self):
        with patch.dict(os.environ, {"MY_SECRET": "direct-value"}, clear=False):
            assert _read_secret("MY_SECRET") == "direct-value"

    def test_file_env_var(self, tmp_path):
        secret_file = tmp_path / "secret.txt"
        secret_file.write_text("file-value\n")
        with patch.dict(os.environ, {"MY_SECRET_FILE": str(secret_file)}, clear=False):
            os.environ.pop("MY_SECRET", None)
            assert _read_secret("MY_SECRET") == "file-value"

    def test_direct_takes_priority_over_file(self, tmp_path):
        secret_file = tmp_path / "secret.txt"
        secret_file.write_text("file-value")
        env = {"PRIO_SECRET": "direct-value", "PRIO_SECRET_FILE": str(secret_file)}
        with patch.dict(os.environ, env, clear=False):
            assert _read_secret("PRIO_SECRET") == "direct-value"

    def test_first_name_takes_priority(self):
        env = {"PRIMARY_KEY": "primary", "LEGACY_KEY": "legacy"}
        with patch.dict(os.environ, env, clear=False):
            assert _read_secret("PRIMARY_KEY", "LEGACY_KEY") == "primary"

    def test_falls_back_to_second_name(self):
        with patch.dict(os.environ, {"LEGACY_KEY": "legacy"}, clear=False):
            os.environ.pop("PRIMARY_KEY", None)
            os.environ.pop("PRIMARY_KEY_FILE", None)
            assert _read_secret("PRIMARY_KEY", "LEGACY_KEY") == "legacy"

    def test_raises_when_neither_set(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("MISSING_SECRET", None)
            os.environ.pop("MISSING_SECRET_FILE", None)
            with pytest.raises(ConfigurationError, match="Secret not configured"):
                _read_secret("MISSING_SECRET")

    def test_error_names_the_service(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("MISSING_SECRET", None)
            os.environ.pop("MISSING_SECRET_FILE", None)
            with pytest.raises(ConfigurationError, match="Widget API key not configured"):
                _read_secret("MISSING_SECRET", label="Widget API key")

    def test_configuration_error_is_a_value_error(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("MISSING_SECRET", None)
            os.environ.pop("MISSING_SECRET_FILE", None)
            with pytest.raises(ValueError):
                _read_secret("MISSING_SECRET")

    def test_file_not_found(self, tmp_path):
        env = {"GONE_SECRET_FILE": str(tmp_path / "nonexistent.txt")}
        with patch.dict(os.environ, env, clear=False):
            os.environ.pop("GONE_SECRET", None)
            with pytest.raises(ConfigurationError, match="Secret not configured"):
                _read_secret("GONE_SECRET")

    def test_custom_file_env_var_name(self, tmp_path):
        secret_file = tmp_path / "custom.txt"
        secret_file.write_text("custom-value")
        with patch.dict(os.environ, {"CUSTOM_PATH": str(secret_file)}, clear=False):
            os.environ.pop("CUSTOM_SECRET", None)
            assert _read_single("CUSTOM_SECRET", file_env_var="CUSTOM_PATH") == "custom-value"


class TestSettings:
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=False):
            for name in ("LLM_MODEL", "LLM_BASE_URL", "HTTP_TIMEOUT", "CORS_ORIGINS"):
                os.environ.pop(name, None)
            s = Settings()
            assert s.llm_model == "mistral-small-latest"
            assert s.llm_base_url == "https://api.mistral.ai/v1"
            assert s.http_timeout == 15.0
            assert s.cors_origins == ["*"]

    def test_mistral_key_accepts_legacy_name(self):
        with patch.dict(os.environ, {"VITE_MISTRAL_API_KEY": "vite-key"}, clear=False):
            os.environ.pop("MISTRAL_API_KEY", None)
            os.environ.pop("MISTRAL_API_KEY_FILE", None)
            assert Settings().llm_api_key == "vite-key"

    def test_missing_mistral_key(self):
        with patch.dict(os.environ, {}, clear=False):
            for name in ("MISTRAL_API_KEY", "MISTRAL_API_KEY_FILE", "VITE_MISTRAL_API_KEY", "VITE_MISTRAL_API_KEY_FILE"):
                os.environ.pop(name, None)
            with pytest.raises(ConfigurationError, match="Mistral AI API key not configured"):
                Settings().llm_api_key

    def test_search_keys_are_read_on_access(self):
        s = Settings()
        with patch.dict(os.environ, {"SERPER_API_KEY": "late-key"}, clear=False):
            assert s.serper_api_key == "late-key"

    def test_cors_origins_split(self):
        with patch.dict(os.environ, {"CORS_ORIGINS": "http://a.test, http://b.test,"}, clear=False):
            assert Settings().cors_origins == ["http://a.test", "http://b.test"]
