"""
Unit tests for vibe configuration.

Tests env overrides, the singleton, .env loading and API key resolution.
"""
import os
from unittest.mock import patch

from vibe.config import (
    EmbeddingConfig,
    SearchConfig,
    get_config,
    get_embedding_config,
    get_search_config,
    load_env_file,
    reset_config,
    resolve_api_key,
)


class TestDefaults:
    """Test default values."""

    def test_embedding_defaults(self, monkeypatch):
        for var in ("VIBE_EMBEDDING_URL", "VIBE_EMBEDDING_MODEL", "VIBE_EMBEDDING_DIM"):
            monkeypatch.delenv(var, raising=False)
        config = EmbeddingConfig()

        assert config.url == "https://api.openai.com/v1"
        assert config.model == "text-embedding-ada-002"
        assert config.dimension == 1536

    def test_search_defaults(self, monkeypatch):
        for var in ("VIBE_SEARCH_LIMIT", "VIBE_SEARCH_BATCH_SIZE", "VIBE_SEARCH_CHUNK_LINES"):
            monkeypatch.delenv(var, raising=False)
        config = SearchConfig()

        assert config.limit == 10
        assert config.batch_size == 50
        assert config.chunk_lines == 30


class TestEnvOverrides:
    """Test environment variable overrides."""

    def test_search_override(self):
        with patch.dict("os.environ", {"VIBE_SEARCH_LIMIT": "25", "VIBE_SEARCH_CONTEXT": "0"}):
            config = SearchConfig()
        assert config.limit == 25
        assert config.context_lines == 0

    def test_embedding_override(self):
        with patch.dict("os.environ", {"VIBE_EMBEDDING_MODEL": "text-embedding-3-small",
                                       "VIBE_EMBEDDING_TIMEOUT": "5.5"}):
            config = EmbeddingConfig()
        assert config.model == "text-embedding-3-small"
        assert config.timeout == 5.5


class TestSingleton:

    def test_get_config_is_cached(self):
        assert get_config() is get_config()
        assert get_search_config() is get_config().search
        assert get_embedding_config() is get_config().embedding

    def test_reset_config(self):
        first = get_config()
        reset_config()
        assert get_config() is not first


class TestEnvFile:

    def test_missing_file(self, tmp_path):
        assert load_env_file(tmp_path / ".env") is False

    def test_loads_values(self, tmp_path, monkeypatch):
        monkeypatch.delenv("VIBE_TEST_VALUE", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("VIBE_TEST_VALUE=from-file\n")

        assert load_env_file(env_file) is True
        assert os.environ["VIBE_TEST_VALUE"] == "from-file"
        monkeypatch.delenv("VIBE_TEST_VALUE")

    def test_existing_env_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("VIBE_TEST_VALUE", "from-env")
        env_file = tmp_path / ".env"
        env_file.write_text("VIBE_TEST_VALUE=from-file\n")

        load_env_file(env_file)
        assert os.environ["VIBE_TEST_VALUE"] == "from-env"


class TestResolveApiKey:

    def test_explicit_wins(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "env-key")
        assert resolve_api_key("flag-key") == "flag-key"

    def test_falls_back_to_env(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "env-key")
        assert resolve_api_key(None) == "env-key"

    def test_none_when_unset(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        assert resolve_api_key() is None
