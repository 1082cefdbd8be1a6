"""Centralized vibe configuration.

Embedding and search defaults in one place.
Override via environment variables or a .env file.

=== CONFIGURATION HIERARCHY ===

1. Embedding endpoint (VIBE_EMBEDDING_*)
   - VIBE_EMBEDDING_URL: API base URL (default: https://api.openai.com/v1)
   - VIBE_EMBEDDING_MODEL: Model name (default: text-embedding-ada-002)
   - VIBE_EMBEDDING_DIM: Vector dimension (default: 1536)
   - VIBE_EMBEDDING_TIMEOUT: Request timeout in seconds (default: 60)
   - VIBE_EMBEDDING_MAX_CHARS: Input truncation length (default: 30000)

2. Search defaults (VIBE_SEARCH_*)
   - VIBE_SEARCH_LIMIT, VIBE_SEARCH_CONTEXT
   - VIBE_SEARCH_BATCH_SIZE, VIBE_SEARCH_MAX_FILE_CHARS
   - VIBE_SEARCH_MIN_CHUNK_CHARS, VIBE_SEARCH_CHUNK_LINES

3. Credentials
   - OPENAI_API_KEY: read only by the CLI via resolve_api_key().

The search core never reads the environment itself; the CLI builds
SearchOptions from these values and passes them in explicitly.
"""

import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

API_KEY_ENV_VAR = "OPENAI_API_KEY"


def _get_env(key: str, default: str) -> str:
    """Get environment variable with default."""
    return os.getenv(key, default)


def _get_env_int(key: str, default: int) -> int:
    """Get integer environment variable with default."""
    return int(os.getenv(key, str(default)))


def _get_env_float(key: str, default: float) -> float:
    """Get float environment variable with default."""
    return float(os.getenv(key, str(default)))


def load_env_file(path: Optional[Path] = None) -> bool:
    """Load a .env file into the process environment.

    Existing variables win over values from the file.

    Args:
        path: Explicit .env path (default: .env in the working directory)

    Returns:
        True if a file was found and loaded.
    """
    env_path = path or Path.cwd() / ".env"
    if not env_path.exists():
        return False
    loaded = load_dotenv(env_path, override=False)
    logger.debug(f"Loaded environment from {env_path}")
    return loaded


def resolve_api_key(explicit: Optional[str] = None) -> Optional[str]:
    """Return the explicit key, else the OPENAI_API_KEY environment variable."""
    if explicit:
        return explicit
    return os.getenv(API_KEY_ENV_VAR) or None


# ============================================================================
# EMBEDDING CONFIGURATION
# ============================================================================

@dataclass
class EmbeddingConfig:
    """Hosted embedding endpoint configuration.

    Environment Variables:
        VIBE_EMBEDDING_URL: API base URL (default: https://api.openai.com/v1)
        VIBE_EMBEDDING_MODEL: Model name (default: text-embedding-ada-002)
        VIBE_EMBEDDING_DIM: Embedding dimension (default: 1536)
        VIBE_EMBEDDING_TIMEOUT: Request timeout in seconds (default: 60)
        VIBE_EMBEDDING_MAX_CHARS: Max input length in chars (default: 30000)
    """

    url: str = field(default_factory=lambda: _get_env("VIBE_EMBEDDING_URL", "https://api.openai.com/v1"))
    model: str = field(default_factory=lambda: _get_env("VIBE_EMBEDDING_MODEL", "text-embedding-ada-002"))
    dimension: int = field(default_factory=lambda: _get_env_int("VIBE_EMBEDDING_DIM", 1536))
    timeout: float = field(default_factory=lambda: _get_env_float("VIBE_EMBEDDING_TIMEOUT", 60.0))
    max_input_chars: int = field(default_factory=lambda: _get_env_int("VIBE_EMBEDDING_MAX_CHARS", 30000))


# ============================================================================
# SEARCH CONFIGURATION
# ============================================================================

@dataclass
class SearchConfig:
    """Search pipeline defaults.

    Environment Variables:
        VIBE_SEARCH_LIMIT: Default maximum number of results (default: 10)
        VIBE_SEARCH_CONTEXT: Default context lines around a hit (default: 3)
        VIBE_SEARCH_BATCH_SIZE: Files per sequential batch (default: 50)
        VIBE_SEARCH_MAX_FILE_CHARS: Skip files larger than this (default: 100000)
        VIBE_SEARCH_MIN_CHUNK_CHARS: Skip candidates shorter than this (default: 50)
        VIBE_SEARCH_CHUNK_LINES: Lines per fallback chunk (default: 30)
    """

    limit: int = field(default_factory=lambda: _get_env_int("VIBE_SEARCH_LIMIT", 10))
    context_lines: int = field(default_factory=lambda: _get_env_int("VIBE_SEARCH_CONTEXT", 3))
    batch_size: int = field(default_factory=lambda: _get_env_int("VIBE_SEARCH_BATCH_SIZE", 50))
    max_file_chars: int = field(default_factory=lambda: _get_env_int("VIBE_SEARCH_MAX_FILE_CHARS", 100000))
    min_chunk_chars: int = field(default_factory=lambda: _get_env_int("VIBE_SEARCH_MIN_CHUNK_CHARS", 50))
    chunk_lines: int = field(default_factory=lambda: _get_env_int("VIBE_SEARCH_CHUNK_LINES", 30))


@dataclass
class VibeConfig:
    """Aggregate configuration."""

    embedding: EmbeddingConfig = field(default_factory=EmbeddingConfig)
    search: SearchConfig = field(default_factory=SearchConfig)


# Global singleton
_config: Optional[VibeConfig] = None


def get_config() -> VibeConfig:
    """Get the global vibe configuration singleton."""
    global _config
    if _config is None:
        _config = VibeConfig()
    return _config


def reset_config() -> None:
    """Reset configuration (for testing)."""
    global _config
    _config = None


def get_embedding_config() -> EmbeddingConfig:
    """Get embedding endpoint configuration."""
    return get_config().embedding


def get_search_config() -> SearchConfig:
    """Get search pipeline configuration."""
    return get_config().search
