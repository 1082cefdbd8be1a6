"""Directory walking for code search.

Collects candidate files below a root directory, skipping build output,
version control metadata and lockfiles.
"""

from __future__ import annotations

import os
import logging
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

# Matched as substrings of the forward-slash relative path.
DEFAULT_IGNORE_FRAGMENTS = (
    "node_modules",
    "dist",
    "build",
    ".git",
    "package-lock.json",
    "yarn.lock",
    "__pycache__",
    ".venv",
    ".pytest_cache",
    ".mypy_cache",
    ".egg-info",
)

DEFAULT_EXTENSIONS = frozenset({
    ".js", ".jsx", ".ts", ".tsx", ".py", ".java", ".go", ".rb", ".php",
    ".c", ".cpp", ".cs", ".html", ".css", ".json", ".md",
})


def is_ignored(path: str, root: str, ignore_fragments: Iterable[str] = DEFAULT_IGNORE_FRAGMENTS) -> bool:
    """Check whether a path falls under one of the ignore fragments."""
    relative = os.path.relpath(path, root).replace(os.sep, "/")
    return any(fragment in relative for fragment in ignore_fragments)


def _normalize(extensions: Optional[Iterable[str]]) -> frozenset:
    if not extensions:
        return DEFAULT_EXTENSIONS
    normalized = set()
    for ext in extensions:
        ext = ext.strip().lower()
        if ext:
            normalized.add(ext if ext.startswith(".") else f".{ext}")
    return frozenset(normalized) or DEFAULT_EXTENSIONS


def collect_files(
    directory: str,
    extensions: Optional[Iterable[str]] = None,
    ignore_fragments: Iterable[str] = DEFAULT_IGNORE_FRAGMENTS,
) -> List[str]:
    """
    Recursively collect source files under a directory.

    Args:
        directory: Root directory to walk
        extensions: Extension allowlist (with or without leading dot).
            Empty or None selects DEFAULT_EXTENSIONS.
        ignore_fragments: Relative-path substrings to skip

    Returns:
        Sorted absolute paths. Empty when the root does not exist.
    """
    root = os.path.abspath(directory)
    if not os.path.isdir(root):
        logger.error(f"Directory does not exist: {root}")
        return []

    allowed = _normalize(extensions)
    fragments = tuple(ignore_fragments)
    files: List[str] = []

    def _on_error(err: OSError) -> None:
        logger.warning(f"Could not read directory {err.filename}: {err.strerror}")

    for current, dirnames, filenames in os.walk(root, onerror=_on_error):
        # Prune ignored directories in place so os.walk skips them
        dirnames[:] = sorted(
            d for d in dirnames
            if not is_ignored(os.path.join(current, d), root, fragments)
        )
        for name in filenames:
            full_path = os.path.join(current, name)
            if is_ignored(full_path, root, fragments):
                continue
            if os.path.splitext(name)[1].lower() not in allowed:
                continue
            if not os.path.isfile(full_path):
                continue
            files.append(full_path)

    files.sort()
    logger.info(f"Collected {len(files)} files under {root}")
    return files
