"""Data model for code search.

All values are immutable for the lifetime of one search call. The result
assembler produces widened copies of hits rather than mutating them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple


class ConstructKind(str, Enum):
    """Coarse syntax construct buckets."""

    FUNCTION = "function"
    CLASS = "class"
    VARIABLE = "variable"

    @classmethod
    def parse(cls, value: Optional[str | "ConstructKind"]) -> Optional["ConstructKind"]:
        """Convert a user-supplied filter value, treating empty as no filter."""
        if value is None or value == "":
            return None
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            choices = ", ".join(k.value for k in cls)
            raise ValueError(f"Unknown construct type '{value}' (expected one of: {choices})") from None


class Language(Enum):
    """Grammar families with construct extraction support."""

    JAVASCRIPT = "javascript"
    PYTHON = "python"
    UNSUPPORTED = "unsupported"


EXTENSION_TO_LANGUAGE = {
    ".js": Language.JAVASCRIPT,
    ".jsx": Language.JAVASCRIPT,
    ".mjs": Language.JAVASCRIPT,
    ".cjs": Language.JAVASCRIPT,
    ".ts": Language.JAVASCRIPT,
    ".tsx": Language.JAVASCRIPT,
    ".py": Language.PYTHON,
}


def language_for_path(path: str | Path) -> Language:
    """Resolve the grammar family for a file by its extension."""
    ext = os.path.splitext(str(path))[1].lower()
    return EXTENSION_TO_LANGUAGE.get(ext, Language.UNSUPPORTED)


def _normalize_extensions(extensions: Optional[Iterable[str]]) -> Tuple[str, ...]:
    if not extensions:
        return ()
    normalized = []
    for ext in extensions:
        ext = ext.strip().lower()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = f".{ext}"
        if ext not in normalized:
            normalized.append(ext)
    return tuple(normalized)


@dataclass(frozen=True)
class SearchOptions:
    """Configuration bundle for one search invocation.

    Attributes:
        directory: Root directory to search
        limit: Maximum number of hits to return (> 0)
        context_lines: Lines of context added around each hit (>= 0)
        use_embeddings: Request semantic search (needs api_key or an embed function)
        api_key: Credential for the embedding endpoint
        construct_filter: Restrict candidates to one construct kind
        file_extensions: Extension allowlist; empty means the default set
    """

    directory: str = "."
    limit: int = 10
    context_lines: int = 3
    use_embeddings: bool = True
    api_key: Optional[str] = None
    construct_filter: Optional[ConstructKind] = None
    file_extensions: Tuple[str, ...] = ()

    def __post_init__(self):
        if isinstance(self.limit, bool) or not isinstance(self.limit, int) or self.limit <= 0:
            raise ValueError(f"limit must be a positive integer, got {self.limit!r}")
        if isinstance(self.context_lines, bool) or not isinstance(self.context_lines, int) or self.context_lines < 0:
            raise ValueError(f"context_lines must be a non-negative integer, got {self.context_lines!r}")
        object.__setattr__(self, "construct_filter", ConstructKind.parse(self.construct_filter))
        object.__setattr__(self, "file_extensions", _normalize_extensions(self.file_extensions))

    @property
    def semantic_enabled(self) -> bool:
        """Semantic search runs only when requested and a credential is present."""
        return bool(self.use_embeddings and self.api_key)


@dataclass(frozen=True)
class CandidateFile:
    """A file selected for searching."""

    path: str
    relative_path: str
    language: Language

    @classmethod
    def from_path(cls, path: str, root: str) -> "CandidateFile":
        relative = os.path.relpath(path, root).replace(os.sep, "/")
        return cls(path=path, relative_path=relative, language=language_for_path(path))


@dataclass(frozen=True)
class Construct:
    """A syntax construct located inside one file.

    Offsets are byte offsets into the UTF-8 encoded source; lines are 1-based.
    """

    kind: ConstructKind
    name: str
    start_offset: int
    end_offset: int
    start_line: int
    end_line: int

    def text(self, source: str) -> str:
        """Slice this construct's source text out of the file contents."""
        data = source.encode("utf-8")
        return data[self.start_offset:self.end_offset].decode("utf-8", errors="replace")


@dataclass(frozen=True)
class SearchHit:
    """One ranked code excerpt."""

    file: str
    line_start: int
    line_end: int
    content: str
    score: float
    similarity: Optional[float] = None
    construct_kind: Optional[ConstructKind] = None
    construct_name: Optional[str] = None
    highlight_start: Optional[int] = None
    highlight_end: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "file": self.file,
            "lineStart": self.line_start,
            "lineEnd": self.line_end,
            "content": self.content,
            "similarity": self.similarity,
            "score": self.score,
        }
        if self.construct_kind is not None:
            data["constructType"] = self.construct_kind.value
            data["constructName"] = self.construct_name
        if self.highlight_start is not None:
            data["highlightStart"] = self.highlight_start
            data["highlightEnd"] = self.highlight_end
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SearchHit":
        return cls(
            file=data["file"],
            line_start=data["lineStart"],
            line_end=data["lineEnd"],
            content=data["content"],
            score=data["score"],
            similarity=data.get("similarity"),
            construct_kind=ConstructKind.parse(data.get("constructType")),
            construct_name=data.get("constructName"),
            highlight_start=data.get("highlightStart"),
            highlight_end=data.get("highlightEnd"),
        )


@dataclass(frozen=True)
class SearchResult:
    """Terminal output of one search invocation."""

    query: str
    hits: List[SearchHit] = field(default_factory=list)
    used_semantic_search: bool = False
    message: Optional[str] = None
    elapsed_ms: Optional[float] = None

    @property
    def count(self) -> int:
        return len(self.hits)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "query": self.query,
            "results": [hit.to_dict() for hit in self.hits],
            "resultCount": self.count,
            "semanticSearch": self.used_semantic_search,
        }
        if self.message is not None:
            data["message"] = self.message
        if self.elapsed_ms is not None:
            data["elapsedMs"] = self.elapsed_ms
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SearchResult":
        return cls(
            query=data["query"],
            hits=[SearchHit.from_dict(item) for item in data.get("results", [])],
            used_semantic_search=bool(data.get("semanticSearch", False)),
            message=data.get("message"),
            elapsed_ms=data.get("elapsedMs"),
        )
