"""Vibe Insights code search.

Natural-language and keyword search over a source tree, with tree-sitter
construct extraction and OpenAI embeddings.
"""

__version__ = "1.0.0"

from .code_search import CodeSearcher, search_codebase
from .formatting import format_results
from .models import ConstructKind, SearchHit, SearchOptions, SearchResult

__all__ = [
    "CodeSearcher",
    "ConstructKind",
    "SearchHit",
    "SearchOptions",
    "SearchResult",
    "format_results",
    "search_codebase",
]
