"""Line-window chunking.

Fallback splitter used when construct extraction is unavailable or finds
nothing: file content is cut into fixed windows of lines with no awareness
of syntax boundaries.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

DEFAULT_CHUNK_LINES = 30


@dataclass(frozen=True)
class CodeChunk:
    """A window of lines. Line numbers are 1-based and inclusive."""
    content: str
    start_line: int
    end_line: int


def chunk_lines(content: str, window: int = DEFAULT_CHUNK_LINES) -> List[CodeChunk]:
    """Split content into consecutive windows of `window` lines.

    The last window may be shorter. Windows never overlap.

    Args:
        content: File contents
        window: Lines per chunk (default: 30)

    Returns:
        List of CodeChunk objects covering every line once
    """
    if window <= 0:
        raise ValueError(f"window must be positive, got {window}")

    lines = content.split("\n")
    chunks = []
    for i in range(0, len(lines), window):
        end = min(i + window, len(lines))
        chunks.append(CodeChunk(
            content="\n".join(lines[i:end]),
            start_line=i + 1,
            end_line=end,
        ))
    return chunks
