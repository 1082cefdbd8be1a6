"""Rendering of search results as terminal text, JSON or HTML."""

from __future__ import annotations

import html
import json
from typing import List

from .models import ConstructKind, SearchHit, SearchResult
from .similarity import SIMILARITY_THRESHOLD, is_low_similarity

FORMATS = ("text", "json", "html")


# ANSI color codes for terminal output
class Colors:
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    MAGENTA = '\033[95m'
    GRAY = '\033[90m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'


CONSTRUCT_COLORS = {
    ConstructKind.FUNCTION: Colors.CYAN,
    ConstructKind.CLASS: Colors.MAGENTA,
    ConstructKind.VARIABLE: Colors.GREEN,
}


def _paint(text: str, code: str, color: bool) -> str:
    return f"{code}{text}{Colors.ENDC}" if color else text


def _is_highlighted(hit: SearchHit, line_number: int) -> bool:
    start = hit.highlight_start if hit.highlight_start is not None else hit.line_start
    end = hit.highlight_end if hit.highlight_end is not None else hit.line_end
    return start <= line_number <= end


def _mode_label(result: SearchResult) -> str:
    return "semantic" if result.used_semantic_search else "keyword"


# ============================================================================
# TEXT
# ============================================================================

def format_text(result: SearchResult, color: bool = True) -> str:
    """Render results for a terminal.

    Matched lines carry a '>' marker (and yellow when colored); context
    lines added by the assembler are plain.
    """
    out: List[str] = [
        _paint(f'Search results for: "{result.query}"', Colors.GREEN, color),
        _paint(f"Found {result.count} matches using {_mode_label(result)} search.", Colors.GREEN, color),
        "",
    ]

    if result.count == 0:
        out.append(_paint(result.message or "No matches found.", Colors.YELLOW, color))
        return "\n".join(out) + "\n"

    for i, hit in enumerate(result.hits, start=1):
        header = _paint(f"[{i}] {hit.file}:{hit.line_start}-{hit.line_end}", Colors.BLUE, color)
        header += f" (score: {hit.score:.2f})"
        if result.used_semantic_search and is_low_similarity(hit.similarity):
            header += _paint(
                f" (Similarity {hit.similarity:.2f} < {SIMILARITY_THRESHOLD})", Colors.GRAY, color
            )
        if hit.construct_kind is not None:
            header += _paint(
                f" [{hit.construct_kind.value}: {hit.construct_name}]",
                CONSTRUCT_COLORS[hit.construct_kind],
                color,
            )
        out.append(header)

        for offset, line in enumerate(hit.content.split("\n")):
            number = hit.line_start + offset
            if _is_highlighted(hit, number):
                gutter = _paint(f"{number:>5} > ", Colors.GRAY, color)
                out.append(gutter + _paint(line, Colors.YELLOW, color))
            else:
                out.append(_paint(f"{number:>5} | ", Colors.GRAY, color) + line)
        out.append("")

    return "\n".join(out)


# ============================================================================
# JSON
# ============================================================================

def format_json(result: SearchResult) -> str:
    """Structural dump; SearchResult.from_dict(json.loads(...)) reverses it."""
    return json.dumps(result.to_dict(), indent=2)


# ============================================================================
# HTML
# ============================================================================

_HTML_STYLE = """
    body {
      font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Ubuntu, sans-serif;
      line-height: 1.6;
      color: #333;
      max-width: 1200px;
      margin: 0 auto;
      padding: 20px;
      background-color: #f8f9fa;
    }
    h1, h2, h3 { color: #0077cc; }
    .query-info {
      background-color: #e9f5ff;
      padding: 15px;
      border-radius: 5px;
      margin-bottom: 30px;
      border-left: 5px solid #0077cc;
    }
    .result {
      background-color: white;
      border-radius: 5px;
      box-shadow: 0 2px 4px rgba(0,0,0,0.1);
      margin-bottom: 30px;
      overflow: hidden;
    }
    .result-header {
      background-color: #f8f9fa;
      padding: 10px 15px;
      border-bottom: 1px solid #e1e4e8;
      display: flex;
      align-items: center;
    }
    .result-header h3 { margin: 0; flex: 1; font-size: 16px; font-weight: 600; }
    .lines, .score, .similarity, .construct-type { font-size: 14px; margin-left: 15px; }
    .score { font-weight: 600; color: #0077cc; }
    .similarity.low { color: #a0a0a0; }
    .construct-type { padding: 2px 6px; border-radius: 4px; color: white; }
    .construct-type.function { background-color: #00b7ff; }
    .construct-type.class { background-color: #ff00ff; }
    .construct-type.variable { background-color: #00cc00; }
    .code-container { overflow-x: auto; background-color: #f6f8fa; }
    .code {
      width: 100%;
      border-collapse: collapse;
      font-family: 'SFMono-Regular', Consolas, 'Liberation Mono', Menlo, monospace;
      font-size: 12px;
      line-height: 1.5;
    }
    .line-number {
      text-align: right;
      padding: 0 10px;
      width: 1%;
      min-width: 50px;
      color: #a0a0a0;
      border-right: 1px solid #e1e4e8;
      user-select: none;
    }
    .line-content { padding: 0 10px; white-space: pre; }
    .highlighted { background-color: #fffbdd; }
    .highlighted .line-number { background-color: #fff5b1; color: #735c0f; font-weight: 600; }
    @media (max-width: 768px) {
      .result-header { flex-direction: column; align-items: flex-start; }
      .lines, .score, .similarity, .construct-type { margin-left: 0; margin-top: 5px; }
    }
"""


def _html_hit(hit: SearchHit, semantic: bool) -> str:
    rows = []
    for offset, line in enumerate(hit.content.split("\n")):
        number = hit.line_start + offset
        css = "highlighted" if _is_highlighted(hit, number) else ""
        rows.append(
            f'<tr class="{css}"><td class="line-number">{number}</td>'
            f'<td class="line-content">{html.escape(line)}</td></tr>'
        )

    extras = []
    if semantic and hit.similarity is not None:
        low = " low" if is_low_similarity(hit.similarity) else ""
        extras.append(f'<span class="similarity{low}">Similarity: {hit.similarity:.2f}</span>')
    if hit.construct_kind is not None:
        extras.append(
            f'<span class="construct-type {hit.construct_kind.value}">'
            f'[{hit.construct_kind.value}: {html.escape(hit.construct_name or "anonymous")}]</span>'
        )

    return f"""
  <div class="result">
    <div class="result-header">
      <h3>{html.escape(hit.file)}</h3>
      <span class="lines">Lines {hit.line_start}-{hit.line_end}</span>
      <span class="score">Score: {hit.score:.2f}</span>
      {''.join(extras)}
    </div>
    <div class="code-container">
      <table class="code">
        <tbody>
{chr(10).join(rows)}
        </tbody>
      </table>
    </div>
  </div>"""


def format_html(result: SearchResult) -> str:
    """Render a standalone HTML page with embedded styling."""
    if result.count:
        body = "".join(_html_hit(hit, result.used_semantic_search) for hit in result.hits)
    else:
        body = f"<p>{html.escape(result.message or 'No matches found.')}</p>"

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Vibe Insights - Search Results</title>
  <style>{_HTML_STYLE}  </style>
</head>
<body>
  <h1>Vibe Insights - Search Results</h1>
  <div class="query-info">
    <h2>Query: "{html.escape(result.query)}"</h2>
    <p>Found {result.count} matches using {_mode_label(result)} search.</p>
  </div>
{body}
</body>
</html>
"""


def format_results(result: SearchResult, mode: str = "text", color: bool = True) -> str:
    """Render a SearchResult.

    Args:
        result: Search outcome
        mode: "text", "json" or "html"
        color: ANSI colors in text mode

    Raises:
        ValueError: For an unknown mode
    """
    if mode == "text":
        return format_text(result, color=color)
    if mode == "json":
        return format_json(result)
    if mode == "html":
        return format_html(result)
    raise ValueError(f"Unknown output format '{mode}' (expected one of: {', '.join(FORMATS)})")
