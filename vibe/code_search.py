"""Repository-wide code search pipeline.

Collects files under a directory, splits each into candidates (syntax
constructs when a construct filter applies, otherwise 30-line windows or
single lines), scores candidates against the query, ranks them and widens
the survivors with surrounding context lines.

Two scoring modes:
- semantic: one embedding per candidate, composite of cosine similarity,
  chunk size and construct type (requires an API key)
- keyword: fraction of query tokens present as substrings

Everything runs sequentially on one event loop: one file at a time, one
awaited embedding request per candidate.

Example:
    options = SearchOptions(directory="./src", limit=5, api_key=key)
    result = await search_codebase("parse config file", options)
    for hit in result.hits:
        print(hit.file, hit.line_start, hit.score)
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import replace
from typing import Awaitable, Callable, Iterator, List, Optional, Sequence, Tuple

from .code_chunker import DEFAULT_CHUNK_LINES, chunk_lines
from .code_constructs import ConstructExtractor
from .config import EmbeddingConfig
from .errors import ConstructExtractionError
from .file_collector import collect_files
from .keyword_scorer import MIN_LINE_LENGTH, keyword_score, tokenize_query
from .models import CandidateFile, Construct, ConstructKind, SearchHit, SearchOptions, SearchResult
from .openai_embeddings import OpenAIEmbeddingClient, is_null_embedding
from .similarity import composite_score, cosine_similarity

logger = logging.getLogger(__name__)

EmbedFn = Callable[[str], Awaitable[List[float]]]

DEFAULT_BATCH_SIZE = 50
DEFAULT_MAX_FILE_CHARS = 100000
DEFAULT_MIN_CHUNK_CHARS = 50

MSG_EMPTY_QUERY = "Search query is required."
MSG_NO_FILES = "No code files found in the specified directory."
MSG_NO_MATCHES = "No matches found."


def read_source(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def widen_hit(hit: SearchHit, root: str, context_lines: int) -> SearchHit:
    """Return a copy of hit expanded by context_lines on each side.

    The widened range is clipped to [1, line_count] of the file as it is on
    disk now. The matched range is kept in highlight_start/highlight_end.
    If the file cannot be re-read the hit comes back with its original
    content.
    """
    path = os.path.join(root, hit.file)
    try:
        lines = read_source(path).split("\n")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not re-read {hit.file} for context: {e}")
        return replace(hit, highlight_start=hit.line_start, highlight_end=hit.line_end)

    line_count = len(lines)
    start = max(1, min(hit.line_start, line_count) - context_lines)
    end = max(start, min(line_count, hit.line_end + context_lines))

    return replace(
        hit,
        line_start=start,
        line_end=end,
        content="\n".join(lines[start - 1:end]),
        highlight_start=hit.line_start,
        highlight_end=hit.line_end,
    )


def assemble_results(hits: Sequence[SearchHit], root: str, context_lines: int) -> List[SearchHit]:
    """Widen every hit with context. Hits are never dropped."""
    return [widen_hit(hit, root, context_lines) for hit in hits]


def rank_hits(hits: Sequence[SearchHit], limit: int) -> List[SearchHit]:
    """Sort by score descending (stable) and keep the top `limit`."""
    return sorted(hits, key=lambda h: h.score, reverse=True)[:limit]


def _batches(items: Sequence[CandidateFile], size: int) -> Iterator[Sequence[CandidateFile]]:
    for i in range(0, len(items), size):
        yield items[i:i + size]


class CodeSearcher:
    """
    Search a directory for code relevant to a query.

    Args:
        embed_fn: Async embedding function. When omitted and semantic search
            is enabled, an OpenAIEmbeddingClient is built from the options'
            api_key for the duration of the call.
        embedding_config: Endpoint settings for the built-in client
        extractor: Construct extractor (default: new ConstructExtractor)
        batch_size: Files per sequential batch
        max_file_chars: Semantic mode skips larger files
        min_chunk_chars: Candidates shorter than this are not scored
        chunk_window: Lines per fallback chunk
    """

    def __init__(
        self,
        embed_fn: Optional[EmbedFn] = None,
        embedding_config: Optional[EmbeddingConfig] = None,
        extractor: Optional[ConstructExtractor] = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_file_chars: int = DEFAULT_MAX_FILE_CHARS,
        min_chunk_chars: int = DEFAULT_MIN_CHUNK_CHARS,
        chunk_window: int = DEFAULT_CHUNK_LINES,
    ):
        self._embed_fn = embed_fn
        self._embedding_config = embedding_config
        self._extractor = extractor or ConstructExtractor()
        self.batch_size = batch_size
        self.max_file_chars = max_file_chars
        self.min_chunk_chars = min_chunk_chars
        self.chunk_window = chunk_window

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    async def search(self, query: str, options: SearchOptions) -> SearchResult:
        """Run one search and return ranked, context-widened hits."""
        started = time.perf_counter()
        root = os.path.abspath(options.directory)

        def _result(hits: List[SearchHit], semantic: bool, message: Optional[str] = None) -> SearchResult:
            return SearchResult(
                query=query,
                hits=hits,
                used_semantic_search=semantic,
                message=message,
                elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
            )

        if not query or not query.strip():
            logger.info("Empty query, nothing to search")
            return _result([], False, MSG_EMPTY_QUERY)

        files = collect_files(root, options.file_extensions)
        if not files:
            return _result([], options.semantic_enabled, MSG_NO_FILES)
        candidates = [CandidateFile.from_path(path, root) for path in files]

        hits: Optional[List[SearchHit]] = None
        semantic = False
        if options.semantic_enabled:
            hits = await self._semantic_search(query, candidates, options)
            semantic = hits is not None
        if hits is None:
            hits = self._keyword_search(query, candidates, options)

        ranked = rank_hits(hits, options.limit)
        assembled = assemble_results(ranked, root, options.context_lines)
        logger.info(
            f"Search for '{query}' returned {len(assembled)} of {len(hits)} candidates "
            f"({'semantic' if semantic else 'keyword'})"
        )
        return _result(assembled, semantic, None if assembled else MSG_NO_MATCHES)

    # ------------------------------------------------------------------
    # Candidate generation
    # ------------------------------------------------------------------

    def _constructs_for(
        self,
        candidate: CandidateFile,
        source: str,
        kind_filter: Optional[ConstructKind],
    ) -> List[Construct]:
        if kind_filter is None or not self._extractor.supports(candidate.language):
            return []
        constructs = self._extractor.extract(source, candidate.language, kind_filter)
        if not constructs:
            logger.debug(
                f"No {kind_filter.value} constructs in {candidate.relative_path}, "
                f"falling back to chunks"
            )
        return constructs

    def _semantic_units(
        self,
        candidate: CandidateFile,
        source: str,
        kind_filter: Optional[ConstructKind],
    ) -> List[Tuple[str, int, int, Optional[Construct]]]:
        constructs = self._constructs_for(candidate, source, kind_filter)
        if constructs:
            return [(c.text(source), c.start_line, c.end_line, c) for c in constructs]
        return [
            (chunk.content, chunk.start_line, chunk.end_line, None)
            for chunk in chunk_lines(source, self.chunk_window)
        ]

    # ------------------------------------------------------------------
    # Semantic mode
    # ------------------------------------------------------------------

    async def _semantic_search(
        self,
        query: str,
        candidates: Sequence[CandidateFile],
        options: SearchOptions,
    ) -> Optional[List[SearchHit]]:
        """Score every candidate by embedding similarity.

        Returns None when the query itself could not be embedded, so the
        caller falls back to keyword search.
        """
        client: Optional[OpenAIEmbeddingClient] = None
        embed = self._embed_fn
        if embed is None:
            cfg = self._embedding_config
            if cfg is None:
                client = OpenAIEmbeddingClient(api_key=options.api_key)
            else:
                client = OpenAIEmbeddingClient(
                    api_key=options.api_key,
                    model=cfg.model,
                    dimension=cfg.dimension,
                    base_url=cfg.url,
                    timeout=cfg.timeout,
                    max_input_chars=cfg.max_input_chars,
                )
            embed = client.embed

        try:
            query_vector = await embed(query)
            if is_null_embedding(query_vector):
                logger.warning("Failed to embed the query, falling back to keyword search")
                return None

            results: List[SearchHit] = []
            total_batches = (len(candidates) + self.batch_size - 1) // self.batch_size
            for number, batch in enumerate(_batches(candidates, self.batch_size), start=1):
                logger.debug(f"Processing batch {number}/{total_batches} ({len(batch)} files)")
                for candidate in batch:
                    results.extend(
                        await self._score_file_semantic(candidate, query_vector, embed, options)
                    )
            logger.info(f"Semantic scoring produced {len(results)} candidates")
            return results
        finally:
            if client is not None:
                await client.aclose()

    async def _score_file_semantic(
        self,
        candidate: CandidateFile,
        query_vector: List[float],
        embed: EmbedFn,
        options: SearchOptions,
    ) -> List[SearchHit]:
        try:
            source = read_source(candidate.path)
            if not source.strip() or len(source) > self.max_file_chars:
                logger.warning(
                    f"Skipping large or empty file: {candidate.relative_path} (length: {len(source)})"
                )
                return []
            units = self._semantic_units(candidate, source, options.construct_filter)
        except (OSError, UnicodeDecodeError, ConstructExtractionError) as e:
            logger.warning(f"Skipping {candidate.relative_path}: {e}")
            return []

        hits = []
        for text, start, end, construct in units:
            if len(text) < self.min_chunk_chars:
                continue
            vector = await embed(text)
            similarity = cosine_similarity(query_vector, vector)
            kind = construct.kind if construct else None
            logger.debug(f"  {candidate.relative_path}:{start}-{end} similarity={similarity:.4f}")
            hits.append(SearchHit(
                file=candidate.relative_path,
                line_start=start,
                line_end=end,
                content=text,
                similarity=similarity,
                score=composite_score(similarity, len(text), kind),
                construct_kind=kind,
                construct_name=construct.name if construct else None,
            ))
        return hits

    # ------------------------------------------------------------------
    # Keyword mode
    # ------------------------------------------------------------------

    def _keyword_search(
        self,
        query: str,
        candidates: Sequence[CandidateFile],
        options: SearchOptions,
    ) -> List[SearchHit]:
        tokens = tokenize_query(query)
        if not tokens:
            logger.info(f"Query '{query}' has no keywords longer than two characters")
            return []

        results: List[SearchHit] = []
        for candidate in candidates:
            try:
                source = read_source(candidate.path)
                constructs = self._constructs_for(candidate, source, options.construct_filter)
            except (OSError, UnicodeDecodeError, ConstructExtractionError) as e:
                logger.warning(f"Skipping {candidate.relative_path}: {e}")
                continue

            if constructs:
                results.extend(self._keyword_constructs(candidate, source, constructs, tokens))
            else:
                results.extend(self._keyword_lines(candidate, source, tokens))
        return results

    def _keyword_constructs(
        self,
        candidate: CandidateFile,
        source: str,
        constructs: Sequence[Construct],
        tokens: Sequence[str],
    ) -> List[SearchHit]:
        hits = []
        for construct in constructs:
            text = construct.text(source)
            if len(text) < self.min_chunk_chars:
                continue
            score = keyword_score(tokens, text)
            if score > 0:
                hits.append(SearchHit(
                    file=candidate.relative_path,
                    line_start=construct.start_line,
                    line_end=construct.end_line,
                    content=text,
                    score=score,
                    construct_kind=construct.kind,
                    construct_name=construct.name,
                ))
        return hits

    def _keyword_lines(
        self,
        candidate: CandidateFile,
        source: str,
        tokens: Sequence[str],
    ) -> List[SearchHit]:
        hits = []
        for number, line in enumerate(source.split("\n"), start=1):
            if len(line) < MIN_LINE_LENGTH:
                continue
            score = keyword_score(tokens, line)
            if score > 0:
                hits.append(SearchHit(
                    file=candidate.relative_path,
                    line_start=number,
                    line_end=number,
                    content=line,
                    score=score,
                ))
        return hits


async def search_codebase(
    query: str,
    options: SearchOptions,
    embed_fn: Optional[EmbedFn] = None,
    embedding_config: Optional[EmbeddingConfig] = None,
) -> SearchResult:
    """Search with a one-off CodeSearcher."""
    searcher = CodeSearcher(embed_fn=embed_fn, embedding_config=embedding_config)
    return await searcher.search(query, options)
