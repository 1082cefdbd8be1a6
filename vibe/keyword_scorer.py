"""Keyword fallback scoring.

Used when semantic search is off or has no credential: a candidate's score
is the fraction of distinct query tokens it contains as case-insensitive
substrings.
"""

from typing import List, Sequence, Union

MIN_TOKEN_LENGTH = 3
MIN_LINE_LENGTH = 10


def tokenize_query(query: str) -> List[str]:
    """Lower-case, split on whitespace, and drop tokens of two characters or fewer."""
    tokens: List[str] = []
    for token in query.lower().split():
        if len(token) >= MIN_TOKEN_LENGTH and token not in tokens:
            tokens.append(token)
    return tokens


def keyword_score(query: Union[str, Sequence[str]], text: str) -> float:
    """Fraction of query tokens found in text.

    Args:
        query: Raw query string or pre-tokenized query
        text: Candidate text

    Returns:
        hits / len(tokens) in [0, 1]; 0.0 when the query has no usable tokens
    """
    tokens = tokenize_query(query) if isinstance(query, str) else list(query)
    if not tokens:
        return 0.0
    haystack = text.lower()
    hits = sum(1 for token in tokens if token in haystack)
    return hits / len(tokens)
