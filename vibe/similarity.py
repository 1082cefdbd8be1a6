"""Similarity scoring for semantic code search.

Cosine similarity between query and candidate embeddings, blended with a
chunk-size factor and a construct-type weight into the ranking score.
"""

from typing import Optional, Sequence

import numpy as np

from .errors import DimensionMismatchError
from .models import ConstructKind

# Hits below this similarity are annotated in formatted output (never filtered)
SIMILARITY_THRESHOLD = 0.7

SIMILARITY_WEIGHT = 0.7
SIZE_WEIGHT = 0.2
TYPE_WEIGHT = 0.1
SIZE_NORMALIZER = 500

CONSTRUCT_TYPE_WEIGHTS = {
    ConstructKind.FUNCTION: 1.2,
    ConstructKind.CLASS: 1.1,
}
DEFAULT_TYPE_WEIGHT = 1.0


def cosine_similarity(vec1: Sequence[float], vec2: Sequence[float]) -> float:
    """Calculate cosine similarity between two vectors.

    Raises:
        DimensionMismatchError: If the vectors differ in length.

    Returns:
        Similarity, or exactly 0.0 when either vector has zero norm.
    """
    if len(vec1) != len(vec2):
        raise DimensionMismatchError(len(vec1), len(vec2))

    a = np.asarray(vec1, dtype=float)
    b = np.asarray(vec2, dtype=float)
    norm1 = np.linalg.norm(a)
    norm2 = np.linalg.norm(b)
    if norm1 == 0 or norm2 == 0:
        return 0.0
    return float(np.dot(a, b) / (norm1 * norm2))


def type_weight(construct_kind: Optional[ConstructKind]) -> float:
    return CONSTRUCT_TYPE_WEIGHTS.get(construct_kind, DEFAULT_TYPE_WEIGHT)


def composite_score(
    similarity: float,
    chunk_length: int,
    construct_kind: Optional[ConstructKind] = None,
) -> float:
    """Blend similarity, chunk size and construct type into a ranking score.

    score = 0.7 * similarity + 0.2 * min(chunk_length / 500, 1) + 0.1 * type_weight

    Longer snippets and structural constructs (functions, then classes)
    rank above short line matches at equal similarity.
    """
    size_factor = min(chunk_length / SIZE_NORMALIZER, 1.0)
    return (
        SIMILARITY_WEIGHT * similarity
        + SIZE_WEIGHT * size_factor
        + TYPE_WEIGHT * type_weight(construct_kind)
    )


def is_low_similarity(similarity: Optional[float]) -> bool:
    """True when a semantic hit falls under SIMILARITY_THRESHOLD."""
    return similarity is not None and similarity < SIMILARITY_THRESHOLD
