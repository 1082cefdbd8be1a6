"""Tests for cosine similarity and composite scoring."""

import math

import pytest

from vibe.errors import DimensionMismatchError
from vibe.models import ConstructKind
from vibe.similarity import (
    SIMILARITY_THRESHOLD,
    composite_score,
    cosine_similarity,
    is_low_similarity,
    type_weight,
)


class TestCosineSimilarity:
    """Test cosine similarity edge cases."""

    def test_identical_vectors(self):
        assert cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]) == pytest.approx(1.0)

    def test_orthogonal_vectors(self):
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)

    @pytest.mark.parametrize("a,b", [
        ([0.3, -1.2, 4.0], [2.0, 0.5, -0.7]),
        ([1.0, 1.0, 1.0], [0.1, 0.2, 0.3]),
        ([-5.0, 2.5, 0.0], [3.0, 3.0, 3.0]),
    ])
    def test_symmetric(self, a, b):
        assert cosine_similarity(a, b) == cosine_similarity(b, a)

    def test_zero_vector_scores_exactly_zero(self):
        result = cosine_similarity([0.0] * 4, [1.0, 2.0, 3.0, 4.0])
        assert result == 0.0
        assert not math.isnan(result)
        assert cosine_similarity([1.0, 2.0], [0.0, 0.0]) == 0.0

    def test_dimension_mismatch_raises(self):
        with pytest.raises(DimensionMismatchError, match="dimension mismatch"):
            cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0])

    def test_dimension_mismatch_is_value_error(self):
        with pytest.raises(ValueError):
            cosine_similarity([1.0], [])


class TestCompositeScore:
    """Test the similarity/size/type blend."""

    def test_formula(self):
        # 0.7 * 0.5 + 0.2 * (250 / 500) + 0.1 * 1.2
        assert composite_score(0.5, 250, ConstructKind.FUNCTION) == pytest.approx(0.57)

    def test_type_weights(self):
        assert type_weight(ConstructKind.FUNCTION) == 1.2
        assert type_weight(ConstructKind.CLASS) == 1.1
        assert type_weight(ConstructKind.VARIABLE) == 1.0
        assert type_weight(None) == 1.0

    def test_function_scores_at_least_variable(self):
        for similarity in (0.0, 0.3, 0.9):
            assert composite_score(similarity, 200, ConstructKind.FUNCTION) >= \
                composite_score(similarity, 200, ConstructKind.VARIABLE)

    def test_longer_chunk_scores_higher_at_equal_similarity(self):
        long_score = composite_score(0.8, 600)
        short_score = composite_score(0.8, 100)

        assert long_score > short_score
        assert long_score == pytest.approx(0.7 * 0.8 + 0.2 * 1.0 + 0.1)
        assert short_score == pytest.approx(0.7 * 0.8 + 0.2 * 0.2 + 0.1)

    def test_size_factor_caps_at_one(self):
        assert composite_score(0.5, 500) == composite_score(0.5, 5000)


class TestLowSimilarity:
    """Test the display-only threshold."""

    def test_threshold(self):
        assert SIMILARITY_THRESHOLD == 0.7
        assert is_low_similarity(0.69) is True
        assert is_low_similarity(0.7) is False
        assert is_low_similarity(None) is False
