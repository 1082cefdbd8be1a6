"""Tests for keyword fallback scoring."""

import pytest

from vibe.keyword_scorer import keyword_score, tokenize_query


class TestTokenizeQuery:

    def test_drops_short_tokens(self):
        assert tokenize_query("an add of it function") == ["add", "function"]

    def test_lowercases_and_dedupes(self):
        assert tokenize_query("Parse  PARSE config") == ["parse", "config"]

    def test_empty_query(self):
        assert tokenize_query("   ") == []


class TestKeywordScore:

    def test_fraction_of_tokens_found(self):
        assert keyword_score("database connect timeout", "db.connect(database)") == pytest.approx(2 / 3)

    def test_case_invariant(self):
        assert keyword_score("Foo", "this has FOO in it") == keyword_score("foo", "this has foo in it")
        assert keyword_score("Foo", "this has FOO in it") == 1.0

    def test_substring_match(self):
        assert keyword_score("handle", "function handleError(err) {") == 1.0

    def test_no_match(self):
        assert keyword_score("addition helper", "function add(a, b) {") == 0.0

    def test_no_usable_tokens(self):
        assert keyword_score("a b", "a b c d e f g") == 0.0

    def test_accepts_pre_tokenized_query(self):
        assert keyword_score(["add", "function"], "function add(a, b) {") == 1.0
