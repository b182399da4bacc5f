"""
Unit tests for shared utilities: cosine similarity, tokenization,
exact-match boosting, ids and datetime helpers.
"""
from datetime import datetime, timezone, timedelta

import pytest

from memoryrank.utils import (
    cosine_similarity,
    tokenize,
    extract_keywords,
    exact_match_boost,
    generate_id,
    compute_content_hash,
    ensure_utc,
    start_of_day,
    parse_datetime_utc,
)


class TestCosineSimilarity:

    def test_identical_vectors(self):
        assert cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]) == pytest.approx(1.0)

    def test_orthogonal_vectors(self):
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)

    def test_opposite_vectors(self):
        assert cosine_similarity([1.0, 1.0], [-1.0, -1.0]) == pytest.approx(-1.0)

    def test_scale_invariant(self):
        assert cosine_similarity([1.0, 2.0], [10.0, 20.0]) == pytest.approx(1.0)

    def test_length_mismatch_scores_zero(self):
        assert cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0]) == 0.0

    def test_zero_vector_scores_zero(self):
        assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0
        assert cosine_similarity([1.0, 1.0], [0.0, 0.0]) == 0.0

    def test_empty_vectors_score_zero(self):
        assert cosine_similarity([], []) == 0.0

    @pytest.mark.parametrize("a,b", [
        ([1.0, 2.0, 3.0], [3.0, -1.0, 0.5]),
        ([0.2, 0.9], [0.7, 0.1]),
        ([1.0, 0.0], [0.0, 0.0]),
        ([1.0, 0.0], [1.0, 0.0, 0.0]),
    ])
    def test_symmetric(self, a, b):
        assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))

    def test_result_stays_in_range(self):
        v = [0.1] * 384
        score = cosine_similarity(v, v)
        assert -1.0 <= score <= 1.0


class TestTokenize:

    def test_lowercases_and_splits_on_punctuation(self):
        assert tokenize("Hello, World! foo_bar") == ["hello", "world", "foo", "bar"]

    def test_drops_short_tokens(self):
        assert tokenize("I am at the zoo") == ["the", "zoo"]

    def test_keeps_duplicates_in_order(self):
        assert tokenize("coffee tea coffee") == ["coffee", "tea", "coffee"]

    def test_empty_text(self):
        assert tokenize("") == []
        assert tokenize("   ") == []

    def test_keywords_drop_stopwords(self):
        assert extract_keywords("What does the user have for breakfast") == ["user", "breakfast"]


class TestExactMatchBoost:

    def test_full_match_doubles(self):
        assert exact_match_boost("User drinks coffee daily", "coffee daily", 0.4) == pytest.approx(0.8)

    def test_partial_match(self):
        # one of two keywords present
        assert exact_match_boost("User drinks coffee", "coffee tea", 0.4) == pytest.approx(0.6)

    def test_no_match_unchanged(self):
        assert exact_match_boost("User drinks coffee", "mountains", 0.4) == pytest.approx(0.4)

    def test_query_without_keywords_unchanged(self):
        assert exact_match_boost("anything at all", "what is it", 0.5) == 0.5


class TestIdsAndHashing:

    def test_generate_id_format(self):
        memory_id = generate_id("mem")
        prefix, suffix = memory_id.split("_")
        assert prefix == "mem"
        assert len(suffix) == 16
        int(suffix, 16)

    def test_generate_id_unique(self):
        assert len({generate_id("mem") for _ in range(100)}) == 100

    def test_content_hash_is_stable(self):
        assert compute_content_hash("abc") == compute_content_hash("abc")
        assert compute_content_hash("abc") != compute_content_hash("abd")
        assert len(compute_content_hash("abc")) == 64


class TestDatetimeHelpers:

    def test_naive_is_treated_as_utc(self):
        dt = ensure_utc(datetime(2025, 1, 1, 12, 0))
        assert dt.tzinfo == timezone.utc
        assert dt.hour == 12

    def test_aware_is_converted(self):
        plus_two = timezone(timedelta(hours=2))
        dt = ensure_utc(datetime(2025, 1, 1, 12, 0, tzinfo=plus_two))
        assert dt == datetime(2025, 1, 1, 10, 0, tzinfo=timezone.utc)

    def test_start_of_day_keeps_zone(self):
        dt = datetime(2025, 3, 4, 17, 45, 12, 999, tzinfo=timezone.utc)
        assert start_of_day(dt) == datetime(2025, 3, 4, tzinfo=timezone.utc)

    def test_parse_datetime_utc(self):
        assert parse_datetime_utc(None) is None
        assert parse_datetime_utc("") is None
        assert parse_datetime_utc("2025-06-10T12:00:00") == datetime(2025, 6, 10, 12, tzinfo=timezone.utc)
        assert parse_datetime_utc("2025-06-10T12:00:00+02:00") == datetime(2025, 6, 10, 10, tzinfo=timezone.utc)

    def test_parse_invalid_raises(self):
        with pytest.raises(ValueError):
            parse_datetime_utc("not a date")
