"""Unit tests for the Jaccard duplicate scorer in pawboard/scoring/similarity.py."""

from __future__ import annotations

import pytest

from pawboard.core.policy import DuplicatePolicy
from pawboard.scoring.similarity import (
    SimilarityInput,
    content_similarity,
    is_likely_duplicate,
    jaccard,
    rank_similar,
    recommendations_for,
    score_candidate,
    tag_similarity,
    title_similarity,
    tokenize,
)


class TestTokenize:
    def test_tokenize_lowercases_and_collapses_duplicates(self) -> None:
        assert tokenize("  My Dog  my DOG ") == {"my", "dog"}

    def test_tokenize_none_is_empty(self) -> None:
        assert tokenize(None) == set()

    def test_tokenize_keeps_punctuation_attached(self) -> None:
        assert tokenize("Help. Please") == {"help.", "please"}


class TestJaccard:
    def test_empty_sets_score_zero(self) -> None:
        assert jaccard(set(), set()) == 0.0

    def test_partial_overlap(self) -> None:
        assert jaccard({"a", "b"}, {"b", "c"}) == pytest.approx(1 / 3)

    def test_is_symmetric(self) -> None:
        first, second = {"dog", "food", "brand"}, {"dog", "food"}
        assert jaccard(first, second) == jaccard(second, first)


class TestTitleSimilarity:
    def test_identical_titles_are_capped_at_one(self) -> None:
        """Full overlap plus the phrase boost never exceeds 1.0."""
        assert title_similarity("My dog won't eat", "My dog won't eat") == 1.0

    def test_disjoint_titles_score_zero(self) -> None:
        assert title_similarity("Puppy training tips", "Cat food brands") == 0.0

    def test_shared_phrase_adds_boost(self) -> None:
        # Word Jaccard is 2/4; "dog vomiting" is a phrase of both titles.
        assert title_similarity("Help needed. Dog vomiting", "dog vomiting") == pytest.approx(0.7)

    def test_empty_titles_score_zero(self) -> None:
        assert title_similarity("", None) == 0.0


class TestContentAndTagSimilarity:
    def test_content_similarity_is_plain_jaccard(self) -> None:
        assert content_similarity("a b c d", "a b") == pytest.approx(0.5)

    def test_tag_similarity_uses_larger_set(self) -> None:
        assert tag_similarity(["a", "b"], ["b", "c", "d"]) == pytest.approx(1 / 3)

    @pytest.mark.parametrize(("first", "second"), [([], ["a"]), (["a"], None), (None, None)])
    def test_tag_similarity_empty_side_scores_zero(
        self, first: list[str] | None, second: list[str] | None
    ) -> None:
        assert tag_similarity(first, second) == 0.0


class TestScoreCandidate:
    def test_identical_questions_with_tags_score_one(self) -> None:
        question = SimilarityInput(title="Dog diet", content="What to feed", tags=("food",))
        score = score_candidate(question, question)

        assert score.overall_similarity == pytest.approx(1.0)
        assert score.tag_similarity == 1.0

    def test_identical_text_without_tags_is_capped_by_text_weight(self) -> None:
        question = SimilarityInput(title="Dog diet", content="What to feed")
        score = score_candidate(question, question)

        assert score.overall_similarity == pytest.approx(0.8)

    def test_weights_follow_policy(self) -> None:
        """overall = text_weight * (title_weight * title + content_weight * content) + tags."""
        candidate = SimilarityInput(
            title="My dog won't eat", content="My dog has not eaten since yesterday"
        )
        existing = SimilarityInput(
            title="My dog refuses to eat food", content="My dog has not eaten anything today"
        )

        score = score_candidate(candidate, existing)

        assert score.title_similarity == pytest.approx(3 / 7)
        assert score.content_similarity == pytest.approx(5 / 9)
        assert score.overall_similarity == pytest.approx(0.8 * (0.7 * 3 / 7 + 0.3 * 5 / 9))


class TestRankSimilar:
    def test_empty_pool(self) -> None:
        result = rank_similar(SimilarityInput(title="Dog"), [])

        assert result.similar == []
        assert result.likely_duplicate is False
        assert result.duplicate_threshold == 0.7

    def test_moderate_match_is_listed_but_not_a_duplicate(self) -> None:
        candidate = SimilarityInput(
            title="My dog won't eat", content="My dog has not eaten since yesterday"
        )
        existing = SimilarityInput(
            title="My dog refuses to eat food",
            content="My dog has not eaten anything today",
            key=7,
        )

        result = rank_similar(candidate, [existing])

        assert [item.candidate_id for item in result.similar] == [7]
        assert result.likely_duplicate is False
        assert 0.3 < result.similar[0].score.overall_similarity < 0.6

    def test_unrelated_questions_are_dropped(self) -> None:
        candidate = SimilarityInput(title="Puppy vaccination schedule", content="When to start")
        existing = SimilarityInput(title="Best cat litter", content="Clumping or not", key=1)

        assert rank_similar(candidate, [existing]).similar == []

    def test_results_sorted_and_capped(self) -> None:
        candidate = SimilarityInput(title="dog food brands", content="which brand")
        pool = [
            SimilarityInput(title="dog food", content="unrelated words here", key="weak"),
            *(
                SimilarityInput(title="dog food brands", content="which brand", key=index)
                for index in range(6)
            ),
        ]

        result = rank_similar(candidate, pool)

        scores = [item.score.overall_similarity for item in result.similar]
        assert len(result.similar) == 5
        assert scores == sorted(scores, reverse=True)
        assert "weak" not in [item.candidate_id for item in result.similar]
        assert result.likely_duplicate is True

    def test_policy_overrides_threshold(self) -> None:
        question = SimilarityInput(title="Dog diet", content="What to feed", key=1)
        strict = DuplicatePolicy(duplicate_threshold=0.9)

        result = rank_similar(question, [question], strict)

        assert result.likely_duplicate is False
        assert result.duplicate_threshold == 0.9


class TestDuplicateThreshold:
    def test_threshold_itself_is_not_a_duplicate(self) -> None:
        assert is_likely_duplicate(0.7) is False

    def test_just_below_threshold_is_not_a_duplicate(self) -> None:
        assert is_likely_duplicate(0.69) is False

    def test_above_threshold_is_a_duplicate(self) -> None:
        assert is_likely_duplicate(0.71) is True

    def test_recommendations_differ_by_verdict(self) -> None:
        assert recommendations_for(True) != recommendations_for(False)
        assert "unique" in recommendations_for(False)[0]
