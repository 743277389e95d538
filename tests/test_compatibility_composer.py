"""
Tests for compatibility_composer.py
"""

import pytest

from compatibility_composer import NO_MATCH_EXPLANATION, CompatibilityComposer, MatchSignals, ScoringMode
from engine_config import EngineConfig


@pytest.fixture
def composer():
    return CompatibilityComposer(EngineConfig())


def test_search_blend_weights_skills_and_recency(composer):
    score = composer.compose(ScoringMode.SEARCH, MatchSignals(skill_score=0.5, overlap_count=1, recency_score=30))
    assert score.value == 65.0


def test_search_blend_clamped_to_hundred(composer):
    score = composer.compose(ScoringMode.SEARCH, MatchSignals(skill_score=1.0, overlap_count=2, recency_score=30))
    assert score.value == 100.0


def test_search_blend_rounds_half_up(composer):
    # 0.25 * 70 + 29 = 46.5
    score = composer.compose(ScoringMode.SEARCH, MatchSignals(skill_score=0.25, overlap_count=1, recency_score=29))
    assert score.value == 47.0


def test_recommend_blend_scaled_to_hundred(composer):
    full_with_location = composer.compose(ScoringMode.RECOMMEND, MatchSignals(skill_score=1.0, location_boost=0.2))
    full = composer.compose(ScoringMode.RECOMMEND, MatchSignals(skill_score=1.0))
    half = composer.compose(ScoringMode.RECOMMEND, MatchSignals(skill_score=0.5))
    assert full_with_location.value == 100.0
    assert full.value == pytest.approx(83.33)
    assert half.value == pytest.approx(41.67)
    assert full_with_location.value > full.value > half.value


def test_lexical_blend_uses_similarity(composer):
    score = composer.compose(ScoringMode.LEXICAL, MatchSignals(lexical_score=0.6, location_boost=0.0))
    assert score.value == pytest.approx(50.0)
    assert "Similar profile text" in score.explanation


def test_explanation_order_and_summary(composer):
    score = composer.compose(
        ScoringMode.SEARCH,
        MatchSignals(skill_score=1.0, overlap_count=2, recency_score=25, location="Aracaju"),
    )
    assert score.explanation == ("2 skill(s) in common", "Recent posting", "Aracaju")
    assert score.summary == "2 skill(s) in common • Recent posting • Aracaju"


def test_recent_posting_requires_threshold(composer):
    score = composer.compose(ScoringMode.SEARCH, MatchSignals(overlap_count=0, recency_score=10))
    assert "Recent posting" not in score.explanation


def test_zero_contributions_yield_fallback_text(composer):
    score = composer.compose(ScoringMode.SEARCH, MatchSignals())
    assert score.value == 0.0
    assert score.summary == NO_MATCH_EXPLANATION
    assert score.summary != ""


def test_constant_score_is_low_confidence(composer):
    score = composer.constant(MatchSignals(location="Lagarto"))
    assert score.value == 50.0
    assert score.explanation == ("Lagarto",)


def test_values_stay_in_bounds(composer):
    for mode in ScoringMode:
        score = composer.compose(mode, MatchSignals(skill_score=5.0, lexical_score=5.0, recency_score=500, location_boost=3.0))
        assert 0.0 <= score.value <= 100.0
