"""
Tests for recency_location.py
"""

from datetime import timedelta

from recency_location import days_since, location_boost, recency_score, round_half_up


def test_recency_brand_new_gets_maximum(now):
    assert recency_score(now, now) == 30


def test_recency_forty_days_old_is_zero(now):
    assert recency_score(now - timedelta(days=40), now) == 0
    assert recency_score(now - timedelta(days=30), now) == 0


def test_recency_is_monotonically_non_increasing(now):
    scores = [recency_score(now - timedelta(days=d), now) for d in range(0, 45)]
    assert all(a >= b for a, b in zip(scores, scores[1:]))
    assert all(0 <= s <= 30 for s in scores)


def test_recency_uses_whole_days(now):
    # 1 día y 23 horas cuenta como 1 día
    assert recency_score(now - timedelta(days=1, hours=23), now) == 29
    assert days_since(now - timedelta(hours=23), now) == 0


def test_recency_future_posting_counts_as_today(now):
    assert recency_score(now + timedelta(days=3), now) == 30


def test_recency_custom_window(now):
    assert recency_score(now - timedelta(days=5), now, window_days=10, max_score=20) == 10
    assert recency_score(now, now, window_days=0) == 0


def test_round_half_up():
    assert round_half_up(46.5) == 47
    assert round_half_up(47.49) == 47


def test_location_boost_case_insensitive_membership():
    assert location_boost("Aracaju", {"aracaju"}) == 0.2
    assert location_boost("São Cristóvão", {"sao cristovao", "lagarto"}) == 0.2
    assert location_boost("ARACAJU", {"Aracaju"}, bonus=0.5) == 0.5


def test_location_boost_without_match_or_locations():
    assert location_boost("Lagarto", {"aracaju"}) == 0.0
    assert location_boost("Aracaju", set()) == 0.0
    assert location_boost(None, {"aracaju"}) == 0.0
