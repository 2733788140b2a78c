"""Tests for counters, streaks, leaderboards and badges."""

from __future__ import annotations

from datetime import date

import pytest

from findr.models import Rarity
from findr.stats import (
    CATALOG,
    Metric,
    average_confidence,
    build_leaderboard,
    count_by_type,
    current_streak,
    earned_badges,
    evaluate_badges,
    favorite_type,
    leaderboard_score,
    rare_count,
    unique_species,
    user_stats,
)

TODAY = date(2025, 6, 15)


# =============================================================================
# Counters
# =============================================================================


class TestCounters:
    """Per-owner counters."""

    def test_count_by_type(self, make_sighting) -> None:
        sightings = [make_sighting(type="Bird"), make_sighting(type="Mammal"), make_sighting(type="Bird")]
        assert count_by_type(sightings) == {"Bird": 2, "Mammal": 1}

    def test_favorite_type_tie_goes_to_first(self, make_sighting) -> None:
        sightings = [make_sighting(type="Mammal"), make_sighting(type="Bird")]
        assert favorite_type(sightings) == "Mammal"

    def test_favorite_type_mode(self, make_sighting) -> None:
        sightings = [make_sighting(type="Mammal"), make_sighting(type="Bird"), make_sighting(type="Bird")]
        assert favorite_type(sightings) == "Bird"

    def test_favorite_type_empty(self) -> None:
        assert favorite_type([]) is None

    def test_unique_species(self, make_sighting) -> None:
        sightings = [make_sighting(name="Owl"), make_sighting(name="Owl"), make_sighting(name="Fox")]
        assert unique_species(sightings) == 2

    def test_rare_count(self, make_sighting) -> None:
        sightings = [
            make_sighting(rarity=Rarity.RARE.value),
            make_sighting(rarity=Rarity.UNEXPECTED.value),
            make_sighting(rarity=Rarity.COMMON.value),
            make_sighting(),
        ]
        assert rare_count(sightings) == 2

    def test_average_confidence_over_ai_detections(self, make_sighting) -> None:
        sightings = [
            make_sighting(is_animal=True, confidence=80),
            make_sighting(is_animal=True, confidence=71),
            make_sighting(is_animal=False, confidence=10),
            make_sighting(is_animal=True, confidence=0),
        ]
        assert average_confidence(sightings) == 76

    def test_average_confidence_none(self) -> None:
        assert average_confidence([]) == 0


# =============================================================================
# Streaks
# =============================================================================


class TestStreak:
    """Consecutive days counted back from today."""

    def test_gap_breaks_streak(self, make_sighting) -> None:
        sightings = [make_sighting(days_ago=0), make_sighting(days_ago=1), make_sighting(days_ago=3)]
        assert current_streak(sightings, TODAY) == 2

    def test_no_sighting_today(self, make_sighting) -> None:
        sightings = [make_sighting(days_ago=1), make_sighting(days_ago=2)]
        assert current_streak(sightings, TODAY) == 0

    def test_several_on_one_day(self, make_sighting) -> None:
        sightings = [make_sighting(days_ago=0), make_sighting(days_ago=0)]
        assert current_streak(sightings, TODAY) == 1

    def test_seven_days(self, make_sighting) -> None:
        sightings = [make_sighting(days_ago=d) for d in range(7)]
        assert current_streak(sightings, TODAY) == 7

    def test_empty(self) -> None:
        assert current_streak([], TODAY) == 0


# =============================================================================
# Leaderboard
# =============================================================================


class TestLeaderboard:
    """Scores and ranking."""

    def test_score_formula(self) -> None:
        assert leaderboard_score(total=5, rare=2) == 9

    def test_score_from_sightings(self, make_sighting) -> None:
        sightings = [make_sighting(rarity=Rarity.RARE.value) for _ in range(2)] + [make_sighting() for _ in range(3)]
        [entry] = build_leaderboard(sightings)
        assert (entry.total, entry.rare, entry.score) == (5, 2, 9)

    def test_rarity_change_updates_score(self, make_sighting) -> None:
        sightings = [make_sighting() for _ in range(3)]
        assert build_leaderboard(sightings)[0].score == 3

        sightings[0] = sightings[0].model_copy(update={"rarity": Rarity.RARE})
        assert build_leaderboard(sightings)[0].score == 5

    def test_ranking_by_metric(self, make_sighting) -> None:
        sightings = [
            make_sighting(user_id="many"),
            make_sighting(user_id="many"),
            make_sighting(user_id="many"),
            make_sighting(user_id="rare", rarity=Rarity.RARE.value),
            make_sighting(user_id="rare", rarity=Rarity.UNEXPECTED.value),
        ]
        overall = build_leaderboard(sightings, Metric.OVERALL)
        assert [(e.user_id, e.score) for e in overall] == [("rare", 6), ("many", 3)]

        total = build_leaderboard(sightings, "total")
        assert [e.user_id for e in total] == ["many", "rare"]

        rare = build_leaderboard(sightings, "rare")
        assert [e.user_id for e in rare] == ["rare", "many"]
        assert [e.rank for e in rare] == [1, 2]

    def test_ties_keep_input_order(self, make_sighting) -> None:
        sightings = [make_sighting(user_id="b"), make_sighting(user_id="a"), make_sighting(user_id="c")]
        assert [e.user_id for e in build_leaderboard(sightings)] == ["b", "a", "c"]

    def test_usernames(self, make_sighting) -> None:
        board = build_leaderboard([make_sighting(user_id="u-1")], usernames={"u-1": "ana"})
        assert board[0].username == "ana"

    def test_unknown_metric(self, make_sighting) -> None:
        with pytest.raises(ValueError):
            build_leaderboard([make_sighting()], "speed")


# =============================================================================
# User stats and badges
# =============================================================================


class TestUserStats:
    """Bundled counters."""

    def test_user_stats(self, make_sighting) -> None:
        sightings = [
            make_sighting(user_id="u-1", type="Bird", name="Owl", days_ago=0, rarity=Rarity.RARE.value),
            make_sighting(user_id="u-1", type="Bird", name="Jay", days_ago=1),
            make_sighting(user_id="u-1", type="Mammal", name="Fox", days_ago=3, is_animal=True, confidence=60),
            make_sighting(user_id="u-2", type="Bird", name="Owl"),
        ]
        stats = user_stats(sightings, "u-1", TODAY)
        assert stats.total == 3
        assert stats.birds == 2
        assert stats.mammals == 1
        assert stats.favorite_type == "Bird"
        assert stats.unique_species == 3
        assert stats.rare == 1
        assert stats.ai_detected == 1
        assert stats.average_confidence == 60
        assert stats.streak == 2
        assert stats.score == 5
        assert stats.rank == 1

    def test_user_without_sightings(self, make_sighting) -> None:
        stats = user_stats([make_sighting(user_id="other")], "u-1", TODAY)
        assert stats.total == 0
        assert stats.rank is None
        assert stats.favorite_type is None


class TestBadges:
    """Badge predicates."""

    def test_catalog_order(self) -> None:
        assert [b.id for b in CATALOG] == [
            "first_spot",
            "bird_watcher",
            "mammal_tracker",
            "explorer",
            "streak_master",
            "ai_explorer",
            "rare_hunter",
            "top_ten",
        ]

    def test_new_user_earns_nothing(self) -> None:
        stats = user_stats([], "u-1", TODAY)
        assert not any(status.earned for status in evaluate_badges(stats))

    def test_first_spot_and_top_ten(self, make_sighting) -> None:
        stats = user_stats([make_sighting(user_id="u-1")], "u-1", TODAY)
        assert {b.id for b in earned_badges(stats)} == {"first_spot", "top_ten"}

    def test_thresholds(self, make_sighting) -> None:
        sightings = [
            make_sighting(type="Bird", days_ago=d, is_animal=True, confidence=70, rarity=Rarity.RARE.value)
            for d in range(7)
        ] + [make_sighting(type="Mammal", days_ago=0) for _ in range(3)]
        earned = {b.id for b in earned_badges(user_stats(sightings, "u-1", TODAY))}
        assert earned == {
            "first_spot",
            "bird_watcher",
            "mammal_tracker",
            "explorer",
            "streak_master",
            "ai_explorer",
            "rare_hunter",
            "top_ten",
        }

    def test_outside_top_ten(self, make_sighting) -> None:
        sightings = [make_sighting(user_id=f"u-{i}") for i in range(10) for _ in range(2)]
        sightings.append(make_sighting(user_id="last"))
        stats = user_stats(sightings, "last", TODAY)
        assert stats.rank == 11
        assert "top_ten" not in {b.id for b in earned_badges(stats)}
