"""Badge catalog.

Badges are predicates over ``UserStats``; nothing about them is stored.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from findr.stats.aggregation import UserStats


@dataclass(frozen=True)
class Badge:
    id: str
    name: str
    description: str
    predicate: Callable[[UserStats], bool]

    def earned_by(self, stats: UserStats) -> bool:
        return self.predicate(stats)


@dataclass(frozen=True)
class BadgeStatus:
    badge: Badge
    earned: bool


CATALOG: tuple[Badge, ...] = (
    Badge("first_spot", "First Spot", "Log your first animal", lambda s: s.total >= 1),
    Badge("bird_watcher", "Bird Watcher", "Spot 3 different birds", lambda s: s.birds >= 3),
    Badge("mammal_tracker", "Mammal Tracker", "Spot 3 different mammals", lambda s: s.mammals >= 3),
    Badge("explorer", "Explorer", "Log 10 total animals", lambda s: s.total >= 10),
    Badge("streak_master", "Streak Master", "Maintain a 7-day streak", lambda s: s.streak >= 7),
    Badge("ai_explorer", "AI Explorer", "Use AI to detect 5 creatures", lambda s: s.ai_detected >= 5),
    Badge("rare_hunter", "Rare Hunter", "Find 3 rare creatures", lambda s: s.rare >= 3),
    Badge(
        "top_ten",
        "Top Ten",
        "Reach the top 10 of the leaderboard",
        lambda s: s.rank is not None and s.rank <= 10,
    ),
)


def evaluate_badges(stats: UserStats, catalog: tuple[Badge, ...] = CATALOG) -> list[BadgeStatus]:
    """Every badge in catalog order with its earned flag."""
    return [BadgeStatus(badge=b, earned=b.earned_by(stats)) for b in catalog]


def earned_badges(stats: UserStats, catalog: tuple[Badge, ...] = CATALOG) -> list[Badge]:
    return [status.badge for status in evaluate_badges(stats, catalog) if status.earned]
