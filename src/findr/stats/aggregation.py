"""Counters, streaks and leaderboards over a sighting collection.

Everything here is a pure function of its inputs and is recomputed from a
full scan on every call; callers pass the current collection.

Example:
    >>> from findr.stats import build_leaderboard, leaderboard_score
    >>> leaderboard_score(total=5, rare=2)
    9
    >>> board = build_leaderboard(sightings, metric="overall")
    >>> board[0].rank
    1
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from enum import Enum

from findr.models.sighting import Sighting

RARE_WEIGHT = 2


class Metric(str, Enum):
    """Leaderboard ranking metric."""

    OVERALL = "overall"
    TOTAL = "total"
    RARE = "rare"


@dataclass(frozen=True)
class LeaderboardEntry:
    """One row of a ranked leaderboard."""

    rank: int
    user_id: str
    total: int
    rare: int
    score: int
    username: str | None = None

    def value(self, metric: Metric) -> int:
        if metric is Metric.TOTAL:
            return self.total
        if metric is Metric.RARE:
            return self.rare
        return self.score


@dataclass(frozen=True)
class UserStats:
    """Aggregated counters for one observer."""

    user_id: str
    total: int
    by_type: dict[str, int]
    favorite_type: str | None
    unique_species: int
    rare: int
    ai_detected: int
    average_confidence: int
    streak: int
    score: int
    rank: int | None

    @property
    def birds(self) -> int:
        return self.by_type.get("Bird", 0)

    @property
    def mammals(self) -> int:
        return self.by_type.get("Mammal", 0)


def owned_by(sightings: Iterable[Sighting], user_id: str) -> list[Sighting]:
    return [s for s in sightings if s.user_id == user_id]


def count_by_type(sightings: Iterable[Sighting]) -> dict[str, int]:
    """Sighting count per ``type``, in first-encountered order."""
    return dict(Counter(s.type for s in sightings))


def favorite_type(sightings: Iterable[Sighting]) -> str | None:
    """Most frequent ``type``; ties go to the first encountered."""
    counts = Counter(s.type for s in sightings)
    if not counts:
        return None
    # most_common sorts stably, so equal counts keep insertion order
    return counts.most_common(1)[0][0]


def unique_species(sightings: Iterable[Sighting]) -> int:
    """Number of distinct sighting names."""
    return len({s.name for s in sightings})


def rare_count(sightings: Iterable[Sighting]) -> int:
    return sum(1 for s in sightings if s.is_rare)


def ai_detected(sightings: Iterable[Sighting]) -> list[Sighting]:
    """Sightings the model recognized as a creature with some confidence."""
    return [s for s in sightings if s.is_animal and s.confidence > 0]


def average_confidence(sightings: Iterable[Sighting]) -> int:
    """Rounded mean confidence over AI-detected sightings, 0 if none."""
    detected = ai_detected(sightings)
    if not detected:
        return 0
    return round(sum(s.confidence for s in detected) / len(detected))


def current_streak(sightings: Iterable[Sighting], today: date | None = None) -> int:
    """Consecutive calendar days with a sighting, counting back from today.

    A day without a sighting ends the walk, so a sighting on today and
    yesterday plus one three days ago is a streak of 2.
    """
    day = today or datetime.now(UTC).date()
    days = {s.timestamp.date() for s in sightings}
    streak = 0
    while day in days:
        streak += 1
        day -= timedelta(days=1)
    return streak


def leaderboard_score(total: int, rare: int) -> int:
    """``total + 2 * rare``."""
    return total + RARE_WEIGHT * rare


def build_leaderboard(
    sightings: Sequence[Sighting],
    metric: Metric | str = Metric.OVERALL,
    usernames: Mapping[str, str | None] | None = None,
) -> list[LeaderboardEntry]:
    """Rank every observer in ``sightings`` by ``metric``, highest first.

    Ties keep the order in which observers first appear in ``sightings``.

    Args:
        sightings: The full collection
        metric: ``overall`` (score), ``total`` or ``rare``
        usernames: Optional display names keyed by user id
    """
    metric = Metric(metric)
    totals: dict[str, int] = {}
    rares: dict[str, int] = {}
    for s in sightings:
        totals[s.user_id] = totals.get(s.user_id, 0) + 1
        rares[s.user_id] = rares.get(s.user_id, 0) + (1 if s.is_rare else 0)

    unranked = [
        LeaderboardEntry(
            rank=0,
            user_id=user_id,
            total=total,
            rare=rares[user_id],
            score=leaderboard_score(total, rares[user_id]),
            username=(usernames or {}).get(user_id),
        )
        for user_id, total in totals.items()
    ]
    ordered = sorted(unranked, key=lambda e: e.value(metric), reverse=True)
    return [
        LeaderboardEntry(
            rank=position,
            user_id=e.user_id,
            total=e.total,
            rare=e.rare,
            score=e.score,
            username=e.username,
        )
        for position, e in enumerate(ordered, start=1)
    ]


def rank_of(board: Iterable[LeaderboardEntry], user_id: str) -> int | None:
    for entry in board:
        if entry.user_id == user_id:
            return entry.rank
    return None


def user_stats(
    sightings: Sequence[Sighting],
    user_id: str,
    today: date | None = None,
) -> UserStats:
    """Bundle every counter for ``user_id``; rank is on the overall board."""
    mine = owned_by(sightings, user_id)
    rare = rare_count(mine)
    return UserStats(
        user_id=user_id,
        total=len(mine),
        by_type=count_by_type(mine),
        favorite_type=favorite_type(mine),
        unique_species=unique_species(mine),
        rare=rare,
        ai_detected=len(ai_detected(mine)),
        average_confidence=average_confidence(mine),
        streak=current_streak(mine, today),
        score=leaderboard_score(len(mine), rare),
        rank=rank_of(build_leaderboard(sightings), user_id),
    )
