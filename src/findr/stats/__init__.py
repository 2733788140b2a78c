"""Per-user statistics, leaderboards and badges."""

from findr.stats.aggregation import (
    LeaderboardEntry,
    Metric,
    UserStats,
    ai_detected,
    average_confidence,
    build_leaderboard,
    count_by_type,
    current_streak,
    favorite_type,
    leaderboard_score,
    owned_by,
    rank_of,
    rare_count,
    unique_species,
    user_stats,
)
from findr.stats.badges import CATALOG, Badge, BadgeStatus, earned_badges, evaluate_badges

__all__ = [
    "CATALOG",
    "Badge",
    "BadgeStatus",
    "LeaderboardEntry",
    "Metric",
    "UserStats",
    "ai_detected",
    "average_confidence",
    "build_leaderboard",
    "count_by_type",
    "current_streak",
    "earned_badges",
    "evaluate_badges",
    "favorite_type",
    "leaderboard_score",
    "owned_by",
    "rank_of",
    "rare_count",
    "unique_species",
    "user_stats",
]
