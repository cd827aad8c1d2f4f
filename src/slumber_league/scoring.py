"""
Score and rank tier for a night of sleep.

The score compares total sleep to a fixed daily goal; tiers are a step
function of the score. Both are recomputed on every read and never stored.
"""

import math
from enum import StrEnum
from typing import Final

from pydantic import BaseModel

DAILY_GOAL_MINUTES: Final[int] = 480
MAX_SCORE: Final[int] = 100


class RankTier(StrEnum):
    BRONZE = "BRONZE"
    SILVER = "SILVER"
    GOLD = "GOLD"
    PLATINUM = "PLATINUM"
    DIAMOND = "DIAMOND"


# Inclusive lower bounds, highest first
TIER_THRESHOLDS: Final[tuple[tuple[int, RankTier], ...]] = (
    (100, RankTier.DIAMOND),
    (90, RankTier.PLATINUM),
    (75, RankTier.GOLD),
    (50, RankTier.SILVER),
)


class NightlyScore(BaseModel):
    score: int
    rankTier: RankTier


class NightDisplay(BaseModel):
    score: int
    rankTier: RankTier
    progressRatio: float
    lightMinutes: int


def _minutes(value: int | float | None) -> float:
    if value is None or not math.isfinite(value) or value < 0:
        return 0.0
    return float(value)


def compute_score(total_minutes: int | float | None, goal_minutes: int = DAILY_GOAL_MINUTES) -> int:
    """Percentage of the goal slept, rounded half up and capped at 100."""
    total = _minutes(total_minutes)
    if goal_minutes <= 0:
        return 0
    return min(MAX_SCORE, int(math.floor(total / goal_minutes * 100 + 0.5)))


def rank_tier(score_value: int) -> RankTier:
    for threshold, tier in TIER_THRESHOLDS:
        if score_value >= threshold:
            return tier
    return RankTier.BRONZE


def nightly_score(total_minutes: int | float | None, goal_minutes: int = DAILY_GOAL_MINUTES) -> NightlyScore:
    value = compute_score(total_minutes, goal_minutes)
    return NightlyScore(score=value, rankTier=rank_tier(value))


def progress_ratio(total_minutes: int | float | None, goal_minutes: int = DAILY_GOAL_MINUTES) -> float:
    if goal_minutes <= 0:
        return 0.0
    return min(1.0, _minutes(total_minutes) / goal_minutes)


def light_minutes(total_minutes: int | float | None, rem_minutes: int | float | None, deep_minutes: int | float | None) -> int:
    """Sleep not accounted for by REM or deep; never negative."""
    return int(max(0.0, _minutes(total_minutes) - _minutes(rem_minutes) - _minutes(deep_minutes)))


def night_display(
    total_minutes: int | float | None,
    rem_minutes: int | float | None = 0,
    deep_minutes: int | float | None = 0,
    goal_minutes: int = DAILY_GOAL_MINUTES,
) -> NightDisplay:
    scored = nightly_score(total_minutes, goal_minutes)
    return NightDisplay(
        score=scored.score,
        rankTier=scored.rankTier,
        progressRatio=progress_ratio(total_minutes, goal_minutes),
        lightMinutes=light_minutes(total_minutes, rem_minutes, deep_minutes),
    )
