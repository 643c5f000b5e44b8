"""
Overload Scheduler

Internal Codename: RAMP
RPE-driven weekly progression with a mandatory deload every fourth week and a
hard ceiling of 2x the starting volume.

Bands:
- Weeks 1-4 (newbie): RPE <= 6 -> +5%, RPE <= 8 -> +2.5%, else maintain
- Weeks 5+:           RPE <= 8 -> +2.5%, else maintain
- Deload (every 4th week): -40%, overrides RPE
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ..config import DEFAULT_CONFIG, EngineConfig
from ..models import MuscleGroup, SessionStatus, WorkoutSession
from .volume import round_half_up

logger = logging.getLogger(__name__)

# Warning thresholds relative to starting volume
APPROACHING_CAP_RATIO = 1.8
BELOW_START_RATIO = 0.8

EARLY_DELOAD_RPE = 9
EARLY_DELOAD_AVERAGE = 8.5


def is_deload_week(week_number: int, config: EngineConfig = DEFAULT_CONFIG) -> bool:
    return week_number % config.deload_frequency == 0


def next_week_target(
    current_volume: float,
    average_rpe: float,
    week_number: int,
    starting_volume: float,
    config: EngineConfig = DEFAULT_CONFIG
) -> float:
    """
    Calculate next week's volume target.

    Args:
        current_volume: This week's target volume
        average_rpe: Mean session RPE for the week (callers supply 7 if none)
        week_number: Week being closed (1-based)
        starting_volume: Week 1 volume, basis for the 2x ceiling

    Returns:
        Next week's target. Deload and capped results are exact, all others
        are rounded to a whole unit.
    """
    if current_volume <= 0:
        return 0.0

    cap = starting_volume * config.max_volume_multiplier

    if is_deload_week(week_number + 1, config):
        deload = current_volume * (1 - config.deload_reduction)
        logger.info(f"Week {week_number + 1} is a deload: {current_volume:.0f} -> {deload:.0f}")
        return min(deload, cap)

    increase = config.overload_increase(average_rpe, week_number)
    new_volume = current_volume * (1 + increase)

    if new_volume > cap:
        logger.info(f"Volume capped at {config.max_volume_multiplier:g}x starting volume ({cap:.0f})")
        return cap

    return float(min(round_half_up(new_volume), cap))


def average_session_rpe(
    sessions: Iterable[WorkoutSession],
    muscle_group: MuscleGroup,
    default: Optional[float] = None,
    config: EngineConfig = DEFAULT_CONFIG
) -> float:
    """Mean RPE of completed sessions for a group, neutral default when none are rated."""
    ratings = [
        s.session_rpe for s in sessions
        if s.muscle_group == muscle_group
        and s.status == SessionStatus.COMPLETED
        and s.session_rpe is not None
    ]
    if not ratings:
        return config.neutral_rpe if default is None else default
    return sum(ratings) / len(ratings)


# =============================================================================
# Summaries
# =============================================================================

@dataclass
class OverloadSummary:
    current_week: int
    next_week: int
    is_next_week_deload: bool
    current_volume: float
    next_volume: float
    volume_change: float
    percentage_change: float
    average_rpe: float
    reason: str


def generate_overload_summary(
    current_volume: float,
    average_rpe: float,
    week_number: int,
    starting_volume: float,
    config: EngineConfig = DEFAULT_CONFIG
) -> OverloadSummary:
    """Next week's target together with a human-readable reason."""
    next_week = week_number + 1
    next_volume = next_week_target(current_volume, average_rpe, week_number, starting_volume, config)
    change = next_volume - current_volume
    percentage = change / current_volume * 100 if current_volume > 0 else 0.0
    deload = is_deload_week(next_week, config)

    if deload:
        reason = f"Deload week ({config.deload_reduction * 100:g}% reduction for recovery)"
    elif change > 0:
        label = "Newbie gains" if week_number <= 4 else "Progressive overload"
        reason = f"{label} (+{round_half_up(percentage)}%, RPE: {average_rpe:.1f})"
    elif change == 0:
        reason = f"Maintain volume (RPE too high: {average_rpe:.1f})"
    else:
        reason = f"Volume reduction ({abs(round_half_up(percentage))}%)"

    return OverloadSummary(
        current_week=week_number,
        next_week=next_week,
        is_next_week_deload=deload,
        current_volume=current_volume,
        next_volume=next_volume,
        volume_change=change,
        percentage_change=percentage,
        average_rpe=average_rpe,
        reason=reason,
    )


def validate_volume(current_volume: float, starting_volume: float) -> Optional[str]:
    """
    Warn when volume drifts far from the starting level.

    Returns:
        Warning text, or None when volume is in the comfortable band
    """
    if starting_volume <= 0:
        return None

    ratio = current_volume / starting_volume
    if ratio >= APPROACHING_CAP_RATIO:
        return f"Volume approaching 2x limit ({ratio * 100:.0f}% of starting volume)"
    if ratio < BELOW_START_RATIO:
        return f"Volume significantly below starting level ({ratio * 100:.0f}% of starting volume)"
    return None


def next_deload_week(current_week: int, config: EngineConfig = DEFAULT_CONFIG) -> int:
    """Next deload strictly after current_week (4 -> 8, 5 -> 8)."""
    return current_week + (config.deload_frequency - current_week % config.deload_frequency)


def should_consider_early_deload(recent_rpes: List[float]) -> Tuple[bool, Optional[str]]:
    """
    Flag sustained high effort.

    Args:
        recent_rpes: Session RPEs, oldest first

    Returns:
        Tuple of (should_deload, reason)
    """
    if len(recent_rpes) < 3:
        return False, None

    if all(rpe >= EARLY_DELOAD_RPE for rpe in recent_rpes[-3:]):
        return True, f"Last 3 sessions were RPE >= {EARLY_DELOAD_RPE} (overtraining risk)"

    if len(recent_rpes) >= 5:
        last5 = recent_rpes[-5:]
        avg = sum(last5) / len(last5)
        if avg >= EARLY_DELOAD_AVERAGE:
            return True, f"Average RPE over last 5 sessions: {avg:.1f} (fatigue accumulation)"

    return False, None


@dataclass
class ProgressionMetrics:
    total_weeks: int
    starting_volume: float
    current_volume: float
    total_increase: float
    percentage_gain: float
    avg_weekly_increase: float
    deloads_completed: int


def calculate_progression_metrics(
    week_number: int,
    starting_volume: float,
    current_volume: float,
    config: EngineConfig = DEFAULT_CONFIG
) -> ProgressionMetrics:
    total_increase = current_volume - starting_volume
    return ProgressionMetrics(
        total_weeks=week_number,
        starting_volume=starting_volume,
        current_volume=current_volume,
        total_increase=total_increase,
        percentage_gain=total_increase / starting_volume * 100 if starting_volume > 0 else 0.0,
        avg_weekly_increase=total_increase / week_number if week_number > 0 else 0.0,
        deloads_completed=week_number // config.deload_frequency,
    )
