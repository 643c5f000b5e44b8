"""
Onboarding

Internal Codename: FIRST-WEEK
Derives a new user's starting weekly targets and working weights from
bodyweight, experience level and goal, and opens their first week.

Weekly volume = bodyweight x experience multiplier x goal multiplier,
rounded to the nearest 1000, then split evenly across push/pull/legs and
rounded to the nearest 100.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Optional, Tuple

from .config import DEFAULT_CONFIG, EngineConfig
from .engine.volume import round_half_up
from .engine.week import create_week_record, week_start_for
from .errors import ConfigurationError
from .models import ExperienceLevel, Goal, MuscleGroup, UserProfile, WeekRecord

logger = logging.getLogger(__name__)

# Weekly volume per unit of bodyweight
EXPERIENCE_MULTIPLIERS: Dict[ExperienceLevel, float] = {
    ExperienceLevel.BEGINNER: 100,
    ExperienceLevel.INTERMEDIATE: 175,
    ExperienceLevel.ADVANCED: 300,
}

GOAL_MULTIPLIERS: Dict[Goal, float] = {
    Goal.STRENGTH: 0.8,
    Goal.HYPERTROPHY: 1.0,
    Goal.ENDURANCE: 0.7,
    Goal.GENERAL: 0.9,
}

# (bench, squat, deadlift)
STARTING_WEIGHTS: Dict[ExperienceLevel, Tuple[float, float, float]] = {
    ExperienceLevel.BEGINNER: (45, 45, 95),
    ExperienceLevel.INTERMEDIATE: (135, 185, 225),
    ExperienceLevel.ADVANCED: (225, 315, 405),
}


def calculate_weekly_volume(bodyweight: float, experience: ExperienceLevel, goal: Goal) -> float:
    """Total weekly volume across all groups, rounded to the nearest 1000."""
    raw = bodyweight * EXPERIENCE_MULTIPLIERS[experience] * GOAL_MULTIPLIERS[goal]
    return float(round_half_up(raw / 1000) * 1000)


def per_group_target(total_weekly_volume: float) -> float:
    """Even three-way split rounded to the nearest 100."""
    return float(round_half_up(total_weekly_volume / 3 / 100) * 100)


def starting_working_weights(experience: ExperienceLevel) -> Dict[str, float]:
    """Seed the big three plus lifts derived from them."""
    bench, squat, deadlift = STARTING_WEIGHTS[experience]
    return {
        'barbell_bench': float(bench),
        'back_squat': float(squat),
        'barbell_deadlift': float(deadlift),
        'db_bench': float(round_half_up(bench * 0.75)),
        'incline_barbell_press': float(round_half_up(bench * 0.85)),
        'barbell_row': float(round_half_up(deadlift * 0.7)),
        'leg_press': float(round_half_up(squat * 1.5)),
    }


def build_profile(
    bodyweight: float,
    experience: ExperienceLevel,
    training_days: int,
    goal: Goal = Goal.HYPERTROPHY,
    week_start: Optional[date] = None
) -> UserProfile:
    """
    Create a week-1 profile.

    Args:
        bodyweight: User's bodyweight
        experience: Experience level
        training_days: Training days per week (3-7)
        goal: Training goal
        week_start: Monday of the first week

    Raises:
        ConfigurationError: bodyweight is not positive
    """
    if bodyweight <= 0:
        raise ConfigurationError(f"Bodyweight must be positive, got {bodyweight}")

    total = calculate_weekly_volume(bodyweight, experience, goal)
    target = per_group_target(total)

    logger.info(
        f"Calculated weekly volume: ~{total:.0f} ({bodyweight:g} x "
        f"{EXPERIENCE_MULTIPLIERS[experience]:g} x {GOAL_MULTIPLIERS[goal]:g}), per group {target:.0f}"
    )

    return UserProfile(
        bodyweight=bodyweight,
        experience_level=experience,
        training_days_per_week=training_days,
        goal=goal,
        current_week=1,
        week_start=week_start,
        weekly_targets={group: target for group in MuscleGroup},
        starting_volume={group: target for group in MuscleGroup},
        working_weights=starting_working_weights(experience),
    )


def onboard(
    bodyweight: float,
    experience: ExperienceLevel,
    training_days: int,
    goal: Goal,
    today: date,
    config: EngineConfig = DEFAULT_CONFIG
) -> Tuple[UserProfile, WeekRecord]:
    """Build the profile and open week 1 starting on this week's Monday."""
    week_start = week_start_for(today)
    profile = build_profile(bodyweight, experience, training_days, goal, week_start)
    week = create_week_record(1, week_start, profile.weekly_targets, training_days, goal, config)
    return profile, week
