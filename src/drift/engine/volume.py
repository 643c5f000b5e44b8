"""
Volume Accounting

Internal Codename: TONNAGE
Converts logged repetitions into volume (lbs moved) and scales session
volume by pre-workout readiness.

Rules:
- Warm-up sets = 0 volume
- Bodyweight exercises = (bodyweight x multiplier) x reps
- Unilateral exercises = weight x reps x 2
- Standard = weight x reps
"""

import copy
import logging
import math
from datetime import datetime
from typing import Iterable, Optional

from ..config import DEFAULT_CONFIG, EngineConfig
from ..errors import ConfigurationError, SessionStateError
from ..models import (
    CheckIn,
    Equipment,
    Exercise,
    LoggedSet,
    Mood,
    SessionStatus,
    WorkoutExercise,
    WorkoutSession,
)

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest whole number, halves away from zero (2.5 -> 3)."""
    if value < 0:
        return -round_half_up(-value)
    return int(math.floor(value + 0.5))


# =============================================================================
# Volume calculation
# =============================================================================

def calculate_volume(
    logged_set: LoggedSet,
    exercise: Exercise,
    bodyweight: Optional[float] = None
) -> float:
    """
    Calculate volume for a single set.

    Args:
        logged_set: The performed set
        exercise: Catalog entry the set was performed on
        bodyweight: User's bodyweight, required for bodyweight exercises

    Returns:
        Volume in weight units

    Raises:
        ConfigurationError: Bodyweight exercise without a multiplier or bodyweight
    """
    if logged_set.is_warmup:
        return 0.0

    if exercise.equipment == Equipment.BODYWEIGHT:
        if not exercise.bodyweight_multiplier or not bodyweight or bodyweight <= 0:
            raise ConfigurationError(
                f"Bodyweight exercise {exercise.id} requires bodyweight_multiplier and user bodyweight"
            )
        return bodyweight * exercise.bodyweight_multiplier * logged_set.reps

    if exercise.is_unilateral:
        return logged_set.weight * logged_set.reps * 2

    return logged_set.weight * logged_set.reps


def calculate_total_volume(
    sets: Iterable[LoggedSet],
    exercise: Exercise,
    bodyweight: Optional[float] = None
) -> float:
    """Sum of per-set volume."""
    return sum(calculate_volume(s, exercise, bodyweight) for s in sets)


# =============================================================================
# Readiness
# =============================================================================

def readiness_multiplier(mood: Mood, config: EngineConfig = DEFAULT_CONFIG) -> float:
    return config.readiness_multipliers[mood.value]


def adjust_volume_for_check_in(
    base_volume: float,
    check_in: Optional[CheckIn],
    config: EngineConfig = DEFAULT_CONFIG
) -> float:
    """
    Scale base session volume by the check-in mood.

    great -> x1.00, okay -> x0.90, rough -> x0.80. No check-in means no
    adjustment.
    """
    if check_in is None or base_volume <= 0:
        return max(base_volume, 0.0)
    return base_volume * readiness_multiplier(check_in.mood, config)


def needs_easy_swaps(check_in: Optional[CheckIn]) -> bool:
    """Rough mood, poor sleep or soreness favors low-stabilization equipment."""
    if check_in is None:
        return False
    return check_in.mood == Mood.ROUGH or not check_in.good_sleep or not check_in.not_sore


# =============================================================================
# Set logging
# =============================================================================

def is_exercise_complete(workout_exercise: WorkoutExercise) -> bool:
    """Completed once non-warm-up sets reach the prescribed count."""
    return len(workout_exercise.working_sets) >= workout_exercise.prescribed_sets


def log_set(
    session: WorkoutSession,
    exercise_index: int,
    weight: float,
    reps: int,
    is_warmup: bool = False,
    rpe: Optional[float] = None,
    bodyweight: Optional[float] = None,
    logged_at: Optional[datetime] = None
) -> WorkoutSession:
    """
    Append a set to one exercise of a session.

    Args:
        session: Session being trained
        exercise_index: Position of the exercise in the session
        weight: Weight used
        reps: Reps completed
        is_warmup: Warm-up sets are recorded but add no volume
        rpe: Optional per-set effort
        bodyweight: User's bodyweight (needed for bodyweight exercises)
        logged_at: Timestamp assigned by the caller

    Returns:
        A new session with volumes and completion flags recomputed

    Raises:
        SessionStateError: Session is already completed or skipped
        IndexError: No exercise at exercise_index
    """
    if session.is_finalized:
        raise SessionStateError(f"Cannot log sets to a {session.status.value} session")

    if not 0 <= exercise_index < len(session.exercises):
        raise IndexError(f"No exercise at index {exercise_index} (session has {len(session.exercises)})")

    updated = copy.deepcopy(session)
    workout_exercise = updated.exercises[exercise_index]

    logged = LoggedSet(
        set_number=len(workout_exercise.logged_sets) + 1,
        weight=weight,
        reps=reps,
        is_warmup=is_warmup,
        rpe=rpe,
        logged_at=logged_at,
    )
    workout_exercise.logged_sets.append(logged)

    workout_exercise.actual_volume = calculate_total_volume(
        workout_exercise.logged_sets, workout_exercise.exercise, bodyweight
    )
    workout_exercise.completed = is_exercise_complete(workout_exercise)
    updated.actual_volume = sum(ex.actual_volume for ex in updated.exercises)

    if updated.status == SessionStatus.PLANNED:
        updated.status = SessionStatus.IN_PROGRESS

    logger.debug(
        f"Logged set {logged.set_number} on {workout_exercise.exercise.id}: "
        f"{weight} x {reps}{' (warm-up)' if is_warmup else ''}, "
        f"session volume {updated.actual_volume:.0f}/{updated.target_volume:.0f}"
    )

    return updated
