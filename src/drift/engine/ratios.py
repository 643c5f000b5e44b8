"""
Working Weight Estimation

Used when the user has never done an exercise before: estimate from a related
lift they have a working weight for, else fall back to a conservative slot
default.
"""

import logging
from typing import Dict, List, NamedTuple, Optional

from ..config import DEFAULT_CONFIG, EngineConfig
from ..models import Exercise
from .volume import round_half_up

logger = logging.getLogger(__name__)


class ExerciseRatio(NamedTuple):
    exercise_id: str
    base_exercise_id: str
    ratio: float


# If the user has never done exercise X, estimate it from exercise Y.
# e.g. DB bench per hand ~= 75% of barbell bench.
EXERCISE_RATIOS: List[ExerciseRatio] = [
    # Push - horizontal
    ExerciseRatio("db_bench", "barbell_bench", 0.75),
    ExerciseRatio("machine_chest_press", "barbell_bench", 0.85),
    ExerciseRatio("incline_db_press", "incline_barbell_press", 0.75),
    ExerciseRatio("incline_barbell_press", "barbell_bench", 0.85),
    ExerciseRatio("decline_press", "barbell_bench", 1.05),
    ExerciseRatio("cable_press", "db_bench", 1.0),
    ExerciseRatio("smith_bench", "barbell_bench", 0.90),

    # Push - vertical
    ExerciseRatio("db_shoulder_press", "barbell_ohp", 0.70),
    ExerciseRatio("machine_shoulder_press", "barbell_ohp", 0.80),
    ExerciseRatio("landmine_press", "barbell_ohp", 0.75),

    # Push - isolation
    ExerciseRatio("cable_fly", "db_bench", 0.35),
    ExerciseRatio("db_fly", "db_bench", 0.30),
    ExerciseRatio("pec_deck", "machine_chest_press", 0.40),
    ExerciseRatio("lateral_raise", "db_shoulder_press", 0.20),
    ExerciseRatio("front_raise", "db_shoulder_press", 0.25),
    ExerciseRatio("tricep_pushdown", "barbell_bench", 0.25),
    ExerciseRatio("overhead_tricep_ext", "barbell_bench", 0.20),

    # Pull - horizontal
    ExerciseRatio("db_row", "barbell_row", 0.70),
    ExerciseRatio("cable_row", "barbell_row", 0.80),
    ExerciseRatio("machine_row", "barbell_row", 0.85),
    ExerciseRatio("chest_supported_row", "barbell_row", 0.75),
    ExerciseRatio("pendlay_row", "barbell_row", 0.90),
    ExerciseRatio("tbar_row", "barbell_row", 0.80),

    # Pull - vertical
    ExerciseRatio("lat_pulldown", "weighted_pullup", 0.80),
    ExerciseRatio("underhand_lat_pulldown", "weighted_chinup", 0.80),

    # Pull - isolation
    ExerciseRatio("db_curl", "barbell_curl", 0.75),
    ExerciseRatio("hammer_curl", "db_curl", 1.10),
    ExerciseRatio("cable_curl", "barbell_curl", 0.80),
    ExerciseRatio("preacher_curl", "barbell_curl", 0.70),
    ExerciseRatio("rear_delt_fly", "lateral_raise", 0.80),
    ExerciseRatio("shrugs", "barbell_deadlift", 0.40),

    # Legs - squat
    ExerciseRatio("front_squat", "back_squat", 0.80),
    ExerciseRatio("leg_press", "back_squat", 1.50),
    ExerciseRatio("hack_squat", "back_squat", 1.20),
    ExerciseRatio("smith_squat", "back_squat", 0.90),
    ExerciseRatio("goblet_squat", "back_squat", 0.40),

    # Legs - hinge
    ExerciseRatio("romanian_deadlift", "barbell_deadlift", 0.70),
    ExerciseRatio("db_rdl", "romanian_deadlift", 0.70),

    # Legs - lunge
    ExerciseRatio("db_lunges", "back_squat", 0.35),
    ExerciseRatio("walking_lunges", "db_lunges", 0.90),
    ExerciseRatio("barbell_lunges", "back_squat", 0.60),
    ExerciseRatio("bulgarian_split_squat", "db_lunges", 1.10),
    ExerciseRatio("step_ups", "db_lunges", 0.85),

    # Legs - isolation
    ExerciseRatio("leg_extension", "leg_press", 0.35),
    ExerciseRatio("leg_curl", "leg_press", 0.30),
    ExerciseRatio("seated_leg_curl", "leg_curl", 0.90),
    ExerciseRatio("calf_raise", "leg_press", 0.50),
    ExerciseRatio("seated_calf_raise", "calf_raise", 0.70),
    ExerciseRatio("hip_thrust", "romanian_deadlift", 0.80),
]

_RATIO_INDEX: Dict[str, ExerciseRatio] = {r.exercise_id: r for r in EXERCISE_RATIOS}


def _known(weights: Dict[str, float], exercise_id: str) -> Optional[float]:
    weight = weights.get(exercise_id)
    if weight is None or weight <= 0:
        return None
    return weight


def get_estimated_weight(
    exercise_id: str,
    known_weights: Dict[str, float],
    ratios: Optional[Dict[str, ExerciseRatio]] = None
) -> Optional[float]:
    """
    Estimate a working weight from a related exercise.

    Args:
        exercise_id: Exercise to estimate
        known_weights: Exercise id -> working weight
        ratios: Ratio table keyed by target exercise (default: EXERCISE_RATIOS)

    Returns:
        Estimated weight rounded to a whole unit, or None if no ratio applies,
        the base exercise has no known weight, or the estimate rounds to zero
    """
    ratios = _RATIO_INDEX if ratios is None else ratios
    ratio = ratios.get(exercise_id)
    if ratio is None:
        return None

    base_weight = _known(known_weights, ratio.base_exercise_id)
    if base_weight is None:
        return None

    estimated = round_half_up(base_weight * ratio.ratio)
    if estimated <= 0:
        return None
    return float(estimated)


def resolve_working_weight(
    exercise: Exercise,
    working_weights: Dict[str, float],
    config: EngineConfig = DEFAULT_CONFIG
) -> float:
    """
    Get the working weight for an exercise with fallback estimation.

    Order: direct lookup, ratio estimate, conservative slot default.
    Never raises; missing data is a recoverable condition.
    """
    direct = _known(working_weights, exercise.id)
    if direct is not None:
        return direct

    estimated = get_estimated_weight(exercise.id, working_weights)
    if estimated is not None:
        logger.info(f"Estimated working weight for {exercise.id}: {estimated:.0f} (ratio)")
        return estimated

    default = config.slot_default_weights[exercise.slot.value]
    logger.info(f"No working weight for {exercise.id}, using slot {exercise.slot.value} default {default:.0f}")
    return default
