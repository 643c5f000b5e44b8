"""
Prescription Builder

Internal Codename: SLOT-THEORY
Turns a session volume target into sets x reps x weight for three intensity
slots, then assembles a planned WorkoutSession.

Slot split:
- Slot 1 (heavy):     50% of volume, 5-8 reps
- Slot 2 (moderate):  30% of volume, 8-12 reps
- Slot 3 (isolation): 20% of volume, 12-15 reps
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import DEFAULT_CONFIG, EngineConfig
from ..errors import ConfigurationError, InsufficientExercisesError
from ..models import (
    CheckIn,
    Exercise,
    MuscleGroup,
    SessionStatus,
    Slot,
    WorkoutExercise,
    WorkoutSession,
)
from .ratios import resolve_working_weight
from .variation import ExerciseHistory, ExerciseSelector
from .volume import adjust_volume_for_check_in, needs_easy_swaps, round_half_up

logger = logging.getLogger(__name__)

# Readiness substitution only touches the compound slots
EASY_SWAP_SLOTS = (Slot.HEAVY, Slot.MODERATE)


@dataclass
class Prescription:
    """Sets/reps/weight solved for one slot."""
    exercise: Exercise
    sets: int
    reps: int
    weight: float
    target_volume: float
    actual_volume: float

    @property
    def volume_error(self) -> float:
        """Relative distance from target (0.05 = 5% off)."""
        if self.target_volume <= 0:
            return 0.0
        return abs(self.actual_volume - self.target_volume) / self.target_volume


def split_volume(total_volume: float, config: EngineConfig = DEFAULT_CONFIG) -> Dict[Slot, float]:
    """Split session volume across slots. The parts always sum to the total."""
    return {slot: total_volume * config.slot_volume_split[slot.value] for slot in Slot}


def target_reps_for_slot(slot: Slot, config: EngineConfig = DEFAULT_CONFIG) -> int:
    return config.target_reps(slot.value)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def calculate_sets_reps(
    exercise: Exercise,
    target_volume: float,
    working_weight: float,
    config: EngineConfig = DEFAULT_CONFIG
) -> Prescription:
    """
    Reverse-solve sets and reps for a slot volume.

    Args:
        exercise: Exercise filling the slot
        target_volume: Volume assigned to the slot
        working_weight: Weight per hand (unilateral) or total (bilateral)
        config: Engine configuration

    Returns:
        Prescription with at least one set, or zero sets for a zero target

    Raises:
        ConfigurationError: working_weight is not positive
    """
    if target_volume <= 0:
        return Prescription(exercise, 0, 0, working_weight, 0.0, 0.0)

    if working_weight <= 0:
        raise ConfigurationError(f"Working weight for {exercise.id} must be positive, got {working_weight}")

    effective_weight = working_weight * 2 if exercise.is_unilateral else working_weight
    target_reps = target_reps_for_slot(exercise.slot, config)
    low, high = exercise.rep_range

    total_reps = target_volume / effective_weight
    sets = max(1, round_half_up(total_reps / target_reps))
    reps = _clamp(round_half_up(total_reps / sets), low, high)
    actual = sets * reps * effective_weight

    # One corrective pass when clamping pushed us outside tolerance
    if abs(actual - target_volume) / target_volume > config.volume_tolerance:
        corrected = max(1, round_half_up(target_volume / (reps * effective_weight)))
        logger.debug(
            f"{exercise.id}: {sets}x{reps} missed target {target_volume:.0f} "
            f"by more than {config.volume_tolerance:.0%}, adjusting to {corrected} sets"
        )
        sets = corrected
        actual = sets * reps * effective_weight

    return Prescription(
        exercise=exercise,
        sets=sets,
        reps=reps,
        weight=working_weight,
        target_volume=target_volume,
        actual_volume=actual,
    )


def is_prescription_achievable(prescription: Prescription, config: EngineConfig = DEFAULT_CONFIG) -> bool:
    """Reject prescriptions that are impractical to perform."""
    low, high = prescription.exercise.rep_range
    if prescription.reps < low or prescription.reps > high:
        return False
    if prescription.sets > config.max_sets:
        return False
    if prescription.exercise.slot == Slot.ISOLATION and prescription.reps > config.max_isolation_reps:
        return False
    return True


# =============================================================================
# Session generation
# =============================================================================

class WorkoutGenerator:
    """
    Generates a planned session for one muscle group.

    Pipeline: readiness -> drift -> slot split -> selection -> easy swaps
    -> working weights -> prescriptions.
    """

    def __init__(self, selector: Optional[ExerciseSelector] = None, config: EngineConfig = DEFAULT_CONFIG):
        self.config = config
        self.selector = selector or ExerciseSelector(config=config)

    def generate_session(
        self,
        muscle_group: MuscleGroup,
        base_volume: float,
        catalog: Sequence[Exercise],
        working_weights: Dict[str, float],
        history: ExerciseHistory,
        check_in: Optional[CheckIn] = None,
        drift_addition: float = 0.0,
        session_date: Optional[date] = None
    ) -> Tuple[WorkoutSession, ExerciseHistory]:
        """
        Build a planned session.

        Args:
            muscle_group: Bucket being trained
            base_volume: Un-adjusted per-session volume (weekly target / sessions)
            catalog: Available exercises
            working_weights: Exercise id -> working weight
            history: Rolling selection history
            check_in: Pre-workout readiness, None for no adjustment
            drift_addition: Drift owed to this session, added after readiness
            session_date: Date the session is planned for

        Returns:
            Tuple of (planned session, updated history)

        Raises:
            InsufficientExercisesError: A slot has no eligible exercise
        """
        adjusted = adjust_volume_for_check_in(base_volume, check_in, self.config)
        target_volume = adjusted + max(drift_addition, 0.0)
        slot_volumes = split_volume(target_volume, self.config)
        easy = needs_easy_swaps(check_in)

        logger.info(
            f"Generating {muscle_group.value} session: base {base_volume:.0f}, "
            f"readiness-adjusted {adjusted:.0f}, drift +{drift_addition:.0f}, target {target_volume:.0f}"
        )

        group_catalog = [ex for ex in catalog if ex.muscle_group == muscle_group]
        exercises: List[WorkoutExercise] = []

        for slot in Slot:
            candidates = [ex for ex in group_catalog if ex.slot == slot]
            previous = history
            selected, history = self.selector.select(candidates, muscle_group, slot, previous)
            if selected is None:
                raise InsufficientExercisesError(muscle_group, slot)

            if easy and slot in EASY_SWAP_SLOTS:
                substitute = self.selector.easy_substitute(selected, group_catalog)
                if substitute is not selected:
                    # History tracks what was prescribed, not the pre-swap pick
                    history = previous.record(muscle_group, slot, substitute.id)
                    selected = substitute

            weight = resolve_working_weight(selected, working_weights, self.config)
            prescription = calculate_sets_reps(selected, slot_volumes[slot], weight, self.config)

            exercises.append(WorkoutExercise(
                exercise=selected,
                prescribed_sets=prescription.sets,
                prescribed_reps=prescription.reps,
                prescribed_weight=prescription.weight,
                target_volume=prescription.target_volume,
            ))

        session = WorkoutSession(
            muscle_group=muscle_group,
            target_volume=target_volume,
            exercises=exercises,
            base_volume=base_volume,
            drift_addition=max(drift_addition, 0.0),
            status=SessionStatus.PLANNED,
            check_in=check_in or CheckIn(),
            session_date=session_date,
        )
        return session, history
