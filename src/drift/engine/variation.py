"""
Exercise Selection & Swaps

Internal Codename: VARIETY
Chooses one exercise per intensity slot with recency avoidance, and suggests
biomechanically equivalent swaps.

Selection criteria:
- Same muscle group and slot
- Not used in the last few selections for that group/slot
- Swaps: compounds match movement pattern, isolations match primary muscle
- Equipment priority (barbell > dumbbell > machine > cable > bodyweight > smith)
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import DEFAULT_CONFIG, EngineConfig
from ..models import Equipment, Exercise, ExerciseType, MuscleGroup, Slot

logger = logging.getLogger(__name__)

HistoryKey = Tuple[MuscleGroup, Slot]


# =============================================================================
# Rolling history
# =============================================================================

@dataclass
class ExerciseHistory:
    """Last few exercise ids used per (muscle group, slot), most recent first.

    Passed in and returned explicitly; the engine holds no history of its own.
    """
    entries: Dict[HistoryKey, List[str]] = field(default_factory=dict)
    max_size: int = 3

    def recent(self, muscle_group: MuscleGroup, slot: Slot) -> List[str]:
        return list(self.entries.get((muscle_group, slot), []))

    def record(self, muscle_group: MuscleGroup, slot: Slot, exercise_id: str) -> 'ExerciseHistory':
        """Return a new history with exercise_id pushed to the front."""
        entries = {k: list(v) for k, v in self.entries.items()}
        recent = [exercise_id] + entries.get((muscle_group, slot), [])
        entries[(muscle_group, slot)] = recent[:self.max_size]
        return ExerciseHistory(entries=entries, max_size=self.max_size)

    def to_dict(self) -> Dict[str, List[str]]:
        """Serialize as {"push_slot1": [...]} for the caller's storage."""
        return {
            f"{group.value}_slot{slot.value}": list(ids)
            for (group, slot), ids in self.entries.items()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, List[str]], max_size: int = 3) -> 'ExerciseHistory':
        entries = {}
        for key, ids in (data or {}).items():
            group_name, _, slot_part = key.partition('_slot')
            entries[(MuscleGroup(group_name), Slot(int(slot_part)))] = list(ids)[:max_size]
        return cls(entries=entries, max_size=max_size)


def filter_recent(exercises: Sequence[Exercise], recent_ids: Sequence[str]) -> List[Exercise]:
    """
    Filter out recently used exercises.

    If filtering removes every option the full list is returned; repeating an
    exercise is better than having none.
    """
    if not recent_ids:
        return list(exercises)

    fresh = [ex for ex in exercises if ex.id not in recent_ids]
    if not fresh:
        logger.info("All candidate exercises were recent, returning full list")
        return list(exercises)

    logger.debug(f"Filtered {len(exercises) - len(fresh)} recent exercises")
    return fresh


# =============================================================================
# Swap rules
# =============================================================================

def _matches(original: Exercise, candidate: Exercise) -> bool:
    if original.type == ExerciseType.COMPOUND:
        return (
            candidate.type == ExerciseType.COMPOUND
            and candidate.movement_pattern == original.movement_pattern
        )
    return (
        candidate.type == ExerciseType.ISOLATION
        and candidate.primary_muscle == original.primary_muscle
    )


def sort_by_equipment_priority(
    exercises: Sequence[Exercise],
    config: EngineConfig = DEFAULT_CONFIG
) -> List[Exercise]:
    order = config.equipment_priority

    def rank(ex: Exercise) -> int:
        value = ex.equipment.value
        return order.index(value) if value in order else len(order)

    return sorted(exercises, key=rank)


def get_valid_swaps(
    original: Exercise,
    catalog: Sequence[Exercise],
    config: EngineConfig = DEFAULT_CONFIG
) -> List[Exercise]:
    """
    Get valid swap alternatives for an exercise.

    Args:
        original: Exercise being replaced
        catalog: All available exercises

    Returns:
        Same-slot alternatives matching pattern/muscle, in equipment priority order
    """
    swaps = [
        ex for ex in catalog
        if ex.id != original.id and ex.slot == original.slot and _matches(original, ex)
    ]
    return sort_by_equipment_priority(swaps, config)


def get_easy_swaps(
    original: Exercise,
    catalog: Sequence[Exercise],
    config: EngineConfig = DEFAULT_CONFIG
) -> List[Exercise]:
    """Swaps ordered machines first, then cables, then everything else."""
    swaps = get_valid_swaps(original, catalog, config)
    ranked = []
    for equipment in config.easy_equipment:
        ranked.extend(ex for ex in swaps if ex.equipment.value == equipment)
    ranked.extend(ex for ex in swaps if ex.equipment.value not in config.easy_equipment)
    return ranked


def get_recommended_swaps(
    original: Exercise,
    catalog: Sequence[Exercise],
    limit: int = 3,
    config: EngineConfig = DEFAULT_CONFIG
) -> List[Exercise]:
    """Top swaps, same equipment first for an easier transition."""
    swaps = get_valid_swaps(original, catalog, config)
    same = [ex for ex in swaps if ex.equipment == original.equipment]
    other = [ex for ex in swaps if ex.equipment != original.equipment]
    return (same + other)[:limit]


def is_valid_swap(original: Exercise, target: Exercise) -> Tuple[bool, Optional[str]]:
    """
    Check if a swap is biomechanically valid.

    Returns:
        Tuple of (valid, reason). reason is None when valid.
    """
    if original.id == target.id:
        return False, "Cannot swap to the same exercise"

    if original.slot != target.slot:
        return False, f"Slot mismatch: {original.slot.value} vs {target.slot.value}"

    if original.type == ExerciseType.COMPOUND:
        if target.type != ExerciseType.COMPOUND:
            return False, "Cannot swap compound exercise for isolation"
        if original.movement_pattern != target.movement_pattern:
            return False, (
                f"Movement pattern mismatch: {original.movement_pattern.value} "
                f"vs {target.movement_pattern.value}"
            )
    else:
        if target.type != ExerciseType.ISOLATION:
            return False, "Cannot swap isolation exercise for compound"
        if original.primary_muscle != target.primary_muscle:
            return False, (
                f"Primary muscle mismatch: {original.primary_muscle.value} "
                f"vs {target.primary_muscle.value}"
            )

    return True, None


def group_swaps_by_equipment(
    swaps: Sequence[Exercise],
    config: EngineConfig = DEFAULT_CONFIG
) -> List[Tuple[Equipment, List[Exercise]]]:
    """Group swaps under their equipment, in priority order, skipping empty groups."""
    grouped = []
    for value in config.equipment_priority:
        members = [ex for ex in swaps if ex.equipment.value == value]
        if members:
            grouped.append((Equipment(value), members))
    return grouped


# =============================================================================
# Selection
# =============================================================================

class ExerciseSelector:
    """
    Picks one exercise per slot.

    The random source is injectable so tests and replays are deterministic.
    """

    def __init__(self, rng: Optional[random.Random] = None, config: EngineConfig = DEFAULT_CONFIG):
        self.rng = rng or random.Random()
        self.config = config

    def select(
        self,
        candidates: Sequence[Exercise],
        muscle_group: MuscleGroup,
        slot: Slot,
        history: ExerciseHistory
    ) -> Tuple[Optional[Exercise], ExerciseHistory]:
        """
        Select an exercise with recency avoidance.

        Args:
            candidates: Slot-eligible exercises for the muscle group
            muscle_group: Bucket being trained
            slot: Intensity slot
            history: Rolling history store

        Returns:
            Tuple of (selected exercise or None if no candidates, updated history)
        """
        if not candidates:
            return None, history

        fresh = filter_recent(candidates, history.recent(muscle_group, slot))
        selected = self.rng.choice(fresh)

        logger.debug(f"Selected {selected.id} for {muscle_group.value} slot {slot.value}")
        return selected, history.record(muscle_group, slot, selected.id)

    def easy_substitute(self, selected: Exercise, catalog: Sequence[Exercise]) -> Exercise:
        """
        Swap toward machine/cable equipment when readiness is low.

        Only swaps when an equipment-compatible, pattern/muscle-matching
        alternative exists.
        """
        if selected.equipment.value in self.config.easy_equipment:
            return selected

        for option in get_easy_swaps(selected, catalog, self.config):
            if option.equipment.value in self.config.easy_equipment:
                logger.info(f"Swapped slot {selected.slot.value} {selected.id} -> {option.id} (low readiness)")
                return option

        return selected
