"""
Exercise Catalog

Loads the exercise library from YAML. The bundled library covers every
muscle group and slot; callers can point at their own file instead.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigurationError
from .models import (
    Equipment,
    Exercise,
    ExerciseType,
    LoadType,
    MovementPattern,
    MuscleGroup,
    PrimaryMuscle,
    Slot,
)

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / 'data' / 'exercises.yaml'

REQUIRED_FIELDS = ('id', 'name', 'muscle_group', 'slot', 'type', 'equipment', 'load_type', 'rep_range')


def parse_exercise(entry: Dict[str, Any]) -> Exercise:
    """
    Build an Exercise from a catalog mapping.

    Raises:
        ConfigurationError: Entry is not a mapping, misses a field, or has an unknown enum value
    """
    if not isinstance(entry, dict):
        raise ConfigurationError(f"Exercise entry must be a mapping, got {type(entry).__name__}")

    missing = [f for f in REQUIRED_FIELDS if f not in entry]
    if missing:
        raise ConfigurationError(f"Exercise {entry.get('id', '?')} is missing {', '.join(missing)}")

    try:
        low, high = entry['rep_range']
        pattern = entry.get('movement_pattern')
        muscle = entry.get('primary_muscle')
        multiplier = entry.get('bodyweight_multiplier')

        return Exercise(
            id=str(entry['id']),
            name=str(entry['name']),
            muscle_group=MuscleGroup(entry['muscle_group']),
            slot=Slot(int(entry['slot'])),
            type=ExerciseType(entry['type']),
            equipment=Equipment(entry['equipment']),
            load_type=LoadType(entry['load_type']),
            rep_range=(int(low), int(high)),
            movement_pattern=MovementPattern(pattern) if pattern else None,
            primary_muscle=PrimaryMuscle(muscle) if muscle else None,
            bodyweight_multiplier=float(multiplier) if multiplier is not None else None,
        )
    except (TypeError, ValueError) as e:
        if isinstance(e, ConfigurationError):
            raise
        raise ConfigurationError(f"Malformed exercise {entry.get('id', '?')}: {e}") from e


def load_catalog(path: Optional[Path] = None) -> List[Exercise]:
    """
    Load exercises from a YAML list.

    Args:
        path: Catalog file (default: bundled library)

    Returns:
        Exercises in file order

    Raises:
        ConfigurationError: File is not a list, or an entry is malformed
    """
    path = Path(path) if path else DEFAULT_CATALOG_PATH

    with open(path) as f:
        data = yaml.safe_load(f)

    if not isinstance(data, list):
        raise ConfigurationError(f"Exercise catalog {path} must be a list of exercises")

    exercises = [parse_exercise(entry) for entry in data]

    ids = [ex.id for ex in exercises]
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        raise ConfigurationError(f"Duplicate exercise ids in {path}: {', '.join(duplicates)}")

    logger.debug(f"Loaded {len(exercises)} exercises from {path}")
    return exercises


def exercises_for(
    catalog: Sequence[Exercise],
    muscle_group: MuscleGroup,
    slot: Optional[Slot] = None
) -> List[Exercise]:
    """Exercises for a muscle group, optionally limited to one slot."""
    return [
        ex for ex in catalog
        if ex.muscle_group == muscle_group and (slot is None or ex.slot == slot)
    ]


def find_exercise(catalog: Sequence[Exercise], exercise_id: str) -> Optional[Exercise]:
    for ex in catalog:
        if ex.id == exercise_id:
            return ex
    return None
