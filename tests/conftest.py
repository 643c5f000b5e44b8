"""
Test fixtures for the drift engine.

Builds a small hand-made catalog so selection and swap behavior is easy to
reason about, plus profile/week fixtures for lifecycle tests.
"""

import random
from datetime import date

import pytest

from drift.config import EngineConfig
from drift.engine.prescription import WorkoutGenerator
from drift.engine.variation import ExerciseHistory, ExerciseSelector
from drift.engine.week import create_week_record
from drift.models import (
    Equipment,
    Exercise,
    ExerciseType,
    ExperienceLevel,
    Goal,
    LoadType,
    MovementPattern,
    MuscleGroup,
    PrimaryMuscle,
    Slot,
    UserProfile,
)

MONDAY = date(2024, 1, 1)


def make_exercise(
    id,
    muscle_group=MuscleGroup.PUSH,
    slot=Slot.HEAVY,
    equipment=Equipment.BARBELL,
    load_type=LoadType.BILATERAL,
    movement_pattern=MovementPattern.HORIZONTAL_PUSH,
    primary_muscle=None,
    bodyweight_multiplier=None,
    rep_range=None,
):
    """Compound by default; passing primary_muscle makes an isolation."""
    is_isolation = primary_muscle is not None
    default_ranges = {Slot.HEAVY: (5, 8), Slot.MODERATE: (8, 12), Slot.ISOLATION: (12, 15)}
    return Exercise(
        id=id,
        name=id.replace('_', ' ').title(),
        muscle_group=muscle_group,
        slot=slot,
        type=ExerciseType.ISOLATION if is_isolation else ExerciseType.COMPOUND,
        equipment=equipment,
        load_type=load_type,
        rep_range=rep_range or default_ranges[slot],
        movement_pattern=None if is_isolation else movement_pattern,
        primary_muscle=primary_muscle,
        bodyweight_multiplier=bodyweight_multiplier,
    )


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@pytest.fixture
def push_catalog():
    """Push exercises: two per compound slot (barbell + machine/cable), two isolations."""
    return [
        make_exercise('barbell_bench'),
        make_exercise('machine_chest_press', equipment=Equipment.MACHINE),
        make_exercise('db_bench', equipment=Equipment.DUMBBELL, load_type=LoadType.UNILATERAL),
        make_exercise('incline_barbell_press', slot=Slot.MODERATE),
        make_exercise('cable_press', slot=Slot.MODERATE, equipment=Equipment.CABLE,
                      load_type=LoadType.UNILATERAL),
        make_exercise('cable_fly', slot=Slot.ISOLATION, equipment=Equipment.CABLE,
                      load_type=LoadType.UNILATERAL, primary_muscle=PrimaryMuscle.CHEST),
        make_exercise('pec_deck', slot=Slot.ISOLATION, equipment=Equipment.MACHINE,
                      primary_muscle=PrimaryMuscle.CHEST),
    ]


@pytest.fixture
def full_catalog():
    from drift.catalog import load_catalog
    return load_catalog()


@pytest.fixture
def config():
    return EngineConfig()


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


@pytest.fixture
def history():
    return ExerciseHistory()


@pytest.fixture
def generator(config):
    return WorkoutGenerator(selector=ExerciseSelector(rng=random.Random(42), config=config), config=config)


# ---------------------------------------------------------------------------
# Profile & week
# ---------------------------------------------------------------------------


@pytest.fixture
def profile():
    targets = {MuscleGroup.PUSH: 6000.0, MuscleGroup.PULL: 6000.0, MuscleGroup.LEGS: 6000.0}
    return UserProfile(
        bodyweight=180.0,
        experience_level=ExperienceLevel.BEGINNER,
        training_days_per_week=6,
        weekly_targets=dict(targets),
        starting_volume=dict(targets),
        goal=Goal.HYPERTROPHY,
        current_week=1,
        week_start=MONDAY,
        working_weights={'barbell_bench': 100.0, 'incline_barbell_press': 80.0},
    )


@pytest.fixture
def week(profile):
    """Week 1, hypertrophy 6-day: two sessions per group."""
    return create_week_record(1, MONDAY, profile.weekly_targets, 6, Goal.HYPERTROPHY)
