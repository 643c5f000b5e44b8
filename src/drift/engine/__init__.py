"""
Adaptive Training Load Engine

Internal Codename: DRIFT
"Miss a set, not a week."

Turns weekly per-muscle-group volume targets into concrete sessions and
keeps the week honest:
- Volume accounting and readiness scaling
- Slot-based prescriptions with exercise variety
- Drift (missed volume) redistribution with forgiveness
- RPE-driven progressive overload with deloads
- Goal-based weekly schedules
"""

from .volume import calculate_volume, calculate_total_volume, log_set, round_half_up
from .variation import ExerciseHistory, ExerciseSelector
from .prescription import Prescription, WorkoutGenerator, calculate_sets_reps, split_volume
from .drift import calculate_drift, distribute_drift, calculate_forgiven_drift
from .periodization import next_week_target, is_deload_week
from .schedule import generate_weekly_schedule
from .week import (
    SessionOutcome,
    WeekAdvance,
    advance_week,
    cancel_session,
    complete_session,
    create_week_record,
    plan_session,
)

__all__ = [
    'calculate_volume',
    'calculate_total_volume',
    'log_set',
    'round_half_up',
    'ExerciseHistory',
    'ExerciseSelector',
    'Prescription',
    'WorkoutGenerator',
    'calculate_sets_reps',
    'split_volume',
    'calculate_drift',
    'distribute_drift',
    'calculate_forgiven_drift',
    'next_week_target',
    'is_deload_week',
    'generate_weekly_schedule',
    'SessionOutcome',
    'WeekAdvance',
    'advance_week',
    'cancel_session',
    'complete_session',
    'create_week_record',
    'plan_session',
]
