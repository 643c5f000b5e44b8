"""
Drift Data Model

Internal Codename: BUCKET
Enums and dataclasses shared by every part of the training load engine.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .errors import ConfigurationError


# =============================================================================
# Enums
# =============================================================================

class MuscleGroup(Enum):
    """The three weekly volume buckets."""
    PUSH = "push"
    PULL = "pull"
    LEGS = "legs"


class Slot(Enum):
    """Intensity tier inside a session."""
    HEAVY = 1       # Strength / power
    MODERATE = 2    # Hypertrophy
    ISOLATION = 3   # Metabolic / pump


class ExerciseType(Enum):
    COMPOUND = "compound"
    ISOLATION = "isolation"


class Equipment(Enum):
    BARBELL = "barbell"
    DUMBBELL = "dumbbell"
    MACHINE = "machine"
    CABLE = "cable"
    BODYWEIGHT = "bodyweight"
    SMITH_MACHINE = "smithMachine"


class LoadType(Enum):
    BILATERAL = "bilateral"
    UNILATERAL = "unilateral"


class MovementPattern(Enum):
    """Movement patterns used to match compound swaps."""
    SQUAT = "squat"
    HINGE = "hinge"
    LUNGE = "lunge"
    HORIZONTAL_PUSH = "horizontalPush"
    VERTICAL_PUSH = "verticalPush"
    VERTICAL_PULL = "verticalPull"
    HORIZONTAL_PULL = "horizontalPull"
    CARRY = "carry"
    CORE = "core"


class PrimaryMuscle(Enum):
    """Primary muscles used to match isolation swaps."""
    CHEST = "chest"
    BACK = "back"
    QUADS = "quads"
    HAMSTRINGS = "hamstrings"
    BICEPS = "biceps"
    TRICEPS = "triceps"
    SHOULDERS = "shoulders"
    CALVES = "calves"
    ABS = "abs"


class Mood(Enum):
    GREAT = "great"
    OKAY = "okay"
    ROUGH = "rough"


class Goal(Enum):
    STRENGTH = "strength"
    HYPERTROPHY = "hypertrophy"
    ENDURANCE = "endurance"
    GENERAL = "general"


class ExperienceLevel(Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class SessionStatus(Enum):
    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    SKIPPED = "skipped"


class WeekStatus(Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    FORGIVEN = "forgiven"


# =============================================================================
# Catalog
# =============================================================================

@dataclass(frozen=True)
class Exercise:
    """Catalog entry. Immutable reference data owned by the catalog."""
    id: str
    name: str
    muscle_group: MuscleGroup
    slot: Slot
    type: ExerciseType
    equipment: Equipment
    load_type: LoadType
    rep_range: Tuple[int, int]
    movement_pattern: Optional[MovementPattern] = None  # compounds only
    primary_muscle: Optional[PrimaryMuscle] = None      # isolations only
    bodyweight_multiplier: Optional[float] = None       # bodyweight only

    def __post_init__(self):
        low, high = self.rep_range
        if low < 1 or low > high:
            raise ConfigurationError(f"Exercise {self.id} has invalid rep range {self.rep_range}")
        if self.type == ExerciseType.COMPOUND and self.movement_pattern is None:
            raise ConfigurationError(f"Compound exercise {self.id} requires a movement pattern")
        if self.type == ExerciseType.ISOLATION and self.primary_muscle is None:
            raise ConfigurationError(f"Isolation exercise {self.id} requires a primary muscle")
        if self.type == ExerciseType.COMPOUND and self.primary_muscle is not None:
            raise ConfigurationError(f"Compound exercise {self.id} cannot have a primary muscle")
        if self.type == ExerciseType.ISOLATION and self.movement_pattern is not None:
            raise ConfigurationError(f"Isolation exercise {self.id} cannot have a movement pattern")

    @property
    def is_unilateral(self) -> bool:
        return self.load_type == LoadType.UNILATERAL


# =============================================================================
# Sessions
# =============================================================================

@dataclass
class CheckIn:
    """Pre-workout readiness check-in."""
    mood: Mood = Mood.GREAT
    good_sleep: bool = True
    not_sore: bool = True
    timestamp: Optional[datetime] = None


@dataclass
class LoggedSet:
    """A single performed set. Warm-ups are evidence only, never volume."""
    set_number: int
    weight: float
    reps: int
    is_warmup: bool = False
    rpe: Optional[float] = None
    logged_at: Optional[datetime] = None


@dataclass
class WorkoutExercise:
    """One slot's prescription inside a session."""
    exercise: Exercise
    prescribed_sets: int
    prescribed_reps: int
    prescribed_weight: float
    target_volume: float
    actual_volume: float = 0.0
    logged_sets: List[LoggedSet] = field(default_factory=list)
    completed: bool = False

    @property
    def slot(self) -> Slot:
        return self.exercise.slot

    @property
    def working_sets(self) -> List[LoggedSet]:
        return [s for s in self.logged_sets if not s.is_warmup]


@dataclass
class WorkoutSession:
    """A single training session for one muscle group."""
    muscle_group: MuscleGroup
    target_volume: float
    exercises: List[WorkoutExercise] = field(default_factory=list)
    base_volume: float = 0.0
    drift_addition: float = 0.0
    actual_volume: float = 0.0
    status: SessionStatus = SessionStatus.PLANNED
    check_in: CheckIn = field(default_factory=CheckIn)
    session_rpe: Optional[float] = None
    session_date: Optional[date] = None
    id: Optional[str] = None

    @property
    def completion_percentage(self) -> float:
        if self.target_volume <= 0:
            return 0.0
        return self.actual_volume / self.target_volume * 100

    @property
    def is_finalized(self) -> bool:
        return self.status in (SessionStatus.COMPLETED, SessionStatus.SKIPPED)


# =============================================================================
# Weekly tracking
# =============================================================================

@dataclass
class WeeklyBucket:
    """Weekly volume target and progress for one muscle group.

    drift_amount is the total drift recorded this week and only grows.
    carried_drift is what is still owed to the remaining sessions after the
    per-session cap has forgiven any excess.
    """
    target_volume: float
    completed_volume: float = 0.0
    sessions_planned: int = 0
    sessions_completed: int = 0
    drift_amount: float = 0.0
    carried_drift: float = 0.0

    @property
    def completion_percentage(self) -> float:
        if self.target_volume <= 0:
            return 0.0
        return self.completed_volume / self.target_volume * 100

    @property
    def remaining_sessions(self) -> int:
        return max(0, self.sessions_planned - self.sessions_completed)


@dataclass(frozen=True)
class DriftItem:
    """Ledger entry for unfulfilled volume from one completed session."""
    muscle_group: MuscleGroup
    amount: float
    source_session_id: Optional[str] = None
    redistributed: bool = False
    created_at: Optional[datetime] = None


@dataclass
class PlannedSession:
    """One calendar day of the weekly schedule."""
    date: date
    day_of_week: int  # Monday = 0
    day_name: str
    muscle_group: MuscleGroup


@dataclass
class WeeklySchedule:
    """Planned sessions grouped by muscle group."""
    sessions: Dict[MuscleGroup, List[PlannedSession]] = field(
        default_factory=lambda: {group: [] for group in MuscleGroup}
    )

    def sessions_planned(self) -> Dict[MuscleGroup, int]:
        return {group: len(self.sessions.get(group, [])) for group in MuscleGroup}

    def by_day(self) -> List[PlannedSession]:
        """All planned sessions in calendar order."""
        days = [s for group_sessions in self.sessions.values() for s in group_sessions]
        return sorted(days, key=lambda s: s.date)


@dataclass
class WeekRecord:
    """One calendar week of training. Buckets are replaced as a unit."""
    week_number: int
    week_start: date
    buckets: Dict[MuscleGroup, WeeklyBucket]
    is_deload_week: bool = False
    status: WeekStatus = WeekStatus.ACTIVE
    planned_schedule: WeeklySchedule = field(default_factory=WeeklySchedule)
    drift_items: List[DriftItem] = field(default_factory=list)

    def bucket(self, muscle_group: MuscleGroup) -> WeeklyBucket:
        return self.buckets[muscle_group]


@dataclass
class UserProfile:
    """Caller-owned user state read by the engine."""
    bodyweight: float
    experience_level: ExperienceLevel
    training_days_per_week: int
    weekly_targets: Dict[MuscleGroup, float]
    starting_volume: Dict[MuscleGroup, float]
    goal: Goal = Goal.HYPERTROPHY
    current_week: int = 1
    week_start: Optional[date] = None
    working_weights: Dict[str, float] = field(default_factory=dict)
