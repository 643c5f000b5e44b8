"""
Week Lifecycle

Internal Codename: LEDGER
Creates week records, plans and finalizes sessions against the weekly
buckets, and rolls the calendar forward with progressive overload.

All functions take the caller's state and return new values. When a session
completes, the whole bucket map is rebuilt and swapped in one step.
"""
from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, Optional, Sequence, Tuple, Union

from ..config import DEFAULT_CONFIG, EngineConfig
from ..errors import SessionStateError
from ..models import (
    CheckIn,
    DriftItem,
    Exercise,
    Goal,
    MuscleGroup,
    SessionStatus,
    UserProfile,
    WeeklyBucket,
    WeekRecord,
    WeekStatus,
    WorkoutSession,
)
from .drift import (
    DriftSummary,
    calculate_drift,
    calculate_remaining_sessions,
    distribute_drift,
    generate_drift_summary,
    make_drift_item,
)
from .periodization import average_session_rpe, is_deload_week, next_week_target
from .prescription import WorkoutGenerator
from .schedule import calculate_session_volume, generate_weekly_schedule
from .variation import ExerciseHistory

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7


def week_start_for(day: date) -> date:
    """Monday of the week containing day."""
    return day - timedelta(days=day.weekday())


def create_week_record(
    week_number: int,
    week_start: date,
    targets: Dict[MuscleGroup, float],
    training_days: int,
    goal: Union[Goal, str] = Goal.HYPERTROPHY,
    config: EngineConfig = DEFAULT_CONFIG
) -> WeekRecord:
    """
    Start a new active week.

    Session counts per bucket come from the week's generated schedule.
    """
    schedule = generate_weekly_schedule(week_start, training_days, goal)
    planned = schedule.sessions_planned()

    buckets = {
        group: WeeklyBucket(
            target_volume=targets.get(group, 0.0),
            sessions_planned=planned[group],
        )
        for group in MuscleGroup
    }

    logger.info(
        f"Created week {week_number} starting {week_start.isoformat()}: "
        + ", ".join(f"{g.value} {b.target_volume:.0f} over {b.sessions_planned}" for g, b in buckets.items())
    )

    return WeekRecord(
        week_number=week_number,
        week_start=week_start,
        buckets=buckets,
        is_deload_week=is_deload_week(week_number, config),
        status=WeekStatus.ACTIVE,
        planned_schedule=schedule,
    )


def session_base_volume(bucket: WeeklyBucket) -> float:
    """
    Un-adjusted volume of one session for a bucket.

    A group with no scheduled sessions is trained as a single extra session.
    """
    if bucket.sessions_planned <= 0:
        logger.warning("Planning a session for a group with no scheduled sessions")
        return calculate_session_volume(bucket.target_volume, 1)
    return calculate_session_volume(bucket.target_volume, bucket.sessions_planned)


def plan_session(
    week: WeekRecord,
    profile: UserProfile,
    muscle_group: MuscleGroup,
    catalog: Sequence[Exercise],
    history: ExerciseHistory,
    check_in: Optional[CheckIn] = None,
    generator: Optional[WorkoutGenerator] = None,
    session_date: Optional[date] = None,
    config: EngineConfig = DEFAULT_CONFIG
) -> Tuple[WorkoutSession, ExerciseHistory]:
    """
    Plan the next session for a muscle group.

    Args:
        week: Active week record
        profile: User profile (working weights)
        muscle_group: Group to train
        catalog: Available exercises
        history: Rolling selection history
        check_in: Pre-workout readiness
        generator: Session generator (default uses a fresh random source)
        session_date: Date the session is planned for

    Returns:
        Tuple of (planned session, updated history)
    """
    generator = generator or WorkoutGenerator(config=config)
    bucket = week.bucket(muscle_group)

    base = session_base_volume(bucket)
    remaining = calculate_remaining_sessions(bucket.sessions_planned, bucket.sessions_completed)
    addition = distribute_drift(bucket.carried_drift, remaining, base, config)

    if addition > 0:
        logger.info(
            f"{muscle_group.value}: +{addition:.0f} drift from {bucket.carried_drift:.0f} "
            f"carried over {remaining} session(s)"
        )

    return generator.generate_session(
        muscle_group=muscle_group,
        base_volume=base,
        catalog=catalog,
        working_weights=profile.working_weights,
        history=history,
        check_in=check_in,
        drift_addition=addition,
        session_date=session_date,
    )


@dataclass
class SessionOutcome:
    """Result of finalizing a session."""
    week: WeekRecord
    session: WorkoutSession
    drift_item: Optional[DriftItem]
    summary: DriftSummary


def complete_session(
    week: WeekRecord,
    session: WorkoutSession,
    session_rpe: Optional[float] = None,
    session_id: Optional[str] = None,
    completed_at: Optional[datetime] = None,
    config: EngineConfig = DEFAULT_CONFIG
) -> SessionOutcome:
    """
    Finalize a session and fold it into the week.

    Args:
        week: Active week record
        session: Planned or in-progress session
        session_rpe: Session effort (1-10)
        session_id: Caller-assigned id (defaults to session.id)
        completed_at: Timestamp for the drift ledger entry

    Returns:
        SessionOutcome with the new week, finalized session, drift item (if
        any) and how outstanding drift is spread over the remaining sessions

    Raises:
        SessionStateError: Session is already completed or skipped
    """
    if session.is_finalized:
        raise SessionStateError(f"Cannot complete a {session.status.value} session")

    finalized = copy.deepcopy(session)
    finalized.status = SessionStatus.COMPLETED
    finalized.session_rpe = session_rpe
    finalized.id = session_id or session.id

    group = session.muscle_group
    current = week.bucket(group)
    base = session_base_volume(current)

    drift = calculate_drift(session.target_volume, session.actual_volume, config)
    sessions_completed = current.sessions_completed + 1
    remaining = calculate_remaining_sessions(current.sessions_planned, sessions_completed)

    # This session's drift addition has been served, successful or not
    outstanding = max(0.0, current.carried_drift - session.drift_addition) + drift
    summary = generate_drift_summary(outstanding, remaining, base, config)

    if summary.forgiven > 0:
        logger.info(f"{group.value}: forgave {summary.forgiven:.0f} drift ({remaining} session(s) left)")

    updated_bucket = replace(
        current,
        completed_volume=current.completed_volume + session.actual_volume,
        sessions_completed=sessions_completed,
        drift_amount=current.drift_amount + drift,
        carried_drift=summary.redistributed,
    )

    buckets = {g: replace(b) for g, b in week.buckets.items()}
    buckets[group] = updated_bucket

    drift_item = None
    drift_items = list(week.drift_items)
    if drift > 0:
        drift_item = make_drift_item(
            group, drift, finalized.id, completed_at, redistributed=summary.redistributed > 0
        )
        drift_items.append(drift_item)
        logger.info(
            f"{group.value}: {drift:.0f} drift recorded "
            f"({session.actual_volume:.0f}/{session.target_volume:.0f})"
        )

    logger.info(
        f"Completed {group.value} session: bucket {updated_bucket.completed_volume:.0f}/"
        f"{updated_bucket.target_volume:.0f} ({updated_bucket.completion_percentage:.0f}%)"
    )

    return SessionOutcome(
        week=replace(week, buckets=buckets, drift_items=drift_items),
        session=finalized,
        drift_item=drift_item,
        summary=summary,
    )


def cancel_session(session: WorkoutSession) -> WorkoutSession:
    """
    Abandon a session. It contributes no volume and the week is untouched.

    Raises:
        SessionStateError: Session is already completed
    """
    if session.status == SessionStatus.COMPLETED:
        raise SessionStateError("Cannot cancel a completed session")

    cancelled = copy.deepcopy(session)
    cancelled.status = SessionStatus.SKIPPED
    cancelled.actual_volume = 0.0
    for workout_exercise in cancelled.exercises:
        workout_exercise.actual_volume = 0.0
    return cancelled


# =============================================================================
# Calendar
# =============================================================================

def weeks_passed(week_start: date, today: date) -> int:
    """Whole weeks between the stored week start and the Monday of today's week."""
    return (week_start_for(today) - week_start).days // DAYS_PER_WEEK


def days_left_in_week(week_start: date, today: date) -> int:
    """Days left including today. 7 before the week starts, 0 after it ends."""
    days_passed = (today - week_start).days
    if days_passed >= DAYS_PER_WEEK:
        return 0
    if days_passed < 0:
        return DAYS_PER_WEEK
    return DAYS_PER_WEEK - days_passed


def close_week(week: WeekRecord) -> WeekRecord:
    """Completed if every bucket reached its target, otherwise forgiven."""
    reached = all(b.completed_volume >= b.target_volume for b in week.buckets.values())
    return replace(week, status=WeekStatus.COMPLETED if reached else WeekStatus.FORGIVEN)


@dataclass
class WeekAdvance:
    profile: UserProfile
    closed_week: WeekRecord
    week: WeekRecord


def advance_week(
    profile: UserProfile,
    week: WeekRecord,
    sessions: Iterable[WorkoutSession],
    today: date,
    config: EngineConfig = DEFAULT_CONFIG
) -> Optional[WeekAdvance]:
    """
    Roll over to a new week when the calendar has moved on.

    Args:
        profile: Current user profile
        week: The week being closed
        sessions: Sessions from the week being closed (for average RPE)
        today: Caller's current date

    Returns:
        WeekAdvance with the new profile, closed week and new active week,
        or None while still inside the current week
    """
    passed = weeks_passed(week.week_start, today)
    if passed <= 0:
        logger.debug("Still in current week, no advancement needed")
        return None

    sessions = list(sessions)
    new_week_number = profile.current_week + passed
    new_week_start = week.week_start + timedelta(weeks=passed)

    targets = {}
    for group in MuscleGroup:
        rpe = average_session_rpe(sessions, group, config=config)
        targets[group] = next_week_target(
            profile.weekly_targets.get(group, 0.0),
            rpe,
            new_week_number - 1,
            profile.starting_volume.get(group, 0.0),
            config,
        )
        logger.info(
            f"{group.value}: avg RPE {rpe:.1f}, target "
            f"{profile.weekly_targets.get(group, 0.0):.0f} -> {targets[group]:.0f}"
        )

    closed = close_week(week)
    new_profile = replace(
        profile,
        current_week=new_week_number,
        week_start=new_week_start,
        weekly_targets=targets,
    )
    new_week = create_week_record(
        new_week_number,
        new_week_start,
        targets,
        profile.training_days_per_week,
        profile.goal,
        config,
    )

    logger.info(
        f"Advanced {passed} week(s) to week {new_week_number} starting {new_week_start.isoformat()} "
        f"(week {week.week_number} {closed.status.value})"
    )
    return WeekAdvance(profile=new_profile, closed_week=closed, week=new_week)
