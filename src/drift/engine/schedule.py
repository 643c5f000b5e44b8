"""
Weekly Session Allocator

Internal Codename: CALENDAR
Assigns a muscle group to each training day from a goal-based template.
Deterministic: the same (week start, days, goal) always yields the same week.
"""
from __future__ import annotations

import json
import logging
from datetime import date, timedelta
from typing import Dict, List, Tuple, Union

from ..models import Goal, MuscleGroup, PlannedSession, WeeklySchedule

logger = logging.getLogger(__name__)

PUSH, PULL, LEGS = MuscleGroup.PUSH, MuscleGroup.PULL, MuscleGroup.LEGS

DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

# (goal, training days) -> muscle group per consecutive day
SCHEDULE_TEMPLATES: Dict[Tuple[str, int], List[MuscleGroup]] = {
    # Strength leads with legs for the freshest heavy squat/hinge day
    ("strength", 3): [LEGS, PUSH, PULL],
    ("strength", 4): [LEGS, PUSH, PULL, LEGS],
    ("strength", 5): [LEGS, PUSH, PULL, LEGS, PUSH],
    ("strength", 6): [LEGS, PUSH, PULL, LEGS, PUSH, PULL],
    ("strength", 7): [LEGS, PUSH, PULL, LEGS, PUSH, PULL, LEGS],

    ("hypertrophy", 3): [PUSH, PULL, LEGS],
    ("hypertrophy", 4): [PUSH, PULL, LEGS, PUSH],
    ("hypertrophy", 5): [PUSH, PULL, LEGS, PUSH, PULL],
    ("hypertrophy", 6): [PUSH, PULL, LEGS, PUSH, PULL, LEGS],
    ("hypertrophy", 7): [PUSH, PULL, LEGS, PUSH, PULL, LEGS, PUSH],

    ("endurance", 3): [PUSH, PULL, LEGS],
    ("endurance", 4): [PUSH, PULL, LEGS, PULL],
    ("endurance", 5): [PUSH, PULL, LEGS, PUSH, PULL],
    ("endurance", 6): [PUSH, PULL, LEGS, PUSH, PULL, LEGS],
    ("endurance", 7): [PUSH, PULL, LEGS, PUSH, PULL, LEGS, PULL],

    ("general", 3): [PUSH, PULL, LEGS],
    ("general", 4): [PUSH, PULL, LEGS, LEGS],
    ("general", 5): [PUSH, PULL, LEGS, PUSH, LEGS],
    ("general", 6): [PUSH, PULL, LEGS, PUSH, PULL, LEGS],
    ("general", 7): [PUSH, PULL, LEGS, PUSH, PULL, LEGS, LEGS],
}

DEFAULT_TEMPLATE_KEY = ("hypertrophy", 6)


def get_template(training_days: int, goal: Union[Goal, str] = Goal.HYPERTROPHY) -> List[MuscleGroup]:
    """
    Look up a template with fallback.

    Unknown goal/days -> hypertrophy for that day count -> hypertrophy 6-day.
    """
    goal_name = goal.value if isinstance(goal, Goal) else str(goal)

    template = SCHEDULE_TEMPLATES.get((goal_name, training_days))
    if template is not None:
        return template

    template = SCHEDULE_TEMPLATES.get(("hypertrophy", training_days))
    if template is not None:
        logger.warning(f"No template for {goal_name}/{training_days} days, using hypertrophy")
        return template

    logger.warning(
        f"No template for {goal_name}/{training_days} days, "
        f"using {DEFAULT_TEMPLATE_KEY[0]}/{DEFAULT_TEMPLATE_KEY[1]} days"
    )
    return SCHEDULE_TEMPLATES[DEFAULT_TEMPLATE_KEY]


def generate_weekly_schedule(
    week_start: date,
    training_days: int,
    goal: Union[Goal, str] = Goal.HYPERTROPHY
) -> WeeklySchedule:
    """
    Generate the week's planned sessions.

    Args:
        week_start: First day of the week (normally a Monday)
        training_days: Training days per week (3-7)
        goal: Training goal

    Returns:
        WeeklySchedule grouped by muscle group, each list in date order
    """
    schedule = WeeklySchedule()

    for offset, muscle_group in enumerate(get_template(training_days, goal)):
        session_date = week_start + timedelta(days=offset)
        schedule.sessions[muscle_group].append(PlannedSession(
            date=session_date,
            day_of_week=session_date.weekday(),
            day_name=DAY_NAMES[session_date.weekday()],
            muscle_group=muscle_group,
        ))

    logger.debug(
        "Schedule for week of {}: {}".format(
            week_start.isoformat(),
            ", ".join(f"{s.day_name} {s.muscle_group.value}" for s in schedule.by_day()),
        )
    )
    return schedule


def calculate_session_volume(weekly_target: float, sessions: int) -> float:
    """Base volume per session. No sessions means nothing to split."""
    if sessions <= 0:
        return 0.0
    return weekly_target / sessions


# =============================================================================
# Serialization
# =============================================================================

def serialize_schedule(schedule: WeeklySchedule) -> str:
    """Convert a schedule to JSON for the caller's storage."""
    payload = {
        group.value: [
            {
                'date': s.date.isoformat(),
                'day_of_week': s.day_of_week,
                'day_name': s.day_name,
                'muscle_group': s.muscle_group.value,
            }
            for s in schedule.sessions.get(group, [])
        ]
        for group in MuscleGroup
    }
    return json.dumps(payload)


def deserialize_schedule(schedule_json: str) -> WeeklySchedule:
    """Parse a stored schedule. Malformed input yields an empty schedule."""
    try:
        payload = json.loads(schedule_json)
        schedule = WeeklySchedule()
        for group in MuscleGroup:
            for entry in payload.get(group.value, []):
                schedule.sessions[group].append(PlannedSession(
                    date=date.fromisoformat(entry['date']),
                    day_of_week=int(entry['day_of_week']),
                    day_name=entry['day_name'],
                    muscle_group=MuscleGroup(entry['muscle_group']),
                ))
        return schedule
    except (TypeError, ValueError, KeyError, AttributeError) as e:
        logger.error(f"Failed to parse schedule: {e}")
        return WeeklySchedule()
