"""
Drift Engine

Internal Codename: FORGIVENESS
Computes missed volume and redistributes it across the remaining sessions
of the week without creating punishing catch-up workouts.

Rules:
- Drift = planned - actual
- Misses under 10% of planned are forgiven outright
- Each remaining session absorbs at most +20% of its base volume
- Anything beyond the cap is forgiven, never carried further
- No sessions left: everything is forgiven (a new week resets the ledger)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from ..config import DEFAULT_CONFIG, EngineConfig
from ..models import DriftItem, MuscleGroup
from .volume import round_half_up

logger = logging.getLogger(__name__)


# =============================================================================
# Drift calculation
# =============================================================================

def calculate_drift(
    planned_volume: float,
    actual_volume: float,
    config: EngineConfig = DEFAULT_CONFIG
) -> float:
    """
    Calculate drift (missed volume) for a session.

    Args:
        planned_volume: Session target volume
        actual_volume: Volume actually performed

    Returns:
        Drift amount, 0 when the target was met or the miss is forgiven.
        A miss of exactly the threshold is NOT forgiven.
    """
    if planned_volume <= 0:
        return 0.0

    raw_drift = planned_volume - actual_volume
    if raw_drift <= 0:
        return 0.0

    if raw_drift / planned_volume < config.forgiveness_threshold:
        logger.debug(
            f"Forgave {raw_drift:.0f} missed ({raw_drift / planned_volume:.1%} "
            f"< {config.forgiveness_threshold:.0%})"
        )
        return 0.0

    return raw_drift


def should_redistribute_drift(
    drift_amount: float,
    planned_volume: float,
    config: EngineConfig = DEFAULT_CONFIG
) -> bool:
    """Only drift at or above the forgiveness threshold is carried."""
    return drift_amount > 0 and drift_amount >= planned_volume * config.forgiveness_threshold


# =============================================================================
# Redistribution
# =============================================================================

def distribute_drift(
    drift_amount: float,
    remaining_sessions: int,
    session_base_volume: float,
    config: EngineConfig = DEFAULT_CONFIG
) -> float:
    """
    Volume to add to each remaining session.

    Args:
        drift_amount: Total missed volume
        remaining_sessions: Sessions left this week for the muscle group
        session_base_volume: Un-adjusted base volume of one session

    Returns:
        Per-session addition, never more than session_cap x base
    """
    if remaining_sessions <= 0 or drift_amount <= 0 or session_base_volume <= 0:
        return 0.0

    per_session = drift_amount / remaining_sessions
    max_addition = session_base_volume * config.session_cap

    if per_session > max_addition:
        logger.info(
            f"Drift per session {per_session:.0f} capped at {max_addition:.0f} "
            f"({config.session_cap:.0%} of {session_base_volume:.0f})"
        )
        return max_addition

    return per_session


def calculate_forgiven_drift(
    drift_amount: float,
    remaining_sessions: int,
    session_base_volume: float,
    config: EngineConfig = DEFAULT_CONFIG
) -> float:
    """Drift that will never be made up: drift - addition x remaining."""
    if remaining_sessions <= 0:
        return max(drift_amount, 0.0)
    addition = distribute_drift(drift_amount, remaining_sessions, session_base_volume, config)
    return drift_amount - addition * remaining_sessions


def calculate_remaining_sessions(sessions_planned: int, sessions_completed: int) -> int:
    return max(0, sessions_planned - sessions_completed)


# =============================================================================
# Summary & validation
# =============================================================================

@dataclass
class DriftSummary:
    """How a drift amount plays out over the rest of the week."""
    total_drift: float
    redistributed: float
    forgiven: float
    addition_per_session: float
    percentage_increase: float
    sessions_affected: int


def generate_drift_summary(
    drift_amount: float,
    remaining_sessions: int,
    session_base_volume: float,
    config: EngineConfig = DEFAULT_CONFIG
) -> DriftSummary:
    addition = distribute_drift(drift_amount, remaining_sessions, session_base_volume, config)
    sessions = max(remaining_sessions, 0)
    redistributed = addition * sessions
    percentage = addition / session_base_volume * 100 if session_base_volume > 0 else 0.0

    return DriftSummary(
        total_drift=drift_amount,
        redistributed=redistributed,
        forgiven=drift_amount - redistributed,
        addition_per_session=addition,
        percentage_increase=percentage,
        sessions_affected=sessions,
    )


def validate_drift_redistribution(
    session_base_volume: float,
    addition_per_session: float,
    user_max_volume: Optional[float] = None,
    config: EngineConfig = DEFAULT_CONFIG
) -> Tuple[bool, Optional[str]]:
    """
    Check that redistribution will not produce an impossible session.

    Returns:
        Tuple of (valid, reason). reason is None when valid.
    """
    new_volume = session_base_volume + addition_per_session

    if user_max_volume and new_volume > user_max_volume:
        return False, (
            f"Redistributed volume ({round_half_up(new_volume)}) exceeds "
            f"user max capacity ({user_max_volume:g})"
        )

    if session_base_volume <= 0:
        return addition_per_session <= 0, (
            None if addition_per_session <= 0 else "Cannot add drift to a session with no base volume"
        )

    percentage = addition_per_session / session_base_volume
    if percentage > config.redistribution_safety_limit:
        return False, (
            f"Increase ({round_half_up(percentage * 100)}%) exceeds safety limit "
            f"({config.redistribution_safety_limit:.0%})"
        )

    return True, None


def make_drift_item(
    muscle_group: MuscleGroup,
    amount: float,
    source_session_id: Optional[str] = None,
    created_at: Optional[datetime] = None,
    redistributed: bool = False
) -> DriftItem:
    """Ledger entry; redistributed marks drift carried into later sessions."""
    return DriftItem(
        muscle_group=muscle_group,
        amount=amount,
        source_session_id=source_session_id,
        redistributed=redistributed,
        created_at=created_at,
    )
