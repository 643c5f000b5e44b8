"""Exception types raised by the drift engine."""


class DriftEngineError(Exception):
    """Base class for all engine errors."""


class ConfigurationError(DriftEngineError, ValueError):
    """Required configuration or reference data is missing or malformed."""


class InsufficientExercisesError(ConfigurationError):
    """A slot has no eligible exercise, so no session can be generated."""

    def __init__(self, muscle_group, slot):
        self.muscle_group = muscle_group
        self.slot = slot
        group = getattr(muscle_group, 'value', muscle_group)
        slot_number = getattr(slot, 'value', slot)
        super().__init__(
            f"Insufficient exercises for {group} workout "
            f"(no candidates for slot {slot_number}, need at least 1 per slot)"
        )


class SessionStateError(DriftEngineError):
    """Operation is not allowed for the session's current status."""
