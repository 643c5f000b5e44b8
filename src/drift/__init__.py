"""
DRIFT: Adaptive Training Load Engine

Internal Codename: DRIFT
Periodized strength-training planner library. Weekly per-muscle-group volume
targets go in; sessions, drift ledgers and next week's targets come out.
"""

from .config import EngineConfig, DEFAULT_CONFIG
from .errors import (
    DriftEngineError,
    ConfigurationError,
    InsufficientExercisesError,
    SessionStateError,
)

__version__ = '0.1.0'

__all__ = [
    'EngineConfig',
    'DEFAULT_CONFIG',
    'DriftEngineError',
    'ConfigurationError',
    'InsufficientExercisesError',
    'SessionStateError',
]
