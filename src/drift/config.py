"""
Engine Configuration

Policy constants for the training load engine. Every threshold the volume,
drift, overload and prescription modules agree on lives here, so a single
EngineConfig keeps the user-visible numbers consistent.

Loads from config/engine.yaml if available, else uses defaults. The path can
be overridden with the DRIFT_CONFIG environment variable (a .env file is
honored).
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from dotenv import load_dotenv

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / 'config' / 'engine.yaml'


def load_config_yaml(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from YAML file, return empty dict if not found."""
    load_dotenv()

    if path is None:
        path = Path(os.getenv('DRIFT_CONFIG', DEFAULT_CONFIG_PATH))

    path = Path(path)
    if not path.exists():
        logger.debug(f"No engine config at {path}, using defaults")
        return {}

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigurationError(f"Engine config {path} must be a mapping, got {type(data).__name__}")

    logger.info(f"Loaded engine config from {path}")
    return data


def _default_overload_bands() -> List[Dict[str, Any]]:
    return [
        # Newbie gains window
        {'through_week': 4, 'tiers': [(6, 0.05), (8, 0.025)], 'otherwise': 0.0},
        # Weeks 5+: capped at +2.5%
        {'through_week': None, 'tiers': [(8, 0.025)], 'otherwise': 0.0},
    ]


@dataclass
class EngineConfig:
    """Configuration for volume accounting, prescription, drift and overload."""

    # Slot theory
    slot_rep_ranges: Dict[int, Tuple[int, int]] = field(
        default_factory=lambda: {1: (5, 8), 2: (8, 12), 3: (12, 15)}
    )
    slot_volume_split: Dict[int, float] = field(
        default_factory=lambda: {1: 0.50, 2: 0.30, 3: 0.20}
    )
    slot_default_weights: Dict[int, float] = field(
        default_factory=lambda: {1: 135.0, 2: 95.0, 3: 45.0}  # empty bar, lighter, very light
    )
    volume_tolerance: float = 0.10  # +/- for practical whole sets
    max_sets: int = 10
    max_isolation_reps: int = 30

    # Drift / forgiveness
    forgiveness_threshold: float = 0.10  # misses below this are forgiven outright
    session_cap: float = 0.20            # max drift added per session, fraction of base
    redistribution_safety_limit: float = 0.50

    # Progressive overload
    deload_frequency: int = 4
    deload_reduction: float = 0.40
    max_volume_multiplier: float = 2.0
    neutral_rpe: float = 7.0
    overload_bands: List[Dict[str, Any]] = field(default_factory=_default_overload_bands)

    # Readiness
    readiness_multipliers: Dict[str, float] = field(
        default_factory=lambda: {'great': 1.00, 'okay': 0.90, 'rough': 0.80}
    )

    # Exercise selection
    history_size: int = 3
    equipment_priority: List[str] = field(
        default_factory=lambda: ['barbell', 'dumbbell', 'machine', 'cable', 'bodyweight', 'smithMachine']
    )
    easy_equipment: List[str] = field(default_factory=lambda: ['machine', 'cable'])

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Reject configurations the engine cannot honor."""
        if set(self.slot_volume_split) != {1, 2, 3}:
            raise ConfigurationError("slot_volume_split must define slots 1, 2 and 3")
        if abs(sum(self.slot_volume_split.values()) - 1.0) > 1e-9:
            raise ConfigurationError(
                f"slot_volume_split must sum to 1.0, got {sum(self.slot_volume_split.values())}"
            )
        for slot, (low, high) in self.slot_rep_ranges.items():
            if low < 1 or low > high:
                raise ConfigurationError(f"Invalid rep range for slot {slot}: ({low}, {high})")
        if self.deload_frequency < 1:
            raise ConfigurationError("deload_frequency must be at least 1")
        if not 0 <= self.deload_reduction < 1:
            raise ConfigurationError("deload_reduction must be in [0, 1)")
        for mood in ('great', 'okay', 'rough'):
            if mood not in self.readiness_multipliers:
                raise ConfigurationError(f"readiness_multipliers is missing '{mood}'")

    @classmethod
    def from_yaml(cls, path: Optional[Path] = None) -> 'EngineConfig':
        """Load config from YAML file."""
        yaml_config = load_config_yaml(path)

        kwargs = {}

        if 'slots' in yaml_config:
            slots = yaml_config['slots']
            if 'rep_ranges' in slots:
                kwargs['slot_rep_ranges'] = {
                    int(k): tuple(v) for k, v in slots['rep_ranges'].items()
                }
            if 'volume_split' in slots:
                kwargs['slot_volume_split'] = {
                    int(k): float(v) for k, v in slots['volume_split'].items()
                }
            if 'default_weights' in slots:
                kwargs['slot_default_weights'] = {
                    int(k): float(v) for k, v in slots['default_weights'].items()
                }
            kwargs['volume_tolerance'] = slots.get('volume_tolerance', 0.10)
            kwargs['max_sets'] = slots.get('max_sets', 10)
            kwargs['max_isolation_reps'] = slots.get('max_isolation_reps', 30)

        if 'drift' in yaml_config:
            d = yaml_config['drift']
            kwargs['forgiveness_threshold'] = d.get('forgiveness_threshold', 0.10)
            kwargs['session_cap'] = d.get('session_cap', 0.20)
            kwargs['redistribution_safety_limit'] = d.get('safety_limit', 0.50)

        if 'overload' in yaml_config:
            o = yaml_config['overload']
            kwargs['deload_frequency'] = o.get('deload_frequency', 4)
            kwargs['deload_reduction'] = o.get('deload_reduction', 0.40)
            kwargs['max_volume_multiplier'] = o.get('max_multiplier', 2.0)
            kwargs['neutral_rpe'] = o.get('neutral_rpe', 7.0)
            if 'bands' in o:
                kwargs['overload_bands'] = [
                    {
                        'through_week': band.get('through_week'),
                        'tiers': [tuple(t) for t in band.get('tiers', [])],
                        'otherwise': band.get('otherwise', 0.0),
                    }
                    for band in o['bands']
                ]

        if 'readiness' in yaml_config:
            kwargs['readiness_multipliers'] = dict(yaml_config['readiness'])

        if 'selection' in yaml_config:
            s = yaml_config['selection']
            kwargs['history_size'] = s.get('history_size', 3)
            if 'equipment_priority' in s:
                kwargs['equipment_priority'] = list(s['equipment_priority'])
            if 'easy_equipment' in s:
                kwargs['easy_equipment'] = list(s['easy_equipment'])

        return cls(**kwargs)

    def target_reps(self, slot: int) -> int:
        """Floor midpoint of the slot's rep range (slot 1 [5, 8] -> 6)."""
        low, high = self.slot_rep_ranges[slot]
        return (low + high) // 2

    def overload_increase(self, average_rpe: float, week_number: int) -> float:
        """Look up the weekly increase for an RPE within a week band."""
        for band in self.overload_bands:
            through = band.get('through_week')
            if through is not None and week_number > through:
                continue
            for max_rpe, increase in band['tiers']:
                if average_rpe <= max_rpe:
                    return increase
            return band.get('otherwise', 0.0)
        return 0.0


DEFAULT_CONFIG = EngineConfig()
