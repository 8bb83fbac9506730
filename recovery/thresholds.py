"""
Heuristic cut-offs for the recovery predictions, tips and today's focus.

These are product heuristics, not clinically validated values. They are kept
together so they can be tuned per deployment through RECOVERY_* environment
variables (see ``RecoveryThresholds.from_env``).
"""

import os
from dataclasses import dataclass, fields, replace
from typing import Dict, Optional

from logging_config import get_logger

logger = get_logger(__name__)

# Samples consumed for rolling means (newest first).
METRIC_WINDOW = 7


@dataclass(frozen=True)
class RecoveryThresholds:
    # Rolling-mean prediction rules
    high_energy: float = 7.0
    low_energy: float = 4.0
    high_mood: float = 7.0
    low_mood: float = 4.0
    good_sleep_hours: float = 7.0
    poor_sleep_hours: float = 5.0

    # "Faster Recovery": elapsed share of the expected window (percent)
    # must be below this while mean energy is at least faster_recovery_min_energy.
    faster_recovery_max_progress: float = 80.0
    faster_recovery_min_energy: float = 6.0

    # Tip rules
    tip_sleep_hours: float = 6.0
    tip_low_energy: float = 5.0
    tip_low_mood: float = 4.0

    # Today's focus, latest sample only
    focus_low_energy: int = 3
    focus_low_mood: int = 3
    focus_low_sleep_hours: float = 5.0

    @classmethod
    def from_env(cls, env: Optional[Dict[str, str]] = None) -> "RecoveryThresholds":
        """
        Build thresholds from RECOVERY_<FIELD_NAME> variables, e.g.
        RECOVERY_HIGH_ENERGY=8. Unparseable values are ignored with a warning.
        """
        env = dict(os.environ) if env is None else env
        overrides = {}
        for field in fields(cls):
            raw = env.get(f"RECOVERY_{field.name.upper()}")
            if raw is None or raw == "":
                continue
            caster = int if field.type in (int, "int") else float
            try:
                overrides[field.name] = caster(raw)
            except ValueError:
                logger.warning(f"Ignoring invalid RECOVERY_{field.name.upper()}={raw!r}")
        return replace(cls(), **overrides)


DEFAULT_THRESHOLDS = RecoveryThresholds()
