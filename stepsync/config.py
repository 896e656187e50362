"""
Configuration - Tunables for the synchronization core.

Defaults suit the engine's normal 22.4 steps per second. Every value
can be overridden from the environment:

    STEPSYNC_DEBIT_HORIZON     reconciles before an unconfirmed debit is dropped
    STEPSYNC_CACHE_RETENTION   steps a cached opponent entity is kept (0 = forever)
    STEPSYNC_STEP_BUDGET_MS    agent time per step before a warning is logged
    STEPSYNC_LOG_LEVEL         log level used by the CLI
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoreConfig:
    debit_horizon_steps: int = 4
    cache_retention_steps: int = 2688  # two minutes of game time
    step_budget_ms: float = 1000.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> CoreConfig:
        """Build a config from STEPSYNC_* variables, falling back to defaults."""
        defaults = cls()
        return cls(
            debit_horizon_steps=_env_number("STEPSYNC_DEBIT_HORIZON", defaults.debit_horizon_steps, int),
            cache_retention_steps=_env_number("STEPSYNC_CACHE_RETENTION", defaults.cache_retention_steps, int),
            step_budget_ms=_env_number("STEPSYNC_STEP_BUDGET_MS", defaults.step_budget_ms, float),
            log_level=os.getenv("STEPSYNC_LOG_LEVEL", defaults.log_level).upper(),
        )


def _env_number(name: str, default, cast):
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        parsed = cast(value)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %r", name, value, default)
        return default
    if parsed < 0:
        logger.warning("Ignoring negative %s=%r, using %r", name, value, default)
        return default
    return parsed


def configure_logging(level: str | int = "INFO"):
    """Set up root logging for command-line use."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
