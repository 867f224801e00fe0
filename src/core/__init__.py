"""
Core module - shared types for the whole bot.
"""

from src.core.enums import (
    Session,
    Direction,
    ResultOutcome,
    WizardStep,
    StreakKind,
)

__all__ = [
    "Session",
    "Direction",
    "ResultOutcome",
    "WizardStep",
    "StreakKind",
]
