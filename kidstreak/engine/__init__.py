"""Daily task cycle and streak engine."""

from kidstreak.engine.daily_cycle import DailyCycleController
from kidstreak.engine.date_authority import DateAuthority
from kidstreak.engine.facade import Engine
from kidstreak.engine.streak_tracker import StreakTracker


__all__ = [
    "DailyCycleController",
    "DateAuthority",
    "Engine",
    "StreakTracker",
]
