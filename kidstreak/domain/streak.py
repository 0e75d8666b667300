"""Streak and daily cycle domain models."""

from pydantic import Field

from kidstreak.domain.kid import CamelModel


class StreakState(CamelModel):
    """Per-kid run of consecutive perfect days."""

    kid_id: str = Field(..., description="ID of the kid this streak belongs to")
    streak_count: int = Field(default=0, ge=0, description="Consecutive perfect days ending on last_perfect_date")
    last_perfect_date: str | None = Field(default=None, description="Most recent perfect day (YYYY-MM-DD)")
    longest_streak: int = Field(default=0, ge=0, description="Best streak ever reached")

    @classmethod
    def empty(cls, kid_id: str) -> "StreakState":
        """Streak for a kid who has never had a perfect day."""
        return cls(kid_id=kid_id)


class ResetResult(CamelModel):
    """Outcome of a daily reset check."""

    reset_performed: bool
    today: str


class StreakResult(CamelModel):
    """Outcome of evaluating a kid's day after a completion."""

    updated: bool
    streak: StreakState | None = None


class CompletionResult(CamelModel):
    """Outcome of toggling a task's done flag through the engine."""

    task_id: str
    kid_id: str
    is_done: bool
    streak: StreakResult
