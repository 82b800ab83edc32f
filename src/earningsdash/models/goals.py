"""
Earnings goal models — provider-owned targets and their progress.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class GoalType(str, Enum):
    """Period a goal target applies to."""

    DAILY = "daily"
    MONTHLY = "monthly"


class GoalStatus(str, Enum):
    """Qualitative banding of progress against a target."""

    BEHIND = "behind"  # < 75%
    ON_TRACK = "on-track"  # 75-99%
    ACHIEVED = "achieved"  # >= 100%


class Goal(BaseModel):
    """An earnings target owned by a provider.

    At most one active goal exists per ``(provider_id, goal_type)``.
    """

    goal_id: str
    provider_id: str
    goal_type: GoalType
    target_amount: Decimal = Field(gt=0, decimal_places=2)
    start_date: date | None = None
    end_date: date | None = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def has_explicit_window(self) -> bool:
        return self.start_date is not None and self.end_date is not None


class GoalProgress(BaseModel):
    """Current earnings measured against a goal's target."""

    goal_id: str
    goal_type: GoalType
    target_amount: Decimal
    current_amount: Decimal
    progress_percentage: Decimal
    status: GoalStatus
    window_start: date
    window_end: date
    remaining_amount: Decimal
    days_remaining: int = 0

    @property
    def is_achieved(self) -> bool:
        return self.status == GoalStatus.ACHIEVED
