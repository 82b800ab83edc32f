"""
Goal Tracking — provider earnings targets and progress against them.

Providers keep at most one active daily goal and one active monthly goal.
Setting a new goal replaces the active one of the same type in a single
atomic store operation, so there is never a moment with two active goals
(or none, when one existed before).
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any
from uuid import uuid4

from earningsdash.analyzers.aggregator import EarningsAggregator
from earningsdash.analyzers.date_ranges import DateBucket, DateRangeResolver, parse_date
from earningsdash.errors import NotFoundError, ValidationError
from earningsdash.models.earnings import CENT, ZERO
from earningsdash.models.goals import Goal, GoalProgress, GoalStatus, GoalType
from earningsdash.stores.base import GoalStore

logger = logging.getLogger("earningsdash.analyzers.goals")

ACHIEVED_THRESHOLD = Decimal("100")
ON_TRACK_THRESHOLD = Decimal("75")


def progress_status(percentage: Decimal, on_track: Decimal = ON_TRACK_THRESHOLD) -> GoalStatus:
    """Band a progress percentage into behind / on-track / achieved."""
    if percentage >= ACHIEVED_THRESHOLD:
        return GoalStatus.ACHIEVED
    if percentage >= on_track:
        return GoalStatus.ON_TRACK
    return GoalStatus.BEHIND


def _parse_goal_type(goal_type: Any) -> GoalType:
    try:
        return GoalType(goal_type)
    except ValueError:
        raise ValidationError('Goal type must be "daily" or "monthly"', goal_type=str(goal_type)) from None


def _parse_target(amount: Any) -> Decimal:
    if isinstance(amount, bool) or amount is None:
        raise ValidationError("Goal amount must be a positive number", target_amount=str(amount))
    if isinstance(amount, float) and not math.isfinite(amount):
        raise ValidationError("Goal amount must be a positive number", target_amount=str(amount))
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise ValidationError("Goal amount must be a positive number", target_amount=str(amount)) from None
    if not value.is_finite() or value <= 0:
        raise ValidationError("Goal amount must be a positive number", target_amount=str(amount))
    try:
        cents = value.quantize(CENT)
    except InvalidOperation:
        raise ValidationError("Goal amount is too large", target_amount=str(amount)) from None
    if value != cents:
        raise ValidationError("Goal amount cannot have more than two decimal places", target_amount=str(amount))
    return cents


class GoalTracker:
    """
    Manage provider earnings goals and measure progress.

    Example usage:
        tracker = GoalTracker(goal_store, aggregator)

        goal = tracker.set_goal("42", "daily", 250)
        progress = tracker.get_goal_progress("42", goal.goal_id)
        print(f"{progress.progress_percentage}% ({progress.status.value})")
    """

    def __init__(
        self,
        store: GoalStore,
        aggregator: EarningsAggregator,
        *,
        on_track_threshold: float | Decimal = ON_TRACK_THRESHOLD,
        clock: Callable[[], date] | None = None,
    ) -> None:
        self.store = store
        self.aggregator = aggregator
        self.on_track_threshold = Decimal(str(on_track_threshold))
        self.clock = clock or aggregator.clock

    def set_goal(
        self,
        provider_id: str,
        goal_type: GoalType | str,
        target_amount: Decimal | float | int | str,
        start_date: date | str | None = None,
        end_date: date | str | None = None,
    ) -> Goal:
        """
        Create a goal, replacing the active goal of the same type.

        Args:
            provider_id: Owning provider.
            goal_type: ``daily`` or ``monthly``.
            target_amount: Positive earnings target.
            start_date: Optional explicit window start.
            end_date: Optional explicit window end.

        Returns:
            The stored, active Goal.
        """
        kind = _parse_goal_type(goal_type)
        target = _parse_target(target_amount)
        start = parse_date(start_date, "start_date") if start_date is not None else None
        end = parse_date(end_date, "end_date") if end_date is not None else None

        # A half-open window is completed from the goal type's current period.
        if (start is None) != (end is None):
            default = DateRangeResolver.current_period(kind.value, self.clock())
            start = start or default.start
            end = end or default.end
        if start is not None and end is not None:
            DateRangeResolver.ensure_ordered(start, end)

        goal = Goal(
            goal_id=uuid4().hex,
            provider_id=provider_id,
            goal_type=kind,
            target_amount=target,
            start_date=start,
            end_date=end,
        )
        stored = self.store.replace_active(goal)
        logger.info(f"Set {kind.value} goal for provider {provider_id}: ${target:,.2f}")
        return stored

    def get_active_goals(self, provider_id: str) -> list[Goal]:
        return self.store.list_active(provider_id)

    def get_goal(self, provider_id: str, goal_id: str) -> Goal:
        """Fetch a goal owned by ``provider_id``."""
        goal = self.store.get(goal_id)
        if goal is None or goal.provider_id != provider_id:
            raise NotFoundError("Goal not found", goal_id=goal_id)
        return goal

    def goal_window(self, goal: Goal, today: date | None = None) -> DateBucket:
        """Explicit bounds if set, else today (daily) or this month (monthly)."""
        if goal.start_date is not None and goal.end_date is not None:
            return DateBucket(start=goal.start_date, end=goal.end_date)
        return DateRangeResolver.current_period(goal.goal_type.value, today or self.clock())

    def get_goal_progress(self, provider_id: str, goal_id: str) -> GoalProgress:
        """
        Calculate progress toward a goal.

        Args:
            provider_id: Caller's provider id; must own the goal.
            goal_id: Goal to measure.

        Returns:
            GoalProgress with current amount, percentage and status.

        Deleted (inactive) goals are still measured so their history can be
        reviewed; only ownership is checked.
        """
        goal = self.get_goal(provider_id, goal_id)
        today = self.clock()
        window = self.goal_window(goal, today)

        current = self.aggregator.get_total(provider_id, window.start, window.end)
        percentage = (current / goal.target_amount * 100).quantize(CENT, rounding=ROUND_HALF_UP)
        remaining = max(ZERO, goal.target_amount - current)

        return GoalProgress(
            goal_id=goal.goal_id,
            goal_type=goal.goal_type,
            target_amount=goal.target_amount,
            current_amount=current,
            progress_percentage=percentage,
            status=progress_status(percentage, self.on_track_threshold),
            window_start=window.start,
            window_end=window.end,
            remaining_amount=remaining,
            days_remaining=max(0, (window.end - today).days),
        )

    def delete_goal(self, provider_id: str, goal_id: str) -> bool:
        """Soft-delete a goal by clearing its active flag."""
        self.get_goal(provider_id, goal_id)
        self.store.deactivate(goal_id)
        logger.info("Deleted goal %s for provider %s", goal_id, provider_id)
        return True
