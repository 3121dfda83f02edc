"""Drill-down navigation for time-series charts (monthly -> weekly -> daily)."""

from __future__ import annotations

import logging
from numbers import Integral
from typing import Hashable, List, Mapping, Optional, Tuple

from plantview.periods.categories import generate, week_label
from plantview.periods.models import Category, DateInterval, DrillState
from plantview.utils.helpers import end_of_month, end_of_week, start_of_month, start_of_week

logger = logging.getLogger("plantview.periods")

# granularity -> granularity shown after clicking one of its categories
CHILD_GRANULARITY = {"monthly": "weekly", "weekly": "daily"}


class DrillDownNavigator:
    """Stack of drill states on top of an externally supplied root.

    The root (interval, granularity) belongs to whoever owns the filters;
    the navigator only records the narrower views the user clicked into.
    An empty stack means the root is in effect.
    """

    def __init__(
        self,
        interval: Optional[DateInterval],
        granularity: str,
        refresh_key: Hashable = None,
        freq_rule: Optional[Mapping[str, str]] = None,
    ):
        self._root = DrillState(granularity, interval, ()) if interval is not None else None
        self._refresh_key = refresh_key
        self._stack: List[DrillState] = []
        self._freq_rule = freq_rule

    # -------- external inputs --------

    def reset(self, interval: Optional[DateInterval], granularity: str, refresh_key: Hashable = None) -> None:
        """Replace the root and discard every drilled level."""
        self._root = DrillState(granularity, interval, ()) if interval is not None else None
        self._refresh_key = refresh_key
        if self._stack:
            logger.debug("Drill stack cleared (%d level(s))", len(self._stack))
        self._stack = []

    def sync(self, interval: Optional[DateInterval], granularity: str, refresh_key: Hashable = None) -> bool:
        """Reset only if any of the external inputs differ from the last seen ones."""
        root_interval = self._root.interval if self._root else None
        root_granularity = self._root.granularity if self._root else granularity
        if (
            interval == root_interval
            and granularity == root_granularity
            and refresh_key == self._refresh_key
        ):
            return False
        self.reset(interval, granularity, refresh_key)
        return True

    # -------- state --------

    def current(self) -> Optional[DrillState]:
        if self._stack:
            return self._stack[-1]
        return self._root

    def categories(self) -> List[Category]:
        state = self.current()
        if state is None:
            return []
        return generate(state.interval, state.granularity, self._freq_rule)

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def can_drill_down(self) -> bool:
        state = self.current()
        return state is not None and state.granularity in CHILD_GRANULARITY

    @property
    def can_go_back(self) -> bool:
        return bool(self._stack)

    # -------- transitions --------

    def drill_down(self, index: int) -> bool:
        """Narrow into the category at ``index``; returns whether anything changed."""
        if not self.can_drill_down:
            logger.debug("Drill-down ignored at terminal granularity")
            return False

        categories = self.categories()
        # bool is an Integral subclass but never a category position
        valid = isinstance(index, Integral) and not isinstance(index, bool)
        if not valid or not 0 <= index < len(categories):
            logger.debug("Drill-down ignored for index %r of %d", index, len(categories))
            return False

        state = self.current()
        clicked = categories[index].date
        interval, item = _child_view(state.granularity, clicked)
        self._stack.append(
            DrillState(
                granularity=CHILD_GRANULARITY[state.granularity],
                interval=interval,
                breadcrumb=state.breadcrumb + (item,),
            )
        )
        return True

    def back(self) -> bool:
        if not self._stack:
            logger.debug("Back ignored at root")
            return False
        self._stack.pop()
        return True


def _child_view(granularity: str, clicked) -> Tuple[DateInterval, str]:
    if granularity == "monthly":
        return (
            DateInterval(start_of_month(clicked), end_of_month(clicked)),
            f"{clicked:%b %Y}",
        )
    return (
        DateInterval(start_of_week(clicked), end_of_week(clicked)),
        week_label(clicked),
    )


__all__ = ["CHILD_GRANULARITY", "DrillDownNavigator"]
