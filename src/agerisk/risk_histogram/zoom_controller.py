"""Zoom state machine for the risk histogram (brush to zoom, double-click to reset)."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Optional

from agerisk.utils.logging import get_logger
from agerisk.risk_histogram.errors import InvalidZoomRange
from agerisk.risk_histogram.row_store import Extent

logger = get_logger(__name__)


@dataclass(frozen=True)
class ZoomState:
    """Either Overview (x0 and x1 are None) or Zoomed(x0, x1) with integer x0 < x1."""

    x0: Optional[int] = None
    x1: Optional[int] = None

    def __post_init__(self) -> None:
        if (self.x0 is None) != (self.x1 is None):
            raise InvalidZoomRange(f"Zoom bounds must both be set or both be None, got ({self.x0}, {self.x1})")
        if self.x0 is not None and self.x0 >= self.x1:
            raise InvalidZoomRange(f"Zoom range must satisfy x0 < x1, got ({self.x0}, {self.x1})")

    @classmethod
    def overview(cls) -> "ZoomState":
        return cls()

    @classmethod
    def zoomed(cls, x0: int, x1: int) -> "ZoomState":
        return cls(int(x0), int(x1))

    @property
    def is_zoomed(self) -> bool:
        return self.x0 is not None

    @property
    def domain(self) -> Optional[tuple[int, int]]:
        """The committed sub-range, or None in Overview."""
        if self.x0 is None:
            return None
        return (self.x0, self.x1)

    def __str__(self) -> str:
        if not self.is_zoomed:
            return "Overview"
        return f"Zoomed({self.x0}, {self.x1})"


OVERVIEW = ZoomState.overview()


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class ZoomController:
    """Interprets brush selections and transitions between Overview and Zoomed.

    Transitions:
        - commit(a, b): from either state to Zoomed(round(min), round(max)).
        - reset_to_overview(): from either state to Overview.
        - clear_selection_only(): never changes state. Clearing the brush after
          a zoom was applied keeps the zoom.

    Every call to commit() or reset_to_overview() invokes on_change with the
    new state so the owner can recompute the histogram from scratch.
    """

    def __init__(
        self,
        *,
        age_extent: Optional[Extent] = None,
        on_change: Optional[Callable[[ZoomState], None]] = None,
    ) -> None:
        """
        Args:
            age_extent: If set, committed bounds are clamped to the integer ages
                inside this extent.
            on_change: Called after every state transition with the new state.
        """
        self._age_extent = age_extent
        self._on_change = on_change
        self._state: ZoomState = OVERVIEW

    @property
    def state(self) -> ZoomState:
        return self._state

    def commit(self, raw_x0: float, raw_x1: float) -> ZoomState:
        """Zoom to the age sub-range spanned by a committed brush selection.

        Raises:
            InvalidZoomRange: If a bound is not finite, or the range is empty
                after ordering, rounding and clamping. The prior state is kept.
        """
        try:
            a, b = float(raw_x0), float(raw_x1)
        except (TypeError, ValueError):
            raise InvalidZoomRange(f"Zoom bounds must be numbers, got ({raw_x0!r}, {raw_x1!r})") from None
        if not (math.isfinite(a) and math.isfinite(b)):
            raise InvalidZoomRange(f"Zoom bounds must be finite, got ({a}, {b})")

        x0 = _round_half_up(min(a, b))
        x1 = _round_half_up(max(a, b))
        if self._age_extent is not None:
            lo = math.ceil(self._age_extent.min)
            hi = math.floor(self._age_extent.max)
            x0 = min(max(x0, lo), hi)
            x1 = min(max(x1, lo), hi)
        if x0 >= x1:
            raise InvalidZoomRange(f"Zoom selection ({a}, {b}) normalizes to an empty range ({x0}, {x1})")

        self._set_state(ZoomState.zoomed(x0, x1))
        return self._state

    def reset_to_overview(self) -> ZoomState:
        self._set_state(OVERVIEW)
        return self._state

    def clear_selection_only(self) -> ZoomState:
        """Handle a brush gesture that ended with no selection. No transition."""
        logger.debug(f"clear_selection_only: keeping {self._state}")
        return self._state

    def handle_relayout(self, payload: dict[str, Any]) -> bool:
        """Translate a Plotly relayout event into a controller call.

        Recognized payloads:
            - ``{"selections": []}``: brush cleared -> clear_selection_only().
            - ``selections[0].x0``/``x1`` keys, or a rect in ``selections``:
              brush committed -> commit().
            - ``xaxis.range[0]``/``xaxis.range[1]``: drag zoom -> commit().
            - ``xaxis.autorange``: double-click -> reset_to_overview().

        Returns:
            True if the zoom state changed (a full recompute is needed).
        """
        if not payload:
            return False
        before = self._state

        if payload.get("xaxis.autorange"):
            self.reset_to_overview()
            return before != self._state

        bounds = self._bounds_from_payload(payload)
        if bounds is None:
            if "selections" in payload and not payload.get("selections"):
                self.clear_selection_only()
            return False

        try:
            self.commit(*bounds)
        except InvalidZoomRange as e:
            logger.warning(f"Ignoring brush selection: {e}")
            return False
        return before != self._state

    @staticmethod
    def _bounds_from_payload(payload: dict[str, Any]) -> Optional[tuple[float, float]]:
        x0 = payload.get("selections[0].x0")
        x1 = payload.get("selections[0].x1")
        if x0 is not None and x1 is not None:
            return (x0, x1)

        selections = payload.get("selections") or []
        if selections and isinstance(selections[0], dict):
            sel = selections[0]
            if sel.get("type", "rect") == "rect" and sel.get("x0") is not None and sel.get("x1") is not None:
                return (sel["x0"], sel["x1"])

        r0 = payload.get("xaxis.range[0]")
        r1 = payload.get("xaxis.range[1]")
        if r0 is not None and r1 is not None:
            return (r0, r1)
        return None

    def _set_state(self, new_state: ZoomState) -> None:
        old_state = self._state
        self._state = new_state
        logger.info(f"Zoom {old_state} -> {new_state}")
        if self._on_change is not None:
            self._on_change(new_state)
