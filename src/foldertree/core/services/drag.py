from __future__ import annotations

"""
Drag-Hover Dwell Expansion.

Per-drop-target state machine that auto-expands a folder after the
pointer has hovered over it for a fixed dwell time. Purely presentational:
it only toggles the folder's expansion and never influences the move
planner.

    IDLE --drag_enter--> HOVERING --(dwell elapsed)--> EXPANDED
    any state --drag_leave / drop / cancel--> IDLE
"""

import logging
import threading
from enum import Enum
from typing import Any, Callable, Optional

from foldertree.core.services.tree_store import TreeStore
from foldertree.domain.constants import DRAG_DWELL_MS

logger = logging.getLogger(__name__)

TimerFactory = Callable[[float, Callable[[], None]], "threading.Timer"]


class HoverState(str, Enum):
    IDLE = "idle"
    HOVERING = "hovering"
    EXPANDED = "expanded"


class DwellExpander:
    """
    Dwell timer bound to a single drop target.

    Args:
        on_expand: Invoked once the dwell elapses without a leave/drop.
        dwell_seconds: Hover duration before expansion.
        timer_factory: Builds a startable, cancellable timer. Defaults to
                       threading.Timer; tests inject a manual fake.
    """

    def __init__(
            self,
            on_expand: Callable[[], None],
            dwell_seconds: float = DRAG_DWELL_MS / 1000.0,
            timer_factory: Optional[TimerFactory] = None,
    ) -> None:
        self._on_expand = on_expand
        self._dwell_seconds = dwell_seconds
        self._timer_factory: TimerFactory = timer_factory or threading.Timer
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        self._generation = 0
        self.state = HoverState.IDLE

    def drag_enter(self) -> None:
        """Start the dwell countdown unless one is already running."""
        with self._lock:
            if self.state is not HoverState.IDLE:
                return
            self.state = HoverState.HOVERING
            self._generation += 1
            generation = self._generation
            timer = self._timer_factory(self._dwell_seconds, lambda: self._elapsed(generation))
            self._timer = timer
        timer.start()

    def drag_leave(self) -> None:
        self._reset()

    def drop(self) -> None:
        self._reset()

    def cancel(self) -> None:
        self._reset()

    # -------------------------------------------------------------------------
    # Private Helpers
    # -------------------------------------------------------------------------

    def _reset(self) -> None:
        with self._lock:
            timer = self._timer
            self._timer = None
            self._generation += 1
            self.state = HoverState.IDLE
        if timer is not None:
            timer.cancel()

    def _elapsed(self, generation: int) -> None:
        with self._lock:
            # Stale timers from a cancelled hover must not expand
            if generation != self._generation or self.state is not HoverState.HOVERING:
                return
            self.state = HoverState.EXPANDED
            self._timer = None

        try:
            self._on_expand()
        except Exception as e:
            logger.error(f"DwellExpander: Expansion callback failed: {e}")


def folder_dwell_expander(
        store: TreeStore,
        folder_id: str,
        dwell_ms: Optional[int] = None,
        **kwargs: Any,
) -> DwellExpander:
    """
    Build an expander that reveals folder_id in store after the dwell.

    Args:
        store: Store owning the folder.
        folder_id: Drop-target folder to expand.
        dwell_ms: Hover time override; defaults to the store's configured dwell.
        **kwargs: Forwarded to DwellExpander (e.g. timer_factory).
    """
    if dwell_ms is None:
        dwell_ms = store.drag_dwell_ms
    return DwellExpander(
        on_expand=lambda: store.set_expanded(folder_id, True),
        dwell_seconds=dwell_ms / 1000.0,
        **kwargs,
    )
