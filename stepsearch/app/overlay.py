# stepsearch/app/overlay.py
#!/usr/bin/env python3
"""
What the viewer draws, kept up to date from engine snapshots.

No pygame here: the overlay only stores cells so it can be exercised
without a display.
"""

from typing import Any, Dict, List, Optional, Set

from stepsearch.core.observer import SearchObserver, SearchSnapshot
from stepsearch.core.types import Cell, StepStatus

STATE_LABELS = {
    StepStatus.IDLE: "Idle",
    StepStatus.RUNNING: "Running",
    StepStatus.DONE: "Done",
    StepStatus.NO_PATH: "No path",
}


class GridOverlay(SearchObserver):

    def __init__(self) -> None:
        self.open_set: Set[Cell] = set()
        self.closed_set: Set[Cell] = set()
        self.path: List[Cell] = []
        self.links: Dict[Cell, Cell] = {}
        self.current: Optional[Cell] = None
        self.start: Optional[Cell] = None
        self.goal: Optional[Cell] = None
        self.status: StepStatus = StepStatus.IDLE
        self.metrics: Dict[str, Any] = {}
        self.last_step_ms: float = 0.0

    def clear(self) -> None:
        self.open_set.clear()
        self.closed_set.clear()
        self.path = []
        self.links = {}
        self.current = None
        self.start = None
        self.goal = None
        self.status = StepStatus.IDLE
        self.metrics = {}
        self.last_step_ms = 0.0

    @property
    def finished(self) -> bool:
        return self.status in (StepStatus.DONE, StepStatus.NO_PATH)

    @property
    def label(self) -> str:
        return STATE_LABELS[self.status]

    # ---------- observer hooks ----------
    def on_search_start(self, snapshot: SearchSnapshot) -> None:
        self.clear()
        self.start = snapshot.start
        self.goal = snapshot.goal
        self._apply(snapshot)
        self.status = StepStatus.IDLE

    def on_step(self, snapshot: SearchSnapshot) -> None:
        self._apply(snapshot)

    def on_search_end(self, snapshot: SearchSnapshot) -> None:
        self._apply(snapshot)

    def _apply(self, snapshot: SearchSnapshot) -> None:
        self.open_set = set(snapshot.frontier)
        self.closed_set = set(snapshot.explored)
        self.path = list(snapshot.path)
        self.links = dict(snapshot.links)
        self.current = snapshot.current
        self.status = snapshot.status
        self.metrics = dict(snapshot.metrics)
        self.last_step_ms = snapshot.step_time_ms
