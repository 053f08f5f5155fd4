# stepsearch/core/observer.py
#!/usr/bin/env python3
"""
Notification surface between the search engine and whoever watches it.

The engine builds a SearchSnapshot after init and after every step and hands
it to each registered observer. Snapshots are plain cell data; observers
never get to touch nodes or engine internals.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from stepsearch.core.types import Cell, EngineState, SearchMode, StepStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchSnapshot:
    mode: SearchMode
    status: StepStatus
    state: EngineState
    step: int
    start: Cell
    goal: Cell
    current: Optional[Cell] = None
    frontier: Tuple[Cell, ...] = ()
    explored: Tuple[Cell, ...] = ()
    path: Tuple[Cell, ...] = ()
    links: Dict[Cell, Cell] = field(default_factory=dict)   # cell -> previous cell
    opened: Tuple[Cell, ...] = ()                            # entered frontier this step
    metrics: Dict[str, Any] = field(default_factory=dict)
    step_time_ms: float = 0.0


class SearchObserver:
    """Base observer. Override the hooks you care about."""

    def on_search_start(self, snapshot: SearchSnapshot) -> None:
        pass

    def on_step(self, snapshot: SearchSnapshot) -> None:
        pass

    def on_search_end(self, snapshot: SearchSnapshot) -> None:
        pass


class RecordingObserver(SearchObserver):
    """Keeps every snapshot it is handed."""

    def __init__(self) -> None:
        self.started: List[SearchSnapshot] = []
        self.steps: List[SearchSnapshot] = []
        self.ended: List[SearchSnapshot] = []

    def on_search_start(self, snapshot: SearchSnapshot) -> None:
        self.started.append(snapshot)

    def on_step(self, snapshot: SearchSnapshot) -> None:
        self.steps.append(snapshot)

    def on_search_end(self, snapshot: SearchSnapshot) -> None:
        self.ended.append(snapshot)

    @property
    def last(self) -> Optional[SearchSnapshot]:
        for bucket in (self.ended, self.steps, self.started):
            if bucket:
                return bucket[-1]
        return None

    def clear(self) -> None:
        self.started.clear()
        self.steps.clear()
        self.ended.clear()


class LoggingObserver(SearchObserver):
    """Writes search transitions to a logger."""

    def __init__(self, level: int = logging.DEBUG, log: Optional[logging.Logger] = None):
        self._level = level
        self._log = log or logger

    def on_search_start(self, snapshot: SearchSnapshot) -> None:
        self._log.log(self._level, f"[{snapshot.mode.label}] start {snapshot.start} "
                                   f"-> goal {snapshot.goal}")

    def on_step(self, snapshot: SearchSnapshot) -> None:
        self._log.log(
            self._level,
            f"[{snapshot.mode.label}] step {snapshot.step}: current={snapshot.current} "
            f"frontier={len(snapshot.frontier)} explored={len(snapshot.explored)} "
            f"({snapshot.step_time_ms:.3f} ms)",
        )

    def on_search_end(self, snapshot: SearchSnapshot) -> None:
        if snapshot.status == StepStatus.DONE:
            self._log.log(self._level, f"[{snapshot.mode.label}] path found in "
                                       f"{snapshot.step} steps, {len(snapshot.path)} nodes")
        else:
            self._log.log(self._level, f"[{snapshot.mode.label}] no path after "
                                       f"{snapshot.step} steps")
