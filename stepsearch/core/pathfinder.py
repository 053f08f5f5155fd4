# stepsearch/core/pathfinder.py
#!/usr/bin/env python3
"""
Stepwise search engine: one frontier expansion per step().

One engine covers all four strategies; the mode only changes which
neighbours are admitted and how they are keyed in the frontier:

    mode      admit                         cost update          priority
    BFS       not explored, not queued      first assignment     explored count
    Dijkstra  not explored                  relax                g
    Greedy    not explored, not queued      unconditional        h
    A*        not explored                  relax                g + h

g is distance_traveled; a move costs graph.move_cost(current, nbr), i.e. the
octile step plus the terrain cost of the cell being left. h is
graph.distance(nbr, goal).

step() never sleeps or yields control by itself; drivers decide pacing,
either one step per tick (viewer), all at once (run()), or lazily via
iter_steps().
"""

import logging
import time
from dataclasses import dataclass, field
from operator import attrgetter
from typing import Dict, Iterator, List, Optional, Set

from stepsearch.config import DEFAULT_GOAL_POLICY, DEFAULT_MODE
from stepsearch.core.graph import Graph, Node
from stepsearch.core.observer import SearchObserver, SearchSnapshot
from stepsearch.core.priority_queue import PriorityQueue
from stepsearch.core.types import (
    Cell,
    EngineState,
    GoalPolicy,
    InitError,
    InitResult,
    SearchMode,
    StepResult,
    StepStatus,
)

logger = logging.getLogger(__name__)

# modes that keep improving g for queued nodes until they are dequeued
_RELAXING = (SearchMode.DIJKSTRA, SearchMode.ASTAR)


def _frontier_queue() -> PriorityQueue:
    return PriorityQueue(key=attrgetter("priority"))


@dataclass
class Pathfinder:
    name: str = "Pathfinder"

    # Run configuration
    graph: Optional[Graph] = None
    start: Optional[Node] = None
    goal: Optional[Node] = None
    mode: SearchMode = field(default_factory=lambda: SearchMode.parse(DEFAULT_MODE))
    goal_policy: GoalPolicy = field(default_factory=lambda: GoalPolicy.parse(DEFAULT_GOAL_POLICY))

    # Internal state
    frontier: PriorityQueue = field(default_factory=_frontier_queue)
    explored: List[Node] = field(default_factory=list)      # insertion order
    path: List[Node] = field(default_factory=list)
    step_count: int = 0
    state: EngineState = EngineState.UNINITIALIZED
    observers: List[SearchObserver] = field(default_factory=list)

    _explored_set: Set[Node] = field(default_factory=set, repr=False)
    _final: Optional[StepResult] = field(default=None, repr=False)

    # -------------------- lifecycle --------------------

    def init(
        self,
        graph: Optional[Graph],
        start: Optional[Node],
        goal: Optional[Node],
        mode: "SearchMode | str | None" = None,
        goal_policy: "GoalPolicy | str | None" = None,
    ) -> InitResult:
        """Validate the run arguments and seed a fresh search.

        A failed check is logged and returned, never raised; the engine is
        left uninitialized and step() reports IDLE until init succeeds.
        """
        result = self._validate(graph, start, goal)
        if not result:
            logger.warning(f"{self.name}: {result.message}")
            self.graph = self.start = self.goal = None
            self._clear()
            self.state = EngineState.UNINITIALIZED
            return result

        if mode is not None:
            self.mode = SearchMode.parse(mode)
        if goal_policy is not None:
            self.goal_policy = GoalPolicy.parse(goal_policy)

        self.graph = graph
        self.start = start
        self.goal = goal
        self.reset()
        logger.info(f"{self.name}: {self.mode.label} from {start.cell} to {goal.cell} "
                    f"({self.goal_policy.value})")
        return result

    def reset(self) -> None:
        """Clear all state and seed with the start node."""
        if self.graph is None:
            return
        self.graph.reset_nodes()
        self._clear()

        self.start.distance_traveled = 0.0
        self.start.priority = 0.0
        self.frontier.enqueue(self.start)
        self.state = EngineState.READY

        snapshot = self._snapshot(StepStatus.RUNNING)
        for obs in list(self.observers):
            obs.on_search_start(snapshot)

    def _clear(self) -> None:
        self.frontier.clear()
        self.explored.clear()
        self._explored_set.clear()
        self.path.clear()
        self.step_count = 0
        self._final = None

    def _validate(self, graph: Optional[Graph], start: Optional[Node],
                  goal: Optional[Node]) -> InitResult:
        if graph is None:
            return InitResult(False, InitError.MISSING_GRAPH, "missing graph")
        if start is None or goal is None:
            return InitResult(False, InitError.MISSING_NODE, "missing start or goal node")
        if not (graph.owns(start) and graph.owns(goal)):
            return InitResult(False, InitError.FOREIGN_NODE,
                              "start and goal must be nodes of the given graph")
        if start.is_blocked or goal.is_blocked:
            return InitResult(False, InitError.BLOCKED_NODE,
                              "start and goal nodes must be unblocked")
        return InitResult(True)

    # -------------------- observers --------------------

    def add_observer(self, observer: SearchObserver) -> None:
        if observer not in self.observers:
            self.observers.append(observer)

    def remove_observer(self, observer: SearchObserver) -> None:
        if observer in self.observers:
            self.observers.remove(observer)

    # -------------------- main stepping logic --------------------

    @property
    def is_complete(self) -> bool:
        return self.state == EngineState.COMPLETE

    def step(self) -> StepResult:
        """
        Run ONE search step:
          - Stop with NO_PATH if the frontier is empty.
          - Dequeue the best node and finalize it.
          - Expand its neighbours per the active mode.
          - Stop with DONE once the goal counts as found (goal_policy).
        """
        if self.state == EngineState.UNINITIALIZED:
            return StepResult(status=StepStatus.IDLE, metrics={"algo": self.name})

        if self._final is not None:
            return self._final

        t0 = time.perf_counter()
        self.state = EngineState.RUNNING

        if not self.frontier:
            return self._finish(StepStatus.NO_PATH, None, [], t0)

        current = self.frontier.dequeue()
        self.step_count += 1
        if current not in self._explored_set:
            self._explored_set.add(current)
            self.explored.append(current)

        if self.goal_policy == GoalPolicy.ON_FINALIZE and current is self.goal:
            return self._finish(StepStatus.DONE, current, [], t0)

        opened = self._expand(current)

        if self.goal_policy == GoalPolicy.ON_DISCOVERY and (
                current is self.goal or self.goal in self.frontier):
            return self._finish(StepStatus.DONE, current, opened, t0)

        result = StepResult(status=StepStatus.RUNNING, opened=opened, closed=[current.cell],
                            current=current.cell, metrics=self._metrics())
        snapshot = self._snapshot(StepStatus.RUNNING, current, opened,
                                  (time.perf_counter() - t0) * 1000.0)
        for obs in list(self.observers):
            obs.on_step(snapshot)
        return result

    def _expand(self, current: Node) -> List[Cell]:
        opened: List[Cell] = []
        relaxing = self.mode in _RELAXING
        for nbr in current.neighbors:
            if nbr in self._explored_set:
                continue
            queued = nbr in self.frontier
            if queued and not relaxing:
                continue

            alt = current.distance_traveled + self.graph.move_cost(current, nbr)
            if relaxing and alt >= nbr.distance_traveled:
                continue

            nbr.distance_traveled = alt
            nbr.previous = current.cell
            nbr.priority = self._priority(nbr)
            if queued:
                self.frontier.update(nbr)
            else:
                self.frontier.enqueue(nbr)
                opened.append(nbr.cell)
        return opened

    def _priority(self, node: Node) -> float:
        if self.mode == SearchMode.BFS:
            return float(len(self.explored))
        if self.mode == SearchMode.DIJKSTRA:
            return node.distance_traveled
        if self.mode == SearchMode.GREEDY:
            return self.graph.distance(node, self.goal)
        return node.distance_traveled + self.graph.distance(node, self.goal)

    def _finish(self, status: StepStatus, current: Optional[Node], opened: List[Cell],
                t0: float) -> StepResult:
        self.state = EngineState.COMPLETE
        if status == StepStatus.DONE:
            self.path = self.get_path(self.goal)
        cells = [n.cell for n in self.path] if status == StepStatus.DONE else None
        metrics = self._metrics()

        result = StepResult(status=status, opened=opened,
                            closed=[current.cell] if current is not None else [],
                            current=current.cell if current is not None else None,
                            path=cells, metrics=metrics)
        # later calls repeat the outcome without re-reporting this step's deltas
        self._final = StepResult(status=status, path=cells, metrics=metrics)

        if status == StepStatus.DONE:
            logger.info(f"{self.name}: {self.mode.label} found a path of {len(self.path)} nodes "
                        f"(cost {metrics['total_cost']:.2f}) in {self.step_count} steps")
        else:
            logger.info(f"{self.name}: {self.mode.label} exhausted the frontier after "
                        f"{self.step_count} steps, no path")

        snapshot = self._snapshot(status, current, opened, (time.perf_counter() - t0) * 1000.0)
        for obs in list(self.observers):
            obs.on_step(snapshot)
        for obs in list(self.observers):
            obs.on_search_end(snapshot)
        return result

    # -------------------- drivers --------------------

    def run(self, max_steps: Optional[int] = None) -> StepResult:
        """Step back-to-back until a terminal status (or max_steps)."""
        if self.state == EngineState.UNINITIALIZED:
            return self.step()
        result = self._final or StepResult(status=StepStatus.RUNNING, metrics=self._metrics())
        taken = 0
        while result.status == StepStatus.RUNNING:
            if max_steps is not None and taken >= max_steps:
                break
            result = self.step()
            taken += 1
        return result

    def iter_steps(self) -> Iterator[StepResult]:
        """Yield one StepResult per resumption until the search is over."""
        while True:
            result = self.step()
            yield result
            if result.status != StepStatus.RUNNING:
                return

    # -------------------- results --------------------

    def get_path(self, goal_node: Optional[Node]) -> List[Node]:
        if goal_node is None or self.graph is None:
            return []
        if goal_node.previous is None and goal_node is not self.start:
            return []
        nodes: List[Node] = [goal_node]
        cur = goal_node
        while cur.previous is not None:
            cur = self.graph.node_at(*cur.previous)
            nodes.append(cur)
        nodes.reverse()
        return nodes

    def path_cost(self, path: Optional[List[Node]] = None) -> float:
        nodes = self.path if path is None else path
        if self.graph is None:
            return 0.0
        return sum(self.graph.move_cost(a, b) for a, b in zip(nodes, nodes[1:]))

    def frontier_nodes(self) -> List[Node]:
        return sorted(self.frontier.to_list(), key=attrgetter("priority"))

    def explored_nodes(self) -> List[Node]:
        return list(self.explored)

    def path_nodes(self) -> List[Node]:
        return list(self.path)

    # -------------------- diagnostics --------------------

    def _links(self) -> Dict[Cell, Cell]:
        if self.graph is None:
            return {}
        return {n.cell: n.previous for n in self.graph if n.previous is not None}

    def _snapshot(self, status: StepStatus, current: Optional[Node] = None,
                  opened: Optional[List[Cell]] = None, step_time_ms: float = 0.0) -> SearchSnapshot:
        return SearchSnapshot(
            mode=self.mode,
            status=status,
            state=self.state,
            step=self.step_count,
            start=self.start.cell,
            goal=self.goal.cell,
            current=current.cell if current is not None else None,
            frontier=tuple(n.cell for n in self.frontier_nodes()),
            explored=tuple(n.cell for n in self.explored),
            path=tuple(n.cell for n in self.path),
            links=self._links(),
            opened=tuple(opened or ()),
            metrics=self._metrics(),
            step_time_ms=step_time_ms,
        )

    def _metrics(self) -> dict:
        found = self.state == EngineState.COMPLETE and bool(self.path)
        return {
            "algo": self.name,
            "mode": self.mode.label,
            "popped": self.step_count,
            "open_size": len(self.frontier),
            "closed_count": len(self.explored),
            "path_len": len(self.path),
            "total_cost": self.goal.distance_traveled if found else None,
        }
