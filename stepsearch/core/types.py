# stepsearch/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Tuple, Optional, Dict, Any

Cell = Tuple[int, int]  # (col, row)


class NodeType(IntEnum):
    """Terrain class of a cell. The value doubles as its additive move cost."""
    OPEN = 0
    BLOCKED = 1
    LIGHT = 2
    MEDIUM = 3
    HEAVY = 4

    @classmethod
    def from_code(cls, code: Any) -> "NodeType":
        try:
            return cls(int(code))
        except (TypeError, ValueError):
            return cls.OPEN

    @property
    def cost(self) -> int:
        return int(self)


class SearchMode(str, Enum):
    BFS = "bfs"
    DIJKSTRA = "dijkstra"
    GREEDY = "greedy"
    ASTAR = "astar"

    @property
    def label(self) -> str:
        return _MODE_LABELS[self]

    @classmethod
    def parse(cls, text: "str | SearchMode") -> "SearchMode":
        if isinstance(text, SearchMode):
            return text
        key = str(text).strip().lower().replace("_", "-").replace(" ", "-")
        if key in _MODE_ALIASES:
            return _MODE_ALIASES[key]
        raise ValueError(f"Unknown search mode {text!r}. Available: "
                         f"{', '.join(m.value for m in cls)}")


_MODE_LABELS = {
    SearchMode.BFS: "Breadth-First",
    SearchMode.DIJKSTRA: "Dijkstra",
    SearchMode.GREEDY: "Greedy Best-First",
    SearchMode.ASTAR: "A*",
}

_MODE_ALIASES = {
    "bfs": SearchMode.BFS, "breadth-first": SearchMode.BFS, "breadth": SearchMode.BFS,
    "dijkstra": SearchMode.DIJKSTRA, "ucs": SearchMode.DIJKSTRA,
    "greedy": SearchMode.GREEDY, "best-first": SearchMode.GREEDY,
    "greedy-best-first": SearchMode.GREEDY,
    "astar": SearchMode.ASTAR, "a*": SearchMode.ASTAR, "a-star": SearchMode.ASTAR,
}


class GoalPolicy(str, Enum):
    """When the goal counts as found.

    ON_DISCOVERY stops as soon as the goal enters the frontier, which
    ends sooner but can return a costlier path. ON_FINALIZE stops when the
    goal is dequeued, which keeps Dijkstra and A* optimal.
    """
    ON_DISCOVERY = "on_discovery"
    ON_FINALIZE = "on_finalize"

    @classmethod
    def parse(cls, text: "str | GoalPolicy") -> "GoalPolicy":
        if isinstance(text, GoalPolicy):
            return text
        key = str(text).strip().lower().replace("-", "_")
        if not key.startswith("on_"):
            key = "on_" + key
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown goal policy {text!r}. Available: "
                             f"{', '.join(p.value for p in cls)}") from None


class StepStatus(str, Enum):
    IDLE = "idle"          # engine not initialized
    RUNNING = "running"
    DONE = "done"          # goal found, path set
    NO_PATH = "no_path"    # frontier exhausted


class EngineState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    RUNNING = "running"
    COMPLETE = "complete"


class InitError(str, Enum):
    MISSING_GRAPH = "missing_graph"
    MISSING_NODE = "missing_node"
    FOREIGN_NODE = "foreign_node"
    BLOCKED_NODE = "blocked_node"


@dataclass
class InitResult:
    ok: bool
    error: Optional[InitError] = None
    message: str = ""

    def __bool__(self) -> bool:
        return self.ok


@dataclass
class StepResult:
    status: StepStatus
    opened: List[Cell] = field(default_factory=list)
    closed: List[Cell] = field(default_factory=list)
    current: Optional[Cell] = None
    path: Optional[List[Cell]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)
