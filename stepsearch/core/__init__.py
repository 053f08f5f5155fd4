"""
Search core: grid graph, priority queue and the stepwise pathfinder.
"""

from stepsearch.core.graph import Graph, Node, build
from stepsearch.core.maps import MapData, MapFormatError, load_map, make_map
from stepsearch.core.observer import (
    LoggingObserver,
    RecordingObserver,
    SearchObserver,
    SearchSnapshot,
)
from stepsearch.core.pathfinder import Pathfinder
from stepsearch.core.priority_queue import PriorityQueue
from stepsearch.core.types import (
    Cell,
    EngineState,
    GoalPolicy,
    InitError,
    InitResult,
    NodeType,
    SearchMode,
    StepResult,
    StepStatus,
)

__all__ = [
    "Cell",
    "EngineState",
    "GoalPolicy",
    "Graph",
    "InitError",
    "InitResult",
    "LoggingObserver",
    "MapData",
    "MapFormatError",
    "Node",
    "NodeType",
    "Pathfinder",
    "PriorityQueue",
    "RecordingObserver",
    "SearchMode",
    "SearchObserver",
    "SearchSnapshot",
    "StepResult",
    "StepStatus",
    "build",
    "load_map",
    "make_map",
]
