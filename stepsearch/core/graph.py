# stepsearch/core/graph.py
#!/usr/bin/env python3
"""
Grid graph: one Node per cell, 8-connected adjacency computed once at build.

Cells are given row-major (cells[y][x]), the same layout as the map files.
"""

import logging
from dataclasses import dataclass, field
from math import inf
from typing import Iterator, List, Optional, Sequence, Tuple

from stepsearch.config import DIAGONAL_COST, ORTHOGONAL_COST
from stepsearch.core.types import Cell, NodeType

logger = logging.getLogger(__name__)

# N, NE, E, SE, S, SW, W, NW  (y grows "north" in index space)
ALL_DIRECTIONS: Tuple[Cell, ...] = (
    (0, 1), (1, 1), (1, 0), (1, -1),
    (0, -1), (-1, -1), (-1, 0), (-1, 1),
)


@dataclass(eq=False)
class Node:
    x: int
    y: int
    node_type: NodeType = NodeType.OPEN
    position: Tuple[float, float] = (0.0, 0.0)
    neighbors: List["Node"] = field(default_factory=list, repr=False)

    # search scratch, reset at the start of every run
    distance_traveled: float = inf
    previous: Optional[Cell] = None   # key into the graph, not a reference
    priority: float = 0.0

    @property
    def cell(self) -> Cell:
        return (self.x, self.y)

    @property
    def is_blocked(self) -> bool:
        return self.node_type == NodeType.BLOCKED

    @property
    def terrain_cost(self) -> int:
        return self.node_type.cost

    def reset(self) -> None:
        self.distance_traveled = inf
        self.previous = None
        self.priority = 0.0

    def __repr__(self) -> str:
        return f"Node({self.x}, {self.y}, {self.node_type.name})"


class Graph:

    def __init__(self, cells: Sequence[Sequence[int]]):
        if not cells or not cells[0]:
            raise ValueError("cannot build a graph from an empty grid")
        width = len(cells[0])
        if any(len(row) != width for row in cells):
            raise ValueError("cells size mismatch: rows have different lengths")

        self._cells = [list(row) for row in cells]
        self.width = width
        self.height = len(cells)
        self.nodes: List[List[Node]] = []
        self.wall_nodes: List[Node] = []

        for y in range(self.height):
            row: List[Node] = []
            for x in range(self.width):
                kind = NodeType.from_code(self._cells[y][x])
                node = Node(x, y, kind, position=(float(x), float(y)))
                if kind == NodeType.BLOCKED:
                    self.wall_nodes.append(node)
                row.append(node)
            self.nodes.append(row)

        for node in self:
            if not node.is_blocked:
                node.neighbors = self._neighbors(node.x, node.y)

        logger.debug(f"Built {self.width}x{self.height} graph "
                     f"({len(self.wall_nodes)} blocked)")

    @classmethod
    def build(cls, cells: Sequence[Sequence[int]]) -> "Graph":
        return cls(cells)

    # -------------------- lookup --------------------

    def is_within_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def node_at(self, x: int, y: int) -> Optional[Node]:
        if not self.is_within_bounds(x, y):
            return None
        return self.nodes[y][x]

    def cost_of(self, x: int, y: int) -> int:
        if not self.is_within_bounds(x, y):
            raise IndexError(f"({x}, {y}) is outside a {self.width}x{self.height} grid")
        return self._cells[y][x]

    def owns(self, node: Node) -> bool:
        return self.node_at(node.x, node.y) is node

    def _neighbors(self, x: int, y: int) -> List[Node]:
        out: List[Node] = []
        for dx, dy in ALL_DIRECTIONS:
            n = self.node_at(x + dx, y + dy)
            if n is not None and not n.is_blocked:
                out.append(n)
        return out

    # -------------------- costs --------------------

    def distance(self, a: Node, b: Node) -> float:
        """Octile distance between two node positions."""
        dx = abs(a.position[0] - b.position[0])
        dy = abs(a.position[1] - b.position[1])
        diagonal = min(dx, dy)
        straight = max(dx, dy) - diagonal
        return DIAGONAL_COST * diagonal + ORTHOGONAL_COST * straight

    def move_cost(self, a: Node, b: Node) -> float:
        """Cost of stepping from a to b; terrain is paid on leaving a."""
        return self.distance(a, b) + a.terrain_cost

    # -------------------- scratch --------------------

    def reset_nodes(self) -> None:
        for node in self:
            node.reset()

    def __iter__(self) -> Iterator[Node]:
        for row in self.nodes:
            yield from row

    def __len__(self) -> int:
        return self.width * self.height

    def __repr__(self) -> str:
        return f"Graph({self.width}x{self.height})"


def build(cells: Sequence[Sequence[int]]) -> Graph:
    return Graph.build(cells)
