"""
Pytest configuration and shared fixtures.

Grids are written row-major (cells[y][x]) exactly as they appear in the
map files, so the picture in the source is the grid the test searches.
"""

from math import inf

import pytest

from stepsearch.core.graph import Graph
from stepsearch.core.pathfinder import Pathfinder


@pytest.fixture
def open_5x5() -> Graph:
    """Unweighted 5x5 grid, no walls."""
    return Graph.build([[0] * 5 for _ in range(5)])


@pytest.fixture
def heavy_block() -> Graph:
    """
    Heavy terrain square straddling the straight line from (0,2) to (6,2).

    The cheapest route goes around it along row 0 or row 4 (cost 7.6);
    ploughing straight through costs 18.
    """
    return Graph.build([
        [0, 0, 0, 0, 0, 0, 0],
        [0, 0, 4, 4, 4, 0, 0],
        [0, 0, 4, 4, 4, 0, 0],
        [0, 0, 4, 4, 4, 0, 0],
        [0, 0, 0, 0, 0, 0, 0],
    ])


@pytest.fixture
def heavy_pocket() -> Graph:
    """
    Walled pocket on the straight line from (0,2) to (8,2).

    The pocket is entered through a heavy cell at (2,2) and closed by the
    wall at (5,2). Either way around it costs 9.6.
    """
    return Graph.build([
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 1, 1, 1, 1, 0, 0, 0],
        [0, 0, 4, 0, 0, 1, 0, 0, 0],
        [0, 0, 1, 1, 1, 1, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
    ])


@pytest.fixture
def walled_goal() -> Graph:
    """(2,2) is open but ringed by walls; nothing outside can reach it."""
    return Graph.build([
        [0, 0, 0, 0, 0],
        [0, 1, 1, 1, 0],
        [0, 1, 0, 1, 0],
        [0, 1, 1, 1, 0],
        [0, 0, 0, 0, 0],
    ])


@pytest.fixture
def mixed_terrain() -> Graph:
    """Open ground with patches of heavy terrain and a few walls."""
    return Graph.build([
        [0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 4, 4, 0, 0, 1, 0, 4, 4, 0],
        [0, 4, 4, 4, 0, 1, 0, 4, 4, 0],
        [0, 0, 4, 4, 0, 1, 0, 0, 4, 0],
        [0, 0, 0, 4, 4, 4, 4, 0, 0, 0],
        [1, 1, 0, 0, 4, 4, 0, 0, 1, 1],
        [0, 0, 0, 0, 0, 4, 0, 0, 0, 0],
        [0, 4, 4, 4, 0, 0, 0, 4, 4, 0],
    ])


@pytest.fixture
def engine() -> Pathfinder:
    return Pathfinder(name="test")


def reference_cost(graph: Graph, start_cell, goal_cell) -> float:
    """Cheapest start->goal cost by plain repeated relaxation (no heap)."""
    best = {n.cell: inf for n in graph}
    best[start_cell] = 0.0
    changed = True
    while changed:
        changed = False
        for node in graph:
            d = best[node.cell]
            if d == inf:
                continue
            for nbr in node.neighbors:
                alt = d + graph.move_cost(node, nbr)
                if alt < best[nbr.cell] - 1e-9:
                    best[nbr.cell] = alt
                    changed = True
    return best[goal_cell]
