"""
Unit tests for Node and Graph.
"""

import itertools
from math import inf

import pytest

from stepsearch.config import DIAGONAL_COST, ORTHOGONAL_COST
from stepsearch.core.graph import Graph, build
from stepsearch.core.types import NodeType


class TestBuild:
    """Graph construction from a cost grid."""

    def test_dimensions_and_positions(self):
        g = build([[0, 0, 0], [0, 0, 0]])
        assert (g.width, g.height) == (3, 2)
        assert len(g) == 6
        for node in g:
            assert g.nodes[node.y][node.x] is node
            assert node.position == (float(node.x), float(node.y))

    def test_terrain_kinds(self):
        g = build([[0, 1, 2, 3, 4]])
        kinds = [g.node_at(x, 0).node_type for x in range(5)]
        assert kinds == [NodeType.OPEN, NodeType.BLOCKED, NodeType.LIGHT,
                         NodeType.MEDIUM, NodeType.HEAVY]

    def test_unknown_code_defaults_to_open(self):
        g = build([[7, 0]])
        assert g.node_at(0, 0).node_type == NodeType.OPEN
        assert g.cost_of(0, 0) == 7

    def test_wall_nodes_collected(self):
        g = build([[0, 1], [1, 0]])
        assert {n.cell for n in g.wall_nodes} == {(1, 0), (0, 1)}

    def test_ragged_grid_rejected(self):
        with pytest.raises(ValueError):
            build([[0, 0], [0]])

    def test_empty_grid_rejected(self):
        with pytest.raises(ValueError):
            build([])


class TestBounds:
    """Out-of-bounds queries answer instead of failing."""

    def test_is_within_bounds(self, open_5x5):
        assert open_5x5.is_within_bounds(0, 0)
        assert open_5x5.is_within_bounds(4, 4)
        assert not open_5x5.is_within_bounds(-1, 0)
        assert not open_5x5.is_within_bounds(5, 2)
        assert not open_5x5.is_within_bounds(2, 5)

    def test_node_at_outside_is_none(self, open_5x5):
        assert open_5x5.node_at(5, 5) is None
        assert open_5x5.node_at(-1, 3) is None

    def test_cost_of_outside_raises(self, open_5x5):
        with pytest.raises(IndexError):
            open_5x5.cost_of(9, 9)


class TestNeighbors:
    """8-connected adjacency."""

    def test_center_has_eight_in_fixed_order(self, open_5x5):
        center = open_5x5.node_at(2, 2)
        assert [n.cell for n in center.neighbors] == [
            (2, 3), (3, 3), (3, 2), (3, 1), (2, 1), (1, 1), (1, 2), (1, 3),
        ]

    def test_corner_has_three(self, open_5x5):
        assert len(open_5x5.node_at(0, 0).neighbors) == 3

    def test_no_blocked_or_out_of_bounds_neighbors(self, mixed_terrain):
        for node in mixed_terrain:
            for nbr in node.neighbors:
                assert not nbr.is_blocked
                assert mixed_terrain.owns(nbr)
                assert max(abs(nbr.x - node.x), abs(nbr.y - node.y)) == 1

    def test_blocked_node_has_no_neighbors(self, walled_goal):
        assert walled_goal.node_at(1, 1).neighbors == []

    def test_node_ringed_by_walls_has_no_neighbors(self, walled_goal):
        assert walled_goal.node_at(2, 2).neighbors == []


class TestDistance:
    """Octile distance and move cost."""

    def test_symmetric_and_zero_on_self(self, mixed_terrain):
        nodes = list(mixed_terrain)[::7]
        for a, b in itertools.product(nodes, repeat=2):
            assert mixed_terrain.distance(a, b) == mixed_terrain.distance(b, a)
        for a in nodes:
            assert mixed_terrain.distance(a, a) == 0

    def test_orthogonal_and_diagonal_steps(self, open_5x5):
        a = open_5x5.node_at(2, 2)
        assert open_5x5.distance(a, open_5x5.node_at(2, 3)) == ORTHOGONAL_COST
        assert open_5x5.distance(a, open_5x5.node_at(3, 3)) == DIAGONAL_COST

    def test_octile_mix(self, open_5x5):
        a, b = open_5x5.node_at(0, 0), open_5x5.node_at(3, 1)
        assert open_5x5.distance(a, b) == pytest.approx(DIAGONAL_COST + 2 * ORTHOGONAL_COST)

    def test_move_cost_charges_terrain_of_departure_cell(self):
        g = build([[4, 0]])
        heavy, open_ = g.node_at(0, 0), g.node_at(1, 0)
        assert g.move_cost(heavy, open_) == ORTHOGONAL_COST + 4
        assert g.move_cost(open_, heavy) == ORTHOGONAL_COST


class TestScratch:
    """Per-run scratch fields."""

    def test_defaults(self, open_5x5):
        node = open_5x5.node_at(1, 1)
        assert node.distance_traveled == inf
        assert node.previous is None

    def test_reset_nodes(self, open_5x5):
        for node in open_5x5:
            node.distance_traveled = 3.0
            node.previous = (0, 0)
            node.priority = 9.0
        open_5x5.reset_nodes()
        for node in open_5x5:
            assert node.distance_traveled == inf
            assert node.previous is None
            assert node.priority == 0.0

    def test_nodes_hash_by_identity(self):
        g1, g2 = build([[0]]), build([[0]])
        assert g1.node_at(0, 0) != g2.node_at(0, 0)
        assert len({g1.node_at(0, 0), g2.node_at(0, 0)}) == 2
