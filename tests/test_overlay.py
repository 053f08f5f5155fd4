"""
Tests for the viewer overlay (no display needed).
"""

from stepsearch.app.overlay import GridOverlay
from stepsearch.core.types import SearchMode, StepStatus


def attach(engine, graph, start, goal, mode=SearchMode.ASTAR) -> GridOverlay:
    overlay = GridOverlay()
    engine.add_observer(overlay)
    assert engine.init(graph, graph.node_at(*start), graph.node_at(*goal), mode=mode)
    return overlay


def test_starts_idle_with_start_in_open_set(engine, open_5x5):
    overlay = attach(engine, open_5x5, (0, 0), (4, 4))
    assert overlay.status == StepStatus.IDLE
    assert overlay.label == "Idle"
    assert overlay.open_set == {(0, 0)}
    assert overlay.closed_set == set()
    assert (overlay.start, overlay.goal) == ((0, 0), (4, 4))
    assert not overlay.finished


def test_tracks_each_step(engine, open_5x5):
    overlay = attach(engine, open_5x5, (0, 0), (4, 4))
    engine.step()
    assert overlay.status == StepStatus.RUNNING
    assert overlay.current == (0, 0)
    assert overlay.closed_set == {(0, 0)}
    assert overlay.open_set == {(0, 1), (1, 1), (1, 0)}
    assert overlay.links[(1, 1)] == (0, 0)


def test_finished_with_path(engine, heavy_block):
    overlay = attach(engine, heavy_block, (0, 2), (6, 2))
    engine.run()
    assert overlay.finished
    assert overlay.label == "Done"
    assert overlay.path[0] == (0, 2)
    assert overlay.path[-1] == (6, 2)
    assert overlay.metrics["path_len"] == len(overlay.path)


def test_no_path(engine, walled_goal):
    overlay = attach(engine, walled_goal, (0, 0), (2, 2), SearchMode.BFS)
    engine.run()
    assert overlay.status == StepStatus.NO_PATH
    assert overlay.label == "No path"
    assert overlay.path == []


def test_endpoints_follow_the_engine_run(engine, open_5x5):
    overlay = attach(engine, open_5x5, (0, 0), (4, 4))
    assert engine.init(open_5x5, open_5x5.node_at(3, 1), open_5x5.node_at(1, 4))
    assert (overlay.start, overlay.goal) == ((3, 1), (1, 4))


def test_clear_drops_endpoints(engine, open_5x5):
    overlay = attach(engine, open_5x5, (0, 0), (4, 4))
    overlay.clear()
    assert overlay.start is None
    assert overlay.goal is None


def test_restart_clears_previous_run(engine, heavy_block):
    overlay = attach(engine, heavy_block, (0, 2), (6, 2))
    engine.run()
    engine.reset()
    assert overlay.path == []
    assert overlay.closed_set == set()
    assert overlay.open_set == {(0, 2)}
    assert overlay.status == StepStatus.IDLE
