"""
Stepsearch CLI - run a grid search headless or open the viewer.

Usage:
    python -m stepsearch run stepsearch/maps/02_walls.json --mode astar
    python -m stepsearch run level.txt --mode bfs --start 0,0 --goal 9,4
    python -m stepsearch run level.png --mode greedy --policy on_discovery
    python -m stepsearch view stepsearch/maps/03_mixed_terrain.json --mode dijkstra

Modes:
    bfs       - Breadth-first (fewest moves)
    dijkstra  - Uniform cost (cheapest path)
    greedy    - Greedy best-first (heuristic only, fast but not optimal)
    astar     - A* (cheapest path, fewer expansions than Dijkstra)

Exit codes: 0 path found, 1 no path, 2 bad arguments or map.
"""

from __future__ import annotations

import argparse
import logging
import sys

from stepsearch.config import DEFAULT_GOAL_POLICY, DEFAULT_MODE, LOG_LEVEL
from stepsearch.core.maps import load_map
from stepsearch.core.observer import LoggingObserver
from stepsearch.core.pathfinder import Pathfinder
from stepsearch.core.types import Cell, GoalPolicy, SearchMode, StepStatus


def parse_cell(text: str) -> Cell:
    """Parse 'x,y' into a cell."""
    try:
        x, y = (int(part) for part in text.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected X,Y but got {text!r}") from None
    return (x, y)


def non_negative_int(text: str) -> int:
    """Parse a step limit; 0 is allowed and means no steps."""
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer but got {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stepsearch",
        description="Stepwise grid pathfinding",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=LOG_LEVEL,
        help=f"Logging level (default: {LOG_LEVEL})",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run a search to completion and print the result")
    run.add_argument("map", type=str, help="Map file (.json, .txt/.map, or an image)")
    run.add_argument("--mode", type=str, default=DEFAULT_MODE,
                     help=f"Search mode (default: {DEFAULT_MODE})")
    run.add_argument("--policy", type=str, default=DEFAULT_GOAL_POLICY,
                     help=f"Goal policy: on_finalize or on_discovery (default: {DEFAULT_GOAL_POLICY})")
    run.add_argument("--start", type=parse_cell, default=None, help="Start cell X,Y")
    run.add_argument("--goal", type=parse_cell, default=None, help="Goal cell X,Y")
    run.add_argument("--max-steps", type=non_negative_int, default=None,
                     help="Stop after this many steps (default: no limit)")
    run.add_argument("--trace", action="store_true", help="Log every step")

    view = sub.add_parser("view", help="Open the interactive viewer")
    view.add_argument("map", type=str, nargs="?", default=None,
                      help="Map file (default: bundled open field)")
    view.add_argument("--mode", type=str, default=DEFAULT_MODE)
    view.add_argument("--policy", type=str, default=DEFAULT_GOAL_POLICY)

    return parser


def run_search(args: argparse.Namespace) -> int:
    try:
        mode = SearchMode.parse(args.mode)
        policy = GoalPolicy.parse(args.policy)
        grid_map = load_map(args.map)
    except (ValueError, OSError) as e:
        # MapFormatError is a ValueError
        print(f"Error: {e}", file=sys.stderr)
        return 2

    graph = grid_map.build_graph()
    start_cell = args.start or grid_map.default_start()
    goal_cell = args.goal or grid_map.default_goal()

    engine = Pathfinder(name="cli")
    if args.trace:
        engine.add_observer(LoggingObserver(level=logging.INFO))
    result = engine.init(graph, graph.node_at(*start_cell), graph.node_at(*goal_cell),
                         mode=mode, goal_policy=policy)
    if not result:
        print(f"Error: {result.message} (start={start_cell}, goal={goal_cell})", file=sys.stderr)
        return 2

    outcome = engine.run(max_steps=args.max_steps)

    print("=" * 60)
    print(f"  Map:    {grid_map.name} ({grid_map.width}x{grid_map.height})")
    print(f"  Mode:   {mode.label} ({policy.value})")
    print(f"  Start:  {start_cell}   Goal: {goal_cell}")
    print("=" * 60)
    print(f"  Status:   {outcome.status.value}")
    print(f"  Steps:    {engine.step_count}")
    print(f"  Explored: {len(engine.explored)}")
    if outcome.status == StepStatus.DONE:
        print(f"  Path ({len(engine.path)} nodes, cost {engine.path_cost():.2f}):")
        print("    " + " -> ".join(f"({x},{y})" for x, y in outcome.path))
        return 0
    if outcome.status == StepStatus.RUNNING:
        print(f"  Stopped after --max-steps={args.max_steps}")
    return 1


def view(args: argparse.Namespace) -> int:
    # pygame is only needed here
    from stepsearch.app.viewer import main as viewer_main

    try:
        return viewer_main(args.map, SearchMode.parse(args.mode), GoalPolicy.parse(args.policy))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.command == "run":
        return run_search(args)
    return view(args)
