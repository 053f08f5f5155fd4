"""
stepsearch: stepwise grid pathfinding.

Breadth-first, Dijkstra, greedy best-first and A* over an 8-connected
terrain grid, advanced one frontier node per step so a viewer (or any
other driver) can watch the search unfold.
"""

__version__ = "0.1.0"
