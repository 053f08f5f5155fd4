"""
Configuration constants for stepsearch.

Paths, cost constants, search defaults and viewer settings live here.
A few values can be overridden through environment variables.
"""

import os
from pathlib import Path
from typing import Optional, Sequence

# =============================================================================
# Path Configuration
# =============================================================================

PACKAGE_ROOT = Path(__file__).resolve().parent

# Bundled example maps (JSON)
MAP_DIR = PACKAGE_ROOT / "maps"
MAP_FILES = {
    "01_open_field":   MAP_DIR / "01_open_field.json",
    "02_walls":        MAP_DIR / "02_walls.json",
    "03_mixed_terrain": MAP_DIR / "03_mixed_terrain.json",
}
DEFAULT_MAP_KEY = "01_open_field"

# =============================================================================
# Cost Configuration
# =============================================================================

# Octile distance between cells. Used for the edge cost AND the heuristic,
# so A* stays admissible as long as terrain costs are non-negative.
ORTHOGONAL_COST = 1.0
DIAGONAL_COST = 1.4

# =============================================================================
# Search Configuration
# =============================================================================

def resolve_mode(argv: Optional[Sequence[str]] = None) -> str:
    """Default search mode from STEPSEARCH_MODE; a --mode=... in argv wins.

    argv is only scanned when a caller passes it; the import-time default
    reads the environment alone.
    """
    mode = os.getenv("STEPSEARCH_MODE", "astar").lower()
    for arg in argv or ():
        if arg.startswith("--mode="):
            mode = arg.split("=", 1)[1].lower()
    return mode


DEFAULT_MODE = resolve_mode()

# "on_finalize" (optimal) or "on_discovery" (stop as soon as the goal is queued)
DEFAULT_GOAL_POLICY = os.getenv("STEPSEARCH_GOAL_POLICY", "on_finalize").lower()

# =============================================================================
# Terrain Colors (image maps + viewer tiles)
# =============================================================================

# code -> RGB
TERRAIN_COLORS = {
    0: (255, 255, 255),   # open
    1: (0, 0, 0),         # blocked
    2: (210, 230, 150),   # light
    3: (150, 190, 90),    # medium
    4: (80, 120, 50),     # heavy
}

# =============================================================================
# Viewer Configuration
# =============================================================================

STEPS_PER_SEC = 8
MAX_STEPS_PER_SEC = 60
PANEL_W = 420
GRID_MARGIN = 16
CELL_SIZE_DEFAULT = 32
FPS = 60

# =============================================================================
# Logging Configuration
# =============================================================================

# Log level (DEBUG, INFO, WARNING, ERROR)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
