# stepsearch/app/viewer.py
#!/usr/bin/env python3
"""
Stepsearch Viewer: grid, overlays, metrics and minimal controls

- Keyboard:
    [1]/[2]/[3]      -> switch bundled map
    [B]/[D]/[G]/[A]  -> Breadth-First / Dijkstra / Greedy / A*
    [P]              -> toggle goal policy (on discovery / on finalize)
    [SPACE]          -> run/pause
    [N]              -> single step
    [R]              -> reset
    [+]/[-]          -> steps/sec
    [Q]/[ESC]        -> quit

The engine never waits; this window decides how many steps run per second.
"""

import logging
import math
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import pygame

from stepsearch.app.overlay import GridOverlay
from stepsearch.config import (
    CELL_SIZE_DEFAULT,
    DEFAULT_MAP_KEY,
    FPS,
    GRID_MARGIN,
    MAP_FILES,
    MAX_STEPS_PER_SEC,
    PANEL_W,
    STEPS_PER_SEC,
    TERRAIN_COLORS,
    resolve_mode,
)
from stepsearch.core.maps import MapData, MapFormatError, load_map
from stepsearch.core.pathfinder import Pathfinder
from stepsearch.core.types import Cell, GoalPolicy, SearchMode, StepStatus

logger = logging.getLogger(__name__)

FONT_NAME = None  # default pygame font

# Colors
WHITE       = (255,255,255)
BLACK       = (  0,  0,  0)
BLUE        = ( 70,130,180)
RED         = (220, 50, 47)
NEON_CYAN_A = (0,150,255,110)
NEON_MAG_A  = (255,0,120,90)
NEON_MINT   = (0,255,200)
ARROW_GRAY  = (60, 60, 70)

CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
ACCENT_GOLD = (255,210,0)

MODE_KEYS = {
    pygame.K_b: SearchMode.BFS,
    pygame.K_d: SearchMode.DIJKSTRA,
    pygame.K_g: SearchMode.GREEDY,
    pygame.K_a: SearchMode.ASTAR,
}
MAP_KEYS = {pygame.K_1: 0, pygame.K_2: 1, pygame.K_3: 2}


# ---------- Simple UI Button ----------
class UIButton:
    def __init__(self, label: str, rect: pygame.Rect, callback, *, togglable: bool = False):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self.togglable = togglable
        self.active = False

    def set_active(self, value: bool):
        self.active = bool(value)

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        base = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        if self.active and self.togglable:
            bg = (58, 86, 160, 235)
        elif self.hover:
            bg = (46, 50, 60, 230)
        else:
            bg = (36, 40, 48, 220)
        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)
        screen.blit(base, self.rect.topleft)

        if self.active and self.togglable:
            pygame.draw.rect(screen, (120, 170, 255, 255), self.rect, width=2, border_radius=10)

        text = font.render(self.label, True, (235,238,242))
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event):
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.callback()


# ---------- Viewer ----------
class Viewer:
    def __init__(self, grid_map: MapData, mode: SearchMode = SearchMode.ASTAR,
                 goal_policy: GoalPolicy = GoalPolicy.ON_FINALIZE):
        pygame.init()

        self.font_small = pygame.font.Font(FONT_NAME, 14)
        self.font = pygame.font.Font(FONT_NAME, 18)
        self.font_big = pygame.font.Font(FONT_NAME, 22)

        self.map = grid_map
        self.graph = grid_map.build_graph()
        self.map_keys: List[str] = list(MAP_FILES)
        self.selected_map_key = grid_map.name if grid_map.name in MAP_FILES else "custom"

        self.overlay = GridOverlay()
        self.engine = Pathfinder(name="Viewer", mode=mode, goal_policy=goal_policy)
        self.engine.add_observer(self.overlay)

        self.cell_size = self._auto_cell_size()
        win_w = GRID_MARGIN*2 + self.map.width * self.cell_size + PANEL_W
        win_h = max(GRID_MARGIN*2 + self.map.height * self.cell_size, 720)
        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption(f"Stepsearch - {self.map.name}")

        self._buttons: List[UIButton] = []
        self._layout(win_w, win_h)

        self.running = False
        self.alive = True
        self.clock = pygame.time.Clock()
        self.steps_per_sec = STEPS_PER_SEC
        self._last_step_t = 0.0
        self.error: Optional[str] = None

        self._restart()

    # ---------- engine ----------
    def _restart(self):
        self.running = False
        start = self.graph.node_at(*self.map.default_start())
        goal = self.graph.node_at(*self.map.default_goal())
        result = self.engine.init(self.graph, start, goal)
        self.error = None if result else result.message
        if not result:
            self.overlay.clear()
        self._refresh_active_states()

    def _do_step(self):
        res = self.engine.step()
        if res.status in (StepStatus.DONE, StepStatus.NO_PATH):
            self.running = False
            self._refresh_active_states()

    def _tick_algorithm(self):
        t0 = time.time()
        if t0 - self._last_step_t >= 1.0 / max(1, self.steps_per_sec):
            self._last_step_t = t0
            self._do_step()

    def run(self):
        while self.alive:
            self._handle_events()
            if self.running:
                self._tick_algorithm()
            if self.alive:
                self._draw()
                self.clock.tick(FPS)
        pygame.quit()

    # ---------- layout ----------
    def _auto_cell_size(self) -> int:
        target_h = 720 - GRID_MARGIN*2
        return max(14, min(CELL_SIZE_DEFAULT, target_h // self.map.height))

    def _layout(self, win_w: int, win_h: int):
        """Integer cell size that fits the window, grid on the left, panel on the right."""
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)
        self.cell_size = int(max(8, min(avail_w // self.map.width, avail_h // self.map.height)))

        plate_w = self.map.width * self.cell_size + 2 * GRID_MARGIN
        plate_h = self.map.height * self.cell_size + 2 * GRID_MARGIN
        top_y = max(0, (win_h - plate_h) // 2)
        self.canvas_rect = pygame.Rect(0, top_y, plate_w, plate_h)
        self._grid_origin = (self.canvas_rect.x + GRID_MARGIN, self.canvas_rect.y + GRID_MARGIN)
        self._right_band = pygame.Rect(self.canvas_rect.right, 0,
                                       max(PANEL_W, win_w - self.canvas_rect.right), win_h)
        self._build_buttons()

    def _cell_rect(self, cell: Cell) -> pygame.Rect:
        cs = self.cell_size
        ox, oy = self._grid_origin
        col, row = cell
        return pygame.Rect(ox + col*cs, oy + row*cs, cs, cs)

    # ---------- input ----------
    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                self.alive = False
            elif e.type == pygame.KEYDOWN:
                if e.key in (pygame.K_ESCAPE, pygame.K_q):
                    self.alive = False
                elif e.key == pygame.K_SPACE:
                    self._toggle_run()
                elif e.key == pygame.K_r:
                    self._restart()
                elif e.key == pygame.K_n:
                    self._do_step()
                elif e.key == pygame.K_p:
                    self._toggle_policy()
                elif e.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
                    self._bump_speed(+1)
                elif e.key in (pygame.K_MINUS, pygame.K_UNDERSCORE, pygame.K_KP_MINUS):
                    self._bump_speed(-1)
                elif e.key in MODE_KEYS:
                    self._switch_mode(MODE_KEYS[e.key])
                elif e.key in MAP_KEYS:
                    idx = MAP_KEYS[e.key]
                    if idx < len(self.map_keys):
                        self._switch_map(self.map_keys[idx])
            elif e.type == pygame.VIDEORESIZE:
                w, h = max(640, e.w), max(480, e.h)
                self.screen = pygame.display.set_mode((w, h), pygame.RESIZABLE)
                self._layout(w, h)
            elif e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN):
                for b in self._buttons:
                    b.handle_mouse(e)

    def _toggle_run(self):
        if self.overlay.finished or self.error:
            return
        self.running = not self.running
        self._refresh_active_states()

    def _toggle_policy(self):
        if self.engine.goal_policy == GoalPolicy.ON_FINALIZE:
            self.engine.goal_policy = GoalPolicy.ON_DISCOVERY
        else:
            self.engine.goal_policy = GoalPolicy.ON_FINALIZE
        self._restart()

    def _bump_speed(self, dv: int):
        self.steps_per_sec = int(max(1, min(MAX_STEPS_PER_SEC, self.steps_per_sec + dv)))

    def _switch_mode(self, mode: SearchMode):
        self.engine.mode = mode
        self._restart()

    def _switch_map(self, key: str):
        if key not in MAP_FILES:
            return
        try:
            grid_map = load_map(MAP_FILES[key])
        except (OSError, MapFormatError) as ex:
            logger.error(f"Failed to load map {key}: {ex}")
            return
        self.map = grid_map
        self.graph = grid_map.build_graph()
        self.selected_map_key = key
        pygame.display.set_caption(f"Stepsearch - {key}")
        self._layout(*self.screen.get_size())
        self._restart()

    # ---------- drawing ----------
    def _draw(self):
        self._draw_backdrop()
        self._draw_grid()
        self._draw_metrics_and_buttons()
        pygame.display.flip()

    def _draw_backdrop(self):
        w, h = self.screen.get_size()
        top = (24, 26, 32); bot = (36, 40, 48)
        for y in range(h):
            t = y / max(1, h-1)
            c = tuple(int(top[i] + (bot[i]-top[i]) * t) for i in range(3))
            pygame.draw.line(self.screen, c, (0, y), (w, y))

    def _draw_grid(self):
        cs = self.cell_size
        for node in self.graph:
            rect = self._cell_rect(node.cell)
            pygame.draw.rect(self.screen, TERRAIN_COLORS.get(int(node.node_type), WHITE), rect)
            pygame.draw.rect(self.screen, BLACK, rect, 1)

        tint = pygame.Surface((cs, cs), pygame.SRCALPHA)
        tint.fill(NEON_MAG_A)
        for cell in self.overlay.closed_set:
            self.screen.blit(tint, self._cell_rect(cell).topleft)
        tint.fill(NEON_CYAN_A)
        for cell in self.overlay.open_set:
            self.screen.blit(tint, self._cell_rect(cell).topleft)

        for cell, prev in self.overlay.links.items():
            self._draw_arrow(cell, prev)

        if len(self.overlay.path) >= 2:
            pts = [self._cell_rect(c).center for c in self.overlay.path]
            pygame.draw.lines(self.screen, NEON_MINT, False, pts, max(3, cs // 6))

        for cell, color, text in ((self.overlay.start, BLUE, "S"), (self.overlay.goal, RED, "G")):
            if cell is not None:
                self._draw_badge(cell, color, text)

    def _draw_arrow(self, cell: Cell, prev: Cell):
        """Short arrow from a cell toward its predecessor."""
        cx, cy = self._cell_rect(cell).center
        px, py = self._cell_rect(prev).center
        ang = math.atan2(py - cy, px - cx)
        length = self.cell_size * 0.35
        tip = (cx + math.cos(ang) * length, cy + math.sin(ang) * length)
        pygame.draw.line(self.screen, ARROW_GRAY, (cx, cy), tip, 2)
        head = self.cell_size * 0.15
        for side in (-2.5, 2.5):
            pygame.draw.line(self.screen, ARROW_GRAY, tip,
                             (tip[0] + math.cos(ang + side) * head,
                              tip[1] + math.sin(ang + side) * head), 2)

    def _draw_badge(self, cell: Cell, color: Tuple[int,int,int], text: str):
        cx, cy = self._cell_rect(cell).center
        pygame.draw.circle(self.screen, color, (cx, cy), max(6, self.cell_size//2 - 3))
        txt = self.font_small.render(text, True, WHITE)
        self.screen.blit(txt, txt.get_rect(center=(cx, cy)))

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 240  # metrics card sits above
        w = max(160, rb.width - 32)
        h = 30
        gap = 6

        def add(label, cb, *, togglable=False, store_as: Optional[str] = None):
            nonlocal y
            btn = UIButton(label, pygame.Rect(x, y, w, h), cb, togglable=togglable)
            self._buttons.append(btn)
            if store_as:
                setattr(self, store_as, btn)
            y += h + gap

        add("Run / Pause", self._toggle_run, togglable=True, store_as="btn_run")
        add("Step Once", self._do_step)
        add("Reset", self._restart)
        add("Goal policy", self._toggle_policy)

        half = (w - 8) // 2
        self._buttons.append(UIButton("Speed −", pygame.Rect(x, y, half, h), lambda: self._bump_speed(-1)))
        self._buttons.append(UIButton("Speed +", pygame.Rect(x + half + 8, y, half, h), lambda: self._bump_speed(+1)))
        y += h + gap

        self._mode_buttons: Dict[SearchMode, UIButton] = {}
        for mode in SearchMode:
            add(f"Algo: {mode.label}", lambda m=mode: self._switch_mode(m), togglable=True)
            self._mode_buttons[mode] = self._buttons[-1]

        self._map_buttons: Dict[str, UIButton] = {}
        for i, key in enumerate(self.map_keys, 1):
            add(f"Map {i}: {key}", lambda k=key: self._switch_map(k), togglable=True)
            self._map_buttons[key] = self._buttons[-1]

        self._refresh_active_states()

    def _refresh_active_states(self):
        if hasattr(self, "btn_run"):
            self.btn_run.set_active(getattr(self, "running", False))
        engine = getattr(self, "engine", None)
        for mode, btn in getattr(self, "_mode_buttons", {}).items():
            btn.set_active(engine is not None and engine.mode == mode)
        for key, btn in getattr(self, "_map_buttons", {}).items():
            btn.set_active(self.selected_map_key == key)

    def _draw_metrics_and_buttons(self):
        rb = self._right_band
        card = pygame.Surface((rb.width - 20, 224), pygame.SRCALPHA)
        pygame.draw.rect(card, CARD_BG, card.get_rect(), border_radius=14)
        hi = pygame.Surface((card.get_width(), 24), pygame.SRCALPHA)
        pygame.draw.rect(hi, CARD_HI, hi.get_rect(), border_radius=14)
        card.blit(hi, (0,0))
        self.screen.blit(card, (rb.x + 10, rb.y + 10))

        x0 = rb.x + 24
        y0 = rb.y + 18

        def line(text, big=False, color=TEXT_LIGHT):
            nonlocal y0
            f = self.font_big if big else self.font
            surf = f.render(text, True, color)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + 4

        m = self.overlay.metrics
        line("Metrics", big=True, color=ACCENT_GOLD)
        line(f"Algo: {self.engine.mode.label}   Policy: {self.engine.goal_policy.value}")
        line(f"State: {self.error or self.overlay.label}")
        line(f"Popped: {m.get('popped', 0)}   Open: {m.get('open_size', 0)}   "
             f"Closed: {m.get('closed_count', 0)}")
        line(f"Path Len: {m.get('path_len', 0)}")
        if m.get("total_cost") is not None:
            line(f"Total Cost: {m['total_cost']:.2f}")
        line(f"Step time: {self.overlay.last_step_ms:.3f} ms")
        line(f"Speed: {self.steps_per_sec} steps/s")

        for b in self._buttons:
            b.draw(self.screen, self.font_small)


# ---------- main ----------
def main(map_path: Union[str, Path, None] = None, mode: Union[str, SearchMode] = SearchMode.ASTAR,
         goal_policy: Union[str, GoalPolicy] = GoalPolicy.ON_FINALIZE) -> int:
    try:
        grid_map = load_map(map_path or MAP_FILES[DEFAULT_MAP_KEY])
    except (OSError, MapFormatError) as ex:
        logger.error(f"Failed to load map: {ex}")
        return 2
    Viewer(grid_map, SearchMode.parse(mode), GoalPolicy.parse(goal_policy)).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main(mode=resolve_mode(sys.argv)))
