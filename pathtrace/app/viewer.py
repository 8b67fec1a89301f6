# pathtrace/app/viewer.py
#!/usr/bin/env python3
"""
Pathtrace Viewer: grid + node-graph playground

- Keyboard (both substrates):
    [SPACE]      -> play/pause
    [N]          -> single step
    [R]          -> reset
    [+]/[-]      -> faster / slower
    [B]          -> show/hide rejected branches
    [TAB]        -> switch grid <-> node graph
    [M]          -> next bundled map
    [Q]/[ESC]    -> quit

- Grid:
    [1]..[4]     -> Dijkstra / A* / Bellman-Ford / Floyd-Warshall
    mouse drag   -> paint / erase walls
    [S]/[E]      -> put start / end on the hovered cell
    [G]/[C]      -> random walls / clear everything

- Node graph:
    [1]..[3]     -> BFS / DFS / Dijkstra
    double-click -> add node        left drag   -> move node
    right drag   -> add edge (drop on a node; again to remove)
    wheel on edge-> weight +/-      [S]/[E]     -> start / goal on hovered node
    [X]          -> delete hovered node (or hovered edge)
"""

import math
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pygame
from loguru import logger

from pathtrace.config import (MAP_DIR, DEFAULT_ROWS, DEFAULT_COLS, DEFAULT_WALL_PROB,
                              Settings, clamp_step, resolve_settings)
from pathtrace.log import setup_logging
from pathtrace.core.types import Grid, Cell
from pathtrace.core.node_graph import NodeGraph, Node, Edge
from pathtrace.core.playback import (PlaybackController, PlaybackConfig, MonotonicClock,
                                     PlaybackSnapshot, PLAYING)
from pathtrace.core.registry import make_grid_algo, get_graph_algo
from pathtrace.core.scene import load_scene, SceneError

# ---------- Config ----------
PANEL_W = 360            # right band: metrics + buttons
GRID_MARGIN = 16
CELL_SIZE_DEFAULT = 30
FONT_NAME = None  # default pygame font
DOUBLE_CLICK_MS = 350
EDGE_HIT_PX = 8

GRID_ALGOS = [("dijkstra", "Dijkstra"), ("astar", "A*"),
              ("bellman_ford", "Bellman-Ford"), ("floyd_warshall", "Floyd-Warshall")]
GRAPH_ALGOS = [("bfs", "BFS"), ("dfs", "DFS"), ("dijkstra", "Dijkstra")]

# Colors
WHITE       = (255,255,255)
BLACK       = (  0,  0,  0)
GRID_LINE   = (170,170,170)
WALL        = ( 68, 68, 68)
START_GREEN = (  0,170,  0)
END_RED     = (170,  0,  0)
GOAL_RED    = (254, 43, 43)
DOT_BLUE    = (  0, 51,255)
BRANCH_GRAY = (128,128,128,90)
BRANCH_HEAD = (252,144,  3,110)
NEON_MINT   = (  0,255,200)
NODE_FILL   = (238,242,248)
EDGE_COLOR  = ( 90, 98,112)
EDGE_HOVER  = (220, 50, 47)

CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
ACCENT_GOLD = (255,210,0)


def bundled_maps() -> List[Path]:
    return sorted(MAP_DIR.glob("*.json")) if MAP_DIR.exists() else []


def _dist_to_segment(px, py, ax, ay, bx, by) -> float:
    dx, dy = bx - ax, by - ay
    L2 = dx*dx + dy*dy
    if L2 == 0:
        return math.hypot(px - ax, py - ay)
    t = max(0.0, min(1.0, ((px - ax)*dx + (py - ay)*dy) / L2))
    return math.hypot(px - (ax + t*dx), py - (ay + t*dy))


# ---------- Simple UI Button ----------
class UIButton:
    def __init__(self, label: str, rect: pygame.Rect, callback, *, togglable: bool = False):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self.togglable = togglable
        self.active = False  # highlight state

    def set_active(self, value: bool):
        self.active = bool(value)

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        base = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        bg_idle   = (36, 40, 48, 220)
        bg_hover  = (46, 50, 60, 230)
        bg_active = (58, 86, 160, 235)  # bluish active
        border_active = (120, 170, 255, 255)

        if self.active and self.togglable:
            bg = bg_active
        elif self.hover:
            bg = bg_hover
        else:
            bg = bg_idle

        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)
        hi = pygame.Surface((self.rect.width, 14), pygame.SRCALPHA)
        pygame.draw.rect(hi, (255,255,255,20), hi.get_rect(), border_radius=10)
        base.blit(hi, (0,0))
        screen.blit(base, self.rect.topleft)

        if self.active and self.togglable:
            pygame.draw.rect(screen, border_active, self.rect, width=2, border_radius=10)

        text = font.render(self.label, True, (235,238,242))
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.callback()
                return True
        return False


# ---------- Viewer ----------
class Viewer:
    def __init__(self, settings: Settings, grid: Optional[Grid] = None,
                 graph: Optional[NodeGraph] = None):
        pygame.init()

        self.settings = settings
        self.grid = grid or Grid(DEFAULT_ROWS, DEFAULT_COLS)
        self.graph = graph or NodeGraph()
        self.mode = "graph" if grid is None and graph is not None else "grid"
        self.cell_size = CELL_SIZE_DEFAULT
        self.font_small = pygame.font.Font(FONT_NAME, 16)
        self.font = pygame.font.Font(FONT_NAME, 20)
        self.font_big = pygame.font.Font(FONT_NAME, 24)

        win_w = GRID_MARGIN*2 + self.grid.cols*self.cell_size + PANEL_W
        win_h = max(GRID_MARGIN*2 + self.grid.rows*self.cell_size, 640)
        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption("Pathtrace")

        self._buttons: list[UIButton] = []
        self.maps = bundled_maps()
        self.map_idx = -1

        self.selected_algo = settings.algo
        self.selected_graph_algo = settings.graph_algo
        self.algo = make_grid_algo(self.selected_algo)

        self.player = PlaybackController(
            self._compute,
            PlaybackConfig(step_duration_ms=settings.step_ms, show_branches=settings.show_branches),
            clock=MonotonicClock(),
        )

        # pointer state
        self._hover_cell: Optional[Cell] = None
        self._paint_add: Optional[bool] = None
        self._last_painted: Optional[Cell] = None
        self._hover_node: Optional[Node] = None
        self._hover_edge: Optional[Edge] = None
        self._drag: Optional[Tuple[Node, float, float]] = None
        self._edge_from: Optional[Node] = None
        self._pointer: Tuple[int, int] = (0, 0)
        self._last_click_ms = 0
        self._last_click_pos = (0, 0)

        self.clock = pygame.time.Clock()
        self._layout(win_w, win_h)

    # ---------- engine glue ----------
    def _compute(self, with_branches: bool):
        if self.mode == "grid":
            return self.algo.compute(self.grid, with_branches=with_branches)
        _, fn = get_graph_algo(self.selected_graph_algo)
        return fn(self.graph)

    def _invalidate(self):
        """Any edit throws the cached result away."""
        self.player.reset()
        self._refresh_active_states()

    def _algo_label(self) -> str:
        if self.mode == "grid":
            return self.algo.name
        return get_graph_algo(self.selected_graph_algo)[0]

    # ---------- layout ----------
    def _layout(self, win_w: int, win_h: int):
        """Compute integer cell_size that fits window and center the grid."""
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)

        cs_by_w = avail_w // self.grid.cols
        cs_by_h = avail_h // self.grid.rows
        self.cell_size = int(max(8, min(cs_by_w, cs_by_h, 60)))

        if self.mode == "grid":
            plate_w = self.grid.cols * self.cell_size + 2 * GRID_MARGIN
            plate_h = self.grid.rows * self.cell_size + 2 * GRID_MARGIN
        else:
            plate_w = avail_w + 2 * GRID_MARGIN
            plate_h = avail_h + 2 * GRID_MARGIN

        left_x = max(0, (win_w - (plate_w + PANEL_W)) // 2)
        top_y  = max(0, (win_h - plate_h) // 2)
        self.canvas_rect = pygame.Rect(left_x, top_y, plate_w, plate_h)
        self._grid_origin = (self.canvas_rect.x + GRID_MARGIN, self.canvas_rect.y + GRID_MARGIN)
        self._right_band = pygame.Rect(self.canvas_rect.right, 0,
                                       max(PANEL_W, win_w - self.canvas_rect.right), win_h)
        self._build_buttons()

    def _cell_at(self, pos) -> Optional[Cell]:
        ox, oy = self._grid_origin
        cs = self.cell_size
        c = (pos[0] - ox) // cs
        r = (pos[1] - oy) // cs
        cell = (int(r), int(c))
        return cell if self.grid.in_bounds(cell) else None

    def _to_canvas(self, pos) -> Tuple[float, float]:
        ox, oy = self._grid_origin
        return pos[0] - ox, pos[1] - oy

    def _to_screen(self, x: float, y: float) -> Tuple[int, int]:
        ox, oy = self._grid_origin
        return int(ox + x), int(oy + y)

    # ---------- main loop ----------
    def run(self):
        while True:
            self._handle_events()
            self.player.tick()
            self._draw()
            self.clock.tick(60)

    def _quit(self):
        pygame.quit(); sys.exit(0)

    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                self._quit()
            elif e.type == pygame.KEYDOWN:
                self._handle_key(e.key)
            elif e.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((max(640, e.w), max(480, e.h)), pygame.RESIZABLE)
                self._layout(*self.screen.get_size())
            elif e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP,
                            pygame.MOUSEWHEEL):
                if e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN):
                    hit = False
                    for b in self._buttons:
                        hit = b.handle_mouse(e) or hit
                    if hit:
                        continue
                if self.mode == "grid":
                    self._grid_mouse(e)
                else:
                    self._graph_mouse(e)

    def _handle_key(self, key: int):
        if key in (pygame.K_ESCAPE, pygame.K_q):
            self._quit()
        elif key == pygame.K_SPACE:
            self.player.toggle()
        elif key == pygame.K_n:
            self.player.step()
        elif key == pygame.K_r:
            self.player.reset()
        elif key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
            self._bump_speed(+1)
        elif key in (pygame.K_MINUS, pygame.K_UNDERSCORE, pygame.K_KP_MINUS):
            self._bump_speed(-1)
        elif key == pygame.K_b:
            self._toggle_branches()
        elif key == pygame.K_TAB:
            self._switch_mode("graph" if self.mode == "grid" else "grid")
        elif key == pygame.K_m:
            self._next_map()
        elif pygame.K_1 <= key <= pygame.K_4:
            i = key - pygame.K_1
            table = GRID_ALGOS if self.mode == "grid" else GRAPH_ALGOS
            if i < len(table):
                self._switch_algo(table[i][0])
        elif key == pygame.K_s:
            self._mark("start")
        elif key == pygame.K_e:
            self._mark("end")
        elif key == pygame.K_g and self.mode == "grid":
            self.grid.random_fill(DEFAULT_WALL_PROB); self._invalidate()
        elif key == pygame.K_c and self.mode == "grid":
            self._clear_grid()
        elif key in (pygame.K_x, pygame.K_DELETE) and self.mode == "graph":
            self._delete_hovered()
        self._refresh_active_states()

    # ---------- grid editing ----------
    def _grid_mouse(self, e):
        if e.type == pygame.MOUSEMOTION:
            self._hover_cell = self._cell_at(e.pos)
            if self._paint_add is not None and self._hover_cell and self._hover_cell != self._last_painted:
                self._paint(self._hover_cell)
        elif e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
            cell = self._cell_at(e.pos)
            if cell is None:
                return
            self._paint_add = not self.grid.is_wall(cell)
            self._paint(cell)
        elif e.type == pygame.MOUSEBUTTONUP and e.button == 1:
            self._paint_add = None
            self._last_painted = None

    def _paint(self, cell: Cell):
        if cell in (self.grid.start, self.grid.end):
            return
        if self._paint_add:
            self.grid.add_wall(cell)
        else:
            self.grid.remove_wall(cell)
        self._last_painted = cell
        self._invalidate()

    def _clear_grid(self):
        self.grid.clear()
        self.grid.clear_marker("start")
        self.grid.clear_marker("end")
        self._invalidate()

    def _mark(self, kind: str):
        if self.mode == "grid":
            if self._hover_cell is None:
                return
            self.grid.remove_wall(self._hover_cell)
            self.grid.set_marker(kind, self._hover_cell)
        else:
            if self._hover_node is None:
                return
            self.graph.set_marker("start" if kind == "start" else "goal", self._hover_node.id)
        self._invalidate()

    # ---------- graph editing ----------
    def _graph_mouse(self, e):
        if e.type == pygame.MOUSEMOTION:
            self._pointer = e.pos
            x, y = self._to_canvas(e.pos)
            self._hover_node = self.graph.node_at(x, y)
            self._hover_edge = self._edge_near(x, y) if self._hover_node is None else None
            if self._drag is not None:
                node, dx, dy = self._drag
                self.graph.move_node(node.id, x - dx, y - dy)
        elif e.type == pygame.MOUSEBUTTONDOWN:
            x, y = self._to_canvas(e.pos)
            if not self.canvas_rect.collidepoint(e.pos):
                return
            node = self.graph.node_at(x, y)
            if e.button == 1:
                now = pygame.time.get_ticks()
                double = (now - self._last_click_ms <= DOUBLE_CLICK_MS
                          and math.dist(e.pos, self._last_click_pos) < 6)
                self._last_click_ms, self._last_click_pos = now, e.pos
                if node is not None:
                    self._drag = (node, x - node.x, y - node.y)
                elif double:
                    n = self.graph.add_node(x, y)
                    logger.info("Added node {}", n.id)
                    self._invalidate()
            elif e.button == 3 and node is not None:
                self._edge_from = node
        elif e.type == pygame.MOUSEBUTTONUP:
            x, y = self._to_canvas(e.pos)
            if e.button == 1:
                self._drag = None
            elif e.button == 3 and self._edge_from is not None:
                target = self.graph.node_at(x, y)
                if target is not None and target.id != self._edge_from.id:
                    if not self.graph.remove_edge(self._edge_from.id, target.id):
                        self.graph.add_edge(self._edge_from.id, target.id, 1)
                    self._invalidate()
                self._edge_from = None
        elif e.type == pygame.MOUSEWHEEL and self._hover_edge is not None:
            edge = self._hover_edge
            self.graph.set_weight(edge.src, edge.dst, max(1, edge.w + e.y))
            self._invalidate()

    def _edge_near(self, x: float, y: float) -> Optional[Edge]:
        best, best_d = None, EDGE_HIT_PX
        for edge in self.graph.edges:
            a, b = self.graph.node(edge.src), self.graph.node(edge.dst)
            if a is None or b is None:
                continue
            d = _dist_to_segment(x, y, a.x, a.y, b.x, b.y)
            if d < best_d:
                best, best_d = edge, d
        return best

    def _delete_hovered(self):
        if self._hover_node is not None:
            self.graph.remove_node(self._hover_node.id)
            self._hover_node = None
        elif self._hover_edge is not None:
            self.graph.remove_edge(self._hover_edge.src, self._hover_edge.dst)
            self._hover_edge = None
        else:
            return
        self._invalidate()

    # ---------- switching ----------
    def _switch_mode(self, mode: str):
        self.mode = mode
        pygame.display.set_caption(f"Pathtrace: {mode}")
        self._layout(*self.screen.get_size())
        self._invalidate()

    def _switch_algo(self, key: str):
        if self.mode == "grid":
            self.selected_algo = key
            self.algo = make_grid_algo(key)
        else:
            self.selected_graph_algo = key
        self._invalidate()

    def _next_map(self):
        if not self.maps:
            logger.info("No bundled maps in {}", MAP_DIR)
            return
        self.map_idx = (self.map_idx + 1) % len(self.maps)
        self.open_scene(self.maps[self.map_idx])

    def open_scene(self, path: Path):
        try:
            scene = load_scene(path)
        except SceneError as ex:
            logger.error("Failed to load map {}: {}", path.name, ex)
            return
        if isinstance(scene, Grid):
            self.grid = scene
            self.mode = "grid"
        else:
            self.graph = scene
            self.mode = "graph"
        logger.info("Opened {} ({})", path.name, self.mode)
        pygame.display.set_caption(f"Pathtrace: {path.stem}")
        self._layout(*self.screen.get_size())
        self._invalidate()

    def _bump_speed(self, dv: int):
        # faster means fewer ms per step
        ms = clamp_step(self.player.config.step_duration_ms - 10 * dv)
        self.player.set_step_duration(ms)

    def _toggle_branches(self):
        self.player.set_show_branches(not self.player.config.show_branches)
        self._refresh_active_states()

    # ---------- drawing ----------
    def _draw(self):
        self._draw_backdrop()
        snap = self.player.snapshot()
        if self.mode == "grid":
            self._draw_grid(snap)
        else:
            self._draw_graph(snap)
        self._draw_metrics_and_buttons(snap)
        pygame.display.flip()

    def _draw_backdrop(self):
        w, h = self.screen.get_size()
        top = (24, 26, 32); bot = (36, 40, 48)
        for y in range(h):
            t = y / max(1, h-1)
            c = (
                int(top[0] + (bot[0]-top[0]) * t),
                int(top[1] + (bot[1]-top[1]) * t),
                int(top[2] + (bot[2]-top[2]) * t),
            )
            pygame.draw.line(self.screen, c, (0, y), (w, y))

    def _cell_rect(self, cell: Cell) -> pygame.Rect:
        cs = self.cell_size
        ox, oy = self._grid_origin
        r, c = cell
        return pygame.Rect(ox + c*cs, oy + r*cs, cs, cs)

    def _cell_center(self, cell) -> Tuple[int, int]:
        cs = self.cell_size
        ox, oy = self._grid_origin
        r, c = cell
        return int(ox + c*cs + cs/2), int(oy + r*cs + cs/2)

    # ---- grid ----
    def _draw_grid(self, snap: PlaybackSnapshot):
        cs = self.cell_size
        for cell in self.grid.cells():
            rect = self._cell_rect(cell)
            pygame.draw.rect(self.screen, WALL if cell in self.grid.walls else WHITE, rect)
            pygame.draw.rect(self.screen, GRID_LINE, rect, 1)

        if self.grid.start is not None:
            pygame.draw.rect(self.screen, START_GREEN, self._cell_rect(self.grid.start).inflate(-2, -2))
        if self.grid.end is not None:
            pygame.draw.rect(self.screen, END_RED, self._cell_rect(self.grid.end).inflate(-2, -2))

        if not snap.path:
            return

        on_main = set(snap.path)
        if snap.branches:
            shade = pygame.Surface((cs, cs), pygame.SRCALPHA)
            head = pygame.Surface((cs, cs), pygame.SRCALPHA)
            pygame.draw.rect(shade, BRANCH_GRAY, pygame.Rect(int(cs*.3), int(cs*.3), int(cs*.4), int(cs*.4)))
            pygame.draw.circle(head, BRANCH_HEAD, (cs//2, cs//2), max(2, int(cs*.2)))
            for branch, pos in zip(snap.branches, snap.branch_indices):
                for cell in branch[:pos + 1]:
                    if cell not in on_main:
                        self.screen.blit(shade, self._cell_rect(cell).topleft)
                if pos < len(branch) - 1 and branch[pos] not in on_main:
                    self.screen.blit(head, self._cell_rect(branch[pos]).topleft)

        # breadcrumb
        for cell in snap.path[:snap.path_index + 1]:
            rect = self._cell_rect(cell)
            pygame.draw.rect(self.screen, BLACK, pygame.Rect(rect.x + int(cs*.4), rect.y + int(cs*.4), max(2, int(cs*.2)), max(2, int(cs*.2))))

        # moving dot, interpolated toward the next cell
        r, c = snap.position()
        pygame.draw.circle(self.screen, DOT_BLUE, self._cell_center((r, c)), max(3, int(cs*.35)))

    # ---- node graph ----
    def _draw_graph(self, snap: PlaybackSnapshot):
        plate = pygame.Surface(self.canvas_rect.size, pygame.SRCALPHA)
        pygame.draw.rect(plate, (245, 247, 250, 235), plate.get_rect(), border_radius=14)
        self.screen.blit(plate, self.canvas_rect.topleft)

        walked = set(zip(snap.path[:snap.path_index + 1], snap.path[1:snap.path_index + 1]))
        for edge in self.graph.edges:
            a, b = self.graph.node(edge.src), self.graph.node(edge.dst)
            if a is None or b is None:
                continue
            if (edge.src, edge.dst) in walked:
                color = NEON_MINT
            elif edge is self._hover_edge:
                color = EDGE_HOVER
            else:
                color = EDGE_COLOR
            self._draw_arrow(a, b, color)
            self._draw_weight(a, b, edge.w)

        if self._edge_from is not None:
            pygame.draw.line(self.screen, EDGE_HOVER, self._to_screen(self._edge_from.x, self._edge_from.y),
                             self._pointer, 2)

        for n in self.graph.nodes:
            center = self._to_screen(n.x, n.y)
            fill = START_GREEN if n.id == self.graph.start else GOAL_RED if n.id == self.graph.goal else NODE_FILL
            pygame.draw.circle(self.screen, fill, center, int(n.r))
            width = 3 if n is self._hover_node else 2
            pygame.draw.circle(self.screen, BLACK, center, int(n.r), width)
            txt = self.font.render(n.id, True, BLACK)
            self.screen.blit(txt, txt.get_rect(center=center))

        def locate(node_id):
            n = self.graph.node(node_id)
            return (n.x, n.y) if n is not None else (0.0, 0.0)

        pos = snap.position(locate)
        if pos is not None:
            pygame.draw.circle(self.screen, DOT_BLUE, self._to_screen(*pos), 9)

    def _draw_arrow(self, a: Node, b: Node, color):
        ax, ay = a.x, a.y
        bx, by = b.x, b.y
        ang = math.atan2(by - ay, bx - ax)
        # stop at the rim of the target circle
        tip = (bx - math.cos(ang) * b.r, by - math.sin(ang) * b.r)
        tail = (ax + math.cos(ang) * a.r, ay + math.sin(ang) * a.r)
        pygame.draw.line(self.screen, color, self._to_screen(*tail), self._to_screen(*tip), 2)
        size = 10
        left = (tip[0] - size*math.cos(ang - 0.4), tip[1] - size*math.sin(ang - 0.4))
        right = (tip[0] - size*math.cos(ang + 0.4), tip[1] - size*math.sin(ang + 0.4))
        pygame.draw.polygon(self.screen, color, [self._to_screen(*tip), self._to_screen(*left),
                                                 self._to_screen(*right)])

    def _draw_weight(self, a: Node, b: Node, w: float):
        label = self.font_small.render(f"{w:g}", True, BLACK)
        mid = self._to_screen((a.x + b.x) / 2, (a.y + b.y) / 2)
        pill = label.get_rect(center=mid).inflate(10, 4)
        pygame.draw.rect(self.screen, WHITE, pill, border_radius=8)
        pygame.draw.rect(self.screen, EDGE_COLOR, pill, 1, border_radius=8)
        self.screen.blit(label, label.get_rect(center=mid))

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 250  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 32
        gap = 8
        half = (w - 8) // 2

        def add(label, cb, rect, *, togglable=False, store_as: Optional[str] = None):
            btn = UIButton(label, rect, cb, togglable=togglable)
            self._buttons.append(btn)
            if store_as:
                setattr(self, store_as, btn)

        add("Play / Pause", self.player.toggle, pygame.Rect(x, y, w, h), togglable=True, store_as="btn_run"); y += h + gap
        add("Step", self.player.step, pygame.Rect(x, y, half, h))
        add("Reset", self.player.reset, pygame.Rect(x + half + 8, y, half, h)); y += h + gap
        add("Slower", lambda: self._bump_speed(-1), pygame.Rect(x, y, half, h))
        add("Faster", lambda: self._bump_speed(+1), pygame.Rect(x + half + 8, y, half, h)); y += h + gap
        add("Branches", self._toggle_branches, pygame.Rect(x, y, w, h), togglable=True, store_as="btn_branches"); y += h + gap

        self._algo_buttons: Dict[str, UIButton] = {}
        table = GRID_ALGOS if self.mode == "grid" else GRAPH_ALGOS
        for key, label in table:
            add(f"Algo: {label}", lambda k=key: self._switch_algo(k), pygame.Rect(x, y, w, h), togglable=True)
            self._algo_buttons[key] = self._buttons[-1]
            y += h + gap

        if self.mode == "grid":
            add("Random walls", lambda: (self.grid.random_fill(DEFAULT_WALL_PROB), self._invalidate()),
                pygame.Rect(x, y, half, h))
            add("Clear", self._clear_grid, pygame.Rect(x + half + 8, y, half, h)); y += h + gap
        add("Grid" if self.mode == "graph" else "Node graph",
            lambda: self._switch_mode("graph" if self.mode == "grid" else "grid"),
            pygame.Rect(x, y, half, h))
        add("Next map", self._next_map, pygame.Rect(x + half + 8, y, half, h))

        self._refresh_active_states()

    def _refresh_active_states(self):
        if hasattr(self, "btn_run"):
            self.btn_run.set_active(self.player.state == PLAYING)
        if hasattr(self, "btn_branches"):
            self.btn_branches.set_active(self.player.config.show_branches)
        selected = self.selected_algo if self.mode == "grid" else self.selected_graph_algo
        for key, btn in getattr(self, "_algo_buttons", {}).items():
            btn.set_active(key == selected)

    def _draw_metrics_and_buttons(self, snap: PlaybackSnapshot):
        rb = self._right_band
        self._refresh_active_states()

        card_h = 230
        card = pygame.Surface((rb.width - 20, card_h), pygame.SRCALPHA)
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
            y0 += surf.get_height() + 6

        line("Metrics", big=True, color=ACCENT_GOLD)
        m = snap.metrics
        line(f"State: {snap.state}")
        if snap.computed and not snap.has_route:
            line("No route", color=GOAL_RED)
        else:
            line(f"Step: {snap.path_index} / {max(0, len(snap.path) - 1)}")
        line(f"Path Len: {len(snap.path)}")
        if "explored" in m:
            line(f"Explored: {m['explored']}")
        if self.player.config.show_branches:
            line(f"Branches: {len(snap.branches)}")
        line("-" * 26)
        line(f"Algo: {self._algo_label()}")
        line(f"Speed: {self.player.config.step_duration_ms:g} ms/step")

        for b in self._buttons:
            b.draw(self.screen, self.font_small)


# ---------- main ----------
def main(argv=None):
    settings = resolve_settings(argv)
    setup_logging(settings.log_level)

    grid = graph = None
    if settings.map_path is not None:
        try:
            scene = load_scene(settings.map_path)
        except SceneError as ex:
            logger.error("Failed to load map: {}", ex)
            sys.exit(1)
        if isinstance(scene, Grid):
            grid = scene
        else:
            graph = scene

    logger.info("Starting viewer (algo={}, {} ms/step, branches={})",
                settings.algo, settings.step_ms, settings.show_branches)
    Viewer(settings, grid=grid, graph=graph).run()


if __name__ == "__main__":
    main()
