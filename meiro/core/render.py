"""Drawable primitives for the play surface, the overview map and level previews.

Nothing here touches a drawing surface; the UI paints the returned frames.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, List, Optional, Tuple

from meiro.core.camera import DisplayBudget, ViewportWindow, compute_overview, compute_viewport
from meiro.core.maze import Cell, Maze
from meiro.core.player import PlayerState

SPOTLIGHT_RADIUS = 1


class CellRole(Enum):
    WALL = "wall"
    PATH = "path"
    START = "start"
    GOAL = "goal"


class Shade(Enum):
    LIT = "lit"  # inside the spotlight
    DIMMED = "dimmed"  # visited, outside the spotlight
    TRAIL = "trail"  # visited, on the overview or a preview
    PLAIN = "plain"


@dataclass(frozen=True)
class CellPrimitive:
    cell: Cell
    role: CellRole
    shade: Shade
    x: float
    y: float
    size: float


@dataclass(frozen=True)
class PlayerMarker:
    center_x: float
    center_y: float
    radius: float


@dataclass(frozen=True)
class RenderFrame:
    window: ViewportWindow
    cells: Tuple[CellPrimitive, ...]
    player: Optional[PlayerMarker] = None

    def primitive_at(self, cell: Cell) -> Optional[CellPrimitive]:
        for primitive in self.cells:
            if primitive.cell == cell:
                return primitive
        return None


def classify(maze: Maze, cell: Cell) -> CellRole:
    if maze.is_wall(cell.x, cell.y):
        return CellRole.WALL
    if cell == maze.start:
        return CellRole.START
    if cell == maze.goal:
        return CellRole.GOAL
    return CellRole.PATH


def in_spotlight(cell: Cell, position: Cell, radius: int = SPOTLIGHT_RADIUS) -> bool:
    return abs(cell.x - position.x) <= radius and abs(cell.y - position.y) <= radius


def _primitive(window: ViewportWindow, cell: Cell, role: CellRole, shade: Shade) -> CellPrimitive:
    x, y = window.to_screen(cell)
    return CellPrimitive(cell=cell, role=role, shade=shade, x=x, y=y, size=window.cell_size)


def _marker(window: ViewportWindow, position: Cell) -> PlayerMarker:
    x, y = window.to_screen(position)
    half = window.cell_size / 2.0
    return PlayerMarker(center_x=x + half, center_y=y + half, radius=window.cell_size / 3.0)


def build_play_frame(
    maze: Maze,
    state: PlayerState,
    budget: DisplayBudget,
    spotlight_radius: int = SPOTLIGHT_RADIUS,
) -> RenderFrame:
    """Cells near the player are lit, visited cells are dimmed, the rest stay fogged."""
    window = compute_viewport(maze.width, maze.height, state.position, budget)
    primitives: List[CellPrimitive] = []
    for cell in window.cells():
        if not maze.in_bounds(cell.x, cell.y):
            continue
        if in_spotlight(cell, state.position, spotlight_radius):
            shade = Shade.LIT
        elif cell in state.visited:
            shade = Shade.DIMMED
        else:
            continue
        primitives.append(_primitive(window, cell, classify(maze, cell), shade))
    return RenderFrame(window=window, cells=tuple(primitives), player=_marker(window, state.position))


def build_overview_frame(maze: Maze, state: PlayerState, surface_size: float) -> RenderFrame:
    """Whole-maze map: every wall, plus only the non-wall cells already visited."""
    window = compute_overview(maze.width, maze.height, surface_size)
    primitives: List[CellPrimitive] = []
    for cell in window.cells():
        role = classify(maze, cell)
        if role is CellRole.WALL:
            primitives.append(_primitive(window, cell, role, Shade.PLAIN))
        elif cell in state.visited:
            primitives.append(_primitive(window, cell, role, Shade.TRAIL))
    return RenderFrame(window=window, cells=tuple(primitives), player=_marker(window, state.position))


def build_preview_frame(maze: Maze, path: AbstractSet[Cell], surface_size: float) -> RenderFrame:
    """Level-select thumbnail of a completed level with its winning path."""
    window = compute_overview(maze.width, maze.height, surface_size)
    primitives: List[CellPrimitive] = []
    for cell in window.cells():
        role = classify(maze, cell)
        if role in (CellRole.START, CellRole.GOAL):
            shade = Shade.PLAIN
        elif cell in path:
            shade = Shade.TRAIL
        else:
            shade = Shade.PLAIN
        primitives.append(_primitive(window, cell, role, shade))
    return RenderFrame(window=window, cells=tuple(primitives), player=None)
