"""Viewport windowing for the play surface and the overview surface."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple

from meiro.core.maze import Cell


@dataclass(frozen=True)
class DisplayBudget:
    """Fixed square play surface and how many cells it may show per axis."""

    surface_size: float = 500.0
    max_visible_cells: int = 25
    min_cell_size: float = 20.0

    def __post_init__(self) -> None:
        if self.surface_size <= 0:
            raise ValueError("surface_size must be positive")
        if self.max_visible_cells < 1:
            raise ValueError("max_visible_cells must be at least 1")
        if self.min_cell_size < 0:
            raise ValueError("min_cell_size must not be negative")


@dataclass(frozen=True)
class ViewportWindow:
    """The cells drawn in one frame and how they map to surface pixels."""

    origin: Cell
    visible_width: int
    visible_height: int
    offset: Tuple[float, float]
    cell_size: float
    follows_player: bool = False

    def contains(self, cell: Cell) -> bool:
        return (
            self.origin.x <= cell[0] < self.origin.x + self.visible_width
            and self.origin.y <= cell[1] < self.origin.y + self.visible_height
        )

    def cells(self) -> Iterator[Cell]:
        """Visible cells in row-major order."""
        for y in range(self.origin.y, self.origin.y + self.visible_height):
            for x in range(self.origin.x, self.origin.x + self.visible_width):
                yield Cell(x, y)

    def to_screen(self, cell: Cell) -> Tuple[float, float]:
        """Top-left pixel of *cell* on the surface."""
        return (
            cell[0] * self.cell_size + self.offset[0],
            cell[1] * self.cell_size + self.offset[1],
        )


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def _follow_axis(player: int, size: int, max_visible: int) -> Tuple[int, int]:
    """Return (origin, visible) for one axis, keeping the window inside the maze."""
    visible = min(max_visible, size)
    origin = _clamp(player - max_visible // 2, 0, size - visible)
    return origin, visible


def compute_viewport(width: int, height: int, player: Cell, budget: DisplayBudget) -> ViewportWindow:
    """Window for the play surface.

    Mazes that fit in the visible budget are shown whole and centered. Larger
    mazes get a camera that keeps the player centered except near the edges.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Maze dimensions must be positive, got {width}x{height}")

    side = float(budget.surface_size)
    limit = budget.max_visible_cells

    if width <= limit and height <= limit:
        fit_size = min(side / width, side / height)
        cell_size = max(float(budget.min_cell_size), fit_size)
        return ViewportWindow(
            origin=Cell(0, 0),
            visible_width=width,
            visible_height=height,
            offset=((side - width * cell_size) / 2.0, (side - height * cell_size) / 2.0),
            cell_size=cell_size,
            follows_player=False,
        )

    cell_size = max(float(budget.min_cell_size), side / limit)
    origin_x, visible_w = _follow_axis(player[0], width, limit)
    origin_y, visible_h = _follow_axis(player[1], height, limit)
    return ViewportWindow(
        origin=Cell(origin_x, origin_y),
        visible_width=visible_w,
        visible_height=visible_h,
        offset=(-origin_x * cell_size, -origin_y * cell_size),
        cell_size=cell_size,
        follows_player=True,
    )


def compute_overview(width: int, height: int, surface_size: float) -> ViewportWindow:
    """Window that always shows the entire maze, centered on the surface."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Maze dimensions must be positive, got {width}x{height}")
    side = float(surface_size)
    cell_size = min(side / width, side / height)
    return ViewportWindow(
        origin=Cell(0, 0),
        visible_width=width,
        visible_height=height,
        offset=((side - width * cell_size) / 2.0, (side - height * cell_size) / 2.0),
        cell_size=cell_size,
        follows_player=False,
    )
