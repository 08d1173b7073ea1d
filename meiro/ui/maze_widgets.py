"""Widgets that paint RenderFrames: play surface, overview map, level preview."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QColor, QPainter, QPen
from PySide6.QtWidgets import QWidget

from meiro.core.camera import DisplayBudget
from meiro.core.maze import Maze
from meiro.core.render import CellRole, RenderFrame, build_preview_frame
from meiro.core.session import LevelSession
from meiro.ui.colors import MazeColors, overview_cell_color, play_cell_color, preview_cell_color


def _paint_marker(painter: QPainter, frame: RenderFrame) -> None:
    if frame.player is None:
        return
    painter.setPen(Qt.NoPen)
    painter.setBrush(QColor(MazeColors.PLAYER))
    marker = frame.player
    painter.drawEllipse(QPointF(marker.center_x, marker.center_y), marker.radius, marker.radius)


class MazeCanvas(QWidget):
    """Fixed-size play surface with spotlight, fog and camera-follow."""

    def __init__(
        self,
        budget: DisplayBudget,
        spotlight_radius: int = 1,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._budget = budget
        self._spotlight_radius = spotlight_radius
        self._session: Optional[LevelSession] = None
        side = int(budget.surface_size)
        self.setFixedSize(side, side)
        self.setFocusPolicy(Qt.NoFocus)

    def set_session(self, session: Optional[LevelSession]) -> None:
        self._session = session
        self.update()

    def paintEvent(self, event) -> None:
        super().paintEvent(event)
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(MazeColors.BACKGROUND))
        if self._session is None:
            return
        painter.setRenderHint(QPainter.Antialiasing, True)
        frame = self._session.frame(self._budget, self._spotlight_radius)
        grid_pen = QPen(QColor(MazeColors.GRID_LINE))
        grid_pen.setWidth(1)

        for prim in frame.cells:
            rect = QRectF(prim.x, prim.y, prim.size, prim.size)
            painter.fillRect(rect, QColor(play_cell_color(prim.role, prim.shade)))
            if prim.role is CellRole.WALL:
                continue
            painter.setPen(grid_pen)
            painter.setBrush(Qt.NoBrush)
            painter.drawRect(rect)

        goal = frame.primitive_at(self._session.maze.goal)
        if goal is not None:
            goal_rect = QRectF(goal.x, goal.y, goal.size, goal.size)
            painter.fillRect(goal_rect.adjusted(2, 2, -2, -2), QColor(MazeColors.GOAL))

        _paint_marker(painter, frame)


class MinimapCanvas(QWidget):
    """Always zoomed-out map: walls plus the cells already explored."""

    def __init__(self, size: int = 150, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._session: Optional[LevelSession] = None
        self.setFixedSize(size, size)
        self.setFocusPolicy(Qt.NoFocus)

    def set_session(self, session: Optional[LevelSession]) -> None:
        self._session = session
        self.update()

    def paintEvent(self, event) -> None:
        super().paintEvent(event)
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(MazeColors.MINIMAP_BACKGROUND))
        if self._session is None:
            return
        frame = self._session.overview(float(self.width()))
        for prim in frame.cells:
            painter.fillRect(QRectF(prim.x, prim.y, prim.size, prim.size), QColor(overview_cell_color(prim.role)))
        painter.setRenderHint(QPainter.Antialiasing, True)
        _paint_marker(painter, frame)


class LevelPreview(QWidget):
    """Thumbnail of a completed level with the path the player took."""

    def __init__(self, maze: Maze, path: frozenset, size: int = 100, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setFixedSize(size, size)
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
        self._frame = build_preview_frame(maze, path, float(size))

    def paintEvent(self, event) -> None:
        super().paintEvent(event)
        painter = QPainter(self)
        for prim in self._frame.cells:
            color = QColor(preview_cell_color(prim.role, prim.shade))
            painter.fillRect(QRectF(prim.x, prim.y, prim.size, prim.size), color)
