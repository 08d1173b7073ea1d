"""Level selection UI: LevelButton and LevelGridWidget."""

from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QGraphicsDropShadowEffect,
    QGridLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from meiro.core.game import MazeGame
from meiro.core.maze import Maze
from meiro.ui.colors import HomeColors, blend_hex
from meiro.ui.maze_widgets import LevelPreview
from meiro.ui.models import LevelState


class LevelButton(QPushButton):
    """A numbered level tile: locked, available, or completed with a path preview."""

    def __init__(
        self,
        state: LevelState,
        *,
        on_click: Callable[[int], None],
        preview: Optional[QWidget] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._state = state
        self.setObjectName("levelButton")
        self.setMinimumSize(120, 140)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setEnabled(state.unlocked)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(10, 8, 10, 8)
        layout.setSpacing(6)

        title = QLabel(str(state.level))
        title.setObjectName("levelButtonTitle")
        title.setAlignment(Qt.AlignCenter)
        title.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
        layout.addWidget(title)

        if preview is not None:
            layout.addWidget(preview, 0, Qt.AlignHCenter)
        else:
            badge = QLabel("🔒" if not state.unlocked else "▶")
            badge.setAlignment(Qt.AlignCenter)
            badge.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
            layout.addWidget(badge, 1)

        if state.completed:
            base = HomeColors.LEVEL_COMPLETED
            self.setToolTip(f"Level {state.level}: cleared")
        elif state.unlocked:
            base = HomeColors.LEVEL_AVAILABLE
            self.setToolTip(f"Level {state.level}")
        else:
            base = HomeColors.LEVEL_LOCKED
            self.setToolTip(f"Level {state.level}: locked")

        top = blend_hex(base, "#FFFFFF", 0.18)
        bottom = blend_hex(base, "#000000", 0.08)
        border = "3px solid #FFFFFF" if state.is_current else "1px solid rgba(255, 255, 255, 0.40)"
        self.setStyleSheet(
            f"""
            QPushButton#levelButton {{
                background: qlineargradient(x1:0, y1:0, x2:0, y2:1,
                    stop:0 {top}, stop:1 {bottom});
                border-radius: 14px;
                border: {border};
            }}
            QPushButton#levelButton:focus {{
                border: 3px solid {HomeColors.PRIMARY_DARK};
            }}
            QLabel#levelButtonTitle {{
                color: rgba(255, 255, 255, 0.96);
                font-weight: 900;
                font-size: 18px;
            }}
            """
        )

        shadow = QGraphicsDropShadowEffect(self)
        shadow.setBlurRadius(18)
        shadow.setOffset(0, 6)
        shadow.setColor(QColor(15, 23, 42, 70))
        self.setGraphicsEffect(shadow)

        if state.unlocked:
            self.clicked.connect(lambda: on_click(state.level))

    @property
    def state(self) -> LevelState:
        return self._state


class LevelGridWidget(QWidget):
    """Grid of LevelButtons, rebuilt from the game's progress on every refresh."""

    def __init__(
        self,
        game: MazeGame,
        *,
        on_level_clicked: Callable[[int], None],
        preview_size: int = 100,
        columns: int = 5,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._game = game
        self._on_level_clicked = on_level_clicked
        self._preview_size = preview_size
        self._columns = columns
        self._buttons: list[LevelButton] = []
        self._layout = QGridLayout(self)
        self._layout.setSpacing(14)

    def buttons(self) -> list[LevelButton]:
        return list(self._buttons)

    def set_level_states(self, states: list[LevelState]) -> None:
        while self._layout.count():
            item = self._layout.takeAt(0)
            w = item.widget()
            if w is not None:
                w.setParent(None)
                w.deleteLater()
        self._buttons = []

        for idx, state in enumerate(states):
            preview = None
            if state.completed:
                descriptor = self._game.levels.cached(state.level)
                if descriptor is not None:
                    preview = LevelPreview(
                        Maze(descriptor),
                        self._game.progress.get_completed_path(state.level),
                        size=self._preview_size,
                    )
            button = LevelButton(state, on_click=self._on_level_clicked, preview=preview, parent=self)
            self._layout.addWidget(button, idx // self._columns, idx % self._columns)
            self._buttons.append(button)

    def focus_current(self) -> None:
        for button in self._buttons:
            if button.state.is_current:
                button.setFocus()
                return
        if self._buttons:
            self._buttons[0].setFocus()
