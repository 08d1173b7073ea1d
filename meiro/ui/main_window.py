from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QEvent, QObject, Qt, QTimer
from PySide6.QtGui import QCloseEvent, QKeyEvent
from PySide6.QtWidgets import (
    QApplication,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSlider,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from meiro.core.config import GameConfig
from meiro.core.game import LevelLoadResult, MazeGame
from meiro.core.session import GameEvent, LevelSession
from meiro.ui.colors import HomeColors
from meiro.ui.level_cards import LevelGridWidget
from meiro.ui.maze_widgets import MazeCanvas, MinimapCanvas
from meiro.ui.models import build_level_states

logger = logging.getLogger(__name__)

_QT_KEY_NAMES = {
    Qt.Key_Up: "arrowup",
    Qt.Key_Down: "arrowdown",
    Qt.Key_Left: "arrowleft",
    Qt.Key_Right: "arrowright",
    Qt.Key_W: "w",
    Qt.Key_A: "a",
    Qt.Key_S: "s",
    Qt.Key_D: "d",
}

_DPAD = (
    ("▲", 0, -1, 0, 1),
    ("◀", -1, 0, 1, 0),
    ("▶", 1, 0, 1, 2),
    ("▼", 0, 1, 2, 1),
)


def _menu_button(text: str) -> QPushButton:
    button = QPushButton(text)
    button.setObjectName("menuButton")
    button.setCursor(Qt.PointingHandCursor)
    button.setFocusPolicy(Qt.StrongFocus)
    button.setStyleSheet(
        f"""
        QPushButton#menuButton {{
            background: qlineargradient(x1:0, y1:0, x2:1, y2:1,
                stop:0 {HomeColors.PRIMARY_LIGHT}, stop:1 {HomeColors.PRIMARY});
            color: white;
            padding: 10px 24px;
            border: none;
            border-radius: 12px;
            font-weight: 700;
            font-size: 15px;
        }}
        QPushButton#menuButton:hover {{ background: {HomeColors.PRIMARY}; }}
        QPushButton#menuButton:focus {{ border: 2px solid {HomeColors.PRIMARY_DARK}; }}
        """
    )
    return button


def _title_label(text: str, size: int = 28) -> QLabel:
    label = QLabel(text)
    label.setAlignment(Qt.AlignCenter)
    label.setStyleSheet(f"color: {HomeColors.TEXT_PRIMARY}; font-size: {size}px; font-weight: 900;")
    return label


class MainWindow(QMainWindow):
    """Title, level select, game and clear screens on one stacked widget."""

    def __init__(self, game: MazeGame, config: GameConfig) -> None:
        super().__init__()
        self._game = game
        self._config = config
        self._move_timer = QTimer(self)
        self._move_timer.setInterval(config.repeat_interval_ms)
        self._move_timer.timeout.connect(self._repeat_move)
        self._held_direction: Optional[tuple[int, int]] = None

        self._stack = QStackedWidget()
        self._title_screen = self._build_title_screen()
        self._select_screen = self._build_select_screen()
        self._game_screen = self._build_game_screen()
        self._clear_screen = self._build_clear_screen()
        for screen in (self._title_screen, self._select_screen, self._game_screen, self._clear_screen):
            self._stack.addWidget(screen)

        root = QWidget()
        root.setStyleSheet(
            f"background: qlineargradient(x1:0, y1:0, x2:0, y2:1,"
            f" stop:0 {HomeColors.BG_TOP}, stop:1 {HomeColors.BG_BOTTOM});"
        )
        layout = QVBoxLayout(root)
        layout.addWidget(self._stack)
        self.setCentralWidget(root)
        self.setWindowTitle("Meiro")

        self._game.add_listener(self._on_game_event)
        QApplication.instance().installEventFilter(self)
        self._show_title()

    # -- screens ---------------------------------------------------------

    def _build_title_screen(self) -> QWidget:
        screen = QWidget()
        layout = QVBoxLayout(screen)
        layout.addStretch(1)
        layout.addWidget(_title_label("Meiro", 48))

        self._start_button = _menu_button("Start")
        self._start_button.clicked.connect(self._show_level_select)
        layout.addWidget(self._start_button, 0, Qt.AlignHCenter)
        self._progress_label = _title_label("", 16)
        layout.addWidget(self._progress_label)

        volume_row = QHBoxLayout()
        volume_row.addStretch(1)
        volume_row.addWidget(QLabel("Volume"))
        self._volume_slider = QSlider(Qt.Horizontal)
        self._volume_slider.setRange(0, 100)
        self._volume_slider.setFixedWidth(200)
        self._volume_slider.setValue(int(round(self._game.progress.get_volume() * 100)))
        self._volume_slider.valueChanged.connect(self._on_volume_changed)
        self._volume_slider.sliderReleased.connect(self._save_volume)
        volume_row.addWidget(self._volume_slider)
        volume_row.addStretch(1)
        layout.addLayout(volume_row)

        self._reset_button = _menu_button("Reset progress")
        self._reset_button.clicked.connect(self._confirm_reset_progress)
        layout.addWidget(self._reset_button, 0, Qt.AlignHCenter)
        layout.addStretch(1)
        return screen

    def _build_select_screen(self) -> QWidget:
        screen = QWidget()
        layout = QVBoxLayout(screen)
        layout.addWidget(_title_label("Select a level"))
        self._level_grid = LevelGridWidget(
            self._game,
            on_level_clicked=self._start_level,
            preview_size=self._config.preview_size,
        )
        layout.addWidget(self._level_grid, 1)
        self._back_to_title = _menu_button("Back to title")
        self._back_to_title.clicked.connect(self._show_title)
        layout.addWidget(self._back_to_title, 0, Qt.AlignHCenter)
        return screen

    def _build_game_screen(self) -> QWidget:
        screen = QWidget()
        layout = QVBoxLayout(screen)

        header = QHBoxLayout()
        self._level_label = _title_label("", 22)
        header.addWidget(self._level_label, 1)
        restart = _menu_button("Restart")
        restart.setFocusPolicy(Qt.NoFocus)
        restart.clicked.connect(self._restart_level)
        header.addWidget(restart)
        back = _menu_button("Level select")
        back.setFocusPolicy(Qt.NoFocus)
        back.clicked.connect(self._leave_level)
        header.addWidget(back)
        layout.addLayout(header)

        body = QHBoxLayout()
        self._maze_canvas = MazeCanvas(self._config.display, self._config.spotlight_radius)
        body.addWidget(self._maze_canvas, 0, Qt.AlignTop)

        side = QVBoxLayout()
        self._minimap = MinimapCanvas(self._config.minimap_size)
        side.addWidget(self._minimap, 0, Qt.AlignHCenter)
        side.addStretch(1)
        side.addWidget(self._build_dpad(), 0, Qt.AlignHCenter)
        body.addLayout(side)
        layout.addLayout(body, 1)
        return screen

    def _build_dpad(self) -> QWidget:
        pad = QWidget()
        pad_layout = QGridLayout(pad)
        for text, dx, dy, row, col in _DPAD:
            button = QPushButton(text)
            button.setFixedSize(56, 56)
            button.setFocusPolicy(Qt.NoFocus)
            button.setAutoRepeat(False)
            button.pressed.connect(lambda dx=dx, dy=dy: self._start_held_move(dx, dy))
            button.released.connect(self._stop_held_move)
            pad_layout.addWidget(button, row, col)
        return pad

    def _build_clear_screen(self) -> QWidget:
        screen = QWidget()
        layout = QVBoxLayout(screen)
        layout.addStretch(1)
        layout.addWidget(_title_label("Level cleared!", 40))
        self._clear_message = _title_label("", 18)
        layout.addWidget(self._clear_message)
        self._next_level_button = _menu_button("Next level")
        self._next_level_button.clicked.connect(self._start_next_level)
        layout.addWidget(self._next_level_button, 0, Qt.AlignHCenter)
        self._back_to_select = _menu_button("Back to level select")
        self._back_to_select.clicked.connect(self._show_level_select)
        layout.addWidget(self._back_to_select, 0, Qt.AlignHCenter)
        layout.addStretch(1)
        return screen

    # -- navigation ------------------------------------------------------

    def _show_title(self) -> None:
        cleared = [level for level in self._game.progress.completed_levels() if level <= self._game.max_level]
        self._progress_label.setText(f"Cleared {len(cleared)} of {self._game.max_level} levels")
        self._stack.setCurrentWidget(self._title_screen)
        self._start_button.setFocus()

    def _show_level_select(self) -> None:
        if self._game.max_level == 0:
            QMessageBox.warning(
                self,
                "Meiro",
                f"No maze images were found. Put 1.{self._config.extension} in {self._game.levels.maps_dir}.",
            )
            return
        self._stop_held_move()
        self._game.end_session()
        self._maze_canvas.set_session(None)
        self._minimap.set_session(None)
        self._level_grid.set_level_states(build_level_states(self._game))
        self._stack.setCurrentWidget(self._select_screen)
        self._level_grid.focus_current()

    def _show_game(self, session: LevelSession) -> None:
        self._level_label.setText(f"Level {session.level}")
        self._maze_canvas.set_session(session)
        self._minimap.set_session(session)
        self._stack.setCurrentWidget(self._game_screen)
        focused = QApplication.focusWidget()
        if focused is not None:
            focused.clearFocus()

    def _show_clear(self) -> None:
        has_next = self._game.has_next_level()
        self._clear_message.setText(
            "Well done! Try the next level." if has_next else "You have cleared every level!"
        )
        self._next_level_button.setVisible(has_next)
        self._stack.setCurrentWidget(self._clear_screen)
        (self._next_level_button if has_next else self._back_to_select).setFocus()

    def _apply_load_result(self, result: LevelLoadResult) -> None:
        if result.session is not None:
            self._show_game(result.session)
            return
        QMessageBox.warning(self, "Meiro", result.error or "The level could not be loaded.")
        self._show_level_select()

    def _start_level(self, level: int) -> None:
        self._apply_load_result(self._game.start_level(level))

    def _start_next_level(self) -> None:
        self._apply_load_result(self._game.next_level())

    def _restart_level(self) -> None:
        self._stop_held_move()
        self._apply_load_result(self._game.restart_level())

    def _leave_level(self) -> None:
        self._show_level_select()

    def _confirm_reset_progress(self) -> None:
        answer = QMessageBox.question(
            self,
            "Meiro",
            "Clear all completed levels? Your volume setting is kept.",
            QMessageBox.Yes | QMessageBox.No,
            QMessageBox.No,
        )
        if answer == QMessageBox.Yes:
            self._game.progress.reset()
            logger.info("Progress reset by user")
            self._show_title()

    # -- movement --------------------------------------------------------

    def _move(self, dx: int, dy: int) -> None:
        session = self._game.session
        if session is None or self._stack.currentWidget() is not self._game_screen:
            return
        session.move(dx, dy)

    def _start_held_move(self, dx: int, dy: int) -> None:
        if self._move_timer.isActive():
            return
        self._held_direction = (dx, dy)
        self._move(dx, dy)
        if self._held_direction is not None:
            self._move_timer.start()

    def _repeat_move(self) -> None:
        if self._held_direction is None:
            self._move_timer.stop()
            return
        self._move(*self._held_direction)

    def _stop_held_move(self) -> None:
        self._held_direction = None
        self._move_timer.stop()

    def _on_game_event(self, event: GameEvent, session: LevelSession) -> None:
        if event is GameEvent.MOVED:
            self._maze_canvas.update()
            self._minimap.update()
        elif event is GameEvent.LEVEL_COMPLETED:
            self._stop_held_move()
            self._show_clear()

    # -- input -----------------------------------------------------------

    def eventFilter(self, obj: QObject, event: QEvent) -> bool:
        if event.type() not in (QEvent.KeyPress, QEvent.MouseButtonPress):
            return super().eventFilter(obj, event)
        # Audio output may only be opened after the user interacts with the window.
        audio = self._game.audio
        if audio is not None:
            audio.init()
        if event.type() == QEvent.KeyPress and self.isActiveWindow():
            current = self._stack.currentWidget()
            if current is self._game_screen:
                key = _QT_KEY_NAMES.get(event.key(), "")
                if key and self._game.session is not None:
                    self._game.session.handle_key(key)
                    return True
            elif current is self._clear_screen and self._handle_clear_screen_key(event):
                return True
        return super().eventFilter(obj, event)

    def _handle_clear_screen_key(self, event: QKeyEvent) -> bool:
        buttons = [b for b in (self._next_level_button, self._back_to_select) if b.isVisible()]
        if not buttons:
            return False
        focused = QApplication.focusWidget()
        if event.key() in (Qt.Key_Return, Qt.Key_Enter, Qt.Key_Space):
            if focused in buttons:
                focused.click()
                return True
            return False
        if event.key() in (Qt.Key_Up, Qt.Key_Down):
            index = buttons.index(focused) if focused in buttons else -1
            if index == -1:
                index = 0
            elif event.key() == Qt.Key_Down:
                index = (index + 1) % len(buttons)
            else:
                index = (index - 1) % len(buttons)
            buttons[index].setFocus()
            return True
        return False

    def _on_volume_changed(self, value: int) -> None:
        if self._game.audio is not None:
            self._game.audio.set_volume(value / 100.0)
        # keyboard and wheel changes have no release signal
        if not self._volume_slider.isSliderDown():
            self._save_volume()

    def _save_volume(self) -> None:
        self._game.progress.set_volume(self._volume_slider.value() / 100.0)

    def changeEvent(self, event: QEvent) -> None:
        if event.type() == QEvent.ActivationChange and self._game.audio is not None:
            if self.isActiveWindow():
                self._game.audio.resume()
            else:
                self._game.audio.suspend()
        super().changeEvent(event)

    def closeEvent(self, event: QCloseEvent) -> None:
        """Persist progress and release audio when closing the app."""
        self._stop_held_move()
        self._save_volume()
        self._game.progress.save()
        if self._game.audio is not None:
            self._game.audio.close()
        super().closeEvent(event)
