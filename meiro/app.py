"""Application entry point and setup for the Meiro maze game."""

import logging
import sys

from PySide6.QtWidgets import QApplication

from meiro.core.audio import AudioEngine
from meiro.core.config import load_config
from meiro.core.game import MazeGame
from meiro.core.levels import LevelRepository
from meiro.core.progress import ProgressStore
from meiro.ui.audio_sink import QtToneSink
from meiro.ui.main_window import MainWindow


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def run() -> None:
    """Load config and levels, then start the main window."""
    configure_logging()
    app = QApplication(sys.argv)
    app.setApplicationName("Meiro")
    app.setApplicationDisplayName("Meiro")

    config = load_config()
    progress_store = ProgressStore(default_volume=config.volume)
    levels = LevelRepository(
        maps_dir=config.maps_dir,
        extension=config.extension,
        max_probe=config.max_probe,
    )
    audio = AudioEngine(QtToneSink, volume=progress_store.get_volume(), sample_rate=config.sample_rate)

    game = MazeGame(levels, progress_store, audio=audio, unlock_all=config.unlock_all)
    game.discover_levels()

    window = MainWindow(game=game, config=config)
    window.resize(800, 640)
    window.show()

    sys.exit(app.exec())
