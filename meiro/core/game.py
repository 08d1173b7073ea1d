from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from meiro.core.audio import AudioEngine
from meiro.core.errors import DecodeError, ImageLoadError, MissingLandmark
from meiro.core.levels import LevelRepository
from meiro.core.maze import Maze
from meiro.core.progress import ProgressStore
from meiro.core.session import GameEvent, LevelSession, Listener

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LevelLoadResult:
    """Outcome of starting a level: a session, or a message for the player."""

    session: Optional[LevelSession] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.session is not None


class MazeGame:
    """Owns the level repository, progress store, audio engine and the active session.

    Decode failures stop here: ``start_level`` turns them into a message and
    leaves the current session as it was.
    """

    def __init__(
        self,
        levels: LevelRepository,
        progress: ProgressStore,
        audio: Optional[AudioEngine] = None,
        unlock_all: bool = False,
    ) -> None:
        self._levels = levels
        self._progress = progress
        self._audio = audio
        self._unlock_all = unlock_all
        self._session: Optional[LevelSession] = None
        self._listeners: List[Listener] = []

    @property
    def levels(self) -> LevelRepository:
        return self._levels

    @property
    def progress(self) -> ProgressStore:
        return self._progress

    @property
    def audio(self) -> Optional[AudioEngine]:
        return self._audio

    @property
    def session(self) -> Optional[LevelSession]:
        return self._session

    @property
    def max_level(self) -> int:
        return self._levels.max_level

    @property
    def current_level(self) -> Optional[int]:
        return self._session.level if self._session is not None else None

    def discover_levels(self) -> int:
        return self._levels.discover()

    def add_listener(self, listener: Listener) -> None:
        """Subscribe *listener* to the events of every session started from now on."""
        self._listeners.append(listener)
        if self._session is not None:
            self._session.subscribe(listener)

    def is_level_unlocked(self, level: int) -> bool:
        if not 1 <= level <= self.max_level:
            return False
        return self._unlock_all or self._progress.is_level_unlocked(level)

    def is_level_completed(self, level: int) -> bool:
        return self._progress.is_level_completed(level)

    def start_level(self, level: int) -> LevelLoadResult:
        if not 1 <= level <= self.max_level:
            logger.warning("Level %d requested but only %d level(s) exist", level, self.max_level)
            return LevelLoadResult(error=f"Level {level} is not available yet.")

        try:
            descriptor = self._levels.get(level)
        except ImageLoadError as e:
            logger.error("Could not load level %d: %s", level, e)
            return LevelLoadResult(error=f"Level {level} could not be loaded.\n{e}")
        except MissingLandmark as e:
            logger.error("Level %d is malformed: %s", level, e)
            return LevelLoadResult(error=f"Level {level} is broken.\n{e}")
        except DecodeError as e:
            logger.error("Level %d failed to decode: %s", level, e)
            return LevelLoadResult(error=f"Level {level} could not be loaded.\n{e}")

        session = LevelSession(level, Maze(descriptor))
        session.subscribe(self._on_session_event)
        if self._audio is not None:
            session.subscribe(self._audio.handle_event)
        for listener in self._listeners:
            session.subscribe(listener)
        self._session = session
        logger.info("Started level %d (%dx%d)", level, descriptor.width, descriptor.height)
        return LevelLoadResult(session=session)

    def restart_level(self) -> LevelLoadResult:
        if self._session is None:
            return LevelLoadResult(error="No level is being played.")
        return self.start_level(self._session.level)

    def end_session(self) -> None:
        self._session = None

    def has_next_level(self) -> bool:
        current = self.current_level
        return current is not None and current + 1 <= self.max_level

    def next_level(self) -> LevelLoadResult:
        current = self.current_level
        if current is None:
            return LevelLoadResult(error="No level is being played.")
        return self.start_level(current + 1)

    def _on_session_event(self, event: GameEvent, session: LevelSession) -> None:
        if event is GameEvent.LEVEL_COMPLETED:
            self._progress.complete_level(session.level, session.player.visited)
