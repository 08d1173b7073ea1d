from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from meiro.core.camera import DisplayBudget
from meiro.core.maze import Maze
from meiro.core.player import Player, PlayerState
from meiro.core.render import SPOTLIGHT_RADIUS, RenderFrame, build_overview_frame, build_play_frame

logger = logging.getLogger(__name__)


class GameEvent(str, Enum):
    MOVED = "moved"
    BLOCKED = "blocked"
    LEVEL_COMPLETED = "levelCompleted"


Listener = Callable[[GameEvent, "LevelSession"], None]

KEY_DIRECTIONS: Dict[str, Tuple[int, int]] = {
    "w": (0, -1),
    "arrowup": (0, -1),
    "s": (0, 1),
    "arrowdown": (0, 1),
    "a": (-1, 0),
    "arrowleft": (-1, 0),
    "d": (1, 0),
    "arrowright": (1, 0),
}


def direction_for_key(key: str) -> Optional[Tuple[int, int]]:
    """Map WASD / arrow key names to a (dx, dy) step."""
    return KEY_DIRECTIONS.get(key.lower()) if key else None


class LevelSession:
    """One attempt at one level: the maze, the player and event fan-out.

    Events are delivered synchronously in subscription order: ``moved`` or
    ``blocked`` for every move, then ``levelCompleted`` once when the goal is
    reached. A completed session ignores further moves.
    """

    def __init__(self, level: int, maze: Maze) -> None:
        self._level = level
        self._maze = maze
        self._player = Player(maze.start)
        self._completed = False
        self._listeners: List[Listener] = []

    @property
    def level(self) -> int:
        return self._level

    @property
    def maze(self) -> Maze:
        return self._maze

    @property
    def player(self) -> Player:
        return self._player

    @property
    def state(self) -> PlayerState:
        return self._player.state

    @property
    def completed(self) -> bool:
        return self._completed

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; the returned callable removes it again."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: GameEvent) -> None:
        for listener in list(self._listeners):
            listener(event, self)

    def move(self, dx: int, dy: int) -> bool:
        if self._completed:
            return False
        position = self._player.position
        if self._player.move(dx, dy, self._maze):
            self._emit(GameEvent.MOVED)
            if self._player.is_at_goal(self._maze):
                self._completed = True
                logger.info("Level %d completed after visiting %d cells", self._level, len(self._player.visited))
                self._emit(GameEvent.LEVEL_COMPLETED)
            return True
        target = position.offset(dx, dy)
        if self._maze.is_wall(target.x, target.y):
            self._emit(GameEvent.BLOCKED)
        return False

    def handle_key(self, key: str) -> bool:
        """Move for a WASD/arrow key. Returns False for other keys or blocked moves."""
        direction = direction_for_key(key)
        if direction is None:
            return False
        return self.move(*direction)

    def frame(self, budget: DisplayBudget, spotlight_radius: int = SPOTLIGHT_RADIUS) -> RenderFrame:
        return build_play_frame(self._maze, self._player.state, budget, spotlight_radius)

    def overview(self, surface_size: float) -> RenderFrame:
        return build_overview_frame(self._maze, self._player.state, surface_size)
