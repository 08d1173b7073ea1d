from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Tuple

from meiro.core.maze import Cell, Maze


@dataclass(frozen=True)
class PlayerState:
    """Position plus every cell occupied during the current level attempt."""

    position: Cell
    visited: FrozenSet[Cell]

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", Cell(*self.position))
        object.__setattr__(self, "visited", frozenset(Cell(*c) for c in self.visited))
        if self.position not in self.visited:
            raise ValueError(f"Position {self.position} must be part of the visited set")

    @classmethod
    def at(cls, start: Cell) -> "PlayerState":
        start = Cell(*start)
        return cls(position=start, visited=frozenset([start]))


def advance(state: PlayerState, dx: int, dy: int, maze: Maze) -> Tuple[PlayerState, bool]:
    """Try to step by (dx, dy).

    Only wall status is checked; well-formed mazes are enclosed by walls so the
    player cannot leave the grid. A rejected move returns *state* unchanged.
    """
    candidate = state.position.offset(dx, dy)
    if maze.is_wall(candidate.x, candidate.y):
        return state, False
    return PlayerState(position=candidate, visited=state.visited | {candidate}), True


class Player:
    """Mutable session record for one level attempt, updated through ``advance``."""

    def __init__(self, start: Cell) -> None:
        self._state = PlayerState.at(start)

    @property
    def state(self) -> PlayerState:
        return self._state

    @property
    def position(self) -> Cell:
        return self._state.position

    @property
    def visited(self) -> FrozenSet[Cell]:
        return self._state.visited

    def move(self, dx: int, dy: int, maze: Maze) -> bool:
        """Apply a move. Returns False (state untouched) when the target is a wall."""
        self._state, moved = advance(self._state, dx, dy, maze)
        return moved

    def is_at_goal(self, maze: Maze) -> bool:
        return self._state.position == maze.goal
