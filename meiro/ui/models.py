"""Data models used by the UI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from meiro.core.game import MazeGame


@dataclass
class LevelState:
    """UI state for a single level: completion, unlock status, and selection."""

    level: int
    unlocked: bool
    completed: bool
    is_current: bool = False


def build_level_states(game: MazeGame) -> List[LevelState]:
    """Compute unlock/completion state for every level and mark the first unfinished one."""
    states = [
        LevelState(
            level=level,
            unlocked=game.is_level_unlocked(level),
            completed=game.is_level_completed(level),
        )
        for level in game.levels.levels()
    ]
    for st in states:
        if st.unlocked and not st.completed:
            st.is_current = True
            break
    return states
