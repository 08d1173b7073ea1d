"""Tests for meiro.core.game – level lifecycle and progress bookkeeping."""

from __future__ import annotations

from pathlib import Path

import pytest

from meiro.core.audio import AudioEngine
from meiro.core.errors import DecodeError, ImageLoadError, MissingLandmark
from meiro.core.game import MazeGame
from meiro.core.levels import LevelRepository
from meiro.core.maze import Cell
from meiro.core.progress import ProgressStore
from meiro.core.session import GameEvent


class FailingRepository:
    """Wraps a real repository but fails to load any level other than 1."""

    def __init__(self, inner: LevelRepository, error: DecodeError) -> None:
        self._inner = inner
        self._error = error

    @property
    def max_level(self) -> int:
        return self._inner.max_level

    def get(self, level: int):
        if level != 1:
            raise self._error
        return self._inner.get(level)


class RecordingSink:
    def __init__(self, sample_rate: int) -> None:
        self.writes = []

    def write(self, samples, sample_rate: int) -> None:
        self.writes.append(len(samples))

    def suspend(self) -> None:
        pass

    def resume(self) -> None:
        pass

    def close(self) -> None:
        pass


@pytest.fixture()
def store(tmp_path: Path) -> ProgressStore:
    return ProgressStore(tmp_path / "progress.json")


@pytest.fixture()
def game(write_level, maps_dir: Path, five_by_five, store: ProgressStore) -> MazeGame:
    for level in (1, 2, 3):
        write_level(level, five_by_five)
    g = MazeGame(LevelRepository(maps_dir), store)
    g.discover_levels()
    return g


def _solve(game: MazeGame) -> None:
    for dx, dy in ((1, 0), (1, 0), (0, 1), (0, 1)):
        game.session.move(dx, dy)


# ---------------------------------------------------------------------------
# unlock rules
# ---------------------------------------------------------------------------

class TestUnlock:
    def test_fresh(self, game: MazeGame):
        assert game.max_level == 3
        assert game.is_level_unlocked(1)
        assert not game.is_level_unlocked(2)

    def test_out_of_range(self, game: MazeGame):
        assert not game.is_level_unlocked(0)
        assert not game.is_level_unlocked(4)

    def test_unlock_all(self, write_level, maps_dir: Path, five_by_five, store: ProgressStore):
        write_level(1, five_by_five)
        write_level(2, five_by_five)
        g = MazeGame(LevelRepository(maps_dir), store, unlock_all=True)
        g.discover_levels()
        assert g.is_level_unlocked(2)
        assert not g.is_level_unlocked(3)


# ---------------------------------------------------------------------------
# start_level
# ---------------------------------------------------------------------------

class TestStartLevel:
    def test_success(self, game: MazeGame):
        result = game.start_level(1)
        assert result.ok
        assert game.session is result.session
        assert game.current_level == 1
        assert result.session.state.position == Cell(1, 1)

    def test_not_available(self, game: MazeGame):
        result = game.start_level(7)
        assert not result.ok
        assert result.error == "Level 7 is not available yet."
        assert game.session is None

    def test_failure_keeps_current_session(self, game: MazeGame, store: ProgressStore):
        flaky = MazeGame(FailingRepository(game.levels, MissingLandmark("2.png", ["start"])), store)
        flaky.start_level(1)
        current = flaky.session
        result = flaky.start_level(2)
        assert not result.ok
        assert result.error.startswith("Level 2 is broken.")
        assert "start" in result.error
        assert flaky.session is current

    def test_missing_file_message(self, game: MazeGame, store: ProgressStore):
        broken = MazeGame(FailingRepository(game.levels, ImageLoadError("3.png", "not found")), store)
        result = broken.start_level(3)
        assert not result.ok
        assert result.error.startswith("Level 3 could not be loaded.")
        assert broken.session is None

    def test_restart_resets_player(self, game: MazeGame):
        game.start_level(1)
        game.session.move(1, 0)
        result = game.restart_level()
        assert result.ok
        assert result.session.state.visited == {Cell(1, 1)}

    def test_restart_without_session(self, game: MazeGame):
        assert not game.restart_level().ok

    def test_end_session(self, game: MazeGame):
        game.start_level(1)
        game.end_session()
        assert game.session is None
        assert game.current_level is None


# ---------------------------------------------------------------------------
# completion
# ---------------------------------------------------------------------------

class TestCompletion:
    def test_completion_persists_visited(self, game: MazeGame, store: ProgressStore):
        game.start_level(1)
        _solve(game)
        assert store.is_level_completed(1)
        assert store.get_completed_path(1) == {Cell(1, 1), Cell(2, 1), Cell(3, 1), Cell(3, 2), Cell(3, 3)}
        assert game.is_level_unlocked(2)
        assert ProgressStore(store.file_path).is_level_completed(1)

    def test_next_level(self, game: MazeGame):
        game.start_level(1)
        _solve(game)
        assert game.has_next_level()
        result = game.next_level()
        assert result.ok
        assert game.current_level == 2

    def test_no_next_after_last(self, game: MazeGame):
        game.start_level(3)
        assert not game.has_next_level()
        assert not game.next_level().ok

    def test_next_without_session(self, game: MazeGame):
        assert not game.has_next_level()
        assert not game.next_level().ok

    def test_store_updated_before_listeners(self, game: MazeGame, store: ProgressStore):
        seen = []
        game.add_listener(
            lambda event, s: seen.append(store.is_level_completed(1)) if event is GameEvent.LEVEL_COMPLETED else None
        )
        game.start_level(1)
        _solve(game)
        assert seen == [True]


# ---------------------------------------------------------------------------
# listeners and audio
# ---------------------------------------------------------------------------

class TestListeners:
    def test_listener_follows_new_sessions(self, game: MazeGame):
        received = []
        game.add_listener(lambda event, s: received.append((s.level, event)))
        game.start_level(1)
        game.session.move(1, 0)
        game.start_level(2)
        game.session.move(0, -1)
        assert received == [(1, GameEvent.MOVED), (2, GameEvent.BLOCKED)]

    def test_listener_added_mid_session(self, game: MazeGame):
        game.start_level(1)
        received = []
        game.add_listener(lambda event, s: received.append(event))
        game.session.move(1, 0)
        assert received == [GameEvent.MOVED]

    def test_audio_plays_on_events(self, write_level, maps_dir: Path, five_by_five, store: ProgressStore):
        write_level(1, five_by_five)
        sinks = []

        def factory(rate):
            sinks.append(RecordingSink(rate))
            return sinks[-1]

        audio = AudioEngine(factory)
        g = MazeGame(LevelRepository(maps_dir), store, audio=audio)
        g.discover_levels()
        audio.init()
        g.start_level(1)
        g.session.move(1, 0)
        g.session.move(0, -1)
        assert len(sinks[0].writes) == 2
