"""Tests for meiro.core.render – spotlight, fog, overview and previews."""

from __future__ import annotations

import pytest

from meiro.core.camera import DisplayBudget
from meiro.core.decoder import decode
from meiro.core.maze import Cell, Maze
from meiro.core.player import PlayerState, advance
from meiro.core.render import (
    CellRole,
    Shade,
    build_overview_frame,
    build_play_frame,
    build_preview_frame,
    classify,
    in_spotlight,
)

CORRIDOR = [
    "#########",
    "#S......#",
    "#######.#",
    "#G......#",
    "#########",
]


@pytest.fixture()
def maze(make_image) -> Maze:
    return Maze(decode(make_image(CORRIDOR)))


def _walk(state: PlayerState, maze: Maze, steps) -> PlayerState:
    for dx, dy in steps:
        state, moved = advance(state, dx, dy, maze)
        assert moved
    return state


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------

class TestClassify:
    def test_roles(self, maze: Maze):
        assert classify(maze, Cell(0, 0)) is CellRole.WALL
        assert classify(maze, Cell(1, 1)) is CellRole.START
        assert classify(maze, Cell(1, 3)) is CellRole.GOAL
        assert classify(maze, Cell(4, 1)) is CellRole.PATH


class TestSpotlight:
    def test_three_by_three(self):
        centre = Cell(5, 5)
        lit = {Cell(x, y) for x in range(10) for y in range(10) if in_spotlight(Cell(x, y), centre)}
        assert len(lit) == 9
        assert Cell(4, 4) in lit and Cell(6, 6) in lit

    def test_radius(self):
        assert in_spotlight(Cell(7, 5), Cell(5, 5), radius=2)
        assert not in_spotlight(Cell(8, 5), Cell(5, 5), radius=2)


# ---------------------------------------------------------------------------
# Play frame
# ---------------------------------------------------------------------------

class TestPlayFrame:
    def test_initial_frame_is_spotlight_only(self, maze: Maze):
        frame = build_play_frame(maze, PlayerState.at(maze.start), DisplayBudget())
        drawn = {p.cell for p in frame.cells}
        assert drawn == {Cell(x, y) for x in range(0, 3) for y in range(0, 3)}
        assert all(p.shade is Shade.LIT for p in frame.cells)

    def test_far_cells_are_fogged(self, maze: Maze):
        frame = build_play_frame(maze, PlayerState.at(maze.start), DisplayBudget())
        assert frame.primitive_at(Cell(1, 3)) is None
        assert frame.primitive_at(Cell(8, 0)) is None

    def test_visited_cells_dimmed(self, maze: Maze):
        state = _walk(PlayerState.at(maze.start), maze, [(1, 0)] * 5)
        frame = build_play_frame(maze, state, DisplayBudget())
        assert frame.primitive_at(Cell(1, 1)).shade is Shade.DIMMED
        assert frame.primitive_at(Cell(1, 1)).role is CellRole.START
        assert frame.primitive_at(Cell(6, 1)).shade is Shade.LIT
        # neither visited nor near: a wall far behind the player
        assert frame.primitive_at(Cell(0, 0)) is None

    def test_player_marker(self, maze: Maze):
        frame = build_play_frame(maze, PlayerState.at(maze.start), DisplayBudget())
        w = frame.window
        x, y = w.to_screen(Cell(1, 1))
        assert frame.player.center_x == pytest.approx(x + w.cell_size / 2)
        assert frame.player.center_y == pytest.approx(y + w.cell_size / 2)
        assert frame.player.radius == pytest.approx(w.cell_size / 3)

    def test_primitive_geometry(self, maze: Maze):
        frame = build_play_frame(maze, PlayerState.at(maze.start), DisplayBudget())
        prim = frame.primitive_at(Cell(2, 2))
        assert (prim.x, prim.y) == pytest.approx(frame.window.to_screen(Cell(2, 2)))
        assert prim.size == frame.window.cell_size

    def test_wider_spotlight(self, maze: Maze):
        frame = build_play_frame(maze, PlayerState.at(maze.start), DisplayBudget(), spotlight_radius=2)
        assert frame.primitive_at(Cell(3, 3)) is not None

    def test_camera_window_limits_cells(self, make_image):
        rows = ["#" * 41] + ["#S" + "." * 38 + "#"] + ["#" + "." * 39 + "#"] * 37 + ["#" + "." * 38 + "G#"] + ["#" * 41]
        big = Maze(decode(make_image(rows)))
        frame = build_play_frame(big, PlayerState.at(big.start), DisplayBudget())
        assert frame.window.follows_player
        assert all(frame.window.contains(p.cell) for p in frame.cells)


# ---------------------------------------------------------------------------
# Overview frame
# ---------------------------------------------------------------------------

class TestOverviewFrame:
    def test_walls_always_drawn(self, maze: Maze):
        frame = build_overview_frame(maze, PlayerState.at(maze.start), 150)
        walls = {p.cell for p in frame.cells if p.role is CellRole.WALL}
        assert walls == set(maze.walls)

    def test_undiscovered_cells_omitted(self, maze: Maze):
        frame = build_overview_frame(maze, PlayerState.at(maze.start), 150)
        non_walls = {p.cell for p in frame.cells if p.role is not CellRole.WALL}
        assert non_walls == {Cell(1, 1)}
        assert frame.primitive_at(Cell(1, 3)) is None  # goal not yet seen
        assert frame.primitive_at(Cell(2, 1)) is None  # in spotlight but unvisited

    def test_visited_cells_are_trail(self, maze: Maze):
        state = _walk(PlayerState.at(maze.start), maze, [(1, 0), (1, 0)])
        frame = build_overview_frame(maze, state, 150)
        assert frame.primitive_at(Cell(3, 1)).shade is Shade.TRAIL

    def test_goal_drawn_once_visited(self, maze: Maze):
        steps = [(1, 0)] * 6 + [(0, 1), (0, 1)] + [(-1, 0)] * 6
        state = _walk(PlayerState.at(maze.start), maze, steps)
        frame = build_overview_frame(maze, state, 150)
        assert frame.primitive_at(Cell(1, 3)).role is CellRole.GOAL


# ---------------------------------------------------------------------------
# Preview frame
# ---------------------------------------------------------------------------

class TestPreviewFrame:
    def test_every_cell_drawn(self, maze: Maze):
        frame = build_preview_frame(maze, frozenset(), 100)
        assert len(frame.cells) == maze.width * maze.height
        assert frame.player is None

    def test_path_cells_marked(self, maze: Maze):
        frame = build_preview_frame(maze, frozenset({Cell(1, 1), Cell(2, 1)}), 100)
        assert frame.primitive_at(Cell(2, 1)).shade is Shade.TRAIL
        assert frame.primitive_at(Cell(3, 1)).shade is Shade.PLAIN

    def test_landmarks_keep_role(self, maze: Maze):
        frame = build_preview_frame(maze, frozenset({Cell(1, 1)}), 100)
        start = frame.primitive_at(Cell(1, 1))
        assert start.role is CellRole.START
        assert start.shade is Shade.PLAIN
