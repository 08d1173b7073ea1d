"""Theme colors and color utilities for the UI."""

from __future__ import annotations

from meiro.core.render import CellRole, Shade


class HomeColors:
    """Menu screens palette."""

    BG_TOP = "#e8f5e9"
    BG_BOTTOM = "#c8e6c9"

    PRIMARY = "#2e7d32"
    PRIMARY_LIGHT = "#60ad5e"
    PRIMARY_DARK = "#005005"

    TEXT_PRIMARY = "#1b2e1b"
    TEXT_MUTED = "#78909c"

    LEVEL_AVAILABLE = "#4D79FF"
    LEVEL_COMPLETED = "#2FBF93"
    LEVEL_LOCKED = "#9e9e9e"


class MazeColors:
    """Cell colors for the play surface, the overview map and level previews."""

    BACKGROUND = "#000000"
    WALL = "#333333"
    PATH_LIT = "#ffffff"
    PATH_DIMMED = "#f0f0f0"
    GRID_LINE = "#dddddd"
    GOAL = "#F44336"
    PLAYER = "#4CAF50"

    MINIMAP_BACKGROUND = "#333333"
    MINIMAP_TRAIL = "#ADD8E6"
    MINIMAP_START = "#0000FF"
    MINIMAP_GOAL = "#FF0000"

    PREVIEW_WALL = "#B3333333"  # #AARRGGBB
    PREVIEW_PATH = "#4DFFFFFF"
    PREVIEW_TRAIL = "#4CAF50"
    PREVIEW_START = "#0000FF"
    PREVIEW_GOAL = "#F44336"


def play_cell_color(role: CellRole, shade: Shade) -> str:
    if role is CellRole.WALL:
        return MazeColors.WALL
    return MazeColors.PATH_LIT if shade is Shade.LIT else MazeColors.PATH_DIMMED


def overview_cell_color(role: CellRole) -> str:
    if role is CellRole.WALL:
        return MazeColors.WALL
    if role is CellRole.START:
        return MazeColors.MINIMAP_START
    if role is CellRole.GOAL:
        return MazeColors.MINIMAP_GOAL
    return MazeColors.MINIMAP_TRAIL


def preview_cell_color(role: CellRole, shade: Shade) -> str:
    if role is CellRole.START:
        return MazeColors.PREVIEW_START
    if role is CellRole.GOAL:
        return MazeColors.PREVIEW_GOAL
    if shade is Shade.TRAIL:
        return MazeColors.PREVIEW_TRAIL
    return MazeColors.PREVIEW_WALL if role is CellRole.WALL else MazeColors.PREVIEW_PATH


def blend_hex(a: str, b: str, t: float) -> str:
    """Blend two #RRGGBB colors. t=0 -> a, t=1 -> b."""
    try:
        a = a.strip()
        b = b.strip()
        if not (a.startswith("#") and b.startswith("#") and len(a) == 7 and len(b) == 7):
            return a
        t = max(0.0, min(1.0, float(t)))
        ar, ag, ab = int(a[1:3], 16), int(a[3:5], 16), int(a[5:7], 16)
        br, bg, bb = int(b[1:3], 16), int(b[3:5], 16), int(b[5:7], 16)
        r = int(ar + (br - ar) * t)
        g = int(ag + (bg - ag) * t)
        bl = int(ab + (bb - ab) * t)
        return f"#{r:02X}{g:02X}{bl:02X}"
    except (AttributeError, TypeError, ValueError):
        return a
