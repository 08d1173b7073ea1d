"""Shared fixtures: build maze images from ASCII art."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence

import pytest
from PIL import Image

# '#' wall, '.' path, 'S' start, 'G' goal, '~' an off-palette grey
PALETTE = {
    "#": (0, 0, 0),
    ".": (255, 255, 255),
    "S": (0, 0, 255),
    "G": (255, 0, 0),
    "~": (128, 128, 128),
}

FIVE_BY_FIVE = [
    "#####",
    "#S..#",
    "#...#",
    "#..G#",
    "#####",
]


def ascii_image(rows: Sequence[str], mode: str = "RGB") -> Image.Image:
    height = len(rows)
    width = len(rows[0])
    img = Image.new("RGB", (width, height))
    for y, row in enumerate(rows):
        for x, ch in enumerate(row):
            img.putpixel((x, y), PALETTE[ch])
    return img if mode == "RGB" else img.convert(mode)


@pytest.fixture()
def make_image() -> Callable[..., Image.Image]:
    return ascii_image


@pytest.fixture()
def write_level(tmp_path: Path) -> Callable[[int, Sequence[str]], Path]:
    """Write ``{level}.png`` into a temp maps directory and return its path."""
    maps = tmp_path / "maps"
    maps.mkdir(exist_ok=True)

    def _write(level: int, rows: Sequence[str]) -> Path:
        path = maps / f"{level}.png"
        ascii_image(rows).save(path)
        return path

    return _write


@pytest.fixture()
def maps_dir(tmp_path: Path) -> Path:
    d = tmp_path / "maps"
    d.mkdir(exist_ok=True)
    return d


@pytest.fixture()
def five_by_five() -> list[str]:
    """Wall border, start at (1, 1), goal at (3, 3), no interior walls."""
    return list(FIVE_BY_FIVE)
