"""Turn a color-coded raster image into a MazeDescriptor.

Each pixel is one cell. Only exact RGB matches against the color table are
significant:

  * wall  ``(0, 0, 0)``       -> recorded in the wall set
  * path  ``(255, 255, 255)`` -> free cell, not recorded
  * start ``(0, 0, 255)``     -> player start
  * goal  ``(255, 0, 0)``     -> level exit

Any other shade is free path. Alpha is ignored. When a landmark color occurs
more than once the last pixel in row-major scan order wins.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from meiro.core.errors import ImageLoadError, MissingLandmark
from meiro.core.maze import Cell, MazeDescriptor

logger = logging.getLogger(__name__)

WALL_COLOR = (0, 0, 0)
PATH_COLOR = (255, 255, 255)
START_COLOR = (0, 0, 255)
GOAL_COLOR = (255, 0, 0)


def load_image(path: Union[str, Path]) -> Image.Image:
    """Open and fully read an image file, raising ImageLoadError on any failure."""
    source = str(path)
    try:
        with Image.open(path) as img:
            img.load()
            return img.copy()
    except FileNotFoundError:
        raise ImageLoadError(source, "file not found") from None
    except UnidentifiedImageError as e:
        raise ImageLoadError(source, "unsupported image format") from e
    except Image.DecompressionBombError as e:
        raise ImageLoadError(source, str(e)) from e
    except OSError as e:
        raise ImageLoadError(source, str(e)) from e


def _match(pixels: np.ndarray, color: Tuple[int, int, int]) -> np.ndarray:
    return np.all(pixels == np.array(color, dtype=pixels.dtype), axis=-1)


def _last_landmark(mask: np.ndarray, name: str, source: str) -> Optional[Cell]:
    # argwhere yields (row, col) pairs in row-major order
    hits = np.argwhere(mask)
    if len(hits) == 0:
        return None
    if len(hits) > 1:
        logger.warning("%s: %d %s pixels found, using the last one", source, len(hits), name)
    y, x = hits[-1]
    return Cell(int(x), int(y))


def decode(image: Image.Image, source: str = "<image>") -> MazeDescriptor:
    """Decode a loaded image into a MazeDescriptor.

    Raises MissingLandmark if the image has no start or no goal pixel.
    """
    width, height = image.size
    if width < 1 or height < 1:
        raise ImageLoadError(source, "image is empty")

    rgb = image if image.mode == "RGB" else image.convert("RGB")
    pixels = np.asarray(rgb, dtype=np.uint8)

    wall_rows, wall_cols = np.nonzero(_match(pixels, WALL_COLOR))
    start = _last_landmark(_match(pixels, START_COLOR), "start", source)
    goal = _last_landmark(_match(pixels, GOAL_COLOR), "goal", source)

    missing = [name for name, cell in (("start", start), ("goal", goal)) if cell is None]
    if missing:
        raise MissingLandmark(source, missing)

    walls = frozenset(Cell(int(x), int(y)) for y, x in zip(wall_rows, wall_cols))
    logger.debug("%s: decoded %dx%d maze with %d walls", source, width, height, len(walls))
    return MazeDescriptor(width=width, height=height, start=start, goal=goal, walls=walls)


def decode_file(path: Union[str, Path]) -> MazeDescriptor:
    """Load and decode a maze image from disk."""
    return decode(load_image(path), source=str(path))
