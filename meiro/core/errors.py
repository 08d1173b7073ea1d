"""Exceptions raised while loading maze levels."""

from __future__ import annotations

from typing import Sequence


class MazeError(Exception):
    """Base class for maze loading problems."""


class DecodeError(MazeError):
    """A level image could not be turned into a maze."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(message)
        self.source = source


class ImageLoadError(DecodeError):
    """The image is missing, unreadable or in an unsupported format."""

    def __init__(self, source: str, reason: str = "") -> None:
        message = f"Could not load maze image {source}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(source, message)
        self.reason = reason


class MissingLandmark(DecodeError):
    """The image has no start (blue) or no goal (red) pixel."""

    def __init__(self, source: str, missing: Sequence[str]) -> None:
        self.missing = tuple(missing)
        names = " and ".join(self.missing)
        super().__init__(
            source,
            f"Maze image {source} has no {names} marker "
            "(start is blue 0,0,255; goal is red 255,0,0)",
        )
