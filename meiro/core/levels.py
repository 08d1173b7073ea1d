from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional

from meiro.core.decoder import decode_file
from meiro.core.errors import DecodeError
from meiro.core.maze import MazeDescriptor

logger = logging.getLogger(__name__)

DEFAULT_MAPS_DIR = Path(__file__).resolve().parent.parent / "data" / "maps"


class LevelRepository:
    """Numbered maze images (``1.png``, ``2.png``, ...) with a decode cache.

    Cached descriptors are immutable and shared by play and preview rendering.
    """

    def __init__(
        self,
        maps_dir: Optional[Path] = None,
        extension: str = "png",
        max_probe: int = 99,
        decoder: Callable[[Path], MazeDescriptor] = decode_file,
    ) -> None:
        self._maps_dir = Path(maps_dir) if maps_dir is not None else DEFAULT_MAPS_DIR
        self._extension = extension.lstrip(".")
        self._max_probe = max_probe
        self._decoder = decoder
        self._cache: Dict[int, MazeDescriptor] = {}
        self._max_level = 0

    @property
    def maps_dir(self) -> Path:
        return self._maps_dir

    @property
    def max_level(self) -> int:
        return self._max_level

    def levels(self) -> List[int]:
        return list(range(1, self._max_level + 1))

    def path_for(self, level: int) -> Path:
        return self._maps_dir / f"{level}.{self._extension}"

    def cached(self, level: int) -> Optional[MazeDescriptor]:
        return self._cache.get(level)

    def get(self, level: int) -> MazeDescriptor:
        """Return the descriptor for *level*, decoding it on first use.

        Raises DecodeError (ImageLoadError or MissingLandmark) if the image is unusable.
        """
        descriptor = self._cache.get(level)
        if descriptor is not None:
            return descriptor
        descriptor = self._decoder(self.path_for(level))
        return self._cache.setdefault(level, descriptor)

    def discover(self) -> int:
        """Probe 1, 2, 3, ... until a level fails to decode; that is the last level.

        A missing or broken image ends the sequence even if later files exist.
        """
        count = 0
        for level in range(1, self._max_probe + 1):
            try:
                self.get(level)
            except DecodeError as e:
                if level == 1 or self.path_for(level).exists():
                    logger.warning("Level discovery stopped at level %d: %s", level, e)
                else:
                    logger.debug("No image for level %d: %s", level, e)
                break
            count = level

        self._max_level = count
        logger.info("Detected %d maze level(s) in %s", count, self._maps_dir)
        if count == 0:
            logger.error(
                "No maze images found (expected %s, %s, ...)",
                self.path_for(1).name,
                self.path_for(2).name,
            )
        return count
