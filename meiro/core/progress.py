from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from meiro.core.maze import Cell

logger = logging.getLogger(__name__)

DEFAULT_VOLUME = 0.5


@dataclass(frozen=True)
class LevelProgress:
    level: int
    completed: bool = False
    path: FrozenSet[Cell] = field(default_factory=frozenset)


def serialize_path(cells: Iterable[Cell]) -> List[str]:
    """Encode cells as sorted ``"x,y"`` strings."""
    return [Cell(*c).to_key() for c in sorted(Cell(*c) for c in cells)]


def parse_path(entries: Iterable[Any]) -> FrozenSet[Cell]:
    """Decode ``"x,y"`` strings, skipping entries that do not parse."""
    cells = set()
    for entry in entries:
        try:
            cells.add(Cell.from_key(entry))
        except (TypeError, ValueError):
            logger.warning("Ignoring malformed path entry %r", entry)
    return frozenset(cells)


def _default_settings(volume: float = DEFAULT_VOLUME) -> Dict[str, float]:
    return {"volume": volume}


class ProgressStore:
    """Stores per-level completion and the winning path. Persists to disk across app restarts.
    File: ~/.meiro/progress.json. Cleared only when user presses reset progress."""

    def __init__(self, file_path: Optional[Path] = None, default_volume: float = DEFAULT_VOLUME) -> None:
        self._file_path = file_path or Path.home() / ".meiro" / "progress.json"
        self._default_volume = max(0.0, min(1.0, float(default_volume)))
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._progress, self._settings = self._load()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def get_level_progress(self, level: int) -> LevelProgress:
        return self._progress.get(int(level), LevelProgress(level=int(level)))

    def get_completed_path(self, level: int) -> FrozenSet[Cell]:
        return self.get_level_progress(level).path

    def is_level_completed(self, level: int) -> bool:
        return self.get_level_progress(level).completed

    def is_level_unlocked(self, level: int) -> bool:
        """Level 1 is always open; any other level opens once the previous one is completed."""
        level = int(level)
        return level == 1 or self.is_level_completed(level - 1)

    def completed_levels(self) -> List[int]:
        return sorted(key for key, value in self._progress.items() if value.completed)

    def complete_level(self, level: int, visited: Iterable[Cell]) -> LevelProgress:
        """Record a completion, replacing any earlier snapshot, and save."""
        snapshot = LevelProgress(
            level=int(level),
            completed=True,
            path=frozenset(Cell(*c) for c in visited),
        )
        self._progress[snapshot.level] = snapshot
        self._save()
        return snapshot

    def get_volume(self) -> float:
        return float(self._settings.get("volume", self._default_volume))

    def set_volume(self, volume: float) -> None:
        """Store the volume, writing the file only when the value changes."""
        volume = max(0.0, min(1.0, float(volume)))
        if volume == self.get_volume():
            return
        self._settings["volume"] = volume
        self._save()

    def reset_level(self, level: int) -> None:
        """Clear progress for a single level."""
        self._progress.pop(int(level), None)
        self._save()

    def reset(self) -> None:
        """Clear all level progress. Settings such as volume are kept."""
        self._progress = {}
        self._save()

    def save(self) -> None:
        """Persist current state to disk (e.g. on app exit)."""
        self._save()

    def _load(self) -> tuple[Dict[int, LevelProgress], Dict[str, float]]:
        progress: Dict[int, LevelProgress] = {}
        settings = _default_settings(self._default_volume)
        if not self._file_path.exists():
            return progress, settings
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load progress from %s: %s", self._file_path, e)
            return progress, settings
        if not isinstance(payload, dict):
            logger.warning("Ignoring progress file %s: expected a JSON object", self._file_path)
            return progress, settings

        # Older saves are a bare {level: {...}} mapping without the "levels" wrapper.
        levels = payload.get("levels") if "levels" in payload else payload
        if isinstance(levels, dict):
            for key, value in levels.items():
                try:
                    level = int(key)
                except (TypeError, ValueError):
                    continue
                if not isinstance(value, dict):
                    continue
                path = value.get("path", [])
                progress[level] = LevelProgress(
                    level=level,
                    completed=bool(value.get("completed", False)),
                    path=parse_path(path if isinstance(path, list) else []),
                )

        s = payload.get("settings", {})
        if isinstance(s, dict) and "volume" in s:
            try:
                settings["volume"] = max(0.0, min(1.0, float(s["volume"])))
            except (TypeError, ValueError):
                logger.warning("Ignoring invalid volume %r in %s", s["volume"], self._file_path)
        return progress, settings

    def _save(self) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "levels": {
                str(level): {"completed": value.completed, "path": serialize_path(value.path)}
                for level, value in sorted(self._progress.items())
            },
            "settings": dict(self._settings),
        }
        try:
            self._file_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save progress to %s: %s", self._file_path, e)
