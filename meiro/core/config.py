from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from meiro.core.camera import DisplayBudget

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_CONFIG_PATH = DATA_DIR / "config.yaml"


@dataclass(frozen=True)
class GameConfig:
    display: DisplayBudget = field(default_factory=DisplayBudget)
    spotlight_radius: int = 1
    minimap_size: int = 150
    preview_size: int = 100
    maps_dir: Path = DATA_DIR / "maps"
    extension: str = "png"
    max_probe: int = 99
    repeat_interval_ms: int = 100
    volume: float = 0.5
    sample_rate: int = 44100
    unlock_all: bool = False


def _section(raw: Dict[str, Any], name: str, source: str) -> Dict[str, Any]:
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise ValueError(f"{source}: '{name}' must be a mapping")
    return value


def _number(section: Dict[str, Any], key: str, default, kind, source: str):
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{source}: '{key}' must be a number, got {value!r}")
    return kind(value)


def load_config(path: Optional[Path] = None) -> GameConfig:
    """Read the YAML config, falling back to defaults for missing keys.

    ``MEIRO_CONFIG`` selects another file, ``MEIRO_MAPS_DIR`` overrides the
    maps directory and ``MEIRO_UNLOCK_ALL=1`` opens every level.
    """
    if path is None:
        env_path = os.environ.get("MEIRO_CONFIG")
        path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH
    source = Path(path).name
    defaults = GameConfig()

    raw: Dict[str, Any] = {}
    if Path(path).exists():
        loaded = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
        if loaded is not None and not isinstance(loaded, dict):
            raise ValueError(f"{source}: expected a YAML mapping")
        raw = loaded or {}

    display = _section(raw, "display", source)
    levels = _section(raw, "levels", source)
    controls = _section(raw, "input", source)
    audio = _section(raw, "audio", source)

    budget = DisplayBudget(
        surface_size=_number(display, "surface_size", defaults.display.surface_size, float, source),
        max_visible_cells=_number(display, "max_visible_cells", defaults.display.max_visible_cells, int, source),
        min_cell_size=_number(display, "min_cell_size", defaults.display.min_cell_size, float, source),
    )

    maps_dir = Path(levels.get("maps_dir", defaults.maps_dir))
    if not maps_dir.is_absolute():
        maps_dir = Path(path).resolve().parent / maps_dir
    env_maps = os.environ.get("MEIRO_MAPS_DIR")
    if env_maps:
        maps_dir = Path(env_maps)

    extension = levels.get("extension", defaults.extension)
    if not isinstance(extension, str) or not extension.strip("."):
        raise ValueError(f"{source}: 'extension' must be a non-empty string")

    return GameConfig(
        display=budget,
        spotlight_radius=_number(display, "spotlight_radius", defaults.spotlight_radius, int, source),
        minimap_size=_number(display, "minimap_size", defaults.minimap_size, int, source),
        preview_size=_number(display, "preview_size", defaults.preview_size, int, source),
        maps_dir=maps_dir,
        extension=extension.lstrip("."),
        max_probe=_number(levels, "max_probe", defaults.max_probe, int, source),
        repeat_interval_ms=_number(controls, "repeat_interval_ms", defaults.repeat_interval_ms, int, source),
        volume=_number(audio, "volume", defaults.volume, float, source),
        sample_rate=_number(audio, "sample_rate", defaults.sample_rate, int, source),
        unlock_all=os.environ.get("MEIRO_UNLOCK_ALL") == "1",
    )
