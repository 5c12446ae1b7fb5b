from __future__ import annotations

from pathlib import Path

from ..settings import Settings


def assets_root(settings: Settings) -> Path:
    return Path(settings.assets_dir)


def asset_path(settings: Settings, *parts: str) -> Path:
    """Path under the assets dir; parent directories are created."""
    path = assets_root(settings).joinpath(*parts)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path
