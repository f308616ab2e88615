"""Snapshot PNG storage indexed by generation number."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from data.image_io import save_png

LOGGER = logging.getLogger(__name__)


class SnapshotStore:
    """Writes ``evoimg-%07d.png`` files into one directory."""

    def __init__(self, directory: str | Path = "mutations") -> None:
        self.directory = Path(directory)
        self.saved: list[int] = []

    def path_for(self, generation_index: int) -> Path:
        return self.directory / f"evoimg-{generation_index:07d}.png"

    def save(self, pixels: np.ndarray, generation_index: int) -> Path:
        path = save_png(pixels, self.path_for(generation_index))
        self.saved.append(generation_index)
        LOGGER.debug("Saved snapshot %s", path)
        return path

    def list_snapshots(self) -> list[Path]:
        if not self.directory.exists():
            return []
        return sorted(p for p in self.directory.glob("evoimg-*.png") if p.is_file())
