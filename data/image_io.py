"""PNG codec for target images and rendered output."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

LOGGER = logging.getLogger(__name__)


class ImageResourceError(RuntimeError):
    """Raised when an image cannot be read or written."""


def load_target(path: str | Path, width: int, height: int) -> np.ndarray:
    """Load ``path`` as an ``(height, width, 3)`` RGB buffer.

    Images of another size are resampled to the canvas.
    """
    source = Path(path)
    try:
        with Image.open(source) as image:
            rgb = image.convert("RGB")
    except FileNotFoundError as exc:
        raise ImageResourceError(f"Could not open {source}: file not found") from exc
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageResourceError(f"Could not open {source}: {exc}") from exc

    if rgb.size != (width, height):
        LOGGER.warning("Resizing target %s from %dx%d to %dx%d", source, rgb.size[0], rgb.size[1], width, height)
        rgb = rgb.resize((width, height), Image.Resampling.LANCZOS)
    return np.asarray(rgb, dtype=np.uint8)


def save_png(pixels: np.ndarray, path: str | Path) -> Path:
    """Write an ``(H, W, 3)`` uint8 buffer as PNG, creating parent folders."""
    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8)).save(target, format="PNG")
    except OSError as exc:
        raise ImageResourceError(f"Could not write {target}: {exc}") from exc
    return target
