"""Pillow rasterizer turning genomes and documents into RGB pixel buffers."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

import numpy as np
from PIL import Image, ImageDraw

from core.genome_serializer import denormalize
from dna.drawing import Drawing

PolygonPaint = tuple[Sequence[tuple[float, float]], tuple[int, int, int, int]]

BACKGROUND = (0, 0, 0)


def rasterize(polygons: Iterable[PolygonPaint], width: int, height: int) -> np.ndarray:
    """Paint polygons back to front onto black; returns an ``(H, W, 3)`` uint8 array.

    Each fill is alpha-blended over what is already on the canvas.
    """
    image = Image.new("RGB", (width, height), BACKGROUND)
    draw = ImageDraw.Draw(image, "RGBA")
    for points, rgba in polygons:
        # fewer than 3 points enclose no area
        if len(points) >= 3:
            draw.polygon(list(points), fill=rgba)
    return np.asarray(image, dtype=np.uint8)


class PillowRasterizer:
    """Renders drawings evolved on a fixed canvas at any output resolution."""

    def __init__(self, canvas_width: int = 200, canvas_height: int = 200) -> None:
        self.canvas_width = canvas_width
        self.canvas_height = canvas_height

    def paint_list(self, drawing: Drawing, width: int, height: int) -> list[PolygonPaint]:
        sx = width / self.canvas_width
        sy = height / self.canvas_height
        return [
            ([(vertex.x * sx, vertex.y * sy) for vertex in polygon.vertices], polygon.brush.rgba())
            for polygon in drawing.polygons
        ]

    def render(self, drawing: Drawing, width: int | None = None, height: int | None = None) -> np.ndarray:
        width = width or self.canvas_width
        height = height or self.canvas_height
        return rasterize(self.paint_list(drawing, width, height), width, height)


def render_document(document: Any, width: int, height: int) -> np.ndarray:
    """Render a genome document; the document is fully validated first."""
    return rasterize(denormalize(document, width, height), width, height)
