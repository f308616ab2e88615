"""Resolution-independent genome documents.

Vertex coordinates are divided by the canvas dimension used during evolution
and brush channels by 255, so every value lands in [0, 1]. A document can then
be rendered at any resolution by scaling back up.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from core.schema_validator import SchemaValidationError, validate_genome_document
from dna.brush import Brush
from dna.drawing import Drawing
from dna.polygon import Polygon
from dna.vertex import Vertex


class GenomeDocumentError(ValueError):
    """Raised when a genome document cannot be read or is malformed."""


ScaledPolygon = tuple[list[tuple[float, float]], tuple[int, int, int, int]]
MIN_GENE_POINTS = 3


def to_document(drawing: Drawing, canvas_width: int, canvas_height: int) -> dict[str, Any]:
    """Normalized document for ``drawing``; polygon order is paint order."""
    return {
        "polygons": [
            {
                "color": {
                    "r": polygon.brush.r / 255.0,
                    "g": polygon.brush.g / 255.0,
                    "b": polygon.brush.b / 255.0,
                    "a": polygon.brush.a / 255.0,
                },
                "points": [
                    {"x": vertex.x / canvas_width, "y": vertex.y / canvas_height}
                    for vertex in polygon.vertices
                ],
            }
            for polygon in drawing.polygons
        ]
    }


def _channel(value: float) -> int:
    return int(round(value * 255.0))


def check_document(payload: Any) -> dict[str, Any]:
    try:
        return validate_genome_document(payload)
    except SchemaValidationError as exc:
        raise GenomeDocumentError(str(exc)) from exc


def from_document(payload: Any, canvas_width: int, canvas_height: int) -> Drawing:
    """Rebuild a drawing on a ``canvas_width`` x ``canvas_height`` canvas."""
    document = check_document(payload)
    polygons = []
    for i, entry in enumerate(document["polygons"]):
        count = len(entry["points"])
        if count < MIN_GENE_POINTS:
            raise GenomeDocumentError(f"polygons[{i}] has {count} point(s); genomes need at least {MIN_GENE_POINTS}.")
        color = entry["color"]
        brush = Brush(_channel(color["r"]), _channel(color["g"]), _channel(color["b"]), _channel(color["a"]))
        vertices = [
            Vertex(int(round(point["x"] * canvas_width)), int(round(point["y"] * canvas_height)))
            for point in entry["points"]
        ]
        polygons.append(Polygon(vertices, brush))
    return Drawing(polygons)


def denormalize(payload: Any, width: int, height: int) -> list[ScaledPolygon]:
    """Map a document to pixel space: ``(x, y) -> (x * width, y * height)``."""
    document = check_document(payload)
    scaled: list[ScaledPolygon] = []
    for entry in document["polygons"]:
        color = entry["color"]
        points = [(point["x"] * width, point["y"] * height) for point in entry["points"]]
        rgba = (_channel(color["r"]), _channel(color["g"]), _channel(color["b"]), _channel(color["a"]))
        scaled.append((points, rgba))
    return scaled


def save_document(drawing: Drawing, path: str | Path, canvas_width: int, canvas_height: int) -> Path:
    """Write the document as JSON, replacing ``path`` atomically."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = target.with_suffix(target.suffix + ".tmp")
    payload = to_document(drawing, canvas_width, canvas_height)
    try:
        tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        tmp_path.replace(target)
    except OSError as exc:
        raise GenomeDocumentError(f"Could not write genome document '{target}': {exc}") from exc
    return target


def load_document(path: str | Path) -> dict[str, Any]:
    """Read and validate a genome document from disk."""
    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise GenomeDocumentError(f"Could not open input file '{source}': {exc}") from exc
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise GenomeDocumentError(f"Invalid JSON in '{source}': {exc}") from exc
    return check_document(payload)
