"""Schema validation for persisted genome documents."""

from __future__ import annotations

from numbers import Real
from typing import Any, Mapping


class SchemaValidationError(ValueError):
    """Raised when a genome document fails schema validation."""


COLOR_CHANNELS = ("r", "g", "b", "a")
POINT_AXES = ("x", "y")
MIN_POLYGON_POINTS = 1


def _unit_number(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise SchemaValidationError(f"Field '{where}' expected a number, got {type(value).__name__}.")
    number = float(value)
    if not 0.0 <= number <= 1.0:
        raise SchemaValidationError(f"Field '{where}' must be in [0, 1], got {number}.")
    return number


def _mapping(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise SchemaValidationError(f"Field '{where}' must be an object, got {type(value).__name__}.")
    return value


def _array(value: Any, where: str) -> list[Any]:
    if not isinstance(value, list):
        raise SchemaValidationError(f"Field '{where}' must be an array, got {type(value).__name__}.")
    return value


def _required(section: Mapping[str, Any], key: str, where: str) -> Any:
    if key not in section:
        raise SchemaValidationError(f"Missing required field '{where}.{key}'." if where else f"Missing required field '{key}'.")
    return section[key]


def validate_genome_document(payload: Any) -> dict[str, Any]:
    """Validate a whole document before anything is built from it.

    Returns a normalized copy holding plain floats, so callers never touch the
    raw payload again.
    """
    document = _mapping(payload, "<document>")
    polygons = _array(_required(document, "polygons", ""), "polygons")

    normalized: list[dict[str, Any]] = []
    for i, raw_polygon in enumerate(polygons):
        where = f"polygons[{i}]"
        polygon = _mapping(raw_polygon, where)

        color = _mapping(_required(polygon, "color", where), f"{where}.color")
        rgba = {
            channel: _unit_number(_required(color, channel, f"{where}.color"), f"{where}.color.{channel}")
            for channel in COLOR_CHANNELS
        }

        points = _array(_required(polygon, "points", where), f"{where}.points")
        if len(points) < MIN_POLYGON_POINTS:
            raise SchemaValidationError(
                f"Field '{where}.points' needs at least {MIN_POLYGON_POINTS} point."
            )
        coords = []
        for j, raw_point in enumerate(points):
            point_where = f"{where}.points[{j}]"
            point = _mapping(raw_point, point_where)
            coords.append(
                {axis: _unit_number(_required(point, axis, point_where), f"{point_where}.{axis}") for axis in POINT_AXES}
            )

        normalized.append({"color": rgba, "points": coords})

    return {"polygons": normalized}
