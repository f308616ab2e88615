"""Genome limits and mutation rates shared by every gene operator."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Mapping


JITTER_POLICIES = ("tiered", "uniform")


class SettingsError(ValueError):
    """Raised when genome settings are inconsistent."""


@dataclass(frozen=True)
class DnaSettings:
    """Process-wide genome configuration.

    Rates are per-opportunity probabilities in [0, 1]. Canvas bounds define the
    fixed coordinate space genes evolve in, independent of any final render
    resolution.
    """

    canvas_width: int = 200
    canvas_height: int = 200

    polygons_min: int = 0
    polygons_max: int = 50
    points_per_polygon_min: int = 3
    points_per_polygon_max: int = 20
    points_min: int = 0
    points_max: int = 1500

    add_polygon_rate: float = 1 / 700
    remove_polygon_rate: float = 1 / 1500
    move_polygon_rate: float = 1 / 700
    add_point_rate: float = 1 / 1500
    remove_point_rate: float = 1 / 1500

    red_rate: float = 1 / 1500
    green_rate: float = 1 / 1500
    blue_rate: float = 1 / 1500
    alpha_rate: float = 1 / 1500
    brush_step: int = 20
    alpha_seed_min: int = 10
    alpha_seed_max: int = 60

    seed_offset: int = 3
    move_point_max_rate: float = 1 / 1500
    move_point_mid_rate: float = 1 / 1500
    move_point_min_rate: float = 1 / 1500
    move_point_range_mid: int = 20
    move_point_range_min: int = 3
    jitter_policy: str = "tiered"

    def with_overrides(self, **overrides: Any) -> "DnaSettings":
        """Return validated copy with selected fields replaced."""
        updated = replace(self, **overrides)
        validate_settings(updated)
        return updated

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def field_types(cls) -> dict[str, type[Any]]:
        """Map field names to the scalar type expected in config files."""
        types = {"int": int, "float": float, "str": str}
        return {f.name: types[str(f.type)] for f in fields(cls)}


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise SettingsError(message)


def validate_settings(settings: DnaSettings) -> DnaSettings:
    """Check cross-field constraints; return ``settings`` unchanged."""
    _require(settings.canvas_width > 0 and settings.canvas_height > 0, "canvas dimensions must be > 0")
    _require(
        0 <= settings.polygons_min <= settings.polygons_max,
        f"polygons_min/polygons_max out of order: {settings.polygons_min} > {settings.polygons_max}",
    )
    _require(settings.points_per_polygon_min >= 3, "points_per_polygon_min must be >= 3")
    _require(
        settings.points_per_polygon_min <= settings.points_per_polygon_max,
        "points_per_polygon_min must be <= points_per_polygon_max",
    )
    _require(0 <= settings.points_min <= settings.points_max, "points_min must be in [0, points_max]")

    seeded_points = settings.polygons_min * settings.points_per_polygon_min
    _require(
        settings.points_min <= seeded_points <= settings.points_max,
        f"initial drawing would hold {seeded_points} points, outside [{settings.points_min}, {settings.points_max}]",
    )

    for f in fields(settings):
        if f.name.endswith("_rate"):
            value = getattr(settings, f.name)
            _require(0.0 <= value <= 1.0, f"{f.name} must be in [0.0, 1.0], got {value}")

    _require(
        0 <= settings.alpha_seed_min <= settings.alpha_seed_max <= 255,
        "alpha seed range must satisfy 0 <= alpha_seed_min <= alpha_seed_max <= 255",
    )
    for name in ("brush_step", "seed_offset", "move_point_range_mid", "move_point_range_min"):
        _require(getattr(settings, name) >= 0, f"{name} must be >= 0")
    _require(
        settings.jitter_policy in JITTER_POLICIES,
        f"Unknown jitter policy '{settings.jitter_policy}'. Available: {', '.join(JITTER_POLICIES)}",
    )
    return settings


def settings_from_mapping(payload: Mapping[str, Any], base: DnaSettings | None = None) -> DnaSettings:
    """Build settings from a plain mapping, checking names and scalar types."""
    expected = DnaSettings.field_types()
    unknown = [key for key in payload if key not in expected]
    if unknown:
        raise SettingsError(f"Unknown dna setting(s): {unknown}.")

    values: dict[str, Any] = {}
    for key, value in payload.items():
        tp = expected[key]
        if tp is float and type(value) is int:
            value = float(value)
        if type(value) is not tp:
            raise SettingsError(f"Setting '{key}' expected {tp.__name__}, got {type(value).__name__}.")
        values[key] = value

    return (base or DnaSettings()).with_overrides(**values)
