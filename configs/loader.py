"""Configuration loading and validation for evolution runs."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from dna.settings import DnaSettings, SettingsError, settings_from_mapping


class ConfigValidationError(ValueError):
    """Raised when runtime config fails validation."""


MAX_CHILDREN = 10
MIN_OUTPUT_SIZE = 10

_RUN_FIELDS: dict[str, tuple[type[Any], ...]] = {
    "target_path": (str,),
    "render_every": (int,),
    "generation_limit": (int,),
    "children": (int,),
    "seed": (int, type(None)),
    "workers": (int,),
    "fitness_partitions": (int,),
    "output_width": (int, type(None)),
    "output_height": (int, type(None)),
    "snapshot_dir": (str,),
    "genome_path": (str, type(None)),
    "db_path": (str, type(None)),
}
_TOP_LEVEL = {"run", "dna"}


@dataclass(frozen=True)
class RunConfig:
    """Validated run configuration.

    ``output_width``/``output_height`` default to the canvas size when unset.
    """

    target_path: str = ""
    render_every: int = 300
    generation_limit: int = 10000
    children: int = 1
    seed: int | None = None
    workers: int = 1
    fitness_partitions: int = 1
    output_width: int | None = None
    output_height: int | None = None
    snapshot_dir: str = "mutations"
    genome_path: str | None = None
    db_path: str | None = None
    dna: DnaSettings = field(default_factory=DnaSettings)

    @property
    def output_size(self) -> tuple[int, int]:
        return (
            self.output_width or self.dna.canvas_width,
            self.output_height or self.dna.canvas_height,
        )

    def with_overrides(self, **overrides: Any) -> "RunConfig":
        """Return validated copy; ``None`` values leave fields untouched."""
        values = {key: value for key, value in overrides.items() if value is not None}
        unknown = [key for key in values if key not in _RUN_FIELDS and key != "dna"]
        if unknown:
            raise ConfigValidationError(f"Unknown run field(s): {unknown}.")
        return validate_run_config(replace(self, **values))

    def to_dict(self) -> dict[str, Any]:
        payload = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "dna"}
        payload["dna"] = self.dna.to_dict()
        return payload


def validate_run_config(config: RunConfig) -> RunConfig:
    """Check value ranges; return ``config`` unchanged."""
    if config.render_every < 1:
        raise ConfigValidationError("render_every must be >= 1")
    if config.generation_limit < 1:
        raise ConfigValidationError("generation_limit must be >= 1")
    if not 1 <= config.children <= MAX_CHILDREN:
        raise ConfigValidationError(f"children must be in [1, {MAX_CHILDREN}]")
    if config.workers < 1:
        raise ConfigValidationError("workers must be >= 1")
    if config.fitness_partitions < 1:
        raise ConfigValidationError("fitness_partitions must be >= 1")
    width, height = config.output_size
    if width < MIN_OUTPUT_SIZE or height < MIN_OUTPUT_SIZE:
        raise ConfigValidationError(f"output width and height must be at least {MIN_OUTPUT_SIZE}")
    return config


def _read_config_payload(path: str | Path) -> Any:
    """Read raw config payload from JSON or YAML file."""
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigValidationError(f"Config file not found: {config_path}")

    suffix = config_path.suffix.lower()
    try:
        content = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigValidationError(f"Could not read config '{config_path}': {exc}") from exc
    try:
        if suffix == ".json":
            return json.loads(content)
        if suffix in {".yaml", ".yml"}:
            return yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigValidationError(f"Failed to parse config '{config_path}': {exc}") from exc

    raise ConfigValidationError(f"Unsupported config extension: {suffix}")


def _validate_run_section(section: Any) -> dict[str, Any]:
    if not isinstance(section, Mapping):
        raise ConfigValidationError("Section 'run' must be a mapping.")

    extras = [key for key in section if key not in _RUN_FIELDS]
    if extras:
        raise ConfigValidationError(f"Section 'run' has unknown field(s): {extras}.")

    values = dict(section)
    for key, expected in _RUN_FIELDS.items():
        if key in values and type(values[key]) not in expected:
            names = " or ".join("null" if tp is type(None) else tp.__name__ for tp in expected)
            raise ConfigValidationError(
                f"Field 'run.{key}' expected {names}, got {type(values[key]).__name__}."
            )
    return values


def build_config(payload: Mapping[str, Any]) -> RunConfig:
    """Validate raw mapping and build ``RunConfig``."""
    extras_top = [key for key in payload if key not in _TOP_LEVEL]
    if extras_top:
        raise ConfigValidationError(f"Unknown top-level field(s): {extras_top}.")

    run_values = _validate_run_section(payload.get("run") or {})

    dna_section = payload.get("dna") or {}
    if not isinstance(dna_section, Mapping):
        raise ConfigValidationError("Section 'dna' must be a mapping.")
    try:
        dna = settings_from_mapping(dna_section)
    except SettingsError as exc:
        raise ConfigValidationError(str(exc)) from exc

    return validate_run_config(RunConfig(dna=dna, **run_values))


class ConfigLoader:
    """Load and validate run configuration files (YAML or JSON)."""

    @staticmethod
    def load(path: str | Path) -> RunConfig:
        """Load a run config from ``path``.

        Args:
            path: Path to a YAML or JSON config file with optional ``run`` and
                ``dna`` sections.

        Returns:
            A validated ``RunConfig`` instance.
        """
        payload = _read_config_payload(path)
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ConfigValidationError("Top-level config must be a mapping.")
        return build_config(payload)
