"""RGBA fill gene."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from evolution.mutation import MutationEngine


def _clamp_channel(value: int) -> int:
    return min(max(0, value), 255)


@dataclass
class Brush:
    """Fill color and opacity of one polygon, each channel in [0, 255]."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 255

    def __post_init__(self) -> None:
        self.r = _clamp_channel(int(self.r))
        self.g = _clamp_channel(int(self.g))
        self.b = _clamp_channel(int(self.b))
        self.a = _clamp_channel(int(self.a))

    @classmethod
    def random(cls, engine: "MutationEngine") -> "Brush":
        """Random opaque-ish color with alpha drawn from the seed range."""
        settings = engine.settings
        return cls(
            r=engine.randint(0, 255),
            g=engine.randint(0, 255),
            b=engine.randint(0, 255),
            a=engine.randint(settings.alpha_seed_min, settings.alpha_seed_max),
        )

    def clone(self) -> "Brush":
        return Brush(self.r, self.g, self.b, self.a)

    def rgba(self) -> tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)

    def mutate(self, engine: "MutationEngine") -> bool:
        """Nudge each channel independently under its own rate.

        Returns True if any channel fired.
        """
        settings = engine.settings
        step = settings.brush_step
        changed = False
        for channel, rate in (
            ("r", settings.red_rate),
            ("g", settings.green_rate),
            ("b", settings.blue_rate),
            ("a", settings.alpha_rate),
        ):
            if engine.will_mutate(rate):
                value = getattr(self, channel) + engine.randint(-step, step)
                setattr(self, channel, _clamp_channel(value))
                changed = True
        return changed
