"""Probability-gated mutation dispatch and vertex jitter policies."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from dna.settings import DnaSettings, SettingsError, validate_settings
from dna.vertex import Vertex

if TYPE_CHECKING:
    from dna.genome import Genome


class JitterPolicy(ABC):
    """Positional perturbation applied to one vertex per mutation pass."""

    @abstractmethod
    def apply(self, vertex: Vertex, engine: "MutationEngine") -> bool:
        """Perturb ``vertex`` in place; return True if it was touched.

        Invariants:
            - Output coordinates stay inside the canvas bounds.
        """


class TieredJitter(JitterPolicy):
    """Three independent moves: relocate anywhere, a mid-range nudge, a fine nudge.

    Each tier fires under its own rate, so a vertex usually stays put, rarely
    wanders a few pixels and very rarely jumps across the canvas.
    """

    def apply(self, vertex: Vertex, engine: "MutationEngine") -> bool:
        s = engine.settings
        changed = False

        if engine.will_mutate(s.move_point_max_rate):
            vertex.x = engine.randint(0, s.canvas_width)
            vertex.y = engine.randint(0, s.canvas_height)
            changed = True

        if engine.will_mutate(s.move_point_mid_rate):
            engine.nudge(vertex, s.move_point_range_mid)
            changed = True

        if engine.will_mutate(s.move_point_min_rate):
            engine.nudge(vertex, s.move_point_range_min)
            changed = True

        return changed


class UniformJitter(JitterPolicy):
    """Single uniform nudge of up to ``radius`` pixels per axis under ``rate``."""

    def __init__(self, rate: float, radius: int) -> None:
        if not 0.0 <= rate <= 1.0:
            raise ValueError("rate must be in [0.0, 1.0]")
        if radius < 0:
            raise ValueError("radius must be >= 0")
        self.rate = rate
        self.radius = radius

    def apply(self, vertex: Vertex, engine: "MutationEngine") -> bool:
        if not engine.will_mutate(self.rate):
            return False
        engine.nudge(vertex, self.radius)
        return True


def build_jitter_policy(settings: DnaSettings) -> JitterPolicy:
    """Resolve ``settings.jitter_policy`` to a policy instance."""
    if settings.jitter_policy == "tiered":
        return TieredJitter()
    if settings.jitter_policy == "uniform":
        return UniformJitter(settings.move_point_mid_rate, settings.move_point_range_mid)
    raise SettingsError(f"Unknown jitter policy '{settings.jitter_policy}'.")


class MutationEngine:
    """Decides which structural and per-gene mutations fire.

    Genes call back into the engine for every random decision, so one engine
    bound to one RNG fully determines a mutation pass.
    """

    def __init__(
        self,
        settings: DnaSettings | None = None,
        rng: random.Random | None = None,
        jitter: JitterPolicy | None = None,
    ) -> None:
        self.settings = validate_settings(settings or DnaSettings())
        self.rng = rng or random.Random()
        self.jitter = jitter or build_jitter_policy(self.settings)

    def spawn(self, rng: random.Random) -> "MutationEngine":
        """Engine sharing settings and policy but drawing from ``rng``."""
        return MutationEngine(self.settings, rng, self.jitter)

    def will_mutate(self, rate: float) -> bool:
        return self.rng.random() < rate

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in the closed range ``[low, high]``."""
        return self.rng.randint(low, high)

    def random_vertex(self) -> Vertex:
        return Vertex(
            self.randint(0, self.settings.canvas_width),
            self.randint(0, self.settings.canvas_height),
        )

    def nudge(self, vertex: Vertex, radius: int) -> None:
        vertex.x += self.randint(-radius, radius)
        vertex.y += self.randint(-radius, radius)
        vertex.clamp(self.settings.canvas_width, self.settings.canvas_height)

    def mutate(self, genome: "Genome") -> None:
        genome.mutate(self)
