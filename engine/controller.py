"""Generational controller driving the (1+lambda) hill-climbing loop."""

from __future__ import annotations

import enum
import logging
import random
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Mapping

import numpy as np

from core.deterministic_rng import DeterministicRNG, draw_seed
from data.logger import EvolutionLogger, GenerationMetrics
from data.snapshot_store import SnapshotStore
from dna.drawing import Drawing
from dna.settings import DnaSettings
from engine.rasterizer import PillowRasterizer
from environment.fitness import FitnessEvaluator
from evolution.base import EvolutionStrategy
from evolution.hill_climb import Candidate, HillClimbStrategy, next_snapshot_generation
from evolution.mutation import MutationEngine

LOGGER = logging.getLogger(__name__)

REPORT_EVERY = 2000

RenderFn = Callable[[Drawing, int, int], np.ndarray]


class ControllerState(str, enum.Enum):
    """Lifecycle phases of one evolution run."""

    IDLE = "idle"
    INIT = "init"
    EVOLVE = "evolve"
    FINAL = "final"
    DONE = "done"


class ControllerError(RuntimeError):
    """Raised when the controller is driven out of lifecycle order."""


class EvolutionController:
    """Owns every piece of cross-generation state: champion, score, counters.

    Exactly one champion exists at a time. Children live for a single
    generation; the winner's drawing moves into the champion slot on
    acceptance and every other child is dropped.
    """

    def __init__(
        self,
        target: np.ndarray,
        settings: DnaSettings | None = None,
        render_every: int = 300,
        generation_limit: int = 10000,
        children: int = 1,
        seed: int | None = None,
        workers: int = 1,
        render: RenderFn | None = None,
        evaluator: FitnessEvaluator | None = None,
        strategy: EvolutionStrategy | None = None,
        snapshots: SnapshotStore | None = None,
        logger: EvolutionLogger | None = None,
        output_size: tuple[int, int] | None = None,
        config: Mapping[str, Any] | None = None,
    ) -> None:
        if render_every < 1 or generation_limit < 1 or children < 1 or workers < 1:
            raise ValueError("render_every, generation_limit, children and workers must be >= 1")

        self.settings = settings or DnaSettings()
        self.target = target
        self.width = self.settings.canvas_width
        self.height = self.settings.canvas_height
        if target.shape[:2] != (self.height, self.width):
            raise ValueError(
                f"Target is {target.shape[1]}x{target.shape[0]}, canvas is {self.width}x{self.height}."
            )

        self.render_every = render_every
        self.generation_limit = generation_limit
        self.children = children
        self.output_size = output_size or (self.width, self.height)

        self.seed = seed if seed is not None else draw_seed()
        self.rng = DeterministicRNG(self.seed)
        self.engine = MutationEngine(self.settings, self.rng.stream("genome"))

        self.render: RenderFn = render or PillowRasterizer(self.width, self.height).render
        self.evaluator = evaluator or FitnessEvaluator()
        self.strategy = strategy or HillClimbStrategy()
        self.snapshots = snapshots

        self.logger = logger
        self.run_id: str | None = None
        if self.logger is not None:
            self.run_id = self.logger.start_run(
                config=dict(config or {}),
                seed=self.seed,
                metadata={"children": children, "generation_limit": generation_limit},
            )

        self.champion: Candidate | None = None
        self.generation = 0
        self.next_snapshot = 0
        self.elapsed = 0.0

        self._executor = ThreadPoolExecutor(max_workers=workers) if workers > 1 else None
        self._state = ControllerState.IDLE

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def champion_score(self) -> int:
        return self._require_champion().score

    def _require_champion(self) -> Candidate:
        if self.champion is None:
            raise ControllerError("Controller has no champion; call initialize() first.")
        return self.champion

    def initialize(self) -> Candidate:
        """Seed, render and score the first champion (generation 0)."""
        if self._state != ControllerState.IDLE:
            raise ControllerError(f"Cannot initialize from state '{self._state.value}'.")
        self._state = ControllerState.INIT

        drawing = Drawing.seeded(self.engine)
        pixels = self.render(drawing, self.width, self.height)
        score = self.evaluator.score(self.target, pixels)
        self.champion = Candidate(index=0, drawing=drawing, score=score)

        if self.snapshots is not None:
            self.snapshots.save(self.target, 0)
            self.snapshots.save(pixels, 1)
        LOGGER.info("Initial difference = %d", score)

        self.generation = 0
        self._state = ControllerState.EVOLVE
        return self.champion

    def _evaluate_child(self, index: int, rng: random.Random) -> Candidate:
        champion = self._require_champion()
        drawing = champion.drawing.clone()
        self.engine.spawn(rng).mutate(drawing)
        pixels = self.render(drawing, self.width, self.height)
        return Candidate(index=index, drawing=drawing, score=self.evaluator.score(self.target, pixels), pixels=pixels)

    def spawn_children(self) -> list[Candidate]:
        """Clone, mutate, render and score every child, returned in index order."""
        rngs = self.rng.child_rngs("children", self.children)
        if self._executor is None:
            return [self._evaluate_child(index, rng) for index, rng in enumerate(rngs)]
        return list(self._executor.map(self._evaluate_child, range(self.children), rngs))

    def run_generation(self, generation: int) -> bool:
        """Run one EVOLVE step; return True when a child became champion."""
        if self._state != ControllerState.EVOLVE:
            raise ControllerError(f"Cannot run a generation from state '{self._state.value}'.")
        self.generation = generation

        if generation % REPORT_EVERY == 0:
            self.report(generation)

        return self.consider(generation, self.spawn_children())

    def consider(self, generation: int, children: list[Candidate]) -> bool:
        """Select among scored ``children`` and accept on strict improvement."""
        champion = self._require_champion()
        winner = self.strategy.evolve(champion, children)
        children.clear()
        if winner is champion:
            return False

        self.champion = winner
        if generation > self.next_snapshot:
            if self.snapshots is not None and winner.pixels is not None:
                self.snapshots.save(winner.pixels, generation)
            # if every = 100, then next after 171 is 200
            self.next_snapshot = next_snapshot_generation(generation, self.render_every)
        winner.pixels = None

        self._log_metrics(generation, accepted=True)
        return True

    def report(self, generation: int) -> None:
        champion = self._require_champion()
        LOGGER.info(
            "Current difference is %d at generation %d. %d polys, %d points",
            champion.score,
            generation,
            champion.drawing.polygon_count(),
            champion.drawing.point_count(),
        )
        self._log_metrics(generation, accepted=False)

    def _log_metrics(self, generation: int, accepted: bool) -> None:
        if self.logger is None or self.run_id is None:
            return
        champion = self._require_champion()
        self.logger.log_generation(
            self.run_id,
            GenerationMetrics(
                generation_index=generation,
                score=champion.score,
                polygons=champion.drawing.polygon_count(),
                points=champion.drawing.point_count(),
                accepted=accepted,
            ),
        )

    def finalize(self) -> np.ndarray:
        """Render the champion at the output resolution and store it."""
        if self._state != ControllerState.EVOLVE:
            raise ControllerError(f"Cannot finalize from state '{self._state.value}'.")
        self._state = ControllerState.FINAL

        width, height = self.output_size
        pixels = self.render(self._require_champion().drawing, width, height)
        if self.snapshots is not None:
            self.snapshots.save(pixels, self.generation_limit)

        self._state = ControllerState.DONE
        return pixels

    def run(self) -> Drawing:
        """Full INIT -> EVOLVE -> FINAL run; returns the surviving champion."""
        start = time.monotonic()
        try:
            self.initialize()
            for generation in range(1, self.generation_limit + 1):
                self.run_generation(generation)
            self.finalize()
        finally:
            self.close()
        self.elapsed = time.monotonic() - start
        LOGGER.info("%d generations done in %.1f seconds", self.generation_limit, self.elapsed)
        return self._require_champion().drawing

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        self.evaluator.close()
