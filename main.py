"""Composition root: build and run an evolution from a ``RunConfig``."""

from __future__ import annotations

import logging
from pathlib import Path

from configs.loader import ConfigLoader, RunConfig
from core.genome_serializer import save_document
from data.image_io import load_target
from data.logger import EvolutionLogger
from data.snapshot_store import SnapshotStore
from dna.drawing import Drawing
from engine.controller import EvolutionController
from environment.fitness import FitnessEvaluator

LOGGER = logging.getLogger(__name__)


def log_settings(config: RunConfig) -> None:
    LOGGER.info(
        "Settings: rendering image every ~%d, children/generation: %d, number of generations: %d, "
        "environment image: %s, max polygons: %d, max points/poly: %d",
        config.render_every,
        config.children,
        config.generation_limit,
        config.target_path,
        config.dna.polygons_max,
        config.dna.points_per_polygon_max,
    )


def build_controller(config: RunConfig, logger: EvolutionLogger | None = None) -> EvolutionController:
    """Load the target image and wire every collaborator from ``config``."""
    dna = config.dna
    target = load_target(config.target_path, dna.canvas_width, dna.canvas_height)
    return EvolutionController(
        target=target,
        settings=dna,
        render_every=config.render_every,
        generation_limit=config.generation_limit,
        children=config.children,
        seed=config.seed,
        workers=config.workers,
        evaluator=FitnessEvaluator.with_partitions(config.fitness_partitions),
        snapshots=SnapshotStore(config.snapshot_dir),
        logger=logger,
        output_size=config.output_size,
        config=config.to_dict(),
    )


def run_evolution(config: RunConfig) -> Drawing:
    """Evolve, then persist the champion genome if a path is configured."""
    log_settings(config)
    logger = EvolutionLogger(Path(config.db_path)) if config.db_path else None
    try:
        controller = build_controller(config, logger=logger)
        LOGGER.info("Random seed: %d", controller.seed)
        champion = controller.run()
    finally:
        if logger is not None:
            logger.close()

    if config.genome_path:
        path = save_document(champion, config.genome_path, config.dna.canvas_width, config.dna.canvas_height)
        LOGGER.info("Wrote genome to %s", path)
    return champion


def main(config_path: str = "configs/example.yaml") -> None:
    """Load config and run the evolution."""
    logging.basicConfig(level=logging.INFO)
    run_evolution(ConfigLoader.load(config_path))


if __name__ == "__main__":
    main()
