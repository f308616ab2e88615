"""Tests for the generational controller lifecycle."""

from __future__ import annotations

import sqlite3

import numpy as np
import pytest
from PIL import Image

from core.genome_serializer import to_document
from data.logger import EvolutionLogger
from data.snapshot_store import SnapshotStore
from dna.drawing import Drawing
from dna.settings import DnaSettings
from engine.controller import ControllerError, ControllerState, EvolutionController
from environment.fitness import FitnessEvaluator
from evolution.hill_climb import Candidate

SMALL = DnaSettings(canvas_width=16, canvas_height=16, polygons_min=1)


class ScriptedEvaluator(FitnessEvaluator):
    """Returns queued scores in call order."""

    def __init__(self, scores: list[int]) -> None:
        super().__init__()
        self.scores = list(scores)

    def score(self, target: np.ndarray, candidate: np.ndarray) -> int:
        return self.scores.pop(0)


def _blank_render(drawing: Drawing, width: int, height: int) -> np.ndarray:
    return np.zeros((height, width, 3), dtype=np.uint8)


def _target() -> np.ndarray:
    return np.random.default_rng(0).integers(0, 256, size=(16, 16, 3), dtype=np.uint8)


def _scripted_controller(scores: list[int], **kwargs) -> EvolutionController:
    return EvolutionController(
        target=_target(),
        settings=SMALL,
        seed=1,
        render=_blank_render,
        evaluator=ScriptedEvaluator(scores),
        **kwargs,
    )


def _children(scores: list[int]) -> list[Candidate]:
    return [
        Candidate(index=i, drawing=Drawing(), score=score, pixels=np.zeros((16, 16, 3), dtype=np.uint8))
        for i, score in enumerate(scores)
    ]


def test_generation_accepts_lowest_scoring_child() -> None:
    controller = _scripted_controller([20, 50, 10, 30], children=3)
    controller.initialize()

    assert controller.run_generation(1)

    assert controller.champion_score == 10
    assert controller.champion.index == 1  # type: ignore[union-attr]


def test_generation_without_improvement_keeps_champion() -> None:
    controller = _scripted_controller([20, 50, 40, 30], children=3)
    champion = controller.initialize()

    assert controller.run_generation(1) is False

    assert controller.champion is champion
    assert controller.champion_score == 20


def test_consider_breaks_ties_toward_lowest_index() -> None:
    controller = _scripted_controller([20])
    controller.initialize()
    children = _children([15, 12, 12])
    expected = children[1].drawing

    assert controller.consider(1, children)

    assert controller.champion.drawing is expected  # type: ignore[union-attr]
    assert controller.champion.pixels is None  # type: ignore[union-attr]


def test_snapshots_follow_sparse_schedule(tmp_path) -> None:
    store = SnapshotStore(tmp_path / "mutations")
    controller = _scripted_controller([1000], render_every=100, snapshots=store)
    controller.initialize()

    assert store.saved == [0, 1]

    controller.consider(171, _children([900]))
    assert controller.next_snapshot == 200
    controller.consider(180, _children([800]))
    controller.consider(200, _children([700]))
    controller.consider(201, _children([600]))

    assert store.saved == [0, 1, 171, 201]
    assert controller.next_snapshot == 300
    assert store.path_for(171).name == "evoimg-0000171.png"
    assert len(store.list_snapshots()) == 4


def test_run_generation_requires_initialization() -> None:
    controller = _scripted_controller([])

    with pytest.raises(ControllerError, match="state 'idle'"):
        controller.run_generation(1)


def test_full_run_improves_and_writes_final_image(tmp_path) -> None:
    store = SnapshotStore(tmp_path / "snaps")
    controller = EvolutionController(
        target=_target(),
        settings=SMALL.with_overrides(add_polygon_rate=0.2, move_point_max_rate=0.1),
        render_every=10,
        generation_limit=30,
        children=2,
        seed=7,
        snapshots=store,
        output_size=(32, 24),
    )

    controller.initialize()
    initial = controller.champion_score
    for generation in range(1, 31):
        controller.run_generation(generation)
    controller.finalize()
    controller.close()

    assert controller.state == ControllerState.DONE
    assert controller.champion_score <= initial
    assert {0, 1, 30}.issubset(store.saved)
    with Image.open(store.path_for(30)) as final:
        assert final.size == (32, 24)


def _run_document(workers: int) -> tuple[int, dict]:
    controller = EvolutionController(
        target=_target(),
        settings=SMALL.with_overrides(add_polygon_rate=0.3, move_point_mid_rate=0.3),
        generation_limit=25,
        children=4,
        seed=99,
        workers=workers,
    )
    champion = controller.run()
    return controller.champion_score, to_document(champion, 16, 16)


def test_parallel_children_reproduce_sequential_run() -> None:
    assert _run_document(workers=1) == _run_document(workers=3)


def test_logger_records_accepted_generations(tmp_path) -> None:
    logger = EvolutionLogger(tmp_path / "runs.db")
    controller = _scripted_controller([20, 10], logger=logger, config={"generation_limit": 3})
    controller.initialize()
    controller.run_generation(1)
    logger.close()

    conn = sqlite3.connect(tmp_path / "runs.db")
    rows = conn.execute("SELECT generation_index, score, accepted FROM generation_metrics").fetchall()
    runs = conn.execute("SELECT COUNT(*) FROM run_metadata").fetchone()[0]
    conn.close()

    assert runs == 1
    assert rows == [(1, 10, 1)]


def test_target_must_match_canvas() -> None:
    with pytest.raises(ValueError, match="canvas is 16x16"):
        EvolutionController(target=np.zeros((10, 10, 3), dtype=np.uint8), settings=SMALL)
