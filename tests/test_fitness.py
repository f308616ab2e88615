"""Tests for the pixel fitness evaluator and its evaluation strategies."""

from __future__ import annotations

import numpy as np
import pytest

from environment.fitness import (
    FitnessEvaluator,
    FitnessShapeError,
    PartitionedEvaluation,
    SequentialEvaluation,
    row_partitions,
)


def _random_buffer(seed: int, height: int = 12, width: int = 9) -> np.ndarray:
    return np.random.default_rng(seed).integers(0, 256, size=(height, width, 3), dtype=np.uint8)


def test_identical_buffers_score_zero() -> None:
    buffer = _random_buffer(1)

    assert FitnessEvaluator().score(buffer, buffer) == 0


def test_score_is_symmetric() -> None:
    a, b = _random_buffer(1), _random_buffer(2)
    evaluator = FitnessEvaluator()

    assert evaluator.score(a, b) == evaluator.score(b, a)
    assert evaluator.score(a, b) > 0


def test_score_floors_each_pixel_distance() -> None:
    target = np.zeros((2, 2, 3), dtype=np.uint8)
    evaluator = FitnessEvaluator()

    assert evaluator.score(target, np.full((2, 2, 3), (3, 4, 0), dtype=np.uint8)) == 20
    assert evaluator.score(target, np.ones((2, 2, 3), dtype=np.uint8)) == 4
    assert isinstance(evaluator.score(target, target), int)


def test_alpha_channel_is_ignored() -> None:
    a = np.zeros((3, 3, 4), dtype=np.uint8)
    b = a.copy()
    b[..., 3] = 255

    assert FitnessEvaluator().score(a, b) == 0


def test_partitioned_evaluation_matches_sequential() -> None:
    a, b = _random_buffer(3, height=37, width=20), _random_buffer(4, height=37, width=20)
    parallel = FitnessEvaluator(PartitionedEvaluation(partitions=4))

    try:
        assert parallel.score(a, b) == FitnessEvaluator(SequentialEvaluation()).score(a, b)
    finally:
        parallel.close()


def test_row_partitions_cover_rows_disjointly() -> None:
    ranges = row_partitions(10, 3)

    assert ranges[0][0] == 0 and ranges[-1][1] == 10
    assert all(end == next_start for (_, end), (next_start, _) in zip(ranges, ranges[1:]))
    assert row_partitions(2, 8) == [(0, 1), (1, 2)]


def test_with_partitions_selects_strategy() -> None:
    assert isinstance(FitnessEvaluator.with_partitions(1).strategy, SequentialEvaluation)
    evaluator = FitnessEvaluator.with_partitions(3)
    assert isinstance(evaluator.strategy, PartitionedEvaluation)
    evaluator.close()


def test_mismatched_sizes_are_rejected() -> None:
    with pytest.raises(FitnessShapeError, match="differ in size"):
        FitnessEvaluator().score(_random_buffer(1, 4, 4), _random_buffer(1, 4, 5))
