"""Pixel dissimilarity between a rendered candidate and the target image."""

from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Sequence

import numpy as np

PixelBuffer = np.ndarray


class FitnessShapeError(ValueError):
    """Raised when two pixel buffers do not share width and height."""


def row_difference(target: PixelBuffer, candidate: PixelBuffer, row_start: int, row_end: int) -> int:
    """Sum of floored per-pixel RGB euclidean distances over ``[row_start, row_end)``.

    Alpha, when present, is ignored.
    """
    a = target[row_start:row_end, :, :3].astype(np.int32)
    b = candidate[row_start:row_end, :, :3].astype(np.int32)
    delta = a - b
    distances = np.sqrt((delta * delta).sum(axis=2, dtype=np.int64))
    return int(np.floor(distances).astype(np.int64).sum())


def row_partitions(height: int, parts: int) -> list[tuple[int, int]]:
    """Split ``height`` rows into at most ``parts`` contiguous, disjoint ranges."""
    parts = max(1, min(parts, height)) if height > 0 else 1
    bounds = np.linspace(0, height, parts + 1).astype(int)
    return [(int(start), int(end)) for start, end in zip(bounds[:-1], bounds[1:])]


class EvaluationStrategy(ABC):
    """How the row sum is scheduled; every strategy yields the same total."""

    @abstractmethod
    def total(self, target: PixelBuffer, candidate: PixelBuffer) -> int:
        """Return the full-image difference."""

    def close(self) -> None:
        """Release worker resources, if any."""


class SequentialEvaluation(EvaluationStrategy):
    def total(self, target: PixelBuffer, candidate: PixelBuffer) -> int:
        return row_difference(target, candidate, 0, target.shape[0])


class PartitionedEvaluation(EvaluationStrategy):
    """Partial sums over disjoint row ranges computed on a thread pool.

    The metric is a plain sum, so the combined result equals the sequential
    one exactly.
    """

    def __init__(self, partitions: int = 2, executor: Executor | None = None) -> None:
        if partitions < 1:
            raise ValueError("partitions must be >= 1")
        self.partitions = partitions
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=partitions)

    def total(self, target: PixelBuffer, candidate: PixelBuffer) -> int:
        ranges = row_partitions(target.shape[0], self.partitions)
        futures = [
            self._executor.submit(row_difference, target, candidate, start, end)
            for start, end in ranges
        ]
        return sum(future.result() for future in futures)

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=True)


class FitnessEvaluator:
    """Scores candidates against a target; lower is strictly better."""

    def __init__(self, strategy: EvaluationStrategy | None = None) -> None:
        self.strategy = strategy or SequentialEvaluation()

    @classmethod
    def with_partitions(cls, partitions: int) -> "FitnessEvaluator":
        """Sequential for one partition, partitioned-parallel otherwise."""
        if partitions <= 1:
            return cls(SequentialEvaluation())
        return cls(PartitionedEvaluation(partitions))

    def score(self, target: PixelBuffer, candidate: PixelBuffer) -> int:
        _check_shapes(target.shape, candidate.shape)
        return self.strategy.total(target, candidate)

    def close(self) -> None:
        self.strategy.close()


def _check_shapes(a: Sequence[int], b: Sequence[int]) -> None:
    if len(a) != 3 or len(b) != 3:
        raise FitnessShapeError(f"Expected HxWxC pixel buffers, got shapes {tuple(a)} and {tuple(b)}.")
    if a[0] != b[0] or a[1] != b[1]:
        raise FitnessShapeError(
            f"Pixel buffers differ in size: {a[1]}x{a[0]} vs {b[1]}x{b[0]}."
        )
    if a[2] < 3 or b[2] < 3:
        raise FitnessShapeError("Pixel buffers need at least 3 (RGB) channels.")
