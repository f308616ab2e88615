"""(1+lambda) hill-climbing selection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from dna.drawing import Drawing
from evolution.base import EvolutionStrategy


@dataclass
class Candidate:
    """A genome with its fitness score and, optionally, its rendered pixels."""

    index: int
    drawing: Drawing
    score: int
    pixels: np.ndarray | None = None


def select_best(candidates: Sequence[Candidate]) -> Candidate | None:
    """Minimum-score candidate; ties go to the lowest index.

    Left-to-right fold that only replaces the incumbent on a strict ``<``.
    Parallel scoring must hand results over in index order.
    """
    best: Candidate | None = None
    for candidate in candidates:
        if best is None or candidate.score < best.score:
            best = candidate
    return best


def next_snapshot_generation(generation: int, every: int) -> int:
    """Next multiple of ``every`` strictly greater than ``generation``."""
    if every < 1:
        raise ValueError("every must be >= 1")
    return (generation // every + 1) * every


class HillClimbStrategy(EvolutionStrategy):
    """Replace the champion only on strict improvement."""

    def __init__(self) -> None:
        self.last_accepted = False
        self.accepted_count = 0

    def evolve(self, champion: Candidate, children: Sequence[Candidate]) -> Candidate:
        winner = select_best(children)
        self.last_accepted = winner is not None and winner.score < champion.score
        if not self.last_accepted:
            return champion
        self.accepted_count += 1
        return winner  # type: ignore[return-value]
