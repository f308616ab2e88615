"""Genome contracts for the hill-climbing optimizer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from evolution.mutation import MutationEngine


class Genome(ABC):
    """Abstract candidate solution evolved by the generational controller.

    Implementations own their genes exclusively; clones share no mutable
    state with the genome they were copied from.
    """

    @abstractmethod
    def clone(self) -> "Genome":
        """Return a deep, fully independent copy of this genome.

        Invariants:
            - Mutating the clone must never affect the original.
            - The clone must satisfy every limit the original satisfies.
        """

    @abstractmethod
    def mutate(self, engine: "MutationEngine") -> None:
        """Apply one probability-gated mutation pass in place.

        Args:
            engine (MutationEngine): Source of randomness, rates and limits.

        Invariants:
            - Structural limits configured on ``engine.settings`` hold before
              and after the call; operations that would break them are no-ops.
        """

    @abstractmethod
    def point_count(self) -> int:
        """Return the total number of vertices across all genes."""
