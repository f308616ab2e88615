"""Evolution strategy contracts."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from evolution.hill_climb import Candidate


class EvolutionStrategy(ABC):
    """Abstract interface for single-champion selection rules.

    A strategy decides, once per generation, which scored candidate owns the
    champion slot next. It never mutates or scores genomes itself.
    """

    @abstractmethod
    def evolve(self, champion: "Candidate", children: Sequence["Candidate"]) -> "Candidate":
        """Return the champion for the next generation.

        Args:
            champion (Candidate): Current champion and its score.
            children (Sequence[Candidate]): Scored children, aligned by index.

        Returns:
            Candidate: ``champion`` itself when nothing is accepted, otherwise
                the accepted child.

        Invariants:
            - Must be deterministic for equal inputs.
            - Must not modify the input sequence.
        """
