"""Integer coordinate gene."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from evolution.mutation import MutationEngine


@dataclass
class Vertex:
    """One polygon corner in canvas coordinates."""

    x: int = 0
    y: int = 0

    def clone(self) -> "Vertex":
        return Vertex(self.x, self.y)

    def clamp(self, width: int, height: int) -> "Vertex":
        """Force coordinates into ``[0, width] x [0, height]`` in place."""
        self.x = min(max(0, int(self.x)), width)
        self.y = min(max(0, int(self.y)), height)
        return self

    def midpoint(self, other: "Vertex") -> "Vertex":
        return Vertex((self.x + other.x) // 2, (self.y + other.y) // 2)

    def mutate(self, engine: "MutationEngine") -> bool:
        """Jitter in place using the engine's policy; result stays in bounds."""
        return engine.jitter.apply(self, engine)
