"""Drawing genome: the paint-ordered stack of polygon genes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from dna.genome import Genome
from dna.polygon import Polygon

if TYPE_CHECKING:
    from evolution.mutation import MutationEngine


class Drawing(Genome):
    """Ordered polygon stack; index 0 is painted first (furthest back).

    ``dirty`` is raised by every geometry-changing mutation so callers may
    invalidate a cached render. It carries no other meaning.
    """

    def __init__(self, polygons: Iterable[Polygon] | None = None) -> None:
        self.polygons: list[Polygon] = list(polygons or [])
        self.dirty = True

    def __repr__(self) -> str:
        return f"Drawing(polygons={len(self.polygons)}, points={self.point_count()})"

    @classmethod
    def seeded(cls, engine: "MutationEngine") -> "Drawing":
        """Initial genome with ``polygons_min`` seeded polygons."""
        drawing = cls()
        for _ in range(engine.settings.polygons_min):
            drawing.polygons.append(Polygon.seeded(engine))
        return drawing

    def set_dirty(self) -> None:
        self.dirty = True

    def polygon_count(self) -> int:
        return len(self.polygons)

    def point_count(self) -> int:
        return sum(polygon.point_count() for polygon in self.polygons)

    def clone(self) -> "Drawing":
        return Drawing(polygon.clone() for polygon in self.polygons)

    def mutate(self, engine: "MutationEngine") -> None:
        settings = engine.settings
        if engine.will_mutate(settings.add_polygon_rate):
            self.add_polygon(engine)

        if engine.will_mutate(settings.remove_polygon_rate):
            self.remove_polygon(engine)

        if engine.will_mutate(settings.move_polygon_rate):
            self.move_polygon(engine)

        for polygon in self.polygons:
            polygon.mutate(self, engine)

    def add_polygon(self, engine: "MutationEngine") -> bool:
        """Insert a seeded polygon; appended while the stack is small."""
        settings = engine.settings
        if len(self.polygons) >= settings.polygons_max:
            return False
        if self.point_count() + settings.points_per_polygon_min > settings.points_max:
            return False

        polygon = Polygon.seeded(engine)
        if len(self.polygons) > 2:
            self.polygons.insert(engine.randint(0, len(self.polygons) - 1), polygon)
        else:
            self.polygons.append(polygon)
        self.set_dirty()
        return True

    def remove_polygon(self, engine: "MutationEngine") -> bool:
        settings = engine.settings
        if len(self.polygons) <= settings.polygons_min:
            return False

        index = engine.randint(0, len(self.polygons) - 1)
        if self.point_count() - self.polygons[index].point_count() < settings.points_min:
            return False
        del self.polygons[index]
        self.set_dirty()
        return True

    def move_polygon(self, engine: "MutationEngine") -> bool:
        """Swap two polygons' paint order."""
        if len(self.polygons) < 2:
            return False

        last = len(self.polygons) - 1
        a = engine.randint(0, last)
        b = engine.randint(0, last)
        if a == b:
            return False
        self.polygons[a], self.polygons[b] = self.polygons[b], self.polygons[a]
        self.set_dirty()
        return True
