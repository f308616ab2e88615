"""Polygon gene: an ordered vertex path plus one brush."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from dna.brush import Brush
from dna.vertex import Vertex

if TYPE_CHECKING:
    from dna.drawing import Drawing
    from evolution.mutation import MutationEngine


class Polygon:
    """Filled translucent shape.

    Vertex order is the path handed to the rasterizer, implicitly closed from
    the last vertex back to the first.
    """

    def __init__(self, vertices: Iterable[Vertex] | None = None, brush: Brush | None = None) -> None:
        self.vertices: list[Vertex] = list(vertices or [])
        self.brush = brush if brush is not None else Brush()

    def __repr__(self) -> str:
        return f"Polygon(vertices={self.vertices!r}, brush={self.brush!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Polygon):
            return NotImplemented
        return self.vertices == other.vertices and self.brush == other.brush

    @classmethod
    def seeded(cls, engine: "MutationEngine") -> "Polygon":
        """New polygon clustered within ``seed_offset`` of a random origin."""
        settings = engine.settings
        origin = engine.random_vertex()
        spread = settings.seed_offset
        vertices = [
            Vertex(origin.x + engine.randint(-spread, spread), origin.y + engine.randint(-spread, spread)).clamp(
                settings.canvas_width, settings.canvas_height
            )
            for _ in range(settings.points_per_polygon_min)
        ]
        return cls(vertices, Brush.random(engine))

    def clone(self) -> "Polygon":
        return Polygon([vertex.clone() for vertex in self.vertices], self.brush.clone())

    def point_count(self) -> int:
        return len(self.vertices)

    def mutate(self, drawing: "Drawing", engine: "MutationEngine") -> None:
        """Structural point changes first, then brush, then per-vertex jitter."""
        settings = engine.settings
        if engine.will_mutate(settings.add_point_rate):
            self.add_vertex(drawing, engine)

        if engine.will_mutate(settings.remove_point_rate):
            self.remove_vertex(drawing, engine)

        if self.brush.mutate(engine):
            drawing.set_dirty()

        for vertex in self.vertices:
            if vertex.mutate(engine):
                drawing.set_dirty()

    def add_vertex(self, drawing: "Drawing", engine: "MutationEngine") -> bool:
        """Insert a vertex; no-op at the per-polygon or drawing-wide cap."""
        settings = engine.settings
        if len(self.vertices) >= settings.points_per_polygon_max or drawing.point_count() >= settings.points_max:
            return False

        if len(self.vertices) < 3:
            self.vertices.append(engine.random_vertex())
        else:
            # midpoint keeps the outline contiguous
            index = engine.randint(1, len(self.vertices) - 1)
            self.vertices.insert(index, self.vertices[index - 1].midpoint(self.vertices[index]))
        drawing.set_dirty()
        return True

    def remove_vertex(self, drawing: "Drawing", engine: "MutationEngine") -> bool:
        """Drop a random vertex unless a per-polygon or drawing-wide floor is hit."""
        settings = engine.settings
        if len(self.vertices) <= settings.points_per_polygon_min or drawing.point_count() <= settings.points_min:
            return False

        del self.vertices[engine.randint(0, len(self.vertices) - 1)]
        drawing.set_dirty()
        return True
