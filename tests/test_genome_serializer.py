"""Tests for genome documents, schema validation and rendering from documents."""

from __future__ import annotations

import json

import numpy as np
import pytest

from core.genome_serializer import (
    GenomeDocumentError,
    denormalize,
    from_document,
    load_document,
    save_document,
    to_document,
)
from dna.brush import Brush
from dna.drawing import Drawing
from dna.polygon import Polygon
from dna.vertex import Vertex
from cli.main import render_main
from engine.rasterizer import PillowRasterizer, render_document


def _drawing() -> Drawing:
    return Drawing(
        [
            Polygon([Vertex(0, 0), Vertex(200, 200), Vertex(37, 151)], Brush(255, 0, 128, 51)),
            Polygon([Vertex(10, 20), Vertex(30, 40), Vertex(50, 5), Vertex(199, 1)], Brush(1, 2, 3, 4)),
        ]
    )


def test_document_is_normalized() -> None:
    document = to_document(_drawing(), 200, 200)

    first = document["polygons"][0]
    assert first["color"] == pytest.approx({"r": 1.0, "g": 0.0, "b": 128 / 255, "a": 0.2})
    assert first["points"][1] == {"x": 1.0, "y": 1.0}
    assert len(document["polygons"][1]["points"]) == 4


def test_denormalize_scales_to_target_resolution() -> None:
    drawing = _drawing()
    scaled = denormalize(to_document(drawing, 200, 200), 400, 400)

    for polygon, (points, rgba) in zip(drawing.polygons, scaled):
        assert rgba == polygon.brush.rgba()
        for vertex, (x, y) in zip(polygon.vertices, points):
            assert x == pytest.approx(2 * vertex.x)
            assert y == pytest.approx(2 * vertex.y)


def test_from_document_restores_drawing() -> None:
    drawing = _drawing()

    restored = from_document(to_document(drawing, 200, 200), 200, 200)

    assert restored.polygons == drawing.polygons


def test_save_and_load_round_trip(tmp_path) -> None:
    path = save_document(_drawing(), tmp_path / "out" / "genome.json", 200, 200)

    document = load_document(path)

    assert len(document["polygons"]) == 2
    assert not path.with_suffix(".json.tmp").exists()


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ([], "must be an object"),
        ({}, "Missing required field 'polygons'"),
        ({"polygons": {}}, "'polygons' must be an array"),
        ({"polygons": [{"points": []}]}, r"polygons\[0\]\.color"),
        (
            {"polygons": [{"color": {"r": 0, "g": 0, "b": 0}, "points": []}]},
            r"polygons\[0\]\.color\.a",
        ),
        (
            {"polygons": [{"color": {"r": 0, "g": 0, "b": 0, "a": 1.5}, "points": []}]},
            r"must be in \[0, 1\]",
        ),
        (
            {"polygons": [{"color": {"r": True, "g": 0, "b": 0, "a": 1}, "points": []}]},
            "expected a number",
        ),
        (
            {"polygons": [{"color": {"r": 0, "g": 0, "b": 0, "a": 1}, "points": "abc"}]},
            r"polygons\[0\]\.points' must be an array",
        ),
        (
            {"polygons": [{"color": {"r": 0, "g": 0, "b": 0, "a": 1}, "points": []}]},
            "at least 1 point",
        ),
        (
            {
                "polygons": [
                    {
                        "color": {"r": 0, "g": 0, "b": 0, "a": 1},
                        "points": [{"x": 0, "y": 0}, {"x": 1, "y": 0}, {"x": 1}],
                    }
                ]
            },
            r"polygons\[0\]\.points\[2\]\.y",
        ),
    ],
)
def test_malformed_documents_are_rejected(payload, message: str) -> None:
    with pytest.raises(GenomeDocumentError, match=message):
        render_document(payload, 20, 20)


def test_load_document_reports_io_and_json_errors(tmp_path) -> None:
    with pytest.raises(GenomeDocumentError, match="Could not open input file"):
        load_document(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(GenomeDocumentError, match="Invalid JSON"):
        load_document(broken)


def test_rendered_document_matches_direct_render_scale(tmp_path) -> None:
    square = Drawing([Polygon([Vertex(0, 0), Vertex(20, 0), Vertex(20, 20), Vertex(0, 20)], Brush(0, 255, 0, 255))])
    document = json.loads(json.dumps(to_document(square, 20, 20)))

    pixels = render_document(document, 30, 10)

    assert pixels.shape == (10, 30, 3)
    assert pixels[5, 15].tolist() == [0, 255, 0]
    direct = PillowRasterizer(20, 20).render(square, 30, 10)
    assert np.array_equal(direct, pixels)


def _line_document() -> dict:
    return {
        "polygons": [
            {"color": {"r": 1, "g": 1, "b": 1, "a": 1}, "points": [{"x": 0, "y": 0}, {"x": 1, "y": 1}]},
            {"color": {"r": 1, "g": 0, "b": 0, "a": 1}, "points": [{"x": 0.5, "y": 0.5}]},
        ]
    }


def test_degenerate_polygons_render_nothing() -> None:
    pixels = render_document(_line_document(), 20, 20)

    assert int(pixels.sum()) == 0


def test_degenerate_polygons_cannot_become_genes() -> None:
    with pytest.raises(GenomeDocumentError, match=r"polygons\[0\] has 2 point\(s\)"):
        from_document(_line_document(), 200, 200)


def test_render_reports_undecodable_document(tmp_path, capsys) -> None:
    document = tmp_path / "binary.json"
    document.write_bytes(b"\xff\xfe{")
    output = tmp_path / "out.png"

    code = render_main(["-i", str(document), "-o", str(output)])

    assert code == 1
    assert not output.exists()
    assert "ERROR: Could not open input file" in capsys.readouterr().err
