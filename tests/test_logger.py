from __future__ import annotations

from data.logger import EvolutionLogger, GenerationMetrics


def test_logger_round_trip_and_latest_run(tmp_path) -> None:
    logger = EvolutionLogger(tmp_path / "nested" / "runs.db")
    assert logger.latest_run_id() is None

    first = logger.start_run(config={"children": 2}, seed=1)
    second = logger.start_run(config={"children": 2}, seed=1)
    logger.log_generation(second, GenerationMetrics(4, score=90, polygons=2, points=6, accepted=True))
    logger.log_generation(second, GenerationMetrics(2, score=120, polygons=1, points=3))
    logger.log_generation(second, GenerationMetrics(2, score=110, polygons=1, points=3, accepted=True))

    rows = logger.fetch_metrics(second)
    latest = logger.latest_run_id()
    logger.close()

    assert first != second
    assert first.startswith("00000001-")
    assert latest == second
    assert [row["generation_index"] for row in rows] == [2, 4]
    assert rows[0] == {"generation_index": 2, "score": 110, "polygons": 1, "points": 3, "accepted": 1}
