"""Plot utilities for persisted evolution metrics."""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

from data.logger import EvolutionLogger  # noqa: E402


def plot_run(db_path: str | Path, run_id: str | None, output_path: str | Path) -> Path:
    """Render score and genome-size curves for a run from SQLite logs.

    ``run_id`` of None selects the most recent run.
    """
    logger = EvolutionLogger(db_path)
    try:
        run_id = run_id or logger.latest_run_id()
        if run_id is None:
            raise ValueError(f"No runs recorded in {db_path}.")
        rows = logger.fetch_metrics(run_id)
    finally:
        logger.close()

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    generations = [int(row["generation_index"]) for row in rows]
    scores = [int(row["score"]) for row in rows]
    polygons = [int(row["polygons"]) for row in rows]
    points = [int(row["points"]) for row in rows]

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(8, 6), sharex=True)
    ax1.plot(generations, scores, label="difference")
    ax1.set_ylabel("difference")
    ax1.set_title(f"run {run_id}")
    ax1.legend()

    ax2.plot(generations, polygons, label="polygons", color="tab:green")
    ax2.plot(generations, points, label="points", color="tab:orange")
    ax2.set_ylabel("genome size")
    ax2.set_xlabel("generation")
    ax2.legend()

    fig.tight_layout()
    fig.savefig(output)
    plt.close(fig)
    return output
