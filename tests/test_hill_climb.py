"""Tests for best-of-lambda selection and snapshot scheduling."""

from __future__ import annotations

import pytest

from dna.drawing import Drawing
from evolution.hill_climb import Candidate, HillClimbStrategy, next_snapshot_generation, select_best


def _candidates(scores: list[int]) -> list[Candidate]:
    return [Candidate(index=i, drawing=Drawing(), score=score) for i, score in enumerate(scores)]


def test_select_best_prefers_lowest_index_on_ties() -> None:
    children = _candidates([30, 10, 10, 40])

    assert select_best(children).index == 1  # type: ignore[union-attr]
    assert select_best([]) is None


def test_strictly_better_child_is_accepted() -> None:
    strategy = HillClimbStrategy()
    champion = Candidate(index=0, drawing=Drawing(), score=20)
    children = _candidates([50, 10, 30])

    winner = strategy.evolve(champion, children)

    assert winner is children[1]
    assert winner.score == 10
    assert strategy.last_accepted
    assert strategy.accepted_count == 1


def test_no_improvement_keeps_champion() -> None:
    strategy = HillClimbStrategy()
    champion = Candidate(index=0, drawing=Drawing(), score=20)

    assert strategy.evolve(champion, _candidates([50, 40, 30])) is champion
    assert strategy.evolve(champion, _candidates([20, 20])) is champion
    assert not strategy.last_accepted
    assert champion.score == 20


def test_next_snapshot_generation_rounds_up_to_next_multiple() -> None:
    assert next_snapshot_generation(171, 100) == 200
    assert next_snapshot_generation(200, 100) == 300
    assert next_snapshot_generation(0, 300) == 300
    with pytest.raises(ValueError):
        next_snapshot_generation(5, 0)
