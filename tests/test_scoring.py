# tests/test_scoring.py

import pytest

from cdsearch.data_models import Protein
from cdsearch.scoring import (
    COMMON_DISEASE_SCORES,
    COMMON_HEALTHY_SCORES,
    SINGLE_DISEASE_SCORES,
    SINGLE_HEALTHY_SCORES,
    rank_candidates,
    score_candidate,
    score_candidates,
)


def _proteins():
    return [
        Protein(index=0, name="D", is_disease_essential=True),
        Protein(index=1, name="H", is_healthy_essential=True),
        Protein(index=2, name="B", is_disease_essential=True, is_healthy_essential=True),
        Protein(index=3, name="D2", is_disease_essential=True),
    ]


def test_score_tables():
    assert COMMON_DISEASE_SCORES[(1, 1)] == -2
    assert COMMON_DISEASE_SCORES[(0, -1)] == 1
    assert COMMON_DISEASE_SCORES[(-1, 1)] == -1
    assert COMMON_HEALTHY_SCORES[(-1, 1)] == 1
    assert COMMON_HEALTHY_SCORES[(0, -1)] == -2
    assert COMMON_HEALTHY_SCORES[(1, -1)] == -1
    assert SINGLE_DISEASE_SCORES == {-1: 1, 0: 0, 1: -1}
    assert SINGLE_HEALTHY_SCORES == {-1: -1, 0: 0, 1: 1}
    assert len(COMMON_DISEASE_SCORES) == 9
    assert len(COMMON_HEALTHY_SCORES) == 9


@pytest.mark.parametrize(
    "initial, candidate, expected",
    [
        # Common disease-essential protein
        ({0: 1}, {0: 1}, -2),
        ({0: 1}, {0: -1}, 1),
        ({0: -1}, {0: 1}, -1),
        # Common healthy-essential protein
        ({1: -1}, {1: 1}, 1),
        ({1: 0}, {1: -1}, -2),
        # Initial only
        ({0: -1}, {}, 1),
        ({1: -1}, {}, -1),
        # Candidate only
        ({}, {0: 1}, -1),
        ({}, {1: 1}, 1),
        # Neutral entries contribute nothing
        ({0: 0, 1: 0}, {3: 0}, 0),
    ],
)
def test_score_candidate_single_protein(initial, candidate, expected):
    assert score_candidate(initial, candidate, _proteins()) == expected


def test_protein_with_both_flags_counts_twice():
    proteins = _proteins()
    # Disease table (1, -1) -> 1, healthy table (1, -1) -> -1
    assert score_candidate({2: 1}, {2: -1}, proteins) == 0
    # Initial only: disease -1 -> 1, healthy -1 -> -1
    assert score_candidate({2: -1}, {}, proteins) == 0
    # Disease table (0, 1) -> -2, healthy table (0, 1) -> 1
    assert score_candidate({2: 0}, {2: 1}, proteins) == -1


def test_score_candidate_sums_all_groups():
    proteins = _proteins()
    initial = {0: 1, 1: -1, 3: -1}
    candidate = {0: -1, 1: 1, 2: 1}
    # common D (1,-1) -> 1, common H (-1,1) -> 1,
    # initial only D2 -1 -> 1, candidate only B: disease 1 -> -1, healthy 1 -> 1
    assert score_candidate(initial, candidate, proteins) == 3


def test_score_candidates_keeps_order():
    proteins = _proteins()
    initial = {0: 1}
    assert score_candidates(initial, [{0: 1}, {0: -1}, {}], proteins) == [-2, 1, -1]


def test_rank_candidates_descending_and_stable():
    names = ["a", "b", "c", "d", "e"]
    scores = [1, 3, 1, 3, -2]

    df = rank_candidates(names, scores, n_solutions=10)

    assert list(df["drug_name"]) == ["b", "d", "a", "c", "e"]
    assert list(df["score"]) == [3, 3, 1, 1, -2]
    assert list(df["candidate"]) == [1, 3, 0, 2, 4]


def test_rank_candidates_truncates():
    names = ["a", "b", "c"]
    scores = [0, 0, 0]

    df = rank_candidates(names, scores, n_solutions=2)

    assert len(df) == 2
    assert list(df["drug_name"]) == ["a", "b"]


def test_rank_candidates_empty_and_invalid():
    assert rank_candidates([], [], n_solutions=3).empty
    with pytest.raises(ValueError):
        rank_candidates(["a"], [1], n_solutions=0)
    with pytest.raises(ValueError):
        rank_candidates(["a", "b"], [1], n_solutions=1)
