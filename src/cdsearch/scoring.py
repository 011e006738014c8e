# src/cdsearch/scoring.py

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

import pandas as pd

from .data_models import DrugProfile, Protein


# (initial direction, candidate direction) -> contribution, for proteins
# resolved by both drugs.
COMMON_DISEASE_SCORES: Dict[Tuple[int, int], int] = {
    (-1, -1): 0,
    (-1, 0): 0,
    (-1, 1): -1,
    (0, -1): 1,
    (0, 0): 0,
    (0, 1): -2,
    (1, -1): 1,
    (1, 0): 0,
    (1, 1): -2,
}

COMMON_HEALTHY_SCORES: Dict[Tuple[int, int], int] = {
    (-1, -1): -2,
    (-1, 0): 0,
    (-1, 1): 1,
    (0, -1): -2,
    (0, 0): 0,
    (0, 1): 1,
    (1, -1): -1,
    (1, 0): 0,
    (1, 1): 0,
}

# direction -> contribution, for proteins resolved by only one of the drugs
# (same table whether it is the initial or the candidate drug).
SINGLE_DISEASE_SCORES: Dict[int, int] = {-1: 1, 0: 0, 1: -1}

SINGLE_HEALTHY_SCORES: Dict[int, int] = {-1: -1, 0: 0, 1: 1}


def score_candidate(
    initial_profile: DrugProfile,
    candidate_profile: DrugProfile,
    proteins: List[Protein],
) -> int:
    """
    Complement score of a candidate drug against the initial drug.

    The essential proteins of both profiles are split into common,
    initial-only and candidate-only groups, and each group is scored
    separately for disease-essential and healthy-essential proteins.
    A protein carrying both flags contributes to both.

    Parameters
    ----------
    initial_profile : dict
        Profile of the initial drug (protein index -> direction).
    candidate_profile : dict
        Profile of the candidate drug.
    proteins : list[Protein]
        All proteins, indexed by position (for the essentiality flags).

    Returns
    -------
    int
        Higher is a better complement.
    """
    initial_keys = set(initial_profile)
    candidate_keys = set(candidate_profile)

    score = 0
    for p in initial_keys & candidate_keys:
        values = (initial_profile[p], candidate_profile[p])
        if proteins[p].is_disease_essential:
            score += COMMON_DISEASE_SCORES.get(values, 0)
        if proteins[p].is_healthy_essential:
            score += COMMON_HEALTHY_SCORES.get(values, 0)

    for profile, only in (
        (initial_profile, initial_keys - candidate_keys),
        (candidate_profile, candidate_keys - initial_keys),
    ):
        for p in only:
            if proteins[p].is_disease_essential:
                score += SINGLE_DISEASE_SCORES.get(profile[p], 0)
            if proteins[p].is_healthy_essential:
                score += SINGLE_HEALTHY_SCORES.get(profile[p], 0)

    return score


def score_candidates(
    initial_profile: DrugProfile,
    candidate_profiles: Sequence[DrugProfile],
    proteins: List[Protein],
) -> List[int]:
    """Score every candidate profile against the initial drug profile."""
    return [score_candidate(initial_profile, profile, proteins) for profile in candidate_profiles]


def rank_candidates(
    drug_names: Sequence[str],
    scores: Sequence[int],
    n_solutions: int,
) -> pd.DataFrame:
    """
    Order candidates by descending score and keep the best ones.

    The sort is stable, so candidates with equal scores keep their
    enumeration order.

    Parameters
    ----------
    drug_names : sequence of str
        Candidate drug names, in enumeration order.
    scores : sequence of int
        Score of each candidate (same order).
    n_solutions : int
        Maximum number of rows returned.

    Returns
    -------
    pandas.DataFrame
        Columns:
            - candidate (position in the enumeration order)
            - drug_name
            - score
    """
    if n_solutions < 1:
        raise ValueError(f"n_solutions must be a positive integer, got {n_solutions}")
    if len(drug_names) != len(scores):
        raise ValueError(
            f"Got {len(drug_names)} drug names but {len(scores)} scores"
        )

    df = pd.DataFrame(
        {
            "candidate": range(len(drug_names)),
            "drug_name": list(drug_names),
            "score": pd.Series(list(scores), dtype="int64"),
        }
    )
    df = df.sort_values(by="score", ascending=False, kind="mergesort")
    return df.head(n_solutions).reset_index(drop=True)
