# src/cdsearch/directions.py

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

from .data_models import Drug, DrugProfile, Protein
from .propagation import PathMatrices
from .subgraphs import essential_only, forward_reachable

logger = logging.getLogger(__name__)


def path_length_signs(walk_counts: Sequence[float], signed_sums: Sequence[float]) -> List[int]:
    """
    Per path length sign of the walks between two proteins.

    Only lengths with at least one walk are kept, in increasing order.
    A length gets the common sign of its walks when they all agree
    (|signed sum| == walk count), and 0 otherwise.

    Parameters
    ----------
    walk_counts : sequence of float
        a_k for k = 0..L.
    signed_sums : sequence of float
        d_k for k = 0..L.

    Returns
    -------
    list[int]
    """
    signs: List[int] = []
    for a, d in zip(walk_counts, signed_sums):
        if a == 0:
            continue
        if abs(d) == a:
            signs.append(int(d / a))
        else:
            signs.append(0)
    return signs


def resolve_protein_direction(signs: Sequence[int]) -> Optional[int]:
    """
    Collapse per-length signs into one direction.

    Resolved only when the shortest reachable length has a non-zero sign
    and every other reachable length has exactly the same sign.
    """
    if not signs:
        return None
    first = signs[0]
    if first != 0 and all(s == first for s in signs):
        return first
    return None


def resolve_drug_profile(
    drug: Drug,
    path_matrices: PathMatrices,
    proteins: List[Protein],
) -> DrugProfile:
    """
    Net regulatory effect of a drug on the essential proteins it reaches.

    Parameters
    ----------
    drug : Drug
        Drug with its target index and own direction.
    path_matrices : PathMatrices
        Propagated walk counts and signed sums.
    proteins : list[Protein]
        All proteins, indexed by position.

    Returns
    -------
    dict
        Essential protein index -> protein-level sign times drug direction.
        Proteins without a resolvable direction are absent.
    """
    reachable = essential_only(forward_reachable(path_matrices, drug.target), proteins)
    profile: DrugProfile = {}
    for p in sorted(reachable):
        signs = path_length_signs(
            path_matrices.walk_counts(drug.target, p),
            path_matrices.signed_walk_sums(drug.target, p),
        )
        direction = resolve_protein_direction(signs)
        if direction is not None:
            profile[p] = direction * drug.direction
    return profile


def resolve_profiles(
    drugs: List[Drug],
    path_matrices: PathMatrices,
    proteins: List[Protein],
    cancel_event: Optional[threading.Event] = None,
    n_jobs: int = 1,
) -> Tuple[List[Tuple[Drug, DrugProfile]], bool]:
    """
    Resolve the profile of every drug, optionally on a thread pool.

    The cancellation event is checked once per drug, before resolving it.
    Once it is set, the remaining drugs are skipped: the drugs resolved
    so far are returned and the cancelled flag is True.

    Parameters
    ----------
    drugs : list[Drug]
        Drugs to resolve, in enumeration order.
    path_matrices : PathMatrices
    proteins : list[Protein]
    cancel_event : threading.Event, optional
        Cooperative cancellation flag.
    n_jobs : int
        Number of worker threads (1 = sequential).

    Returns
    -------
    resolved : list[tuple[Drug, dict]]
        (drug, profile) pairs for the resolved drugs, in enumeration order.
    cancelled : bool
    """
    if n_jobs < 1:
        raise ValueError(f"n_jobs must be a positive integer, got {n_jobs}")

    total = len(drugs)
    slots: List[Optional[DrugProfile]] = [None] * total

    def _cancelled() -> bool:
        return cancel_event is not None and cancel_event.is_set()

    def _resolve(position: int) -> None:
        logger.debug("%d / %d: %s", position + 1, total, drugs[position].name)
        slots[position] = resolve_drug_profile(drugs[position], path_matrices, proteins)

    def _resolve_unless_cancelled(position: int) -> None:
        if not _cancelled():
            _resolve(position)

    if n_jobs == 1:
        for position in range(total):
            if _cancelled():
                break
            _resolve(position)
    else:
        with ThreadPoolExecutor(max_workers=n_jobs) as executor:
            futures = [
                executor.submit(_resolve_unless_cancelled, position) for position in range(total)
            ]
            for future in futures:
                future.result()

    resolved = [(drug, profile) for drug, profile in zip(drugs, slots) if profile is not None]
    cancelled = len(resolved) < total
    if cancelled:
        logger.warning(
            "Cancellation requested: %d of %d drugs were resolved, the rest are skipped.",
            len(resolved),
            total,
        )
    return resolved, cancelled
