# src/cdsearch/subgraphs.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Set

from .data_models import Drug, Protein
from .exceptions import NoDrugsInExtendedSubgraph, NoEssentialProteinsInSubgraph
from .propagation import PathMatrices

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubgraphSelection:
    """
    Region of the network relevant to the initial drug.

    Attributes
    ----------
    subgraph : set[int]
        Proteins reachable from the initial drug target within L steps.
    subgraph_essential : set[int]
        Essential proteins of the subgraph.
    extended_subgraph : set[int]
        Proteins that reach any subgraph-essential protein within L steps.
    candidates : list[Drug]
        Drugs whose target lies in the extended subgraph, in catalogue order.
    """
    subgraph: Set[int]
    subgraph_essential: Set[int]
    extended_subgraph: Set[int]
    candidates: List[Drug]


def forward_reachable(path_matrices: PathMatrices, origin: int) -> Set[int]:
    """
    Proteins reachable from `origin` by a walk of 0..L edges.

    The origin itself is always included (walk of length 0).
    """
    reached: Set[int] = set()
    for matrix in path_matrices.adjacency:
        reached.update(int(j) for j in matrix[origin].nonzero()[1])
    return reached


def backward_reachable(path_matrices: PathMatrices, targets: Iterable[int]) -> Set[int]:
    """
    Proteins that reach at least one of `targets` by a walk of 0..L edges.
    """
    columns = sorted(set(targets))
    if not columns:
        return set()
    reached: Set[int] = set()
    for matrix in path_matrices.adjacency:
        reached.update(int(i) for i in matrix.tocsc()[:, columns].nonzero()[0])
    return reached


def essential_only(indices: Iterable[int], proteins: List[Protein]) -> Set[int]:
    return {i for i in indices if proteins[i].is_essential}


def extract_candidate_drugs(
    path_matrices: PathMatrices,
    proteins: List[Protein],
    drugs: List[Drug],
    initial_drug: Drug,
) -> SubgraphSelection:
    """
    Select the candidate drugs around the initial drug.

    Steps:
        1) Forward subgraph from the initial drug target
        2) Keep its essential proteins
        3) Extended subgraph: everything reaching those essential proteins
        4) Candidates: drugs targeting the extended subgraph

    Raises
    ------
    NoEssentialProteinsInSubgraph
        If step 2 yields nothing.
    NoDrugsInExtendedSubgraph
        If step 4 yields nothing.
    """
    subgraph = forward_reachable(path_matrices, initial_drug.target)
    subgraph_essential = essential_only(subgraph, proteins)
    if not subgraph_essential:
        raise NoEssentialProteinsInSubgraph(
            "No essential proteins could be found within the subgraph "
            "corresponding to the initial drug.",
            details={
                "drug": initial_drug.name,
                "target": proteins[initial_drug.target].name,
                "subgraph_proteins": len(subgraph),
            },
        )
    logger.info(
        "There are %d proteins in the subgraph, out of which %d are essential.",
        len(subgraph),
        len(subgraph_essential),
    )

    extended_subgraph = backward_reachable(path_matrices, subgraph_essential)
    candidates = [d for d in drugs if d.target in extended_subgraph]
    if not candidates:
        raise NoDrugsInExtendedSubgraph(
            "No drugs with drug targets within the extended subgraph could be found.",
            details={"extended_subgraph_proteins": len(extended_subgraph)},
        )
    logger.info(
        "There are %d proteins and %d drugs in the extended subgraph.",
        len(extended_subgraph),
        len(candidates),
    )

    return SubgraphSelection(
        subgraph=subgraph,
        subgraph_essential=subgraph_essential,
        extended_subgraph=extended_subgraph,
        candidates=candidates,
    )
