# src/cdsearch/pipeline.py

from __future__ import annotations

import logging
import threading
import time
from dataclasses import replace
from typing import List, Optional

from .config import SearchConfig
from .data_models import Drug, DrugRecord, Interaction, NetworkCounts, Protein, SearchResult
from .directions import resolve_drug_profile, resolve_profiles
from .graphs import build_network_matrices
from .io_handlers import find_initial_drug, load_search_inputs
from .propagation import compute_path_matrices
from .scoring import rank_candidates, score_candidates
from .subgraphs import extract_candidate_drugs

logger = logging.getLogger(__name__)


def run_search(
    proteins: List[Protein],
    interactions: List[Interaction],
    drugs: List[Drug],
    initial_drug: Drug,
    max_path_length: int = 3,
    n_solutions: int = 10,
    cancel_event: Optional[threading.Event] = None,
    n_jobs: int = 1,
) -> SearchResult:
    """
    Search complement drugs for an initial drug.

    Steps:
        1) Build the adjacency and direction matrices
        2) Compute their powers up to max_path_length
        3) Extract the subgraph and extended subgraph of the initial drug
        4) Resolve the profile of the initial drug, then of every candidate
        5) Score candidates against the initial drug
        6) Rank and keep the best n_solutions

    If `cancel_event` is set during step 4, the remaining candidates are
    skipped and steps 5-6 run over the candidates resolved so far; the
    result is then flagged as cancelled. The initial drug is resolved
    before the candidate loop and is never skipped.

    Parameters
    ----------
    proteins : list[Protein]
        All proteins, indexed 0..N-1.
    interactions : list[Interaction]
    drugs : list[Drug]
        Drug catalogue; targets must be valid protein indices.
    initial_drug : Drug
        Drug whose complement is searched.
    max_path_length : int
        Maximum walk length between drug targets and essential proteins.
    n_solutions : int
        Maximum number of ranked candidates returned.
    cancel_event : threading.Event, optional
        Cooperative cancellation flag, checked once per candidate drug.
    n_jobs : int
        Worker threads used to resolve candidate profiles.

    Returns
    -------
    SearchResult

    Raises
    ------
    NoEssentialProteinsInSubgraph, NoDrugsInExtendedSubgraph
    """
    if n_solutions < 1:
        raise ValueError(f"n_solutions must be a positive integer, got {n_solutions}")

    start = time.perf_counter()

    # 1-2. Matrices and their powers
    logger.info("Computing the corresponding matrices and matrix powers.")
    adjacency_base, direction_base = build_network_matrices(proteins, interactions)
    path_matrices = compute_path_matrices(adjacency_base, direction_base, max_path_length)

    # 3. Subgraphs
    logger.info("Computing the subgraph corresponding to the initial drug.")
    selection = extract_candidate_drugs(path_matrices, proteins, drugs, initial_drug)

    # 4. Profiles
    logger.info("Computing the direction from drugs to essential proteins within the extended subgraph.")
    initial_profile = resolve_drug_profile(initial_drug, path_matrices, proteins)
    resolved, cancelled = resolve_profiles(
        selection.candidates,
        path_matrices,
        proteins,
        cancel_event=cancel_event,
        n_jobs=n_jobs,
    )

    # 5. Scores
    logger.info("Computing the score of the drugs in the extended subgraph.")
    scores = score_candidates(initial_profile, [profile for _, profile in resolved], proteins)

    # 6. Ranking
    ranking = rank_candidates([drug.name for drug, _ in resolved], scores, n_solutions)
    solutions = []
    for row in ranking.itertuples(index=False):
        drug, profile = resolved[row.candidate]
        solutions.append(DrugRecord.from_profile(drug, profile, proteins, score=int(row.score)))

    counts = NetworkCounts(
        proteins=len(proteins),
        interactions=len(interactions),
        disease_essential_proteins=sum(p.is_disease_essential for p in proteins),
        healthy_essential_proteins=sum(p.is_healthy_essential for p in proteins),
        drugs=len(drugs),
        subgraph_proteins=len(selection.subgraph),
        subgraph_essential_proteins=len(selection.subgraph_essential),
        extended_subgraph_proteins=len(selection.extended_subgraph),
        candidate_drugs=len(selection.candidates),
    )

    elapsed = time.perf_counter() - start
    logger.info("Search ended in %.3f seconds.", elapsed)

    return SearchResult(
        initial=DrugRecord.from_profile(initial_drug, initial_profile, proteins),
        solutions=solutions,
        counts=counts,
        cancelled=cancelled,
        elapsed_seconds=elapsed,
    )


def run_file_pipeline(
    cfg: SearchConfig,
    cancel_event: Optional[threading.Event] = None,
) -> SearchResult:
    """
    Run the complement drug search on tab separated input files.

    Parameters
    ----------
    cfg : SearchConfig
        File paths, initial drug and search parameters.
    cancel_event : threading.Event, optional
        Cooperative cancellation flag.

    Returns
    -------
    SearchResult
        Result with the absolute input paths attached.
    """
    cfg.validate()
    cfg = cfg.resolve_paths()

    proteins, interactions, drugs = load_search_inputs(cfg)
    initial_drug = find_initial_drug(drugs, proteins, cfg.initial)

    logger.info(
        "The data has been loaded successfully. There are %d proteins "
        "(out of which %d disease essential and %d healthy essential) and %d interactions. "
        "Looking for complement drugs around the initial drug %r (with the drug target %r), "
        "up to a maximum path length of %d.",
        len(proteins),
        sum(p.is_disease_essential for p in proteins),
        sum(p.is_healthy_essential for p in proteins),
        len(interactions),
        initial_drug.name,
        proteins[initial_drug.target].name,
        cfg.max_path_length,
    )

    result = run_search(
        proteins,
        interactions,
        drugs,
        initial_drug,
        max_path_length=cfg.max_path_length,
        n_solutions=cfg.n_solutions,
        cancel_event=cancel_event,
        n_jobs=cfg.n_jobs,
    )
    return replace(
        result,
        files={
            "interactions": str(cfg.interactions_tsv),
            "drugs": str(cfg.drugs_tsv),
            "disease_essential_proteins": (
                str(cfg.disease_essential_tsv) if cfg.disease_essential_tsv is not None else None
            ),
            "healthy_essential_proteins": (
                str(cfg.healthy_essential_tsv) if cfg.healthy_essential_tsv is not None else None
            ),
        },
    )
