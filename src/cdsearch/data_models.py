# src/cdsearch/data_models.py

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

import pandas as pd

# Essential protein index -> resolved regulatory direction (-1, 0 or 1).
DrugProfile = Dict[int, int]


@dataclass(frozen=True)
class Protein:
    """
    Representation of a protein (node) in the interaction network.

    Attributes
    ----------
    index : int
        Dense zero-based index, also the row/column in the network matrices.
    name : str
        Unique protein name as it appears in the interaction file.
    is_disease_essential : bool
        Whether the protein is essential to the disease state.
    is_healthy_essential : bool
        Whether the protein is essential to healthy function.
    """
    index: int
    name: str
    is_disease_essential: bool = False
    is_healthy_essential: bool = False

    @property
    def is_essential(self) -> bool:
        return self.is_disease_essential or self.is_healthy_essential


@dataclass(frozen=True)
class Interaction:
    """
    Directed, signed interaction between two proteins.

    Attributes
    ----------
    source : int
        Index of the regulating protein.
    target : int
        Index of the regulated protein.
    direction : int
        -1 for down-regulation, 1 for up-regulation, 0 otherwise.
    """
    source: int
    target: int
    direction: int


@dataclass(frozen=True)
class Drug:
    """
    Representation of a drug acting on a single protein.

    Attributes
    ----------
    name : str
        Drug name.
    target : int
        Index of the drug-target protein.
    direction : int
        -1 if the drug down-regulates its target, 1 if it up-regulates it,
        0 otherwise.
    """
    name: str
    target: int
    direction: int


@dataclass(frozen=True)
class NetworkCounts:
    """Sizes of the loaded data and of the intermediate subgraphs."""
    proteins: int
    interactions: int
    disease_essential_proteins: int
    healthy_essential_proteins: int
    drugs: int
    subgraph_proteins: int = 0
    subgraph_essential_proteins: int = 0
    extended_subgraph_proteins: int = 0
    candidate_drugs: int = 0


@dataclass(frozen=True)
class DrugRecord:
    """
    A drug together with its resolved profile, split by essentiality.

    Attributes
    ----------
    drug_name : str
    target_name : str
    score : Optional[int]
        Complement score against the initial drug (None for the initial
        drug record itself).
    disease_essential : dict
        Protein name -> direction, for disease-essential proteins.
    healthy_essential : dict
        Protein name -> direction, for healthy-essential proteins.
    """
    drug_name: str
    target_name: str
    score: Optional[int]
    disease_essential: Dict[str, int]
    healthy_essential: Dict[str, int]

    @classmethod
    def from_profile(
        cls,
        drug: Drug,
        profile: DrugProfile,
        proteins: List[Protein],
        score: Optional[int] = None,
    ) -> "DrugRecord":
        disease = {
            proteins[i].name: v
            for i, v in sorted(profile.items())
            if proteins[i].is_disease_essential
        }
        healthy = {
            proteins[i].name: v
            for i, v in sorted(profile.items())
            if proteins[i].is_healthy_essential
        }
        return cls(
            drug_name=drug.name,
            target_name=proteins[drug.target].name,
            score=score,
            disease_essential=disease,
            healthy_essential=healthy,
        )

    def to_dict(self) -> Dict[str, object]:
        out: Dict[str, object] = {
            "drug": self.drug_name,
            "drug_target": self.target_name,
        }
        if self.score is not None:
            out["score"] = self.score
        out["disease_essential_proteins"] = dict(self.disease_essential)
        out["healthy_essential_proteins"] = dict(self.healthy_essential)
        return out


@dataclass(frozen=True)
class SearchResult:
    """
    Outcome of one complement drug search.

    Attributes
    ----------
    initial : DrugRecord
        The initial drug and its profile.
    solutions : list[DrugRecord]
        Candidates ordered by descending score, at most n_solutions long.
    counts : NetworkCounts
    cancelled : bool
        True if the search was cancelled before every candidate was resolved;
        solutions then only cover the drugs resolved so far.
    elapsed_seconds : float
    files : dict
        Input file label -> absolute path (None for an essential protein
        file that was not given). Empty when the search did not start
        from files.
    """
    initial: DrugRecord
    solutions: List[DrugRecord]
    counts: NetworkCounts
    cancelled: bool = False
    elapsed_seconds: float = 0.0
    files: Dict[str, Optional[str]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        return {
            "data": {
                "files": dict(self.files),
                "counts": asdict(self.counts),
                "time_elapsed_seconds": self.elapsed_seconds,
                "cancelled": self.cancelled,
            },
            "initial_drug": self.initial.to_dict(),
            "sorted_drugs": [rec.to_dict() for rec in self.solutions],
        }

    def to_frame(self) -> pd.DataFrame:
        """
        Tabular view of the ranked solutions, one row per drug.

        Returns
        -------
        pandas.DataFrame
            Columns:
                - rank
                - drug_name
                - target_name
                - score
                - n_disease_essential
                - n_healthy_essential
        """
        rows = [
            {
                "rank": i + 1,
                "drug_name": rec.drug_name,
                "target_name": rec.target_name,
                "score": rec.score,
                "n_disease_essential": len(rec.disease_essential),
                "n_healthy_essential": len(rec.healthy_essential),
            }
            for i, rec in enumerate(self.solutions)
        ]
        return pd.DataFrame(
            rows,
            columns=[
                "rank",
                "drug_name",
                "target_name",
                "score",
                "n_disease_essential",
                "n_healthy_essential",
            ],
        )
