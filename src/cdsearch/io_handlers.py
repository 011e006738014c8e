# src/cdsearch/io_handlers.py

from __future__ import annotations

import csv
import json
import logging
import warnings
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

import pandas as pd

from .config import SearchConfig
from .data_models import Drug, Interaction, Protein, SearchResult
from .exceptions import InitialDrugNotFound, InputDataError

logger = logging.getLogger(__name__)

_INTEGER_PATTERN = r"\s*[+-]?\d+\s*"
_DIRECTION_PATTERN = r"\s*[+-]?0*[01]\s*"


def _read_tsv(path: Path, names: List[str], label: str) -> pd.DataFrame:
    """
    Read a header-less tab separated file into string columns.

    Missing fields become NaN; extra fields beyond `names` are dropped.
    """
    path = Path(path)
    if not path.exists():
        raise InputDataError(
            f"The file containing the {label} could not be found.",
            details={"path": str(path)},
        )
    try:
        with warnings.catch_warnings():
            # index_col=False drops extra fields and warns about it on every run
            warnings.simplefilter("ignore", category=pd.errors.ParserWarning)
            df = pd.read_csv(
                path,
                sep="\t",
                header=None,
                names=names,
                index_col=False,
                dtype=str,
                keep_default_na=False,
                quoting=csv.QUOTE_NONE,
                engine="python",
            )
    except pd.errors.EmptyDataError:
        return pd.DataFrame(columns=names, dtype=str)
    except (OSError, UnicodeDecodeError, pd.errors.ParserError) as exc:
        raise InputDataError(
            f"An error occurred while reading the file containing the {label}.",
            details={"path": str(path), "error": exc},
        ) from exc
    return df


def _valid_triples(df: pd.DataFrame, first: str, second: str) -> pd.DataFrame:
    """
    Keep rows with two non-empty names and an integer direction in {-1, 0, 1}.
    """
    df = df.dropna(subset=[first, second, "direction"])
    df = df[(df[first] != "") & (df[second] != "")]
    df = df[df["direction"].str.fullmatch(_INTEGER_PATTERN)]

    # Range check on the text, so arbitrarily wide integers never reach astype
    out_of_range = ~df["direction"].str.fullmatch(_DIRECTION_PATTERN)
    if out_of_range.any():
        logger.warning(
            "Skipping %d rows with a direction other than -1, 0 or 1.",
            int(out_of_range.sum()),
        )
        df = df[~out_of_range]

    df = df.assign(direction=df["direction"].str.strip().astype(int))
    return df.reset_index(drop=True)


def read_essential_names(path: Optional[Path], label: str) -> Set[str]:
    """
    Read a file with one protein name per line (blank lines ignored).
    """
    if path is None:
        return set()
    df = _read_tsv(path, ["protein"], label)
    names = df["protein"].dropna()
    return {n for n in names if n != ""}


def load_network(
    interactions_tsv: Path,
    disease_essential_tsv: Optional[Path] = None,
    healthy_essential_tsv: Optional[Path] = None,
) -> Tuple[List[Protein], List[Interaction]]:
    """
    Load proteins and interactions from tab separated files.

    Expected schemas (no header):

    - interactions_tsv:
        columns: [source protein, target protein, direction]

    - disease_essential_tsv / healthy_essential_tsv (optional):
        one protein name per line

    Proteins are the distinct interaction endpoints (all sources first,
    then all targets), indexed densely from 0. Essential protein names
    absent from the interactions are ignored.

    Returns
    -------
    proteins : list[Protein]
    interactions : list[Interaction]
    """
    df = _valid_triples(
        _read_tsv(interactions_tsv, ["source", "target", "direction"], "interactions"),
        "source",
        "target",
    )

    names = list(dict.fromkeys(list(df["source"]) + list(df["target"])))
    disease = read_essential_names(disease_essential_tsv, "disease essential proteins")
    healthy = read_essential_names(healthy_essential_tsv, "healthy essential proteins")

    proteins = [
        Protein(
            index=i,
            name=name,
            is_disease_essential=name in disease,
            is_healthy_essential=name in healthy,
        )
        for i, name in enumerate(names)
    ]
    index_of: Dict[str, int] = {p.name: p.index for p in proteins}

    interactions = [
        Interaction(
            source=index_of[row.source],
            target=index_of[row.target],
            direction=int(row.direction),
        )
        for row in df.itertuples(index=False)
    ]
    return proteins, interactions


def load_drugs(drugs_tsv: Path, proteins: List[Protein]) -> List[Drug]:
    """
    Load drugs from a tab separated file.

    Expected schema (no header):
        columns: [drug name, target protein, direction]

    Drugs whose target protein is not in the network are discarded.
    """
    df = _valid_triples(
        _read_tsv(drugs_tsv, ["drug", "target", "direction"], "drugs"),
        "drug",
        "target",
    )
    index_of = {p.name: p.index for p in proteins}

    drugs = [
        Drug(name=row.drug, target=index_of[row.target], direction=int(row.direction))
        for row in df.itertuples(index=False)
        if row.target in index_of
    ]
    n_discarded = len(df) - len(drugs)
    if n_discarded:
        logger.info("Discarded %d drugs whose target is not in the network.", n_discarded)
    return drugs


def load_search_inputs(cfg: SearchConfig) -> Tuple[List[Protein], List[Interaction], List[Drug]]:
    """
    Load and check all inputs described by a SearchConfig.

    Raises
    ------
    InputDataError
        If a file is missing or unreadable, or no proteins, interactions,
        drugs or essential proteins remain after loading.
    """
    proteins, interactions = load_network(
        cfg.interactions_tsv,
        disease_essential_tsv=cfg.disease_essential_tsv,
        healthy_essential_tsv=cfg.healthy_essential_tsv,
    )
    if not proteins:
        raise InputDataError("No proteins could be found with the provided data.")
    if not interactions:
        raise InputDataError("No interactions could be found with the provided data.")

    drugs = load_drugs(cfg.drugs_tsv, proteins)
    if not drugs:
        raise InputDataError("No drugs could be found with the provided data.")
    if not any(p.is_essential for p in proteins):
        raise InputDataError("No essential proteins could be found with the provided data.")

    return proteins, interactions, drugs


def find_initial_drug(drugs: List[Drug], proteins: List[Protein], initial: str) -> Drug:
    """
    First drug whose name, or whose target name, equals `initial`.
    """
    for drug in drugs:
        if drug.name == initial or proteins[drug.target].name == initial:
            return drug
    raise InitialDrugNotFound(
        "The specified initial drug could not be found in the list of drugs "
        "or no interactions contain its corresponding drug target.",
        details={"initial": initial},
    )


def write_results_json(result: SearchResult, output_path: Path) -> Optional[Path]:
    """
    Write a search result as indented JSON.

    If the file cannot be written, the error is logged together with the
    JSON text and None is returned.

    Returns
    -------
    Path or None
        The written file.
    """
    output_path = Path(output_path)
    text = json.dumps(result.to_dict(), indent=2)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding="utf-8")
    except OSError as exc:
        logger.error(
            "The error %r occurred while writing the results to the file %s. "
            "The results are displayed below instead.",
            str(exc),
            output_path,
        )
        logger.info("\n%s", text)
        return None
    return output_path
