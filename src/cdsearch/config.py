# src/cdsearch/config.py

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path
from typing import Optional


@dataclass
class SearchConfig:
    """
    Configuration of a complement drug search run.

    Input files are tab separated, without header:
        - interactions: source protein, target protein, direction (-1/0/1)
        - drugs: drug name, target protein, direction (-1/0/1)
        - essential proteins: one protein name per line

    At least one of the two essential protein files must be given.
    """

    # File paths
    interactions_tsv: Path
    drugs_tsv: Path
    disease_essential_tsv: Optional[Path] = None
    healthy_essential_tsv: Optional[Path] = None
    output_json: Optional[Path] = None

    # Drug name or drug-target name of the initial drug
    initial: str = ""

    # Search parameters
    max_path_length: int = 3
    n_solutions: int = 10
    n_jobs: int = 1

    def resolve_paths(self, base_dir: Path | None = None) -> "SearchConfig":
        """
        Return a copy of this config with all paths resolved (absolute).
        If base_dir is provided, relative paths are interpreted relative to it.
        """
        base_dir = Path(base_dir) if base_dir is not None else Path(".")

        def _resolve(path: Optional[Path]) -> Optional[Path]:
            return (base_dir / path).resolve() if path is not None else None

        return replace(
            self,
            interactions_tsv=_resolve(self.interactions_tsv),
            drugs_tsv=_resolve(self.drugs_tsv),
            disease_essential_tsv=_resolve(self.disease_essential_tsv),
            healthy_essential_tsv=_resolve(self.healthy_essential_tsv),
            output_json=_resolve(self.output_json),
        )

    def validate(self) -> None:
        """Raise ValueError if the configuration cannot describe a valid run."""
        if self.disease_essential_tsv is None and self.healthy_essential_tsv is None:
            raise ValueError("No file containing the essential proteins has been provided.")
        if not self.initial:
            raise ValueError("No initial drug has been provided.")
        if self.max_path_length < 1:
            raise ValueError("The maximum path length must be a positive integer.")
        if self.n_solutions < 1:
            raise ValueError("The number of solutions must be a positive integer.")
        if self.n_jobs < 1:
            raise ValueError("The number of jobs must be a positive integer.")

    def default_output_path(
        self,
        drug_name: str,
        target_name: str,
        now: datetime | None = None,
    ) -> Path:
        """
        Output file placed next to the interactions file, named after the
        initial drug, its target and a timestamp.
        """
        now = now if now is not None else datetime.now()
        filename = f"{drug_name}_{target_name}_{now:%Y%m%d%H%M%S}.json".replace(" ", "")
        return Path(self.interactions_tsv).resolve().parent / filename
