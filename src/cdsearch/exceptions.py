"""
Exception hierarchy for the complement drug search.

All errors raised on purpose by the package derive from
ComplementSearchError, so callers can catch them with a single clause.
"""

from typing import Any, Dict, Optional


class ComplementSearchError(Exception):
    """
    Base exception for all complement drug search errors.

    Parameters
    ----------
    message : str
        Human-readable error message.
    details : dict, optional
        Additional context (file names, counts, drug names).
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class InputDataError(ComplementSearchError):
    """Input files are missing, unreadable, or yield no usable records."""
    pass


class InitialDrugNotFound(ComplementSearchError):
    """The initial drug matches neither a drug name nor a drug-target name."""
    pass


class NoEssentialProteinsInSubgraph(ComplementSearchError):
    """No essential protein is reachable from the initial drug target."""
    pass


class NoDrugsInExtendedSubgraph(ComplementSearchError):
    """No drug target can reach the essential proteins of the subgraph."""
    pass
