"""
Signed walk propagation over bounded path lengths.

The k-th power of the adjacency matrix counts the walks of exactly k edges
between two proteins, and the k-th power of the direction matrix sums the
product of edge signs over those same walks. Both are kept as literal
counts: comparing |direction| against the walk count tells whether all
walks of a given length agree in sign, which boolean reachability cannot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

import numpy as np
from scipy import sparse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathMatrices:
    """
    Matrix powers 0..L of the adjacency and direction matrices.

    Attributes
    ----------
    adjacency : list[scipy.sparse.csr_matrix]
        adjacency[k][i, j] = number of walks of exactly k edges from i to j.
    direction : list[scipy.sparse.csr_matrix]
        direction[k][i, j] = sum over those walks of the product of edge signs.
    """
    adjacency: List[sparse.csr_matrix]
    direction: List[sparse.csr_matrix]

    @property
    def max_path_length(self) -> int:
        return len(self.adjacency) - 1

    @property
    def n_proteins(self) -> int:
        return self.adjacency[0].shape[0]

    def walk_counts(self, source: int, target: int) -> np.ndarray:
        """Walk counts from source to target for every length 0..L."""
        return np.array([m[source, target] for m in self.adjacency], dtype=np.float64)

    def signed_walk_sums(self, source: int, target: int) -> np.ndarray:
        """Signed walk sums from source to target for every length 0..L."""
        return np.array([m[source, target] for m in self.direction], dtype=np.float64)


def compute_path_matrices(
    adjacency_base: sparse.spmatrix,
    direction_base: sparse.spmatrix,
    max_path_length: int,
) -> PathMatrices:
    """
    Compute successive powers of the adjacency and direction matrices.

    Each power is obtained from the previous one with a single sparse
    multiplication, so the cost is L multiplications per sequence.

    Parameters
    ----------
    adjacency_base : scipy.sparse matrix
        N x N adjacency matrix (1 where an edge exists).
    direction_base : scipy.sparse matrix
        N x N direction matrix (edge sign).
    max_path_length : int
        Maximum walk length L (positive).

    Returns
    -------
    PathMatrices
        Sequences of length L + 1; index 0 holds identity matrices.
    """
    if max_path_length < 1:
        raise ValueError(f"max_path_length must be a positive integer, got {max_path_length}")
    if adjacency_base.shape != direction_base.shape:
        raise ValueError(
            f"Adjacency and direction matrices differ in shape: "
            f"{adjacency_base.shape} vs {direction_base.shape}"
        )
    n_rows, n_cols = adjacency_base.shape
    if n_rows != n_cols:
        raise ValueError(f"Network matrices must be square, got {adjacency_base.shape}")

    adjacency_base = sparse.csr_matrix(adjacency_base, dtype=np.float64)
    direction_base = sparse.csr_matrix(direction_base, dtype=np.float64)

    identity = sparse.identity(n_rows, dtype=np.float64, format="csr")
    adjacency = [identity]
    direction = [identity.copy()]
    for k in range(1, max_path_length + 1):
        adjacency.append(sparse.csr_matrix(adjacency[-1] @ adjacency_base))
        direction.append(sparse.csr_matrix(direction[-1] @ direction_base))
        logger.debug(
            "Path length %d: %d non-zero walk counts", k, adjacency[-1].count_nonzero()
        )

    return PathMatrices(adjacency=adjacency, direction=direction)
