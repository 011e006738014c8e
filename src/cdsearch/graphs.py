# src/cdsearch/graphs.py

from __future__ import annotations

from typing import List, Tuple

import networkx as nx
import numpy as np
from scipy import sparse

from .data_models import Interaction, Protein


def build_interaction_graph(
    proteins: List[Protein],
    interactions: List[Interaction],
) -> nx.DiGraph:
    """
    Build a directed, signed interaction graph.

    Nodes
    -----
    protein index, with attributes 'name', 'is_disease_essential'
    and 'is_healthy_essential'.

    Edges
    -----
    (source, target) with attributes 'adjacency' (always 1) and
    'direction' (-1, 0 or 1). A repeated (source, target) pair overwrites
    the attributes of the earlier one.

    Parameters
    ----------
    proteins : list[Protein]
        All proteins of the network, indexed 0..N-1.
    interactions : list[Interaction]
        Interaction records.

    Returns
    -------
    networkx.DiGraph
    """
    G = nx.DiGraph()
    for p in proteins:
        G.add_node(
            p.index,
            name=p.name,
            is_disease_essential=p.is_disease_essential,
            is_healthy_essential=p.is_healthy_essential,
        )
    for inter in interactions:
        G.add_edge(inter.source, inter.target, adjacency=1, direction=inter.direction)
    return G


def graph_to_matrices(G: nx.DiGraph) -> Tuple[sparse.csr_matrix, sparse.csr_matrix]:
    """
    Export the adjacency and direction matrices of an interaction graph.

    Rows and columns follow node order 0..N-1, so entry [i, j] describes
    the edge i -> j.
    """
    nodelist = list(range(G.number_of_nodes()))
    adjacency = nx.to_scipy_sparse_array(
        G, nodelist=nodelist, weight="adjacency", dtype=np.float64, format="csr"
    )
    direction = nx.to_scipy_sparse_array(
        G, nodelist=nodelist, weight="direction", dtype=np.float64, format="csr"
    )
    return sparse.csr_matrix(adjacency), sparse.csr_matrix(direction)


def build_network_matrices(
    proteins: List[Protein],
    interactions: List[Interaction],
) -> Tuple[sparse.csr_matrix, sparse.csr_matrix]:
    """
    Build the base adjacency and direction matrices of the network.

    Parameters
    ----------
    proteins : list[Protein]
    interactions : list[Interaction]

    Returns
    -------
    adjacency_base : scipy.sparse.csr_matrix
        N x N, 1 where a direct edge exists.
    direction_base : scipy.sparse.csr_matrix
        N x N, the sign of the edge at the same position.
    """
    return graph_to_matrices(build_interaction_graph(proteins, interactions))
