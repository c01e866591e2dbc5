"""Graph package - unified relationship graph and centrality.

Public API:
- unify_graph: Merge entity, debt, deal and bank data into one graph
- scale_edges_by_multipliers: Apply relationship-type weight multipliers
- weighted_degree: Weighted degree per node
- top_by_degree: Most connected nodes
- filter_graph: Apply view options (node types, deal focus)
- graph_stats: Headline graph counts
"""

from .unify import (
    UnifiedGraph,
    EDGE_TYPES,
    unify_graph,
    scale_edges_by_multipliers,
    derive_debt_nodes_and_edges,
    derive_deal_edges,
    derive_bank_nodes_and_edges,
    merge_nodes,
    minmax_scale,
)
from .centrality import weighted_degree, top_by_degree
from .view import GraphView, filter_graph, graph_stats

__all__ = [
    # Unification
    "UnifiedGraph",
    "EDGE_TYPES",
    "unify_graph",
    "scale_edges_by_multipliers",
    "derive_debt_nodes_and_edges",
    "derive_deal_edges",
    "derive_bank_nodes_and_edges",
    "merge_nodes",
    "minmax_scale",
    # Centrality
    "weighted_degree",
    "top_by_degree",
    # Views
    "GraphView",
    "filter_graph",
    "graph_stats",
]
