"""Graph view filtering and summary statistics."""

import logging
from dataclasses import dataclass, field

import pandas as pd

from .unify import UnifiedGraph

logger = logging.getLogger(__name__)

# Relationship families kept in deal-focus mode
DEAL_FOCUS_TYPES = ("DEAL", "SUPPLIER", "STRATEGIC_PARTNER", "BOOKRUNNER")


@dataclass
class GraphView:
    """Graph view options.

    Parameters
    ----------
    include_persons : bool, default False
        Keep Person nodes.
    include_banks : bool, default True
        Keep Bank nodes.
    focus_deals : bool, default True
        Keep only deal, supplier, partnership and bookrunner edges.
    exclude_types : list[str]
        Edges whose type contains any of these tags are dropped.
    """

    include_persons: bool = False
    include_banks: bool = True
    focus_deals: bool = True
    exclude_types: list[str] = field(default_factory=lambda: ["BOARD_ROLE"])


def _type_contains(types: pd.Series, tags) -> pd.Series:
    text = types.astype(str)
    mask = pd.Series(False, index=types.index)
    for tag in tags:
        mask |= text.str.contains(tag, regex=False)
    return mask


def filter_graph(graph: UnifiedGraph, view: GraphView | None = None) -> UnifiedGraph:
    """
    Apply view options to a unified graph.

    Parameters
    ----------
    graph : UnifiedGraph
        Unified snapshot.
    view : GraphView | None
        Options. Defaults to GraphView().

    Returns
    -------
    UnifiedGraph
        New graph. Edges are kept only when both endpoints survive
        the node filter, so the result has no dangling edges.
    """
    view = view or GraphView()
    nodes = graph.nodes
    edges = graph.edges

    if len(nodes) > 0 and "type" in nodes.columns:
        if not view.include_persons:
            nodes = nodes[nodes["type"] != "Person"]
        if not view.include_banks:
            nodes = nodes[nodes["type"] != "Bank"]

    if len(edges) > 0:
        kept = set(nodes["id"]) if "id" in nodes.columns else set()
        mask = edges["source"].isin(kept) & edges["target"].isin(kept)
        if view.exclude_types:
            mask &= ~_type_contains(edges["type"], view.exclude_types)
        if view.focus_deals:
            mask &= _type_contains(edges["type"], DEAL_FOCUS_TYPES)
        edges = edges[mask]

    logger.info(
        f"Filtered graph to {len(nodes)} nodes (from {len(graph.nodes)}), "
        f"{len(edges)} edges (from {len(graph.edges)})"
    )

    return UnifiedGraph(nodes=nodes.reset_index(drop=True), edges=edges.reset_index(drop=True))


def graph_stats(graph: UnifiedGraph) -> dict[str, float]:
    """
    Headline counts for a graph.

    Returns
    -------
    dict[str, float]
        ``nodes``, ``edges``, ``total_weight``, ``deal_links`` and
        ``banks``.
    """
    edges = graph.edges
    nodes = graph.nodes

    if len(edges) > 0:
        total_weight = float(pd.to_numeric(edges["weight"], errors="coerce").fillna(0.0).sum())
        deal_links = int(_type_contains(edges["type"], ["DEAL"]).sum())
    else:
        total_weight = 0.0
        deal_links = 0

    banks = int((nodes["type"] == "Bank").sum()) if "type" in nodes.columns else 0

    return {
        "nodes": len(nodes),
        "edges": len(edges),
        "total_weight": total_weight,
        "deal_links": deal_links,
        "banks": banks,
    }
