"""Weighted degree centrality.

Weighted degree of a node is the sum of the (post-scaling) weights of
its incident edges:

    degree(v) = sum(w_e for e incident to v)

Self-loops contribute twice. Edge endpoints missing from the node set
are ignored for that endpoint only.
"""

import logging

import pandas as pd

logger = logging.getLogger(__name__)


def weighted_degree(nodes: pd.DataFrame, edges: pd.DataFrame) -> pd.Series:
    """
    Compute weighted degree per node.

    Parameters
    ----------
    nodes : pd.DataFrame
        Nodes with an ``id`` column.
    edges : pd.DataFrame
        Edges with ``source``, ``target`` and ``weight`` columns.
        Missing weights count as 1.

    Returns
    -------
    pd.Series
        Float degree indexed by node id (node order), named
        ``weighted_degree``. Isolated nodes are 0.

    Examples
    --------
    >>> nodes = pd.DataFrame({"id": ["A", "B"]})
    >>> edges = pd.DataFrame({"source": ["A"], "target": ["B"], "weight": [2.0]})
    >>> weighted_degree(nodes, edges).to_dict()
    {'A': 2.0, 'B': 2.0}
    """
    ids = pd.Index(nodes["id"].unique()) if "id" in nodes.columns else pd.Index([])
    degree = pd.Series(0.0, index=ids, name="weighted_degree")

    if edges is None or len(edges) == 0 or len(ids) == 0:
        return degree

    if "weight" in edges.columns:
        weight = pd.to_numeric(edges["weight"], errors="coerce").fillna(1.0)
    else:
        weight = pd.Series(1.0, index=edges.index)

    for end in ("source", "target"):
        if end not in edges.columns:
            continue
        per_node = weight.groupby(edges[end]).sum()
        degree = degree.add(per_node.reindex(ids, fill_value=0.0), fill_value=0.0)

    degree.name = "weighted_degree"
    return degree


def top_by_degree(nodes: pd.DataFrame, degree: pd.Series, n: int = 5) -> pd.DataFrame:
    """
    Rank the most connected nodes.

    Parameters
    ----------
    nodes : pd.DataFrame
        Nodes with ``id``, ``label`` and ``type``.
    degree : pd.Series
        Output of weighted_degree.
    n : int, default 5
        Number of nodes to keep.

    Returns
    -------
    pd.DataFrame
        ``id``, ``label``, ``type``, ``score`` sorted by score
        descending (ties keep node order).
    """
    cols = [c for c in ("id", "label", "type") if c in nodes.columns]
    ranked = nodes[cols].drop_duplicates(subset="id").copy()
    ranked["score"] = ranked["id"].map(degree).fillna(0.0)
    ranked = ranked.sort_values("score", ascending=False, kind="stable").head(n)

    logger.debug(f"Top {len(ranked)} nodes by weighted degree")

    return ranked.reset_index(drop=True)
