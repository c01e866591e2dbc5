"""Graph unification.

Merges entity nodes/edges with nodes and edges derived from bonds
(Debt nodes) and deals (deal edges, Bank nodes, bookrunner edges),
then applies per-relationship-type weight multipliers.

Weight bands:
    DEBT_SECURITY edges: face value rescaled into [0.5, 2.0]
    DEAL and DEAL|BOOKRUNNER edges: deal value rescaled into [0.5, 2.5]
"""

import logging
from dataclasses import dataclass
from typing import Mapping

import numpy as np
import pandas as pd

from ..data.ingest import NODE_COLUMNS, EDGE_COLUMNS, as_frame, split_bookrunners

logger = logging.getLogger(__name__)

DEBT_WEIGHT_BAND = (0.5, 2.0)
DEAL_WEIGHT_BAND = (0.5, 2.5)

TYPE_SEP = "|"

EDGE_TYPES = [
    "MENTION",
    "STRATEGIC_PARTNER",
    "SUPPLIER",
    "GEO_PROXIMITY",
    "NEWS_CO_MENTION",
    "MARKET_ACTIVITY",
    "DEAL",
    "DEBT_SECURITY",
    "CREDIT_RATING",
    "BOOKRUNNER",
]


@dataclass
class UnifiedGraph:
    """Node and edge frames of one unified snapshot.

    Attributes
    ----------
    nodes : pd.DataFrame
        Unique node ids with ``label``, ``type`` and attribute columns.
    edges : pd.DataFrame
        ``source``, ``target``, ``type``, ``weight`` plus extra columns.
        Weights are post multiplier scaling.
    """

    nodes: pd.DataFrame
    edges: pd.DataFrame

    @property
    def n_nodes(self) -> int:
        return len(self.nodes)

    @property
    def n_edges(self) -> int:
        return len(self.edges)


def minmax_scale(values: pd.Series, low: float, high: float) -> pd.Series:
    """
    Linearly rescale values into the band [low, high].

    Parameters
    ----------
    values : pd.Series
        Non-negative amounts (face values, deal values).
    low, high : float
        Target band.

    Returns
    -------
    pd.Series
        Rescaled values, same index.

    Notes
    -----
    The range is anchored at ``min(values, 0)`` and ``max(values, 1)``
    and the denominator is clamped to at least 1, so a single value
    or all-equal values never divide by zero.
    """
    if len(values) == 0:
        return pd.Series(dtype=float, index=values.index)

    vals = values.astype(float)
    lo = min(float(vals.min()), 0.0)
    hi = max(float(vals.max()), 1.0)
    span = max(hi - lo, 1.0)

    return low + (high - low) * ((vals - lo) / span)


def _amounts(df: pd.DataFrame, col: str) -> pd.Series:
    if col not in df.columns:
        return pd.Series(0.0, index=df.index)
    return pd.to_numeric(df[col], errors="coerce").fillna(0.0)


def _bond_node_id(bond_id) -> str:
    bid = "" if bond_id is None or (isinstance(bond_id, float) and np.isnan(bond_id)) else str(bond_id)
    return bid if bid.startswith("BOND:") else f"BOND:{bid}"


def derive_debt_nodes_and_edges(bonds: pd.DataFrame) -> tuple[pd.DataFrame, pd.DataFrame]:
    """
    Derive one Debt node and one issuer->debt edge per bond.

    Parameters
    ----------
    bonds : pd.DataFrame
        Bond records.

    Returns
    -------
    tuple[pd.DataFrame, pd.DataFrame]
        ``(debt_nodes, debt_edges)``. Edges run from
        ``COMP:<issuer_ticker>`` to the ``BOND:`` id with type
        ``DEBT_SECURITY``.
    """
    bonds = as_frame(bonds, ["id", "issuer_ticker", "label", "rating"])
    if len(bonds) == 0:
        return pd.DataFrame(columns=NODE_COLUMNS), pd.DataFrame(columns=EDGE_COLUMNS)

    face = _amounts(bonds, "face_value")
    ids = bonds["id"].map(_bond_node_id)
    raw_ids = bonds["id"].map(lambda v: "" if pd.isna(v) else str(v))
    labels = bonds["label"].where(bonds["label"].notna() & (bonds["label"].astype(str) != ""), raw_ids)

    nodes = pd.DataFrame({
        "id": ids,
        "label": labels,
        "type": "Debt",
        "face_value": face,
        "rating": bonds["rating"].where(bonds["rating"].notna(), None),
    })

    edges = pd.DataFrame({
        "source": "COMP:" + bonds["issuer_ticker"].astype(str),
        "target": ids,
        "type": "DEBT_SECURITY",
        "weight": minmax_scale(face, *DEBT_WEIGHT_BAND),
    })

    return nodes, edges


def derive_deal_edges(deals: pd.DataFrame) -> pd.DataFrame:
    """
    Derive one company-company edge per deal.

    The edge type is ``DEAL|<DEAL_TYPE>`` with the deal type upper-cased
    (``GENERIC`` when blank).
    """
    deals = as_frame(deals, ["company_a", "company_b", "deal_type", "announced_date", "notes"])
    if len(deals) == 0:
        return pd.DataFrame(columns=EDGE_COLUMNS)

    value = _amounts(deals, "value_usd")
    deal_type = deals["deal_type"].map(
        lambda t: "GENERIC" if t is None or pd.isna(t) or str(t) == "" else str(t).upper()
    )

    return pd.DataFrame({
        "source": deals["company_a"],
        "target": deals["company_b"],
        "type": "DEAL" + TYPE_SEP + deal_type,
        "weight": minmax_scale(value, *DEAL_WEIGHT_BAND),
        "announced_date": deals["announced_date"],
        "value_usd": value,
        "notes": deals["notes"].fillna(""),
    })


def derive_bank_nodes_and_edges(deals: pd.DataFrame) -> tuple[pd.DataFrame, pd.DataFrame]:
    """
    Derive Bank nodes and bookrunner edges from deal bookrunner lists.

    Each bookrunner gets one ``BANK:<name>`` node and one
    ``DEAL|BOOKRUNNER`` edge to each deal participant, weighted with the
    deal's rescaled value.
    """
    deals = as_frame(deals, ["company_a", "company_b", "bookrunners"])
    if len(deals) == 0:
        return pd.DataFrame(columns=NODE_COLUMNS), pd.DataFrame(columns=EDGE_COLUMNS)

    weights = minmax_scale(_amounts(deals, "value_usd"), *DEAL_WEIGHT_BAND)

    bank_nodes: dict[str, dict] = {}
    bank_edges = []
    for idx, deal in deals.iterrows():
        ends = [e for e in (deal["company_a"], deal["company_b"]) if e is not None and not pd.isna(e) and e != ""]
        for bank in split_bookrunners(deal["bookrunners"]):
            bank_id = f"BANK:{bank}"
            bank_nodes.setdefault(bank_id, {"id": bank_id, "label": bank, "type": "Bank"})
            for end in ends:
                bank_edges.append({
                    "source": bank_id,
                    "target": end,
                    "type": "DEAL" + TYPE_SEP + "BOOKRUNNER",
                    "weight": float(weights[idx]),
                })

    return (
        pd.DataFrame(list(bank_nodes.values()), columns=NODE_COLUMNS),
        pd.DataFrame(bank_edges, columns=EDGE_COLUMNS),
    )


def merge_nodes(*frames: pd.DataFrame) -> pd.DataFrame:
    """Concatenate node frames, keeping the first occurrence of each id."""
    frames = [f for f in frames if f is not None and len(f) > 0]
    if not frames:
        return pd.DataFrame(columns=NODE_COLUMNS)

    merged = pd.concat(frames, ignore_index=True, sort=False)
    n_before = len(merged)
    merged = merged.drop_duplicates(subset="id", keep="first").reset_index(drop=True)

    if len(merged) < n_before:
        logger.debug(f"Dropped {n_before - len(merged)} duplicate node ids")

    return merged


def type_multiplier(edge_type, multipliers: Mapping[str, float]) -> float:
    """
    Product of the multipliers for every subtype tag of an edge type.

    Examples
    --------
    >>> type_multiplier("MENTION|STRATEGIC_PARTNER", {"MENTION": 2, "STRATEGIC_PARTNER": 1.5})
    3.0
    >>> type_multiplier("SUPPLIER", {})
    1.0
    """
    factor = 1.0
    for tag in str(edge_type).split(TYPE_SEP):
        factor *= float(multipliers.get(tag, 1.0))
    return factor


def scale_edges_by_multipliers(edges: pd.DataFrame, multipliers: Mapping[str, float] | None = None) -> pd.DataFrame:
    """
    Scale edge weights by their relationship-type multipliers.

    Parameters
    ----------
    edges : pd.DataFrame
        Edges with ``type`` and ``weight``.
    multipliers : Mapping[str, float] | None
        Per-subtype factor. Unlisted subtypes use 1.

    Returns
    -------
    pd.DataFrame
        New frame; missing raw weights count as 1.
    """
    multipliers = multipliers or {}
    out = as_frame(edges, EDGE_COLUMNS)
    if len(out) == 0:
        return out

    raw = pd.to_numeric(out["weight"], errors="coerce").fillna(1.0)
    factors = out["type"].map(lambda t: type_multiplier(t, multipliers))
    out["weight"] = (raw * factors).astype(float)

    return out


def unify_graph(
    entity_nodes: pd.DataFrame | None,
    entity_edges: pd.DataFrame | None,
    bonds: pd.DataFrame | None,
    deals: pd.DataFrame | None,
    multipliers: Mapping[str, float] | None = None,
) -> UnifiedGraph:
    """
    Build the unified weighted graph for one snapshot.

    Parameters
    ----------
    entity_nodes : pd.DataFrame | None
        Company / Person / Institution nodes.
    entity_edges : pd.DataFrame | None
        Relationship edges between entities.
    bonds : pd.DataFrame | None
        Bond records (Debt nodes and DEBT_SECURITY edges).
    deals : pd.DataFrame | None
        Deal records (DEAL edges, Bank nodes, bookrunner edges).
    multipliers : Mapping[str, float] | None
        Relationship-type weight multipliers.

    Returns
    -------
    UnifiedGraph
        Nodes (entities, then debt, then banks; first id wins) and
        scaled edges (entity, debt, deal, bookrunner order).

    Examples
    --------
    >>> g = unify_graph(nodes, edges, bonds, deals, {"DEAL": 1.5, "BOOKRUNNER": 1.6})
    >>> g.edges.loc[g.edges["type"] == "DEAL|BOOKRUNNER", "weight"].max()
    6.0
    """
    debt_nodes, debt_edges = derive_debt_nodes_and_edges(as_frame(bonds))
    deal_edges = derive_deal_edges(as_frame(deals))
    bank_nodes, bank_edges = derive_bank_nodes_and_edges(as_frame(deals))

    nodes = merge_nodes(as_frame(entity_nodes, NODE_COLUMNS), debt_nodes, bank_nodes)

    edge_frames = [f for f in (as_frame(entity_edges), debt_edges, deal_edges, bank_edges) if len(f) > 0]
    if edge_frames:
        combined = pd.concat(edge_frames, ignore_index=True, sort=False)
    else:
        combined = pd.DataFrame(columns=EDGE_COLUMNS)

    edges = scale_edges_by_multipliers(combined, multipliers)

    logger.info(
        f"Unified graph: {len(nodes)} nodes, {len(edges)} edges "
        f"({len(debt_edges)} debt, {len(deal_edges)} deal, {len(bank_edges)} bookrunner)"
    )

    return UnifiedGraph(nodes=nodes, edges=edges)
