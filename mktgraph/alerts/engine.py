"""Alert engine.

Scans one snapshot (graph, debt rollups, league table) against the
AlertConfig thresholds. Rules run in a fixed order and each appends
zero or more alerts:

1. Redemption Watch: next_12m >= redeem_min_usd
   high if next_12m >= max(1e9, 2 * redeem_min_usd)
2. Market Pulse: MARKET_ACTIVITY weight per ticker >= pulse_weight,
   top 3 by weight; high if weight >= 1.5 * pulse_weight
3. Ratings Dispersion: dispersion >= disp_min; high if >= disp_min + 1
4. Headlines: NEWS_CO_MENTION edges with weight >= news_weight (low)
5. Bookrunner Dominance (share >= bank_dom, high) or
   Bookrunner Skew (share >= bank_skew, med)

The combined list is truncated to MAX_ALERTS in generation order.
"""

import logging
import math

import pandas as pd

from ..league.table import compute_league_table, top_bank_share
from ..ratings.rollup import summarize_debt_by_issuer
from .types import MAX_ALERTS, Alert, AlertConfig

logger = logging.getLogger(__name__)

REDEMPTION_HIGH_FLOOR_USD = 1_000_000_000

PULSE_TOP_N = 3


def format_usd(amount) -> str:
    """
    Format an amount as whole US dollars.

    Examples
    --------
    >>> format_usd(1_500_000_000)
    '$1,500,000,000'
    >>> format_usd(None)
    'N/A'
    """
    if amount is None:
        return "N/A"
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return "N/A"
    if math.isnan(value):
        return "N/A"
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(round(value)):,}"


def ticker_of(node_id) -> str | None:
    """Segment after the namespace colon, e.g. ``"COMP:AAPL"`` -> ``"AAPL"``."""
    parts = str(node_id if node_id is not None else "").split(":")
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1]


def _edge_weights(edges: pd.DataFrame) -> pd.Series:
    weight = pd.to_numeric(edges["weight"], errors="coerce")
    # Zero or missing weights count as 1
    return weight.where(weight.notna() & (weight != 0), 1.0)


def _edges_of_type(edges: pd.DataFrame | None, tag: str) -> pd.DataFrame:
    if edges is None or len(edges) == 0 or "type" not in edges.columns:
        return pd.DataFrame(columns=["source", "target", "type", "weight"])
    mask = edges["type"].astype(str).str.contains(tag, regex=False)
    out = edges[mask].copy()
    if "weight" not in out.columns:
        out["weight"] = 1.0
    out["weight"] = _edge_weights(out)
    return out


def redemption_alerts(rollup: pd.DataFrame, config: AlertConfig) -> list[Alert]:
    """Issuers with large face value maturing in the next 12 months."""
    alerts = []
    if len(rollup) == 0:
        return alerts

    high_floor = max(REDEMPTION_HIGH_FLOOR_USD, config.redeem_min_usd * 2)
    for row in rollup.itertuples(index=False):
        due = 0.0 if pd.isna(row.next_12m) else float(row.next_12m)
        if due < config.redeem_min_usd:
            continue
        alerts.append(Alert(
            type="Redemption Watch",
            severity="high" if due >= high_floor else "med",
            entity=str(row.issuer),
            message=f"{row.issuer}: {format_usd(due)} due in {config.redeem_next_months}m",
        ))
    return alerts


def market_pulse_alerts(edges: pd.DataFrame, config: AlertConfig) -> list[Alert]:
    """
    Tickers with concentrated MARKET_ACTIVITY.

    Each activity edge credits its weight to the ticker of both
    endpoints. Tickers at or above ``pulse_weight`` are ranked by
    weight (ties keep first-seen order) and the top 3 are reported.
    """
    activity = _edges_of_type(edges, "MARKET_ACTIVITY")
    if len(activity) == 0:
        return []

    stats: dict[str, dict[str, float]] = {}
    for row in activity.itertuples(index=False):
        for node_id in (row.source, row.target):
            tick = ticker_of(node_id)
            if tick is None:
                continue
            entry = stats.setdefault(tick, {"count": 0, "weight": 0.0})
            entry["count"] += 1
            entry["weight"] += float(row.weight)

    hot = [(tick, s) for tick, s in stats.items() if s["weight"] >= config.pulse_weight]
    hot.sort(key=lambda item: item[1]["weight"], reverse=True)

    return [
        Alert(
            type="Market Pulse",
            severity="high" if s["weight"] >= config.pulse_weight * 1.5 else "med",
            entity=tick,
            message=f"{tick}: activity up",
        )
        for tick, s in hot[:PULSE_TOP_N]
    ]


def dispersion_alerts(rollup: pd.DataFrame, config: AlertConfig) -> list[Alert]:
    """Issuers whose agency ratings disagree by at least ``disp_min`` notches."""
    alerts = []
    if len(rollup) == 0:
        return alerts

    for row in rollup.itertuples(index=False):
        # Unrated issuers count as zero dispersion
        disp = 0.0 if pd.isna(row.dispersion) else float(row.dispersion)
        if disp < config.disp_min:
            continue
        alerts.append(Alert(
            type="Ratings Dispersion",
            severity="high" if disp >= config.disp_min + 1 else "med",
            entity=str(row.issuer),
            message="Agency disagreement",
        ))
    return alerts


def headline_alerts(
    edges: pd.DataFrame,
    config: AlertConfig,
    nodes: pd.DataFrame | None = None,
) -> list[Alert]:
    """
    Strong news co-mentions.

    Node labels, when available, are used in the message text.
    """
    mentions = _edges_of_type(edges, "NEWS_CO_MENTION")
    if len(mentions) == 0:
        return []

    labels = {}
    if nodes is not None and len(nodes) > 0 and {"id", "label"} <= set(nodes.columns):
        labels = dict(zip(nodes["id"], nodes["label"]))

    alerts = []
    for row in mentions.itertuples(index=False):
        if float(row.weight) < config.news_weight:
            continue
        source, target = str(row.source), str(row.target)
        alerts.append(Alert(
            type="Headlines",
            severity="low",
            entity=f"{source}↔{target}",
            message=f"Co-mention: {labels.get(source, source)} / {labels.get(target, target)}",
        ))
    return alerts


def bookrunner_alerts(league: pd.DataFrame, config: AlertConfig) -> list[Alert]:
    """At most one alert on the leading bank's share of credited value."""
    leader = top_bank_share(league)
    if leader is None:
        return []

    bank, share = leader
    if share >= config.bank_dom:
        return [Alert(
            type="Bookrunner Dominance",
            severity="high",
            entity=bank,
            message=f"Share {share * 100:.1f}%",
        )]
    if share >= config.bank_skew:
        return [Alert(
            type="Bookrunner Skew",
            severity="med",
            entity=bank,
            message=f"Leads {share * 100:.1f}%",
        )]
    return []


def scan_alerts(
    nodes: pd.DataFrame | None,
    edges: pd.DataFrame | None,
    bonds: pd.DataFrame | None,
    ratings: pd.DataFrame | None,
    deals: pd.DataFrame | None,
    config: AlertConfig | None = None,
    as_of: pd.Timestamp | str | None = None,
) -> list[Alert]:
    """
    Run every alert rule over one snapshot.

    Parameters
    ----------
    nodes, edges : pd.DataFrame | None
        Graph to scan (post-scaling weights).
    bonds, ratings : pd.DataFrame | None
        Inputs for the debt rollup.
    deals : pd.DataFrame | None
        Inputs for the league table.
    config : AlertConfig | None
        Thresholds. Defaults to AlertConfig().
    as_of : pd.Timestamp | str | None
        Valuation date for the debt rollup. Defaults to now.

    Returns
    -------
    list[Alert]
        At most MAX_ALERTS alerts in rule order.

    Examples
    --------
    >>> snap = sample_snapshot()
    >>> alerts = scan_alerts(snap.nodes, snap.edges, snap.bonds, snap.ratings, snap.deals)
    >>> [(a.type, a.entity) for a in alerts]
    [('Bookrunner Skew', 'JPMorgan')]
    """
    config = config or AlertConfig()
    empty = pd.DataFrame()

    rollup = summarize_debt_by_issuer(bonds if bonds is not None else empty, ratings, as_of=as_of)
    league = compute_league_table(deals if deals is not None else empty)

    alerts: list[Alert] = []
    alerts += redemption_alerts(rollup, config)
    alerts += market_pulse_alerts(edges, config)
    alerts += dispersion_alerts(rollup, config)
    alerts += headline_alerts(edges, config, nodes)
    alerts += bookrunner_alerts(league, config)

    n_total = len(alerts)
    alerts = alerts[:MAX_ALERTS]

    logger.info(f"Alert scan: {n_total} alerts raised, {len(alerts)} reported")

    return alerts
