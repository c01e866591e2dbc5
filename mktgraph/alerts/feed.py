"""Market Pulse news-style feed.

Turns deals, news co-mentions, upcoming redemptions, rating
dispersion and external news items into one feed, newest first.
Unlike the alert engine the feed is not threshold-configurable.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import pandas as pd

from ..data.ingest import as_frame, parse_dates, valuation_date
from ..ratings.rollup import summarize_debt_by_issuer
from .engine import REDEMPTION_HIGH_FLOOR_USD, format_usd

logger = logging.getLogger(__name__)

MAX_FEED_ITEMS = 20

FEED_DISPERSION_MIN = 2


@dataclass(frozen=True)
class FeedItem:
    """One feed entry."""

    ts: pd.Timestamp
    tone: str
    kind: str
    text: str
    url: str | None = None
    summary: str | None = None


def extract_ticker(node_id: Any) -> str | None:
    """``"COMP:AAPL"`` -> ``"AAPL"``; ids without a namespace pass through."""
    if node_id is None or (not isinstance(node_id, str) and pd.isna(node_id)) or node_id == "":
        return None
    parts = str(node_id).split(":")
    return parts[1] if len(parts) > 1 else str(node_id)


def _timestamp(value: Any, default: pd.Timestamp) -> pd.Timestamp:
    # Feed timestamps are naive UTC
    ts = parse_dates(pd.Series([value], dtype=object)).iloc[0]
    return default if pd.isna(ts) else ts


def _deal_text(deal: Mapping[str, Any]) -> str:
    text = f"Deal: {extract_ticker(deal.get('company_a'))} ↔ {extract_ticker(deal.get('company_b'))}"
    deal_type = deal.get("deal_type")
    if deal_type is not None and not pd.isna(deal_type) and deal_type != "":
        text += f" ({str(deal_type).replace('_', ' ')})"
    value = deal.get("value_usd")
    if value is not None and not pd.isna(value) and float(value):
        text += f" · {format_usd(value)}"
    return text


def build_pulse_feed(
    edges: pd.DataFrame | None,
    bonds: pd.DataFrame | None,
    ratings: pd.DataFrame | None,
    deals: pd.DataFrame | None,
    news: Iterable[Mapping[str, Any]] | None = None,
    as_of: pd.Timestamp | str | None = None,
) -> list[FeedItem]:
    """
    Build the pulse feed for one snapshot.

    Parameters
    ----------
    edges : pd.DataFrame | None
        Graph edges; NEWS_CO_MENTION edges become Headlines items.
    bonds, ratings : pd.DataFrame | None
        Debt rollup inputs; issuers with anything due in 12 months
        become Redemption items, dispersion >= 2 Ratings items.
    deals : pd.DataFrame | None
        Each deal becomes a Deal item stamped with its announce date.
    news : Iterable[Mapping] | None
        External items with ``title``, ``url``, ``summary``, ``tone``
        and ``ts`` keys.
    as_of : pd.Timestamp | str | None
        Timestamp for undated items. Defaults to now.

    Returns
    -------
    list[FeedItem]
        Newest first (stable for equal timestamps), at most
        MAX_FEED_ITEMS.
    """
    now = valuation_date(as_of)
    items: list[FeedItem] = []

    for deal in as_frame(deals).to_dict("records"):
        items.append(FeedItem(
            ts=_timestamp(deal.get("announced_date"), now),
            tone="low",
            kind="Deal",
            text=_deal_text(deal),
        ))

    edges = as_frame(edges, ["source", "target", "type"])
    mentions = edges[edges["type"].astype(str).str.contains("NEWS_CO_MENTION", regex=False)]
    for row in mentions.itertuples(index=False):
        items.append(FeedItem(
            ts=now,
            tone="low",
            kind="Headlines",
            text=f"Headlines: {extract_ticker(row.source)} ↔ {extract_ticker(row.target)}",
        ))

    rollup = summarize_debt_by_issuer(as_frame(bonds), ratings, as_of=now)
    for row in rollup.itertuples(index=False):
        if pd.notna(row.next_12m) and row.next_12m > 0:
            items.append(FeedItem(
                ts=now,
                tone="high" if row.next_12m >= REDEMPTION_HIGH_FLOOR_USD else "med",
                kind="Redemption",
                text=f"Redemption: {row.issuer} {format_usd(row.next_12m)} in next 12m",
            ))
    for row in rollup.itertuples(index=False):
        if pd.notna(row.dispersion) and row.dispersion >= FEED_DISPERSION_MIN:
            items.append(FeedItem(
                ts=now,
                tone="med",
                kind="Ratings",
                text=f"Ratings dispersion: {row.issuer}",
            ))

    for entry in news or []:
        items.append(FeedItem(
            ts=_timestamp(entry.get("ts"), now),
            tone=entry.get("tone") or "low",
            kind="News",
            text=entry.get("title") or "News item",
            url=entry.get("url"),
            summary=entry.get("summary"),
        ))

    items.sort(key=lambda item: item.ts, reverse=True)
    logger.info(f"Pulse feed: {len(items)} items, showing {min(len(items), MAX_FEED_ITEMS)}")

    return items[:MAX_FEED_ITEMS]
