from __future__ import annotations

"""Ingestion boundary for raw dataset rows.

Raw rows arrive loosely typed (optional fields, numbers as strings,
bookrunners as free text). The functions here drop rows missing key
fields and coerce the rest so the analytics packages can assume
validated input.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Iterable

import pandas as pd

logger = logging.getLogger(__name__)

NODE_COLUMNS = ["id", "label", "type"]
EDGE_COLUMNS = ["source", "target", "type", "weight"]
BOND_COLUMNS = [
    "id",
    "issuer_ticker",
    "label",
    "face_value",
    "coupon",
    "issue_date",
    "maturity_date",
    "rating",
]
RATING_COLUMNS = ["issuer_ticker", "moodys", "sp", "fitch"]
DEAL_COLUMNS = [
    "company_a",
    "company_b",
    "deal_type",
    "announced_date",
    "value_usd",
    "notes",
    "bookrunners",
]

_BOOKRUNNER_SEP = re.compile(r"[;,]")


def as_frame(rows: pd.DataFrame | Iterable[dict[str, Any]] | None, columns: list[str] | None = None) -> pd.DataFrame:
    """
    Coerce records into a DataFrame.

    Parameters
    ----------
    rows : pd.DataFrame | Iterable[dict] | None
        Records or an existing DataFrame (copied).
    columns : list[str] | None
        Columns guaranteed to exist on the result.

    Returns
    -------
    pd.DataFrame
        New DataFrame with a RangeIndex.
    """
    if rows is None:
        df = pd.DataFrame()
    elif isinstance(rows, pd.DataFrame):
        df = rows.copy()
    else:
        df = pd.DataFrame(list(rows))

    for col in columns or []:
        if col not in df.columns:
            df[col] = None

    return df.reset_index(drop=True)


def _present(series: pd.Series) -> pd.Series:
    """Mask of non-null, non-blank values."""
    return series.notna() & (series.astype(str).str.strip() != "")


def split_bookrunners(value: Any) -> list[str]:
    """
    Split a bookrunner field into bank names.

    Parameters
    ----------
    value : Any
        ``"JPMorgan; Goldman Sachs"``, a list of names, or missing.

    Returns
    -------
    list[str]
        Trimmed, non-empty names in listed order.

    Examples
    --------
    >>> split_bookrunners("JPMorgan; Goldman Sachs,  ,Citi")
    ['JPMorgan', 'Goldman Sachs', 'Citi']
    >>> split_bookrunners(None)
    []
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        names = [str(v).strip() for v in value if v is not None]
        return [n for n in names if n]
    if pd.isna(value):
        return []
    return [n.strip() for n in _BOOKRUNNER_SEP.split(str(value)) if n.strip()]


def to_naive_utc(ts: Any) -> pd.Timestamp:
    """Timestamp in UTC with the timezone dropped; naive input is kept as is."""
    ts = pd.Timestamp(ts)
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts


def valuation_date(as_of: Any = None) -> pd.Timestamp:
    """Naive-UTC valuation date, defaulting to now."""
    if as_of is None:
        return pd.Timestamp.now(tz="UTC").tz_localize(None)
    return to_naive_utc(as_of)


def parse_dates(values: pd.Series) -> pd.Series:
    """
    Parse a column of dates into naive-UTC timestamps.

    Each value is parsed on its own, so one column may mix formats
    (``"2025-06-01"``, ``"06/01/2025"``, ``"2025-06-01T00:00:00Z"``).
    Offsets are converted to UTC. Unparseable values become NaT.

    Examples
    --------
    >>> parse_dates(pd.Series(["2025-06-01", "06/01/2025", "soon"])).tolist()
    [Timestamp('2025-06-01 00:00:00'), Timestamp('2025-06-01 00:00:00'), NaT]
    """
    raw = values.astype(object).where(values.notna(), None)
    parsed = pd.to_datetime(raw, errors="coerce", format="mixed", utc=True)
    return parsed.dt.tz_localize(None)


def _drop_incomplete(df: pd.DataFrame, required: list[str], dataset: str) -> pd.DataFrame:
    mask = pd.Series(True, index=df.index)
    for col in required:
        mask &= _present(df[col])

    dropped = int((~mask).sum())
    if dropped:
        logger.warning(f"Dropped {dropped} {dataset} rows missing {required}")

    return df[mask].reset_index(drop=True)


def clean_nodes(rows) -> pd.DataFrame:
    """Keep node rows with an id, label and type."""
    df = as_frame(rows, NODE_COLUMNS)
    df = _drop_incomplete(df, ["id", "label", "type"], "node")
    df["id"] = df["id"].astype(str)
    return df


def clean_edges(rows) -> pd.DataFrame:
    """
    Keep edge rows with both endpoints and default the weight.

    Missing, zero or unparseable weights become 1.
    """
    df = as_frame(rows, EDGE_COLUMNS)
    df = _drop_incomplete(df, ["source", "target"], "edge")
    weight = pd.to_numeric(df["weight"], errors="coerce")
    df["weight"] = weight.where(weight.notna() & (weight != 0), 1.0).astype(float)
    df["type"] = df["type"].fillna("").astype(str)
    return df


def clean_bonds(rows) -> pd.DataFrame:
    """Keep bond rows with an id, issuer and maturity; coerce numbers."""
    df = as_frame(rows, BOND_COLUMNS)
    df = _drop_incomplete(df, ["id", "issuer_ticker", "maturity_date"], "bond")
    df["face_value"] = pd.to_numeric(df["face_value"], errors="coerce").fillna(0.0)
    df["coupon"] = pd.to_numeric(df["coupon"], errors="coerce").fillna(0.0)
    return df


def clean_deals(rows) -> pd.DataFrame:
    """Keep deal rows with both participants; split bookrunners into lists."""
    df = as_frame(rows, DEAL_COLUMNS)
    df = _drop_incomplete(df, ["company_a", "company_b"], "deal")
    df["value_usd"] = pd.to_numeric(df["value_usd"], errors="coerce").fillna(0.0)
    df["bookrunners"] = df["bookrunners"].map(split_bookrunners)
    return df


def _first_present(record: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None and not pd.isna(value) and str(value).strip():
            return value
    return None


def _agency_field(agency: Any) -> str | None:
    name = str(agency).strip().lower()
    if "mood" in name:
        return "moodys"
    if "s&p" in name or name == "sp" or "standard" in name:
        return "sp"
    if "fitch" in name:
        return "fitch"
    return None


def ratings_to_wide(rows) -> pd.DataFrame:
    """
    Pivot long per-agency rating rows into one wide row per issuer.

    Parameters
    ----------
    rows : pd.DataFrame | Iterable[dict]
        Rows with ``issuer_ticker`` (or ``issuer``), ``agency`` and
        ``rating`` columns. Capitalized ``Agency`` / ``Rating`` are
        accepted.

    Returns
    -------
    pd.DataFrame
        Columns RATING_COLUMNS, issuers in first-appearance order.
        A later row for the same issuer and agency overwrites an
        earlier one.

    Examples
    --------
    >>> long = [{"issuer": "AAPL", "agency": "Moody's", "rating": "Aa1"},
    ...         {"issuer": "AAPL", "agency": "S&P", "rating": "AA+"}]
    >>> ratings_to_wide(long).iloc[0].tolist()
    ['AAPL', 'Aa1', 'AA+', None]
    """
    df = as_frame(rows)
    wide: dict[str, dict[str, Any]] = {}

    for record in df.to_dict("records"):
        issuer = _first_present(record, "issuer_ticker", "issuer")
        if issuer is None:
            continue
        agency = _first_present(record, "agency", "Agency")
        rating = _first_present(record, "rating", "Rating")
        entry = wide.setdefault(str(issuer), {"issuer_ticker": str(issuer), "moodys": None, "sp": None, "fitch": None})
        field = _agency_field(agency)
        if field is not None:
            entry[field] = rating

    return pd.DataFrame(list(wide.values()), columns=RATING_COLUMNS)


def clean_ratings(rows) -> pd.DataFrame:
    """
    Normalize rating rows into the wide shape.

    Long input (an ``agency`` column) is pivoted with
    ratings_to_wide. Wide input keeps rows with an issuer and at
    least one agency mark.
    """
    df = as_frame(rows)
    if len(df) == 0:
        return pd.DataFrame(columns=RATING_COLUMNS)

    if "agency" in df.columns or "Agency" in df.columns:
        return ratings_to_wide(df)

    df = as_frame(df, RATING_COLUMNS + ["issuer"])
    df["issuer_ticker"] = df["issuer_ticker"].where(_present(df["issuer_ticker"]), df["issuer"])
    has_mark = _present(df["moodys"]) | _present(df["sp"]) | _present(df["fitch"])
    keep = _present(df["issuer_ticker"]) & has_mark

    dropped = int((~keep).sum())
    if dropped:
        logger.warning(f"Dropped {dropped} rating rows without issuer or marks")

    return df.loc[keep, RATING_COLUMNS].reset_index(drop=True)


@dataclass(frozen=True)
class MarketSnapshot:
    """Immutable bundle of the five input datasets."""

    nodes: pd.DataFrame
    edges: pd.DataFrame
    bonds: pd.DataFrame
    ratings: pd.DataFrame
    deals: pd.DataFrame


def clean_snapshot(nodes=None, edges=None, bonds=None, ratings=None, deals=None) -> MarketSnapshot:
    """
    Clean all five datasets into a snapshot.

    Parameters
    ----------
    nodes, edges, bonds, ratings, deals
        Raw rows (DataFrame or records). Missing datasets become
        empty frames. Ratings may be wide or long.

    Returns
    -------
    MarketSnapshot
        Cleaned, independent copies of the inputs.
    """
    snapshot = MarketSnapshot(
        nodes=clean_nodes(nodes),
        edges=clean_edges(edges),
        bonds=clean_bonds(bonds),
        ratings=clean_ratings(ratings),
        deals=clean_deals(deals),
    )

    logger.info(
        f"Ingested snapshot: {len(snapshot.nodes)} nodes, {len(snapshot.edges)} edges, "
        f"{len(snapshot.bonds)} bonds, {len(snapshot.ratings)} ratings, {len(snapshot.deals)} deals"
    )

    return snapshot
