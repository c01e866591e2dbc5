"""Issuer-level debt and ratings rollup.

Aggregates bond records into one row per issuer (outstanding face,
weighted-average maturity, upcoming redemptions) and attaches the
issuer's agency ratings on the unified scale.

Formulas:
    years_to_maturity = (maturity_date - as_of) / 365.25 days
    wam_years = sum(face * max(ytm, 0)) / sum(face)
    next_12m = sum(face where ytm <= 1 year)
    dispersion = max(score) - min(score) over available agencies
"""

import logging
from typing import Any

import numpy as np
import pandas as pd

from ..data.ingest import parse_dates, valuation_date
from .normalize import UNAVAILABLE, display_mark, normalize_rating, rating_score

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365.25

# Absorbs floating error for bonds maturing exactly one year out
NEXT_12M_HORIZON_YEARS = 1.0001

AGENCIES = ("moodys", "sp", "fitch")

ROLLUP_COLUMNS = [
    "issuer",
    "moodys",
    "sp",
    "fitch",
    "moodys_u",
    "sp_u",
    "fitch_u",
    "avg_score",
    "dispersion",
    "total_face",
    "wam_years",
    "next_12m",
]


def years_between(start: pd.Timestamp, end: pd.Series | pd.Timestamp) -> pd.Series | float:
    """Calendar years from ``start`` to ``end`` using 365.25-day years."""
    return (end - start) / pd.Timedelta(days=DAYS_PER_YEAR)


def _column(df: pd.DataFrame, name: str) -> pd.Series:
    if name in df.columns:
        return df[name]
    return pd.Series(np.nan, index=df.index)


def _ratings_lookup(ratings: pd.DataFrame | None) -> dict[str, dict[str, Any]]:
    """Map issuer -> first wide rating record."""
    if ratings is None or len(ratings) == 0:
        return {}

    lookup: dict[str, dict[str, Any]] = {}
    for record in ratings.to_dict("records"):
        issuer = record.get("issuer_ticker")
        if issuer is None or pd.isna(issuer):
            issuer = record.get("issuer")
        if issuer is None or pd.isna(issuer):
            continue
        lookup.setdefault(str(issuer), record)
    return lookup


def rating_summary(record: dict[str, Any]) -> dict[str, Any]:
    """
    Normalize one issuer's agency marks and score them.

    Parameters
    ----------
    record : dict[str, Any]
        Wide rating record with optional ``moodys``, ``sp`` and
        ``fitch`` keys.

    Returns
    -------
    dict[str, Any]
        Raw and unified marks per agency, ``avg_score`` and
        ``dispersion``. Scores are NaN when no agency reports.

    Notes
    -----
    A single reporting agency yields ``dispersion == 0`` while no
    reporting agency yields NaN.
    """
    out: dict[str, Any] = {}
    scores = []
    for agency in AGENCIES:
        raw = record.get(agency)
        unified = normalize_rating(raw)
        out[agency] = display_mark(raw)
        out[f"{agency}_u"] = unified if unified is not None else UNAVAILABLE
        score = rating_score(unified)
        if score is not None:
            scores.append(score)

    if scores:
        out["avg_score"] = float(np.mean(scores))
        out["dispersion"] = float(max(scores) - min(scores))
    else:
        out["avg_score"] = np.nan
        out["dispersion"] = np.nan
    return out


def summarize_debt_by_issuer(
    bonds: pd.DataFrame,
    ratings: pd.DataFrame | None = None,
    as_of: pd.Timestamp | str | None = None,
) -> pd.DataFrame:
    """
    Roll bond records up to one row per issuer.

    Parameters
    ----------
    bonds : pd.DataFrame
        Bond records with ``issuer_ticker``, ``face_value`` and
        ``maturity_date`` columns.
    ratings : pd.DataFrame | None
        Wide rating records keyed by ``issuer_ticker`` (or ``issuer``).
    as_of : pd.Timestamp | str | None
        Valuation date. Defaults to now. Timezone-aware dates and
        maturities are compared in UTC.

    Returns
    -------
    pd.DataFrame
        One row per issuer in first-appearance order, columns
        ROLLUP_COLUMNS.

    Examples
    --------
    >>> rollup = summarize_debt_by_issuer(bonds, ratings, as_of="2025-01-01")
    >>> rollup.loc[0, ["issuer", "total_face", "next_12m"]].tolist()
    ['AAPL', 1500000000.0, 0.0]
    """
    if bonds is None or len(bonds) == 0 or "issuer_ticker" not in bonds.columns:
        return pd.DataFrame(columns=ROLLUP_COLUMNS)

    now = valuation_date(as_of)

    df = bonds[bonds["issuer_ticker"].notna() & (bonds["issuer_ticker"].astype(str) != "")]
    if len(df) == 0:
        return pd.DataFrame(columns=ROLLUP_COLUMNS)

    face = pd.to_numeric(_column(df, "face_value"), errors="coerce").fillna(0.0)
    maturity = parse_dates(_column(df, "maturity_date"))
    ytm = years_between(now, maturity)

    # Unparseable maturities count toward total face only
    work = pd.DataFrame({
        "issuer": df["issuer_ticker"].astype(str),
        "face": face,
        "weighted": face * ytm.clip(lower=0).fillna(0.0),
        "due": face.where(ytm <= NEXT_12M_HORIZON_YEARS, 0.0),
    })

    grouped = work.groupby("issuer", sort=False).agg(
        total_face=("face", "sum"),
        weighted=("weighted", "sum"),
        due=("due", "sum"),
    )

    lookup = _ratings_lookup(ratings)
    rows = []
    for issuer, agg in grouped.iterrows():
        row: dict[str, Any] = {"issuer": issuer}
        row.update(rating_summary(lookup.get(issuer, {})))
        total = float(agg["total_face"])
        row["total_face"] = total
        row["wam_years"] = float(agg["weighted"]) / total if total else 0.0
        row["next_12m"] = float(agg["due"])
        rows.append(row)

    result = pd.DataFrame(rows, columns=ROLLUP_COLUMNS)
    logger.info(f"Rolled up {len(df)} bonds into {len(result)} issuers")

    return result


def rank_by_credit_quality(rollup: pd.DataFrame) -> pd.DataFrame:
    """
    Sort a rollup from strongest to weakest average rating.

    Unrated issuers (NaN ``avg_score``) sort last.
    """
    return rollup.sort_values("avg_score", ascending=True, na_position="last", kind="stable").reset_index(drop=True)
