from __future__ import annotations

"""Bookrunner league table.

Every bookrunner listed on a deal is credited with the full deal
value and one deal (no pro-rata split across co-leads):

    total(bank) = sum(value_usd for deals listing bank)
    deals(bank) = count(deals listing bank)
    avg(bank) = total / deals
"""

import logging

import pandas as pd

from ..data.ingest import as_frame, split_bookrunners

logger = logging.getLogger(__name__)

LEAGUE_COLUMNS = ["bank", "deals", "total", "avg"]

RANK_MODES = ("value", "count")


def compute_league_table(deals: pd.DataFrame) -> pd.DataFrame:
    """
    Aggregate deals by credited bookrunner.

    Parameters
    ----------
    deals : pd.DataFrame
        Deal records with ``value_usd`` and ``bookrunners`` (free text
        or list).

    Returns
    -------
    pd.DataFrame
        Columns LEAGUE_COLUMNS, banks in first-appearance order.

    Examples
    --------
    >>> deals = pd.DataFrame({"value_usd": [100, 200], "bookrunners": ["X;Y", "X"]})
    >>> compute_league_table(deals).set_index("bank").loc["X", ["deals", "total"]].tolist()
    [2, 300.0]
    """
    deals = as_frame(deals, ["value_usd", "bookrunners"])
    if len(deals) == 0:
        return pd.DataFrame(columns=LEAGUE_COLUMNS)

    credits = pd.DataFrame({
        "bank": deals["bookrunners"].map(split_bookrunners),
        "value": pd.to_numeric(deals["value_usd"], errors="coerce").fillna(0.0),
    }).explode("bank")
    credits = credits[credits["bank"].notna()]

    if len(credits) == 0:
        return pd.DataFrame(columns=LEAGUE_COLUMNS)

    table = credits.groupby("bank", sort=False).agg(
        deals=("value", "size"),
        total=("value", "sum"),
    ).reset_index()
    table["total"] = table["total"].astype(float)
    table["avg"] = table["total"] / table["deals"]

    logger.info(f"League table: {len(table)} banks from {len(deals)} deals")

    return table[LEAGUE_COLUMNS]


def rank_league(
    table: pd.DataFrame,
    by: str = "value",
    top_n: int | None = None,
) -> pd.DataFrame:
    """
    Sort a league table and attach rank and market share.

    Parameters
    ----------
    table : pd.DataFrame
        Output of compute_league_table.
    by : str, default "value"
        ``"value"`` sorts by total then deals; ``"count"`` by deals
        then total. Both descending.
    top_n : int | None
        Keep only the first N rows.

    Returns
    -------
    pd.DataFrame
        LEAGUE_COLUMNS plus ``rank`` (1-based) and ``share`` (bank
        total over the whole table's total; NaN when that is zero).

    Raises
    ------
    ValueError
        If ``by`` is not a supported mode.
    """
    if by not in RANK_MODES:
        raise ValueError(f"Unknown ranking mode '{by}', expected one of {RANK_MODES}")

    keys = ["total", "deals"] if by == "value" else ["deals", "total"]
    ranked = table.sort_values(keys, ascending=False, kind="stable").reset_index(drop=True)

    grand_total = float(table["total"].sum()) if len(table) else 0.0
    ranked["share"] = ranked["total"] / grand_total if grand_total else float("nan")
    ranked.insert(0, "rank", range(1, len(ranked) + 1))

    if top_n is not None:
        ranked = ranked.head(top_n)

    return ranked


def top_bank_share(table: pd.DataFrame) -> tuple[str, float] | None:
    """
    Leading bank by total and its share of all credited value.

    Returns None for an empty table. A zero grand total is treated
    as 1 so the share is 0.
    """
    if len(table) == 0:
        return None

    grand_total = float(table["total"].sum()) or 1.0
    top = table.sort_values("total", ascending=False, kind="stable").iloc[0]

    return str(top["bank"]), float(top["total"]) / grand_total
