from __future__ import annotations

"""Data validation utilities.

This module provides functions to validate data quality for the
bond, deal and edge datasets before they enter the pipeline. Reports
are returned rather than raised so a caller can show them next to the
loaded data.
"""

import logging
from dataclasses import dataclass

import pandas as pd

from ..ratings.normalize import normalize_rating
from .ingest import parse_dates, split_bookrunners

logger = logging.getLogger(__name__)

NODE_TYPES = {"Company", "Bank", "Debt", "Person", "Institution"}


@dataclass
class ValidationResult:
    """Result of a validation check."""

    is_valid: bool
    errors: list[str]
    warnings: list[str]
    stats: dict[str, int | float]


def _check_required(
    df: pd.DataFrame,
    required_columns: list[str],
    errors: list[str],
    warnings: list[str],
    stats: dict[str, int | float],
) -> None:
    missing_cols = set(required_columns) - set(df.columns)
    if missing_cols:
        errors.append(f"Missing required columns: {sorted(missing_cols)}")

    for col in required_columns:
        if col in df.columns:
            null_count = int(df[col].isna().sum())
            stats[f"null_{col}"] = null_count
            if null_count > 0:
                warnings.append(f"Column '{col}' has {null_count} null values")


def _result(dataset: str, df: pd.DataFrame, errors, warnings, stats) -> ValidationResult:
    logger.info(f"Validated {len(df)} {dataset}: {len(errors)} errors, {len(warnings)} warnings")
    return ValidationResult(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
        stats=stats,
    )


def validate_bonds(
    df: pd.DataFrame,
    required_columns: list[str] | None = None,
) -> ValidationResult:
    """
    Validate bond records.

    Parameters
    ----------
    df : pd.DataFrame
        Bond data to validate.
    required_columns : list[str] | None
        Required columns. Defaults to id, issuer_ticker, face_value
        and maturity_date.

    Returns
    -------
    ValidationResult
        Validation result with errors, warnings, and stats.

    Examples
    --------
    >>> result = validate_bonds(bonds)
    >>> result.is_valid
    True
    >>> result.stats["total_rows"]
    2
    """
    if required_columns is None:
        required_columns = ["id", "issuer_ticker", "face_value", "maturity_date"]

    errors: list[str] = []
    warnings: list[str] = []
    stats: dict[str, int | float] = {"total_rows": len(df)}

    _check_required(df, required_columns, errors, warnings, stats)

    if len(df) == 0:
        warnings.append("DataFrame is empty")
        return _result("bonds", df, errors, warnings, stats)

    if "id" in df.columns:
        duplicates = int(df["id"].duplicated().sum())
        stats["duplicate_ids"] = duplicates
        if duplicates > 0:
            warnings.append(f"Found {duplicates} duplicate bond ids")

    if "face_value" in df.columns:
        face = pd.to_numeric(df["face_value"], errors="coerce")
        negative = int((face < 0).sum())
        stats["negative_face_value"] = negative
        if negative > 0:
            errors.append(f"Found {negative} negative face values")

    if "maturity_date" in df.columns:
        maturity = parse_dates(df["maturity_date"])
        bad_dates = int((maturity.isna() & df["maturity_date"].notna()).sum())
        stats["invalid_maturity_dates"] = bad_dates
        if bad_dates > 0:
            warnings.append(f"Found {bad_dates} unparseable maturity dates")

    if "rating" in df.columns:
        marks = df["rating"].dropna()
        unknown = int(marks.map(lambda m: normalize_rating(m) is None).sum())
        stats["unknown_ratings"] = unknown
        if unknown > 0:
            warnings.append(f"Found {unknown} unrecognized rating symbols")

    return _result("bonds", df, errors, warnings, stats)


def validate_deals(
    df: pd.DataFrame,
    required_columns: list[str] | None = None,
) -> ValidationResult:
    """
    Validate deal records.

    Parameters
    ----------
    df : pd.DataFrame
        Deal data to validate.
    required_columns : list[str] | None
        Required columns. Defaults to company_a, company_b and
        value_usd.

    Returns
    -------
    ValidationResult
        Validation result with errors, warnings, and stats.
    """
    if required_columns is None:
        required_columns = ["company_a", "company_b", "value_usd"]

    errors: list[str] = []
    warnings: list[str] = []
    stats: dict[str, int | float] = {"total_rows": len(df)}

    _check_required(df, required_columns, errors, warnings, stats)

    if len(df) == 0:
        warnings.append("DataFrame is empty")
        return _result("deals", df, errors, warnings, stats)

    if "value_usd" in df.columns:
        value = pd.to_numeric(df["value_usd"], errors="coerce")
        negative = int((value < 0).sum())
        stats["negative_value"] = negative
        if negative > 0:
            errors.append(f"Found {negative} negative deal values")

    if "bookrunners" in df.columns:
        no_banks = int(df["bookrunners"].map(lambda b: len(split_bookrunners(b)) == 0).sum())
        stats["deals_without_bookrunners"] = no_banks
        if no_banks > 0:
            warnings.append(f"Found {no_banks} deals without bookrunners")

    if {"company_a", "company_b"} <= set(df.columns):
        self_deals = int((df["company_a"] == df["company_b"]).sum())
        stats["self_deals"] = self_deals
        if self_deals > 0:
            warnings.append(f"Found {self_deals} deals where both parties are the same")

    return _result("deals", df, errors, warnings, stats)


def validate_graph(nodes: pd.DataFrame, edges: pd.DataFrame) -> ValidationResult:
    """
    Validate entity nodes and edges together.

    Duplicate node ids and dangling edges are warnings: the unifier
    keeps the first id and consumers drop dangling edges.
    """
    errors: list[str] = []
    warnings: list[str] = []
    stats: dict[str, int | float] = {"total_nodes": len(nodes), "total_edges": len(edges)}

    _check_required(nodes, ["id", "label", "type"], errors, warnings, stats)
    _check_required(edges, ["source", "target"], errors, warnings, stats)

    if "id" in nodes.columns:
        duplicates = int(nodes["id"].duplicated().sum())
        stats["duplicate_ids"] = duplicates
        if duplicates > 0:
            warnings.append(f"Found {duplicates} duplicate node ids")

    if "type" in nodes.columns:
        unknown = int((~nodes["type"].isin(NODE_TYPES)).sum())
        stats["unknown_node_types"] = unknown
        if unknown > 0:
            warnings.append(f"Found {unknown} nodes with unknown type")

    if {"source", "target"} <= set(edges.columns) and "id" in nodes.columns:
        known = set(nodes["id"])
        dangling = int((~edges["source"].isin(known) | ~edges["target"].isin(known)).sum())
        stats["dangling_edges"] = dangling
        if dangling > 0:
            warnings.append(f"Found {dangling} edges referencing unknown nodes")

    if "weight" in edges.columns:
        weight = pd.to_numeric(edges["weight"], errors="coerce")
        non_positive = int((weight <= 0).sum())
        stats["non_positive_weights"] = non_positive
        if non_positive > 0:
            errors.append(f"Found {non_positive} non-positive edge weights")

    return _result("graph rows", nodes, errors, warnings, stats)
