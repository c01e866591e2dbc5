"""Data package - ingestion boundary and configuration.

This is the ONLY package that reads files or cleans raw rows. All
other packages receive cleaned DataFrames from this package.

Public API:
- load_config: Load YAML configuration files
- clean_snapshot: Clean all five datasets into a MarketSnapshot
- clean_nodes, clean_edges, clean_bonds, clean_ratings, clean_deals
- ratings_to_wide: Pivot long per-agency ratings to wide rows
- split_bookrunners: Split a bookrunner field into bank names
- parse_dates, valuation_date: Naive-UTC date handling
- validate_bonds, validate_deals, validate_graph: Data quality reports
- sample_snapshot: Built-in demo datasets
"""

from .config import load_config, get_nested, parse_multipliers
from .ingest import (
    MarketSnapshot,
    as_frame,
    clean_snapshot,
    clean_nodes,
    clean_edges,
    clean_bonds,
    clean_ratings,
    clean_deals,
    ratings_to_wide,
    split_bookrunners,
    parse_dates,
    valuation_date,
)
from .validation import ValidationResult, validate_bonds, validate_deals, validate_graph
from .sample import sample_snapshot

__all__ = [
    "load_config",
    "get_nested",
    "parse_multipliers",
    "MarketSnapshot",
    "as_frame",
    "clean_snapshot",
    "clean_nodes",
    "clean_edges",
    "clean_bonds",
    "clean_ratings",
    "clean_deals",
    "ratings_to_wide",
    "split_bookrunners",
    "parse_dates",
    "valuation_date",
    "ValidationResult",
    "validate_bonds",
    "validate_deals",
    "validate_graph",
    "sample_snapshot",
]
