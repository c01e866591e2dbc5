"""Ratings package - rating normalization and issuer debt rollups.

Public API:
- normalize_rating: Map Moody's / S&P / Fitch marks to the unified scale
- rating_score: Ordinal score of a unified mark (1 = AAA)
- summarize_debt_by_issuer: Per-issuer debt and ratings rollup
- rank_by_credit_quality: Sort a rollup by average rating score
"""

from .normalize import RATING_ORDER, MOODYS_TO_SP, UNAVAILABLE, normalize_rating, rating_score
from .rollup import ROLLUP_COLUMNS, summarize_debt_by_issuer, rank_by_credit_quality, rating_summary

__all__ = [
    "RATING_ORDER",
    "MOODYS_TO_SP",
    "UNAVAILABLE",
    "normalize_rating",
    "rating_score",
    "ROLLUP_COLUMNS",
    "summarize_debt_by_issuer",
    "rank_by_credit_quality",
    "rating_summary",
]
