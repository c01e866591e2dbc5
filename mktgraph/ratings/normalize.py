from __future__ import annotations

"""Cross-agency rating normalization.

This module maps agency-native rating symbols onto the common
S&P/Fitch ordinal scale so that Moody's, S&P and Fitch marks for
the same issuer can be compared and averaged.
"""

import logging
from typing import Any

import pandas as pd

logger = logging.getLogger(__name__)

# Standard rating order from highest to lowest
RATING_ORDER = [
    "AAA",
    "AA+",
    "AA",
    "AA-",
    "A+",
    "A",
    "A-",
    "BBB+",
    "BBB",
    "BBB-",  # IG/HY boundary
    "BB+",
    "BB",
    "BB-",
    "B+",
    "B",
    "B-",
    "CCC+",
    "CCC",
    "CCC-",
    "CC",
    "C",
    "D",
]

MOODYS_TO_SP = {
    "Aaa": "AAA",
    "Aa1": "AA+",
    "Aa2": "AA",
    "Aa3": "AA-",
    "A1": "A+",
    "A2": "A",
    "A3": "A-",
    "Baa1": "BBB+",
    "Baa2": "BBB",
    "Baa3": "BBB-",
    "Ba1": "BB+",
    "Ba2": "BB",
    "Ba3": "BB-",
    "B1": "B+",
    "B2": "B",
    "B3": "B-",
    "Caa1": "CCC+",
    "Caa2": "CCC",
    "Caa3": "CCC-",
    "Ca": "CC",
    "C": "C",
    "D": "D",
}

# Rendered in place of a missing mark, never a valid grade
UNAVAILABLE = "N/A"

_RATING_INDEX = {mark: i for i, mark in enumerate(RATING_ORDER)}


def _is_missing(mark: Any) -> bool:
    if mark is None:
        return True
    if isinstance(mark, (list, tuple, dict, set)):
        return False
    try:
        return bool(pd.isna(mark))
    except (TypeError, ValueError):
        return False


def normalize_rating(mark: Any) -> str | None:
    """
    Translate an agency rating onto the unified S&P-style scale.

    Parameters
    ----------
    mark : Any
        Agency-native rating, e.g. ``"Baa2"``, ``"bbb"`` or ``"BBB"``.

    Returns
    -------
    str | None
        Unified mark (upper case), or None when the input is
        missing or not a recognized symbol.

    Examples
    --------
    >>> normalize_rating("Aa2")
    'AA'
    >>> normalize_rating("bbb-")
    'BBB-'
    >>> normalize_rating("junk") is None
    True

    Notes
    -----
    S&P-style symbols are checked first, so ``"C"`` and ``"D"``
    pass through unchanged. Normalizing a unified mark again
    returns it unchanged.
    """
    if _is_missing(mark):
        return None

    text = str(mark).strip()
    if not text:
        return None

    if text.upper() in _RATING_INDEX:
        return text.upper()

    unified = MOODYS_TO_SP.get(text)
    if unified is None:
        unified = MOODYS_TO_SP.get(text[:1].upper() + text[1:])
    return unified


def rating_score(mark: Any) -> int | None:
    """
    Ordinal score of a unified mark.

    Parameters
    ----------
    mark : Any
        Unified mark (case-insensitive).

    Returns
    -------
    int | None
        1 for ``AAA``, increasing toward ``D``. None when the mark
        is missing or not on the scale.

    Examples
    --------
    >>> rating_score("AAA")
    1
    >>> rating_score("bbb-")
    10
    """
    if _is_missing(mark):
        return None
    idx = _RATING_INDEX.get(str(mark).strip().upper())
    return None if idx is None else idx + 1


def display_mark(mark: Any) -> str:
    """Return the mark as text, or the UNAVAILABLE sentinel."""
    if _is_missing(mark) or not str(mark).strip():
        return UNAVAILABLE
    return str(mark).strip()
