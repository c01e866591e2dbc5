"""Tests for rating normalization module."""

import json
from pathlib import Path

import numpy as np
import pytest

from mktgraph.ratings.normalize import (
    MOODYS_TO_SP,
    RATING_ORDER,
    UNAVAILABLE,
    display_mark,
    normalize_rating,
    rating_score,
)

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


class TestNormalizeRating:
    """Tests for normalize_rating function."""

    def test_moodys_mapped(self) -> None:
        """Test Moody's grades map onto the S&P scale."""
        assert normalize_rating("Aa2") == "AA"
        assert normalize_rating("Baa3") == "BBB-"
        assert normalize_rating("Ca") == "CC"

    def test_sp_passthrough_upper_cased(self) -> None:
        """Test S&P-style marks are returned upper-cased."""
        assert normalize_rating("bbb+") == "BBB+"
        assert normalize_rating("AA-") == "AA-"

    def test_idempotent(self) -> None:
        """Test normalizing a unified mark returns it unchanged."""
        for mark in RATING_ORDER:
            assert normalize_rating(mark) == mark
            assert normalize_rating(normalize_rating(mark.lower())) == mark

    def test_every_moodys_grade_lands_on_scale(self) -> None:
        """Test the Moody's table only targets symbols on the scale."""
        for moodys, unified in MOODYS_TO_SP.items():
            assert normalize_rating(moodys) == unified
            assert unified in RATING_ORDER

    def test_lower_case_moodys(self) -> None:
        """Test a lower-cased first letter is accepted for Moody's."""
        assert normalize_rating("caa1") == "CCC+"
        assert normalize_rating("b1") == "B+"

    def test_unknown_is_none(self) -> None:
        """Test unrecognized marks yield None rather than raising."""
        assert normalize_rating("NR") is None
        assert normalize_rating("WD") is None

    def test_missing_is_none(self) -> None:
        """Test None, NaN and blank input yield None."""
        assert normalize_rating(None) is None
        assert normalize_rating(np.nan) is None
        assert normalize_rating("   ") is None


class TestRatingScore:
    """Tests for rating_score function."""

    def test_best_and_worst(self) -> None:
        """Test AAA scores 1 and D is the worst score."""
        assert rating_score("AAA") == 1
        assert rating_score("D") == len(RATING_ORDER)

    def test_case_insensitive(self) -> None:
        """Test score lookup ignores case."""
        assert rating_score("bbb-") == rating_score("BBB-") == 10

    def test_none_propagates(self) -> None:
        """Test a missing mark has no score."""
        assert rating_score(None) is None
        assert rating_score(np.nan) is None

    def test_moodys_not_scored_directly(self) -> None:
        """Test only unified marks are scored."""
        assert rating_score("Baa2") is None

    def test_monotonic(self) -> None:
        """Test scores increase down the scale."""
        scores = [rating_score(m) for m in RATING_ORDER]
        assert scores == sorted(scores)
        assert len(set(scores)) == len(scores)


class TestDisplayMark:
    """Tests for display_mark function."""

    def test_missing_uses_sentinel(self) -> None:
        """Test missing marks render as UNAVAILABLE."""
        assert display_mark(None) == UNAVAILABLE
        assert display_mark(np.nan) == UNAVAILABLE
        assert display_mark("") == UNAVAILABLE

    def test_sentinel_not_a_grade(self) -> None:
        """Test the sentinel cannot be mistaken for a grade."""
        assert normalize_rating(UNAVAILABLE) is None

    def test_present_mark_kept_verbatim(self) -> None:
        """Test provided marks are shown as given."""
        assert display_mark(" Aa1 ") == "Aa1"


class TestRatingFixtures:
    """Golden rating cases."""

    @pytest.fixture
    def rating_cases(self) -> dict:
        """Load rating fixture cases."""
        with open(FIXTURES_DIR / "rating_cases.json") as f:
            return json.load(f)

    def test_all_rating_fixture_cases(self, rating_cases) -> None:
        """Test normalize_rating and rating_score against golden cases."""
        for case in rating_cases["cases"]:
            unified = normalize_rating(case["input"])
            assert unified == case["unified"], case["input"]
            assert rating_score(unified) == case["score"], case["input"]
