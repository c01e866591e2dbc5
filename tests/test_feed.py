"""Tests for the pulse feed."""

import pandas as pd

from mktgraph.alerts.feed import MAX_FEED_ITEMS, build_pulse_feed, extract_ticker
from mktgraph.data.sample import sample_snapshot

AS_OF = pd.Timestamp("2025-01-01")


class TestExtractTicker:
    """Tests for extract_ticker function."""

    def test_namespaced(self) -> None:
        assert extract_ticker("COMP:AAPL") == "AAPL"

    def test_plain_id_passes_through(self) -> None:
        assert extract_ticker("AAPL") == "AAPL"

    def test_missing(self) -> None:
        assert extract_ticker(None) is None
        assert extract_ticker("") is None


class TestBuildPulseFeed:
    """Tests for build_pulse_feed function."""

    def test_sample_feed(self) -> None:
        """Test sample items are sorted newest first."""
        snap = sample_snapshot()
        feed = build_pulse_feed(snap.edges, snap.bonds, snap.ratings, snap.deals, as_of=AS_OF)

        # 2025-02-10 deal, headline stamped at as_of, 2024-11-01 deal
        assert [item.kind for item in feed] == ["Deal", "Headlines", "Deal"]
        assert feed[0].text == "Deal: AAPL ↔ AMZN (SUPPLY AGREEMENT) · $500,000,000"
        assert feed[1].text == "Headlines: AAPL ↔ AMZN"
        assert feed[1].ts == AS_OF

    def test_utc_as_of(self) -> None:
        """Test a Z-suffixed as_of stamps undated items in naive UTC."""
        snap = sample_snapshot()
        feed = build_pulse_feed(snap.edges, snap.bonds, snap.ratings, snap.deals, as_of="2025-01-01T00:00:00Z")

        assert [item.kind for item in feed] == ["Deal", "Headlines", "Deal"]
        assert feed[1].ts == AS_OF

    def test_redemption_items(self) -> None:
        """Test issuers with anything due become redemption items."""
        bonds = pd.DataFrame([
            {"id": "B1", "issuer_ticker": "BIG", "face_value": 2e9, "maturity_date": "2025-06-01"},
            {"id": "B2", "issuer_ticker": "SML", "face_value": 1e6, "maturity_date": "2025-06-01"},
            {"id": "B3", "issuer_ticker": "FAR", "face_value": 5e9, "maturity_date": "2035-06-01"},
        ])
        feed = build_pulse_feed(None, bonds, None, None, as_of=AS_OF)

        assert [(item.kind, item.tone) for item in feed] == [("Redemption", "high"), ("Redemption", "med")]
        assert feed[0].text == "Redemption: BIG $2,000,000,000 in next 12m"

    def test_dispersion_items(self) -> None:
        """Test split agency ratings become ratings items."""
        bonds = pd.DataFrame([{"id": "B1", "issuer_ticker": "ABC", "face_value": 1, "maturity_date": "2030-01-01"}])
        ratings = pd.DataFrame([{"issuer_ticker": "ABC", "moodys": "Aa2", "sp": "A+"}])
        feed = build_pulse_feed(None, bonds, ratings, None, as_of=AS_OF)
        assert [(item.kind, item.text) for item in feed] == [("Ratings", "Ratings dispersion: ABC")]

    def test_news_items(self) -> None:
        """Test external news keeps its link and summary."""
        news = [{
            "title": "Chipmaker expands capacity",
            "url": "https://news.example.com/a",
            "summary": "New fab announced",
            "ts": "2024-12-30T12:00:00Z",
        }]
        feed = build_pulse_feed(None, None, None, None, news=news, as_of=AS_OF)

        assert len(feed) == 1
        assert feed[0].kind == "News"
        assert feed[0].tone == "low"
        assert feed[0].url == "https://news.example.com/a"
        assert feed[0].ts == pd.Timestamp("2024-12-30 12:00:00")

    def test_truncated(self) -> None:
        """Test the feed keeps only the newest items."""
        deals = pd.DataFrame([
            {"company_a": "COMP:A", "company_b": "COMP:B", "announced_date": f"2024-01-{day:02d}", "value_usd": 0}
            for day in range(1, 26)
        ])
        feed = build_pulse_feed(None, None, None, deals, as_of=AS_OF)

        assert len(feed) == MAX_FEED_ITEMS
        assert feed[0].ts == pd.Timestamp("2024-01-25")
        assert feed[0].text == "Deal: A ↔ B"

    def test_empty(self) -> None:
        """Test no inputs give an empty feed."""
        assert build_pulse_feed(None, None, None, None, as_of=AS_OF) == []
