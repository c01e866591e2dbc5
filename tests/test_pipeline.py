"""Tests for the end-to-end pipeline."""

import pandas as pd
import pytest

from mktgraph.alerts.types import AlertConfig
from mktgraph.data.sample import sample_snapshot
from mktgraph.graph.view import GraphView
from mktgraph.pipeline import PipelineConfig, PipelineResult, run_pipeline

AS_OF = "2025-01-01"


class TestRunPipeline:
    """Tests for run_pipeline function."""

    @pytest.fixture
    def result(self) -> PipelineResult:
        """Pipeline over the sample snapshot with default config."""
        return run_pipeline(sample_snapshot(), as_of=AS_OF)

    def test_degree(self, result) -> None:
        """Test weighted degree over the filtered graph."""
        assert result.degree.idxmax() == "COMP:MSFT"
        assert result.degree["COMP:MSFT"] == pytest.approx(19.25)
        assert result.degree["COMP:NVDA"] == pytest.approx(18.75)

    def test_view_applied(self, result) -> None:
        """Test the default view drops activity, news and debt edges."""
        types = set(result.graph.edges["type"])
        assert "MARKET_ACTIVITY" not in types
        assert "NEWS_CO_MENTION" not in types
        assert "DEBT_SECURITY" not in types
        assert result.full_graph.n_edges == 15
        assert result.graph.n_edges == 11

    def test_rollup_and_league(self, result) -> None:
        assert result.rollup["issuer"].tolist() == ["AAPL", "MSFT"]
        assert len(result.league) == 3

    def test_alerts(self, result) -> None:
        assert [(a.type, a.entity, a.message) for a in result.alerts] == [
            ("Bookrunner Skew", "JPMorgan", "Leads 41.4%"),
        ]

    def test_summary(self, result) -> None:
        summary = result.summary()
        assert "Nodes: 9 (of 9)" in summary
        assert "Alerts: 1" in summary

    def test_hide_banks(self) -> None:
        """Test hiding banks removes bookrunner edges from centrality."""
        config = PipelineConfig(view=GraphView(include_banks=False))
        result = run_pipeline(sample_snapshot(), config, as_of=AS_OF)

        assert "BANK:JPMorgan" not in result.degree.index
        # 1.8 + 1.7 + 3.75
        assert result.degree["COMP:MSFT"] == pytest.approx(7.25)

    def test_unfocused_view_feeds_alerts(self) -> None:
        """Test alerts see activity edges once deal focus is off."""
        config = PipelineConfig(
            alerts=AlertConfig(pulse_weight=1.0, bank_skew=0.9),
            view=GraphView(focus_deals=False),
        )
        result = run_pipeline(sample_snapshot(), config, as_of=AS_OF)

        assert [(a.type, a.entity) for a in result.alerts] == [
            ("Market Pulse", "NVDA"),
            ("Market Pulse", "AMZN"),
        ]

    def test_inputs_not_mutated(self) -> None:
        snap = sample_snapshot()
        before = {name: getattr(snap, name).copy() for name in ("nodes", "edges", "bonds", "ratings", "deals")}

        run_pipeline(snap, as_of=AS_OF)

        for name, frame in before.items():
            pd.testing.assert_frame_equal(getattr(snap, name), frame)

    def test_utc_as_of(self) -> None:
        """Test a timezone-aware as_of matches the naive UTC run."""
        snap = sample_snapshot()
        naive = run_pipeline(snap, as_of=AS_OF)
        aware = run_pipeline(snap, as_of="2025-01-01T00:00:00Z")

        assert aware.alerts == naive.alerts
        pd.testing.assert_frame_equal(aware.rollup, naive.rollup)

    def test_rerun_is_identical(self) -> None:
        snap = sample_snapshot()
        first = run_pipeline(snap, as_of=AS_OF)
        second = run_pipeline(snap, as_of=AS_OF)

        assert first.alerts == second.alerts
        pd.testing.assert_series_equal(first.degree, second.degree)
        pd.testing.assert_frame_equal(first.rollup, second.rollup)
