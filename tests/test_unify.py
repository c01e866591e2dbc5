"""Tests for graph unification module."""

import pandas as pd
import pytest

from mktgraph.data.sample import sample_snapshot
from mktgraph.graph.unify import (
    DEAL_WEIGHT_BAND,
    UnifiedGraph,
    derive_bank_nodes_and_edges,
    derive_deal_edges,
    derive_debt_nodes_and_edges,
    merge_nodes,
    minmax_scale,
    scale_edges_by_multipliers,
    type_multiplier,
    unify_graph,
)
from mktgraph.pipeline import DEFAULT_MULTIPLIERS


class TestMinmaxScale:
    """Tests for minmax_scale function."""

    def test_band_endpoints(self) -> None:
        """Test 0 maps to low and the max maps to high."""
        scaled = minmax_scale(pd.Series([0.0, 100.0]), 0.5, 2.0)
        assert scaled.tolist() == [0.5, 2.0]

    def test_single_value_scales_to_high(self) -> None:
        """Test a lone positive value lands on the top of the band."""
        scaled = minmax_scale(pd.Series([1e9]), *DEAL_WEIGHT_BAND)
        assert scaled.iloc[0] == pytest.approx(2.5)

    def test_all_zero_no_division_error(self) -> None:
        """Test all-zero input maps to low."""
        scaled = minmax_scale(pd.Series([0.0, 0.0]), 0.5, 2.0)
        assert scaled.tolist() == [0.5, 0.5]

    def test_empty(self) -> None:
        """Test empty input gives empty output."""
        assert len(minmax_scale(pd.Series([], dtype=float), 0.5, 2.0)) == 0


class TestDeriveDebt:
    """Tests for derive_debt_nodes_and_edges function."""

    def test_nodes_and_edges(self) -> None:
        """Test one Debt node and one issuer edge per bond."""
        bonds = pd.DataFrame([
            {"id": "X1", "issuer_ticker": "AAA", "face_value": 0, "label": None},
            {"id": "BOND:Y", "issuer_ticker": "BBB", "face_value": 100, "label": "BBB 2030"},
        ])
        nodes, edges = derive_debt_nodes_and_edges(bonds)

        assert nodes["id"].tolist() == ["BOND:X1", "BOND:Y"]
        assert nodes["label"].tolist() == ["X1", "BBB 2030"]
        assert (nodes["type"] == "Debt").all()
        assert edges["source"].tolist() == ["COMP:AAA", "COMP:BBB"]
        assert edges["target"].tolist() == ["BOND:X1", "BOND:Y"]
        assert (edges["type"] == "DEBT_SECURITY").all()
        assert edges["weight"].tolist() == [0.5, 2.0]

    def test_empty(self) -> None:
        """Test no bonds gives empty frames."""
        nodes, edges = derive_debt_nodes_and_edges(pd.DataFrame())
        assert len(nodes) == 0
        assert len(edges) == 0


class TestDeriveDeals:
    """Tests for deal edge and bank derivation."""

    @pytest.fixture
    def deals(self) -> pd.DataFrame:
        """Two deals, one with two co-lead bookrunners."""
        return pd.DataFrame([
            {"company_a": "COMP:MSFT", "company_b": "COMP:NVDA", "deal_type": "cloud_partnership",
             "value_usd": 1_200_000_000, "bookrunners": "JPMorgan; Goldman Sachs"},
            {"company_a": "COMP:AAPL", "company_b": "COMP:AMZN", "deal_type": None,
             "value_usd": 500_000_000, "bookrunners": "JPMorgan"},
        ])

    def test_deal_edge_types(self, deals) -> None:
        """Test deal types are upper-cased and blank becomes GENERIC."""
        edges = derive_deal_edges(deals)
        assert edges["type"].tolist() == ["DEAL|CLOUD_PARTNERSHIP", "DEAL|GENERIC"]

    def test_deal_edge_weights(self, deals) -> None:
        """Test deal values rescale into the deal band."""
        edges = derive_deal_edges(deals)

        # 0.5 + 2.0 * 500e6 / 1.2e9
        assert edges["weight"].tolist() == pytest.approx([2.5, 0.5 + 2.0 * 5 / 12])

    def test_bank_nodes_deduplicated(self, deals) -> None:
        """Test a bank on several deals gets one node."""
        nodes, _ = derive_bank_nodes_and_edges(deals)
        assert nodes["id"].tolist() == ["BANK:JPMorgan", "BANK:Goldman Sachs"]
        assert (nodes["type"] == "Bank").all()

    def test_bookrunner_edges(self, deals) -> None:
        """Test each bookrunner links to both deal participants."""
        _, edges = derive_bank_nodes_and_edges(deals)

        assert len(edges) == 6
        assert (edges["type"] == "DEAL|BOOKRUNNER").all()
        jpm_targets = edges.loc[edges["source"] == "BANK:JPMorgan", "target"].tolist()
        assert jpm_targets == ["COMP:MSFT", "COMP:NVDA", "COMP:AAPL", "COMP:AMZN"]
        assert edges["weight"].iloc[0] == pytest.approx(2.5)

    def test_no_bookrunners(self) -> None:
        """Test deals without bookrunners derive no banks."""
        deals = pd.DataFrame([{"company_a": "A", "company_b": "B", "value_usd": 1, "bookrunners": None}])
        nodes, edges = derive_bank_nodes_and_edges(deals)
        assert len(nodes) == 0
        assert len(edges) == 0


class TestMergeNodes:
    """Tests for merge_nodes function."""

    def test_first_occurrence_wins(self) -> None:
        """Test an entity node shadows a derived node with the same id."""
        entity = pd.DataFrame([{"id": "BANK:JPMorgan", "label": "JPM Entity", "type": "Institution"}])
        derived = pd.DataFrame([{"id": "BANK:JPMorgan", "label": "JPMorgan", "type": "Bank"}])

        merged = merge_nodes(entity, derived)

        assert len(merged) == 1
        assert merged.loc[0, "label"] == "JPM Entity"

    def test_all_empty(self) -> None:
        """Test merging nothing gives an empty frame."""
        assert len(merge_nodes(pd.DataFrame(), None)) == 0


class TestMultipliers:
    """Tests for relationship-type multipliers."""

    def test_compound_type_multiplies_each_tag(self) -> None:
        """Test a pipe-separated type multiplies every tag's factor."""
        assert type_multiplier("MENTION|STRATEGIC_PARTNER", {"MENTION": 2, "STRATEGIC_PARTNER": 1.5}) == 3.0

    def test_unlisted_tag_is_one(self) -> None:
        """Test an unlisted tag leaves the weight unchanged."""
        assert type_multiplier("SUPPLIER", {"DEAL": 1.5}) == 1.0

    def test_scale_edges(self) -> None:
        """Test weights are multiplied and missing weights count as 1."""
        edges = pd.DataFrame([
            {"source": "A", "target": "B", "type": "MENTION|STRATEGIC_PARTNER", "weight": 1.8},
            {"source": "A", "target": "C", "type": "DEAL|GENERIC", "weight": None},
        ])
        scaled = scale_edges_by_multipliers(edges, {"MENTION": 2, "STRATEGIC_PARTNER": 1.5, "DEAL": 1.5})

        assert scaled["weight"].tolist() == pytest.approx([5.4, 1.5])
        assert edges["weight"].iloc[0] == 1.8


class TestUnifyGraph:
    """Tests for unify_graph function."""

    def test_sample_graph(self) -> None:
        """Test the sample snapshot unifies into 9 nodes and 15 edges."""
        snap = sample_snapshot()
        graph = unify_graph(snap.nodes, snap.edges, snap.bonds, snap.deals, DEFAULT_MULTIPLIERS)

        assert isinstance(graph, UnifiedGraph)
        # 4 companies + 2 bonds + 3 banks
        assert graph.n_nodes == 9
        # 5 entity + 2 debt + 2 deal + 6 bookrunner
        assert graph.n_edges == 15
        assert graph.nodes["id"].is_unique

    def test_sample_bookrunner_weights(self) -> None:
        """Test bookrunner edges pick up both DEAL and BOOKRUNNER factors."""
        snap = sample_snapshot()
        graph = unify_graph(snap.nodes, snap.edges, snap.bonds, snap.deals, DEFAULT_MULTIPLIERS)

        runners = graph.edges[graph.edges["type"] == "DEAL|BOOKRUNNER"]
        # 2.5 * 1.5 * 1.6
        assert runners["weight"].max() == pytest.approx(6.0)

    def test_without_multipliers(self) -> None:
        """Test omitted multipliers leave raw weights."""
        snap = sample_snapshot()
        graph = unify_graph(snap.nodes, snap.edges, snap.bonds, snap.deals)
        entity = graph.edges.iloc[0]
        assert entity["weight"] == pytest.approx(1.8)

    def test_entities_only(self) -> None:
        """Test no bonds or deals gives just the entity graph."""
        snap = sample_snapshot()
        graph = unify_graph(snap.nodes, snap.edges, None, None)
        assert graph.n_nodes == 4
        assert graph.n_edges == 5

    def test_everything_empty(self) -> None:
        """Test all-empty input gives an empty graph."""
        graph = unify_graph(None, None, None, None)
        assert graph.n_nodes == 0
        assert graph.n_edges == 0

    def test_inputs_not_mutated(self) -> None:
        """Test unification leaves every input frame unchanged."""
        snap = sample_snapshot()
        before = {name: getattr(snap, name).copy() for name in ("nodes", "edges", "bonds", "deals")}

        unify_graph(snap.nodes, snap.edges, snap.bonds, snap.deals, DEFAULT_MULTIPLIERS)

        for name, frame in before.items():
            pd.testing.assert_frame_equal(getattr(snap, name), frame)
