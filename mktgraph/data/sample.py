"""Built-in demo snapshot.

A small technology-sector snapshot (four companies, two bonds, three
rating records, two deals) used when no datasets have been loaded.
"""

import pandas as pd

from .ingest import MarketSnapshot

SAMPLE_NODES = [
    {"id": "COMP:AAPL", "label": "Apple Inc.", "type": "Company", "ticker": "AAPL", "sector": "Technology", "country": "United States"},
    {"id": "COMP:MSFT", "label": "Microsoft", "type": "Company", "ticker": "MSFT", "sector": "Technology", "country": "United States"},
    {"id": "COMP:NVDA", "label": "NVIDIA", "type": "Company", "ticker": "NVDA", "sector": "Technology", "country": "United States"},
    {"id": "COMP:AMZN", "label": "Amazon", "type": "Company", "ticker": "AMZN", "sector": "Consumer Disc.", "country": "United States"},
]

SAMPLE_EDGES = [
    {"source": "COMP:AAPL", "target": "COMP:MSFT", "type": "MENTION|STRATEGIC_PARTNER", "weight": 1.8},
    {"source": "COMP:AAPL", "target": "COMP:NVDA", "type": "SUPPLIER", "weight": 1.3},
    {"source": "COMP:MSFT", "target": "COMP:NVDA", "type": "STRATEGIC_PARTNER", "weight": 1.7},
    {"source": "COMP:NVDA", "target": "COMP:AMZN", "type": "MARKET_ACTIVITY", "weight": 1.2},
    {"source": "COMP:AAPL", "target": "COMP:AMZN", "type": "NEWS_CO_MENTION", "weight": 1.4},
]

SAMPLE_BONDS = [
    {"id": "BOND:AAPL-2029", "issuer_ticker": "AAPL", "label": "AAPL 3.1% 2029", "face_value": 1_500_000_000, "coupon": 0.031, "issue_date": "2022-10-01", "maturity_date": "2029-10-01", "rating": "AA-"},
    {"id": "BOND:MSFT-2030", "issuer_ticker": "MSFT", "label": "MSFT 2.8% 2030", "face_value": 2_200_000_000, "coupon": 0.028, "issue_date": "2020-05-01", "maturity_date": "2030-05-01", "rating": "AAA"},
]

SAMPLE_RATINGS = [
    {"issuer_ticker": "AAPL", "moodys": "Aa1", "sp": "AA+", "fitch": "AA+"},
    {"issuer_ticker": "MSFT", "moodys": "Aaa", "sp": "AAA", "fitch": "AAA"},
    {"issuer_ticker": "NVDA", "moodys": "Aa3", "sp": "AA-", "fitch": "AA-"},
]

SAMPLE_DEALS = [
    {"company_a": "COMP:MSFT", "company_b": "COMP:NVDA", "deal_type": "CLOUD_PARTNERSHIP", "announced_date": "2024-11-01", "value_usd": 1_200_000_000, "notes": "AI infra", "bookrunners": "JPMorgan; Goldman Sachs"},
    {"company_a": "COMP:AAPL", "company_b": "COMP:AMZN", "deal_type": "SUPPLY_AGREEMENT", "announced_date": "2025-02-10", "value_usd": 500_000_000, "notes": "logistics", "bookrunners": "BofA Securities"},
]


def sample_snapshot() -> MarketSnapshot:
    """Fresh copy of the demo datasets."""
    return MarketSnapshot(
        nodes=pd.DataFrame(SAMPLE_NODES),
        edges=pd.DataFrame(SAMPLE_EDGES),
        bonds=pd.DataFrame(SAMPLE_BONDS),
        ratings=pd.DataFrame(SAMPLE_RATINGS),
        deals=pd.DataFrame(SAMPLE_DEALS),
    )
