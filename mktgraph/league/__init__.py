"""League package - bookrunner league tables.

Public API:
- compute_league_table: Credit each listed bookrunner with full deal value
- rank_league: Sort by value or count with rank and share
- top_bank_share: Leading bank and its share of credited value
"""

from .table import LEAGUE_COLUMNS, compute_league_table, rank_league, top_bank_share

__all__ = [
    "LEAGUE_COLUMNS",
    "compute_league_table",
    "rank_league",
    "top_bank_share",
]
