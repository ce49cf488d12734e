"""
Query module for the reporting system.

Main Components:
- ranking: reusable dense/standard ranking and ordered look-back helpers
- AnalyticsQueryEngine: the business reports as set-oriented SQL queries
"""

from .engine import AnalyticsQueryEngine
from .ranking import RankMethod, rank_over, dense_rank, standard_rank, top_ranked, previous_row

__all__ = [
    "AnalyticsQueryEngine",
    "RankMethod",
    "rank_over",
    "dense_rank",
    "standard_rank",
    "top_ranked",
    "previous_row",
]
