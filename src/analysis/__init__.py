"""
Analysis package for seasonal prescribing summaries.

This package contains functions that reshape the board/season/year totals
produced by data_processing.pipeline:
- seasonal_summary: pivots, seasonal means, season shares and peak seasons
"""

from analysis.seasonal_summary import (
    pivot_seasonal_totals,
    board_season_means,
    season_share,
    peak_seasons,
    SHARE_COLUMN,
)

__all__ = [
    "pivot_seasonal_totals",
    "board_season_means",
    "season_share",
    "peak_seasons",
    "SHARE_COLUMN",
]
