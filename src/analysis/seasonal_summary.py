"""
Summary calculations over the seasonal aggregate table.

This module reshapes the output of aggregate_seasonal_totals() for the report:
- Wide board/year by season pivot
- Per-board seasonal means across years
- Each season's share of its board-year total
- Peak season per board and year
"""

import numpy as np
import pandas as pd

from data_processing.aggregation import TOTAL_COLUMN
from data_processing.lookups import SEASON_ORDER
from data_processing.transforms import BOARD_COLUMN, SEASON_COLUMN, YEAR_COLUMN

SHARE_COLUMN = "Share"


def _present_seasons(aggregates: pd.DataFrame) -> list[str]:
    """Seasons in presentation order; Unknown only when it occurs."""
    seen = set(aggregates[SEASON_COLUMN])
    return [s for s in SEASON_ORDER if s in seen or s != SEASON_ORDER[-1]]


def pivot_seasonal_totals(aggregates: pd.DataFrame) -> pd.DataFrame:
    """
    Pivot totals to one row per (board, year) and one column per season.

    Seasons with no prescriptions for a board-year are filled with 0.

    Args:
        aggregates: Output of aggregate_seasonal_totals()

    Returns:
        DataFrame indexed by (HBName, Year) with season columns in
        Winter, Spring, Summer, Autumn order
    """
    seasons = _present_seasons(aggregates)
    if aggregates.empty:
        index = pd.MultiIndex.from_tuples([], names=[BOARD_COLUMN, YEAR_COLUMN])
        return pd.DataFrame(columns=seasons, index=index, dtype="int64")

    pivot = aggregates.pivot_table(
        index=[BOARD_COLUMN, YEAR_COLUMN],
        columns=SEASON_COLUMN,
        values=TOTAL_COLUMN,
        aggfunc="sum",
        fill_value=0,
    )
    pivot = pivot.reindex(columns=seasons, fill_value=0)
    pivot.columns.name = None
    return pivot.sort_index()


def board_season_means(aggregates: pd.DataFrame) -> pd.DataFrame:
    """
    Mean seasonal total per board across the years present.

    Years in which a board has no rows for a season count as zero, so the
    mean is over the same set of years for every season.

    Returns:
        DataFrame indexed by HBName with one column per season, rounded to
        whole units
    """
    pivot = pivot_seasonal_totals(aggregates)
    if pivot.empty:
        return pd.DataFrame(columns=pivot.columns, index=pd.Index([], name=BOARD_COLUMN))
    return pivot.groupby(level=BOARD_COLUMN).mean().round(0)


def season_share(aggregates: pd.DataFrame) -> pd.DataFrame:
    """
    Each season's percentage of its board-year total.

    Returns:
        Copy of ``aggregates`` with a Share column (0-100, 1 d.p.)
    """
    out = aggregates.copy()
    if out.empty:
        out[SHARE_COLUMN] = pd.Series(dtype=float)
        return out

    year_totals = out.groupby([BOARD_COLUMN, YEAR_COLUMN])[TOTAL_COLUMN].transform("sum")
    share = np.where(year_totals > 0, out[TOTAL_COLUMN] / year_totals.where(year_totals > 0, 1) * 100, 0.0)
    out[SHARE_COLUMN] = np.round(share.astype(float), 1)
    return out


def peak_seasons(aggregates: pd.DataFrame) -> pd.DataFrame:
    """
    Season with the largest total for each board and year.

    Ties go to the season that comes first in Winter, Spring, Summer,
    Autumn order.

    Returns:
        DataFrame with HBName, Year, Season, TotalQuantity
    """
    columns = [BOARD_COLUMN, YEAR_COLUMN, SEASON_COLUMN, TOTAL_COLUMN]
    if aggregates.empty:
        return pd.DataFrame(columns=columns)

    rank = {season: i for i, season in enumerate(SEASON_ORDER)}
    ordered = aggregates.assign(_rank=aggregates[SEASON_COLUMN].map(rank).fillna(len(rank)))
    ordered = ordered.sort_values(
        [BOARD_COLUMN, YEAR_COLUMN, TOTAL_COLUMN, "_rank"],
        ascending=[True, True, False, True],
    )
    peaks = ordered.drop_duplicates(subset=[BOARD_COLUMN, YEAR_COLUMN], keep="first")
    return peaks[columns].reset_index(drop=True)
