"""
Aggregation stage: paid quantity per health board, season and year.
"""

import pandas as pd

from core.logging_config import get_logger
from core.models import CANONICAL_SCHEMA
from data_processing.errors import UnparseableFileError
from data_processing.lookups import SEASON_ORDER
from data_processing.transforms import BOARD_COLUMN, SEASON_COLUMN, YEAR_COLUMN

logger = get_logger(__name__)

TOTAL_COLUMN = "TotalQuantity"
GROUP_COLUMNS = [BOARD_COLUMN, SEASON_COLUMN, YEAR_COLUMN]
AGGREGATE_COLUMNS = GROUP_COLUMNS + [TOTAL_COLUMN]

_SEASON_RANK = {season: rank for rank, season in enumerate(SEASON_ORDER)}


def _sort_key(column: pd.Series) -> pd.Series:
    if column.name == SEASON_COLUMN:
        return column.map(_SEASON_RANK).fillna(len(SEASON_ORDER))
    return column


def sort_aggregates(df: pd.DataFrame) -> pd.DataFrame:
    """Order aggregate rows by board, year, then season (Winter first)."""
    return df.sort_values(
        [BOARD_COLUMN, YEAR_COLUMN, SEASON_COLUMN],
        key=_sort_key,
        kind="mergesort",
    ).reset_index(drop=True)


def _numeric_quantities(values: pd.Series) -> pd.Series:
    """Paid quantities as numbers, missing values as 0.

    Raises:
        UnparseableFileError: If a present value is not numeric
    """
    numeric = pd.to_numeric(values, errors="coerce")
    bad = numeric.isna() & values.notna()
    if bad.any():
        examples = values[bad].head(5).tolist()
        raise UnparseableFileError(
            f"{int(bad.sum())} matched row(s) have non-numeric "
            f"{CANONICAL_SCHEMA.quantity} values: {examples}"
        )
    return numeric.fillna(0)


def aggregate_seasonal_totals(df: pd.DataFrame) -> pd.DataFrame:
    """
    Sum paid quantity for each (board, season, year) combination.

    Missing quantities count as zero, so a group made only of missing values
    still appears with a total of 0. Combinations with no rows do not appear.
    The result does not depend on input row order.

    Args:
        df: Output of add_derived_columns()

    Returns:
        DataFrame with columns HBName, Season, Year, TotalQuantity; one row
        per key, sorted by board, year and season

    Raises:
        UnparseableFileError: If a matched row has a non-numeric quantity
    """
    quantity_col = CANONICAL_SCHEMA.quantity

    if df.empty:
        logger.info("No rows to aggregate")
        empty = pd.DataFrame({col: pd.Series(dtype=object) for col in GROUP_COLUMNS})
        empty[TOTAL_COLUMN] = pd.Series(dtype="int64")
        return empty

    quantities = _numeric_quantities(df[quantity_col])
    grouped = (
        df.assign(**{TOTAL_COLUMN: quantities})
        .groupby(GROUP_COLUMNS, sort=False, dropna=False)[TOTAL_COLUMN]
        .sum()
        .reset_index()
    )

    # Paid quantities are whole units; keep integers when every total is whole
    totals = grouped[TOTAL_COLUMN]
    if (totals % 1 == 0).all():
        grouped[TOTAL_COLUMN] = totals.astype("int64")

    result = sort_aggregates(grouped[AGGREGATE_COLUMNS])
    logger.info(f"Aggregated {len(df)} rows into {len(result)} board/season/year totals")
    return result
