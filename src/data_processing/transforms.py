"""
Filter and transform stages of the seasonal aggregation.

Functions here operate on a DataFrame with the canonical extract columns
(see core.models.CANONICAL_SCHEMA) and never change the row count except in
filter_prescriptions, which only removes rows.
"""

import re
from typing import Iterable, Optional

import pandas as pd

from core.logging_config import get_logger
from core.models import CANONICAL_SCHEMA
from data_processing.errors import UnknownRegionCodeError, UnparseableDateError
from data_processing.lookups import DEFAULT_LOOKUPS, LookupTables

logger = get_logger(__name__)

# Derived column names
DATE_COLUMN = "Date"
YEAR_COLUMN = "Year"
SEASON_COLUMN = "Season"
BOARD_COLUMN = "HBName"

_SIX_DIGITS = re.compile(r"^\d{6}$")


def _prefix_pattern(prefixes: Iterable[str]) -> str:
    return "^(?:{})".format("|".join(map(re.escape, prefixes)))


def filter_prescriptions(
    df: pd.DataFrame,
    region_codes: Iterable[str],
    lookups: Optional[LookupTables] = None,
) -> pd.DataFrame:
    """
    Keep SSRI rows for the allow-listed health boards.

    A row survives when its drug description starts with one of the lookup's
    drug prefixes (case-sensitive, so trailing strength and form text is
    ignored) and its region code is in ``region_codes``. Rows with a missing
    description never match, and an empty prefix list matches nothing.

    Args:
        df: Loaded extract rows
        region_codes: Health board codes to keep
        lookups: Lookup tables supplying the drug prefixes

    Returns:
        New DataFrame with the matching rows and a fresh index. May be empty.
    """
    if lookups is None:
        lookups = DEFAULT_LOOKUPS

    drug_col = CANONICAL_SCHEMA.drug
    region_col = CANONICAL_SCHEMA.region

    if lookups.drug_prefixes:
        is_ssri = df[drug_col].str.match(_prefix_pattern(lookups.drug_prefixes), na=False)
    else:
        is_ssri = pd.Series(False, index=df.index)
    in_region = df[region_col].isin(set(region_codes))

    filtered = df.loc[is_ssri & in_region].reset_index(drop=True)
    logger.info(f"Filter kept {len(filtered)} of {len(df)} rows")
    return filtered


def _normalise_year_month(value) -> Optional[str]:
    """Coerce one paid-month value to a 6-digit string, or None if impossible."""
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        text = str(value).zfill(6) if value >= 0 else ""
    elif isinstance(value, float):
        if not value.is_integer() or value < 0:
            return None
        text = str(int(value)).zfill(6)
    else:
        text = str(value).strip()
        # CSVs round-tripped through spreadsheets carry '201911.0'
        if text.endswith(".0"):
            text = text[:-2]
    return text if _SIX_DIGITS.match(text) else None


def parse_year_month(values: pd.Series) -> pd.Series:
    """
    Parse YYYYMM values into first-of-month timestamps.

    Each value is coerced to a six-digit string (integers are zero-padded,
    integral floats accepted), suffixed with '01' and parsed as %Y%m%d.

    Args:
        values: Paid year-month values

    Returns:
        datetime64 Series aligned with ``values``

    Raises:
        UnparseableDateError: If any value cannot be coerced or is not a
            valid calendar month
    """
    if pd.api.types.is_integer_dtype(values.dtype):
        values = values.astype(object)

    text = values.map(_normalise_year_month).astype(object)
    bad = text.isna()
    if bad.any():
        examples = values[bad].head(5).tolist()
        raise UnparseableDateError(
            f"{int(bad.sum())} paid month value(s) are not 6-digit YYYYMM: {examples}"
        )

    try:
        return pd.to_datetime(text + "01", format="%Y%m%d", errors="raise")
    except (ValueError, OverflowError) as e:
        # Covers month 13, month 00 and out-of-range years
        raise UnparseableDateError(f"Invalid paid month value: {e}") from e


def season_column(months: pd.Series, lookups: Optional[LookupTables] = None) -> pd.Series:
    """Map calendar months to season labels; unmapped months become 'Unknown'."""
    if lookups is None:
        lookups = DEFAULT_LOOKUPS
    return months.map(dict(lookups.season_by_month)).fillna(lookups.unknown_season).astype(object)


def add_derived_columns(
    df: pd.DataFrame,
    lookups: Optional[LookupTables] = None,
) -> pd.DataFrame:
    """
    Derive date, year, season and board name for each prescription row.

    The region-code column is replaced by the board name. Output has the
    same number of rows as the input.

    Args:
        df: Filtered extract rows
        lookups: Lookup tables for seasons and board names

    Returns:
        New DataFrame with Date, Year (4-character string), Season and HBName

    Raises:
        UnparseableDateError: If any paid month cannot be parsed
        UnknownRegionCodeError: If a region code has no board name; the
            filter's allow-list must be a subset of the board table
    """
    if lookups is None:
        lookups = DEFAULT_LOOKUPS

    region_col = CANONICAL_SCHEMA.region
    out = df.copy()

    unmapped = sorted(set(out[region_col].dropna()) - set(lookups.board_name_by_code))
    if unmapped or out[region_col].isna().any():
        raise UnknownRegionCodeError(
            f"Region codes without a board name reached the transform stage: {unmapped or ['<missing>']}"
        )

    dates = parse_year_month(out[CANONICAL_SCHEMA.year_month])
    out[DATE_COLUMN] = dates
    out[YEAR_COLUMN] = dates.dt.strftime("%Y").astype(object)
    out[SEASON_COLUMN] = season_column(dates.dt.month, lookups)
    out[BOARD_COLUMN] = out[region_col].map(dict(lookups.board_name_by_code)).astype(object)

    out = out.drop(columns=[region_col])
    logger.debug(f"Derived date, season and board columns for {len(out)} rows")
    return out
