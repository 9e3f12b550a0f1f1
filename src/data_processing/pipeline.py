"""
Seasonal prescribing pipeline.

This module wires the stages together:
1. Discover extract files for a run's years (discovery.py)
2. Load and concatenate them (loader.py)
3. Filter to SSRI rows in the allow-listed boards (transforms.py)
4. Derive date, year, season and board name (transforms.py)
5. Sum paid quantity per board/season/year (aggregation.py)

Each call is independent: aggregates are rebuilt from the files every time.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from core.logging_config import get_logger
from core.models import AnalysisRun, ColumnSchema
from data_processing.aggregation import aggregate_seasonal_totals
from data_processing.discovery import (
    DEFAULT_EXTENSION,
    DEFAULT_PREFIX,
    discover_prescription_files,
)
from data_processing.errors import UnknownRegionCodeError
from data_processing.loader import load_prescription_files
from data_processing.lookups import DEFAULT_LOOKUPS, LookupTables
from data_processing.transforms import add_derived_columns, filter_prescriptions

logger = get_logger(__name__)


@dataclass
class RunResult:
    """Outcome of one analysis run.

    Attributes:
        run: The run configuration that produced this result
        files: Extract files that were read
        aggregates: Board/season/year totals
    """
    run: AnalysisRun
    files: list[Path] = field(default_factory=list)
    aggregates: pd.DataFrame = field(default_factory=pd.DataFrame)

    @property
    def row_count(self) -> int:
        return len(self.aggregates)


def check_region_codes(region_codes: Iterable[str], lookups: LookupTables) -> list[str]:
    """
    Ensure the allow-list only holds codes the board table can name.

    Returns:
        The region codes as a list

    Raises:
        UnknownRegionCodeError: If any code has no board name
    """
    codes = list(region_codes)
    unmapped = lookups.unmapped_codes(codes)
    if unmapped:
        raise UnknownRegionCodeError(
            f"Region codes not in the board lookup table: {unmapped}"
        )
    return codes


def process_prescription_frame(
    df: pd.DataFrame,
    region_codes: Iterable[str],
    lookups: Optional[LookupTables] = None,
) -> pd.DataFrame:
    """
    Run filter, transform and aggregate on an already loaded DataFrame.

    Args:
        df: Rows with the canonical extract columns
        region_codes: Health board codes to keep
        lookups: Lookup tables (defaults to the built-in SSRI/board tables)

    Returns:
        Aggregate DataFrame (HBName, Season, Year, TotalQuantity)
    """
    if lookups is None:
        lookups = DEFAULT_LOOKUPS

    codes = check_region_codes(region_codes, lookups)
    filtered = filter_prescriptions(df, codes, lookups)
    derived = add_derived_columns(filtered, lookups)
    return aggregate_seasonal_totals(derived)


def process_prescription_data(
    file_paths: Iterable[Path | str],
    region_codes: Iterable[str],
    schema: Optional[ColumnSchema] = None,
    lookups: Optional[LookupTables] = None,
    max_workers: int = 1,
) -> pd.DataFrame:
    """
    Load extract files and aggregate SSRI paid quantity by board, season and year.

    Args:
        file_paths: Extract files to read
        region_codes: Health board codes to keep; every code must be in the
            board lookup table
        schema: Column names used by the files (canonical names if None)
        lookups: Lookup tables (defaults to the built-in SSRI/board tables)
        max_workers: Files read concurrently

    Returns:
        Aggregate DataFrame (HBName, Season, Year, TotalQuantity)

    Raises:
        MissingInputError: If no files were given or one does not exist
        UnparseableFileError: If a file cannot be parsed or a matched row
            has a non-numeric quantity
        UnparseableDateError: If a paid month cannot be parsed
        UnknownRegionCodeError: If the allow-list holds an unmapped code
    """
    if lookups is None:
        lookups = DEFAULT_LOOKUPS

    # Validate before touching the files so configuration errors fail fast
    codes = check_region_codes(region_codes, lookups)

    result = load_prescription_files(file_paths, schema=schema, max_workers=max_workers)
    return process_prescription_frame(result.df, codes, lookups)


def run_analysis(
    run: AnalysisRun,
    data_dir: Path | str,
    lookups: Optional[LookupTables] = None,
    prefix: str = DEFAULT_PREFIX,
    extension: str = DEFAULT_EXTENSION,
    max_workers: int = 1,
) -> RunResult:
    """
    Discover the files for a run's years and aggregate them.

    Args:
        run: Years, allow-list and column layout for this pass
        data_dir: Directory holding the extracts
        lookups: Lookup tables (defaults to the built-in SSRI/board tables)
        prefix: Extract filename prefix
        extension: Extract filename extension
        max_workers: Files read concurrently

    Returns:
        RunResult with the files read and the aggregate table

    Raises:
        ValueError: If the run configuration is invalid
        PrescribingDataError: Any pipeline failure (see process_prescription_data)
    """
    errors = run.validate()
    if errors:
        raise ValueError(f"Invalid run '{run.id}': " + "; ".join(errors))

    logger.info(f"Starting run {run.id} ({run.start_year}-{run.end_year})")
    for line in run.summary().splitlines():
        logger.debug(f"  {line}")

    files = discover_prescription_files(
        data_dir, years=run.years, prefix=prefix, extension=extension
    )
    aggregates = process_prescription_data(
        files,
        run.region_codes,
        schema=run.schema,
        lookups=lookups,
        max_workers=max_workers,
    )

    logger.info(f"Run {run.id} complete: {len(aggregates)} aggregate rows from {len(files)} file(s)")
    return RunResult(run=run, files=files, aggregates=aggregates)
