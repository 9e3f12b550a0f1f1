"""
Data processing module for the SSRI seasonal prescribing analysis.

Turns monthly prescribing extracts into board/season/year totals.

Submodules:
    errors: Exception taxonomy for pipeline failures
    lookups: Season, board-name and drug-prefix tables
    discovery: Finding extract files by filename pattern
    loader: Reading and combining extract CSVs
    transforms: SSRI/board filter and derived columns
    aggregation: Paid-quantity totals per board, season and year
    pipeline: End-to-end runs
"""

from data_processing.errors import (
    PrescribingDataError,
    MissingInputError,
    UnparseableFileError,
    UnparseableDateError,
    UnknownRegionCodeError,
    OutputWriteError,
)
from data_processing.lookups import (
    SSRI_PREFIXES,
    SEASON_BY_MONTH,
    SEASON_ORDER,
    BOARD_NAME_BY_CODE,
    UNKNOWN_SEASON,
    LookupTables,
    DEFAULT_LOOKUPS,
    season_for_month,
    board_name_for_code,
)
from data_processing.discovery import (
    PrescriptionFile,
    parse_prescription_filename,
    discover_prescription_files,
)
from data_processing.loader import (
    ExtractLoader,
    LoadResult,
    ColumnSchema,
    load_prescription_files,
    REQUIRED_COLUMNS,
)
from data_processing.transforms import (
    filter_prescriptions,
    parse_year_month,
    season_column,
    add_derived_columns,
)
from data_processing.aggregation import (
    aggregate_seasonal_totals,
    sort_aggregates,
    AGGREGATE_COLUMNS,
    GROUP_COLUMNS,
    TOTAL_COLUMN,
)
from data_processing.pipeline import (
    RunResult,
    check_region_codes,
    process_prescription_frame,
    process_prescription_data,
    run_analysis,
)

__all__ = [
    # Errors
    "PrescribingDataError",
    "MissingInputError",
    "UnparseableFileError",
    "UnparseableDateError",
    "UnknownRegionCodeError",
    "OutputWriteError",
    # Lookup tables
    "SSRI_PREFIXES",
    "SEASON_BY_MONTH",
    "SEASON_ORDER",
    "BOARD_NAME_BY_CODE",
    "UNKNOWN_SEASON",
    "LookupTables",
    "DEFAULT_LOOKUPS",
    "season_for_month",
    "board_name_for_code",
    # Discovery
    "PrescriptionFile",
    "parse_prescription_filename",
    "discover_prescription_files",
    # Loading
    "ExtractLoader",
    "LoadResult",
    "ColumnSchema",
    "load_prescription_files",
    "REQUIRED_COLUMNS",
    # Filter and transform
    "filter_prescriptions",
    "parse_year_month",
    "season_column",
    "add_derived_columns",
    # Aggregation
    "aggregate_seasonal_totals",
    "sort_aggregates",
    "AGGREGATE_COLUMNS",
    "GROUP_COLUMNS",
    "TOTAL_COLUMN",
    # Pipeline
    "RunResult",
    "check_region_codes",
    "process_prescription_frame",
    "process_prescription_data",
    "run_analysis",
]
