"""
Loader for monthly prescribing extracts.

Reads a list of CSV extracts, keeps the four columns the seasonal aggregation
needs and concatenates them into one DataFrame with canonical column names.

Any missing or unreadable file aborts the whole load: the extracts are
treated as trusted input and a partial table would silently understate totals.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from core.logging_config import get_logger
from core.models import CANONICAL_SCHEMA, ColumnSchema
from data_processing.errors import MissingInputError, UnparseableFileError

logger = get_logger(__name__)


# Columns present after loading, whatever the source files call them
REQUIRED_COLUMNS = CANONICAL_SCHEMA.columns


@dataclass
class LoadResult:
    """Result of a load operation.

    Attributes:
        df: Combined DataFrame with REQUIRED_COLUMNS
        source: Description of the data source
        row_count: Number of rows loaded
        files: Files read, in concatenation order
        load_time_seconds: Time taken to load the data
    """
    df: pd.DataFrame
    source: str
    row_count: int
    files: list[Path] = field(default_factory=list)
    load_time_seconds: float = 0.0


class ExtractLoader:
    """Loads and combines prescribing extract CSV files.

    Args:
        file_paths: Extract files to read
        schema: Column names used by these files (canonical names if None)
        max_workers: Files read concurrently; 1 reads sequentially
    """

    def __init__(
        self,
        file_paths: Iterable[Path | str],
        schema: Optional[ColumnSchema] = None,
        max_workers: int = 1,
    ):
        self.file_paths = [Path(p) for p in file_paths]
        self.schema = schema or CANONICAL_SCHEMA
        self.max_workers = max(1, int(max_workers))

    @property
    def source_description(self) -> str:
        if len(self.file_paths) == 1:
            return f"file:{self.file_paths[0]}"
        return f"files:{len(self.file_paths)}"

    def validate_source(self) -> tuple[bool, str]:
        """Check that at least one file was given and all of them exist."""
        if not self.file_paths:
            return False, "No extract files given"

        missing = [p for p in self.file_paths if not p.is_file()]
        if missing:
            return False, f"File not found: {', '.join(str(p) for p in missing)}"

        return True, "OK"

    def read_file(self, path: Path) -> pd.DataFrame:
        """Read one extract, keeping only the schema columns.

        Quantities are left as read; they are coerced after filtering, so a
        malformed value on a row that is later dropped does not fail the load.

        Raises:
            MissingInputError: If the file does not exist
            UnparseableFileError: If the file is not valid CSV, lacks a
                required column, or cannot be read
        """
        schema = self.schema
        string_columns = {schema.region: str, schema.drug: str, schema.year_month: str}

        try:
            df = pd.read_csv(
                path,
                usecols=schema.columns,
                dtype=string_columns,
                low_memory=False,
            )
        except FileNotFoundError as e:
            raise MissingInputError(f"File not found: {path}") from e
        except OSError as e:
            # Permission denied, a directory in place of a file, I/O errors
            raise UnparseableFileError(f"Could not read {path}: {e}") from e
        except ValueError as e:
            # ParserError, EmptyDataError, usecols mismatch and decode errors
            raise UnparseableFileError(f"Could not parse {path}: {e}") from e

        df = df[schema.columns].rename(columns=schema.rename_map())
        logger.debug(f"Read {len(df)} rows from {path.name}")
        return df

    def load(self) -> LoadResult:
        """Read every file and concatenate the rows.

        Rows are concatenated in file order; duplicates across files are kept.

        Raises:
            MissingInputError: If no files were given or one does not exist
            UnparseableFileError: If any file cannot be parsed
        """
        start_time = time.time()

        is_valid, msg = self.validate_source()
        if not is_valid:
            raise MissingInputError(msg)

        logger.info(f"Reading {len(self.file_paths)} extract file(s)")

        if self.max_workers > 1 and len(self.file_paths) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                # map() preserves input order and re-raises the first failure
                frames = list(pool.map(self.read_file, self.file_paths))
        else:
            frames = [self.read_file(path) for path in self.file_paths]

        df = pd.concat(frames, ignore_index=True)

        load_time = time.time() - start_time
        logger.info(f"Loaded {len(df)} rows in {load_time:.2f}s")

        return LoadResult(
            df=df,
            source=self.source_description,
            row_count=len(df),
            files=list(self.file_paths),
            load_time_seconds=load_time,
        )


def load_prescription_files(
    file_paths: Iterable[Path | str],
    schema: Optional[ColumnSchema] = None,
    max_workers: int = 1,
) -> LoadResult:
    """Load and combine extract files.

    Args:
        file_paths: Extract files to read
        schema: Column names used by these files (canonical names if None)
        max_workers: Files read concurrently; 1 reads sequentially

    Returns:
        LoadResult whose DataFrame has the canonical REQUIRED_COLUMNS
    """
    return ExtractLoader(file_paths, schema=schema, max_workers=max_workers).load()
