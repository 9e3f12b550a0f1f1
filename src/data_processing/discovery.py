"""
Discovery of monthly prescribing extracts on disk.

Extract filenames carry a fixed prefix, a four-digit year, an optional
three-letter month abbreviation and a fixed extension, for example
``pitc2019nov.csv`` or ``pitc2017.csv``.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from core.logging_config import get_logger
from data_processing.errors import MissingInputError

logger = get_logger(__name__)

DEFAULT_PREFIX = "pitc"
DEFAULT_EXTENSION = ".csv"

MONTH_ABBREVIATIONS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}


@dataclass(frozen=True)
class PrescriptionFile:
    """An extract file with the period parsed from its name."""

    path: Path
    year: int
    month: Optional[int] = None

    @property
    def sort_key(self) -> tuple[int, int]:
        # Whole-year batches sort before that year's monthly files
        return (self.year, self.month or 0)


def _filename_pattern(prefix: str, extension: str) -> re.Pattern:
    return re.compile(
        rf"^{re.escape(prefix)}(?P<year>\d{{4}})(?P<month>[a-z]{{3}})?{re.escape(extension)}$",
        re.IGNORECASE,
    )


def parse_prescription_filename(
    path: Path | str,
    prefix: str = DEFAULT_PREFIX,
    extension: str = DEFAULT_EXTENSION,
) -> Optional[PrescriptionFile]:
    """
    Parse the year and optional month out of an extract filename.

    Args:
        path: File path or bare filename
        prefix: Filename prefix token
        extension: Filename extension including the dot

    Returns:
        PrescriptionFile, or None if the name does not follow the pattern
        (including an unrecognised month abbreviation).
    """
    path = Path(path)
    match = _filename_pattern(prefix, extension).match(path.name)
    if match is None:
        return None

    month = None
    if match.group("month"):
        month = MONTH_ABBREVIATIONS.get(match.group("month").lower())
        if month is None:
            return None

    return PrescriptionFile(path=path, year=int(match.group("year")), month=month)


def discover_prescription_files(
    data_dir: Path | str,
    years: Optional[Iterable[int]] = None,
    prefix: str = DEFAULT_PREFIX,
    extension: str = DEFAULT_EXTENSION,
) -> list[Path]:
    """
    Find extract files in a directory, ordered by period.

    Args:
        data_dir: Directory to search (not recursive)
        years: Years to include (None = all years)
        prefix: Filename prefix token
        extension: Filename extension including the dot

    Returns:
        Paths sorted by year then month

    Raises:
        MissingInputError: If the directory does not exist or no file matches
    """
    data_dir = Path(data_dir)
    if not data_dir.is_dir():
        raise MissingInputError(f"Data directory not found: {data_dir}")

    wanted = set(years) if years is not None else None

    found = []
    for candidate in data_dir.iterdir():
        if not candidate.is_file():
            continue
        parsed = parse_prescription_filename(candidate, prefix, extension)
        if parsed is None:
            continue
        if wanted is not None and parsed.year not in wanted:
            continue
        found.append(parsed)

    if not found:
        year_text = f" for years {sorted(wanted)}" if wanted is not None else ""
        raise MissingInputError(
            f"No files matching '{prefix}YYYY[mon]{extension}' in {data_dir}{year_text}"
        )

    found.sort(key=lambda f: (f.sort_key, f.path.name))
    logger.info(f"Discovered {len(found)} extract file(s) in {data_dir}")
    for f in found:
        logger.debug(f"  {f.path.name}")

    return [f.path for f in found]
