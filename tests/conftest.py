"""
Pytest configuration and fixtures for the test suite.

This module provides shared fixtures used across multiple test modules.
"""

import tempfile
from pathlib import Path
from typing import Callable, Generator

import pandas as pd
import pytest

from core.models import AnalysisRun


EXTRACT_COLUMNS = ["HBT", "BNFItemDescription", "PaidQuantity", "PaidDateMonth"]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def write_extract() -> Callable[..., Path]:
    """
    Return a helper that writes an extract CSV.

    Usage:
        write_extract(directory, "pitc2019nov.csv", rows)

    ``rows`` is a list of tuples in EXTRACT_COLUMNS order unless ``columns``
    is given. Extra columns present in real extracts are added so the loader
    has something to ignore.
    """
    def _write(directory: Path, name: str, rows: list[tuple], columns: list[str] = None) -> Path:
        columns = columns or EXTRACT_COLUMNS
        df = pd.DataFrame(rows, columns=columns)
        df.insert(0, "GPPractice", "10002")
        df["NumberOfPaidItems"] = 1
        path = directory / name
        df.to_csv(path, index=False)
        return path

    return _write


@pytest.fixture
def scenario_frame() -> pd.DataFrame:
    """Three loaded rows: two SSRIs in Glasgow and ibuprofen in Lothian."""
    return pd.DataFrame({
        "HBT": ["S08000031", "S08000031", "S08000024"],
        "BNFItemDescription": ["SERTRALINE 50MG", "PAROXETINE", "IBUPROFEN"],
        "PaidQuantity": [100, 50, 999],
        "PaidDateMonth": ["201911", "201912", "201911"],
    })


@pytest.fixture
def mixed_frame() -> pd.DataFrame:
    """Loaded rows covering every board, the five SSRIs and some non-matches."""
    return pd.DataFrame({
        "HBT": [
            "S08000031", "S08000031", "S08000032", "S08000032",
            "S08000024", "S08000024", "S08000015", "S08000031",
            "S08000024", "S08000032",
        ],
        "BNFItemDescription": [
            "SERTRALINE 50MG TABLETS", "CITALOPRAM 20MG TABLETS",
            "FLUOXETINE 20MG CAPSULES", "ESCITALOPRAM 10MG TABLETS",
            "PAROXETINE 20MG TABLETS", "ASPIRIN 75MG",
            "SERTRALINE 100MG TABLETS", "sertraline 50mg tablets",
            "FLUOXETINE 20MG CAPSULES", "SERTRALINE 50MG TABLETS",
        ],
        "PaidQuantity": [28, 56, 30, None, 60, 28, 500, 28, 90, 14],
        "PaidDateMonth": [
            "201901", "201904", "201907", "201910",
            "201902", "201902", "201902", "201901",
            "201912", "201907",
        ],
    })


@pytest.fixture
def run_2019() -> AnalysisRun:
    """Run over the 2019 extracts with the post-April-2019 board codes."""
    return AnalysisRun(
        id="2019",
        start_year=2019,
        end_year=2019,
        region_codes=["S08000031", "S08000032", "S08000024"],
    )


@pytest.fixture
def extracts_dir(temp_dir: Path, write_extract) -> Path:
    """
    Data directory with two monthly 2019 extracts and one unrelated file.

    Expected aggregates for run_2019:
        Greater Glasgow & Clyde, Autumn, 2019: 100
        Greater Glasgow & Clyde, Winter, 2019: 50
        Lanarkshire, Winter, 2019: 28
    """
    data_dir = temp_dir / "data"
    data_dir.mkdir()

    write_extract(data_dir, "pitc2019nov.csv", [
        ("S08000031", "SERTRALINE 50MG", 100, 201911),
        ("S08000024", "IBUPROFEN 400MG", 999, 201911),
    ])
    write_extract(data_dir, "pitc2019dec.csv", [
        ("S08000031", "PAROXETINE 20MG", 50, 201912),
        ("S08000032", "CITALOPRAM 10MG", 28, 201912),
        ("S08000015", "SERTRALINE 50MG", 400, 201912),
    ])
    (data_dir / "notes.txt").write_text("not an extract")

    return data_dir
