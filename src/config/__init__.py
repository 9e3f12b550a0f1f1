"""
Configuration module for the seasonal prescribing report.

This module provides access to report settings loaded from TOML files.
Primary configuration file: config/report.toml

Usage:
    from config import get_report_config

    config = get_report_config()
    for run in config.runs:
        print(run.id, run.region_codes)
"""

from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional
try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib

from core.models import AnalysisRun
from data_processing.discovery import DEFAULT_EXTENSION, DEFAULT_PREFIX
from data_processing.lookups import BOARD_NAME_BY_CODE, LookupTables


DEFAULT_CONFIG_PATH = Path(__file__).parent / "report.toml"


@dataclass
class ExtractConfig:
    """Where and how extract files are found and read."""
    prefix: str = DEFAULT_PREFIX
    extension: str = DEFAULT_EXTENSION
    max_workers: int = 1


def default_runs() -> list[AnalysisRun]:
    """Runs used when no configuration file is present."""
    return [
        AnalysisRun(
            id="2016_2018",
            start_year=2016,
            end_year=2018,
            region_column="HBT2014",
            region_codes=["S08000021", "S08000023", "S08000024"],
        ),
        AnalysisRun(
            id="2019",
            start_year=2019,
            end_year=2019,
            region_column="HBT",
            region_codes=["S08000031", "S08000032", "S08000024"],
        ),
    ]


@dataclass
class ReportConfig:
    """Complete report configuration."""
    extracts: ExtractConfig = field(default_factory=ExtractConfig)
    boards: dict[str, str] = field(default_factory=lambda: dict(BOARD_NAME_BY_CODE))
    runs: list[AnalysisRun] = field(default_factory=default_runs)

    def lookups(self) -> LookupTables:
        """Lookup tables using this configuration's board names."""
        return LookupTables(board_name_by_code=self.boards)

    def get_run(self, run_id: str) -> Optional[AnalysisRun]:
        """Return the run with the given id, or None."""
        for run in self.runs:
            if run.id == run_id:
                return run
        return None

    @property
    def run_ids(self) -> list[str]:
        return [run.id for run in self.runs]

    def validate(self) -> list[str]:
        """
        Validate the configuration.

        Returns:
            List of error messages (empty if valid).
        """
        errors = []

        if not self.extracts.prefix:
            errors.append("Extract prefix is not configured (extracts.prefix)")

        if not self.extracts.extension.startswith("."):
            errors.append(f"Extract extension must start with '.': {self.extracts.extension}")

        if self.extracts.max_workers < 1:
            errors.append("max_workers must be at least 1")

        if not self.boards:
            errors.append("No health boards configured ([boards])")

        if not self.runs:
            errors.append("No analysis runs configured ([[runs]])")

        seen = set()
        for run in self.runs:
            if run.id in seen:
                errors.append(f"Duplicate run id: {run.id}")
            seen.add(run.id)

            errors.extend(run.validate())

            unmapped = [code for code in run.region_codes if code not in self.boards]
            if unmapped:
                errors.append(f"Run '{run.id}' has region codes without a board name: {unmapped}")

        return errors


def _parse_run(data: dict) -> AnalysisRun:
    """Parse one [[runs]] entry from TOML data."""
    start_year = int(data.get("start_year", 0))
    return AnalysisRun(
        id=str(data.get("id", "")),
        start_year=start_year,
        end_year=int(data.get("end_year", start_year)),
        region_codes=[str(code) for code in data.get("region_codes", [])],
        region_column=data.get("region_column", "HBT"),
        title=data.get("title", ""),
    )


def load_report_config(config_path: Optional[Path] = None) -> ReportConfig:
    """
    Load report configuration from TOML file.

    Args:
        config_path: Path to the TOML config file. Defaults to config/report.toml
                     next to this module.

    Returns:
        ReportConfig dataclass with all settings.

    Raises:
        tomllib.TOMLDecodeError: If the TOML is invalid.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        # Return default config if file doesn't exist
        return ReportConfig()

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    extract_data = data.get("extracts", {})
    extracts = ExtractConfig(
        prefix=extract_data.get("prefix", DEFAULT_PREFIX),
        extension=extract_data.get("extension", DEFAULT_EXTENSION),
        max_workers=int(extract_data.get("max_workers", 1)),
    )

    boards_data = data.get("boards")
    boards = (
        {str(code): str(name) for code, name in boards_data.items()}
        if boards_data
        else dict(BOARD_NAME_BY_CODE)
    )

    runs_data = data.get("runs")
    runs = [_parse_run(item) for item in runs_data] if runs_data else default_runs()

    return ReportConfig(extracts=extracts, boards=boards, runs=runs)


# Module-level cached config (loaded on first access)
_cached_config: Optional[ReportConfig] = None


def get_report_config() -> ReportConfig:
    """
    Get the report configuration (cached after first load).

    Returns:
        ReportConfig dataclass with all settings.
    """
    global _cached_config
    if _cached_config is None:
        _cached_config = load_report_config()
    return _cached_config


def reload_report_config() -> ReportConfig:
    """
    Reload the report configuration from disk.

    Returns:
        ReportConfig dataclass with all settings.
    """
    global _cached_config
    _cached_config = load_report_config()
    return _cached_config


# Export public API
__all__ = [
    "ReportConfig",
    "ExtractConfig",
    "default_runs",
    "load_report_config",
    "get_report_config",
    "reload_report_config",
    "DEFAULT_CONFIG_PATH",
]
