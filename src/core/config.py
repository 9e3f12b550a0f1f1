"""
Configuration module for the SSRI seasonal prescribing analysis.

Contains PathConfig dataclass for centralizing all file path references.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class PathConfig:
    """
    Centralizes all file paths used across the application.

    Provides a single source of truth for where monthly prescribing extracts
    are read from and where report artefacts are written.

    Attributes:
        base_dir: Root directory of the application (defaults to current working directory)
        data_dir: Directory containing the monthly prescribing CSV extracts
        output_dir: Directory receiving aggregate CSVs and chart HTML files
    """

    base_dir: Path = field(default_factory=Path.cwd)
    _data_dir: Optional[Path] = field(default=None, repr=False)
    _output_dir: Optional[Path] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        """Set default subdirectories relative to base_dir if not provided."""
        if self._data_dir is None:
            self._data_dir = self.base_dir / "data"
        if self._output_dir is None:
            self._output_dir = self.base_dir / "output"

    @property
    def data_dir(self) -> Path:
        """Directory containing the monthly prescribing extracts."""
        # _data_dir is always set after __post_init__
        assert self._data_dir is not None
        return self._data_dir

    @property
    def output_dir(self) -> Path:
        """Directory receiving report artefacts."""
        assert self._output_dir is not None
        return self._output_dir

    # Report artefacts
    def aggregates_csv(self, run_id: str) -> Path:
        """Seasonal aggregate table for one analysis run."""
        return self.output_dir / f"seasonal_totals_{run_id}.csv"

    def pivot_csv(self, run_id: str) -> Path:
        """Board/year by season pivot for one analysis run."""
        return self.output_dir / f"seasonal_pivot_{run_id}.csv"

    def chart_html(self, run_id: str, chart: str) -> Path:
        """Interactive chart export for one analysis run."""
        return self.output_dir / f"{chart}_{run_id}.html"

    @property
    def log_dir(self) -> Path:
        """Log files written by the report CLI with --log-file."""
        return self.output_dir / "logs"

    def validate(self) -> list[str]:
        """
        Validate that the input directory exists.

        The output directory is created on demand, so only the data directory
        is checked.

        Returns:
            List of error messages. Empty list means all validations passed.
        """
        errors = []

        if not self.data_dir.exists():
            errors.append(f"Data directory not found: {self.data_dir}")
        elif not self.data_dir.is_dir():
            errors.append(f"Data path is not a directory: {self.data_dir}")

        return errors

    def ensure_output_dir(self) -> Path:
        """Create the output directory if needed and return it."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir


# Default instance for application-wide use
default_paths = PathConfig()
