"""
Tests for config/__init__.py - report TOML configuration.

Tests cover:
- Bundled report.toml contents
- Defaults when the file is missing
- Parsing custom files
- validate() for allow-lists and run definitions
- Cached access
"""

from pathlib import Path

import pytest

import config as report_config
from config import ReportConfig, default_runs, load_report_config
from core.models import AnalysisRun


class TestBundledConfig:
    """Test the shipped config/report.toml."""

    def test_bundled_file_loads(self):
        """The bundled file should parse and validate."""
        config = load_report_config()
        assert config.validate() == []

    def test_bundled_runs(self):
        """Bundled runs should cover 2016-2018 and 2019."""
        config = load_report_config()
        assert config.run_ids == ["2016_2018", "2019"]

    def test_historical_run_uses_old_codes(self):
        """The 2016-2018 run should use HBT2014 and pre-2019 codes."""
        run = load_report_config().get_run("2016_2018")
        assert run.region_column == "HBT2014"
        assert run.region_codes == ["S08000021", "S08000023", "S08000024"]

    def test_2019_run_uses_new_codes(self):
        """The 2019 run should use HBT and the reissued codes."""
        run = load_report_config().get_run("2019")
        assert run.region_column == "HBT"
        assert run.region_codes == ["S08000031", "S08000032", "S08000024"]

    def test_bundled_boards_match_builtin_table(self):
        """Board names in the TOML should match the built-in lookup."""
        from data_processing.lookups import BOARD_NAME_BY_CODE
        assert load_report_config().boards == dict(BOARD_NAME_BY_CODE)


class TestLoadReportConfig:
    """Test loading from custom paths."""

    def test_missing_file_gives_defaults(self, temp_dir: Path):
        """A missing file should return the default configuration."""
        config = load_report_config(temp_dir / "absent.toml")
        assert config.extracts.prefix == "pitc"
        assert [r.id for r in config.runs] == [r.id for r in default_runs()]

    def test_custom_file(self, temp_dir: Path):
        """Values in a custom file should be honoured."""
        path = temp_dir / "report.toml"
        path.write_text(
            '[extracts]\n'
            'prefix = "presc"\n'
            'extension = ".txt"\n'
            'max_workers = 3\n'
            '\n'
            '[boards]\n'
            'S08000024 = "Lothian"\n'
            '\n'
            '[[runs]]\n'
            'id = "lothian"\n'
            'start_year = 2018\n'
            'region_codes = ["S08000024"]\n'
            'title = "Lothian only"\n'
        )
        config = load_report_config(path)

        assert config.extracts.prefix == "presc"
        assert config.extracts.extension == ".txt"
        assert config.extracts.max_workers == 3
        assert config.boards == {"S08000024": "Lothian"}
        run = config.get_run("lothian")
        assert (run.start_year, run.end_year) == (2018, 2018)
        assert run.region_column == "HBT"
        assert run.display_title == "Lothian only"

    def test_lookups_use_configured_boards(self, temp_dir: Path):
        """lookups() should build tables from the configured boards."""
        config = ReportConfig(boards={"S08000024": "NHS Lothian"})
        assert dict(config.lookups().board_name_by_code) == {"S08000024": "NHS Lothian"}

    def test_invalid_toml_raises(self, temp_dir: Path):
        """Malformed TOML should raise."""
        path = temp_dir / "report.toml"
        path.write_text("[extracts\nprefix=")
        with pytest.raises(Exception):
            load_report_config(path)


class TestReportConfigValidate:
    """Test validate() method."""

    def test_default_is_valid(self):
        """The default configuration should validate."""
        assert ReportConfig().validate() == []

    def test_allow_list_must_be_subset_of_boards(self):
        """Region codes without a board name should be reported."""
        config = ReportConfig(runs=[
            AnalysisRun(id="x", start_year=2019, end_year=2019, region_codes=["S08000015"]),
        ])
        errors = config.validate()
        assert any("S08000015" in e for e in errors)

    def test_duplicate_run_ids(self):
        """Two runs with one id should be reported."""
        run = AnalysisRun(id="x", start_year=2019, end_year=2019, region_codes=["S08000024"])
        config = ReportConfig(runs=[run, run])
        assert any("Duplicate run id" in e for e in config.validate())

    def test_run_errors_included(self):
        """Errors from each run's validate() should be included."""
        config = ReportConfig(runs=[
            AnalysisRun(id="x", start_year=2020, end_year=2019, region_codes=["S08000024"]),
        ])
        assert any("End year" in e for e in config.validate())

    def test_no_runs(self):
        """An empty run list should be reported."""
        assert any("No analysis runs" in e for e in ReportConfig(runs=[]).validate())

    def test_bad_extension(self):
        """Extensions must start with a dot."""
        config = ReportConfig()
        config.extracts.extension = "csv"
        assert any("extension" in e for e in config.validate())

    def test_get_run_unknown(self):
        """get_run() should return None for unknown ids."""
        assert ReportConfig().get_run("1999") is None


class TestCachedConfig:
    """Test cached accessors."""

    def test_get_is_cached(self):
        """get_report_config() should return the same instance."""
        report_config.reload_report_config()
        assert report_config.get_report_config() is report_config.get_report_config()

    def test_reload_replaces(self):
        """reload_report_config() should return a fresh instance."""
        first = report_config.get_report_config()
        second = report_config.reload_report_config()
        assert first is not second
        assert report_config.get_report_config() is second
