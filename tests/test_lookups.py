"""
Tests for data_processing/lookups.py - season and board lookup tables.

Tests cover:
- season_for_month(): fixed 3-month buckets and Unknown fallback
- board_name_for_code(): many-to-one board mapping and unknown codes
- LookupTables: immutability and substitution of custom tables
"""

import pytest

from data_processing.errors import UnknownRegionCodeError
from data_processing.lookups import (
    BOARD_NAME_BY_CODE,
    DEFAULT_LOOKUPS,
    SEASON_BY_MONTH,
    SSRI_PREFIXES,
    LookupTables,
    board_name_for_code,
    season_for_month,
)


class TestSeasonForMonth:
    """Test the month to season table."""

    @pytest.mark.parametrize("month,season", [
        (12, "Winter"), (1, "Winter"), (2, "Winter"),
        (3, "Spring"), (4, "Spring"), (5, "Spring"),
        (6, "Summer"), (7, "Summer"), (8, "Summer"),
        (9, "Autumn"), (10, "Autumn"), (11, "Autumn"),
    ])
    def test_bucket_table(self, month, season):
        """Every calendar month should land in its 3-month bucket."""
        assert season_for_month(month) == season

    def test_total_over_calendar_months(self):
        """No calendar month should be without a real season."""
        seasons = {season_for_month(m) for m in range(1, 13)}
        assert seasons == {"Winter", "Spring", "Summer", "Autumn"}

    @pytest.mark.parametrize("month", [0, 13, -1, 99])
    def test_out_of_range_is_unknown(self, month):
        """Months outside 1-12 should fall back to Unknown, not raise."""
        assert season_for_month(month) == "Unknown"

    def test_custom_unknown_label(self):
        """A substituted table should control the fallback label."""
        lookups = LookupTables(unknown_season="N/A")
        assert season_for_month(13, lookups) == "N/A"


class TestBoardNameForCode:
    """Test the board code to board name table."""

    def test_lanarkshire_historical_code(self):
        """S08000023 should map to Lanarkshire."""
        assert board_name_for_code("S08000023") == "Lanarkshire"

    def test_glasgow_historical_code(self):
        """S08000021 should map to Greater Glasgow & Clyde."""
        assert board_name_for_code("S08000021") == "Greater Glasgow & Clyde"

    def test_historical_and_modern_codes_share_name(self):
        """Old and new codes for the same board should map to the identical string."""
        assert board_name_for_code("S08000021") == board_name_for_code("S08000031")
        assert board_name_for_code("S08000023") == board_name_for_code("S08000032")

    def test_five_codes_three_names(self):
        """The default table should hold five codes and three names."""
        assert len(BOARD_NAME_BY_CODE) == 5
        assert len(set(BOARD_NAME_BY_CODE.values())) == 3

    def test_unknown_code_raises(self):
        """Unmapped codes should raise rather than pass through."""
        with pytest.raises(UnknownRegionCodeError, match="S08000015"):
            board_name_for_code("S08000015")

    def test_unknown_code_is_key_error(self):
        """UnknownRegionCodeError should still be catchable as KeyError."""
        with pytest.raises(KeyError):
            board_name_for_code("NOPE")


class TestLookupTables:
    """Test the immutable lookup bundle."""

    def test_default_uses_module_tables(self):
        """Default instance should expose the module-level tables."""
        assert dict(DEFAULT_LOOKUPS.board_name_by_code) == dict(BOARD_NAME_BY_CODE)
        assert dict(DEFAULT_LOOKUPS.season_by_month) == dict(SEASON_BY_MONTH)
        assert DEFAULT_LOOKUPS.drug_prefixes == SSRI_PREFIXES

    def test_tables_are_read_only(self):
        """Mappings should reject item assignment."""
        with pytest.raises(TypeError):
            DEFAULT_LOOKUPS.board_name_by_code["S08000099"] = "Somewhere"
        with pytest.raises(TypeError):
            DEFAULT_LOOKUPS.season_by_month[1] = "Summer"

    def test_custom_dict_is_copied(self):
        """Mutating the source dict afterwards should not change the tables."""
        source = {"X1": "Board X"}
        lookups = LookupTables(board_name_by_code=source)
        source["X2"] = "Board Y"
        assert "X2" not in lookups.board_name_by_code

    def test_board_names_in_first_seen_order(self):
        """board_names should list each name once."""
        assert DEFAULT_LOOKUPS.board_names == [
            "Greater Glasgow & Clyde",
            "Lanarkshire",
            "Lothian",
        ]

    def test_unmapped_codes(self):
        """unmapped_codes should return only codes missing from the table."""
        assert DEFAULT_LOOKUPS.unmapped_codes(["S08000024", "S08000015"]) == ["S08000015"]

    def test_prefixes_are_five_ssris(self):
        """The drug prefixes should be exactly the five SSRIs."""
        assert set(SSRI_PREFIXES) == {
            "SERTRALINE", "PAROXETINE", "FLUOXETINE", "CITALOPRAM", "ESCITALOPRAM",
        }
