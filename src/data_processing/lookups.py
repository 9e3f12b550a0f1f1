"""
Fixed lookup tables for the seasonal aggregation.

The tables are read-only mappings bundled in a frozen LookupTables instance
that the transform functions receive explicitly, so tests and configuration
can substitute their own tables.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from data_processing.errors import UnknownRegionCodeError

# Drug-description prefixes for the five SSRIs (case-sensitive, start-anchored)
SSRI_PREFIXES = (
    "SERTRALINE",
    "PAROXETINE",
    "FLUOXETINE",
    "CITALOPRAM",
    "ESCITALOPRAM",
)

WINTER = "Winter"
SPRING = "Spring"
SUMMER = "Summer"
AUTUMN = "Autumn"
UNKNOWN_SEASON = "Unknown"

# Presentation and sort order
SEASON_ORDER = (WINTER, SPRING, SUMMER, AUTUMN, UNKNOWN_SEASON)

SEASON_BY_MONTH: Mapping[int, str] = MappingProxyType({
    12: WINTER, 1: WINTER, 2: WINTER,
    3: SPRING, 4: SPRING, 5: SPRING,
    6: SUMMER, 7: SUMMER, 8: SUMMER,
    9: AUTUMN, 10: AUTUMN, 11: AUTUMN,
})

GREATER_GLASGOW_AND_CLYDE = "Greater Glasgow & Clyde"
LANARKSHIRE = "Lanarkshire"
LOTHIAN = "Lothian"

# Health board codes. Glasgow and Lanarkshire were issued new codes in
# April 2019 after a boundary change; both generations map to one name.
BOARD_NAME_BY_CODE: Mapping[str, str] = MappingProxyType({
    "S08000021": GREATER_GLASGOW_AND_CLYDE,
    "S08000031": GREATER_GLASGOW_AND_CLYDE,
    "S08000023": LANARKSHIRE,
    "S08000032": LANARKSHIRE,
    "S08000024": LOTHIAN,
})


@dataclass(frozen=True)
class LookupTables:
    """
    Immutable bundle of the tables used by the filter and transform stages.

    Attributes:
        board_name_by_code: Region code to board name (many-to-one)
        season_by_month: Calendar month (1-12) to season label
        drug_prefixes: Drug-description prefixes kept by the filter
        unknown_season: Label for months outside the season table
    """

    board_name_by_code: Mapping[str, str] = field(default_factory=lambda: BOARD_NAME_BY_CODE)
    season_by_month: Mapping[int, str] = field(default_factory=lambda: SEASON_BY_MONTH)
    drug_prefixes: tuple[str, ...] = SSRI_PREFIXES
    unknown_season: str = UNKNOWN_SEASON

    def __post_init__(self) -> None:
        # Freeze caller-supplied dicts so a shared instance cannot drift
        if not isinstance(self.board_name_by_code, MappingProxyType):
            object.__setattr__(
                self, "board_name_by_code", MappingProxyType(dict(self.board_name_by_code))
            )
        if not isinstance(self.season_by_month, MappingProxyType):
            object.__setattr__(
                self, "season_by_month", MappingProxyType(dict(self.season_by_month))
            )
        object.__setattr__(self, "drug_prefixes", tuple(self.drug_prefixes))

    @classmethod
    def default(cls) -> "LookupTables":
        """Tables for the five SSRIs and the three Scottish boards."""
        return cls()

    @property
    def board_names(self) -> list[str]:
        """Distinct board names in first-seen order."""
        return list(dict.fromkeys(self.board_name_by_code.values()))

    def unmapped_codes(self, codes) -> list[str]:
        """Codes from ``codes`` that have no board name."""
        return [code for code in codes if code not in self.board_name_by_code]


DEFAULT_LOOKUPS = LookupTables.default()


def season_for_month(month: int, lookups: Optional[LookupTables] = None) -> str:
    """
    Return the season label for a calendar month.

    Total over all integers: months outside the table fall back to
    ``lookups.unknown_season``.

    Example:
        >>> season_for_month(12)
        'Winter'
        >>> season_for_month(13)
        'Unknown'
    """
    if lookups is None:
        lookups = DEFAULT_LOOKUPS
    return lookups.season_by_month.get(month, lookups.unknown_season)


def board_name_for_code(code: str, lookups: Optional[LookupTables] = None) -> str:
    """
    Return the board name for a region code.

    Raises:
        UnknownRegionCodeError: If the code is not in the lookup table
    """
    if lookups is None:
        lookups = DEFAULT_LOOKUPS
    try:
        return lookups.board_name_by_code[code]
    except KeyError:
        raise UnknownRegionCodeError(f"No board name for region code: {code!r}") from None
