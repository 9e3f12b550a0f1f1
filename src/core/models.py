"""
Data models for the SSRI seasonal prescribing analysis.

Contains dataclasses describing the extract column layout and the parameters
of a single analysis run.
"""

from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class ColumnSchema:
    """
    Column names of a monthly prescribing extract.

    The loader renames whatever a file calls these columns to the defaults,
    so every stage after loading sees one layout.

    Attributes:
        region: Health board code column (``HBT2014`` in 2016-2018 extracts)
        drug: Free-text item description
        quantity: Paid quantity (may be missing)
        year_month: Paid month encoded as YYYYMM
    """

    region: str = "HBT"
    drug: str = "BNFItemDescription"
    quantity: str = "PaidQuantity"
    year_month: str = "PaidDateMonth"

    @property
    def columns(self) -> list[str]:
        """Columns to read from each file, in canonical order."""
        return [self.region, self.drug, self.quantity, self.year_month]

    def rename_map(self) -> dict[str, str]:
        """Mapping from this schema's names to the canonical names."""
        canonical = CANONICAL_SCHEMA
        return {
            self.region: canonical.region,
            self.drug: canonical.drug,
            self.quantity: canonical.quantity,
            self.year_month: canonical.year_month,
        }


CANONICAL_SCHEMA = ColumnSchema()


@dataclass
class AnalysisRun:
    """
    Parameters for one pass of the seasonal aggregation.

    Each run covers a contiguous range of extract years and carries its own
    board allow-list, because board codes were reissued in April 2019 and the
    extracts renamed the board column at the same time.

    Attributes:
        id: Short identifier used in output filenames (e.g. '2016_2018')
        start_year: First extract year (inclusive)
        end_year: Last extract year (inclusive)
        region_codes: Health board codes to keep
        region_column: Name of the board code column in this run's files
        title: Optional display title (blank = auto-generated)
    """

    id: str
    start_year: int
    end_year: int
    region_codes: list[str] = field(default_factory=list)
    region_column: str = "HBT"
    title: str = ""

    @property
    def years(self) -> list[int]:
        """Every extract year covered by the run."""
        return list(range(self.start_year, self.end_year + 1))

    @property
    def schema(self) -> ColumnSchema:
        """Column layout of this run's extracts."""
        return replace(CANONICAL_SCHEMA, region=self.region_column)

    @property
    def display_title(self) -> str:
        """Custom title if set, otherwise one built from the year range."""
        if self.title:
            return self.title
        if self.start_year == self.end_year:
            return f"SSRI prescribing by season, {self.start_year}"
        return f"SSRI prescribing by season, {self.start_year}-{self.end_year}"

    def validate(self) -> list[str]:
        """
        Validate run configuration for logical consistency.

        Returns:
            List of error messages. Empty list means all validations passed.
        """
        errors = []

        if not self.id:
            errors.append("Run id cannot be empty")

        if self.end_year < self.start_year:
            errors.append(
                f"End year ({self.end_year}) cannot be before start year ({self.start_year})"
            )

        if not self.region_codes:
            errors.append(f"Run '{self.id}' has no region codes")

        if not self.region_column:
            errors.append(f"Run '{self.id}' has no region column")

        return errors

    def summary(self) -> str:
        """Return a human-readable summary of the run, used in log output."""
        lines = [
            f"Run: {self.id}",
            f"Years: {self.start_year} to {self.end_year}",
            f"Region column: {self.region_column}",
            f"Region codes: {', '.join(self.region_codes) if self.region_codes else 'None'}",
        ]
        if self.title:
            lines.append(f"Custom title: {self.title}")
        return "\n".join(lines)
