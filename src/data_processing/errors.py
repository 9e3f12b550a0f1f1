"""Exceptions raised by the prescribing data pipeline.

Every error is fatal for the run that raised it; there is no partial-result
mode.
"""


class PrescribingDataError(Exception):
    """Base class for pipeline failures."""


class MissingInputError(PrescribingDataError, FileNotFoundError):
    """No extract matched the discovery pattern, or a listed file is absent."""


class UnparseableFileError(PrescribingDataError, ValueError):
    """An extract could not be read as CSV with the expected columns."""


class UnparseableDateError(PrescribingDataError, ValueError):
    """A paid year-month value is not a valid YYYYMM month."""


class UnknownRegionCodeError(PrescribingDataError, KeyError):
    """A region code has no board name in the lookup table."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable
        return str(self.args[0]) if self.args else ""


class OutputWriteError(PrescribingDataError, OSError):
    """A report table or chart could not be written."""
