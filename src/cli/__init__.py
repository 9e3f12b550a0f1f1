"""Command-line entry points for the seasonal prescribing report."""
