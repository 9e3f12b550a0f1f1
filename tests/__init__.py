"""
Test suite for the SSRI seasonal prescribing analysis.

This package contains unit tests and integration tests for:
- Core configuration and models (config.py, models.py, report TOML)
- Pipeline stages (discovery, loader, transforms, aggregation)
- End-to-end runs, summaries, charts and the report CLI
"""
