"""
Core module for the SSRI seasonal prescribing analysis.

Contains path configuration, run models, and shared logging utilities.
"""

from core.config import PathConfig, default_paths
from core.models import AnalysisRun
from core.logging_config import setup_logging, get_logger, current_log_file

__all__ = [
    "PathConfig",
    "default_paths",
    "AnalysisRun",
    "setup_logging",
    "get_logger",
    "current_log_file",
]
