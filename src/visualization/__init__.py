"""
Visualization package for seasonal prescribing charts.

This package contains functions for generating interactive Plotly visualizations:
- plotly_generator: seasonal line, faceted bar, board selector and summary table figures
"""

from visualization.plotly_generator import (
    create_seasonal_line_figure,
    create_faceted_bar_figure,
    create_interactive_figure,
    create_summary_table_figure,
    period_labels,
    save_figure_html,
)

__all__ = [
    "create_seasonal_line_figure",
    "create_faceted_bar_figure",
    "create_interactive_figure",
    "create_summary_table_figure",
    "period_labels",
    "save_figure_html",
]
