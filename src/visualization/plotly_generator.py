"""
Plotly chart generation for the seasonal prescribing report.

This module turns the board/season/year aggregate table into interactive
charts: a seasonal line chart, bars faceted by health board, a line chart
with a board selector, and a summary table.
"""

from pathlib import Path

import pandas as pd
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from core.logging_config import get_logger
from data_processing.aggregation import TOTAL_COLUMN
from data_processing.lookups import SEASON_ORDER
from data_processing.transforms import BOARD_COLUMN, SEASON_COLUMN, YEAR_COLUMN

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# Shared styling constants
# ---------------------------------------------------------------------------

CHART_FONT_FAMILY = "Source Sans 3, system-ui, sans-serif"
CHART_TITLE_SIZE = 18
CHART_TITLE_COLOR = "#1E293B"
GRID_COLOR = "#E2E8F0"
ANNOTATION_COLOR = "#768692"
TABLE_HEADER_COLOR = "#005EB8"
TABLE_ROW_COLORS = ["#FFFFFF", "#F1F5F9"]

# One colour per health board
BOARD_PALETTE = [
    "#005EB8",  # NHS Blue
    "#DA291C",  # Red
    "#009639",  # Green
    "#ED8B00",  # Orange
    "#7C2855",  # Plum
    "#00A499",  # Teal
    "#330072",  # Purple
]

SEASON_COLOURS = {
    "Winter": "#005EB8",
    "Spring": "#009639",
    "Summer": "#ED8B00",
    "Autumn": "#7C2855",
    "Unknown": "#768692",
}

Y_AXIS_LABEL = "Paid quantity"


def _base_layout(title: str, **overrides) -> dict:
    """Return a dict of shared Plotly layout properties.

    Args:
        title: Display title for the chart.
        **overrides: Any key accepted by ``fig.update_layout()``; merged on
            top of the base dict.

    Returns:
        Dict ready to be unpacked into ``fig.update_layout(**layout)``.
    """
    layout = dict(
        title=dict(
            text=title,
            font=dict(
                family=CHART_FONT_FAMILY,
                size=CHART_TITLE_SIZE,
                color=CHART_TITLE_COLOR,
            ),
            x=0.5,
            xanchor="center",
        ),
        hoverlabel=dict(
            bgcolor="#FFFFFF",
            bordercolor="#CBD5E1",
            font=dict(
                family=CHART_FONT_FAMILY,
                size=13,
                color=CHART_TITLE_COLOR,
            ),
        ),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        autosize=True,
        font=dict(family=CHART_FONT_FAMILY),
    )
    layout.update(overrides)
    return layout


def _legend_below() -> dict:
    return dict(
        orientation="h",
        yanchor="top",
        y=-0.15,
        xanchor="center",
        x=0.5,
        font=dict(family=CHART_FONT_FAMILY, size=11),
    )


def _empty_figure(title: str) -> go.Figure:
    """Figure carrying a 'no data' message, used when a run matched nothing."""
    fig = go.Figure()
    fig.add_annotation(
        text="No SSRI prescriptions matched the selected boards and years.",
        xref="paper", yref="paper", x=0.5, y=0.5,
        showarrow=False,
        font=dict(size=16, color=ANNOTATION_COLOR, family=CHART_FONT_FAMILY),
    )
    fig.update_layout(**_base_layout(title))
    return fig


def _season_rank(season: str) -> int:
    try:
        return SEASON_ORDER.index(season)
    except ValueError:
        return len(SEASON_ORDER)


def period_labels(aggregates: pd.DataFrame) -> list[str]:
    """Chronological '<Year> <Season>' labels present in the aggregates."""
    pairs = {
        (year, season)
        for year, season in zip(aggregates[YEAR_COLUMN], aggregates[SEASON_COLUMN])
    }
    ordered = sorted(pairs, key=lambda p: (p[0], _season_rank(p[1])))
    return [f"{year} {season}" for year, season in ordered]


def _board_series(aggregates: pd.DataFrame) -> dict[str, tuple[list[str], list[float]]]:
    """Per-board (period labels, totals) in chronological order."""
    labels = period_labels(aggregates)
    position = {label: i for i, label in enumerate(labels)}

    series = {}
    for board, group in aggregates.groupby(BOARD_COLUMN, sort=True):
        points = sorted(
            (
                (f"{year} {season}", total)
                for year, season, total in zip(
                    group[YEAR_COLUMN], group[SEASON_COLUMN], group[TOTAL_COLUMN]
                )
            ),
            key=lambda p: position[p[0]],
        )
        series[board] = ([p[0] for p in points], [p[1] for p in points])
    return series


def create_seasonal_line_figure(aggregates: pd.DataFrame, title: str = "") -> go.Figure:
    """
    Create a line chart of seasonal totals over time, one line per board.

    Args:
        aggregates: Output of aggregate_seasonal_totals()
        title: Chart title

    Returns:
        Plotly Figure with a categorical '<Year> <Season>' x-axis
    """
    display_title = title or "SSRI paid quantity by season"
    if aggregates.empty:
        return _empty_figure(display_title)

    fig = go.Figure()
    for i, (board, (periods, totals)) in enumerate(_board_series(aggregates).items()):
        colour = BOARD_PALETTE[i % len(BOARD_PALETTE)]
        fig.add_trace(go.Scatter(
            x=periods,
            y=totals,
            mode="lines+markers",
            name=board,
            line=dict(color=colour, width=2),
            marker=dict(color=colour, size=6),
            hovertemplate=(
                f"<b>{board}</b><br>"
                "Period: %{x}<br>"
                "Paid quantity: %{y:,.0f}<extra></extra>"
            ),
        ))

    layout = _base_layout(display_title)
    layout.update(
        xaxis=dict(
            title="Season",
            gridcolor=GRID_COLOR,
            type="category",
            categoryorder="array",
            categoryarray=period_labels(aggregates),
        ),
        yaxis=dict(title=Y_AXIS_LABEL, gridcolor=GRID_COLOR, zeroline=True, zerolinecolor=GRID_COLOR),
        margin=dict(t=60, l=8, r=24, b=100),
        legend=_legend_below(),
        hovermode="x unified",
    )
    fig.update_layout(**layout)
    return fig


def create_faceted_bar_figure(aggregates: pd.DataFrame, title: str = "") -> go.Figure:
    """
    Create grouped bar charts of seasonal totals, one panel per board.

    Within each panel the x-axis is the year and bars are grouped by season.
    Panels share the y-axis so boards can be compared directly.

    Args:
        aggregates: Output of aggregate_seasonal_totals()
        title: Chart title

    Returns:
        Plotly Figure with one subplot per board
    """
    display_title = title or "SSRI paid quantity by season and health board"
    if aggregates.empty:
        return _empty_figure(display_title)

    boards = sorted(aggregates[BOARD_COLUMN].unique())
    years = sorted(aggregates[YEAR_COLUMN].unique())
    seasons = sorted(aggregates[SEASON_COLUMN].unique(), key=_season_rank)

    fig = make_subplots(
        rows=1,
        cols=len(boards),
        shared_yaxes=True,
        subplot_titles=boards,
        horizontal_spacing=0.04,
    )

    for col, board in enumerate(boards, start=1):
        board_rows = aggregates[aggregates[BOARD_COLUMN] == board]
        for season in seasons:
            season_rows = board_rows[board_rows[SEASON_COLUMN] == season]
            totals = dict(zip(season_rows[YEAR_COLUMN], season_rows[TOTAL_COLUMN]))
            fig.add_trace(
                go.Bar(
                    x=years,
                    y=[totals.get(year, 0) for year in years],
                    name=season,
                    legendgroup=season,
                    showlegend=(col == 1),
                    marker=dict(color=SEASON_COLOURS.get(season, ANNOTATION_COLOR)),
                    hovertemplate=(
                        f"<b>{board}</b><br>"
                        f"{season} %{{x}}<br>"
                        "Paid quantity: %{y:,.0f}<extra></extra>"
                    ),
                ),
                row=1,
                col=col,
            )
        fig.update_xaxes(type="category", title_text="Year", row=1, col=col)

    fig.update_yaxes(title_text=Y_AXIS_LABEL, gridcolor=GRID_COLOR, row=1, col=1)

    layout = _base_layout(display_title)
    layout.update(
        barmode="group",
        margin=dict(t=80, l=8, r=24, b=100),
        legend=_legend_below(),
    )
    fig.update_layout(**layout)
    return fig


def create_interactive_figure(aggregates: pd.DataFrame, title: str = "") -> go.Figure:
    """
    Create a seasonal line chart with a dropdown to focus on one board.

    The first dropdown entry shows every board; the others show a single
    board's line.

    Args:
        aggregates: Output of aggregate_seasonal_totals()
        title: Chart title

    Returns:
        Plotly Figure with an ``updatemenus`` board selector
    """
    display_title = title or "SSRI paid quantity by season (select a board)"
    fig = create_seasonal_line_figure(aggregates, display_title)
    if aggregates.empty:
        return fig

    boards = [trace.name for trace in fig.data]
    buttons = [
        dict(
            label="All boards",
            method="update",
            args=[{"visible": [True] * len(boards)}, {"title.text": display_title}],
        )
    ]
    for board in boards:
        buttons.append(dict(
            label=board,
            method="update",
            args=[
                {"visible": [name == board for name in boards]},
                {"title.text": f"{display_title} - {board}"},
            ],
        ))

    fig.update_layout(
        updatemenus=[dict(
            type="dropdown",
            buttons=buttons,
            direction="down",
            showactive=True,
            x=0.0,
            xanchor="left",
            y=1.12,
            yanchor="top",
        )],
        hovermode="closest",
    )
    return fig


def _format_cell(value) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if pd.isna(value):
            return ""
        return f"{value:,.0f}"
    return str(value)


def create_summary_table_figure(summary: pd.DataFrame, title: str = "") -> go.Figure:
    """
    Render a summary DataFrame (e.g. seasonal means per board) as a table.

    Index levels become leading columns; numeric cells are shown with
    thousands separators.

    Args:
        summary: Output of pivot_seasonal_totals() or board_season_means()
        title: Table title

    Returns:
        Plotly Figure containing a single go.Table
    """
    display_title = title or "Seasonal summary"
    table = summary.reset_index() if any(name is not None for name in summary.index.names) else summary

    header = [str(col) for col in table.columns]
    cells = [[_format_cell(v) for v in table[col].tolist()] for col in table.columns]
    n_rows = len(table)

    fig = go.Figure(go.Table(
        header=dict(
            values=[f"<b>{h}</b>" for h in header],
            fill_color=TABLE_HEADER_COLOR,
            font=dict(color="#FFFFFF", family=CHART_FONT_FAMILY, size=13),
            align="left",
        ),
        cells=dict(
            values=cells,
            fill_color=[[TABLE_ROW_COLORS[i % 2] for i in range(n_rows)]] * len(header),
            font=dict(color=CHART_TITLE_COLOR, family=CHART_FONT_FAMILY, size=12),
            align=["left"] + ["right"] * (len(header) - 1),
            height=26,
        ),
    ))
    fig.update_layout(**_base_layout(display_title, margin=dict(t=60, l=8, r=8, b=8)))
    return fig


def save_figure_html(fig: go.Figure, save_dir: Path | str, name: str) -> Path:
    """
    Save Plotly figure to HTML file.

    Args:
        fig: Plotly Figure object
        save_dir: Directory to save the HTML file (created if missing)
        name: File name without extension

    Returns:
        Path to the saved HTML file
    """
    save_dir = Path(save_dir)
    save_dir.mkdir(parents=True, exist_ok=True)
    filepath = save_dir / f"{name}.html"
    fig.write_html(str(filepath))
    logger.info(f"Chart saved to {filepath}")
    return filepath
