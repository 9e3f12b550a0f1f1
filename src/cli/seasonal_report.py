"""
CLI command for building the seasonal SSRI prescribing report.

For each configured analysis run this command discovers the monthly
extracts for the run's years, aggregates SSRI paid quantity by health board,
season and year, and writes:

- seasonal_totals_<run>.csv  board/season/year totals
- seasonal_pivot_<run>.csv   board/year by season pivot
- <chart>_<run>.html         interactive Plotly charts (unless --no-charts)
- logs/seasonal_report_<ts>.log  run log (with --log-file)

Usage:
    python -m cli.seasonal_report
    python -m cli.seasonal_report --data-dir data/pitc --run 2019
    python -m cli.seasonal_report --workers 4 --no-charts -v
    python -m cli.seasonal_report --log-file -v

Run `python -m cli.seasonal_report --help` for full options.
"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

from analysis.seasonal_summary import board_season_means, pivot_seasonal_totals
from config import ReportConfig, load_report_config
from core import PathConfig, default_paths
from core.logging_config import current_log_file, get_logger, setup_logging
from data_processing.errors import OutputWriteError, PrescribingDataError
from data_processing.pipeline import RunResult, run_analysis
from visualization.plotly_generator import (
    create_faceted_bar_figure,
    create_interactive_figure,
    create_seasonal_line_figure,
    create_summary_table_figure,
    save_figure_html,
)

logger = get_logger(__name__)


def write_run_outputs(
    result: RunResult,
    paths: PathConfig,
    charts: bool = True,
) -> list[Path]:
    """Write CSV tables and (optionally) chart HTML for one run.

    Returns:
        Paths of every file written

    Raises:
        OutputWriteError: If the output directory or a file cannot be written
    """
    run = result.run
    written = []

    try:
        output_dir = paths.ensure_output_dir()

        aggregates_path = paths.aggregates_csv(run.id)
        result.aggregates.to_csv(aggregates_path, index=False)
        written.append(aggregates_path)

        pivot_path = paths.pivot_csv(run.id)
        pivot_seasonal_totals(result.aggregates).to_csv(pivot_path)
        written.append(pivot_path)

        if charts:
            title = run.display_title
            figures = {
                "seasonal_lines": create_seasonal_line_figure(result.aggregates, title),
                "seasonal_bars": create_faceted_bar_figure(result.aggregates, title),
                "seasonal_explorer": create_interactive_figure(result.aggregates, title),
                "seasonal_summary": create_summary_table_figure(
                    board_season_means(result.aggregates),
                    f"{title}: mean paid quantity per season",
                ),
            }
            for chart, fig in figures.items():
                written.append(
                    save_figure_html(fig, output_dir, paths.chart_html(run.id, chart).stem)
                )
    except OSError as e:
        raise OutputWriteError(f"Could not write outputs for run {run.id}: {e}") from e

    for path in written:
        logger.debug(f"  wrote {path}")
    return written


def build_report(
    config: ReportConfig,
    paths: Optional[PathConfig] = None,
    run_ids: Optional[Sequence[str]] = None,
    charts: bool = True,
    max_workers: Optional[int] = None,
) -> tuple[bool, str]:
    """
    Main function: run each selected analysis and write its outputs.

    Args:
        config: Report configuration (runs, boards, extract naming)
        paths: Input/output locations (uses default_paths if None)
        run_ids: Runs to execute (all configured runs if None)
        charts: Whether to write chart HTML files
        max_workers: Files read concurrently (config value if None)

    Returns:
        (success, message) tuple
    """
    if paths is None:
        paths = default_paths

    errors = config.validate() + paths.validate()
    if errors:
        return False, "Invalid configuration: " + "; ".join(errors)

    if run_ids:
        unknown = [run_id for run_id in run_ids if config.get_run(run_id) is None]
        if unknown:
            return False, f"Unknown run id(s): {unknown}. Configured: {config.run_ids}"
        runs = [config.get_run(run_id) for run_id in run_ids]
    else:
        runs = list(config.runs)

    workers = max_workers if max_workers is not None else config.extracts.max_workers
    lookups = config.lookups()
    start_time = time.time()

    total_files = 0
    for run in runs:
        try:
            result = run_analysis(
                run,
                paths.data_dir,
                lookups=lookups,
                prefix=config.extracts.prefix,
                extension=config.extracts.extension,
                max_workers=workers,
            )
            written = write_run_outputs(result, paths, charts=charts)
        except PrescribingDataError as e:
            logger.error(f"Run {run.id} failed: {e}")
            return False, f"Run {run.id} failed: {e}"

        total_files += len(written)
        logger.info(f"Run {run.id}: {result.row_count} aggregate rows, {len(written)} file(s) written")

    elapsed = time.time() - start_time
    return True, f"Completed {len(runs)} run(s), wrote {total_files} file(s) to {paths.output_dir} in {elapsed:.1f}s"


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Aggregate SSRI prescribing by health board, season and year",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # All configured runs, extracts in ./data, outputs in ./output
    python -m cli.seasonal_report

    # One run, custom locations
    python -m cli.seasonal_report --run 2019 --data-dir extracts --output-dir report

    # Tables only, four reader threads
    python -m cli.seasonal_report --no-charts --workers 4
        """,
    )

    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Directory holding the monthly extracts (default: ./data)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory for CSV and HTML outputs (default: ./output)",
    )
    parser.add_argument(
        "--run",
        dest="runs",
        action="append",
        default=None,
        help="Run id to execute; repeat for several (default: all configured runs)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a report TOML file (default: bundled config/report.toml)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Extract files read concurrently (default: from config)",
    )
    parser.add_argument(
        "--no-charts",
        action="store_true",
        help="Write CSV tables only",
    )
    parser.add_argument(
        "--log-file",
        action="store_true",
        help="Also write the log to <output-dir>/logs/seasonal_report_<timestamp>.log",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)

    paths = PathConfig(
        base_dir=Path.cwd(),
        _data_dir=Path(args.data_dir) if args.data_dir else None,
        _output_dir=Path(args.output_dir) if args.output_dir else None,
    )

    try:
        setup_logging(
            level=logging.DEBUG if args.verbose else logging.INFO,
            log_dir=paths.log_dir,
            file_logging=args.log_file,
            log_prefix="seasonal_report",
        )
    except OSError as e:
        print(f"\n[FAILED] Could not open log file in {paths.log_dir}: {e}", file=sys.stderr)
        return 1

    log_path = current_log_file()
    if log_path is not None:
        logger.info(f"Logging to {log_path}")

    config_path = Path(args.config) if args.config else None
    if config_path is not None and not config_path.exists():
        print(f"\n[FAILED] Config file not found: {config_path}", file=sys.stderr)
        return 1
    config = load_report_config(config_path)

    success, message = build_report(
        config,
        paths=paths,
        run_ids=args.runs,
        charts=not args.no_charts,
        max_workers=args.workers,
    )

    if success:
        print(f"\n[OK] {message}")
        return 0
    else:
        print(f"\n[FAILED] {message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
