from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import ConfigError, dashboard_to_flat, load_config
from ..excel.reader import WorkbookReadError, preview_rows, read_workbook
from ..logging.init import log_summary, setup_logging
from ..services.orchestrator import ProcessingError, process_all, scan_workbooks
from ..services.summary import render_report_lines, render_summary_line

"""CLI entrypoint.

Flow:
- Load .env, then the YAML config (CELLMAP_CONFIG or --config)
- Scan the source directory for .xlsx workbooks
- Extract strike systems, recon systems and summary statistics per workbook
- Log each report, write the optional JSON report, print the SUMMARY line
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

DEFAULT_CONFIG_PATH = Path("config/cellmap.yml")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="cellmap",
        description="Extract dashboard asset counts from Excel workbooks using configured cell ranges",
    )
    p.add_argument("--config", type=Path, default=None, help="Config file (default: $CELLMAP_CONFIG or config/cellmap.yml)")
    p.add_argument("--sheet", default=None, help="Sheet to read instead of the first one")
    p.add_argument("--json", dest="json_path", type=Path, default=None, help="Write the reports as JSON to this path")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print sheet names & first rows then exit")
    p.add_argument("--show-config", action="store_true", help="Print the effective cell mappings then exit")
    return p.parse_args(argv)


def _inspect_data(directory: Path) -> int:
    try:
        files = scan_workbooks(directory)
    except ProcessingError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    if not files:
        print("inspect: no .xlsx files")
        return EXIT_SUCCESS_ALL
    for f in files:
        print(f"FILE: {f.name}")
        try:
            workbook = read_workbook(f)
        except WorkbookReadError as e:
            print(f"  read_error: {e}")
            continue
        for sheet in workbook.sheet_names:
            grid = workbook.grid(sheet)
            width = max((len(r) for r in grid), default=0)
            print(f"  SHEET: {sheet} rows={len(grid)} cols={width}")
            for row in preview_rows(workbook, sheet):
                print("    ", [v.isoformat() if hasattr(v, "isoformat") else v for v in row])
    return EXIT_SUCCESS_ALL


def _write_json(path: Path, result) -> None:
    payload = {
        "reports": [r.to_dict() for r in result.reports],
        "failed": [s.file_name for s in result.file_stats if s.status == "failed"],
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2, default=str, allow_nan=False), encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    # None only: an explicit [] must not fall back to sys.argv (pytest args)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    load_dotenv(dotenv_path=Path(".env"), override=False)
    config_path = args.config or Path(os.getenv("CELLMAP_CONFIG", str(DEFAULT_CONFIG_PATH)))
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.show_config:
        for key, value in dashboard_to_flat(cfg.dashboard).items():
            print(f"{key}={value}")
        return EXIT_SUCCESS_ALL

    directory = Path(cfg.source_directory)
    if not directory.exists():
        logger.error(f"directory not found: {directory}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(directory)

    logger.info(f"Processing files from: {directory}")
    try:
        result = process_all(cfg, sheet=args.sheet)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    for report in result.reports:
        for line in render_report_lines(report):
            logger.info(line)

    if args.json_path is not None:
        _write_json(args.json_path, result)
        logger.info(f"report written to {args.json_path}")

    # log_summary adds the "SUMMARY " prefix itself
    log_summary(render_summary_line(result)[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
