#!/usr/bin/env python3
"""
Merge CSV files into the matching sheets of an FBDI workbook template.

The template is copied to the output path first; the copy is then filled
with one new row per CSV record, placed under the header of the same name
on the sheet named after the CSV file.

Usage:
    fbdi-merge ../templates/ApInvoices.xlsm ../extracts/

    fbdi-merge ../templates/ApInvoices.xlsm ../extracts/ \
               --output ../out/ApInvoices_filled.xlsm \
               --encoding cp1252 \
               --report ../out/merge_report.json

Exit status:
    0  merged (some CSV files may have been skipped or failed)
    1  invalid input, output file or config; nothing merged
    2  invalid command line
    3  unexpected error
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from tqdm.contrib.logging import logging_redirect_tqdm

from .config import MergeConfig, load_config
from .constants import EXIT_FATAL, EXIT_OK, EXIT_PRECONDITION, LOG_FILE_NAME
from .errors import ConfigError, OutputFileError
from .merger import merge_files
from .progress import TqdmReporter
from .results import MergeReport
from .validation import create_output_file, default_output_path, validate_inputs

logger = logging.getLogger(__name__)


def setup_logging(log_dir: Optional[str] = None, verbose: bool = False) -> logging.Logger:
    """Configure logging."""
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_format = logging.Formatter('%(levelname)s: %(message)s')
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    # File handler
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        logger.setLevel(logging.DEBUG)
        log_path = os.path.join(log_dir, LOG_FILE_NAME)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(logging.DEBUG)
        file_format = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

    return logger


def save_report(report: MergeReport, report_path: Path) -> None:
    """Write the merge report as JSON."""
    report_path = Path(report_path)
    report_path.parent.mkdir(parents=True, exist_ok=True)
    with open(report_path, 'w') as f:
        json.dump(report.to_dict(), f, indent=2)
    logger.info(f"Report saved to {report_path}")


def log_summary(report: MergeReport) -> None:
    """Log the per-status counts of a merge run."""
    logger.info(
        f"Merged {len(report.merged)} file(s), {report.rows_appended} row(s) appended; "
        f"{len(report.skipped)} skipped, {len(report.failed)} failed"
    )
    for result in report.failed:
        logger.debug(f"  - {result.csv_path}: {result.error}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='fbdi-merge',
        description='Merges FBDI document and CSV files.'
    )

    parser.add_argument('template',
                        help='File path to Excel document to merge CSV files into')
    parser.add_argument('csv_folder',
                        help="Path to folder with CSV files to merge in. Folder must contain 'csv' files")

    parser.add_argument('--output', type=str, default=None,
                        help='File path to export merged FBDI document to '
                             '(default: Output<ext> next to the template)')
    parser.add_argument('--encoding', type=str, default=None,
                        help='Text encoding of the CSV files (default: utf-8-sig, UTF-8 with optional BOM)')
    parser.add_argument('--config', type=str, default=None,
                        help='Path to config YAML file')
    parser.add_argument('--report', type=str, default=None,
                        help='Write a JSON report of per-file results to this path')
    parser.add_argument('--log-dir', type=str, default=None,
                        help='Directory for the merge log file')
    parser.add_argument('--verbose', action='store_true',
                        help='Enable verbose logging')

    return parser


def run(argv: Optional[List[str]] = None) -> int:
    """
    Validate inputs and generate the merged workbook.

    Returns:
        Process exit status
    """
    args = build_parser().parse_args(argv)

    try:
        config = load_config(Path(args.config)) if args.config else MergeConfig()
    except ConfigError as e:
        setup_logging(verbose=args.verbose)
        logger.error(str(e))
        return EXIT_PRECONDITION

    config = config.with_overrides(
        csv_encoding=args.encoding,
        log_dir=args.log_dir,
        report_path=args.report,
    )
    setup_logging(config.log_dir, verbose=args.verbose)

    errors = validate_inputs(Path(args.template), Path(args.csv_folder))
    if errors:
        for e in errors:
            logger.error(e)
        return EXIT_PRECONDITION

    template_path = Path(args.template)
    output_path = Path(args.output) if args.output else default_output_path(template_path)

    try:
        create_output_file(template_path, output_path)
    except OutputFileError as e:
        logger.error(str(e))
        return EXIT_PRECONDITION

    reporter = TqdmReporter(width=config.progress_width)
    try:
        with logging_redirect_tqdm():
            report = merge_files(output_path, Path(args.csv_folder), reporter, encoding=config.csv_encoding)
    except Exception as e:
        logger.error(f"Merge failed: {e}", exc_info=True)
        return EXIT_FATAL

    log_summary(report)
    if config.report_path:
        save_report(report, Path(config.report_path))

    logger.info(f"Finished generating Excel file: {output_path}")
    return EXIT_OK


def main():
    sys.exit(run())


if __name__ == '__main__':
    main()
