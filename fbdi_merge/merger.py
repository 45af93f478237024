#!/usr/bin/env python3
"""
Merge a folder of CSV files into the matching sheets of a workbook.

Each CSV file is matched to the sheet named after the file's base name.
Its records are appended below that sheet's header row, with every value
placed under the header of the same name. Files are processed one at a
time; a failing file is reported and the batch continues. The workbook is
saved once, after the last file.

Usage:
    from fbdi_merge.merger import merge_files

    report = merge_files('Output.xlsm', 'extracts/')
    for result in report.failed:
        print(result.csv_path, result.error)
"""

import logging
from pathlib import Path
from typing import Optional

from openpyxl import Workbook

from .constants import DEFAULT_CSV_ENCODING
from .csv_records import discover_csv_files, read_csv_records, sheet_name_for
from .progress import NullReporter, Reporter
from .results import FileResult, FileStatus, MergeReport
from .workbook import append_record, find_worksheet, open_workbook, read_headers

logger = logging.getLogger(__name__)


def merge_csv_file(
    workbook: Workbook,
    csv_path: Path,
    reporter: Reporter,
    encoding: str = DEFAULT_CSV_ENCODING
) -> FileResult:
    """
    Merge one CSV file into the sheet sharing its name.

    Args:
        workbook: Workbook to mutate in memory
        csv_path: CSV file to merge
        reporter: Receives progress ticks and notices
        encoding: CSV text encoding

    Returns:
        FileResult describing what happened. Rows appended before a
        failure stay in the workbook.
    """
    csv_path = Path(csv_path)
    sheet_name = sheet_name_for(csv_path)
    result = FileResult(csv_path=str(csv_path), sheet_name=sheet_name, status=FileStatus.SKIPPED)

    worksheet = find_worksheet(workbook, sheet_name)
    if worksheet is None:
        reporter.message(logging.WARNING, f"{sheet_name} does not match a sheet in FBDI document. Skipping.")
        return result

    try:
        headers = read_headers(worksheet)
        records = read_csv_records(csv_path, encoding=encoding)
        logger.debug(f"{sheet_name}: {len(headers)} headers, {len(records)} records")

        if records:
            with reporter.track(f"Merging {sheet_name}", len(records)) as progress:
                for record in records:
                    append_record(worksheet, record, headers)
                    result.rows_appended += 1
                    progress.update(1)

        result.status = FileStatus.MERGED

    except Exception as e:
        result.status = FileStatus.FAILED
        result.error = str(e)
        reporter.message(logging.ERROR, f"Exception raised while merging in {sheet_name} file: {e}")
        logger.debug(f"Failure merging {csv_path}", exc_info=True)

    return result


def merge_files(
    output_path: Path,
    csv_folder: Path,
    reporter: Optional[Reporter] = None,
    encoding: str = DEFAULT_CSV_ENCODING
) -> MergeReport:
    """
    Merge every CSV file in a folder into the workbook at output_path.

    The workbook is modified in place and saved once at the end. Errors
    opening or saving the workbook propagate to the caller.

    Args:
        output_path: Workbook to merge into (normally a copy of the template)
        csv_folder: Folder containing *.csv files
        reporter: Progress and notice sink (default: discard)
        encoding: CSV text encoding

    Returns:
        MergeReport with one FileResult per CSV file
    """
    output_path = Path(output_path)
    reporter = reporter or NullReporter()
    report = MergeReport.for_output(output_path)

    workbook = open_workbook(output_path)

    for csv_path in discover_csv_files(csv_folder):
        report.add(merge_csv_file(workbook, csv_path, reporter, encoding=encoding))

    workbook.save(output_path)
    logger.debug(
        f"Saved {output_path}: {len(report.merged)} merged, {len(report.skipped)} skipped, "
        f"{len(report.failed)} failed, {report.rows_appended} rows appended"
    )

    return report
