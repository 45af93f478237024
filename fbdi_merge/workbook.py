#!/usr/bin/env python3
"""
Spreadsheet side of the merge.

Locates the sheet matching a CSV file, reads its header row and appends
CSV records underneath it as plain text rows. Everything here works on the
in-memory workbook; nothing is written to disk until the caller saves.
"""

import logging
from pathlib import Path
from typing import Any, List, Mapping, Optional

from openpyxl import Workbook, load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from .constants import MACRO_ENABLED_EXTENSIONS
from .errors import EmptySheetError

logger = logging.getLogger(__name__)


def is_macro_enabled(path: Path) -> bool:
    """Check whether the package carries a VBA project (.xlsm, .xltm)."""
    return Path(path).suffix.lower() in MACRO_ENABLED_EXTENSIONS


def open_workbook(path: Path) -> Workbook:
    """
    Open a workbook for in-place mutation.

    Macro-enabled packages are loaded with their VBA project, and rich text
    cells keep their runs, so that saving does not strip either.
    """
    path = Path(path)
    keep_vba = is_macro_enabled(path)
    logger.debug(f"Opening workbook {path} (keep_vba={keep_vba})")
    return load_workbook(path, keep_vba=keep_vba, rich_text=True)


def find_worksheet(workbook: Workbook, sheet_name: str) -> Optional[Worksheet]:
    """
    Find a worksheet by exact, case-sensitive name.

    Returns:
        The worksheet, or None if no sheet has that name
    """
    for worksheet in workbook.worksheets:
        if worksheet.title == sheet_name:
            return worksheet
    return None


def cell_text(value: Any) -> str:
    """
    Literal text of a cell value.

    openpyxl dereferences shared-string indices into the workbook's string
    table while loading, so shared and inline string cells both arrive here
    as str, or as CellRichText whose str() joins its runs.
    """
    if value is None:
        return ''
    return str(value)


def read_headers(worksheet: Worksheet) -> List[str]:
    """
    Read the header labels from the first row of a worksheet.

    Labels are read from column A up to the last non-empty header cell.
    Empty cells inside that range become '' so appended cells stay aligned
    with the template's columns.

    Raises:
        EmptySheetError: If the sheet has no rows or its first row is blank
    """
    header_row = worksheet.min_row
    values = next(
        worksheet.iter_rows(min_row=header_row, max_row=header_row, min_col=1, values_only=True),
        ()
    )
    headers = [cell_text(value) for value in values]

    while headers and not headers[-1]:
        headers.pop()

    if not headers:
        raise EmptySheetError(worksheet.title)

    return headers


def build_row(record: Mapping[str, Any], headers: List[str]) -> List[str]:
    """
    Map one CSV record onto the header order.

    Columns are matched by label, not position. A header with no matching
    column yields '', and CSV columns with no matching header are dropped.
    """
    row = []
    for header in headers:
        value = record.get(header)
        row.append('' if value is None else str(value))
    return row


def append_record(worksheet: Worksheet, record: Mapping[str, Any], headers: List[str]) -> int:
    """
    Append one CSV record as a new row below the existing rows.

    Every cell is written as text, one per header. Values that look like
    formulas ('=...') stay literal text.

    Returns:
        Index of the appended row
    """
    worksheet.append(build_row(record, headers))
    row_index = worksheet.max_row

    for column in range(1, len(headers) + 1):
        cell = worksheet.cell(row=row_index, column=column)
        if cell.data_type == 'f':
            cell.data_type = 's'

    return row_index
