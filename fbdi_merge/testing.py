"""
Builders for sample templates and CSV extracts, shared by the test modules.
"""

import csv
import zipfile
from pathlib import Path
from typing import Dict, List, Optional, Sequence
from xml.sax.saxutils import escape

from openpyxl import Workbook, load_workbook
from openpyxl.utils import get_column_letter

from .progress import Progress, Reporter

MAIN_NS = 'http://schemas.openxmlformats.org/spreadsheetml/2006/main'
REL_NS = 'http://schemas.openxmlformats.org/officeDocument/2006/relationships'
PKG_REL_NS = 'http://schemas.openxmlformats.org/package/2006/relationships'
CT_NS = 'http://schemas.openxmlformats.org/package/2006/content-types'
CT_PREFIX = 'application/vnd.openxmlformats-officedocument.spreadsheetml'


def create_template(path: Path, sheets: Dict[str, List[List]]) -> Path:
    """
    Create a workbook with one sheet per entry, rows written as given.

    The first row of each entry is the sheet's header row. An empty list
    creates a sheet with no rows.
    """
    wb = Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(title=name)
        for row in rows:
            ws.append(row)
    wb.save(path)
    return Path(path)


def create_package(path: Path, sheets: Dict[str, List[List[str]]], shared_strings: bool = True) -> Path:
    """
    Assemble a minimal SpreadsheetML package by hand.

    String cells are stored either as indices into a workbook-level shared
    string table or inline in the sheet, which openpyxl's own writer does
    not let us choose.
    """
    strings: List[str] = []

    def string_cell(ref: str, text: str) -> str:
        if shared_strings:
            if text not in strings:
                strings.append(text)
            return f'<c r="{ref}" t="s"><v>{strings.index(text)}</v></c>'
        return f'<c r="{ref}" t="inlineStr"><is><t>{escape(text)}</t></is></c>'

    sheet_xml = []
    for rows in sheets.values():
        row_xml = []
        for row_idx, row in enumerate(rows, 1):
            cells = ''.join(
                string_cell(f'{get_column_letter(col_idx)}{row_idx}', text)
                for col_idx, text in enumerate(row, 1)
            )
            row_xml.append(f'<row r="{row_idx}">{cells}</row>')
        sheet_xml.append(
            f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
            f'<worksheet xmlns="{MAIN_NS}"><sheetData>{"".join(row_xml)}</sheetData></worksheet>'
        )

    sheet_entries = ''.join(
        f'<sheet name="{escape(name)}" sheetId="{i}" r:id="rId{i}"/>'
        for i, name in enumerate(sheets, 1)
    )
    workbook_xml = (
        f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<workbook xmlns="{MAIN_NS}" xmlns:r="{REL_NS}">'
        f'<workbookPr/><bookViews><workbookView/></bookViews>'
        f'<sheets>{sheet_entries}</sheets></workbook>'
    )

    workbook_rels = [
        f'<Relationship Id="rId{i}" Type="{REL_NS}/worksheet" Target="worksheets/sheet{i}.xml"/>'
        for i in range(1, len(sheets) + 1)
    ]
    overrides = [
        f'<Override PartName="/xl/workbook.xml" ContentType="{CT_PREFIX}.sheet.main+xml"/>'
    ] + [
        f'<Override PartName="/xl/worksheets/sheet{i}.xml" ContentType="{CT_PREFIX}.worksheet+xml"/>'
        for i in range(1, len(sheets) + 1)
    ]
    if shared_strings:
        workbook_rels.append(
            f'<Relationship Id="rId{len(sheets) + 1}" Type="{REL_NS}/sharedStrings" Target="sharedStrings.xml"/>'
        )
        overrides.append(
            f'<Override PartName="/xl/sharedStrings.xml" ContentType="{CT_PREFIX}.sharedStrings+xml"/>'
        )

    content_types = (
        f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<Types xmlns="{CT_NS}">'
        f'<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
        f'<Default Extension="xml" ContentType="application/xml"/>'
        f'{"".join(overrides)}</Types>'
    )
    root_rels = (
        f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<Relationships xmlns="{PKG_REL_NS}">'
        f'<Relationship Id="rId1" Type="{REL_NS}/officeDocument" Target="xl/workbook.xml"/>'
        f'</Relationships>'
    )

    with zipfile.ZipFile(path, 'w', zipfile.ZIP_DEFLATED) as zf:
        zf.writestr('[Content_Types].xml', content_types)
        zf.writestr('_rels/.rels', root_rels)
        zf.writestr('xl/workbook.xml', workbook_xml)
        zf.writestr(
            'xl/_rels/workbook.xml.rels',
            f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
            f'<Relationships xmlns="{PKG_REL_NS}">{"".join(workbook_rels)}</Relationships>'
        )
        for i, xml in enumerate(sheet_xml, 1):
            zf.writestr(f'xl/worksheets/sheet{i}.xml', xml)
        if shared_strings:
            items = ''.join(f'<si><t>{escape(s)}</t></si>' for s in strings)
            zf.writestr(
                'xl/sharedStrings.xml',
                f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
                f'<sst xmlns="{MAIN_NS}" count="{len(strings)}" uniqueCount="{len(strings)}">{items}</sst>'
            )

    return Path(path)


def write_csv(path: Path, header: Sequence[str], rows: Sequence[Sequence[str]] = (),
              encoding: str = 'utf-8') -> Path:
    """Write a CSV file with a header row."""
    with open(path, 'w', newline='', encoding=encoding) as f:
        writer = csv.writer(f)
        writer.writerow(header)
        writer.writerows(rows)
    return Path(path)


def sheet_values(path: Path, sheet_name: str) -> List[List]:
    """Read a saved sheet back as lists of values, empty cells as ''."""
    wb = load_workbook(path)
    ws = wb[sheet_name]
    return [['' if v is None else v for v in row] for row in ws.iter_rows(values_only=True)]


class RecordingProgress(Progress):
    def __init__(self, title: str, total: int):
        self.title = title
        self.total = total
        self.count = 0
        self.closed = False

    def update(self, n: int = 1) -> None:
        self.count += n

    def close(self) -> None:
        self.closed = True


class RecordingReporter(Reporter):
    """Reporter that keeps every bar and notice for inspection."""

    def __init__(self):
        self.bars: List[RecordingProgress] = []
        self.messages: List[tuple] = []

    def track(self, title: str, total: int) -> RecordingProgress:
        bar = RecordingProgress(title, total)
        self.bars.append(bar)
        return bar

    def message(self, level: int, text: str) -> None:
        self.messages.append((level, text))

    def texts(self, level: Optional[int] = None) -> List[str]:
        return [text for lvl, text in self.messages if level is None or lvl == level]
