#!/usr/bin/env python3
"""
Tests for sheet lookup, header extraction and row appending.
"""

import tempfile
from pathlib import Path

from openpyxl import Workbook, load_workbook
from openpyxl.cell.rich_text import CellRichText, TextBlock
from openpyxl.cell.text import InlineFont

from fbdi_merge.errors import EmptySheetError
from fbdi_merge.testing import create_package, create_template
from fbdi_merge.workbook import (
    append_record,
    build_row,
    cell_text,
    find_worksheet,
    is_macro_enabled,
    open_workbook,
    read_headers,
)


def make_workbook(sheets):
    """Build an in-memory workbook from {name: rows}."""
    wb = Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(title=name)
        for row in rows:
            ws.append(row)
    return wb


def row_values(ws, row_index):
    return [ws.cell(row=row_index, column=c).value for c in range(1, ws.max_column + 1)]


def test_find_worksheet_exact_match():
    wb = make_workbook({'Employees': [['Name']], 'Departments': [['Dept']]})

    assert find_worksheet(wb, 'Departments').title == 'Departments'
    assert find_worksheet(wb, 'Employees').title == 'Employees'


def test_find_worksheet_is_case_sensitive():
    wb = make_workbook({'Employees': [['Name']]})

    assert find_worksheet(wb, 'employees') is None
    assert find_worksheet(wb, 'Employees ') is None
    assert find_worksheet(wb, 'Unknown') is None


def test_cell_text():
    assert cell_text(None) == ''
    assert cell_text('Name') == 'Name'
    assert cell_text(2024) == '2024'


def test_read_headers():
    wb = make_workbook({'Employees': [['Name', 'Age', 'Dept'], ['Alice', '30', 'HR']]})

    assert read_headers(wb['Employees']) == ['Name', 'Age', 'Dept']


def test_read_headers_keeps_gaps_and_trims_trailing_blanks():
    wb = make_workbook({'Employees': [['Name', None, 'Dept', None, None]]})
    ws = wb['Employees']
    ws.cell(row=3, column=8).value = 'note below the table'

    assert read_headers(ws) == ['Name', '', 'Dept']


def test_read_headers_empty_sheet_raises():
    wb = make_workbook({'Empty': [], 'Blank': [[None, None]]})

    for name in ('Empty', 'Blank'):
        try:
            read_headers(wb[name])
            assert False, f"Expected EmptySheetError for {name}"
        except EmptySheetError as e:
            assert e.sheet_name == name
            assert name in str(e)


def test_shared_and_inline_headers_resolve_to_same_text():
    headers = ['Name', 'Age', 'Invoice Number & Type', '*Business Unit']

    with tempfile.TemporaryDirectory() as tmpdir:
        tmpdir = Path(tmpdir)
        shared = create_package(tmpdir / 'shared.xlsx', {'Employees': [headers]}, shared_strings=True)
        inline = create_package(tmpdir / 'inline.xlsx', {'Employees': [headers]}, shared_strings=False)

        shared_headers = read_headers(load_workbook(shared)['Employees'])
        inline_headers = read_headers(load_workbook(inline)['Employees'])

    assert shared_headers == headers
    assert inline_headers == headers


def test_read_headers_rich_text_labels():
    required = CellRichText([TextBlock(InlineFont(color='FFFF0000'), '*'), 'Business Unit'])

    with tempfile.TemporaryDirectory() as tmpdir:
        template = create_template(Path(tmpdir) / 'Template.xlsx', {'Invoices': [[required, 'Amount']]})
        ws = open_workbook(template)['Invoices']
        headers = read_headers(ws)

    assert isinstance(ws['A1'].value, CellRichText)
    assert headers == ['*Business Unit', 'Amount']


def test_build_row_matches_by_name():
    headers = ['Name', 'Age', 'Dept']

    assert build_row({'Age': '30', 'Name': 'Alice', 'Dept': 'HR'}, headers) == ['Alice', '30', 'HR']
    # Missing column -> empty cell
    assert build_row({'Name': 'Alice', 'Age': '30'}, headers) == ['Alice', '30', '']
    # Unknown column -> dropped
    assert build_row({'Name': 'Alice', 'Email': 'a@example.com'}, headers) == ['Alice', '', '']
    assert build_row({}, headers) == ['', '', '']


def test_append_record_scenario_a():
    wb = make_workbook({'Employees': [['Name', 'Age']]})
    ws = wb['Employees']
    headers = read_headers(ws)

    assert append_record(ws, {'Name': 'Alice', 'Age': '30'}, headers) == 2
    assert append_record(ws, {'Name': 'Bob', 'Age': '25'}, headers) == 3

    assert row_values(ws, 1) == ['Name', 'Age']
    assert row_values(ws, 2) == ['Alice', '30']
    assert row_values(ws, 3) == ['Bob', '25']


def test_append_record_drops_unknown_columns():
    wb = make_workbook({'Employees': [['Name', 'Age']]})
    ws = wb['Employees']

    append_record(ws, {'Name': 'Alice', 'Age': '30', 'Email': 'alice@example.com'}, ['Name', 'Age'])

    assert ws.max_column == 2
    assert row_values(ws, 2) == ['Alice', '30']


def test_append_record_fills_missing_columns_with_empty_text():
    wb = make_workbook({'Employees': [['Name', 'Age', 'Dept']]})
    ws = wb['Employees']

    append_record(ws, {'Name': 'Alice', 'Age': '30'}, ['Name', 'Age', 'Dept'])

    assert row_values(ws, 2) == ['Alice', '30', '']
    assert ws.cell(row=2, column=3).data_type == 's'


def test_append_record_writes_text_only():
    wb = make_workbook({'Ledger': [['Amount', 'Date', 'Formula']]})
    ws = wb['Ledger']

    append_record(ws, {'Amount': '1200.50', 'Date': '2024-01-31', 'Formula': '=SUM(A1:A2)'},
                  ['Amount', 'Date', 'Formula'])

    cells = [ws.cell(row=2, column=c) for c in range(1, 4)]
    assert [c.value for c in cells] == ['1200.50', '2024-01-31', '=SUM(A1:A2)']
    assert all(c.data_type == 's' for c in cells)


def test_append_record_width_ignores_wider_sheet_content():
    wb = make_workbook({'Employees': [['Name', 'Age']]})
    ws = wb['Employees']
    ws.cell(row=1, column=9)

    headers = read_headers(ws)
    row_index = append_record(ws, {'Name': 'Alice', 'Age': '30'}, headers)

    populated = [c for (r, _), c in ws._cells.items() if r == row_index]
    assert len(populated) == len(headers) == 2


def test_header_row_unchanged_after_appends():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = create_template(Path(tmpdir) / 'template.xlsx', {'Employees': [['Name', 'Age']]})
        wb = load_workbook(path)
        ws = wb['Employees']
        headers = read_headers(ws)

        for i in range(5):
            append_record(ws, {'Age': str(i), 'Name': f'Person {i}'}, headers)

    assert row_values(ws, 1) == ['Name', 'Age']
    assert ws.max_row == 6


def test_is_macro_enabled():
    assert is_macro_enabled(Path('Template.xlsm'))
    assert is_macro_enabled(Path('Template.XLTM'))
    assert not is_macro_enabled(Path('Template.xlsx'))
