"""
FBDI CSV merger.

Appends the rows of CSV extracts to the matching sheets of a spreadsheet
template, mapping CSV columns onto the template's header row by name.
"""

from .merger import merge_files, merge_csv_file
from .progress import Reporter, NullReporter, TqdmReporter
from .results import FileResult, FileStatus, MergeReport
from .workbook import find_worksheet, read_headers, append_record

__version__ = "1.0.0"
__all__ = [
    "merge_files",
    "merge_csv_file",
    "Reporter",
    "NullReporter",
    "TqdmReporter",
    "FileResult",
    "FileStatus",
    "MergeReport",
    "find_worksheet",
    "read_headers",
    "append_record",
]
