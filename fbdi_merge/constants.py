"""
Centralized constants for the FBDI CSV merger.

Import from here to keep the CLI, validation and merge code consistent.
"""

# Input discovery
CSV_EXTENSION = '.csv'
DEFAULT_CSV_ENCODING = 'utf-8-sig'  # UTF-8, byte order mark skipped when present

# Output file naming: <template dir>/Output<template extension>
DEFAULT_OUTPUT_STEM = 'Output'

# Spreadsheet packages that carry a VBA project which must survive the save
MACRO_ENABLED_EXTENSIONS = ('.xlsm', '.xltm')

# Progress bar rendering
PROGRESS_BAR_WIDTH = 80
PROGRESS_BAR_FILL = ' ='  # tqdm ascii charset: empty, full

# Log file written when a log directory is configured
LOG_FILE_NAME = 'merge.log'

# Exit status codes
EXIT_OK = 0  # Success, including runs where some CSV files were skipped or failed
EXIT_PRECONDITION = 1  # Validation, output copy or config failure; nothing merged
EXIT_USAGE = 2  # Command line could not be parsed (argparse default)
EXIT_FATAL = 3  # Unexpected error, e.g. the workbook could not be opened
