"""
Exceptions raised by the merger.
"""


class MergeError(Exception):
    """Base class for errors raised while merging CSV files into a workbook."""


class EmptySheetError(MergeError):
    """The target sheet has no header row to map CSV columns onto."""

    def __init__(self, sheet_name: str):
        super().__init__(f"Sheet '{sheet_name}' has no header row")
        self.sheet_name = sheet_name


class OutputFileError(MergeError):
    """The output file could not be created from the template."""


class ConfigError(MergeError):
    """The configuration file is invalid."""
