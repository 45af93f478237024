"""
Checks that run before any merge logic.

Nothing here opens the workbook. The only side effect is the copy of the
template to the output path.
"""

import logging
import shutil
from pathlib import Path
from typing import List

from .constants import DEFAULT_OUTPUT_STEM
from .csv_records import discover_csv_files
from .errors import OutputFileError

logger = logging.getLogger(__name__)


def validate_template(template_path: Path) -> List[str]:
    """Check that the template workbook exists."""
    errors = []
    if not Path(template_path).is_file():
        errors.append(f"Argument template error: '{template_path}' was not found.")
    return errors


def validate_csv_folder(csv_folder: Path) -> List[str]:
    """Check that the CSV folder exists and holds at least one CSV file."""
    errors = []
    folder = Path(csv_folder)

    if not folder.is_dir():
        errors.append(f"Argument csv_folder error: '{csv_folder}' was not found.")
    elif not discover_csv_files(folder):
        errors.append(f"Argument csv_folder error: No CSV files found in directory: {csv_folder}")

    return errors


def validate_inputs(template_path: Path, csv_folder: Path) -> List[str]:
    """
    Validate the command line inputs.

    Returns list of validation errors (empty if valid).
    """
    return validate_template(template_path) + validate_csv_folder(csv_folder)


def default_output_path(template_path: Path) -> Path:
    """Output path used when none is given: <template dir>/Output<template ext>."""
    template_path = Path(template_path)
    return template_path.parent / f"{DEFAULT_OUTPUT_STEM}{template_path.suffix}"


def create_output_file(template_path: Path, output_path: Path) -> Path:
    """
    Copy the template to the output path, replacing any existing file.

    Raises:
        OutputFileError: If the copy fails
    """
    logger.info(f"Creating output file: {output_path}")
    try:
        shutil.copyfile(template_path, output_path)
    except OSError as e:
        raise OutputFileError(f"Failed to create output file due to error: {e}") from e
    return Path(output_path)
