"""
CSV input discovery and parsing.
"""

import csv
import logging
from pathlib import Path
from typing import Dict, List

from .constants import CSV_EXTENSION, DEFAULT_CSV_ENCODING

logger = logging.getLogger(__name__)


def discover_csv_files(folder: Path) -> List[Path]:
    """
    List the CSV files directly inside a folder.

    Extension matching is case-insensitive. Files are returned sorted by
    name so repeated runs process them in the same order.
    """
    folder = Path(folder)
    return sorted(
        path for path in folder.iterdir()
        if path.is_file() and path.suffix.lower() == CSV_EXTENSION
    )


def sheet_name_for(csv_path: Path) -> str:
    """Sheet name a CSV file merges into: its base name without extension."""
    return Path(csv_path).stem


def read_csv_records(path: Path, encoding: str = DEFAULT_CSV_ENCODING) -> List[Dict[str, str]]:
    """
    Read a comma-delimited CSV file with a header row.

    Args:
        path: CSV file to read
        encoding: Text encoding (default: UTF-8, with or without a BOM)

    Returns:
        One dict per data row, keyed by the CSV's own column names. Rows
        shorter than the header get '' for the missing columns; fields
        beyond the header are dropped.
    """
    with open(path, newline='', encoding=encoding) as f:
        reader = csv.DictReader(f, restval='')
        fieldnames = reader.fieldnames

        if not fieldnames:
            logger.debug(f"{path} is empty")
            return []

        records = []
        for row in reader:
            row.pop(None, None)
            records.append(row)

    logger.debug(f"Read {len(records)} records from {path}")
    return records
