"""Spreadsheet and CSV reading.

Reference tables (zone mapping, emergency contacts) and site batches arrive as
spreadsheets. They are read with pandas and handed on as row dictionaries keyed
by column header, with empty cells as None.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import pandas as pd

logger = logging.getLogger(__name__)

EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xls"}


def read_rows(path: Union[str, Path], sheet_name: Union[int, str] = 0) -> List[Dict[str, Any]]:
    """Read the first sheet of a spreadsheet (or a CSV file) as row dictionaries.

    Every cell is read as text so that codes and phone numbers keep their
    exact spelling. Empty cells become None.

    Args:
        path: Path to a .xlsx/.xls/.csv file
        sheet_name: Sheet to read for spreadsheet files

    Returns:
        List of rows in file order

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file type is not supported
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Table file not found: {path}")

    suffix = path.suffix.lower()
    if suffix in EXCEL_SUFFIXES:
        frame = pd.read_excel(path, sheet_name=sheet_name, dtype=str)
    elif suffix == ".csv":
        frame = pd.read_csv(path, dtype=str, keep_default_na=True)
    else:
        raise ValueError(f"Unsupported table format '{suffix}' for {path}")

    logger.debug(f"Read {len(frame)} rows with columns {list(frame.columns)} from {path}")
    return frame_to_rows(frame)


def frame_to_rows(frame: pd.DataFrame) -> List[Dict[str, Any]]:
    """Convert a DataFrame to row dictionaries with NaN replaced by None."""
    frame = frame.astype(object).where(pd.notna(frame), None)
    frame.columns = [str(column) for column in frame.columns]
    return frame.to_dict(orient="records")


def pick_value(row: Dict[str, Any], columns: Iterable[str]) -> Optional[Any]:
    """Return the first non-empty value among the given columns."""
    for column in columns:
        value = row.get(column)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None
