"""Source adapters for item import (file I/O only)."""

from pathlib import Path

from stock_ingestion.adapters.base import SourceAdapter
from stock_ingestion.adapters.csv_adapter import CsvSourceAdapter
from stock_ingestion.adapters.xlsx_adapter import XlsxSourceAdapter

_BY_SUFFIX: dict[str, type] = {
    ".csv": CsvSourceAdapter,
    ".txt": CsvSourceAdapter,
    ".xlsx": XlsxSourceAdapter,
    ".xlsm": XlsxSourceAdapter,
}


def adapter_for_path(source_path: Path) -> SourceAdapter:
    """Pick an adapter from the file suffix."""
    suffix = Path(source_path).suffix.lower()
    try:
        return _BY_SUFFIX[suffix]()
    except KeyError:
        raise ValueError(
            f"Unsupported import file type {suffix!r}; expected one of {sorted(_BY_SUFFIX)}"
        ) from None


__all__ = [
    "SourceAdapter",
    "CsvSourceAdapter",
    "XlsxSourceAdapter",
    "adapter_for_path",
]
