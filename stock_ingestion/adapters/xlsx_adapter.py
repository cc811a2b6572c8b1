"""
XLSX source adapter for item lists (stock sheets, previous exports).

Supports:
  - sheet by index (0-based) or name; default is the first sheet
  - header row by index, or auto-detect (scans the first rows for item-list
    column names such as PLU, Nama, Stok, Satuan)
  - skip_rows before header
  - normalizes cell values (strip, blank -> empty string, integral floats -> int)
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Iterator

import openpyxl

from stock_ingestion.mapping.engine import resolve_header

_MAX_HEADER_SEARCH = 15
_MIN_HEADER_MATCHES = 2


def _normalize_header_cell(value: Any) -> str:
    if value is None:
        return ""
    return re.sub(r"\s+", " ", str(value)).strip()


def _cell_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        return value.strip()
    return value


def _detect_header_row(rows: list[tuple[Any, ...]]) -> int:
    """0-based index of the first row with at least two known item headers."""
    for i, row in enumerate(rows[:_MAX_HEADER_SEARCH]):
        hits = {resolve_header(v) for v in row if v not in (None, "")} - {None}
        if len(hits) >= _MIN_HEADER_MATCHES:
            return i
    return 0


def _headers(row: tuple[Any, ...]) -> list[str]:
    headers: list[str] = []
    width = max((i + 1 for i, v in enumerate(row) if v not in (None, "")), default=1)
    for c in range(width):
        key = _normalize_header_cell(row[c]) or f"Column_{c + 1}"
        base, n = key, 0
        while key in headers:
            n += 1
            key = f"{base}_{n}"
        headers.append(key)
    return headers


class XlsxSourceAdapter:
    """
    Read .xlsx files as one dict per row keyed by the header row.

    source_options:
      sheet: 0-based sheet index (int) or sheet name (str). Default: first sheet.
      skip_rows: rows to skip at the top of the sheet. Default: 0.
      header_row: 0-based row index (after skip_rows) of the header. When
        omitted the header is auto-detected.
    """

    def read(self, source_path: Path, options: dict[str, Any]) -> Iterator[dict[str, Any]]:
        headers, body = self._load(source_path, options)
        for row in body:
            vals = [_cell_value(row[c]) if c < len(row) else "" for c in range(len(headers))]
            if any(v != "" for v in vals):
                yield dict(zip(headers, vals))

    def _load(self, source_path: Path, options: dict[str, Any]) -> tuple[list[str], list[tuple[Any, ...]]]:
        wb = openpyxl.load_workbook(source_path, read_only=True, data_only=True)
        try:
            sheet = self._get_sheet(wb, options)
            skip_rows = int(options.get("skip_rows", 0))
            rows = list(sheet.iter_rows(min_row=1 + skip_rows, values_only=True))
        finally:
            wb.close()
        if not rows:
            return [], []
        header_row = options.get("header_row")
        hi = int(header_row) if header_row is not None else _detect_header_row(rows)
        return _headers(rows[hi]), rows[hi + 1 :]

    def _get_sheet(self, wb: Any, options: dict[str, Any]) -> Any:
        sheet_ref = options.get("sheet")
        if sheet_ref is None:
            return wb.worksheets[0]
        if isinstance(sheet_ref, int):
            return wb.worksheets[sheet_ref]
        return wb[sheet_ref]
