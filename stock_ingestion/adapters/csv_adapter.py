"""
CSV source adapter for item lists (e.g. the downloadable import template).

Uses csv.DictReader. Configurable: delimiter, encoding, skip_rows. Handles a
BOM via utf-8-sig when encoding is utf-8 (spreadsheet tools add one on
"CSV UTF-8" export). A delimiter of "auto" sniffs between comma and
semicolon, since Indonesian-locale Excel writes semicolons.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Iterator


def _get_encoding(options: dict[str, Any]) -> str:
    enc = options.get("encoding", "utf-8")
    if enc.lower() == "utf-8":
        return "utf-8-sig"  # Strip BOM if present
    return enc


def _resolve_delimiter(handle: Any, options: dict[str, Any]) -> str:
    delimiter = options.get("delimiter", ",")
    if delimiter != "auto":
        return delimiter
    start = handle.tell()
    sample = handle.read(4096)
    handle.seek(start)
    try:
        return csv.Sniffer().sniff(sample, delimiters=",;").delimiter
    except csv.Error:
        return ","


def _skip(handle: Any, skip_rows: int) -> None:
    for _ in range(skip_rows):
        handle.readline()


def _clean_row(row: dict[str | None, Any]) -> dict[str, Any]:
    # DictReader puts overflow cells under the None key
    return {k: v for k, v in row.items() if k is not None}


class CsvSourceAdapter:
    """Read CSV files as one dict per row. Streams; does not load entire file."""

    def read(self, source_path: Path, options: dict[str, Any]) -> Iterator[dict[str, Any]]:
        encoding = _get_encoding(options)
        skip_rows = int(options.get("skip_rows", 0))

        with Path(source_path).open("r", encoding=encoding, newline="") as f:
            _skip(f, skip_rows)
            delimiter = _resolve_delimiter(f, options)
            for row in csv.DictReader(f, delimiter=delimiter):
                cleaned = _clean_row(row)
                if any((v or "").strip() for v in cleaned.values() if isinstance(v, str)):
                    yield cleaned
