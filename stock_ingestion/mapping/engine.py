"""
Mapping engine: pure transformation from a raw spreadsheet row to an item
candidate record.

Header names are matched case-insensitively against an alias table covering
the Indonesian template headers (PLU, Nama, Kategori, Stok, Satuan,
MinimalStok), their English equivalents, and the headers the exporter writes,
so an exported sheet can be imported back.  ZERO I/O.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from stock_kernel.domain.dtos import ValidationError, clean_text, coerce_int
from stock_kernel.exceptions import MissingFieldError

from stock_ingestion.domain.types import RejectedRow, RowFilterResult

# Candidate key -> accepted header spellings (normalized: stripped, lower-case)
HEADER_ALIASES: dict[str, tuple[str, ...]] = {
    "sku": ("plu", "sku"),
    "name": ("nama", "name", "nama barang"),
    "category": ("kategori", "category"),
    "stock": ("stok", "stock", "stok fisik"),
    "unit": ("unit", "satuan"),
    "minStock": ("minimalstok", "minstock", "min", "min. stok", "min_stock"),
}

_NUMERIC_KEYS = frozenset({"stock", "minStock"})

_HEADER_LOOKUP: dict[str, str] = {
    alias: key for key, aliases in HEADER_ALIASES.items() for alias in aliases
}


def normalize_header(header: Any) -> str:
    """Strip, collapse whitespace and lower-case a header cell."""
    if header is None:
        return ""
    return re.sub(r"\s+", " ", str(header)).strip().lower()


def resolve_header(header: Any) -> str | None:
    """Candidate key for a source header, or None when unrecognized."""
    return _HEADER_LOOKUP.get(normalize_header(header))


def normalize_row(raw: Mapping[str, Any]) -> dict[str, Any]:
    """
    Map a raw row onto candidate keys (sku, name, category, stock, unit,
    minStock).

    Unknown columns are dropped.  When several aliases of one key are
    present, the first non-blank one in column order wins.  Numeric fields
    are coerced to int; a blank or non-numeric cell is omitted rather than
    defaulted, so the reconciler keeps the existing value.
    """
    out: dict[str, Any] = {}
    for header, value in raw.items():
        key = resolve_header(header)
        if key is None or key in out:
            continue
        if key in _NUMERIC_KEYS:
            number = coerce_int(value)
            if number is not None:
                out[key] = number
        else:
            text = clean_text(value)
            if text is not None:
                out[key] = text
    return out


def filter_importable(rows: Iterable[Mapping[str, Any]]) -> RowFilterResult:
    """
    Normalize rows and drop those lacking a SKU or a name.

    Both identifiers are required for a row to reach the reconciler.
    """
    accepted: list[dict[str, Any]] = []
    rejected: list[RejectedRow] = []
    for index, raw in enumerate(rows, start=1):
        row = normalize_row(raw)
        errors = tuple(
            ValidationError(
                code=MissingFieldError.code,
                message=f"Row {index} has no {field}",
                field=field,
            )
            for field in ("sku", "name")
            if field not in row
        )
        if errors:
            rejected.append(RejectedRow(source_row=index, raw_data=dict(raw), errors=errors))
        else:
            accepted.append(row)
    return RowFilterResult(accepted=tuple(accepted), rejected=tuple(rejected))
