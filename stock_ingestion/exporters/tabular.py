"""
Tabular writers for the item export projection and the import template.

The kernel hands out ``ItemExportRow`` values; formatting (headers, date
rendering, file type) happens here.
"""

from __future__ import annotations

import csv
from collections.abc import Sequence
from datetime import date, datetime, tzinfo
from pathlib import Path
from typing import IO, Any

import openpyxl

from stock_kernel.logging_config import get_logger
from stock_kernel.selectors.item_selector import ItemExportRow

logger = get_logger("ingestion.exporters")

EXPORT_SHEET_TITLE = "Data Stok"
EXPORT_HEADERS: tuple[str, ...] = (
    "PLU",
    "Nama Barang",
    "Kategori",
    "Stok Fisik",
    "Unit",
    "Min. Stok",
    "Terakhir Update",
)

TEMPLATE_HEADERS: tuple[str, ...] = ("PLU", "Nama", "Kategori", "Stok", "Unit", "MinimalStok")
TEMPLATE_ROWS: tuple[tuple[Any, ...], ...] = (
    ("CONTOH-001", "Nama Barang Contoh", "Umum", 10, "Pcs", 5),
    ("CONTOH-002", "Barang Lain", "Elektronik", 50, "Unit", 10),
)


def format_local_date(value: datetime, tz: tzinfo | None = None) -> str:
    """Render as d/m/yyyy, the Indonesian short date form."""
    local = value.astimezone(tz) if tz is not None else value
    return f"{local.day}/{local.month}/{local.year}"


def default_export_filename(today: date) -> str:
    return f"Data_Stok_Gudang_{today.isoformat()}.xlsx"


def write_items_xlsx(
    rows: Sequence[ItemExportRow],
    target: Path | IO[bytes],
    tz: tzinfo | None = None,
) -> None:
    """Write the export projection as a single-sheet workbook."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = EXPORT_SHEET_TITLE
    ws.append(list(EXPORT_HEADERS))
    for row in rows:
        ws.append([
            row.sku,
            row.name,
            row.category,
            row.stock,
            row.unit,
            row.min_stock,
            format_local_date(row.last_updated, tz),
        ])
    wb.save(target)
    logger.info("items_exported", extra={"row_count": len(rows), "format": "xlsx"})


def write_template_csv(target: Path) -> None:
    """Write the two-row import template."""
    with Path(target).open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(TEMPLATE_HEADERS)
        writer.writerows(TEMPLATE_ROWS)
