"""Tests for the XLSX export writer and the CSV import template."""

from datetime import date, datetime, timezone
from io import BytesIO
from zoneinfo import ZoneInfo

import openpyxl

from stock_ingestion.exporters import (
    EXPORT_HEADERS,
    TEMPLATE_HEADERS,
    default_export_filename,
    format_local_date,
    write_items_xlsx,
    write_template_csv,
)
from stock_ingestion.services import ImportReconciler, read_item_rows
from stock_kernel.selectors.item_selector import ItemExportRow
from stock_kernel.services.item_store import ItemStore

ROW = ItemExportRow(
    sku="ELEC-001",
    name="Laptop Gaming X1",
    category="Elektronik",
    stock=15,
    unit="Unit",
    min_stock=5,
    last_updated=datetime(2024, 3, 1, 20, 0, tzinfo=timezone.utc),
)


def test_format_local_date_uses_zone():
    assert format_local_date(ROW.last_updated) == "1/3/2024"
    assert format_local_date(ROW.last_updated, ZoneInfo("Asia/Jakarta")) == "2/3/2024"


def test_default_export_filename():
    assert default_export_filename(date(2024, 3, 1)) == "Data_Stok_Gudang_2024-03-01.xlsx"


def test_write_items_xlsx(captured_logs):
    buffer = BytesIO()
    write_items_xlsx([ROW], buffer)

    buffer.seek(0)
    wb = openpyxl.load_workbook(buffer)
    ws = wb.active
    rows = list(ws.iter_rows(values_only=True))

    assert ws.title == "Data Stok"
    assert rows[0] == EXPORT_HEADERS
    assert rows[1] == ("ELEC-001", "Laptop Gaming X1", "Elektronik", 15, "Unit", 5, "1/3/2024")
    assert any(r["message"] == "items_exported" and r["row_count"] == 1 for r in captured_logs())


def test_exported_workbook_imports_back(tmp_path, deterministic_clock):
    path = tmp_path / "export.xlsx"
    write_items_xlsx([ROW], path)

    store = ItemStore(clock=deterministic_clock)
    summary = ImportReconciler(store).import_items(read_item_rows(path).accepted)

    assert summary.added_count == 1
    item = store.find_by_sku("ELEC-001")
    assert (item.name, item.stock, item.min_stock, item.unit) == ("Laptop Gaming X1", 15, 5, "Unit")


def test_template_csv(tmp_path):
    path = tmp_path / "template_import_stok.csv"
    write_template_csv(path)

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == ",".join(TEMPLATE_HEADERS)
    assert lines[1] == "CONTOH-001,Nama Barang Contoh,Umum,10,Pcs,5"
    assert lines[2] == "CONTOH-002,Barang Lain,Elektronik,50,Unit,10"

    accepted = read_item_rows(path).accepted
    assert [r["sku"] for r in accepted] == ["CONTOH-001", "CONTOH-002"]
    assert accepted[1]["minStock"] == 10
