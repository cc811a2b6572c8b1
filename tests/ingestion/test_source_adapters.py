"""Tests for the CSV/XLSX source adapters and suffix dispatch."""

from pathlib import Path

import openpyxl
import pytest

from stock_ingestion.adapters import (
    CsvSourceAdapter,
    SourceAdapter,
    XlsxSourceAdapter,
    adapter_for_path,
)


def _write_xlsx(path: Path, rows, title: str | None = None, extra_sheet: str | None = None) -> Path:
    wb = openpyxl.Workbook()
    ws = wb.active
    if title:
        ws.title = title
    for row in rows:
        ws.append(list(row))
    if extra_sheet:
        other = wb.create_sheet(extra_sheet)
        other.append(["PLU", "Nama"])
        other.append(["OTHER-1", "Lain"])
    wb.save(path)
    return path


class TestCsvSourceAdapter:
    def test_read_with_header_yields_dicts(self, tmp_path):
        path = tmp_path / "items.csv"
        path.write_text("PLU,Nama,Stok\nA-1,Pensil,10\nA-2,Buku,3\n", encoding="utf-8")

        rows = list(CsvSourceAdapter().read(path, {}))

        assert rows == [
            {"PLU": "A-1", "Nama": "Pensil", "Stok": "10"},
            {"PLU": "A-2", "Nama": "Buku", "Stok": "3"},
        ]

    def test_bom_is_stripped(self, tmp_path):
        path = tmp_path / "bom.csv"
        path.write_bytes(b"\xef\xbb\xbfPLU,Nama\nA-1,Pensil\n")
        rows = list(CsvSourceAdapter().read(path, {}))
        assert list(rows[0]) == ["PLU", "Nama"]

    def test_blank_lines_and_overflow_cells_dropped(self, tmp_path):
        path = tmp_path / "messy.csv"
        path.write_text("PLU,Nama\nA-1,Pensil,extra\n,\nA-2,Buku\n", encoding="utf-8")
        rows = list(CsvSourceAdapter().read(path, {}))
        assert rows == [{"PLU": "A-1", "Nama": "Pensil"}, {"PLU": "A-2", "Nama": "Buku"}]

    def test_semicolon_autodetected(self, tmp_path):
        path = tmp_path / "semi.csv"
        path.write_text("PLU;Nama;Stok\nA-1;Pensil;10\n", encoding="utf-8")
        rows = list(CsvSourceAdapter().read(path, {"delimiter": "auto"}))
        assert rows == [{"PLU": "A-1", "Nama": "Pensil", "Stok": "10"}]

    def test_skip_rows(self, tmp_path):
        path = tmp_path / "skip.csv"
        path.write_text("Laporan Stok\nPLU,Nama\nA-1,Pensil\n", encoding="utf-8")
        rows = list(CsvSourceAdapter().read(path, {"skip_rows": 1}))
        assert rows == [{"PLU": "A-1", "Nama": "Pensil"}]


class TestXlsxSourceAdapter:
    def test_read_integral_floats_and_blank_cells(self, tmp_path):
        path = _write_xlsx(
            tmp_path / "items.xlsx",
            [("PLU", "Nama", "Stok"), ("A-1", "Pensil", 10.0), ("A-2", None, 3), (None, None, None)],
        )

        rows = list(XlsxSourceAdapter().read(path, {}))

        assert rows == [
            {"PLU": "A-1", "Nama": "Pensil", "Stok": 10},
            {"PLU": "A-2", "Nama": "", "Stok": 3},
        ]

    def test_header_autodetected_below_title_rows(self, tmp_path):
        path = _write_xlsx(
            tmp_path / "report.xlsx",
            [("Inventory Gudang GS",), ("Per 1 Maret 2024",), ("PLU", "Nama Barang", "Stok Fisik"), ("A-1", "Pensil", 4)],
        )
        rows = list(XlsxSourceAdapter().read(path, {}))
        assert rows == [{"PLU": "A-1", "Nama Barang": "Pensil", "Stok Fisik": 4}]

    def test_explicit_header_row_and_sheet_name(self, tmp_path):
        path = _write_xlsx(
            tmp_path / "two.xlsx",
            [("PLU", "Nama"), ("A-1", "Pensil")],
            extra_sheet="Lain",
        )
        rows = list(XlsxSourceAdapter().read(path, {"sheet": "Lain", "header_row": 0}))
        assert rows == [{"PLU": "OTHER-1", "Nama": "Lain"}]

    def test_duplicate_headers_deduped(self, tmp_path):
        path = _write_xlsx(tmp_path / "dup.xlsx", [("PLU", "Nama", "Nama"), ("A", "B", "C")])
        assert list(XlsxSourceAdapter().read(path, {})) == [{"PLU": "A", "Nama": "B", "Nama_1": "C"}]


class TestAdapterForPath:
    @pytest.mark.parametrize(
        "name, adapter_type",
        [("a.csv", CsvSourceAdapter), ("a.TXT", CsvSourceAdapter), ("a.xlsx", XlsxSourceAdapter)],
    )
    def test_dispatch_by_suffix(self, name, adapter_type):
        adapter = adapter_for_path(Path(name))
        assert isinstance(adapter, adapter_type)
        assert isinstance(adapter, SourceAdapter)

    def test_unsupported_suffix(self):
        with pytest.raises(ValueError, match="Unsupported"):
            adapter_for_path(Path("a.pdf"))
