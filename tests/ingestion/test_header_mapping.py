"""Tests for header alias resolution, row normalization and the import filter."""

import pytest

from stock_ingestion.mapping.engine import (
    filter_importable,
    normalize_header,
    normalize_row,
    resolve_header,
)


class TestResolveHeader:
    @pytest.mark.parametrize(
        "header, key",
        [
            ("PLU", "sku"),
            ("sku", "sku"),
            ("Nama", "name"),
            ("Name", "name"),
            ("Nama Barang", "name"),
            ("Kategori", "category"),
            ("Stok", "stock"),
            ("Stok Fisik", "stock"),
            ("Satuan", "unit"),
            ("MinimalStok", "minStock"),
            ("MinStock", "minStock"),
            ("min", "minStock"),
            ("Min. Stok", "minStock"),
            ("  nama   barang ", "name"),
        ],
    )
    def test_known_aliases(self, header, key):
        assert resolve_header(header) == key

    @pytest.mark.parametrize("header", ["Harga", "", None, "Terakhir Update"])
    def test_unknown_headers(self, header):
        assert resolve_header(header) is None

    def test_normalize_header(self):
        assert normalize_header("  Min.\tStok ") == "min. stok"


class TestNormalizeRow:
    def test_template_row(self):
        row = normalize_row(
            {"PLU": "CONTOH-001", "Nama": "Nama Barang Contoh", "Kategori": "Umum",
             "Stok": "10", "Unit": "Pcs", "MinimalStok": "5"}
        )
        assert row == {
            "sku": "CONTOH-001",
            "name": "Nama Barang Contoh",
            "category": "Umum",
            "stock": 10,
            "unit": "Pcs",
            "minStock": 5,
        }

    def test_invalid_or_blank_numbers_are_omitted(self):
        row = normalize_row({"PLU": "A", "Nama": "B", "Stok": "sepuluh", "MinimalStok": ""})
        assert "stock" not in row
        assert "minStock" not in row

    def test_first_non_blank_alias_wins(self):
        row = normalize_row({"PLU": "", "SKU": "S-1", "Nama": "A", "Name": "B"})
        assert row["sku"] == "S-1"
        assert row["name"] == "A"

    def test_unknown_columns_dropped(self):
        assert normalize_row({"Harga": 5000, "PLU": "A"}) == {"sku": "A"}

    def test_numeric_sku_cell_becomes_text(self):
        assert normalize_row({"PLU": 1001.0})["sku"] == "1001"


class TestFilterImportable:
    def test_rows_missing_sku_or_name_rejected(self):
        result = filter_importable([
            {"PLU": "A-1", "Nama": "Pensil"},
            {"PLU": "", "Nama": "Tanpa Kode"},
            {"PLU": "A-3"},
            {"Kategori": "Umum"},
        ])

        assert [r["sku"] for r in result.accepted] == ["A-1"]
        assert [r.source_row for r in result.rejected] == [2, 3, 4]
        assert [e.field for e in result.rejected[2].errors] == ["sku", "name"]
        assert result.rejected[0].errors[0].code == "MISSING_FIELD"
        assert result.rejected[1].raw_data == {"PLU": "A-3"}

    def test_empty_input(self):
        result = filter_importable([])
        assert result.is_empty
        assert result.rejected == ()
