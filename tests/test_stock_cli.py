"""Tests for the stock CLI (scripts/stock_cli.py)."""

import openpyxl
import pytest

from scripts.stock_cli import main
from stock_services.analysis_service import UNAVAILABLE_MESSAGE


def test_summary(capsys):
    assert main(["summary"]) == 0
    out = capsys.readouterr().out
    assert "Total SKU       : 5" in out
    assert "Kursi Ergonomis (FURN-001)" in out


def test_template_then_import(tmp_path, capsys):
    template = tmp_path / "template.csv"
    assert main(["template", "--out", str(template)]) == 0
    assert main(["import", "--file", str(template)]) == 0

    out = capsys.readouterr().out
    assert "Import Berhasil! 2 barang baru ditambahkan. 0 barang diperbarui." in out
    assert "Total SKU       : 7" in out


def test_import_failure_exit_code(tmp_path, capsys):
    bad = tmp_path / "kosong.csv"
    bad.write_text("Foo\n1\n", encoding="utf-8")
    assert main(["import", "--file", str(bad)]) == 1
    assert "format kolom" in capsys.readouterr().err


def test_export_to_directory(tmp_path):
    assert main(["export", "--out", str(tmp_path), "--category", "Elektronik"]) == 0

    files = list(tmp_path.glob("Data_Stok_Gudang_*.xlsx"))
    assert len(files) == 1
    ws = openpyxl.load_workbook(files[0]).active
    assert [row[0] for row in ws.iter_rows(min_row=2, values_only=True)] == ["ELEC-001", "ELEC-003"]


def test_analyze_without_credential(monkeypatch, capsys):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    assert main(["analyze"]) == 0
    assert UNAVAILABLE_MESSAGE in capsys.readouterr().out


def test_unknown_config(tmp_path, capsys):
    assert main(["--config", str(tmp_path / "none.yaml"), "summary"]) == 1
    assert "Failed to load config" in capsys.readouterr().err


def test_command_required():
    with pytest.raises(SystemExit):
        main([])
