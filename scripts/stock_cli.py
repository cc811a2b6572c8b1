#!/usr/bin/env python3
"""
Command-line front-end for a warehouse stock session.

State lives in memory for one run: each invocation starts from the seed data
in the active settings file, optionally imports a CSV/XLSX item list, then
performs one command.

Usage:
    python3 scripts/stock_cli.py [--config PATH] [--import FILE] <command> [options]

Commands:
    summary                 Dashboard figures, low-stock alerts, recent movements
    import --file PATH      Import an item list and print the resulting summary
    export --out PATH       Write the item list as an XLSX workbook
    template --out PATH     Write the CSV import template
    analyze                 AI summary of the current stock position

Examples:
    python3 scripts/stock_cli.py summary
    python3 scripts/stock_cli.py import --file stok_maret.xlsx
    python3 scripts/stock_cli.py --import stok_maret.csv export --out ./
    OPENAI_API_KEY=... python3 scripts/stock_cli.py analyze
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Project root on sys.path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Warehouse stock ledger: summary, import, export, template, analyze.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings YAML (default: packaged stock_config/sets/default.yaml).",
    )
    parser.add_argument(
        "--import",
        dest="preload",
        type=Path,
        default=None,
        help="Item list (CSV/XLSX) to import before running the command.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override the settings log level (DEBUG, INFO, WARNING...).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    summary = sub.add_parser("summary", help="Dashboard figures and alerts.")
    summary.add_argument("--search", default="", help="Filter the item table by name or SKU.")
    summary.add_argument("--category", default=None, help="Filter the item table by category.")

    imp = sub.add_parser("import", help="Import an item list (CSV or XLSX).")
    imp.add_argument("--file", required=True, type=Path, help="Path to the source file.")
    imp.add_argument("--sheet", default=None, help="XLSX sheet name (default: first sheet).")
    imp.add_argument("--delimiter", default="auto", help="CSV delimiter, or 'auto' (default).")

    exp = sub.add_parser("export", help="Export items to XLSX.")
    exp.add_argument("--out", required=True, type=Path, help="Target file or directory.")
    exp.add_argument("--search", default="", help="Export only items matching this term.")
    exp.add_argument("--category", default=None, help="Export only this category.")

    tpl = sub.add_parser("template", help="Write the CSV import template.")
    tpl.add_argument(
        "--out",
        type=Path,
        default=Path("template_import_stok.csv"),
        help="Target path (default: template_import_stok.csv).",
    )

    sub.add_parser("analyze", help="AI summary of the current stock position.")
    return parser.parse_args(argv)


def _print_result(result) -> None:
    stream = sys.stdout if result.is_success else sys.stderr
    print(result.message, file=stream)


def _import(orchestrator, path: Path, options: dict | None = None) -> bool:
    result = orchestrator.import_file(path, options)
    _print_result(result)
    if result.is_success and result.data.rejected_count:
        print(f"  {result.data.rejected_count} baris dilewati (PLU/Nama kosong).")
    return result.is_success


def _print_summary(orchestrator, search: str, category: str | None) -> None:
    summary = orchestrator.summary()
    print(f"Total SKU       : {summary.total_skus}")
    print(f"Total Stok      : {summary.total_stock}")
    print(f"Stok Menipis    : {summary.low_stock_count}")
    print(f"Transaksi Masuk : {summary.incoming_count}")
    print(f"Transaksi Keluar: {summary.outgoing_count}")

    if summary.low_stock_items:
        print("\nPeringatan Stok Rendah:")
        for item in summary.low_stock_items:
            print(f"  {item.name} ({item.sku}): sisa {item.stock} {item.unit}, minimal {item.min_stock}")

    print("\nLevel Stok Teratas:")
    for point in summary.chart:
        print(f"  {point.label:<14} {point.stock:>6} (min {point.min_stock})")

    selector = orchestrator.selector()
    print("\nDaftar Barang:")
    for item in selector.search(search, category):
        print(f"  {item.sku:<12} {item.name:<24} {item.category:<12} {item.stock:>6} {item.unit}")

    recent = selector.recent_transactions(5)
    if recent:
        print("\nTransaksi Terakhir:")
        for txn in recent:
            print(f"  {txn.date.date().isoformat()} {txn.kind.value:<6} {txn.quantity:>5} {txn.item_name}")


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    # Lazy imports so we fail fast on args first
    from stock_config import get_active_config
    from stock_ingestion.exporters import write_items_xlsx, write_template_csv
    from stock_kernel.logging_config import configure_logging
    from stock_services.analysis_service import InventoryAnalysisService
    from stock_services.inventory_orchestrator import InventoryOrchestrator

    try:
        settings = get_active_config(args.config)
    except (OSError, KeyError, ValueError) as e:
        print(f"ERROR: Failed to load config: {e}", file=sys.stderr)
        return 1

    configure_logging(level=(args.log_level or settings.log_level).upper())
    orchestrator = InventoryOrchestrator.from_settings(settings)

    if args.preload is not None and not _import(orchestrator, args.preload):
        return 1

    if args.command == "summary":
        _print_summary(orchestrator, args.search, args.category)
        return 0

    if args.command == "import":
        options = {"delimiter": args.delimiter}
        if args.sheet:
            options["sheet"] = args.sheet
        if not _import(orchestrator, args.file, options):
            return 1
        _print_summary(orchestrator, "", None)
        return 0

    if args.command == "export":
        target = args.out
        if target.is_dir():
            target = target / orchestrator.export_filename()
        rows = orchestrator.export_rows(args.search, args.category)
        write_items_xlsx(rows, target, tz=settings.tzinfo())
        print(f"Export selesai: {target} ({len(rows)} barang)")
        return 0

    if args.command == "template":
        write_template_csv(args.out)
        print(f"Template disimpan: {args.out}")
        return 0

    if args.command == "analyze":
        snapshot = orchestrator.snapshot()
        result = InventoryAnalysisService(settings.analysis).analyze(
            snapshot.items, snapshot.transactions
        )
        print(result.content)
        return 0

    return 1


if __name__ == "__main__":
    sys.exit(main())
