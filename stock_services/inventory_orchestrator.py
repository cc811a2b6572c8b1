"""
InventoryOrchestrator -- the single controller for a warehouse session.

Responsibility:
    Owns the ItemStore, the LedgerService and the ImportReconciler for one
    session and exposes their operations as the only mutation entry points.
    Each intent returns an ``OperationResult`` the presentation layer turns
    into a status message; reads return immutable snapshots.

Architecture position:
    Services -- composes kernel services with ingestion.  Presentation code
    talks to this class only.

Invariants enforced:
    - Callers never receive a mutable reference to store or history state.
    - Kernel failures (StockKernelError) become failed results carrying the
      exception's code; anything else propagates.
    - Destructive intents run unconditionally; confirming them is the
      caller's job.

Failure modes:
    - Failed ``OperationResult`` with codes such as ITEM_NOT_FOUND,
      TRANSACTION_NOT_FOUND, OPNAME_NOT_FOUND, INVALID_QUANTITY,
      IMPORT_EMPTY, IMPORT_READ_FAILED.
"""

from __future__ import annotations

import csv
import zipfile
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any
from uuid import uuid4

from openpyxl.utils.exceptions import InvalidFileException

from stock_config.bridges import build_item_store, build_ledger
from stock_config.schema import StockSettings
from stock_ingestion.exporters import default_export_filename
from stock_ingestion.services.import_service import ImportReconciler, read_item_rows
from stock_kernel.domain.clock import Clock, SystemClock
from stock_kernel.domain.models import Item, MovementKind, StockOpname, Transaction
from stock_kernel.exceptions import StockKernelError
from stock_kernel.logging_config import LogContext, get_logger
from stock_kernel.selectors.item_selector import ItemExportRow, ItemSelector, StockSummary
from stock_kernel.services.item_store import ItemStore
from stock_kernel.services.ledger_service import LedgerService

logger = get_logger("services.orchestrator")


class OperationStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class OperationResult:
    """Structured outcome of one intent."""

    status: OperationStatus
    code: str
    message: str
    data: Any = None

    @property
    def is_success(self) -> bool:
        return self.status is OperationStatus.SUCCESS

    @classmethod
    def ok(cls, code: str, message: str, data: Any = None) -> OperationResult:
        return cls(OperationStatus.SUCCESS, code, message, data)

    @classmethod
    def failed(cls, code: str, message: str, data: Any = None) -> OperationResult:
        return cls(OperationStatus.FAILED, code, message, data)


@dataclass(frozen=True)
class InventorySnapshot:
    """Immutable view of the session state."""

    items: tuple[Item, ...]
    transactions: tuple[Transaction, ...]  # most recent first
    opnames: tuple[StockOpname, ...]  # oldest first

    @property
    def opnames_for_display(self) -> tuple[StockOpname, ...]:
        return tuple(reversed(self.opnames))

    def item(self, item_id: str) -> Item | None:
        return next((i for i in self.items if i.id == item_id), None)


class InventoryOrchestrator:
    """
    Dispatches presentation intents to the ledger, store and importer.

    Contract:
        Every intent returns an OperationResult; none raises for kernel
        errors.  ``snapshot()`` is the read path after every intent.
    """

    def __init__(
        self,
        store: ItemStore,
        ledger: LedgerService,
        importer: ImportReconciler | None = None,
        clock: Clock | None = None,
    ):
        self._store = store
        self._ledger = ledger
        self._importer = importer or ImportReconciler(store)
        self._clock = clock or SystemClock()

    @classmethod
    def from_settings(cls, settings: StockSettings, clock: Clock | None = None) -> InventoryOrchestrator:
        """Session seeded from configuration."""
        clock = clock or SystemClock()
        store = build_item_store(settings, clock)
        ledger = build_ledger(settings, store, clock)
        return cls(store, ledger, ImportReconciler(store), clock)

    # ── Reads ──────────────────────────────────────────────────

    def snapshot(self) -> InventorySnapshot:
        return InventorySnapshot(
            items=self._store.list_items(),
            transactions=self._ledger.transactions(),
            opnames=self._ledger.opnames(),
        )

    def selector(self) -> ItemSelector:
        return ItemSelector(self._store.list_items(), self._ledger.transactions())

    def summary(self) -> StockSummary:
        return self.selector().summary()

    def export_rows(self, term: str = "", category: str | None = None) -> tuple[ItemExportRow, ...]:
        """Export projection of the items matching the current filter."""
        selector = self.selector()
        return selector.export_rows(selector.search(term, category))

    def export_filename(self) -> str:
        return default_export_filename(self._clock.now().date())

    # ── Transactions ───────────────────────────────────────────

    def post_transaction(
        self,
        item_id: str,
        kind: MovementKind | str,
        quantity: int,
        notes: str = "",
        effective_date: date | datetime | str | None = None,
    ) -> OperationResult:
        def action() -> OperationResult:
            txn = self._ledger.post_transaction(item_id, kind, quantity, notes, effective_date)
            return OperationResult.ok(
                "TRANSACTION_POSTED",
                f"Transaksi {txn.kind.value} berhasil disimpan!",
                txn,
            )

        return self._run("post_transaction", action, item_id=item_id)

    def post_incoming(self, item_id: str, quantity: int, notes: str = "", effective_date: date | datetime | str | None = None) -> OperationResult:
        return self.post_transaction(item_id, MovementKind.IN, quantity, notes, effective_date)

    def post_outgoing(self, item_id: str, quantity: int, notes: str = "", effective_date: date | datetime | str | None = None) -> OperationResult:
        return self.post_transaction(item_id, MovementKind.OUT, quantity, notes, effective_date)

    def reverse_transaction(self, transaction_id: str) -> OperationResult:
        def action() -> OperationResult:
            result = self._ledger.reverse_transaction(transaction_id)
            return OperationResult.ok(
                "TRANSACTION_REVERSED",
                "Transaksi berhasil dihapus dan stok telah disesuaikan kembali.",
                result,
            )

        return self._run("reverse_transaction", action, entry_id=transaction_id)

    # ── Reconciliation ─────────────────────────────────────────

    def reconcile(self, item_id: str, actual_stock: int, notes: str = "") -> OperationResult:
        def action() -> OperationResult:
            opname = self._ledger.reconcile(item_id, actual_stock, notes)
            return OperationResult.ok(
                "OPNAME_RECORDED",
                "Stok opname berhasil disimpan. Stok telah disesuaikan.",
                opname,
            )

        return self._run("reconcile", action, item_id=item_id)

    def reverse_reconcile(self, opname_id: str) -> OperationResult:
        def action() -> OperationResult:
            result = self._ledger.reverse_reconcile(opname_id)
            return OperationResult.ok(
                "OPNAME_REVERSED",
                "Riwayat opname dihapus dan stok dikembalikan ke nilai sebelum opname.",
                result,
            )

        return self._run("reverse_reconcile", action, entry_id=opname_id)

    # ── Items ──────────────────────────────────────────────────

    def remove_item(self, item_id: str) -> OperationResult:
        def action() -> OperationResult:
            item = self._store.remove(item_id)
            return OperationResult.ok("ITEM_REMOVED", f"Barang {item.name} berhasil dihapus.", item)

        return self._run("remove_item", action, item_id=item_id)

    def import_items(self, rows: Iterable[Mapping[str, Any]]) -> OperationResult:
        """Upsert pre-normalized candidate rows."""
        def action() -> OperationResult:
            summary = self._importer.import_items(rows)
            return OperationResult.ok(
                "IMPORT_COMPLETED",
                f"Import Berhasil! {summary.added_count} barang baru ditambahkan. "
                f"{summary.updated_count} barang diperbarui.",
                summary,
            )

        return self._run("import_items", action)

    def import_file(self, source_path: Path, options: dict[str, Any] | None = None) -> OperationResult:
        """
        Read a CSV/XLSX item list, drop unusable rows, and upsert the rest.

        CSV delimiters are sniffed (comma or semicolon) unless ``options``
        names one.
        """
        options = {"delimiter": "auto", **(options or {})}
        try:
            filtered = read_item_rows(Path(source_path), options)
        except (OSError, ValueError, KeyError, IndexError, csv.Error, zipfile.BadZipFile, InvalidFileException) as exc:
            logger.warning(
                "import_read_failed",
                extra={"source_filename": Path(source_path).name, "error": str(exc)},
            )
            return OperationResult.failed(
                "IMPORT_READ_FAILED",
                "Gagal membaca file. Pastikan format CSV atau Excel benar.",
            )
        if filtered.is_empty:
            return OperationResult.failed(
                "IMPORT_EMPTY",
                "Data tidak valid atau format kolom tidak sesuai template.",
                filtered,
            )
        result = self.import_items(filtered.accepted)
        if result.is_success and filtered.rejected:
            result = replace(
                result, data=replace(result.data, rejected_count=len(filtered.rejected))
            )
        return result

    # ── Internals ──────────────────────────────────────────────

    def _run(self, intent: str, action: Callable[[], OperationResult], **context: str) -> OperationResult:
        with LogContext.bind(correlation_id=str(uuid4()), **context):
            try:
                return action()
            except StockKernelError as exc:
                logger.warning(
                    "intent_failed",
                    exc_info=exc,
                    extra={"intent": intent, "error_code": exc.code},
                )
                return OperationResult.failed(exc.code, str(exc))
