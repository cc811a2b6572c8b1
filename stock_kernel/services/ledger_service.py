"""
LedgerService -- stock movement and reconciliation engine.

Responsibility:
    The only component allowed to change an Item's stock.  Posts and
    reverses stock movements (Transactions), records and reverses physical
    count reconciliations (StockOpnames), and owns both history lists.

Architecture position:
    Kernel > Services -- imperative shell over ItemStore.

Invariants enforced:
    - Stock is the fold of the retained history in application order:
      last reconciled value, plus the net of transactions posted after it.
    - Posting then reversing a transaction cancels exactly its own signed
      quantity, whatever happened to the item in between.
    - Reversing an opname subtracts its recorded difference; it does not
      restore system_stock when other movements were interleaved.
    - Every operation validates before mutating: a failure leaves the store
      and both histories untouched.

Ordering:
    - Transactions are kept most-recent-first by insertion.  A backdated
      entry is NOT re-sorted into date order.
    - Opnames are kept oldest-first; ``opnames_for_display`` reverses them.

Failure modes:
    - ItemNotFoundError: post/reconcile against an unknown item.
    - TransactionNotFoundError / OpnameNotFoundError: unknown record id.
    - InvalidQuantityError / InvalidMovementKindError /
      InvalidEffectiveDateError: rejected input.

Orphaned history:
    Reversing a record whose item has been removed skips the stock
    adjustment, logs ``stock_adjustment_skipped`` and still removes the
    record.  ``ReversalResult.stock_adjusted`` reports which path ran.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from uuid import uuid4

from stock_kernel.domain.clock import Clock, SystemClock, local_midnight
from stock_kernel.domain.models import (
    Item,
    MovementKind,
    StockOpname,
    Transaction,
    is_strict_int,
)
from stock_kernel.exceptions import (
    InvalidEffectiveDateError,
    InvalidQuantityError,
    OpnameNotFoundError,
    TransactionNotFoundError,
)
from stock_kernel.logging_config import LogContext, get_logger
from stock_kernel.services.item_store import ItemStore

logger = get_logger("services.ledger")


@dataclass(frozen=True)
class ReversalResult:
    """Outcome of reverse_transaction / reverse_reconcile."""

    record_id: str
    item_id: str
    stock_delta: int
    stock_adjusted: bool
    item: Item | None = None


@dataclass(frozen=True)
class ItemHistory:
    """Retained ledger records for one item id."""

    item_id: str
    transactions: tuple[Transaction, ...]
    opnames: tuple[StockOpname, ...]


def _new_record_id() -> str:
    return str(uuid4())


class LedgerService:
    """
    Applies and reverses stock movements and reconciliations.

    Contract:
        Callers validate user input for display purposes, but the engine
        re-checks everything it relies on.  Confirmation of destructive
        calls is the caller's job; once called, an operation always runs
        to completion.

    Non-goals:
        - Does NOT replay history to recompute stock.
        - Does NOT record imports (see ImportReconciler).
    """

    def __init__(
        self,
        store: ItemStore,
        clock: Clock | None = None,
        local_tz: tzinfo | None = None,
        id_factory: Callable[[], str] | None = None,
        transactions: Iterable[Transaction] = (),
        opnames: Iterable[StockOpname] = (),
    ):
        self._store = store
        self._clock = clock or SystemClock()
        self._local_tz = local_tz
        self._id_factory = id_factory or _new_record_id
        # Most-recent-first
        self._transactions: list[Transaction] = list(transactions)
        # Oldest-first
        self._opnames: list[StockOpname] = list(opnames)

    # ── Transactions ───────────────────────────────────────────

    def post_transaction(
        self,
        item_id: str,
        kind: MovementKind | str,
        quantity: int,
        notes: str = "",
        effective_date: date | datetime | str | None = None,
    ) -> Transaction:
        """
        Record a stock movement and apply it to the item's stock.

        ``effective_date`` defaults to now; a calendar date is taken as that
        day's local midnight.
        """
        movement = MovementKind.parse(kind)
        if not is_strict_int(quantity) or quantity <= 0:
            raise InvalidQuantityError(quantity)
        when = self._effective_datetime(effective_date)
        item = self._store.require(item_id)

        txn = Transaction(
            id=self._id_factory(),
            item_id=item.id,
            item_name=item.name,
            kind=movement,
            quantity=quantity,
            date=when,
            notes=notes or "",
        )
        self._transactions.insert(0, txn)
        updated = self._store.adjust_stock(item.id, txn.signed_quantity)

        with LogContext.bind(item_id=item.id, entry_id=txn.id):
            logger.info(
                "transaction_posted",
                extra={
                    "kind": movement.value,
                    "quantity": quantity,
                    "stock_before": item.stock,
                    "stock_after": updated.stock,
                    "effective_date": when,
                },
            )
        return txn

    def reverse_transaction(self, transaction_id: str) -> ReversalResult:
        """Cancel one transaction's stock effect and drop it from history."""
        index, txn = self._locate_transaction(transaction_id)
        delta = -txn.signed_quantity
        item = self._apply_reversal_delta(txn.item_id, delta, txn.id)
        del self._transactions[index]

        with LogContext.bind(item_id=txn.item_id, entry_id=txn.id):
            logger.info(
                "transaction_reversed",
                extra={
                    "kind": txn.kind.value,
                    "quantity": txn.quantity,
                    "stock_delta": delta,
                    "stock_adjusted": item is not None,
                },
            )
        return ReversalResult(
            record_id=txn.id,
            item_id=txn.item_id,
            stock_delta=delta,
            stock_adjusted=item is not None,
            item=item,
        )

    # ── Reconciliation ─────────────────────────────────────────

    def reconcile(self, item_id: str, actual_stock: int, notes: str = "") -> StockOpname:
        """
        Record a physical count and set the item's stock to it.

        Stock is set absolutely, not by delta.  A negative count is accepted
        here; rejecting it is a form concern.
        """
        if not is_strict_int(actual_stock):
            raise InvalidQuantityError(
                actual_stock, field="actual_stock", reason="must be an integer"
            )
        item = self._store.require(item_id)

        opname = StockOpname.create(
            id=self._id_factory(),
            item_id=item.id,
            item_name=item.name,
            system_stock=item.stock,
            actual_stock=actual_stock,
            date=self._clock.now(),
            notes=notes or "",
        )
        self._opnames.append(opname)
        self._store.set_stock(item.id, actual_stock)

        with LogContext.bind(item_id=item.id, entry_id=opname.id):
            logger.info(
                "opname_recorded",
                extra={
                    "system_stock": opname.system_stock,
                    "actual_stock": opname.actual_stock,
                    "difference": opname.difference,
                },
            )
        return opname

    def reverse_reconcile(self, opname_id: str) -> ReversalResult:
        """Subtract the opname's difference from stock and drop the record."""
        index, opname = self._locate_opname(opname_id)
        delta = -opname.difference
        item = self._apply_reversal_delta(opname.item_id, delta, opname.id)
        del self._opnames[index]

        with LogContext.bind(item_id=opname.item_id, entry_id=opname.id):
            logger.info(
                "opname_reversed",
                extra={
                    "difference": opname.difference,
                    "stock_delta": delta,
                    "stock_adjusted": item is not None,
                },
            )
        return ReversalResult(
            record_id=opname.id,
            item_id=opname.item_id,
            stock_delta=delta,
            stock_adjusted=item is not None,
            item=item,
        )

    # ── Reads ──────────────────────────────────────────────────

    def transactions(self, kind: MovementKind | str | None = None) -> tuple[Transaction, ...]:
        """Retained transactions, most recent first, optionally one kind."""
        if kind is None:
            return tuple(self._transactions)
        movement = MovementKind.parse(kind)
        return tuple(t for t in self._transactions if t.kind is movement)

    def opnames(self) -> tuple[StockOpname, ...]:
        """Retained opnames, oldest first."""
        return tuple(self._opnames)

    def opnames_for_display(self) -> tuple[StockOpname, ...]:
        return tuple(reversed(self._opnames))

    def get_transaction(self, transaction_id: str) -> Transaction | None:
        return next((t for t in self._transactions if t.id == transaction_id), None)

    def get_opname(self, opname_id: str) -> StockOpname | None:
        return next((o for o in self._opnames if o.id == opname_id), None)

    def history_for_item(self, item_id: str) -> ItemHistory:
        """Works for removed items too; records carry the name snapshot."""
        return ItemHistory(
            item_id=item_id,
            transactions=tuple(t for t in self._transactions if t.item_id == item_id),
            opnames=tuple(o for o in self._opnames if o.item_id == item_id),
        )

    # ── Internals ──────────────────────────────────────────────

    def _locate_transaction(self, transaction_id: str) -> tuple[int, Transaction]:
        for index, txn in enumerate(self._transactions):
            if txn.id == transaction_id:
                return index, txn
        raise TransactionNotFoundError(transaction_id)

    def _locate_opname(self, opname_id: str) -> tuple[int, StockOpname]:
        for index, opname in enumerate(self._opnames):
            if opname.id == opname_id:
                return index, opname
        raise OpnameNotFoundError(opname_id)

    def _apply_reversal_delta(self, item_id: str, delta: int, record_id: str) -> Item | None:
        if item_id not in self._store:
            logger.warning(
                "stock_adjustment_skipped",
                extra={"item_id": item_id, "record_id": record_id, "stock_delta": delta},
            )
            return None
        return self._store.adjust_stock(item_id, delta)

    def _effective_datetime(self, value: date | datetime | str | None) -> datetime:
        if value is None:
            return self._clock.now()
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return value.replace(tzinfo=self._local_tz) if self._local_tz else value.astimezone()
            return value
        if isinstance(value, str):
            try:
                value = date.fromisoformat(value.strip())
            except ValueError:
                raise InvalidEffectiveDateError(value) from None
        if isinstance(value, date):
            return local_midnight(value, self._local_tz)
        raise InvalidEffectiveDateError(value)
