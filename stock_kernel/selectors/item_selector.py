"""
Module: stock_kernel.selectors.item_selector
Responsibility: Read-only projections over an inventory snapshot -- search and
    category filtering, the low-stock list, dashboard totals and chart data,
    and the export projection handed to tabular writers.
Architecture position: Kernel > Selectors.  Imports only domain models.
    Selectors NEVER mutate; they work on the immutable tuples the orchestrator
    hands out.

Invariants enforced:
    - Low stock means ``stock <= min_stock`` (the threshold itself counts as
      critical).
    - Export rows carry raw values; date formatting belongs to the writer.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from stock_kernel.domain.models import Item, MovementKind, Transaction


@dataclass(frozen=True)
class ItemExportRow:
    """Read-only projection of an item for spreadsheet export."""

    sku: str
    name: str
    category: str
    stock: int
    unit: str
    min_stock: int
    last_updated: datetime


@dataclass(frozen=True)
class ChartPoint:
    """One bar of the stock-level chart."""

    label: str
    stock: int
    min_stock: int


@dataclass(frozen=True)
class StockSummary:
    """Dashboard figures."""

    total_skus: int
    total_stock: int
    low_stock_items: tuple[Item, ...]
    incoming_count: int
    outgoing_count: int
    chart: tuple[ChartPoint, ...]

    @property
    def low_stock_count(self) -> int:
        return len(self.low_stock_items)


def _short_label(name: str, width: int) -> str:
    return name if len(name) <= width else name[:width] + "..."


class ItemSelector:
    """
    Queries over a sequence of items and transactions.

    Contract:
        Accepts snapshots (tuples) from the caller and returns new tuples or
        frozen DTOs.  Order of input items is preserved unless stated.
    """

    def __init__(self, items: Sequence[Item], transactions: Sequence[Transaction] = ()):
        self.items = tuple(items)
        self.transactions = tuple(transactions)

    def search(self, term: str = "", category: str | None = None) -> tuple[Item, ...]:
        """Case-insensitive match on name or SKU, optionally one category."""
        needle = (term or "").strip().lower()
        return tuple(
            item
            for item in self.items
            if (not needle or needle in item.name.lower() or needle in item.sku.lower())
            and (not category or item.category == category)
        )

    def categories(self) -> tuple[str, ...]:
        return tuple(sorted({item.category for item in self.items}))

    def low_stock(self) -> tuple[Item, ...]:
        return tuple(item for item in self.items if item.is_low_stock)

    def export_rows(self, items: Sequence[Item] | None = None) -> tuple[ItemExportRow, ...]:
        source = self.items if items is None else items
        return tuple(
            ItemExportRow(
                sku=item.sku,
                name=item.name,
                category=item.category,
                stock=item.stock,
                unit=item.unit,
                min_stock=item.min_stock,
                last_updated=item.last_updated,
            )
            for item in source
        )

    def chart_points(self, limit: int = 7, label_width: int = 10) -> tuple[ChartPoint, ...]:
        """Items with the most stock, highest first."""
        ranked = sorted(self.items, key=lambda item: item.stock, reverse=True)[:limit]
        return tuple(
            ChartPoint(
                label=_short_label(item.name, label_width),
                stock=item.stock,
                min_stock=item.min_stock,
            )
            for item in ranked
        )

    def recent_transactions(self, limit: int = 10) -> tuple[Transaction, ...]:
        """First ``limit`` transactions in ledger order (most recent posted first)."""
        return self.transactions[:limit]

    def summary(self, chart_limit: int = 7) -> StockSummary:
        return StockSummary(
            total_skus=len(self.items),
            total_stock=sum(item.stock for item in self.items),
            low_stock_items=self.low_stock(),
            incoming_count=sum(1 for t in self.transactions if t.kind is MovementKind.IN),
            outgoing_count=sum(1 for t in self.transactions if t.kind is MovementKind.OUT),
            chart=self.chart_points(limit=chart_limit),
        )
