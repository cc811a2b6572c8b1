"""
Config -> Kernel Bridges.

Functions that convert StockSettings into kernel objects. These live in
stock_config (the producer) because the kernel must NEVER import
stock_config.

Usage:
    from stock_config import get_active_config
    from stock_config.bridges import build_item_store, build_ledger

    settings = get_active_config()
    store = build_item_store(settings, clock)
    ledger = build_ledger(settings, store, clock)
"""

from __future__ import annotations

from datetime import datetime, timedelta

from stock_config.schema import StockSettings
from stock_kernel.domain.clock import Clock, SystemClock
from stock_kernel.domain.models import Item, MovementKind, Transaction
from stock_kernel.services.item_store import ItemStore
from stock_kernel.services.ledger_service import LedgerService


def build_seed_items(settings: StockSettings, now: datetime) -> tuple[Item, ...]:
    return tuple(
        Item(
            id=s.id,
            sku=s.sku,
            name=s.name,
            category=s.category,
            stock=s.stock,
            unit=s.unit,
            min_stock=s.min_stock,
            last_updated=now,
        )
        for s in settings.seed.items
    )


def build_seed_transactions(settings: StockSettings, now: datetime) -> tuple[Transaction, ...]:
    """
    Historical transactions, in file order (most recent first).

    Their effect is already part of the seeded stock figures; they are
    history only and are not re-applied.
    """
    return tuple(
        Transaction(
            id=s.id,
            item_id=s.item_id,
            item_name=s.item_name,
            kind=MovementKind.parse(s.kind),
            quantity=s.quantity,
            date=now - timedelta(days=s.days_ago),
            notes=s.notes,
        )
        for s in settings.seed.transactions
    )


def build_item_store(settings: StockSettings, clock: Clock | None = None) -> ItemStore:
    clock = clock or SystemClock()
    return ItemStore(
        clock=clock,
        defaults=settings.item_defaults,
        items=build_seed_items(settings, clock.now()),
    )


def build_ledger(
    settings: StockSettings,
    store: ItemStore,
    clock: Clock | None = None,
) -> LedgerService:
    clock = clock or SystemClock()
    return LedgerService(
        store,
        clock=clock,
        local_tz=settings.tzinfo(),
        transactions=build_seed_transactions(settings, clock.now()),
    )
