"""
Pytest fixtures for the stock ledger test suite.

Provides:
- Structured logging setup and a JSON log capture fixture
- A deterministic clock and counter-based id factories
- A seeded ItemStore / LedgerService / InventoryOrchestrator

Everything is in memory; no external services are needed.
"""

import itertools
import json
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from io import StringIO

import pytest

from stock_config import DEFAULT_CONFIG_PATH, get_active_config
from stock_ingestion.services import ImportReconciler
from stock_kernel.domain.clock import DeterministicClock
from stock_kernel.domain.models import Item
from stock_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from stock_kernel.services.item_store import ItemStore
from stock_kernel.services.ledger_service import LedgerService
from stock_services.inventory_orchestrator import InventoryOrchestrator

FIXED_NOW = datetime(2024, 3, 1, 9, 30, 0, tzinfo=timezone.utc)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture stock_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, ledger):
            ledger.post_transaction(...)
            logs = captured_logs()
            assert any(r["message"] == "transaction_posted" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("stock_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Clock and id fixtures
# =============================================================================


@pytest.fixture
def deterministic_clock():
    """Provide a deterministic clock for testing."""
    return DeterministicClock(FIXED_NOW)


def counter_ids(prefix: str) -> Callable[[], str]:
    """Id factory yielding prefix-1, prefix-2, ..."""
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


def make_item(
    item_id: str,
    sku: str,
    name: str,
    stock: int = 0,
    min_stock: int = 5,
    category: str = "Umum",
    unit: str = "Pcs",
) -> Item:
    return Item(
        id=item_id,
        sku=sku,
        name=name,
        category=category,
        stock=stock,
        unit=unit,
        min_stock=min_stock,
        last_updated=FIXED_NOW,
    )


# =============================================================================
# Service fixtures
# =============================================================================


@pytest.fixture
def seed_items() -> tuple[Item, ...]:
    return (
        make_item("1", "ELEC-001", "Laptop Gaming X1", stock=15, min_stock=5, category="Elektronik", unit="Unit"),
        make_item("2", "ELEC-002", "Mouse Wireless", stock=42, min_stock=10, category="Aksesoris"),
        make_item("3", "FURN-001", "Kursi Ergonomis", stock=3, min_stock=5, category="Furniture", unit="Unit"),
    )


@pytest.fixture
def item_store(deterministic_clock, seed_items) -> ItemStore:
    return ItemStore(
        clock=deterministic_clock,
        id_factory=counter_ids("item"),
        items=seed_items,
    )


@pytest.fixture
def ledger(item_store, deterministic_clock) -> LedgerService:
    return LedgerService(
        item_store,
        clock=deterministic_clock,
        local_tz=timezone.utc,
        id_factory=counter_ids("rec"),
    )


@pytest.fixture
def importer(item_store) -> ImportReconciler:
    return ImportReconciler(item_store, batch_id_factory=counter_ids("batch"))


@pytest.fixture
def orchestrator(item_store, ledger, importer, deterministic_clock) -> InventoryOrchestrator:
    return InventoryOrchestrator(item_store, ledger, importer, deterministic_clock)


@pytest.fixture
def default_settings():
    """Settings loaded from the packaged default YAML."""
    return get_active_config(DEFAULT_CONFIG_PATH)
