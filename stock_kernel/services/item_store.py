"""
ItemStore -- authoritative in-memory set of Items.

Responsibility:
    Holds the mapping item id -> Item and the derived SKU -> id index used
    to keep SKUs unique.  Pure data container: it knows nothing about
    transactions or opnames.

Architecture position:
    Kernel > Services.  Written to by LedgerService (stock only) and by the
    ImportReconciler (upsert).  Read by everything else through snapshots.

Invariants enforced:
    - SKU is unique across all stored Items at every instant.
    - Item ids are never reused; a removed id is not handed out again.
    - No floor on stock: ``adjust_stock`` may drive it negative.

Failure modes:
    - ItemNotFoundError from adjust_stock / set_stock / remove / require.
    - DuplicateSkuError from add() when seeding a SKU already present.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import replace
from uuid import uuid4

from stock_kernel.domain.clock import Clock, SystemClock
from stock_kernel.domain.dtos import ItemCandidate, UpsertAction, UpsertOutcome
from stock_kernel.domain.models import Item, ItemDefaults
from stock_kernel.exceptions import DuplicateSkuError, ItemNotFoundError, MissingFieldError
from stock_kernel.logging_config import get_logger

logger = get_logger("services.item_store")


def _new_item_id() -> str:
    return str(uuid4())


class ItemStore:
    """In-memory Item container with SKU uniqueness."""

    def __init__(
        self,
        clock: Clock | None = None,
        defaults: ItemDefaults | None = None,
        id_factory: Callable[[], str] | None = None,
        items: Iterable[Item] = (),
    ):
        self._clock = clock or SystemClock()
        self._defaults = defaults or ItemDefaults()
        self._id_factory = id_factory or _new_item_id
        self._items: dict[str, Item] = {}
        self._sku_index: dict[str, str] = {}
        self._issued_ids: set[str] = set()
        for item in items:
            self.add(item)

    # ── Reads ──────────────────────────────────────────────────

    def get(self, item_id: str) -> Item | None:
        return self._items.get(item_id)

    def require(self, item_id: str) -> Item:
        item = self._items.get(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    def find_by_sku(self, sku: str) -> Item | None:
        item_id = self._sku_index.get(sku)
        return self._items.get(item_id) if item_id is not None else None

    def list_items(self) -> tuple[Item, ...]:
        """All items in insertion order."""
        return tuple(self._items.values())

    def skus(self) -> frozenset[str]:
        return frozenset(self._sku_index)

    @property
    def defaults(self) -> ItemDefaults:
        return self._defaults

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    # ── Writes ─────────────────────────────────────────────────

    def add(self, item: Item) -> Item:
        """Insert a fully-formed item (seed data). SKU and name must be non-blank."""
        for field in ("sku", "name"):
            if not getattr(item, field).strip():
                raise MissingFieldError(field)
        existing_id = self._sku_index.get(item.sku)
        if existing_id is not None:
            raise DuplicateSkuError(item.sku, existing_id)
        if item.id in self._issued_ids:
            raise ValueError(f"Item id already issued: {item.id}")
        self._store(item)
        return item

    def upsert_by_sku(self, candidate: ItemCandidate) -> UpsertOutcome:
        """
        Merge into the item with the candidate's SKU, or create a new one.

        Fields the candidate does not supply keep their existing value on
        update and take ItemDefaults on create.  ``last_updated`` is always
        refreshed.
        """
        now = self._clock.now()
        existing = self.find_by_sku(candidate.sku) if candidate.sku else None

        if existing is not None:
            updated = replace(existing, **candidate.supplied_fields(), last_updated=now)
            self._items[existing.id] = updated
            return UpsertOutcome(UpsertAction.UPDATED, updated, previous=existing)

        d = self._defaults
        item = Item(
            id=self._next_id(),
            sku=candidate.sku or self._generated_sku(),
            name=candidate.name or d.name,
            category=candidate.category or d.category,
            stock=candidate.stock if candidate.stock is not None else d.stock,
            unit=candidate.unit or d.unit,
            min_stock=candidate.min_stock if candidate.min_stock is not None else d.min_stock,
            last_updated=now,
        )
        self._store(item)
        return UpsertOutcome(UpsertAction.CREATED, item)

    def adjust_stock(self, item_id: str, delta: int) -> Item:
        """stock += delta. No lower bound."""
        item = self.require(item_id)
        updated = replace(item, stock=item.stock + delta, last_updated=self._clock.now())
        self._items[item_id] = updated
        return updated

    def set_stock(self, item_id: str, value: int) -> Item:
        item = self.require(item_id)
        updated = replace(item, stock=value, last_updated=self._clock.now())
        self._items[item_id] = updated
        return updated

    def remove(self, item_id: str) -> Item:
        """Delete the item. History referencing it is left alone."""
        item = self.require(item_id)
        del self._items[item_id]
        del self._sku_index[item.sku]
        logger.info(
            "item_removed",
            extra={"item_id": item_id, "sku": item.sku, "stock": item.stock},
        )
        return item

    # ── Internals ──────────────────────────────────────────────

    def _store(self, item: Item) -> None:
        self._items[item.id] = item
        self._sku_index[item.sku] = item.id
        self._issued_ids.add(item.id)

    def _next_id(self) -> str:
        item_id = self._id_factory()
        while item_id in self._issued_ids:
            item_id = self._id_factory()
        return item_id

    def _generated_sku(self) -> str:
        millis = int(self._clock.now().timestamp() * 1000)
        sku = f"{self._defaults.sku_prefix}{millis}"
        suffix = 0
        while sku in self._sku_index:
            suffix += 1
            sku = f"{self._defaults.sku_prefix}{millis}-{suffix}"
        return sku
