"""
Stock Domain Models (``stock_kernel.domain.models``).

Responsibility
--------------
Frozen value objects for the nouns of the stock ledger: items, stock
movements (transactions) and physical-count reconciliations (opnames).

Architecture
------------
Layer: **Kernel > Domain** -- pure data structures, no I/O.  All
dataclasses are ``frozen=True``; the store replaces an Item with a new
instance (``dataclasses.replace``) instead of mutating it, so any snapshot
handed to a caller stays valid.

Invariants
----------
- ``Transaction.quantity`` is a positive integer.
- ``StockOpname.difference == actual_stock - system_stock``.
- ``Item.stock`` may be negative; there is no floor.

Failure Modes
-------------
- ``InvalidQuantityError`` on a non-positive or non-integer quantity.
- ``DifferenceMismatchError`` on an opname built with a wrong difference.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from stock_kernel.exceptions import (
    DifferenceMismatchError,
    InvalidMovementKindError,
    InvalidQuantityError,
)


def is_strict_int(value: object) -> bool:
    """True for ints that are not bools."""
    return isinstance(value, int) and not isinstance(value, bool)


class MovementKind(str, Enum):
    """Direction of a stock movement."""

    IN = "MASUK"
    OUT = "KELUAR"

    @classmethod
    def parse(cls, value: MovementKind | str) -> MovementKind:
        """Accept a member, its value ("MASUK") or its name ("IN")."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            token = value.strip()
            for member in cls:
                if token == member.value or token.upper() == member.name:
                    return member
        raise InvalidMovementKindError(value)

    @property
    def sign(self) -> int:
        return 1 if self is MovementKind.IN else -1


class OpnameStatus(str, Enum):
    """Reconciliation status. Only RESOLVED is ever produced."""

    PENDING = "Pending"
    RESOLVED = "Resolved"


@dataclass(frozen=True)
class ItemDefaults:
    """Values applied to fields a new item is created without."""

    category: str = "Umum"
    unit: str = "Pcs"
    min_stock: int = 5
    stock: int = 0
    name: str = "Barang Baru"
    sku_prefix: str = "SKU-"


@dataclass(frozen=True)
class Item:
    """A stocked product. ``stock`` is a cached running balance."""

    id: str
    sku: str
    name: str
    category: str
    stock: int
    unit: str
    min_stock: int
    last_updated: datetime

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.min_stock


@dataclass(frozen=True)
class Transaction:
    """One inbound or outbound movement. Never mutated after creation."""

    id: str
    item_id: str
    item_name: str
    kind: MovementKind
    quantity: int
    date: datetime
    notes: str = ""

    def __post_init__(self) -> None:
        if not is_strict_int(self.quantity) or self.quantity <= 0:
            raise InvalidQuantityError(self.quantity)

    @property
    def signed_quantity(self) -> int:
        """Stock effect of posting this transaction."""
        return self.kind.sign * self.quantity


@dataclass(frozen=True)
class StockOpname:
    """One physical-count reconciliation."""

    id: str
    item_id: str
    item_name: str
    system_stock: int
    actual_stock: int
    difference: int
    date: datetime
    notes: str = ""
    status: OpnameStatus = OpnameStatus.RESOLVED

    def __post_init__(self) -> None:
        if self.difference != self.actual_stock - self.system_stock:
            raise DifferenceMismatchError(
                self.system_stock, self.actual_stock, self.difference
            )

    @classmethod
    def create(
        cls,
        *,
        id: str,
        item_id: str,
        item_name: str,
        system_stock: int,
        actual_stock: int,
        date: datetime,
        notes: str = "",
    ) -> StockOpname:
        """Build a resolved opname, deriving the difference."""
        return cls(
            id=id,
            item_id=item_id,
            item_name=item_name,
            system_stock=system_stock,
            actual_stock=actual_stock,
            difference=actual_stock - system_stock,
            date=date,
            notes=notes,
            status=OpnameStatus.RESOLVED,
        )
