"""
Data Transfer Objects for the stock kernel.

These cross the boundary between the kernel and its collaborators
(importers, the orchestrator, the presentation layer).  All are frozen.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from stock_kernel.domain.models import Item, is_strict_int


@dataclass(frozen=True)
class ValidationError:
    """
    A single validation error.

    Contract:
        Carries a machine-readable code, human-readable message, optional field
        path, and optional details dict.

    Non-goals:
        - Does NOT raise exceptions -- it IS the error representation.
    """

    code: str
    message: str
    field: str | None = None
    details: dict[str, Any] | None = None


def clean_text(value: Any) -> str | None:
    """Strip a loosely-typed cell; blank or missing becomes None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def coerce_int(value: Any) -> int | None:
    """
    Coerce a loosely-typed cell to int, or None when it is not one.

    Accepts ints, integral floats and numeric strings ("12", " 12 ", "12.0").
    Rejects bools, fractional numbers and anything non-numeric.
    """
    if value is None or isinstance(value, bool):
        return None
    if is_strict_int(value):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            return int(s)
        except ValueError:
            pass
        try:
            f = float(s)
        except ValueError:
            return None
        return int(f) if f.is_integer() else None
    return None


@dataclass(frozen=True)
class ItemCandidate:
    """
    Validated-on-ingest item fields for an upsert.

    None means "not supplied": on update the existing value is kept, on
    create the store applies its ItemDefaults.
    """

    sku: str | None = None
    name: str | None = None
    category: str | None = None
    stock: int | None = None
    unit: str | None = None
    min_stock: int | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> ItemCandidate:
        """Build from a loosely-typed record (``minStock`` or ``min_stock``)."""
        min_stock = row.get("minStock")
        if min_stock is None:
            min_stock = row.get("min_stock")
        return cls(
            sku=clean_text(row.get("sku")),
            name=clean_text(row.get("name")),
            category=clean_text(row.get("category")),
            stock=coerce_int(row.get("stock")),
            unit=clean_text(row.get("unit")),
            min_stock=coerce_int(min_stock),
        )

    def supplied_fields(self) -> dict[str, Any]:
        """Fields carrying a value, keyed by Item attribute name."""
        return {
            name: value
            for name, value in (
                ("sku", self.sku),
                ("name", self.name),
                ("category", self.category),
                ("stock", self.stock),
                ("unit", self.unit),
                ("min_stock", self.min_stock),
            )
            if value is not None
        }


class UpsertAction(str, Enum):
    CREATED = "created"
    UPDATED = "updated"


@dataclass(frozen=True)
class UpsertOutcome:
    """Result of ``ItemStore.upsert_by_sku``."""

    action: UpsertAction
    item: Item
    previous: Item | None = None
