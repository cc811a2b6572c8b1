"""
stock_ingestion.domain.types -- Pure frozen dataclasses for item import.

ZERO I/O. Imports only from stock_kernel/domain/.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from stock_kernel.domain.dtos import ValidationError


@dataclass(frozen=True)
class RejectedRow:
    """A source row dropped before reconciliation."""

    source_row: int  # 1-indexed data row (header excluded)
    raw_data: dict[str, Any]
    errors: tuple[ValidationError, ...]


@dataclass(frozen=True)
class RowFilterResult:
    """Normalized rows split into importable and rejected."""

    accepted: tuple[dict[str, Any], ...]
    rejected: tuple[RejectedRow, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.accepted


@dataclass(frozen=True)
class ImportSummary:
    """Counts reported after an import batch."""

    batch_id: str
    added_count: int
    updated_count: int
    item_ids: tuple[str, ...] = ()
    rejected_count: int = 0

    @property
    def total(self) -> int:
        return self.added_count + self.updated_count
