"""
Import service: read -> normalize -> filter -> upsert by SKU.

``ImportReconciler.import_items`` is the batch front-end to the ItemStore.
It deliberately bypasses the LedgerService: imported stock values are taken
as ground truth and produce no Transaction or StockOpname.  Each stock
overwrite is logged (``import_stock_overwritten``) so the change is at least
visible in the structured log.

Uses structured logging (LogContext, get_logger("ingestion.*")).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Any
from uuid import uuid4

from stock_kernel.domain.dtos import ItemCandidate, UpsertAction
from stock_kernel.logging_config import LogContext, get_logger
from stock_kernel.services.item_store import ItemStore

from stock_ingestion.adapters import SourceAdapter, adapter_for_path
from stock_ingestion.domain.types import ImportSummary, RowFilterResult
from stock_ingestion.mapping.engine import filter_importable

logger = get_logger("ingestion.import_service")


def read_item_rows(
    source_path: Path,
    options: dict[str, Any] | None = None,
    adapter: SourceAdapter | None = None,
) -> RowFilterResult:
    """Read a CSV/XLSX file and return normalized, filtered candidate rows."""
    source_path = Path(source_path)
    adapter = adapter or adapter_for_path(source_path)
    result = filter_importable(adapter.read(source_path, options or {}))
    logger.info(
        "import_file_read",
        extra={
            "source_filename": source_path.name,
            "accepted_rows": len(result.accepted),
            "rejected_rows": len(result.rejected),
        },
    )
    return result


class ImportReconciler:
    """
    Upserts loosely-typed item records into an ItemStore.

    Contract:
        Rows are processed in input order.  A row whose SKU already exists
        (including one created earlier in the same batch) updates that item,
        so duplicate SKUs within a batch collapse to one item, last wins.
        ``stock`` is overwritten only when the row carries a valid integer.

    Non-goals:
        - Does NOT drop rows lacking sku/name; callers filter first
          (see ``filter_importable``).
        - Does NOT write ledger history.
    """

    def __init__(
        self,
        store: ItemStore,
        batch_id_factory: Callable[[], str] | None = None,
    ):
        self._store = store
        self._batch_id_factory = batch_id_factory or (lambda: str(uuid4()))

    def import_items(self, rows: Iterable[Mapping[str, Any]]) -> ImportSummary:
        batch_id = self._batch_id_factory()
        added = updated = 0
        item_ids: list[str] = []

        with LogContext.bind(batch_id=batch_id):
            for row in rows:
                outcome = self._store.upsert_by_sku(ItemCandidate.from_row(row))
                item_ids.append(outcome.item.id)
                if outcome.action is UpsertAction.CREATED:
                    added += 1
                    continue
                updated += 1
                previous = outcome.previous
                if previous is not None and previous.stock != outcome.item.stock:
                    logger.info(
                        "import_stock_overwritten",
                        extra={
                            "item_id": outcome.item.id,
                            "sku": outcome.item.sku,
                            "stock_before": previous.stock,
                            "stock_after": outcome.item.stock,
                        },
                    )

            logger.info(
                "import_completed",
                extra={"added_count": added, "updated_count": updated},
            )

        return ImportSummary(
            batch_id=batch_id,
            added_count=added,
            updated_count=updated,
            item_ids=tuple(item_ids),
        )
