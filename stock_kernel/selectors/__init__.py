"""Read-only projections over inventory snapshots."""

from stock_kernel.selectors.item_selector import (
    ChartPoint,
    ItemExportRow,
    ItemSelector,
    StockSummary,
)

__all__ = ["ChartPoint", "ItemExportRow", "ItemSelector", "StockSummary"]
