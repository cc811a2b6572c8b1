"""Import orchestration."""

from stock_ingestion.services.import_service import ImportReconciler, read_item_rows

__all__ = ["ImportReconciler", "read_item_rows"]
