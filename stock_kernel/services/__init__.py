"""Stateful kernel services: the item store and the ledger engine."""

from stock_kernel.services.item_store import ItemStore
from stock_kernel.services.ledger_service import ItemHistory, LedgerService, ReversalResult

__all__ = ["ItemHistory", "ItemStore", "LedgerService", "ReversalResult"]
