"""
Source adapter protocol.

Contract:
    SourceAdapter.read() yields one dict per non-blank source row (header -> cell).

Architecture: stock_ingestion/adapters. File I/O only, no kernel imports.
Adapters do not interpret headers; mapping.engine does.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator, Protocol, runtime_checkable


@runtime_checkable
class SourceAdapter(Protocol):
    """Protocol for reading tabular item files into row dicts."""

    def read(self, source_path: Path, options: dict[str, Any]) -> Iterator[dict[str, Any]]:
        """Yield one dict per data row."""
        ...
