"""
StockSettings schema.

The canonical data model for warehouse configuration.  YAML files are parsed
into these frozen types by the loader; bridges turn them into kernel inputs.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import tzinfo
from zoneinfo import ZoneInfo

from stock_kernel.domain.models import ItemDefaults

# ---------------------------------------------------------------------------
# Analysis collaborator
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnalysisSettings:
    """Settings for the optional AI inventory summary."""

    enabled: bool = True
    model: str = "gpt-4o-mini"
    api_key_env: str = "OPENAI_API_KEY"
    recent_transaction_limit: int = 10
    max_tokens: int = 600
    temperature: float = 0.4

    def api_key(self, environ: Mapping[str, str] | None = None) -> str | None:
        """Credential from the environment variable named by api_key_env."""
        env = os.environ if environ is None else environ
        value = env.get(self.api_key_env, "").strip()
        return value or None


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SeedItem:
    id: str
    sku: str
    name: str
    category: str
    stock: int
    unit: str
    min_stock: int


@dataclass(frozen=True)
class SeedTransaction:
    """Historical movement; already reflected in the seeded stock."""

    id: str
    item_id: str
    item_name: str
    kind: str  # "IN" / "OUT" or "MASUK" / "KELUAR"
    quantity: int
    days_ago: int = 0
    notes: str = ""


@dataclass(frozen=True)
class SeedData:
    items: tuple[SeedItem, ...] = ()
    transactions: tuple[SeedTransaction, ...] = ()


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StockSettings:
    """Complete configuration for one warehouse session."""

    name: str
    version: int
    item_defaults: ItemDefaults = field(default_factory=ItemDefaults)
    analysis: AnalysisSettings = field(default_factory=AnalysisSettings)
    seed: SeedData = field(default_factory=SeedData)
    timezone: str | None = None
    log_level: str = "INFO"
    checksum: str = ""

    def tzinfo(self) -> tzinfo | None:
        """ZoneInfo for ``timezone``; None means the host's local zone."""
        return ZoneInfo(self.timezone) if self.timezone else None
