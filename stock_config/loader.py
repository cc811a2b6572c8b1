"""
Configuration Loader (``stock_config.loader``).

Responsibility
--------------
Loads a YAML settings file and parses it into typed ``stock_config.schema``
dataclass instances.  Runtime callers go through
``stock_config.get_active_config()``.

Invariants enforced
-------------------
* Parse errors raise ``ValueError`` or ``KeyError`` with descriptive
  messages; required seed fields have no silent defaults.
* Every parsed object is a frozen dataclass from ``schema.py``.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the raw
  document for change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Wrong value types  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from stock_config.schema import (
    AnalysisSettings,
    SeedData,
    SeedItem,
    SeedTransaction,
    StockSettings,
)
from stock_kernel.domain.models import ItemDefaults, MovementKind


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the document is not a mapping.
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top-level YAML must be a mapping, got {type(data).__name__}")
    return data


def compute_checksum(data: dict[str, Any]) -> str:
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def _int(data: dict[str, Any], key: str, default: Any = ...) -> int:
    value = data[key] if default is ... else data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    return value


def parse_item_defaults(data: dict[str, Any]) -> ItemDefaults:
    """Parse ``item_defaults``; omitted keys keep the built-in defaults."""
    base = ItemDefaults()
    return ItemDefaults(
        category=str(data.get("category", base.category)),
        unit=str(data.get("unit", base.unit)),
        min_stock=_int(data, "min_stock", base.min_stock),
        stock=_int(data, "stock", base.stock),
        name=str(data.get("name", base.name)),
        sku_prefix=str(data.get("sku_prefix", base.sku_prefix)),
    )


def parse_analysis(data: dict[str, Any]) -> AnalysisSettings:
    base = AnalysisSettings()
    return AnalysisSettings(
        enabled=bool(data.get("enabled", base.enabled)),
        model=str(data.get("model", base.model)),
        api_key_env=str(data.get("api_key_env", base.api_key_env)),
        recent_transaction_limit=_int(
            data, "recent_transaction_limit", base.recent_transaction_limit
        ),
        max_tokens=_int(data, "max_tokens", base.max_tokens),
        temperature=float(data.get("temperature", base.temperature)),
    )


def parse_seed_item(data: dict[str, Any]) -> SeedItem:
    """
    Parse one seed item.

    Raises:
        KeyError: if id, sku or name is missing.
    """
    return SeedItem(
        id=str(data["id"]),
        sku=str(data["sku"]),
        name=str(data["name"]),
        category=str(data.get("category", ItemDefaults.category)),
        stock=_int(data, "stock", ItemDefaults.stock),
        unit=str(data.get("unit", ItemDefaults.unit)),
        min_stock=_int(data, "min_stock", ItemDefaults.min_stock),
    )


def parse_seed_transaction(data: dict[str, Any]) -> SeedTransaction:
    """
    Parse one historical transaction.

    Raises:
        KeyError: if id, item_id, kind or quantity is missing.
        InvalidMovementKindError: if kind is not IN/OUT/MASUK/KELUAR.
    """
    kind = MovementKind.parse(data["kind"])
    return SeedTransaction(
        id=str(data["id"]),
        item_id=str(data["item_id"]),
        item_name=str(data.get("item_name", "")),
        kind=kind.name,
        quantity=_int(data, "quantity"),
        days_ago=_int(data, "days_ago", 0),
        notes=str(data.get("notes", "")),
    )


def parse_seed(data: dict[str, Any]) -> SeedData:
    return SeedData(
        items=tuple(parse_seed_item(i) for i in data.get("items", ()) or ()),
        transactions=tuple(
            parse_seed_transaction(t) for t in data.get("transactions", ()) or ()
        ),
    )


def parse_settings(data: dict[str, Any]) -> StockSettings:
    """
    Parse a full settings document.

    Raises:
        KeyError: if ``name`` is missing.
        ValueError: on an unknown timezone or malformed values.
    """
    timezone = data.get("timezone") or None
    if timezone is not None:
        try:
            ZoneInfo(str(timezone))
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone {timezone!r}") from e

    return StockSettings(
        name=str(data["name"]),
        version=_int(data, "version", 1),
        item_defaults=parse_item_defaults(data.get("item_defaults") or {}),
        analysis=parse_analysis(data.get("analysis") or {}),
        seed=parse_seed(data.get("seed") or {}),
        timezone=str(timezone) if timezone is not None else None,
        log_level=str(data.get("log_level", "INFO")).upper(),
        checksum=compute_checksum(data),
    )


def load_settings(path: Path) -> StockSettings:
    return parse_settings(load_yaml_file(path))
