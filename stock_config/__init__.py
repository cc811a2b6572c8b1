"""
stock_config -- single public entrypoint for warehouse configuration.

Responsibility:
    ``get_active_config()`` is the one way to obtain settings at runtime.
    YAML loading lives in ``stock_config.loader``; translation into kernel
    objects lives in ``stock_config.bridges``.

Architecture position:
    Configuration.  Sits above ``stock_kernel`` and below
    ``stock_services``.  The kernel MUST NEVER import from ``stock_config``.

Failure modes:
    - ``FileNotFoundError`` -- the settings file does not exist.
    - ``KeyError`` / ``ValueError`` -- schema violations.

Audit relevance:
    Every successful call emits a ``STOCK_CONFIG_TRACE`` log entry with the
    settings name, version and checksum.
"""

from __future__ import annotations

from pathlib import Path

from stock_config.loader import load_settings
from stock_config.schema import StockSettings
from stock_kernel.logging_config import get_logger

_logger = get_logger("config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(config_path: Path | None = None) -> StockSettings:
    """Load, validate and trace the active settings file."""
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    settings = load_settings(path)
    _logger.info(
        "STOCK_CONFIG_TRACE",
        extra={
            "trace_type": "STOCK_CONFIG_TRACE",
            "config_name": settings.name,
            "config_version": settings.version,
            "checksum": settings.checksum,
            "seed_item_count": len(settings.seed.items),
            "seed_transaction_count": len(settings.seed.transactions),
        },
    )
    return settings


__all__ = ["DEFAULT_CONFIG_PATH", "StockSettings", "get_active_config"]
