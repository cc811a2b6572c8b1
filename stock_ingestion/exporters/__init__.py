"""Writers for the export projection and the import template."""

from stock_ingestion.exporters.tabular import (
    EXPORT_HEADERS,
    TEMPLATE_HEADERS,
    default_export_filename,
    format_local_date,
    write_items_xlsx,
    write_template_csv,
)

__all__ = [
    "EXPORT_HEADERS",
    "TEMPLATE_HEADERS",
    "default_export_filename",
    "format_local_date",
    "write_items_xlsx",
    "write_template_csv",
]
