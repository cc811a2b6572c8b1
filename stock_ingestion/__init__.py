"""
stock_ingestion -- Bulk item import and tabular export.

Reads CSV/XLSX item lists, normalizes their headers into item candidate
records and upserts them into the ItemStore by SKU.  Also writes the export
projection and the import template.

Architecture:
    stock_ingestion/ is a top-level package. Nothing in stock_kernel/
    imports from ingestion.
"""
