"""
stock_services -- session orchestration and optional collaborators.

Composes stock_kernel, stock_ingestion and stock_config into the single
controller the presentation layer talks to, plus the AI analysis helper.
"""
