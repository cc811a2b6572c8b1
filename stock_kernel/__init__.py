"""
Stock Kernel

In-memory warehouse stock ledger with:
- Items keyed by id with unique SKUs
- Stock movements (IN/OUT) and physical-count reconciliations (opname)
- Exact reversal of any retained movement or reconciliation
- Typed errors and structured JSON logging
"""

__version__ = "0.1.0"
