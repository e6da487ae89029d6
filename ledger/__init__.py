"""
Personal Ledger - Core Package

The in-memory entity store and history engine behind a local-only
personal finance app: accounts, transactions, categories, currencies.

DESIGN PRINCIPLES:
1. One owned state object, one writer
2. Validate everything, then mutate (no partial updates)
3. Balances are maintained incrementally, never silently recomputed
4. Every mutation is recorded and can be undone
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Personal Ledger Team"
