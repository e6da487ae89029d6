"""Undo/redo history package."""

from ledger.history.engine import HistoryEngine

__all__ = ["HistoryEngine"]
