"""Ledger module."""

from .ledger import ILedger, Ledger

__all__ = ["ILedger", "Ledger"]
