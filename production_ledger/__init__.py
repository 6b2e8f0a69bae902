"""
Production Ledger - Source Package

A single-user ledger for a running-drum production floor: daily
production entries, payments received, and the outstanding balance
between them.

DESIGN PRINCIPLES:
1. Derived values are computed once, at creation
2. Entries and payments are never edited, only added or deleted
3. Destructive actions need explicit confirmation from the caller
4. A backup must restore the ledger exactly as it was exported
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Production Ledger Team"
