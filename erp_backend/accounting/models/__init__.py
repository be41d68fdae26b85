# accounting/models/__init__.py

"""
ACCOUNTING MODELS PACKAGE EXPORTS

Note:
- Keep this file *imports-only* (no business logic).
- Models only import services lazily (cache invalidation), never at module level.
"""

from accounting.models.account import Account
from accounting.models.account_mapping import AccountMapping
from accounting.models.chart import ChartOfAccounts
from accounting.models.journal import JournalEntry, JournalEntryStatus
from accounting.models.journal_line import JournalLine

__all__ = [
    "ChartOfAccounts",
    "Account",
    "AccountMapping",
    "JournalEntry",
    "JournalEntryStatus",
    "JournalLine",
]
