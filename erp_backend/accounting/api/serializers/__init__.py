# accounting/api/serializers/__init__.py

from accounting.api.serializers.accounts import AccountListSerializer
from accounting.api.serializers.journal_entries import (
    JournalEntrySerializer,
    JournalLineSerializer,
)

__all__ = [
    "AccountListSerializer",
    "JournalEntrySerializer",
    "JournalLineSerializer",
]
