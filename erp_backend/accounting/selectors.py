# accounting/selectors.py

"""
Read-only ledger queries for presentation / reporting layers.
"""

from __future__ import annotations

from accounting.models.journal import JournalEntry
from accounting.services.posting_engine import get_journal_entry

__all__ = ["get_journal_entry", "list_journal_entries"]


def list_journal_entries(filters: dict | None = None):
    """
    Supported filters: source_type, source_id, date_from, date_to.
    """
    filters = filters or {}
    qs = JournalEntry.objects.prefetch_related("lines__account")

    if filters.get("source_type"):
        qs = qs.filter(source_type=filters["source_type"])
    if filters.get("source_id"):
        qs = qs.filter(source_id=filters["source_id"])
    if filters.get("date_from"):
        qs = qs.filter(entry_date__gte=filters["date_from"])
    if filters.get("date_to"):
        qs = qs.filter(entry_date__lte=filters["date_to"])

    return qs.order_by("-entry_date", "-created_at")
