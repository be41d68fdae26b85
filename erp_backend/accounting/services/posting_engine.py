# accounting/services/posting_engine.py

"""
======================================================
PATH: accounting/services/posting_engine.py
======================================================
POSTING ENGINE

This module is the ONLY place allowed to:
- Create JournalEntry / JournalLine rows
- Guarantee atomicity of entry + lines + source status
- Enforce idempotency via entry_number

post(draft, mark_source=fn):
- entry_number already posted -> returns that entry, mark_source is NOT re-run
- otherwise inserts header + lines, then calls mark_source(entry)
- all of it inside one transaction; any failure rolls everything back and
  surfaces as PostingFailedError
- a concurrent winner on entry_number (IntegrityError) is an idempotent hit,
  not a failure

No retries.
"""

from __future__ import annotations

import logging
from typing import Callable

from django.db import IntegrityError, transaction

from accounting.models.journal import JournalEntry, JournalEntryStatus
from accounting.models.journal_line import JournalLine
from accounting.services.exceptions import (
    AccountingValidationError,
    ConflictError,
    NotFoundError,
    PostingFailedError,
)
from accounting.services.journal_builder import DraftEntry

logger = logging.getLogger(__name__)


def _insert(draft: DraftEntry) -> JournalEntry:
    """
    LedgerStore.insert: header + lines. Raises ConflictError when the
    entry_number already exists (unique index).
    """
    try:
        with transaction.atomic():
            entry = JournalEntry.objects.create(
                entry_number=draft.entry_number,
                entry_date=draft.entry_date,
                description=draft.description,
                reference=draft.reference,
                status=JournalEntryStatus.POSTED,
                source_type=draft.source_type,
                source_id=draft.source_id,
                total_debit=draft.total_debit,
                total_credit=draft.total_credit,
            )
    except IntegrityError as exc:
        raise ConflictError(f"Journal entry {draft.entry_number} already exists") from exc

    # bulk_create skips save(); lines were validated by the builder
    # and the DB check constraint still guards one-sidedness
    JournalLine.objects.bulk_create(
        [
            JournalLine(
                entry=entry,
                line_number=line.line_number,
                account=line.account,
                description=line.description[:255],
                debit=line.debit,
                credit=line.credit,
            )
            for line in draft.lines
        ]
    )
    return entry


def post(
    draft: DraftEntry,
    *,
    mark_source: Callable[[JournalEntry], None] | None = None,
) -> JournalEntry:
    if not isinstance(draft, DraftEntry):
        raise AccountingValidationError("Only built draft entries can be posted (got NOOP?)")
    if not draft.lines:
        raise AccountingValidationError("Journal entry must contain at least one line")

    log_extra = {
        "entry_number": draft.entry_number,
        "source_type": draft.source_type,
        "source_id": draft.source_id,
        "amount": str(draft.total_debit),
    }

    try:
        with transaction.atomic():
            existing = JournalEntry.objects.filter(entry_number=draft.entry_number).first()
            if existing is not None:
                logger.info("Posting skipped: entry already exists", extra=log_extra)
                return existing

            try:
                entry = _insert(draft)
            except ConflictError:
                # lost the race to a concurrent poster; its entry is ours
                logger.info("Posting skipped: concurrent entry won", extra=log_extra)
                return JournalEntry.objects.get(entry_number=draft.entry_number)

            if mark_source is not None:
                mark_source(entry)

    except AccountingValidationError:
        raise
    except Exception as exc:
        logger.exception("Posting failed", extra=log_extra)
        raise PostingFailedError(
            f"Failed to post journal entry {draft.entry_number}: {exc}"
        ) from exc

    logger.info("Journal entry posted", extra=log_extra)
    return entry


def get_journal_entry(entry_number: str) -> JournalEntry:
    entry = (
        JournalEntry.objects.prefetch_related("lines__account")
        .filter(entry_number=(entry_number or "").strip())
        .first()
    )
    if entry is None:
        raise NotFoundError(f"Journal entry {entry_number} not found")
    return entry
