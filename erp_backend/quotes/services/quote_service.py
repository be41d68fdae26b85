# quotes/services/quote_service.py

"""
QUOTE TRANSITIONS

Pure status changes; quotes never post to the ledger themselves.
convert_to_invoice is allowed once, from approved only, and records the
invoice number on the quote.
"""

from __future__ import annotations

import logging
from datetime import date

from django.db import transaction
from django.utils import timezone

from accounting.services.exceptions import ConflictError, InvalidTransitionError
from quotes.models import Quote, QuoteStatus
from quotes.services.lifecycle import QUOTE_LIFECYCLE

logger = logging.getLogger(__name__)

OPEN_STATES = (QuoteStatus.PENDING, QuoteStatus.UNDER_REVIEW, QuoteStatus.APPROVED)


def _lock(quote: Quote) -> Quote:
    return Quote.objects.select_for_update().get(pk=quote.pk)


def _set_status(quote: Quote, target: str) -> Quote:
    with transaction.atomic():
        locked = _lock(quote)
        QUOTE_LIFECYCLE.apply(locked, target)
        locked.save(update_fields=["status", "updated_at"])
    return locked


def submit_for_review(quote: Quote) -> Quote:
    return _set_status(quote, QuoteStatus.UNDER_REVIEW)


def approve(quote: Quote) -> Quote:
    return _set_status(quote, QuoteStatus.APPROVED)


def reject(quote: Quote) -> Quote:
    return _set_status(quote, QuoteStatus.REJECTED)


def expire(quote: Quote) -> Quote:
    return _set_status(quote, QuoteStatus.EXPIRED)


def expire_stale(as_of: date | None = None) -> int:
    """Expire every open quote whose validity ended before `as_of`."""
    as_of = as_of or timezone.localdate()
    expired = 0
    with transaction.atomic():
        for quote in Quote.objects.select_for_update().filter(status__in=OPEN_STATES, valid_until__lt=as_of):
            QUOTE_LIFECYCLE.apply(quote, QuoteStatus.EXPIRED)
            quote.save(update_fields=["status", "updated_at"])
            expired += 1

    if expired:
        logger.info("Stale quotes expired", extra={"as_of": str(as_of), "count": expired})
    return expired


def convert_to_invoice(quote: Quote, *, invoice_number: str | None = None) -> Quote:
    invoice_number = (invoice_number or "").strip() or f"FAC-{quote.number}"

    with transaction.atomic():
        locked = _lock(quote)
        if locked.status == QuoteStatus.CONVERTED:
            raise InvalidTransitionError(
                f"Quote {locked.number} was already converted to invoice {locked.invoice_number}"
            )
        QUOTE_LIFECYCLE.validate_transition(obj=locked, target_status=QuoteStatus.CONVERTED)

        if Quote.objects.filter(invoice_number=invoice_number).exclude(pk=locked.pk).exists():
            raise ConflictError(f"Invoice number {invoice_number} is already used")

        QUOTE_LIFECYCLE.apply(locked, QuoteStatus.CONVERTED)
        locked.invoice_number = invoice_number
        locked.converted_at = timezone.now()
        locked.save(update_fields=["status", "invoice_number", "converted_at", "updated_at"])

    logger.info(
        "Quote converted to invoice",
        extra={"quote": locked.number, "invoice_number": invoice_number},
    )
    return locked
