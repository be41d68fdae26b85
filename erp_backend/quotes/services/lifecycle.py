"""
QUOTE LIFECYCLE

pending      -> {under_review, approved, rejected, expired}
under_review -> {approved, rejected, expired}
approved     -> {converted, expired}
rejected / expired / converted are terminal
"""

from accounting.services.document_lifecycle import DocumentLifecycle
from quotes.models import QuoteStatus

QUOTE_LIFECYCLE = DocumentLifecycle(
    name="Quote",
    states=QuoteStatus,
    transitions={
        QuoteStatus.PENDING: {
            QuoteStatus.UNDER_REVIEW,
            QuoteStatus.APPROVED,
            QuoteStatus.REJECTED,
            QuoteStatus.EXPIRED,
        },
        QuoteStatus.UNDER_REVIEW: {
            QuoteStatus.APPROVED,
            QuoteStatus.REJECTED,
            QuoteStatus.EXPIRED,
        },
        QuoteStatus.APPROVED: {QuoteStatus.CONVERTED, QuoteStatus.EXPIRED},
        QuoteStatus.REJECTED: set(),
        QuoteStatus.EXPIRED: set(),
        QuoteStatus.CONVERTED: set(),
    },
)
