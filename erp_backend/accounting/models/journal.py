# accounting/models/journal.py

"""
======================================================
PATH: accounting/models/journal.py
======================================================
JOURNAL ENTRY MODEL

Represents a single accounting transaction (journal header).

Guarantees:
- Created only by the posting engine; immutable once created
- entry_number is the idempotency key (unique, derived from the business event)
- total_debit == total_credit (also checked per line set by the builder)
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q


class JournalEntryStatus(models.TextChoices):
    DRAFT = "draft", "Draft"
    POSTED = "posted", "Posted"


class JournalEntry(models.Model):
    entry_number = models.CharField(
        max_length=80,
        unique=True,
        help_text="Deterministic key derived from event type, source id and period",
    )

    entry_date = models.DateField(help_text="Accounting effective date")

    description = models.TextField(help_text="Narrative description of the journal entry")

    reference = models.CharField(
        max_length=100,
        blank=True,
        default="",
        help_text="Human reference (asset code, period name, etc.)",
    )

    status = models.CharField(
        max_length=10,
        choices=JournalEntryStatus.choices,
        default=JournalEntryStatus.POSTED,
    )

    source_type = models.CharField(max_length=40, blank=True, default="")
    source_id = models.CharField(max_length=64, blank=True, default="")

    total_debit = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    total_credit = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-entry_date", "-created_at"]
        indexes = [
            models.Index(fields=["entry_date"], name="acct_entry_date_idx"),
            models.Index(fields=["source_type", "source_id"], name="acct_entry_source_idx"),
            models.Index(fields=["status"], name="acct_entry_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(total_debit=F("total_credit")),
                name="chk_journal_entry_balanced",
            ),
            models.CheckConstraint(
                condition=~Q(entry_number=""),
                name="chk_journal_entry_number_not_blank",
            ),
        ]
        verbose_name = "Journal Entry"
        verbose_name_plural = "Journal Entries"

    def __str__(self):
        return f"{self.entry_number} – {self.entry_date}"

    @property
    def is_posted(self) -> bool:
        return self.status == JournalEntryStatus.POSTED

    def clean(self):
        self.entry_number = (self.entry_number or "").strip()
        if not self.entry_number:
            raise ValidationError("Journal entry number is required")

        self.description = (self.description or "").strip()
        if not self.description:
            raise ValidationError("Journal entry description is required")

        if self.total_debit != self.total_credit:
            raise ValidationError(
                f"Journal entry not balanced: debits={self.total_debit} credits={self.total_credit}"
            )

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValidationError("JournalEntry records are immutable once created")

        # entry_number uniqueness is left to the DB index (posting engine relies on it)
        self.full_clean(validate_unique=False)
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("JournalEntry records are immutable and cannot be deleted")
