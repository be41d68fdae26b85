# accounting/models/journal_line.py

"""
JOURNAL LINE MODEL

One debit OR credit movement against a single account.

Guarantees:
- Immutable once created (no updates, no deletes)
- Exactly one of debit / credit is non-zero, neither is negative
- line_number is unique within its entry (ordering of the entry)
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from accounting.models.account import Account
from accounting.models.journal import JournalEntry


class JournalLine(models.Model):
    entry = models.ForeignKey(
        JournalEntry,
        on_delete=models.PROTECT,
        related_name="lines",
    )

    line_number = models.PositiveIntegerField()

    account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="journal_lines",
    )

    description = models.CharField(max_length=255, blank=True, default="")

    debit = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    credit = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    class Meta:
        ordering = ["entry_id", "line_number"]
        verbose_name = "Journal Line"
        verbose_name_plural = "Journal Lines"
        indexes = [
            models.Index(fields=["account"], name="acct_line_account_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["entry", "line_number"],
                name="uniq_journal_line_number",
            ),
            models.CheckConstraint(
                condition=(
                    (Q(debit__gt=0) & Q(credit=0)) | (Q(debit=0) & Q(credit__gt=0))
                ),
                name="chk_journal_line_one_side",
            ),
        ]

    def __str__(self):
        side = f"Dr {self.debit}" if self.debit else f"Cr {self.credit}"
        return f"{side} → {self.account}"

    def clean(self):
        debit = self.debit or Decimal("0.00")
        credit = self.credit or Decimal("0.00")

        if debit < 0 or credit < 0:
            raise ValidationError("Debit or credit cannot be negative")
        if (debit > 0) == (credit > 0):
            raise ValidationError("A journal line must have exactly one of debit or credit")

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValidationError("JournalLine records are immutable and cannot be modified")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("JournalLine records are immutable and cannot be deleted")
