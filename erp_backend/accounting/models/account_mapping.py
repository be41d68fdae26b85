# accounting/models/account_mapping.py

"""
SEMANTIC ACCOUNT MAPPING

(chart, key) -> account, e.g. SALARIES_EXPENSE -> 6210 in the active chart.
Lets services ask for an account by purpose instead of by code.
"""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models

from accounting.models.account import Account
from accounting.models.chart import ChartOfAccounts


class AccountMapping(models.Model):
    chart = models.ForeignKey(
        ChartOfAccounts,
        on_delete=models.CASCADE,
        related_name="mappings",
    )
    key = models.CharField(max_length=64)
    account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="mappings",
    )

    class Meta:
        ordering = ["key"]
        constraints = [
            models.UniqueConstraint(fields=["chart", "key"], name="uniq_mapping_chart_key"),
        ]

    def __str__(self):
        return f"{self.key} → {self.account.code}"

    def clean(self):
        self.key = (self.key or "").strip().upper()
        if not self.key:
            raise ValidationError({"key": "key is required"})
        if self.account_id and self.chart_id and self.account.chart_id != self.chart_id:
            raise ValidationError("Mapped account must belong to the same chart")

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

        from accounting.services.account_resolver import clear_active_chart_cache

        clear_active_chart_cache()
