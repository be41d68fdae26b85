# accounting/models/account.py

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from accounting.models.chart import ChartOfAccounts


class Account(models.Model):
    """
    Represents a single account within a Chart of Accounts.

    Guarantees:
    - Account codes are unique per chart
    - Code + name are normalized (trimmed)
    - Normal balance side defaults from the account type
    - Code / type / normal balance are frozen once a journal line references the account
    """

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    INCOME = "income"
    EXPENSE = "expense"

    ACCOUNT_TYPES = [
        (ASSET, "Asset"),
        (LIABILITY, "Liability"),
        (EQUITY, "Equity"),
        (INCOME, "Income"),
        (EXPENSE, "Expense"),
    ]

    DEBIT = "debit"
    CREDIT = "credit"

    BALANCE_SIDES = [
        (DEBIT, "Debit"),
        (CREDIT, "Credit"),
    ]

    # assets/expenses increase on debit; liabilities/equity/income on credit
    DEFAULT_NORMAL_BALANCE = {
        ASSET: DEBIT,
        EXPENSE: DEBIT,
        LIABILITY: CREDIT,
        EQUITY: CREDIT,
        INCOME: CREDIT,
    }

    _FROZEN_FIELDS = ("chart_id", "code", "account_type", "normal_balance")

    chart = models.ForeignKey(
        ChartOfAccounts,
        on_delete=models.PROTECT,
        related_name="accounts",
    )

    code = models.CharField(max_length=20)
    name = models.CharField(max_length=150)

    account_type = models.CharField(
        max_length=20,
        choices=ACCOUNT_TYPES,
    )

    normal_balance = models.CharField(
        max_length=6,
        choices=BALANCE_SIDES,
        blank=True,
    )

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["code"]
        verbose_name = "Account"
        verbose_name_plural = "Accounts"
        indexes = [
            models.Index(fields=["chart", "code"], name="acct_account_chart_code_idx"),
            models.Index(fields=["chart", "account_type"], name="acct_account_chart_type_idx"),
            models.Index(fields=["is_active"], name="acct_account_active_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["chart", "code"],
                name="uniq_account_chart_code",
            ),
            models.CheckConstraint(
                condition=~Q(code=""),
                name="chk_account_code_not_blank",
            ),
            models.CheckConstraint(
                condition=~Q(name=""),
                name="chk_account_name_not_blank",
            ),
        ]

    def __str__(self):
        return f"{self.code} – {self.name}"

    @property
    def is_debit_normal(self) -> bool:
        return self.normal_balance == self.DEBIT

    def clean(self):
        self.code = (self.code or "").strip()
        self.name = (self.name or "").strip()

        if not self.code:
            raise ValidationError("Account code is required")
        if not self.name:
            raise ValidationError("Account name is required")

        if not self.normal_balance:
            self.normal_balance = self.DEFAULT_NORMAL_BALANCE.get(self.account_type, "")

    def _assert_not_frozen(self):
        if not self.pk:
            return

        previous = type(self).objects.filter(pk=self.pk).first()
        if previous is None:
            return

        changed = [f for f in self._FROZEN_FIELDS if getattr(previous, f) != getattr(self, f)]
        if changed and self.journal_lines.exists():
            raise ValidationError(
                f"Account {previous.code} is referenced by posted journal lines; "
                f"cannot change {', '.join(changed)}."
            )

    def save(self, *args, **kwargs):
        self.full_clean()
        self._assert_not_frozen()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        if self.pk and self.journal_lines.exists():
            raise ValidationError("Accounts referenced by journal lines cannot be deleted")
        return super().delete(*args, **kwargs)
