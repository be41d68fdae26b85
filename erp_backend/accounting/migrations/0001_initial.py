"""
======================================================
PATH: accounting/migrations/0001_initial.py
======================================================
MIGRATION: LEDGER CORE

Creates chart of accounts, accounts, semantic mappings, journal entries
and journal lines (append-only).
"""

from __future__ import annotations

from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ChartOfAccounts",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, unique=True)),
                (
                    "code",
                    models.SlugField(
                        max_length=64,
                        unique=True,
                        help_text="Stable chart key used by resolvers/seeders. Do not change after go-live.",
                    ),
                ),
                ("is_active", models.BooleanField(db_index=True, default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Chart of Accounts",
                "verbose_name_plural": "Charts of Accounts",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Account",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=20)),
                ("name", models.CharField(max_length=150)),
                (
                    "account_type",
                    models.CharField(
                        max_length=20,
                        choices=[
                            ("asset", "Asset"),
                            ("liability", "Liability"),
                            ("equity", "Equity"),
                            ("income", "Income"),
                            ("expense", "Expense"),
                        ],
                    ),
                ),
                (
                    "normal_balance",
                    models.CharField(blank=True, max_length=6, choices=[("debit", "Debit"), ("credit", "Credit")]),
                ),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "chart",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="accounts",
                        to="accounting.chartofaccounts",
                    ),
                ),
            ],
            options={
                "verbose_name": "Account",
                "verbose_name_plural": "Accounts",
                "ordering": ["code"],
                "indexes": [
                    models.Index(fields=["chart", "code"], name="acct_account_chart_code_idx"),
                    models.Index(fields=["chart", "account_type"], name="acct_account_chart_type_idx"),
                    models.Index(fields=["is_active"], name="acct_account_active_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("chart", "code"), name="uniq_account_chart_code"),
                    models.CheckConstraint(condition=models.Q(("code", ""), _negated=True), name="chk_account_code_not_blank"),
                    models.CheckConstraint(condition=models.Q(("name", ""), _negated=True), name="chk_account_name_not_blank"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AccountMapping",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("key", models.CharField(max_length=64)),
                (
                    "account",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="mappings",
                        to="accounting.account",
                    ),
                ),
                (
                    "chart",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="mappings",
                        to="accounting.chartofaccounts",
                    ),
                ),
            ],
            options={
                "ordering": ["key"],
                "constraints": [
                    models.UniqueConstraint(fields=("chart", "key"), name="uniq_mapping_chart_key"),
                ],
            },
        ),
        migrations.CreateModel(
            name="JournalEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "entry_number",
                    models.CharField(
                        max_length=80,
                        unique=True,
                        help_text="Deterministic key derived from event type, source id and period",
                    ),
                ),
                ("entry_date", models.DateField(help_text="Accounting effective date")),
                ("description", models.TextField(help_text="Narrative description of the journal entry")),
                (
                    "reference",
                    models.CharField(
                        blank=True,
                        default="",
                        max_length=100,
                        help_text="Human reference (asset code, period name, etc.)",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        max_length=10,
                        choices=[("draft", "Draft"), ("posted", "Posted")],
                        default="posted",
                    ),
                ),
                ("source_type", models.CharField(blank=True, default="", max_length=40)),
                ("source_id", models.CharField(blank=True, default="", max_length=64)),
                ("total_debit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("total_credit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name": "Journal Entry",
                "verbose_name_plural": "Journal Entries",
                "ordering": ["-entry_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["entry_date"], name="acct_entry_date_idx"),
                    models.Index(fields=["source_type", "source_id"], name="acct_entry_source_idx"),
                    models.Index(fields=["status"], name="acct_entry_status_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("total_debit", models.F("total_credit"))),
                        name="chk_journal_entry_balanced",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("entry_number", ""), _negated=True),
                        name="chk_journal_entry_number_not_blank",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="JournalLine",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("line_number", models.PositiveIntegerField()),
                ("description", models.CharField(blank=True, default="", max_length=255)),
                ("debit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("credit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                (
                    "account",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="journal_lines",
                        to="accounting.account",
                    ),
                ),
                (
                    "entry",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="lines",
                        to="accounting.journalentry",
                    ),
                ),
            ],
            options={
                "verbose_name": "Journal Line",
                "verbose_name_plural": "Journal Lines",
                "ordering": ["entry_id", "line_number"],
                "indexes": [
                    models.Index(fields=["account"], name="acct_line_account_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("entry", "line_number"), name="uniq_journal_line_number"),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("debit__gt", 0), ("credit", 0)),
                            models.Q(("debit", 0), ("credit__gt", 0)),
                            _connector="OR",
                        ),
                        name="chk_journal_line_one_side",
                    ),
                ],
            },
        ),
    ]
