"""
======================================================
PATH: assets/migrations/0001_initial.py
======================================================
MIGRATION: FIXED ASSETS

Creates asset categories, fixed assets, depreciation records
(one per asset and period) and revaluation records.
"""

from __future__ import annotations

from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("accounting", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="AssetCategory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=120, unique=True)),
                ("description", models.TextField(blank=True, default="")),
                ("default_useful_life_months", models.PositiveIntegerField(default=60)),
                (
                    "depreciation_method",
                    models.CharField(
                        max_length=20,
                        choices=[("straight_line", "Línea Recta")],
                        default="straight_line",
                    ),
                ),
                ("asset_account_code", models.CharField(max_length=64)),
                ("depreciation_expense_account_code", models.CharField(max_length=64)),
                ("accumulated_depreciation_account_code", models.CharField(max_length=64)),
                ("revaluation_gain_account_code", models.CharField(blank=True, default="", max_length=64)),
                ("revaluation_loss_account_code", models.CharField(blank=True, default="", max_length=64)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["name"],
                "verbose_name_plural": "Asset categories",
            },
        ),
        migrations.CreateModel(
            name="FixedAsset",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=40, unique=True)),
                ("name", models.CharField(max_length=200)),
                ("location", models.CharField(blank=True, default="", max_length=120)),
                ("acquisition_date", models.DateField(default=django.utils.timezone.localdate)),
                ("acquisition_cost", models.DecimalField(decimal_places=2, max_digits=14)),
                ("salvage_value", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("useful_life_months", models.PositiveIntegerField()),
                (
                    "depreciation_method",
                    models.CharField(
                        max_length=20,
                        choices=[("straight_line", "Línea Recta")],
                        default="straight_line",
                    ),
                ),
                ("current_value", models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                (
                    "accumulated_depreciation",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14),
                ),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "category",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="assets",
                        to="assets.assetcategory",
                    ),
                ),
            ],
            options={
                "ordering": ["code"],
                "indexes": [
                    models.Index(fields=["category", "is_active"], name="assets_asset_cat_active_idx"),
                    models.Index(fields=["acquisition_date"], name="assets_asset_acquired_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("acquisition_cost__gt", Decimal("0.00"))),
                        name="fixed_asset_cost_gt_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("salvage_value__gte", Decimal("0.00"))),
                        name="fixed_asset_salvage_nonnegative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("accumulated_depreciation__gte", Decimal("0.00"))),
                        name="fixed_asset_accumulated_nonnegative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="DepreciationRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("period", models.CharField(help_text="YYYY-MM", max_length=7)),
                ("depreciation_date", models.DateField()),
                ("monthly_amount", models.DecimalField(decimal_places=2, max_digits=14)),
                ("accumulated_depreciation", models.DecimalField(decimal_places=2, max_digits=14)),
                ("remaining_value", models.DecimalField(decimal_places=2, max_digits=14)),
                (
                    "status",
                    models.CharField(
                        max_length=12,
                        choices=[("Calculado", "Calculado"), ("Reversado", "Reversado")],
                        default="Calculado",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "asset",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="depreciation_records",
                        to="assets.fixedasset",
                    ),
                ),
                (
                    "journal_entry",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="depreciation_records",
                        to="accounting.journalentry",
                    ),
                ),
            ],
            options={
                "ordering": ["-period", "asset_id"],
                "indexes": [
                    models.Index(fields=["period", "status"], name="assets_dep_period_status_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("asset", "period"), name="uniq_depreciation_asset_period"),
                    models.CheckConstraint(
                        condition=models.Q(("monthly_amount__gt", Decimal("0.00"))),
                        name="depreciation_amount_gt_zero",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="RevaluationRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("revaluation_date", models.DateField(default=django.utils.timezone.localdate)),
                ("previous_value", models.DecimalField(decimal_places=2, max_digits=14)),
                ("new_value", models.DecimalField(decimal_places=2, max_digits=14)),
                ("delta", models.DecimalField(decimal_places=2, max_digits=14)),
                ("reason", models.CharField(max_length=120)),
                ("method", models.CharField(max_length=120)),
                ("appraiser", models.CharField(blank=True, default="", max_length=120)),
                ("notes", models.TextField(blank=True, default="")),
                (
                    "status",
                    models.CharField(
                        max_length=12,
                        choices=[
                            ("Pendiente", "Pendiente"),
                            ("En Revisión", "En Revisión"),
                            ("Aprobado", "Aprobado"),
                            ("Rechazado", "Rechazado"),
                        ],
                        default="Pendiente",
                    ),
                ),
                ("approved_by", models.CharField(blank=True, default="", max_length=150)),
                ("approved_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "asset",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="revaluations",
                        to="assets.fixedasset",
                    ),
                ),
                (
                    "journal_entry",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="revaluation_records",
                        to="accounting.journalentry",
                    ),
                ),
            ],
            options={
                "ordering": ["-revaluation_date", "-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("new_value__gte", Decimal("0.00"))),
                        name="revaluation_new_value_nonnegative",
                    ),
                ],
            },
        ),
    ]
