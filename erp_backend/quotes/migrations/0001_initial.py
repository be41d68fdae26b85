"""
======================================================
PATH: quotes/migrations/0001_initial.py
======================================================
MIGRATION: SALES QUOTES
"""

from __future__ import annotations

from decimal import Decimal

from django.db import migrations, models
import django.utils.timezone


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Quote",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("number", models.CharField(max_length=40, unique=True)),
                ("customer_name", models.CharField(max_length=200)),
                ("issue_date", models.DateField(default=django.utils.timezone.localdate)),
                ("valid_until", models.DateField()),
                ("currency", models.CharField(default="DOP", max_length=3)),
                ("subtotal", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("tax", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("total", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("notes", models.TextField(blank=True, default="")),
                (
                    "status",
                    models.CharField(
                        max_length=14,
                        choices=[
                            ("pending", "Pendiente"),
                            ("under_review", "En Revisión"),
                            ("approved", "Aprobada"),
                            ("rejected", "Rechazada"),
                            ("expired", "Vencida"),
                            ("converted", "Facturada"),
                        ],
                        default="pending",
                    ),
                ),
                ("invoice_number", models.CharField(blank=True, max_length=40, null=True, unique=True)),
                ("converted_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-issue_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["status", "valid_until"], name="quotes_status_valid_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("valid_until__gte", models.F("issue_date"))),
                        name="quote_valid_until_after_issue",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("total__gte", Decimal("0.00"))),
                        name="quote_total_nonnegative",
                    ),
                ],
            },
        ),
    ]
