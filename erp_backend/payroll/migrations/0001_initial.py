"""
======================================================
PATH: payroll/migrations/0001_initial.py
======================================================
MIGRATION: PAYROLL

Creates departments, employees, tax configuration, payroll periods and
entries (one per employee and period), deductions and bonuses.
"""

from __future__ import annotations

from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone

DEDUCTION_CATEGORIES = [
    ("prestamo", "Préstamo"),
    ("pension_alimenticia", "Pensión Alimenticia"),
    ("seguro", "Seguro"),
    ("sindicato", "Sindicato"),
    ("cooperativa", "Cooperativa"),
    ("otro", "Otro"),
]


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("accounting", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Department",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=120, unique=True)),
                ("budget", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Employee",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=30, unique=True)),
                ("first_name", models.CharField(max_length=80)),
                ("last_name", models.CharField(max_length=80)),
                ("salary", models.DecimalField(decimal_places=2, max_digits=14)),
                (
                    "status",
                    models.CharField(
                        max_length=10,
                        choices=[("active", "Activo"), ("inactive", "Inactivo")],
                        default="active",
                    ),
                ),
                ("hire_date", models.DateField(default=django.utils.timezone.localdate)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "department",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="employees",
                        to="payroll.department",
                    ),
                ),
            ],
            options={
                "ordering": ["code"],
                "indexes": [
                    models.Index(fields=["status", "department"], name="payroll_emp_status_dept_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("salary__gte", Decimal("0.00"))),
                        name="employee_salary_nonnegative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="TaxConfiguration",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(default="TSS", max_length=80)),
                ("sfs_employee", models.DecimalField(decimal_places=2, default=Decimal("3.04"), max_digits=6)),
                ("afp_employee", models.DecimalField(decimal_places=2, default=Decimal("2.87"), max_digits=6)),
                ("max_salary_tss", models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="PayrollPeriod",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=80, unique=True)),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                ("pay_date", models.DateField(blank=True, null=True)),
                (
                    "status",
                    models.CharField(
                        max_length=12,
                        choices=[
                            ("open", "Abierto"),
                            ("processing", "Procesando"),
                            ("closed", "Cerrado"),
                            ("paid", "Pagado"),
                        ],
                        default="open",
                    ),
                ),
                ("total_gross", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("total_deductions", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("total_net", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("employee_count", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "journal_entry",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payroll_periods",
                        to="accounting.journalentry",
                    ),
                ),
            ],
            options={
                "ordering": ["-start_date"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("end_date__gte", models.F("start_date"))),
                        name="payroll_period_dates_ordered",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="PayrollEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("base_salary", models.DecimalField(decimal_places=2, max_digits=14)),
                ("bonuses", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("gross_salary", models.DecimalField(decimal_places=2, max_digits=14)),
                ("taxable_base", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("employee_rate", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=6)),
                (
                    "statutory_deductions",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14),
                ),
                ("other_deductions", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("deductions", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("net_salary", models.DecimalField(decimal_places=2, max_digits=14)),
                (
                    "status",
                    models.CharField(
                        max_length=12,
                        choices=[("calculated", "Calculado"), ("approved", "Aprobado")],
                        default="calculated",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "employee",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payroll_entries",
                        to="payroll.employee",
                    ),
                ),
                (
                    "period",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="entries",
                        to="payroll.payrollperiod",
                    ),
                ),
            ],
            options={
                "ordering": ["period_id", "employee__code"],
                "verbose_name_plural": "Payroll entries",
                "constraints": [
                    models.UniqueConstraint(fields=("employee", "period"), name="uniq_payroll_entry_employee_period"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PeriodicDeduction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=120)),
                ("category", models.CharField(choices=DEDUCTION_CATEGORIES, default="otro", max_length=24)),
                (
                    "deduction_type",
                    models.CharField(
                        choices=[("fijo", "Monto Fijo"), ("porcentaje", "Porcentaje")],
                        default="fijo",
                        max_length=12,
                    ),
                ),
                ("amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("percentage", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=6)),
                ("start_date", models.DateField()),
                ("end_date", models.DateField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
                (
                    "employee",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="periodic_deductions",
                        to="payroll.employee",
                    ),
                ),
            ],
            options={
                "ordering": ["employee_id", "start_date"],
            },
        ),
        migrations.CreateModel(
            name="OneTimeDeduction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("description", models.CharField(blank=True, default="", max_length=200)),
                ("category", models.CharField(choices=DEDUCTION_CATEGORIES, default="otro", max_length=24)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14)),
                ("deduction_date", models.DateField()),
                (
                    "status",
                    models.CharField(
                        choices=[("pendiente", "Pendiente"), ("aplicada", "Aplicada"), ("cancelada", "Cancelada")],
                        default="pendiente",
                        max_length=12,
                    ),
                ),
                (
                    "applied_period",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="applied_deductions",
                        to="payroll.payrollperiod",
                    ),
                ),
                (
                    "employee",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="one_time_deductions",
                        to="payroll.employee",
                    ),
                ),
            ],
            options={
                "ordering": ["deduction_date"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gt", Decimal("0.00"))),
                        name="one_time_deduction_amount_gt_zero",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Bonus",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=120)),
                (
                    "bonus_type",
                    models.CharField(
                        choices=[("fijo", "Monto Fijo"), ("porcentaje", "Porcentaje"), ("formula", "Fórmula")],
                        default="fijo",
                        max_length=12,
                    ),
                ),
                ("amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("percentage", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=6)),
                ("formula", models.CharField(blank=True, default="", max_length=200)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "employee",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bonuses",
                        to="payroll.employee",
                    ),
                ),
            ],
            options={
                "ordering": ["name"],
                "verbose_name_plural": "Bonuses",
            },
        ),
    ]
