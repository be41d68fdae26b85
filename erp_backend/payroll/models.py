# payroll/models.py

"""
PAYROLL MODELS

- Department / Employee: the headcount the engine reads (budget ceilings)
- TaxConfiguration: statutory employee rates (percent) and the TSS cap
- PayrollPeriod: open -> processing -> closed -> paid
- PayrollEntry: one per (employee, period), frozen once the period closes
- PeriodicDeduction / OneTimeDeduction / Bonus: consumed by the engine

Balances and statuses move only through payroll.services.
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from accounting.models.journal import JournalEntry

ZERO = Decimal("0.00")


class Department(models.Model):
    name = models.CharField(max_length=120, unique=True)
    # 0 means "no ceiling"
    budget = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name

    def clean(self):
        self.name = (self.name or "").strip()
        if self.budget is not None and self.budget < 0:
            raise ValidationError({"budget": "Budget cannot be negative"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)


class EmployeeStatus(models.TextChoices):
    ACTIVE = "active", "Activo"
    INACTIVE = "inactive", "Inactivo"


class Employee(models.Model):
    code = models.CharField(max_length=30, unique=True)
    first_name = models.CharField(max_length=80)
    last_name = models.CharField(max_length=80)

    department = models.ForeignKey(
        Department,
        on_delete=models.SET_NULL,
        related_name="employees",
        null=True,
        blank=True,
    )

    salary = models.DecimalField(max_digits=14, decimal_places=2)
    status = models.CharField(
        max_length=10,
        choices=EmployeeStatus.choices,
        default=EmployeeStatus.ACTIVE,
    )
    hire_date = models.DateField(default=timezone.localdate)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["code"]
        indexes = [models.Index(fields=["status", "department"], name="payroll_emp_status_dept_idx")]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(salary__gte=ZERO),
                name="employee_salary_nonnegative",
            ),
        ]

    def __str__(self):
        return f"{self.code} – {self.full_name}"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class TaxConfiguration(models.Model):
    """
    Employee-side statutory rates in percent (SFS + AFP).
    max_salary_tss caps the taxable base when > 0.
    """

    name = models.CharField(max_length=80, default="TSS")
    sfs_employee = models.DecimalField(max_digits=6, decimal_places=2, default=Decimal("3.04"))
    afp_employee = models.DecimalField(max_digits=6, decimal_places=2, default=Decimal("2.87"))
    max_salary_tss = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.name} ({self.sfs_employee}% + {self.afp_employee}%)"

    def clean(self):
        for field in ("sfs_employee", "afp_employee"):
            value = getattr(self, field)
            if value is None or value < 0 or value > 100:
                raise ValidationError({field: "Rate must be a percent between 0 and 100"})
        if self.max_salary_tss is not None and self.max_salary_tss < 0:
            raise ValidationError({"max_salary_tss": "Cap cannot be negative"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)


class PayrollPeriodStatus(models.TextChoices):
    OPEN = "open", "Abierto"
    PROCESSING = "processing", "Procesando"
    CLOSED = "closed", "Cerrado"
    PAID = "paid", "Pagado"


class PayrollPeriod(models.Model):
    name = models.CharField(max_length=80, unique=True)
    start_date = models.DateField()
    end_date = models.DateField()
    pay_date = models.DateField(null=True, blank=True)

    status = models.CharField(
        max_length=12,
        choices=PayrollPeriodStatus.choices,
        default=PayrollPeriodStatus.OPEN,
    )

    total_gross = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
    total_deductions = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
    total_net = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
    employee_count = models.PositiveIntegerField(default=0)

    journal_entry = models.ForeignKey(
        JournalEntry,
        on_delete=models.PROTECT,
        related_name="payroll_periods",
        null=True,
        blank=True,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-start_date"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gte=models.F("start_date")),
                name="payroll_period_dates_ordered",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.status})"

    @property
    def is_locked(self) -> bool:
        return self.status in (PayrollPeriodStatus.CLOSED, PayrollPeriodStatus.PAID)

    def clean(self):
        self.name = (self.name or "").strip()
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError({"end_date": "End date cannot precede start date"})


class PayrollEntryStatus(models.TextChoices):
    CALCULATED = "calculated", "Calculado"
    APPROVED = "approved", "Aprobado"


class PayrollEntry(models.Model):
    employee = models.ForeignKey(Employee, on_delete=models.PROTECT, related_name="payroll_entries")
    period = models.ForeignKey(PayrollPeriod, on_delete=models.PROTECT, related_name="entries")

    base_salary = models.DecimalField(max_digits=14, decimal_places=2)
    bonuses = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
    gross_salary = models.DecimalField(max_digits=14, decimal_places=2)

    taxable_base = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
    employee_rate = models.DecimalField(max_digits=6, decimal_places=2, default=ZERO)
    statutory_deductions = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
    other_deductions = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
    deductions = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
    net_salary = models.DecimalField(max_digits=14, decimal_places=2)

    status = models.CharField(
        max_length=12,
        choices=PayrollEntryStatus.choices,
        default=PayrollEntryStatus.CALCULATED,
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["period_id", "employee__code"]
        constraints = [
            models.UniqueConstraint(fields=["employee", "period"], name="uniq_payroll_entry_employee_period"),
        ]
        verbose_name_plural = "Payroll entries"

    def __str__(self):
        return f"{self.employee.code} {self.period.name} {self.net_salary}"

    def save(self, *args, **kwargs):
        if PayrollPeriod.objects.filter(pk=self.period_id).exclude(
            status__in=[PayrollPeriodStatus.OPEN, PayrollPeriodStatus.PROCESSING]
        ).exists():
            raise ValidationError("Payroll entries of a closed period cannot be changed")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        if self.period.is_locked:
            raise ValidationError("Payroll entries of a closed period cannot be deleted")
        return super().delete(*args, **kwargs)


class DeductionCategory(models.TextChoices):
    LOAN = "prestamo", "Préstamo"
    ALIMONY = "pension_alimenticia", "Pensión Alimenticia"
    INSURANCE = "seguro", "Seguro"
    UNION = "sindicato", "Sindicato"
    COOPERATIVE = "cooperativa", "Cooperativa"
    OTHER = "otro", "Otro"


class DeductionType(models.TextChoices):
    FIXED = "fijo", "Monto Fijo"
    PERCENTAGE = "porcentaje", "Porcentaje"


class PeriodicDeduction(models.Model):
    """
    Recurring deduction applied to every period overlapping
    [start_date, end_date] (open-ended when end_date is empty).
    Percentages are taken over the employee's base salary.
    """

    employee = models.ForeignKey(Employee, on_delete=models.CASCADE, related_name="periodic_deductions")
    name = models.CharField(max_length=120)
    category = models.CharField(max_length=24, choices=DeductionCategory.choices, default=DeductionCategory.OTHER)
    deduction_type = models.CharField(max_length=12, choices=DeductionType.choices, default=DeductionType.FIXED)
    amount = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
    percentage = models.DecimalField(max_digits=6, decimal_places=2, default=ZERO)
    start_date = models.DateField()
    end_date = models.DateField(null=True, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["employee_id", "start_date"]

    def __str__(self):
        return f"{self.employee.code} {self.name}"

    def clean(self):
        if self.amount is not None and self.amount < 0:
            raise ValidationError({"amount": "Amount cannot be negative"})
        if self.percentage is not None and not (0 <= self.percentage <= 100):
            raise ValidationError({"percentage": "Percentage must be between 0 and 100"})
        if self.end_date and self.start_date and self.end_date < self.start_date:
            raise ValidationError({"end_date": "End date cannot precede start date"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)


class OneTimeDeductionStatus(models.TextChoices):
    PENDING = "pendiente", "Pendiente"
    APPLIED = "aplicada", "Aplicada"
    CANCELLED = "cancelada", "Cancelada"


class OneTimeDeduction(models.Model):
    employee = models.ForeignKey(Employee, on_delete=models.CASCADE, related_name="one_time_deductions")
    description = models.CharField(max_length=200, blank=True, default="")
    category = models.CharField(max_length=24, choices=DeductionCategory.choices, default=DeductionCategory.OTHER)
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    deduction_date = models.DateField()
    status = models.CharField(
        max_length=12,
        choices=OneTimeDeductionStatus.choices,
        default=OneTimeDeductionStatus.PENDING,
    )
    applied_period = models.ForeignKey(
        PayrollPeriod,
        on_delete=models.SET_NULL,
        related_name="applied_deductions",
        null=True,
        blank=True,
    )

    class Meta:
        ordering = ["deduction_date"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=ZERO),
                name="one_time_deduction_amount_gt_zero",
            ),
        ]

    def __str__(self):
        return f"{self.employee.code} {self.amount} ({self.status})"


class BonusType(models.TextChoices):
    FIXED = "fijo", "Monto Fijo"
    PERCENTAGE = "porcentaje", "Porcentaje"
    FORMULA = "formula", "Fórmula"


class Bonus(models.Model):
    """
    Applies to one employee, or to every employee of the run when
    employee is empty. Formulas use the single variable `salario_base`.
    """

    name = models.CharField(max_length=120)
    employee = models.ForeignKey(
        Employee,
        on_delete=models.CASCADE,
        related_name="bonuses",
        null=True,
        blank=True,
    )
    bonus_type = models.CharField(max_length=12, choices=BonusType.choices, default=BonusType.FIXED)
    amount = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
    percentage = models.DecimalField(max_digits=6, decimal_places=2, default=ZERO)
    formula = models.CharField(max_length=200, blank=True, default="")
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "Bonuses"

    def __str__(self):
        return self.name

    def clean(self):
        if self.bonus_type == BonusType.FORMULA and not (self.formula or "").strip():
            raise ValidationError({"formula": "Formula bonuses need an expression"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
