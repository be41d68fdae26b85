# assets/models.py

"""
FIXED ASSET MODELS

- AssetCategory: depreciation defaults + the account codes postings use
- FixedAsset: carrying value, accumulated depreciation
- DepreciationRecord: one per (asset, period)
- RevaluationRecord: approval-gated value change

Assets are only mutated by the depreciation / revaluation services.
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from accounting.models.journal import JournalEntry

TWOPLACES = Decimal("0.01")


class DepreciationMethod(models.TextChoices):
    STRAIGHT_LINE = "straight_line", "Línea Recta"


class AssetCategory(models.Model):
    """
    Asset type. Account codes are resolved through the account directory
    at posting time (semantic keys or literal codes both work).
    """

    name = models.CharField(max_length=120, unique=True)
    description = models.TextField(blank=True, default="")

    default_useful_life_months = models.PositiveIntegerField(default=60)
    depreciation_method = models.CharField(
        max_length=20,
        choices=DepreciationMethod.choices,
        default=DepreciationMethod.STRAIGHT_LINE,
    )

    asset_account_code = models.CharField(max_length=64)
    depreciation_expense_account_code = models.CharField(max_length=64)
    accumulated_depreciation_account_code = models.CharField(max_length=64)
    # optional: approval fails with a configuration error when needed but blank
    revaluation_gain_account_code = models.CharField(max_length=64, blank=True, default="")
    revaluation_loss_account_code = models.CharField(max_length=64, blank=True, default="")

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "Asset categories"

    def __str__(self):
        return self.name

    def clean(self):
        self.name = (self.name or "").strip()
        for field in (
            "asset_account_code",
            "depreciation_expense_account_code",
            "accumulated_depreciation_account_code",
            "revaluation_gain_account_code",
            "revaluation_loss_account_code",
        ):
            setattr(self, field, (getattr(self, field) or "").strip())

        if not self.default_useful_life_months:
            raise ValidationError({"default_useful_life_months": "Useful life must be > 0"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)


class FixedAsset(models.Model):
    code = models.CharField(max_length=40, unique=True)
    name = models.CharField(max_length=200)

    category = models.ForeignKey(
        AssetCategory,
        on_delete=models.PROTECT,
        related_name="assets",
    )

    location = models.CharField(max_length=120, blank=True, default="")

    acquisition_date = models.DateField(default=timezone.localdate)
    acquisition_cost = models.DecimalField(max_digits=14, decimal_places=2)
    salvage_value = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    useful_life_months = models.PositiveIntegerField()
    depreciation_method = models.CharField(
        max_length=20,
        choices=DepreciationMethod.choices,
        default=DepreciationMethod.STRAIGHT_LINE,
    )

    # current_value: acquisition cost minus depreciation, or the latest approved revaluation
    current_value = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    accumulated_depreciation = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["code"]
        indexes = [
            models.Index(fields=["category", "is_active"], name="assets_asset_cat_active_idx"),
            models.Index(fields=["acquisition_date"], name="assets_asset_acquired_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(acquisition_cost__gt=Decimal("0.00")),
                name="fixed_asset_cost_gt_zero",
            ),
            models.CheckConstraint(
                condition=models.Q(salvage_value__gte=Decimal("0.00")),
                name="fixed_asset_salvage_nonnegative",
            ),
            models.CheckConstraint(
                condition=models.Q(accumulated_depreciation__gte=Decimal("0.00")),
                name="fixed_asset_accumulated_nonnegative",
            ),
        ]

    def __str__(self):
        return f"{self.code} – {self.name}"

    @property
    def depreciable_base(self) -> Decimal:
        return (self.acquisition_cost - self.salvage_value).quantize(TWOPLACES)

    @property
    def remaining_depreciable(self) -> Decimal:
        return (self.depreciable_base - self.accumulated_depreciation).quantize(TWOPLACES)

    def clean(self):
        self.code = (self.code or "").strip()
        self.name = (self.name or "").strip()
        if not self.code:
            raise ValidationError({"code": "code is required"})

        if self.acquisition_cost is None or self.acquisition_cost <= 0:
            raise ValidationError({"acquisition_cost": "Acquisition cost must be > 0"})
        if self.salvage_value is None or self.salvage_value < 0:
            raise ValidationError({"salvage_value": "Salvage value cannot be negative"})
        if self.salvage_value > self.acquisition_cost:
            raise ValidationError({"salvage_value": "Salvage value cannot exceed acquisition cost"})
        if not self.useful_life_months:
            raise ValidationError({"useful_life_months": "Useful life must be > 0"})

        accumulated = self.accumulated_depreciation or Decimal("0.00")
        if accumulated < 0 or accumulated > self.depreciable_base:
            raise ValidationError(
                {"accumulated_depreciation": "Accumulated depreciation must stay within 0 and cost − salvage"}
            )

        if self.current_value is None:
            self.current_value = (self.acquisition_cost - accumulated).quantize(TWOPLACES)
        if self.current_value < 0:
            raise ValidationError({"current_value": "Current value cannot be negative"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        if self.pk and self.depreciation_records.exists():
            raise ValidationError("Assets with depreciation records cannot be deleted")
        return super().delete(*args, **kwargs)


class DepreciationStatus(models.TextChoices):
    CALCULATED = "Calculado", "Calculado"
    REVERSED = "Reversado", "Reversado"


class DepreciationRecord(models.Model):
    asset = models.ForeignKey(
        FixedAsset,
        on_delete=models.PROTECT,
        related_name="depreciation_records",
    )

    period = models.CharField(max_length=7, help_text="YYYY-MM")
    depreciation_date = models.DateField()

    monthly_amount = models.DecimalField(max_digits=14, decimal_places=2)
    accumulated_depreciation = models.DecimalField(max_digits=14, decimal_places=2)
    remaining_value = models.DecimalField(max_digits=14, decimal_places=2)

    status = models.CharField(
        max_length=12,
        choices=DepreciationStatus.choices,
        default=DepreciationStatus.CALCULATED,
    )

    journal_entry = models.ForeignKey(
        JournalEntry,
        on_delete=models.PROTECT,
        related_name="depreciation_records",
        null=True,
        blank=True,
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-period", "asset_id"]
        constraints = [
            models.UniqueConstraint(fields=["asset", "period"], name="uniq_depreciation_asset_period"),
            models.CheckConstraint(
                condition=models.Q(monthly_amount__gt=Decimal("0.00")),
                name="depreciation_amount_gt_zero",
            ),
        ]
        indexes = [
            models.Index(fields=["period", "status"], name="assets_dep_period_status_idx"),
        ]

    def __str__(self):
        return f"{self.asset.code} {self.period} {self.monthly_amount}"


class RevaluationStatus(models.TextChoices):
    PENDING = "Pendiente", "Pendiente"
    IN_REVIEW = "En Revisión", "En Revisión"
    APPROVED = "Aprobado", "Aprobado"
    REJECTED = "Rechazado", "Rechazado"


class RevaluationRecord(models.Model):
    asset = models.ForeignKey(
        FixedAsset,
        on_delete=models.PROTECT,
        related_name="revaluations",
    )

    revaluation_date = models.DateField(default=timezone.localdate)
    previous_value = models.DecimalField(max_digits=14, decimal_places=2)
    new_value = models.DecimalField(max_digits=14, decimal_places=2)
    delta = models.DecimalField(max_digits=14, decimal_places=2)

    reason = models.CharField(max_length=120)
    method = models.CharField(max_length=120)
    appraiser = models.CharField(max_length=120, blank=True, default="")
    notes = models.TextField(blank=True, default="")

    status = models.CharField(
        max_length=12,
        choices=RevaluationStatus.choices,
        default=RevaluationStatus.PENDING,
    )

    approved_by = models.CharField(max_length=150, blank=True, default="")
    approved_at = models.DateTimeField(null=True, blank=True)

    journal_entry = models.ForeignKey(
        JournalEntry,
        on_delete=models.PROTECT,
        related_name="revaluation_records",
        null=True,
        blank=True,
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-revaluation_date", "-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(new_value__gte=Decimal("0.00")),
                name="revaluation_new_value_nonnegative",
            ),
        ]

    def __str__(self):
        return f"{self.asset.code} {self.previous_value} → {self.new_value} ({self.status})"

    def clean(self):
        if self.new_value is not None and self.previous_value is not None:
            self.delta = (self.new_value - self.previous_value).quantize(TWOPLACES)

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
