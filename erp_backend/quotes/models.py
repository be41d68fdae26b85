# quotes/models.py

"""
SALES QUOTE

Approval-gated document. A quote converts to an invoice at most once:
`converted` is terminal and carries the invoice number it produced.
Status only moves through quotes.services.quote_service.
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

ZERO = Decimal("0.00")


class QuoteStatus(models.TextChoices):
    PENDING = "pending", "Pendiente"
    UNDER_REVIEW = "under_review", "En Revisión"
    APPROVED = "approved", "Aprobada"
    REJECTED = "rejected", "Rechazada"
    EXPIRED = "expired", "Vencida"
    CONVERTED = "converted", "Facturada"


class Quote(models.Model):
    number = models.CharField(max_length=40, unique=True)
    customer_name = models.CharField(max_length=200)

    issue_date = models.DateField(default=timezone.localdate)
    valid_until = models.DateField()

    currency = models.CharField(max_length=3, default="DOP")
    subtotal = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
    tax = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
    total = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)

    notes = models.TextField(blank=True, default="")

    status = models.CharField(
        max_length=14,
        choices=QuoteStatus.choices,
        default=QuoteStatus.PENDING,
    )

    invoice_number = models.CharField(max_length=40, unique=True, null=True, blank=True)
    converted_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-issue_date", "-created_at"]
        indexes = [models.Index(fields=["status", "valid_until"], name="quotes_status_valid_idx")]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(valid_until__gte=models.F("issue_date")),
                name="quote_valid_until_after_issue",
            ),
            models.CheckConstraint(
                condition=models.Q(total__gte=ZERO),
                name="quote_total_nonnegative",
            ),
        ]

    def __str__(self):
        return f"{self.number} – {self.customer_name} ({self.status})"

    def clean(self):
        self.number = (self.number or "").strip()
        self.customer_name = (self.customer_name or "").strip()
        if not self.number:
            raise ValidationError({"number": "Quote number is required"})
        if not self.customer_name:
            raise ValidationError({"customer_name": "Customer is required"})

        if self.issue_date and self.valid_until and self.valid_until < self.issue_date:
            raise ValidationError({"valid_until": "Validity cannot end before the issue date"})

        if (self.subtotal or ZERO) < 0 or (self.tax or ZERO) < 0:
            raise ValidationError("Quote amounts cannot be negative")
        self.total = ((self.subtotal or ZERO) + (self.tax or ZERO)).quantize(Decimal("0.01"))

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
