# quotes/tests/test_quote_lifecycle.py

from __future__ import annotations

from datetime import date
from decimal import Decimal
from io import StringIO

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Permission
from django.core.management import call_command
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from accounting.models.journal import JournalEntry
from accounting.services.exceptions import ConflictError, InvalidTransitionError
from quotes.models import Quote, QuoteStatus
from quotes.services import quote_service

User = get_user_model()


def create_quote(number="COT-0001", **extra) -> Quote:
    return Quote.objects.create(
        number=number,
        customer_name=extra.pop("customer_name", "Farmacia Central"),
        issue_date=extra.pop("issue_date", date(2024, 3, 1)),
        valid_until=extra.pop("valid_until", date(2024, 3, 31)),
        subtotal=extra.pop("subtotal", Decimal("1000.00")),
        tax=extra.pop("tax", Decimal("180.00")),
        **extra,
    )


class QuoteLifecycleTests(TestCase):
    def test_total_is_derived(self):
        quote = create_quote()
        self.assertEqual(quote.total, Decimal("1180.00"))
        self.assertEqual(quote.status, QuoteStatus.PENDING)

    def test_review_then_approve(self):
        quote = quote_service.submit_for_review(create_quote())
        quote = quote_service.approve(quote)
        self.assertEqual(quote.status, QuoteStatus.APPROVED)

    def test_convert_requires_approval(self):
        quote = create_quote()
        with self.assertRaises(InvalidTransitionError):
            quote_service.convert_to_invoice(quote)

        quote.refresh_from_db()
        self.assertEqual(quote.status, QuoteStatus.PENDING)
        self.assertIsNone(quote.invoice_number)

    def test_convert_once(self):
        quote = quote_service.approve(create_quote())

        converted = quote_service.convert_to_invoice(quote)

        self.assertEqual(converted.status, QuoteStatus.CONVERTED)
        self.assertEqual(converted.invoice_number, "FAC-COT-0001")
        self.assertIsNotNone(converted.converted_at)
        with self.assertRaises(InvalidTransitionError):
            quote_service.convert_to_invoice(converted, invoice_number="B0200000002")
        converted.refresh_from_db()
        self.assertEqual(converted.invoice_number, "FAC-COT-0001")

    def test_invoice_numbers_are_unique(self):
        first = quote_service.approve(create_quote("COT-0001"))
        second = quote_service.approve(create_quote("COT-0002"))
        quote_service.convert_to_invoice(first, invoice_number="B0200000001")

        with self.assertRaises(ConflictError):
            quote_service.convert_to_invoice(second, invoice_number="B0200000001")

        second.refresh_from_db()
        self.assertEqual(second.status, QuoteStatus.APPROVED)

    def test_terminal_states(self):
        rejected = quote_service.reject(create_quote("COT-0001"))
        expired = quote_service.expire(create_quote("COT-0002"))

        for quote in (rejected, expired):
            for action in (quote_service.approve, quote_service.submit_for_review, quote_service.reject):
                with self.assertRaises(InvalidTransitionError):
                    action(quote)

    def test_quote_transitions_never_post(self):
        quote = quote_service.approve(create_quote())
        quote_service.convert_to_invoice(quote)
        self.assertFalse(JournalEntry.objects.exists())

    def test_expire_stale_only_touches_open_quotes(self):
        stale = create_quote("COT-0001", valid_until=date(2024, 3, 10))
        approved = quote_service.approve(create_quote("COT-0002", valid_until=date(2024, 3, 10)))
        fresh = create_quote("COT-0003", valid_until=date(2024, 4, 30))
        rejected = quote_service.reject(create_quote("COT-0004", valid_until=date(2024, 3, 10)))

        call_command("expire_quotes", "--as-of", "2024-03-15", stdout=StringIO())

        for quote, expected in (
            (stale, QuoteStatus.EXPIRED),
            (approved, QuoteStatus.EXPIRED),
            (fresh, QuoteStatus.PENDING),
            (rejected, QuoteStatus.REJECTED),
        ):
            quote.refresh_from_db()
            self.assertEqual(quote.status, expected)


class QuoteApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="ventas", password="pass")
        self.client.force_authenticate(self.user)
        self.quote = create_quote()

    def _grant(self, *codenames):
        perms = Permission.objects.filter(content_type__app_label="quotes", codename__in=codenames)
        self.user.user_permissions.add(*perms)
        self.user = User.objects.get(pk=self.user.pk)
        self.client.force_authenticate(self.user)

    def test_actions_require_permission(self):
        url = reverse("quote-action", args=[self.quote.pk, "approve"])
        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_approve_and_convert(self):
        self._grant("change_quote")

        response = self.client.post(reverse("quote-action", args=[self.quote.pk, "approve"]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], QuoteStatus.APPROVED)

        response = self.client.post(
            reverse("quote-action", args=[self.quote.pk, "convert"]),
            {"invoice_number": "B0200000010"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["invoice_number"], "B0200000010")

        response = self.client.post(reverse("quote-action", args=[self.quote.pk, "convert"]), {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_action_is_404(self):
        self._grant("change_quote")
        response = self.client.post(reverse("quote-action", args=[self.quote.pk, "archive"]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
