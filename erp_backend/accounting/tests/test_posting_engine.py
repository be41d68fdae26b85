# accounting/tests/test_posting_engine.py

from __future__ import annotations

from datetime import date
from decimal import Decimal
from unittest import mock

from django.core.exceptions import ValidationError
from django.db.models import Sum
from django.test import TestCase

from accounting.models.account import Account
from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalLine
from accounting.services.exceptions import (
    AccountingValidationError,
    NotFoundError,
    PostingFailedError,
)
from accounting.services.journal_builder import NOOP, CandidateLine, build
from accounting.services.posting_engine import get_journal_entry, post
from accounting.tests.helpers import create_account, create_active_chart


class PostingEngineTests(TestCase):
    def setUp(self):
        self.chart = create_active_chart()
        self.cash = create_account(self.chart, "1000", "Caja", Account.ASSET)
        self.capital = create_account(self.chart, "3000", "Capital", Account.EQUITY)

    def _draft(self, amount="100.00", source_id="A1"):
        return build(
            [
                CandidateLine(account=self.cash, debit=amount),
                CandidateLine(account=self.capital, credit=amount),
            ],
            event_type="TEST",
            source_id=source_id,
            period="2024-05",
            entry_date=date(2024, 5, 31),
            description="Aporte de capital",
        )

    def test_post_creates_balanced_entry(self):
        entry = post(self._draft())

        self.assertEqual(entry.entry_number, "TEST-202405-A1")
        self.assertTrue(entry.is_posted)
        totals = JournalLine.objects.filter(entry=entry).aggregate(d=Sum("debit"), c=Sum("credit"))
        self.assertEqual(totals["d"], Decimal("100.00"))
        self.assertEqual(totals["d"], totals["c"])

    def test_posting_twice_returns_same_entry_and_one_row(self):
        calls = []

        first = post(self._draft(), mark_source=calls.append)
        second = post(self._draft(), mark_source=calls.append)

        self.assertEqual(first.pk, second.pk)
        self.assertEqual(JournalEntry.objects.filter(entry_number=first.entry_number).count(), 1)
        self.assertEqual(JournalLine.objects.filter(entry=first).count(), 2)
        self.assertEqual(len(calls), 1)

    def test_mark_source_failure_rolls_back_everything(self):
        def _boom(entry):
            raise RuntimeError("source update failed")

        with self.assertRaises(PostingFailedError):
            post(self._draft(), mark_source=_boom)

        self.assertFalse(JournalEntry.objects.exists())
        self.assertFalse(JournalLine.objects.exists())

    def test_concurrent_winner_is_returned_without_marking_source(self):
        winner = post(self._draft())
        calls = []

        # the pre-insert lookup misses, as if the winner committed after it ran
        with mock.patch.object(JournalEntry.objects, "filter", return_value=JournalEntry.objects.none()):
            loser = post(self._draft(), mark_source=calls.append)

        self.assertEqual(loser.pk, winner.pk)
        self.assertEqual(JournalEntry.objects.filter(entry_number=winner.entry_number).count(), 1)
        self.assertEqual(JournalLine.objects.filter(entry=winner).count(), 2)
        self.assertEqual(calls, [])

    def test_noop_cannot_be_posted(self):
        with self.assertRaises(AccountingValidationError):
            post(NOOP)

    def test_entries_are_immutable(self):
        entry = post(self._draft())

        with self.assertRaises(ValidationError):
            entry.save()
        with self.assertRaises(ValidationError):
            entry.delete()
        with self.assertRaises(ValidationError):
            entry.lines.first().save()

    def test_referenced_account_code_is_frozen(self):
        post(self._draft())
        self.cash.refresh_from_db()
        self.cash.code = "1001"

        with self.assertRaises(ValidationError):
            self.cash.save()

    def test_get_journal_entry(self):
        entry = post(self._draft(source_id="B7"))

        found = get_journal_entry("TEST-202405-B7")
        self.assertEqual(found.pk, entry.pk)
        self.assertEqual(found.lines.count(), 2)

        with self.assertRaises(NotFoundError):
            get_journal_entry("TEST-000000-NOPE")
