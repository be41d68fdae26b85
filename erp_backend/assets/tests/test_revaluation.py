# assets/tests/test_revaluation.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.test import TestCase

from accounting.models.journal import JournalEntry
from accounting.services.exceptions import (
    InvalidTransitionError,
    MissingGainAccountError,
    MissingLossAccountError,
)
from assets.models import RevaluationStatus
from assets.selectors import list_revaluation_records
from assets.services import revaluation_service
from assets.tests.factories import create_asset, create_category, seed_asset_ledger


class RevaluationTests(TestCase):
    def setUp(self):
        self.ledger = seed_asset_ledger()
        self.category = create_category()
        # 120,000 cost, 24,000 depreciated -> carrying value 96,000
        self.asset = create_asset(self.category, accumulated="24000.00")

    def _revalue(self, new_value, asset=None):
        return revaluation_service.create_revaluation(
            asset=asset or self.asset,
            new_value=new_value,
            reason="Incremento del Mercado",
            method="Avalúo Profesional",
            revaluation_date=date(2025, 1, 15),
        )

    def test_create_snapshots_previous_value(self):
        record = self._revalue("110000.00")

        self.assertEqual(record.previous_value, Decimal("96000.00"))
        self.assertEqual(record.delta, Decimal("14000.00"))
        self.assertEqual(record.status, RevaluationStatus.PENDING)

    def test_gain_posts_debit_asset_credit_gain(self):
        record = self._revalue("110000.00")

        entry = revaluation_service.approve(record, approved_by="contador")

        lines = list(entry.lines.order_by("line_number"))
        self.assertEqual(len(lines), 2)
        self.assertEqual((lines[0].account, lines[0].debit), (self.ledger["equipment"], Decimal("14000.00")))
        self.assertEqual((lines[1].account, lines[1].credit), (self.ledger["gain"], Decimal("14000.00")))
        self.assertTrue(entry.entry_number.startswith("RV-202501-"))

        record.refresh_from_db()
        self.asset.refresh_from_db()
        self.assertEqual(record.status, RevaluationStatus.APPROVED)
        self.assertEqual(record.journal_entry, entry)
        self.assertEqual(record.approved_by, "contador")
        self.assertEqual(self.asset.current_value, Decimal("110000.00"))

    def test_loss_posts_debit_loss_credit_asset(self):
        record = self._revalue("90000.00")

        entry = revaluation_service.approve(record)

        lines = list(entry.lines.order_by("line_number"))
        self.assertEqual((lines[0].account, lines[0].debit), (self.ledger["loss"], Decimal("6000.00")))
        self.assertEqual((lines[1].account, lines[1].credit), (self.ledger["equipment"], Decimal("6000.00")))

    def test_negligible_delta_approves_without_posting(self):
        record = self._revalue("96000.004")

        result = revaluation_service.approve(record)

        self.assertIsNone(result)
        self.assertEqual(JournalEntry.objects.count(), 0)
        record.refresh_from_db()
        self.assertEqual(record.status, RevaluationStatus.APPROVED)
        self.assertIsNone(record.journal_entry)

    def test_missing_gain_account_is_hard_failure(self):
        category = create_category("Sin Cuentas", gain="", loss="")
        asset = create_asset(category, "ACT-0099")
        record = self._revalue("130000.00", asset=asset)

        with self.assertRaises(MissingGainAccountError):
            revaluation_service.approve(record)

        record.refresh_from_db()
        asset.refresh_from_db()
        self.assertEqual(record.status, RevaluationStatus.PENDING)
        self.assertEqual(asset.current_value, Decimal("120000.00"))
        self.assertEqual(JournalEntry.objects.count(), 0)

    def test_missing_loss_account_is_hard_failure(self):
        category = create_category("Sin Pérdida", loss="")
        asset = create_asset(category, "ACT-0098")
        record = self._revalue("100000.00", asset=asset)

        with self.assertRaises(MissingLossAccountError):
            revaluation_service.approve(record)

    def test_review_then_approve(self):
        record = revaluation_service.submit_for_review(self._revalue("110000.00"))
        self.assertEqual(record.status, RevaluationStatus.IN_REVIEW)

        self.assertIsNotNone(revaluation_service.approve(record))

    def test_terminal_states_refuse_further_transitions(self):
        rejected = revaluation_service.reject(self._revalue("110000.00"))
        with self.assertRaises(InvalidTransitionError):
            revaluation_service.approve(rejected)

        approved = self._revalue("120000.00")
        revaluation_service.approve(approved)
        with self.assertRaises(InvalidTransitionError):
            revaluation_service.approve(approved)
        self.assertEqual(JournalEntry.objects.count(), 1)

    def test_list_revaluation_records(self):
        self._revalue("110000.00")
        revaluation_service.reject(self._revalue("80000.00"))

        self.assertEqual(list_revaluation_records().count(), 2)
        self.assertEqual(list_revaluation_records({"status": RevaluationStatus.REJECTED}).count(), 1)
