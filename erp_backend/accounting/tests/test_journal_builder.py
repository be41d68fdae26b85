# accounting/tests/test_journal_builder.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.test import TestCase, override_settings

from accounting.models.account import Account
from accounting.services.exceptions import (
    AccountingValidationError,
    UnbalancedEntryError,
)
from accounting.services.journal_builder import (
    NOOP,
    CandidateLine,
    DraftEntry,
    build,
    derive_entry_number,
    merge_by_account,
)
from accounting.tests.helpers import create_account, create_active_chart


class DeriveEntryNumberTests(TestCase):
    def test_same_event_same_number(self):
        a = derive_entry_number("RV", "ACT-0007", "2024-01")
        b = derive_entry_number("rv", "act-0007", date(2024, 1, 31))
        self.assertEqual(a, "RV-202401-ACT-0007")
        self.assertEqual(a, b)

    def test_period_is_optional(self):
        self.assertEqual(derive_entry_number("PR", 12), "PR-12")

    def test_unsafe_characters_are_sanitized(self):
        self.assertEqual(derive_entry_number("DEP", "Mobiliario y Equipo", "2024-03"), "DEP-202403-MOBILIARIO-Y-EQUIPO")

    def test_long_sources_are_digested(self):
        number = derive_entry_number("DEP", "X" * 200, "2024-03")
        self.assertTrue(number.startswith("DEP-202403-"))
        self.assertLessEqual(len(number), 80)
        self.assertEqual(number, derive_entry_number("DEP", "X" * 200, "2024-03"))

    def test_bad_period_rejected(self):
        with self.assertRaises(AccountingValidationError):
            derive_entry_number("DEP", "1", "March")


class BuildTests(TestCase):
    def setUp(self):
        self.chart = create_active_chart()
        self.asset = create_account(self.chart, "1510", "Equipo", Account.ASSET)
        self.gain = create_account(self.chart, "4910", "Ganancia Revaluación", Account.INCOME)

    def _build(self, lines):
        return build(
            lines,
            event_type="RV",
            source_id="7",
            period="2024-01",
            entry_date=date(2024, 1, 31),
            description="Revaluación",
        )

    def test_balanced_lines_produce_draft(self):
        draft = self._build(
            [
                CandidateLine(account=self.asset, debit="14000"),
                CandidateLine(account=self.gain, credit=Decimal("14000.00")),
            ]
        )

        self.assertIsInstance(draft, DraftEntry)
        self.assertEqual(draft.entry_number, "RV-202401-7")
        self.assertEqual(draft.total_debit, Decimal("14000.00"))
        self.assertEqual(draft.total_credit, Decimal("14000.00"))
        self.assertEqual([ln.line_number for ln in draft.lines], [1, 2])

    def test_unbalanced_raises(self):
        with self.assertRaises(UnbalancedEntryError):
            self._build(
                [
                    CandidateLine(account=self.asset, debit="100.00"),
                    CandidateLine(account=self.gain, credit="90.00"),
                ]
            )

    def test_negative_amount_rejected(self):
        with self.assertRaises(AccountingValidationError):
            self._build([CandidateLine(account=self.asset, debit="-5")])

    def test_two_sided_line_rejected(self):
        with self.assertRaises(AccountingValidationError):
            self._build([CandidateLine(account=self.asset, debit="5", credit="5")])

    def test_zero_lines_dropped_and_negligible_total_is_noop(self):
        result = self._build(
            [
                CandidateLine(account=self.asset, debit="0.004"),
                CandidateLine(account=self.gain, credit="0.00"),
            ]
        )
        self.assertIs(result, NOOP)
        self.assertFalse(result)

    @override_settings(LEDGER_NEGLIGIBLE_AMOUNT="1.00")
    def test_negligible_threshold_is_configurable(self):
        result = self._build(
            [
                CandidateLine(account=self.asset, debit="0.50"),
                CandidateLine(account=self.gain, credit="0.50"),
            ]
        )
        self.assertIs(result, NOOP)

    def test_merge_by_account_combines_same_side(self):
        merged = merge_by_account(
            [
                CandidateLine(account=self.asset, debit="10"),
                CandidateLine(account=self.asset, debit="5.50"),
                CandidateLine(account=self.gain, credit="15.50"),
            ]
        )
        self.assertEqual(len(merged), 2)
        self.assertEqual(merged[0].debit, Decimal("15.50"))
