# assets/tests/test_depreciation.py

from __future__ import annotations

from datetime import date
from decimal import Decimal
from io import StringIO

from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db.models import Sum
from django.test import TestCase

from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalLine
from assets.models import DepreciationRecord, DepreciationStatus
from assets.selectors import list_depreciation_records
from assets.services.depreciation_service import (
    calculate_monthly_depreciation,
    toggle_reversal,
)
from assets.tests.factories import create_asset, create_category, month_end, seed_asset_ledger


class MonthlyDepreciationTests(TestCase):
    def setUp(self):
        self.ledger = seed_asset_ledger()
        self.category = create_category()

    def _assert_all_entries_balanced(self):
        for entry in JournalEntry.objects.all():
            totals = entry.lines.aggregate(d=Sum("debit"), c=Sum("credit"))
            self.assertEqual(totals["d"], totals["c"])
            self.assertEqual(totals["d"], entry.total_debit)

    def test_straight_line_twelve_months(self):
        asset = create_asset(self.category)

        for month in range(1, 13):
            records = calculate_monthly_depreciation(month_end(2024, month))
            self.assertEqual(len(records), 1)
            self.assertEqual(records[0].monthly_amount, Decimal("2000.00"))

        asset.refresh_from_db()
        self.assertEqual(asset.accumulated_depreciation, Decimal("24000.00"))
        self.assertEqual(asset.current_value, Decimal("96000.00"))

        last = DepreciationRecord.objects.get(asset=asset, period="2024-12")
        self.assertEqual(last.accumulated_depreciation, Decimal("24000.00"))
        self.assertEqual(last.remaining_value, Decimal("96000.00"))
        self.assertEqual(JournalEntry.objects.count(), 12)
        self._assert_all_entries_balanced()

    def test_entry_debits_expense_and_credits_accumulated(self):
        create_asset(self.category)
        record = calculate_monthly_depreciation(month_end(2024, 1))[0]

        lines = list(record.journal_entry.lines.order_by("line_number"))
        self.assertEqual(lines[0].account, self.ledger["expense"])
        self.assertEqual(lines[0].debit, Decimal("2000.00"))
        self.assertEqual(lines[1].account, self.ledger["accumulated"])
        self.assertEqual(lines[1].credit, Decimal("2000.00"))

    def test_rerun_same_period_is_noop(self):
        create_asset(self.category)

        first = calculate_monthly_depreciation(month_end(2024, 1))
        second = calculate_monthly_depreciation(month_end(2024, 1))

        self.assertEqual(len(first), 1)
        self.assertEqual(second, [])
        self.assertEqual(DepreciationRecord.objects.count(), 1)
        self.assertEqual(JournalEntry.objects.count(), 1)

    def test_final_period_absorbs_rounding_and_never_overshoots(self):
        asset = create_asset(self.category, cost="1000.00", salvage="100.00", life=7)

        amounts = []
        for month in range(1, 11):
            amounts.extend(r.monthly_amount for r in calculate_monthly_depreciation(month_end(2024, month)))

        self.assertEqual(len(amounts), 7)
        self.assertEqual(amounts[0], Decimal("128.57"))
        self.assertEqual(sum(amounts), Decimal("900.00"))

        asset.refresh_from_db()
        self.assertEqual(asset.accumulated_depreciation, Decimal("900.00"))
        self.assertEqual(asset.remaining_depreciable, Decimal("0.00"))
        self._assert_all_entries_balanced()

    def test_one_entry_per_category(self):
        vehicles = create_category("Vehículos", asset_code="1520")
        create_asset(self.category, "ACT-0001")
        create_asset(self.category, "ACT-0002", cost="60000.00", life=60)
        create_asset(vehicles, "VEH-0001", cost="36000.00", life=36)

        records = calculate_monthly_depreciation(month_end(2024, 1))

        self.assertEqual(len(records), 3)
        self.assertEqual(JournalEntry.objects.count(), 2)

        equipment_entry = DepreciationRecord.objects.get(asset__code="ACT-0001").journal_entry
        self.assertEqual(equipment_entry.total_debit, Decimal("3000.00"))
        # merged per account: one debit line + one credit line
        self.assertEqual(equipment_entry.lines.count(), 2)

    def test_assets_acquired_after_date_are_skipped(self):
        create_asset(self.category, acquired=date(2024, 6, 15))

        self.assertEqual(calculate_monthly_depreciation(month_end(2024, 5)), [])
        self.assertEqual(len(calculate_monthly_depreciation(month_end(2024, 6))), 1)

    def test_toggle_reversal_changes_status_only(self):
        asset = create_asset(self.category)
        record = calculate_monthly_depreciation(month_end(2024, 1))[0]
        lines_before = JournalLine.objects.count()

        reversed_record = toggle_reversal(record)
        self.assertEqual(reversed_record.status, DepreciationStatus.REVERSED)

        asset.refresh_from_db()
        self.assertEqual(asset.accumulated_depreciation, Decimal("2000.00"))
        self.assertEqual(JournalLine.objects.count(), lines_before)

        again = toggle_reversal(reversed_record)
        self.assertEqual(again.status, DepreciationStatus.CALCULATED)

    def test_asset_with_records_cannot_be_deleted(self):
        asset = create_asset(self.category)
        calculate_monthly_depreciation(month_end(2024, 1))

        with self.assertRaises(ValidationError):
            asset.delete()

    def test_list_depreciation_records_filters(self):
        create_asset(self.category)
        calculate_monthly_depreciation(month_end(2024, 1))
        calculate_monthly_depreciation(month_end(2024, 2))

        self.assertEqual(list_depreciation_records({"period": "2024-02"}).count(), 1)
        self.assertEqual(list_depreciation_records().count(), 2)


class RunDepreciationCommandTests(TestCase):
    def setUp(self):
        seed_asset_ledger()
        self.asset = create_asset(create_category())

    def test_command_posts_once_per_period(self):
        out = StringIO()
        call_command("run_depreciation", "--as-of", "2024-01-31", stdout=out)
        call_command("run_depreciation", "--as-of", "2024-01-31", stdout=out)

        self.assertIn("Depreciated 1 asset(s) for 2024-01", out.getvalue())
        self.assertEqual(DepreciationRecord.objects.filter(asset=self.asset).count(), 1)

    def test_invalid_date_is_rejected(self):
        with self.assertRaises(CommandError):
            call_command("run_depreciation", "--as-of", "31/01/2024", stdout=StringIO())
