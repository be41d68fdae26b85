# payroll/tests/test_payroll_engine.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase, override_settings

from accounting.models.journal import JournalEntry
from accounting.services.exceptions import (
    AccountingValidationError,
    BudgetExceededError,
    FormulaError,
    InvalidTransitionError,
)
from accounting.tests.helpers import create_active_chart, seed_payroll_accounts
from payroll.models import (
    Bonus,
    BonusType,
    DeductionType,
    EmployeeStatus,
    OneTimeDeduction,
    OneTimeDeductionStatus,
    PayrollEntry,
    PayrollEntryStatus,
    PayrollPeriodStatus,
    PeriodicDeduction,
)
from payroll.selectors import get_payroll_period_summary
from payroll.services import payroll_engine
from payroll.services.providers import TaxRates
from payroll.tests.factories import (
    create_department,
    create_employee,
    create_period,
    create_tax_config,
)


class PayrollCalculationTests(TestCase):
    def setUp(self):
        self.period = create_period()

    def test_fallback_rate_when_no_tax_configuration(self):
        create_employee(salary="50000.00")

        with self.assertLogs("payroll.services.payroll_engine", level="WARNING") as logs:
            entries = payroll_engine.calculate_period(self.period)

        self.assertTrue(any("fallback" in line for line in logs.output))
        self.assertEqual(len(entries), 1)
        entry = entries[0]
        self.assertEqual(entry.gross_salary, Decimal("50000.00"))
        self.assertEqual(entry.employee_rate, Decimal("16.67"))
        self.assertEqual(entry.deductions, Decimal("8335.00"))
        self.assertEqual(entry.net_salary, Decimal("41665.00"))

        self.period.refresh_from_db()
        self.assertEqual(self.period.status, PayrollPeriodStatus.PROCESSING)
        self.assertEqual(self.period.total_gross, Decimal("50000.00"))
        self.assertEqual(self.period.total_deductions, Decimal("8335.00"))
        self.assertEqual(self.period.total_net, Decimal("41665.00"))
        self.assertEqual(self.period.employee_count, 1)

    @override_settings(PAYROLL_FALLBACK_EMPLOYEE_RATE="10.00")
    def test_fallback_rate_comes_from_settings(self):
        create_employee(salary="20000.00")

        entry = payroll_engine.calculate_period(self.period)[0]

        self.assertEqual(entry.deductions, Decimal("2000.00"))

    def test_configured_rates_are_summed(self):
        create_tax_config(sfs="3.04", afp="2.87")
        create_employee(salary="50000.00")

        entry = payroll_engine.calculate_period(self.period)[0]

        self.assertEqual(entry.employee_rate, Decimal("5.91"))
        self.assertEqual(entry.statutory_deductions, Decimal("2955.00"))
        self.assertEqual(entry.net_salary, Decimal("47045.00"))

    def test_zero_configured_rate_falls_back(self):
        create_tax_config(sfs="0", afp="0")
        create_employee(salary="50000.00")

        entry = payroll_engine.calculate_period(self.period)[0]

        self.assertEqual(entry.employee_rate, Decimal("16.67"))

    def test_taxable_base_is_capped(self):
        create_tax_config(cap="100000.00")
        create_employee(salary="150000.00")

        entry = payroll_engine.calculate_period(self.period)[0]

        self.assertEqual(entry.taxable_base, Decimal("100000.00"))
        self.assertEqual(entry.statutory_deductions, Decimal("5910.00"))
        self.assertEqual(entry.net_salary, Decimal("144090.00"))

    def test_explicit_tax_snapshot_overrides_provider(self):
        create_tax_config(sfs="3.04", afp="2.87")
        create_employee(salary="10000.00")
        rates = TaxRates(employee_rate_components={"isr": Decimal("10")}, max_taxable_salary=Decimal("5000"))

        entry = payroll_engine.calculate_period(self.period, tax_config=rates)[0]

        self.assertEqual(entry.statutory_deductions, Decimal("500.00"))

    def test_rerun_does_not_duplicate_entries(self):
        create_employee("EMP-001")
        payroll_engine.calculate_period(self.period)
        create_employee("EMP-002", salary="30000.00")

        entries = payroll_engine.calculate_period(self.period)

        self.assertEqual(len(entries), 2)
        self.assertEqual(PayrollEntry.objects.filter(period=self.period).count(), 2)
        self.period.refresh_from_db()
        self.assertEqual(self.period.employee_count, 2)
        self.assertEqual(self.period.total_gross, Decimal("80000.00"))

    def test_inactive_employees_are_skipped(self):
        create_employee("EMP-001")
        create_employee("EMP-002", status=EmployeeStatus.INACTIVE)

        entries = payroll_engine.calculate_period(self.period)

        self.assertEqual([e.employee.code for e in entries], ["EMP-001"])

    def test_budget_violation_blocks_whole_run_and_lists_every_department(self):
        sales = create_department("Ventas", budget="80000.00")
        ops = create_department("Operaciones", budget="10000.00")
        unlimited = create_department("Gerencia", budget="0.00")
        create_employee("EMP-001", "50000.00", department=sales)
        create_employee("EMP-002", "40000.00", department=sales)
        create_employee("EMP-003", "20000.00", department=ops)
        create_employee("EMP-004", "900000.00", department=unlimited)

        with self.assertRaises(BudgetExceededError) as ctx:
            payroll_engine.calculate_period(self.period)

        offending = sorted(v["department"] for v in ctx.exception.violations)
        self.assertEqual(offending, ["Operaciones", "Ventas"])
        self.assertFalse(PayrollEntry.objects.exists())
        self.period.refresh_from_db()
        self.assertEqual(self.period.status, PayrollPeriodStatus.OPEN)

    def test_budget_snapshot_can_be_supplied(self):
        dept = create_department("Ventas", budget="0.00")
        employee = create_employee("EMP-001", "50000.00", department=dept)

        with self.assertRaises(BudgetExceededError):
            payroll_engine.calculate_period(
                self.period,
                active_employees=[employee],
                department_budgets={dept.pk: Decimal("40000.00")},
            )

    def test_bonuses_are_added_to_gross(self):
        create_tax_config()
        employee = create_employee(salary="50000.00")
        Bonus.objects.create(name="Transporte", bonus_type=BonusType.FIXED, amount=Decimal("2000.00"))
        Bonus.objects.create(
            name="Incentivo",
            employee=employee,
            bonus_type=BonusType.PERCENTAGE,
            percentage=Decimal("5"),
        )
        Bonus.objects.create(name="Productividad", bonus_type=BonusType.FORMULA, formula="salario_base * 0.02")
        Bonus.objects.create(name="Inactivo", bonus_type=BonusType.FIXED, amount=Decimal("999"), is_active=False)

        entry = payroll_engine.calculate_period(self.period)[0]

        self.assertEqual(entry.bonuses, Decimal("5500.00"))
        self.assertEqual(entry.gross_salary, Decimal("55500.00"))
        self.assertEqual(entry.statutory_deductions, Decimal("3280.05"))

    def test_rejected_formula_aborts_run(self):
        create_employee()
        Bonus.objects.create(name="Malicioso", bonus_type=BonusType.FORMULA, formula="__import__('os')")

        with self.assertRaises(FormulaError):
            payroll_engine.calculate_period(self.period)

        self.assertFalse(PayrollEntry.objects.exists())

    def test_periodic_and_one_time_deductions(self):
        create_tax_config()
        employee = create_employee(salary="50000.00")
        PeriodicDeduction.objects.create(
            employee=employee,
            name="Préstamo cooperativa",
            category="cooperativa",
            deduction_type=DeductionType.PERCENTAGE,
            percentage=Decimal("10"),
            start_date=date(2023, 6, 1),
        )
        PeriodicDeduction.objects.create(
            employee=employee,
            name="Seguro vencido",
            category="seguro",
            deduction_type=DeductionType.FIXED,
            amount=Decimal("700"),
            start_date=date(2023, 1, 1),
            end_date=date(2023, 12, 31),
        )
        in_period = OneTimeDeduction.objects.create(
            employee=employee, amount=Decimal("1500.00"), deduction_date=date(2024, 1, 15)
        )
        later = OneTimeDeduction.objects.create(
            employee=employee, amount=Decimal("800.00"), deduction_date=date(2024, 2, 15)
        )

        entry = payroll_engine.calculate_period(self.period)[0]

        self.assertEqual(entry.other_deductions, Decimal("6500.00"))
        self.assertEqual(entry.deductions, Decimal("9455.00"))
        self.assertEqual(entry.net_salary, Decimal("40545.00"))

        in_period.refresh_from_db()
        later.refresh_from_db()
        self.assertEqual(in_period.status, OneTimeDeductionStatus.APPLIED)
        self.assertEqual(in_period.applied_period, self.period)
        self.assertEqual(later.status, OneTimeDeductionStatus.PENDING)

    def test_reopen_discards_calculation(self):
        employee = create_employee()
        deduction = OneTimeDeduction.objects.create(
            employee=employee, amount=Decimal("100.00"), deduction_date=date(2024, 1, 10)
        )
        payroll_engine.calculate_period(self.period)

        period = payroll_engine.reopen_period(self.period)

        self.assertEqual(period.status, PayrollPeriodStatus.OPEN)
        self.assertEqual(period.employee_count, 0)
        self.assertFalse(PayrollEntry.objects.filter(period=period).exists())
        deduction.refresh_from_db()
        self.assertEqual(deduction.status, OneTimeDeductionStatus.PENDING)
        self.assertIsNone(deduction.applied_period)

    def test_no_active_employees_is_refused(self):
        create_employee("EMP-001", status=EmployeeStatus.INACTIVE)

        with self.assertRaises(AccountingValidationError):
            payroll_engine.calculate_period(self.period)

        self.period.refresh_from_db()
        self.assertEqual(self.period.status, PayrollPeriodStatus.OPEN)

    def test_deductions_above_gross_abort_run(self):
        employee = create_employee("EMP-007", salary="10000.00")
        deduction = OneTimeDeduction.objects.create(
            employee=employee, amount=Decimal("20000.00"), deduction_date=date(2024, 1, 20)
        )

        with self.assertRaisesMessage(AccountingValidationError, "EMP-007"):
            payroll_engine.calculate_period(self.period)

        self.assertFalse(PayrollEntry.objects.exists())
        self.period.refresh_from_db()
        self.assertEqual(self.period.status, PayrollPeriodStatus.OPEN)
        deduction.refresh_from_db()
        self.assertEqual(deduction.status, OneTimeDeductionStatus.PENDING)

    def test_failed_rerun_reopens_period(self):
        create_employee("EMP-001")
        payroll_engine.calculate_period(self.period)
        late = create_employee("EMP-002", salary="10000.00")
        OneTimeDeduction.objects.create(employee=late, amount=Decimal("50000.00"), deduction_date=date(2024, 1, 25))

        with self.assertRaises(AccountingValidationError):
            payroll_engine.calculate_period(self.period)

        self.period.refresh_from_db()
        self.assertEqual(self.period.status, PayrollPeriodStatus.OPEN)
        self.assertFalse(PayrollEntry.objects.filter(period=self.period).exists())

    def test_run_summary_is_logged(self):
        create_employee("EMP-001")
        create_employee("EMP-002")

        with self.assertLogs("payroll.services.payroll_engine", level="INFO") as logs:
            payroll_engine.calculate_period(self.period)

        record = next(r for r in logs.records if r.getMessage() == "Payroll period calculated")
        self.assertEqual(record.entries_created, 2)
        self.assertEqual(record.skipped, 0)


class PayrollClosingTests(TestCase):
    def setUp(self):
        self.chart = create_active_chart()
        self.accounts = seed_payroll_accounts(self.chart)
        self.period = create_period()
        create_employee("EMP-001", "50000.00")

    def test_close_posts_balanced_payroll_entry(self):
        payroll_engine.calculate_period(self.period)

        entry = payroll_engine.close_period(self.period)

        self.assertEqual(entry.entry_number, f"PR-202401-{self.period.pk}")
        self.assertEqual(entry.total_debit, entry.total_credit)
        lines = {ln.account_id: ln for ln in entry.lines.all()}
        self.assertEqual(lines[self.accounts["salaries"].pk].debit, Decimal("50000.00"))
        self.assertEqual(lines[self.accounts["withholdings"].pk].credit, Decimal("8335.00"))
        self.assertEqual(lines[self.accounts["payable"].pk].credit, Decimal("41665.00"))

        self.period.refresh_from_db()
        self.assertEqual(self.period.status, PayrollPeriodStatus.CLOSED)
        self.assertEqual(self.period.journal_entry, entry)
        self.assertTrue(
            all(e.status == PayrollEntryStatus.APPROVED for e in PayrollEntry.objects.filter(period=self.period))
        )

    def test_close_requires_processing(self):
        with self.assertRaises(InvalidTransitionError):
            payroll_engine.close_period(self.period)
        self.assertFalse(JournalEntry.objects.exists())

    def test_closed_period_entries_are_frozen(self):
        payroll_engine.calculate_period(self.period)
        payroll_engine.close_period(self.period)

        entry = PayrollEntry.objects.get(period=self.period)
        entry.net_salary = Decimal("1.00")
        with self.assertRaises(ValidationError):
            entry.save()
        with self.assertRaises(InvalidTransitionError):
            payroll_engine.calculate_period(self.period)

    def test_paid_is_terminal(self):
        payroll_engine.calculate_period(self.period)
        payroll_engine.close_period(self.period)

        period = payroll_engine.mark_paid(self.period, pay_date=date(2024, 2, 1))

        self.assertEqual(period.status, PayrollPeriodStatus.PAID)
        self.assertEqual(period.pay_date, date(2024, 2, 1))
        for action in (payroll_engine.mark_paid, payroll_engine.close_period, payroll_engine.reopen_period):
            with self.assertRaises(InvalidTransitionError):
                action(period)

    def test_summary_reports_totals_and_entry(self):
        payroll_engine.calculate_period(self.period)
        entry = payroll_engine.close_period(self.period)

        summary = get_payroll_period_summary(self.period.pk)

        self.assertEqual(summary["status"], PayrollPeriodStatus.CLOSED)
        self.assertEqual(summary["total_net"], Decimal("41665.00"))
        self.assertEqual(summary["entry_number"], entry.entry_number)
        self.assertEqual(summary["departments"][0]["employees"], 1)
