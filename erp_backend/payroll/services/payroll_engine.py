# payroll/services/payroll_engine.py

"""
======================================================
PATH: payroll/services/payroll_engine.py
======================================================
PAYROLL CALCULATION ENGINE

calculate_period(period):
1. Reads ONE snapshot of active employees for the whole run
2. Department budget pre-check on base salaries (all-or-nothing; every
   offending department is reported)
3. Per employee without an entry for the period:
     gross      = base salary + bonuses
     taxable    = min(gross, TSS cap) when a cap is configured
     statutory  = taxable × employee rate / 100
     other      = periodic + pending one-time deductions
     net        = gross − statutory − other  (must not go negative)
4. Recomputes period aggregates; open -> processing

An empty employee snapshot is refused. Any failure rolls back the
whole run and leaves the period open with no entry written.

close_period(period)   processing -> closed, posts
                       Dr salaries expense     (gross)
                       Cr withholdings payable (deductions)
                       Cr payroll payable      (net)
reopen_period(period)  processing -> open, discards the calculation
mark_paid(period)      closed -> paid (terminal)
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.db.models import Count, Q, Sum

from accounting.services.account_resolver import (
    PAYROLL_PAYABLE,
    PAYROLL_WITHHOLDINGS_PAYABLE,
    SALARIES_EXPENSE,
    resolve,
)
from accounting.services.exceptions import (
    AccountingServiceError,
    AccountingValidationError,
    BudgetExceededError,
)
from accounting.services.journal_builder import NOOP, CandidateLine, build
from accounting.services.money import ZERO, money
from accounting.services.posting_engine import post
from payroll.models import (
    Bonus,
    BonusType,
    DeductionType,
    OneTimeDeduction,
    OneTimeDeductionStatus,
    PayrollEntry,
    PayrollEntryStatus,
    PayrollPeriod,
    PayrollPeriodStatus,
    PeriodicDeduction,
)
from payroll.services.formula import evaluate_formula
from payroll.services.lifecycle import PAYROLL_PERIOD_LIFECYCLE
from payroll.services.providers import (
    DepartmentBudgetProvider,
    EmployeeDirectory,
    TaxConfigProvider,
    TaxRates,
)

logger = logging.getLogger(__name__)

EVENT_TYPE = "PR"

HUNDRED = Decimal("100")


def fallback_employee_rate() -> Decimal:
    return Decimal(str(getattr(settings, "PAYROLL_FALLBACK_EMPLOYEE_RATE", "16.67")))


def _lock(period: PayrollPeriod) -> PayrollPeriod:
    return PayrollPeriod.objects.select_for_update().get(pk=period.pk)


# ------------------------------------------------------------
# PRE-CHECK
# ------------------------------------------------------------


def check_department_budgets(employees, department_budgets=None) -> list[dict]:
    """
    Returns one violation per department whose active base salaries
    exceed its budget. Departments without a budget (or budget 0) are
    not checked.
    """
    totals = defaultdict(lambda: ZERO)
    departments = {}
    for emp in employees:
        if emp.department_id is None:
            continue
        totals[emp.department_id] += money(emp.salary)
        departments[emp.department_id] = emp.department

    violations = []
    for department_id, total in totals.items():
        if department_budgets is not None:
            budget = department_budgets.get(department_id)
        else:
            budget = DepartmentBudgetProvider.get(department_id)

        if budget is None or money(budget) <= ZERO:
            continue
        budget = money(budget)
        if total > budget:
            department = departments[department_id]
            violations.append(
                {
                    "department": department.name if department else department_id,
                    "department_id": department_id,
                    "budget": budget,
                    "total": total,
                    "excess": money(total - budget),
                }
            )
    return violations


# ------------------------------------------------------------
# RATES
# ------------------------------------------------------------


def effective_employee_rate(rates: TaxRates | None) -> Decimal:
    configured = rates.employee_rate if rates is not None else ZERO
    if configured > ZERO:
        return configured

    fallback = fallback_employee_rate()
    logger.warning(
        "No statutory employee rate configured; using fallback rate",
        extra={"fallback_rate": str(fallback)},
    )
    return fallback


def taxable_base(gross: Decimal, rates: TaxRates | None) -> Decimal:
    cap = rates.max_taxable_salary if rates is not None else None
    if cap is not None and cap > ZERO:
        return min(gross, money(cap))
    return gross


# ------------------------------------------------------------
# BONUSES / DEDUCTIONS
# ------------------------------------------------------------


def bonus_amount(bonus: Bonus, base_salary: Decimal) -> Decimal:
    if bonus.bonus_type == BonusType.FIXED:
        amount = money(bonus.amount)
    elif bonus.bonus_type == BonusType.PERCENTAGE:
        amount = money(base_salary * Decimal(bonus.percentage) / HUNDRED)
    elif bonus.bonus_type == BonusType.FORMULA:
        amount = evaluate_formula(bonus.formula, value=base_salary)
    else:
        raise AccountingValidationError(f"Unknown bonus type '{bonus.bonus_type}'")

    if amount < ZERO:
        raise AccountingValidationError(f"Bonus '{bonus.name}' evaluated to a negative amount")
    return amount


def periodic_deduction_amount(deduction: PeriodicDeduction, base_salary: Decimal) -> Decimal:
    if deduction.deduction_type == DeductionType.PERCENTAGE:
        return money(base_salary * Decimal(deduction.percentage) / HUNDRED)
    return money(deduction.amount)


def _bonuses_by_employee(employee_ids) -> dict:
    grouped = defaultdict(list)
    for bonus in Bonus.objects.filter(is_active=True).filter(
        Q(employee__isnull=True) | Q(employee_id__in=employee_ids)
    ):
        grouped[bonus.employee_id].append(bonus)
    return grouped


def _periodic_deductions_by_employee(period: PayrollPeriod, employee_ids) -> dict:
    grouped = defaultdict(list)
    qs = PeriodicDeduction.objects.filter(
        employee_id__in=employee_ids,
        is_active=True,
        start_date__lte=period.end_date,
    ).filter(Q(end_date__isnull=True) | Q(end_date__gte=period.start_date))
    for deduction in qs:
        grouped[deduction.employee_id].append(deduction)
    return grouped


def _pending_one_time_by_employee(period: PayrollPeriod, employee_ids) -> dict:
    grouped = defaultdict(list)
    qs = OneTimeDeduction.objects.select_for_update().filter(
        employee_id__in=employee_ids,
        status=OneTimeDeductionStatus.PENDING,
        deduction_date__gte=period.start_date,
        deduction_date__lte=period.end_date,
    )
    for deduction in qs:
        grouped[deduction.employee_id].append(deduction)
    return grouped


# ------------------------------------------------------------
# AGGREGATES
# ------------------------------------------------------------


def _refresh_totals(period: PayrollPeriod) -> None:
    agg = period.entries.aggregate(
        gross=Sum("gross_salary"),
        deductions=Sum("deductions"),
        net=Sum("net_salary"),
        count=Count("id"),
    )
    period.total_gross = money(agg["gross"] or ZERO)
    period.total_deductions = money(agg["deductions"] or ZERO)
    period.total_net = money(agg["net"] or ZERO)
    period.employee_count = agg["count"] or 0


# ------------------------------------------------------------
# CALCULATION
# ------------------------------------------------------------


def _calculate(period, active_employees, tax_config, department_budgets):
    with transaction.atomic():
        locked = _lock(period)
        if locked.status != PayrollPeriodStatus.PROCESSING:
            PAYROLL_PERIOD_LIFECYCLE.validate_transition(obj=locked, target_status=PayrollPeriodStatus.PROCESSING)

        employees = list(active_employees) if active_employees is not None else EmployeeDirectory.list_active()
        if not employees:
            raise AccountingValidationError("No active employees to process")

        violations = check_department_budgets(employees, department_budgets)
        if violations:
            logger.warning(
                "Payroll run blocked by department budget",
                extra={
                    "period_id": locked.pk,
                    "departments": [str(v["department"]) for v in violations],
                },
            )
            raise BudgetExceededError(violations)

        rates = tax_config if tax_config is not None else TaxConfigProvider.get_rates()
        rate = effective_employee_rate(rates)

        already = set(locked.entries.values_list("employee_id", flat=True))
        pending = [emp for emp in employees if emp.pk not in already]
        pending_ids = [emp.pk for emp in pending]

        bonuses = _bonuses_by_employee(pending_ids)
        periodic = _periodic_deductions_by_employee(locked, pending_ids)
        one_time = _pending_one_time_by_employee(locked, pending_ids)

        for emp in pending:
            base = money(emp.salary)
            bonus_total = sum(
                (bonus_amount(b, base) for b in bonuses.get(None, []) + bonuses.get(emp.pk, [])),
                ZERO,
            )
            gross = money(base + bonus_total)

            taxable = taxable_base(gross, rates)
            statutory = money(taxable * rate / HUNDRED)

            other = sum((periodic_deduction_amount(d, base) for d in periodic.get(emp.pk, [])), ZERO)
            other += sum((money(d.amount) for d in one_time.get(emp.pk, [])), ZERO)
            other = money(other)

            deductions = money(statutory + other)
            net = money(gross - deductions)
            if net < ZERO:
                raise AccountingValidationError(
                    f"Deductions for employee {emp.code} ({deductions}) exceed gross salary ({gross})"
                )

            PayrollEntry.objects.create(
                employee=emp,
                period=locked,
                base_salary=base,
                bonuses=money(bonus_total),
                gross_salary=gross,
                taxable_base=taxable,
                employee_rate=rate,
                statutory_deductions=statutory,
                other_deductions=other,
                deductions=deductions,
                net_salary=net,
                status=PayrollEntryStatus.CALCULATED,
            )

        applied_ids = [d.pk for items in one_time.values() for d in items]
        if applied_ids:
            OneTimeDeduction.objects.filter(pk__in=applied_ids).update(
                status=OneTimeDeductionStatus.APPLIED,
                applied_period=locked,
            )

        _refresh_totals(locked)
        if locked.status != PayrollPeriodStatus.PROCESSING:
            PAYROLL_PERIOD_LIFECYCLE.apply(locked, PayrollPeriodStatus.PROCESSING)
        locked.save()

    logger.info(
        "Payroll period calculated",
        extra={
            "period_id": locked.pk,
            "entries_created": len(pending),
            "skipped": len(employees) - len(pending),
            "employee_rate": str(rate),
            "total_gross": str(locked.total_gross),
            "total_net": str(locked.total_net),
        },
    )
    return locked


def calculate_period(
    period: PayrollPeriod,
    active_employees=None,
    tax_config: TaxRates | None = None,
    department_budgets: dict | None = None,
) -> list[PayrollEntry]:
    """
    active_employees / tax_config / department_budgets default to the
    providers. Re-running only adds entries for employees that have none.

    A failed run leaves the period in `open`: a first run rolls back with
    its transaction, a failed re-run of a `processing` period is reopened
    (its earlier entries are discarded).
    """
    try:
        locked = _calculate(period, active_employees, tax_config, department_budgets)
    except AccountingServiceError:
        current = PayrollPeriod.objects.filter(pk=period.pk).values_list("status", flat=True).first()
        if current == PayrollPeriodStatus.PROCESSING:
            logger.warning("Payroll re-run failed; reopening period", extra={"period_id": period.pk})
            reopen_period(period)
        raise

    return list(locked.entries.select_related("employee").order_by("employee__code"))


def reopen_period(period: PayrollPeriod) -> PayrollPeriod:
    """
    processing -> open. Drops the calculated entries and releases the
    one-time deductions they consumed.
    """
    with transaction.atomic():
        locked = _lock(period)
        PAYROLL_PERIOD_LIFECYCLE.apply(locked, PayrollPeriodStatus.OPEN)

        locked.entries.all().delete()
        OneTimeDeduction.objects.filter(
            applied_period=locked,
            status=OneTimeDeductionStatus.APPLIED,
        ).update(status=OneTimeDeductionStatus.PENDING, applied_period=None)

        _refresh_totals(locked)
        locked.save()

    return locked


# ------------------------------------------------------------
# CLOSING / PAYMENT
# ------------------------------------------------------------


def _finalize_close(period: PayrollPeriod, entry=None) -> None:
    period.entries.update(status=PayrollEntryStatus.APPROVED)
    PAYROLL_PERIOD_LIFECYCLE.apply(period, PayrollPeriodStatus.CLOSED)
    period.journal_entry = entry
    period.save(update_fields=["status", "journal_entry", "updated_at"])


def close_period(period: PayrollPeriod, *, entry_date: date | None = None):
    """
    Returns the posted JournalEntry, or None for an empty payroll.
    """
    with transaction.atomic():
        locked = _lock(period)
        PAYROLL_PERIOD_LIFECYCLE.validate_transition(obj=locked, target_status=PayrollPeriodStatus.CLOSED)

        _refresh_totals(locked)
        locked.save(update_fields=["total_gross", "total_deductions", "total_net", "employee_count"])

        description = f"Nómina {locked.name}"
        lines = [
            CandidateLine(account=resolve(SALARIES_EXPENSE), debit=locked.total_gross, description=description),
            CandidateLine(
                account=resolve(PAYROLL_WITHHOLDINGS_PAYABLE),
                credit=locked.total_deductions,
                description=f"Retenciones {locked.name}",
            ),
            CandidateLine(
                account=resolve(PAYROLL_PAYABLE),
                credit=locked.total_net,
                description=f"Neto a pagar {locked.name}",
            ),
        ]

        draft = build(
            lines,
            event_type=EVENT_TYPE,
            source_id=locked.pk,
            period=locked.end_date,
            entry_date=entry_date or locked.end_date,
            description=description,
            reference=locked.name,
            source_type="payroll_period",
        )
        if draft is NOOP:
            _finalize_close(locked)
            return None

        entry = post(draft, mark_source=lambda je: _finalize_close(locked, je))

    logger.info(
        "Payroll period closed",
        extra={"period_id": locked.pk, "entry_number": entry.entry_number, "total_gross": str(locked.total_gross)},
    )
    return entry


def mark_paid(period: PayrollPeriod, *, pay_date: date | None = None) -> PayrollPeriod:
    with transaction.atomic():
        locked = _lock(period)
        PAYROLL_PERIOD_LIFECYCLE.apply(locked, PayrollPeriodStatus.PAID)
        if pay_date is not None:
            locked.pay_date = pay_date
        locked.save(update_fields=["status", "pay_date", "updated_at"])

    return locked
