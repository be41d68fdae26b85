# payroll/selectors.py

"""
Read-only payroll queries for presentation / reporting layers.
"""

from __future__ import annotations

from accounting.services.exceptions import NotFoundError
from payroll.models import Employee, PayrollEntry, PayrollPeriod


def get_payroll_period(period_id) -> PayrollPeriod:
    period = PayrollPeriod.objects.select_related("journal_entry").filter(pk=period_id).first()
    if period is None:
        raise NotFoundError(f"Payroll period {period_id} not found")
    return period


def get_employee(employee_id) -> Employee:
    employee = Employee.objects.select_related("department").filter(pk=employee_id).first()
    if employee is None:
        raise NotFoundError(f"Employee {employee_id} not found")
    return employee


def list_payroll_entries(period_id):
    return (
        PayrollEntry.objects.select_related("employee", "employee__department")
        .filter(period_id=period_id)
        .order_by("employee__code")
    )


def get_payroll_period_summary(period_id) -> dict:
    period = get_payroll_period(period_id)

    by_department = {}
    for entry in list_payroll_entries(period.pk):
        department = entry.employee.department
        key = department.name if department else ""
        bucket = by_department.setdefault(
            key,
            {"department": key, "employees": 0, "gross": 0, "deductions": 0, "net": 0},
        )
        bucket["employees"] += 1
        bucket["gross"] += entry.gross_salary
        bucket["deductions"] += entry.deductions
        bucket["net"] += entry.net_salary

    return {
        "id": period.pk,
        "name": period.name,
        "start_date": period.start_date,
        "end_date": period.end_date,
        "pay_date": period.pay_date,
        "status": period.status,
        "total_gross": period.total_gross,
        "total_deductions": period.total_deductions,
        "total_net": period.total_net,
        "employee_count": period.employee_count,
        "entry_number": period.journal_entry.entry_number if period.journal_entry else None,
        "departments": sorted(by_department.values(), key=lambda d: d["department"]),
    }
