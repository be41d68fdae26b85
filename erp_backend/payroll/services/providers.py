"""
Collaborators the payroll engine reads from.

Each one is a thin query object so the engine can be handed explicit
snapshots (tests, what-if runs) or fall back to the database.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from payroll.models import Department, Employee, EmployeeStatus, TaxConfiguration


@dataclass(frozen=True)
class TaxRates:
    # percent, e.g. {"sfs_employee": Decimal("3.04"), "afp_employee": Decimal("2.87")}
    employee_rate_components: dict = field(default_factory=dict)
    max_taxable_salary: Decimal | None = None

    @property
    def employee_rate(self) -> Decimal:
        return sum((Decimal(v) for v in self.employee_rate_components.values()), Decimal("0"))


class EmployeeDirectory:
    @staticmethod
    def list_active(department=None) -> list[Employee]:
        qs = Employee.objects.select_related("department").filter(status=EmployeeStatus.ACTIVE)
        if department is not None:
            qs = qs.filter(department=department)
        return list(qs.order_by("code"))


class TaxConfigProvider:
    @staticmethod
    def get_rates() -> TaxRates | None:
        config = TaxConfiguration.objects.filter(is_active=True).order_by("-created_at", "-pk").first()
        if config is None:
            return None

        cap = config.max_salary_tss
        return TaxRates(
            employee_rate_components={
                "sfs_employee": config.sfs_employee,
                "afp_employee": config.afp_employee,
            },
            max_taxable_salary=cap if cap and cap > 0 else None,
        )


class DepartmentBudgetProvider:
    @staticmethod
    def get(department_id) -> Decimal | None:
        """Budget ceiling, or None when the department has none configured."""
        budget = (
            Department.objects.filter(pk=department_id, is_active=True)
            .values_list("budget", flat=True)
            .first()
        )
        if budget is None or budget <= 0:
            return None
        return budget
