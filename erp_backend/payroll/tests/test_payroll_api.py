# payroll/tests/test_payroll_api.py

from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Permission
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from accounting.tests.helpers import create_active_chart, seed_payroll_accounts
from payroll.models import PayrollPeriodStatus
from payroll.tests.factories import create_department, create_employee, create_period

User = get_user_model()


class PayrollPeriodApiTests(TestCase):
    def setUp(self):
        seed_payroll_accounts(create_active_chart())
        self.period = create_period()
        create_employee("EMP-001", "50000.00")

        self.client = APIClient()
        self.user = User.objects.create_user(username="nomina", password="pass")
        perms = Permission.objects.filter(
            content_type__app_label="payroll",
            codename__in=["change_payrollperiod", "view_payrollperiod"],
        )
        self.user.user_permissions.add(*perms)
        self.client.force_authenticate(User.objects.get(pk=self.user.pk))

    def _action(self, action, data=None):
        url = reverse("payroll-period-action", args=[self.period.pk, action])
        return self.client.post(url, data or {}, format="json")

    def test_full_cycle(self):
        response = self._action("calculate")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], PayrollPeriodStatus.PROCESSING)
        self.assertEqual(Decimal(response.data["total_net"]), Decimal("41665.00"))

        response = self._action("close")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["entry_number"], f"PR-202401-{self.period.pk}")

        response = self._action("pay", {"pay_date": "2024-02-01"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], PayrollPeriodStatus.PAID)

        response = self.client.get(reverse("payroll-period-summary", args=[self.period.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["employee_count"], 1)

    def test_budget_violation_is_400_with_details(self):
        dept = create_department("Ventas", budget="10000.00")
        create_employee("EMP-002", "20000.00", department=dept)

        response = self._action("calculate")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["violations"][0]["department"], "Ventas")
        self.period.refresh_from_db()
        self.assertEqual(self.period.status, PayrollPeriodStatus.OPEN)

    def test_invalid_transition_is_400(self):
        response = self._action("pay")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_missing_period_is_404(self):
        url = reverse("payroll-period-action", args=[999999, "calculate"])
        self.assertEqual(self.client.post(url).status_code, status.HTTP_404_NOT_FOUND)

    def test_requires_permission(self):
        client = APIClient()
        client.force_authenticate(User.objects.create_user(username="cajero", password="pass"))
        url = reverse("payroll-period-action", args=[self.period.pk, "calculate"])
        self.assertEqual(client.post(url).status_code, status.HTTP_403_FORBIDDEN)
