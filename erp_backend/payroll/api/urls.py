# payroll/api/urls.py

from django.urls import path

from payroll.api.views import (
    BonusListCreateView,
    DepartmentListCreateView,
    EmployeeListCreateView,
    OneTimeDeductionListCreateView,
    PayrollEntryListView,
    PayrollPeriodActionView,
    PayrollPeriodListCreateView,
    PayrollPeriodSummaryView,
    PeriodicDeductionListCreateView,
)

urlpatterns = [
    path("departments/", DepartmentListCreateView.as_view(), name="payroll-departments"),
    path("employees/", EmployeeListCreateView.as_view(), name="payroll-employees"),
    path("bonuses/", BonusListCreateView.as_view(), name="payroll-bonuses"),
    path("deductions/periodic/", PeriodicDeductionListCreateView.as_view(), name="payroll-periodic-deductions"),
    path("deductions/one-time/", OneTimeDeductionListCreateView.as_view(), name="payroll-one-time-deductions"),
    path("periods/", PayrollPeriodListCreateView.as_view(), name="payroll-periods"),
    path("periods/<int:period_id>/summary/", PayrollPeriodSummaryView.as_view(), name="payroll-period-summary"),
    path("periods/<int:period_id>/entries/", PayrollEntryListView.as_view(), name="payroll-period-entries"),
    path(
        "periods/<int:period_id>/<str:action>/",
        PayrollPeriodActionView.as_view(),
        name="payroll-period-action",
    ),
]
