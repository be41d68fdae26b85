# payroll/api/views.py

"""
PAYROLL API

Master data (departments, employees, bonuses, deductions) is plain CRUD.
Period status only moves through payroll_engine actions:
calculate / reopen / close / pay.
"""

from django.core.exceptions import ValidationError as DjangoValidationError
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.errors import service_error_response
from accounting.services.exceptions import AccountingServiceError
from payroll import selectors
from payroll.api.serializers import (
    BonusSerializer,
    DepartmentSerializer,
    EmployeeSerializer,
    MarkPaidSerializer,
    OneTimeDeductionSerializer,
    PayrollEntrySerializer,
    PayrollPeriodSerializer,
    PayrollPeriodSummarySerializer,
    PeriodicDeductionSerializer,
)
from payroll.models import Bonus, Department, Employee, OneTimeDeduction, PayrollPeriod, PeriodicDeduction
from payroll.services import payroll_engine


def _forbidden(message):
    return Response({"detail": message}, status=status.HTTP_403_FORBIDDEN)


def _not_found(message):
    return Response({"detail": message}, status=status.HTTP_404_NOT_FOUND)


class _ListCreateView(GenericAPIView):
    """
    GET lists, POST creates; both gated on the model's Django permissions.
    """

    permission_classes = [IsAuthenticated]
    view_permission = ""
    add_permission = ""

    def get(self, request):
        if not request.user.has_perm(self.view_permission):
            return _forbidden("You do not have permission to view this resource.")
        return Response(self.get_serializer(self.get_queryset(), many=True).data, status=status.HTTP_200_OK)

    def post(self, request):
        if not request.user.has_perm(self.add_permission):
            return _forbidden("You do not have permission to create this resource.")

        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        try:
            obj = s.save()
        except DjangoValidationError as exc:
            return Response({"detail": exc.messages}, status=status.HTTP_400_BAD_REQUEST)
        return Response(self.get_serializer(obj).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["payroll"])
class DepartmentListCreateView(_ListCreateView):
    queryset = Department.objects.order_by("name")
    serializer_class = DepartmentSerializer
    view_permission = "payroll.view_department"
    add_permission = "payroll.add_department"


@extend_schema(tags=["payroll"])
class EmployeeListCreateView(_ListCreateView):
    queryset = Employee.objects.select_related("department").order_by("code")
    serializer_class = EmployeeSerializer
    view_permission = "payroll.view_employee"
    add_permission = "payroll.add_employee"


@extend_schema(tags=["payroll"])
class BonusListCreateView(_ListCreateView):
    queryset = Bonus.objects.order_by("name")
    serializer_class = BonusSerializer
    view_permission = "payroll.view_bonus"
    add_permission = "payroll.add_bonus"


@extend_schema(tags=["payroll"])
class PeriodicDeductionListCreateView(_ListCreateView):
    queryset = PeriodicDeduction.objects.select_related("employee").order_by("employee__code", "start_date")
    serializer_class = PeriodicDeductionSerializer
    view_permission = "payroll.view_periodicdeduction"
    add_permission = "payroll.add_periodicdeduction"


@extend_schema(tags=["payroll"])
class OneTimeDeductionListCreateView(_ListCreateView):
    queryset = OneTimeDeduction.objects.select_related("employee").order_by("-deduction_date")
    serializer_class = OneTimeDeductionSerializer
    view_permission = "payroll.view_onetimededuction"
    add_permission = "payroll.add_onetimededuction"


@extend_schema(tags=["payroll"])
class PayrollPeriodListCreateView(_ListCreateView):
    queryset = PayrollPeriod.objects.select_related("journal_entry").order_by("-start_date")
    serializer_class = PayrollPeriodSerializer
    view_permission = "payroll.view_payrollperiod"
    add_permission = "payroll.add_payrollperiod"


class PayrollPeriodSummaryView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PayrollPeriodSummarySerializer

    @extend_schema(tags=["payroll"], responses=PayrollPeriodSummarySerializer)
    def get(self, request, period_id: int):
        if not request.user.has_perm("payroll.view_payrollperiod"):
            return _forbidden("You do not have permission to view payroll periods.")

        try:
            summary = selectors.get_payroll_period_summary(period_id)
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(PayrollPeriodSummarySerializer(summary).data, status=status.HTTP_200_OK)


class PayrollEntryListView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PayrollEntrySerializer

    @extend_schema(tags=["payroll"], responses=PayrollEntrySerializer(many=True))
    def get(self, request, period_id: int):
        if not request.user.has_perm("payroll.view_payrollentry"):
            return _forbidden("You do not have permission to view payroll entries.")

        try:
            period = selectors.get_payroll_period(period_id)
        except AccountingServiceError as exc:
            return service_error_response(exc)

        qs = selectors.list_payroll_entries(period.pk)
        return Response(PayrollEntrySerializer(qs, many=True).data, status=status.HTTP_200_OK)


class PayrollPeriodActionView(GenericAPIView):
    """
    POST /periods/<id>/<action>/  action ∈ calculate | reopen | close | pay
    """

    permission_classes = [IsAuthenticated]
    serializer_class = MarkPaidSerializer

    ACTIONS = ("calculate", "reopen", "close", "pay")

    @extend_schema(tags=["payroll"], request=MarkPaidSerializer, responses={200: PayrollPeriodSerializer})
    def post(self, request, period_id: int, action: str):
        if not request.user.has_perm("payroll.change_payrollperiod"):
            return _forbidden("You do not have permission to process payroll.")

        if action not in self.ACTIONS:
            return _not_found(f"Unknown action '{action}'")

        period = PayrollPeriod.objects.filter(pk=period_id).first()
        if period is None:
            return _not_found("Payroll period not found")

        try:
            if action == "calculate":
                payroll_engine.calculate_period(period)
            elif action == "reopen":
                payroll_engine.reopen_period(period)
            elif action == "close":
                payroll_engine.close_period(period)
            else:
                s = self.get_serializer(data=request.data)
                s.is_valid(raise_exception=True)
                payroll_engine.mark_paid(period, pay_date=s.validated_data.get("pay_date"))
        except AccountingServiceError as exc:
            return service_error_response(exc)

        period.refresh_from_db()
        return Response(PayrollPeriodSerializer(period).data, status=status.HTTP_200_OK)
