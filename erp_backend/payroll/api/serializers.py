# payroll/api/serializers.py

from rest_framework import serializers

from accounting.services.exceptions import FormulaError
from payroll.models import (
    Bonus,
    BonusType,
    Department,
    Employee,
    OneTimeDeduction,
    PayrollEntry,
    PayrollPeriod,
    PeriodicDeduction,
)
from payroll.services.formula import validate_formula


class DepartmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Department
        fields = ("id", "name", "budget", "is_active", "created_at")
        read_only_fields = ("id", "created_at")


class EmployeeSerializer(serializers.ModelSerializer):
    department_name = serializers.CharField(source="department.name", read_only=True, default=None)

    class Meta:
        model = Employee
        fields = (
            "id",
            "code",
            "first_name",
            "last_name",
            "department",
            "department_name",
            "salary",
            "status",
            "hire_date",
        )
        read_only_fields = ("id",)


class PayrollPeriodSerializer(serializers.ModelSerializer):
    entry_number = serializers.CharField(source="journal_entry.entry_number", read_only=True, default=None)

    class Meta:
        model = PayrollPeriod
        fields = (
            "id",
            "name",
            "start_date",
            "end_date",
            "pay_date",
            "status",
            "total_gross",
            "total_deductions",
            "total_net",
            "employee_count",
            "entry_number",
            "created_at",
        )
        # status and totals are owned by the payroll engine
        read_only_fields = (
            "id",
            "status",
            "total_gross",
            "total_deductions",
            "total_net",
            "employee_count",
            "entry_number",
            "created_at",
        )

    def validate(self, attrs):
        if attrs["end_date"] < attrs["start_date"]:
            raise serializers.ValidationError({"end_date": "End date cannot precede start date"})
        return attrs


class PayrollEntrySerializer(serializers.ModelSerializer):
    employee_code = serializers.CharField(source="employee.code", read_only=True)
    employee_name = serializers.CharField(source="employee.full_name", read_only=True)

    class Meta:
        model = PayrollEntry
        fields = (
            "id",
            "employee",
            "employee_code",
            "employee_name",
            "base_salary",
            "bonuses",
            "gross_salary",
            "taxable_base",
            "employee_rate",
            "statutory_deductions",
            "other_deductions",
            "deductions",
            "net_salary",
            "status",
        )
        read_only_fields = fields


class DepartmentTotalsSerializer(serializers.Serializer):
    department = serializers.CharField()
    employees = serializers.IntegerField()
    gross = serializers.DecimalField(max_digits=14, decimal_places=2)
    deductions = serializers.DecimalField(max_digits=14, decimal_places=2)
    net = serializers.DecimalField(max_digits=14, decimal_places=2)


class PayrollPeriodSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    pay_date = serializers.DateField(allow_null=True)
    status = serializers.CharField()
    total_gross = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_deductions = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_net = serializers.DecimalField(max_digits=14, decimal_places=2)
    employee_count = serializers.IntegerField()
    entry_number = serializers.CharField(allow_null=True)
    departments = DepartmentTotalsSerializer(many=True)


class MarkPaidSerializer(serializers.Serializer):
    pay_date = serializers.DateField(required=False)


class BonusSerializer(serializers.ModelSerializer):
    class Meta:
        model = Bonus
        fields = ("id", "name", "employee", "bonus_type", "amount", "percentage", "formula", "is_active")
        read_only_fields = ("id",)

    def validate(self, attrs):
        if attrs.get("bonus_type") == BonusType.FORMULA:
            try:
                validate_formula(attrs.get("formula", ""))
            except FormulaError as exc:
                raise serializers.ValidationError({"formula": str(exc)})
        return attrs


class PeriodicDeductionSerializer(serializers.ModelSerializer):
    class Meta:
        model = PeriodicDeduction
        fields = (
            "id",
            "employee",
            "name",
            "category",
            "deduction_type",
            "amount",
            "percentage",
            "start_date",
            "end_date",
            "is_active",
        )
        read_only_fields = ("id",)


class OneTimeDeductionSerializer(serializers.ModelSerializer):
    class Meta:
        model = OneTimeDeduction
        fields = (
            "id",
            "employee",
            "description",
            "category",
            "amount",
            "deduction_date",
            "status",
            "applied_period",
        )
        read_only_fields = ("id", "status", "applied_period")
