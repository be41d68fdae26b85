# payroll/admin.py

from django.contrib import admin

from payroll.models import (
    Bonus,
    Department,
    Employee,
    OneTimeDeduction,
    PayrollEntry,
    PayrollPeriod,
    PeriodicDeduction,
    TaxConfiguration,
)


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ("name", "budget", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name",)


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ("code", "first_name", "last_name", "department", "salary", "status")
    list_filter = ("status", "department")
    search_fields = ("code", "first_name", "last_name")


@admin.register(TaxConfiguration)
class TaxConfigurationAdmin(admin.ModelAdmin):
    list_display = ("name", "sfs_employee", "afp_employee", "max_salary_tss", "is_active")


class PayrollEntryInline(admin.TabularInline):
    model = PayrollEntry
    extra = 0
    can_delete = False
    fields = ("employee", "base_salary", "bonuses", "gross_salary", "deductions", "net_salary", "status")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(PayrollPeriod)
class PayrollPeriodAdmin(admin.ModelAdmin):
    list_display = ("name", "start_date", "end_date", "status", "total_gross", "total_net", "employee_count")
    list_filter = ("status",)
    # status and totals move only through the payroll engine
    readonly_fields = (
        "status",
        "total_gross",
        "total_deductions",
        "total_net",
        "employee_count",
        "journal_entry",
    )
    inlines = [PayrollEntryInline]


@admin.register(PeriodicDeduction)
class PeriodicDeductionAdmin(admin.ModelAdmin):
    list_display = ("employee", "name", "category", "deduction_type", "amount", "percentage", "is_active")
    list_filter = ("category", "deduction_type", "is_active")


@admin.register(OneTimeDeduction)
class OneTimeDeductionAdmin(admin.ModelAdmin):
    list_display = ("employee", "category", "amount", "deduction_date", "status", "applied_period")
    list_filter = ("category", "status")


@admin.register(Bonus)
class BonusAdmin(admin.ModelAdmin):
    list_display = ("name", "employee", "bonus_type", "amount", "percentage", "formula", "is_active")
    list_filter = ("bonus_type", "is_active")
