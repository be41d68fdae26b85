# assets/admin.py

from django.contrib import admin

from assets.models import AssetCategory, DepreciationRecord, FixedAsset, RevaluationRecord


@admin.register(AssetCategory)
class AssetCategoryAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "default_useful_life_months",
        "asset_account_code",
        "depreciation_expense_account_code",
        "accumulated_depreciation_account_code",
        "is_active",
    )
    list_filter = ("is_active",)
    search_fields = ("name",)


@admin.register(FixedAsset)
class FixedAssetAdmin(admin.ModelAdmin):
    list_display = (
        "code",
        "name",
        "category",
        "acquisition_cost",
        "accumulated_depreciation",
        "current_value",
        "is_active",
    )
    list_filter = ("category", "is_active")
    search_fields = ("code", "name")
    # balances move only through depreciation / revaluation services
    readonly_fields = ("accumulated_depreciation", "current_value", "created_at", "updated_at")


class _ReadOnlyAdmin(admin.ModelAdmin):
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(DepreciationRecord)
class DepreciationRecordAdmin(_ReadOnlyAdmin):
    list_display = ("asset", "period", "monthly_amount", "accumulated_depreciation", "remaining_value", "status")
    list_filter = ("status", "period")
    search_fields = ("asset__code",)


@admin.register(RevaluationRecord)
class RevaluationRecordAdmin(_ReadOnlyAdmin):
    list_display = ("asset", "revaluation_date", "previous_value", "new_value", "delta", "status")
    list_filter = ("status", "reason")
    search_fields = ("asset__code",)
