# accounting/admin.py

from django.contrib import admin

from accounting.models.account import Account
from accounting.models.account_mapping import AccountMapping
from accounting.models.chart import ChartOfAccounts
from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalLine

# ============================================================
# CHART OF ACCOUNTS
# ============================================================


@admin.register(ChartOfAccounts)
class ChartOfAccountsAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "is_active", "created_at", "updated_at")
    list_filter = ("is_active",)
    search_fields = ("name", "code")
    readonly_fields = ("created_at", "updated_at")
    ordering = ("name",)


# ============================================================
# ACCOUNT
# ============================================================


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "account_type", "normal_balance", "chart", "is_active")
    list_filter = ("account_type", "normal_balance", "is_active", "chart")
    search_fields = ("code", "name")
    ordering = ("chart", "code")
    readonly_fields = ("created_at", "updated_at")

    fieldsets = (
        ("Account Identity", {"fields": ("chart", "code", "name", "account_type", "normal_balance")}),
        ("Status", {"fields": ("is_active",)}),
        ("System Fields", {"fields": ("created_at", "updated_at")}),
    )


@admin.register(AccountMapping)
class AccountMappingAdmin(admin.ModelAdmin):
    list_display = ("key", "account", "chart")
    list_filter = ("chart",)
    search_fields = ("key", "account__code")


# ============================================================
# JOURNAL ENTRY (READ-ONLY)
# ============================================================


class JournalLineInline(admin.TabularInline):
    model = JournalLine
    extra = 0
    can_delete = False
    fields = ("line_number", "account", "description", "debit", "credit")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(JournalEntry)
class JournalEntryAdmin(admin.ModelAdmin):
    list_display = (
        "entry_number",
        "entry_date",
        "description",
        "source_type",
        "total_debit",
        "status",
    )
    list_filter = ("status", "source_type", "entry_date")
    search_fields = ("entry_number", "description", "reference")
    ordering = ("-entry_date",)
    inlines = [JournalLineInline]

    readonly_fields = (
        "entry_number",
        "entry_date",
        "description",
        "reference",
        "status",
        "source_type",
        "source_id",
        "total_debit",
        "total_credit",
        "created_at",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
