# quotes/admin.py

from django.contrib import admin

from quotes.models import Quote


@admin.register(Quote)
class QuoteAdmin(admin.ModelAdmin):
    list_display = ("number", "customer_name", "issue_date", "valid_until", "total", "status", "invoice_number")
    list_filter = ("status",)
    search_fields = ("number", "customer_name", "invoice_number")
    readonly_fields = ("total", "status", "invoice_number", "converted_at", "created_at", "updated_at")
