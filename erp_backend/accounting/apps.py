# accounting/apps.py

"""
ACCOUNTING APP CONFIG

Ledger core:
- Chart of accounts + semantic account mappings
- Journal entries (append-only)
- Builder / posting engine / document lifecycle services
"""

from django.apps import AppConfig


class AccountingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "accounting"
    verbose_name = "Accounting"
