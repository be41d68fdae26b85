# PATH: accounting/services/account_resolver.py

"""
PATH: accounting/services/account_resolver.py

ACCOUNT DIRECTORY (AUTHORITATIVE)

This module answers ONE question:
"Which account should be used for this purpose?"

resolve(code_or_key) looks in this order:
1) AccountMapping rows of the active chart (semantic key -> account)
2) DEFAULT_CODES (built-in semantic key -> account code)
3) the input itself, as a literal account code

Design goals:
- deterministic
- chart-safe (only the active chart is searched)
- hard-fail on missing setup (so we don't post to wrong accounts)

Bootstrap:
- If no active chart exists, activate the oldest chart (or create an empty one).
- If multiple active charts exist, hard-fail (do NOT auto-fix silently).
"""

from __future__ import annotations

import logging
from functools import lru_cache

from django.core.exceptions import MultipleObjectsReturned, ObjectDoesNotExist
from django.db import transaction

from accounting.models.account import Account
from accounting.models.account_mapping import AccountMapping
from accounting.models.chart import ChartOfAccounts
from accounting.services.exceptions import AccountNotFound, ConfigurationError

logger = logging.getLogger(__name__)

# ------------------------------------------------------------
# BUILT-IN SEMANTIC CODES
# ------------------------------------------------------------

SALARIES_EXPENSE = "SALARIES_EXPENSE"
PAYROLL_WITHHOLDINGS_PAYABLE = "PAYROLL_WITHHOLDINGS_PAYABLE"
PAYROLL_PAYABLE = "PAYROLL_PAYABLE"

DEFAULT_CODES = {
    "CASH": "1000",
    "BANK": "1010",
    "ACCOUNTS_RECEIVABLE": "1100",
    PAYROLL_PAYABLE: "2105",
    PAYROLL_WITHHOLDINGS_PAYABLE: "2310",
    SALARIES_EXPENSE: "6210",
}

DEFAULT_BOOTSTRAP_CHART_NAME = "ERP Standard Chart"
DEFAULT_BOOTSTRAP_CHART_CODE = "erp_standard"


def _norm_key(value) -> str:
    if value is None:
        return ""
    return "_".join(str(value).strip().upper().split())


# ------------------------------------------------------------
# BOOTSTRAP
# ------------------------------------------------------------


def _ensure_single_active_chart() -> ChartOfAccounts:
    """
    - exactly one active chart -> return it
    - none active -> activate an existing chart if present, else create one
    - multiple active -> hard-fail
    """
    with transaction.atomic():
        active_qs = ChartOfAccounts.objects.select_for_update().filter(is_active=True)
        active_count = active_qs.count()

        if active_count == 1:
            return active_qs.first()

        if active_count > 1:
            raise ConfigurationError(
                "Multiple active Charts of Accounts found. Only one active chart is allowed."
            )

        existing = ChartOfAccounts.objects.select_for_update().order_by("id").first()
        if existing:
            existing.is_active = True
            existing.save()
            logger.warning(
                "Activated existing ChartOfAccounts id=%s code=%s",
                existing.id,
                existing.code,
            )
            return existing

        chart = ChartOfAccounts.objects.create(
            name=DEFAULT_BOOTSTRAP_CHART_NAME,
            code=DEFAULT_BOOTSTRAP_CHART_CODE,
            is_active=True,
        )
        logger.warning("Created empty default ChartOfAccounts id=%s", chart.id)
        return chart


# ------------------------------------------------------------
# ACTIVE CHART
# ------------------------------------------------------------


@lru_cache(maxsize=1)
def get_active_chart() -> ChartOfAccounts:
    """
    Cached resolver for the *single* active chart.

    NOTE:
    ChartOfAccounts.save() and AccountMapping.save() clear this cache.
    """
    try:
        return ChartOfAccounts.objects.get(is_active=True)
    except ObjectDoesNotExist:
        chart = _ensure_single_active_chart()
        clear_active_chart_cache()
        return chart
    except MultipleObjectsReturned as exc:
        raise ConfigurationError(
            "Multiple active Charts of Accounts found. Only one active chart is allowed."
        ) from exc


def clear_active_chart_cache() -> None:
    get_active_chart.cache_clear()


# ------------------------------------------------------------
# INTERNAL RESOLUTION HELPERS
# ------------------------------------------------------------


def _mapped_account(*, chart: ChartOfAccounts, key: str) -> Account | None:
    mapping = (
        AccountMapping.objects.select_related("account")
        .filter(chart=chart, key=key)
        .first()
    )
    return mapping.account if mapping else None


def _get_account_by_code(*, chart: ChartOfAccounts, code: str) -> Account | None:
    return Account.objects.filter(chart=chart, code=code).first()


# ------------------------------------------------------------
# PUBLIC RESOLVER
# ------------------------------------------------------------


def resolve(code_or_key) -> Account:
    """
    Resolve a semantic key (e.g. "SALARIES_EXPENSE") or a literal account
    code (e.g. "1510") to an active Account of the active chart.

    Raises AccountNotFound when nothing matches or the match is inactive.
    """
    raw = str(code_or_key or "").strip()
    if not raw:
        raise AccountNotFound("Account code or semantic key is required")

    chart = get_active_chart()
    key = _norm_key(raw)

    account = _mapped_account(chart=chart, key=key)
    if account is None and key in DEFAULT_CODES:
        account = _get_account_by_code(chart=chart, code=DEFAULT_CODES[key])
    if account is None:
        account = _get_account_by_code(chart=chart, code=raw)

    if account is None:
        raise AccountNotFound(
            f"No account for '{raw}' in active chart '{chart.code}'. "
            "Run seed_chart (or add the account / mapping manually)."
        )
    if not account.is_active:
        raise AccountNotFound(f"Account {account.code} is inactive in chart '{chart.code}'")

    return account
