# accounting/tests/helpers.py

"""
Shared fixtures for ledger tests (also used by assets / payroll tests).
"""

from __future__ import annotations

import uuid

from accounting.models.account import Account
from accounting.models.account_mapping import AccountMapping
from accounting.models.chart import ChartOfAccounts


def create_active_chart(*, code: str | None = None) -> ChartOfAccounts:
    code = code or f"test-coa-{uuid.uuid4().hex[:6]}"
    return ChartOfAccounts.objects.create(
        name=f"Test Chart {code}",
        code=code,
        is_active=True,
    )


def create_account(chart, code: str, name: str, account_type: str = Account.ASSET, **extra) -> Account:
    return Account.objects.create(
        chart=chart,
        code=code,
        name=name,
        account_type=account_type,
        **extra,
    )


def seed_payroll_accounts(chart) -> dict:
    salaries = create_account(chart, "6210", "Sueldos y Salarios", Account.EXPENSE)
    withholdings = create_account(chart, "2310", "Retenciones TSS por Pagar", Account.LIABILITY)
    payable = create_account(chart, "2105", "Nómina por Pagar", Account.LIABILITY)
    return {"salaries": salaries, "withholdings": withholdings, "payable": payable}


def map_key(chart, key: str, account: Account) -> AccountMapping:
    return AccountMapping.objects.create(chart=chart, key=key, account=account)
