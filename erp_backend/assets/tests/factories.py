# assets/tests/factories.py

from __future__ import annotations

import calendar
from datetime import date
from decimal import Decimal

from accounting.models.account import Account
from accounting.tests.helpers import create_account, create_active_chart
from assets.models import AssetCategory, FixedAsset


def month_end(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def seed_asset_ledger() -> dict:
    chart = create_active_chart()
    return {
        "chart": chart,
        "equipment": create_account(chart, "1510", "Mobiliario y Equipo", Account.ASSET),
        "vehicles": create_account(chart, "1520", "Vehículos", Account.ASSET),
        "accumulated": create_account(
            chart, "1590", "Depreciación Acumulada", Account.ASSET, normal_balance=Account.CREDIT
        ),
        "expense": create_account(chart, "6310", "Gasto de Depreciación", Account.EXPENSE),
        "gain": create_account(chart, "4910", "Ganancia por Revaluación", Account.INCOME),
        "loss": create_account(chart, "6910", "Pérdida por Revaluación", Account.EXPENSE),
    }


def create_category(name="Mobiliario y Equipo", *, asset_code="1510", gain="4910", loss="6910") -> AssetCategory:
    return AssetCategory.objects.create(
        name=name,
        default_useful_life_months=60,
        asset_account_code=asset_code,
        depreciation_expense_account_code="6310",
        accumulated_depreciation_account_code="1590",
        revaluation_gain_account_code=gain,
        revaluation_loss_account_code=loss,
    )


def create_asset(category, code="ACT-0001", *, cost="120000.00", salvage="0.00", life=60,
                 acquired=date(2024, 1, 1), accumulated="0.00") -> FixedAsset:
    return FixedAsset.objects.create(
        code=code,
        name=f"Activo {code}",
        category=category,
        acquisition_date=acquired,
        acquisition_cost=Decimal(cost),
        salvage_value=Decimal(salvage),
        useful_life_months=life,
        accumulated_depreciation=Decimal(accumulated),
    )
