# assets/services/depreciation_service.py

"""
======================================================
PATH: assets/services/depreciation_service.py
======================================================
MONTHLY DEPRECIATION (STRAIGHT LINE)

calculate_monthly_depreciation(as_of_date):
- period = as_of_date's YYYY-MM
- every active straight-line asset acquired on/before as_of_date with
  accumulated < cost − salvage and no record for the period
- monthly = (cost − salvage) / useful_life_months, rounded to 2dp
- the final period absorbs the rounding remainder, so the sum of all
  postings equals cost − salvage exactly
- ONE journal entry per category: Dr depreciation expense / Cr accumulated depreciation
- records + asset balances are written by the posting engine's mark_source,
  inside the same transaction as the entry

Re-running for a processed period is a no-op for those assets.

toggle_reversal(record) flips Calculado <-> Reversado. Status only; no
offsetting entry and no asset change.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal

from django.db import transaction

from accounting.services.account_resolver import resolve
from accounting.services.exceptions import AccountingValidationError
from accounting.services.journal_builder import NOOP, CandidateLine, build, merge_by_account
from accounting.services.money import ZERO, money
from accounting.services.posting_engine import post
from assets.models import (
    DepreciationMethod,
    DepreciationRecord,
    DepreciationStatus,
    FixedAsset,
)
from assets.services.lifecycle import DEPRECIATION_LIFECYCLE

logger = logging.getLogger(__name__)

EVENT_TYPE = "DEP"


def period_for(as_of_date: date) -> str:
    return as_of_date.strftime("%Y-%m")


def monthly_amount(asset: FixedAsset) -> Decimal:
    return money(asset.depreciable_base / Decimal(asset.useful_life_months))


def amount_for_period(asset: FixedAsset, *, prior_periods: int) -> Decimal:
    """
    Straight-line charge for the next period, clipped to what is left.
    The last period of the useful life takes the whole remainder.
    """
    remaining = asset.remaining_depreciable
    if remaining <= ZERO:
        return ZERO

    monthly = monthly_amount(asset)
    if prior_periods + 1 >= asset.useful_life_months or remaining <= monthly:
        return remaining
    return min(monthly, remaining)


def _qualifying_assets(*, as_of_date: date, period: str):
    already_done = DepreciationRecord.objects.filter(period=period).values("asset_id")
    assets = (
        FixedAsset.objects.select_for_update()
        .select_related("category")
        .filter(
            is_active=True,
            depreciation_method=DepreciationMethod.STRAIGHT_LINE,
            acquisition_date__lte=as_of_date,
        )
        .exclude(id__in=already_done)
        .order_by("category_id", "code")
    )
    return [a for a in assets if a.remaining_depreciable > ZERO]


def _post_category(*, category, items, as_of_date: date, period: str) -> list[DepreciationRecord]:
    expense_account = resolve(category.depreciation_expense_account_code)
    accumulated_account = resolve(category.accumulated_depreciation_account_code)

    candidate_lines = []
    for asset, amount in items:
        label = f"Depreciación {asset.code} {period}"
        candidate_lines.append(CandidateLine(account=expense_account, debit=amount, description=label))
        candidate_lines.append(CandidateLine(account=accumulated_account, credit=amount, description=label))

    asset_ids = "-".join(str(asset.pk) for asset, _ in items)
    draft = build(
        merge_by_account(candidate_lines),
        event_type=EVENT_TYPE,
        source_id=f"C{category.pk}-{asset_ids}",
        period=period,
        entry_date=as_of_date,
        description=f"Depreciación mensual {category.name} {period}",
        reference=f"Depreciación {period}",
        source_type="depreciation",
    )
    if draft is NOOP:
        return []

    created: list[DepreciationRecord] = []

    def _mark_source(entry):
        for asset, amount in items:
            asset.accumulated_depreciation = money(asset.accumulated_depreciation + amount)
            asset.current_value = money(max(asset.current_value - amount, ZERO))
            asset.save(update_fields=["accumulated_depreciation", "current_value", "updated_at"])

            created.append(
                DepreciationRecord.objects.create(
                    asset=asset,
                    period=period,
                    depreciation_date=as_of_date,
                    monthly_amount=amount,
                    accumulated_depreciation=asset.accumulated_depreciation,
                    remaining_value=money(asset.acquisition_cost - asset.accumulated_depreciation),
                    status=DepreciationStatus.CALCULATED,
                    journal_entry=entry,
                )
            )

    post(draft, mark_source=_mark_source)
    return created


def calculate_monthly_depreciation(as_of_date: date) -> list[DepreciationRecord]:
    if not isinstance(as_of_date, date):
        raise AccountingValidationError("as_of_date must be a date")

    period = period_for(as_of_date)

    with transaction.atomic():
        assets = _qualifying_assets(as_of_date=as_of_date, period=period)

        prior_counts = defaultdict(int)
        for asset_id in DepreciationRecord.objects.filter(
            asset_id__in=[a.pk for a in assets],
        ).values_list("asset_id", flat=True):
            prior_counts[asset_id] += 1

        by_category = defaultdict(list)
        for asset in assets:
            amount = amount_for_period(asset, prior_periods=prior_counts[asset.pk])
            if amount > ZERO:
                by_category[asset.category].append((asset, amount))

        records: list[DepreciationRecord] = []
        for category, items in by_category.items():
            records.extend(
                _post_category(category=category, items=items, as_of_date=as_of_date, period=period)
            )

    logger.info(
        "Depreciation run completed",
        extra={
            "period": period,
            "assets": len(records),
            "categories": len(by_category),
            "amount": str(sum((r.monthly_amount for r in records), ZERO)),
        },
    )
    return records


def toggle_reversal(record: DepreciationRecord) -> DepreciationRecord:
    with transaction.atomic():
        locked = DepreciationRecord.objects.select_for_update().get(pk=record.pk)
        target = (
            DepreciationStatus.REVERSED
            if locked.status == DepreciationStatus.CALCULATED
            else DepreciationStatus.CALCULATED
        )
        DEPRECIATION_LIFECYCLE.apply(locked, target)
        locked.save(update_fields=["status"])

    return locked
