# assets/selectors.py

"""
Read-only queries for presentation / reporting layers.
"""

from __future__ import annotations

from accounting.services.exceptions import NotFoundError
from assets.models import DepreciationRecord, FixedAsset, RevaluationRecord


def get_asset(asset_id) -> FixedAsset:
    asset = FixedAsset.objects.select_related("category").filter(pk=asset_id).first()
    if asset is None:
        raise NotFoundError(f"Asset {asset_id} not found")
    return asset


def list_depreciation_records(filters: dict | None = None):
    """
    Supported filters: period (YYYY-MM), asset (id), category (id), status.
    """
    filters = filters or {}
    qs = DepreciationRecord.objects.select_related("asset", "asset__category", "journal_entry")

    if filters.get("period"):
        qs = qs.filter(period=filters["period"])
    if filters.get("asset"):
        qs = qs.filter(asset_id=filters["asset"])
    if filters.get("category"):
        qs = qs.filter(asset__category_id=filters["category"])
    if filters.get("status"):
        qs = qs.filter(status=filters["status"])

    return qs.order_by("-period", "asset__code")


def list_revaluation_records(filters: dict | None = None):
    """
    Supported filters: asset (id), status, reason, date_from, date_to.
    """
    filters = filters or {}
    qs = RevaluationRecord.objects.select_related("asset", "journal_entry")

    if filters.get("asset"):
        qs = qs.filter(asset_id=filters["asset"])
    if filters.get("status"):
        qs = qs.filter(status=filters["status"])
    if filters.get("reason"):
        qs = qs.filter(reason=filters["reason"])
    if filters.get("date_from"):
        qs = qs.filter(revaluation_date__gte=filters["date_from"])
    if filters.get("date_to"):
        qs = qs.filter(revaluation_date__lte=filters["date_to"])

    return qs.order_by("-revaluation_date", "-created_at")
