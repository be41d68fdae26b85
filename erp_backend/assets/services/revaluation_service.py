# assets/services/revaluation_service.py

"""
======================================================
PATH: assets/services/revaluation_service.py
======================================================
ASSET REVALUATION

create_revaluation -> Pendiente, snapshots previous_value from the asset
submit_for_review  -> En Revisión
reject             -> Rechazado (no ledger effect)
approve            -> Aprobado, posts the gain/loss

approve():
- delta = new_value − previous_value
- |delta| < 0.01: no posting; record approved and asset value updated anyway
- delta > 0: Dr asset / Cr revaluation gain (gain account required)
- delta < 0: Dr revaluation loss / Cr asset (loss account required)
- asset.current_value, record status and the entry commit together
"""

from __future__ import annotations

import logging
from datetime import date

from django.db import transaction
from django.utils import timezone

from accounting.services.account_resolver import resolve
from accounting.services.exceptions import (
    AccountingValidationError,
    AccountNotFound,
    MissingGainAccountError,
    MissingLossAccountError,
)
from accounting.services.journal_builder import NOOP, CandidateLine, build, negligible_amount
from accounting.services.money import ZERO, money
from accounting.services.posting_engine import post
from assets.models import FixedAsset, RevaluationRecord, RevaluationStatus
from assets.services.lifecycle import REVALUATION_LIFECYCLE

logger = logging.getLogger(__name__)

EVENT_TYPE = "RV"


def _lock(record: RevaluationRecord) -> RevaluationRecord:
    return RevaluationRecord.objects.select_for_update().select_related("asset__category").get(pk=record.pk)


def create_revaluation(
    *,
    asset: FixedAsset,
    new_value,
    reason: str,
    method: str,
    revaluation_date: date | None = None,
    appraiser: str = "",
    notes: str = "",
) -> RevaluationRecord:
    new_value = money(new_value)
    if new_value < ZERO:
        raise AccountingValidationError("New value cannot be negative")

    reason = (reason or "").strip()
    method = (method or "").strip()
    if not reason or not method:
        raise AccountingValidationError("Revaluation reason and method are required")

    with transaction.atomic():
        locked_asset = FixedAsset.objects.select_for_update().get(pk=asset.pk)
        previous = money(locked_asset.current_value)

        return RevaluationRecord.objects.create(
            asset=locked_asset,
            revaluation_date=revaluation_date or timezone.localdate(),
            previous_value=previous,
            new_value=new_value,
            delta=money(new_value - previous),
            reason=reason,
            method=method,
            appraiser=(appraiser or "").strip(),
            notes=notes or "",
            status=RevaluationStatus.PENDING,
        )


def _set_status(record: RevaluationRecord, target: str) -> RevaluationRecord:
    with transaction.atomic():
        locked = _lock(record)
        REVALUATION_LIFECYCLE.apply(locked, target)
        locked.save(update_fields=["status"])
    return locked


def submit_for_review(record: RevaluationRecord) -> RevaluationRecord:
    return _set_status(record, RevaluationStatus.IN_REVIEW)


def reject(record: RevaluationRecord) -> RevaluationRecord:
    return _set_status(record, RevaluationStatus.REJECTED)


def _resolve_counter_account(asset: FixedAsset, *, gain: bool):
    category = asset.category
    if gain:
        code, error = category.revaluation_gain_account_code, MissingGainAccountError
        label = "gain"
    else:
        code, error = category.revaluation_loss_account_code, MissingLossAccountError
        label = "loss"

    if not (code or "").strip():
        raise error(f"No revaluation {label} account configured for asset category '{category.name}'")
    try:
        return resolve(code)
    except AccountNotFound as exc:
        raise error(
            f"Revaluation {label} account '{code}' of category '{category.name}' does not exist"
        ) from exc


def _apply_approval(record: RevaluationRecord, *, approved_by: str, entry=None) -> None:
    asset = record.asset
    asset.current_value = record.new_value
    asset.save(update_fields=["current_value", "updated_at"])

    record.status = RevaluationStatus.APPROVED
    record.approved_by = approved_by
    record.approved_at = timezone.now()
    record.journal_entry = entry
    record.save(update_fields=["status", "approved_by", "approved_at", "journal_entry"])


def approve(record: RevaluationRecord, *, approved_by: str = ""):
    """
    Returns the posted JournalEntry, or None when the delta is negligible.
    """
    with transaction.atomic():
        locked = _lock(record)
        REVALUATION_LIFECYCLE.validate_transition(obj=locked, target_status=RevaluationStatus.APPROVED)

        asset = FixedAsset.objects.select_for_update().select_related("category").get(pk=locked.asset_id)
        locked.asset = asset

        delta = money(locked.new_value - locked.previous_value)
        log_extra = {"revaluation_id": locked.pk, "asset": asset.code, "delta": str(delta)}

        if abs(delta) < negligible_amount():
            _apply_approval(locked, approved_by=approved_by)
            logger.info("Revaluation approved without posting (negligible delta)", extra=log_extra)
            return None

        asset_account = resolve(asset.category.asset_account_code)
        amount = abs(delta)
        description = f"Revalorización {asset.code} - {asset.name}"

        if delta > ZERO:
            gain_account = _resolve_counter_account(asset, gain=True)
            lines = [
                CandidateLine(account=asset_account, debit=amount, description=description),
                CandidateLine(account=gain_account, credit=amount, description=description),
            ]
        else:
            loss_account = _resolve_counter_account(asset, gain=False)
            lines = [
                CandidateLine(account=loss_account, debit=amount, description=description),
                CandidateLine(account=asset_account, credit=amount, description=description),
            ]

        draft = build(
            lines,
            event_type=EVENT_TYPE,
            source_id=f"{asset.code}-{locked.pk}",
            period=locked.revaluation_date,
            entry_date=locked.revaluation_date,
            description=description,
            reference=f"Revalorización - {locked.reason}",
            source_type="revaluation",
        )
        if draft is NOOP:
            _apply_approval(locked, approved_by=approved_by)
            return None

        entry = post(
            draft,
            mark_source=lambda je: _apply_approval(locked, approved_by=approved_by, entry=je),
        )

    logger.info("Revaluation approved and posted", extra={**log_extra, "entry_number": entry.entry_number})
    return entry
