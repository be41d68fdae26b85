# accounting/services/journal_builder.py

"""
======================================================
PATH: accounting/services/journal_builder.py
======================================================
JOURNAL ENTRY BUILDER

Turns candidate debit/credit lines into a balanced, immutable DraftEntry.
It never touches the database; the posting engine persists drafts.

Rules:
- amounts are rounded half-up to 2dp
- negative amounts, or a line with both sides set -> AccountingValidationError
- zero lines are dropped
- Σdebit must equal Σcredit exactly (minor unit) -> else UnbalancedEntryError
- total movement below LEDGER_NEGLIGIBLE_AMOUNT -> NOOP (callers skip posting)

entry_number is derived from (event type, source id, period) so the same
business event always maps to the same key. The engine uses it for idempotency.
"""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Iterable

from django.conf import settings

from accounting.services.exceptions import (
    AccountingValidationError,
    UnbalancedEntryError,
)
from accounting.services.money import ZERO, money

MAX_SOURCE_KEY_LENGTH = 40
_UNSAFE = re.compile(r"[^A-Z0-9]+")


@dataclass(frozen=True)
class CandidateLine:
    account: Any
    debit: Any = ZERO
    credit: Any = ZERO
    description: str = ""


@dataclass(frozen=True)
class DraftLine:
    line_number: int
    account: Any
    debit: Decimal
    credit: Decimal
    description: str = ""


@dataclass(frozen=True)
class DraftEntry:
    entry_number: str
    entry_date: date
    description: str
    lines: tuple[DraftLine, ...]
    total_debit: Decimal
    total_credit: Decimal
    reference: str = ""
    source_type: str = ""
    source_id: str = ""
    meta: dict = field(default_factory=dict, compare=False)


class _NoOp:
    """Returned by build() when the entry would move (almost) nothing."""

    __slots__ = ()

    def __bool__(self):
        return False

    def __repr__(self):
        return "NOOP"


NOOP = _NoOp()


def negligible_amount() -> Decimal:
    return money(getattr(settings, "LEDGER_NEGLIGIBLE_AMOUNT", "0.01"))


# ------------------------------------------------------------
# ENTRY NUMBER
# ------------------------------------------------------------


def _period_key(period) -> str:
    if period is None or period == "":
        return ""
    if isinstance(period, date):
        return period.strftime("%Y%m")

    text = str(period).strip()
    match = re.fullmatch(r"(\d{4})-?(\d{2})(?:-\d{2})?", text)
    if not match:
        raise AccountingValidationError(f"Invalid period {period!r}; expected YYYY-MM")
    return f"{match.group(1)}{match.group(2)}"


def _source_key(source_id) -> str:
    text = _UNSAFE.sub("-", str(source_id).strip().upper()).strip("-")
    if not text:
        raise AccountingValidationError("source_id is required to derive an entry number")
    if len(text) > MAX_SOURCE_KEY_LENGTH:
        text = hashlib.sha1(text.encode("utf-8")).hexdigest()[:24].upper()
    return text


def derive_entry_number(event_type: str, source_id, period=None) -> str:
    """
    <EVENT>-<YYYYMM>-<SOURCE>, e.g. "RV-202401-ACT-0007".
    Deterministic: same event, same number.
    """
    event = _UNSAFE.sub("", str(event_type or "").strip().upper())
    if not event:
        raise AccountingValidationError("event_type is required to derive an entry number")

    parts = [event]
    period_key = _period_key(period)
    if period_key:
        parts.append(period_key)
    parts.append(_source_key(source_id))
    return "-".join(parts)


# ------------------------------------------------------------
# LINES
# ------------------------------------------------------------


def merge_by_account(lines: Iterable[CandidateLine]) -> list[CandidateLine]:
    """
    Combine candidate lines with the same account and side (keeps journal tidy).
    Order of first appearance is preserved.
    """
    merged: dict[tuple[Any, str], dict[str, Any]] = {}
    for line in lines:
        debit = money(line.debit)
        credit = money(line.credit)
        side = "debit" if debit > 0 else "credit"
        slot = merged.setdefault(
            (line.account.pk, side),
            {"account": line.account, "debit": ZERO, "credit": ZERO, "description": line.description},
        )
        slot["debit"] = money(slot["debit"] + debit)
        slot["credit"] = money(slot["credit"] + credit)

    return [CandidateLine(**slot) for slot in merged.values()]


def _normalize(lines: Iterable[CandidateLine]) -> list[DraftLine]:
    out: list[DraftLine] = []
    chart_id = None

    for line in lines:
        account = line.account
        if account is None:
            raise AccountingValidationError("Journal line missing account")
        if not getattr(account, "is_active", True):
            raise AccountingValidationError(f"Account {account.code} is inactive")

        debit = money(line.debit)
        credit = money(line.credit)

        if debit < 0 or credit < 0:
            raise AccountingValidationError("Debit or credit cannot be negative")
        if debit > 0 and credit > 0:
            raise AccountingValidationError("A journal line cannot have both debit and credit")
        if debit == 0 and credit == 0:
            continue

        if chart_id is None:
            chart_id = account.chart_id
        elif account.chart_id != chart_id:
            raise AccountingValidationError("Cross-chart journal entries are not allowed")

        out.append(
            DraftLine(
                line_number=len(out) + 1,
                account=account,
                debit=debit,
                credit=credit,
                description=(line.description or "").strip(),
            )
        )
    return out


# ------------------------------------------------------------
# BUILD
# ------------------------------------------------------------


def build(
    candidate_lines: Iterable[CandidateLine],
    *,
    event_type: str,
    source_id,
    period=None,
    entry_date: date,
    description: str,
    reference: str = "",
    source_type: str = "",
) -> DraftEntry | _NoOp:
    description = (description or "").strip()
    if not description:
        raise AccountingValidationError("Journal entry description is required")
    if entry_date is None:
        raise AccountingValidationError("entry_date is required")

    entry_number = derive_entry_number(event_type, source_id, period)
    lines = _normalize(candidate_lines)

    total_debit = money(sum((ln.debit for ln in lines), ZERO))
    total_credit = money(sum((ln.credit for ln in lines), ZERO))

    if total_debit != total_credit:
        raise UnbalancedEntryError(
            f"Journal entry {entry_number} not balanced: debits={total_debit} credits={total_credit}"
        )

    if total_debit < negligible_amount():
        return NOOP

    return DraftEntry(
        entry_number=entry_number,
        entry_date=entry_date,
        description=description,
        lines=tuple(lines),
        total_debit=total_debit,
        total_credit=total_credit,
        reference=(reference or "").strip(),
        source_type=(source_type or event_type).strip(),
        source_id=str(source_id).strip()[:64],
    )
