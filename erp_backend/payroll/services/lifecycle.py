"""
PAYROLL PERIOD LIFECYCLE

open -> processing           calculate_period
processing -> closed         close_period (posts the payroll entry)
processing -> open           reopen_period (explicit rollback)
closed -> paid               mark_paid (terminal)
"""

from accounting.services.document_lifecycle import DocumentLifecycle
from payroll.models import PayrollPeriodStatus

PAYROLL_PERIOD_LIFECYCLE = DocumentLifecycle(
    name="PayrollPeriod",
    states=PayrollPeriodStatus,
    transitions={
        PayrollPeriodStatus.OPEN: {PayrollPeriodStatus.PROCESSING},
        PayrollPeriodStatus.PROCESSING: {PayrollPeriodStatus.CLOSED, PayrollPeriodStatus.OPEN},
        PayrollPeriodStatus.CLOSED: {PayrollPeriodStatus.PAID},
        PayrollPeriodStatus.PAID: set(),
    },
    posting_states={PayrollPeriodStatus.CLOSED},
)
