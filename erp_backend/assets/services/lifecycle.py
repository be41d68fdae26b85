"""
ASSET DOCUMENT LIFECYCLES

Depreciation record: Calculado <-> Reversado (status only, no ledger effect)
Revaluation:         Pendiente -> {En Revisión, Aprobado, Rechazado}
                     En Revisión -> {Aprobado, Rechazado}
                     Aprobado / Rechazado are terminal

Only the move into Aprobado posts to the ledger.
"""

from accounting.services.document_lifecycle import DocumentLifecycle
from assets.models import DepreciationStatus, RevaluationStatus

DEPRECIATION_LIFECYCLE = DocumentLifecycle(
    name="DepreciationRecord",
    states=DepreciationStatus,
    transitions={
        DepreciationStatus.CALCULATED: {DepreciationStatus.REVERSED},
        DepreciationStatus.REVERSED: {DepreciationStatus.CALCULATED},
    },
)

REVALUATION_LIFECYCLE = DocumentLifecycle(
    name="RevaluationRecord",
    states=RevaluationStatus,
    transitions={
        RevaluationStatus.PENDING: {
            RevaluationStatus.IN_REVIEW,
            RevaluationStatus.APPROVED,
            RevaluationStatus.REJECTED,
        },
        RevaluationStatus.IN_REVIEW: {
            RevaluationStatus.APPROVED,
            RevaluationStatus.REJECTED,
        },
        RevaluationStatus.APPROVED: set(),
        RevaluationStatus.REJECTED: set(),
    },
    posting_states={RevaluationStatus.APPROVED},
)
