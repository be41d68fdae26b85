# accounting/services/exceptions.py

"""
ACCOUNTING SERVICE ERRORS

Centralized domain errors for the ledger core and every calculator that
feeds it (assets, payroll, quotes).
"""


class AccountingServiceError(Exception):
    """Base exception for all accounting service failures."""


# ------------------------------------------------------------
# Validation
# ------------------------------------------------------------


class AccountingValidationError(AccountingServiceError, ValueError):
    """Malformed input (negative amounts, bad periods, two-sided lines...)."""


class UnbalancedEntryError(AccountingValidationError):
    """Raised when Σdebit != Σcredit for a candidate entry."""


class InvalidTransitionError(AccountingValidationError):
    """Raised when a lifecycle refuses a status change."""


class FormulaError(AccountingValidationError):
    """Raised when a bonus formula falls outside the allowed grammar."""


# ------------------------------------------------------------
# Lookup
# ------------------------------------------------------------


class NotFoundError(AccountingServiceError):
    """Unknown asset / employee / period / entry."""


class AccountNotFound(NotFoundError):
    """Raised when the account directory has no active account for a code or key."""


# ------------------------------------------------------------
# Configuration
# ------------------------------------------------------------


class ConfigurationError(AccountingServiceError):
    """Missing setup with no safe default."""


class MissingGainAccountError(ConfigurationError):
    pass


class MissingLossAccountError(ConfigurationError):
    pass


# ------------------------------------------------------------
# Payroll
# ------------------------------------------------------------


class BudgetExceededError(AccountingServiceError):
    """Raised when one or more departments exceed their payroll budget."""

    def __init__(self, violations):
        self.violations = list(violations)
        names = ", ".join(str(v.get("department")) for v in self.violations)
        super().__init__(f"Payroll exceeds department budget: {names}")


# ------------------------------------------------------------
# Posting
# ------------------------------------------------------------


class ConflictError(AccountingServiceError):
    """Duplicate entry_number. Absorbed by the posting engine as an idempotent hit."""


class PostingFailedError(AccountingServiceError):
    """Raised when a posting transaction could not be committed."""
