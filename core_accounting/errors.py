"""
Accounting Errors

Centralized domain errors for the chart of accounts and reporting engine.
An unbalanced report is not an error and has no class here.
"""

from typing import Optional


class AccountingError(Exception):
    """Base exception for all chart of accounts and reporting failures."""


# ============================================================
# VALIDATION (rejected before touching storage)
# ============================================================


class ValidationError(AccountingError, ValueError):
    """Raised on malformed input."""


class InvalidTaxonomyError(ValidationError):
    """Raised when an account type or detail type is not in the taxonomy."""

    def __init__(self, message: str, account_type: Optional[str] = None,
                 detail_type: Optional[str] = None):
        super().__init__(message)
        self.account_type = account_type
        self.detail_type = detail_type


class InvalidArgumentError(ValidationError):
    """Raised on a malformed or inconsistent request argument."""

    def __init__(self, message: str, field: Optional[str] = None, value=None):
        super().__init__(message)
        self.field = field
        self.value = value


# ============================================================
# LOOKUP
# ============================================================


class NotFoundError(AccountingError, LookupError):
    """Raised when an entity does not exist in the requesting tenant."""

    def __init__(self, message: str, entity: str = "account", entity_id: Optional[str] = None):
        super().__init__(message)
        self.entity = entity
        self.entity_id = entity_id


# ============================================================
# CONFLICTS
# ============================================================


class ConflictError(AccountingError):
    """Raised when a uniqueness constraint would be broken."""

    def __init__(self, message: str, value: Optional[str] = None):
        super().__init__(message)
        self.value = value


class DuplicateAccountNumberError(ConflictError):
    """Account number already used in the tenant."""


class DuplicateNameError(ConflictError):
    """Account name already used under the same parent."""


# ============================================================
# INVARIANT VIOLATIONS (rejected, never partially applied)
# ============================================================


class InvariantViolationError(AccountingError):
    """Raised when a mutation would break a chart of accounts invariant."""


class TypeMismatchError(InvariantViolationError):
    """Sub-account type differs from its parent's type."""


class DepthExceededError(InvariantViolationError):
    """Sub-account would be nested below the maximum depth."""

    def __init__(self, message: str, max_depth: int):
        super().__init__(message)
        self.max_depth = max_depth


class AccountDeletionError(InvariantViolationError):
    """Account is a system account, has sub-accounts, or carries a balance."""

    def __init__(self, message: str, reason: str):
        super().__init__(message)
        self.reason = reason
