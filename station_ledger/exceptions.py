"""
Typed exceptions for the ledger.

Callers catch by type, not by parsing messages. Every exception
carries a machine-readable code and the HTTP status the API layer
should answer with.

    LedgerError
    +-- ValidationError
    |   +-- UnbalancedVoucherError
    +-- NotFoundError
    +-- ConflictError
        +-- DuplicateAccountError
        +-- ProtectedAccountError
        +-- HasEntriesError
        +-- AlreadyCancelledError
        +-- DuplicateVoucherError
"""

from decimal import Decimal


class LedgerError(Exception):
    """Base class for all ledger domain errors."""

    code: str = "LEDGER_ERROR"
    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(LedgerError):
    """Malformed input. Raised before anything is written."""

    code = "VALIDATION_ERROR"
    status_code = 400


class UnbalancedVoucherError(ValidationError):
    """Voucher entries do not satisfy the double-entry rules."""

    code = "UNBALANCED_VOUCHER"

    def __init__(
        self,
        message: str,
        total_debits: Decimal = Decimal("0"),
        total_credits: Decimal = Decimal("0"),
        entry_index: int | None = None,
    ):
        self.total_debits = total_debits
        self.total_credits = total_credits
        self.difference = abs(total_debits - total_credits)
        self.entry_index = entry_index
        super().__init__(message)


class NotFoundError(LedgerError):
    code = "NOT_FOUND"
    status_code = 404


class ConflictError(LedgerError):
    """The request is well formed but blocked by a business rule."""

    code = "CONFLICT"
    status_code = 409


class DuplicateAccountError(ConflictError):
    code = "DUPLICATE_ACCOUNT"


class ProtectedAccountError(ConflictError):
    code = "PROTECTED_ACCOUNT"


class HasEntriesError(ConflictError):
    code = "ACCOUNT_HAS_ENTRIES"

    def __init__(self, message: str, entry_count: int = 0):
        self.entry_count = entry_count
        super().__init__(message)


class AlreadyCancelledError(ConflictError):
    code = "ALREADY_CANCELLED"


class DuplicateVoucherError(ConflictError):
    code = "DUPLICATE_VOUCHER"
