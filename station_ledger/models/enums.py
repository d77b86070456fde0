"""
Shared enumerations for database models.

Values are the human-facing strings stored in the database
and returned by the API ("Direct Expense", "Posted", ...).
"""

import enum


class AccountType(str, enum.Enum):
    """Ledger account classification used by the station back office."""
    ASSET = "Asset"
    LIABILITY = "Liability"
    CUSTOMER = "Customer"
    VENDOR = "Vendor"
    BANK = "Bank"
    DIRECT_EXPENSE = "Direct Expense"
    INDIRECT_EXPENSE = "Indirect Expense"

    @property
    def normal_side(self) -> "NormalBalanceSide":
        return NORMAL_BALANCE_SIDE[self]


class NormalBalanceSide(str, enum.Enum):
    """Which side increases an account's natural balance."""
    DEBIT = "Debit"
    CREDIT = "Credit"

    @property
    def opposite(self) -> "NormalBalanceSide":
        if self is NormalBalanceSide.DEBIT:
            return NormalBalanceSide.CREDIT
        return NormalBalanceSide.DEBIT


# Every AccountType must appear here; tests enforce full coverage.
NORMAL_BALANCE_SIDE: dict[AccountType, NormalBalanceSide] = {
    AccountType.ASSET: NormalBalanceSide.DEBIT,
    AccountType.BANK: NormalBalanceSide.DEBIT,
    AccountType.DIRECT_EXPENSE: NormalBalanceSide.DEBIT,
    AccountType.INDIRECT_EXPENSE: NormalBalanceSide.DEBIT,
    AccountType.LIABILITY: NormalBalanceSide.CREDIT,
    AccountType.CUSTOMER: NormalBalanceSide.CREDIT,
    AccountType.VENDOR: NormalBalanceSide.CREDIT,
}

# Balance type reported alongside an absolute balance
BalanceType = NormalBalanceSide

INCOME_ACCOUNT_TYPES = (AccountType.CUSTOMER,)
EXPENSE_ACCOUNT_TYPES = (
    AccountType.DIRECT_EXPENSE,
    AccountType.INDIRECT_EXPENSE,
)


class AccountStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class VoucherType(str, enum.Enum):
    PAYMENT = "Payment"
    RECEIPT = "Receipt"
    JOURNAL = "Journal"


class VoucherStatus(str, enum.Enum):
    """
    Voucher lifecycle: Posted -> Cancelled.

    Cancelled is terminal. Corrections are made with a new
    reversing voucher, never by re-posting.
    """
    POSTED = "Posted"
    CANCELLED = "Cancelled"


def enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    """Store enum values (not member names) in the database."""
    return [member.value for member in enum_cls]
