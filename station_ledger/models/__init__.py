"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from station_ledger.models.base import Base
from station_ledger.models.enums import (
    AccountType,
    AccountStatus,
    NormalBalanceSide,
    VoucherType,
    VoucherStatus,
)
from station_ledger.models.ledger_account import LedgerAccount
from station_ledger.models.journal_voucher import JournalVoucher
from station_ledger.models.journal_entry import JournalEntry

__all__ = [
    "Base",
    "AccountType",
    "AccountStatus",
    "NormalBalanceSide",
    "VoucherType",
    "VoucherStatus",
    "LedgerAccount",
    "JournalVoucher",
    "JournalEntry",
]
