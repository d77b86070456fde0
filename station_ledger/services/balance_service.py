"""
Balance service: account balances derived from journal entries.

Balances are never stored. They are always recomputed from the
entries of posted vouchers, filtered by date, so a balance can
never drift from the entries that justify it.
"""

import datetime as dt
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from station_ledger.models.enums import (
    AccountType,
    BalanceType,
    NormalBalanceSide,
    VoucherStatus,
)
from station_ledger.models.journal_entry import JournalEntry
from station_ledger.models.journal_voucher import JournalVoucher
from station_ledger.models.ledger_account import LedgerAccount
from station_ledger.schemas.account import AccountBalance
from station_ledger.services.account_service import AccountService
from station_ledger.services.money import to_money


def natural_balance(
    account_type: AccountType,
    total_debits: Decimal,
    total_credits: Decimal,
) -> Decimal:
    """
    Signed balance in the account type's own direction.

    Debit-normal (Asset, Bank, expenses): debits - credits
    Credit-normal (Liability, Customer, Vendor): credits - debits
    """
    if account_type.normal_side is NormalBalanceSide.DEBIT:
        return total_debits - total_credits
    return total_credits - total_debits


def balance_type_for(account_type: AccountType, balance: Decimal) -> BalanceType:
    """A non-negative natural balance sits on the normal side."""
    side = account_type.normal_side
    return side if balance >= 0 else side.opposite


class BalanceService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.account_service = AccountService(db)

    async def sum_entries(
        self,
        account_id: int,
        start: dt.date | None = None,
        end: dt.date | None = None,
        before: dt.date | None = None,
    ) -> tuple[Decimal, Decimal]:
        """
        Total debits and credits on an account from posted vouchers.

        start/end bound the voucher date inclusively; before is an
        exclusive upper bound (used for opening balances).
        """
        query = (
            select(
                func.coalesce(func.sum(JournalEntry.debit_amount), 0),
                func.coalesce(func.sum(JournalEntry.credit_amount), 0),
            )
            .select_from(JournalEntry)
            .join(JournalVoucher, JournalEntry.voucher_id == JournalVoucher.id)
            .where(
                JournalEntry.ledger_account_id == account_id,
                JournalVoucher.status == VoucherStatus.POSTED,
            )
        )
        if start is not None:
            query = query.where(JournalVoucher.date >= start)
        if end is not None:
            query = query.where(JournalVoucher.date <= end)
        if before is not None:
            query = query.where(JournalVoucher.date < before)

        total_debits, total_credits = (await self.db.execute(query)).one()
        return to_money(total_debits), to_money(total_credits)

    async def balance_of(
        self,
        account: LedgerAccount,
        as_of_date: dt.date | None = None,
    ) -> AccountBalance:
        """Balance of an already loaded account."""
        total_debits, total_credits = await self.sum_entries(
            account.id, end=as_of_date
        )
        balance = natural_balance(
            account.account_type, total_debits, total_credits
        )
        return AccountBalance(
            account_id=account.id,
            account_name=account.name,
            account_type=account.account_type,
            total_debits=total_debits,
            total_credits=total_credits,
            balance=abs(balance),
            balance_type=balance_type_for(account.account_type, balance),
            as_of_date=as_of_date or dt.date.today(),
        )

    async def get_account_balance(
        self,
        account_id: int,
        as_of_date: dt.date | None = None,
    ) -> AccountBalance:
        """
        Balance of an account as of a date (inclusive), or today.

        Raises NotFoundError if the account does not exist.
        """
        account = await self.account_service.get_account(account_id)
        return await self.balance_of(account, as_of_date)
