"""
Report service: financial statements derived from the ledger.

Every report is a read-only fold over the entries of posted
vouchers. Cancelled vouchers never contribute. Reports reflect
whatever was committed when they ran; they are snapshots, not
settlement guarantees.
"""

import datetime as dt

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from station_ledger.config import get_settings
from station_ledger.exceptions import ValidationError
from station_ledger.models.enums import (
    AccountStatus,
    AccountType,
    BalanceType,
    EXPENSE_ACCOUNT_TYPES,
    INCOME_ACCOUNT_TYPES,
    NormalBalanceSide,
    VoucherStatus,
    VoucherType,
)
from station_ledger.models.journal_entry import JournalEntry
from station_ledger.models.journal_voucher import JournalVoucher
from station_ledger.models.ledger_account import LedgerAccount
from station_ledger.schemas.report import (
    BalanceSheet,
    CashFlow,
    CashFlowLine,
    GeneralLedger,
    LedgerAccountSummary,
    LedgerTransaction,
    ProfitLoss,
    ReportLine,
    ReportSection,
    TrialBalance,
)
from station_ledger.schemas.voucher import JournalEntryResponse
from station_ledger.services.balance_service import BalanceService
from station_ledger.services.money import ZERO, to_money

RETAINED_EARNINGS = "Retained Earnings"


def validate_date_range(start: dt.date, end: dt.date) -> None:
    if start > end:
        raise ValidationError(
            f"Start date {start.isoformat()} cannot be later than "
            f"end date {end.isoformat()}"
        )


class ReportService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.balance_service = BalanceService(db)
        self.account_service = self.balance_service.account_service
        settings = get_settings()
        self.tolerance = settings.BALANCE_TOLERANCE
        self.epoch = settings.REPORT_EPOCH

    async def get_trial_balance(
        self, as_of_date: dt.date | None = None
    ) -> TrialBalance:
        """
        Balances of all active accounts with a non-zero balance.

        is_balanced is a health signal, not an enforced rule: an
        unbalanced trial balance means entries were damaged upstream.
        """
        accounts = await self.account_service.list_accounts(
            status=AccountStatus.ACTIVE
        )

        balances = []
        total_debits = ZERO
        total_credits = ZERO
        for account in accounts:
            balance = await self.balance_service.balance_of(account, as_of_date)
            if balance.balance == 0:
                continue
            balances.append(balance)
            if balance.balance_type == BalanceType.DEBIT:
                total_debits += balance.balance
            else:
                total_credits += balance.balance

        return TrialBalance(
            as_of_date=as_of_date or dt.date.today(),
            accounts=balances,
            total_debits=total_debits,
            total_credits=total_credits,
            is_balanced=abs(total_debits - total_credits) < self.tolerance,
        )

    async def _section(
        self,
        account_types: tuple[AccountType, ...],
        side: NormalBalanceSide,
        start: dt.date | None = None,
        end: dt.date | None = None,
    ) -> ReportSection:
        """
        Net movement per account on the given side, keeping only
        accounts whose net is positive.
        """
        result = await self.db.execute(
            select(LedgerAccount)
            .where(LedgerAccount.account_type.in_(account_types))
            .order_by(LedgerAccount.account_type, LedgerAccount.name)
        )
        accounts = result.scalars().all()

        lines = []
        total = ZERO
        for account in accounts:
            debits, credits = await self.balance_service.sum_entries(
                account.id, start=start, end=end
            )
            if side is NormalBalanceSide.DEBIT:
                amount = debits - credits
            else:
                amount = credits - debits
            if amount > 0:
                lines.append(ReportLine(
                    id=account.id,
                    name=account.name,
                    account_type=account.account_type.value,
                    amount=amount,
                ))
                total += amount

        return ReportSection(accounts=lines, total=total)

    async def get_profit_loss(
        self, start_date: dt.date, end_date: dt.date
    ) -> ProfitLoss:
        """
        Income and expenses for a period.

        Customer accounts are the station's income sources; direct
        and indirect expense accounts are its costs.
        """
        validate_date_range(start_date, end_date)

        income = await self._section(
            INCOME_ACCOUNT_TYPES, NormalBalanceSide.CREDIT,
            start=start_date, end=end_date,
        )
        expenses = await self._section(
            EXPENSE_ACCOUNT_TYPES, NormalBalanceSide.DEBIT,
            start=start_date, end=end_date,
        )

        return ProfitLoss(
            start_date=start_date,
            end_date=end_date,
            income=income,
            expenses=expenses,
            net_profit=income.total - expenses.total,
        )

    async def get_balance_sheet(self, as_of_date: dt.date) -> BalanceSheet:
        """
        Assets, liabilities and equity as of a date.

        Equity is a single Retained Earnings line equal to the
        all-time net profit (floored at zero). Drawings and
        distributions are not subtracted.
        """
        assets = await self._section(
            (AccountType.ASSET,), NormalBalanceSide.DEBIT, end=as_of_date
        )
        liabilities = await self._section(
            (AccountType.LIABILITY,), NormalBalanceSide.CREDIT, end=as_of_date
        )

        profit_loss = await self.get_profit_loss(self.epoch, as_of_date)
        retained = max(ZERO, profit_loss.net_profit)
        equity = ReportSection(
            accounts=[ReportLine(
                id=0,
                name=RETAINED_EARNINGS,
                account_type="Equity",
                amount=retained,
            )],
            total=retained,
        )

        return BalanceSheet(
            as_of_date=as_of_date,
            assets=assets,
            liabilities=liabilities,
            equity=equity,
        )

    async def get_general_ledger(
        self,
        account_id: int,
        start_date: dt.date,
        end_date: dt.date,
    ) -> GeneralLedger:
        """
        Account statement with a running balance.

        All balances here are debit minus credit, whatever the
        account type: a credit-normal account runs negative.
        """
        validate_date_range(start_date, end_date)
        account = await self.account_service.get_account(account_id)

        opening_debits, opening_credits = await self.balance_service.sum_entries(
            account_id, before=start_date
        )
        opening_balance = opening_debits - opening_credits

        result = await self.db.execute(
            select(JournalEntry, JournalVoucher)
            .join(JournalVoucher, JournalEntry.voucher_id == JournalVoucher.id)
            .where(
                JournalEntry.ledger_account_id == account_id,
                JournalVoucher.status == VoucherStatus.POSTED,
                JournalVoucher.date >= start_date,
                JournalVoucher.date <= end_date,
            )
            .order_by(
                JournalVoucher.date, JournalVoucher.id, JournalEntry.id
            )
        )

        running_balance = opening_balance
        transactions = []
        for entry, voucher in result.all():
            debit = to_money(entry.debit_amount)
            credit = to_money(entry.credit_amount)
            running_balance += debit - credit
            transactions.append(LedgerTransaction(
                entry_id=entry.id,
                voucher_id=voucher.id,
                date=voucher.date,
                voucher_number=voucher.voucher_number,
                voucher_type=voucher.voucher_type,
                narration=entry.narration or voucher.narration,
                debit_amount=debit,
                credit_amount=credit,
                running_balance=running_balance,
            ))

        return GeneralLedger(
            account=LedgerAccountSummary.model_validate(account),
            start_date=start_date,
            end_date=end_date,
            opening_balance=opening_balance,
            transactions=transactions,
            closing_balance=running_balance,
        )

    async def get_cash_flow(
        self, start_date: dt.date, end_date: dt.date
    ) -> CashFlow:
        """
        Receipts versus payments for a period.

        Journal vouchers move value between accounts without cash
        and are left out.
        """
        validate_date_range(start_date, end_date)

        result = await self.db.execute(
            select(JournalVoucher)
            .options(selectinload(JournalVoucher.entries))
            .where(
                JournalVoucher.status == VoucherStatus.POSTED,
                JournalVoucher.date >= start_date,
                JournalVoucher.date <= end_date,
            )
            .order_by(JournalVoucher.date, JournalVoucher.id)
        )

        receipts = []
        payments = []
        total_receipts = ZERO
        total_payments = ZERO
        for voucher in result.scalars().all():
            if voucher.voucher_type == VoucherType.JOURNAL:
                continue
            line = CashFlowLine(
                voucher_id=voucher.id,
                date=voucher.date,
                voucher_number=voucher.voucher_number,
                narration=voucher.narration,
                amount=to_money(voucher.total_amount),
                entries=[
                    JournalEntryResponse.model_validate(e)
                    for e in voucher.entries
                ],
            )
            if voucher.voucher_type == VoucherType.RECEIPT:
                receipts.append(line)
                total_receipts += line.amount
            else:
                payments.append(line)
                total_payments += line.amount

        return CashFlow(
            start_date=start_date,
            end_date=end_date,
            receipts=receipts,
            payments=payments,
            total_receipts=total_receipts,
            total_payments=total_payments,
            net_cash_flow=total_receipts - total_payments,
        )
