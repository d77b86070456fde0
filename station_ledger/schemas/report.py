"""
Pydantic schemas for ledger reports.

Reports are read-only snapshots derived from posted vouchers.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel

from station_ledger.models.enums import AccountType, VoucherType
from station_ledger.schemas.account import AccountBalance
from station_ledger.schemas.voucher import JournalEntryResponse


class TrialBalance(BaseModel):
    as_of_date: dt.date
    accounts: list[AccountBalance]
    total_debits: Decimal
    total_credits: Decimal
    is_balanced: bool


class ReportLine(BaseModel):
    """
    One account's contribution to a report section.

    account_type is a plain string because the synthesized
    "Retained Earnings" line is typed "Equity", which is not a
    ledger account type.
    """
    id: int
    name: str
    account_type: str
    amount: Decimal


class ReportSection(BaseModel):
    accounts: list[ReportLine] = []
    total: Decimal = Decimal("0.00")


class ProfitLoss(BaseModel):
    start_date: dt.date
    end_date: dt.date
    income: ReportSection
    expenses: ReportSection
    net_profit: Decimal


class BalanceSheet(BaseModel):
    as_of_date: dt.date
    assets: ReportSection
    liabilities: ReportSection
    equity: ReportSection


class LedgerAccountSummary(BaseModel):
    id: int
    name: str
    account_type: AccountType
    description: str | None

    model_config = {"from_attributes": True}


class LedgerTransaction(BaseModel):
    """A journal entry line annotated with the running balance."""
    entry_id: int
    voucher_id: int
    date: dt.date
    voucher_number: str
    voucher_type: VoucherType
    narration: str | None
    debit_amount: Decimal
    credit_amount: Decimal
    running_balance: Decimal


class GeneralLedger(BaseModel):
    """
    Account statement for a period.

    Balances are signed debit-minus-credit: positive means a debit
    balance, negative a credit balance, regardless of account type.
    """
    account: LedgerAccountSummary
    start_date: dt.date
    end_date: dt.date
    opening_balance: Decimal
    transactions: list[LedgerTransaction]
    closing_balance: Decimal


class CashFlowLine(BaseModel):
    voucher_id: int
    date: dt.date
    voucher_number: str
    narration: str | None
    amount: Decimal
    entries: list[JournalEntryResponse]


class CashFlow(BaseModel):
    start_date: dt.date
    end_date: dt.date
    receipts: list[CashFlowLine]
    payments: list[CashFlowLine]
    total_receipts: Decimal
    total_payments: Decimal
    net_cash_flow: Decimal


class IntegrityIssue(BaseModel):
    type: str
    message: str
    voucher_id: int | None = None
    voucher_number: str | None = None


class IntegrityReport(BaseModel):
    is_valid: bool
    issues: list[IntegrityIssue]
    trial_balance: TrialBalance
    checked_at: dt.datetime
