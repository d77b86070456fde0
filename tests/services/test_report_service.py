"""
Tests for the ReportService.

Tests cover:
- Trial balance totals and the balanced flag
- General ledger opening and running balances
- Profit and loss sections
- Balance sheet with retained earnings
- Cash flow partitioning of receipts and payments
"""

import datetime as dt
from decimal import Decimal

import pytest

from station_ledger.exceptions import NotFoundError, ValidationError
from station_ledger.models.enums import (
    AccountStatus,
    AccountType,
    BalanceType,
    VoucherType,
)
from station_ledger.services.account_service import AccountService
from station_ledger.services.balance_service import BalanceService
from station_ledger.services.posting_service import PostingService
from station_ledger.services.report_service import (
    RETAINED_EARNINGS,
    ReportService,
)
from station_ledger.schemas.account import AccountCreate, AccountUpdate
from station_ledger.schemas.voucher import JournalEntryCreate, VoucherHeader


DAY_1 = dt.date(2024, 5, 1)
DAY_2 = dt.date(2024, 5, 2)


async def make_account(db_session, name, account_type):
    return await AccountService(db_session).create_account(AccountCreate(
        name=name, account_type=account_type
    ))


async def transfer(
    db_session, debit_account, credit_account, amount, date,
    voucher_type=VoucherType.JOURNAL, narration=None,
):
    return await PostingService(db_session).post_voucher(
        VoucherHeader(voucher_type=voucher_type, date=date, narration=narration),
        [
            JournalEntryCreate(
                ledger_account_id=debit_account.id,
                debit_amount=Decimal(amount),
            ),
            JournalEntryCreate(
                ledger_account_id=credit_account.id,
                credit_amount=Decimal(amount),
            ),
        ],
    )


@pytest.fixture
async def books(db_session):
    """A small set of accounts covering every report section."""
    books = {
        "cash": await make_account(db_session, "Cash Drawer", AccountType.ASSET),
        "bank": await make_account(db_session, "City Bank", AccountType.BANK),
        "loan": await make_account(db_session, "Owner Loan", AccountType.LIABILITY),
        "sales": await make_account(db_session, "Fuel Sales", AccountType.CUSTOMER),
        "fuel": await make_account(
            db_session, "Fuel Purchases", AccountType.DIRECT_EXPENSE
        ),
        "rent": await make_account(
            db_session, "Rent", AccountType.INDIRECT_EXPENSE
        ),
        "vendor": await make_account(db_session, "Fuel Supplier", AccountType.VENDOR),
    }
    await db_session.commit()
    return books


class TestTrialBalance:

    async def test_balanced_after_posting(self, db_session, books):
        await transfer(db_session, books["cash"], books["loan"], "1000.00", DAY_1)
        await transfer(db_session, books["fuel"], books["cash"], "400.00", DAY_1)

        report = await ReportService(db_session).get_trial_balance()

        assert report.is_balanced is True
        assert report.total_debits == Decimal("1000.00")
        assert report.total_credits == Decimal("1000.00")
        names = {line.account_name: line for line in report.accounts}
        assert names["Cash Drawer"].balance == Decimal("600.00")
        assert names["Cash Drawer"].balance_type == BalanceType.DEBIT
        assert names["Owner Loan"].balance_type == BalanceType.CREDIT

    async def test_zero_balance_accounts_are_omitted(self, db_session, books):
        await transfer(db_session, books["cash"], books["loan"], "10.00", DAY_1)

        report = await ReportService(db_session).get_trial_balance()

        assert {line.account_name for line in report.accounts} == {
            "Cash Drawer", "Owner Loan",
        }

    async def test_as_of_date_excludes_later_vouchers(self, db_session, books):
        await transfer(db_session, books["cash"], books["loan"], "10.00", DAY_2)

        report = await ReportService(db_session).get_trial_balance(DAY_1)

        assert report.accounts == []
        assert report.is_balanced is True


class TestGeneralLedger:

    async def test_customer_running_balance(self, db_session, books):
        customer = books["sales"]
        await transfer(db_session, books["cash"], customer, "300.00", DAY_1)
        await transfer(db_session, customer, books["cash"], "100.00", DAY_2)

        ledger = await ReportService(db_session).get_general_ledger(
            customer.id, DAY_1, DAY_2
        )

        assert ledger.opening_balance == Decimal("0.00")
        assert [t.running_balance for t in ledger.transactions] == [
            Decimal("-300.00"), Decimal("-200.00"),
        ]
        assert ledger.closing_balance == Decimal("-200.00")

        balance = await BalanceService(db_session).get_account_balance(
            customer.id, DAY_2
        )
        assert balance.balance == Decimal("200.00")
        assert balance.balance_type == BalanceType.CREDIT

    async def test_opening_balance_covers_earlier_vouchers(
        self, db_session, books
    ):
        cash = books["cash"]
        await transfer(db_session, cash, books["loan"], "50.00", DAY_1)
        await transfer(db_session, cash, books["loan"], "25.00", DAY_2)

        ledger = await ReportService(db_session).get_general_ledger(
            cash.id, DAY_2, DAY_2
        )

        assert ledger.opening_balance == Decimal("50.00")
        assert len(ledger.transactions) == 1
        assert ledger.closing_balance == Decimal("75.00")

    async def test_closing_matches_balance_for_debit_account(
        self, db_session, books
    ):
        cash = books["cash"]
        await transfer(db_session, cash, books["loan"], "90.00", DAY_1)
        await transfer(db_session, books["rent"], cash, "30.00", DAY_2)

        ledger = await ReportService(db_session).get_general_ledger(
            cash.id, DAY_1, DAY_2
        )
        balance = await BalanceService(db_session).get_account_balance(
            cash.id, DAY_2
        )

        assert ledger.closing_balance == balance.balance

    async def test_narration_falls_back_to_voucher(self, db_session, books):
        await transfer(
            db_session, books["cash"], books["loan"], "5.00", DAY_1,
            narration="Float for the night shift",
        )

        ledger = await ReportService(db_session).get_general_ledger(
            books["cash"].id, DAY_1, DAY_1
        )

        assert ledger.transactions[0].narration == "Float for the night shift"

    async def test_reversed_range_rejected(self, db_session, books):
        with pytest.raises(ValidationError, match="cannot be later"):
            await ReportService(db_session).get_general_ledger(
                books["cash"].id, DAY_2, DAY_1
            )

    async def test_unknown_account_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            await ReportService(db_session).get_general_ledger(
                999, DAY_1, DAY_2
            )


class TestProfitLoss:

    async def test_income_minus_expenses(self, db_session, books):
        await transfer(db_session, books["cash"], books["sales"], "900.00", DAY_1)
        await transfer(db_session, books["fuel"], books["cash"], "500.00", DAY_1)
        await transfer(db_session, books["rent"], books["bank"], "150.00", DAY_2)

        report = await ReportService(db_session).get_profit_loss(DAY_1, DAY_2)

        assert report.income.total == Decimal("900.00")
        assert report.expenses.total == Decimal("650.00")
        assert report.net_profit == Decimal("250.00")
        assert [line.name for line in report.expenses.accounts] == [
            "Fuel Purchases", "Rent",
        ]

    async def test_inactive_accounts_still_count(self, db_session, books):
        await transfer(db_session, books["rent"], books["cash"], "70.00", DAY_1)
        await AccountService(db_session).update_account(
            books["rent"].id, AccountUpdate(status=AccountStatus.INACTIVE)
        )

        report = await ReportService(db_session).get_profit_loss(DAY_1, DAY_2)

        assert report.expenses.total == Decimal("70.00")

    async def test_reversed_range_rejected(self, db_session):
        with pytest.raises(ValidationError):
            await ReportService(db_session).get_profit_loss(DAY_2, DAY_1)


class TestBalanceSheet:

    async def test_sections_and_retained_earnings(self, db_session, books):
        await transfer(db_session, books["cash"], books["loan"], "1000.00", DAY_1)
        await transfer(db_session, books["cash"], books["sales"], "300.00", DAY_1)
        await transfer(db_session, books["fuel"], books["cash"], "100.00", DAY_2)

        sheet = await ReportService(db_session).get_balance_sheet(DAY_2)

        assert sheet.assets.total == Decimal("1200.00")
        assert sheet.liabilities.total == Decimal("1000.00")
        assert sheet.equity.total == Decimal("200.00")
        retained = sheet.equity.accounts[0]
        assert retained.name == RETAINED_EARNINGS
        assert retained.id == 0
        assert retained.account_type == "Equity"

    async def test_losses_floor_retained_earnings_at_zero(
        self, db_session, books
    ):
        await transfer(db_session, books["rent"], books["cash"], "40.00", DAY_1)

        sheet = await ReportService(db_session).get_balance_sheet(DAY_1)

        assert sheet.equity.total == Decimal("0.00")

    async def test_bank_and_vendor_accounts_are_left_out(
        self, db_session, books
    ):
        await transfer(db_session, books["bank"], books["vendor"], "60.00", DAY_1)

        sheet = await ReportService(db_session).get_balance_sheet(DAY_1)

        assert sheet.assets.accounts == []
        assert sheet.liabilities.accounts == []


class TestCashFlow:

    async def test_receipts_and_payments_are_split(self, db_session, books):
        await transfer(
            db_session, books["cash"], books["sales"], "500.00", DAY_1,
            voucher_type=VoucherType.RECEIPT,
        )
        await transfer(
            db_session, books["fuel"], books["cash"], "200.00", DAY_2,
            voucher_type=VoucherType.PAYMENT,
        )
        await transfer(
            db_session, books["bank"], books["cash"], "100.00", DAY_2,
            voucher_type=VoucherType.JOURNAL,
        )

        report = await ReportService(db_session).get_cash_flow(DAY_1, DAY_2)

        assert report.total_receipts == Decimal("500.00")
        assert report.total_payments == Decimal("200.00")
        assert report.net_cash_flow == Decimal("300.00")
        assert len(report.receipts) == 1
        assert len(report.payments) == 1
        assert len(report.receipts[0].entries) == 2

    async def test_cancelled_vouchers_are_left_out(self, db_session, books):
        voucher = await transfer(
            db_session, books["cash"], books["sales"], "500.00", DAY_1,
            voucher_type=VoucherType.RECEIPT,
        )
        await PostingService(db_session).cancel_voucher(voucher.id)

        report = await ReportService(db_session).get_cash_flow(DAY_1, DAY_2)

        assert report.receipts == []
        assert report.net_cash_flow == Decimal("0.00")
