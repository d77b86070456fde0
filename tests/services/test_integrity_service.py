"""
Tests for the IntegrityService.

Entries are tampered with directly in the database to simulate
damage done outside the PostingService.
"""

import datetime as dt
from decimal import Decimal

from sqlalchemy import update

from station_ledger.models.enums import AccountType, VoucherType
from station_ledger.models.journal_entry import JournalEntry
from station_ledger.services.account_service import AccountService
from station_ledger.services.integrity_service import (
    IntegrityService,
    TRIAL_BALANCE_IMBALANCE,
    VOUCHER_IMBALANCE,
)
from station_ledger.services.posting_service import PostingService
from station_ledger.schemas.account import AccountCreate
from station_ledger.schemas.voucher import JournalEntryCreate, VoucherHeader


async def post_pair(db_session, amount):
    accounts = AccountService(db_session)
    cash = await accounts.get_or_create_account("Cash Drawer", AccountType.ASSET)
    loan = await accounts.get_or_create_account("Owner Loan", AccountType.LIABILITY)
    return await PostingService(db_session).post_voucher(
        VoucherHeader(voucher_type=VoucherType.JOURNAL, date=dt.date(2024, 6, 1)),
        [
            JournalEntryCreate(
                ledger_account_id=cash.id, debit_amount=Decimal(amount)
            ),
            JournalEntryCreate(
                ledger_account_id=loan.id, credit_amount=Decimal(amount)
            ),
        ],
    )


class TestIntegrityCheck:

    async def test_clean_ledger_is_valid(self, db_session):
        await post_pair(db_session, "100.00")
        await post_pair(db_session, "45.50")
        await db_session.commit()

        report = await IntegrityService(db_session).validate_account_integrity()

        assert report.is_valid is True
        assert report.issues == []
        assert report.trial_balance.is_balanced is True
        assert report.checked_at is not None

    async def test_empty_ledger_is_valid(self, db_session):
        await AccountService(db_session).create_account(AccountCreate(
            name="Cash Drawer", account_type=AccountType.ASSET
        ))

        report = await IntegrityService(db_session).validate_account_integrity()

        assert report.is_valid is True

    async def test_tampered_entry_is_reported(self, db_session):
        voucher = await post_pair(db_session, "100.00")
        voucher_id = voucher.id
        voucher_number = voucher.voucher_number
        debit_entry_id = voucher.entries[0].id
        await db_session.commit()

        await db_session.execute(
            update(JournalEntry)
            .where(JournalEntry.id == debit_entry_id)
            .values(debit_amount=Decimal("90.00"))
        )
        await db_session.commit()
        db_session.expunge_all()

        report = await IntegrityService(db_session).validate_account_integrity()

        assert report.is_valid is False
        issue_types = {issue.type for issue in report.issues}
        assert issue_types == {TRIAL_BALANCE_IMBALANCE, VOUCHER_IMBALANCE}
        voucher_issue = next(
            i for i in report.issues if i.type == VOUCHER_IMBALANCE
        )
        assert voucher_issue.voucher_id == voucher_id
        assert voucher_issue.voucher_number == voucher_number
        assert "Difference: 10.00" in voucher_issue.message

    async def test_cancelled_vouchers_are_not_checked(self, db_session):
        voucher = await post_pair(db_session, "100.00")
        debit_entry_id = voucher.entries[0].id
        await PostingService(db_session).cancel_voucher(voucher.id)
        await db_session.commit()

        await db_session.execute(
            update(JournalEntry)
            .where(JournalEntry.id == debit_entry_id)
            .values(debit_amount=Decimal("1.00"))
        )
        await db_session.commit()
        db_session.expunge_all()

        report = await IntegrityService(db_session).validate_account_integrity()

        assert report.is_valid is True
