"""
Posting service: the only way money enters the ledger.

This service enforces the fundamental rules:
1. Every voucher balances (total debits = total credits)
2. Every entry is one-sided (a debit or a credit, never both)
3. Referenced accounts exist and are active
4. A voucher and its entries are written all-or-nothing

No other service writes vouchers or journal entries. Purchase,
sales and credit modules record their transactions through
create_voucher_with_entries().
"""

import datetime as dt
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from station_ledger.config import get_settings
from station_ledger.exceptions import (
    AlreadyCancelledError,
    DuplicateVoucherError,
    NotFoundError,
    UnbalancedVoucherError,
    ValidationError,
)
from station_ledger.logging_config import get_logger
from station_ledger.models.base import utcnow
from station_ledger.models.enums import VoucherStatus, VoucherType
from station_ledger.models.journal_entry import JournalEntry
from station_ledger.models.journal_voucher import JournalVoucher
from station_ledger.models.ledger_account import LedgerAccount
from station_ledger.schemas.voucher import (
    BalanceCheck,
    JournalEntryCreate,
    VoucherHeader,
)
from station_ledger.services.money import ZERO, to_decimal, to_money

logger = get_logger("posting_service")

SEQUENCE_DIGITS = 4


def check_voucher_balance(
    entries, tolerance: Decimal | None = None
) -> BalanceCheck:
    """
    Check a set of entries against the double-entry rules.

    Accepts request schemas or stored JournalEntry rows; anything
    with debit_amount and credit_amount works. Never raises.
    """
    if tolerance is None:
        tolerance = get_settings().BALANCE_TOLERANCE

    if not entries:
        return BalanceCheck(
            valid=False,
            total_debits=ZERO,
            total_credits=ZERO,
            difference=ZERO,
            message="Voucher must have at least one journal entry",
        )

    total_debits = ZERO
    total_credits = ZERO
    problem = None
    problem_index = None

    for index, entry in enumerate(entries, start=1):
        debit = to_decimal(entry.debit_amount)
        credit = to_decimal(entry.credit_amount)
        total_debits += debit
        total_credits += credit

        if problem is not None:
            continue
        if debit < 0 or credit < 0:
            problem = "amounts cannot be negative"
        elif debit > 0 and credit > 0:
            problem = "cannot have both debit and credit amounts"
        elif debit == 0 and credit == 0:
            problem = "must have either debit or credit amount"
        if problem is not None:
            problem_index = index

    difference = abs(total_debits - total_credits)

    if problem is not None:
        return BalanceCheck(
            valid=False,
            total_debits=total_debits,
            total_credits=total_credits,
            difference=difference,
            message=f"Entry {problem_index}: {problem}",
            entry_index=problem_index,
        )

    if difference >= tolerance:
        return BalanceCheck(
            valid=False,
            total_debits=total_debits,
            total_credits=total_credits,
            difference=difference,
            message=(
                f"Debits ({total_debits:.2f}) do not equal "
                f"Credits ({total_credits:.2f}). "
                f"Difference: {difference:.2f}"
            ),
        )

    return BalanceCheck(
        valid=True,
        total_debits=total_debits,
        total_credits=total_credits,
        difference=difference,
        message="Voucher is balanced",
    )


class PostingService:
    """
    All voucher writes pass through this service.

    The service takes a database session as a constructor
    argument. The caller decides when to commit or roll back.
    A storage failure while posting undoes only the voucher being
    posted before the error is re-raised.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.tolerance = get_settings().BALANCE_TOLERANCE

    # --- Validation ---

    def validate_voucher(
        self, entries: list[JournalEntryCreate]
    ) -> BalanceCheck:
        """Dry-run the balance check without writing anything."""
        return check_voucher_balance(entries, self.tolerance)

    def _validate_header(self, header: VoucherHeader) -> None:
        if header.date > dt.date.today():
            raise ValidationError("Voucher date cannot be in the future")
        if header.narration is not None and len(header.narration) > 500:
            raise ValidationError("Narration cannot exceed 500 characters")

    async def _validate_accounts(
        self, entries: list[JournalEntryCreate]
    ) -> None:
        account_ids = {entry.ledger_account_id for entry in entries}
        result = await self.db.execute(
            select(LedgerAccount).where(LedgerAccount.id.in_(account_ids))
        )
        accounts_by_id = {a.id: a for a in result.scalars().all()}

        missing = account_ids - set(accounts_by_id)
        if missing:
            raise NotFoundError(
                f"Ledger accounts not found: {sorted(missing)}"
            )

        for index, entry in enumerate(entries, start=1):
            account = accounts_by_id[entry.ledger_account_id]
            if not account.is_active:
                raise ValidationError(
                    f"Entry {index}: account '{account.name}' is not active"
                )

    # --- Voucher numbers ---

    async def _next_voucher_number(
        self, voucher_type: VoucherType, voucher_date: dt.date
    ) -> str:
        """
        Next number in the <type initial><YYYYMM><sequence> series,
        e.g. R2024030007 for the seventh receipt of March 2024.

        The sequence continues from the highest numeric tail in the
        series. It is zero-padded to four digits and simply grows
        past 9999. Manual numbers that share the prefix but end in
        anything other than digits are ignored.
        """
        prefix = f"{voucher_type.value[0]}{voucher_date:%Y%m}"
        result = await self.db.execute(
            select(JournalVoucher.voucher_number)
            .where(JournalVoucher.voucher_number.like(f"{prefix}%"))
        )

        last_sequence = 0
        for number in result.scalars():
            tail = number[len(prefix):]
            if tail.isdigit():
                last_sequence = max(last_sequence, int(tail))

        return f"{prefix}{last_sequence + 1:0{SEQUENCE_DIGITS}d}"

    async def _ensure_number_unused(self, voucher_number: str) -> None:
        result = await self.db.execute(
            select(JournalVoucher.id).where(
                JournalVoucher.voucher_number == voucher_number
            )
        )
        if result.scalar_one_or_none() is not None:
            raise DuplicateVoucherError(
                f"Voucher number '{voucher_number}' already exists"
            )

    # --- Posting ---

    async def post_voucher(
        self,
        header: VoucherHeader,
        entries: list[JournalEntryCreate],
    ) -> JournalVoucher:
        """
        Post a voucher together with its journal entries.

        Every check runs before anything is written. The voucher
        row and its entry rows are flushed as one unit inside a
        savepoint; if the flush fails the savepoint is rolled back
        and the error re-raised, so no partial voucher is ever
        visible.
        """
        self._validate_header(header)

        check = check_voucher_balance(entries, self.tolerance)
        if not check.valid:
            raise UnbalancedVoucherError(
                f"Voucher does not balance: {check.message}",
                total_debits=check.total_debits,
                total_credits=check.total_credits,
                entry_index=check.entry_index,
            )

        await self._validate_accounts(entries)

        if header.voucher_number:
            voucher_number = header.voucher_number
            await self._ensure_number_unused(voucher_number)
        else:
            voucher_number = await self._next_voucher_number(
                header.voucher_type, header.date
            )

        voucher = JournalVoucher(
            voucher_number=voucher_number,
            voucher_type=header.voucher_type,
            date=header.date,
            narration=header.narration,
            total_amount=to_money(check.total_debits),
            status=VoucherStatus.POSTED,
            reference_number=header.reference_number,
            created_by_id=header.created_by_id,
            cancelled_at=None,
            entries=[
                JournalEntry(
                    ledger_account_id=entry.ledger_account_id,
                    debit_amount=to_money(entry.debit_amount),
                    credit_amount=to_money(entry.credit_amount),
                    narration=entry.narration,
                )
                for entry in entries
            ],
        )

        # A savepoint confines a storage failure to this voucher; any
        # other pending work in the caller's transaction survives.
        try:
            async with self.db.begin_nested():
                self.db.add(voucher)
                await self.db.flush()
        except SQLAlchemyError:
            logger.exception(
                "Posting voucher %s failed, voucher discarded", voucher_number
            )
            raise

        logger.info(
            "Posted %s voucher %s for %s",
            voucher.voucher_type.value, voucher.voucher_number,
            voucher.total_amount,
            extra={"voucher_id": voucher.id, "entry_count": len(entries)},
        )
        return voucher

    async def create_voucher_with_entries(
        self,
        header: VoucherHeader,
        entries: list[JournalEntryCreate],
    ) -> JournalVoucher:
        """Entry point for purchase, sales and credit modules."""
        return await self.post_voucher(header, entries)

    # --- Reads and cancellation ---

    async def get_voucher(self, voucher_id: int) -> JournalVoucher:
        result = await self.db.execute(
            select(JournalVoucher)
            .options(selectinload(JournalVoucher.entries))
            .where(JournalVoucher.id == voucher_id)
        )
        voucher = result.scalar_one_or_none()
        if voucher is None:
            raise NotFoundError(f"Voucher {voucher_id} not found")
        return voucher

    async def list_vouchers(
        self,
        voucher_type: VoucherType | None = None,
        status: VoucherStatus | None = None,
        created_by_id: str | None = None,
        date_from: dt.date | None = None,
        date_to: dt.date | None = None,
        on_date: dt.date | None = None,
    ) -> list[JournalVoucher]:
        """Return vouchers matching the filters, newest first."""
        query = select(JournalVoucher).options(
            selectinload(JournalVoucher.entries)
        )
        if voucher_type is not None:
            query = query.where(JournalVoucher.voucher_type == voucher_type)
        if status is not None:
            query = query.where(JournalVoucher.status == status)
        if created_by_id is not None:
            query = query.where(JournalVoucher.created_by_id == created_by_id)

        if date_from is not None or date_to is not None:
            if date_from is not None:
                query = query.where(JournalVoucher.date >= date_from)
            if date_to is not None:
                query = query.where(JournalVoucher.date <= date_to)
        elif on_date is not None:
            query = query.where(JournalVoucher.date == on_date)

        query = query.order_by(
            JournalVoucher.date.desc(), JournalVoucher.id.desc()
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def cancel_voucher(self, voucher_id: int) -> JournalVoucher:
        """
        Mark a posted voucher as cancelled.

        Entries and total_amount are kept for audit; reports simply
        stop counting the voucher. Cancelling twice is an error.
        """
        voucher = await self.get_voucher(voucher_id)

        if not voucher.is_posted:
            raise AlreadyCancelledError(
                f"Voucher {voucher.voucher_number} is already cancelled"
            )

        voucher.status = VoucherStatus.CANCELLED
        voucher.cancelled_at = utcnow()
        await self.db.flush()

        logger.info(
            "Cancelled voucher %s", voucher.voucher_number,
            extra={"voucher_id": voucher.id},
        )
        return voucher
