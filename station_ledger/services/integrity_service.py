"""
Integrity service: ledger-wide consistency checks.

Findings are reported as data, never raised, so a ledger with
damaged history can still be inspected. Nothing is modified.
"""

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from station_ledger.logging_config import get_logger
from station_ledger.models.enums import VoucherStatus
from station_ledger.models.journal_voucher import JournalVoucher
from station_ledger.schemas.report import IntegrityIssue, IntegrityReport
from station_ledger.services.posting_service import check_voucher_balance
from station_ledger.services.report_service import ReportService

logger = get_logger("integrity_service")

TRIAL_BALANCE_IMBALANCE = "TRIAL_BALANCE_IMBALANCE"
VOUCHER_IMBALANCE = "VOUCHER_IMBALANCE"


class IntegrityService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.report_service = ReportService(db)

    async def validate_account_integrity(self) -> IntegrityReport:
        """
        Check the trial balance and re-check every posted voucher.

        The per-voucher pass catches entries changed outside the
        PostingService, which the trial balance alone can miss when
        errors cancel out.
        """
        trial_balance = await self.report_service.get_trial_balance()
        issues = []

        if not trial_balance.is_balanced:
            issues.append(IntegrityIssue(
                type=TRIAL_BALANCE_IMBALANCE,
                message=(
                    f"Trial balance does not balance. "
                    f"Debits: {trial_balance.total_debits:.2f}, "
                    f"Credits: {trial_balance.total_credits:.2f}"
                ),
            ))

        result = await self.db.execute(
            select(JournalVoucher)
            .options(selectinload(JournalVoucher.entries))
            .where(JournalVoucher.status == VoucherStatus.POSTED)
            .order_by(JournalVoucher.id)
        )
        for voucher in result.scalars().all():
            check = check_voucher_balance(
                voucher.entries, self.report_service.tolerance
            )
            if not check.valid:
                issues.append(IntegrityIssue(
                    type=VOUCHER_IMBALANCE,
                    voucher_id=voucher.id,
                    voucher_number=voucher.voucher_number,
                    message=check.message,
                ))

        for issue in issues:
            logger.warning(
                "Integrity issue %s: %s", issue.type, issue.message,
                extra={"voucher_id": issue.voucher_id},
            )

        return IntegrityReport(
            is_valid=not issues,
            issues=issues,
            trial_balance=trial_balance,
            checked_at=datetime.now(timezone.utc),
        )
