"""Business logic services."""

from station_ledger.services.account_service import AccountService
from station_ledger.services.posting_service import PostingService
from station_ledger.services.balance_service import BalanceService
from station_ledger.services.report_service import ReportService
from station_ledger.services.integrity_service import IntegrityService

__all__ = [
    "AccountService",
    "PostingService",
    "BalanceService",
    "ReportService",
    "IntegrityService",
]
