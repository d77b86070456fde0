"""
Reporting API endpoints.

All reports are read-only; nothing here commits.
"""

import datetime as dt

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from station_ledger.exceptions import LedgerError
from station_ledger.models.base import get_db
from station_ledger.services.integrity_service import IntegrityService
from station_ledger.services.report_service import ReportService
from station_ledger.schemas.report import (
    BalanceSheet,
    CashFlow,
    GeneralLedger,
    IntegrityReport,
    ProfitLoss,
    TrialBalance,
)

router = APIRouter(prefix="/ledger/reports", tags=["Reports"])


@router.get("/trial-balance", response_model=TrialBalance)
async def get_trial_balance(
    as_of_date: dt.date | None = None,
    db: AsyncSession = Depends(get_db),
):
    service = ReportService(db)
    return await service.get_trial_balance(as_of_date)


@router.get("/profit-loss", response_model=ProfitLoss)
async def get_profit_loss(
    start_date: dt.date,
    end_date: dt.date,
    db: AsyncSession = Depends(get_db),
):
    service = ReportService(db)
    try:
        return await service.get_profit_loss(start_date, end_date)
    except LedgerError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/balance-sheet", response_model=BalanceSheet)
async def get_balance_sheet(
    as_of_date: dt.date | None = None,
    db: AsyncSession = Depends(get_db),
):
    """Balance sheet as of a date (today when omitted)."""
    service = ReportService(db)
    try:
        return await service.get_balance_sheet(as_of_date or dt.date.today())
    except LedgerError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/general-ledger/{account_id}", response_model=GeneralLedger)
async def get_general_ledger(
    account_id: int,
    start_date: dt.date,
    end_date: dt.date,
    db: AsyncSession = Depends(get_db),
):
    service = ReportService(db)
    try:
        return await service.get_general_ledger(
            account_id, start_date, end_date
        )
    except LedgerError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/cash-flow", response_model=CashFlow)
async def get_cash_flow(
    start_date: dt.date,
    end_date: dt.date,
    db: AsyncSession = Depends(get_db),
):
    service = ReportService(db)
    try:
        return await service.get_cash_flow(start_date, end_date)
    except LedgerError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/integrity-check", response_model=IntegrityReport)
async def check_integrity(db: AsyncSession = Depends(get_db)):
    """
    Trial balance and per-voucher balance checks.

    Problems are listed in the response body; the endpoint
    itself always answers 200.
    """
    service = IntegrityService(db)
    return await service.validate_account_integrity()
