"""
Voucher API endpoints.
"""

import datetime as dt

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from station_ledger.exceptions import LedgerError
from station_ledger.models.base import get_db
from station_ledger.models.enums import VoucherStatus, VoucherType
from station_ledger.services.posting_service import PostingService
from station_ledger.schemas.voucher import (
    BalanceCheck,
    VoucherCreate,
    VoucherResponse,
    VoucherValidateRequest,
)

router = APIRouter(prefix="/ledger/vouchers", tags=["Vouchers"])


@router.post("", response_model=VoucherResponse, status_code=201)
async def post_voucher(
    request: VoucherCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Post a balanced voucher with its journal entries.

    Debits must equal credits and every entry must be either a
    debit or a credit. Nothing is written if any check fails.
    """
    service = PostingService(db)
    try:
        voucher = await service.post_voucher(request, request.entries)
        await db.commit()
        return voucher
    except LedgerError as e:
        await db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/validate", response_model=BalanceCheck)
async def validate_voucher(
    request: VoucherValidateRequest,
    db: AsyncSession = Depends(get_db),
):
    """Check entries against the double-entry rules without posting."""
    service = PostingService(db)
    return service.validate_voucher(request.entries)


@router.get("", response_model=list[VoucherResponse])
async def list_vouchers(
    voucher_type: VoucherType | None = None,
    status: VoucherStatus | None = None,
    created_by_id: str | None = None,
    date_from: dt.date | None = None,
    date_to: dt.date | None = None,
    on_date: dt.date | None = Query(default=None, alias="date"),
    db: AsyncSession = Depends(get_db),
):
    """List vouchers, newest first."""
    service = PostingService(db)
    return await service.list_vouchers(
        voucher_type=voucher_type,
        status=status,
        created_by_id=created_by_id,
        date_from=date_from,
        date_to=date_to,
        on_date=on_date,
    )


@router.get("/{voucher_id}", response_model=VoucherResponse)
async def get_voucher(
    voucher_id: int,
    db: AsyncSession = Depends(get_db),
):
    service = PostingService(db)
    try:
        return await service.get_voucher(voucher_id)
    except LedgerError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.patch("/{voucher_id}/cancel", response_model=VoucherResponse)
async def cancel_voucher(
    voucher_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Cancel a posted voucher.

    The voucher stays visible for audit but no longer counts in
    any balance or report.
    """
    service = PostingService(db)
    try:
        voucher = await service.cancel_voucher(voucher_id)
        await db.commit()
        return voucher
    except LedgerError as e:
        await db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))
