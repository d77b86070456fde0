"""
Chart of accounts API endpoints.

The API layer is thin: it handles HTTP concerns (status codes,
response formatting, commit/rollback) and delegates all business
logic to the AccountService and BalanceService.
"""

import datetime as dt

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from station_ledger.exceptions import LedgerError
from station_ledger.models.base import get_db
from station_ledger.models.enums import AccountStatus, AccountType
from station_ledger.services.account_service import AccountService
from station_ledger.services.balance_service import BalanceService
from station_ledger.schemas.account import (
    AccountCreate,
    AccountUpdate,
    AccountResponse,
    AccountBalance,
    AccountProtection,
)

router = APIRouter(prefix="/ledger/accounts", tags=["Accounts"])


@router.post("", response_model=AccountResponse, status_code=201)
async def create_account(
    request: AccountCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a new ledger account."""
    service = AccountService(db)
    try:
        account = await service.create_account(request)
        await db.commit()
        return account
    except LedgerError as e:
        await db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("", response_model=list[AccountResponse])
async def list_accounts(
    account_type: AccountType | None = None,
    status: AccountStatus | None = None,
    is_system_account: bool | None = None,
    db: AsyncSession = Depends(get_db),
):
    """List accounts, ordered by type then name."""
    service = AccountService(db)
    return await service.list_accounts(
        account_type=account_type,
        status=status,
        is_system_account=is_system_account,
    )


@router.post("/seed", response_model=list[AccountResponse], status_code=201)
async def seed_system_accounts(db: AsyncSession = Depends(get_db)):
    """Create the default system accounts if they are missing."""
    service = AccountService(db)
    try:
        accounts = await service.seed_system_accounts()
        await db.commit()
        return accounts
    except LedgerError as e:
        await db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/{account_id}", response_model=AccountResponse)
async def get_account(
    account_id: int,
    db: AsyncSession = Depends(get_db),
):
    service = AccountService(db)
    try:
        return await service.get_account(account_id)
    except LedgerError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.patch("/{account_id}", response_model=AccountResponse)
async def update_account(
    account_id: int,
    request: AccountUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Update an account.

    Name, type and the system flag of a system account are
    silently left unchanged.
    """
    service = AccountService(db)
    try:
        account = await service.update_account(account_id, request)
        await db.commit()
        return account
    except LedgerError as e:
        await db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.delete("/{account_id}")
async def delete_account(
    account_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Delete an unused, non-system account.

    Accounts with journal entries must be deactivated instead.
    """
    service = AccountService(db)
    try:
        deleted = await service.delete_account(account_id)
        await db.commit()
        return {"deleted": deleted}
    except LedgerError as e:
        await db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/{account_id}/balance", response_model=AccountBalance)
async def get_account_balance(
    account_id: int,
    as_of_date: dt.date | None = None,
    db: AsyncSession = Depends(get_db),
):
    """
    Balance calculated from posted entries, not stored.
    """
    service = BalanceService(db)
    try:
        return await service.get_account_balance(account_id, as_of_date)
    except LedgerError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/{account_id}/protection", response_model=AccountProtection)
async def check_account_protection(
    account_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Whether a UI should offer the delete action.

    An unknown account id answers 404 rather than an
    "unprotected" result.
    """
    service = AccountService(db)
    try:
        return await service.check_account_protection(account_id)
    except LedgerError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
