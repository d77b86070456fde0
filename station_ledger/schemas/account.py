"""
Pydantic schemas for chart-of-accounts operations.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field

from station_ledger.models.enums import (
    AccountType,
    AccountStatus,
    BalanceType,
)


# --- Request Schemas ---

class AccountCreate(BaseModel):
    """Request to create a new ledger account."""
    name: str = Field(max_length=100)
    account_type: AccountType
    status: AccountStatus = AccountStatus.ACTIVE
    is_system_account: bool = False
    description: str | None = None


class AccountUpdate(BaseModel):
    """
    Partial update of a ledger account.

    Only fields the caller actually sent are applied
    (model_dump(exclude_unset=True)).
    """
    name: str | None = Field(default=None, max_length=100)
    account_type: AccountType | None = None
    status: AccountStatus | None = None
    description: str | None = None
    is_system_account: bool | None = None


# --- Response Schemas ---

class AccountResponse(BaseModel):
    id: int
    name: str
    account_type: AccountType
    status: AccountStatus
    is_system_account: bool
    description: str | None
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = {"from_attributes": True}


class AccountBalance(BaseModel):
    """
    Balance of a single account as of a date.

    balance is always non-negative; balance_type says which side
    it sits on.
    """
    account_id: int
    account_name: str
    account_type: AccountType
    total_debits: Decimal
    total_credits: Decimal
    balance: Decimal
    balance_type: BalanceType
    as_of_date: dt.date


class AccountProtection(BaseModel):
    """Advisory answer to "may this account be deleted?"."""
    account_id: int
    protected: bool
    reason: str
    can_modify: bool
    can_deactivate: bool
