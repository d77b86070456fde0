"""
Pydantic schemas for voucher posting.

These define the API contract: what comes in, what goes out.
Amounts are Decimals with at most two decimal places.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field

from station_ledger.models.enums import VoucherType, VoucherStatus


# --- Request Schemas ---

class JournalEntryCreate(BaseModel):
    """One debit or credit leg. Exactly one amount must be positive."""
    ledger_account_id: int = Field(gt=0)
    debit_amount: Decimal = Field(
        default=Decimal("0"), ge=0, max_digits=14, decimal_places=2
    )
    credit_amount: Decimal = Field(
        default=Decimal("0"), ge=0, max_digits=14, decimal_places=2
    )
    narration: str | None = Field(default=None, max_length=200)


class VoucherHeader(BaseModel):
    """
    Voucher header fields supplied by the caller.

    voucher_number is generated when omitted. total_amount is not
    accepted; it is derived from the entries.
    """
    voucher_number: str | None = Field(default=None, min_length=1, max_length=20)
    voucher_type: VoucherType
    date: dt.date
    narration: str | None = Field(default=None, max_length=500)
    reference_number: str | None = Field(default=None, max_length=50)
    created_by_id: str | None = Field(default=None, max_length=50)


class VoucherCreate(VoucherHeader):
    """A complete voucher: header plus its journal entries."""
    entries: list[JournalEntryCreate]


class VoucherValidateRequest(BaseModel):
    """Entries to dry-run through the balance check."""
    entries: list[JournalEntryCreate]


# --- Response Schemas ---

class JournalEntryResponse(BaseModel):
    id: int
    voucher_id: int
    ledger_account_id: int
    debit_amount: Decimal
    credit_amount: Decimal
    narration: str | None

    model_config = {"from_attributes": True}


class VoucherResponse(BaseModel):
    id: int
    voucher_number: str
    voucher_type: VoucherType
    date: dt.date
    narration: str | None
    total_amount: Decimal
    status: VoucherStatus
    reference_number: str | None
    created_by_id: str | None
    created_at: dt.datetime
    cancelled_at: dt.datetime | None
    entries: list[JournalEntryResponse]

    model_config = {"from_attributes": True}


class BalanceCheck(BaseModel):
    """
    Outcome of checking a set of entries against the
    double-entry rules.

    entry_index is the 1-based position of the first entry that
    breaks the one-sided rule, if any.
    """
    valid: bool
    total_debits: Decimal
    total_credits: Decimal
    difference: Decimal
    message: str
    entry_index: int | None = None
