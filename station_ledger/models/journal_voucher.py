"""
Journal voucher model.

A voucher is the header of one financial transaction: a payment,
a receipt, or a general journal. It owns the journal entries that
carry the actual debits and credits.
"""

import datetime as dt
from decimal import Decimal

from sqlalchemy import String, Date, DateTime, Numeric, Text, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from station_ledger.models.base import Base, utcnow
from station_ledger.models.enums import (
    VoucherType,
    VoucherStatus,
    enum_values,
)


class JournalVoucher(Base):
    """
    Transaction header grouping balanced journal entries.

    total_amount is derived from the entries when the voucher is
    posted (the sum of its debits) and never set by callers.
    Vouchers are cancelled, not deleted, so the audit trail stays.
    """

    __tablename__ = "journal_vouchers"

    id: Mapped[int] = mapped_column(primary_key=True)
    voucher_number: Mapped[str] = mapped_column(
        String(20), unique=True, nullable=False
    )
    voucher_type: Mapped[VoucherType] = mapped_column(
        SAEnum(
            VoucherType,
            name="voucher_type_enum",
            values_callable=enum_values,
        ),
        nullable=False,
        index=True,
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    narration: Mapped[str | None] = mapped_column(Text, nullable=True)
    total_amount: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), nullable=False
    )
    status: Mapped[VoucherStatus] = mapped_column(
        SAEnum(
            VoucherStatus,
            name="voucher_status_enum",
            values_callable=enum_values,
        ),
        nullable=False,
        default=VoucherStatus.POSTED,
        index=True,
    )
    reference_number: Mapped[str | None] = mapped_column(
        String(50), nullable=True
    )
    created_by_id: Mapped[str | None] = mapped_column(
        String(50), nullable=True, index=True
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
    cancelled_at: Mapped[dt.datetime | None] = mapped_column(
        DateTime, nullable=True
    )

    # Entries live and die with their voucher
    entries: Mapped[list["JournalEntry"]] = relationship(
        back_populates="voucher",
        cascade="all, delete-orphan",
        order_by="JournalEntry.id",
        lazy="raise",
    )

    @property
    def is_posted(self) -> bool:
        return self.status == VoucherStatus.POSTED

    def __repr__(self) -> str:
        return (
            f"<JournalVoucher {self.voucher_number} "
            f"{self.voucher_type.value} {self.total_amount} "
            f"({self.status.value})>"
        )
