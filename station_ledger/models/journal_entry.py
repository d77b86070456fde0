"""
Journal entry model.

Each entry is one leg of a voucher: a debit or a credit against
a single ledger account. Exactly one of debit_amount and
credit_amount is positive; the other is zero.
"""

from decimal import Decimal

from sqlalchemy import String, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from station_ledger.models.base import Base


class JournalEntry(Base):
    """
    One debit or credit leg of a voucher.

    Entries are created together with their voucher and never
    edited afterwards. The one-sided rule is enforced by the
    PostingService before insert and backed by a check constraint.
    """

    __tablename__ = "journal_entries"
    __table_args__ = (
        CheckConstraint(
            "debit_amount >= 0 AND credit_amount >= 0",
            name="ck_journal_entry_non_negative",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    voucher_id: Mapped[int] = mapped_column(
        ForeignKey("journal_vouchers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    ledger_account_id: Mapped[int] = mapped_column(
        ForeignKey("ledger_accounts.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    debit_amount: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), nullable=False, default=Decimal("0")
    )
    credit_amount: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), nullable=False, default=Decimal("0")
    )
    narration: Mapped[str | None] = mapped_column(
        String(200), nullable=True
    )

    voucher: Mapped["JournalVoucher"] = relationship(
        back_populates="entries",
        lazy="raise",
    )

    def __repr__(self) -> str:
        side = "DR" if self.debit_amount > 0 else "CR"
        amount = self.debit_amount if side == "DR" else self.credit_amount
        return f"<JournalEntry {side} {amount} account={self.ledger_account_id}>"
