"""
Ledger account model (chart of accounts).

Every bucket in the station's books (cash on hand, bank,
credit customers, vendors, expenses) is a ledger account.
Journal entries are posted against these accounts.
"""

from datetime import datetime

from sqlalchemy import String, Boolean, DateTime, Text, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from station_ledger.models.base import Base, utcnow
from station_ledger.models.enums import (
    AccountType,
    AccountStatus,
    enum_values,
)


class LedgerAccount(Base):
    """
    A single account in the chart of accounts.

    System accounts keep their name and type forever and can only
    be deactivated. Any account with journal entries is never
    deleted; the foreign key from journal_entries restricts it.
    """

    __tablename__ = "ledger_accounts"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(
        String(100), nullable=False, index=True
    )
    account_type: Mapped[AccountType] = mapped_column(
        SAEnum(
            AccountType,
            name="ledger_account_type_enum",
            values_callable=enum_values,
        ),
        nullable=False,
        index=True,
    )
    status: Mapped[AccountStatus] = mapped_column(
        SAEnum(
            AccountStatus,
            name="ledger_account_status_enum",
            values_callable=enum_values,
        ),
        nullable=False,
        default=AccountStatus.ACTIVE,
        index=True,
    )
    is_system_account: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE

    def __repr__(self) -> str:
        return f"<LedgerAccount {self.name} ({self.account_type.value})>"
