"""
Account service: the chart of accounts.

This service is the only writer of ledger accounts. It enforces:
1. Account names are present and unique among active accounts
2. System accounts keep their name, type and system flag
3. System accounts and accounts with entries are never deleted

The caller controls the transaction boundary (commit/rollback).
"""

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from station_ledger.exceptions import (
    DuplicateAccountError,
    HasEntriesError,
    NotFoundError,
    ProtectedAccountError,
    ValidationError,
)
from station_ledger.logging_config import get_logger
from station_ledger.models.base import utcnow
from station_ledger.models.enums import AccountStatus, AccountType
from station_ledger.models.journal_entry import JournalEntry
from station_ledger.models.ledger_account import LedgerAccount
from station_ledger.schemas.account import (
    AccountCreate,
    AccountUpdate,
    AccountProtection,
)

logger = get_logger("account_service")

# Fields a system account never lets a caller change
PROTECTED_FIELDS = ("name", "account_type", "is_system_account")

MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 100

# Accounts every station needs; seeded as system accounts.
DEFAULT_SYSTEM_ACCOUNTS = [
    ("Cash on Hand", AccountType.ASSET, "Cash collected at the station"),
    ("Bank Account", AccountType.BANK, "Primary operating bank account"),
    ("Inventory", AccountType.ASSET, "Fuel and product stock"),
    ("Sales Revenue", AccountType.CUSTOMER, "Fuel and product sales"),
    ("Purchase Expenses", AccountType.DIRECT_EXPENSE, "Stock purchases"),
]


def clean_account_name(name: str | None) -> str:
    """Trim and validate an account name."""
    if name is None or not name.strip():
        raise ValidationError("Account name is required")
    name = name.strip()
    if not MIN_NAME_LENGTH <= len(name) <= MAX_NAME_LENGTH:
        raise ValidationError(
            f"Account name must be between {MIN_NAME_LENGTH} "
            f"and {MAX_NAME_LENGTH} characters"
        )
    return name


class AccountService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _ensure_name_available(
        self, name: str, exclude_id: int | None = None
    ) -> None:
        query = select(LedgerAccount.id).where(
            LedgerAccount.name == name,
            LedgerAccount.status == AccountStatus.ACTIVE,
        )
        if exclude_id is not None:
            query = query.where(LedgerAccount.id != exclude_id)

        existing = (await self.db.execute(query.limit(1))).scalar()
        if existing is not None:
            raise DuplicateAccountError(
                f"An active account named '{name}' already exists"
            )

    async def count_entries(self, account_id: int) -> int:
        """Number of journal entries (any voucher status) on an account."""
        result = await self.db.execute(
            select(func.count(JournalEntry.id)).where(
                JournalEntry.ledger_account_id == account_id
            )
        )
        return result.scalar_one()

    async def create_account(self, request: AccountCreate) -> LedgerAccount:
        """
        Create a new ledger account.

        Raises ValidationError for a blank name and
        DuplicateAccountError if an active account already uses it.
        """
        name = clean_account_name(request.name)
        if request.status == AccountStatus.ACTIVE:
            await self._ensure_name_available(name)

        account = LedgerAccount(
            name=name,
            account_type=request.account_type,
            status=request.status,
            is_system_account=request.is_system_account,
            description=request.description,
        )
        self.db.add(account)
        await self.db.flush()

        logger.info(
            "Created ledger account %s (%s)",
            account.name, account.account_type.value,
            extra={"account_id": account.id},
        )
        return account

    async def get_account(self, account_id: int) -> LedgerAccount:
        account = await self.db.get(LedgerAccount, account_id)
        if account is None:
            raise NotFoundError(f"Account {account_id} not found")
        return account

    async def list_accounts(
        self,
        account_type: AccountType | None = None,
        status: AccountStatus | None = None,
        is_system_account: bool | None = None,
    ) -> list[LedgerAccount]:
        """Return accounts matching the filters, ordered by type then name."""
        query = select(LedgerAccount)
        if account_type is not None:
            query = query.where(LedgerAccount.account_type == account_type)
        if status is not None:
            query = query.where(LedgerAccount.status == status)
        if is_system_account is not None:
            query = query.where(
                LedgerAccount.is_system_account == is_system_account
            )
        query = query.order_by(LedgerAccount.account_type, LedgerAccount.name)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def update_account(
        self, account_id: int, request: AccountUpdate
    ) -> LedgerAccount:
        """
        Apply a partial update.

        For system accounts the protected fields are silently dropped
        from the patch; the rest (status, description) still applies.
        """
        account = await self.get_account(account_id)
        updates = request.model_dump(exclude_unset=True)

        if account.is_system_account:
            stripped = [f for f in PROTECTED_FIELDS if f in updates]
            for field in stripped:
                updates.pop(field)
            if stripped:
                logger.info(
                    "Ignored protected fields %s on system account %s",
                    stripped, account.id,
                )
        elif "is_system_account" in updates:
            if updates["is_system_account"] != account.is_system_account:
                raise ValidationError("Cannot modify system account flag")
            updates.pop("is_system_account")

        for field in ("name", "account_type", "status"):
            if field in updates and updates[field] is None:
                raise ValidationError(f"Account {field} cannot be empty")

        if "name" in updates:
            updates["name"] = clean_account_name(updates["name"])

        new_name = updates.get("name", account.name)
        new_status = updates.get("status", account.status)
        renamed = new_name != account.name
        reactivated = new_status != account.status
        if new_status == AccountStatus.ACTIVE and (renamed or reactivated):
            await self._ensure_name_available(new_name, exclude_id=account.id)

        for field, value in updates.items():
            setattr(account, field, value)
        account.updated_at = utcnow()

        await self.db.flush()
        return account

    async def delete_account(self, account_id: int) -> int:
        """
        Hard-delete an account that has never been used.

        Returns the number of deleted rows (always 1).
        """
        account = await self.get_account(account_id)

        if account.is_system_account:
            raise ProtectedAccountError(
                "Cannot delete system account. Set status to inactive instead."
            )

        entry_count = await self.count_entries(account_id)
        if entry_count > 0:
            raise HasEntriesError(
                f"Cannot delete account with {entry_count} existing journal "
                f"entries. Set status to inactive instead.",
                entry_count=entry_count,
            )

        await self.db.delete(account)
        await self.db.flush()

        logger.info("Deleted ledger account %s", account_id)
        return 1

    async def check_account_protection(
        self, account_id: int
    ) -> AccountProtection:
        """Tell a UI whether the delete action should be offered."""
        account = await self.get_account(account_id)

        if account.is_system_account:
            return AccountProtection(
                account_id=account_id,
                protected=True,
                reason="System account cannot be deleted",
                can_modify=False,
                can_deactivate=True,
            )

        entry_count = await self.count_entries(account_id)
        if entry_count > 0:
            return AccountProtection(
                account_id=account_id,
                protected=True,
                reason=f"Account has {entry_count} journal entries",
                can_modify=True,
                can_deactivate=True,
            )

        return AccountProtection(
            account_id=account_id,
            protected=False,
            reason="Account can be safely deleted",
            can_modify=True,
            can_deactivate=True,
        )

    async def get_or_create_account(
        self,
        name: str,
        account_type: AccountType,
        is_system_account: bool = False,
    ) -> LedgerAccount:
        """
        Find an account by name and type, creating it if missing.

        Used by purchase/sales integrations to resolve the
        ledger_account_id values they post against.
        """
        name = clean_account_name(name)
        result = await self.db.execute(
            select(LedgerAccount)
            .where(
                LedgerAccount.name == name,
                LedgerAccount.account_type == account_type,
            )
            .order_by(LedgerAccount.id)
            .limit(1)
        )
        account = result.scalar_one_or_none()
        if account is not None:
            return account

        return await self.create_account(AccountCreate(
            name=name,
            account_type=account_type,
            is_system_account=is_system_account,
        ))

    async def seed_system_accounts(self) -> list[LedgerAccount]:
        """Create the default system accounts. Safe to run repeatedly."""
        accounts = []
        for name, account_type, description in DEFAULT_SYSTEM_ACCOUNTS:
            result = await self.db.execute(
                select(LedgerAccount).where(
                    LedgerAccount.name == name,
                    LedgerAccount.account_type == account_type,
                ).limit(1)
            )
            account = result.scalar_one_or_none()
            if account is None:
                account = await self.create_account(AccountCreate(
                    name=name,
                    account_type=account_type,
                    is_system_account=True,
                    description=description,
                ))
            accounts.append(account)
        return accounts
