"""Account domain service."""

from typing import Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.chart import ChartOfAccounts
from ledgerkit.domain.entities import Account as AccountEntity, AccountType
from ledgerkit.domain.errors import (
    AccountInUse,
    DuplicateAccountCode,
    UnknownAccount,
    ValidationError,
    account_delete_blocked,
    account_not_found,
    duplicate_account_code,
)
from ledgerkit.logging_config import get_logger

logger = get_logger("domain.account")

MAX_CODE_LENGTH = 20
MAX_NAME_LENGTH = 255


class AccountService:
    """Service for managing the chart of accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        code: str,
        name: str,
        account_type: AccountType | str,
        parent_id: Optional[int] = None,
    ) -> int:
        """Create a new account.

        Args:
            code: Account code, unique across the chart
            name: Account name
            account_type: One of asset, liability, equity, revenue, expense
            parent_id: Optional parent account ID

        Returns:
            Account ID

        Raises:
            ValidationError: If code, name or type is invalid
            DuplicateAccountCode: If the code is already used
            UnknownAccount: If the parent does not exist
        """
        code = _check_code(code)
        _check_name(name)
        account_type = _check_type(account_type)

        if self.db.get_account_by_code(code) is not None:
            raise DuplicateAccountCode(duplicate_account_code(code))

        self.get_chart().check_parent(None, parent_id)

        account_id = self.db.create_account(
            code=code, name=name, account_type=account_type, parent_id=parent_id
        )
        logger.info("Created %s account %s (ID: %d)", account_type.value, code, account_id)
        return account_id

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def get_account_by_code(self, code: str) -> Optional[AccountEntity]:
        """Get account by code.

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account_by_code(code)

    def require_account(self, account_id: int) -> AccountEntity:
        """Get account by ID, raising UnknownAccount if it does not exist."""
        account = self.db.get_account(account_id)
        if account is None:
            raise UnknownAccount(account_not_found(account_id))
        return account

    def list_accounts(
        self, account_type: Optional[AccountType | str] = None, active_only: bool = False
    ) -> list[AccountEntity]:
        """List accounts ordered by code.

        Args:
            account_type: Optional type filter
            active_only: If True, skip deactivated accounts
        """
        if account_type is not None:
            account_type = _check_type(account_type)
        return self.db.list_accounts(account_type=account_type, active_only=active_only)

    def get_chart(self) -> ChartOfAccounts:
        """Build the chart of accounts from every stored account."""
        return ChartOfAccounts(self.db.list_accounts())

    def update_account(
        self,
        account_id: int,
        code: Optional[str] = None,
        name: Optional[str] = None,
        account_type: Optional[AccountType | str] = None,
        parent_id: Optional[int] = None,
        clear_parent: bool = False,
    ) -> None:
        """Update account fields.

        Only the provided fields change.

        Args:
            account_id: Account ID to update
            code: Optional new code
            name: Optional new name
            account_type: Optional new type (refused once the account has entries)
            parent_id: Optional new parent ID
            clear_parent: If True, make the account a root (parent_id must be None)

        Raises:
            UnknownAccount: If the account or new parent does not exist
            DuplicateAccountCode: If the new code is used by another account
            CycleDetected: If the new parent is the account or a descendant
            AccountInUse: If the type changes on an account with entries
        """
        account = self.require_account(account_id)

        if code is not None:
            code = _check_code(code)
            existing = self.db.get_account_by_code(code)
            if existing is not None and existing.id != account_id:
                raise DuplicateAccountCode(duplicate_account_code(code))
        if name is not None:
            _check_name(name)
        if account_type is not None:
            account_type = _check_type(account_type)
            if account_type != account.account_type:
                entry_count = self.db.get_account_entry_count(account_id)
                if entry_count > 0:
                    raise AccountInUse(
                        f"Cannot change type of account {account_id}: "
                        f"it has {entry_count} entr{'ies' if entry_count != 1 else 'y'}"
                    )

        if clear_parent:
            if parent_id is not None:
                raise ValidationError("Cannot set both parent_id and clear_parent")
        elif parent_id is not None:
            self.get_chart().check_parent(account_id, parent_id)

        self.db.update_account(
            account_id=account_id,
            code=code,
            name=name,
            account_type=account_type,
            parent_id=parent_id,
            update_parent=clear_parent or parent_id is not None,
        )
        logger.info("Updated account %d", account_id)

    def deactivate_account(self, account_id: int) -> None:
        """Mark an account inactive. Its entries and balance are kept."""
        self.require_account(account_id)
        self.db.set_account_active(account_id, False)
        logger.info("Deactivated account %d", account_id)

    def activate_account(self, account_id: int) -> None:
        """Mark an account active again."""
        self.require_account(account_id)
        self.db.set_account_active(account_id, True)
        logger.info("Activated account %d", account_id)

    def delete_account(self, account_id: int) -> None:
        """Delete an account.

        Args:
            account_id: Account ID to delete

        Raises:
            UnknownAccount: If the account does not exist
            AccountInUse: If the account has entries or child accounts
        """
        self.require_account(account_id)

        entry_count = self.db.get_account_entry_count(account_id)
        child_count = self.db.get_child_account_count(account_id)
        if entry_count > 0 or child_count > 0:
            raise AccountInUse(account_delete_blocked(account_id, entry_count, child_count))

        self.db.delete_account(account_id)
        logger.info("Deleted account %d", account_id)


def _check_code(code: str) -> str:
    code = (code or "").strip()
    if not code:
        raise ValidationError("Account code is required")
    if len(code) > MAX_CODE_LENGTH:
        raise ValidationError(f"Account code must be at most {MAX_CODE_LENGTH} characters")
    return code


def _check_name(name: str) -> None:
    if not (name or "").strip():
        raise ValidationError("Account name is required")
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(f"Account name must be at most {MAX_NAME_LENGTH} characters")


def _check_type(account_type: AccountType | str) -> AccountType:
    try:
        return AccountType.from_value(account_type)
    except ValueError as e:
        raise ValidationError(str(e)) from None
