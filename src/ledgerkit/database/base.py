"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date

# Import entities directly; the domain package does not import the database layer.
from ledgerkit.domain.entities import (
    Account,
    AccountType,
    Entry,
    Transaction,
    TransactionDraft,
)


class Database(ABC):
    """Abstract database interface for ledgerkit.

    Implementations must write a transaction and all of its entries in one
    commit, and must refuse a second transaction with the same reference.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        code: str,
        name: str,
        account_type: AccountType,
        parent_id: Optional[int] = None,
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_code(self, code: str) -> Optional[Account]:
        """Get account by code."""
        pass

    @abstractmethod
    def list_accounts(
        self, account_type: Optional[AccountType] = None, active_only: bool = False
    ) -> list[Account]:
        """List accounts ordered by code, optionally filtered."""
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        code: Optional[str] = None,
        name: Optional[str] = None,
        account_type: Optional[AccountType] = None,
        parent_id: Optional[int] = None,
        update_parent: bool = False,
    ) -> None:
        """Update account fields.

        Args:
            update_parent: If True, set parent_id even if it's None (to clear it)
        """
        pass

    @abstractmethod
    def set_account_active(self, account_id: int, is_active: bool) -> None:
        """Activate or deactivate an account."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account."""
        pass

    @abstractmethod
    def get_account_entry_count(self, account_id: int) -> int:
        """Count entries posted to an account."""
        pass

    @abstractmethod
    def get_child_account_count(self, account_id: int) -> int:
        """Count direct child accounts."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(self, draft: TransactionDraft) -> int:
        """Atomically store a validated transaction and its entries. Returns transaction ID.

        Raises:
            DuplicateReference: If the reference is already stored
        """
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction with entries by ID."""
        pass

    @abstractmethod
    def get_transaction_by_reference(self, reference: str) -> Optional[Transaction]:
        """Get transaction with entries by reference."""
        pass

    @abstractmethod
    def transaction_reference_exists(self, reference: str) -> bool:
        """Check if a transaction with the given reference exists."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters, newest first.

        Args:
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
            account_id: Optional filter for transactions with an entry on the account
        """
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction and its entries."""
        pass

    # Entry operations
    @abstractmethod
    def list_entries(
        self,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Entry]:
        """List committed entries, optionally for one account and a date window."""
        pass
