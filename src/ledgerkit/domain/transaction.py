"""Transaction domain service."""

from collections.abc import Sequence
from datetime import date, datetime, UTC
from typing import Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.chart import ChartOfAccounts
from ledgerkit.domain.entities import EntryDraft, Transaction as TransactionEntity, TransactionDraft
from ledgerkit.domain.errors import DomainError, TransactionNotFound, transaction_not_found
from ledgerkit.domain.validator import reverse_entries, validate_transaction
from ledgerkit.logging_config import get_logger

logger = get_logger("domain.transaction")


class _PersistedReferences:
    """Container view over references stored in the database."""

    def __init__(self, db: Database):
        self.db = db

    def __contains__(self, reference: object) -> bool:
        return isinstance(reference, str) and self.db.transaction_reference_exists(reference)


class TransactionService:
    """Service for recording and querying transactions."""

    def __init__(self, db: Database, allow_inactive_accounts: bool = True):
        """Initialize transaction service.

        Args:
            db: Database instance
            allow_inactive_accounts: If False, entries against deactivated
                accounts are rejected
        """
        self.db = db
        self.allow_inactive_accounts = allow_inactive_accounts

    def create_transaction(
        self,
        reference: str,
        description: str,
        entries: Sequence[EntryDraft],
        transaction_date: Optional[datetime] = None,
    ) -> int:
        """Validate and record a transaction with its entries.

        Args:
            reference: Unique transaction reference
            description: Transaction description
            entries: Candidate entries, each with a debit or a credit
            transaction_date: Optional transaction timestamp (defaults to now)

        Returns:
            Transaction ID

        Raises:
            DomainError: If validation fails (see validate_transaction)
        """
        if transaction_date is None:
            transaction_date = datetime.now(UTC)

        draft = TransactionDraft(
            reference=reference,
            description=description,
            transaction_date=transaction_date,
            entries=tuple(entries),
        )
        try:
            normalized = validate_transaction(
                draft,
                existing_references=_PersistedReferences(self.db),
                accounts=ChartOfAccounts(self.db.list_accounts()),
                allow_inactive=self.allow_inactive_accounts,
            )
        except DomainError as e:
            logger.debug("Rejected transaction %r: %s (%s)", reference, e, e.kind)
            raise

        transaction_id = self.db.create_transaction(normalized)
        logger.info(
            "Recorded transaction %s (ID: %d) with %d entries",
            reference,
            transaction_id,
            len(normalized.entries),
        )
        return transaction_id

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction with its entries by ID.

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def get_transaction_by_reference(self, reference: str) -> Optional[TransactionEntity]:
        """Get transaction with its entries by reference.

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction_by_reference(reference)

    def require_transaction(self, transaction_id: int) -> TransactionEntity:
        """Get transaction by ID, raising TransactionNotFound if missing."""
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise TransactionNotFound(transaction_not_found(transaction_id))
        return txn

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
    ) -> list[TransactionEntity]:
        """List transactions with filters.

        Args:
            start_date: Optional start date filter
            end_date: Optional end date filter
            account_id: Optional filter for transactions touching an account

        Returns:
            List of transaction entities, newest first
        """
        return self.db.list_transactions(
            start_date=start_date, end_date=end_date, account_id=account_id
        )

    def reverse_transaction(
        self,
        transaction_id: int,
        reference: str,
        description: Optional[str] = None,
        transaction_date: Optional[datetime] = None,
    ) -> int:
        """Record a transaction that offsets an earlier one.

        Transactions are never amended; a correction is a new transaction
        with debit and credit sides swapped.

        Args:
            transaction_id: Transaction to reverse
            reference: Reference for the reversing transaction
            description: Optional description (defaults to "Reversal of <ref>")
            transaction_date: Optional timestamp (defaults to now)

        Returns:
            ID of the reversing transaction

        Raises:
            TransactionNotFound: If the original does not exist
            DomainError: If the reversing transaction fails validation
        """
        original = self.require_transaction(transaction_id)
        drafts = [
            EntryDraft(
                account_id=entry.account_id,
                debit_amount=entry.debit_amount,
                credit_amount=entry.credit_amount,
                description=entry.description,
            )
            for entry in original.entries
        ]
        if description is None:
            description = f"Reversal of {original.reference}"

        reversal_id = self.create_transaction(
            reference=reference,
            description=description,
            entries=reverse_entries(drafts),
            transaction_date=transaction_date,
        )
        logger.info("Reversed transaction %s with %s", original.reference, reference)
        return reversal_id

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction together with its entries.

        Raises:
            TransactionNotFound: If the transaction does not exist
        """
        txn = self.require_transaction(transaction_id)
        self.db.delete_transaction(transaction_id)
        logger.info("Deleted transaction %s (ID: %d)", txn.reference, transaction_id)
