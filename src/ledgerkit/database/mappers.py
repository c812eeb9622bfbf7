"""Mapper functions to convert between domain models and SQLAlchemy models.

Amounts leave this layer as Money and account types as AccountType, so the
rest of the code never sees raw column values.
"""

from ledgerkit.domain import entities as domain
from ledgerkit.domain.money import Money
from ledgerkit.database.models import (
    Account as ORMAccount,
    Entry as ORMEntry,
    Transaction as ORMTransaction,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        code=orm_account.code,
        name=orm_account.name,
        account_type=domain.AccountType(orm_account.account_type),
        parent_id=orm_account.parent_id,
        is_active=bool(orm_account.is_active),
        created_at=orm_account.created_at,
        updated_at=orm_account.updated_at,
    )


def entry_to_domain(orm_entry: ORMEntry) -> domain.Entry:
    """Convert SQLAlchemy Entry model to domain Entry entity."""
    return domain.Entry(
        id=orm_entry.id,
        transaction_id=orm_entry.transaction_id,
        account_id=orm_entry.account_id,
        debit_amount=Money.parse(orm_entry.debit_amount),
        credit_amount=Money.parse(orm_entry.credit_amount),
        description=orm_entry.description,
        created_at=orm_entry.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model (with entries) to domain Transaction."""
    return domain.Transaction(
        id=orm_transaction.id,
        reference=orm_transaction.reference,
        description=orm_transaction.description,
        transaction_date=orm_transaction.transaction_date,
        entries=tuple(entry_to_domain(e) for e in orm_transaction.entries),
        created_at=orm_transaction.created_at,
        updated_at=orm_transaction.updated_at,
    )


def draft_to_orm(draft: domain.TransactionDraft) -> ORMTransaction:
    """Build an unsaved SQLAlchemy Transaction with its entries from a validated draft."""
    transaction = ORMTransaction(
        reference=draft.reference,
        description=draft.description,
        transaction_date=draft.transaction_date,
    )
    for entry in draft.entries:
        transaction.entries.append(
            ORMEntry(
                account_id=entry.account_id,
                debit_amount=Money.parse(entry.debit_amount).amount,
                credit_amount=Money.parse(entry.credit_amount).amount,
                description=entry.description,
            )
        )
    return transaction
