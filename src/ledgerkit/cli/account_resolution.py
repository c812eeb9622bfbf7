"""CLI helpers for account and transaction resolution."""

from __future__ import annotations

import click
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.account import AccountService
from ledgerkit.domain.entities import Transaction
from ledgerkit.domain.errors import TransactionNotFound, transaction_not_found
from ledgerkit.domain.transaction import TransactionService
from ledgerkit.utils.account_resolver import resolve_account


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str | int
) -> int:
    """Resolve account code or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(account_service, account)
    except ValueError as exc:
        handle_domain_error(ctx, exc)


def resolve_transaction_or_exit(
    ctx: click.Context, transaction_service: TransactionService, transaction: str
) -> Transaction:
    """Find a transaction by reference, falling back to a numeric ID."""
    txn = transaction_service.get_transaction_by_reference(transaction)
    if txn is None and transaction.isdigit():
        txn = transaction_service.get_transaction(int(transaction))
    if txn is None:
        handle_domain_error(ctx, TransactionNotFound(transaction_not_found(transaction)))
    return txn
