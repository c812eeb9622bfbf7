"""Transaction management commands."""

import click
from ledgerkit.cli.account_resolution import (
    resolve_account_or_exit,
    resolve_transaction_or_exit,
)
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.account import AccountService
from ledgerkit.domain.entities import EntryDraft, Transaction
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.transaction import TransactionService
from ledgerkit.utils.amount_parser import parse_entry_spec
from ledgerkit.utils.date_parser import parse_date, parse_timestamp


@click.group()
def transaction_group():
    """Record and inspect transactions."""
    pass


def _parse_timestamp_or_exit(ctx, value: str | None):
    if value is None:
        return None
    try:
        return parse_timestamp(value)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)


@transaction_group.command("create")
@click.option("--reference", required=True, help="Unique transaction reference")
@click.option("--description", required=True, help="Transaction description")
@click.option("--date", help="Transaction date (YYYY-MM-DD, optional time, or 'today'); defaults to now")
@click.option("--debit", "debits", multiple=True, metavar="ACCOUNT=AMOUNT", help="Debit entry (repeatable)")
@click.option("--credit", "credits", multiple=True, metavar="ACCOUNT=AMOUNT", help="Credit entry (repeatable)")
@click.option("--reject-inactive", is_flag=True, help="Refuse entries against deactivated accounts")
@click.pass_context
def create_transaction(
    ctx,
    reference: str,
    description: str,
    date: str | None,
    debits: tuple[str, ...],
    credits: tuple[str, ...],
    reject_inactive: bool,
):
    """Record a balanced transaction.

    Total debits must equal total credits.

    Examples:
        ledgerkit transaction create --reference INV-001 --description "Cash sale" \\
            --debit 1100=500.00 --credit 4000=500.00
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db, allow_inactive_accounts=not reject_inactive)
    account_service = AccountService(db)

    txn_date = _parse_timestamp_or_exit(ctx, date)

    entries = []
    try:
        for side, specs in (("debit", debits), ("credit", credits)):
            for spec in specs:
                account, amount = parse_entry_spec(spec)
                account_id = resolve_account_or_exit(ctx, account_service, account)
                entries.append(
                    EntryDraft(account_id=account_id, **{f"{side}_amount": amount})
                )

        transaction_id = transaction_service.create_transaction(
            reference=reference,
            description=description,
            entries=entries,
            transaction_date=txn_date,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created transaction {reference} (ID: {transaction_id})")
    _echo_transaction(account_service, transaction_service.get_transaction(transaction_id))


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--account", help="Only transactions touching this account (code or ID)")
@click.pass_context
def list_transactions(ctx, start_date: str | None, end_date: str | None, account: str | None):
    """List transactions, newest first."""
    db = ctx.obj["db"]
    service = TransactionService(db)
    account_service = AccountService(db)

    start = None
    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    end = None
    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, account_service, account)

    transactions = service.list_transactions(start_date=start, end_date=end, account_id=account_id)
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\n{'ID':>4s} | {'Date':10s} | {'Reference':15s} | {'Amount':>14s} | Description")
    click.echo("-" * 80)
    for txn in transactions:
        amount = sum((e.debit_amount.amount for e in txn.entries), start=0)
        click.echo(
            f"{txn.id:4d} | {txn.transaction_date:%Y-%m-%d} | {txn.reference:15s} | "
            f"{amount:>14,.2f} | {txn.description}"
        )


@transaction_group.command("show")
@click.argument("transaction", metavar="TRANSACTION")
@click.pass_context
def show_transaction(ctx, transaction: str):
    """Show a transaction and its entries.

    TRANSACTION can be a reference or an ID.
    """
    db = ctx.obj["db"]
    service = TransactionService(db)
    txn = resolve_transaction_or_exit(ctx, service, transaction)
    _echo_transaction(AccountService(db), txn)


@transaction_group.command("reverse")
@click.argument("transaction", metavar="TRANSACTION")
@click.option("--reference", required=True, help="Reference for the reversing transaction")
@click.option("--description", help="Description (defaults to 'Reversal of <reference>')")
@click.option("--date", help="Date of the reversing transaction; defaults to now")
@click.pass_context
def reverse_transaction(
    ctx, transaction: str, reference: str, description: str | None, date: str | None
):
    """Record a transaction that cancels an earlier one.

    Transactions are never edited. To correct one, reverse it and record
    the corrected transaction.

    Examples:
        ledgerkit transaction reverse INV-001 --reference INV-001-R
    """
    db = ctx.obj["db"]
    service = TransactionService(db)
    original = resolve_transaction_or_exit(ctx, service, transaction)
    txn_date = _parse_timestamp_or_exit(ctx, date)

    try:
        reversal_id = service.reverse_transaction(
            original.id, reference=reference, description=description, transaction_date=txn_date
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Reversed {original.reference} with {reference} (ID: {reversal_id})")


@transaction_group.command("delete")
@click.argument("transaction", metavar="TRANSACTION")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction: str, yes: bool):
    """Delete a transaction and all of its entries.

    Prefer 'transaction reverse' for corrections; deleting removes history.
    """
    db = ctx.obj["db"]
    service = TransactionService(db)
    txn = resolve_transaction_or_exit(ctx, service, transaction)

    if not yes and not click.confirm(f"Are you sure you want to delete transaction {txn.reference}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_transaction(txn.id)
        click.echo(f"Deleted transaction {txn.reference}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def _echo_transaction(account_service: AccountService, txn: Transaction) -> None:
    click.echo(f"  Reference: {txn.reference}")
    click.echo(f"  Date: {txn.transaction_date:%Y-%m-%d %H:%M}")
    click.echo(f"  Description: {txn.description}")
    click.echo(f"  {'Account':25s} | {'Debit':>12s} | {'Credit':>12s}")
    for entry in txn.entries:
        acc = account_service.get_account(entry.account_id)
        label = f"{acc.code} {acc.name}" if acc is not None else str(entry.account_id)
        debit = f"{entry.debit_amount:,.2f}" if not entry.debit_amount.is_zero else ""
        credit = f"{entry.credit_amount:,.2f}" if not entry.credit_amount.is_zero else ""
        click.echo(f"  {label[:25]:25s} | {debit:>12s} | {credit:>12s}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
