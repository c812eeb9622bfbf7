"""Balance report command."""

import click
from ledgerkit.cli.account_resolution import resolve_account_or_exit
from ledgerkit.cli.commands.account import ACCOUNT_TYPE_CHOICE
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.account import AccountService
from ledgerkit.domain.balance import BalanceService
from ledgerkit.domain.errors import DomainError
from ledgerkit.utils.date_parser import parse_date


@click.command("balance")
@click.argument("account", metavar="[ACCOUNT]", required=False)
@click.option("--type", "account_type", type=ACCOUNT_TYPE_CHOICE, help="Only active accounts of this type")
@click.option("--rollup", is_flag=True, help="Include balances of descendant accounts")
@click.option("--start-date", help="Only entries on or after this date")
@click.option("--end-date", help="Only entries on or before this date")
@click.pass_context
def balance(
    ctx,
    account: str | None,
    account_type: str | None,
    rollup: bool,
    start_date: str | None,
    end_date: str | None,
):
    """Show account balances.

    Without ACCOUNT, lists the balance of every account, or of the active
    accounts of one type with --type. Balances follow each account type's
    normal side: debits increase assets and expenses, credits increase
    liabilities, equity and revenue.

    Examples:
        ledgerkit balance
        ledgerkit balance 1100
        ledgerkit balance 1000 --rollup
        ledgerkit balance --type revenue --start-date "this year"
    """
    db = ctx.obj["db"]
    service = BalanceService(db)
    account_service = AccountService(db)

    start = end = None
    try:
        if start_date:
            start = parse_date(start_date)
        if end_date:
            end = parse_date(end_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)

    try:
        if account is not None:
            account_id = resolve_account_or_exit(ctx, account_service, account)
            result = service.get_account_balance(account_id, start_date=start, end_date=end)
            acc = result.account
            click.echo(f"{acc.code} {acc.name} [{acc.account_type.value}]")
            click.echo(f"  Debits:  {result.debit_total:>14,.2f}")
            click.echo(f"  Credits: {result.credit_total:>14,.2f}")
            click.echo(f"  Balance: {result.balance:>14,.2f}")
            if rollup:
                total = service.get_rollup_balance(account_id, start_date=start, end_date=end)
                click.echo(f"  Including sub-accounts: {total:,.2f}")
            return

        if rollup:
            click.echo("Error: --rollup requires an ACCOUNT", err=True)
            ctx.exit(1)

        if account_type is not None:
            chart = service.get_chart()
            by_type = service.get_balances_by_type(account_type, start_date=start, end_date=end)
            rows = [(chart[account_id], amount) for account_id, amount in by_type.items()]
        else:
            balances = service.get_balances(start_date=start, end_date=end)
            rows = [(item.account, item.balance) for item in balances]
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not rows:
        click.echo("No accounts found.")
        return

    click.echo(f"\n{'Code':10s} | {'Name':25s} | {'Type':9s} | {'Balance':>14s}")
    click.echo("-" * 68)
    for acc, amount in rows:
        status = "" if acc.is_active else " (inactive)"
        click.echo(
            f"{acc.code:10s} | {acc.name[:25]:25s} | {acc.account_type.value:9s} | "
            f"{amount:>14,.2f}{status}"
        )


def register_commands(cli):
    """Register balance command with main CLI."""
    cli.add_command(balance)
