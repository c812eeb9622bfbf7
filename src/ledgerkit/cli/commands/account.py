"""Account management commands."""

import click
from ledgerkit.cli.account_resolution import resolve_account_or_exit
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.account import AccountService
from ledgerkit.domain.chart import ChartOfAccounts
from ledgerkit.domain.entities import AccountType
from ledgerkit.domain.errors import DomainError

ACCOUNT_TYPE_CHOICE = click.Choice([t.value for t in AccountType], case_sensitive=False)


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("code", metavar="CODE")
@click.argument("name", metavar="NAME")
@click.option("--type", "account_type", required=True, type=ACCOUNT_TYPE_CHOICE, help="Account type")
@click.option("--parent", help="Parent account code or ID")
@click.pass_context
def create_account(ctx, code: str, name: str, account_type: str, parent: str | None):
    """Create a new account.

    Examples:
        ledgerkit account create 1000 "Assets" --type asset
        ledgerkit account create 1100 "Cash" --type asset --parent 1000
        ledgerkit account create 4000 "Sales" --type revenue
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    parent_id = None
    if parent is not None:
        parent_id = resolve_account_or_exit(ctx, service, parent)

    try:
        account_id = service.create_account(
            code=code, name=name, account_type=account_type, parent_id=parent_id
        )
        click.echo(f"Created account {code} '{name}' (ID: {account_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.option("--type", "account_type", type=ACCOUNT_TYPE_CHOICE, help="Only list accounts of this type")
@click.option("--active-only", is_flag=True, help="Hide deactivated accounts")
@click.option("--tree", is_flag=True, help="Show accounts as a hierarchy")
@click.pass_context
def list_accounts(ctx, account_type: str | None, active_only: bool, tree: bool):
    """List accounts."""
    db = ctx.obj["db"]
    service = AccountService(db)

    if tree:
        try:
            chart = service.get_chart()
            lines = list(_tree_lines(chart, chart.roots(), 0))
        except DomainError as e:
            handle_domain_error(ctx, e)
        if not lines:
            click.echo("No accounts found.")
            return
        click.echo("\nChart of accounts:")
        click.echo("-" * 60)
        for line in lines:
            click.echo(line)
        return

    accounts = service.list_accounts(account_type=account_type, active_only=active_only)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 70)
    for acc in accounts:
        status = "" if acc.is_active else " (inactive)"
        click.echo(
            f"ID: {acc.id:3d} | {acc.code:10s} | {acc.name:25s} | {acc.account_type.value}{status}"
        )


def _tree_lines(chart: ChartOfAccounts, accounts, depth: int):
    for acc in accounts:
        status = "" if acc.is_active else " (inactive)"
        yield f"{'  ' * depth}{acc.code} {acc.name} [{acc.account_type.value}]{status}"
        yield from _tree_lines(chart, chart.children(acc.id), depth + 1)


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--code", help="New account code")
@click.option("--name", help="New account name")
@click.option("--type", "account_type", type=ACCOUNT_TYPE_CHOICE, help="New account type")
@click.option("--parent", help="New parent account code or ID")
@click.option("--no-parent", is_flag=True, help="Make this a top-level account")
@click.pass_context
def update_account(
    ctx,
    account: str,
    code: str | None,
    name: str | None,
    account_type: str | None,
    parent: str | None,
    no_parent: bool,
) -> None:
    """Update an account.

    ACCOUNT can be an account code or ID. Only the given fields change.

    Examples:
        ledgerkit account update 1100 --name "Cash on hand"
        ledgerkit account update 1100 --parent 1000
        ledgerkit account update 1100 --no-parent
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    account_id = resolve_account_or_exit(ctx, service, account)

    parent_id = None
    if parent is not None:
        parent_id = resolve_account_or_exit(ctx, service, parent)

    try:
        service.update_account(
            account_id=account_id,
            code=code,
            name=name,
            account_type=account_type,
            parent_id=parent_id,
            clear_parent=no_parent,
        )
        click.echo(f"Updated account {account_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("deactivate")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def deactivate_account(ctx, account: str) -> None:
    """Deactivate an account, keeping its history."""
    db = ctx.obj["db"]
    service = AccountService(db)

    account_id = resolve_account_or_exit(ctx, service, account)
    try:
        service.deactivate_account(account_id)
        click.echo(f"Deactivated account {account_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("activate")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def activate_account(ctx, account: str) -> None:
    """Reactivate a deactivated account."""
    db = ctx.obj["db"]
    service = AccountService(db)

    account_id = resolve_account_or_exit(ctx, service, account)
    try:
        service.activate_account(account_id)
        click.echo(f"Activated account {account_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account code or ID.

    An account can only be deleted if no entries were ever posted to it and
    it has no child accounts. Use 'account deactivate' otherwise.

    Examples:
        ledgerkit account delete 1100
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    account_id = resolve_account_or_exit(ctx, service, account)
    account_obj = service.get_account(account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account {account_obj.code} '{account_obj.name}'?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_id)
        click.echo(f"Deleted account {account_obj.code} '{account_obj.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
