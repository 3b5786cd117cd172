"""Account management commands."""

import click
from ledgerwise.cli.account_resolution import resolve_account_or_exit
from ledgerwise.cli.error_handling import handle_domain_error
from ledgerwise.domain.account import DEFAULT_ISSUER, AccountService
from ledgerwise.domain.errors import DomainError


@click.group()
def account_group():
    """Manage card accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--issuer",
    default=DEFAULT_ISSUER,
    show_default=True,
    help="Card issuer, used to pick the statement parser",
)
@click.pass_context
def create_account(ctx, name: str, issuer: str):
    """Create a new account.

    Examples:
        ledgerwise account create "Chase Sapphire"
        ledgerwise account create "Freedom" --issuer chase
    """
    service = AccountService(ctx.obj["db"])

    try:
        account_id = service.create_account(name=name, issuer=issuer)
        click.echo(f"Created account '{name}' (ID: {account_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.option("--all", "show_all", is_flag=True, help="Include archived accounts")
@click.pass_context
def list_accounts(ctx, show_all: bool):
    """List accounts."""
    service = AccountService(ctx.obj["db"])

    accounts = service.list_accounts(active_only=not show_all)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        status = "" if acc.is_active else " (archived)"
        click.echo(f"ID: {acc.id:3d} | {acc.name:20s} | Issuer: {acc.issuer}{status}")


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option("--issuer", help="New card issuer")
@click.pass_context
def update_account(ctx, account: str, name: str | None, issuer: str | None):
    """Rename an account or change its issuer.

    ACCOUNT can be an account name or ID.

    Examples:
        ledgerwise account update "Chase Sapphire" --name "Sapphire Reserve"
        ledgerwise account update 2 --issuer chase
    """
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)

    if name is None and issuer is None:
        click.echo("Nothing to update.")
        return

    try:
        updated = service.update_account(account_id, name=name, issuer=issuer)
        click.echo(f"Updated account {updated.id}: {updated.name} (issuer: {updated.issuer})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("archive")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def archive_account(ctx, account: str):
    """Archive an account.

    ACCOUNT can be an account name or ID. Imported transactions are kept.
    """
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        service.archive_account(account_id)
        click.echo(f"Archived account {account_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
