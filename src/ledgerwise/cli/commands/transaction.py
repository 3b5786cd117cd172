"""Transaction commands."""

import click
from ledgerwise.cli.account_resolution import resolve_account_or_exit
from ledgerwise.cli.category_resolution import category_id_or_exit
from ledgerwise.cli.error_handling import handle_domain_error, parse_date_or_exit
from ledgerwise.domain.account import AccountService
from ledgerwise.domain.category import CategoryService
from ledgerwise.domain.errors import DomainError
from ledgerwise.domain.transaction import TransactionService
from ledgerwise.utils.amount_parser import format_cents


@click.group()
def transaction_group():
    """View ledger transactions and edit their overrides."""
    pass


@transaction_group.command("list")
@click.option("--account", help="Account name or ID")
@click.option("--start-date", help="Start date (YYYY-MM-DD or MM/DD/YYYY)")
@click.option("--end-date", help="End date (YYYY-MM-DD or MM/DD/YYYY)")
@click.option("--category", help="Category name")
@click.option("--type", "txn_type", help="Statement type, e.g. Sale or Payment")
@click.option("--limit", type=click.IntRange(min=1), help="Show at most this many")
@click.option("--offset", type=click.IntRange(min=0), default=0, help="Skip this many first")
@click.option("--verbose", "-v", is_flag=True, help="Show type, memo and notes as well")
@click.pass_context
def list_transactions(
    ctx,
    account: str | None,
    start_date: str | None,
    end_date: str | None,
    category: str | None,
    txn_type: str | None,
    limit: int | None,
    offset: int,
    verbose: bool,
):
    """List transactions, oldest first.

    Examples:
        ledgerwise transaction list --account Sapphire --start-date 2024-01-01
        ledgerwise transaction list --category Groceries --limit 20
        ledgerwise transaction list --type Payment
    """
    db = ctx.obj["db"]
    service = TransactionService(db)
    account_service = AccountService(db)

    start = parse_date_or_exit(ctx, start_date, "start date")
    end = parse_date_or_exit(ctx, end_date, "end date")

    account_id = None
    if account:
        account_id = resolve_account_or_exit(ctx, account_service, account)

    category_id = None
    if category:
        category_id = category_id_or_exit(ctx, category)

    try:
        transactions = service.list_transactions(
            account_id=account_id,
            start_date=start,
            end_date=end,
            category_id=category_id,
            type=txn_type,
            limit=limit,
            offset=offset,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not transactions:
        click.echo("No transactions found.")
        return

    accounts = {acc.id: acc.name for acc in account_service.list_accounts(active_only=False)}
    categories = {cat.id: cat.name for cat in CategoryService(db).list_categories()}

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    for txn in transactions:
        name = txn.display_name or txn.description
        category_name = categories.get(txn.category_id, "") if txn.category_id is not None else ""
        line = (
            f"{txn.id:5d} | {txn.transaction_date.isoformat()} | "
            f"{accounts.get(txn.account_id, 'Unknown'):15s} | {name[:32]:32s} | "
            f"{format_cents(txn.amount_cents):>11s} | {category_name}"
        )
        click.echo(line)
        if verbose:
            details = [f"type={txn.type}"]
            if txn.is_return:
                details.append("return")
            if txn.memo:
                details.append(f"memo={txn.memo}")
            if txn.notes:
                details.append(f"notes={txn.notes}")
            click.echo(f"        {' '.join(details)}")


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--display-name", help="Display name, or empty string to clear")
@click.option("--category", help="Category name, or empty string to clear")
@click.option("--notes", help="Notes, or empty string to clear")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    display_name: str | None,
    category: str | None,
    notes: str | None,
):
    """Set or clear the display name, category or notes of a transaction.

    Imported values (date, amount, description) cannot be changed.

    Examples:
        ledgerwise transaction update 12 --category Groceries
        ledgerwise transaction update 12 --display-name "Whole Foods" --notes "weekly shop"
        ledgerwise transaction update 12 --category ""  # Clear category
    """
    service = TransactionService(ctx.obj["db"])

    changes = {}
    if display_name is not None:
        changes["display_name"] = display_name or None
    if notes is not None:
        changes["notes"] = notes or None
    if category is not None:
        changes["category_id"] = category_id_or_exit(ctx, category) if category else None

    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        service.update_overrides(transaction_id, **changes)
        click.echo(f"Updated transaction {transaction_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
