"""Statement import commands."""

import click
from ledgerwise.cli.account_resolution import resolve_account_or_exit
from ledgerwise.cli.error_handling import handle_domain_error
from ledgerwise.domain.account import AccountService
from ledgerwise.domain.errors import DomainError
from ledgerwise.domain.ingestion import ImportService


@click.command("import")
@click.argument("statement_file", type=click.Path(dir_okay=False))
@click.option("--account", required=True, help="Account name or ID")
@click.pass_context
def import_statement(ctx, statement_file: str, account: str):
    """Import transactions from an issuer statement file."""
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    service = ImportService(db, ctx.obj["registry"])

    try:
        summary = service.import_file(file_path=statement_file, account_id=account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\nImport of {summary.filename} (batch {summary.batch_id}):")
    click.echo(f"  Rows: {summary.row_count}")
    click.echo(f"  Imported: {summary.imported_count} transactions")
    click.echo(f"  Skipped: {summary.skipped_count} duplicates")
    if summary.errors:
        click.echo(f"  Errors: {summary.error_count}")
        for error in summary.errors:
            click.echo(f"    Row {error.row}: {error.reason} [{error.raw_snippet}]", err=True)
    if not summary.success:
        click.echo("Error: no rows could be imported", err=True)
        ctx.exit(1)


@click.command("imports")
@click.pass_context
def list_imports(ctx):
    """List past imports, newest first."""
    service = ImportService(ctx.obj["db"], ctx.obj["registry"])

    batches = service.list_imports()
    if not batches:
        click.echo("No imports found.")
        return

    click.echo("\nImports:")
    click.echo("-" * 80)
    for batch in batches:
        click.echo(
            f"ID: {batch.id:3d} | {batch.imported_at:%Y-%m-%d %H:%M} | "
            f"{batch.account_name or batch.account_id} | {batch.filename} | "
            f"{batch.imported_count} imported, {batch.skipped_count} skipped"
        )


def register_commands(cli):
    """Register import commands with main CLI."""
    cli.add_command(import_statement)
    cli.add_command(list_imports)
