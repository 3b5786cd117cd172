"""Main CLI entry point."""

import click
from ledgerwise.database.factories import create_sqlite_database
from ledgerwise.logging_setup import configure_logging
from ledgerwise.parsers import create_default_registry

from ledgerwise.cli.commands import (
    account,
    category,
    import_cmd,
    rule,
    subscription,
    transaction,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(dir_okay=False),
    help="Path to database file (overrides LEDGERWISE_DB_PATH environment variable)",
    envvar="LEDGERWISE_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Log level (overrides LEDGERWISE_LOG_LEVEL environment variable)",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """Ledgerwise - card statement ledger and subscription tracker.

    Import issuer statements into a deduplicated ledger, enrich them with
    rules and find the recurring charges hiding in them.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Help output doesn't need a database
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["registry"] = create_default_registry()
        ctx.call_on_close(db.disconnect)


account.register_commands(cli)
category.register_commands(cli)
rule.register_commands(cli)
import_cmd.register_commands(cli)
subscription.register_commands(cli)
transaction.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
