"""CLI error handling helpers."""

from datetime import date

import click

from ledgerwise.domain.errors import DomainError
from ledgerwise.utils.date_parser import parse_statement_date


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def parse_date_or_exit(ctx: click.Context, value: str | None, label: str) -> date | None:
    """Parse a date option, or exit with a CLI error naming the option."""
    if not value:
        return None
    try:
        return parse_statement_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)
