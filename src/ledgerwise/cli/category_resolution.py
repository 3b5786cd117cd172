"""CLI helpers for category resolution."""

from __future__ import annotations

import click
from ledgerwise.cli.error_handling import handle_domain_error
from ledgerwise.domain.category import CategoryService
from ledgerwise.domain.errors import NotFoundError


def category_id_or_exit(ctx: click.Context, name: str | None) -> int | None:
    """Resolve a top-level category name to its ID, or exit with a CLI error."""
    if name is None:
        return None
    category = CategoryService(ctx.obj["db"]).get_category_by_name(name)
    if category is None:
        handle_domain_error(ctx, NotFoundError(f"Category '{name}' not found"))
    return category.id
