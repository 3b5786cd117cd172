"""Category management commands."""

import click
from ledgerwise.cli.error_handling import handle_domain_error
from ledgerwise.domain.category import CategoryService
from ledgerwise.domain.errors import DomainError


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.pass_context
def list_categories(ctx):
    """List categories, children indented under their parent."""
    service = CategoryService(ctx.obj["db"])

    categories = service.list_categories()
    if not categories:
        click.echo("No categories found.")
        return

    children: dict[int, list] = {}
    for cat in categories:
        if cat.parent_id is not None:
            children.setdefault(cat.parent_id, []).append(cat)

    click.echo("\nCategories:")
    for cat in categories:
        if cat.parent_id is not None:
            continue
        click.echo(f"{cat.name} (ID: {cat.id})")
        for child in children.get(cat.id, []):
            click.echo(f"  {child.name} (ID: {child.id})")


@category_group.command("create")
@click.argument("name")
@click.option("--parent", help="Parent category name")
@click.pass_context
def create_category(ctx, name: str, parent: str | None):
    """Create a new category."""
    service = CategoryService(ctx.obj["db"])

    try:
        category_id = service.create_category(name=name, parent_name=parent)
        parent_str = f" under '{parent}'" if parent else ""
        click.echo(f"Created category '{name}'{parent_str} (ID: {category_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
