"""Rule management commands."""

import click
from ledgerwise.cli.category_resolution import category_id_or_exit
from ledgerwise.cli.error_handling import handle_domain_error
from ledgerwise.domain.category import CategoryService
from ledgerwise.domain.entities import MatchMode, RuleType
from ledgerwise.domain.errors import DomainError
from ledgerwise.domain.rules import RuleService

RULE_TYPES = [t.value for t in RuleType]
MATCH_MODES = [m.value for m in MatchMode]


@click.group()
def rule_group():
    """Manage categorization and merchant cleanup rules."""
    pass


@rule_group.command("create")
@click.argument("pattern")
@click.option(
    "--type",
    "rule_type",
    type=click.Choice(RULE_TYPES, case_sensitive=False),
    required=True,
    help="What the rule sets when it matches",
)
@click.option(
    "--mode",
    type=click.Choice(MATCH_MODES, case_sensitive=False),
    default=MatchMode.CONTAINS.value,
    show_default=True,
    help="How PATTERN is compared with the description",
)
@click.option("--category", help="Target category name (categorize rules)")
@click.option("--display-name", help="Merchant display name (merchant_cleanup rules)")
@click.option("--priority", type=int, default=100, show_default=True, help="Lower runs first")
@click.pass_context
def create_rule(
    ctx,
    pattern: str,
    rule_type: str,
    mode: str,
    category: str | None,
    display_name: str | None,
    priority: int,
):
    """Create a rule matching PATTERN against transaction descriptions.

    Examples:
        ledgerwise rule create "WHOLE FOODS" --type categorize --category Groceries
        ledgerwise rule create "^NETFLIX" --type merchant_cleanup --mode regex --display-name Netflix
    """
    service = RuleService(ctx.obj["db"])
    category_id = category_id_or_exit(ctx, category)

    try:
        rule_id = service.create_rule(
            rule_type=rule_type.lower(),
            match_pattern=pattern,
            match_mode=mode.lower(),
            target_category_id=category_id,
            display_name=display_name,
            priority=priority,
        )
        click.echo(f"Created rule {rule_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@rule_group.command("list")
@click.option("--all", "show_all", is_flag=True, help="Include inactive rules")
@click.pass_context
def list_rules(ctx, show_all: bool):
    """List rules in evaluation order."""
    db = ctx.obj["db"]
    service = RuleService(db)

    rules = service.list_rules(active_only=not show_all)
    if not rules:
        click.echo("No rules found.")
        return

    categories = {cat.id: cat.name for cat in CategoryService(db).list_categories()}

    click.echo(f"\nRules ({len(rules)}):")
    click.echo("-" * 80)
    for rule in rules:
        if rule.rule_type is RuleType.CATEGORIZE:
            target = f"category={categories.get(rule.target_category_id, '?')}"
        else:
            target = f"name={rule.display_name}"
        status = "" if rule.is_active else " (inactive)"
        click.echo(
            f"ID: {rule.id:3d} | p{rule.priority:<4d} | {rule.rule_type.value:16s} | "
            f"{rule.match_mode.value:11s} | {rule.match_pattern} -> {target}{status}"
        )


@rule_group.command("update")
@click.argument("rule_id", type=int)
@click.option("--pattern", help="New match pattern")
@click.option("--mode", type=click.Choice(MATCH_MODES, case_sensitive=False), help="New match mode")
@click.option("--category", help="New target category name")
@click.option("--display-name", help="New display name")
@click.option("--priority", type=int, help="New priority")
@click.option("--active/--inactive", default=None, help="Enable or disable the rule")
@click.pass_context
def update_rule(
    ctx,
    rule_id: int,
    pattern: str | None,
    mode: str | None,
    category: str | None,
    display_name: str | None,
    priority: int | None,
    active: bool | None,
):
    """Update the given fields of a rule."""
    service = RuleService(ctx.obj["db"])

    changes = {}
    if pattern is not None:
        changes["match_pattern"] = pattern
    if mode is not None:
        changes["match_mode"] = mode.lower()
    if category is not None:
        changes["target_category_id"] = category_id_or_exit(ctx, category)
    if display_name is not None:
        changes["display_name"] = display_name
    if priority is not None:
        changes["priority"] = priority
    if active is not None:
        changes["is_active"] = active

    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        service.update_rule(rule_id, **changes)
        click.echo(f"Updated rule {rule_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@rule_group.command("delete")
@click.argument("rule_id", type=int)
@click.pass_context
def delete_rule(ctx, rule_id: int):
    """Delete a rule."""
    service = RuleService(ctx.obj["db"])

    try:
        service.delete_rule(rule_id)
        click.echo(f"Deleted rule {rule_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register rule commands with main CLI."""
    cli.add_command(rule_group, name="rule")
