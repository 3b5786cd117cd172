"""Subscription commands."""

import click
from ledgerwise.cli.category_resolution import category_id_or_exit
from ledgerwise.cli.error_handling import handle_domain_error, parse_date_or_exit
from ledgerwise.domain.entities import BillingCycle
from ledgerwise.domain.errors import DomainError
from ledgerwise.domain.subscription import SubscriptionService
from ledgerwise.utils.amount_parser import format_cents, parse_amount_cents

BILLING_CYCLES = [c.value for c in BillingCycle]


@click.group()
def subscription_group():
    """Detect and manage recurring charges."""
    pass


@subscription_group.command("detect")
@click.pass_context
def detect_subscriptions(ctx):
    """Scan the ledger for recurring charges."""
    service = SubscriptionService(ctx.obj["db"])

    result = service.detect_recurring_charges()
    click.echo(f"Detection complete: {result.created} created, {result.updated} updated")


@subscription_group.command("list")
@click.pass_context
def list_subscriptions(ctx):
    """List subscriptions with their annual cost."""
    service = SubscriptionService(ctx.obj["db"])

    summaries = service.list_subscriptions()
    if not summaries:
        click.echo("No subscriptions found. Run 'subscription detect' first.")
        return

    click.echo("\nSubscriptions:")
    click.echo("-" * 90)
    annual_total = 0
    for item in summaries:
        sub = item.subscription
        amount = "-" if sub.estimated_amount_cents is None else format_cents(sub.estimated_amount_cents)
        annual = "-" if item.annual_cost_cents is None else format_cents(item.annual_cost_cents)
        status = "" if sub.is_active else " (archived)"
        category = f" | {item.category_name}" if item.category_name else ""
        click.echo(
            f"ID: {sub.id:3d} | {sub.name:24s} | {sub.billing_cycle.value:9s} | "
            f"{amount:>10s} | {annual:>11s}/yr | {item.transaction_count} charges{category}{status}"
        )
        if sub.is_active and item.annual_cost_cents is not None:
            annual_total += item.annual_cost_cents

    click.echo("-" * 90)
    click.echo(f"Active annual total: {format_cents(annual_total)}")


@subscription_group.command("create")
@click.argument("name")
@click.option(
    "--cycle",
    type=click.Choice(BILLING_CYCLES, case_sensitive=False),
    default=BillingCycle.MONTHLY.value,
    show_default=True,
    help="Billing cycle",
)
@click.option("--amount", help="Charge per cycle, e.g. 15.49")
@click.option("--category", help="Category name")
@click.option("--review-date", help="Date to review the subscription (YYYY-MM-DD)")
@click.option("--notes", help="Free-form notes")
@click.pass_context
def create_subscription(
    ctx,
    name: str,
    cycle: str,
    amount: str | None,
    category: str | None,
    review_date: str | None,
    notes: str | None,
):
    """Track a subscription that detection did not find.

    Examples:
        ledgerwise subscription create "Spotify" --amount 10.99
        ledgerwise subscription create "Domain renewal" --cycle annual --amount 12.00
    """
    service = SubscriptionService(ctx.obj["db"])

    amount_cents = None
    if amount is not None:
        try:
            amount_cents = abs(parse_amount_cents(amount))
        except ValueError as e:
            handle_domain_error(ctx, e)
    category_id = category_id_or_exit(ctx, category)
    review = parse_date_or_exit(ctx, review_date, "review date")

    try:
        subscription_id = service.create_subscription(
            name=name,
            billing_cycle=cycle.lower(),
            estimated_amount_cents=amount_cents,
            category_id=category_id,
            review_date=review,
            notes=notes,
        )
        click.echo(f"Created subscription '{name.strip()}' (ID: {subscription_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@subscription_group.command("update")
@click.argument("subscription_id", type=int)
@click.option("--name", help="New name")
@click.option("--category", help="Category name, or empty string to clear")
@click.option("--review-date", help="Review date (YYYY-MM-DD), or empty string to clear")
@click.option("--notes", help="Notes, or empty string to clear")
@click.option("--active/--inactive", "is_active", default=None, help="Reactivate or archive")
@click.pass_context
def update_subscription(
    ctx,
    subscription_id: int,
    name: str | None,
    category: str | None,
    review_date: str | None,
    notes: str | None,
    is_active: bool | None,
):
    """Edit a subscription.

    Examples:
        ledgerwise subscription update 3 --category Entertainment
        ledgerwise subscription update 3 --review-date 2025-01-15 --notes "cancel?"
        ledgerwise subscription update 3 --active
    """
    service = SubscriptionService(ctx.obj["db"])

    changes = {}
    if name is not None:
        changes["name"] = name
    if category is not None:
        changes["category_id"] = category_id_or_exit(ctx, category) if category else None
    if review_date is not None:
        changes["review_date"] = parse_date_or_exit(ctx, review_date, "review date")
    if notes is not None:
        changes["notes"] = notes or None
    if is_active is not None:
        changes["is_active"] = is_active

    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        updated = service.update_subscription(subscription_id, **changes)
        click.echo(f"Updated subscription {updated.id}: {updated.name}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@subscription_group.command("archive")
@click.argument("subscription_id", type=int)
@click.pass_context
def archive_subscription(ctx, subscription_id: int):
    """Mark a subscription as no longer active."""
    service = SubscriptionService(ctx.obj["db"])

    try:
        service.archive_subscription(subscription_id)
        click.echo(f"Archived subscription {subscription_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register subscription commands with main CLI."""
    cli.add_command(subscription_group, name="subscription")
