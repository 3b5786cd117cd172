"""Subscription domain service."""

from datetime import date
from typing import Any, Optional

from ledgerwise.database.base import Database
from ledgerwise.domain.detection import RecurringCharge, find_recurring_charges
from ledgerwise.domain.entities import (
    BillingCycle,
    DetectionResult,
    Subscription,
    SubscriptionSummary,
)
from ledgerwise.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    category_not_found,
    subscription_not_found,
)
from ledgerwise.domain.snapshot import PAYMENT_TYPES
from ledgerwise.logging_setup import get_logger

logger = get_logger(__name__)

UPDATABLE_SUBSCRIPTION_FIELDS = ("name", "category_id", "review_date", "notes", "is_active")


def _parse_billing_cycle(value: str | BillingCycle) -> BillingCycle:
    try:
        return BillingCycle(value)
    except ValueError:
        choices = ", ".join(c.value for c in BillingCycle)
        raise ValidationError(f"Invalid billing cycle '{value}'. Expected one of: {choices}")


class SubscriptionService:
    """Service for detecting and managing recurring charges."""

    def __init__(self, db: Database):
        """Initialize subscription service.

        Args:
            db: Database instance
        """
        self.db = db

    def detect_recurring_charges(self) -> DetectionResult:
        """Scan the whole ledger for recurring charges and upsert subscriptions.

        Payment and settlement transactions are ignored. A subscription is
        matched by display name: new names create rows, known names are
        refreshed and reactivated. Every charge in a qualifying group is
        linked to its subscription. Re-running on unchanged data creates and
        updates nothing.

        Returns:
            DetectionResult with created and updated counts
        """
        transactions = self.db.list_transactions(exclude_types=set(PAYMENT_TYPES))
        charges = find_recurring_charges(transactions)

        created = 0
        updated = 0
        with self.db.unit_of_work():
            for charge in charges:
                subscription_id, was_created, was_updated = self._upsert(charge)
                created += was_created
                updated += was_updated
                for transaction_id in charge.transaction_ids:
                    self.db.link_subscription_transaction(subscription_id, transaction_id)

        logger.info(
            "Detection scanned %d transaction(s): %d created, %d updated",
            len(transactions),
            created,
            updated,
        )
        return DetectionResult(created=created, updated=updated)

    def _upsert(self, charge: RecurringCharge) -> tuple[int, bool, bool]:
        existing = self.db.get_subscription_by_name(charge.display_name)
        if existing is None:
            subscription_id = self.db.create_subscription(
                name=charge.display_name,
                billing_cycle=charge.billing_cycle.value,
                estimated_amount_cents=charge.amount_cents,
                first_seen_date=charge.first_seen,
                last_seen_date=charge.last_seen,
            )
            logger.info(
                "Created subscription '%s' (%s, %d)",
                charge.display_name,
                charge.billing_cycle.value,
                charge.amount_cents,
            )
            return subscription_id, True, False

        changes = {
            column: value
            for column, value, current in (
                ("estimated_amount_cents", charge.amount_cents, existing.estimated_amount_cents),
                ("billing_cycle", charge.billing_cycle.value, existing.billing_cycle.value),
                ("first_seen_date", charge.first_seen, existing.first_seen_date),
                ("last_seen_date", charge.last_seen, existing.last_seen_date),
                ("is_active", True, existing.is_active),
            )
            if value != current
        }
        if not changes:
            return existing.id, False, False

        self.db.update_subscription(existing.id, changes)
        logger.info("Updated subscription '%s': %s", charge.display_name, ", ".join(changes))
        return existing.id, False, True

    def create_subscription(
        self,
        name: str,
        billing_cycle: str | BillingCycle = BillingCycle.MONTHLY,
        estimated_amount_cents: Optional[int] = None,
        category_id: Optional[int] = None,
        review_date: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Create a subscription by hand.

        Returns:
            Subscription ID

        Raises:
            ValidationError: If name is empty or the cycle is unknown
            ConflictError: If a subscription with that name exists
            NotFoundError: If the category doesn't exist
        """
        name = name.strip()
        if not name:
            raise ValidationError("Subscription name cannot be empty")
        cycle = _parse_billing_cycle(billing_cycle)
        if self.db.get_subscription_by_name(name) is not None:
            raise ConflictError(f"Subscription '{name}' already exists")
        if category_id is not None and self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))

        return self.db.create_subscription(
            name=name,
            billing_cycle=cycle.value,
            estimated_amount_cents=estimated_amount_cents,
            category_id=category_id,
            review_date=review_date,
            notes=notes,
        )

    def get_subscription(self, subscription_id: int) -> Optional[Subscription]:
        return self.db.get_subscription(subscription_id)

    def list_subscriptions(self) -> list[SubscriptionSummary]:
        """List subscriptions with annual cost, category name and charge count."""
        summaries = []
        for sub in self.db.list_subscriptions():
            annual_cost = None
            if sub.estimated_amount_cents is not None:
                annual_cost = sub.estimated_amount_cents * sub.billing_cycle.charges_per_year

            category_name = None
            if sub.category_id is not None:
                category = self.db.get_category(sub.category_id)
                category_name = category.name if category is not None else None

            summaries.append(
                SubscriptionSummary(
                    subscription=sub,
                    annual_cost_cents=annual_cost,
                    category_name=category_name,
                    transaction_count=len(self.db.get_subscription_transaction_ids(sub.id)),
                )
            )
        return summaries

    def get_linked_transaction_ids(self, subscription_id: int) -> list[int]:
        """IDs of the charges linked to a subscription."""
        return self.db.get_subscription_transaction_ids(subscription_id)

    def update_subscription(self, subscription_id: int, **changes: Any) -> Subscription:
        """Update user-editable subscription fields.

        Args:
            subscription_id: Subscription ID
            **changes: Any of name, category_id, review_date, notes,
                is_active. None clears nullable fields.

        Returns:
            Updated subscription

        Raises:
            NotFoundError: If subscription or category doesn't exist
            ValidationError: If a field is unknown or the name is empty
            ConflictError: If the new name is taken
        """
        current = self.db.get_subscription(subscription_id)
        if current is None:
            raise NotFoundError(subscription_not_found(subscription_id))

        unknown = set(changes) - set(UPDATABLE_SUBSCRIPTION_FIELDS)
        if unknown:
            raise ValidationError(
                f"Cannot update subscription fields: {', '.join(sorted(unknown))}"
            )

        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                raise ValidationError("Subscription name cannot be empty")
            other = self.db.get_subscription_by_name(name)
            if other is not None and other.id != subscription_id:
                raise ConflictError(f"Subscription '{name}' already exists")
            changes["name"] = name

        category_id = changes.get("category_id")
        if category_id is not None and self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))

        self.db.update_subscription(subscription_id, changes)
        return self.db.get_subscription(subscription_id)

    def archive_subscription(self, subscription_id: int) -> None:
        """Mark a subscription inactive. Archiving twice is fine.

        Raises:
            NotFoundError: If subscription doesn't exist
        """
        if self.db.get_subscription(subscription_id) is None:
            raise NotFoundError(subscription_not_found(subscription_id))
        self.db.update_subscription(subscription_id, {"is_active": False})
