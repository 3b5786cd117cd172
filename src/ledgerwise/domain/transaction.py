"""Transaction domain service."""

from datetime import date
from typing import Any, Optional
from ledgerwise.database.base import Database
from ledgerwise.domain.entities import Transaction as TransactionEntity
from ledgerwise.domain.errors import (
    NotFoundError,
    ValidationError,
    category_not_found,
    transaction_not_found,
)

# Ownership and imported values are fixed once a ledger entry exists
OVERRIDE_FIELDS = ("display_name", "category_id", "notes")


class TransactionService:
    """Service for reading ledger entries and editing their overrides."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def list_transactions(
        self,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
        type: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[TransactionEntity]:
        """List transactions, oldest first.

        Args:
            account_id: Optional account ID filter
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
            category_id: Optional category ID filter
            type: Optional statement type filter, e.g. "Sale"
            limit: Maximum number of transactions, or None for all
            offset: Number of matching transactions to skip

        Raises:
            ValidationError: If the date range is inverted or paging is negative
        """
        if start_date and end_date and start_date > end_date:
            raise ValidationError("Start date must not be after end date")
        if offset < 0 or (limit is not None and limit < 0):
            raise ValidationError("Limit and offset must not be negative")

        return self.db.list_transactions(
            account_id=account_id,
            start_date=start_date,
            end_date=end_date,
            category_id=category_id,
            type=type,
            limit=limit,
            offset=offset,
        )

    def update_overrides(self, transaction_id: int, **changes: Any) -> TransactionEntity:
        """Set or clear the display name, category or notes of a transaction.

        Args:
            transaction_id: Transaction ID
            **changes: Any of display_name, category_id, notes; None clears

        Returns:
            Updated transaction

        Raises:
            NotFoundError: If transaction or category doesn't exist
            ValidationError: If a non-override field is passed
        """
        if self.db.get_transaction(transaction_id) is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        unknown = set(changes) - set(OVERRIDE_FIELDS)
        if unknown:
            raise ValidationError(
                f"Cannot update transaction fields: {', '.join(sorted(unknown))}"
            )

        category_id = changes.get("category_id")
        if category_id is not None and self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))

        self.db.update_transaction(transaction_id, changes)
        return self.db.get_transaction(transaction_id)
