"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, Any
from datetime import date

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerwise.domain.entities import (
    Account,
    Category,
    Rule,
    ImportBatch,
    Transaction,
    Subscription,
    MonthlySnapshot,
)


class Database(ABC):
    """Abstract database interface for ledgerwise."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager[None]:
        """Group writes into one atomic transaction.

        Writes made inside the block are committed together when it exits
        normally and rolled back together if it raises.
        """
        pass

    # Account operations
    @abstractmethod
    def create_account(self, name: str, issuer: str) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_name(self, name: str) -> Optional[Account]:
        """Get account by name."""
        pass

    @abstractmethod
    def list_accounts(self, active_only: bool = True) -> list[Account]:
        """List accounts ordered by name."""
        pass

    @abstractmethod
    def set_account_active(self, account_id: int, is_active: bool) -> None:
        """Activate or archive an account."""
        pass

    @abstractmethod
    def update_account(self, account_id: int, changes: dict[str, Any]) -> None:
        """Apply column changes to an account."""
        pass

    # Category operations
    @abstractmethod
    def create_category(self, name: str, parent_id: Optional[int] = None) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def get_category_by_name(self, name: str, parent_id: Optional[int] = None) -> Optional[Category]:
        """Get category by name under the given parent (None for top level)."""
        pass

    @abstractmethod
    def list_categories(self) -> list[Category]:
        """List all categories ordered by name."""
        pass

    # Rule operations
    @abstractmethod
    def create_rule(
        self,
        rule_type: str,
        match_pattern: str,
        match_field: str = "description",
        match_mode: str = "contains",
        target_category_id: Optional[int] = None,
        display_name: Optional[str] = None,
        priority: int = 100,
    ) -> int:
        """Create a rule. Returns rule ID."""
        pass

    @abstractmethod
    def get_rule(self, rule_id: int) -> Optional[Rule]:
        """Get rule by ID."""
        pass

    @abstractmethod
    def list_rules(self, active_only: bool = True) -> list[Rule]:
        """List rules in evaluation order (priority, then ID)."""
        pass

    @abstractmethod
    def update_rule(self, rule_id: int, changes: dict[str, Any]) -> None:
        """Apply column changes to a rule."""
        pass

    @abstractmethod
    def delete_rule(self, rule_id: int) -> None:
        """Delete a rule."""
        pass

    # Import batch operations
    @abstractmethod
    def create_import_batch(
        self, account_id: int, filename: str, file_hash: str, row_count: int
    ) -> int:
        """Create an import batch record. Returns batch ID."""
        pass

    @abstractmethod
    def finalize_import_batch(self, batch_id: int, imported_count: int, skipped_count: int) -> None:
        """Record final counts on an import batch."""
        pass

    @abstractmethod
    def get_import_batch(self, batch_id: int) -> Optional[ImportBatch]:
        """Get import batch by ID."""
        pass

    @abstractmethod
    def list_import_batches(self) -> list[ImportBatch]:
        """List import batches, newest first."""
        pass

    # Transaction operations
    @abstractmethod
    def insert_transaction(
        self,
        account_id: int,
        import_id: int,
        transaction_date: date,
        posted_date: date,
        description: str,
        original_category: str,
        type: str,
        amount_cents: int,
        dedup_key: str,
        memo: Optional[str] = None,
        display_name: Optional[str] = None,
        category_id: Optional[int] = None,
        notes: Optional[str] = None,
        is_return: bool = False,
    ) -> tuple[bool, int]:
        """Insert a ledger entry unless its dedup key already exists.

        Returns:
            Tuple of (inserted, transaction ID). When the dedup key is already
            present nothing is written and the existing row's ID is returned.
        """
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        exclude_types: Optional[set[str]] = None,
        category_id: Optional[int] = None,
        type: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Transaction]:
        """List transactions ordered by date ascending, then ID.

        Args:
            account_id: Optional account ID filter
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
            exclude_types: Lower-case type labels to leave out
            category_id: Optional category ID filter
            type: Optional type label filter, case-insensitive
            limit: Maximum number of rows, or None for all
            offset: Number of matching rows to skip
        """
        pass

    @abstractmethod
    def get_transaction_months(self, account_id: int) -> list[str]:
        """Get the distinct ``YYYY-MM`` months an account has transactions in."""
        pass

    @abstractmethod
    def update_transaction(self, transaction_id: int, changes: dict[str, Any]) -> None:
        """Apply column changes to a transaction."""
        pass

    # Subscription operations
    @abstractmethod
    def create_subscription(
        self,
        name: str,
        billing_cycle: str,
        estimated_amount_cents: Optional[int] = None,
        first_seen_date: Optional[date] = None,
        last_seen_date: Optional[date] = None,
        category_id: Optional[int] = None,
        review_date: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Create a subscription. Returns subscription ID."""
        pass

    @abstractmethod
    def get_subscription(self, subscription_id: int) -> Optional[Subscription]:
        """Get subscription by ID."""
        pass

    @abstractmethod
    def get_subscription_by_name(self, name: str) -> Optional[Subscription]:
        """Get subscription by exact name."""
        pass

    @abstractmethod
    def list_subscriptions(self) -> list[Subscription]:
        """List subscriptions, active first, then by estimated amount descending."""
        pass

    @abstractmethod
    def update_subscription(self, subscription_id: int, changes: dict[str, Any]) -> None:
        """Apply column changes to a subscription."""
        pass

    @abstractmethod
    def link_subscription_transaction(self, subscription_id: int, transaction_id: int) -> bool:
        """Link a transaction to a subscription.

        Returns:
            True if a new link was written, False if it already existed
        """
        pass

    @abstractmethod
    def get_subscription_transaction_ids(self, subscription_id: int) -> list[int]:
        """Get IDs of transactions linked to a subscription."""
        pass

    # Monthly snapshot operations
    @abstractmethod
    def upsert_monthly_snapshot(
        self,
        month: str,
        account_id: Optional[int],
        total_spend_cents: int,
        total_credits_cents: int,
        net_spend_cents: int,
        transaction_count: int,
    ) -> None:
        """Create or replace the snapshot for a month and account."""
        pass

    @abstractmethod
    def list_monthly_snapshots(self, account_id: Optional[int] = None) -> list[MonthlySnapshot]:
        """List snapshots, newest month first.

        Args:
            account_id: If given, only that account's snapshots; otherwise all
        """
        pass
