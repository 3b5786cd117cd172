"""Monthly snapshot domain service."""

from typing import Optional

from ledgerwise.database.base import Database
from ledgerwise.domain.entities import MonthlySnapshot
from ledgerwise.logging_setup import get_logger
from ledgerwise.utils.date_parser import month_bounds

logger = get_logger(__name__)

# Card payments move money between accounts and are not spending
PAYMENT_TYPES = frozenset({"payment", "settlement"})


class SnapshotService:
    """Recomputes per-month spend aggregates from the ledger."""

    def __init__(self, db: Database):
        self.db = db

    def recompute_snapshot(self, month: str, account_id: Optional[int]) -> None:
        """Recompute one month for one account, or for all accounts when
        ``account_id`` is None.

        Args:
            month: Month as ``YYYY-MM``
            account_id: Account ID, or None for the cross-account total
        """
        start, end = month_bounds(month)
        transactions = self.db.list_transactions(
            account_id=account_id,
            start_date=start,
            end_date=end,
            exclude_types=set(PAYMENT_TYPES),
        )

        amounts = [txn.amount_cents for txn in transactions]
        self.db.upsert_monthly_snapshot(
            month=month,
            account_id=account_id,
            total_spend_cents=abs(sum(a for a in amounts if a < 0)),
            total_credits_cents=sum(a for a in amounts if a > 0),
            net_spend_cents=abs(sum(amounts)),
            transaction_count=len(amounts),
        )

    def recompute_for_account(self, account_id: int) -> list[str]:
        """Recompute every month the account has transactions in, both for
        the account and for the cross-account total.

        Returns:
            The months recomputed
        """
        months = self.db.get_transaction_months(account_id)
        for month in months:
            self.recompute_snapshot(month, account_id)
            self.recompute_snapshot(month, None)
        logger.debug("Recomputed %d month(s) for account %s", len(months), account_id)
        return months

    def get_snapshots(self, account_id: Optional[int] = None) -> list[MonthlySnapshot]:
        """List snapshots, newest month first."""
        return self.db.list_monthly_snapshots(account_id=account_id)
