"""Domain model entities for ledgerwise.

These are pure data classes representing business concepts, independent of
database schema. Monetary values are integers in minor currency units
(cents); negative amounts are debits, positive amounts are credits or
returns.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from enum import Enum
from typing import Optional


class RuleType(str, Enum):
    """Kind of override a rule produces."""

    CATEGORIZE = "categorize"
    MERCHANT_CLEANUP = "merchant_cleanup"


class MatchMode(str, Enum):
    """How a rule pattern is compared against a description."""

    CONTAINS = "contains"
    STARTS_WITH = "starts_with"
    EXACT = "exact"
    REGEX = "regex"


class BillingCycle(str, Enum):
    """Recurrence interval of a subscription."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"

    @property
    def charges_per_year(self) -> int:
        return {"weekly": 52, "monthly": 12, "quarterly": 4, "annual": 1}[self.value]


class RowOutcome(str, Enum):
    """Result of handing a single parsed row to the ledger."""

    INSERTED = "inserted"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class Account:
    """Card or bank account domain entity."""

    id: int
    name: str
    issuer: str
    is_active: bool
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Category domain entity with optional parent."""

    id: int
    name: str
    parent_id: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class Rule:
    """Enrichment rule domain entity."""

    id: int
    rule_type: RuleType
    match_field: str
    match_pattern: str
    match_mode: MatchMode
    target_category_id: Optional[int]
    display_name: Optional[str]
    priority: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class RuleMatch:
    """Overrides resolved by rule evaluation for a single description."""

    category_id: Optional[int] = None
    display_name: Optional[str] = None

    @property
    def is_resolved(self) -> bool:
        return self.category_id is not None and self.display_name is not None


@dataclass(frozen=True)
class ParsedRow:
    """Normalized statement row produced by a parser."""

    transaction_date: date
    posted_date: date
    description: str
    original_category: str
    type: str
    amount_cents: int
    memo: str
    is_return: bool


@dataclass(frozen=True)
class ImportBatch:
    """One ingestion of one statement file into one account."""

    id: int
    account_id: int
    filename: str
    file_hash: str
    row_count: int
    imported_count: int
    skipped_count: int
    imported_at: datetime
    account_name: Optional[str] = None


@dataclass(frozen=True)
class Transaction:
    """Ledger entry domain entity."""

    id: int
    account_id: int
    import_id: int
    transaction_date: date
    posted_date: date
    description: str
    original_category: str
    type: str
    amount_cents: int
    memo: Optional[str]
    display_name: Optional[str]
    category_id: Optional[int]
    notes: Optional[str]
    is_return: bool
    dedup_key: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Subscription:
    """Recurring charge domain entity."""

    id: int
    name: str
    category_id: Optional[int]
    estimated_amount_cents: Optional[int]
    billing_cycle: BillingCycle
    first_seen_date: Optional[date]
    last_seen_date: Optional[date]
    is_active: bool
    review_date: Optional[date]
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class SubscriptionSummary:
    """Subscription with its annualized cost and linked transaction count."""

    subscription: Subscription
    annual_cost_cents: Optional[int]
    category_name: Optional[str]
    transaction_count: int


@dataclass(frozen=True)
class MonthlySnapshot:
    """Monthly spend aggregate for one account, or all accounts when
    ``account_id`` is None."""

    id: int
    month: str
    account_id: Optional[int]
    total_spend_cents: int
    total_credits_cents: int
    net_spend_cents: int
    transaction_count: int
    updated_at: datetime


@dataclass(frozen=True)
class RowError:
    """Non-fatal failure recorded for a single statement row."""

    row: int
    reason: str
    raw_snippet: str


@dataclass(frozen=True)
class RowResult:
    """Outcome of inserting one parsed row."""

    outcome: RowOutcome
    transaction_id: Optional[int] = None
    error: Optional[RowError] = None


@dataclass(frozen=True)
class ImportSummary:
    """Structured result of a single ingestion call."""

    success: bool
    batch_id: int
    filename: str
    row_count: int
    imported_count: int
    skipped_count: int
    error_count: int
    errors: list[RowError] = field(default_factory=list)


@dataclass(frozen=True)
class DetectionResult:
    """Counts produced by a recurring-charge detection run."""

    created: int = 0
    updated: int = 0
