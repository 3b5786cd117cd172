"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the domain entities stay
stable when the schema changes.
"""

from ledgerwise.domain import entities as domain
from ledgerwise.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    Rule as ORMRule,
    ImportBatch as ORMImportBatch,
    Transaction as ORMTransaction,
    Subscription as ORMSubscription,
    MonthlySnapshot as ORMMonthlySnapshot,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        issuer=orm_account.issuer,
        is_active=bool(orm_account.is_active),
        created_at=orm_account.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        parent_id=orm_category.parent_id,
        created_at=orm_category.created_at,
    )


def rule_to_domain(orm_rule: ORMRule) -> domain.Rule:
    """Convert SQLAlchemy Rule model to domain Rule entity."""
    return domain.Rule(
        id=orm_rule.id,
        rule_type=domain.RuleType(orm_rule.rule_type),
        match_field=orm_rule.match_field,
        match_pattern=orm_rule.match_pattern,
        match_mode=domain.MatchMode(orm_rule.match_mode),
        target_category_id=orm_rule.target_category_id,
        display_name=orm_rule.display_name,
        priority=orm_rule.priority,
        is_active=bool(orm_rule.is_active),
        created_at=orm_rule.created_at,
        updated_at=orm_rule.updated_at,
    )


def import_batch_to_domain(orm_batch: ORMImportBatch) -> domain.ImportBatch:
    """Convert SQLAlchemy ImportBatch model to domain ImportBatch entity."""
    return domain.ImportBatch(
        id=orm_batch.id,
        account_id=orm_batch.account_id,
        filename=orm_batch.filename,
        file_hash=orm_batch.file_hash,
        row_count=orm_batch.row_count,
        imported_count=orm_batch.imported_count,
        skipped_count=orm_batch.skipped_count,
        imported_at=orm_batch.imported_at,
        account_name=orm_batch.account.name if orm_batch.account is not None else None,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        account_id=orm_transaction.account_id,
        import_id=orm_transaction.import_id,
        transaction_date=orm_transaction.transaction_date,
        posted_date=orm_transaction.posted_date,
        description=orm_transaction.description,
        original_category=orm_transaction.original_category,
        type=orm_transaction.type,
        amount_cents=orm_transaction.amount_cents,
        memo=orm_transaction.memo,
        display_name=orm_transaction.display_name,
        category_id=orm_transaction.category_id,
        notes=orm_transaction.notes,
        is_return=bool(orm_transaction.is_return),
        dedup_key=orm_transaction.dedup_key,
        created_at=orm_transaction.created_at,
        updated_at=orm_transaction.updated_at,
    )


def subscription_to_domain(orm_subscription: ORMSubscription) -> domain.Subscription:
    """Convert SQLAlchemy Subscription model to domain Subscription entity."""
    return domain.Subscription(
        id=orm_subscription.id,
        name=orm_subscription.name,
        category_id=orm_subscription.category_id,
        estimated_amount_cents=orm_subscription.estimated_amount_cents,
        billing_cycle=domain.BillingCycle(orm_subscription.billing_cycle),
        first_seen_date=orm_subscription.first_seen_date,
        last_seen_date=orm_subscription.last_seen_date,
        is_active=bool(orm_subscription.is_active),
        review_date=orm_subscription.review_date,
        notes=orm_subscription.notes,
        created_at=orm_subscription.created_at,
        updated_at=orm_subscription.updated_at,
    )


def snapshot_to_domain(orm_snapshot: ORMMonthlySnapshot) -> domain.MonthlySnapshot:
    """Convert SQLAlchemy MonthlySnapshot model to domain MonthlySnapshot entity."""
    return domain.MonthlySnapshot(
        id=orm_snapshot.id,
        month=orm_snapshot.month,
        account_id=orm_snapshot.account_id,
        total_spend_cents=orm_snapshot.total_spend_cents,
        total_credits_cents=orm_snapshot.total_credits_cents,
        net_spend_cents=orm_snapshot.net_spend_cents,
        transaction_count=orm_snapshot.transaction_count,
        updated_at=orm_snapshot.updated_at,
    )
