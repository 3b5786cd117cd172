"""Domain tests for subscription detection and management."""

import pytest
from datetime import date, timedelta

from ledgerwise.domain.entities import BillingCycle, DetectionResult
from ledgerwise.domain.errors import ConflictError, NotFoundError, ValidationError


def add_series(add_transaction, description, start, step_days, amounts, type="Sale"):
    return [
        add_transaction(start + timedelta(days=step_days * i), description, amount, type=type)
        for i, amount in enumerate(amounts)
    ]


class TestDetectRecurringCharges:
    """Tests for detection against the ledger."""

    def test_detects_monthly_subscription(self, subscription_service, add_transaction):
        ids = add_series(add_transaction, "SPOTIFY #123", date(2024, 1, 3), 30, [-999] * 4)

        result = subscription_service.detect_recurring_charges()

        assert result == DetectionResult(created=1, updated=0)
        [summary] = subscription_service.list_subscriptions()
        sub = summary.subscription
        assert sub.name == "Spotify"
        assert sub.billing_cycle is BillingCycle.MONTHLY
        assert sub.estimated_amount_cents == 999
        assert sub.first_seen_date == date(2024, 1, 3)
        assert sub.last_seen_date == date(2024, 4, 2)
        assert sub.is_active
        assert summary.annual_cost_cents == 999 * 12
        assert summary.transaction_count == 4
        assert subscription_service.get_linked_transaction_ids(sub.id) == ids

    def test_empty_ledger(self, subscription_service):
        assert subscription_service.detect_recurring_charges() == DetectionResult(0, 0)

    def test_rerun_is_idempotent(self, subscription_service, add_transaction):
        add_series(add_transaction, "SPOTIFY", date(2024, 1, 3), 30, [-999] * 3)
        subscription_service.detect_recurring_charges()

        result = subscription_service.detect_recurring_charges()

        assert result == DetectionResult(created=0, updated=0)
        [summary] = subscription_service.list_subscriptions()
        assert summary.transaction_count == 3

    def test_new_charge_updates_existing_subscription(self, subscription_service, add_transaction):
        add_series(add_transaction, "SPOTIFY", date(2024, 1, 3), 30, [-999] * 3)
        subscription_service.detect_recurring_charges()
        add_transaction(date(2024, 4, 2), "SPOTIFY", -999)

        result = subscription_service.detect_recurring_charges()

        assert result == DetectionResult(created=0, updated=1)
        [summary] = subscription_service.list_subscriptions()
        assert summary.subscription.last_seen_date == date(2024, 4, 2)
        assert summary.transaction_count == 4

    def test_detection_reactivates_archived_subscription(
        self, subscription_service, add_transaction
    ):
        add_series(add_transaction, "SPOTIFY", date(2024, 1, 3), 30, [-999] * 3)
        subscription_service.detect_recurring_charges()
        [summary] = subscription_service.list_subscriptions()
        subscription_service.archive_subscription(summary.subscription.id)

        result = subscription_service.detect_recurring_charges()

        assert result.updated == 1
        assert subscription_service.get_subscription(summary.subscription.id).is_active

    def test_failed_link_discards_created_subscriptions(
        self, subscription_service, temp_db, add_transaction, monkeypatch
    ):
        """Subscriptions created before a failing link are not kept."""
        add_series(add_transaction, "SPOTIFY", date(2024, 1, 3), 30, [-999] * 3)

        def failing_link(subscription_id, transaction_id):
            raise RuntimeError("link failed")

        monkeypatch.setattr(temp_db, "link_subscription_transaction", failing_link)

        with pytest.raises(RuntimeError):
            subscription_service.detect_recurring_charges()

        assert subscription_service.list_subscriptions() == []

    def test_failed_link_keeps_previous_detection_state(
        self, subscription_service, temp_db, add_transaction, monkeypatch
    ):
        add_series(add_transaction, "SPOTIFY", date(2024, 1, 3), 30, [-999] * 3)
        subscription_service.detect_recurring_charges()
        add_transaction(date(2024, 4, 2), "SPOTIFY", -999)

        def failing_link(subscription_id, transaction_id):
            raise RuntimeError("link failed")

        monkeypatch.setattr(temp_db, "link_subscription_transaction", failing_link)

        with pytest.raises(RuntimeError):
            subscription_service.detect_recurring_charges()

        [summary] = subscription_service.list_subscriptions()
        assert summary.subscription.last_seen_date == date(2024, 3, 3)
        assert summary.transaction_count == 3

    def test_payments_are_ignored(self, subscription_service, add_transaction):
        add_series(
            add_transaction, "AUTOPAY THANK YOU", date(2024, 1, 15), 30, [50000] * 4, type="Payment"
        )
        add_series(
            add_transaction, "ACH SETTLEMENT", date(2024, 1, 20), 30, [50000] * 4, type="SETTLEMENT"
        )

        assert subscription_service.detect_recurring_charges() == DetectionResult(0, 0)

    def test_inconsistent_amounts_are_ignored(self, subscription_service, add_transaction):
        add_series(
            add_transaction, "GROCER", date(2024, 1, 1), 30, [-1000, -2000, -3000, -4000, -5000]
        )

        assert subscription_service.detect_recurring_charges() == DetectionResult(0, 0)

    def test_multiple_subscriptions(self, subscription_service, add_transaction):
        add_series(add_transaction, "NETFLIX.COM", date(2024, 1, 5), 31, [-1549] * 3)
        add_series(add_transaction, "GYM CLUB", date(2024, 1, 1), 7, [-1200] * 5)
        add_series(add_transaction, "CAR INSURANCE", date(2023, 1, 10), 91, [-30000] * 4)

        result = subscription_service.detect_recurring_charges()

        assert result.created == 3
        cycles = {
            s.subscription.name: s.subscription.billing_cycle
            for s in subscription_service.list_subscriptions()
        }
        assert cycles == {
            "Netflix.com": BillingCycle.MONTHLY,
            "Gym Club": BillingCycle.WEEKLY,
            "Car Insurance": BillingCycle.QUARTERLY,
        }

    def test_detects_from_imported_statement(
        self, subscription_service, import_service, sample_account, fixtures_dir
    ):
        import_service.import_file(str(fixtures_dir / "chase_subscriptions.csv"), sample_account.id)

        result = subscription_service.detect_recurring_charges()

        assert result == DetectionResult(created=1, updated=0)
        [summary] = subscription_service.list_subscriptions()
        assert summary.subscription.name == "Netflix.com"
        assert summary.subscription.estimated_amount_cents == 1549


class TestSubscriptionManagement:
    """Tests for manual subscription management."""

    def test_create_subscription(self, subscription_service, category_service):
        streaming = category_service.create_category("Streaming")

        sub_id = subscription_service.create_subscription(
            "Disney+", billing_cycle="annual", estimated_amount_cents=13999, category_id=streaming
        )

        [summary] = subscription_service.list_subscriptions()
        assert summary.subscription.id == sub_id
        assert summary.subscription.billing_cycle is BillingCycle.ANNUAL
        assert summary.annual_cost_cents == 13999
        assert summary.category_name == "Streaming"
        assert summary.transaction_count == 0

    def test_create_without_amount_has_no_annual_cost(self, subscription_service):
        subscription_service.create_subscription("Mystery", billing_cycle="weekly")

        [summary] = subscription_service.list_subscriptions()
        assert summary.annual_cost_cents is None

    def test_create_duplicate_name(self, subscription_service):
        subscription_service.create_subscription("Disney+")

        with pytest.raises(ConflictError):
            subscription_service.create_subscription("Disney+")

    def test_create_validation(self, subscription_service):
        with pytest.raises(ValidationError):
            subscription_service.create_subscription("  ")
        with pytest.raises(ValidationError):
            subscription_service.create_subscription("Disney+", billing_cycle="daily")
        with pytest.raises(NotFoundError):
            subscription_service.create_subscription("Disney+", category_id=99)

    def test_annual_cost_by_cycle(self, subscription_service):
        for name, cycle in [("W", "weekly"), ("M", "monthly"), ("Q", "quarterly"), ("A", "annual")]:
            subscription_service.create_subscription(name, billing_cycle=cycle, estimated_amount_cents=100)

        costs = {
            s.subscription.name: s.annual_cost_cents
            for s in subscription_service.list_subscriptions()
        }
        assert costs == {"W": 5200, "M": 1200, "Q": 400, "A": 100}

    def test_list_orders_active_first_then_amount(self, subscription_service):
        small = subscription_service.create_subscription("Small", estimated_amount_cents=100)
        big = subscription_service.create_subscription("Big", estimated_amount_cents=9000)
        archived = subscription_service.create_subscription("Old", estimated_amount_cents=99999)
        subscription_service.archive_subscription(archived)

        ids = [s.subscription.id for s in subscription_service.list_subscriptions()]

        assert ids == [big, small, archived]

    def test_update_subscription(self, subscription_service):
        sub_id = subscription_service.create_subscription("Disney+")

        updated = subscription_service.update_subscription(
            sub_id, name="Disney Plus", notes="shared with family", review_date=date(2024, 6, 1)
        )

        assert updated.name == "Disney Plus"
        assert updated.notes == "shared with family"
        assert updated.review_date == date(2024, 6, 1)

    def test_update_clears_nullable_field(self, subscription_service):
        sub_id = subscription_service.create_subscription("Disney+", notes="x")

        updated = subscription_service.update_subscription(sub_id, notes=None)

        assert updated.notes is None

    def test_update_errors(self, subscription_service):
        sub_id = subscription_service.create_subscription("Disney+")
        subscription_service.create_subscription("Hulu")

        with pytest.raises(NotFoundError):
            subscription_service.update_subscription(999, notes="x")
        with pytest.raises(ValidationError):
            subscription_service.update_subscription(sub_id, estimated_amount_cents=1)
        with pytest.raises(ConflictError):
            subscription_service.update_subscription(sub_id, name="Hulu")
        with pytest.raises(NotFoundError):
            subscription_service.update_subscription(sub_id, category_id=42)

    def test_archive_is_idempotent(self, subscription_service):
        sub_id = subscription_service.create_subscription("Disney+")

        subscription_service.archive_subscription(sub_id)
        subscription_service.archive_subscription(sub_id)

        assert not subscription_service.get_subscription(sub_id).is_active

    def test_archive_missing(self, subscription_service):
        with pytest.raises(NotFoundError):
            subscription_service.archive_subscription(1)
