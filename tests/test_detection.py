"""Tests for the pure recurring-charge heuristics."""

import pytest
from datetime import date, datetime, timedelta

from ledgerwise.domain.detection import (
    classify_cadence,
    compute_intervals,
    evaluate_group,
    find_recurring_charges,
    group_by_merchant,
    has_consistent_amount,
    median_interval,
    modal_amount,
    normalize_description,
    to_display_name,
)
from ledgerwise.domain.entities import BillingCycle, Transaction


def make_txn(txn_id, transaction_date, description, amount_cents):
    now = datetime(2024, 1, 1)
    return Transaction(
        id=txn_id,
        account_id=1,
        import_id=1,
        transaction_date=transaction_date,
        posted_date=transaction_date,
        description=description,
        original_category="",
        type="Sale",
        amount_cents=amount_cents,
        memo=None,
        display_name=None,
        category_id=None,
        notes=None,
        is_return=False,
        dedup_key=f"k{txn_id}",
        created_at=now,
        updated_at=now,
    )


def series(description, start, step_days, amounts):
    return [
        make_txn(i + 1, start + timedelta(days=step_days * i), description, amount)
        for i, amount in enumerate(amounts)
    ]


class TestNormalizeDescription:
    """Tests for grouping-key normalization."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("SPOTIFY #12345 STOCKHOLM", "spotify stockholm"),
            ("AMZN Mktp US*2K4LL8", "amzn mktp us"),
            ("SHELL OIL 57444", "shell oil"),
            ("  NETFLIX.COM   866-579 ", "netflix.com 866-579"),
            ("APPLE.COM/BILL", "apple.com/bill"),
            ("PAYPAL * SPOTIFY", "paypal"),
            ("SQ *COFFEE SHOP", "sq shop"),
            ("GOOGLE *", "google"),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_description(raw) == expected

    def test_store_numbers_group_together(self):
        assert normalize_description("NETFLIX #1001") == normalize_description("netflix #2002")

    def test_only_noise(self):
        assert normalize_description("#123 98765") == ""


def test_display_name_title_cases_each_word():
    assert to_display_name("spotify stockholm") == "Spotify Stockholm"
    assert to_display_name("netflix.com") == "Netflix.com"


def test_compute_intervals():
    dates = [date(2024, 1, 1), date(2024, 1, 31), date(2024, 3, 1)]
    assert compute_intervals(dates) == [30, 30]


class TestMedianInterval:
    """Tests for the median helper."""

    def test_odd_count(self):
        assert median_interval([31, 28, 30]) == 30

    def test_even_count_takes_lower_middle(self):
        assert median_interval([7, 30, 31, 90]) == 30

    def test_single(self):
        assert median_interval([45]) == 45

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            median_interval([])


class TestClassifyCadence:
    """Tests for cadence windows, bounds inclusive."""

    @pytest.mark.parametrize(
        "days, cycle",
        [
            (5, BillingCycle.WEEKLY),
            (6, BillingCycle.WEEKLY),
            (10, BillingCycle.WEEKLY),
            (24, BillingCycle.MONTHLY),
            (30, BillingCycle.MONTHLY),
            (45, BillingCycle.MONTHLY),
            (80, BillingCycle.QUARTERLY),
            (105, BillingCycle.QUARTERLY),
            (330, BillingCycle.ANNUAL),
            (400, BillingCycle.ANNUAL),
        ],
    )
    def test_in_range(self, days, cycle):
        assert classify_cadence(days) is cycle

    @pytest.mark.parametrize("days", [0, 4, 11, 23, 46, 50, 79, 106, 329, 401])
    def test_gaps(self, days):
        assert classify_cadence(days) is None


def test_modal_amount_uses_absolute_values():
    assert modal_amount([-999, 999, -1099]) == (999, 2)


def test_modal_amount_empty_raises():
    with pytest.raises(ValueError):
        modal_amount([])


@pytest.mark.parametrize(
    "count, size, expected",
    [(3, 5, True), (2, 5, False), (2, 2, True), (1, 2, False), (6, 10, True), (5, 10, False)],
)
def test_has_consistent_amount(count, size, expected):
    assert has_consistent_amount(count, size) is expected


class TestEvaluateGroup:
    """Tests for whole-group classification."""

    def test_monthly_charge(self):
        txns = series("SPOTIFY USA", date(2024, 1, 1), 30, [-999, -999, -999, -999])

        charge = evaluate_group("spotify usa", txns)

        assert charge.billing_cycle is BillingCycle.MONTHLY
        assert charge.display_name == "Spotify Usa"
        assert charge.amount_cents == 999
        assert charge.first_seen == date(2024, 1, 1)
        assert charge.last_seen == date(2024, 3, 31)
        assert charge.transaction_ids == (1, 2, 3, 4)

    def test_weekly_charge(self):
        txns = series("GYM", date(2024, 1, 1), 6, [-1500, -1500, -1500])

        assert evaluate_group("gym", txns).billing_cycle is BillingCycle.WEEKLY

    def test_two_charges_are_enough(self):
        txns = series("ICLOUD", date(2024, 1, 1), 366, [-299, -299])

        assert evaluate_group("icloud", txns).billing_cycle is BillingCycle.ANNUAL

    def test_single_charge_never_qualifies(self):
        assert evaluate_group("x", series("X", date(2024, 1, 1), 30, [-100])) is None

    def test_irregular_spacing_rejected(self):
        txns = series("STORE", date(2024, 1, 1), 50, [-100, -100, -100])

        assert evaluate_group("store", txns) is None

    def test_three_of_five_amounts_qualify(self):
        txns = series("HULU", date(2024, 1, 1), 30, [-799, -799, -799, -899, -999])

        charge = evaluate_group("hulu", txns)

        assert charge is not None
        assert charge.amount_cents == 799

    def test_two_of_five_amounts_rejected(self):
        txns = series("HULU", date(2024, 1, 1), 30, [-799, -799, -899, -999, -1099])

        assert evaluate_group("hulu", txns) is None


def test_group_by_merchant_skips_empty_keys():
    txns = [
        make_txn(1, date(2024, 1, 1), "NETFLIX #1", -1549),
        make_txn(2, date(2024, 1, 2), "#99 123456", -100),
        make_txn(3, date(2024, 2, 1), "NETFLIX #2", -1549),
    ]

    groups = group_by_merchant(txns)

    assert list(groups) == ["netflix"]
    assert [t.id for t in groups["netflix"]] == [1, 3]


def test_find_recurring_charges_mixed_ledger():
    txns = sorted(
        series("NETFLIX #1", date(2024, 1, 5), 31, [-1549, -1549, -1549])
        + [
            make_txn(10, date(2024, 1, 9), "WHOLE FOODS", -8743),
            make_txn(11, date(2024, 1, 30), "WHOLE FOODS", -2210),
        ],
        key=lambda t: (t.transaction_date, t.id),
    )

    charges = find_recurring_charges(txns)

    assert [c.display_name for c in charges] == ["Netflix"]
