"""Recurring-charge detection heuristics.

Charges are grouped by a normalized description. A group qualifies as a
subscription when the median spacing between consecutive charges falls in a
known billing cadence and one amount accounts for at least 60% of the
charges. Everything here is pure; persistence lives in
``ledgerwise.domain.subscription``.
"""

import re
from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ledgerwise.domain.entities import BillingCycle, Transaction
from ledgerwise.logging_setup import get_logger

logger = get_logger(__name__)

MIN_GROUP_SIZE = 2

# Inclusive bounds on the median interval, in days
CADENCE_RANGES: tuple[tuple[BillingCycle, int, int], ...] = (
    (BillingCycle.WEEKLY, 5, 10),
    (BillingCycle.MONTHLY, 24, 45),
    (BillingCycle.QUARTERLY, 80, 105),
    (BillingCycle.ANNUAL, 330, 400),
)

# Modal amount must cover at least 3/5 of a group
MODAL_SHARE_NUMERATOR = 3
MODAL_SHARE_DENOMINATOR = 5

_STORE_ID = re.compile(r"#\d+")
_STAR_SUFFIX = re.compile(r"\*\s*\S*")
_LONG_DIGITS = re.compile(r"\d{4,}")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class RecurringCharge:
    """A group of charges that qualified as a subscription."""

    key: str
    display_name: str
    billing_cycle: BillingCycle
    amount_cents: int
    first_seen: date
    last_seen: date
    transaction_ids: tuple[int, ...]


def normalize_description(description: str) -> str:
    """Reduce a raw description to a grouping key.

    Store numbers (``#123``), the token following a ``*`` separator (even when
    spaced, as in ``PAYPAL * SPOTIFY``) and runs of four or more digits are
    removed, then whitespace is collapsed.

    >>> normalize_description("SPOTIFY #12345 STOCKHOLM")
    'spotify stockholm'
    >>> normalize_description("AMZN Mktp*2K4LL8 9900")
    'amzn mktp'
    >>> normalize_description("PAYPAL * SPOTIFY")
    'paypal'
    """
    key = description.lower()
    key = _STORE_ID.sub(" ", key)
    key = _STAR_SUFFIX.sub(" ", key)
    key = _LONG_DIGITS.sub(" ", key)
    return _WHITESPACE.sub(" ", key).strip()


def to_display_name(key: str) -> str:
    """Title-case each word of a grouping key."""
    return " ".join(word[:1].upper() + word[1:] for word in key.split(" "))


def compute_intervals(dates: Sequence[date]) -> list[int]:
    """Day deltas between consecutive dates (already in ascending order)."""
    return [(current - previous).days for previous, current in zip(dates, dates[1:])]


def median_interval(intervals: Sequence[int]) -> int:
    """Median of the intervals; the lower middle value for even counts.

    Raises:
        ValueError: If there are no intervals
    """
    if not intervals:
        raise ValueError("No intervals to take a median of")
    ordered = sorted(intervals)
    return ordered[(len(ordered) - 1) // 2]


def classify_cadence(median_days: int) -> Optional[BillingCycle]:
    """Map a median interval to a billing cycle, or None if none fits."""
    for cycle, low, high in CADENCE_RANGES:
        if low <= median_days <= high:
            return cycle
    return None


def modal_amount(amounts: Sequence[int]) -> tuple[int, int]:
    """Most frequent absolute amount and how often it occurs.

    Ties go to the amount seen first.

    Raises:
        ValueError: If there are no amounts
    """
    if not amounts:
        raise ValueError("No amounts to take a mode of")
    amount, count = Counter(abs(a) for a in amounts).most_common(1)[0]
    return amount, count


def has_consistent_amount(modal_count: int, group_size: int) -> bool:
    """True if the modal amount covers at least 60% of the group."""
    return modal_count * MODAL_SHARE_DENOMINATOR >= group_size * MODAL_SHARE_NUMERATOR


def group_by_merchant(transactions: Sequence[Transaction]) -> dict[str, list[Transaction]]:
    """Partition transactions by normalized description, keeping input order.

    Descriptions that normalize to an empty key are left out.
    """
    groups: dict[str, list[Transaction]] = {}
    for txn in transactions:
        key = normalize_description(txn.description)
        if not key:
            continue
        groups.setdefault(key, []).append(txn)
    return groups


def evaluate_group(key: str, transactions: Sequence[Transaction]) -> Optional[RecurringCharge]:
    """Decide whether one merchant group is a recurring charge.

    Args:
        key: Grouping key shared by the transactions
        transactions: Transactions ordered by date ascending

    Returns:
        RecurringCharge, or None when the group does not qualify
    """
    if len(transactions) < MIN_GROUP_SIZE:
        return None

    dates = [txn.transaction_date for txn in transactions]
    median_days = median_interval(compute_intervals(dates))
    cycle = classify_cadence(median_days)
    if cycle is None:
        logger.debug("'%s': median interval %d days matches no cadence", key, median_days)
        return None

    amount, count = modal_amount([txn.amount_cents for txn in transactions])
    if not has_consistent_amount(count, len(transactions)):
        logger.debug(
            "'%s': modal amount %d covers only %d of %d charges",
            key,
            amount,
            count,
            len(transactions),
        )
        return None

    return RecurringCharge(
        key=key,
        display_name=to_display_name(key),
        billing_cycle=cycle,
        amount_cents=amount,
        first_seen=dates[0],
        last_seen=dates[-1],
        transaction_ids=tuple(txn.id for txn in transactions),
    )


def find_recurring_charges(transactions: Sequence[Transaction]) -> list[RecurringCharge]:
    """Run grouping and classification over date-ordered transactions."""
    charges = []
    for key, group in group_by_merchant(transactions).items():
        charge = evaluate_group(key, group)
        if charge is not None:
            charges.append(charge)
    return charges
