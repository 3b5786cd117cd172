"""Utility functions for ledgerwise."""

from ledgerwise.utils.date_parser import parse_statement_date, month_key, month_bounds
from ledgerwise.utils.amount_parser import parse_amount_cents, format_cents
from ledgerwise.utils.account_resolver import resolve_account

__all__ = [
    "parse_statement_date",
    "month_key",
    "month_bounds",
    "parse_amount_cents",
    "format_cents",
    "resolve_account",
]
