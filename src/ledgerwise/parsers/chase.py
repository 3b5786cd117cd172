"""Parser for Chase credit card CSV exports."""

import csv
import io

from ledgerwise.domain.entities import ParsedRow
from ledgerwise.logging_setup import get_logger
from ledgerwise.parsers.base import StatementParser, normalize_header
from ledgerwise.utils.amount_parser import parse_amount_cents
from ledgerwise.utils.date_parser import parse_statement_date

logger = get_logger(__name__)

CHASE_HEADERS = (
    "transaction date",
    "post date",
    "description",
    "category",
    "type",
    "amount",
)


class ChaseParser(StatementParser):
    """Chase exports: Transaction Date, Post Date, Description, Category,
    Type, Amount and an optional Memo. Dates are MM/DD/YYYY and charges are
    negative."""

    issuer = "chase"

    def detect_format(self, headers: list[str]) -> bool:
        normalized = {normalize_header(h) for h in headers}
        return all(required in normalized for required in CHASE_HEADERS)

    def parse(self, content: str) -> list[ParsedRow]:
        reader = csv.DictReader(io.StringIO(content.lstrip("\ufeff")))
        if reader.fieldnames is None:
            return []

        parsed: list[ParsedRow] = []
        for line_num, raw in enumerate(reader, start=2):
            row = {
                normalize_header(k): (v or "").strip()
                for k, v in raw.items()
                if k is not None
            }

            raw_date = row.get("transaction date", "")
            raw_posted = row.get("post date", "")
            description = row.get("description", "")
            raw_amount = row.get("amount", "")

            if not raw_date or not description or not raw_amount:
                continue

            try:
                transaction_date = parse_statement_date(raw_date)
                posted_date = parse_statement_date(raw_posted or raw_date)
                amount_cents = parse_amount_cents(raw_amount)
            except ValueError as e:
                logger.debug("Dropping line %d: %s", line_num, e)
                continue

            txn_type = row.get("type", "")
            parsed.append(
                ParsedRow(
                    transaction_date=transaction_date,
                    posted_date=posted_date,
                    description=description,
                    original_category=row.get("category", ""),
                    type=txn_type,
                    amount_cents=amount_cents,
                    memo=row.get("memo", ""),
                    is_return=amount_cents > 0 or "return" in txn_type.lower(),
                )
            )

        return parsed
