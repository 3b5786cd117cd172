"""Statement import domain service."""

import hashlib
from collections import Counter
from pathlib import Path

from ledgerwise.database.base import Database
from ledgerwise.domain.entities import (
    ImportBatch,
    ImportSummary,
    ParsedRow,
    Rule,
    RowError,
    RowOutcome,
    RowResult,
)
from ledgerwise.domain.errors import (
    MissingInputError,
    UnsupportedFormatError,
    account_not_found,
    file_not_found,
    format_not_detected,
)
from ledgerwise.domain.rules import apply_rules
from ledgerwise.domain.snapshot import SnapshotService
from ledgerwise.logging_setup import get_logger
from ledgerwise.parsers.base import StatementParser
from ledgerwise.parsers.registry import ParserRegistry, header_tokens

logger = get_logger(__name__)

# Parsed rows are reported 1-based and after the header line
ROW_NUMBER_OFFSET = 2
RAW_SNIPPET_LENGTH = 120


def dedup_signature(account_id: int, row: ParsedRow) -> str:
    """Build the identity of a charge before occurrence numbering."""
    return "|".join(
        [
            str(account_id),
            row.transaction_date.isoformat(),
            row.description,
            str(row.amount_cents),
            row.type,
        ]
    )


def dedup_key(signature: str, occurrence: int) -> str:
    """Hash a signature into a dedup key.

    The first occurrence of a signature in a file hashes the bare signature;
    later occurrences get ``:<n>`` appended, so repeated same-day charges
    stay distinct while re-imports of the same file map onto the same keys.
    """
    hash_input = signature if occurrence <= 1 else f"{signature}:{occurrence}"
    return hashlib.sha256(hash_input.encode("utf-8")).hexdigest()


def raw_snippet(row: ParsedRow) -> str:
    """Short text locating a row in its source file."""
    snippet = f"{row.transaction_date.isoformat()} | {row.description} | {row.amount_cents}"
    return snippet[:RAW_SNIPPET_LENGTH]


def failure_reason(error: Exception) -> str:
    """First line of an exception message, or its type name if it has none.

    Database errors append the failing statement and its parameters on
    later lines; only the summary line is kept.
    """
    lines = str(error).strip().splitlines()
    return lines[0] if lines else type(error).__name__


def decode_statement(raw: bytes, filename: str) -> str:
    """Decode statement bytes as UTF-8, replacing undecodable bytes.

    A leading byte order mark is dropped.
    """
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        logger.warning("%s is not valid UTF-8 (%s); replacing bad bytes", filename, e.reason)
        return raw.decode("utf-8-sig", errors="replace")


class ImportService:
    """Service for importing issuer statement files into the ledger."""

    def __init__(self, db: Database, registry: ParserRegistry):
        """Initialize import service.

        Args:
            db: Database instance
            registry: Parsers available for statement files
        """
        self.db = db
        self.registry = registry
        self.snapshot_service = SnapshotService(db)

    def select_parser(self, issuer: str, content: str) -> StatementParser:
        """Pick a parser by issuer, falling back to header auto-detection.

        Raises:
            UnsupportedFormatError: If neither approach finds a parser
        """
        try:
            return self.registry.resolve(issuer)
        except UnsupportedFormatError:
            parser = self.registry.auto_detect(header_tokens(content))
            if parser is None:
                raise UnsupportedFormatError(format_not_detected(issuer))
            logger.info("Auto-detected '%s' format for issuer '%s'", parser.issuer, issuer)
            return parser

    def import_file(self, file_path: str, account_id: int) -> ImportSummary:
        """Import a statement file into an account.

        Every parsed row is inserted, skipped as already present, or recorded
        as a row error; a failing row never stops the batch. The batch record,
        ledger rows and snapshot refresh are committed together.

        Args:
            file_path: Path to the statement file
            account_id: Account that owns the statement

        Returns:
            ImportSummary with counts and row errors

        Raises:
            MissingInputError: If the account or file doesn't exist
            UnsupportedFormatError: If no parser fits the file
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise MissingInputError(account_not_found(account_id))

        path = Path(file_path)
        if not path.is_file():
            raise MissingInputError(file_not_found(file_path))

        raw = path.read_bytes()
        content = decode_statement(raw, path.name)
        file_hash = hashlib.sha256(raw).hexdigest()

        parser = self.select_parser(account.issuer, content)
        rows = parser.parse(content)
        logger.info("Parsed %d row(s) from %s with '%s' parser", len(rows), path.name, parser.issuer)

        with self.db.unit_of_work():
            batch_id = self.db.create_import_batch(
                account_id=account_id,
                filename=path.name,
                file_hash=file_hash,
                row_count=len(rows),
            )
            rules = self.db.list_rules(active_only=True)
            results = self._ingest_rows(account_id, batch_id, rows, rules)

            outcomes = Counter(result.outcome for result in results)
            imported_count = outcomes[RowOutcome.INSERTED]
            skipped_count = outcomes[RowOutcome.SKIPPED]
            self.db.finalize_import_batch(batch_id, imported_count, skipped_count)

            self.snapshot_service.recompute_for_account(account_id)

        errors = [result.error for result in results if result.error is not None]
        logger.info(
            "Batch %d: %d imported, %d skipped, %d error(s)",
            batch_id,
            imported_count,
            skipped_count,
            len(errors),
        )

        return ImportSummary(
            success=not errors or len(errors) < len(rows),
            batch_id=batch_id,
            filename=path.name,
            row_count=len(rows),
            imported_count=imported_count,
            skipped_count=skipped_count,
            error_count=len(errors),
            errors=errors,
        )

    def _ingest_rows(
        self, account_id: int, batch_id: int, rows: list[ParsedRow], rules: list[Rule]
    ) -> list[RowResult]:
        occurrences: Counter[str] = Counter()
        results = []
        for index, row in enumerate(rows):
            signature = dedup_signature(account_id, row)
            occurrences[signature] += 1
            key = dedup_key(signature, occurrences[signature])
            results.append(
                self._ingest_row(account_id, batch_id, index + ROW_NUMBER_OFFSET, row, key, rules)
            )
        return results

    def _ingest_row(
        self,
        account_id: int,
        batch_id: int,
        row_number: int,
        row: ParsedRow,
        key: str,
        rules: list[Rule],
    ) -> RowResult:
        try:
            overrides = apply_rules(rules, row.description)
            inserted, transaction_id = self.db.insert_transaction(
                account_id=account_id,
                import_id=batch_id,
                transaction_date=row.transaction_date,
                posted_date=row.posted_date,
                description=row.description,
                original_category=row.original_category,
                type=row.type,
                amount_cents=row.amount_cents,
                dedup_key=key,
                memo=row.memo or None,
                display_name=overrides.display_name,
                category_id=overrides.category_id,
                is_return=row.is_return,
            )
        except Exception as e:
            logger.warning("Row %d failed: %s", row_number, failure_reason(e))
            return RowResult(
                outcome=RowOutcome.FAILED,
                error=RowError(
                    row=row_number,
                    reason=failure_reason(e),
                    raw_snippet=raw_snippet(row),
                ),
            )

        if not inserted:
            logger.debug("Row %d already present as transaction %d", row_number, transaction_id)
            return RowResult(outcome=RowOutcome.SKIPPED, transaction_id=transaction_id)
        return RowResult(outcome=RowOutcome.INSERTED, transaction_id=transaction_id)

    def list_imports(self) -> list[ImportBatch]:
        """List past import batches, newest first."""
        return self.db.list_import_batches()
