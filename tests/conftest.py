"""Shared pytest fixtures for ledgerwise tests."""

import tempfile
import os
from pathlib import Path
import pytest

from ledgerwise.database.factories import create_sqlite_database
from ledgerwise.domain.account import AccountService
from ledgerwise.domain.category import CategoryService
from ledgerwise.domain.ingestion import ImportService
from ledgerwise.domain.rules import RuleService
from ledgerwise.domain.snapshot import SnapshotService
from ledgerwise.domain.subscription import SubscriptionService
from ledgerwise.domain.transaction import TransactionService
from ledgerwise.parsers import create_default_registry


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for CLI tests
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def rule_service(temp_db):
    """Create a RuleService with a temporary database."""
    return RuleService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def import_service(temp_db):
    """Create an ImportService with the built-in parsers."""
    return ImportService(temp_db, create_default_registry())


@pytest.fixture
def snapshot_service(temp_db):
    """Create a SnapshotService with a temporary database."""
    return SnapshotService(temp_db)


@pytest.fixture
def subscription_service(temp_db):
    """Create a SubscriptionService with a temporary database."""
    return SubscriptionService(temp_db)


@pytest.fixture
def sample_account(account_service):
    """Create a sample Chase account for testing."""
    account_id = account_service.create_account(name="Sapphire", issuer="chase")
    return account_service.get_account(account_id)


@pytest.fixture
def add_transaction(temp_db, sample_account):
    """Insert ledger rows directly, bypassing statement parsing.

    Returns a function taking (transaction_date, description, amount_cents)
    plus optional ``type`` and returning the new transaction ID.
    """
    batch_id = temp_db.create_import_batch(
        account_id=sample_account.id,
        filename="seed.csv",
        file_hash="seed",
        row_count=0,
    )
    counter = {"n": 0}

    def _add(transaction_date, description, amount_cents, type="Sale"):
        counter["n"] += 1
        inserted, transaction_id = temp_db.insert_transaction(
            account_id=sample_account.id,
            import_id=batch_id,
            transaction_date=transaction_date,
            posted_date=transaction_date,
            description=description,
            original_category="",
            type=type,
            amount_cents=amount_cents,
            dedup_key=f"seed-{counter['n']}",
            is_return=amount_cents > 0,
        )
        assert inserted
        return transaction_id

    return _add


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
