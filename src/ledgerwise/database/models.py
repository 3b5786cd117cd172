"""SQLAlchemy models for ledgerwise database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Boolean,
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session


Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Account(Base):
    """Card or bank account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    issuer = Column(String, nullable=False, default="chase")
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    import_batches = relationship("ImportBatch", back_populates="account")
    transactions = relationship("Transaction", back_populates="account")


class Category(Base):
    """Category model with optional parent."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    parent_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    parent = relationship("Category", remote_side=[id], backref="children")


class Rule(Base):
    """Enrichment rule model."""

    __tablename__ = "rules"

    id = Column(Integer, primary_key=True)
    rule_type = Column(String, nullable=False)
    match_field = Column(String, nullable=False, default="description")
    match_pattern = Column(String, nullable=False)
    match_mode = Column(String, nullable=False, default="contains")
    target_category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    display_name = Column(String, nullable=True)
    priority = Column(Integer, nullable=False, default=100)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)


class ImportBatch(Base):
    """Import batch model, one row per ingested file."""

    __tablename__ = "import_batches"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    filename = Column(String, nullable=False)
    file_hash = Column(String, nullable=False)
    row_count = Column(Integer, nullable=False, default=0)
    imported_count = Column(Integer, nullable=False, default=0)
    skipped_count = Column(Integer, nullable=False, default=0)
    imported_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    account = relationship("Account", back_populates="import_batches")
    transactions = relationship("Transaction", back_populates="import_batch")


class Transaction(Base):
    """Ledger entry model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    import_id = Column(Integer, ForeignKey("import_batches.id"), nullable=False)
    transaction_date = Column(Date, nullable=False)
    posted_date = Column(Date, nullable=False)
    description = Column(String, nullable=False)
    original_category = Column(String, nullable=False, default="")
    type = Column(String, nullable=False, default="")
    amount_cents = Column(Integer, nullable=False)
    memo = Column(String, nullable=True)
    display_name = Column(String, nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    notes = Column(String, nullable=True)
    is_return = Column(Boolean, default=False, nullable=False)
    dedup_key = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    # Relationships
    account = relationship("Account", back_populates="transactions")
    import_batch = relationship("ImportBatch", back_populates="transactions")
    category = relationship("Category")


class Subscription(Base):
    """Recurring charge model."""

    __tablename__ = "subscriptions"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    estimated_amount_cents = Column(Integer, nullable=True)
    billing_cycle = Column(String, nullable=False, default="monthly")
    first_seen_date = Column(Date, nullable=True)
    last_seen_date = Column(Date, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    review_date = Column(Date, nullable=True)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    category = relationship("Category")


class SubscriptionTransaction(Base):
    """Link between a subscription and one of its charges."""

    __tablename__ = "subscription_transactions"

    subscription_id = Column(
        Integer, ForeignKey("subscriptions.id", ondelete="CASCADE"), primary_key=True
    )
    transaction_id = Column(
        Integer, ForeignKey("transactions.id", ondelete="CASCADE"), primary_key=True
    )


class MonthlySnapshot(Base):
    """Monthly spend aggregate; ``account_id`` NULL holds the all-accounts total."""

    __tablename__ = "monthly_snapshots"

    id = Column(Integer, primary_key=True)
    month = Column(String, nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    total_spend_cents = Column(Integer, nullable=False, default=0)
    total_credits_cents = Column(Integer, nullable=False, default=0)
    net_spend_cents = Column(Integer, nullable=False, default=0)
    transaction_count = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("month", "account_id", name="uq_snapshot_month_account"),)


def _enable_sqlite_savepoints(engine) -> None:
    """Let SQLAlchemy own BEGIN on pysqlite so SAVEPOINT works as documented."""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    if engine.dialect.name == "sqlite":
        _enable_sqlite_savepoints(engine)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
