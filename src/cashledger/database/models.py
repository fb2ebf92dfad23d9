"""SQLAlchemy models for cashledger database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class AccountGroup(Base):
    """Account group model."""

    __tablename__ = "account_groups"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    accounts = relationship("Account", back_populates="group", cascade="all, delete-orphan")


class Account(Base):
    """Account model (bank, cash or other money pool)."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    group_id = Column(Integer, ForeignKey("account_groups.id"), nullable=False)
    kind = Column(String, default="bank", nullable=False)
    included_in_balance = Column(Boolean, default=True, nullable=False)
    display_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    group = relationship("AccountGroup", back_populates="accounts")
    entries = relationship(
        "Entry",
        back_populates="account",
        foreign_keys="Entry.account_id",
        cascade="all, delete-orphan",
    )


class Category(Base):
    """Category model.

    group_id is missing on databases created before group-scoped categories;
    the database layer checks for the column before touching it.
    """

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    group_id = Column(Integer, ForeignKey("account_groups.id"), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Entry(Base):
    """Ledger entry model."""

    __tablename__ = "entries"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    date = Column(Date, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    kind = Column(String, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    usage = Column(String, nullable=True)
    target_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    account = relationship("Account", back_populates="entries", foreign_keys=[account_id])


class CategoryLearningRule(Base):
    """Learned usage pattern -> category rule."""

    __tablename__ = "category_learning_rules"

    id = Column(Integer, primary_key=True)
    pattern = Column(String, unique=True, nullable=False)
    category = Column(String, nullable=False)
    example_usage = Column(String, nullable=False, default="")
    count = Column(Integer, nullable=False, default=1)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
