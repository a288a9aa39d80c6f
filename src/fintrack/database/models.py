"""SQLAlchemy models for fintrack database."""

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
    JSON,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Account(Base):
    """Account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    type = Column(String, nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    initial_balance = Column(Numeric(12, 2), nullable=False, default=0)
    calculated_balance = Column(Numeric(12, 2), nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    description = Column(String, nullable=True)
    has_dps = Column(Boolean, nullable=False, default=False)
    dps_type = Column(String, nullable=True)
    dps_amount_type = Column(String, nullable=True)
    dps_fixed_amount = Column(Numeric(12, 2), nullable=True)
    dps_savings_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    donation_preference = Column(Numeric(12, 2), nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="account")
    dps_savings_account = relationship("Account", remote_side=[id])


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    type = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    category = Column(String, nullable=False, default="")
    description = Column(String, nullable=False, default="")
    date = Column(Date, nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    saving_amount = Column(Numeric(12, 2), nullable=True)
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurring_frequency = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, nullable=True, onupdate=_utcnow)

    # Relationships
    account = relationship("Account", back_populates="transactions")


class Category(Base):
    """User-created category model."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    color = Column(String, nullable=False, default="#3B82F6")
    icon = Column(String, nullable=False, default="Tag")
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("name", "type", name="uq_category_name_type"),)


class Purchase(Base):
    """Purchase model."""

    __tablename__ = "purchases"

    id = Column(Integer, primary_key=True)
    item_name = Column(String, nullable=False)
    category = Column(String, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    purchase_date = Column(Date, nullable=False)
    status = Column(String, nullable=False, default="planned")
    priority = Column(String, nullable=False, default="medium")
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)


class PurchaseCategory(Base):
    """Purchase category model."""

    __tablename__ = "purchase_categories"

    id = Column(Integer, primary_key=True)
    category_name = Column(String, unique=True, nullable=False)
    description = Column(String, nullable=True)
    monthly_budget = Column(Numeric(12, 2), nullable=False, default=0)
    category_color = Column(String, nullable=False, default="#3B82F6")
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)


class Notification(Base):
    """Notification model."""

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    body = Column(String, nullable=True)
    type = Column(String, nullable=False, default="info")
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)


class DPSTransfer(Base):
    """DPS transfer history model."""

    __tablename__ = "dps_transfers"

    id = Column(Integer, primary_key=True)
    from_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    to_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    date = Column(Date, nullable=False)
    transfer_id = Column(String, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)


class SavingsGoal(Base):
    """Savings goal model."""

    __tablename__ = "savings_goals"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    target_amount = Column(Numeric(12, 2), nullable=False)
    source_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    savings_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    current_amount = Column(Numeric(12, 2), nullable=False, default=0)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
