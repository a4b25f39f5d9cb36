"""SQLAlchemy models for clinicbooks database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Numeric,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

# Civil dates are stored as their canonical YYYY/MM/DD text
CivilDate = String(10)
Money = Numeric(18, 2)


class Account(Base):
    """Chart-of-accounts node model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    code = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    parent_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    main_type = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    parent = relationship("Account", remote_side=[id], backref="children")
    ledger_entries = relationship(
        "LedgerEntry", back_populates="account", cascade="all, delete-orphan"
    )


class LedgerEntry(Base):
    """Ledger line model."""

    __tablename__ = "ledger_entries"

    id = Column(Integer, primary_key=True)
    date = Column(CivilDate, nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    debit = Column(Money, nullable=False, default=0)
    credit = Column(Money, nullable=False, default=0)
    description = Column(String, nullable=True)

    # Relationships
    account = relationship("Account", back_populates="ledger_entries")


class Contact(Base):
    """Patient, supplier or staff contact keyed by composite id."""

    __tablename__ = "contacts"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    kind = Column(String, nullable=False)


class Payment(Base):
    """Payment model."""

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True)
    date = Column(CivilDate, nullable=False)
    description = Column(String, nullable=False, default="")
    amount = Column(Money, nullable=False)
    kind = Column(String, nullable=False)
    entity_id = Column(String, nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    method = Column(String, nullable=True)
    invoice_id = Column(String, nullable=True)
    # Comma separated
    tags = Column(String, nullable=False, default="")
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Expense(Base):
    """Expense model."""

    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True)
    date = Column(CivilDate, nullable=False)
    description = Column(String, nullable=False, default="")
    amount = Column(Money, nullable=False)
    expense_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    from_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    to_entity_id = Column(String, nullable=False)
    tags = Column(String, nullable=False, default="")
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Invoice(Base):
    """Invoice model."""

    __tablename__ = "invoices"

    id = Column(String, primary_key=True)
    date = Column(CivilDate, nullable=False)
    status = Column(String, nullable=False)
    recipient_name = Column(String, nullable=False)
    patient_share = Column(Money, nullable=False)
    paid_amount = Column(Money, nullable=False, default=0)


class Due(Base):
    """Payable or receivable model."""

    __tablename__ = "dues"

    id = Column(Integer, primary_key=True)
    type = Column(String, nullable=False)
    status = Column(String, nullable=False)
    amount = Column(Money, nullable=False)
    due_date = Column(CivilDate, nullable=False)
    entity_id = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")


class InventoryItem(Base):
    """Inventory item model."""

    __tablename__ = "inventory_items"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    reorder_point = Column(Integer, nullable=False, default=0)


class Payslip(Base):
    """Payslip model."""

    __tablename__ = "payslips"

    id = Column(Integer, primary_key=True)
    employee_name = Column(String, nullable=False)
    pay_period = Column(String, nullable=False)
    status = Column(String, nullable=False)
    net_payable = Column(Money, nullable=False, default=0)


class Setting(Base):
    """Key/value application setting."""

    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(String, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
