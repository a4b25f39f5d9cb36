"""Shared pytest fixtures for clinicbooks tests."""

import tempfile
import os
from decimal import Decimal
import pytest

from clinicbooks.database.factories import create_sqlite_database
from clinicbooks.domain.account import AccountService
from clinicbooks.domain.calendar import CalendarDate
from clinicbooks.domain.contact import ContactService
from clinicbooks.domain.entities import (
    AccountNode,
    Contact,
    Expense,
    InventoryItem,
    Invoice,
    InvoiceStatus,
    MainAccountType,
    Payment,
    PaymentKind,
    Payslip,
    PayslipStatus,
    Snapshot,
)
from clinicbooks.domain.records import RecordService

# 1403/07/01 is Sunday 2024-09-22; its week opens on Saturday 1403/06/31
TODAY = CalendarDate(1403, 7, 1)


@pytest.fixture
def today():
    """Fixed reference day."""
    return TODAY


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def contact_service(temp_db):
    """Create a ContactService with a temporary database."""
    return ContactService(temp_db)


@pytest.fixture
def record_service(temp_db):
    """Create a RecordService with a temporary database."""
    return RecordService(temp_db)


@pytest.fixture
def sample_chart(account_service):
    """Small chart of accounts; returns account IDs keyed by code."""
    ids = {}
    ids["1"] = account_service.create_account("1", "Assets", MainAccountType.ASSET)
    ids["11"] = account_service.create_account("11", "Cash", parent_id=ids["1"])
    ids["12"] = account_service.create_account("12", "Bank", parent_id=ids["1"])
    ids["2"] = account_service.create_account("2", "Liabilities", MainAccountType.LIABILITY)
    ids["3"] = account_service.create_account("3", "Equity", MainAccountType.EQUITY)
    ids["4"] = account_service.create_account("4", "Income", MainAccountType.INCOME)
    ids["5"] = account_service.create_account("5", "Expenses", MainAccountType.EXPENSE)
    ids["51"] = account_service.create_account("51", "Rent", parent_id=ids["5"])
    return ids


@pytest.fixture
def sample_contacts(contact_service):
    """One patient and one supplier; returns their composite ids."""
    return {
        "patient": contact_service.create_contact("patient", "Sara Ahmadi"),
        "supplier": contact_service.create_contact("supplier", "Dental Supply Co"),
    }


@pytest.fixture
def sample_snapshot():
    """In-memory snapshot covering every record kind."""
    accounts = (
        AccountNode(1, "1", "Assets", None, MainAccountType.ASSET),
        AccountNode(2, "11", "Cash", 1, MainAccountType.ASSET),
        AccountNode(5, "5", "Expenses", None, MainAccountType.EXPENSE),
        AccountNode(6, "51", "Rent", 5, MainAccountType.EXPENSE),
    )
    contacts = (
        Contact("patient-1", "Sara Ahmadi", "patient"),
        Contact("supplier-1", "Dental Supply Co", "supplier"),
    )
    payments = (
        Payment(1, "1403/07/01", "Visit fee", Decimal("1500000"), PaymentKind.RECEIPT, "patient-1", 2),
        Payment(
            2, "1403/06/28", "Gloves", Decimal("400000"), PaymentKind.DISBURSEMENT,
            "supplier-1", 2, method="card",
        ),
    )
    expenses = (
        Expense(1, "1403/06/31", "September rent", Decimal("9000000"), 6, 2, "supplier-1"),
    )
    invoices = (
        Invoice("INV-0001", "1403/06/01", InvoiceStatus.AWAITING_PAYMENT, "Sara Ahmadi", Decimal("3000000"), Decimal("0")),
        Invoice("INV-0002", "1403/06/30", InvoiceStatus.PAID, "Ali Rezaei", Decimal("2000000"), Decimal("2000000")),
    )
    inventory = (
        InventoryItem(1, "Gloves", 0, 10),
        InventoryItem(2, "Masks", 50, 10),
        InventoryItem(3, "Anesthetic", 5, 5),
    )
    payslips = (
        Payslip(1, "Reza Karimi", "1403/06", PayslipStatus.AWAITING_PAYMENT, Decimal("25000000")),
        Payslip(2, "Mina Jafari", "1403/06", PayslipStatus.PAID, Decimal("22000000")),
    )
    return Snapshot(
        payments=payments,
        expenses=expenses,
        invoices=invoices,
        accounts=accounts,
        contacts=contacts,
        inventory=inventory,
        payslips=payslips,
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
