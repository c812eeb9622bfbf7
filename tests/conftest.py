"""Shared pytest fixtures for ledgerkit tests."""

import tempfile
import os
import pytest

from ledgerkit.database.factories import create_sqlite_database
from ledgerkit.domain.account import AccountService
from ledgerkit.domain.balance import BalanceService
from ledgerkit.domain.transaction import TransactionService
from ledgerkit.logging_config import reset_logging


@pytest.fixture(autouse=True)
def _reset_logging():
    """Keep logging handlers from leaking between tests."""
    yield
    reset_logging()


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
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def balance_service(temp_db):
    """Create a BalanceService with a temporary database."""
    return BalanceService(temp_db)


@pytest.fixture
def sample_accounts(account_service):
    """Create a small chart of accounts and return IDs keyed by code.

    1000 Assets (asset)
      1100 Cash (asset)
      1200 Receivables (asset)
    2000 Loans (liability)
    3000 Owner equity (equity)
    4000 Sales (revenue)
    5000 Rent (expense)
    """
    ids = {}
    ids["1000"] = account_service.create_account("1000", "Assets", "asset")
    ids["1100"] = account_service.create_account("1100", "Cash", "asset", parent_id=ids["1000"])
    ids["1200"] = account_service.create_account(
        "1200", "Receivables", "asset", parent_id=ids["1000"]
    )
    ids["2000"] = account_service.create_account("2000", "Loans", "liability")
    ids["3000"] = account_service.create_account("3000", "Owner equity", "equity")
    ids["4000"] = account_service.create_account("4000", "Sales", "revenue")
    ids["5000"] = account_service.create_account("5000", "Rent", "expense")
    return ids


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
