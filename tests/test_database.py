"""Tests for the SQLAlchemy database implementation and mappers."""

import pytest
from datetime import date, datetime
from decimal import Decimal
from sqlalchemy import text

from ledgerkit.database import create_database, create_sqlite_database
from ledgerkit.database.mappers import draft_to_orm, entry_to_domain
from ledgerkit.database.models import Entry as ORMEntry
from ledgerkit.domain.entities import AccountType, EntryDraft, TransactionDraft
from ledgerkit.domain.errors import (
    DuplicateAccountCode,
    DuplicateReference,
    TransactionNotFound,
    UnknownAccount,
)
from ledgerkit.domain.money import Money


def _draft(reference, cash_id, sales_id, amount="10", when=datetime(2024, 1, 1)):
    return TransactionDraft(
        reference=reference,
        description="Sale",
        transaction_date=when,
        entries=(
            EntryDraft(account_id=cash_id, debit_amount=Money.parse(amount), credit_amount=Money.zero()),
            EntryDraft(account_id=sales_id, debit_amount=Money.zero(), credit_amount=Money.parse(amount)),
        ),
    )


def test_amounts_stored_as_decimal_text(temp_db, sample_accounts):
    """Amounts must round-trip through storage without float conversion."""
    temp_db.create_transaction(
        _draft("T-1", sample_accounts["1100"], sample_accounts["4000"], amount="0.1")
    )
    session = temp_db._get_session()
    rows = session.execute(
        text("SELECT debit_amount, credit_amount, typeof(debit_amount) FROM entries ORDER BY id")
    ).all()
    assert tuple(rows[0]) == ("0.1", "0", "text")
    assert tuple(rows[1]) == ("0", "0.1", "text")


def test_create_transaction_is_atomic_on_duplicate(temp_db, sample_accounts):
    """A rejected write leaves no partial entries behind."""
    draft = _draft("T-1", sample_accounts["1100"], sample_accounts["4000"])
    temp_db.create_transaction(draft)
    with pytest.raises(DuplicateReference):
        temp_db.create_transaction(draft)
    assert len(temp_db.list_entries()) == 2
    assert temp_db.transaction_reference_exists("T-1")
    assert not temp_db.transaction_reference_exists("T-2")


def test_list_entries_filters(temp_db, sample_accounts):
    cash, sales = sample_accounts["1100"], sample_accounts["4000"]
    temp_db.create_transaction(_draft("T-1", cash, sales, when=datetime(2024, 1, 31, 23, 0)))
    temp_db.create_transaction(_draft("T-2", cash, sales, when=datetime(2024, 2, 1, 0, 0)))

    assert len(temp_db.list_entries(account_id=cash)) == 2
    january = temp_db.list_entries(end_date=date(2024, 1, 31))
    assert {e.transaction_id for e in january} == {temp_db.get_transaction_by_reference("T-1").id}
    february = temp_db.list_entries(account_id=sales, start_date=date(2024, 2, 1))
    assert len(february) == 1


def test_account_counts(temp_db, sample_accounts):
    assert temp_db.get_child_account_count(sample_accounts["1000"]) == 2
    assert temp_db.get_account_entry_count(sample_accounts["1100"]) == 0
    temp_db.create_transaction(_draft("T-1", sample_accounts["1100"], sample_accounts["4000"]))
    assert temp_db.get_account_entry_count(sample_accounts["1100"]) == 1


def test_list_accounts_filters(temp_db, sample_accounts):
    temp_db.set_account_active(sample_accounts["1200"], False)
    assets = temp_db.list_accounts(account_type=AccountType.ASSET, active_only=True)
    assert [a.code for a in assets] == ["1000", "1100"]


def test_update_account_clears_parent(temp_db, sample_accounts):
    temp_db.update_account(sample_accounts["1100"], parent_id=None, update_parent=True)
    assert temp_db.get_account(sample_accounts["1100"]).parent_id is None


def test_missing_rows(temp_db):
    assert temp_db.get_account(1) is None
    assert temp_db.get_transaction(1) is None
    with pytest.raises(UnknownAccount):
        temp_db.set_account_active(1, False)
    with pytest.raises(TransactionNotFound):
        temp_db.delete_transaction(1)


def test_draft_to_orm_keeps_entry_order():
    orm = draft_to_orm(_draft("T-1", 1, 2, amount="3.50"))
    assert orm.reference == "T-1"
    assert [e.account_id for e in orm.entries] == [1, 2]
    assert orm.entries[0].debit_amount == Decimal("3.50")
    assert orm.entries[1].credit_amount == Decimal("3.50")


def test_entry_to_domain_returns_money():
    orm = ORMEntry(
        id=1,
        transaction_id=1,
        account_id=1,
        debit_amount=Decimal("0"),
        credit_amount=Decimal("12.00"),
        description="x",
    )
    entry = entry_to_domain(orm)
    assert entry.credit_amount == Money.parse("12")
    assert entry.debit_amount.is_zero


def test_create_database_prefers_url(tmp_path, monkeypatch):
    monkeypatch.delenv("LEDGERKIT_DATABASE_URL", raising=False)
    url = f"sqlite:///{tmp_path / 'url.db'}"
    db = create_database(database_url=url, database_path=str(tmp_path / "ignored.db"))
    assert db.database_url == url


def test_create_database_from_env(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'env.db'}"
    monkeypatch.setenv("LEDGERKIT_DATABASE_URL", url)
    assert create_database().database_url == url


def test_create_sqlite_database_from_env(tmp_path, monkeypatch):
    path = str(tmp_path / "ledger.db")
    monkeypatch.setenv("LEDGERKIT_DB_PATH", path)
    assert create_sqlite_database().database_url == f"sqlite:///{path}"


def test_create_account_duplicate_code_at_commit(temp_db, sample_accounts):
    """The unique code constraint surfaces as a domain error, not IntegrityError."""
    with pytest.raises(DuplicateAccountCode, match="'1100'"):
        temp_db.create_account(code="1100", name="Second cash", account_type=AccountType.ASSET)
    assert len(temp_db.list_accounts()) == 7
    # The session stays usable after the rollback
    assert temp_db.create_account(code="1300", name="Deposits", account_type=AccountType.ASSET) > 0


def test_update_account_duplicate_code_at_commit(temp_db, sample_accounts):
    with pytest.raises(DuplicateAccountCode):
        temp_db.update_account(sample_accounts["1200"], code="1100")
    assert temp_db.get_account(sample_accounts["1200"]).code == "1200"
    temp_db.update_account(sample_accounts["1200"], name="Debtors")
    assert temp_db.get_account(sample_accounts["1200"]).name == "Debtors"
