"""Tests for transaction service and transaction CLI commands."""

import pytest
from datetime import date, datetime

from ledgerkit.cli.main import cli
from ledgerkit.domain.balance import BalanceService
from ledgerkit.domain.entities import EntryDraft
from ledgerkit.domain.errors import (
    DuplicateReference,
    InactiveAccount,
    TransactionNotFound,
    UnbalancedTransaction,
    UnknownAccount,
)
from ledgerkit.domain.money import Money
from ledgerkit.domain.transaction import TransactionService


def _sale(sample_accounts, amount="500.00"):
    return [
        EntryDraft(account_id=sample_accounts["1100"], debit_amount=amount),
        EntryDraft(account_id=sample_accounts["4000"], credit_amount=amount),
    ]


class TestTransactionService:
    """Tests for TransactionService."""

    def test_create_transaction(self, transaction_service, sample_accounts):
        """Test recording a balanced transaction."""
        txn_id = transaction_service.create_transaction(
            reference="INV-001",
            description="Cash sale",
            entries=_sale(sample_accounts),
            transaction_date=datetime(2024, 1, 15, 10, 30),
        )
        txn = transaction_service.get_transaction(txn_id)
        assert txn.reference == "INV-001"
        assert txn.description == "Cash sale"
        assert txn.transaction_date == datetime(2024, 1, 15, 10, 30)
        assert len(txn.entries) == 2
        debit, credit = txn.entries
        assert debit.account_id == sample_accounts["1100"]
        assert debit.debit_amount == Money.parse("500")
        assert debit.credit_amount.is_zero
        assert credit.credit_amount == Money.parse("500")
        assert all(e.transaction_id == txn_id for e in txn.entries)

    def test_date_defaults_to_now(self, transaction_service, sample_accounts):
        txn_id = transaction_service.create_transaction("INV-1", "Sale", _sale(sample_accounts))
        txn = transaction_service.get_transaction(txn_id)
        assert txn.transaction_date is not None
        assert txn.transaction_date.date() >= date(2024, 1, 1)

    def test_unbalanced_writes_nothing(self, transaction_service, sample_accounts):
        entries = [
            EntryDraft(account_id=sample_accounts["1100"], debit_amount="500"),
            EntryDraft(account_id=sample_accounts["4000"], credit_amount="400"),
        ]
        with pytest.raises(UnbalancedTransaction):
            transaction_service.create_transaction("INV-1", "Sale", entries)
        assert transaction_service.list_transactions() == []
        assert transaction_service.get_transaction_by_reference("INV-1") is None

    def test_duplicate_reference(self, transaction_service, sample_accounts):
        transaction_service.create_transaction("INV-1", "Sale", _sale(sample_accounts))
        with pytest.raises(DuplicateReference):
            transaction_service.create_transaction("INV-1", "Sale again", _sale(sample_accounts))
        assert len(transaction_service.list_transactions()) == 1

    def test_unknown_account(self, transaction_service, sample_accounts):
        entries = [
            EntryDraft(account_id=sample_accounts["1100"], debit_amount="5"),
            EntryDraft(account_id=999, credit_amount="5"),
        ]
        with pytest.raises(UnknownAccount):
            transaction_service.create_transaction("INV-1", "Sale", entries)

    def test_inactive_account_policy(self, temp_db, account_service, sample_accounts):
        account_service.deactivate_account(sample_accounts["4000"])

        strict = TransactionService(temp_db, allow_inactive_accounts=False)
        with pytest.raises(InactiveAccount):
            strict.create_transaction("INV-1", "Sale", _sale(sample_accounts))

        lenient = TransactionService(temp_db)
        assert lenient.create_transaction("INV-1", "Sale", _sale(sample_accounts)) > 0

    def test_amounts_are_exact_after_storage(self, transaction_service, sample_accounts):
        txn_id = transaction_service.create_transaction(
            "INV-1", "Sale", _sale(sample_accounts, amount="1234.5678")
        )
        txn = transaction_service.get_transaction(txn_id)
        assert txn.entries[0].debit_amount.to_text() == "1234.5678"

    def test_get_by_reference(self, transaction_service, sample_accounts):
        txn_id = transaction_service.create_transaction("INV-9", "Sale", _sale(sample_accounts))
        assert transaction_service.get_transaction_by_reference("INV-9").id == txn_id

    def test_require_missing(self, transaction_service):
        with pytest.raises(TransactionNotFound):
            transaction_service.require_transaction(999)

    def test_list_transactions(self, transaction_service, sample_accounts):
        transaction_service.create_transaction(
            "A", "First", _sale(sample_accounts), transaction_date=datetime(2024, 1, 1)
        )
        transaction_service.create_transaction(
            "B",
            "Rent",
            [
                EntryDraft(account_id=sample_accounts["5000"], debit_amount="100"),
                EntryDraft(account_id=sample_accounts["1100"], credit_amount="100"),
            ],
            transaction_date=datetime(2024, 2, 1),
        )
        assert [t.reference for t in transaction_service.list_transactions()] == ["B", "A"]
        assert [
            t.reference
            for t in transaction_service.list_transactions(account_id=sample_accounts["4000"])
        ] == ["A"]
        assert [
            t.reference
            for t in transaction_service.list_transactions(start_date=date(2024, 1, 15))
        ] == ["B"]
        assert [
            t.reference
            for t in transaction_service.list_transactions(end_date=date(2024, 1, 1))
        ] == ["A"]

    def test_reverse_transaction(self, temp_db, transaction_service, sample_accounts):
        """Test that a reversal brings both balances back to zero."""
        txn_id = transaction_service.create_transaction("INV-1", "Sale", _sale(sample_accounts))
        reversal_id = transaction_service.reverse_transaction(txn_id, reference="INV-1-R")

        reversal = transaction_service.get_transaction(reversal_id)
        assert reversal.description == "Reversal of INV-1"
        assert reversal.entries[0].credit_amount == Money.parse("500")
        assert reversal.entries[1].debit_amount == Money.parse("500")

        balances = BalanceService(temp_db)
        assert balances.get_account_balance(sample_accounts["1100"]).balance.is_zero
        assert balances.get_account_balance(sample_accounts["4000"]).balance.is_zero

    def test_reverse_needs_new_reference(self, transaction_service, sample_accounts):
        txn_id = transaction_service.create_transaction("INV-1", "Sale", _sale(sample_accounts))
        with pytest.raises(DuplicateReference):
            transaction_service.reverse_transaction(txn_id, reference="INV-1")

    def test_reverse_missing(self, transaction_service):
        with pytest.raises(TransactionNotFound):
            transaction_service.reverse_transaction(999, reference="X")

    def test_delete_transaction(self, temp_db, transaction_service, sample_accounts):
        txn_id = transaction_service.create_transaction("INV-1", "Sale", _sale(sample_accounts))
        transaction_service.delete_transaction(txn_id)
        assert transaction_service.get_transaction(txn_id) is None
        assert temp_db.list_entries() == []
        assert temp_db.get_account_entry_count(sample_accounts["1100"]) == 0

    def test_delete_missing(self, transaction_service):
        with pytest.raises(TransactionNotFound):
            transaction_service.delete_transaction(999)


class TestTransactionCLI:
    """Tests for transaction CLI commands."""

    def _invoke(self, cli_runner, temp_db, *args, **kwargs):
        return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], **kwargs)

    def _create(self, cli_runner, temp_db, reference="INV-001", debit="1100=500.00", credit="4000=500.00"):
        return self._invoke(
            cli_runner,
            temp_db,
            "transaction",
            "create",
            "--reference",
            reference,
            "--description",
            "Cash sale",
            "--date",
            "2024-01-15",
            "--debit",
            debit,
            "--credit",
            credit,
        )

    def test_create(self, cli_runner, temp_db, sample_accounts):
        result = self._create(cli_runner, temp_db)
        assert result.exit_code == 0
        assert "Created transaction INV-001" in result.output
        assert "1100 Cash" in result.output
        assert "500.00" in result.output

    def test_create_unbalanced(self, cli_runner, temp_db, sample_accounts):
        result = self._create(cli_runner, temp_db, credit="4000=400")
        assert result.exit_code == 1
        assert "must equal total credits" in result.output

    def test_create_invalid_amount(self, cli_runner, temp_db, sample_accounts):
        result = self._create(cli_runner, temp_db, debit="1100=abc")
        assert result.exit_code == 1
        assert "Could not parse amount" in result.output

    def test_create_bad_entry_spec(self, cli_runner, temp_db, sample_accounts):
        result = self._create(cli_runner, temp_db, debit="1100")
        assert result.exit_code == 1
        assert "ACCOUNT=AMOUNT" in result.output

    def test_create_unknown_account(self, cli_runner, temp_db, sample_accounts):
        result = self._create(cli_runner, temp_db, debit="9999=500")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_create_single_entry(self, cli_runner, temp_db, sample_accounts):
        result = self._invoke(
            cli_runner,
            temp_db,
            "transaction",
            "create",
            "--reference",
            "X",
            "--description",
            "Lonely",
            "--debit",
            "1100=5",
        )
        assert result.exit_code == 1
        assert "at least 2 entries" in result.output

    def test_create_bad_date(self, cli_runner, temp_db, sample_accounts):
        result = self._invoke(
            cli_runner,
            temp_db,
            "transaction",
            "create",
            "--reference",
            "X",
            "--description",
            "Bad date",
            "--date",
            "not a date",
            "--debit",
            "1100=5",
            "--credit",
            "4000=5",
        )
        assert result.exit_code == 1
        assert "Invalid date format" in result.output

    def test_create_reject_inactive(self, cli_runner, temp_db, sample_accounts):
        self._invoke(cli_runner, temp_db, "account", "deactivate", "4000")
        result = self._invoke(
            cli_runner,
            temp_db,
            "transaction",
            "create",
            "--reference",
            "X",
            "--description",
            "Sale",
            "--debit",
            "1100=5",
            "--credit",
            "4000=5",
            "--reject-inactive",
        )
        assert result.exit_code == 1
        assert "inactive" in result.output

    def test_duplicate_reference(self, cli_runner, temp_db, sample_accounts):
        self._create(cli_runner, temp_db)
        result = self._create(cli_runner, temp_db)
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_list(self, cli_runner, temp_db, sample_accounts):
        result = self._invoke(cli_runner, temp_db, "transaction", "list")
        assert "No transactions found." in result.output

        self._create(cli_runner, temp_db)
        result = self._invoke(cli_runner, temp_db, "transaction", "list", "--account", "4000")
        assert result.exit_code == 0
        assert "INV-001" in result.output
        assert "2024-01-15" in result.output

        result = self._invoke(cli_runner, temp_db, "transaction", "list", "--start-date", "2024-02-01")
        assert "No transactions found." in result.output

    def test_show(self, cli_runner, temp_db, sample_accounts):
        self._create(cli_runner, temp_db)
        result = self._invoke(cli_runner, temp_db, "transaction", "show", "INV-001")
        assert result.exit_code == 0
        assert "Reference: INV-001" in result.output
        assert "4000 Sales" in result.output

        result = self._invoke(cli_runner, temp_db, "transaction", "show", "NOPE")
        assert result.exit_code == 1
        assert "Transaction NOPE not found" in result.output

    def test_reverse(self, cli_runner, temp_db, sample_accounts):
        self._create(cli_runner, temp_db)
        result = self._invoke(
            cli_runner, temp_db, "transaction", "reverse", "INV-001", "--reference", "INV-001-R"
        )
        assert result.exit_code == 0
        assert "Reversed INV-001 with INV-001-R" in result.output

        result = self._invoke(cli_runner, temp_db, "balance", "1100")
        balance_line = next(l for l in result.output.splitlines() if "Balance:" in l)
        assert balance_line.split()[-1] == "0.00"

    def test_delete(self, cli_runner, temp_db, sample_accounts):
        self._create(cli_runner, temp_db)
        result = self._invoke(cli_runner, temp_db, "transaction", "delete", "INV-001", "--yes")
        assert result.exit_code == 0
        assert "Deleted transaction INV-001" in result.output

        result = self._invoke(cli_runner, temp_db, "transaction", "list")
        assert "No transactions found." in result.output
