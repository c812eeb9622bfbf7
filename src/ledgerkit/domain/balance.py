"""Account balances: pure aggregation plus the database-backed service."""

from collections import defaultdict
from collections.abc import Callable, Iterable
from datetime import date
from typing import Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.chart import ChartOfAccounts, normal_balance_sign
from ledgerkit.domain.entities import Account, AccountBalance, AccountType, Entry
from ledgerkit.domain.errors import CycleDetected
from ledgerkit.domain.money import Money
from ledgerkit.logging_config import get_logger

logger = get_logger("domain.balance")

EntriesFor = Callable[[int], Iterable[Entry]]


def debit_credit_totals(entries: Iterable[Entry]) -> tuple[Money, Money]:
    """Return (total debits, total credits) of committed entries."""
    debit_total = Money.zero()
    credit_total = Money.zero()
    for entry in entries:
        debit_total = debit_total.add(entry.debit_amount)
        credit_total = credit_total.add(entry.credit_amount)
    return debit_total, credit_total


def account_balance(account: Account, entries: Iterable[Entry]) -> AccountBalance:
    """Totals and signed balance of one account's entries."""
    debit_total, credit_total = debit_credit_totals(entries)
    if normal_balance_sign(account.account_type) > 0:
        balance = debit_total.subtract(credit_total)
    else:
        balance = credit_total.subtract(debit_total)
    return AccountBalance(
        account=account,
        debit_total=debit_total,
        credit_total=credit_total,
        balance=balance,
    )


def own_balance(account: Account, entries: Iterable[Entry]) -> Money:
    """Signed balance of an account, excluding its descendants.

    Debit-normal accounts (asset, expense) report debits minus credits;
    credit-normal accounts report credits minus debits.
    """
    return account_balance(account, entries).balance


def balance_including_descendants(
    chart: ChartOfAccounts, account_id: int, entries_for: EntriesFor
) -> Money:
    """Own balance of an account plus the rolled-up balances of its children.

    Each account contributes its own signed balance; children of a
    different type are not re-signed against the parent.

    Raises:
        UnknownAccount: If the account does not exist
        CycleDetected: If the hierarchy below the account revisits a node
    """
    account = chart.require(account_id)
    return _rollup(chart, account, entries_for, visiting=set())


def _rollup(
    chart: ChartOfAccounts, account: Account, entries_for: EntriesFor, visiting: set[int]
) -> Money:
    if account.id in visiting:
        raise CycleDetected(f"Account hierarchy revisits account {account.id}")
    visiting.add(account.id)
    total = own_balance(account, entries_for(account.id))
    for child in chart.children(account.id):
        total = total.add(_rollup(chart, child, entries_for, visiting))
    return total


def balances_by_type(
    chart: ChartOfAccounts, account_type: AccountType | str, entries_for: EntriesFor
) -> dict[int, Money]:
    """Map account ID to own balance for every active account of a type.

    Accounts are visited in code order, so the mapping order is stable.
    """
    account_type = AccountType.from_value(account_type)
    matching = sorted(
        (a for a in chart.values() if a.account_type == account_type and a.is_active),
        key=lambda a: a.code,
    )
    return {account.id: own_balance(account, entries_for(account.id)) for account in matching}


class BalanceService:
    """Service for computing balances from persisted entries."""

    def __init__(self, db: Database):
        """Initialize balance service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_chart(self) -> ChartOfAccounts:
        return ChartOfAccounts(self.db.list_accounts())

    def get_account_balance(
        self,
        account_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> AccountBalance:
        """Get the balance of a single account.

        Args:
            account_id: Account ID
            start_date: Optional first transaction date to include
            end_date: Optional last transaction date to include

        Returns:
            AccountBalance with debit/credit totals and signed balance

        Raises:
            UnknownAccount: If the account does not exist
        """
        account = self.get_chart().require(account_id)
        entries = self.db.list_entries(
            account_id=account_id, start_date=start_date, end_date=end_date
        )
        return account_balance(account, entries)

    def get_balances(
        self,
        account_type: Optional[AccountType | str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[AccountBalance]:
        """Get balances of all accounts, optionally filtered by type.

        Returns:
            List of AccountBalance ordered by account code
        """
        chart = self.get_chart()
        entries_for = self._entries_lookup(start_date, end_date)
        accounts = sorted(chart.values(), key=lambda a: a.code)
        if account_type is not None:
            account_type = AccountType.from_value(account_type)
            accounts = [a for a in accounts if a.account_type == account_type]
        return [account_balance(a, entries_for(a.id)) for a in accounts]

    def get_rollup_balance(
        self,
        account_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Money:
        """Get an account's balance including all descendant accounts.

        Raises:
            UnknownAccount: If the account does not exist
            CycleDetected: If the stored hierarchy is corrupted
        """
        chart = self.get_chart()
        entries_for = self._entries_lookup(start_date, end_date)
        return balance_including_descendants(chart, account_id, entries_for)

    def get_balances_by_type(
        self,
        account_type: AccountType | str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> dict[int, Money]:
        """Get own balances of every active account of a type."""
        chart = self.get_chart()
        entries_for = self._entries_lookup(start_date, end_date)
        return balances_by_type(chart, account_type, entries_for)

    def _entries_lookup(
        self, start_date: Optional[date], end_date: Optional[date]
    ) -> EntriesFor:
        # One query for the whole ledger keeps every account on the same snapshot.
        grouped: dict[int, list[Entry]] = defaultdict(list)
        for entry in self.db.list_entries(start_date=start_date, end_date=end_date):
            grouped[entry.account_id].append(entry)
        logger.debug("Loaded entries for %d accounts", len(grouped))
        return lambda account_id: grouped.get(account_id, [])
