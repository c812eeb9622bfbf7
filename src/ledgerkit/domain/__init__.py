"""Domain layer for ledgerkit.

Only the pure core is exported here. The database-backed services
(AccountService, TransactionService, BalanceService) are imported from
their modules, since they depend on the database layer.
"""

from ledgerkit.domain.money import Money
from ledgerkit.domain.entities import (
    Account,
    AccountBalance,
    AccountType,
    Entry,
    EntryDraft,
    Transaction,
    TransactionDraft,
)
from ledgerkit.domain.chart import ChartOfAccounts, normal_balance_sign
from ledgerkit.domain.validator import (
    check_reference_available,
    reverse_entries,
    validate_transaction,
)

__all__ = [
    "Money",
    "Account",
    "AccountBalance",
    "AccountType",
    "Entry",
    "EntryDraft",
    "Transaction",
    "TransactionDraft",
    "ChartOfAccounts",
    "normal_balance_sign",
    "check_reference_available",
    "reverse_entries",
    "validate_transaction",
]
