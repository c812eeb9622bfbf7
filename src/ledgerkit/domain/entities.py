"""Domain model entities for ledgerkit.

These are pure data classes representing bookkeeping concepts, independent
of the database schema. The validator and balance calculator work only on
these types.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from ledgerkit.domain.money import AmountLike, Money


class AccountType(str, Enum):
    """Types of accounts in the chart of accounts."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"

    @classmethod
    def from_value(cls, value: "AccountType | str") -> "AccountType":
        """Parse an account type name, case-insensitively."""
        if isinstance(value, AccountType):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(t.value for t in cls)
            raise ValueError(f"Invalid account type '{value}'. Valid types: {valid}") from None


@dataclass(frozen=True)
class Account:
    """Chart of accounts entry."""

    id: int
    code: str
    name: str
    account_type: AccountType
    parent_id: Optional[int] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Entry:
    """Committed single-sided line of a transaction."""

    id: int
    transaction_id: int
    account_id: int
    debit_amount: Money
    credit_amount: Money
    description: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Transaction:
    """Committed transaction with its entries in insertion order."""

    id: int
    reference: str
    description: str
    transaction_date: datetime
    entries: tuple[Entry, ...] = ()
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class EntryDraft:
    """Candidate entry handed to the validator.

    Amounts may be None, text, numbers or Money. After validation both sides
    are Money, with an explicit zero on the unset side.
    """

    account_id: int
    debit_amount: Optional[AmountLike] = None
    credit_amount: Optional[AmountLike] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class TransactionDraft:
    """Candidate transaction handed to the validator."""

    reference: str
    description: str
    transaction_date: datetime
    entries: tuple[EntryDraft, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AccountBalance:
    """Debit and credit totals of an account with its signed balance."""

    account: Account
    debit_total: Money
    credit_total: Money
    balance: Money
