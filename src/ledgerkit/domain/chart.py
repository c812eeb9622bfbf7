"""Chart of accounts: sign conventions and the account hierarchy.

Accounts are held in an arena keyed by id. Parent links are plain ids
resolved through the arena, so traversals can detect cycles instead of
looping forever on corrupted data.
"""

from collections.abc import Iterable, Iterator, Mapping
from typing import Optional

from ledgerkit.domain.entities import Account, AccountType
from ledgerkit.domain.errors import CycleDetected, UnknownAccount, account_not_found

_DEBIT_NORMAL = frozenset({AccountType.ASSET, AccountType.EXPENSE})


def normal_balance_sign(account_type: AccountType | str) -> int:
    """Return +1 for debit-normal account types and -1 for credit-normal ones.

    Asset and expense balances grow with debits; liability, equity and
    revenue balances grow with credits.
    """
    account_type = AccountType.from_value(account_type)
    return 1 if account_type in _DEBIT_NORMAL else -1


class ChartOfAccounts(Mapping[int, Account]):
    """Read-only arena of accounts indexed by id."""

    def __init__(self, accounts: Iterable[Account]):
        self._accounts: dict[int, Account] = {}
        self._children: dict[int, list[int]] = {}
        for account in accounts:
            self._accounts[account.id] = account
        for account in sorted(self._accounts.values(), key=lambda a: a.code):
            if account.parent_id is not None:
                self._children.setdefault(account.parent_id, []).append(account.id)

    def __getitem__(self, account_id: int) -> Account:
        return self._accounts[account_id]

    def __iter__(self) -> Iterator[int]:
        return iter(self._accounts)

    def __len__(self) -> int:
        return len(self._accounts)

    def require(self, account_id: int) -> Account:
        """Return the account or raise UnknownAccount."""
        account = self._accounts.get(account_id)
        if account is None:
            raise UnknownAccount(account_not_found(account_id))
        return account

    def by_code(self, code: str) -> Optional[Account]:
        for account in self._accounts.values():
            if account.code == code:
                return account
        return None

    def roots(self) -> list[Account]:
        """Accounts without a parent, ordered by code."""
        roots = [a for a in self._accounts.values() if a.parent_id is None]
        return sorted(roots, key=lambda a: a.code)

    def children(self, account_id: int) -> list[Account]:
        """Direct children of an account, ordered by code."""
        self.require(account_id)
        return [self._accounts[child_id] for child_id in self._children.get(account_id, [])]

    def resolve_hierarchy(self, account_id: int) -> list[Account]:
        """Return the ancestor chain of an account, parent first, root last.

        Raises:
            UnknownAccount: If the account or one of its parents is missing
            CycleDetected: If the parent chain revisits an account
        """
        account = self.require(account_id)
        seen = {account.id}
        chain: list[Account] = []
        parent_id = account.parent_id
        while parent_id is not None:
            if parent_id in seen:
                raise CycleDetected(
                    f"Account hierarchy of {account_id} revisits account {parent_id}"
                )
            seen.add(parent_id)
            parent = self.require(parent_id)
            chain.append(parent)
            parent_id = parent.parent_id
        return chain

    def descendants(self, account_id: int) -> list[Account]:
        """All direct and indirect children, depth first.

        Raises:
            CycleDetected: If an account is reached twice
        """
        self.require(account_id)
        result: list[Account] = []
        seen = {account_id}
        stack = list(reversed(self._children.get(account_id, [])))
        while stack:
            child_id = stack.pop()
            if child_id in seen:
                raise CycleDetected(
                    f"Account hierarchy below {account_id} revisits account {child_id}"
                )
            seen.add(child_id)
            result.append(self._accounts[child_id])
            stack.extend(reversed(self._children.get(child_id, [])))
        return result

    def path(self, account_id: int, separator: str = " > ") -> str:
        """Codes from the root down to the account (e.g. "1000 > 1100")."""
        account = self.require(account_id)
        chain = [account] + self.resolve_hierarchy(account_id)
        return separator.join(a.code for a in reversed(chain))

    def check_parent(self, account_id: Optional[int], parent_id: Optional[int]) -> None:
        """Validate a proposed parent for an account.

        Any existing account may be a parent, active or not and of any
        type, as long as the link keeps the hierarchy acyclic.

        Args:
            account_id: Account being created (None) or re-parented
            parent_id: Proposed parent ID, or None for a root account

        Raises:
            UnknownAccount: If the parent does not exist
            CycleDetected: If the parent is the account or one of its descendants
        """
        if parent_id is None:
            return
        self.require(parent_id)
        if account_id is None:
            return
        if parent_id == account_id:
            raise CycleDetected(f"Account {account_id} cannot be its own parent")
        ancestors = {a.id for a in self.resolve_hierarchy(parent_id)}
        if account_id in ancestors:
            raise CycleDetected(
                f"Account {parent_id} is a descendant of account {account_id}"
            )
