"""Double-entry validation of candidate transactions.

Everything here is a pure function over caller-supplied data: the set of
references already in use and a mapping from account id to Account. The
persistence layer is responsible for writing an accepted transaction and
all of its entries atomically.
"""

from collections.abc import Container, Iterable, Mapping, Sequence
from typing import Optional

from ledgerkit.domain.entities import Account, EntryDraft, TransactionDraft
from ledgerkit.domain.errors import (
    AmbiguousEntry,
    InactiveAccount,
    InsufficientEntries,
    NonPositiveAmount,
    UnbalancedTransaction,
    UnknownAccount,
    ValidationError,
    DuplicateReference,
    account_not_found,
    duplicate_reference,
)
from ledgerkit.domain.money import Money

MIN_ENTRIES = 2
MAX_REFERENCE_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 500
MAX_ENTRY_DESCRIPTION_LENGTH = 255


def validate_transaction(
    draft: TransactionDraft,
    existing_references: Container[str],
    accounts: Mapping[int, Account],
    allow_inactive: bool = True,
) -> TransactionDraft:
    """Validate a candidate transaction and return its normalized form.

    Checks run in a fixed order and the first failure is raised: entry
    count, single-sided entries, positive amounts, account existence,
    debit/credit equality, then the reference and description limits, and
    finally reference uniqueness.

    Args:
        draft: Candidate transaction
        existing_references: References already used by persisted transactions
        accounts: Lookup from account ID to Account
        allow_inactive: If False, entries against deactivated accounts are refused

    Returns:
        Normalized draft with Money on both sides of every entry

    Raises:
        InvalidAmount: If an amount is not a well-formed decimal
        InsufficientEntries: If there are fewer than two entries
        AmbiguousEntry: If an entry has both or neither side populated
        NonPositiveAmount: If an amount is negative, or an entry has only zeros
        UnknownAccount: If an entry names an account that does not exist
        InactiveAccount: If allow_inactive is False and an account is inactive
        UnbalancedTransaction: If total debits differ from total credits
        ValidationError: If reference or descriptions are empty or too long
        DuplicateReference: If the reference is already in use
    """
    if len(draft.entries) < MIN_ENTRIES:
        raise InsufficientEntries(
            f"Transaction must have at least {MIN_ENTRIES} entries, got {len(draft.entries)}"
        )

    sides = [
        _single_sided(entry, position) for position, entry in enumerate(draft.entries, start=1)
    ]
    entries = tuple(
        _positive(entry, debit, credit, position)
        for position, (entry, (debit, credit)) in enumerate(zip(draft.entries, sides), start=1)
    )

    for position, entry in enumerate(entries, start=1):
        check_account(entry.account_id, accounts, allow_inactive, position)

    check_balanced(entries)
    _check_fields(draft)
    check_reference_available(draft.reference, existing_references)

    return TransactionDraft(
        reference=draft.reference,
        description=draft.description,
        transaction_date=draft.transaction_date,
        entries=entries,
    )


def normalize_entry(entry: EntryDraft, position: int = 1) -> EntryDraft:
    """Parse an entry's amounts and enforce that it is single-sided and positive.

    A side is populated when it is present and positive. An explicit zero on
    the unset side is accepted, which keeps normalization idempotent.

    Raises:
        InvalidAmount: If an amount cannot be parsed
        AmbiguousEntry: If both sides are populated, or both are absent
        NonPositiveAmount: If either side is negative, or the only
            present side is zero
    """
    debit, credit = _single_sided(entry, position)
    return _positive(entry, debit, credit, position)


def check_account(
    account_id: int,
    accounts: Mapping[int, Account],
    allow_inactive: bool = True,
    position: Optional[int] = None,
) -> Account:
    """Resolve an entry's account.

    Raises:
        UnknownAccount: If the account does not exist
        InactiveAccount: If allow_inactive is False and the account is inactive
    """
    account = accounts.get(account_id)
    if account is None:
        message = account_not_found(account_id)
        if position is not None:
            message = f"Entry {position}: {message}"
        raise UnknownAccount(message)
    if not allow_inactive and not account.is_active:
        raise InactiveAccount(f"Account {account.code} is inactive")
    return account


def totals(entries: Iterable[EntryDraft]) -> tuple[Money, Money]:
    """Return (total debits, total credits) of normalized entries."""
    debit_total = Money.zero()
    credit_total = Money.zero()
    for entry in entries:
        debit_total = debit_total.add(entry.debit_amount)
        credit_total = credit_total.add(entry.credit_amount)
    return debit_total, credit_total


def check_balanced(entries: Sequence[EntryDraft]) -> None:
    """Raise UnbalancedTransaction unless debits equal credits exactly."""
    debit_total, credit_total = totals(entries)
    if debit_total != credit_total:
        raise UnbalancedTransaction(
            f"Total debits ({debit_total}) must equal total credits ({credit_total})"
        )


def check_reference_available(reference: str, existing_references: Container[str]) -> None:
    """Raise DuplicateReference if the reference is already in use."""
    if reference in existing_references:
        raise DuplicateReference(duplicate_reference(reference))


def reverse_entries(entries: Iterable[EntryDraft]) -> tuple[EntryDraft, ...]:
    """Build offsetting entries by swapping debit and credit sides."""
    return tuple(
        EntryDraft(
            account_id=entry.account_id,
            debit_amount=entry.credit_amount,
            credit_amount=entry.debit_amount,
            description=entry.description,
        )
        for entry in entries
    )


def _single_sided(entry: EntryDraft, position: int) -> tuple[Optional[Money], Optional[Money]]:
    debit = _parse_side(entry.debit_amount)
    credit = _parse_side(entry.credit_amount)
    if _is_set(debit) and _is_set(credit):
        raise AmbiguousEntry(
            f"Entry {position} has both a debit ({debit}) and a credit ({credit})"
        )
    if debit is None and credit is None:
        raise AmbiguousEntry(f"Entry {position} has neither a debit nor a credit")
    return debit, credit


def _positive(
    entry: EntryDraft, debit: Optional[Money], credit: Optional[Money], position: int
) -> EntryDraft:
    for amount in (debit, credit):
        if amount is not None and amount.is_negative:
            raise NonPositiveAmount(
                f"Entry {position} amount must be greater than zero, got {amount}"
            )

    debit_set = _is_set(debit)
    if not debit_set and not _is_set(credit):
        raise NonPositiveAmount(f"Entry {position} amount must be greater than zero, got 0")

    amount = debit if debit_set else credit
    return EntryDraft(
        account_id=entry.account_id,
        debit_amount=amount if debit_set else Money.zero(),
        credit_amount=Money.zero() if debit_set else amount,
        description=entry.description,
    )


def _is_set(value: Optional[Money]) -> bool:
    # Zero and negative amounts never populate a side.
    return value is not None and value.is_positive


def _parse_side(value) -> Optional[Money]:
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return Money.parse(value, allow_negative=True)


def _check_fields(draft: TransactionDraft) -> None:
    reference = (draft.reference or "").strip()
    if not reference:
        raise ValidationError("Transaction reference is required")
    if len(draft.reference) > MAX_REFERENCE_LENGTH:
        raise ValidationError(
            f"Transaction reference must be at most {MAX_REFERENCE_LENGTH} characters"
        )
    if not (draft.description or "").strip():
        raise ValidationError("Transaction description is required")
    if len(draft.description) > MAX_DESCRIPTION_LENGTH:
        raise ValidationError(
            f"Transaction description must be at most {MAX_DESCRIPTION_LENGTH} characters"
        )
    for position, entry in enumerate(draft.entries, start=1):
        if entry.description is not None and len(entry.description) > MAX_ENTRY_DESCRIPTION_LENGTH:
            raise ValidationError(
                f"Entry {position} description must be at most "
                f"{MAX_ENTRY_DESCRIPTION_LENGTH} characters"
            )
