"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling. ``kind`` is the
    machine-readable name of the failure.
    """

    @property
    def kind(self) -> str:
        return type(self).__name__


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class InvalidAmount(ValidationError):
    """Amount is not a well-formed (non-negative) decimal."""


class InsufficientEntries(ValidationError):
    """Transaction has fewer than two entries."""


class AmbiguousEntry(ValidationError):
    """Entry carries both a debit and a credit, or neither."""


class NonPositiveAmount(ValidationError):
    """Entry amount is zero or negative."""


class InactiveAccount(ValidationError):
    """Entry targets a deactivated account while inactive accounts are refused."""


class UnbalancedTransaction(ValidationError):
    """Total debits differ from total credits."""


class UnknownAccount(NotFoundError):
    """Referenced account does not exist."""


class TransactionNotFound(NotFoundError):
    """Referenced transaction does not exist."""


class DuplicateReference(ConflictError):
    """Transaction reference is already in use."""


class DuplicateAccountCode(ConflictError):
    """Account code is already in use."""


class AccountInUse(DependencyError):
    """Account is referenced by entries or child accounts."""


class CycleDetected(DomainError):
    """Account hierarchy revisits a node.

    Signals corrupted hierarchical data rather than a bad request.
    """


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def transaction_not_found(transaction_id: int | str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def duplicate_reference(reference: str) -> str:
    """Return message for a reused transaction reference."""
    return f"Transaction with reference '{reference}' already exists"


def duplicate_account_code(code: str) -> str:
    """Return message for a reused account code."""
    return f"Account with code '{code}' already exists"


def account_delete_blocked(account_id: int, entry_count: int, child_count: int) -> str:
    """Return message when account has dependent entries or child accounts."""
    parts = []
    if entry_count > 0:
        parts.append(f"{entry_count} entr{'ies' if entry_count != 1 else 'y'}")
    if child_count > 0:
        parts.append(f"{child_count} child account{'s' if child_count != 1 else ''}")
    return (
        f"Cannot delete account {account_id}: it has {', '.join(parts)}. "
        "Deactivate it instead."
    )
