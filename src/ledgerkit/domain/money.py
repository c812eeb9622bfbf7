"""Exact decimal money value object."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, Union

from ledgerkit.domain.errors import InvalidAmount

AmountLike = Union["Money", Decimal, int, float, str]


@dataclass(frozen=True, order=True)
class Money:
    """Monetary quantity backed by ``Decimal``.

    Arithmetic never rounds or quantizes, so repeated aggregation is exact.
    Equality and ordering compare decimal values, so ``Money("1.0")`` equals
    ``Money("1.00")``. The value may be negative (balances are signed); use
    :meth:`parse` to build one-sided entry amounts from user input.
    """

    amount: Decimal = Decimal("0")

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", _to_decimal(self.amount))
        elif not self.amount.is_finite():
            raise InvalidAmount(f"Amount must be finite, got '{self.amount}'")

    @classmethod
    def parse(cls, value: AmountLike, allow_negative: bool = False) -> Money:
        """Build Money from a decimal-formatted text or number.

        Args:
            value: Text such as "500.00", an int, a Decimal, a float or Money
            allow_negative: If False, negative values are rejected

        Returns:
            Money instance

        Raises:
            InvalidAmount: If the value is not a well-formed decimal, or is
                negative while allow_negative is False
        """
        if isinstance(value, Money):
            money = value
        else:
            money = cls(_to_decimal(value))
        if not allow_negative and money.amount < 0:
            raise InvalidAmount(f"Amount must not be negative, got '{value}'")
        return money

    @classmethod
    def zero(cls) -> Money:
        return cls(Decimal("0"))

    @classmethod
    def total(cls, values: Iterable[Money]) -> Money:
        """Sum Money values, starting from zero."""
        result = cls.zero()
        for value in values:
            result = result.add(value)
        return result

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    @property
    def is_positive(self) -> bool:
        return self.amount > 0

    @property
    def is_negative(self) -> bool:
        return self.amount < 0

    def add(self, other: Money) -> Money:
        return Money(self.amount + other.amount)

    def subtract(self, other: Money) -> Money:
        return Money(self.amount - other.amount)

    def negate(self) -> Money:
        return Money(-self.amount)

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return self.subtract(other)

    def __neg__(self) -> Money:
        return self.negate()

    def to_text(self) -> str:
        """Exact decimal text, as persisted."""
        return str(self.amount)

    def __str__(self) -> str:
        return self.to_text()

    def __format__(self, format_spec: str) -> str:
        return format(self.amount, format_spec)


def _to_decimal(value) -> Decimal:
    if isinstance(value, bool):
        raise InvalidAmount(f"Could not parse amount '{value}'")
    if isinstance(value, float):
        # Shortest round-tripping text keeps 0.1 as Decimal("0.1").
        value = repr(value)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise InvalidAmount("Empty amount string")
    try:
        result = Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise InvalidAmount(f"Could not parse amount '{value}'") from e
    if not result.is_finite():
        raise InvalidAmount(f"Amount must be finite, got '{value}'")
    return result
