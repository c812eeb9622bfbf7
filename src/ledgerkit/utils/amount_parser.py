"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

from ledgerkit.domain.errors import InvalidAmount, ValidationError


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Sign is kept so the validator can report negative amounts precisely.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        InvalidAmount: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise InvalidAmount("Empty amount string")

    # Remove whitespace
    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols and thousands separators
    amount_str = re.sub(r"[$€£¥]", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise InvalidAmount(f"Could not parse amount '{amount_str}'") from e
    if not amount.is_finite():
        raise InvalidAmount(f"Amount must be finite, got '{amount_str}'")
    return -amount if is_negative else amount


def parse_entry_spec(spec: str) -> tuple[str, Decimal]:
    """Split an "ACCOUNT=AMOUNT" entry option into its parts.

    Args:
        spec: Text such as "1000=500.00"

    Returns:
        Tuple of (account reference, amount)

    Raises:
        ValidationError: If the text has no "=" or no account part
        InvalidAmount: If the amount cannot be parsed
    """
    account, sep, amount = spec.rpartition("=")
    if not sep or not account.strip():
        raise ValidationError(f"Invalid entry '{spec}'. Expected ACCOUNT=AMOUNT")
    return account.strip(), parse_amount(amount)
