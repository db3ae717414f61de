"""IBAN and amount validation for transfer input"""

import re
from decimal import Decimal, InvalidOperation

from transfer_desk.domain.exceptions import InvalidAmountError

IBAN_PATTERN = re.compile(r"^[A-Z]{2}\d{2}[A-Z\d]{1,30}$", re.ASCII)
AMOUNT_PATTERN = re.compile(r"^\d*\.?\d{0,2}$", re.ASCII)

# Country prefixes whose IBANs have a fixed total length
FIXED_IBAN_LENGTHS = {"DE": 22}

_WHITESPACE = re.compile(r"\s+")


def normalize_iban(raw: str | None) -> str:
    """Remove all whitespace and upper-case, the form used for comparisons and transmission."""
    if not raw:
        return ""
    return _WHITESPACE.sub("", raw).upper()


def validate_iban(raw: str | None) -> bool:
    """
    Check an IBAN against the accepted shape.

    Two letters, two digits, then 1-30 alphanumerics. German IBANs must be
    exactly 22 characters; other countries are only checked for shape.
    """
    iban = normalize_iban(raw)
    if not IBAN_PATTERN.fullmatch(iban):
        return False

    expected_length = FIXED_IBAN_LENGTHS.get(iban[:2])
    return expected_length is None or len(iban) == expected_length


def format_iban(iban: str) -> str:
    """Group an IBAN into 4-character blocks for display"""
    compact = _WHITESPACE.sub("", iban or "")
    return " ".join(compact[i:i + 4] for i in range(0, len(compact), 4))


def accepts_amount_input(value: str) -> bool:
    """Keystroke mask: empty, or digits with an optional dot and up to two decimals"""
    return value == "" or AMOUNT_PATTERN.fullmatch(value) is not None


def parse_amount(value: str) -> Decimal:
    """
    Parse a masked amount entry into a non-negative Decimal.

    Raises:
        InvalidAmountError: If the value is empty, violates the entry mask,
            or has no digits (e.g. a lone ".")
    """
    if not value or not accepts_amount_input(value):
        raise InvalidAmountError(f"Invalid amount '{value}'")

    try:
        return Decimal(value)
    except InvalidOperation as e:
        raise InvalidAmountError(f"Invalid amount '{value}'") from e
