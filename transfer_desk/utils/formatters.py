"""Display formatting for countdowns, money, dates and IBANs"""

from datetime import datetime
from decimal import Decimal

from transfer_desk.domain.models import Direction, Transaction
from transfer_desk.domain.validation import format_iban

__all__ = ["format_time", "format_currency", "format_signed_amount", "format_date", "format_iban"]

CURRENCY_SYMBOL = "€"


def format_time(seconds: int) -> str:
    """Render remaining seconds as M:SS"""
    seconds = max(int(seconds), 0)
    mins, secs = divmod(seconds, 60)
    return f"{mins}:{secs:02d}"


def format_currency(amount: Decimal) -> str:
    """Currency symbol plus exactly two fraction digits, e.g. €1000.00"""
    return f"{CURRENCY_SYMBOL}{Decimal(amount):.2f}"


def format_signed_amount(transaction: Transaction, own_iban: str) -> str:
    """Prefix with - for outgoing and + for incoming transactions"""
    sign = "-" if transaction.direction_for(own_iban) is Direction.OUTGOING else "+"
    return f"{sign}{format_currency(transaction.amount)}"


def format_date(value: datetime) -> str:
    """e.g. Oct 19, 2026, 02:05 PM"""
    return value.strftime("%b %d, %Y, %I:%M %p")
