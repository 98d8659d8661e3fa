"""Billed-vs-paid arithmetic. Pure functions over exact decimals."""
from decimal import Decimal

from .enums import UNPAID, PARTIAL, PAID, OVERPAID

ZERO = Decimal("0")


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # go through str so 0.1 stays 0.1
        return Decimal(str(value))
    return Decimal(value)


def remaining(total_billed, total_paid) -> Decimal:
    return to_decimal(total_billed) - to_decimal(total_paid)


def status(remaining_amount) -> str:
    remaining_amount = to_decimal(remaining_amount)
    if remaining_amount == ZERO:
        return PAID
    if remaining_amount > ZERO:
        return PARTIAL
    return OVERPAID


def header_status(total_billed, total_paid) -> str:
    """Status of a header; nothing paid against a positive bill is Unpaid."""
    total_paid = to_decimal(total_paid)
    if total_paid == ZERO and to_decimal(total_billed) > ZERO:
        return UNPAID
    return status(remaining(total_billed, total_paid))
