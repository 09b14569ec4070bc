"""Money arithmetic shared by the order builder and the finalizer."""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, NamedTuple

from django.conf import settings

CENT = Decimal('0.01')
DEFAULT_TAX_RATE = Decimal('0.10')


class Totals(NamedTuple):
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal


def round2(amount) -> Decimal:
    """Round an amount to the cent, half up"""
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def get_tax_rate() -> Decimal:
    return Decimal(str(getattr(settings, 'POS_TAX_RATE', DEFAULT_TAX_RATE)))


def compute_totals(lines: Iterable, tax_rate: Decimal = None) -> Totals:
    """
    Compute subtotal, tax and total for a sequence of order lines

    Args:
        lines: Anything exposing a ``total`` per line
        tax_rate: Rate as a fraction (0.10 for 10%). Defaults to POS_TAX_RATE.

    Returns:
        Totals with subtotal = sum of line totals, tax = round2(subtotal * rate)
        and total = subtotal + tax
    """
    if tax_rate is None:
        tax_rate = get_tax_rate()

    subtotal = round2(sum((line.total for line in lines), Decimal('0')))
    tax_amount = round2(subtotal * tax_rate)
    return Totals(subtotal=subtotal, tax_amount=tax_amount, total=subtotal + tax_amount)
