# app/services/tax_service.py
"""
Bill totals and the way amounts are printed.

compute_amounts() is the whole tax rule: two fixed 2.5% components
(CGST + SGST) on price × quantity. Formatting helpers follow the en-IN
conventions used on the printed invoice (lakh/crore digit grouping).
"""

from dataclasses import dataclass, asdict
from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP

from app.config import settings


@dataclass
class BillAmounts:
    total_amount: float
    cgst: float
    sgst: float
    total_tax: float
    final_amount: float

    def as_dict(self) -> dict:
        return asdict(self)


def _rate(value: float) -> Decimal:
    return Decimal(str(value))


def compute_amounts(price: float, quantity: int) -> BillAmounts:
    """Split in Decimal; floats only on the way out, for storage."""
    total = Decimal(str(price)) * quantity
    cgst = total * _rate(settings.CGST_RATE)
    sgst = total * _rate(settings.SGST_RATE)
    tax = cgst + sgst
    return BillAmounts(total_amount=float(total), cgst=float(cgst), sgst=float(sgst),
                       total_tax=float(tax), final_amount=float(total + tax))


def group_indian(digits: str) -> str:
    """'1234567' -> '12,34,567'."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def _split(value: float, rounding) -> tuple[str, str, str]:
    quantized = Decimal(str(value)).quantize(Decimal("0.01"), rounding=rounding)
    sign = "-" if quantized < 0 else ""
    whole, _, fraction = f"{abs(quantized):.2f}".partition(".")
    return sign, whole, fraction


def format_amount(value: float) -> str:
    """Display form: grouped, at most 2 decimals (truncated), trailing zeros dropped."""
    sign, whole, fraction = _split(value, ROUND_DOWN)
    fraction = fraction.rstrip("0")
    text = group_indian(whole)
    return f"{sign}{text}.{fraction}" if fraction else f"{sign}{text}"


def amount_in_words(value: float) -> str:
    """Currency line printed under the tax summary, e.g. '₹2,100.00 Only'."""
    sign, whole, fraction = _split(value, ROUND_HALF_UP)
    return f"{sign}₹{group_indian(whole)}.{fraction} Only"
