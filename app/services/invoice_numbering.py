# app/services/invoice_numbering.py
"""
Sequential invoice numbers: AM0001, AM0002, ...

next_bill_number() derives the next number from the last saved bill, the
same way the bill screen always did. allocate_bill_number() hands numbers
out from a counter row instead, incremented inside the caller's transaction,
so two sales can never draw the same number. The counter is seeded from the
last saved bill the first time it is used.
"""

import re
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from app.config import settings
from app.models.sale import InvoiceCounter, Sale
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _pattern(prefix: str):
    return re.compile(re.escape(prefix) + r"(\d+)")


def format_bill_number(value: int, prefix: Optional[str] = None) -> str:
    prefix = settings.INVOICE_PREFIX if prefix is None else prefix
    return f"{prefix}{value:0{settings.INVOICE_NUMBER_WIDTH}d}"


def parse_bill_number(bill_number: str, prefix: Optional[str] = None) -> Optional[int]:
    """Numeric suffix of a bill number, or None if it does not follow the prefix pattern."""
    prefix = settings.INVOICE_PREFIX if prefix is None else prefix
    match = _pattern(prefix).search(bill_number or "")
    return int(match.group(1)) if match else None


def next_bill_number(previous_numbers: Sequence[str], prefix: Optional[str] = None) -> str:
    """Next number after the most recently saved one (the last in the sequence)."""
    if previous_numbers:
        last = parse_bill_number(previous_numbers[-1], prefix)
        if last is not None:
            return format_bill_number(last + 1, prefix)
    return format_bill_number(1, prefix)


def allocate_bill_number(db: Session) -> str:
    """
    Reserve the next bill number. Does not commit: the increment lands
    together with the sale that uses it, or not at all.
    """
    prefix = settings.INVOICE_PREFIX
    counter = (
        db.query(InvoiceCounter)
        .filter(InvoiceCounter.prefix == prefix)
        .with_for_update()
        .first()
    )
    if counter is None:
        last_sale = db.query(Sale).order_by(Sale.id.desc()).first()
        seed = parse_bill_number(last_sale.bill_number, prefix) if last_sale else None
        counter = InvoiceCounter(prefix=prefix, last_value=seed or 0)
        db.add(counter)
        logger.info(f"[INVOICE] Counter for {prefix} seeded at {counter.last_value}")

    counter.last_value += 1
    db.flush()
    return format_bill_number(counter.last_value, prefix)
