# app/services/bill_cache.py
"""
Local cache of saved bills — a JSON file holding the list of bill records
in the order they were saved. Used for bill search and edits at the counter;
the sales table stays the record of truth.
"""

import json
import os
from typing import Optional

from app.config import settings
from app.schemas.sale import BillRecord
from app.exceptions import BillCacheError, NotFound
from app.utils.logger import get_logger

logger = get_logger(__name__)

SEARCH_CATEGORIES = (
    "customer_name", "chassis_no", "motor_no", "battery_no",
    "controller_no", "date", "bill_number",
)


class BillCache:
    def __init__(self, path: Optional[str] = None):
        self.path = path or settings.BILL_CACHE_PATH

    def load(self) -> list[BillRecord]:
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"[BILLS] Cannot read bill cache {self.path}: {e}")
            raise BillCacheError(f"Bill cache is unreadable: {e}") from e
        if not isinstance(raw, list):
            raise BillCacheError("Bill cache must hold a list of bills")
        return [BillRecord.model_validate(item) for item in raw]

    def _write(self, bills: list[BillRecord]):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump([b.model_dump(mode="json") for b in bills], f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self.path)

    def append(self, bill: BillRecord) -> list[BillRecord]:
        bills = self.load()
        bills.append(bill)
        self._write(bills)
        logger.info(f"[BILLS] Cached {bill.bill_number} ({len(bills)} saved)")
        return bills

    def get(self, bill_number: str) -> BillRecord:
        for bill in self.load():
            if bill.bill_number == bill_number:
                return bill
        raise NotFound(f"Bill {bill_number} not found")

    def replace(self, bill_number: str, bill: BillRecord) -> BillRecord:
        bills = self.load()
        for i, existing in enumerate(bills):
            if existing.bill_number == bill_number:
                bills[i] = bill
                self._write(bills)
                logger.info(f"[BILLS] Updated {bill_number}")
                return bill
        raise NotFound(f"Bill {bill_number} not found")

    def delete(self, bill_number: str) -> list[BillRecord]:
        bills = self.load()
        remaining = [b for b in bills if b.bill_number != bill_number]
        if len(remaining) == len(bills):
            raise NotFound(f"Bill {bill_number} not found")
        self._write(remaining)
        logger.info(f"[BILLS] Deleted {bill_number}")
        return remaining

    def search(self, term: str, category: str = "customer_name") -> list[BillRecord]:
        """Case-insensitive substring match on one field. An empty term matches nothing."""
        if category not in SEARCH_CATEGORIES:
            raise ValueError(f"Unknown search category '{category}'")
        if not term:
            return []
        needle = term.lower()
        return [
            b for b in self.load()
            if needle in str(getattr(b, category) or "").lower()
        ]


def get_bill_cache() -> BillCache:
    """FastAPI dependency — override in tests to point at a temp file."""
    return BillCache()
