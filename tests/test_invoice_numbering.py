"""Unit tests for invoice number generation."""

from app.services.invoice_numbering import (
    allocate_bill_number, format_bill_number, next_bill_number, parse_bill_number,
)
from factories import saved_sale


class TestNextBillNumber:
    def test_first_bill(self):
        assert next_bill_number([]) == "AM0001"

    def test_increments_last_bill(self):
        assert next_bill_number(["AM0007"]) == "AM0008"

    def test_uses_most_recently_saved_not_highest(self):
        assert next_bill_number(["AM0010", "AM0003"]) == "AM0004"

    def test_unparseable_last_bill_restarts(self):
        assert next_bill_number(["AM0005", "BILL-1234"]) == "AM0001"

    def test_padding_is_a_minimum(self):
        assert next_bill_number(["AM9999"]) == "AM10000"

    def test_parse_and_format(self):
        assert parse_bill_number("AM0042") == 42
        assert parse_bill_number("X-42") is None
        assert format_bill_number(42) == "AM0042"


class TestAllocateBillNumber:
    def test_counter_hands_out_sequential_numbers(self, db):
        assert allocate_bill_number(db) == "AM0001"
        assert allocate_bill_number(db) == "AM0002"
        db.commit()
        assert allocate_bill_number(db) == "AM0003"

    def test_counter_seeded_from_last_sale(self, db):
        saved_sale(db, "AM0007")
        assert allocate_bill_number(db) == "AM0008"

    def test_rollback_releases_number(self, db):
        allocate_bill_number(db)
        db.rollback()
        assert allocate_bill_number(db) == "AM0001"
