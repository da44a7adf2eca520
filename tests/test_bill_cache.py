"""Unit tests for the saved-bills cache."""

import json
import pytest
from app.exceptions import BillCacheError, NotFound
from app.services.bill_cache import BillCache
from factories import bill


class TestBillCache:
    def test_missing_file_is_empty(self, bill_cache):
        assert bill_cache.load() == []

    def test_round_trip_preserves_order_and_fields(self, bill_cache):
        saved = [bill("AM0002", customer_name="Second"), bill("AM0001", customer_name="First"),
                 bill("AM0003", customer_contact=None, customer_address=None)]
        for b in saved:
            bill_cache.append(b)

        reloaded = BillCache(bill_cache.path).load()

        assert [b.model_dump() for b in reloaded] == [b.model_dump() for b in saved]

    def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / "bills.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(BillCacheError):
            BillCache(str(path)).load()

    def test_non_list_file_raises(self, tmp_path):
        path = tmp_path / "bills.json"
        path.write_text(json.dumps({"bill_number": "AM0001"}), encoding="utf-8")
        with pytest.raises(BillCacheError):
            BillCache(str(path)).load()

    def test_delete_keeps_others_in_order(self, bill_cache):
        for n in ("AM0001", "AM0002", "AM0003"):
            bill_cache.append(bill(n))

        remaining = bill_cache.delete("AM0002")

        assert [b.bill_number for b in remaining] == ["AM0001", "AM0003"]
        assert [b.bill_number for b in bill_cache.load()] == ["AM0001", "AM0003"]

    def test_delete_unknown_bill(self, bill_cache):
        bill_cache.append(bill("AM0001"))
        with pytest.raises(NotFound):
            bill_cache.delete("AM0099")

    def test_replace_edits_in_place(self, bill_cache):
        bill_cache.append(bill("AM0001"))
        bill_cache.append(bill("AM0002"))

        bill_cache.replace("AM0001", bill("AM0001", customer_name="Corrected Name"))

        bills = bill_cache.load()
        assert [b.bill_number for b in bills] == ["AM0001", "AM0002"]
        assert bills[0].customer_name == "Corrected Name"


class TestBillSearch:
    def test_case_insensitive_substring(self, bill_cache):
        bill_cache.append(bill("AM0001", customer_name="Ravi Patil"))
        bill_cache.append(bill("AM0002", customer_name="Sunita Rao"))

        found = bill_cache.search("patil", "customer_name")

        assert [b.bill_number for b in found] == ["AM0001"]

    def test_search_by_chassis(self, bill_cache):
        bill_cache.append(bill("AM0001", chassis_no="CH-778"))
        bill_cache.append(bill("AM0002", chassis_no="CH-901"))

        assert [b.bill_number for b in bill_cache.search("901", "chassis_no")] == ["AM0002"]

    def test_empty_term_matches_nothing(self, bill_cache):
        bill_cache.append(bill("AM0001"))
        assert bill_cache.search("", "customer_name") == []

    def test_unknown_category(self, bill_cache):
        with pytest.raises(ValueError):
            bill_cache.search("x", "price")
