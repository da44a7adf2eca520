"""Unit tests for bill totals and amount formatting."""

from app.services.tax_service import amount_in_words, compute_amounts, format_amount, group_indian


class TestComputeAmounts:
    def test_two_units(self):
        amounts = compute_amounts(1000, 2)
        assert amounts.total_amount == 2000
        assert amounts.cgst == 50
        assert amounts.sgst == 50
        assert amounts.total_tax == 100
        assert amounts.final_amount == 2100

    def test_zero_quantity(self):
        assert compute_amounts(1000, 0).final_amount == 0


class TestFormatting:
    def test_indian_grouping(self):
        assert group_indian("999") == "999"
        assert group_indian("2100") == "2,100"
        assert group_indian("1234567") == "12,34,567"

    def test_drops_trailing_zeros(self):
        assert format_amount(2100) == "2,100"
        assert format_amount(52.5) == "52.5"

    def test_truncates_to_two_decimals(self):
        assert format_amount(0.129) == "0.12"
        assert format_amount(1234567.891) == "12,34,567.89"

    def test_amount_in_words(self):
        assert amount_in_words(2100) == "₹2,100.00 Only"
        assert amount_in_words(65100.5) == "₹65,100.50 Only"


class TestPaisaPrecision:
    def test_fractional_price_keeps_last_paisa(self):
        amounts = compute_amounts(15.20, 1)
        assert amounts.total_amount == 15.20
        assert amounts.cgst == 0.38
        assert format_amount(amounts.final_amount) == "15.96"

    def test_other_fractional_prices(self):
        assert format_amount(compute_amounts(19.40, 1).final_amount) == "20.37"
        assert format_amount(compute_amounts(47.40, 1).final_amount) == "49.77"
