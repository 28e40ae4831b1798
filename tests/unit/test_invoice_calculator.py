"""Unit tests for invoice tax calculation."""

from decimal import Decimal

import pytest

from procurement.business.invoice_calculator import (
    PPH_RATE,
    PPN_RATE,
    calculate_invoice_details,
    to_decimal,
)


@pytest.mark.unit
class TestCalculateInvoiceDetails:
    """Test cases for DPP, PPN, PPh and grand total derivation."""

    def test_pkp_invoice_half_portion(self, sample_invoice):
        """PKP vendors are charged PPN on top of the billed portion."""
        result = calculate_invoice_details(sample_invoice, 1_000_000)

        assert result["dpp"] == Decimal("500000")
        assert result["ppn"] == Decimal("55000")
        assert result["pph"] == Decimal("10000")
        assert result["grand_total"] == Decimal("545000")

    def test_non_pkp_invoice_has_no_ppn(self, sample_invoice):
        """Non-PKP vendors get no PPN; PPh is still withheld."""
        invoice = {**sample_invoice, "ppn_status": "Non-PKP"}

        result = calculate_invoice_details(invoice, 1_000_000)

        assert result["ppn"] == Decimal(0)
        assert result["pph"] == Decimal("10000")
        assert result["grand_total"] == Decimal("490000")

    def test_missing_ppn_status_is_not_pkp(self, sample_invoice):
        invoice = {**sample_invoice, "ppn_status": None}

        result = calculate_invoice_details(invoice, Decimal("2000000"))

        assert result["ppn"] == Decimal(0)
        assert result["grand_total"] == Decimal("980000")

    def test_ppn_status_match_is_exact(self, sample_invoice):
        """Only the exact ``PKP`` marker enables PPN."""
        invoice = {**sample_invoice, "ppn_status": "pkp"}

        result = calculate_invoice_details(invoice, 1_000_000)

        assert result["ppn"] == Decimal(0)

    def test_copies_invoice_fields_and_nominal(self, sample_invoice):
        result = calculate_invoice_details(sample_invoice, "1000000")

        assert result["nominal_po"] == Decimal("1000000")
        for key, value in sample_invoice.items():
            assert result[key] == value

    def test_input_record_is_not_mutated(self, sample_invoice):
        snapshot = dict(sample_invoice)

        calculate_invoice_details(sample_invoice, 1_000_000)

        assert sample_invoice == snapshot
        assert "dpp" not in sample_invoice

    def test_fractional_portion_is_exact(self, sample_invoice):
        """Decimal math keeps cents exact for awkward portions."""
        invoice = {**sample_invoice, "invoice_portion_percent": Decimal("33.3333")}

        result = calculate_invoice_details(invoice, Decimal("150000.00"))

        expected_dpp = Decimal("150000.00") * Decimal("33.3333") / 100
        assert result["dpp"] == expected_dpp
        assert result["ppn"] == expected_dpp * PPN_RATE
        assert result["pph"] == expected_dpp * PPH_RATE

    def test_portion_above_hundred_is_not_clamped(self, sample_invoice):
        invoice = {**sample_invoice, "invoice_portion_percent": 150}

        result = calculate_invoice_details(invoice, 1_000_000)

        assert result["dpp"] == Decimal("1500000")

    def test_zero_nominal_gives_zero_totals(self, sample_invoice):
        result = calculate_invoice_details(sample_invoice, 0)

        assert result["dpp"] == 0
        assert result["grand_total"] == 0

    def test_unparsable_portion_propagates_nan(self, sample_invoice):
        """Malformed numbers yield NaN rather than raising."""
        invoice = {**sample_invoice, "invoice_portion_percent": "lima puluh"}

        result = calculate_invoice_details(invoice, 1_000_000)

        for field in ("dpp", "ppn", "pph", "grand_total"):
            assert result[field].is_nan()

    def test_missing_nominal_propagates_nan(self, sample_invoice):
        result = calculate_invoice_details(sample_invoice, None)

        assert result["nominal_po"].is_nan()
        assert result["grand_total"].is_nan()


@pytest.mark.unit
class TestToDecimal:
    """Test cases for numeric coercion."""

    @pytest.mark.parametrize("value, expected", [
        (50, Decimal("50")),
        ("12.5", Decimal("12.5")),
        (" 7 ", Decimal("7")),
        (0.1, Decimal("0.1")),
        (Decimal("3.14"), Decimal("3.14")),
    ])
    def test_numeric_values(self, value, expected):
        assert to_decimal(value) == expected

    @pytest.mark.parametrize("value", [None, True, "", "abc", [1]])
    def test_non_numeric_values_become_nan(self, value):
        assert to_decimal(value).is_nan()
