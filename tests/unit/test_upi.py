"""Unit tests for UPI id validation, transaction ids and intent URLs."""

import re
from decimal import Decimal

import pytest

from budgetapp.core.upi import (
    build_upi_url,
    format_amount,
    generate_transaction_id,
    is_valid_upi_id,
)


class TestUpiIdValidation:
    @pytest.mark.parametrize(
        "upi_id",
        ["merchant@bank", "shop@upi", "john.doe-1@okicici", "9876543210@ybl", "a_b@pay.tm"],
    )
    def test_valid(self, upi_id):
        assert is_valid_upi_id(upi_id) is True

    @pytest.mark.parametrize(
        "upi_id",
        ["not-an-id", "", None, "@bank", "merchant@", "a@b@c", "space here@bank", "shop@up i"],
    )
    def test_invalid(self, upi_id):
        assert is_valid_upi_id(upi_id) is False


class TestTransactionId:
    def test_format(self):
        txn_id = generate_transaction_id()
        assert re.fullmatch(r"TXN\d{13}[a-z0-9]{8}", txn_id)

    def test_unique(self):
        ids = {generate_transaction_id() for _ in range(200)}
        assert len(ids) == 200


class TestFormatAmount:
    @pytest.mark.parametrize(
        "amount,expected",
        [
            ("2000", "2000"),
            ("2000.00", "2000"),
            ("20.50", "20.5"),
            ("0.01", "0.01"),
            ("1500.75", "1500.75"),
        ],
    )
    def test_no_trailing_zeros_or_exponent(self, amount, expected):
        assert format_amount(Decimal(amount)) == expected


class TestBuildUpiUrl:
    def test_parameter_order_and_defaults(self):
        url = build_upi_url("shop@upi", Decimal("2000.00"), "TXN123")
        assert url == (
            "upi://pay?pa=shop%40upi&pn=Merchant&am=2000&cu=INR"
            "&tn=Payment%20via%20UPI%20Budget%20-%20TXN123"
        )

    def test_amount_and_payee_present(self):
        url = build_upi_url("shop@upi", Decimal("2000"), "TXN1", merchant_name="Corner Shop")
        assert "am=2000" in url
        assert "pa=shop%40upi" in url
        assert "pn=Corner%20Shop" in url

    def test_custom_note_and_app_name(self):
        url = build_upi_url("a@b", Decimal("5"), "TXN9", note="Lunch & tea")
        assert url.endswith("&tn=Lunch%20%26%20tea")
        url = build_upi_url("a@b", Decimal("5"), "TXN9", app_name="Spendly")
        assert url.endswith("&tn=Payment%20via%20Spendly%20-%20TXN9")

    def test_uri_component_safe_characters_kept(self):
        url = build_upi_url("a@b", Decimal("1"), "T", merchant_name="Joe's (Cafe)!")
        assert "pn=Joe's%20(Cafe)!" in url
