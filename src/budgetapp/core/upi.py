"""UPI helpers: handle validation, transaction ids and intent URLs."""

import re
import secrets
import string
import time
from decimal import Decimal
from urllib.parse import quote

UPI_ID_PATTERN = re.compile(r"^[\w.-]+@[\w.-]+$", re.ASCII)

UPI_CURRENCY = "INR"
DEFAULT_PAYEE_NAME = "Merchant"

# Characters encodeURIComponent leaves untouched (besides alphanumerics).
_URI_COMPONENT_SAFE = "-_.!~*'()"

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
_SUFFIX_LENGTH = 8


def is_valid_upi_id(upi_id: str | None) -> bool:
    """Check that a UPI handle looks like ``local@handle``."""
    if not upi_id:
        return False
    return UPI_ID_PATTERN.fullmatch(upi_id) is not None


def generate_transaction_id() -> str:
    """Return ``TXN`` + epoch milliseconds + random suffix."""
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(_SUFFIX_LENGTH))
    return f"TXN{int(time.time() * 1000)}{suffix}"


def format_amount(amount: Decimal) -> str:
    """Render an amount without exponent or trailing zeros (2000, 20.5)."""
    return format(amount.normalize(), "f")


def encode_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def build_upi_url(
    merchant_upi: str,
    amount: Decimal,
    transaction_id: str,
    merchant_name: str | None = None,
    note: str | None = None,
    app_name: str = "UPI Budget",
) -> str:
    """Build the ``upi://pay`` intent URL handed to the payment app.

    Parameter order and names are fixed: pa, pn, am, cu, tn.
    """
    payee_name = merchant_name or DEFAULT_PAYEE_NAME
    transaction_note = note or f"Payment via {app_name} - {transaction_id}"
    return (
        f"upi://pay?pa={encode_component(merchant_upi)}"
        f"&pn={encode_component(payee_name)}"
        f"&am={format_amount(amount)}"
        f"&cu={UPI_CURRENCY}"
        f"&tn={encode_component(transaction_note)}"
    )
