"""Payment gateway domain layer.

Pure rules with no I/O: card data minimization and request validation.
"""

from payment_gateway.domain.card import extract_last_four
from payment_gateway.domain.validation import (
    SUPPORTED_CURRENCIES,
    is_expiry_in_future,
    is_supported_currency,
    is_valid_card_number,
    is_valid_cvv,
    is_valid_expiry_month,
)

__all__ = [
    "SUPPORTED_CURRENCIES",
    "extract_last_four",
    "is_expiry_in_future",
    "is_supported_currency",
    "is_valid_card_number",
    "is_valid_cvv",
    "is_valid_expiry_month",
]
