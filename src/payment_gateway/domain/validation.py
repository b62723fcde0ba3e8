"""Validation rules for inbound payment requests.

These rules run at the API boundary before a request reaches the
processing pipeline, which trusts them once passed.
"""

from datetime import date

SUPPORTED_CURRENCIES = frozenset({"USD", "GBP", "EUR"})

CARD_NUMBER_MIN_LENGTH = 14
CARD_NUMBER_MAX_LENGTH = 19
CVV_MIN_LENGTH = 3
CVV_MAX_LENGTH = 4


def is_valid_card_number(card_number: str) -> bool:
    """Card numbers are 14-19 ASCII digits."""
    return (
        CARD_NUMBER_MIN_LENGTH <= len(card_number) <= CARD_NUMBER_MAX_LENGTH
        and card_number.isascii()
        and card_number.isdigit()
    )


def is_valid_cvv(cvv: str) -> bool:
    """CVVs are 3-4 ASCII digits."""
    return CVV_MIN_LENGTH <= len(cvv) <= CVV_MAX_LENGTH and cvv.isascii() and cvv.isdigit()


def is_valid_expiry_month(month: int) -> bool:
    return 1 <= month <= 12


def is_expiry_in_future(month: int, year: int, today: date | None = None) -> bool:
    """Check that a card has not expired.

    A card is valid through the last day of its expiry month, so the
    current month counts as not expired.

    Args:
        month: Expiry month (1-12)
        year: Four-digit expiry year
        today: Reference date (defaults to today)

    Returns:
        True if the card is still valid
    """
    if not is_valid_expiry_month(month):
        return False

    today = today or date.today()
    return (year, month) >= (today.year, today.month)


def is_supported_currency(currency: str) -> bool:
    return currency in SUPPORTED_CURRENCIES
