"""Card data minimization.

The last four digits are the only fragment of a card number that may be
stored or returned. The full number stays inside the processing call.
"""

from payment_gateway.models.exceptions import CardDataInvariantError

LAST_FOUR_LENGTH = 4


def extract_last_four(card_number: str) -> int:
    """Return the final four digits of a card number as an integer.

    Stored as an integer so the value has a fixed numeric representation
    ("0042" becomes 42).

    Args:
        card_number: Validated numeric card number (14-19 digits)

    Returns:
        Last four digits as an int

    Raises:
        CardDataInvariantError: If the input is shorter than four characters
            or the tail is not numeric. The error message never includes
            the card number.
    """
    if len(card_number) < LAST_FOUR_LENGTH:
        raise CardDataInvariantError(
            f"Card number must have at least {LAST_FOUR_LENGTH} digits "
            f"(got {len(card_number)})"
        )

    tail = card_number[-LAST_FOUR_LENGTH:]
    if not tail.isdigit():
        raise CardDataInvariantError("Card number must be numeric")

    return int(tail)
