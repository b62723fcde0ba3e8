"""
In-process acquiring bank simulator for local development and testing.

Mirrors the behavior of the bank simulator the gateway is developed
against, keyed on the final digit of the card number:

- odd digit (1, 3, 5, 7, 9): authorized, with a random authorization code
- even digit (2, 4, 6, 8): declined
- zero: bank unavailable (the real simulator answers 503)

If the external simulator changes these rules, update SIMULATOR_BEHAVIORS.
"""

import asyncio
import uuid

import structlog

from payment_gateway.clients.base import BankClient
from payment_gateway.models import (
    BankAuthorizationOutcome,
    BankPaymentRequest,
    BankUnavailableError,
)

logger = structlog.get_logger(__name__)

SIMULATOR_BEHAVIORS = {
    "1": "authorized",
    "3": "authorized",
    "5": "authorized",
    "7": "authorized",
    "9": "authorized",
    "2": "declined",
    "4": "declined",
    "6": "declined",
    "8": "declined",
    "0": "unavailable",
}


class SimulatedBankClient(BankClient):
    """
    Bank client that decides outcomes locally without network calls.

    Args:
        latency_ms: Simulated processing latency in milliseconds
    """

    def __init__(self, latency_ms: int = 0) -> None:
        self.latency_ms = latency_ms
        logger.info("bank_simulator_initialized", latency_ms=latency_ms)

    async def authorize(self, bank_request: BankPaymentRequest) -> BankAuthorizationOutcome:
        # Simulate network latency
        if self.latency_ms > 0:
            await asyncio.sleep(self.latency_ms / 1000.0)

        card_last_four = bank_request.card_number[-4:]
        behavior = SIMULATOR_BEHAVIORS.get(bank_request.card_number[-1:])

        if behavior == "unavailable":
            logger.warning("bank_simulator_unavailable", card_last_four=card_last_four)
            raise BankUnavailableError("Bank simulator unavailable (status: 503)")

        if behavior == "authorized":
            authorization_code = str(uuid.uuid4())
            logger.info(
                "bank_simulator_authorized",
                card_last_four=card_last_four,
                amount=bank_request.amount,
                currency=bank_request.currency,
            )
            return BankAuthorizationOutcome(
                authorized=True,
                authorization_code=authorization_code,
            )

        logger.info(
            "bank_simulator_declined",
            card_last_four=card_last_four,
            amount=bank_request.amount,
            currency=bank_request.currency,
        )
        return BankAuthorizationOutcome(authorized=False)
