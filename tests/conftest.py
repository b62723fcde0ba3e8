"""Pytest configuration and shared fixtures for all tests.

This module provides shared test fixtures including:
- Valid payment request builders
- An in-memory payment store
- A scriptable fake bank client
"""

import asyncio
import sys
from datetime import date
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from payment_gateway.clients.base import BankClient
from payment_gateway.infrastructure.store import InMemoryPaymentStore
from payment_gateway.models import (
    BankAuthorizationOutcome,
    BankPaymentRequest,
    PaymentRequest,
)

VALID_CARD_NUMBER = "4532123456789012"
VALID_CVV = "123"


class FakeBankClient(BankClient):
    """
    Bank client double that records calls and returns a scripted result.

    Args:
        outcome: Outcome to return (defaults to authorized)
        error: Exception to raise instead of returning an outcome
        release: Optional event the call waits on before answering, used to
            hold a bank call in flight
    """

    def __init__(
        self,
        outcome: BankAuthorizationOutcome | None = None,
        error: Exception | None = None,
        release: asyncio.Event | None = None,
    ) -> None:
        self.outcome = outcome or BankAuthorizationOutcome(
            authorized=True,
            authorization_code="0bb07405-6d44-4b50-a14f-7ae0beff13ad",
        )
        self.error = error
        self.release = release
        self.calls: list[BankPaymentRequest] = []
        self.closed = False

    async def authorize(self, bank_request: BankPaymentRequest) -> BankAuthorizationOutcome:
        self.calls.append(bank_request)
        if self.release is not None:
            await self.release.wait()
        if self.error is not None:
            raise self.error
        return self.outcome

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def next_year():
    """Expiry year that is always in the future."""
    return date.today().year + 1


@pytest.fixture
def make_payment_request(next_year):
    """Build a valid PaymentRequest, overriding any field by keyword."""

    def _make(**overrides) -> PaymentRequest:
        fields = {
            "identifier": "pay_test_0001",
            "card_number": VALID_CARD_NUMBER,
            "expiry_month": 12,
            "expiry_year": next_year,
            "currency": "USD",
            "amount": 10000,
            "cvv": VALID_CVV,
        }
        fields.update(overrides)
        return PaymentRequest(**fields)

    return _make


@pytest.fixture
def payment_request(make_payment_request):
    """Standard valid payment request."""
    return make_payment_request()


@pytest.fixture
def store():
    """Empty in-memory payment store."""
    return InMemoryPaymentStore()


@pytest.fixture
def make_bank_client():
    """Build a FakeBankClient with a scripted outcome or error."""
    return FakeBankClient


@pytest.fixture
def bank_client():
    """Fake bank that authorizes everything."""
    return FakeBankClient()


@pytest.fixture
def valid_payment_json(next_year):
    """Valid JSON body for POST /api/payments."""
    return {
        "card_number": VALID_CARD_NUMBER,
        "expiry_month": 12,
        "expiry_year": next_year,
        "currency": "USD",
        "amount": 10000,
        "cvv": VALID_CVV,
    }
