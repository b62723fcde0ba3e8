"""
Integration tests for the payments HTTP API.

Drives the FastAPI application end to end with an in-memory store and a
fake (or simulated) bank, covering:
- Process and retrieve
- Idempotent replay via the Idempotency-Key header
- Validation problem documents
- Bank failure status codes
"""

from datetime import date
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from payment_gateway.api.main import create_app
from payment_gateway.clients.simulator import SimulatedBankClient
from payment_gateway.config import settings
from payment_gateway.infrastructure.locking import KeyedLock
from payment_gateway.infrastructure.store import InMemoryPaymentStore
from payment_gateway.models import (
    BankAuthorizationOutcome,
    BankResponseError,
    BankUnavailableError,
)

pytestmark = pytest.mark.integration


@pytest.fixture
def make_client(make_bank_client):
    """Build a TestClient around an app wired to the given bank client."""
    clients = []

    def _make(bank_client=None) -> TestClient:
        client = TestClient(create_app(bank_client=bank_client or make_bank_client()))
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client):
    return make_client()


class TestProcessPayment:
    """Tests for POST /api/payments."""

    def test_authorized_payment(self, client, valid_payment_json):
        response = client.post(
            "/api/payments",
            json=valid_payment_json,
            headers={"Idempotency-Key": "order-1001"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data == {
            "id": "order-1001",
            "status": "Authorized",
            "card_number_last_four": 9012,
            "expiry_month": 12,
            "expiry_year": valid_payment_json["expiry_year"],
            "currency": "USD",
            "amount": 10000,
        }

    def test_declined_payment_is_200(self, make_client, make_bank_client, valid_payment_json):
        client = make_client(
            make_bank_client(outcome=BankAuthorizationOutcome(authorized=False))
        )

        response = client.post("/api/payments", json=valid_payment_json)

        assert response.status_code == 200
        assert response.json()["status"] == "Declined"

    def test_generated_identifier_when_no_key(self, client, valid_payment_json):
        first = client.post("/api/payments", json=valid_payment_json)
        second = client.post("/api/payments", json=valid_payment_json)

        assert first.status_code == 200
        assert second.status_code == 200
        assert first.json()["id"]
        assert first.json()["id"] != second.json()["id"]

    def test_replay_with_same_key(self, make_client, make_bank_client, valid_payment_json):
        bank_client = make_bank_client()
        client = make_client(bank_client)
        headers = {"Idempotency-Key": "order-1002"}

        first = client.post("/api/payments", json=valid_payment_json, headers=headers)
        second = client.post(
            "/api/payments",
            json={**valid_payment_json, "amount": 1},
            headers=headers,
        )

        assert first.status_code == 200
        assert second.status_code == 200
        assert second.json() == first.json()
        assert second.json()["amount"] == 10000
        assert len(bank_client.calls) == 1

    def test_current_month_expiry_accepted(self, client, valid_payment_json):
        today = date.today()
        body = {**valid_payment_json, "expiry_month": today.month, "expiry_year": today.year}

        response = client.post("/api/payments", json=body)

        assert response.status_code == 200

    def test_response_never_contains_card_data(self, client, valid_payment_json):
        body = {**valid_payment_json, "cvv": "987"}

        response = client.post("/api/payments", json=body)

        assert "4532123456789012" not in response.text
        assert "987" not in response.text
        assert "cvv" not in response.json()


class TestValidation:
    """Tests for request validation responses."""

    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"card_number": "1234567890123"}, "card_number"),
            ({"card_number": "12345678901234567890"}, "card_number"),
            ({"card_number": "4532-1234-5678-9012"}, "card_number"),
            ({"expiry_month": 13}, "expiry_month"),
            ({"expiry_month": 0}, "expiry_month"),
            ({"expiry_month": 1, "expiry_year": 2020}, "expiry_year"),
            ({"currency": "JPY"}, "currency"),
            ({"currency": "US"}, "currency"),
            ({"amount": 0}, "amount"),
            ({"amount": -5}, "amount"),
            ({"amount": "100"}, "amount"),
            ({"cvv": "12"}, "cvv"),
            ({"cvv": "12345"}, "cvv"),
        ],
    )
    def test_invalid_field_returns_400(
        self, make_client, make_bank_client, valid_payment_json, overrides, field
    ):
        bank_client = make_bank_client()
        client = make_client(bank_client)

        response = client.post("/api/payments", json={**valid_payment_json, **overrides})

        assert response.status_code == 400
        assert response.headers["content-type"].startswith("application/problem+json")
        problem = response.json()
        assert problem["status"] == 400
        assert problem["title"] == "Validation Error"
        assert field in problem["errors"]
        assert bank_client.calls == []

    def test_missing_field_returns_400(self, client, valid_payment_json):
        body = dict(valid_payment_json)
        del body["cvv"]

        response = client.post("/api/payments", json=body)

        assert response.status_code == 400
        assert "cvv" in response.json()["errors"]

    def test_error_messages(self, client, valid_payment_json):
        body = {
            **valid_payment_json,
            "card_number": "123",
            "expiry_month": 13,
            "currency": "JPY",
            "cvv": "1",
        }

        response = client.post("/api/payments", json=body)

        errors = response.json()["errors"]
        assert errors["card_number"] == ["Card number must be between 14 and 19 digits"]
        assert errors["expiry_month"] == ["Expiry month must be between 1 and 12"]
        assert errors["currency"] == ["Currency must be one of EUR, GBP, USD"]
        assert errors["cvv"] == ["CVV must be 3 or 4 digits"]

    def test_validation_problem_never_echoes_card_number(self, client, valid_payment_json):
        body = {**valid_payment_json, "card_number": "45321234567890123456"}

        response = client.post("/api/payments", json=body)

        assert response.status_code == 400
        assert "45321234567890123456" not in response.text


class TestBankFailures:
    """Tests for bank failure status codes."""

    def test_unavailable_returns_503_and_stores_nothing(
        self, make_client, make_bank_client, valid_payment_json
    ):
        client = make_client(make_bank_client(error=BankUnavailableError("down")))

        response = client.post(
            "/api/payments",
            json=valid_payment_json,
            headers={"Idempotency-Key": "order-2001"},
        )

        assert response.status_code == 503
        assert response.json()["title"] == "Bank Unavailable"
        assert client.get("/api/payments/order-2001").status_code == 404

    def test_malformed_response_returns_502(
        self, make_client, make_bank_client, valid_payment_json
    ):
        client = make_client(
            make_bank_client(error=BankResponseError("Bank returned empty response"))
        )

        response = client.post(
            "/api/payments",
            json=valid_payment_json,
            headers={"Idempotency-Key": "order-2002"},
        )

        assert response.status_code == 502
        assert client.get("/api/payments/order-2002").status_code == 404

    def test_retry_after_unavailable(self, make_client, make_bank_client, valid_payment_json):
        bank_client = make_bank_client(error=BankUnavailableError("down"))
        client = make_client(bank_client)
        headers = {"Idempotency-Key": "order-2003"}

        assert client.post("/api/payments", json=valid_payment_json, headers=headers).status_code == 503

        bank_client.error = None
        response = client.post("/api/payments", json=valid_payment_json, headers=headers)

        assert response.status_code == 200
        assert response.json()["status"] == "Authorized"


class TestGetPayment:
    """Tests for GET /api/payments/{payment_id}."""

    def test_get_after_process(self, client, valid_payment_json):
        created = client.post(
            "/api/payments",
            json=valid_payment_json,
            headers={"Idempotency-Key": "order-3001"},
        ).json()

        response = client.get("/api/payments/order-3001")

        assert response.status_code == 200
        assert response.json() == created

    def test_unknown_returns_404(self, client):
        response = client.get("/api/payments/does-not-exist")

        assert response.status_code == 404

    def test_blank_id_returns_400(self, client):
        response = client.get("/api/payments/%20")

        assert response.status_code == 400


class TestSimulatorEndToEnd:
    """Tests running the API against the in-process bank simulator."""

    def test_odd_card_authorizes(self, make_client, valid_payment_json):
        client = make_client(SimulatedBankClient())
        body = {**valid_payment_json, "card_number": "2222405343248877"}

        response = client.post("/api/payments", json=body)

        assert response.status_code == 200
        assert response.json()["status"] == "Authorized"
        assert response.json()["card_number_last_four"] == 8877

    def test_even_card_declines(self, make_client, valid_payment_json):
        client = make_client(SimulatedBankClient())
        body = {**valid_payment_json, "card_number": "2222405343248112"}

        response = client.post("/api/payments", json=body)

        assert response.status_code == 200
        assert response.json()["status"] == "Declined"

    def test_zero_card_is_unavailable(self, make_client, valid_payment_json):
        client = make_client(SimulatedBankClient())
        body = {**valid_payment_json, "card_number": "2222405343248870"}

        response = client.post("/api/payments", json=body)

        assert response.status_code == 503


class TestServiceEndpoints:
    """Tests for health, root and correlation headers."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "payment-gateway"

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["service"] == "Payment Gateway"

    def test_request_id_is_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"

    def test_request_id_is_generated(self, client):
        response = client.get("/health")

        assert response.headers["X-Request-ID"]

    def test_bank_client_closed_on_shutdown(self, make_bank_client):
        bank_client = make_bank_client()

        with TestClient(create_app(bank_client=bank_client)):
            assert bank_client.closed is False

        assert bank_client.closed is True

    def test_default_bank_client_created_at_startup(self):
        with patch.object(settings.bank, "client", "simulator"):
            app = create_app()
            assert app.state.bank_client is None

            with TestClient(app):
                assert isinstance(app.state.bank_client, SimulatedBankClient)
                assert app.state.pipeline.bank_client is app.state.bank_client

    def test_injected_store_and_locks_are_used(self, make_bank_client):
        store = InMemoryPaymentStore()
        locks = KeyedLock()
        app = create_app(store=store, bank_client=make_bank_client(), locks=locks)

        with TestClient(app):
            assert app.state.pipeline.store is store
            assert app.state.pipeline.locks is locks
