"""HTTP client for the acquiring bank's /payments endpoint."""

import uuid

import httpx
import structlog
from pydantic import BaseModel, StrictBool, ValidationError

from payment_gateway.clients.base import BankClient
from payment_gateway.models import (
    BankAuthorizationOutcome,
    BankPaymentRequest,
    BankResponseError,
    BankUnavailableError,
)

logger = structlog.get_logger(__name__)


class BankApiResponse(BaseModel):
    """Response body returned by the bank (snake_case JSON)."""

    authorized: StrictBool
    authorization_code: str | None = None


class HttpBankClient(BankClient):
    """
    Client for calling the acquiring bank over HTTP.

    Sends the payment as JSON to POST {base_url}/payments and maps the
    response to a BankAuthorizationOutcome. Transport failures and contract
    violations are raised as distinct exceptions so they are never confused
    with a decline.
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the bank client.

        Args:
            base_url: Base URL of the bank (e.g., "http://localhost:8080")
            timeout_seconds: Request timeout in seconds (default: 10.0)
            http_client: Optional preconfigured httpx client
        """
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.http_client = http_client or httpx.AsyncClient(timeout=timeout_seconds)

        logger.info(
            "bank_client_initialized",
            base_url=self.base_url,
            timeout_seconds=timeout_seconds,
        )

    async def close(self) -> None:
        """Close the HTTP client connection pool."""
        await self.http_client.aclose()

    async def authorize(self, bank_request: BankPaymentRequest) -> BankAuthorizationOutcome:
        """
        Submit a payment to the bank for authorization.

        Args:
            bank_request: Payment details to forward

        Returns:
            BankAuthorizationOutcome with the bank's verdict

        Raises:
            BankUnavailableError: Connection error, timeout, or 5xx (RETRYABLE)
            BankResponseError: Empty/malformed body or unexpected 4xx
        """
        correlation_id = str(uuid.uuid4())
        url = f"{self.base_url}/payments"

        logger.info(
            "bank_authorization_request",
            amount=bank_request.amount,
            currency=bank_request.currency,
            correlation_id=correlation_id,
            url=url,
        )

        try:
            response = await self.http_client.post(
                url,
                headers={"X-Request-ID": correlation_id},
                json=bank_request.to_wire(),
            )
        except httpx.TimeoutException as e:
            logger.error(
                "bank_timeout",
                correlation_id=correlation_id,
                error=str(e),
            )
            raise BankUnavailableError("Bank request timed out") from e
        except httpx.RequestError as e:
            # Network errors, connection errors, etc.
            logger.error(
                "bank_request_error",
                correlation_id=correlation_id,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise BankUnavailableError(f"Bank unreachable: {type(e).__name__}") from e

        if response.status_code >= 500:
            logger.error(
                "bank_service_error",
                status_code=response.status_code,
                correlation_id=correlation_id,
            )
            raise BankUnavailableError(
                f"Bank unavailable (status: {response.status_code})"
            )

        # A 4xx means the bank was reached and rejected our request: a contract
        # violation (502), not an outage (503)
        if not response.is_success:
            logger.error(
                "bank_rejected_request",
                status_code=response.status_code,
                correlation_id=correlation_id,
            )
            raise BankResponseError(
                f"Bank rejected request (status: {response.status_code})"
            )

        body = self._parse_body(response, correlation_id)

        logger.info(
            "bank_authorization_response",
            authorized=body.authorized,
            correlation_id=correlation_id,
        )

        return BankAuthorizationOutcome(
            authorized=body.authorized,
            authorization_code=body.authorization_code if body.authorized else None,
        )

    def _parse_body(self, response: httpx.Response, correlation_id: str) -> BankApiResponse:
        """Decode and validate the bank's JSON body."""
        if not response.content.strip():
            logger.error("bank_empty_response", correlation_id=correlation_id)
            raise BankResponseError("Bank returned empty response")

        try:
            return BankApiResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(
                "bank_malformed_response",
                correlation_id=correlation_id,
                error_type=type(e).__name__,
            )
            raise BankResponseError("Bank returned malformed response") from e

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
