"""Base interface for acquiring bank clients."""

from abc import ABC, abstractmethod

from payment_gateway.models import BankAuthorizationOutcome, BankPaymentRequest


class BankClient(ABC):
    """
    Abstract base class for acquiring bank integrations.

    All bank clients (HTTP, simulator, etc.) must implement this interface
    so the processing pipeline is independent of the transport.
    """

    @abstractmethod
    async def authorize(self, bank_request: BankPaymentRequest) -> BankAuthorizationOutcome:
        """
        Ask the bank to authorize a payment.

        Args:
            bank_request: Card details, MM/YYYY expiry, currency and amount
                in minor units

        Returns:
            BankAuthorizationOutcome with authorized=True or False.

        Raises:
            BankUnavailableError: Bank could not be reached (connection error,
                timeout, 5xx).
            BankResponseError: Bank answered but the response broke the
                contract (empty or malformed body).

        Note:
            Declines are NOT exceptions - they return an outcome with
            authorized=False.
        """
        pass

    async def close(self) -> None:
        """Release any resources held by the client."""
        return None
