"""Domain models for the Payment Gateway service."""

from payment_gateway.models.exceptions import (
    BankError,
    BankResponseError,
    BankUnavailableError,
    CardDataInvariantError,
    PaymentGatewayError,
    PaymentInProgressError,
)
from payment_gateway.models.payment import (
    BankAuthorizationOutcome,
    BankPaymentRequest,
    PaymentRecord,
    PaymentRequest,
    PaymentStatus,
    PaymentView,
)

__all__ = [
    "BankAuthorizationOutcome",
    "BankError",
    "BankPaymentRequest",
    "BankResponseError",
    "BankUnavailableError",
    "CardDataInvariantError",
    "PaymentGatewayError",
    "PaymentInProgressError",
    "PaymentRecord",
    "PaymentRequest",
    "PaymentStatus",
    "PaymentView",
]
