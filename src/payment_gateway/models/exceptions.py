"""Custom exceptions for the Payment Gateway service."""


class PaymentGatewayError(Exception):
    """Base exception for payment processing errors."""

    pass


class BankError(PaymentGatewayError):
    """Base exception for failures talking to the acquiring bank."""

    pass


class BankUnavailableError(BankError):
    """
    Raised when the acquiring bank cannot be reached.

    This is an infrastructure failure, not a decline. Nothing is persisted,
    so the caller may safely resubmit the same request later.

    Examples:
    - Connection refused / DNS failure
    - Network timeout
    - Bank returns 5xx
    """

    pass


class BankResponseError(BankError):
    """
    Raised when the bank was reached but violated its response contract.

    Examples:
    - Empty or non-JSON body
    - Missing or non-boolean "authorized" field
    - Unexpected 4xx status
    """

    pass


class PaymentInProgressError(PaymentGatewayError):
    """
    Raised when another call for the same identifier is still in flight
    and did not finish within the configured wait.
    """

    pass


class CardDataInvariantError(PaymentGatewayError):
    """
    Raised when card data reaching the core violates the validation contract.

    Unreachable behind the request validation gate.
    """

    pass
