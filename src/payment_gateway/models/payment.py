"""Payment domain models."""

from dataclasses import dataclass, field
from enum import Enum


class PaymentStatus(str, Enum):
    """Final authorization status of a payment."""

    AUTHORIZED = "Authorized"
    DECLINED = "Declined"


@dataclass(frozen=True)
class PaymentRequest:
    """
    A pre-validated request to authorize a card payment.

    Carries the full card number and CVV for the duration of a single
    processing call. Both are excluded from repr so the request can be
    passed to loggers or tracebacks without leaking card data.
    """

    identifier: str
    card_number: str = field(repr=False)
    expiry_month: int
    expiry_year: int
    currency: str
    amount: int
    cvv: str = field(repr=False)


@dataclass(frozen=True)
class BankPaymentRequest:
    """Payment details in the shape the acquiring bank expects."""

    card_number: str = field(repr=False)
    expiry_date: str
    currency: str
    amount: int
    cvv: str = field(repr=False)

    @classmethod
    def from_payment_request(cls, request: PaymentRequest) -> "BankPaymentRequest":
        """Build a bank request, formatting expiry as MM/YYYY."""
        return cls(
            card_number=request.card_number,
            expiry_date=f"{request.expiry_month:02d}/{request.expiry_year}",
            currency=request.currency,
            amount=request.amount,
            cvv=request.cvv,
        )

    def to_wire(self) -> dict[str, str | int]:
        """Serialize to the bank's JSON body."""
        return {
            "card_number": self.card_number,
            "expiry_date": self.expiry_date,
            "currency": self.currency,
            "amount": self.amount,
            "cvv": self.cvv,
        }


@dataclass(frozen=True)
class BankAuthorizationOutcome:
    """
    Result of a single call to the acquiring bank.

    A decline is a normal outcome (authorized=False). Clients that cannot
    reach the bank either raise BankUnavailableError or report it here with
    bank_unavailable=True; the pipeline treats both the same way.
    """

    authorized: bool
    authorization_code: str | None = None
    bank_unavailable: bool = False

    def __post_init__(self) -> None:
        if self.authorized and self.bank_unavailable:
            raise ValueError("An unavailable bank cannot authorize a payment")


@dataclass(frozen=True)
class PaymentRecord:
    """Persisted, immutable outcome of a processed payment."""

    identifier: str
    card_number_last_four: int
    expiry_month: int
    expiry_year: int
    currency: str
    amount: int
    status: PaymentStatus


@dataclass(frozen=True)
class PaymentView:
    """Caller-facing projection of a PaymentRecord."""

    identifier: str
    status: PaymentStatus
    card_number_last_four: int
    expiry_month: int
    expiry_year: int
    currency: str
    amount: int

    @classmethod
    def from_record(cls, record: PaymentRecord) -> "PaymentView":
        return cls(
            identifier=record.identifier,
            status=record.status,
            card_number_last_four=record.card_number_last_four,
            expiry_month=record.expiry_month,
            expiry_year=record.expiry_year,
            currency=record.currency,
            amount=record.amount,
        )
