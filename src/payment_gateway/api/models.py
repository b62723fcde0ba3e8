"""Pydantic models for JSON API requests/responses.

The request model is the validation gate: anything that reaches the
processing pipeline has already passed these checks.
"""

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationInfo, field_validator

from payment_gateway.domain.validation import (
    SUPPORTED_CURRENCIES,
    is_expiry_in_future,
    is_supported_currency,
    is_valid_card_number,
    is_valid_cvv,
    is_valid_expiry_month,
)
from payment_gateway.models import PaymentRequest, PaymentStatus, PaymentView


class ProcessPaymentRequestJSON(BaseModel):
    """JSON request model for processing a card payment."""

    card_number: str = Field(..., description="Card number (14-19 digits)", repr=False)
    expiry_month: StrictInt = Field(..., description="Expiry month (1-12)")
    expiry_year: StrictInt = Field(..., description="Expiry year (YYYY)")
    currency: str = Field(..., description="ISO 4217 currency code (USD, GBP, EUR)")
    amount: StrictInt = Field(..., description="Amount in minor currency units", gt=0)
    cvv: str = Field(..., description="Card verification value (3-4 digits)", repr=False)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "card_number": "4532123456789012",
                "expiry_month": 12,
                "expiry_year": 2030,
                "currency": "USD",
                "amount": 10000,
                "cvv": "123",
            }
        }
    )

    @field_validator("card_number")
    @classmethod
    def validate_card_number(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Card number is required")
        if not is_valid_card_number(value):
            raise ValueError("Card number must be between 14 and 19 digits")
        return value

    @field_validator("expiry_month")
    @classmethod
    def validate_expiry_month(cls, value: int) -> int:
        if not is_valid_expiry_month(value):
            raise ValueError("Expiry month must be between 1 and 12")
        return value

    @field_validator("expiry_year")
    @classmethod
    def validate_expiry_year(cls, value: int, info: ValidationInfo) -> int:
        month = info.data.get("expiry_month")
        # A bad month is already reported on its own field
        if month is not None and not is_expiry_in_future(month, value):
            raise ValueError("Card has expired or expiry date is invalid")
        return value

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, value: str) -> str:
        if len(value) != 3:
            raise ValueError("Currency must be 3 characters")
        if not is_supported_currency(value):
            supported = ", ".join(sorted(SUPPORTED_CURRENCIES))
            raise ValueError(f"Currency must be one of {supported}")
        return value

    @field_validator("cvv")
    @classmethod
    def validate_cvv(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("CVV is required")
        if not is_valid_cvv(value):
            raise ValueError("CVV must be 3 or 4 digits")
        return value

    def to_domain(self, identifier: str) -> PaymentRequest:
        return PaymentRequest(
            identifier=identifier,
            card_number=self.card_number,
            expiry_month=self.expiry_month,
            expiry_year=self.expiry_year,
            currency=self.currency,
            amount=self.amount,
            cvv=self.cvv,
        )


class PaymentResponseJSON(BaseModel):
    """JSON response model for a processed payment."""

    id: str = Field(..., description="Payment identifier (idempotency key)")
    status: PaymentStatus = Field(..., description="Authorization status")
    card_number_last_four: int = Field(..., description="Last four digits of the card")
    expiry_month: int = Field(..., description="Expiry month")
    expiry_year: int = Field(..., description="Expiry year")
    currency: str = Field(..., description="Currency code")
    amount: int = Field(..., description="Amount in minor currency units")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "3f6c1f0e-8a53-4f38-9b0f-8f3a3d1e9a41",
                "status": "Authorized",
                "card_number_last_four": 9012,
                "expiry_month": 12,
                "expiry_year": 2030,
                "currency": "USD",
                "amount": 10000,
            }
        }
    )

    @classmethod
    def from_view(cls, view: PaymentView) -> "PaymentResponseJSON":
        return cls(
            id=view.identifier,
            status=view.status,
            card_number_last_four=view.card_number_last_four,
            expiry_month=view.expiry_month,
            expiry_year=view.expiry_year,
            currency=view.currency,
            amount=view.amount,
        )


class ProblemDetailsJSON(BaseModel):
    """RFC 7807 problem document returned for errors."""

    status: int
    title: str
    detail: str
    errors: dict[str, list[str]] | None = None
