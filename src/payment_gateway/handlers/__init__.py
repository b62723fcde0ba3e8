"""Payment processing handlers."""

from payment_gateway.handlers.pipeline import PaymentPipeline, derive_status
from payment_gateway.handlers.retrieval import retrieve_payment

__all__ = ["PaymentPipeline", "derive_status", "retrieve_payment"]
