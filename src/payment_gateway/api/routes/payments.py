"""Payment endpoints.

- POST /api/payments: Authorize a card payment (idempotent per Idempotency-Key)
- GET /api/payments/{payment_id}: Retrieve a processed payment
"""

import structlog
from fastapi import APIRouter, HTTPException, status

from payment_gateway.api.dependencies import IdempotencyKey, Pipeline, Store
from payment_gateway.api.models import PaymentResponseJSON, ProcessPaymentRequestJSON
from payment_gateway.handlers.retrieval import retrieve_payment

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.post("", response_model=PaymentResponseJSON)
async def process_payment(
    body: ProcessPaymentRequestJSON,
    payment_id: IdempotencyKey,
    pipeline: Pipeline,
) -> PaymentResponseJSON:
    """Authorize a card payment with the acquiring bank.

    Responses:
        200 OK: Payment processed (Authorized or Declined), or replayed
        400 Bad Request: Validation failed
        409 Conflict: Same Idempotency-Key still in flight
        502 Bad Gateway: Bank returned a malformed response
        503 Service Unavailable: Bank unreachable
    """
    logger.info(
        "process_payment_request_received",
        payment_id=payment_id,
        amount=body.amount,
        currency=body.currency,
    )

    view = await pipeline.process(body.to_domain(payment_id))
    return PaymentResponseJSON.from_view(view)


@router.get("/{payment_id}", response_model=PaymentResponseJSON)
async def get_payment(payment_id: str, store: Store) -> PaymentResponseJSON:
    """Retrieve a previously processed payment.

    Responses:
        200 OK: Payment found
        400 Bad Request: Blank payment ID
        404 Not Found: No payment with this ID
    """
    if not payment_id.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Payment ID cannot be empty",
        )

    view = await retrieve_payment(store, payment_id)
    if view is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment not found")

    return PaymentResponseJSON.from_view(view)
