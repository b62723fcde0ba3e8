"""Read-only lookup of processed payments."""

import structlog

from payment_gateway.infrastructure.store import PaymentStore
from payment_gateway.models import PaymentView

logger = structlog.get_logger(__name__)


async def retrieve_payment(store: PaymentStore, identifier: str) -> PaymentView | None:
    """Return the view of a previously processed payment.

    Never contacts the bank and never writes.

    Args:
        store: Payment record store
        identifier: Idempotency identifier the payment was processed under

    Returns:
        PaymentView, or None if no payment exists for the identifier
    """
    record = await store.get(identifier)

    if record is None:
        logger.info("payment_not_found", payment_id=identifier)
        return None

    return PaymentView.from_record(record)
