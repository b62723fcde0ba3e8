"""FastAPI dependencies for the payments API.

Components are built once per application (see main.create_app) and kept on
app.state; these dependencies hand them to route handlers.
"""

import uuid
from typing import Annotated

import structlog
from fastapi import Depends, Header, HTTPException, Request, status

from payment_gateway.handlers.pipeline import PaymentPipeline
from payment_gateway.infrastructure.store import PaymentStore

logger = structlog.get_logger(__name__)


def get_pipeline(request: Request) -> PaymentPipeline:
    """Provide the application's payment pipeline."""
    return request.app.state.pipeline


# Type alias for pipeline dependency
Pipeline = Annotated[PaymentPipeline, Depends(get_pipeline)]


def get_store(request: Request) -> PaymentStore:
    """Provide the application's payment store."""
    return request.app.state.store


# Type alias for store dependency
Store = Annotated[PaymentStore, Depends(get_store)]


async def get_idempotency_key(
    idempotency_key: Annotated[str | None, Header(alias="Idempotency-Key")] = None,
) -> str:
    """Resolve the payment identifier for a request.

    Uses the caller's Idempotency-Key header when present so retries map to
    the same payment; otherwise a fresh identifier is generated.

    Raises:
        HTTPException: 400 if the header is present but blank
    """
    if idempotency_key is None:
        generated = str(uuid.uuid4())
        logger.debug("idempotency_key_generated", payment_id=generated)
        return generated

    if not idempotency_key.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Idempotency-Key header cannot be blank",
        )

    return idempotency_key.strip()


# Type alias for idempotency key dependency
IdempotencyKey = Annotated[str, Depends(get_idempotency_key)]
