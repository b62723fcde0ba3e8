"""FastAPI application entry point for the Payment Gateway."""

import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import FastAPI, Request, Response

from payment_gateway.api.errors import register_exception_handlers
from payment_gateway.api.routes.payments import router as payments_router
from payment_gateway.clients.base import BankClient
from payment_gateway.clients.factory import get_bank_client
from payment_gateway.config import settings
from payment_gateway.handlers.pipeline import PaymentPipeline
from payment_gateway.infrastructure.locking import KeyedLock
from payment_gateway.infrastructure.store import InMemoryPaymentStore, PaymentStore
from payment_gateway.logging_config import configure_logging

# Configure logging at module level
configure_logging(
    log_level="DEBUG" if settings.debug else settings.log_level,
    format_as_json=settings.environment != "development",
)

logger = structlog.get_logger(__name__)

CORRELATION_HEADER = "X-Request-ID"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager.

    Creates the configured bank client (unless one was injected), builds the
    payment pipeline, and closes the bank client on shutdown.
    """
    if app.state.bank_client is None:
        app.state.bank_client = get_bank_client()

    app.state.pipeline = PaymentPipeline(
        store=app.state.store,
        bank_client=app.state.bank_client,
        locks=app.state.locks,
        lock_wait_timeout_seconds=settings.lock_wait_timeout_seconds,
    )

    logger.info(
        "starting_payment_gateway",
        environment=settings.environment,
        bank_client=type(app.state.bank_client).__name__,
    )

    yield

    logger.info("shutting_down_payment_gateway")
    await app.state.bank_client.close()
    logger.info("payment_gateway_shutdown_complete")


def create_app(
    store: PaymentStore | None = None,
    bank_client: BankClient | None = None,
    locks: KeyedLock | None = None,
) -> FastAPI:
    """Build the FastAPI application and its processing components.

    Args:
        store: Payment store (defaults to a fresh in-memory store)
        bank_client: Bank client (defaults to the configured client, created
            at startup)
        locks: Per-identifier locks (defaults to a fresh set)

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Payment Gateway",
        description="Card payment authorization gateway",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # The pipeline is built in lifespan, once the bank client exists
    app.state.store = store if store is not None else InMemoryPaymentStore()
    app.state.bank_client = bank_client
    app.state.locks = locks if locks is not None else KeyedLock()

    @app.middleware("http")
    async def bind_correlation_id(request: Request, call_next) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("correlation_id")
        response.headers[CORRELATION_HEADER] = correlation_id
        return response

    register_exception_handlers(app)
    app.include_router(payments_router)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": settings.service_name,
            "environment": settings.environment,
        }

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {
            "service": "Payment Gateway",
            "version": "0.1.0",
            "status": "running",
        }

    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    uvicorn.run(
        "payment_gateway.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    run()
