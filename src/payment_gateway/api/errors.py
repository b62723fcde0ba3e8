"""Exception handlers mapping payment errors to HTTP problem documents.

- Validation failure → 400
- Payment already in flight → 409
- Bank returned an unexpected/empty response → 502
- Bank unreachable → 503
- Any other gateway error → 500
"""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from payment_gateway.api.models import ProblemDetailsJSON
from payment_gateway.models import (
    BankResponseError,
    BankUnavailableError,
    PaymentGatewayError,
    PaymentInProgressError,
)

logger = structlog.get_logger(__name__)

PROBLEM_JSON = "application/problem+json"


def _problem(
    status_code: int,
    title: str,
    detail: str,
    errors: dict[str, list[str]] | None = None,
) -> JSONResponse:
    problem = ProblemDetailsJSON(status=status_code, title=title, detail=detail, errors=errors)
    return JSONResponse(
        status_code=status_code,
        content=problem.model_dump(exclude_none=True),
        media_type=PROBLEM_JSON,
    )


def _group_validation_errors(exc: RequestValidationError) -> dict[str, list[str]]:
    """Group pydantic errors by field name, dropping the input values."""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(location) or "body"
        message = error.get("msg", "Invalid value").removeprefix("Value error, ")
        errors.setdefault(field, []).append(message)
    return errors


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = _group_validation_errors(exc)
    logger.info("request_validation_failed", path=request.url.path, fields=sorted(errors))
    return _problem(
        status.HTTP_400_BAD_REQUEST,
        "Validation Error",
        "One or more validation errors occurred.",
        errors=errors,
    )


async def bank_unavailable_handler(request: Request, exc: BankUnavailableError) -> JSONResponse:
    return _problem(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "Bank Unavailable",
        "Could not reach the acquiring bank. The payment was not processed.",
    )


async def bank_response_handler(request: Request, exc: BankResponseError) -> JSONResponse:
    return _problem(
        status.HTTP_502_BAD_GATEWAY,
        "Bad Gateway",
        "The bank returned an unexpected response. The payment was not processed.",
    )


async def payment_in_progress_handler(request: Request, exc: PaymentInProgressError) -> JSONResponse:
    return _problem(
        status.HTTP_409_CONFLICT,
        "Payment In Progress",
        "A payment with this Idempotency-Key is still being processed.",
    )


async def payment_gateway_error_handler(request: Request, exc: PaymentGatewayError) -> JSONResponse:
    logger.error(
        "payment_gateway_error",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc),
    )
    return _problem(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
        "The payment could not be processed.",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the payment error handlers to an application."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(BankUnavailableError, bank_unavailable_handler)
    app.add_exception_handler(BankResponseError, bank_response_handler)
    app.add_exception_handler(PaymentInProgressError, payment_in_progress_handler)
    app.add_exception_handler(PaymentGatewayError, payment_gateway_error_handler)
