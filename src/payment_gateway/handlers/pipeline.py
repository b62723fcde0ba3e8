"""
Core payment processing orchestration.

This module implements the workflow that ties together:
- Per-identifier locking
- Idempotency resolution against the payment store
- Card data minimization
- The acquiring bank call
- Status derivation and insert-if-absent persistence
"""

import structlog

from payment_gateway.clients.base import BankClient
from payment_gateway.domain.card import extract_last_four
from payment_gateway.infrastructure.locking import KeyedLock
from payment_gateway.infrastructure.store import PaymentStore
from payment_gateway.models import (
    BankAuthorizationOutcome,
    BankPaymentRequest,
    BankUnavailableError,
    PaymentGatewayError,
    PaymentRecord,
    PaymentRequest,
    PaymentStatus,
    PaymentView,
)

logger = structlog.get_logger(__name__)


def derive_status(outcome: BankAuthorizationOutcome) -> PaymentStatus:
    """Map a bank outcome to the status that will be stored.

    Only an explicit verdict from a reachable bank becomes a status; an
    outcome flagged as bank_unavailable is raised instead of being stored
    as a decline.

    Raises:
        BankUnavailableError: If the outcome reports the bank as unavailable
    """
    if outcome.bank_unavailable:
        raise BankUnavailableError("Bank reported itself unavailable")

    return PaymentStatus.AUTHORIZED if outcome.authorized else PaymentStatus.DECLINED


class PaymentPipeline:
    """Processes payment requests exactly once per idempotency identifier."""

    def __init__(
        self,
        store: PaymentStore,
        bank_client: BankClient,
        locks: KeyedLock | None = None,
        lock_wait_timeout_seconds: float | None = None,
    ) -> None:
        """
        Args:
            store: Payment record store
            bank_client: Acquiring bank client
            locks: Per-identifier locks (a private set is created if omitted)
            lock_wait_timeout_seconds: Max wait for an in-flight call with the
                same identifier (None waits indefinitely)
        """
        self.store = store
        self.bank_client = bank_client
        self.locks = locks if locks is not None else KeyedLock()
        self.lock_wait_timeout_seconds = lock_wait_timeout_seconds

    async def process(self, request: PaymentRequest) -> PaymentView:
        """
        Process a payment request.

        Workflow:
        1. Lock the identifier
        2. Return the stored outcome if the identifier was already processed
           (no bank call, even if the payload differs)
        3. Extract last four digits from the request card number
        4. Build the bank request (expiry as MM/YYYY) and call the bank
        5. Derive Authorized/Declined from the bank's verdict
        6. Insert-if-absent the record; on conflict return the stored record

        Args:
            request: Validated payment request

        Returns:
            PaymentView of the stored record

        Error Handling:
            - Bank unreachable → BankUnavailableError, nothing stored
            - Bank response malformed → BankResponseError, nothing stored
            - Decline → stored as Declined (not an error)
            - Cancellation during the bank call → propagates, nothing stored
        """
        identifier = request.identifier

        async with self.locks.hold(identifier, timeout=self.lock_wait_timeout_seconds):
            existing = await self.store.get(identifier)
            if existing is not None:
                logger.info(
                    "payment_replayed",
                    payment_id=identifier,
                    status=existing.status.value,
                )
                return PaymentView.from_record(existing)

            logger.info(
                "payment_processing_started",
                payment_id=identifier,
                amount=request.amount,
                currency=request.currency,
            )

            card_number_last_four = extract_last_four(request.card_number)
            bank_request = BankPaymentRequest.from_payment_request(request)

            try:
                outcome = await self.bank_client.authorize(bank_request)
                status = derive_status(outcome)
            except PaymentGatewayError as e:
                logger.warning(
                    "payment_processing_failed",
                    payment_id=identifier,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                raise

            record = PaymentRecord(
                identifier=identifier,
                card_number_last_four=card_number_last_four,
                expiry_month=request.expiry_month,
                expiry_year=request.expiry_year,
                currency=request.currency,
                amount=request.amount,
                status=status,
            )

            if not await self.store.insert_if_absent(record):
                winner = await self.store.get(identifier)
                if winner is None:
                    raise PaymentGatewayError(
                        f"Payment {identifier} vanished after a conflicting insert"
                    )
                logger.warning(
                    "payment_insert_lost_race",
                    payment_id=identifier,
                    status=winner.status.value,
                )
                return PaymentView.from_record(winner)

            logger.info(
                "payment_processing_completed",
                payment_id=identifier,
                status=status.value,
                card_last_four=card_number_last_four,
            )
            return PaymentView.from_record(record)
