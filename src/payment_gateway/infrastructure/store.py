"""Payment record storage.

Records are keyed by the caller's idempotency identifier. The only write
primitive is insert-if-absent, so a record, once stored, is never replaced.
"""

import threading
from abc import ABC, abstractmethod

import structlog

from payment_gateway.models import PaymentRecord

logger = structlog.get_logger(__name__)


class PaymentStore(ABC):
    """Storage contract for payment records."""

    @abstractmethod
    async def get(self, identifier: str) -> PaymentRecord | None:
        """Look up a record by identifier.

        Returns:
            The stored record, or None if the identifier has not been seen
        """
        pass

    @abstractmethod
    async def insert_if_absent(self, record: PaymentRecord) -> bool:
        """Atomically insert a record unless its identifier is already present.

        Returns:
            True if the record was inserted, False if another record already
            holds the identifier (the existing record is left untouched)
        """
        pass


class InMemoryPaymentStore(PaymentStore):
    """Process-local store backed by a dict.

    Guarded by a threading.Lock so insert-if-absent stays atomic even when
    the store is shared across threads. Contents are lost on restart.
    """

    def __init__(self) -> None:
        self._records: dict[str, PaymentRecord] = {}
        self._lock = threading.Lock()

    async def get(self, identifier: str) -> PaymentRecord | None:
        with self._lock:
            return self._records.get(identifier)

    async def insert_if_absent(self, record: PaymentRecord) -> bool:
        with self._lock:
            if record.identifier in self._records:
                inserted = False
            else:
                self._records[record.identifier] = record
                inserted = True

        if inserted:
            logger.info(
                "payment_record_inserted",
                payment_id=record.identifier,
                status=record.status.value,
            )
        else:
            logger.warning(
                "payment_record_already_exists",
                payment_id=record.identifier,
            )

        return inserted
