"""Storage and concurrency infrastructure."""

from payment_gateway.infrastructure.locking import KeyedLock
from payment_gateway.infrastructure.store import InMemoryPaymentStore, PaymentStore

__all__ = [
    "InMemoryPaymentStore",
    "KeyedLock",
    "PaymentStore",
]
