"""Per-identifier locking for payment processing.

Ensures that for any one idempotency identifier only a single call runs
the lookup -> bank call -> insert sequence at a time, while calls for
different identifiers proceed in parallel.
"""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator

import structlog

from payment_gateway.models import PaymentInProgressError

logger = structlog.get_logger(__name__)


@dataclass
class _KeyLock:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


class KeyedLock:
    """A set of asyncio locks, one per key, created on demand.

    A key's lock is discarded once no task holds or waits for it, so the
    number of tracked keys is bounded by the number of in-flight calls.

    Example:
        >>> locks = KeyedLock()
        >>> async with locks.hold("payment-123"):
        ...     # Only one task per key runs here at a time
        ...     ...
    """

    def __init__(self) -> None:
        self._locks: dict[str, _KeyLock] = {}

    def __len__(self) -> int:
        return len(self._locks)

    def is_locked(self, key: str) -> bool:
        entry = self._locks.get(key)
        return entry is not None and entry.lock.locked()

    @asynccontextmanager
    async def hold(self, key: str, timeout: float | None = None) -> AsyncIterator[None]:
        """Acquire the lock for a key for the duration of the block.

        Args:
            key: Identifier to serialize on
            timeout: Max seconds to wait for the lock (None waits forever)

        Raises:
            PaymentInProgressError: If the lock was not acquired within timeout
        """
        entry = self._locks.get(key)
        if entry is None:
            entry = self._locks[key] = _KeyLock()
        entry.users += 1

        try:
            try:
                await asyncio.wait_for(entry.lock.acquire(), timeout=timeout)
            except asyncio.TimeoutError as e:
                logger.warning(
                    "lock_wait_timeout",
                    key=key,
                    timeout_seconds=timeout,
                )
                raise PaymentInProgressError(
                    f"Payment {key} is still being processed"
                ) from e

            logger.debug("lock_acquired", key=key)
            try:
                yield
            finally:
                entry.lock.release()
                logger.debug("lock_released", key=key)
        finally:
            entry.users -= 1
            if entry.users == 0 and self._locks.get(key) is entry:
                del self._locks[key]
