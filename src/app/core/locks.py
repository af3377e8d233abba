"""Per-key locking for ledger writes."""

import threading
from contextlib import ExitStack, contextmanager
from typing import Hashable, Iterator, Optional

from app.config.settings import get_settings


def account_key(account_id: int) -> tuple[str, int]:
    """Lock key guarding an account's cash balance and positions."""
    return ("account", account_id)


def stock_key(stock_id: int) -> tuple[str, int]:
    """Lock key guarding a stock's firm fractional-share bucket."""
    return ("stock", stock_id)


class KeyedLockRegistry:
    """
    Registry of re-entrant locks, one per key.

    Calls on the same key are serialized; calls on different keys proceed
    in parallel. Share one registry between every service that writes
    ledger state. Waits are bounded by ``store_timeout_seconds`` unless a
    timeout is given.
    """

    def __init__(self, timeout_seconds: Optional[float] = None):
        if timeout_seconds is None:
            timeout_seconds = get_settings().store_timeout_seconds
        self._timeout = timeout_seconds
        self._guard = threading.Lock()
        self._locks: dict[Hashable, threading.RLock] = {}

    def _lock_for(self, key: Hashable) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    @contextmanager
    def hold(self, *keys: Hashable) -> Iterator[None]:
        """
        Acquire the locks for all keys, in a stable order.

        Raises TimeoutError if a lock cannot be acquired within the
        configured timeout.
        """
        with ExitStack() as stack:
            for key in sorted(set(keys), key=repr):
                lock = self._lock_for(key)
                if not lock.acquire(timeout=self._timeout):
                    raise TimeoutError(f"Timed out waiting for lock {key!r}")
                stack.callback(lock.release)
            yield
