"""
Per-wallet serialization of store decisions.

The analysis core assumes at most one in-flight store-or-skip decision per
wallet. Orchestration that may analyze one wallet from several threads
holds the wallet's lock around "read previous -> decide -> write".
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from swap_insights.insights_logging import get_logger, short_wallet

logger = get_logger(__name__)


class WalletLockRegistry:
    """One lock per wallet, created on first use. Thread-safe."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def lock_for(self, wallet: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(wallet)
            if lock is None:
                lock = threading.Lock()
                self._locks[wallet] = lock
            return lock

    @contextmanager
    def hold(self, wallet: str) -> Iterator[None]:
        lock = self.lock_for(wallet)
        if not lock.acquire(blocking=False):
            logger.debug("wallet_lock_wait", wallet=short_wallet(wallet))
            lock.acquire()
        try:
            yield
        finally:
            lock.release()

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
