# File: src/parkinglot/infrastructure/locks.py
"""
Reader/Writer Lock

Readers may hold the lock together; a writer holds it alone. The lock is
writer-preferring: once a writer is waiting, new readers queue behind it so
a steady stream of queries cannot starve park/leave.

The lock is not reentrant. Acquisition blocks until granted unless a
timeout is given.
"""

from contextlib import contextmanager
from typing import Iterator, Optional
import threading


class LockTimeoutError(TimeoutError):
    """Raised when the lock could not be acquired within the timeout"""
    pass


class ReadWriteLock:
    """Shared/exclusive lock built on a single condition variable"""

    def __init__(self):
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer_active = False
        self._writers_waiting = 0

    # ========================================================================
    # READ SIDE
    # ========================================================================

    def acquire_read(self, timeout: Optional[float] = None) -> bool:
        """Acquire shared access; returns False on timeout"""
        with self._condition:
            granted = self._condition.wait_for(
                lambda: not self._writer_active and self._writers_waiting == 0,
                timeout
            )
            if not granted:
                return False
            self._readers += 1
            return True

    def release_read(self) -> None:
        with self._condition:
            if self._readers <= 0:
                raise RuntimeError("release_read called without a matching acquire_read")
            self._readers -= 1
            if self._readers == 0:
                self._condition.notify_all()

    # ========================================================================
    # WRITE SIDE
    # ========================================================================

    def acquire_write(self, timeout: Optional[float] = None) -> bool:
        """Acquire exclusive access; returns False on timeout"""
        with self._condition:
            self._writers_waiting += 1
            try:
                granted = self._condition.wait_for(
                    lambda: not self._writer_active and self._readers == 0,
                    timeout
                )
                if granted:
                    self._writer_active = True
                return granted
            finally:
                self._writers_waiting -= 1
                if self._writers_waiting == 0 and not self._writer_active:
                    # Readers held back by this writer may proceed now
                    self._condition.notify_all()

    def release_write(self) -> None:
        with self._condition:
            if not self._writer_active:
                raise RuntimeError("release_write called without a matching acquire_write")
            self._writer_active = False
            self._condition.notify_all()

    # ========================================================================
    # CONTEXT MANAGERS
    # ========================================================================

    @contextmanager
    def read_locked(self, timeout: Optional[float] = None) -> Iterator[None]:
        if not self.acquire_read(timeout):
            raise LockTimeoutError(f"Could not acquire read lock within {timeout}s")
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self, timeout: Optional[float] = None) -> Iterator[None]:
        if not self.acquire_write(timeout):
            raise LockTimeoutError(f"Could not acquire write lock within {timeout}s")
        try:
            yield
        finally:
            self.release_write()

    @property
    def readers(self) -> int:
        return self._readers

    @property
    def is_write_locked(self) -> bool:
        return self._writer_active
