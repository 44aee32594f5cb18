import threading
import time
from typing import Optional


class CancellationRequested(Exception):
    """Raised to cooperatively abort request work once the caller has given up."""
    pass


class CancellationToken:
    """Cancellation signal shared by the steps of one request.

    Cancelled either explicitly via ``cancel()`` or implicitly once the
    optional deadline (seconds from construction) has elapsed.
    """

    def __init__(self, deadline_seconds: Optional[float] = None, *, clock=time.monotonic):
        self._event = threading.Event()
        self._clock = clock
        self._deadline = None
        if deadline_seconds is not None:
            self._deadline = clock() + deadline_seconds

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._deadline is not None and self._clock() >= self._deadline:
            self._event.set()
            return True
        return False

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None when there is none."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())

    def raise_if_cancelled(self, stage: str = "") -> None:
        if self.is_cancelled:
            suffix = f" before {stage}" if stage else ""
            raise CancellationRequested(f"Request cancelled{suffix}")


__all__ = ["CancellationRequested", "CancellationToken"]
