"""Cooperative cancellation for resolution calls."""
import threading


class OperationCancelled(Exception):
    """Raised when a resolution is aborted through its CancellationToken."""
    pass


class CancellationToken:
    """Thread-safe cancellation flag shared by a caller and one resolution.

    Usage:
        token = CancellationToken()
        worker_thread = start(provider.get_metadata, info, token)
        token.cancel()
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def throw_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelled("Operation was cancelled")

