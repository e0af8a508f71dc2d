"""Per-call status holder for remote procedure calls."""

from __future__ import annotations

from typing import Callable, List


class RpcController:
    """Records whether an RPC failed, why, and whether it was cancelled."""

    def __init__(self) -> None:
        self._failed = False
        self._error_text = ""
        self._canceled = False
        self._cancel_callbacks: List[Callable[[], None]] = []

    def reset(self) -> None:
        """Return the controller to its initial state."""
        self._failed = False
        self._error_text = ""
        self._canceled = False
        self._cancel_callbacks.clear()

    def failed(self) -> bool:
        """Return True if the call has been marked as failed."""
        return self._failed

    def error_text(self) -> str:
        """Return the reason given for the failure, or an empty string."""
        return self._error_text

    def set_failed(self, reason: str) -> None:
        """Mark the call as failed with ``reason``."""
        self._failed = True
        self._error_text = reason

    def start_cancel(self) -> None:
        """Request cancellation and run any registered callbacks once."""
        if self._canceled:
            return
        self._canceled = True
        callbacks, self._cancel_callbacks = self._cancel_callbacks, []
        for callback in callbacks:
            callback()

    def is_canceled(self) -> bool:
        """Return True if cancellation has been requested."""
        return self._canceled

    def notify_on_cancel(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` on cancellation, or now if already cancelled."""
        if self._canceled:
            callback()
        else:
            self._cancel_callbacks.append(callback)