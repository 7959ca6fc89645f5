"""UI-owned execution context - a work queue drained by the thread that owns the display."""
import logging
import queue
import threading
from typing import Any, Callable

_STOP = object()


class UIDispatcher:
    """
    Marshals callbacks from background threads onto the UI thread.

    post() is safe from any thread. Only the owning thread (the one that
    created the dispatcher) may drain the queue with run_pending() or
    run_forever().
    """

    def __init__(self):
        # SimpleQueue.put is reentrant, so stop() is safe from a signal handler
        self._queue: "queue.SimpleQueue" = queue.SimpleQueue()
        self._owner = threading.get_ident()
        self._running = False

    def post(self, callback: Callable[..., Any], *args: Any) -> None:
        """Schedule callback(*args) on the UI thread."""
        self._queue.put((callback, args))

    def is_ui_thread(self) -> bool:
        return threading.get_ident() == self._owner

    def run_pending(self) -> int:
        """
        Run every callback queued so far without blocking.

        Returns:
            Number of callbacks executed
        """
        self._check_owner()
        count = 0
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return count
            if item is _STOP:
                self._running = False
                continue
            self._execute(*item)
            count += 1

    def run_forever(self, poll_interval: float = 0.1) -> None:
        """Run callbacks as they arrive until stop() is called."""
        self._check_owner()
        self._running = True
        logging.debug("UI dispatcher loop started")
        while self._running:
            try:
                item = self._queue.get(timeout=poll_interval)
            except queue.Empty:
                continue
            if item is _STOP:
                break
            self._execute(*item)
        self._running = False
        logging.debug("UI dispatcher loop stopped")

    def stop(self) -> None:
        """
        Ask run_forever() to return once the callbacks queued before now have run.

        Safe to call from any thread and from signal handlers.
        """
        self._queue.put(_STOP)

    def _check_owner(self) -> None:
        if not self.is_ui_thread():
            raise RuntimeError("UIDispatcher can only be drained by the thread that created it")

    def _execute(self, callback: Callable[..., Any], args: tuple) -> None:
        try:
            callback(*args)
        except Exception as exc:
            logging.exception("Unexpected error in UI callback: %s", exc)
