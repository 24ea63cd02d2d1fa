"""
Periodic timer used by the price feed and the live recompute loop.

One daemon thread per running timer; cancellation is cooperative through a
threading.Event so that a stopped timer never fires again once stop()
returns.
"""

import threading
from typing import Callable, Optional

import structlog

logger = structlog.get_logger(__name__)


class PeriodicTimer:
    """Calls a function every interval seconds on a background thread."""

    def __init__(self, interval: float, function: Callable[[], None],
                 name: str = "PeriodicTimer", join_timeout: float = 5.0):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval!r}")
        self.interval = interval
        self.function = function
        self.name = name
        self.join_timeout = join_timeout

        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        # Stop event of the run executing on the current thread
        self._local = threading.local()

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive() and not self._stop_event.is_set()

    @property
    def stop_requested(self) -> bool:
        """
        True once stop() has been called for the current run.

        On a timer thread this is that thread's own run, even after a restart
        has begun a new one.
        """
        stop_event = getattr(self._local, "stop_event", None) or self._stop_event
        return stop_event.is_set()

    def start(self) -> bool:
        """
        Start the timer thread.

        Returns:
            True if a thread was started, False if one was already running
        """
        with self._lock:
            if self._thread is not None and self._thread.is_alive() and not self._stop_event.is_set():
                return False

            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._stop_event,),
                daemon=True,
                name=self.name,
            )
            self._thread.start()
            logger.debug("Timer started", timer=self.name, interval=self.interval)
            return True

    def stop(self) -> bool:
        """
        Stop the timer and wait for an in-flight call to finish.

        Returns:
            True if a running timer was stopped, False if nothing was running
        """
        with self._lock:
            thread = self._thread
            if thread is None:
                return False
            self._stop_event.set()
            self._thread = None

        # A callback stopping its own timer cannot join itself
        if thread is not threading.current_thread():
            thread.join(timeout=self.join_timeout)
            if thread.is_alive():
                logger.warning("Timer thread did not exit in time", timer=self.name)

        logger.debug("Timer stopped", timer=self.name)
        return True

    def _run(self, stop_event: threading.Event) -> None:
        self._local.stop_event = stop_event
        while not stop_event.wait(self.interval):
            try:
                self.function()
            except Exception as e:
                logger.error(
                    "Unexpected error in timer callback",
                    timer=self.name,
                    error=str(e),
                    error_type=type(e).__name__,
                    exc_info=True
                )
