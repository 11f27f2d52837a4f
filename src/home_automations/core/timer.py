"""
Timer service: current time and the periodic tick signal.

A single scheduling thread (or the host, via ``tick()``) drives every
evaluation. Tick handlers run synchronously, in registration order.
"""

import logging
import threading
from datetime import datetime, timedelta, UTC
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

TickHandler = Callable[[datetime], None]


class Timer:
    """
    Supplies ``now()`` and delivers tick notifications.

    Handlers are wrapped in try/except: one failing handler never stops the
    others or future ticks.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        """
        Initialize the timer.

        Args:
            clock: Optional callable returning the current (timezone-aware) time.
                   Defaults to UTC wall-clock time.
        """
        self._clock = clock or (lambda: datetime.now(UTC))
        self._handlers: List[TickHandler] = []
        self._lock = threading.Lock()
        self._dispatching: Optional[int] = None  # Ident of the thread dispatching a tick
        self._thread: Optional[threading.Thread] = None
        self._stop_requested = threading.Event()

    def now(self) -> datetime:
        """Get the current time."""
        return self._clock()

    def on_tick(self, handler: TickHandler) -> None:
        """Register a handler that receives the tick time."""
        self._handlers.append(handler)
        logger.debug(f"Registered tick handler {getattr(handler, '__name__', handler)!r}")

    def remove_tick_handler(self, handler: TickHandler) -> None:
        """Remove a tick handler (no-op if it is not registered)."""
        self._handlers = [h for h in self._handlers if h != handler]

    def tick(self, now: Optional[datetime] = None) -> datetime:
        """
        Deliver one tick to every handler.

        Ticks never overlap: a tick requested while another is being
        dispatched waits for it to finish.

        Args:
            now: Tick time (defaults to ``now()``)

        Returns:
            The tick time that was dispatched

        Raises:
            RuntimeError: If called from a tick handler
        """
        self._ensure_not_in_tick()
        if now is None:
            now = self.now()
        self._dispatch(now)
        return now

    def _ensure_not_in_tick(self) -> None:
        if self._dispatching == threading.get_ident():
            raise RuntimeError("Ticks must not be nested: called from a tick handler")

    def _dispatch(self, now: Optional[datetime], stop: Optional[threading.Event] = None) -> None:
        with self._lock:
            if stop is not None and stop.is_set():
                return
            if now is None:
                now = self.now()

            self._dispatching = threading.get_ident()
            try:
                for handler in list(self._handlers):
                    try:
                        handler(now)
                    except Exception as e:
                        logger.error(
                            f"Error in tick handler {getattr(handler, '__name__', handler)!r}: {e}",
                            exc_info=True,
                        )
            finally:
                self._dispatching = None

    # =========================================================================
    # Scheduling thread
    # =========================================================================

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self, interval: timedelta = timedelta(seconds=1)) -> None:
        """
        Start the scheduling thread.

        Args:
            interval: Approximate time between ticks

        Raises:
            ValueError: If interval is not positive
            RuntimeError: If the timer is already running (including a
                stopped thread still finishing its last tick)
        """
        if interval <= timedelta(0):
            raise ValueError(f"Tick interval must be positive, got {interval}")
        if self.is_running:
            raise RuntimeError("Timer is already running")

        # Each run gets its own stop flag
        self._stop_requested = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            args=(interval.total_seconds(), self._stop_requested),
            name="home-automations-timer",
            daemon=True,
        )
        self._thread.start()
        logger.info(f"Timer started with interval {interval}")

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Stop the scheduling thread.

        Once the stop is requested the thread starts no further ticks. If a
        tick is still running when ``timeout`` expires, the thread is kept
        (``is_running`` stays True) until that tick finishes.
        """
        self._stop_requested.set()
        thread = self._thread
        if thread is None:
            return
        if thread is not threading.current_thread():
            thread.join(timeout)
            if thread.is_alive():
                logger.warning(f"Timer thread still finishing a tick after {timeout}s")
                return

        self._thread = None
        logger.info("Timer stopped")

    def _run(self, interval_seconds: float, stop: threading.Event) -> None:
        while not stop.wait(interval_seconds):
            self._dispatch(None, stop)


class ManualTimer(Timer):
    """
    Timer with a settable clock.

    Used by hosts that drive ticks themselves and by tests.
    """

    def __init__(self, now: Optional[datetime] = None) -> None:
        self._current = now or datetime.now(UTC)
        super().__init__(clock=lambda: self._current)

    def set_now(self, now: datetime) -> None:
        """Set the current time."""
        self._current = now

    def advance(self, delta: timedelta) -> datetime:
        """Move the clock forward and deliver a tick at the new time."""
        self._ensure_not_in_tick()
        self._current = self._current + delta
        return self.tick()
