"""
State Synchronizer
==================

Keeps the displayed network in step with the service by polling
GET /api/network/state on a fixed period.

The period is driven by a pygame timer event, so ticks arrive on the main
loop like any other input event; the request itself runs on the I/O
executor. A failed poll is logged and the previous snapshot stays on screen
until the next tick. There is no backoff.
"""

import threading
from concurrent.futures import Executor, Future
from typing import Optional

import pygame

from .client import NetworkClient, NetworkServiceError
from .models import NetworkState
from .store import StateStore
from nnviz.utils.logger import get_logger, log_request_failure

_logger = get_logger(__name__)

# Timer event posted every poll interval
POLL_EVENT = pygame.event.custom_type()


class StateSynchronizer:
    """
    Periodic state poller.

    Example:
        >>> sync = StateSynchronizer(client, store, executor, interval_ms=1000)
        >>> sync.start()                  # after pygame.display.set_mode()
        >>> for event in pygame.event.get():
        ...     sync.handle_event(event)  # polls on POLL_EVENT
        >>> sync.stop()
    """

    def __init__(
        self,
        client: NetworkClient,
        store: StateStore,
        executor: Executor,
        interval_ms: int = 1000,
        event_type: int = POLL_EVENT
    ):
        """
        Args:
            client: Network service client
            store: Snapshot cell to write into
            executor: Where fetches run
            interval_ms: Poll period in milliseconds
            event_type: pygame event id used for timer ticks
        """
        self.client = client
        self.store = store
        self.executor = executor
        self.interval_ms = interval_ms
        self.event_type = event_type

        self._running = False
        self._in_flight = False
        self._flight_lock = threading.Lock()

        # Counters (shown in the HUD, handy in tests)
        self.polls = 0
        self.failures = 0
        self.skipped = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def in_flight(self) -> bool:
        with self._flight_lock:
            return self._in_flight

    def start(self) -> None:
        """
        Start the poll timer.

        Raises:
            RuntimeError: If no display surface exists yet
        """
        if self._running:
            return
        if pygame.display.get_surface() is None:
            raise RuntimeError("Cannot start polling before the display surface exists")
        pygame.time.set_timer(self.event_type, self.interval_ms)
        self._running = True
        _logger.info(f"Polling every {self.interval_ms} ms")

    def stop(self) -> None:
        """Cancel the poll timer. Safe to call more than once."""
        if not self._running:
            return
        pygame.time.set_timer(self.event_type, 0)
        self._running = False
        _logger.info("Polling stopped")

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Poll on timer ticks. Returns True if the event was a tick."""
        if event.type != self.event_type:
            return False
        if self._running:
            self.poll()
        return True

    def poll(self) -> Optional['Future[Optional[NetworkState]]']:
        """Submit one fetch unless the previous one is still running."""
        with self._flight_lock:
            if self._in_flight:
                self.skipped += 1
                _logger.debug("Previous poll still in flight, skipping tick")
                return None
            self._in_flight = True

        try:
            return self.executor.submit(self._fetch)
        except RuntimeError as e:
            with self._flight_lock:
                self._in_flight = False
            _logger.debug(f"Poll not submitted: {e}")
            return None

    def _fetch(self) -> Optional[NetworkState]:
        self.polls += 1
        try:
            try:
                state = self.client.get_state()
                self.store.replace(state, source='poll')
            except NetworkServiceError as e:
                self.failures += 1
                log_request_failure('poll', e)
                self.store.report_failure('poll', e)
                return None
            except Exception as e:
                # Last stop before the worker thread; keep polling alive
                self.failures += 1
                _logger.exception(f"Poll crashed: {type(e).__name__}: {e}")
                self.store.report_failure('poll', e)
                return None
            return state
        finally:
            with self._flight_lock:
                self._in_flight = False
