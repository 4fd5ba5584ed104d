"""
Network State Store
===================

The single authoritative copy of the last-known network snapshot.

Two producers write here: the periodic poll and the user's commands. The
store treats them the same way - whichever response is applied last wins,
and a snapshot is always swapped in whole, never merged. Replacement and the
version bump happen under one lock, so a reader sees either the old snapshot
or the new one.

Listeners are told about each replacement (the application uses this to mark
the canvas dirty). After close() the store ignores late responses from
requests that were still in flight at teardown.
"""

import threading
import time
from typing import Optional, List, Callable, Tuple

from .models import NetworkState
from nnviz.utils.logger import get_logger, log_state_update

_logger = get_logger(__name__)

StateListener = Callable[[NetworkState, int], None]


class StateStore:
    """
    Latest-snapshot cell with notify-on-replace.

    Example:
        >>> store = StateStore()
        >>> store.on_replace(lambda state, version: print(version))
        >>> store.replace(state, source='poll')
        1
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._state: Optional[NetworkState] = None
        self._version = 0
        self._closed = False

        # Status for the HUD
        self._last_source: Optional[str] = None
        self._last_update_time: float = 0.0
        self._last_error: Optional[str] = None

        # Thread safety for callbacks
        self._callback_lock = threading.Lock()
        self._listeners: List[StateListener] = []

    @property
    def state(self) -> Optional[NetworkState]:
        """Current snapshot (None until the first successful response)."""
        with self._lock:
            return self._state

    @property
    def version(self) -> int:
        """Incremented on every replacement."""
        with self._lock:
            return self._version

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def last_error(self) -> Optional[str]:
        with self._lock:
            return self._last_error

    @property
    def last_source(self) -> Optional[str]:
        with self._lock:
            return self._last_source

    @property
    def last_update_time(self) -> float:
        with self._lock:
            return self._last_update_time

    def snapshot(self) -> Tuple[Optional[NetworkState], int]:
        """Read state and version together."""
        with self._lock:
            return self._state, self._version

    def replace(self, state: NetworkState, source: str = 'unknown') -> Optional[int]:
        """
        Swap in a new snapshot.

        Args:
            state: The new NetworkState (taken as-is)
            source: Producer label for logging ('poll', 'train', ...)

        Returns:
            The new version, or None if the store is closed
        """
        with self._lock:
            if self._closed:
                _logger.debug(f"Ignoring {source} response after close")
                return None
            self._state = state
            self._version += 1
            version = self._version
            self._last_source = source
            self._last_update_time = time.time()
            self._last_error = None

        log_state_update(source, state)

        with self._callback_lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(state, version)
        return version

    def report_failure(self, source: str, error: BaseException) -> None:
        """Record a failed request; the current snapshot is left untouched."""
        with self._lock:
            if self._closed:
                return
            self._last_error = f"{source}: {error}"

    def on_replace(self, callback: StateListener) -> None:
        """Register a callback for snapshot replacements."""
        with self._callback_lock:
            self._listeners.append(callback)

    def close(self) -> None:
        """Stop accepting snapshots (teardown)."""
        with self._lock:
            self._closed = True
        with self._callback_lock:
            self._listeners.clear()
