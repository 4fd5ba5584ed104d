"""
Command Dispatcher
==================

Sends train / reset / refresh commands to the network service and swaps the
response into the StateStore. There is no optimistic local update: the
display only changes when the server answers.

Train and reset are exclusive. They go through a TrainingGate, a two-state
machine (IDLE -> IN_FLIGHT -> IDLE). A second exclusive command issued while
one is in flight is rejected, and the gate always returns to IDLE when the
request finishes, whether it succeeded or not.
"""

import threading
from concurrent.futures import Executor, Future
from contextlib import contextmanager
from enum import Enum
from typing import Optional, Sequence, Callable, Iterator

from .client import NetworkClient, NetworkServiceError
from .models import NetworkState, TrainingPattern
from .store import StateStore
from nnviz.utils.logger import get_logger, log_request_failure

_logger = get_logger(__name__)


class GateState(Enum):
    """Training gate states."""
    IDLE = "idle"
    IN_FLIGHT = "in_flight"


class TrainingGate:
    """
    Guards against overlapping train/reset requests.

    Example:
        >>> gate = TrainingGate()
        >>> gate.try_acquire()
        True
        >>> gate.try_acquire()
        False
        >>> with gate.held():
        ...     pass  # released on exit, even on error
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._state = GateState.IDLE
        self._holder: Optional[str] = None

    @property
    def state(self) -> GateState:
        with self._lock:
            return self._state

    @property
    def in_flight(self) -> bool:
        return self.state is GateState.IN_FLIGHT

    @property
    def holder(self) -> Optional[str]:
        """Name of the command holding the gate, if any."""
        with self._lock:
            return self._holder

    def try_acquire(self, holder: str = '') -> bool:
        """IDLE -> IN_FLIGHT. Returns False if already in flight."""
        with self._lock:
            if self._state is GateState.IN_FLIGHT:
                return False
            self._state = GateState.IN_FLIGHT
            self._holder = holder
            return True

    def release(self) -> None:
        """IN_FLIGHT -> IDLE."""
        with self._lock:
            self._state = GateState.IDLE
            self._holder = None

    @contextmanager
    def held(self) -> Iterator[None]:
        """Release an already-acquired gate when the block exits."""
        try:
            yield
        finally:
            self.release()


class CommandDispatcher:
    """
    Issues commands against the network service on an I/O executor.

    Every method returns the Future of the submitted request, or None when
    the command was rejected (an exclusive command already in flight).
    Failures are logged and recorded on the store; they never propagate to
    the caller.

    Example:
        >>> dispatcher = CommandDispatcher(client, store, executor)
        >>> dispatcher.train(patterns, epochs=1000)
        <Future ...>
        >>> dispatcher.train(patterns, epochs=1000)  # still running
        None
    """

    def __init__(
        self,
        client: NetworkClient,
        store: StateStore,
        executor: Executor,
        gate: Optional[TrainingGate] = None
    ):
        self.client = client
        self.store = store
        self.executor = executor
        self.gate = gate or TrainingGate()

    @property
    def training(self) -> bool:
        """True while a train or reset request is in flight."""
        return self.gate.in_flight

    def train(self, patterns: Sequence[TrainingPattern], epochs: int) -> Optional['Future[Optional[NetworkState]]']:
        """
        Train the remote network on a copy of the given patterns.

        Args:
            patterns: Current pattern list (sent by value)
            epochs: Epoch count for this request
        """
        payload = [p.copy() for p in patterns]
        _logger.info(f"Train requested: {len(payload)} patterns, {epochs} epochs")
        return self._submit_exclusive(
            'train',
            lambda: self.client.train(payload, epochs),
            epochs=epochs,
            patterns=len(payload),
        )

    def reset(self) -> Optional['Future[Optional[NetworkState]]']:
        """Re-initialize the remote network."""
        _logger.info("Reset requested")
        return self._submit_exclusive('reset', self.client.reset)

    def refresh(self) -> Optional['Future[Optional[NetworkState]]']:
        """One-off state read (initial load)."""
        try:
            return self.executor.submit(self._run, 'refresh', self.client.get_state, False)
        except RuntimeError as e:
            _logger.warning(f"Refresh not submitted: {e}")
            return None

    def _submit_exclusive(
        self,
        command: str,
        call: Callable[[], NetworkState],
        **context
    ) -> Optional['Future[Optional[NetworkState]]']:
        if not self.gate.try_acquire(command):
            _logger.info(f"{command.capitalize()} ignored: {self.gate.holder} already in flight")
            return None
        try:
            return self.executor.submit(self._run, command, call, True, **context)
        except RuntimeError as e:
            # Executor already shut down; nothing will release the gate for us
            self.gate.release()
            _logger.warning(f"{command.capitalize()} not submitted: {e}")
            return None

    def _run(
        self,
        command: str,
        call: Callable[[], NetworkState],
        exclusive: bool,
        **context
    ) -> Optional[NetworkState]:
        """Worker-side body: request, then replace or report."""
        if exclusive:
            with self.gate.held():
                return self._request(command, call, **context)
        return self._request(command, call, **context)

    def _request(self, command: str, call: Callable[[], NetworkState], **context) -> Optional[NetworkState]:
        try:
            state = call()
        except NetworkServiceError as e:
            log_request_failure(command, e, **context)
            self.store.report_failure(command, e)
            return None
        except Exception as e:
            # Last stop before the worker thread; keep the UI alive
            _logger.exception(f"{command.capitalize()} crashed: {type(e).__name__}: {e}")
            self.store.report_failure(command, e)
            return None

        self.store.replace(state, source=command)
        if command == 'train':
            _logger.info(f"Training finished: epoch={state.epoch} error={state.error}")
        return state
