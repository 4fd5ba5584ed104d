"""
Test doubles shared across the suite.
"""

import threading
from concurrent.futures import Executor, Future
from typing import List, Optional

from nnviz.network.client import NetworkServiceError
from nnviz.network.models import NetworkState, LayerState, NeuronState


def make_state(sizes: List[int], epoch: Optional[int] = None, error: Optional[float] = None) -> NetworkState:
    """Fully connected snapshot; weights alternate sign so both hues show up."""
    layers = []
    for i, size in enumerate(sizes):
        prev = sizes[i - 1] if i > 0 else 0
        neurons = [
            NeuronState(
                value=(j + 1) / (size + 1),
                bias=0.1 * j,
                weights=[(0.5 if (j + k) % 2 == 0 else -0.5) for k in range(prev)],
            )
            for j in range(size)
        ]
        layers.append(LayerState(neurons))
    return NetworkState(layers=layers, epoch=epoch, error=error)


class InlineExecutor(Executor):
    """Runs work immediately on the submitting thread."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except BaseException as e:
            future.set_exception(e)
        return future


class FakeClient:
    """
    Stand-in for NetworkClient.

    Each call returns the configured state, or raises the configured error.
    When `block` is set, calls wait on it before answering.
    """

    def __init__(self, state: Optional[NetworkState] = None, error: Optional[Exception] = None):
        self.state = state if state is not None else NetworkState()
        self.error = error
        self.block: Optional[threading.Event] = None
        self.entered = threading.Event()
        self.calls: List[tuple] = []
        self.base_url = 'http://fake'

    def _answer(self, *call) -> NetworkState:
        self.calls.append(call)
        self.entered.set()
        if self.block is not None:
            self.block.wait(5)
        if self.error is not None:
            raise self.error
        return self.state

    def get_state(self) -> NetworkState:
        return self._answer('state')

    def train(self, patterns, epochs) -> NetworkState:
        return self._answer('train', list(patterns), epochs)

    def reset(self) -> NetworkState:
        return self._answer('reset')

    def close(self) -> None:
        pass


def service_down(command: str = 'state') -> NetworkServiceError:
    return NetworkServiceError("connection refused", command=command)
