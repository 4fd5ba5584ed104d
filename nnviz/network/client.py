"""
Network Service Client
======================

Thin HTTP client for the network service that owns the real model.

Endpoints:
    GET  /api/network/state   -> NetworkState
    POST /api/network/train   {patterns, epochs} -> NetworkState
    POST /api/network/reset   -> NetworkState

Every failure the transport can surface (connection refused, timeout,
non-2xx status, a body that is not a network snapshot) is raised as a
NetworkServiceError so callers only ever catch one exception type.
"""

from typing import Optional, Sequence, Dict, Any

import requests

from .models import NetworkState, TrainingPattern, patterns_to_payload
from nnviz.utils.logger import get_logger

_logger = get_logger(__name__)


class NetworkServiceError(Exception):
    """A request to the network service failed."""

    def __init__(self, message: str, command: str = '', status_code: Optional[int] = None):
        super().__init__(message)
        self.command = command
        self.status_code = status_code

    def __str__(self) -> str:
        base = super().__str__()
        if self.status_code is not None:
            return f"HTTP {self.status_code}: {base}"
        return base


class NetworkClient:
    """
    Blocking client for the network service.

    Example:
        >>> client = NetworkClient('http://localhost:8080')
        >>> state = client.get_state()
        >>> state = client.train(patterns, epochs=1000)
    """

    STATE_PATH = '/api/network/state'
    TRAIN_PATH = '/api/network/train'
    RESET_PATH = '/api/network/reset'

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Args:
            base_url: Service root, e.g. 'http://localhost:8080'
            timeout: Per-request timeout in seconds (None = no client deadline)
            session: Optional pre-configured requests session
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def get_state(self) -> NetworkState:
        """Fetch the current network snapshot."""
        return self._request('state', 'GET', self.STATE_PATH)

    def train(self, patterns: Sequence[TrainingPattern], epochs: int) -> NetworkState:
        """Train the remote network and return its post-training snapshot."""
        return self._request('train', 'POST', self.TRAIN_PATH, json=patterns_to_payload(patterns, epochs))

    def reset(self) -> NetworkState:
        """Re-initialize the remote network."""
        return self._request('reset', 'POST', self.RESET_PATH)

    def close(self) -> None:
        self.session.close()

    def _request(self, command: str, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> NetworkState:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, json=json, timeout=self.timeout)
        except requests.RequestException as e:
            raise NetworkServiceError(f"{method} {url} failed: {e}", command=command) from e

        if not response.ok:
            message = response.text.strip() or response.reason or 'request failed'
            raise NetworkServiceError(message, command=command, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise NetworkServiceError(f"Malformed JSON from {url}: {e}", command=command,
                                      status_code=response.status_code) from e

        try:
            state = NetworkState.from_dict(payload)
        except (TypeError, ValueError, AttributeError) as e:
            raise NetworkServiceError(f"Unexpected payload from {url}: {e}", command=command,
                                      status_code=response.status_code) from e

        _logger.debug(f"{method} {path} -> {response.status_code} ({len(state.layers)} layers)")
        return state
