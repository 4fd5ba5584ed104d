"""
Reference Network Service
=========================

Flask server that owns a MultiLayerNetwork and exposes it over the API the
visualizer consumes.

Routes:
    GET  /api/network/state   Current snapshot
    POST /api/network/train   {"patterns": [...], "epochs": n} -> snapshot
    POST /api/network/reset   Fresh network -> snapshot

Requests are serialized by a single lock: a state read issued while a long
train is running waits for the train to finish and then sees its result.

Usage:
    >>> from nnviz.service import NetworkService, create_app
    >>> app = create_app(NetworkService(config))
    >>> app.run(port=8080)
"""

import logging
import threading
from typing import Optional, List, Sequence, Dict, Any

from flask import Flask, jsonify, request

from config import Config
from nnviz.network.models import NetworkState, TrainingPattern
from nnviz.utils.logger import get_logger
from .mlp import MultiLayerNetwork

# Module logger
_logger = get_logger(__name__)


class PatternShapeError(ValueError):
    """Training patterns don't fit the network (or there are none)."""


class NetworkService:
    """
    Thread-safe owner of the served network, its epoch counter and error.

    Example:
        >>> service = NetworkService(Config())
        >>> service.train(patterns, epochs=1000).epoch
        1000
        >>> service.reset().epoch
        0
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self._lock = threading.Lock()
        self.network = self._build_network()
        self.epoch = 0
        self.error = 0.0

    def _build_network(self) -> MultiLayerNetwork:
        return MultiLayerNetwork(
            self.config.SERVICE_LAYER_SIZES,
            learning_rate=self.config.SERVICE_LEARNING_RATE,
            seed=self.config.SEED,
        )

    def _snapshot(self) -> NetworkState:
        return NetworkState(layers=self.network.snapshot(), error=self.error, epoch=self.epoch)

    def state(self) -> NetworkState:
        with self._lock:
            return self._snapshot()

    def train(self, patterns: Sequence[TrainingPattern], epochs: int = 0) -> NetworkState:
        """
        Train for a number of epochs.

        Args:
            patterns: Training set
            epochs: Epochs to run; 0 or less means SERVICE_DEFAULT_EPOCHS

        Raises:
            PatternShapeError: No patterns, or a pattern whose sizes don't
                match the input/output layers
        """
        with self._lock:
            self._validate(patterns)

            if epochs <= 0:
                epochs = self.config.SERVICE_DEFAULT_EPOCHS

            _logger.info(f"Training on {len(patterns)} patterns for {epochs} epochs")
            for i in range(epochs):
                self.network.train_epoch(patterns)
                self.epoch = i + 1
                self.error = self.network.mean_error(patterns)

            _logger.info(f"Training done: epoch={self.epoch} error={self.error:.6f}")
            return self._snapshot()

    def reset(self) -> NetworkState:
        """Replace the network with a freshly initialised one."""
        with self._lock:
            self.network = self._build_network()
            self.epoch = 0
            self.error = 0.0
            _logger.info(f"Network reset: layers={self.network.layer_sizes}")
            return self._snapshot()

    def _validate(self, patterns: Sequence[TrainingPattern]) -> None:
        if not patterns:
            raise PatternShapeError("No training patterns provided")

        input_size = self.network.input_size
        output_size = self.network.output_size
        for i, pattern in enumerate(patterns):
            if len(pattern.features) != input_size:
                raise PatternShapeError(
                    f"Input size mismatch in pattern {i}. Expected {input_size}, got {len(pattern.features)}"
                )
            if len(pattern.multiple_expectation) != output_size:
                raise PatternShapeError(
                    f"Output size mismatch in pattern {i}. Expected {output_size}, got {len(pattern.multiple_expectation)}"
                )


def _parse_train_request(data: Any) -> Dict[str, Any]:
    """Decode {"patterns": [...], "epochs": n}; raises ValueError/TypeError."""
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    patterns: List[TrainingPattern] = [TrainingPattern.from_dict(p) for p in (data.get('patterns') or [])]
    epochs = int(data.get('epochs') or 0)
    return {'patterns': patterns, 'epochs': epochs}


def create_app(service: Optional[NetworkService] = None) -> Flask:
    """
    Build the Flask app for a service instance.

    Args:
        service: Network owner (a default one is created if omitted)
    """
    service = service or NetworkService()
    app = Flask(__name__)
    app.config['NETWORK_SERVICE'] = service

    @app.route('/api/network/state', methods=['GET'])
    def api_state():
        return jsonify(service.state().to_dict())

    @app.route('/api/network/train', methods=['POST'])
    def api_train():
        try:
            body = _parse_train_request(request.get_json(silent=True))
            state = service.train(body['patterns'], body['epochs'])
        except PatternShapeError as e:
            _logger.warning(f"Rejected train request: {e}")
            return str(e), 400
        except (ValueError, TypeError, AttributeError) as e:
            _logger.warning(f"Malformed train request: {e}")
            return f"Malformed request: {e}", 400
        return jsonify(state.to_dict())

    @app.route('/api/network/reset', methods=['POST'])
    def api_reset():
        return jsonify(service.reset().to_dict())

    return app


def run_service(config: Optional[Config] = None, host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Serve until interrupted (blocking)."""
    config = config or Config()
    host = host or config.SERVICE_HOST
    port = port or config.SERVICE_PORT

    # Request lines are noise next to our own logs
    logging.getLogger('werkzeug').setLevel(logging.WARNING)

    app = create_app(NetworkService(config))
    _logger.info(f"Network service running at http://{host}:{port} (layers={config.SERVICE_LAYER_SIZES})")
    app.run(host=host, port=port, debug=False, use_reloader=False, threaded=True)
