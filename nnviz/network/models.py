"""
Network State Model
===================

Plain data types mirroring the network service's JSON payloads.

    NetworkState
        layers: [LayerState]          input -> output
        error:  float | None          last training loss
        epoch:  int | None            epoch counter

    LayerState
        neurons: [NeuronState]        index order is the only identity

    NeuronState
        value:   float                activation, expected in [0, 1]
        bias:    float
        weights: [float]              one per neuron of the previous layer

    TrainingPattern
        features:             [float] network input
        multiple_expectation: [float] target output ("multipleExpectation")

The visualizer is a consumer of these payloads, not a validator: parsing
fills in missing fields with neutral defaults and never checks that weight
vectors line up with the previous layer. Shape problems are the renderer's
to tolerate.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, Sequence


def _as_float(value: Any, default: float = 0.0) -> float:
    """Convert a JSON number to float, mapping null/missing to a default."""
    if value is None:
        return default
    return float(value)


def _as_list(value: Any) -> List[Any]:
    """Treat null/missing arrays as empty (Go encodes nil slices as null)."""
    if value is None:
        return []
    return list(value)


@dataclass
class NeuronState:
    """A single neuron: activation, bias and incoming weights."""
    value: float = 0.0
    bias: float = 0.0
    weights: List[float] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NeuronState':
        return cls(
            value=_as_float(data.get('value')),
            bias=_as_float(data.get('bias')),
            weights=[_as_float(w) for w in _as_list(data.get('weights'))],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'weights': list(self.weights),
            'value': self.value,
            'bias': self.bias,
        }


@dataclass
class LayerState:
    """An ordered group of neurons at one depth of the network."""
    neurons: List[NeuronState] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LayerState':
        return cls(neurons=[NeuronState.from_dict(n) for n in _as_list(data.get('neurons'))])

    def to_dict(self) -> Dict[str, Any]:
        return {'neurons': [n.to_dict() for n in self.neurons]}

    def __len__(self) -> int:
        return len(self.neurons)


@dataclass
class NetworkState:
    """
    Server-authoritative snapshot of the whole network.

    Replaced wholesale on every successful poll or command; never edited
    field by field.
    """
    layers: List[LayerState] = field(default_factory=list)
    error: Optional[float] = None
    epoch: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NetworkState':
        """
        Build a snapshot from a decoded JSON body.

        Raises:
            TypeError: If the payload is not a JSON object
            ValueError: If a numeric field holds a non-numeric value
        """
        if not isinstance(data, dict):
            raise TypeError(f"Expected a JSON object, got {type(data).__name__}")

        error = data.get('error')
        epoch = data.get('epoch')
        return cls(
            layers=[LayerState.from_dict(layer) for layer in _as_list(data.get('layers'))],
            error=None if error is None else float(error),
            epoch=None if epoch is None else int(epoch),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'layers': [layer.to_dict() for layer in self.layers]}
        if self.error is not None:
            data['error'] = self.error
        if self.epoch is not None:
            data['epoch'] = self.epoch
        return data

    @property
    def layer_sizes(self) -> List[int]:
        """Neuron count per layer, input first."""
        return [len(layer.neurons) for layer in self.layers]

    @property
    def input_size(self) -> int:
        return len(self.layers[0].neurons) if self.layers else 0

    @property
    def output_size(self) -> int:
        return len(self.layers[-1].neurons) if self.layers else 0


@dataclass
class TrainingPattern:
    """A (features, expected output) training example."""
    features: List[float] = field(default_factory=list)
    multiple_expectation: List[float] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TrainingPattern':
        return cls(
            features=[float(x) for x in _as_list(data.get('features'))],
            multiple_expectation=[float(x) for x in _as_list(data.get('multipleExpectation'))],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'features': list(self.features),
            'multipleExpectation': list(self.multiple_expectation),
        }

    def copy(self) -> 'TrainingPattern':
        return TrainingPattern(list(self.features), list(self.multiple_expectation))


def patterns_to_payload(patterns: Sequence[TrainingPattern], epochs: int) -> Dict[str, Any]:
    """Request body for POST /api/network/train."""
    return {
        'patterns': [p.to_dict() for p in patterns],
        'epochs': int(epochs),
    }
