"""
Reference Multi-Layer Perceptron
================================

The small fully-connected sigmoid network served by the reference network
service. The visualizer never imports this module; it only sees the
snapshots the service returns.

Theory:
    Each neuron computes  value = sigmoid(bias + sum_k w_k * prev_value_k)
    Training is online gradient descent on the squared error
        E = 1/2 * sum_o (target_o - value_o)^2
    which, for sigmoid units, is the classic delta rule:
        delta_o = (target_o - value_o) * value_o * (1 - value_o)
        w      += learning_rate * delta * prev_value

Key Features:
    - Arbitrary layer sizes (input layer first)
    - Weights and biases initialised uniformly in [-1, 1)
    - Per-neuron activations retained after every forward pass so a
      snapshot shows what the network last "saw"
"""

from typing import List, Optional, Sequence

import torch
import torch.nn as nn

from nnviz.network.models import LayerState, NeuronState, TrainingPattern


class MultiLayerNetwork(nn.Module):
    """
    Sigmoid MLP trained one pattern at a time.

    Example:
        >>> net = MultiLayerNetwork([2, 4, 1], learning_rate=0.5, seed=0)
        >>> net.execute([0.0, 1.0])
        [0.53...]
        >>> net.train_epoch(patterns)
        >>> layers = net.snapshot()
    """

    def __init__(self, layer_sizes: Sequence[int], learning_rate: float = 0.5, seed: Optional[int] = None):
        """
        Initialize the network.

        Args:
            layer_sizes: Neurons per layer, input first (at least two layers)
            learning_rate: Step size for gradient descent
            seed: Seed for weight initialisation (None for random)
        """
        super().__init__()

        if len(layer_sizes) < 2:
            raise ValueError("Need at least an input and an output layer")

        self.layer_sizes = list(layer_sizes)
        self.learning_rate = learning_rate

        generator = torch.Generator()
        if seed is not None:
            generator.manual_seed(seed)
        else:
            generator.seed()

        self.layers = nn.ModuleList()
        self._build_network()
        self._init_weights(generator)

        # Last activation of every neuron, input layer included
        self.values: List[torch.Tensor] = [torch.zeros(n, dtype=torch.float64) for n in self.layer_sizes]

        self.optimizer = torch.optim.SGD(self.parameters(), lr=learning_rate)

    def _build_network(self) -> None:
        """Construct one Linear per non-input layer."""
        for i in range(1, len(self.layer_sizes)):
            layer = nn.Linear(self.layer_sizes[i - 1], self.layer_sizes[i]).double()
            self.layers.append(layer)

    def _init_weights(self, generator: torch.Generator) -> None:
        """Uniform [-1, 1) for every weight and bias."""
        with torch.no_grad():
            for layer in self.layers:
                layer.weight.copy_(torch.rand(layer.weight.shape, generator=generator, dtype=torch.float64) * 2 - 1)
                layer.bias.copy_(torch.rand(layer.bias.shape, generator=generator, dtype=torch.float64) * 2 - 1)

    @property
    def input_size(self) -> int:
        return self.layer_sizes[0]

    @property
    def output_size(self) -> int:
        return self.layer_sizes[-1]

    def forward(self, features: torch.Tensor) -> torch.Tensor:
        """
        Forward pass that records every layer's activations.

        Args:
            features: Input tensor of shape (input_size,)

        Returns:
            Output activations of shape (output_size,)
        """
        x = features
        activations = [features.detach().clone()]
        for layer in self.layers:
            x = torch.sigmoid(layer(x))
            activations.append(x.detach().clone())
        self.values = activations
        return x

    def execute(self, features: Sequence[float]) -> List[float]:
        """Run one input through the network and return the outputs."""
        with torch.no_grad():
            outputs = self.forward(self._tensor(features))
        return outputs.tolist()

    def train_pattern(self, pattern: TrainingPattern) -> float:
        """
        One gradient step on a single pattern.

        Returns:
            Squared error of this pattern before the update
        """
        outputs = self.forward(self._tensor(pattern.features))
        targets = self._tensor(pattern.multiple_expectation)

        loss = 0.5 * ((targets - outputs) ** 2).sum()

        self.optimizer.zero_grad()
        loss.backward()
        self.optimizer.step()

        return float(loss.item() * 2)

    def train_epoch(self, patterns: Sequence[TrainingPattern]) -> None:
        """One pass over all patterns, in order."""
        for pattern in patterns:
            self.train_pattern(pattern)

    def mean_error(self, patterns: Sequence[TrainingPattern]) -> float:
        """
        Mean over patterns of the summed squared output error.

        Leaves the network's recorded activations at the last pattern.
        """
        if not patterns:
            return 0.0
        total = 0.0
        for pattern in patterns:
            outputs = self.execute(pattern.features)
            total += sum((t - o) ** 2 for t, o in zip(pattern.multiple_expectation, outputs))
        return total / len(patterns)

    def snapshot(self) -> List[LayerState]:
        """Per-neuron weights, bias and last activation for every layer."""
        layers = [LayerState([
            NeuronState(value=float(v), bias=0.0, weights=[])
            for v in self.values[0].tolist()
        ])]

        for layer, values in zip(self.layers, self.values[1:]):
            weights = layer.weight.detach().tolist()
            biases = layer.bias.detach().tolist()
            layers.append(LayerState([
                NeuronState(value=float(v), bias=float(b), weights=[float(w) for w in row])
                for row, b, v in zip(weights, biases, values.tolist())
            ]))

        return layers

    @staticmethod
    def _tensor(values: Sequence[float]) -> torch.Tensor:
        return torch.tensor(list(values), dtype=torch.float64)
