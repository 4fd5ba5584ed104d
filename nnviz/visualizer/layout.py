"""
Network Layout
==============

Maps a network topology onto canvas coordinates.

    x: the canvas width is cut into (layer_count + 1) equal segments and
       layer i sits on boundary i + 1.
    y: the canvas height is cut into (max_neurons + 1) equal segments
       (neuron_spacing). Every layer uses that same spacing and is centered
       on the canvas midline, so a sparse layer sits in the middle of the
       tallest one.
       Layers come out half a spacing higher than a plain
       (height - n * spacing) / 2 centering would put them.

Connections need no layout of their own: an edge runs from neuron
(i - 1, k) to neuron (i, j).

compute_layout() is pure and deterministic; resizing the canvas only
means calling it again.
"""

from dataclasses import dataclass, field
from typing import List, Tuple, Optional, Sequence

from nnviz.network.models import LayerState

Point = Tuple[float, float]


@dataclass
class Positions:
    """Neuron centers for one canvas size."""
    width: float
    height: float
    neuron_spacing: float = 0.0
    layer_x: List[float] = field(default_factory=list)
    neurons: List[List[Point]] = field(default_factory=list)

    def neuron(self, layer_idx: int, neuron_idx: int) -> Optional[Point]:
        """Center of a neuron, or None if there is no such position."""
        if not 0 <= layer_idx < len(self.neurons):
            return None
        layer = self.neurons[layer_idx]
        if not 0 <= neuron_idx < len(layer):
            return None
        return layer[neuron_idx]

    def connection(self, layer_idx: int, from_idx: int, to_idx: int) -> Optional[Tuple[Point, Point]]:
        """
        Endpoints of the edge from neuron from_idx in layer (layer_idx - 1)
        to neuron to_idx in layer layer_idx.
        """
        start = self.neuron(layer_idx - 1, from_idx) if layer_idx > 0 else None
        end = self.neuron(layer_idx, to_idx)
        if start is None or end is None:
            return None
        return start, end

    @property
    def layer_count(self) -> int:
        return len(self.neurons)


def compute_layout(layers: Sequence[LayerState], width: float, height: float) -> Positions:
    """
    Calculate the position of each layer and its neurons.

    Args:
        layers: Network layers, input first
        width: Canvas width
        height: Canvas height

    Returns:
        Positions with one (x, y) per neuron, in stored index order
    """
    num_layers = len(layers)
    if num_layers == 0:
        return Positions(width=width, height=height)

    layer_spacing = width / (num_layers + 1)

    # Guard: a network of empty layers still gets a finite spacing
    max_neurons = max(max(len(layer.neurons) for layer in layers), 1)
    neuron_spacing = height / (max_neurons + 1)

    positions = Positions(width=width, height=height, neuron_spacing=neuron_spacing)

    for i, layer in enumerate(layers):
        layer_x = layer_spacing * (i + 1)
        num_neurons = len(layer.neurons)

        # Shift so the block of (num_neurons + 1) segments is centered
        offset = (height - (num_neurons + 1) * neuron_spacing) / 2

        neuron_positions = [
            (layer_x, neuron_spacing * (j + 1) + offset)
            for j in range(num_neurons)
        ]

        positions.layer_x.append(layer_x)
        positions.neurons.append(neuron_positions)

    return positions
