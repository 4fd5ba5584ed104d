"""
Network Renderer
================

Draws a network snapshot onto a pygame surface.

Draw order (later draws cover earlier ones):
    1. Clear to the background color
    2. Every connection, layer by layer starting at layer 1; within a layer,
       target neurons in index order and, for each, its source neurons in
       index order
    3. Every neuron in layer/index order, each followed by its value label
       and (optionally) its bias label

Connections are drawn before neurons so each neuron covers the ends of its
own edges.

A neuron whose weight vector is shorter than the previous layer has no
weight for some of its connections; those connections are skipped and the
rest of the network is still drawn. Extra weights are ignored.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

import pygame
import pygame.gfxdraw

from config import Config
from nnviz.network.models import LayerState
from nnviz.utils.logger import get_logger
from .encoder import VisualEncoder, NeuronStyle, ConnectionStyle, Color
from .layout import Positions, Point

_logger = get_logger(__name__)


@dataclass
class RenderStats:
    """What one render pass drew."""
    connections: int = 0
    neurons: int = 0
    skipped_connections: int = 0
    skipped_neurons: int = 0


class NetworkRenderer:
    """
    Issues the draw calls for one network snapshot.

    Example:
        >>> renderer = NetworkRenderer(config)
        >>> positions = compute_layout(state.layers, 800, 600)
        >>> stats = renderer.render(canvas, state.layers, positions, encoder)
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize the renderer.

        Args:
            config: Configuration object
        """
        self.config = config or Config()

        self.neuron_radius = self.config.NEURON_RADIUS
        self.background = self.config.COLOR_BACKGROUND
        self.text_color = self.config.COLOR_TEXT
        self.border_color = self.config.COLOR_NEURON_BORDER
        self.show_bias = self.config.SHOW_BIAS

        # Font initialization
        pygame.font.init()
        self.font_value = pygame.font.Font(None, 20)
        self.font_bias = pygame.font.Font(None, 16)

    def render(
        self,
        surface: pygame.Surface,
        layers: Sequence[LayerState],
        positions: Positions,
        encoder: VisualEncoder
    ) -> RenderStats:
        """
        Render the network.

        Args:
            surface: Pygame surface to draw on (the canvas)
            layers: Layers of the snapshot being drawn
            positions: Output of compute_layout() for the same layers
            encoder: Visual encoding policy

        Returns:
            Counts of drawn and skipped elements
        """
        stats = RenderStats()

        self._clear(surface)
        self._draw_connections(surface, layers, positions, encoder, stats)
        self._draw_neurons(surface, layers, positions, encoder, stats)

        if stats.skipped_connections or stats.skipped_neurons:
            _logger.debug(
                f"Render skipped {stats.skipped_connections} connections, "
                f"{stats.skipped_neurons} neurons"
            )
        return stats

    def _clear(self, surface: pygame.Surface) -> None:
        surface.fill(self.background)

    def _draw_connections(
        self,
        surface: pygame.Surface,
        layers: Sequence[LayerState],
        positions: Positions,
        encoder: VisualEncoder,
        stats: RenderStats
    ) -> None:
        """Draw every incoming edge of layers 1..n."""
        for i in range(1, len(layers)):
            prev_count = len(layers[i - 1].neurons)

            for j, neuron in enumerate(layers[i].neurons):
                weights = neuron.weights
                for k in range(prev_count):
                    if k >= len(weights):
                        stats.skipped_connections += 1
                        continue

                    endpoints = positions.connection(i, k, j)
                    if endpoints is None:
                        stats.skipped_connections += 1
                        continue

                    style = encoder.connection_style(weights[k])
                    self._draw_connection(surface, endpoints[0], endpoints[1], style)
                    stats.connections += 1

                if len(weights) != prev_count:
                    _logger.debug(
                        f"Neuron {i}:{j} has {len(weights)} weights for "
                        f"{prev_count} inputs"
                    )

    def _draw_neurons(
        self,
        surface: pygame.Surface,
        layers: Sequence[LayerState],
        positions: Positions,
        encoder: VisualEncoder,
        stats: RenderStats
    ) -> None:
        """Draw neuron bodies and their labels."""
        for i, layer in enumerate(layers):
            for j, neuron in enumerate(layer.neurons):
                pos = positions.neuron(i, j)
                if pos is None:
                    stats.skipped_neurons += 1
                    continue

                style = encoder.neuron_style(neuron.value)
                self._draw_neuron(surface, pos, style)
                self._draw_label(surface, style.label, pos, self.font_value)

                if self.show_bias:
                    bias_pos = (pos[0], pos[1] + self.neuron_radius + 8)
                    self._draw_label(surface, encoder.bias_label(neuron.bias), bias_pos, self.font_bias)

                stats.neurons += 1

    def _draw_connection(
        self,
        surface: pygame.Surface,
        start: Point,
        end: Point,
        style: ConnectionStyle
    ) -> None:
        """Straight line between two neuron centers."""
        x1, y1 = int(start[0]), int(start[1])
        x2, y2 = int(end[0]), int(end[1])

        if style.width <= 1:
            pygame.draw.aaline(surface, style.color, (x1, y1), (x2, y2))
        else:
            pygame.draw.line(surface, style.color, (x1, y1), (x2, y2), style.width)

    def _draw_neuron(self, surface: pygame.Surface, center: Point, style: NeuronStyle) -> None:
        """Filled circle with an anti-aliased outline."""
        x, y = int(center[0]), int(center[1])
        r = max(1, int(self.neuron_radius))

        pygame.gfxdraw.filled_circle(surface, x, y, r, style.fill)
        pygame.gfxdraw.aacircle(surface, x, y, r, self.border_color)

    def _draw_label(
        self,
        surface: pygame.Surface,
        text: str,
        center: Point,
        font: pygame.font.Font,
        color: Optional[Color] = None
    ) -> None:
        text_surface = font.render(text, True, color or self.text_color)
        text_rect = text_surface.get_rect(center=(int(center[0]), int(center[1])))
        surface.blit(text_surface, text_rect)
