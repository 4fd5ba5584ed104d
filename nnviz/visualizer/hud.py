"""
Status HUD (Heads-Up Display)
=============================

Side-panel text block showing what the visualizer currently knows about the
remote network: epoch, error, topology, connection health and whether a
training command is in flight.
"""

import time
from typing import List, Optional, Tuple

import pygame

from config import Config
from nnviz.network.models import NetworkState
from .encoder import VisualEncoder, Color


class StatusHUD:
    """
    Network status overlay for the control panel.

    Displays:
    - Epoch and error ("0" / "0.0000" before the first training run)
    - Layer sizes of the current snapshot
    - Training indicator
    - Last request error, or time since the last update
    - Epochs that the next train command will use
    """

    LEGEND = [
        "T train   R reset   B bias",
        "A add   Del remove   Enter edit",
        "+/- epochs   Q quit",
    ]

    def __init__(self, config: Config, encoder: Optional[VisualEncoder] = None):
        """
        Initialize the HUD.

        Args:
            config: Configuration object
            encoder: Value formatter (shares the canvas label policy)
        """
        self.config = config
        self.encoder = encoder or VisualEncoder(config)

        # Fonts
        self._font_small = pygame.font.Font(None, 20)
        self._font_medium = pygame.font.Font(None, 24)
        self._font_large = pygame.font.Font(None, 30)

        # Colors
        self.text_color = (220, 220, 220)
        self.text_dim = (150, 150, 150)
        self.accent_color = (52, 152, 219)  # Blue
        self.good_color = (46, 204, 113)  # Green
        self.warn_color = (241, 196, 15)  # Yellow
        self.error_color = (231, 76, 60)  # Red

        self.line_height = 22

    def status_lines(
        self,
        state: Optional[NetworkState],
        training: bool,
        epochs: int,
        last_error: Optional[str] = None,
        last_update_time: float = 0.0,
        now: Optional[float] = None
    ) -> List[Tuple[str, Color]]:
        """
        Build the HUD text.

        Args:
            state: Current snapshot (None before the first response)
            training: Whether train/reset is in flight
            epochs: Epochs for the next train command
            last_error: Message of the most recent failed request
            last_update_time: time.time() of the last replacement
            now: Current time (defaults to time.time())
        """
        epoch = state.epoch if state is not None and state.epoch is not None else 0
        error = state.error if state is not None else None

        lines: List[Tuple[str, Color]] = [
            (f"Epoch: {epoch:,}", self.text_color),
            (f"Error: {self.encoder.format_value(error, 4)}", self.text_color),
        ]

        if state is None:
            lines.append(("Layers: -", self.text_dim))
        else:
            shape = " x ".join(str(n) for n in state.layer_sizes) or "empty"
            lines.append((f"Layers: {shape}", self.text_dim))

        lines.append((f"Next train: {epochs:,} epochs", self.text_dim))

        if training:
            lines.append(("Training...", self.warn_color))

        if last_error:
            lines.append((f"Offline: {last_error}", self.error_color))
        elif last_update_time > 0:
            age = (now if now is not None else time.time()) - last_update_time
            lines.append((f"Updated {age:.0f}s ago", self.good_color))
        else:
            lines.append(("Waiting for service...", self.text_dim))

        return lines

    def render(
        self,
        surface: pygame.Surface,
        x: int,
        y: int,
        width: int,
        state: Optional[NetworkState],
        training: bool,
        epochs: int,
        last_error: Optional[str] = None,
        last_update_time: float = 0.0
    ) -> int:
        """
        Render the status block.

        Returns:
            y coordinate just below the block
        """
        title = self._font_large.render("Network", True, self.accent_color)
        surface.blit(title, (x, y))
        y += 34

        for text, color in self.status_lines(state, training, epochs, last_error, last_update_time):
            text_surface = self._font_small.render(self._fit(text, width), True, color)
            surface.blit(text_surface, (x, y))
            y += self.line_height

        return y

    def _fit(self, text: str, width: int) -> str:
        """Truncate text with an ellipsis so it fits the panel width."""
        if self._font_small.size(text)[0] <= width:
            return text
        while text and self._font_small.size(text + "...")[0] > width:
            text = text[:-1]
        return text + "..."

    @property
    def legend_height(self) -> int:
        return len(self.LEGEND) * 18

    def render_legend(self, surface: pygame.Surface, x: int, bottom: int) -> None:
        """Key legend anchored to the bottom of the panel."""
        y = bottom - self.legend_height
        for line in self.LEGEND:
            text_surface = self._font_small.render(line, True, self.text_dim)
            surface.blit(text_surface, (x, y))
            y += 18
