"""
Control Panel
=============

Clickable buttons for the network commands and pattern editing.
"""

import pygame
from typing import Optional, List, Tuple, Dict


class ControlButton:
    """A button in the control panel."""

    def __init__(self, label: str, action: str, width: int = 140, height: int = 36):
        """
        Create a control button.

        Args:
            label: Button text
            action: Action identifier
            width: Button width in pixels
            height: Button height in pixels
        """
        self.label = label
        self.action = action
        self.rect = pygame.Rect(0, 0, width, height)
        self.hovered = False
        self.enabled = True

    def update_position(self, x: int, y: int) -> None:
        """Update button position."""
        self.rect.topleft = (x, y)

    def contains_point(self, pos: Tuple[int, int]) -> bool:
        """Check if point is inside button."""
        return self.rect.collidepoint(pos)

    def render(self, surface: pygame.Surface, font: pygame.font.Font) -> None:
        """Render the button."""
        # Colors
        if not self.enabled:
            bg_color = (32, 32, 38)
            text_color = (110, 110, 110)
            border_color = (55, 55, 60)
        elif self.hovered:
            bg_color = (70, 130, 180)  # Steel blue
            text_color = (255, 255, 255)
            border_color = (100, 160, 210)
        else:
            bg_color = (40, 40, 50)
            text_color = (200, 200, 200)
            border_color = (80, 80, 90)

        pygame.draw.rect(surface, bg_color, self.rect, border_radius=6)
        pygame.draw.rect(surface, border_color, self.rect, 2, border_radius=6)

        # Text (centered)
        text_surface = font.render(self.label, True, text_color)
        text_rect = text_surface.get_rect(center=self.rect.center)
        surface.blit(text_surface, text_rect)


class ControlPanel:
    """
    Grid of command buttons.

    handle_event() returns the action of a clicked, enabled button.
    """

    ACTIONS: List[Tuple[str, str]] = [
        ("Train (T)", "train"),
        ("Reset (R)", "reset"),
        ("Epochs -", "epochs_down"),
        ("Epochs +", "epochs_up"),
        ("Add Pattern (A)", "add_pattern"),
        ("Remove (Del)", "remove_pattern"),
    ]

    def __init__(self, x: int, y: int, width: int, columns: int = 2, spacing: int = 8):
        """
        Initialize the control panel.

        Args:
            x: Left edge of the button grid
            y: Top edge of the button grid
            width: Width available for the grid
            columns: Buttons per row
            spacing: Gap between buttons
        """
        self.x = x
        self.y = y
        self.width = width
        self.columns = columns
        self.spacing = spacing

        self._button_font = pygame.font.Font(None, 22)

        button_width = (width - spacing * (columns - 1)) // columns
        self.buttons: List[ControlButton] = [
            ControlButton(label, action, width=button_width) for label, action in self.ACTIONS
        ]
        self._by_action: Dict[str, ControlButton] = {b.action: b for b in self.buttons}
        self._update_button_positions()

    def _update_button_positions(self) -> None:
        """Lay buttons out row by row."""
        for i, button in enumerate(self.buttons):
            row, col = divmod(i, self.columns)
            button.update_position(
                self.x + col * (button.rect.width + self.spacing),
                self.y + row * (button.rect.height + self.spacing)
            )

    @property
    def bottom(self) -> int:
        """y coordinate just below the last row."""
        return max(b.rect.bottom for b in self.buttons)

    def set_enabled(self, action: str, enabled: bool) -> None:
        self._by_action[action].enabled = enabled

    def is_enabled(self, action: str) -> bool:
        return self._by_action[action].enabled

    def handle_event(self, event: pygame.event.Event) -> Optional[str]:
        """
        Handle mouse input.

        Returns:
            Action name of a clicked enabled button, otherwise None
        """
        if event.type == pygame.MOUSEMOTION:
            for button in self.buttons:
                button.hovered = button.contains_point(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            for button in self.buttons:
                if button.contains_point(event.pos) and button.enabled:
                    return button.action
        return None

    def render(self, surface: pygame.Surface) -> None:
        for button in self.buttons:
            button.render(surface, self._button_font)
