"""
Training Patterns
=================

The locally owned list of training patterns and the panel that edits it.

Patterns are only ever sent to the service (by value, with each train
command); nothing the server returns changes them. Editing a pattern does
not touch the displayed network until the next train response arrives.

Text format used by the editor:

    "0 1 -> 1"        features 0, 1; expected output 1
    "0.5, 0.25 -> 1, 0"
"""

import json
from pathlib import Path
from typing import List, Optional, Union, Any

import pygame

from nnviz.network.models import TrainingPattern, NetworkState
from nnviz.utils.logger import get_logger

_logger = get_logger(__name__)

ARROW = '->'


def _format_vector(values: List[float]) -> str:
    return " ".join(f"{v:g}" for v in values)


def _parse_vector(text: str) -> List[float]:
    parts = text.replace(',', ' ').split()
    return [float(p) for p in parts]


def format_pattern(pattern: TrainingPattern) -> str:
    """TrainingPattern -> "f1 f2 -> e1"."""
    return f"{_format_vector(pattern.features)} {ARROW} {_format_vector(pattern.multiple_expectation)}"


def parse_pattern(text: str) -> TrainingPattern:
    """
    Parse "features -> expectation".

    Raises:
        ValueError: If the arrow is missing, a side is empty, or a value
            is not a number
    """
    if ARROW not in text:
        raise ValueError(f"Expected 'features {ARROW} expectation', got {text!r}")
    left, right = text.split(ARROW, 1)
    features = _parse_vector(left)
    expectation = _parse_vector(right)
    if not features or not expectation:
        raise ValueError("Both features and expectation need at least one value")
    return TrainingPattern(features, expectation)


class PatternList:
    """
    Ordered, user-editable list of training patterns with a selection.

    Example:
        >>> patterns = PatternList.from_dicts(config.DEFAULT_PATTERNS)
        >>> patterns.add()
        >>> patterns.remove()          # removes the selected pattern
        >>> dispatcher.train(patterns.items, epochs)
    """

    def __init__(self, patterns: Optional[List[TrainingPattern]] = None):
        self.items: List[TrainingPattern] = list(patterns or [])
        self.selected: Optional[int] = 0 if self.items else None

    @classmethod
    def from_dicts(cls, data: List[dict]) -> 'PatternList':
        return cls([TrainingPattern.from_dict(d) for d in data])

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'PatternList':
        """
        Load patterns from JSON: either a list of
        {"features": [...], "multipleExpectation": [...]} objects or an
        object with a "patterns" list.
        """
        with open(path, 'r', encoding='utf-8') as f:
            data: Any = json.load(f)
        if isinstance(data, dict):
            data = data.get('patterns', [])
        if not isinstance(data, list):
            raise ValueError(f"{path}: expected a list of patterns")
        patterns = cls.from_dicts(data)
        _logger.info(f"Loaded {len(patterns)} patterns from {path}")
        return patterns

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __getitem__(self, index: int) -> TrainingPattern:
        return self.items[index]

    def select(self, index: Optional[int]) -> None:
        if index is None or not self.items:
            self.selected = None
        else:
            self.selected = max(0, min(index, len(self.items) - 1))

    def add(self, pattern: Optional[TrainingPattern] = None, state: Optional[NetworkState] = None) -> TrainingPattern:
        """
        Append a pattern and select it.

        Without an explicit pattern the new one is zeros sized to the current
        network's input/output layers, else a copy of the last pattern, else
        "0 0 -> 0".
        """
        if pattern is None:
            if state is not None and state.layers:
                pattern = TrainingPattern([0.0] * state.input_size, [0.0] * state.output_size)
            elif self.items:
                pattern = self.items[-1].copy()
            else:
                pattern = TrainingPattern([0.0, 0.0], [0.0])
        self.items.append(pattern)
        self.selected = len(self.items) - 1
        return pattern

    def remove(self, index: Optional[int] = None) -> Optional[TrainingPattern]:
        """Remove a pattern (default: the selected one)."""
        if index is None:
            index = self.selected
        if index is None or not 0 <= index < len(self.items):
            return None
        removed = self.items.pop(index)
        self.select(min(index, len(self.items) - 1) if self.items else None)
        return removed

    def replace(self, index: int, pattern: TrainingPattern) -> None:
        self.items[index] = pattern

    def to_payload(self) -> List[dict]:
        return [p.to_dict() for p in self.items]


class PatternPanel:
    """
    Scrollable list view of a PatternList with inline text editing.

    Click a row to select it, Enter to edit it, type the new pattern and
    press Enter again (Escape cancels).
    """

    def __init__(self, patterns: PatternList, x: int, y: int, width: int, height: int):
        self.patterns = patterns
        self.rect = pygame.Rect(x, y, width, height)

        self._font = pygame.font.Font(None, 20)
        self._title_font = pygame.font.Font(None, 24)
        self.row_height = 22
        self.header_height = 26

        self.text_color = (210, 210, 215)
        self.dim_color = (130, 130, 140)
        self.select_color = (50, 70, 110)
        self.edit_color = (30, 30, 40)
        self.error_color = (231, 76, 60)

        self.editing: Optional[int] = None
        self.buffer = ""
        self.message: Optional[str] = None
        self.scroll = 0

    @property
    def visible_rows(self) -> int:
        return max(1, (self.rect.height - self.header_height - self.row_height) // self.row_height)

    def begin_edit(self) -> bool:
        index = self.patterns.selected
        if index is None:
            return False
        self.editing = index
        self.buffer = format_pattern(self.patterns[index])
        self.message = None
        pygame.key.start_text_input()
        return True

    def commit_edit(self) -> bool:
        """Parse the buffer into the edited row. Returns False on a parse error or if the row is gone."""
        if self.editing is None:
            return False
        if not 0 <= self.editing < len(self.patterns):
            _logger.debug(f"Dropping edit of removed pattern {self.editing}")
            self.cancel_edit()
            return False
        try:
            pattern = parse_pattern(self.buffer)
        except ValueError as e:
            self.message = str(e)
            return False
        self.patterns.replace(self.editing, pattern)
        _logger.debug(f"Pattern {self.editing} set to {format_pattern(pattern)}")
        self.cancel_edit()
        return True

    def cancel_edit(self) -> None:
        self.editing = None
        self.buffer = ""
        pygame.key.stop_text_input()

    def handle_event(self, event: pygame.event.Event) -> bool:
        """
        Handle input for the panel.

        Returns:
            True if the event was consumed (keys typed while editing never
            reach the application's shortcuts)
        """
        if self.editing is not None:
            if event.type == pygame.TEXTINPUT:
                self.buffer += event.text
                return True
            if event.type == pygame.KEYDOWN:
                if event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                    self.commit_edit()
                elif event.key == pygame.K_ESCAPE:
                    self.cancel_edit()
                elif event.key == pygame.K_BACKSPACE:
                    self.buffer = self.buffer[:-1]
                return True
            if event.type == pygame.MOUSEBUTTONDOWN:
                # The edited row must stay put until Enter or Escape
                return True
            return False

        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1 and self.rect.collidepoint(event.pos):
            row = (event.pos[1] - self.rect.y - self.header_height) // self.row_height
            if row >= 0 and self.scroll + row < len(self.patterns):
                self.patterns.select(self.scroll + row)
            return True
        if event.type == pygame.MOUSEWHEEL:
            self._scroll_by(-event.y)
            return True
        if event.type == pygame.KEYDOWN:
            if event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                return self.begin_edit()
            if event.key == pygame.K_UP and self.patterns.selected:
                self.patterns.select(self.patterns.selected - 1)
                self.scroll_to_selection()
                return True
            if event.key == pygame.K_DOWN and self.patterns.selected is not None:
                self.patterns.select(self.patterns.selected + 1)
                self.scroll_to_selection()
                return True
        return False

    def _scroll_by(self, rows: int) -> None:
        max_scroll = max(0, len(self.patterns) - self.visible_rows)
        self.scroll = max(0, min(self.scroll + rows, max_scroll))

    def scroll_to_selection(self) -> None:
        selected = self.patterns.selected
        if selected is None:
            return
        if selected < self.scroll:
            self.scroll = selected
        elif selected >= self.scroll + self.visible_rows:
            self.scroll = selected - self.visible_rows + 1

    def render(self, surface: pygame.Surface) -> None:
        title = self._title_font.render(f"Patterns ({len(self.patterns)})", True, self.text_color)
        surface.blit(title, (self.rect.x, self.rect.y))

        y = self.rect.y + self.header_height
        end = min(len(self.patterns), self.scroll + self.visible_rows)
        for index in range(self.scroll, end):
            row_rect = pygame.Rect(self.rect.x, y, self.rect.width, self.row_height)
            if index == self.editing:
                pygame.draw.rect(surface, self.edit_color, row_rect)
                pygame.draw.rect(surface, self.select_color, row_rect, 1)
                text = self.buffer + "_"
            else:
                if index == self.patterns.selected:
                    pygame.draw.rect(surface, self.select_color, row_rect)
                text = format_pattern(self.patterns[index])
            text_surface = self._font.render(f"{index + 1:>2}. {text}", True, self.text_color)
            surface.blit(text_surface, (row_rect.x + 4, row_rect.y + 3))
            y += self.row_height

        if self.message:
            msg = self._font.render(self.message, True, self.error_color)
            surface.blit(msg, (self.rect.x, self.rect.bottom - self.row_height))
        elif not len(self.patterns):
            hint = self._font.render("No patterns - press A to add", True, self.dim_color)
            surface.blit(hint, (self.rect.x, y))
