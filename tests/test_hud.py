"""
Tests for the status HUD and control panel.

Tests cover:
- Epoch/error text, including absent metrics
- Training and connection indicators
- Button clicks, disabled buttons and hover
"""

import pygame
import pytest

from config import Config
from nnviz.visualizer.hud import StatusHUD
from nnviz.visualizer.controls import ControlPanel
from tests.fakes import make_state


@pytest.fixture
def hud():
    return StatusHUD(Config())


def texts(lines):
    return [text for text, _ in lines]


class TestStatusLines:
    """Tests for StatusHUD.status_lines."""

    def test_absent_metrics_show_zero(self, hud):
        """Before any training, epoch and error read as zero."""
        lines = texts(hud.status_lines(None, training=False, epochs=1000))
        assert lines[0] == "Epoch: 0"
        assert lines[1] == "Error: 0.0000"
        assert "Layers: -" in lines
        assert "Waiting for service..." in lines

    def test_snapshot_without_metrics(self, hud):
        """A snapshot with no epoch/error also shows zeros."""
        state = make_state([2, 1])
        lines = texts(hud.status_lines(state, training=False, epochs=1000))
        assert lines[0] == "Epoch: 0"
        assert lines[1] == "Error: 0.0000"

    def test_metrics(self, hud):
        """Epoch uses a thousands separator, error four decimals."""
        state = make_state([2, 4, 1], epoch=1500, error=0.123456)
        lines = texts(hud.status_lines(state, training=False, epochs=200))
        assert lines[0] == "Epoch: 1,500"
        assert lines[1] == "Error: 0.1235"
        assert "Layers: 2 x 4 x 1" in lines
        assert "Next train: 200 epochs" in lines

    def test_training_indicator(self, hud):
        """In-flight training is shown."""
        assert "Training..." in texts(hud.status_lines(None, training=True, epochs=10))
        assert "Training..." not in texts(hud.status_lines(None, training=False, epochs=10))

    def test_error_shown(self, hud):
        """The last request failure is shown."""
        lines = texts(hud.status_lines(None, False, 10, last_error="poll: connection refused"))
        assert "Offline: poll: connection refused" in lines

    def test_update_age(self, hud):
        """Time since the last update is shown in seconds."""
        lines = texts(hud.status_lines(make_state([1]), False, 10, last_update_time=100.0, now=112.0))
        assert "Updated 12s ago" in lines

    def test_render_returns_next_y(self, hud):
        """render() reports where the block ends."""
        surface = pygame.Surface((320, 600))
        end = hud.render(surface, 10, 10, 300, state=None, training=False, epochs=10)
        assert end > 10

    def test_long_text_truncated(self, hud):
        """Text wider than the panel gets an ellipsis."""
        fitted = hud._fit("x" * 500, 100)
        assert fitted.endswith("...")
        assert len(fitted) < 500


def click(pos):
    return pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=pos)


class TestControlPanel:
    """Tests for ControlPanel."""

    def test_click_returns_action(self):
        """Clicking a button returns its action."""
        panel = ControlPanel(0, 0, 300)
        train = panel.buttons[0]
        assert panel.handle_event(click(train.rect.center)) == 'train'

    def test_disabled_button_ignored(self):
        """Disabled buttons don't fire."""
        panel = ControlPanel(0, 0, 300)
        panel.set_enabled('train', False)
        assert not panel.is_enabled('train')
        assert panel.handle_event(click(panel.buttons[0].rect.center)) is None

    def test_click_outside(self):
        """Clicks outside every button return None."""
        panel = ControlPanel(0, 0, 300)
        assert panel.handle_event(click((5, panel.bottom + 50))) is None

    def test_right_click_ignored(self):
        """Only the left button activates."""
        panel = ControlPanel(0, 0, 300)
        event = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=3, pos=panel.buttons[0].rect.center)
        assert panel.handle_event(event) is None

    def test_hover(self):
        """Mouse motion updates hover state."""
        panel = ControlPanel(0, 0, 300)
        event = pygame.event.Event(pygame.MOUSEMOTION, pos=panel.buttons[1].rect.center, rel=(0, 0), buttons=(0, 0, 0))
        panel.handle_event(event)
        assert panel.buttons[1].hovered
        assert not panel.buttons[0].hovered

    def test_grid_layout(self):
        """Buttons fill rows of two; bottom is below the last row."""
        panel = ControlPanel(10, 20, 300)
        first, second, third = panel.buttons[:3]
        assert first.rect.y == second.rect.y
        assert third.rect.y > first.rect.y
        assert third.rect.x == first.rect.x
        assert panel.bottom == panel.buttons[-1].rect.bottom

    def test_render(self):
        """Rendering enabled and disabled buttons works."""
        panel = ControlPanel(0, 0, 300)
        panel.set_enabled('reset', False)
        panel.render(pygame.Surface((320, 300)))


class TestLegend:
    """Tests for the key legend."""

    def test_legend_mentions_commands(self, hud):
        legend = " ".join(hud.LEGEND)
        for word in ("train", "reset", "add", "remove", "edit", "epochs", "quit"):
            assert word in legend

    def test_render_legend(self, hud):
        hud.render_legend(pygame.Surface((320, 600)), 10, 590)
        assert hud.legend_height > 0
