"""
Tests for training pattern editing.

Tests cover:
- Text format parsing and formatting
- PatternList add/remove/select and loading from JSON
- PatternPanel inline editing and input handling
"""

import json

import pygame
import pytest

from nnviz.network.models import TrainingPattern
from nnviz.visualizer.patterns import (
    PatternList, PatternPanel, parse_pattern, format_pattern
)
from tests.fakes import make_state


XOR = [
    {'features': [0, 0], 'multipleExpectation': [0]},
    {'features': [0, 1], 'multipleExpectation': [1]},
    {'features': [1, 0], 'multipleExpectation': [1]},
    {'features': [1, 1], 'multipleExpectation': [0]},
]


def key(k):
    return pygame.event.Event(pygame.KEYDOWN, key=k, mod=0, unicode='', scancode=0)


class TestPatternText:
    """Tests for parse_pattern / format_pattern."""

    def test_parse_spaces(self):
        pattern = parse_pattern("0 1 -> 1")
        assert pattern.features == [0.0, 1.0]
        assert pattern.multiple_expectation == [1.0]

    def test_parse_commas(self):
        pattern = parse_pattern("0.5, 0.25 -> 1, 0")
        assert pattern.features == [0.5, 0.25]
        assert pattern.multiple_expectation == [1.0, 0.0]

    @pytest.mark.parametrize("text", [
        "0 1 1",
        " -> 1",
        "0 1 -> ",
        "0 x -> 1",
    ])
    def test_parse_errors(self, text):
        """Malformed text raises ValueError."""
        with pytest.raises(ValueError):
            parse_pattern(text)

    def test_format(self):
        """Whole numbers print without decimals."""
        assert format_pattern(TrainingPattern([0.0, 1.0], [1.0])) == "0 1 -> 1"
        assert format_pattern(TrainingPattern([0.5], [0.25])) == "0.5 -> 0.25"


class TestPatternList:
    """Tests for PatternList."""

    def test_from_dicts_selects_first(self):
        patterns = PatternList.from_dicts(XOR)
        assert len(patterns) == 4
        assert patterns.selected == 0

    def test_empty_has_no_selection(self):
        assert PatternList().selected is None

    def test_add_sized_to_network(self):
        """New patterns match the network's input and output sizes."""
        patterns = PatternList()
        added = patterns.add(state=make_state([3, 5, 2]))
        assert added.features == [0.0, 0.0, 0.0]
        assert added.multiple_expectation == [0.0, 0.0]
        assert patterns.selected == 0

    def test_add_copies_last(self):
        """Without a network the last pattern is duplicated."""
        patterns = PatternList.from_dicts(XOR)
        added = patterns.add()
        assert added == patterns[3]
        assert added is not patterns[3]
        assert patterns.selected == 4

    def test_add_default(self):
        """An empty list without a network gets 0 0 -> 0."""
        patterns = PatternList()
        assert format_pattern(patterns.add()) == "0 0 -> 0"

    def test_remove_selected(self):
        """Removing keeps a valid selection."""
        patterns = PatternList.from_dicts(XOR)
        patterns.select(3)
        removed = patterns.remove()
        assert removed.features == [1.0, 1.0]
        assert len(patterns) == 3
        assert patterns.selected == 2

    def test_remove_last_clears_selection(self):
        patterns = PatternList([TrainingPattern([0.0], [0.0])])
        patterns.remove()
        assert len(patterns) == 0
        assert patterns.selected is None
        assert patterns.remove() is None

    def test_select_clamped(self):
        patterns = PatternList.from_dicts(XOR)
        patterns.select(99)
        assert patterns.selected == 3
        patterns.select(-4)
        assert patterns.selected == 0

    def test_to_payload(self):
        patterns = PatternList.from_dicts(XOR[:1])
        assert patterns.to_payload() == [{'features': [0.0, 0.0], 'multipleExpectation': [0.0]}]

    def test_load_list(self, tmp_path):
        """A plain JSON list loads."""
        path = tmp_path / "xor.json"
        path.write_text(json.dumps(XOR))
        assert len(PatternList.load(path)) == 4

    def test_load_object(self, tmp_path):
        """A {"patterns": [...]} object loads."""
        path = tmp_path / "xor.json"
        path.write_text(json.dumps({'patterns': XOR, 'epochs': 10}))
        assert len(PatternList.load(path)) == 4

    def test_load_invalid(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps("nope"))
        with pytest.raises(ValueError):
            PatternList.load(path)


class TestPatternPanel:
    """Tests for PatternPanel editing."""

    @pytest.fixture
    def panel(self):
        return PatternPanel(PatternList.from_dicts(XOR), 0, 0, 280, 200)

    def test_edit_and_commit(self, panel):
        """Committed text replaces the selected pattern."""
        assert panel.begin_edit()
        assert panel.buffer == "0 0 -> 0"
        panel.buffer = "0.5 0.5 -> 1"
        assert panel.commit_edit()
        assert panel.editing is None
        assert panel.patterns[0].features == [0.5, 0.5]

    def test_bad_edit_stays_open(self, panel):
        """A parse error keeps the editor open with a message."""
        panel.begin_edit()
        panel.buffer = "garbage"
        assert not panel.commit_edit()
        assert panel.editing == 0
        assert panel.message
        assert panel.patterns[0].features == [0.0, 0.0]

    def test_cancel(self, panel):
        panel.begin_edit()
        panel.buffer = "9 9 -> 9"
        panel.cancel_edit()
        assert panel.editing is None
        assert panel.patterns[0].features == [0.0, 0.0]

    def test_typing_consumes_keys(self, panel):
        """Shortcut keys typed while editing don't leak out."""
        panel.begin_edit()
        assert panel.handle_event(key(pygame.K_t))
        text = pygame.event.Event(pygame.TEXTINPUT, text='7')
        assert panel.handle_event(text)
        assert panel.buffer.endswith('7')
        assert panel.handle_event(key(pygame.K_BACKSPACE))
        assert panel.buffer == "0 0 -> 0"
        panel.cancel_edit()

    def test_enter_begins_and_commits(self, panel):
        assert panel.handle_event(key(pygame.K_RETURN))
        assert panel.editing == 0
        assert panel.handle_event(key(pygame.K_RETURN))
        assert panel.editing is None

    def test_arrow_keys_move_selection(self, panel):
        assert panel.handle_event(key(pygame.K_DOWN))
        assert panel.patterns.selected == 1
        assert panel.handle_event(key(pygame.K_UP))
        assert panel.patterns.selected == 0

    def test_other_keys_pass_through(self, panel):
        """Shortcuts reach the app when not editing."""
        assert not panel.handle_event(key(pygame.K_t))

    def test_click_selects_row(self, panel):
        y = panel.rect.y + panel.header_height + panel.row_height * 2 + 1
        event = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(10, y))
        assert panel.handle_event(event)
        assert panel.patterns.selected == 2

    def test_render(self, panel):
        panel.begin_edit()
        panel.render(pygame.Surface((300, 220)))
        panel.cancel_edit()

    def test_click_consumed_while_editing(self, panel):
        """Clicks elsewhere can't act on the list until the edit closes."""
        panel.patterns.select(3)
        panel.begin_edit()
        event = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(900, 900))
        assert panel.handle_event(event)
        assert panel.editing == 3
        panel.cancel_edit()

    def test_commit_after_row_removed(self, panel):
        """Committing an edit whose row is gone drops it instead of raising."""
        panel.patterns.select(3)
        panel.begin_edit()
        panel.buffer = "1 1 -> 1"
        panel.patterns.remove()

        assert not panel.commit_edit()
        assert panel.editing is None
        assert len(panel.patterns) == 3
        assert [p.multiple_expectation for p in panel.patterns] == [[0.0], [1.0], [1.0]]
