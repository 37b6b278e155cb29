# file: tests/test_text_edit_command.py

import pytest
from unittest.mock import MagicMock

from editor.commands.command_history import CommandHistory
from editor.commands.text_edit_command import TextEditCommand, TEXT_CHANGED, COALESCE_WINDOW_MS


class FakeTextArea:
    def __init__(self, value=""):
        self.value = value
        self.attached = True

    def set_text(self, text):
        if not self.attached:
            return False
        self.value = text
        return True


@pytest.fixture
def textarea():
    return FakeTextArea("void main() {}")


@pytest.fixture
def make_edit(textarea, mock_event_bus):
    def _make(old_text, new_text, editor_id="shader-editor", timestamp=None, **kwargs):
        return TextEditCommand(
            editor_id=editor_id,
            old_text=old_text,
            new_text=new_text,
            set_text=textarea.set_text,
            event_bus=mock_event_bus,
            timestamp=timestamp,
            **kwargs,
        )
    return _make


def test_execute_and_undo_swap_text(make_edit, textarea, mock_event_bus):
    cmd = make_edit("void main() {}", "void main() { discard; }")

    cmd.execute()
    assert textarea.value == "void main() { discard; }"
    mock_event_bus.emit.assert_called_with(
        TEXT_CHANGED, {"editor_id": "shader-editor", "text": "void main() { discard; }"}
    )

    cmd.undo()
    assert textarea.value == "void main() {}"
    mock_event_bus.emit.assert_called_with(
        TEXT_CHANGED, {"editor_id": "shader-editor", "text": "void main() {}"}
    )

def test_detached_editor_emits_nothing(make_edit, textarea, mock_event_bus):
    textarea.attached = False

    make_edit("a", "b").execute()

    mock_event_bus.emit.assert_not_called()

def test_default_and_custom_description(make_edit):
    assert make_edit("a", "b").description == "Edit text"
    assert make_edit("a", "b", description="Edit shader").description == "Edit shader"

def test_merge_rules(make_edit, make_command):
    first = make_edit("a", "ab", timestamp=1000)

    assert first.can_merge_with(make_edit("ab", "abc", timestamp=1000 + COALESCE_WINDOW_MS - 1))
    assert not first.can_merge_with(make_edit("ab", "abc", timestamp=1000 + COALESCE_WINDOW_MS))
    assert not first.can_merge_with(make_edit("ab", "abc", editor_id="json-editor", timestamp=1001))
    assert not first.can_merge_with(make_command())

def test_merge_keeps_original_text_and_description(make_edit):
    first = make_edit("a", "ab", timestamp=1000, description="Edit shader")
    second = make_edit("ab", "abc", timestamp=1200)

    merged = first.merge_with(second)

    assert (merged.old_text, merged.new_text) == ("a", "abc")
    assert merged.description == "Edit shader"
    assert merged.timestamp == 1200

def test_typing_burst_is_one_undo_step(make_edit, textarea):
    history = CommandHistory(MagicMock(), max_stack_size=10)
    text = textarea.value
    for i, char in enumerate("abc"):
        history.execute(make_edit(text, text + char, timestamp=1000 + i * 100))
        text += char

    assert history.get_undo_stack_size() == 1
    history.undo()
    assert textarea.value == "void main() {}"
