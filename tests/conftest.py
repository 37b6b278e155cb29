# file: tests/conftest.py

import pytest
from unittest.mock import MagicMock, patch

from editor.commands.base_command import BaseCommand, MergeableCommand
from editor.commands.command_history import (
    CommandHistory,
    COMMAND_EXECUTED,
    COMMAND_UNDONE,
    COMMAND_REDONE,
    STACK_CHANGED,
)
from editor.event_bus import EventBus

# --- Test Commands ---

class RecordingCommand(BaseCommand):
    """Counts its calls and, optionally, appends them to a shared call log."""
    type = "TestCommand"

    def __init__(self, description="Test command", timestamp=None, call_log=None):
        super().__init__(description, timestamp)
        self.execute_calls = 0
        self.undo_calls = 0
        self.call_log = call_log

    def execute(self):
        self.execute_calls += 1
        if self.call_log is not None:
            self.call_log.append(("execute", self.description))

    def undo(self):
        self.undo_calls += 1
        if self.call_log is not None:
            self.call_log.append(("undo", self.description))


class RecordingMergeableCommand(RecordingCommand, MergeableCommand):
    """Coalesces like a property edit: same entity and property within 300 ms."""
    type = "PropertyChange"

    def __init__(self, entity_id, property, old_value, new_value, timestamp=None):
        super().__init__(f"Change {property}", timestamp)
        self.entity_id = entity_id
        self.property = property
        self.old_value = old_value
        self.new_value = new_value

    def can_merge_with(self, other):
        return (
            isinstance(other, RecordingMergeableCommand)
            and other.entity_id == self.entity_id
            and other.property == self.property
            and other.timestamp - self.timestamp < 300
        )

    def merge_with(self, other):
        return RecordingMergeableCommand(
            self.entity_id, self.property, self.old_value, other.new_value, other.timestamp
        )

# --- Fixtures ---

@pytest.fixture
def make_command():
    """Factory for RecordingCommand instances."""
    def _make(description="Test command", timestamp=None, call_log=None):
        return RecordingCommand(description, timestamp, call_log)
    return _make


@pytest.fixture
def make_mergeable():
    """Factory for RecordingMergeableCommand instances."""
    def _make(entity_id, property, old_value, new_value, timestamp=None):
        return RecordingMergeableCommand(entity_id, property, old_value, new_value, timestamp)
    return _make


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def mock_event_bus():
    """An event bus double that records emit() calls."""
    return MagicMock(spec=EventBus)


@pytest.fixture
def history(event_bus):
    """A CommandHistory bound to a real EventBus, bounded to 10 entries."""
    return CommandHistory(event_bus, max_stack_size=10)


@pytest.fixture
def emitted(event_bus):
    """Records every history event as a (topic, payload) tuple, in order."""
    events = []
    for topic in (COMMAND_EXECUTED, COMMAND_UNDONE, COMMAND_REDONE, STACK_CHANGED):
        event_bus.on(topic, lambda payload, topic=topic: events.append((topic, payload)))
    return events


@pytest.fixture
def temp_config_dir(tmp_path):
    """Creates a temporary directory for config files."""
    return tmp_path

# --- Global Mock for psutil.Process ---
# MemoryLogFilter reads the process RSS; tests get a fixed 100MB instead
class MockProcess:
    def memory_info(self):
        return MagicMock(rss=100 * 1024 * 1024)

mock_psutil_process = MockProcess()

@pytest.fixture(scope="session", autouse=True)
def mock_psutil_process_globally():
    """Globally patches psutil.Process for all tests."""
    with patch('psutil.Process', return_value=mock_psutil_process):
        yield
