# file: editor/commands/text_edit_command.py

from typing import Callable, Optional

from editor.commands.base_command import BaseCommand, MergeableCommand
from editor.event_bus import EventBus

# Time window for coalescing rapid typing (milliseconds)
COALESCE_WINDOW_MS = 1000

TEXT_CHANGED = "textEditor:changed"


class TextEditCommand(MergeableCommand):
    """
    Swaps the full contents of a text editor (e.g. the shader editor)
    between two snapshots. Keystrokes within COALESCE_WINDOW_MS of each
    other collapse into a single undo entry.
    """
    type = "TextEdit"

    def __init__(
        self,
        editor_id: str,
        old_text: str,
        new_text: str,
        set_text: Callable[[str], bool],
        event_bus: EventBus,
        description: str = "Edit text",
        timestamp: Optional[float] = None,
    ):
        super().__init__(description, timestamp)
        self.editor_id = editor_id
        self.old_text = old_text
        self.new_text = new_text
        # Returns False when the editor widget no longer exists
        self.set_text = set_text
        self.event_bus = event_bus

    def execute(self):
        self._apply(self.new_text)

    def undo(self):
        self._apply(self.old_text)

    def _apply(self, text: str):
        if self.set_text(text):
            self.event_bus.emit(TEXT_CHANGED, {"editor_id": self.editor_id, "text": text})

    def can_merge_with(self, other: BaseCommand) -> bool:
        if not isinstance(other, TextEditCommand):
            return False

        return (
            other.editor_id == self.editor_id
            and other.timestamp - self.timestamp < COALESCE_WINDOW_MS
        )

    def merge_with(self, other: BaseCommand) -> BaseCommand:
        if not isinstance(other, TextEditCommand):
            return other

        return TextEditCommand(
            editor_id=self.editor_id,
            old_text=self.old_text,
            new_text=other.new_text,
            set_text=self.set_text,
            event_bus=self.event_bus,
            description=self.description,
            timestamp=other.timestamp,
        )
