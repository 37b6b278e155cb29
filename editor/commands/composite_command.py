# file: editor/commands/composite_command.py

from typing import Iterable, Tuple

from editor.commands.base_command import BaseCommand


class CompositeCommand(BaseCommand):
    """
    Groups several commands into a single undo entry.
    Used by CommandHistory for batch operations.
    """
    type = "Composite"

    def __init__(self, commands: Iterable[BaseCommand], description: str):
        self.commands: Tuple[BaseCommand, ...] = tuple(commands)
        timestamp = self.commands[0].timestamp if self.commands else None
        super().__init__(description, timestamp)

    def execute(self):
        for command in self.commands:
            command.execute()

    def undo(self):
        # Undo in reverse order
        for command in reversed(self.commands):
            command.undo()

    def __len__(self) -> int:
        return len(self.commands)
