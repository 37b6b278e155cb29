# file: editor/commands/command_history.py

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from editor.commands.base_command import BaseCommand, is_mergeable_command
from editor.commands.composite_command import CompositeCommand
from editor.event_bus import EventBus
from editor.exceptions import ConfigurationError

DEFAULT_MAX_STACK_SIZE = 100

# Topics published on the event bus
COMMAND_EXECUTED = "command:executed"
COMMAND_UNDONE = "command:undone"
COMMAND_REDONE = "command:redone"
STACK_CHANGED = "command:stackChanged"


class CommandHistory:
    """
    Tracks executed commands on bounded undo/redo stacks.

    Supports coalescing of rapid edits (see MergeableCommand) and batches,
    where several commands become a single undo entry. Every change to the
    stacks is announced on the event bus so menus can refresh their
    Undo/Redo labels.

    Misuse (stray end_batch(), nested begin_batch(), undo on an empty
    stack) never raises. Exceptions raised by a command's own execute()
    or undo() are not caught.
    """

    def __init__(self, event_bus: EventBus, max_stack_size: int = DEFAULT_MAX_STACK_SIZE):
        if isinstance(max_stack_size, bool) or not isinstance(max_stack_size, int) or max_stack_size < 1:
            raise ConfigurationError(f"max_stack_size must be a positive integer, got {max_stack_size!r}")
        self.event_bus = event_bus
        self._max_stack_size = max_stack_size
        self.undo_stack: List[BaseCommand] = []
        self.redo_stack: List[BaseCommand] = []
        # None while idle, a list while a batch is open
        self._batch_commands: Optional[List[BaseCommand]] = None
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def max_stack_size(self) -> int:
        return self._max_stack_size

    @property
    def is_batching(self) -> bool:
        return self._batch_commands is not None

    def execute(self, command: BaseCommand):
        """
        Executes a command and records it for undo.

        Outside a batch, the command is merged into the top undo entry when
        that entry accepts it; otherwise it becomes a new entry. The redo
        stack is cleared either way. Inside a batch, the command is executed
        and collected until end_batch().
        """
        if self._batch_commands is not None:
            command.execute()
            self._batch_commands.append(command)
            self.logger.debug(f"Added {command.type} to batch ({len(self._batch_commands)} pending)")
            return

        top = self.undo_stack[-1] if self.undo_stack else None
        if top is not None and is_mergeable_command(top) and top.can_merge_with(command):
            merged = top.merge_with(command)
            command.execute()
            self.undo_stack[-1] = merged
            self.logger.debug(f"Merged {command.type} into top of undo stack")
            entry = merged
        else:
            command.execute()
            self._push(self.undo_stack, command)
            self.logger.debug(f"Pushed {command.type} to undo stack. Size: {len(self.undo_stack)}")
            entry = command

        self.redo_stack.clear()
        self.event_bus.emit(COMMAND_EXECUTED, {"command": entry})
        self._emit_stack_changed()

    def undo(self) -> bool:
        """
        Undoes the most recent entry and moves it to the redo stack.

        Returns:
            bool: False if there was nothing to undo.
        """
        if not self.undo_stack:
            return False

        command = self.undo_stack.pop()
        self.logger.info(f"Undoing: {command.description}")
        command.undo()
        self._push(self.redo_stack, command)

        self.event_bus.emit(COMMAND_UNDONE, {"command": command})
        self._emit_stack_changed()
        return True

    def redo(self) -> bool:
        """
        Re-executes the most recently undone entry.

        Returns:
            bool: False if there was nothing to redo.
        """
        if not self.redo_stack:
            return False

        command = self.redo_stack.pop()
        self.logger.info(f"Redoing: {command.description}")
        command.execute()
        self._push(self.undo_stack, command)

        self.event_bus.emit(COMMAND_REDONE, {"command": command})
        self._emit_stack_changed()
        return True

    def can_undo(self) -> bool:
        return len(self.undo_stack) > 0

    def can_redo(self) -> bool:
        return len(self.redo_stack) > 0

    def get_undo_description(self) -> Optional[str]:
        """Description of the entry undo() would revert, or None."""
        if not self.undo_stack:
            return None
        return self.undo_stack[-1].description

    def get_redo_description(self) -> Optional[str]:
        """Description of the entry redo() would re-apply, or None."""
        if not self.redo_stack:
            return None
        return self.redo_stack[-1].description

    def get_undo_stack_size(self) -> int:
        return len(self.undo_stack)

    def get_redo_stack_size(self) -> int:
        return len(self.redo_stack)

    def begin_batch(self):
        """
        Starts collecting commands into a single undo entry.

        Batches do not nest: calling this while a batch is open logs a
        warning and keeps the open batch as it is.
        """
        if self._batch_commands is not None:
            self.logger.warning("begin_batch() called while already in batch mode")
            return
        self._batch_commands = []

    def end_batch(self, description: str):
        """
        Closes the open batch and pushes its commands as one undo entry.

        An empty batch leaves no entry behind.

        Args:
            description (str): Label for the combined entry (e.g., "Delete selected objects").
        """
        if self._batch_commands is None:
            self.logger.warning("end_batch() called without begin_batch()")
            return

        commands = self._batch_commands
        self._batch_commands = None

        if not commands:
            return

        composite = CompositeCommand(commands, description)
        self._push(self.undo_stack, composite)
        self.redo_stack.clear()
        self.logger.debug(f"Committed batch '{description}' with {len(composite)} commands")

        self.event_bus.emit(COMMAND_EXECUTED, {"command": composite})
        self._emit_stack_changed()

    def cancel_batch(self):
        """
        Abandons the open batch, undoing its commands in reverse order.
        Neither stack is touched.
        """
        if self._batch_commands is None:
            self.logger.warning("cancel_batch() called without begin_batch()")
            return

        commands = self._batch_commands
        self._batch_commands = None

        self.logger.info(f"Cancelling batch, rolling back {len(commands)} commands")
        for command in reversed(commands):
            command.undo()

    @contextmanager
    def batch(self, description: str) -> Iterator["CommandHistory"]:
        """
        Context manager around begin_batch()/end_batch().

        If the block raises, the batch is cancelled (its commands are
        rolled back) and the exception propagates. Entered while another
        batch is open, the block joins that batch and leaves closing it
        to its owner.

            with history.batch("Move object"):
                history.execute(move_x)
                history.execute(move_y)
        """
        owner = not self.is_batching
        self.begin_batch()
        try:
            yield self
        except BaseException:
            if owner:
                self.cancel_batch()
            raise
        if owner:
            self.end_batch(description)

    def clear(self):
        """
        Drops all history, e.g. when a new scene is loaded.
        An open batch is cancelled first.
        """
        if self._batch_commands is not None:
            self.cancel_batch()
        self.undo_stack.clear()
        self.redo_stack.clear()
        self.logger.info("Command history cleared.")
        self._emit_stack_changed()

    def _push(self, stack: List[BaseCommand], command: BaseCommand):
        stack.append(command)
        # Evict oldest entries beyond the bound
        overflow = len(stack) - self._max_stack_size
        if overflow > 0:
            del stack[:overflow]

    def _emit_stack_changed(self):
        self.event_bus.emit(STACK_CHANGED, {
            "can_undo": self.can_undo(),
            "can_redo": self.can_redo(),
            "undo_description": self.get_undo_description(),
            "redo_description": self.get_redo_description(),
        })
