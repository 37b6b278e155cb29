# file: editor/commands/base_command.py

import time
from abc import ABC, abstractmethod
from typing import Optional


def now_ms() -> float:
    """Current time in milliseconds since the epoch."""
    return time.time() * 1000


class BaseCommand(ABC):
    """
    Abstract base class for a reversible edit in the Command Pattern.

    A command captures everything needed for both directions of the edit
    when it is built. CommandHistory calls execute() and undo() in strict
    alternation, so each is only ever asked to move one step.
    """
    type: str = "Command"

    def __init__(self, description: str = "", timestamp: Optional[float] = None):
        self.description = description
        self.timestamp: float = now_ms() if timestamp is None else timestamp

    @abstractmethod
    def execute(self):
        """
        Apply the forward effect.
        Called on the initial execution and again on every redo.
        """
        pass

    @abstractmethod
    def undo(self):
        """
        Apply the exact inverse of execute().
        """
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} type={self.type!r} description={self.description!r}>"


class MergeableCommand(BaseCommand):
    """
    A command that can coalesce with a later command of the same kind,
    e.g. the many intermediate values produced by dragging a slider.
    """

    @abstractmethod
    def can_merge_with(self, other: BaseCommand) -> bool:
        """True if other (the newer command) can be folded into this one."""
        pass

    @abstractmethod
    def merge_with(self, other: BaseCommand) -> BaseCommand:
        """
        Build a new command spanning both edits: the "before" state of
        self and the "after" state of other. Neither operand is modified.
        """
        pass


def is_mergeable_command(command: BaseCommand) -> bool:
    """Checks whether a command supports coalescing."""
    return isinstance(command, MergeableCommand)
