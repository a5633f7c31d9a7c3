# commands/base.py

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, FrozenSet
import logging

logger = logging.getLogger(__name__)

# Caller-supplied behaviors. Each receives the live command.
Action = Callable[[Any], None]
Continuation = Callable[[Any], bool]
Callback = Callable[[Any], None]


def no_op(command) -> None:
    pass


def never(command) -> bool:
    return False


class CommandState(Enum):
    CREATED = "created"
    RUNNING = "running"
    ENDED = "ended"
    INTERRUPTED = "interrupted"

    @property
    def is_terminal(self) -> bool:
        return self in (CommandState.ENDED, CommandState.INTERRUPTED)


class Schedulable(ABC):
    """
    Contract an external scheduler drives.

    The scheduler must call ``start`` before any ``tick``, check
    ``requirements`` for conflicts before starting, stop ticking once the
    command reports it should not continue, and finish every lifecycle with
    exactly one of ``end`` or ``interrupt``.
    """

    @abstractmethod
    def start(self) -> CommandState:
        """Begin running; elapsed time counts from zero."""
        pass

    @abstractmethod
    def tick(self) -> CommandState:
        """Run the per-tick action once."""
        pass

    @abstractmethod
    def should_continue(self) -> bool:
        """Return True while the command wants more ticks."""
        pass

    @abstractmethod
    def end(self) -> CommandState:
        """Finish normally and fire the end callback."""
        pass

    @abstractmethod
    def interrupt(self) -> CommandState:
        """Stop forcibly and fire the interrupt callback."""
        pass

    @abstractmethod
    def run_time_ms(self) -> float:
        pass

    @property
    @abstractmethod
    def requirements(self) -> FrozenSet[Any]:
        """Subsystems the command needs exclusively while running."""
        pass
