# commands/factories.py
"""Shortcuts for commonly built commands."""
from typing import Callable

from utils.clock import Clock, monotonic_ms
from .base import Action, no_op
from .builder import CommandBuilder
from .command import Command
from .subsystem import Subsystem


def instant(action: Action, *subsystems: Subsystem, clock: Clock = monotonic_ms) -> Command:
    """A command that runs ``action`` on its first tick and then ends."""
    return (CommandBuilder.create(clock=clock)
            .task(action)
            .run_while(lambda command: command.tick_count < 1)
            .require(*subsystems)
            .build())


def empty(clock: Clock = monotonic_ms) -> Command:
    return instant(no_op, clock=clock)


def wait_for(condition: Callable[[], bool], clock: Clock = monotonic_ms) -> Command:
    """A command that does nothing until ``condition()`` turns true."""
    return (CommandBuilder.create(clock=clock)
            .named("WaitFor")
            .run_while(lambda command: not condition())
            .build())


def delay(duration_ms: float, clock: Clock = monotonic_ms) -> Command:
    return (CommandBuilder.create(clock=clock)
            .named(f"Delay({duration_ms}ms)")
            .run_for_time(duration_ms)
            .build())
