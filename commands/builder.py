# commands/builder.py
import logging
from typing import List, Optional

from config_loader import CONFIG
from utils.clock import Clock, monotonic_ms
from .base import Action, Callback, Continuation, never, no_op
from .command import Command, CommandConfig
from .subsystem import Subsystem

logger = logging.getLogger(__name__)


class CommandBuilder:
    """
    Fluent assembly of a ``Command``.

    Every setter returns the builder so calls chain; ``build()`` freezes the
    current configuration into a new command. A builder never raises while
    being configured (except ``with_period`` on a non-positive period) and
    always holds safe defaults: a no-op action, a continuation that is
    immediately false, no timeout, no requirements and no-op callbacks.
    Only the nominal tick period is taken from configuration.

    Not safe for concurrent configuration.
    """

    def __init__(self, clock: Clock = monotonic_ms):
        cmd_cfg = CONFIG.get('commands', {})
        self._clock = clock
        self._name: Optional[str] = None
        self._action: Action = no_op
        self._continuation: Continuation = never
        self._timeout_ms: float = 0.0
        self._period_ms: float = float(cmd_cfg.get('tick_period_ms', 20))
        self._requirements: List[Subsystem] = []
        self._on_start: Callback = no_op
        self._on_end: Callback = no_op
        self._on_interrupt: Callback = no_op

    @classmethod
    def create(cls, clock: Clock = monotonic_ms) -> "CommandBuilder":
        return cls(clock=clock)

    def named(self, name: str) -> "CommandBuilder":
        self._name = name
        return self

    def task(self, action: Action) -> "CommandBuilder":
        self._action = action
        return self

    def run_for_time(self, duration_ms: float) -> "CommandBuilder":
        """Keep running while run time is below ``duration_ms``. Replaces any continuation."""
        self._continuation = lambda command: command.run_time_ms() < duration_ms
        return self

    def run_while(self, predicate: Continuation) -> "CommandBuilder":
        """Keep running while ``predicate(command)`` is true. Replaces any continuation."""
        self._continuation = predicate
        return self

    def with_timeout(self, duration_ms: float) -> "CommandBuilder":
        """
        Stop no matter what once ``duration_ms`` has elapsed.

        Applies on top of the continuation. Zero disables the timeout; a
        negative value is treated the same way.
        """
        if duration_ms < 0:
            logger.warning(f"Negative timeout {duration_ms}ms ignored; command will have no timeout.")
            duration_ms = 0
        self._timeout_ms = float(duration_ms)
        return self

    def with_period(self, period_ms: float) -> "CommandBuilder":
        if period_ms <= 0:
            raise ValueError(f"Tick period must be positive, got {period_ms}ms.")
        self._period_ms = float(period_ms)
        return self

    def at_start(self, callback: Callback) -> "CommandBuilder":
        """Run ``callback(command)`` once when the command starts, before its first tick."""
        self._on_start = callback
        return self

    def at_end(self, callback: Callback) -> "CommandBuilder":
        self._on_end = callback
        return self

    def on_interrupt(self, callback: Callback) -> "CommandBuilder":
        self._on_interrupt = callback
        return self

    def require(self, *subsystems: Subsystem) -> "CommandBuilder":
        """Add one or more subsystems to the requirement list. Accumulates across calls."""
        for subsystem in subsystems:
            if subsystem in self._requirements:
                logger.debug(f"Subsystem {subsystem!r} required more than once.")
            self._requirements.append(subsystem)
        return self

    def build(self) -> Command:
        config = CommandConfig(
            name=self._name,
            action=self._action,
            continuation=self._continuation,
            timeout_ms=self._timeout_ms,
            requirements=tuple(self._requirements),
            on_start=self._on_start,
            on_end=self._on_end,
            on_interrupt=self._on_interrupt,
            period_ms=self._period_ms,
        )
        command = Command(config, clock=self._clock)
        logger.debug(f"Built {command!r}")
        return command
