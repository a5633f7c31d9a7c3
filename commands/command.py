# commands/command.py
"""
The executable command descriptor handed to an external scheduler.
- `CommandConfig`: frozen snapshot of everything a builder configured.
- `Command`: a single-use unit of work with a one-way lifecycle.
- `CommandSnapshot`: an immutable view of a command's runtime state.
"""
import itertools
import logging
from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

from utils.clock import Clock, elapsed_ms, monotonic_ms
from .base import Action, Callback, CommandState, Continuation, Schedulable
from .exceptions import CommandStateError
from .subsystem import Subsystem

logger = logging.getLogger(__name__)

_command_ids = itertools.count(1)


@dataclass(frozen=True)
class CommandConfig:
    """Everything needed to run a command; never changes after build."""
    name: Optional[str]
    action: Action
    continuation: Continuation
    timeout_ms: float
    requirements: Tuple[Subsystem, ...]
    on_start: Callback
    on_end: Callback
    on_interrupt: Callback
    period_ms: float


@dataclass(frozen=True)
class CommandSnapshot:
    """Immutable view of a command for logging and inspection."""
    name: str
    state: CommandState
    run_time_ms: float
    tick_count: int
    timeout_ms: float
    timed_out: bool
    requirements: Tuple[str, ...]


class Command(Schedulable):
    """
    A frozen, schedulable unit of work.

    Configuration comes from a ``CommandConfig`` and cannot change. The only
    mutable pieces are runtime state: the lifecycle state, the start time and
    the tick counter. Lifecycle is ``CREATED -> RUNNING -> ENDED | INTERRUPTED``
    and every transition is one-way; calls that break that order raise
    ``CommandStateError``.

    Exceptions raised by the action, the continuation predicate or the
    lifecycle callbacks propagate to the caller untouched.
    """

    def __init__(self, config: CommandConfig, clock: Clock = monotonic_ms):
        self._config = config
        self._clock = clock
        self._id = next(_command_ids)
        self._name = config.name or f"Command-{self._id}"

        # Requirements deduplicated, first declaration wins the ordering
        seen = []
        for subsystem in config.requirements:
            if subsystem not in seen:
                seen.append(subsystem)
        self._ordered_requirements: Tuple[Subsystem, ...] = tuple(seen)
        self._requirements: FrozenSet[Subsystem] = frozenset(seen)

        self._state = CommandState.CREATED
        self._start_ms: Optional[float] = None
        self._final_run_time_ms: Optional[float] = None
        self._ticks = 0

    # --- Configuration ---

    @property
    def name(self) -> str:
        return self._name

    @property
    def config(self) -> CommandConfig:
        return self._config

    @property
    def timeout_ms(self) -> float:
        return self._config.timeout_ms

    @property
    def period_ms(self) -> float:
        return self._config.period_ms

    @property
    def requirements(self) -> FrozenSet[Subsystem]:
        return self._requirements

    @property
    def required_subsystems(self) -> Tuple[Subsystem, ...]:
        """Requirements in declaration order, duplicates removed."""
        return self._ordered_requirements

    def conflicts_with(self, other: "Command") -> bool:
        """Return True if both commands need at least one common subsystem."""
        return not self._requirements.isdisjoint(other.requirements)

    # --- Runtime state ---

    @property
    def state(self) -> CommandState:
        return self._state

    @property
    def tick_count(self) -> int:
        return self._ticks

    def is_running(self) -> bool:
        return self._state is CommandState.RUNNING

    def is_done(self) -> bool:
        return self._state.is_terminal

    def run_time_ms(self) -> float:
        """
        Milliseconds since ``start()``.

        Zero before the command starts; frozen at the moment it ends or is
        interrupted.
        """
        if self._final_run_time_ms is not None:
            return self._final_run_time_ms
        if self._start_ms is None:
            return 0.0
        return elapsed_ms(self._clock, self._start_ms)

    def timed_out(self) -> bool:
        timeout = self._config.timeout_ms
        return timeout > 0 and self.run_time_ms() >= timeout

    def snapshot(self) -> CommandSnapshot:
        return CommandSnapshot(
            name=self._name,
            state=self._state,
            run_time_ms=self.run_time_ms(),
            tick_count=self._ticks,
            timeout_ms=self._config.timeout_ms,
            timed_out=self.timed_out(),
            requirements=tuple(s.name for s in self._ordered_requirements),
        )

    # --- Lifecycle ---

    def _require_state(self, operation: str, *allowed: CommandState):
        if self._state not in allowed:
            raise CommandStateError(self._name, self._state, operation)

    def _finish(self, state: CommandState):
        self._final_run_time_ms = self.run_time_ms()
        self._state = state

    def start(self) -> CommandState:
        self._require_state("start", CommandState.CREATED)
        self._start_ms = self._clock()
        self._state = CommandState.RUNNING
        logger.debug(f"Command '{self._name}' started "
                     f"(timeout={self._config.timeout_ms}ms, requires={[s.name for s in self._ordered_requirements]})")
        self._config.on_start(self)
        return self._state

    def should_continue(self) -> bool:
        """
        Evaluate the stop conditions.

        False when the continuation predicate says stop, or when a timeout is
        set and has elapsed. The timeout is checked first; an expired
        command does not evaluate its predicate.
        """
        self._require_state("should_continue", CommandState.RUNNING)
        if self.timed_out():
            return False
        return bool(self._config.continuation(self))

    def is_finished(self) -> bool:
        return not self.should_continue()

    def tick(self) -> CommandState:
        self._require_state("tick", CommandState.RUNNING)
        self._ticks += 1
        self._config.action(self)
        return self._state

    def step(self) -> CommandState:
        """
        One scheduler tick: end the command if it is due, otherwise run the action.

        Returns:
            The state after the tick, so a driver can tell when to stop calling.
        """
        if self.should_continue():
            return self.tick()
        return self.end()

    def end(self) -> CommandState:
        self._require_state("end", CommandState.RUNNING)
        self._finish(CommandState.ENDED)
        logger.debug(f"Command '{self._name}' ended after {self._final_run_time_ms:.1f}ms "
                     f"({self._ticks} ticks)")
        self._config.on_end(self)
        return self._state

    def interrupt(self) -> CommandState:
        self._require_state("interrupt", CommandState.RUNNING)
        self._finish(CommandState.INTERRUPTED)
        logger.debug(f"Command '{self._name}' interrupted after {self._final_run_time_ms:.1f}ms")
        self._config.on_interrupt(self)
        return self._state

    def __repr__(self):
        return f"<Command {self._name!r} state={self._state.value}>"
