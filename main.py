# main.py
"""
Demo entry point: configures logging and drives one command to completion.

Shows how an application wires the library together. A real robot hands the
built command to its scheduler instead of the single-command loop below.
"""

import logging
import time

from commands.base import CommandState
from commands.builder import CommandBuilder
from commands.command import Command
from commands.subsystem import Subsystem
from logger_config import setup_logging
from utils.clock import Clock, monotonic_ms

logger = logging.getLogger(__name__)


def build_demo_command(clock: Clock = monotonic_ms) -> Command:
    """A command that 'drives' for 200 ms with a 1 s safety timeout."""
    drivetrain = Subsystem("drivetrain")
    return (CommandBuilder.create(clock=clock)
            .named("DriveForward")
            .require(drivetrain)
            .at_start(lambda c: logger.info(f"{c.name}: starting"))
            .task(lambda c: logger.debug(f"{c.name}: tick {c.tick_count} at {c.run_time_ms():.0f}ms"))
            .run_for_time(200)
            .with_timeout(1000)
            .at_end(lambda c: logger.info(f"{c.name}: done after {c.run_time_ms():.0f}ms"))
            .on_interrupt(lambda c: logger.warning(f"{c.name}: interrupted"))
            .build())


def run_command(command: Command, sleep=time.sleep) -> CommandState:
    """
    Tick ``command`` at its nominal period until it ends.

    Args:
        command: A freshly built command.
        sleep: Called with the period in seconds between ticks.

    Returns:
        The terminal state. Ctrl+C interrupts the command.
    """
    command.start()
    try:
        while command.step() is CommandState.RUNNING:
            sleep(command.period_ms / 1000.0)
    except KeyboardInterrupt:
        logger.info("Shutdown requested (Ctrl+C)...")
        if command.is_running():
            command.interrupt()
    return command.state


def main() -> int:
    setup_logging()
    state = run_command(build_demo_command())
    return 0 if state is CommandState.ENDED else 1


if __name__ == "__main__":
    raise SystemExit(main())
