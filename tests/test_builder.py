"""Tests for CommandBuilder assembly semantics."""

import unittest
from unittest.mock import MagicMock, patch
import sys
import os

# Add the parent directory to the system path to allow imports from the project root
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from commands.base import CommandState
from commands.builder import CommandBuilder
from commands.subsystem import Subsystem
from utils.clock import ManualClock


class TestCommandBuilder(unittest.TestCase):
    """Exercises the fluent configuration and snapshot semantics of build()."""

    def setUp(self):
        self.clock = ManualClock()
        self.builder = CommandBuilder.create(clock=self.clock)

    def test_unconfigured_build_never_runs(self):
        command = self.builder.build()
        command.start()
        self.assertFalse(command.should_continue())
        self.assertEqual(command.timeout_ms, 0)
        self.assertEqual(command.requirements, frozenset())

        # Action and callbacks are harmless no-ops
        command.tick()
        self.assertEqual(command.end(), CommandState.ENDED)

    def test_unconfigured_interrupt_is_no_op(self):
        command = self.builder.build()
        command.start()
        self.assertEqual(command.interrupt(), CommandState.INTERRUPTED)

    def test_every_setter_chains(self):
        a = Subsystem("arm")
        result = (self.builder
                  .named("chain")
                  .task(lambda c: None)
                  .run_for_time(10)
                  .with_timeout(5)
                  .with_period(10)
                  .run_while(lambda c: True)
                  .at_start(lambda c: None)
                  .at_end(lambda c: None)
                  .on_interrupt(lambda c: None)
                  .require(a))
        self.assertIs(result, self.builder)

    def test_run_for_time_boundary(self):
        command = self.builder.run_for_time(1000).build()
        command.start()

        self.clock.set_ms(999)
        self.assertTrue(command.should_continue())

        self.clock.set_ms(1000)
        self.assertFalse(command.should_continue())

        self.clock.set_ms(1500)
        self.assertFalse(command.should_continue())

    def test_run_for_time_non_positive_never_runs(self):
        for duration in (0, -10):
            command = CommandBuilder.create(clock=self.clock).run_for_time(duration).build()
            command.start()
            self.assertFalse(command.should_continue())

    def test_timeout_overrides_always_true_predicate(self):
        command = self.builder.run_while(lambda c: True).with_timeout(500).build()
        command.start()

        self.clock.set_ms(499)
        self.assertTrue(command.should_continue())

        self.clock.set_ms(500)
        self.assertFalse(command.should_continue())
        self.assertTrue(command.timed_out())

    def test_negative_timeout_means_no_timeout(self):
        with self.assertLogs('commands.builder', level='WARNING'):
            command = self.builder.run_while(lambda c: True).with_timeout(-5).build()
        self.assertEqual(command.timeout_ms, 0)
        command.start()
        self.clock.set_ms(10_000)
        self.assertTrue(command.should_continue())

    def test_zero_timeout_leaves_continuation_in_charge(self):
        command = self.builder.run_for_time(100).with_timeout(0).build()
        command.start()
        self.clock.set_ms(50)
        self.assertTrue(command.should_continue())
        self.clock.set_ms(100)
        self.assertFalse(command.should_continue())

    def test_last_continuation_wins(self):
        predicate = MagicMock(return_value=True)
        command = self.builder.run_for_time(100).run_while(predicate).build()
        command.start()
        self.clock.set_ms(5000)

        self.assertTrue(command.should_continue())
        predicate.assert_called_once_with(command)

    def test_run_for_time_replaces_run_while(self):
        command = self.builder.run_while(lambda c: True).run_for_time(100).build()
        command.start()
        self.clock.set_ms(100)
        self.assertFalse(command.should_continue())

    def test_task_overwrites_previous_action(self):
        first, second = MagicMock(), MagicMock()
        command = self.builder.task(first).task(second).run_while(lambda c: True).build()
        command.start()
        command.tick()
        first.assert_not_called()
        second.assert_called_once_with(command)

    def test_callbacks_overwrite_previous_values(self):
        old_end, new_end = MagicMock(), MagicMock()
        old_int, new_int = MagicMock(), MagicMock()
        self.builder.at_end(old_end).at_end(new_end)
        self.builder.on_interrupt(old_int).on_interrupt(new_int)

        ended = self.builder.build()
        ended.start()
        ended.end()
        old_end.assert_not_called()
        new_end.assert_called_once_with(ended)

        interrupted = self.builder.build()
        interrupted.start()
        interrupted.interrupt()
        old_int.assert_not_called()
        new_int.assert_called_once_with(interrupted)

    def test_require_accumulates(self):
        a, b, c = Subsystem("a"), Subsystem("b"), Subsystem("c")
        command = self.builder.require(a).require(b, c).build()
        self.assertEqual(command.requirements, frozenset({c, a, b}))
        self.assertEqual(command.required_subsystems, (a, b, c))

    def test_require_duplicates_are_collapsed_on_the_command(self):
        a, b = Subsystem("a"), Subsystem("b")
        command = self.builder.require(a, b).require(a).build()
        self.assertEqual(command.required_subsystems, (a, b))
        self.assertEqual(len(command.requirements), 2)

    def test_build_snapshots_configuration(self):
        a, b = Subsystem("a"), Subsystem("b")
        first_action = MagicMock()
        self.builder.task(first_action).run_while(lambda c: True).require(a)
        built = self.builder.build()

        # Mutating the builder afterwards must not leak into the built command
        self.builder.task(MagicMock()).run_while(lambda c: False).require(b).with_timeout(1)

        self.assertEqual(built.requirements, frozenset({a}))
        self.assertEqual(built.timeout_ms, 0)
        built.start()
        self.assertTrue(built.should_continue())
        built.tick()
        first_action.assert_called_once_with(built)

    def test_two_builds_are_independent(self):
        command_a = self.builder.run_for_time(100).build()
        command_b = self.builder.build()
        self.assertIsNot(command_a, command_b)

        command_a.start()
        self.clock.set_ms(150)
        command_b.start()

        self.assertFalse(command_a.should_continue())
        self.assertTrue(command_b.should_continue())
        self.assertEqual(command_b.run_time_ms(), 0)

        command_a.end()
        self.assertEqual(command_b.state, CommandState.RUNNING)

    def test_with_period_rejects_non_positive(self):
        with self.assertRaises(ValueError):
            self.builder.with_period(0)
        self.assertEqual(self.builder.with_period(50).build().period_ms, 50)

    def test_period_comes_from_config_timeout_does_not(self):
        fake_config = {'commands': {'default_timeout_ms': 250, 'tick_period_ms': 10}}
        with patch('commands.builder.CONFIG', fake_config):
            command = CommandBuilder.create(clock=self.clock).build()
        self.assertEqual(command.timeout_ms, 0)
        self.assertEqual(command.period_ms, 10)

    def test_run_for_time_boundary_from_offset_start(self):
        for start_ms in (7, 63, 1234.5, 86_400_000):
            with self.subTest(start_ms=start_ms):
                clock = ManualClock(start_ms=start_ms)
                command = CommandBuilder.create(clock=clock).run_for_time(1000).build()
                command.start()

                clock.advance_ms(999)
                self.assertTrue(command.should_continue())

                clock.advance_ms(1)
                self.assertEqual(command.run_time_ms(), 1000)
                self.assertFalse(command.should_continue())

    def test_timeout_boundary_from_offset_start(self):
        for start_ms in (7, 63, 1234.5, 86_400_000):
            with self.subTest(start_ms=start_ms):
                clock = ManualClock(start_ms=start_ms)
                command = (CommandBuilder.create(clock=clock)
                           .run_while(lambda c: True)
                           .with_timeout(500)
                           .build())
                command.start()

                clock.advance_ms(499)
                self.assertTrue(command.should_continue())

                clock.advance_ms(1)
                self.assertEqual(command.run_time_ms(), 500)
                self.assertTrue(command.timed_out())
                self.assertFalse(command.should_continue())

    def test_at_start_overwrites_previous_value(self):
        old_start, new_start = MagicMock(), MagicMock()
        command = self.builder.at_start(old_start).at_start(new_start).build()
        command.start()
        old_start.assert_not_called()
        new_start.assert_called_once_with(command)

    def test_named(self):
        self.assertEqual(self.builder.named("intake").build().name, "intake")
        self.assertTrue(CommandBuilder.create().build().name.startswith("Command-"))


if __name__ == '__main__':
    unittest.main()
