# commands/exceptions.py
"""
Defines the exception hierarchy for the command library.
"""


class CommandError(Exception):
    """Base exception for all command library errors."""
    pass


class CommandStateError(CommandError):
    """Raised when a lifecycle call is made in a state that does not allow it."""

    def __init__(self, command_name: str, state, operation: str):
        self.command_name = command_name
        self.state = state
        self.operation = operation
        state_label = getattr(state, "value", state)
        super().__init__(
            f"Cannot {operation}() command '{command_name}' in state '{state_label}'.")
