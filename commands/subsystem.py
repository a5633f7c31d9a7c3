# commands/subsystem.py
import itertools
from typing import Optional

_subsystem_ids = itertools.count(1)


class Subsystem:
    """
    Opaque identity for an exclusive resource (a drivetrain, an arm, a camera).

    Two subsystems are equal only if they are the same object, so two
    instances that share a name are still distinct resources. Commands only
    declare which subsystems they need; they never own them.
    """

    def __init__(self, name: Optional[str] = None):
        self._id = next(_subsystem_ids)
        self.name = name or f"{self.__class__.__name__}-{self._id}"

    def periodic(self):
        """Hook a scheduler may call once per loop. Override in subclasses."""
        pass

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.name!r}>"

