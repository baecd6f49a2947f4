"""Machine state representation"""

import logging

from ..exceptions import UserResolvableError
from .modes import ExecuteMode, ModeViolation

LOG = logging.getLogger(__name__)


class StackUnderflow(UserResolvableError):
    """Stack underflow"""

    def __init__(self, wanted: int, depth: int):
        super().__init__(
            f"needed {wanted} value(s), but the data stack holds {depth}",
            "Push enough values before using a word that consumes them.",
        )


class State:
    """Everything an interpreter mutates, except the dictionary"""

    def __init__(self, data=()):
        self._ds = [int(x) for x in data]
        self.mode = ExecuteMode()
        self.mode_stack = []

    ## Data stack

    def ds_push(self, val: int):
        if not isinstance(val, int) or isinstance(val, bool):
            raise TypeError(f"Cannot store {val} ({type(val)})")
        self._ds.append(val)

    def ds_pop(self) -> int:
        if not self._ds:
            raise StackUnderflow(1, 0)
        return self._ds.pop()

    def ds_peek(self, offset: int) -> int:
        """Peek at the Nth value from the top of the stack (0-indexed)"""
        if offset >= len(self._ds):
            raise StackUnderflow(offset + 1, len(self._ds))
        return self._ds[-(offset + 1)]

    @property
    def depth(self) -> int:
        return len(self._ds)

    @property
    def data_stack(self) -> list:
        """A copy of the data stack, bottom first"""
        return list(self._ds)

    def top(self, n: int) -> list:
        """The top n values (or fewer), bottom first"""
        return self._ds[max(len(self._ds) - n, 0):]

    ## Modes

    def enter_mode(self, new_mode):
        """Save the current mode and switch to new_mode"""
        LOG.debug("mode %s -> %s", self.mode, new_mode)
        self.mode_stack.append(self.mode)
        self.mode = new_mode

    def leave_mode(self):
        """Restore the mode that was active before the current one"""
        if not self.mode_stack:
            raise ModeViolation(f"no enclosing mode to return to from {self.mode}")
        old_mode = self.mode
        self.mode = self.mode_stack.pop()
        LOG.debug("mode %s -> %s", old_mode, self.mode)
        return old_mode

    ## Inspection

    def to_table(self):
        modes = " > ".join(type(m).__name__ for m in self.mode_stack + [self.mode])
        return f"Mode: {modes}\nData: {self._ds}"

    def __str__(self):
        return f"<State {id(self)} depth={self.depth}>"

    def __eq__(self, other):
        return self.serialise() == other.serialise()

    def serialise(self):
        return dict(
            ds=list(self._ds),
            mode=self.mode.serialise(),
            mode_stack=[m.serialise() for m in self.mode_stack],
        )
