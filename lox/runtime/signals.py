"""Control signals for non-local exits: 'return', 'break', and 'continue'.

Signals are not exceptions. Executing a statement returns None when control falls through normally, or a signal when
it has to unwind; each enclosing construct either handles the signal (a loop handles BreakSignal/ContinueSignal, a
function call handles ReturnSignal) or returns it to its own caller. Keeping them out of the exception hierarchy means
that no handler for LoxRuntimeError can ever swallow or misreport one.
"""

from dataclasses import dataclass
from typing import Any


class Signal:
    """Superclass for control signals."""


class BreakSignal(Signal):
    """Stop the nearest enclosing loop."""

    def __repr__(self):
        return "BreakSignal()"


class ContinueSignal(Signal):
    """Skip to the next condition check of the nearest enclosing loop."""

    def __repr__(self):
        return "ContinueSignal()"


@dataclass(frozen=True)
class ReturnSignal(Signal):
    """Unwind to the nearest function call boundary, carrying the returned value."""
    value: Any = None


# break and continue carry no state, so one instance of each is enough
BREAK = BreakSignal()
CONTINUE = ContinueSignal()
