"""Standard library of the lox language: host-provided callables that the Interpreter defines as globals when it is
constructed. Nothing else in the interpreter depends on which functions are present here.
"""

import time

from lox.runtime.objects import LoxCallable


class NativeFunction(LoxCallable):
    """Wraps a Python function so that it satisfies the Callable capability. fn is called with the interpreter
    followed by the lox arguments.
    """

    def __init__(self, name, arity, fn):
        self.name = name
        self._arity = arity
        self.fn = fn

    def arity(self):
        return self._arity

    def call(self, interpreter, arguments):
        return self.fn(interpreter, *arguments)

    def __repr__(self):
        return "<native fn>"


def _milliseconds(interpreter):
    """Current wall-clock time in milliseconds since the epoch, as a lox number."""
    return float(time.time_ns() // 1_000_000)


STDLIB = {
    "clock": NativeFunction("clock", 0, _milliseconds),
    "time": NativeFunction("time", 0, _milliseconds),
}
