"""Runtime object model of the lox language: the Callable capability and the values that implement it (user-defined
functions and classes), plus class instances.

Methods are owned by their LoxClass and shared by every instance. A method is bound to an instance only when it is
looked up, by wrapping the method's closure in a fresh Environment that defines 'this'.
"""

from abc import ABC, abstractmethod

from lox.lang.error import LoxRuntimeError
from lox.runtime.environment import Environment
from lox.runtime.signals import ReturnSignal


class LoxCallable(ABC):
    """Capability of any runtime value that can be called. Native (host-provided) functions implement this too."""

    @abstractmethod
    def arity(self):
        """Number of arguments this callable expects. Calls with any other number are runtime errors."""

    @abstractmethod
    def call(self, interpreter, arguments):
        """Invokes this callable with already-evaluated arguments and returns the result value."""


class LoxFunction(LoxCallable):
    """User-defined function: a Function node paired with the Environment it was created in."""

    def __init__(self, declaration, closure, is_initializer=False):
        self.declaration = declaration        # nodes.Function
        self.closure = closure                # Environment active when the function was created
        self.is_initializer = is_initializer  # whether this is a class's "init" method

    @property
    def name(self):
        return self.declaration.name.lexeme if self.declaration.name else None

    def bind(self, instance):
        """Returns a copy of this method whose closure defines 'this' as instance."""
        environment = Environment(self.closure)
        environment.define("this", instance)
        return LoxFunction(self.declaration, environment, self.is_initializer)

    def arity(self):
        return len(self.declaration.params)

    def call(self, interpreter, arguments):
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        signal = interpreter.execute_block(self.declaration.body, environment)

        if self.is_initializer:
            return self.closure.get_at(0, "this")  # constructors always return the instance
        if isinstance(signal, ReturnSignal):
            return signal.value
        return None

    def __repr__(self):
        return f"<fn {self.name}>" if self.name else "<fn>"


class LoxClass(LoxCallable):
    """A class acts as the constructor of its instances. Immutable after creation."""
    INITIALIZER = "init"

    def __init__(self, name, methods):
        self.name = name
        self.methods = methods  # dict of name: unbound LoxFunction

    def find_method(self, name):
        """Returns the unbound method called name, or None."""
        return self.methods.get(name)

    def arity(self):
        initializer = self.find_method(LoxClass.INITIALIZER)
        return initializer.arity() if initializer else 0

    def call(self, interpreter, arguments):
        """Creates an instance and runs "init" on it (if defined). Returns the instance whatever "init" returns."""
        instance = LoxInstance(self)

        initializer = self.find_method(LoxClass.INITIALIZER)
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)

        return instance

    def __repr__(self):
        return f"<class {self.name}>"


class LoxInstance:
    """An instance of a LoxClass. Fields are per-instance; methods come from the class."""

    def __init__(self, klass):
        self.klass = klass
        self.fields = {}

    def get(self, name):
        """Looks up name token: fields first, then methods (bound to self). Raises LoxRuntimeError if neither."""
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]

        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)

        raise LoxRuntimeError(name, f"Undefined property '{name.lexeme}'.")

    def set(self, name, value):
        """Writes field name token, creating it if absent."""
        self.fields[name.lexeme] = value

    def __repr__(self):
        return f"<instance of {self.klass.name}>"
