"""Runtime variable storage. Environments form a tree through their enclosing links: blocks, function calls, and method
binds each create a child Environment, and closures keep a reference to the Environment they were created in, so an
Environment can outlive the block that created it. Lifetime is left to the Python garbage collector.
"""

from lox.lang.error import LoxRuntimeError


class Environment:
    """A mutable name -> value binding table with an optional enclosing Environment."""

    def __init__(self, enclosing=None):
        self.enclosing = enclosing
        self.values = {}

    def define(self, name, value):
        """Binds name in this Environment, shadowing (or overwriting) any previous binding of the same name."""
        self.values[name] = value

    def get(self, name):
        """Looks up name token in this Environment only (used for globals). Raises LoxRuntimeError if undefined."""
        if name.lexeme in self.values:
            return self.values[name.lexeme]
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name, value):
        """Assigns to an existing binding of name token in this Environment only."""
        if name.lexeme not in self.values:
            raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")
        self.values[name.lexeme] = value

    def ancestor(self, distance):
        """Returns the Environment distance links up the enclosing chain (0 is self)."""
        environment = self
        for __ in range(distance):
            environment = environment.enclosing
        return environment

    def get_at(self, distance, name):
        """Reads name (a str) from the Environment at distance, as computed by the resolver."""
        return self.ancestor(distance).values[name]

    def assign_at(self, distance, name, value):
        """Writes name token at distance, as computed by the resolver."""
        self.ancestor(distance).values[name.lexeme] = value

    def __contains__(self, name):
        return name in self.values

    def __repr__(self):
        depth = 0
        environment = self.enclosing
        while environment is not None:
            depth += 1
            environment = environment.enclosing
        return f"Environment(depth={depth}, names={sorted(self.values)})"
