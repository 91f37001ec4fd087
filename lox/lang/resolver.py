"""Static scope resolution for the lox language. Runs once over a parsed program, before it is executed.

For every Variable, Assign, and This expression that refers to a local binding, the resolver records the lexical
distance (number of scopes between the reference and the declaration) in the interpreter, so that the interpreter
never has to search the environment chain. References that match no enclosing scope are globals and are not recorded.

The resolver also reports structural errors: duplicate declarations in one scope, reading a local in its own
initializer, and 'return', 'break', 'continue', or 'this' where they are not allowed. Errors are reported to the
ErrorHandler and resolution carries on, so that several errors can be reported in one pass.
"""

from enum import Enum, auto

from lox.lang.nodes import Visitor
from lox.runtime.objects import LoxClass


class FunctionType(Enum):
    NONE = auto()
    FUNCTION = auto()
    METHOD = auto()
    INITIALIZER = auto()


class ClassType(Enum):
    NONE = auto()
    CLASS = auto()


class Resolver(Visitor):
    """Walks statements with a stack of scopes. Each scope maps a name to whether it has been defined yet (False
    means declared but its initializer has not been resolved).
    """

    def __init__(self, interpreter, error_handler):
        self.interpreter = interpreter
        self.error_handler = error_handler

        self.scopes = []
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE
        self.loop_depth = 0

    def resolve(self, statements):
        """Resolves a list of statements (or a single node)."""
        if isinstance(statements, list):
            for stmt in statements:
                self.visit(stmt)
        else:
            self.visit(statements)

    # statements

    def visit_block(self, stmt):
        self.begin_scope()
        self.resolve(stmt.statements)
        self.end_scope()

    def visit_var(self, stmt):
        self.declare(stmt.name)
        if stmt.initializer is not None:
            self.resolve(stmt.initializer)
        self.define(stmt.name)

    def visit_function_stmt(self, stmt):
        # define before resolving the body, so that functions can call themselves recursively
        self.declare(stmt.name)
        self.define(stmt.name)

        self.resolve_function(stmt.function, FunctionType.FUNCTION)

    def visit_class(self, stmt):
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS

        self.declare(stmt.name)
        self.define(stmt.name)

        self.begin_scope()
        self.scopes[-1]["this"] = True

        for method in stmt.methods:
            if method.name.lexeme == LoxClass.INITIALIZER:
                self.resolve_function(method, FunctionType.INITIALIZER)
            else:
                self.resolve_function(method, FunctionType.METHOD)

        self.end_scope()
        self.current_class = enclosing_class

    def visit_expression(self, stmt):
        self.resolve(stmt.expression)

    def visit_print(self, stmt):
        self.resolve(stmt.expression)

    def visit_if(self, stmt):
        self.resolve(stmt.condition)
        self.resolve(stmt.then_branch)
        if stmt.else_branch is not None:
            self.resolve(stmt.else_branch)

    def visit_while(self, stmt):
        self.resolve(stmt.condition)

        self.loop_depth += 1
        self.resolve(stmt.body)
        self.loop_depth -= 1

        if stmt.increment is not None:
            self.resolve(stmt.increment)

    def visit_break(self, stmt):
        if self.loop_depth == 0:
            self.error_handler.error_at(stmt.keyword, "Can't use 'break' outside of a loop.")

    def visit_continue(self, stmt):
        if self.loop_depth == 0:
            self.error_handler.error_at(stmt.keyword, "Can't use 'continue' outside of a loop.")

    def visit_return(self, stmt):
        if self.current_function is FunctionType.NONE:
            self.error_handler.error_at(stmt.keyword, "Can't return from top-level code.")

        if stmt.value is not None:
            if self.current_function is FunctionType.INITIALIZER:
                self.error_handler.error_at(stmt.keyword, "Can't return a value from an initializer.")
            self.resolve(stmt.value)

    # expressions

    def visit_variable(self, expr):
        if self.scopes and self.scopes[-1].get(expr.name.lexeme) is False:
            self.error_handler.error_at(expr.name, "Can't read local variable in its own initializer.")

        self.resolve_local(expr, expr.name.lexeme)

    def visit_assign(self, expr):
        self.resolve(expr.value)
        self.resolve_local(expr, expr.name.lexeme)

    def visit_this(self, expr):
        if self.current_class is ClassType.NONE:
            self.error_handler.error_at(expr.keyword, "Can't use 'this' outside of a class.")
            return

        self.resolve_local(expr, "this")

    def visit_function(self, expr):
        if expr.name is None:
            self.resolve_function(expr, FunctionType.FUNCTION)
            return

        # a named function literal can refer to itself through a scope of its own
        self.begin_scope()
        self.declare(expr.name)
        self.define(expr.name)
        self.resolve_function(expr, FunctionType.FUNCTION)
        self.end_scope()

    def visit_binary(self, expr):
        self.resolve(expr.left)
        self.resolve(expr.right)

    def visit_logical(self, expr):
        self.resolve(expr.left)
        self.resolve(expr.right)

    def visit_unary(self, expr):
        self.resolve(expr.right)

    def visit_grouping(self, expr):
        self.resolve(expr.expression)

    def visit_call(self, expr):
        self.resolve(expr.callee)
        for argument in expr.arguments:
            self.resolve(argument)

    def visit_get(self, expr):
        self.resolve(expr.object)  # property names are looked up dynamically

    def visit_set(self, expr):
        self.resolve(expr.value)
        self.resolve(expr.object)

    def visit_literal(self, expr):
        """Literals refer to nothing."""

    # helpers

    def resolve_function(self, function, function_type):
        """Resolves a function body in a new scope holding its parameters. Loops enclosing the function do not
        enclose its body, so loop depth restarts at zero.
        """
        enclosing_function = self.current_function
        enclosing_loop_depth = self.loop_depth
        self.current_function = function_type
        self.loop_depth = 0

        self.begin_scope()
        for param in function.params:
            self.declare(param)
            self.define(param)
        self.resolve(function.body)
        self.end_scope()

        self.current_function = enclosing_function
        self.loop_depth = enclosing_loop_depth

    def resolve_local(self, expr, name):
        """Records the distance to the innermost scope declaring name, if any. Otherwise name is global."""
        for distance, scope in enumerate(reversed(self.scopes)):
            if name in scope:
                self.interpreter.resolve(expr, distance)
                return

    def begin_scope(self):
        self.scopes.append({})

    def end_scope(self):
        self.scopes.pop()

    def declare(self, name):
        """Adds name token to the innermost scope as not yet defined. Globals are not tracked."""
        if not self.scopes:
            return

        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.error_handler.error_at(name, "Already a variable with this name in this scope.")
        scope[name.lexeme] = False

    def define(self, name):
        """Marks name token as defined in the innermost scope."""
        if self.scopes:
            self.scopes[-1][name.lexeme] = True
