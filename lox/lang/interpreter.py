"""Tree-walking evaluator for the lox language. Executes a resolved list of statements against a chain of
Environments.

Statement execution returns None when control falls through, or a control signal (see lox.runtime.signals) that the
enclosing loop or function call handles. Runtime errors are LoxRuntimeErrors: they abort the current top-level
interpret() call and are reported to the ErrorHandler.
"""

import math
import sys

from lox.lang.error import DivisionByZeroError, LoxRuntimeError
from lox.lang.nodes import Visitor
from lox.lang.tokens import COMPOUND_OPERATORS, TokenType
from lox.runtime.environment import Environment
from lox.runtime.objects import LoxCallable, LoxClass, LoxFunction, LoxInstance
from lox.runtime.signals import BREAK, CONTINUE, BreakSignal, ReturnSignal
from lox.runtime.stdlib import STDLIB


class Interpreter(Visitor):
    """Holds the global Environment and the locals map computed by the resolver. Can run several programs in a row
    (e.g. prompt lines): globals and resolved distances persist between interpret() calls.
    """

    def __init__(self, error_handler, stdout=None, stdlib=None):
        self.error_handler = error_handler
        self.stdout = stdout  # where 'print' writes (defaults to sys.stdout at print time)

        self.globals = Environment()
        self.environment = self.globals
        self.locals = {}  # dict of expression node: lexical distance, filled in by the resolver

        for name, native in (STDLIB if stdlib is None else stdlib).items():
            self.globals.define(name, native)

    def interpret(self, statements):
        """Executes statements top to bottom. A runtime error is reported and aborts the remaining statements."""
        try:
            for stmt in statements:
                self.execute(stmt)
        except LoxRuntimeError as error:
            self.environment = self.globals
            self.error_handler.runtime_error(error)

    def resolve(self, expr, depth):
        """Called by the resolver: expr refers to a binding depth Environments up from where it is evaluated."""
        self.locals[expr] = depth

    def execute(self, stmt):
        return self.visit(stmt)

    def evaluate(self, expr):
        return self.visit(expr)

    def execute_block(self, statements, environment):
        """Executes statements in environment, restoring the current Environment afterwards. Returns the first control
        signal raised by a statement, if any.
        """
        previous = self.environment
        try:
            self.environment = environment
            for stmt in statements:
                signal = self.execute(stmt)
                if signal is not None:
                    return signal
        finally:
            self.environment = previous

        return None

    # statements

    def visit_expression(self, stmt):
        self.evaluate(stmt.expression)

    def visit_print(self, stmt):
        value = self.evaluate(stmt.expression)
        print(Interpreter.stringify(value), file=self.stdout if self.stdout is not None else sys.stdout)

    def visit_var(self, stmt):
        value = None
        if stmt.initializer is not None:
            value = self.evaluate(stmt.initializer)

        self.environment.define(stmt.name.lexeme, value)

    def visit_block(self, stmt):
        return self.execute_block(stmt.statements, Environment(self.environment))

    def visit_if(self, stmt):
        if Interpreter.is_truthy(self.evaluate(stmt.condition)):
            return self.execute(stmt.then_branch)
        elif stmt.else_branch is not None:
            return self.execute(stmt.else_branch)
        return None

    def visit_while(self, stmt):
        while Interpreter.is_truthy(self.evaluate(stmt.condition)):
            signal = self.execute(stmt.body)

            if isinstance(signal, BreakSignal):
                break
            elif isinstance(signal, ReturnSignal):
                return signal
            # ContinueSignal and normal completion both go on to the increment

            if stmt.increment is not None:
                self.evaluate(stmt.increment)

        return None

    def visit_break(self, stmt):
        return BREAK

    def visit_continue(self, stmt):
        return CONTINUE

    def visit_return(self, stmt):
        value = None
        if stmt.value is not None:
            value = self.evaluate(stmt.value)

        return ReturnSignal(value)

    def visit_function_stmt(self, stmt):
        function = LoxFunction(stmt.function, self.environment)
        self.environment.define(stmt.name.lexeme, function)

    def visit_class(self, stmt):
        self.environment.define(stmt.name.lexeme, None)  # so that methods can refer to the class

        methods = {}
        for method in stmt.methods:
            is_initializer = method.name.lexeme == LoxClass.INITIALIZER
            methods[method.name.lexeme] = LoxFunction(method, self.environment, is_initializer)

        self.environment.define(stmt.name.lexeme, LoxClass(stmt.name.lexeme, methods))

    # expressions

    def visit_literal(self, expr):
        return expr.value

    def visit_grouping(self, expr):
        return self.evaluate(expr.expression)

    def visit_unary(self, expr):
        right = self.evaluate(expr.right)

        if expr.operator.type is TokenType.MINUS:
            Interpreter.check_number_operands(expr.operator, right)
            return -right

        # TokenType.BANG
        return not Interpreter.is_truthy(right)

    def visit_binary(self, expr):
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)

        if expr.operator.type is TokenType.COMMA:
            return right

        return self.apply(expr.operator, expr.operator.type, left, right)

    def visit_logical(self, expr):
        left = self.evaluate(expr.left)

        if expr.operator.type is TokenType.OR:
            if Interpreter.is_truthy(left):
                return left
        elif not Interpreter.is_truthy(left):  # TokenType.AND
            return left

        return self.evaluate(expr.right)

    def visit_variable(self, expr):
        return self.look_up_variable(expr.name, expr)

    def visit_this(self, expr):
        return self.look_up_variable(expr.keyword, expr)

    def visit_assign(self, expr):
        if expr.operator is not None:
            current = self.look_up_variable(expr.name, expr)
            operator = COMPOUND_OPERATORS[expr.operator.type]
            value = self.apply(expr.operator, operator, current, self.evaluate(expr.value))
        else:
            value = self.evaluate(expr.value)

        distance = self.locals.get(expr)
        if distance is not None:
            self.environment.assign_at(distance, expr.name, value)
        else:
            self.globals.assign(expr.name, value)

        return value

    def visit_function(self, expr):
        if expr.name is None:
            return LoxFunction(expr, self.environment)

        closure = Environment(self.environment)  # matches the scope the resolver opens for the name
        function = LoxFunction(expr, closure)
        closure.define(expr.name.lexeme, function)
        return function

    def visit_call(self, expr):
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(argument) for argument in expr.arguments]

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(expr.paren, "Can only call functions and classes.")

        if len(arguments) != callee.arity():
            raise LoxRuntimeError(expr.paren, f"Expected {callee.arity()} arguments but got {len(arguments)}.")

        return callee.call(self, arguments)

    def visit_get(self, expr):
        obj = self.evaluate(expr.object)
        if isinstance(obj, LoxInstance):
            return obj.get(expr.name)

        raise LoxRuntimeError(expr.name, "Only instances have properties.")

    def visit_set(self, expr):
        obj = self.evaluate(expr.object)
        if not isinstance(obj, LoxInstance):
            raise LoxRuntimeError(expr.name, "Only instances have fields.")

        if expr.operator is not None:
            current = obj.get(expr.name)
            operator = COMPOUND_OPERATORS[expr.operator.type]
            value = self.apply(expr.operator, operator, current, self.evaluate(expr.value))
        else:
            value = self.evaluate(expr.value)

        obj.set(expr.name, value)
        return value

    # helpers

    def look_up_variable(self, name, expr):
        """Reads name token at the distance the resolver recorded for expr, or from globals if none was recorded."""
        distance = self.locals.get(expr)
        if distance is not None:
            return self.environment.get_at(distance, name.lexeme)
        return self.globals.get(name)

    def apply(self, token, operator, left, right):
        """Applies binary operator (a TokenType) to evaluated operands. token is used for error reporting; it differs
        from operator for compound assignments.
        """
        if operator is TokenType.EQUAL_EQUAL:
            return Interpreter.is_equal(left, right)
        if operator is TokenType.BANG_EQUAL:
            return not Interpreter.is_equal(left, right)

        if operator is TokenType.PLUS:
            if isinstance(left, str) or isinstance(right, str):
                return Interpreter.stringify(left) + Interpreter.stringify(right)
            if Interpreter.is_number(left) and Interpreter.is_number(right):
                return left + right
            raise LoxRuntimeError(token, "Operands must be two numbers or at least one string.")

        Interpreter.check_number_operands(token, left, right)

        if operator is TokenType.MINUS:
            return left - right
        if operator is TokenType.STAR:
            return left * right
        if operator is TokenType.SLASH:
            if right == 0:
                raise DivisionByZeroError(token)
            return left / right
        if operator is TokenType.PERCENT:
            if right == 0:
                raise DivisionByZeroError(token)
            return math.fmod(left, right)
        if operator is TokenType.HAT:
            try:
                return math.pow(left, right)
            except (OverflowError, ValueError):
                raise LoxRuntimeError(token, "Exponentiation result is not a real number.") from None

        if operator is TokenType.GREATER:
            return left > right
        if operator is TokenType.GREATER_EQUAL:
            return left >= right
        if operator is TokenType.LESS:
            return left < right
        if operator is TokenType.LESS_EQUAL:
            return left <= right

        raise LoxRuntimeError(token, f"Unknown operator '{token.lexeme}'.")

    @staticmethod
    def is_number(value):
        return type(value) is float

    @staticmethod
    def check_number_operands(token, *operands):
        if all(Interpreter.is_number(operand) for operand in operands):
            return
        if len(operands) == 1:
            raise LoxRuntimeError(token, "Operand must be a number.")
        raise LoxRuntimeError(token, "Operands must be numbers.")

    @staticmethod
    def is_truthy(value):
        """nil, false, and 0 are falsy; everything else is truthy."""
        if value is None or value is False:
            return False
        if Interpreter.is_number(value):
            return value != 0
        return True

    @staticmethod
    def is_equal(left, right):
        """Equality without type coercion: values of different types are never equal."""
        if type(left) is not type(right):
            return False
        return left == right

    @staticmethod
    def stringify(value):
        """Display form of a runtime value, as used by 'print' and string concatenation."""
        if value is None:
            return "nil"
        if value is True:
            return "true"
        if value is False:
            return "false"
        if Interpreter.is_number(value):
            if value.is_integer() and abs(value) < 1e16:  # beyond that, keep exponent notation
                return str(int(value))
            return repr(value)
        return str(value)
