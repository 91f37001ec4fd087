"""Debugging aid: renders syntax tree nodes in a parenthesized prefix form.

Format:
    1 + 2 * 3            -> (+ 1 (* 2 3))
    var a = 1;           -> (var a 1)
    while (a) print a;   -> (while a (print a))
"""

from lox.lang.nodes import Visitor


class AstPrinter(Visitor):
    """Stateless: one instance can print any number of nodes."""

    def print(self, node):
        """Returns the string form of node (an expression or statement)."""
        return self.visit(node)

    def print_all(self, statements):
        return "\n".join(self.print(stmt) for stmt in statements)

    # statements

    def visit_expression(self, stmt):
        return self.parenthesize(";", stmt.expression)

    def visit_print(self, stmt):
        return self.parenthesize("print", stmt.expression)

    def visit_var(self, stmt):
        if stmt.initializer is None:
            return f"(var {stmt.name.lexeme})"
        return self.parenthesize(f"var {stmt.name.lexeme}", stmt.initializer)

    def visit_block(self, stmt):
        return self.parenthesize("block", *stmt.statements)

    def visit_if(self, stmt):
        if stmt.else_branch is None:
            return self.parenthesize("if", stmt.condition, stmt.then_branch)
        return self.parenthesize("if-else", stmt.condition, stmt.then_branch, stmt.else_branch)

    def visit_while(self, stmt):
        if stmt.increment is None:
            return self.parenthesize("while", stmt.condition, stmt.body)
        return self.parenthesize("for", stmt.condition, stmt.increment, stmt.body)

    def visit_break(self, stmt):
        return "(break)"

    def visit_continue(self, stmt):
        return "(continue)"

    def visit_return(self, stmt):
        if stmt.value is None:
            return "(return)"
        return self.parenthesize("return", stmt.value)

    def visit_function_stmt(self, stmt):
        return self.visit(stmt.function)

    def visit_class(self, stmt):
        return self.parenthesize(f"class {stmt.name.lexeme}", *stmt.methods)

    # expressions

    def visit_literal(self, expr):
        if expr.value is None:
            return "nil"
        if expr.value is True or expr.value is False:
            return str(expr.value).lower()
        if isinstance(expr.value, float) and expr.value.is_integer():
            return str(int(expr.value))
        if isinstance(expr.value, str):
            return f"\"{expr.value}\""
        return str(expr.value)

    def visit_grouping(self, expr):
        return self.parenthesize("group", expr.expression)

    def visit_unary(self, expr):
        return self.parenthesize(expr.operator.lexeme, expr.right)

    def visit_binary(self, expr):
        return self.parenthesize(expr.operator.lexeme, expr.left, expr.right)

    def visit_logical(self, expr):
        return self.parenthesize(expr.operator.lexeme, expr.left, expr.right)

    def visit_variable(self, expr):
        return expr.name.lexeme

    def visit_assign(self, expr):
        operator = expr.operator.lexeme if expr.operator else "="
        return self.parenthesize(f"{operator} {expr.name.lexeme}", expr.value)

    def visit_call(self, expr):
        return self.parenthesize("call", expr.callee, *expr.arguments)

    def visit_get(self, expr):
        return self.parenthesize(f". {expr.name.lexeme}", expr.object)

    def visit_set(self, expr):
        operator = expr.operator.lexeme if expr.operator else "="
        return self.parenthesize(f"{operator} .{expr.name.lexeme}", expr.object, expr.value)

    def visit_this(self, expr):
        return "this"

    def visit_function(self, expr):
        name = f"fun {expr.name.lexeme}" if expr.name else "fun"
        params = " ".join(param.lexeme for param in expr.params)
        return self.parenthesize(f"{name} ({params})", *expr.body)

    def parenthesize(self, name, *parts):
        result = f"({name}"
        for part in parts:
            result += " " + self.visit(part)
        return result + ")"
