"""Syntax tree of the lox language. Two closed node families, expressions and statements, declared as dataclasses.

Nodes compare and hash by identity (eq=False): the resolver keys its lexical distances by the node object itself, so
two structurally identical Variable nodes at different places in a program must stay distinct.

Consumers (Resolver, Interpreter, AstPrinter) subclass Visitor and implement one visit_<tag> method per node type they
handle, where <tag> is the snake_case node class name (Binary -> visit_binary, FunctionStmt -> visit_function_stmt).
"""

import re
from dataclasses import dataclass, field
from typing import Any, List, Optional

from lox.lang.tokens import Token


class Node:
    """Superclass for every syntax tree node."""
    tag = "node"

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls.tag = re.sub(r"(?<!^)(?=[A-Z])", "_", cls.__name__).lower()


class Expr(Node):
    """Superclass for expression nodes."""


class Stmt(Node):
    """Superclass for statement nodes."""


class Visitor:
    """Dispatches a node to the visit_<tag> method of the subclass."""

    def visit(self, node):
        try:
            method = getattr(self, f"visit_{node.tag}")
        except AttributeError:
            raise NotImplementedError(f"{type(self).__name__} cannot visit {type(node).__name__}") from None
        return method(node)


# expressions


@dataclass(eq=False)
class Literal(Expr):
    value: Any


@dataclass(eq=False)
class Grouping(Expr):
    expression: Expr


@dataclass(eq=False)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(eq=False)
class Binary(Expr):
    """Arithmetic, comparison, equality, and comma ("," evaluates both operands and yields the right one)."""
    left: Expr
    operator: Token
    right: Expr


@dataclass(eq=False)
class Logical(Expr):
    """Short-circuiting 'and' / 'or'."""
    left: Expr
    operator: Token
    right: Expr


@dataclass(eq=False)
class Variable(Expr):
    name: Token


@dataclass(eq=False)
class Assign(Expr):
    """name = value, or name op= value when operator is a compound assignment token."""
    name: Token
    value: Expr
    operator: Optional[Token] = None


@dataclass(eq=False)
class Call(Expr):
    callee: Expr
    paren: Token  # closing paren, used to report errors at the call site
    arguments: List[Expr] = field(default_factory=list)


@dataclass(eq=False)
class Get(Expr):
    object: Expr
    name: Token


@dataclass(eq=False)
class Set(Expr):
    """object.name = value, or object.name op= value when operator is a compound assignment token."""
    object: Expr
    name: Token
    value: Expr
    operator: Optional[Token] = None


@dataclass(eq=False)
class This(Expr):
    keyword: Token


@dataclass(eq=False)
class Function(Expr):
    """Function literal. Named and anonymous functions share this node; name is None for anonymous ones."""
    name: Optional[Token]
    params: List[Token]
    body: List[Stmt]


# statements


@dataclass(eq=False)
class Expression(Stmt):
    expression: Expr


@dataclass(eq=False)
class Print(Stmt):
    expression: Expr


@dataclass(eq=False)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr] = None


@dataclass(eq=False)
class Block(Stmt):
    statements: List[Stmt]


@dataclass(eq=False)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None


@dataclass(eq=False)
class While(Stmt):
    """increment is only set by the for-loop desugaring; it runs after every iteration, including continued ones."""
    condition: Expr
    body: Stmt
    increment: Optional[Expr] = None


@dataclass(eq=False)
class Break(Stmt):
    keyword: Token


@dataclass(eq=False)
class Continue(Stmt):
    keyword: Token


@dataclass(eq=False)
class Return(Stmt):
    keyword: Token
    value: Optional[Expr] = None


@dataclass(eq=False)
class FunctionStmt(Stmt):
    """Function declaration: binds the (named) function literal in the enclosing scope."""
    function: Function

    @property
    def name(self):
        return self.function.name


@dataclass(eq=False)
class Class(Stmt):
    name: Token
    methods: List[Function] = field(default_factory=list)
