"""Recursive-descent parser for the lox language. Produces a list of statement nodes from a list of Tokens.

Grammar, lowest to highest precedence:

```
program        ::= declaration* EOF
declaration    ::= classDecl | funDecl | varDecl | statement
classDecl      ::= "class" IDENTIFIER "{" method* "}"
method         ::= IDENTIFIER "(" parameters? ")" block      ; a method named "init" is the constructor
funDecl        ::= "fun" IDENTIFIER "(" parameters? ")" block
varDecl        ::= "var" IDENTIFIER ( "=" expression )? ";"
statement      ::= exprStmt | forStmt | ifStmt | printStmt | returnStmt | whileStmt
                 | breakStmt | continueStmt | block
forStmt        ::= "for" "(" ( varDecl | exprStmt | ";" ) expression? ";" expression? ")" statement
expression     ::= comma
comma          ::= assignment ( "," assignment )*
assignment     ::= ( call "." )? IDENTIFIER ( "=" | "+=" | "-=" | "*=" | "/=" ) assignment
                 | logic_or
logic_or       ::= logic_and ( "or" logic_and )*
logic_and      ::= equality ( "and" equality )*
equality       ::= comparison ( ( "!=" | "==" ) comparison )*
comparison     ::= addition ( ( ">" | ">=" | "<" | "<=" ) addition )*
addition       ::= multiplication ( ( "-" | "+" ) multiplication )*
multiplication ::= modulo ( ( "/" | "*" ) modulo )*
modulo         ::= exponent ( "%" exponent )*
exponent       ::= unary ( "^" unary )*
unary          ::= ( "!" | "-" ) unary | call
call           ::= primary ( "(" arguments? ")" | "." IDENTIFIER )*
arguments      ::= assignment ( "," assignment )*            ; "," separates arguments, not the comma operator
primary        ::= "true" | "false" | "nil" | "this" | NUMBER | STRING | IDENTIFIER
                 | "(" expression ")" | "fun" IDENTIFIER? "(" parameters? ")" block
```

Syntax errors are reported to the ErrorHandler and never escape parse(): the parser synchronizes at the next statement
boundary and keeps going, so that several errors can be reported in one pass.
"""

from lox.lang import nodes
from lox.lang.error import ParseError
from lox.lang.tokens import COMPOUND_OPERATORS, TokenType


class Parser:
    """Single-use parser over one token list."""
    MAX_ARGS = 8  # maximum number of parameters/arguments of a function

    # keywords that start a statement, used when synchronizing after an error
    STATEMENT_STARTS = (
        TokenType.CLASS,
        TokenType.FUN,
        TokenType.VAR,
        TokenType.FOR,
        TokenType.IF,
        TokenType.WHILE,
        TokenType.PRINT,
        TokenType.RETURN,
        TokenType.BREAK,
        TokenType.CONTINUE,
    )

    def __init__(self, tokens, error_handler):
        self.tokens = tokens
        self.error_handler = error_handler
        self.current = 0

    def parse(self):
        """Parses the whole token list. Declarations that failed to parse are left out of the result."""
        statements = []
        while not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    # statements

    def declaration(self):
        """Parses a declaration, or returns None after synchronizing if it contains a syntax error."""
        try:
            if self.match(TokenType.CLASS):
                return self.class_declaration()
            if self.check(TokenType.FUN) and self.check_next(TokenType.IDENTIFIER):
                self.advance()
                return nodes.FunctionStmt(self.function("function"))
            if self.match(TokenType.VAR):
                return self.var_declaration()

            return self.statement()

        except ParseError:
            self.synchronize()
            return None

    def class_declaration(self):
        name = self.consume(TokenType.IDENTIFIER, "Expect class name.")
        self.consume(TokenType.LEFT_BRACE, "Expect '{' before class body.")

        methods = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            methods.append(self.function("method"))

        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after class body.")
        return nodes.Class(name, methods)

    def var_declaration(self):
        name = self.consume(TokenType.IDENTIFIER, "Expect variable name.")

        initializer = None
        if self.match(TokenType.EQUAL):
            initializer = self.expression()

        self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return nodes.Var(name, initializer)

    def statement(self):
        if self.match(TokenType.FOR):
            return self.for_statement()
        if self.match(TokenType.IF):
            return self.if_statement()
        if self.match(TokenType.WHILE):
            return self.while_statement()
        if self.match(TokenType.PRINT):
            return self.print_statement()
        if self.match(TokenType.RETURN):
            return self.return_statement()
        if self.match(TokenType.BREAK):
            return self.loop_exit(nodes.Break)
        if self.match(TokenType.CONTINUE):
            return self.loop_exit(nodes.Continue)
        if self.match(TokenType.LEFT_BRACE):
            return nodes.Block(self.block())

        return self.expression_statement()

    def for_statement(self):
        """Desugars a for loop into a block holding the initializer and a while loop. The increment is kept on the
        While node so that it also runs after a 'continue'.
        """
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        if self.match(TokenType.SEMICOLON):
            initializer = None
        elif self.match(TokenType.VAR):
            initializer = self.var_declaration()
        else:
            initializer = self.expression_statement()

        condition = None
        if not self.check(TokenType.SEMICOLON):
            condition = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self.check(TokenType.RIGHT_PAREN):
            increment = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.statement()

        if condition is None:
            condition = nodes.Literal(True)
        loop = nodes.While(condition, body, increment)

        if initializer is not None:
            return nodes.Block([initializer, loop])
        return loop

    def if_statement(self):
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self.statement()
        else_branch = None
        if self.match(TokenType.ELSE):
            else_branch = self.statement()

        return nodes.If(condition, then_branch, else_branch)

    def while_statement(self):
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after while condition.")

        return nodes.While(condition, self.statement())

    def print_statement(self):
        value = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return nodes.Print(value)

    def return_statement(self):
        keyword = self.previous()

        value = None
        if not self.check(TokenType.SEMICOLON):
            value = self.expression()

        self.consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        return nodes.Return(keyword, value)

    def loop_exit(self, stmt_cls):
        """Parses 'break;' or 'continue;'. Whether it is inside a loop is checked by the resolver."""
        keyword = self.previous()
        self.consume(TokenType.SEMICOLON, f"Expect ';' after '{keyword.lexeme}'.")
        return stmt_cls(keyword)

    def expression_statement(self):
        expr = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return nodes.Expression(expr)

    def function(self, kind, named=True):
        """Parses the rest of a function after 'fun' (or a method). kind is used in error messages. If not named, the
        name is optional (function literals).
        """
        name = None
        if named:
            name = self.consume(TokenType.IDENTIFIER, f"Expect {kind} name.")
        elif self.check(TokenType.IDENTIFIER):
            name = self.advance()

        self.consume(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name." if name else "Expect '(' after 'fun'.")

        params = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= Parser.MAX_ARGS:
                    self.error(self.peek(), f"Can't have more than {Parser.MAX_ARGS} parameters.")
                params.append(self.consume(TokenType.IDENTIFIER, "Expect parameter name."))

                if not self.match(TokenType.COMMA):
                    break

        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")
        self.consume(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body.")

        return nodes.Function(name, params, self.block())

    def block(self):
        """Parses declarations until the closing brace. Assumes '{' has been consumed."""
        statements = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)

        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    # expressions

    def expression(self):
        return self.comma()

    def comma(self):
        expr = self.assignment()

        while self.match(TokenType.COMMA):
            operator = self.previous()
            right = self.assignment()
            expr = nodes.Binary(expr, operator, right)

        return expr

    def assignment(self):
        """Assignment is right-associative. The left side is parsed as an ordinary expression first and then checked
        to be a valid target: a Variable or a Get.
        """
        expr = self.logic_or()

        if self.match(TokenType.EQUAL, *COMPOUND_OPERATORS):
            equals = self.previous()
            operator = equals if equals.type is not TokenType.EQUAL else None
            value = self.assignment()

            if isinstance(expr, nodes.Variable):
                return nodes.Assign(expr.name, value, operator)
            elif isinstance(expr, nodes.Get):
                return nodes.Set(expr.object, expr.name, value, operator)

            self.error(equals, "Invalid assignment target.")  # reported, but no need to synchronize

        return expr

    def logic_or(self):
        return self._left_assoc(self.logic_and, nodes.Logical, TokenType.OR)

    def logic_and(self):
        return self._left_assoc(self.equality, nodes.Logical, TokenType.AND)

    def equality(self):
        return self._left_assoc(self.comparison, nodes.Binary, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def comparison(self):
        return self._left_assoc(self.addition, nodes.Binary, TokenType.GREATER, TokenType.GREATER_EQUAL,
                                TokenType.LESS, TokenType.LESS_EQUAL)

    def addition(self):
        return self._left_assoc(self.multiplication, nodes.Binary, TokenType.MINUS, TokenType.PLUS)

    def multiplication(self):
        return self._left_assoc(self.modulo, nodes.Binary, TokenType.SLASH, TokenType.STAR)

    def modulo(self):
        return self._left_assoc(self.exponent, nodes.Binary, TokenType.PERCENT)

    def exponent(self):
        return self._left_assoc(self.unary, nodes.Binary, TokenType.HAT)

    def unary(self):
        if self.match(TokenType.BANG, TokenType.MINUS):
            operator = self.previous()
            return nodes.Unary(operator, self.unary())

        return self.call()

    def call(self):
        expr = self.primary()

        while True:
            if self.match(TokenType.LEFT_PAREN):
                expr = self.finish_call(expr)
            elif self.match(TokenType.DOT):
                name = self.consume(TokenType.IDENTIFIER, "Expect property name after '.'.")
                expr = nodes.Get(expr, name)
            else:
                break

        return expr

    def finish_call(self, callee):
        arguments = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= Parser.MAX_ARGS:
                    self.error(self.peek(), f"Can't have more than {Parser.MAX_ARGS} arguments.")
                arguments.append(self.assignment())

                if not self.match(TokenType.COMMA):
                    break

        paren = self.consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return nodes.Call(callee, paren, arguments)

    def primary(self):
        if self.match(TokenType.FALSE):
            return nodes.Literal(False)
        if self.match(TokenType.TRUE):
            return nodes.Literal(True)
        if self.match(TokenType.NIL):
            return nodes.Literal(None)

        if self.match(TokenType.NUMBER, TokenType.STRING):
            return nodes.Literal(self.previous().literal)

        if self.match(TokenType.THIS):
            return nodes.This(self.previous())

        if self.match(TokenType.IDENTIFIER):
            return nodes.Variable(self.previous())

        if self.match(TokenType.FUN):
            return self.function("function", named=False)

        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return nodes.Grouping(expr)

        raise self.error(self.peek(), "Expect expression.")

    def _left_assoc(self, operand, node_cls, *types):
        """Parses a left-associative chain of operand (operator operand)* for any operator in types."""
        expr = operand()

        while self.match(*types):
            operator = self.previous()
            right = operand()
            expr = node_cls(expr, operator, right)

        return expr

    # token helpers

    def match(self, *types):
        """Consumes the current token if it is of any of types."""
        for type_ in types:
            if self.check(type_):
                self.advance()
                return True
        return False

    def check(self, type_):
        return not self.is_at_end() and self.peek().type is type_

    def check_next(self, type_):
        if self.is_at_end() or self.tokens[self.current + 1].type is TokenType.EOF:
            return False
        return self.tokens[self.current + 1].type is type_

    def advance(self):
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def is_at_end(self):
        return self.peek().type is TokenType.EOF

    def peek(self):
        return self.tokens[self.current]

    def previous(self):
        return self.tokens[self.current - 1]

    def consume(self, type_, message):
        """Consumes a token of type_, or reports message and raises a ParseError."""
        if self.check(type_):
            return self.advance()
        raise self.error(self.peek(), message)

    def error(self, token, message):
        """Reports message at token and returns (does not raise) a ParseError for the caller to raise if needed."""
        self.error_handler.error_at(token, message)
        return ParseError(message, token)

    def synchronize(self):
        """Discards tokens until the next statement boundary: just after a ';', or before a statement keyword."""
        self.advance()

        while not self.is_at_end():
            if self.previous().type is TokenType.SEMICOLON:
                return
            if self.peek().type in Parser.STATEMENT_STARTS:
                return
            self.advance()
