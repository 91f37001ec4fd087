"""Lexical analysis for the lox language. Converts raw source text into a flat list of Tokens in a single left-to-right
pass with one character of lookahead.

Scanning is resilient: unexpected characters and unterminated strings are reported to the ErrorHandler, but scanning
continues to the end of the source so that later passes can report their own errors in the same run.
"""

from lox.lang.tokens import KEYWORDS, Token, TokenType


class Scanner:
    """Single-use scanner over one source string."""
    SINGLE = {
        "(": TokenType.LEFT_PAREN,
        ")": TokenType.RIGHT_PAREN,
        "{": TokenType.LEFT_BRACE,
        "}": TokenType.RIGHT_BRACE,
        ",": TokenType.COMMA,
        ".": TokenType.DOT,
        ";": TokenType.SEMICOLON,
        "%": TokenType.PERCENT,
        "^": TokenType.HAT,
    }
    # character: (type if not followed by "=", type if followed by "=")
    DOUBLE = {
        "!": (TokenType.BANG, TokenType.BANG_EQUAL),
        "=": (TokenType.EQUAL, TokenType.EQUAL_EQUAL),
        "<": (TokenType.LESS, TokenType.LESS_EQUAL),
        ">": (TokenType.GREATER, TokenType.GREATER_EQUAL),
        "+": (TokenType.PLUS, TokenType.PLUS_EQUAL),
        "-": (TokenType.MINUS, TokenType.MINUS_EQUAL),
        "*": (TokenType.STAR, TokenType.STAR_EQUAL),
    }
    WHITESPACE = " \r\t"

    def __init__(self, source, error_handler):
        self.source = source
        self.error_handler = error_handler

        self.tokens = []
        self.start = 0    # first character of the lexeme being scanned
        self.current = 0  # character currently being considered
        self.line = 1
        self.line_start = 0  # index of the first character of the current line
        self.column = 0      # column of the lexeme being scanned

    def scan_tokens(self):
        """Scans the whole source. Always ends with exactly one EOF token."""
        while not self.is_at_end():
            self.start = self.current
            self.column = self.start - self.line_start
            self.scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self.line))
        return self.tokens

    def scan_token(self):
        char = self.advance()

        if char in Scanner.SINGLE:
            self.add_token(Scanner.SINGLE[char])

        elif char in Scanner.DOUBLE:
            single, double = Scanner.DOUBLE[char]
            self.add_token(double if self.match("=") else single)

        elif char == "/":
            if self.match("/"):
                while self.peek() != "\n" and not self.is_at_end():  # comment goes until end of line
                    self.advance()
            else:
                self.add_token(TokenType.SLASH_EQUAL if self.match("=") else TokenType.SLASH)

        elif char in Scanner.WHITESPACE:
            pass

        elif char == "\n":
            self.new_line()

        elif char == "\"":
            self.string()

        elif Scanner.is_digit(char):
            self.number()

        elif Scanner.is_alpha(char):
            self.identifier()

        else:
            self.error_handler.error(self.line, f"Unexpected character '{char}'.")

    def string(self):
        """Scans a string literal. Strings may span lines and have no escape sequences."""
        while self.peek() != "\"" and not self.is_at_end():
            char = self.advance()
            if char == "\n":
                self.new_line()

        if self.is_at_end():
            self.error_handler.error(self.line, "Unterminated string.")
            return

        self.advance()  # closing "
        self.add_token(TokenType.STRING, self.source[self.start + 1:self.current - 1])

    def number(self):
        """Scans an integer or decimal literal. There is no exponent notation, and a trailing '.' is not consumed."""
        while Scanner.is_digit(self.peek()):
            self.advance()

        if self.peek() == "." and Scanner.is_digit(self.peek_next()):
            self.advance()
            while Scanner.is_digit(self.peek()):
                self.advance()

        self.add_token(TokenType.NUMBER, float(self.source[self.start:self.current]))

    def identifier(self):
        while Scanner.is_alphanumeric(self.peek()):
            self.advance()

        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def new_line(self):
        self.line += 1
        self.line_start = self.current

    def is_at_end(self):
        return self.current >= len(self.source)

    def advance(self):
        self.current += 1
        return self.source[self.current - 1]

    def match(self, expected):
        """Consumes the next character only if it is expected."""
        if self.is_at_end() or self.source[self.current] != expected:
            return False

        self.current += 1
        return True

    def peek(self):
        return "\0" if self.is_at_end() else self.source[self.current]

    def peek_next(self):
        return "\0" if self.current + 1 >= len(self.source) else self.source[self.current + 1]

    def add_token(self, type_, literal=None):
        text = self.source[self.start:self.current]
        self.tokens.append(Token(type_, text, literal, self.line, self.column))

    @staticmethod
    def is_digit(char):
        return "0" <= char <= "9"

    @staticmethod
    def is_alpha(char):
        return "a" <= char <= "z" or "A" <= char <= "Z" or char == "_"

    @staticmethod
    def is_alphanumeric(char):
        return Scanner.is_alpha(char) or Scanner.is_digit(char)
