"""Error handling for the lox language. Static errors (scanning, parsing, resolving) and runtime errors are reported
through an ErrorHandler, which is created by whoever orchestrates a run and passed into every pass. If an exception
that is not a LoxError makes it all the way to an ErrorHandler used as a context manager, it is assumed to be an
internal issue.
"""

import sys

from termcolor import colored

from lox.lang.tokens import TokenType


class LoxError(Exception):
    """Base class for all lox errors. Carries the offending token (if any) so that errors can be reported by line."""

    def __init__(self, message, token=None, line=None):
        super().__init__(message)

        self.message = message
        self.token = token
        self.line = line if line is not None else getattr(token, "line", None)


class ParseError(LoxError):
    """Raised inside the parser to unwind to the nearest statement boundary. Never escapes Parser.parse."""


class LoxRuntimeError(LoxError):
    """Error raised while executing a resolved program. Aborts the current top-level run."""

    def __init__(self, token, message):
        super().__init__(message, token)


class DivisionByZeroError(LoxRuntimeError):
    """Dedicated runtime error for '/' and '%' with a zero divisor."""

    def __init__(self, token):
        super().__init__(token, "Division by zero.")


class ErrorHandler:
    """Collects and reports lox diagnostics. Can also be used as a context manager, in which case it will silently
    suppress Python errors and report them as lox errors instead.
    """
    ERROR = "red"

    def __init__(self, fatal=True, stream=None):
        self.fatal = fatal
        self.stream = stream  # where diagnostics are printed (defaults to sys.stderr at report time)

        self.path = None  # used for error messages
        self.lines = []   # source lines of the registered source, used for diagnosis

        self.had_error = False
        self.had_runtime_error = False

        self.errors = []          # plain static error messages, in order of occurrence
        self.runtime_errors = []  # plain runtime error messages, in order of occurrence

    def register_source(self, path, source):
        """Registers the source being run so that diagnostics can quote the offending line."""
        self.path = path
        self.lines = source.splitlines()

    def reset(self):
        """Clears error flags and recorded diagnostics. Should be called at the start of a fresh top-level run."""
        self.had_error = False
        self.had_runtime_error = False

        self.errors = []
        self.runtime_errors = []

    def error(self, line, message):
        """Reports a static error that is only anchored to a line (used by the scanner)."""
        self.report(line, "", message)

    def error_at(self, token, message):
        """Reports a static error anchored to token."""
        if token.type is TokenType.EOF:
            self.report(token.line, " at end", message, token)
        else:
            self.report(token.line, f" at '{token.lexeme}'", message, token)

    def report(self, line, where, message, token=None):
        """Records and prints a static error."""
        plain = f"[line {line}] Error{where}: {message}"
        self.errors.append(plain)
        self.had_error = True

        error_msg = colored(f"[line {line}] ", attrs=["bold"])
        error_msg += colored(f"Error{where}: ", ErrorHandler.ERROR, attrs=["bold"]) + message
        self._print(error_msg)

        diagnosis = self.diagnose(line, token)
        if diagnosis:
            self._print(diagnosis)

    def runtime_error(self, error):
        """Records and prints a LoxRuntimeError."""
        plain = f"{error.message}\n[line {error.line}]"
        self.runtime_errors.append(plain)
        self.had_runtime_error = True

        error_msg = colored("runtime error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.message
        error_msg += "\n" + colored(f"[line {error.line}]", attrs=["bold"])
        self._print(error_msg)

        diagnosis = self.diagnose(error.line, error.token)
        if diagnosis:
            self._print(diagnosis)

    def diagnose(self, line, token=None):
        """Returns the offending source line with the token highlighted and underlined, or None if the line is not
        known.
        """
        if not line or line > len(self.lines):
            return None

        source_line = self.lines[line - 1]

        start = ErrorHandler.locate(source_line, token)
        if start is None:
            return "  " + source_line

        end = start + len(token.lexeme)
        diagnosis = "  " + source_line[:start]
        diagnosis += colored(source_line[start:end], ErrorHandler.ERROR, attrs=["bold"])
        diagnosis += source_line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), ErrorHandler.ERROR, attrs=["bold"])

        return diagnosis

    @staticmethod
    def locate(source_line, token):
        """Returns the offset of token in source_line, or None if it cannot be placed. Without a column, a lexeme that
        occurs more than once on the line is ambiguous.
        """
        if token is None or not token.lexeme:
            return None

        column = token.column
        if column is not None and source_line[column:column + len(token.lexeme)] == token.lexeme:
            return column

        if source_line.count(token.lexeme) == 1:
            return source_line.find(token.lexeme)
        return None

    def throw(self, message, internal=False):
        """Prints a fatal error that is not tied to a line. Exits if self.fatal."""
        error_msg = ""
        if self.path:
            error_msg += colored(f"{self.path}: ", attrs=["bold"])
        if internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + message
        self.errors.append(message)
        self.had_error = True
        self._print(error_msg)

        if self.fatal:
            sys.exit(70 if internal else 65)

    def _print(self, msg):
        print(msg, file=self.stream if self.stream is not None else sys.stderr)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw("keyboard interrupt")
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw("maximum recursion depth exceeded", internal=True)
        elif exc_type is not None and issubclass(exc_type, LoxError):
            self.throw(exc_val.message)
        elif exc_type is not None:
            self.throw(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True)
            do_exit = True

        return not do_exit
