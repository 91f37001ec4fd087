"""Session control for the lox language: runs source text through the whole pipeline, either from a file or line by
line from the interactive shell.

Pipeline: Scanner -> Parser -> Resolver -> Interpreter. If any static error was reported by the first three passes,
the program is not executed.
"""

import sys

from lox.lang.error import ErrorHandler
from lox.lang.interpreter import Interpreter
from lox.lang.parser import Parser
from lox.lang.printer import AstPrinter
from lox.lang.resolver import Resolver
from lox.lang.scanner import Scanner


class Session:
    """Governs a lox session. The interpreter (and therefore the global Environment) lives as long as the session, so
    definitions from one run are visible to the next.
    """
    SH_FILE = "<stdin>"  # command-line interpreter filename

    EX_OK = 0
    EX_DATAERR = 65   # static (scan/parse/resolve) error
    EX_SOFTWARE = 70  # runtime error

    # a lox call takes about a dozen Python frames, far more than the default limit of 1000 allows for
    RECURSION_LIMIT = 100_000

    def __init__(self, error_handler=None, stdout=None, cmd_line=False):
        self.error_handler = error_handler if error_handler is not None else ErrorHandler(fatal=False)
        self.stdout = stdout      # where program output goes (defaults to sys.stdout)
        self.cmd_line = cmd_line  # whether or not in command-line mode

        if self.cmd_line:
            self.error_handler.fatal = False

        self.interpreter = Interpreter(self.error_handler, stdout)

        if sys.getrecursionlimit() < Session.RECURSION_LIMIT:
            sys.setrecursionlimit(Session.RECURSION_LIMIT)

    def parse(self, source, path=SH_FILE):
        """Scans and parses source. Returns the statement list (possibly partial if there were syntax errors)."""
        self.error_handler.reset()
        self.error_handler.register_source(path, source)

        tokens = Scanner(source, self.error_handler).scan_tokens()
        return Parser(tokens, self.error_handler).parse()

    def run(self, source, path=SH_FILE):
        """Runs source. Returns an exit status: EX_DATAERR after a static error, EX_SOFTWARE after a runtime error."""
        statements = self.parse(source, path)
        if self.error_handler.had_error:
            return Session.EX_DATAERR

        Resolver(self.interpreter, self.error_handler).resolve(statements)
        if self.error_handler.had_error:
            return Session.EX_DATAERR

        self.interpreter.interpret(statements)
        if self.error_handler.had_runtime_error:
            return Session.EX_SOFTWARE

        return Session.EX_OK

    def read_file(self, path):
        """Returns the contents of the file at path, or None (after reporting an error) if it cannot be read."""
        try:
            with open(path, "r", encoding="utf-8") as file:
                return file.read()
        except OSError:
            self.error_handler.throw(f"'{path}' could not be opened")
            return None

    def run_file(self, path):
        """Reads and runs the file at path. An unreadable file is reported as an error."""
        source = self.read_file(path)
        if source is None:
            return Session.EX_DATAERR
        return self.run(source, path)

    def dump(self, source, path=SH_FILE):
        """Parses source and returns its syntax tree in printed form instead of running it."""
        statements = self.parse(source, path)
        return AstPrinter().print_all(statements)
