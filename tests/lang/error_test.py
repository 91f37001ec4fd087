import io
import unittest

from lox.lang.error import DivisionByZeroError, ErrorHandler, LoxError, LoxRuntimeError
from lox.lang.session import Session
from lox.lang.tokens import Token, TokenType


def handler():
    return ErrorHandler(fatal=False, stream=io.StringIO())


def indent(line):
    return len(line) - len(line.lstrip(" "))


class ErrorHandlerTestCase(unittest.TestCase):

    def test_error_at(self):
        error_handler = handler()
        error_handler.error_at(Token(TokenType.IDENTIFIER, "abc", None, 3), "Bad.")
        error_handler.error_at(Token(TokenType.EOF, "", None, 4), "Worse.")

        self.assertEqual(["[line 3] Error at 'abc': Bad.", "[line 4] Error at end: Worse."], error_handler.errors)
        self.assertTrue(error_handler.had_error)
        self.assertFalse(error_handler.had_runtime_error)

    def test_runtime_error(self):
        error_handler = handler()
        error_handler.runtime_error(DivisionByZeroError(Token(TokenType.SLASH, "/", None, 2)))

        self.assertEqual(["Division by zero.\n[line 2]"], error_handler.runtime_errors)
        self.assertTrue(error_handler.had_runtime_error)
        self.assertFalse(error_handler.had_error)
        self.assertIn("Division by zero.", error_handler.stream.getvalue())

    def test_reset(self):
        error_handler = handler()
        error_handler.error(1, "Bad.")
        error_handler.runtime_error(LoxRuntimeError(Token(TokenType.MINUS, "-", None, 1), "Oops."))

        error_handler.reset()
        self.assertFalse(error_handler.had_error or error_handler.had_runtime_error)
        self.assertEqual([], error_handler.errors + error_handler.runtime_errors)

    def test_diagnose(self):
        error_handler = handler()
        error_handler.register_source("test.lox", "var a = 1;\nprint a + nil;")

        diagnosis = error_handler.diagnose(2, Token(TokenType.PLUS, "+", None, 2))
        self.assertIn("print a ", diagnosis)
        self.assertIn("^", diagnosis)
        self.assertIsNone(error_handler.diagnose(3))
        self.assertIsNone(error_handler.diagnose(None))

    def test_diagnose_uses_column(self):
        error_handler = handler()
        error_handler.register_source("test.lox", "g + g;")

        underline = error_handler.diagnose(1, Token(TokenType.IDENTIFIER, "g", None, 1, 4)).splitlines()[1]
        self.assertEqual(2 + 4, indent(underline))

        # without a column, a repeated lexeme cannot be placed
        self.assertEqual("  g + g;", error_handler.diagnose(1, Token(TokenType.IDENTIFIER, "g", None, 1)))

    def test_runtime_error_points_at_failing_token(self):
        error_handler = handler()
        Session(error_handler, stdout=io.StringIO()).run("var x = 1; print -x + -nil;")

        underline = error_handler.stream.getvalue().splitlines()[-1]
        self.assertEqual(2 + len("var x = 1; print -x + "), indent(underline))

    def test_throw_without_exit(self):
        error_handler = handler()
        error_handler.throw("something went wrong")

        self.assertTrue(error_handler.had_error)
        self.assertIn("something went wrong", error_handler.stream.getvalue())

    def test_throw_exits_when_fatal(self):
        error_handler = ErrorHandler(stream=io.StringIO())

        with self.assertRaises(SystemExit) as context:
            error_handler.throw("fatal")
        self.assertEqual(65, context.exception.code)

        with self.assertRaises(SystemExit) as context:
            error_handler.throw("fatal", internal=True)
        self.assertEqual(70, context.exception.code)

    def test_context_manager(self):
        error_handler = handler()

        with error_handler:
            raise LoxError("escaped")
        self.assertEqual(["escaped"], error_handler.errors)

        with error_handler:
            raise RecursionError()
        self.assertIn("maximum recursion depth exceeded", error_handler.errors)

        with self.assertRaises(SystemExit):
            with error_handler:
                raise SystemExit(0)

        with self.assertRaises(ValueError):
            with error_handler:
                raise ValueError("internal")
        self.assertIn("unknown error: 'ValueError: internal'", error_handler.errors)

    def test_line_from_token(self):
        token = Token(TokenType.IDENTIFIER, "x", None, 7)
        self.assertEqual(7, LoxRuntimeError(token, "msg").line)
        self.assertEqual(5, LoxError("msg", line=5).line)
        self.assertIsNone(LoxError("msg").line)


if __name__ == '__main__':
    unittest.main()
