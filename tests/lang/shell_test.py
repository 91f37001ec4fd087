import io
import unittest

from lox.lang.error import ErrorHandler
from lox.lang.session import Session
from lox.lang.shell import Shell


class ShellTestCase(unittest.TestCase):

    def setUp(self):
        self.sess = Session(ErrorHandler(stream=io.StringIO()), stdout=io.StringIO(), cmd_line=True)
        self.shell = Shell(self.sess, stdout=io.StringIO())

    def output(self):
        return self.sess.stdout.getvalue()

    def test_preprocess_line(self):
        self.assertEqual(("fun f() {", True), Shell.preprocess_line("fun f() {"))
        self.assertEqual(("print (1 +", True), Shell.preprocess_line("print (1 +"))
        self.assertEqual(("fun f() {\n}", False), Shell.preprocess_line("}", "fun f() {"))
        self.assertEqual(("var a = 1;", False), Shell.preprocess_line("var a = 1;"))

    def test_complete_statement(self):
        cases = {
            "1 + 2": "print 1 + 2;",
            "print 1;": "print 1;",
            "var a = 1": "var a = 1;",
            "print a": "print a;",
            "fun f() {}": "fun f() {}",
            "  a  ": "print a;",
            "print(1)": "print(1);",
            "if (true) print 1": "if (true) print 1;",
            "while (false) x = 1": "while (false) x = 1;",
            "for (;;) break": "for (;;) break;",
            "printer": "print printer;",
            "format + 1": "print format + 1;",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, Shell.complete_statement(case), case)

    def test_keyword_without_space(self):
        self.shell.onecmd("print(1)")
        self.shell.onecmd("if (true) print 2")
        self.assertEqual("1\n2\n", self.output())
        self.assertFalse(self.sess.error_handler.had_error)

    def test_bare_expression_is_printed(self):
        self.shell.onecmd("var greeting = \"hello\";")
        self.shell.onecmd("greeting + \" world\"")
        self.assertEqual("hello world\n", self.output())

    def test_continuation(self):
        self.shell.onecmd("fun add(a, b) {")
        self.assertEqual(Shell.secondary_prompt, self.shell.prompt)

        self.shell.onecmd("return a + b;")  # not mistaken for a shell command
        self.shell.onecmd("}")
        self.assertEqual("> ", self.shell.prompt)

        self.shell.onecmd("add(1, 2)")
        self.assertEqual("3\n", self.output())

    def test_errors_do_not_end_session(self):
        self.shell.onecmd("print ;")
        self.assertTrue(self.sess.error_handler.had_error)

        self.shell.onecmd("-nil")
        self.assertTrue(self.sess.error_handler.had_runtime_error)

        self.shell.onecmd("1")
        self.assertEqual("1\n", self.output())

    def test_exit(self):
        self.assertTrue(self.shell.onecmd("exit"))
        self.assertFalse(self.shell.onecmd(""))


if __name__ == '__main__':
    unittest.main()
