"""Handles interactive/command-line mode for the lox interpreter. Uses cmd as backend."""

import cmd
import re

from lox.lang.session import Session


class Shell(cmd.Cmd):
    """Lox interpreter shell."""
    intro = "Lox interpreter :: Python backend\nType 'help' for more information, 'exit' to quit."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    STATEMENT_KEYWORDS = ("var", "print", "return", "break", "continue", "if", "while", "for", "class", "fun")
    STATEMENT_START = re.compile(r"(?:" + "|".join(STATEMENT_KEYWORDS) + r")\b")

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self._tmp_line = ""

    @staticmethod
    def preprocess_line(line, tmp_line=""):
        """Joins line to the pending continuation, if any. Returns the joined line and whether more input is needed
        (braces or parentheses still open).
        """
        line = f"{tmp_line}\n{line}" if tmp_line else line
        add_to_prev = line.count("{") > line.count("}") or line.count("(") > line.count(")")
        return line, add_to_prev

    @staticmethod
    def complete_statement(line):
        """A bare expression typed at the prompt is printed: 'a + 1' runs as 'print a + 1;'."""
        stripped = line.strip()
        if stripped.endswith(";") or stripped.endswith("}"):
            return line
        if Shell.STATEMENT_START.match(stripped):
            return f"{stripped};"  # forgotten semicolon
        return f"print {stripped};"

    def onecmd(self, line):
        """While a continuation is pending, every line is lox source, even if it looks like a shell command."""
        if self._tmp_line:
            return self.default(line)
        return super().onecmd(line)

    def default(self, line):
        """Executes arbitrary lox source."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            line, add_to_prev = Shell.preprocess_line(line, self._tmp_line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            if line.strip():
                self.sess.run(Shell.complete_statement(line), Session.SH_FILE)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the lox interpreter!\n\n"
              "Lox is a small dynamically-typed scripting language with first-class functions, \n"
              "closures, and classes. Statements end with ';' and blocks are delimited by braces; \n"
              "a block that is left open continues on the next line.\n\n"
              "Try it out by typing 'var greeting = \"hello\";'. Next, try typing 'greeting + \" world\"'. \n"
              "A bare expression is printed, so this will show 'hello world'.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
