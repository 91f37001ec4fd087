"""Runs the lox interpreter on a .lox file, or in command-line mode when no file is given. Also uses the error handling
context manager. Called from the `lox` console script.

Basic program flow for a run:
    1. Scanner: converts source text to a flat list of tokens (lox/lang/scanner.py)
    2. Parser: recursive descent over the tokens, produces a list of statements (lox/lang/parser.py)
    3. Resolver: static pass that computes the lexical distance of every local variable reference and rejects
       structurally invalid programs (lox/lang/resolver.py)
    4. Interpreter: walks the resolved statements (lox/lang/interpreter.py) using the runtime object model in
       lox/runtime/
"""

import argparse
import sys

from lox.lang.error import ErrorHandler
from lox.lang.session import Session
from lox.lang.shell import Shell


def main(argv=None):
    """Runs lox interpreter. Called from lox executable script. Returns the exit status of the run."""
    assert sys.version_info >= (3, 11), "lox cannot be run with python < 3.11"

    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="lox")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("--ast", help="print the syntax tree of file instead of running it", action="store_true")
        args = parser.parse_args(argv)

        if args.file is not None:
            sess = Session(error_handler, cmd_line=False)

            if args.ast:
                source = sess.read_file(args.file)
                if source is None:
                    return Session.EX_DATAERR

                print(sess.dump(source, args.file))
                return Session.EX_DATAERR if error_handler.had_error else Session.EX_OK

            return sess.run_file(args.file)

        else:
            Shell(Session(error_handler, cmd_line=True)).cmdloop()


if __name__ == "__main__":
    sys.exit(main())
