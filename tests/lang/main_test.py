import contextlib
import io
import os
import tempfile
import unittest

from lox.main import main


class MainTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp_dir.cleanup()

    def run_main(self, source, *flags):
        path = os.path.join(self.tmp_dir.name, "main.lox")
        with open(path, "w", encoding="utf-8") as file:
            file.write(source)

        stdout, stderr = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
            status = main([path, *flags])
        return status, stdout.getvalue()

    def test_run(self):
        status, output = self.run_main("for (var i = 0; i < 3; i += 1) print i;")
        self.assertEqual(0, status)
        self.assertEqual("0\n1\n2\n", output)

    def test_runtime_error_status(self):
        status, output = self.run_main("print 1;\nprint 1 / 0;")
        self.assertEqual(70, status)
        self.assertEqual("1\n", output)

    def test_static_error_status(self):
        status, output = self.run_main("print 1;\nvar;")
        self.assertEqual(65, status)
        self.assertEqual("", output)

    def test_ast(self):
        status, output = self.run_main("print 1 + 2;", "--ast")
        self.assertEqual(0, status)
        self.assertEqual("(print (+ 1 2))\n", output)


if __name__ == '__main__':
    unittest.main()
