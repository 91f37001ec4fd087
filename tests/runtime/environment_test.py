import unittest

from lox.lang.error import LoxRuntimeError
from lox.lang.tokens import Token, TokenType
from lox.runtime.environment import Environment


def name(lexeme):
    return Token(TokenType.IDENTIFIER, lexeme, None, 1)


class EnvironmentTestCase(unittest.TestCase):

    def test_define_and_get(self):
        env = Environment()
        env.define("a", 1.0)
        env.define("a", 2.0)  # redefinition overwrites

        self.assertEqual(2.0, env.get(name("a")))
        self.assertIn("a", env)
        self.assertNotIn("b", env)

    def test_get_does_not_search_enclosing(self):
        outer = Environment()
        outer.define("a", 1.0)
        inner = Environment(outer)

        with self.assertRaises(LoxRuntimeError) as context:
            inner.get(name("a"))
        self.assertEqual("Undefined variable 'a'.", context.exception.message)
        self.assertEqual(1, context.exception.line)

    def test_assign(self):
        env = Environment()
        env.define("a", None)
        env.assign(name("a"), "x")
        self.assertEqual("x", env.get(name("a")))

        self.assertRaises(LoxRuntimeError, env.assign, name("b"), 1.0)

    def test_ancestor_access(self):
        root = Environment()
        middle = Environment(root)
        leaf = Environment(middle)
        root.define("a", "root")
        middle.define("a", "middle")

        self.assertIs(leaf, leaf.ancestor(0))
        self.assertIs(root, leaf.ancestor(2))
        self.assertEqual("middle", leaf.get_at(1, "a"))
        self.assertEqual("root", leaf.get_at(2, "a"))

        leaf.assign_at(2, name("a"), "changed")
        self.assertEqual("changed", root.get(name("a")))
        self.assertEqual("middle", middle.get(name("a")))

    def test_shared_by_closures(self):
        shared = Environment()
        shared.define("n", 0.0)
        first, second = Environment(shared), Environment(shared)

        first.assign_at(1, name("n"), 5.0)
        self.assertEqual(5.0, second.get_at(1, "n"))


if __name__ == '__main__':
    unittest.main()
