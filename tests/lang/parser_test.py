import io
import unittest

from lox.lang import nodes
from lox.lang.error import ErrorHandler
from lox.lang.parser import Parser
from lox.lang.printer import AstPrinter
from lox.lang.scanner import Scanner
from lox.lang.tokens import TokenType


def parse(source):
    handler = ErrorHandler(fatal=False, stream=io.StringIO())
    tokens = Scanner(source, handler).scan_tokens()
    return Parser(tokens, handler).parse(), handler


def show(source):
    statements, handler = parse(source)
    assert not handler.had_error, handler.errors
    return AstPrinter().print_all(statements)


class ParserTestCase(unittest.TestCase):

    def test_precedence(self):
        statements, handler = parse("1+2*3;")
        self.assertFalse(handler.had_error)

        expr = statements[0].expression
        self.assertIsInstance(expr, nodes.Binary)
        self.assertIs(TokenType.PLUS, expr.operator.type)
        self.assertEqual(1.0, expr.left.value)

        self.assertIsInstance(expr.right, nodes.Binary)
        self.assertIs(TokenType.STAR, expr.right.operator.type)
        self.assertEqual([2.0, 3.0], [expr.right.left.value, expr.right.right.value])

    def test_expression_grammar(self):
        cases = {
            "1 - 2 - 3;": "(; (- (- 1 2) 3))",
            "2 * 3 % 2;": "(; (* 2 (% 3 2)))",
            "2 ^ 3 * 4;": "(; (* (^ 2 3) 4))",
            "-a ^ 2;": "(; (^ (- a) 2))",
            "!a == b;": "(; (== (! a) b))",
            "a < b == c >= d;": "(; (== (< a b) (>= c d)))",
            "a or b and c;": "(; (or a (and b c)))",
            "a = b = c;": "(; (= a (= b c)))",
            "a, b = 1;": "(; (, a (= b 1)))",
            "(1 + 2) * 3;": "(; (* (group (+ 1 2)) 3))",
            "f(1, 2)(3);": "(; (call (call f 1 2) 3))",
            "a.b.c(d);": "(; (call (. c (. b a)) d))",
            "a.b = 1;": "(; (= .b a 1))",
            "a += 1;": "(; (+= a 1))",
            "a.b *= 2;": "(; (*= .b a 2))",
            "\"s\" + nil + true;": "(; (+ (+ \"s\" nil) true))",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, show(case), case)

    def test_statements(self):
        cases = {
            "var a;": "(var a)",
            "var a = 1;": "(var a 1)",
            "print a;": "(print a)",
            "{ var a = 1; print a; }": "(block (var a 1) (print a))",
            "if (a) print 1; else print 2;": "(if-else a (print 1) (print 2))",
            "while (a) { break; continue; }": "(while a (block (break) (continue)))",
            "fun f(a, b) { return a; }": "(fun f (a b) (return a))",
            "var f = fun (x) { return; };": "(var f (fun (x) (return)))",
            "class A { init(x) { this.x = x; } get() { return this.x; } }":
                "(class A (fun init (x) (; (= .x this x))) (fun get () (return (. x this))))",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, show(case), case)

    def test_call_arguments_are_not_comma_expressions(self):
        statements, __ = parse("f(a, b);")

        call = statements[0].expression
        self.assertIsInstance(call, nodes.Call)
        self.assertEqual(2, len(call.arguments))
        self.assertIs(TokenType.RIGHT_PAREN, call.paren.type)

    def test_for_desugaring(self):
        statements, __ = parse("for (var i = 0; i < 3; i = i + 1) print i;")

        block = statements[0]
        self.assertIsInstance(block, nodes.Block)
        initializer, loop = block.statements
        self.assertIsInstance(initializer, nodes.Var)
        self.assertIsInstance(loop, nodes.While)
        self.assertIsInstance(loop.body, nodes.Print)
        self.assertIsInstance(loop.increment, nodes.Assign)

    def test_for_without_clauses(self):
        statements, __ = parse("for (;;) break;")

        loop = statements[0]
        self.assertIsInstance(loop, nodes.While)
        self.assertIsInstance(loop.condition, nodes.Literal)
        self.assertIs(True, loop.condition.value)
        self.assertIsNone(loop.increment)

    def test_compound_assignment(self):
        statements, __ = parse("a -= 1; a.b /= 2;")

        assign, set_ = (stmt.expression for stmt in statements)
        self.assertIsInstance(assign, nodes.Assign)
        self.assertIs(TokenType.MINUS_EQUAL, assign.operator.type)
        self.assertIsInstance(set_, nodes.Set)
        self.assertIs(TokenType.SLASH_EQUAL, set_.operator.type)

        plain, __ = parse("a = 1;")
        self.assertIsNone(plain[0].expression.operator)

    def test_anonymous_function(self):
        statements, __ = parse("var f = fun (x) { return x; };")

        function = statements[0].initializer
        self.assertIsInstance(function, nodes.Function)
        self.assertIsNone(function.name)
        self.assertEqual(["x"], [param.lexeme for param in function.params])

    def test_syntax_errors_synchronize(self):
        statements, handler = parse("var = 1;\nprint ;\nprint 3;")

        self.assertEqual(["[line 1] Error at '=': Expect variable name.",
                          "[line 2] Error at ';': Expect expression."], handler.errors)
        self.assertEqual(1, len(statements))
        self.assertIsInstance(statements[0], nodes.Print)

    def test_error_at_end(self):
        __, handler = parse("print 1")
        self.assertEqual(["[line 1] Error at end: Expect ';' after value."], handler.errors)

    def test_invalid_assignment_target(self):
        statements, handler = parse("1 = 2;")

        self.assertEqual(["[line 1] Error at '=': Invalid assignment target."], handler.errors)
        self.assertEqual(1, len(statements))  # reported, but parsing was not aborted

    def test_too_many_arguments(self):
        params = ", ".join(f"p{idx}" for idx in range(9))
        __, handler = parse(f"fun f({params}) {{}}")
        self.assertEqual(["[line 1] Error at 'p8': Can't have more than 8 parameters."], handler.errors)

        args = ", ".join(str(idx) for idx in range(9))
        __, handler = parse(f"f({args});")
        self.assertEqual(["[line 1] Error at '8': Can't have more than 8 arguments."], handler.errors)

        args = ", ".join(str(idx) for idx in range(8))
        __, handler = parse(f"f({args});")
        self.assertFalse(handler.had_error)

    def test_never_raises(self):
        for case in ["", "(", ")", "{", "}", "class", "fun", "var", "for (", "a.", "1 +", "class A { 1 }"]:
            statements, handler = parse(case)
            self.assertIsInstance(statements, list, case)


if __name__ == '__main__':
    unittest.main()
