"""
Unit tests for expression evaluation.
"""

import unittest
from exprkit import Expr, eval_expr
from exprkit.errors import (
    ArgumentError,
    DivisionByZero,
    ExprTypeError,
    IndexOutOfBounds,
    UndefinedField,
    UndefinedFunction,
    UndefinedVariable,
)


class TestArithmetic(unittest.TestCase):
    """Arithmetic and numeric promotion."""

    def test_integer_literals(self):
        for n in (0, 1, 42, 9007199254740993, -5):
            result = eval_expr(str(n))
            self.assertEqual(result, n)
            self.assertIsInstance(result, int)

    def test_float_literal(self):
        self.assertEqual(eval_expr("3.14"), 3.14)

    def test_precedence(self):
        result = eval_expr("2 * 2 + 3")
        self.assertEqual(result, 7)
        self.assertIsInstance(result, int)
        self.assertEqual(eval_expr("2 + 2 * 3"), 8)
        self.assertEqual(eval_expr("(2 + 2) * 3"), 12)
        self.assertEqual(eval_expr("10 - 4 - 3"), 3)

    def test_division_is_float(self):
        result = eval_expr("2 / 2 + 3")
        self.assertEqual(result, 4.0)
        self.assertIsInstance(result, float)

        result = eval_expr("2 / 2 + 3 / 3")
        self.assertEqual(result, 2.0)
        self.assertIsInstance(result, float)

    def test_mixed_promotion(self):
        result = eval_expr("1 + 0.5")
        self.assertEqual(result, 1.5)
        self.assertIsInstance(eval_expr("2 * 1.0"), float)
        self.assertEqual(eval_expr("7 % 3"), 1)
        self.assertEqual(eval_expr("-7 % 3"), -1)

    def test_negation(self):
        self.assertEqual(eval_expr("-(2 + 3)"), -5)
        self.assertEqual(eval_expr("--2"), 2)
        self.assertEqual(eval_expr("-1.5"), -1.5)
        with self.assertRaises(ExprTypeError):
            eval_expr("-'a'")
        with self.assertRaises(ExprTypeError):
            eval_expr("-true")

    def test_type_errors(self):
        for source in ("1 + 'a'", "'a' + 'b'", "true * 2", "null - 1", "array(1) + 1"):
            with self.assertRaises(ExprTypeError, msg=source):
                eval_expr(source)

    def test_division_by_zero(self):
        with self.assertRaises(DivisionByZero):
            eval_expr("1 / 0")
        with self.assertRaises(DivisionByZero):
            eval_expr("1 % 0")


class TestComparison(unittest.TestCase):

    def test_equality(self):
        self.assertIs(eval_expr("1 == 1.0"), True)
        self.assertIs(eval_expr("'a' == 'a'"), True)
        self.assertIs(eval_expr("'a' != 'b'"), True)
        self.assertIs(eval_expr("null == null"), True)
        self.assertIs(eval_expr("null == 0"), False)
        self.assertIs(eval_expr("true == 1"), False)
        self.assertIs(eval_expr("array(1, 2) == array(1, 2.0)"), True)
        self.assertIs(eval_expr("array(1, 2) != array(2, 1)"), True)
        self.assertIs(eval_expr("'1' == 1"), False)

    def test_ordering(self):
        self.assertIs(eval_expr("1 < 2"), True)
        self.assertIs(eval_expr("2 <= 2.0"), True)
        self.assertIs(eval_expr("3 > 2.5"), True)
        self.assertIs(eval_expr("1 >= 2"), False)
        self.assertIs(eval_expr("'apple' < 'banana'"), True)

    def test_ordering_type_errors(self):
        for source in ("'a' < 1", "array(1) < array(2)", "true > false", "null >= 0"):
            with self.assertRaises(ExprTypeError, msg=source):
                eval_expr(source)


class TestLogic(unittest.TestCase):

    def test_not(self):
        self.assertIs(eval_expr("!true"), False)
        self.assertIs(eval_expr("!(1 > 2)"), True)
        with self.assertRaises(ExprTypeError):
            eval_expr("!1")

    def test_and_or(self):
        self.assertIs(eval_expr("true && false"), False)
        self.assertIs(eval_expr("true || false"), True)
        self.assertIs(eval_expr("1 < 2 && 'a' == 'a'"), True)

    def test_non_boolean_operands(self):
        for source in ("1 && true", "true && 1", "'a' || false", "false || null"):
            with self.assertRaises(ExprTypeError, msg=source):
                eval_expr(source)

    def test_short_circuit_skips_right_operand(self):
        # The right side would fail if it were evaluated
        self.assertIs(eval_expr("false && missing"), False)
        self.assertIs(eval_expr("true || missing"), True)
        self.assertIs(eval_expr("false && 1"), False)

    def test_short_circuit_never_calls_function(self):
        calls = []

        def f(args):
            calls.append(args)
            return True

        self.assertIs(Expr("false && f()").function("f", f).exec(), False)
        self.assertIs(Expr("true || f()").function("f", f).exec(), True)
        self.assertEqual(calls, [])

        self.assertIs(Expr("true && f()").function("f", f).exec(), True)
        self.assertEqual(len(calls), 1)


class TestRanges(unittest.TestCase):

    def test_ranges(self):
        self.assertEqual(eval_expr("0..5"), [0, 1, 2, 3, 4])
        self.assertEqual(eval_expr("5..5"), [])
        self.assertEqual(eval_expr("5..0"), [])
        self.assertEqual(eval_expr("1 + 1..2 * 2"), [2, 3])
        self.assertEqual(eval_expr("(0..3)[2]"), 2)

    def test_range_type_errors(self):
        for source in ("0..2.0", "'a'..3", "0..true"):
            with self.assertRaises(ExprTypeError, msg=source):
                eval_expr(source)


class TestAccess(unittest.TestCase):
    """Variables, member access and indexing."""

    def setUp(self):
        self.object = {"foos": ["Hello", "world", "!"], "inner": {"n": 3}}

    def run_expr(self, source):
        return Expr(source).value("object", self.object).exec()

    def test_member_and_index(self):
        self.assertEqual(self.run_expr("object.foos[1-1]"), "Hello")
        self.assertIs(self.run_expr("object.foos[1-1] == 'Hello'"), True)
        self.assertEqual(self.run_expr("object.inner.n * 2"), 6)
        self.assertEqual(self.run_expr("object['inner']['n']"), 3)

    def test_index_out_of_bounds(self):
        with self.assertRaises(IndexOutOfBounds) as ctx:
            self.run_expr("object.foos[5]")
        self.assertEqual(ctx.exception.index, 5)
        self.assertEqual(ctx.exception.length, 3)

    def test_negative_index_does_not_wrap(self):
        with self.assertRaises(IndexOutOfBounds):
            self.run_expr("object.foos[-1]")

    def test_string_index(self):
        self.assertEqual(eval_expr("'abc'[1]"), "b")
        with self.assertRaises(IndexOutOfBounds):
            eval_expr("''[0]")

    def test_index_type_errors(self):
        for source in ("object.foos['0']", "object.foos[0.0]", "object.foos[true]", "1[0]",
                       "object[0]"):
            with self.assertRaises(ExprTypeError, msg=source):
                self.run_expr(source)

    def test_undefined_field(self):
        with self.assertRaises(UndefinedField) as ctx:
            self.run_expr("object.bars")
        self.assertEqual(ctx.exception.name, "bars")
        with self.assertRaises(UndefinedField):
            self.run_expr("object['bars']")

    def test_member_on_non_object(self):
        with self.assertRaises(ExprTypeError):
            self.run_expr("object.foos.length")
        with self.assertRaises(ExprTypeError):
            eval_expr("'abc'.x")

    def test_undefined_variable(self):
        with self.assertRaises(UndefinedVariable) as ctx:
            eval_expr("foo == 1")
        self.assertEqual(ctx.exception.name, "foo")


class TestBuiltins(unittest.TestCase):

    def test_min_max(self):
        result = eval_expr("min(3, 1, 2)")
        self.assertEqual(result, 1)
        self.assertIsInstance(result, int)
        self.assertEqual(eval_expr("max(3, 1, 2)"), 3)
        self.assertEqual(eval_expr("max(7)"), 7)
        result = eval_expr("min(3, 1.5)")
        self.assertEqual(result, 1.5)
        self.assertIsInstance(eval_expr("max(3, 1.5)"), float)

    def test_min_max_arity(self):
        with self.assertRaises(ArgumentError) as ctx:
            eval_expr("max()")
        self.assertEqual(ctx.exception.name, "max")
        self.assertEqual(ctx.exception.got, 0)
        with self.assertRaises(ArgumentError):
            eval_expr("min()")

    def test_min_max_types(self):
        with self.assertRaises(ExprTypeError):
            eval_expr("min(1, 'a')")
        with self.assertRaises(ExprTypeError):
            eval_expr("max(true)")

    def test_len_and_is_empty(self):
        self.assertEqual(eval_expr("len('hello')"), 5)
        self.assertEqual(eval_expr("len(0..4)"), 4)
        self.assertIs(eval_expr("is_empty(array())"), True)
        self.assertIs(eval_expr("is_empty('x')"), False)
        with self.assertRaises(ExprTypeError):
            eval_expr("len(1)")
        with self.assertRaises(ExprTypeError):
            eval_expr("is_empty(null)")
        with self.assertRaises(ArgumentError):
            eval_expr("len('a', 'b')")
        with self.assertRaises(ArgumentError):
            eval_expr("is_empty()")

    def test_array(self):
        self.assertEqual(eval_expr("array(1,2,3,4,5)"), [1, 2, 3, 4, 5])
        self.assertEqual(eval_expr("array()"), [])
        self.assertEqual(eval_expr("array(1, 'a', array(true))"), [1, "a", [True]])

    def test_method_call_syntax(self):
        self.assertEqual(eval_expr("'hello'.len()"), 5)
        self.assertEqual(eval_expr("(0..3).len()"), 3)

    def test_builtins_cannot_be_shadowed(self):
        result = Expr("len('abc')").function("len", lambda args: 100).exec()
        self.assertEqual(result, 3)

    def test_undefined_function(self):
        with self.assertRaises(UndefinedFunction) as ctx:
            eval_expr("nope(1)")
        self.assertEqual(ctx.exception.name, "nope")

    def test_arguments_evaluate_before_resolution(self):
        with self.assertRaises(UndefinedVariable):
            eval_expr("nope(missing)")


if __name__ == '__main__':
    unittest.main()
