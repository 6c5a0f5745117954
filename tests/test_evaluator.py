"""
Tests for the arithmetic expression evaluator.
"""

import pytest

from techsolve.errors import InvalidExpression
from techsolve.evaluator import evaluate, sanitize


class TestEvaluate:
    def test_precedence(self):
        assert evaluate("2+3*4") == 14

    def test_parentheses(self):
        assert evaluate("(2+3)*4") == 20
        assert evaluate("((1+1)*(2+2))/4") == 2

    def test_left_associative(self):
        assert evaluate("10-4-3") == 3
        assert evaluate("64/4/2") == 8

    def test_decimals(self):
        assert evaluate(".5+1.") == 1.5
        assert evaluate("0.1+0.2") == pytest.approx(0.3)

    def test_unary_sign(self):
        assert evaluate("-3+5") == 2
        assert evaluate("5*-2") == -10

    def test_disallowed_characters_are_stripped(self):
        assert evaluate("2 + 3 abc") == 5
        assert sanitize("2^3%4;import os") == "234"

    def test_returns_float(self):
        assert isinstance(evaluate("7"), float)


class TestInvalidExpressions:
    @pytest.mark.parametrize("expr", [
        "10/0",
        "0/0",
        "",
        "abc",
        "(2+3",
        "2+3)",
        "2+",
        "*2",
        "1.2.3",
        "()",
    ])
    def test_raises_invalid_expression(self, expr):
        with pytest.raises(InvalidExpression):
            evaluate(expr)

    def test_overflow_to_infinity_is_invalid(self):
        with pytest.raises(InvalidExpression):
            evaluate("9" * 400 + "*" + "9" * 400)

    def test_no_code_execution(self):
        with pytest.raises(InvalidExpression):
            evaluate("__import__('os').system('true')")


class TestSigns:
    @pytest.mark.parametrize("expr", ["2--3", "2++3", "--3", "1*--2"])
    def test_repeated_sign_is_rejected(self, expr):
        with pytest.raises(InvalidExpression):
            evaluate(expr)

    def test_mixed_signs_are_accepted(self):
        assert evaluate("2+-3") == -1
        assert evaluate("2-+3") == -1
        assert evaluate("2-(-3)") == 5
