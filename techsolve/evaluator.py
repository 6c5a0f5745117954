"""
Arithmetic evaluator for the calculator's expression line.

Input is first reduced to digits and `+ - * / ( ) .`, then parsed by
recursive descent with the usual precedence:

    expr   := term (('+' | '-') term)*
    term   := factor (('*' | '/') factor)*
    factor := ('+' | '-') factor | number | '(' expr ')'

A sign may follow a different operator (`5*-2`, `2+-3`) but never itself:
`2--3` and `2++3` are rejected rather than read as `2-(-3)`.

Nothing is ever handed to eval().
"""

import re
import math
import logging

from .errors import InvalidExpression

logger = logging.getLogger(__name__)

_DISALLOWED = re.compile(r"[^0-9+\-*/().]")
_NUMBER = re.compile(r"\d+\.?\d*|\.\d+")
_REPEATED_SIGN = re.compile(r"\+\+|--")


def sanitize(expr: str) -> str:
    return _DISALLOWED.sub("", expr)


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def peek(self):
        return self.text[self.pos] if self.pos < len(self.text) else None

    def parse(self) -> float:
        value = self.expr()
        if self.pos != len(self.text):
            raise InvalidExpression(f"Unexpected '{self.text[self.pos]}' at position {self.pos}")
        return value

    def expr(self) -> float:
        value = self.term()
        while self.peek() in ("+", "-"):
            op = self.text[self.pos]; self.pos += 1
            rhs = self.term()
            value = value + rhs if op == "+" else value - rhs
        return value

    def term(self) -> float:
        value = self.factor()
        while self.peek() in ("*", "/"):
            op = self.text[self.pos]; self.pos += 1
            rhs = self.factor()
            if op == "*":
                value = value * rhs
            else:
                if rhs == 0: raise InvalidExpression("Division by zero")
                value = value / rhs
        return value

    def factor(self) -> float:
        char = self.peek()
        if char is None:
            raise InvalidExpression("Unexpected end of expression")
        if char in ("+", "-"):
            self.pos += 1
            operand = self.factor()
            return operand if char == "+" else -operand
        if char == "(":
            self.pos += 1
            value = self.expr()
            if self.peek() != ")":
                raise InvalidExpression("Unbalanced parentheses")
            self.pos += 1
            return value
        match = _NUMBER.match(self.text, self.pos)
        if not match:
            raise InvalidExpression(f"Unexpected '{char}' at position {self.pos}")
        self.pos = match.end()
        return float(match.group())


def evaluate(expr: str) -> float:
    cleaned = sanitize(expr)
    logger.debug(f"Evaluating '{cleaned}' (from '{expr}')")
    if not cleaned:
        raise InvalidExpression("Empty expression")
    repeated = _REPEATED_SIGN.search(cleaned)
    if repeated:
        raise InvalidExpression(f"Repeated sign '{repeated.group()}' at position {repeated.start()}")
    try:
        result = _Parser(cleaned).parse()
    except OverflowError:
        raise InvalidExpression("Result too large") from None
    except RecursionError:
        raise InvalidExpression("Expression nested too deeply") from None
    if not math.isfinite(result):
        raise InvalidExpression(f"Non-finite result for '{cleaned}'")
    return result
