class CalculatorError(Exception): pass

class InvalidExpression(CalculatorError):
    """Malformed arithmetic, or a result that is not a finite number."""

class OutOfRange(CalculatorError):
    """Input outside a function's supported domain (factorial)."""

class ParseFailure(CalculatorError):
    """Text that does not start with a number in the requested base."""
