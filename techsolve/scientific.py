import re
import math
from enum import Enum

from .errors import OutOfRange

FACTORIAL_LIMIT = 170 # 171! overflows a float


class AngleMode(Enum):
    DEG = "deg"
    RAD = "rad"

    def toggled(self) -> "AngleMode":
        return AngleMode.RAD if self is AngleMode.DEG else AngleMode.DEG


def _to_radians(x, angle_mode):
    return x * math.pi / 180 if angle_mode is AngleMode.DEG else x


def _guarded(func):
    # Domain errors become NaN and overflow becomes inf; the caller decides what a non-finite result means.
    def wrapper(x, angle_mode=AngleMode.DEG):
        try:
            return func(x, angle_mode)
        except ValueError:
            return math.nan
        except OverflowError:
            return math.inf
    wrapper.__name__ = func.__name__
    return wrapper


def factorial(x: float) -> float:
    if math.isnan(x):
        raise OutOfRange("Factorial of NaN")
    n = math.floor(x) if math.isfinite(x) else x
    if n < 0 or n > FACTORIAL_LIMIT:
        raise OutOfRange(f"Factorial is only defined for 0..{FACTORIAL_LIMIT}, got {n}")
    result = 1.0
    for k in range(2, int(n) + 1):
        result *= k
    return result


FUNCTIONS = {
    "sin": _guarded(lambda x, a: math.sin(_to_radians(x, a))),
    "cos": _guarded(lambda x, a: math.cos(_to_radians(x, a))),
    "tan": _guarded(lambda x, a: math.tan(_to_radians(x, a))),
    "log": _guarded(lambda x, a: math.log10(x)),
    "ln": _guarded(lambda x, a: math.log(x)),
    "sqrt": _guarded(lambda x, a: math.sqrt(x)),
    "x²": _guarded(lambda x, a: x * x),
    "exp": _guarded(lambda x, a: math.exp(x)),
    "fact": lambda x, angle_mode=AngleMode.DEG: factorial(x),
}


def apply(name: str, x: float, angle_mode: AngleMode = AngleMode.DEG) -> float:
    """Apply the scientific function `name` to `x`.

    May return NaN or inf (log of a negative number, exp overflow); only
    factorial raises, with OutOfRange. Unknown names raise KeyError.
    """
    return FUNCTIONS[name](x, angle_mode)


_FLOAT_PREFIX = re.compile(r"\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def parse_float(text: str) -> float:
    """Leading decimal number of `text`, or NaN when there is none."""
    match = _FLOAT_PREFIX.match(text)
    if not match: return math.nan
    return float(match.group())


def format_number(value: float) -> str:
    """Render a result for the display: '14' not '14.0', '0.3' not '0.30000000000000004'."""
    if not math.isfinite(value): return repr(value)
    if value == int(value) and abs(value) < 1e21: return str(int(value))
    if abs(value) >= 1e-6:
        for i in range(1, 11):
            if abs(value - round(value, i)) < 1e-12: return repr(round(value, i))
    return repr(value)
