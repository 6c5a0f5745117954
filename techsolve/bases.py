import re
import logging
from enum import Enum

from .errors import ParseFailure

logger = logging.getLogger(__name__)


class NumberBase(Enum):
    BIN = 2
    OCT = 8
    DEC = 10
    HEX = 16

    @property
    def radix(self) -> int:
        return self.value


_DIGITS = "0123456789ABCDEF"
_VALID_DIGITS = {base: set(_DIGITS[:base.radix]) for base in NumberBase}


def is_valid_digit(char: str, base: NumberBase) -> bool:
    if len(char) != 1: return False
    return char.upper() in _VALID_DIGITS[base]


def parse_int(value: str, base: NumberBase) -> int:
    """Read the leading integer of `value` in `base`.

    Whitespace around the number and an optional sign are accepted, and
    parsing stops at the first character that is not a digit of the base
    ("1012" in binary reads as 5). Raises ParseFailure when no digit is found.
    """
    digit_class = re.escape(_DIGITS[:base.radix])
    match = re.match(rf"\s*([+-]?)([{digit_class}]+)", value.upper())
    if not match:
        raise ParseFailure(f"'{value}' is not a {base.name} number")
    sign, digits = match.groups()
    number = int(digits, base.radix)
    return -number if sign == "-" else number


def format_int(number: int, base: NumberBase) -> str:
    if number < 0: return "-" + format_int(-number, base)
    if number == 0: return "0"
    out = []
    while number:
        number, rem = divmod(number, base.radix)
        out.append(_DIGITS[rem])
    return "".join(reversed(out))


def convert(value: str, from_base: NumberBase, to_base: NumberBase) -> str:
    if not value or value == "0": return "0"
    try:
        number = parse_int(value, from_base)
    except ParseFailure as e:
        logger.debug(f"Base conversion fallback to 0: {e}")
        return "0"
    return format_int(number, to_base)
