"""Bitwise operations on the 32-bit signed view of an integer."""


def to_int32(n: int) -> int:
    n &= 0xFFFFFFFF
    return n - 0x100000000 if n & 0x80000000 else n


UNARY_OPS = {
    "NOT": lambda a: to_int32(~to_int32(a)),
    "LSHIFT": lambda a: to_int32(to_int32(a) << 1),
    "RSHIFT": lambda a: to_int32(a) >> 1,
}

BINARY_OPS = {
    "AND": lambda a, b: to_int32(a) & to_int32(b),
    "OR": lambda a, b: to_int32(a) | to_int32(b),
    "XOR": lambda a, b: to_int32(a) ^ to_int32(b),
}


def apply_unary(op: str, value: int) -> int:
    return UNARY_OPS[op](value)


def apply_binary(op: str, left: int, right: int) -> int:
    return BINARY_OPS[op](left, right)
