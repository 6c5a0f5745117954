from techsolve.bitwise import apply_binary, apply_unary, to_int32


class TestToInt32:
    def test_wraps_to_signed_32_bits(self):
        assert to_int32(2**31) == -2**31
        assert to_int32(2**32 + 5) == 5
        assert to_int32(-1) == -1


class TestUnary:
    def test_not(self):
        assert apply_unary("NOT", 5) == -6
        assert apply_unary("NOT", -1) == 0

    def test_left_shift_wraps(self):
        assert apply_unary("LSHIFT", 5) == 10
        assert apply_unary("LSHIFT", 2**30) == -2**31

    def test_right_shift_keeps_sign(self):
        assert apply_unary("RSHIFT", 5) == 2
        assert apply_unary("RSHIFT", -6) == -3


class TestBinary:
    def test_and_or_xor(self):
        assert apply_binary("AND", 0b1100, 0b1010) == 0b1000
        assert apply_binary("OR", 0b1100, 0b1010) == 0b1110
        assert apply_binary("XOR", 0b1100, 0b1010) == 0b0110
