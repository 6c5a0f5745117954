"""
Tests for base conversion and digit validation.
"""

import pytest

from techsolve.bases import NumberBase, convert, format_int, is_valid_digit, parse_int
from techsolve.errors import ParseFailure

BIN, OCT, DEC, HEX = NumberBase.BIN, NumberBase.OCT, NumberBase.DEC, NumberBase.HEX


class TestConvert:
    @pytest.mark.parametrize("b1", list(NumberBase))
    @pytest.mark.parametrize("b2", list(NumberBase))
    def test_zero_and_empty_map_to_zero(self, b1, b2):
        assert convert("0", b1, b2) == "0"
        assert convert("", b1, b2) == "0"

    @pytest.mark.parametrize("n", [1, 7, 10, 255, 4096, 2**31 - 1, 2**53])
    @pytest.mark.parametrize("b1", list(NumberBase))
    def test_conversion_through_any_base_is_consistent(self, n, b1):
        for b2 in NumberBase:
            assert convert(convert(str(n), DEC, b1), b1, b2) == convert(str(n), DEC, b2)

    def test_known_values(self):
        assert convert("255", DEC, HEX) == "FF"
        assert convert("255", DEC, BIN) == "11111111"
        assert convert("255", DEC, OCT) == "377"
        assert convert("ff", HEX, DEC) == "255"
        assert convert("101", BIN, DEC) == "5"

    def test_unparseable_value_falls_back_to_zero(self):
        assert convert("Error", DEC, HEX) == "0"
        assert convert("9", BIN, DEC) == "0"

    def test_parse_stops_at_first_invalid_digit(self):
        assert convert("1012", BIN, DEC) == "5"

    def test_negative_values_keep_their_sign(self):
        assert convert("-6", DEC, HEX) == "-6"
        assert convert("-255", DEC, HEX) == "-FF"


class TestParseAndFormat:
    def test_parse_int(self):
        assert parse_int("7F", HEX) == 127
        assert parse_int(" 17 ", OCT) == 15
        assert parse_int("-1010", BIN) == -10

    def test_parse_int_without_digits_fails(self):
        with pytest.raises(ParseFailure):
            parse_int("xyz", DEC)
        with pytest.raises(ParseFailure):
            parse_int("", HEX)

    def test_format_int(self):
        assert format_int(0, BIN) == "0"
        assert format_int(48879, HEX) == "BEEF"
        assert format_int(-8, OCT) == "-10"


class TestDigitValidation:
    def test_binary(self):
        assert is_valid_digit("1", BIN)
        assert not is_valid_digit("2", BIN)
        assert not is_valid_digit("8", BIN)

    def test_octal(self):
        assert is_valid_digit("7", OCT)
        assert not is_valid_digit("8", OCT)

    def test_decimal(self):
        assert is_valid_digit("9", DEC)
        assert not is_valid_digit("A", DEC)

    def test_hex_is_case_insensitive(self):
        assert is_valid_digit("a", HEX)
        assert is_valid_digit("F", HEX)
        assert not is_valid_digit("G", HEX)

    def test_rejects_multi_character_input(self):
        assert not is_valid_digit("10", BIN)
