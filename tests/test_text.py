"""
test_text.py — Tests for parsing, formatting, grouping and rounding

Tests cover:
- Half-to-even rounding on the guard digit
- Digit grouping
- Parser shapes: bare integer, one separator, decorations, malformed input
- Formatter output for every preset, negatives and zero
"""

from fractions import Fraction

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from fixedcash import Currency, MoneyFormat, MalformedInputError
from fixedcash.text import (
    format_amount,
    group_by_thousands,
    parse_amount,
    render_fraction,
    round_half_even,
)


USD = Currency.USD.money_format
JPY = Currency.JPY.money_format
BTC = Currency.BTC.money_format
EURO_STYLE = MoneyFormat(2, "€", decimal_separator=",", group_separator=".")


# ==============================================================================
# Rounding
# ==============================================================================

class TestRoundHalfEven:

    @pytest.mark.parametrize("guarded, expected", [
        (1234, 123),
        (1236, 124),
        (1235, 124),    # 123 odd -> up
        (1245, 124),    # 124 even -> stays
        (5, 0),
        (15, 2),
        (25, 2),
        (0, 0),
        (9, 1),
    ])
    def test_table(self, guarded, expected):
        assert round_half_even(guarded) == expected

    def test_negative_is_symmetric(self):
        assert round_half_even(-1235) == -124
        assert round_half_even(-1245) == -124
        assert round_half_even(-1236) == -124

    @given(st.integers(min_value=-10**12, max_value=10**12))
    @settings(max_examples=500)
    def test_matches_builtin_round(self, x: int):
        # builtin round() on an exact Fraction is half-to-even
        assert round_half_even(x) == round(Fraction(x, 10))


# ==============================================================================
# Grouping
# ==============================================================================

class TestGroupByThousands:

    @pytest.mark.parametrize("digits, expected", [
        ("", ""),
        ("1", "1"),
        ("123", "123"),
        ("1234", "1,234"),
        ("123456", "123,456"),
        ("1234567", "1,234,567"),
    ])
    def test_table(self, digits, expected):
        assert group_by_thousands(digits, ",") == expected

    def test_custom_separator(self):
        assert group_by_thousands("1234567", ".") == "1.234.567"

    @given(st.integers(min_value=0, max_value=10**30))
    @settings(max_examples=300)
    def test_removing_separator_restores_digits(self, n: int):
        grouped = group_by_thousands(str(n), ",")
        assert grouped.replace(",", "") == str(n)
        assert all(len(g) == 3 for g in grouped.split(",")[1:])


# ==============================================================================
# Parsing
# ==============================================================================

class TestParseAmount:

    @pytest.mark.parametrize("text, expected", [
        ("12.392", 1239),
        ("666.995", 66700),
        ("18.2123", 1821),
        ("0.125", 12),
        ("0.135", 14),
        ("0.999", 100),
        ("1.5", 150),
        ("1.50", 150),
        ("55.10", 5510),
        ("0.00", 0),
        ("-0.50", -50),
        ("-10.50", -1050),
        ("+3.00", 300),
        (" 12.50 ", 1250),
    ])
    def test_decimal_text(self, text, expected):
        assert parse_amount(text, USD) == expected

    def test_bare_integer_is_minor_units(self):
        assert parse_amount("1050", USD) == 1050
        assert parse_amount("-7", USD) == -7

    @pytest.mark.parametrize("text, expected", [
        ("$10,018.97", 1001897),
        ("($10,018.97)", -1001897),
        ("-$10.00", -1000),
        ("$-10.00", -1000),
        ("1,234.56", 123456),
        ("(0.08)", -8),
    ])
    def test_formatter_decorations_accepted(self, text, expected):
        assert parse_amount(text, USD) == expected

    def test_zero_fraction_digits_rounds_on_last_integer_digit(self):
        assert parse_amount("13.5", JPY) == 14
        assert parse_amount("12.5", JPY) == 12
        assert parse_amount("12.6", JPY) == 13
        assert parse_amount("¥1,000", JPY) == 1000

    def test_btc_precision(self):
        assert parse_amount("1.00000000", BTC) == 100_000_000
        assert parse_amount("0.000000015", BTC) == 2
        assert parse_amount("0.000000025", BTC) == 2

    def test_custom_separators(self):
        assert parse_amount("1.234,56", EURO_STYLE) == 123456
        assert parse_amount("€1.234,565", EURO_STYLE) == 123456

    @pytest.mark.parametrize("text", [
        "1.2.3",
        "abc",
        "1.x",
        "x.50",
        "",
        ".50",
        "10.",
        "1_000.00",
        "1.-5",
        "(-1.00)",
        "--1.00",
        "-$-1.00",
        "1 000.00",
    ])
    def test_malformed(self, text):
        with pytest.raises(MalformedInputError):
            parse_amount(text, USD)

    def test_malformed_is_value_error_with_cause(self):
        with pytest.raises(ValueError) as excinfo:
            parse_amount("12.ab", USD)
        assert isinstance(excinfo.value.__cause__, ValueError)
        assert excinfo.value.text == "12.ab"

    def test_rejects_non_str(self):
        with pytest.raises(TypeError):
            parse_amount(1050, USD)


# ==============================================================================
# Formatting
# ==============================================================================

class TestFormatAmount:

    @pytest.mark.parametrize("amount, expected", [
        (1001897, "$10,018.97"),
        (8, "$0.08"),
        (99, "$0.99"),
        (100, "$1.00"),
        (0, "$0.00"),
        (-8, "($0.08)"),
        (-1001897, "($10,018.97)"),
        (123456789, "$1,234,567.89"),
    ])
    def test_usd(self, amount, expected):
        assert format_amount(amount, USD) == expected

    def test_jpy_has_no_decimal_separator(self):
        assert format_amount(1000, JPY) == "¥1,000"
        assert format_amount(5, JPY) == "¥5"

    def test_btc(self):
        assert format_amount(5, BTC) == "฿0.00000005"
        assert format_amount(100_000_000, BTC) == "฿1.00000000"

    def test_custom_separators(self):
        assert format_amount(123456, EURO_STYLE) == "€1.234,56"


class TestRenderFraction:

    def test_guard_digit(self):
        assert render_fraction(Fraction(2727, 200), 3, USD) == "13.635"

    def test_truncates_toward_zero(self):
        assert render_fraction(Fraction(-1, 3), 3, USD) == "-0.333"
        assert render_fraction(Fraction(2, 3), 3, USD) == "0.666"

    def test_five_with_remainder_becomes_six(self):
        # 0.005000001: the dropped digits push the guard past half
        assert render_fraction(Fraction(5000001, 1000000000), 3, USD) == "0.006"
        assert render_fraction(Fraction(-5000001, 1000000000), 3, USD) == "-0.006"
        assert render_fraction(Fraction(1, 200), 3, USD) == "0.005"

    def test_uses_decimal_separator(self):
        assert render_fraction(Fraction(5, 4), 3, EURO_STYLE) == "1,250"

    def test_zero_places(self):
        assert render_fraction(Fraction(27, 2), 0, JPY) == "13"
