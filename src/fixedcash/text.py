"""
text.py — Decimal text <-> minor units

================================================================================
TEXT FORMAT
================================================================================

    [ "(" ] symbol grouped-integer decimal-separator fraction [ ")" ]

    $10,018.97        positive
    ($10,018.97)      negative (accounting style)
    ¥1,000            zero fraction digits: no decimal separator

format_amount() always produces this shape. parse_amount() accepts it and is
looser: symbol, grouping and parentheses are optional, and a leading "-" is
also a valid sign.

A string WITHOUT a decimal separator is read as minor units, not major units:
"1050" is 10.50 USD. Round trips are therefore guaranteed only for formatter
output (or, at zero fraction digits, where both readings coincide).

================================================================================
ROUNDING
================================================================================

There is exactly one rounding policy: half-to-even on a single guard digit.
The parser keeps fraction_digits + 1 fractional digits and discards anything
beyond them before rounding. Digits after the guard digit do not take part.
render_fraction() folds them into the guard digit, so exact rationals still
round as if every digit counted.

================================================================================
"""

from __future__ import annotations
from fractions import Fraction
import logging
import re

from .currency import MoneyFormat
from .errors import MalformedInputError


logger = logging.getLogger(__name__)

_SIGNED_DIGITS = re.compile(r"[+-]?[0-9]+")
_DIGITS = re.compile(r"[0-9]+")


# ==============================================================================
# ROUNDING
# ==============================================================================

def round_half_even(x: int) -> int:
    """
    Drops the last (guard) digit of x, rounding half to even.

        round_half_even(1234) == 123
        round_half_even(1236) == 124
        round_half_even(1235) == 124    # 123 is odd
        round_half_even(1245) == 124    # 124 is even

    Negative inputs are rounded symmetrically: the magnitude is rounded and the
    sign restored.
    """
    sign = -1 if x < 0 else 1
    kept, guard = divmod(abs(x), 10)

    if guard > 5 or (guard == 5 and kept % 2 == 1):
        kept += 1

    return sign * kept


# ==============================================================================
# GROUPING
# ==============================================================================

def group_by_thousands(digits: str, separator: str) -> str:
    """Inserts separator every three digits from the right: 1234567 -> 1,234,567."""
    head = len(digits) % 3 or 3
    groups = [digits[:head]]
    groups.extend(digits[i:i + 3] for i in range(head, len(digits), 3))
    return separator.join(groups)


# ==============================================================================
# PARSING
# ==============================================================================

def _parse_int(part: str, pattern: re.Pattern, source: str) -> int:
    # int() alone would also accept whitespace and underscores
    if not pattern.fullmatch(part):
        try:
            int(part)
        except ValueError as exc:
            raise MalformedInputError(source, f"{part!r} is not an integer") from exc
        raise MalformedInputError(source, f"{part!r} is not a plain digit string")
    return int(part)


def _strip_decorations(text: str, fmt: MoneyFormat) -> tuple[bool, str]:
    """Removes parentheses, currency symbol and group separators."""
    body = text.strip()
    bracketed = len(body) >= 2 and body[0] == "(" and body[-1] == ")"
    if bracketed:
        body = body[1:-1]

    sign = ""
    if body[:1] in ("-", "+"):
        sign, body = body[0], body[1:]

    if body.startswith(fmt.currency_symbol):
        body = body[len(fmt.currency_symbol):]
        if body[:1] in ("-", "+"):
            if sign:
                raise MalformedInputError(text, "more than one sign")
            sign, body = body[0], body[1:]

    if bracketed and sign:
        raise MalformedInputError(text, "sign inside parentheses")

    body = body.replace(fmt.group_separator, "")
    return bracketed, sign + body


def parse_amount(text: str, fmt: MoneyFormat) -> int:
    """
    Parses decimal text into minor units.

    Raises:
        MalformedInputError: more than one decimal separator, or a part that
            is not made of digits.
    """
    if not isinstance(text, str):
        raise TypeError(f"Expected str, got {type(text).__name__}")

    negative, body = _strip_decorations(text, fmt)
    parts = body.split(fmt.decimal_separator)

    if len(parts) == 1:
        # bare integer: already minor units
        amount = _parse_int(parts[0], _SIGNED_DIGITS, text)
        return -amount if negative else amount

    if len(parts) != 2:
        logger.debug("Rejected %r: %d decimal separators", text, len(parts) - 1)
        raise MalformedInputError(
            text, f"more than one decimal separator {fmt.decimal_separator!r}"
        )

    integer_text, fraction_text = parts
    major = _parse_int(integer_text, _SIGNED_DIGITS, text)
    _parse_int(fraction_text, _DIGITS, text)

    if integer_text.startswith("-"):
        negative = True

    digits = fmt.fraction_digits
    if len(fraction_text) > digits:
        # keep exactly one guard digit
        guarded = abs(major) * 10 ** (digits + 1) + int(fraction_text[:digits + 1])
        magnitude = round_half_even(guarded)
    else:
        minor = int(fraction_text.ljust(digits, "0")) if digits else 0
        magnitude = abs(major) * fmt.multiplier + minor

    return -magnitude if negative else magnitude


# ==============================================================================
# FORMATTING
# ==============================================================================

def format_amount(amount: int, fmt: MoneyFormat) -> str:
    """
    Renders minor units in the text format above.

    Works on a local absolute value; nothing is mutated. Zero renders as
    "$0.00", without parentheses.
    """
    digits = str(abs(amount))
    places = fmt.fraction_digits

    if places:
        digits = digits.rjust(places + 1, "0")
        integer_part, fraction_part = digits[:-places], digits[-places:]
        body = (
            fmt.currency_symbol
            + group_by_thousands(integer_part, fmt.group_separator)
            + fmt.decimal_separator
            + fraction_part
        )
    else:
        body = fmt.currency_symbol + group_by_thousands(digits, fmt.group_separator)

    if amount < 0:
        return f"({body})"
    return body


def render_fraction(value: Fraction, places: int, fmt: MoneyFormat) -> str:
    """
    Renders an exact rational as plain decimal text with `places` fractional
    digits, truncated toward zero. No symbol, no grouping.

    A last digit of 5 with a non-zero remainder behind it is written as 6, so
    half-to-even rounding of the last digit (see parse_amount) gives the same
    result as rounding the exact value: 0.0050001 at 3 places is "0.006".
    """
    sign = "-" if value < 0 else ""
    scaled, remainder = divmod(abs(value.numerator) * 10 ** places, value.denominator)
    if remainder and scaled % 10 == 5:
        scaled += 1
    if not places:
        return f"{sign}{scaled}"
    digits = str(scaled).rjust(places + 1, "0")
    return f"{sign}{digits[:-places]}{fmt.decimal_separator}{digits[-places:]}"
