"""
currency.py — Currency formats and presets

================================================================================
CONFIGURATION MODEL
================================================================================

A MoneyFormat is everything that makes two amounts combinable:

    fraction_digits     digits after the decimal separator (0-10)
    currency_symbol     one character, printed before the digits
    decimal_separator   one character between major and minor units
    group_separator     one character every three integer digits

Two Money values are *compatible* iff their MoneyFormat compares equal.
The amount never takes part in compatibility.

Presets live in the Currency enum. They are frozen: Money.derive() copies the
preset's format into a fresh value, so no caller can mutate a preset.

================================================================================
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


# Minor-unit factor per supported precision: MINOR_UNIT_FACTORS[n] == 10 ** n
MINOR_UNIT_FACTORS: tuple[int, ...] = tuple(10 ** n for n in range(11))

MAX_FRACTION_DIGITS: int = len(MINOR_UNIT_FACTORS) - 1

_RESERVED_CHARS = frozenset("-+()")


def _require_char(name: str, value: str) -> None:
    if not isinstance(value, str) or len(value) != 1:
        raise ValueError(f"{name} must be a single character, got {value!r}")
    if value.isdigit():
        raise ValueError(f"{name} cannot be a digit, got {value!r}")
    # reserved by the text format for signs and negative brackets
    if value in _RESERVED_CHARS or value.isspace():
        raise ValueError(f"{name} cannot be a sign, bracket or space, got {value!r}")


@dataclass(frozen=True, slots=True)
class MoneyFormat:
    """
    Immutable currency configuration.

    Out-of-range fraction_digits is a programming error and fails here,
    at configuration time, never in the middle of an arithmetic operation.
    """
    fraction_digits: int
    currency_symbol: str
    decimal_separator: str = "."
    group_separator: str = ","

    def __post_init__(self) -> None:
        if (
            not isinstance(self.fraction_digits, int)
            or isinstance(self.fraction_digits, bool)
            or not 0 <= self.fraction_digits <= MAX_FRACTION_DIGITS
        ):
            raise ValueError(
                f"fraction_digits must be an int in 0..{MAX_FRACTION_DIGITS}, "
                f"got {self.fraction_digits!r}"
            )
        _require_char("currency_symbol", self.currency_symbol)
        _require_char("decimal_separator", self.decimal_separator)
        _require_char("group_separator", self.group_separator)
        if self.decimal_separator == self.group_separator:
            raise ValueError(
                f"decimal_separator and group_separator must differ, "
                f"both are {self.decimal_separator!r}"
            )
        if self.currency_symbol in (self.decimal_separator, self.group_separator):
            raise ValueError(
                f"currency_symbol {self.currency_symbol!r} cannot double as a separator"
            )

    @property
    def multiplier(self) -> int:
        """Conversion factor major -> minor units."""
        return MINOR_UNIT_FACTORS[self.fraction_digits]

    def __str__(self) -> str:
        # e.g. "$#,###.00"
        pattern = f"{self.currency_symbol}#{self.group_separator}###"
        if self.fraction_digits:
            pattern += self.decimal_separator + "0" * self.fraction_digits
        return pattern


# ==============================================================================
# PRESETS
# ==============================================================================

class Currency(Enum):
    """
    Supported presets: ISO 4217 code plus display format.

    The symbol set is intentionally small; anything else can be expressed
    with a custom MoneyFormat.
    """
    USD = ("USD", MoneyFormat(2, "$"))   # 1 USD = 100 cents
    EUR = ("EUR", MoneyFormat(2, "€"))   # 1 EUR = 100 cents
    GBP = ("GBP", MoneyFormat(2, "£"))   # 1 GBP = 100 pence
    JPY = ("JPY", MoneyFormat(0, "¥"))   # no minor unit
    BTC = ("BTC", MoneyFormat(8, "฿"))   # 1 BTC = 100,000,000 satoshi

    def __init__(self, code: str, money_format: MoneyFormat):
        self._code = code
        self._format = money_format

    @property
    def code(self) -> str:
        return self._code

    @property
    def money_format(self) -> MoneyFormat:
        return self._format

    @property
    def fraction_digits(self) -> int:
        return self._format.fraction_digits

    @property
    def multiplier(self) -> int:
        return self._format.multiplier

    @classmethod
    def from_symbol(cls, symbol: str) -> Currency:
        """Looks a preset up by its currency symbol."""
        for currency in cls:
            if currency.money_format.currency_symbol == symbol:
                return currency
        raise KeyError(f"No preset uses currency symbol {symbol!r}")


def resolve_format(source: Currency | MoneyFormat) -> MoneyFormat:
    """Accepts either a preset or an explicit format."""
    if isinstance(source, Currency):
        return source.money_format
    if isinstance(source, MoneyFormat):
        return source
    raise TypeError(
        f"Expected Currency or MoneyFormat, got {type(source).__name__}"
    )
