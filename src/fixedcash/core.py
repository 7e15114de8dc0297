"""
core.py — Fixed-point Money value

================================================================================
DESIGN PRINCIPLES
================================================================================

1. INTERNAL REPRESENTATION
   Integers in minor units (cents for USD, satoshi for BTC, ...).
   Never floating point. Floats are rejected by every operation.

2. COMPATIBILITY
   Binary operations require the same MoneyFormat on every operand
   (fraction digits, symbol, decimal and group separators).
   A mismatch raises IncompatibleOperandsError and changes nothing.

3. IN-PLACE RESULTS
   Arithmetic writes its result into the receiver and returns it, so one
   instance can be reused across a loop and calls can be chained:

       total = Money.derive(Currency.USD).add(a, b)
       total.subtract(total, fee).multiply_by_scalar(total, 3)

   Operators (+, -, *) are the non-mutating spelling and return new values.
   A Money is therefore mutable and unhashable; share instances across
   threads only behind your own lock.

4. ONE ROUNDING POLICY
   Half-to-even on a single guard digit (see text.round_half_even).
   Used by the parser and by rational multiplication, nowhere else.

5. ZERO-SUM ALLOCATION
   divide_by_scalar() and divide_into_ratio() return parts whose sum is
   exactly the original amount, for every sign of amount.

================================================================================
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from fractions import Fraction
from numbers import Rational
from typing import ClassVar, Optional
import logging

from .currency import Currency, MoneyFormat, resolve_format
from .errors import IncompatibleOperandsError
from .text import format_amount, parse_amount, render_fraction


logger = logging.getLogger(__name__)


def _truncating_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def _require_int(name: str, value: object) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(
            f"{name} must be int, not {type(value).__name__}"
        )
    return value


def _as_fraction(value: object) -> Fraction:
    if isinstance(value, bool) or not isinstance(value, Rational):
        raise TypeError(
            f"Expected an exact rational (int or Fraction), "
            f"not {type(value).__name__}"
        )
    return Fraction(value)


# ==============================================================================
# MONEY CLASS
# ==============================================================================

@dataclass(slots=True, eq=False)
class Money:
    """
    Fixed-point monetary amount.

    INVARIANTS:
    1. _amount is always an int in minor units
    2. _format is an immutable MoneyFormat
    3. _rational is None, or the exact value that _amount is the
       half-to-even rounding of; any other write to _amount clears it

    USAGE:
        price = Money.derive(Currency.USD).set_string("18.18")
        parts = price.divide_by_scalar(3)
        # sum(p.amount for p in parts) == price.amount
    """
    _amount: int
    _format: MoneyFormat
    _rational: Optional[Fraction] = None

    # Maximum parts for allocation (DoS protection)
    MAX_DISTRIBUTION_PARTS: ClassVar[int] = 10_000

    __hash__ = None

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def derive(cls, preset: Currency | MoneyFormat) -> Money:
        """New zero value carrying the preset's format."""
        return cls(_amount=0, _format=resolve_format(preset))

    @classmethod
    def of(cls, major_units: int, currency: Currency | MoneyFormat) -> Money:
        """From whole major units (dollars, euros, ...)."""
        money = cls.derive(currency)
        money._amount = _require_int("major_units", major_units) * money._format.multiplier
        return money

    @classmethod
    def of_minor(cls, minor_units: int, currency: Currency | MoneyFormat) -> Money:
        return cls.derive(currency).set_cents(minor_units)

    @classmethod
    def zero(cls, currency: Currency | MoneyFormat) -> Money:
        return cls.derive(currency)

    @classmethod
    def parse(cls, text: str, currency: Currency | MoneyFormat) -> Money:
        """Shorthand for derive(currency).set_string(text)."""
        return cls.derive(currency).set_string(text)

    @classmethod
    def from_rational(cls, value: Rational, currency: Currency | MoneyFormat) -> Money:
        return cls.derive(currency).set_rational(value)

    # Shorthand for common currencies
    @classmethod
    def usd(cls, value: int) -> Money:
        return cls.of(value, Currency.USD)

    @classmethod
    def usd_cents(cls, cents: int) -> Money:
        return cls.of_minor(cents, Currency.USD)

    @classmethod
    def euro(cls, value: int) -> Money:
        return cls.of(value, Currency.EUR)

    @classmethod
    def euro_cents(cls, cents: int) -> Money:
        return cls.of_minor(cents, Currency.EUR)

    def copy(self) -> Money:
        return Money(_amount=self._amount, _format=self._format, _rational=self._rational)

    # -------------------------------------------------------------------------
    # Setters (write into the receiver, return it)
    # -------------------------------------------------------------------------

    def set_cents(self, cents: int) -> Money:
        """Sets the amount in minor units. No scaling happens."""
        self._amount = _require_int("cents", cents)
        self._rational = None
        return self

    def set_fraction_digits(self, digits: int) -> Money:
        """
        Reinterprets the amount at a different precision.

        The amount is NOT rescaled: 1050 at 2 digits ($10.50) becomes 1050 at
        3 digits ($1.050). Use this only when that reinterpretation is the
        point, e.g. before printing a value that was computed at another
        precision. It is not a currency conversion and not a rounding step.

        Raises:
            ValueError: digits outside 0..10
        """
        self._format = replace(self._format, fraction_digits=digits)
        self._rational = None
        return self

    def set_string(self, text: str) -> Money:
        """
        Parses decimal text into the receiver.

        Accepts formatter output ("$10,018.97", "($1.50)") as well as plain
        "-1.50". Text without a decimal separator is read as minor units:
        "150" is $1.50, not $150.00.

        Raises:
            MalformedInputError: the receiver is left unchanged
        """
        self._amount = parse_amount(text, self._format)
        self._rational = None
        return self

    def set_rational(self, value: Rational) -> Money:
        """
        Sets the receiver from an exact rational, rounding half-to-even to
        the receiver's precision. The exact value is kept for later rational
        operations.
        """
        exact = _as_fraction(value)
        text = render_fraction(exact, self._format.fraction_digits + 1, self._format)
        self._amount = parse_amount(text, self._format)
        self._rational = exact
        return self

    # -------------------------------------------------------------------------
    # Compatibility
    # -------------------------------------------------------------------------

    def is_compatible(self, other: Money) -> bool:
        """Same fraction digits, symbol and separators. Amount is irrelevant."""
        return isinstance(other, Money) and self._format == other._format

    def _check_compatible(self, operation: str, *operands: Money) -> None:
        for operand in operands:
            if not isinstance(operand, Money):
                raise TypeError(
                    f"Cannot {operation}: Money and {type(operand).__name__}"
                )
            if operand._format != self._format:
                raise IncompatibleOperandsError(operation, self._format, operand._format)

    # -------------------------------------------------------------------------
    # Arithmetic (in place)
    # -------------------------------------------------------------------------

    def add(self, x: Money, y: Money) -> Money:
        """Sets the receiver to x + y. No overflow checking."""
        self._check_compatible("add", x, y)
        return self.set_cents(x._amount + y._amount)

    def subtract(self, x: Money, y: Money) -> Money:
        """Sets the receiver to x - y."""
        self._check_compatible("subtract", x, y)
        return self.set_cents(x._amount - y._amount)

    def multiply_by_scalar(self, x: Money, scalar: int) -> Money:
        """
        Sets the receiver to x * scalar, e.g. unit price times quantity.

        The most common multiplication for money, and the only exact one.
        """
        self._check_compatible("multiply", x)
        return self.set_cents(x._amount * _require_int("scalar", scalar))

    def multiply_by_rational(self, x: Money, p: Rational) -> Money:
        """
        Sets the receiver to x * p rounded half-to-even to minor units.

        The exact product is kept on the receiver, so a chain such as
        z.multiply_by_rational(z, Fraction(1, 3)).multiply_by_rational(z, 3)
        rounds once at the end instead of at every step.
        """
        self._check_compatible("multiply", x)
        factor = _as_fraction(p)

        base = x._rational if x._rational is not None else x.to_rational()
        product = base * factor

        text = render_fraction(product, self._format.fraction_digits + 1, self._format)
        amount = parse_amount(text, self._format)
        logger.debug("Rational product %s rendered as %r -> %d", product, text, amount)

        self._amount = amount
        self._rational = product
        return self

    def multiply_by_value(self, x: Money, y: Money) -> Money:
        """
        Sets the receiver to x * y, truncated toward zero.

        Money times money has no physical meaning; this exists for
        completeness. The double-scaled product is divided back down, so the
        result is truncated, not rounded.
        """
        self._check_compatible("multiply", x, y)
        product = _truncating_div(x._amount * y._amount, self._format.multiplier)
        return self.set_cents(product)

    # -------------------------------------------------------------------------
    # Operators (new values)
    # -------------------------------------------------------------------------

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return self.copy().add(self, other)

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return self.copy().subtract(self, other)

    def __mul__(self, factor: int | Fraction) -> Money:
        if isinstance(factor, int) and not isinstance(factor, bool):
            return self.copy().multiply_by_scalar(self, factor)
        if isinstance(factor, Rational):
            return self.copy().multiply_by_rational(self, factor)
        return NotImplemented

    def __rmul__(self, factor: int | Fraction) -> Money:
        return self.__mul__(factor)

    def __neg__(self) -> Money:
        return self.copy().set_cents(-self._amount)

    def __abs__(self) -> Money:
        return self.copy().set_cents(abs(self._amount))

    # -------------------------------------------------------------------------
    # Allocation
    # -------------------------------------------------------------------------

    def _part(self, amount: int) -> Money:
        return Money(_amount=amount, _format=self._format)

    def divide_by_scalar(self, n: int) -> list[Money]:
        """
        Splits the amount into n parts with an EXACT sum.

        The first (amount mod n) parts get one extra minor unit:
        100 / 3 -> [34, 33, 33]. Parts differ by at most one minor unit.
        Negative amounts work too (-100 / 3 -> [-33, -33, -34]).

        Raises:
            ValueError: n <= 0 or n > MAX_DISTRIBUTION_PARTS
        """
        _require_int("n", n)
        if n <= 0:
            raise ValueError(f"n must be > 0, got {n}")
        if n > self.MAX_DISTRIBUTION_PARTS:
            raise ValueError(f"n exceeds the limit of {self.MAX_DISTRIBUTION_PARTS}")

        minima, remainder = divmod(self._amount, n)

        return [
            self._part(minima + 1 if i < remainder else minima)
            for i in range(n)
        ]

    def divide_into_ratio(self, weights: list[int]) -> list[Money]:
        """
        Splits the amount proportionally to integer weights, EXACT sum.

        Each part gets amount * weight // total_weight; the units lost to
        flooring (always fewer than the number of non-zero weights) go one
        each to the first parts with a non-zero weight:
        100 into [1, 1, 1] -> [34, 33, 33], 101 into [0, 1, 1] -> [0, 51, 50].

        Raises:
            ValueError: empty weights, negative weight, zero total,
                more than MAX_DISTRIBUTION_PARTS weights
            TypeError: non-int weight
        """
        if not weights:
            raise ValueError("weights cannot be empty")
        if len(weights) > self.MAX_DISTRIBUTION_PARTS:
            raise ValueError(f"weights exceed the limit of {self.MAX_DISTRIBUTION_PARTS}")
        for weight in weights:
            _require_int("weight", weight)
            if weight < 0:
                raise ValueError(f"weights cannot be negative, got {weight}")

        denominator = sum(weights)
        if denominator == 0:
            raise ValueError("sum of weights cannot be 0")

        shares = [self._amount * weight // denominator for weight in weights]
        leftover = self._amount - sum(shares)

        # zero-weight parts never receive leftover units
        weighted = [i for i, weight in enumerate(weights) if weight > 0]
        for i in weighted[:leftover]:
            shares[i] += 1

        return [self._part(share) for share in shares]

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def compare(self, other: Money) -> int:
        """Returns -1, 0 or 1."""
        self._check_compatible("compare", other)
        if self._amount < other._amount:
            return -1
        if self._amount > other._amount:
            return 1
        return 0

    def greater_than(self, other: Money) -> bool:
        return self.compare(other) == 1

    def less_than(self, other: Money) -> bool:
        return self.compare(other) == -1

    def equals(self, other: Money) -> bool:
        """Like ==, but raises on incompatible formats instead of returning False."""
        return self.compare(other) == 0

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Money):
            return self._amount == other._amount and self._format == other._format
        return NotImplemented

    def __lt__(self, other: Money) -> bool:
        return self.compare(other) < 0

    def __le__(self, other: Money) -> bool:
        return self.compare(other) <= 0

    def __gt__(self, other: Money) -> bool:
        return self.compare(other) > 0

    def __ge__(self, other: Money) -> bool:
        return self.compare(other) >= 0

    # -------------------------------------------------------------------------
    # Properties and output
    # -------------------------------------------------------------------------

    @property
    def amount(self) -> int:
        """Amount in minor units. For persistence and calculations."""
        return self._amount

    @property
    def money_format(self) -> MoneyFormat:
        return self._format

    @property
    def fraction_digits(self) -> int:
        return self._format.fraction_digits

    @property
    def currency_symbol(self) -> str:
        return self._format.currency_symbol

    @property
    def decimal_separator(self) -> str:
        return self._format.decimal_separator

    @property
    def group_separator(self) -> str:
        return self._format.group_separator

    @property
    def rational(self) -> Optional[Fraction]:
        """Exact value from the last rational operation, or None."""
        return self._rational

    def to_rational(self) -> Fraction:
        """amount / 10**fraction_digits as an exact Fraction."""
        return Fraction(self._amount, self._format.multiplier)

    def is_positive(self) -> bool:
        return self._amount > 0

    def is_negative(self) -> bool:
        return self._amount < 0

    def is_zero(self) -> bool:
        return self._amount == 0

    def format(self) -> str:
        """"$10,018.97", or "($10,018.97)" when negative."""
        return format_amount(self._amount, self._format)

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"Money({self.format()!r}, amount={self._amount})"

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict:
        """
        Serializes for persistence/APIs.

        The amount is always an int in minor units, never a float.
        The rational shadow is not persisted.
        """
        return {
            "amount": self._amount,
            "fraction_digits": self._format.fraction_digits,
            "currency_symbol": self._format.currency_symbol,
            "decimal_separator": self._format.decimal_separator,
            "group_separator": self._format.group_separator,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Money:
        money_format = MoneyFormat(
            fraction_digits=data["fraction_digits"],
            currency_symbol=data["currency_symbol"],
            decimal_separator=data.get("decimal_separator", "."),
            group_separator=data.get("group_separator", ","),
        )
        return cls.of_minor(data["amount"], money_format)
