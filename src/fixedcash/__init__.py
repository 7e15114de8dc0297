"""
fixedcash — Fixed-point money for Python

Currency amounts as integer minor units: no binary floating-point error,
one rounding policy (half-to-even), allocations that never lose a cent.

================================================================================
QUICK START
================================================================================

Basic usage:

    from fixedcash import Money, Currency

    price = Money.derive(Currency.USD).set_string("18.18")
    str(price)                          # "$18.18"

    # Arithmetic writes into the receiver and returns it
    total = Money.derive(Currency.USD).multiply_by_scalar(price, 6)

    # Fair division: parts always sum to the original
    parts = Money.usd_cents(100).divide_by_scalar(3)    # [34, 33, 33]
    shares = Money.usd_cents(100).divide_into_ratio([1, 1, 1])

    # Exact rational multiplication, rounded half-to-even once
    from fractions import Fraction
    discounted = Money.derive(Currency.USD).multiply_by_rational(price, Fraction(3, 4))

Persistence and transport layers use the codec hooks:

    from fixedcash.codec import encode, decode

    decode(encode(price), Currency.USD) == price

================================================================================
"""

import logging

from .core import Money
from .currency import Currency, MoneyFormat, MINOR_UNIT_FACTORS
from .errors import (
    MoneyError,
    MalformedInputError,
    IncompatibleOperandsError,
    UnsupportedScanInputError,
)
from .text import round_half_even, group_by_thousands
from .codec import encode, decode

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    # Core
    "Money",
    "Currency",
    "MoneyFormat",
    "MINOR_UNIT_FACTORS",
    # Errors
    "MoneyError",
    "MalformedInputError",
    "IncompatibleOperandsError",
    "UnsupportedScanInputError",
    # Helpers
    "round_half_even",
    "group_by_thousands",
    "encode",
    "decode",
]
