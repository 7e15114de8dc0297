"""
codec.py — Encode/decode hooks for persistence and transport layers

Database drivers, JSON encoders and message serializers are NOT part of this
package. They call these two functions and nothing else:

    encode(money)              -> "$10,018.97"
    encode(money, quoted=True) -> '"$10,018.97"'
    decode(raw, currency)      -> Money

decode() accepts what such layers typically hand back:

    int           minor units, stored as-is
    str / bytes   text format, optionally wrapped in double quotes

The currency is always an explicit argument. There is no default currency:
a column or field of money has to know which currency it holds.
"""

from __future__ import annotations
import logging

from .core import Money
from .currency import Currency, MoneyFormat
from .errors import MalformedInputError, UnsupportedScanInputError


logger = logging.getLogger(__name__)


def _unquote(text: str) -> str:
    if len(text) > 2 and text[0] == '"' and text[-1] == '"':
        return text[1:-1]
    return text


def encode(money: Money, quoted: bool = False) -> str:
    """Text form of money, optionally wrapped in double quotes."""
    text = money.format()
    if quoted:
        return f'"{text}"'
    return text


def decode(raw: object, currency: Currency | MoneyFormat) -> Money:
    """
    Builds a Money from a stored or transported value.

    Raises:
        UnsupportedScanInputError: raw is neither an int nor text
        MalformedInputError: raw is text the parser cannot read
    """
    # bool is an int subclass but never a stored amount
    if isinstance(raw, bool):
        raise UnsupportedScanInputError(raw)

    if isinstance(raw, int):
        logger.debug("Decoding %d as minor units", raw)
        return Money.of_minor(raw, currency)

    if isinstance(raw, (bytes, bytearray, memoryview)):
        try:
            raw = bytes(raw).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedInputError(repr(bytes(raw)), "not UTF-8") from exc

    if isinstance(raw, str):
        text = _unquote(raw)
        logger.debug("Decoding %r as text", text)
        return Money.parse(text, currency)

    raise UnsupportedScanInputError(raw)
