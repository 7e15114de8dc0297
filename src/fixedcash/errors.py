"""
errors.py — Exceptions raised by fixedcash.

Every error is local and recoverable: the operation that raised left its
receiver exactly as it was before the call.

The concrete classes also inherit from the builtin exception a caller would
naturally expect (ValueError for bad text, TypeError for mismatched operands),
so ``except ValueError`` keeps working for code that does not know about
this package.
"""

from __future__ import annotations


class MoneyError(Exception):
    """Base class for all fixedcash errors."""


class MalformedInputError(MoneyError, ValueError):
    """Text is not a decimal amount the parser can read."""

    def __init__(self, text: str, reason: str):
        self.text = text
        self.reason = reason
        super().__init__(f"Malformed amount {text!r}: {reason}")


class IncompatibleOperandsError(MoneyError, TypeError):
    """Operands use different currency formats."""

    def __init__(self, operation: str, expected, received):
        self.operation = operation
        self.expected = expected
        self.received = received
        super().__init__(
            f"Cannot {operation}: incompatible formats "
            f"{expected} vs {received}"
        )


class UnsupportedScanInputError(MoneyError, TypeError):
    """A decode hook received something that is neither an int nor text."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(
            f"Cannot decode {type(value).__name__} into Money; "
            f"expected int (minor units) or str"
        )
