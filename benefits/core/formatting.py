"""Helpers for rendering values across output encodings."""

from __future__ import annotations

import re
from decimal import Decimal


def to_decimal(value: int | float | str | Decimal | None) -> Decimal:
    """Coerce a store value to ``Decimal`` without going through binary floats."""

    if value is None:
        return Decimal(0)
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def plain_decimal(value: int | Decimal) -> str:
    """Format a number in fixed-point notation.

    Never produces exponent notation or locale separators, so the text is a
    valid ``xsd:decimal`` and parses back to the same ``Decimal``.
    """

    d = to_decimal(value)
    if d.is_zero() and d.is_signed():
        d = abs(d)
    return format(d, "f")


def json_number(value: Decimal) -> float | str:
    """Return ``value`` as a float when the float's shortest repr reads back as the
    same decimal (so ``0.1`` stays a number), otherwise as fixed-point text.
    """

    as_float = float(value)
    if Decimal(repr(as_float)) == value:
        return as_float
    return plain_decimal(value)


# Control characters XML 1.0 cannot carry, even escaped.
XML_ILLEGAL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def has_xml_illegal_chars(text: str) -> bool:
    return XML_ILLEGAL_CHARS.search(text) is not None
