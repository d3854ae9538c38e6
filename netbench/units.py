"""Parsing and formatting of byte counts and bit rates with unit suffixes."""

from __future__ import annotations

import re

UNIT_LEN = 64

KILO_UNIT = 1024.0
MEGA_UNIT = 1024.0 * 1024.0
GIGA_UNIT = 1024.0 * 1024.0 * 1024.0
TERA_UNIT = 1024.0 * 1024.0 * 1024.0 * 1024.0

KILO_RATE_UNIT = 1000.0
MEGA_RATE_UNIT = 1000.0 * 1000.0
GIGA_RATE_UNIT = 1000.0 * 1000.0 * 1000.0
TERA_RATE_UNIT = 1000.0 * 1000.0 * 1000.0 * 1000.0

_BINARY_MULTIPLIERS = {
    "t": TERA_UNIT,
    "g": GIGA_UNIT,
    "m": MEGA_UNIT,
    "k": KILO_UNIT,
}

_DECIMAL_MULTIPLIERS = {
    "t": TERA_RATE_UNIT,
    "g": GIGA_RATE_UNIT,
    "m": MEGA_RATE_UNIT,
    "k": KILO_RATE_UNIT,
}

_NUMBER = re.compile(
    r"\s*([+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?"
    r"|\.\d+(?:[eE][+-]?\d+)?"
    r"|inf(?:inity)?|nan))",
    re.IGNORECASE,
)

_CONVERSION_BYTES = (
    1.0,
    1.0 / 1024,
    1.0 / 1024 / 1024,
    1.0 / 1024 / 1024 / 1024,
    1.0 / 1024 / 1024 / 1024 / 1024,
)

_CONVERSION_BITS = (
    1.0,
    1.0 / 1000,
    1.0 / 1000 / 1000,
    1.0 / 1000 / 1000 / 1000,
    1.0 / 1000 / 1000 / 1000 / 1000,
)

_LABEL_BYTE = ("Byte", "KByte", "MByte", "GByte", "TByte")
_LABEL_BIT = ("bit", "Kbit", "Mbit", "Gbit", "Tbit")

_FIXED_CONVERSIONS = {"B": 0, "K": 1, "M": 2, "G": 3, "T": 4}
_TERA_CONV = 4


def _scan(s: str) -> tuple[float, str]:
    """Split a string into its leading number and the character right after it."""
    if s is None:
        raise TypeError("expected a string, got None")
    match = _NUMBER.match(s)
    if match is None:
        raise ValueError(f"no number at the start of {s!r}")
    end = match.end()
    suffix = s[end] if end < len(s) else ""
    return float(match.group(1)), suffix


def _apply(s: str, multipliers: dict[str, float]) -> float:
    number, suffix = _scan(s)
    return number * multipliers.get(suffix.lower(), 1.0)


def unit_atof(s: str) -> float:
    """Parse a number with an optional K/M/G/T suffix, in powers of 1024."""
    return _apply(s, _BINARY_MULTIPLIERS)


def unit_atof_rate(s: str) -> float:
    """Parse a number with an optional K/M/G/T suffix, in powers of 1000."""
    return _apply(s, _DECIMAL_MULTIPLIERS)


def unit_atoi(s: str) -> int:
    """Parse like :func:`unit_atof` and truncate the result to an integer."""
    return int(unit_atof(s))


def unit_format(value: float, fmt: str, precision: int = -1) -> str:
    """Format a byte count in the unit chosen by ``fmt``.

    Upper-case formats (B, K, M, G, T, A) print bytes; lower-case ones
    print bits. ``A``/``a`` and any unknown letter pick a unit adaptively.
    A precision of -1 keeps the number to about four characters.
    """
    if not isinstance(fmt, str) or len(fmt) != 1:
        raise ValueError(f"format must be a single character, got {fmt!r}")
    if precision < -1:
        raise ValueError(f"precision must be -1 or non-negative, got {precision}")

    as_bytes = fmt.isupper()
    number = float(value)
    if not as_bytes:
        number *= 8

    conv = _FIXED_CONVERSIONS.get(fmt.upper())
    if conv is None:
        conv = 0
        scaled = number
        step = 1024.0 if as_bytes else 1000.0
        extra_digits = max(0, precision - 2)
        limit = step * 10 ** extra_digits
        precision -= extra_digits
        while scaled >= limit and conv < _TERA_CONV:
            scaled /= step
            conv += 1

    if as_bytes:
        number *= _CONVERSION_BYTES[conv]
        label = _LABEL_BYTE[conv]
    else:
        number *= _CONVERSION_BITS[conv]
        label = _LABEL_BIT[conv]

    if precision == -1:
        if number < 9.995:
            return f"{number:4.2f} {label}"
        if number < 99.95:
            return f"{number:4.1f} {label}"
        return f"{number:4.0f} {label}"
    return f"{number:0.{precision}f} {label}"