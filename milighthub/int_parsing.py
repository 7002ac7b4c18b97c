"""Parsing of hex and decimal numbers and byte strings."""

from __future__ import annotations

import re
import string
from typing import Callable, Iterable, TypeVar

T = TypeVar("T")
S = TypeVar("S")

_DECIMAL = re.compile(r"\s*([+-]?\d+)")


def str_to_hex(s: str) -> int:
    """Parse a hex string, reading back from its end.

    Reading stops at the first character from the right that is not a hex
    digit, so only the trailing run of hex digits counts.
    """
    value = 0
    shift = 0
    for char in reversed(s):
        if char not in string.hexdigits:
            break
        value |= int(char, 16) << shift
        shift += 4
    return value


def _to_int(s: str) -> int:
    match = _DECIMAL.match(s)
    return int(match.group(1)) if match else 0


def parse_int(s: str) -> int:
    """Parse ``0x``-prefixed hex or a leading decimal integer; 0 if neither."""
    if s.startswith("0x"):
        return str_to_hex(s[2:])
    return _to_int(s)


def hex_str_to_bytes(s: str, max_len: int) -> bytes:
    """Parse pairs of hex digits, optionally separated by spaces.

    At most ``max_len`` bytes are read.
    """
    result = bytearray()
    i = 0
    while i < len(s) and len(result) < max_len:
        result.append(str_to_hex(s[i:i + 2].ljust(2, "\0")) & 0xFF)
        i += 2
        while i < len(s) - 1 and s[i] == " ":
            i += 1
    return bytes(result)


def bytes_to_hex_str(data: Iterable[int]) -> str:
    """Format bytes as upper-case hex pairs separated by single spaces."""
    return " ".join(f"{byte:02X}" for byte in data)


def convert_unique(values: Iterable[S], converter: Callable[[S], T], unique: bool = True) -> list[T]:
    """Convert each value, keeping the first of any repeats when ``unique``."""
    converted: list[T] = []
    for value in values:
        item = converter(value)
        if not unique or item not in converted:
            converted.append(item)
    return converted