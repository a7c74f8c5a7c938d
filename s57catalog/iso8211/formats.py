"""Format specifiers and the scalar subfield value decoder.

A format control element such as ``2I(10)`` expands to a repeat count and a
format spec. Specs are either ``Fixed`` (exact byte width) or ``Variable``
(delimited by a unit terminator, or by the field terminator for the last
subfield of a field).
"""
from __future__ import annotations

import io
import re
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Optional, Union

from s57catalog.iso8211.constants import RECORD_SEPARATOR, UNIT_SEPARATOR
from s57catalog.iso8211.errors import (
    BadFormatControl,
    IntegerParseError,
    RealParseError,
    TextEncodingError,
    TruncatedField,
)

# [count]Letter[(width)]
_SPEC_RE = re.compile(r"^(\d*)([A-Za-z])(?:\((\d+)\))?$")

Value = Union[str, int, float, None]


class ParseType(Enum):
    TEXT = "A"
    INTEGER = "I"
    REAL = "R"


@dataclass(frozen=True, slots=True)
class Fixed:
    type: ParseType
    width: int

    def __str__(self) -> str:
        return f"{self.type.value}({self.width})"


@dataclass(frozen=True, slots=True)
class Variable:
    type: ParseType

    def __str__(self) -> str:
        return self.type.value


FormatSpec = Union[Fixed, Variable]


def parse_format_spec(element: str) -> tuple[int, FormatSpec]:
    """Parse one format control element into (repeat count, spec)."""
    m = _SPEC_RE.match(element.strip())
    if m is None:
        raise BadFormatControl(element)
    count_str, letter, width_str = m.groups()
    try:
        parse_type = ParseType(letter)
    except ValueError:
        raise BadFormatControl(element) from None

    count = int(count_str) if count_str else 1
    if width_str is None:
        return count, Variable(parse_type)
    return count, Fixed(parse_type, int(width_str))


def decode_value(spec: FormatSpec, cursor: BinaryIO) -> Value:
    """Consume one subfield from ``cursor`` and return its typed value."""
    if isinstance(spec, Fixed):
        raw = cursor.read(spec.width)
        if len(raw) != spec.width:
            raise TruncatedField(spec.width, len(raw))
    else:
        raw = _read_delimited(cursor)
    return convert(spec.type, raw)


def _read_delimited(cursor: BinaryIO) -> bytes:
    """Read up to a delimiter. A UT is consumed, an FT is left for the field."""
    buf = bytearray()
    while True:
        b = cursor.read(1)
        if not b:
            break
        if b[0] == UNIT_SEPARATOR:
            break
        if b[0] == RECORD_SEPARATOR:
            cursor.seek(-1, io.SEEK_CUR)
            break
        buf += b
    return bytes(buf)


def convert(parse_type: ParseType, raw: bytes) -> Value:
    """Convert raw subfield bytes to the Python value for ``parse_type``."""
    text = decode_text(raw)
    if parse_type is ParseType.TEXT:
        return text
    if parse_type is ParseType.INTEGER:
        return _to_int(text)
    return _to_float(text)


def decode_text(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as err:
        raise TextEncodingError() from err


def _to_int(text: str) -> Optional[int]:
    stripped = text.strip()
    if not stripped:
        return None
    try:
        return int(stripped)
    except ValueError:
        raise IntegerParseError(text) from None


def _to_float(text: str) -> Optional[float]:
    stripped = text.strip()
    if not stripped:
        return None
    try:
        return float(stripped)
    except ValueError:
        raise RealParseError(text) from None
