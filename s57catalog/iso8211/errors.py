"""Exception hierarchy for ISO 8211 / S-57 catalog decoding.

Each class is one kind of failure. Higher layers add context by raising
their own kind ``from`` the lower-level exception, so the full cause chain
stays available through ``__cause__`` (see ``error_chain``).
"""
from __future__ import annotations

from typing import Optional


class ISO8211Error(Exception):
    """Base class for every decoding failure."""
    message = "ISO 8211 decoding error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)


# -- Primitive conversions --

class TextEncodingError(ISO8211Error):
    message = "bytes are not valid UTF-8"


class IntegerParseError(ISO8211Error):
    def __init__(self, text: str):
        self.text = text
        super().__init__(f"cannot parse {text!r} as an integer")


class RealParseError(ISO8211Error):
    def __init__(self, text: str):
        self.text = text
        super().__init__(f"cannot parse {text!r} as a real number")


# -- Byte source --

class StreamIOError(ISO8211Error):
    """I/O failure; ``kind`` keeps the name of the underlying OS error kind."""

    def __init__(self, kind: str, message: Optional[str] = None):
        self.kind = kind
        super().__init__(message or f"I/O error ({kind})")


class UnexpectedEndOfStream(StreamIOError):
    def __init__(self, expected: int, got: int):
        self.expected = expected
        self.got = got
        super().__init__(
            "UnexpectedEof",
            f"unexpected end of stream: wanted {expected} bytes, got {got}",
        )


class EndOfStream(ISO8211Error):
    """Clean end of the byte source. Never escapes the reader."""
    message = "end of stream"


# -- Record structure --

class InvalidLeader(ISO8211Error):
    message = "invalid record leader"


class BadDirectoryData(ISO8211Error):
    message = "directory data is malformed"


class FieldOutOfBounds(ISO8211Error):
    def __init__(self, tag: str, offset: int, length: int, area_size: int):
        self.tag = tag
        super().__init__(
            f"field {tag} ({offset}+{length}) lies outside the {area_size}-byte field area"
        )


class MissingFieldTerminator(ISO8211Error):
    def __init__(self, tag: str):
        self.tag = tag
        super().__init__(f"field {tag} does not end with a separator")


# -- Data descriptive fields --

class BadFieldControl(ISO8211Error):
    message = "invalid field controls"


class BadDataStructureCode(ISO8211Error):
    def __init__(self, code: str):
        self.code = code
        super().__init__(f"unknown data structure code {code!r}")


class BadDataTypeCode(ISO8211Error):
    def __init__(self, code: str):
        self.code = code
        super().__init__(f"unknown data type code {code!r}")


class BadTruncEscSeq(ISO8211Error):
    def __init__(self, code: str):
        self.code = code
        super().__init__(f"unknown truncated escape sequence {code!r}")


class FormatControlError(ISO8211Error):
    message = "invalid format controls"


class EmptyFormatControls(FormatControlError):
    message = "format controls are empty"


class BadFormatControl(FormatControlError):
    def __init__(self, element: str):
        self.element = element
        super().__init__(f"cannot parse format control {element!r}")


class InvalidHeader(ISO8211Error):
    message = "data descriptive field header is malformed"


class CouldNotParseName(ISO8211Error):
    message = "could not parse field name"


class InvalidDDF(ISO8211Error):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"invalid data descriptive field {name!r}")


class BadFileControlField(ISO8211Error):
    message = "file control field is malformed"


class InvalidDDR(ISO8211Error):
    message = "invalid data descriptive record"


# -- Data records --

class TruncatedField(ISO8211Error):
    def __init__(self, expected: int, got: int):
        self.expected = expected
        self.got = got
        super().__init__(f"subfield needs {expected} bytes, only {got} left")


class InvalidDR(ISO8211Error):
    def __init__(self, tag: Optional[str] = None, reason: Optional[str] = None):
        self.tag = tag
        msg = "invalid data record"
        if tag is not None:
            msg += f" (field {tag})"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class CouldNotParseCatalog(ISO8211Error):
    message = "could not parse catalog"


def error_chain(err: BaseException) -> list[BaseException]:
    """Return ``err`` followed by each of its causes, outermost first."""
    chain: list[BaseException] = []
    current: Optional[BaseException] = err
    while current is not None and current not in chain:
        chain.append(current)
        current = current.__cause__
    return chain


def format_error_chain(err: BaseException) -> str:
    """Render a cause chain as ``outer: inner: root``."""
    return ": ".join(str(e) or type(e).__name__ for e in error_chain(err))
