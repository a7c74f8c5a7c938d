"""Enumerations for the coded field-control characters of a DDF."""
from __future__ import annotations

from enum import Enum

from s57catalog.iso8211.errors import BadDataStructureCode, BadDataTypeCode, BadTruncEscSeq


class DataStructureCode(Enum):
    SDI = "0"   # Single data item
    LS = "1"    # Linear structure
    MDS = "2"   # Multi-dimensional structure

    @classmethod
    def from_code(cls, code: str) -> DataStructureCode:
        try:
            return cls(code)
        except ValueError:
            raise BadDataStructureCode(code) from None

    @property
    def description(self) -> str:
        return DATA_STRUCTURE_NAMES[self]


class DataTypeCode(Enum):
    CS = "0"    # Character string
    IP = "1"    # Implicit point (integer)
    EP = "2"    # Explicit point (real)
    BF = "5"    # Binary form
    MDT = "6"   # Mixed data types

    @classmethod
    def from_code(cls, code: str) -> DataTypeCode:
        try:
            return cls(code)
        except ValueError:
            raise BadDataTypeCode(code) from None

    @property
    def description(self) -> str:
        return DATA_TYPE_NAMES[self]


class TruncEscSeq(Enum):
    """Truncated escape sequence, i.e. the lexical level of the field."""
    LE0 = "   "
    LE1 = "-A "
    LE2 = "%/A"

    @classmethod
    def from_code(cls, code: str) -> TruncEscSeq:
        try:
            return cls(code)
        except ValueError:
            raise BadTruncEscSeq(code) from None

    @property
    def level(self) -> int:
        return _LEXICAL_LEVELS[self]


DATA_STRUCTURE_NAMES: dict[DataStructureCode, str] = {
    DataStructureCode.SDI: "single data item",
    DataStructureCode.LS: "linear structure",
    DataStructureCode.MDS: "multi-dimensional structure",
}

DATA_TYPE_NAMES: dict[DataTypeCode, str] = {
    DataTypeCode.CS: "character string",
    DataTypeCode.IP: "implicit point",
    DataTypeCode.EP: "explicit point",
    DataTypeCode.BF: "binary form",
    DataTypeCode.MDT: "mixed data types",
}

_LEXICAL_LEVELS: dict[TruncEscSeq, int] = {
    TruncEscSeq.LE0: 0,
    TruncEscSeq.LE1: 1,
    TruncEscSeq.LE2: 2,
}
