"""Dataclasses for decoded ISO 8211 structures and S-57 catalog records."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from s57catalog.iso8211.constants import DEFAULT_NAMES, ReservedNames
from s57catalog.iso8211.enums import DataStructureCode, DataTypeCode, TruncEscSeq
from s57catalog.iso8211.formats import FormatSpec, Value


@dataclass(frozen=True, slots=True)
class Leader:
    """The fixed 24-byte record header."""
    record_length: int
    interchange_level: str
    leader_id: str
    extension_indicator: str   # In-line code extension indicator
    version: str
    application_indicator: str
    field_control_length: str
    base_address: int          # Start of the field area
    char_set_indicator: str    # Extended character set indicator
    # Entry map
    length_width: int          # Size of field length field
    position_width: int        # Size of field position field
    reserved: str
    tag_width: int             # Size of field tag field

    @property
    def entry_width(self) -> int:
        return self.tag_width + self.length_width + self.position_width


@dataclass(frozen=True, slots=True)
class DirectoryEntry:
    """Location of one field in the field area."""
    tag: str
    length: int
    offset: int   # Relative to the start of the field area

    def __str__(self) -> str:
        return self.tag


@dataclass(frozen=True, slots=True)
class FieldControls:
    structure: DataStructureCode
    data_type: DataTypeCode
    auxiliary: str
    printable: str
    escape: TruncEscSeq


@dataclass(frozen=True, slots=True)
class DDFEntry:
    """Decoding recipe for one field: controls, name, and ordered subfields."""
    controls: FieldControls
    name: str
    subfields: tuple[tuple[str, FormatSpec], ...]

    @property
    def subfield_tags(self) -> list[str]:
        return [tag for tag, _ in self.subfields]


@dataclass(frozen=True, slots=True)
class FileControlField:
    """The DDR's file control field (tag 0000)."""
    controls: FieldControls
    title: str
    tag_pairs: tuple[tuple[str, str], ...]   # (parent, child)


@dataclass(frozen=True)
class DDR:
    """The Data Descriptive Record: the schema for every following record."""
    leader: Leader
    directory: tuple[DirectoryEntry, ...]
    fields: Mapping[str, DDFEntry]
    file_control: Optional[FileControlField] = None

    def __post_init__(self):
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def get(self, tag: str) -> Optional[DDFEntry]:
        return self.fields.get(tag)

    @property
    def tags(self) -> list[str]:
        """Schema tags in directory order."""
        return [d.tag for d in self.directory if d.tag in self.fields]


Field = dict[str, Value]


@dataclass(slots=True)
class Record:
    """A decoded Data Record: field tag -> {subfield tag -> value}."""
    fields: dict[str, Field] = field(default_factory=dict)
    names: ReservedNames = field(default=DEFAULT_NAMES, repr=False)

    @property
    def id(self) -> Optional[int]:
        """The record identifier from the top-level field, if it is an integer."""
        top = self.fields.get(self.names.top_level_tag)
        if top is None:
            return None
        value = top.get(self.names.record_id_subfield)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return None

    @property
    def tags(self) -> list[str]:
        return list(self.fields)

    def get(self, tag: str) -> Optional[Field]:
        return self.fields.get(tag)

    def __getitem__(self, tag: str) -> Field:
        return self.fields[tag]

    def __contains__(self, tag: object) -> bool:
        return tag in self.fields

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)
