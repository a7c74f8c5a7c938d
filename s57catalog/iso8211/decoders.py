"""Structural decoders for ISO 8211 leaders, directories, and the DDR.

The DDR field payload grammar is::

    <9-byte field controls><name> UT <array descriptor> UT <format controls>

with the array descriptor ``tag1!tag2!...`` and the format controls
``(spec1,spec2,...)``, each spec being ``[count]Letter[(width)]``.
"""
from __future__ import annotations

import logging

from s57catalog.iso8211.constants import (
    ARRAY_DESCRIPTOR_DELIMITER,
    DEFAULT_NAMES,
    FIELD_CONTROLS_SIZE,
    FORMAT_CONTROL_DELIMITER,
    LEADER_BODY_SIZE,
    LEADER_ID_DDR,
    SEPARATORS,
    UNIT_SEPARATOR,
    ReservedNames,
)
from s57catalog.iso8211.enums import DataStructureCode, DataTypeCode, TruncEscSeq
from s57catalog.iso8211.errors import (
    BadDirectoryData,
    BadFieldControl,
    BadFileControlField,
    BadFormatControl,
    CouldNotParseName,
    EmptyFormatControls,
    FieldOutOfBounds,
    FormatControlError,
    IntegerParseError,
    InvalidDDF,
    InvalidDDR,
    InvalidHeader,
    InvalidLeader,
    ISO8211Error,
    MissingFieldTerminator,
    TextEncodingError,
    format_error_chain,
)
from s57catalog.iso8211.formats import FormatSpec, decode_text, parse_format_spec
from s57catalog.iso8211.records import (
    DDFEntry,
    DDR,
    DirectoryEntry,
    FieldControls,
    FileControlField,
    Leader,
)

log = logging.getLogger(__name__)


def parse_to_int(raw: bytes) -> int:
    """Parse ASCII digits as an unsigned integer."""
    text = decode_text(raw)
    if not (text.isascii() and text.isdigit()):
        raise IntegerParseError(text)
    return int(text)


# -- Leader --

def parse_leader(data: bytes, record_length: int) -> Leader:
    """Decode the leader that follows the 5-byte length prefix.

    ``data`` holds at least the 19 leader bytes after the prefix; the total
    record length was already read from the prefix.
    """
    if len(data) < LEADER_BODY_SIZE:
        raise InvalidLeader(f"leader needs {LEADER_BODY_SIZE} bytes, got {len(data)}")
    try:
        base_address = parse_to_int(data[7:12])
        length_width = parse_to_int(data[15:16])
        position_width = parse_to_int(data[16:17])
        tag_width = parse_to_int(data[18:19])
    except (IntegerParseError, TextEncodingError) as err:
        raise InvalidLeader() from err

    return Leader(
        record_length=record_length,
        interchange_level=chr(data[0]),
        leader_id=chr(data[1]),
        extension_indicator=chr(data[2]),
        version=chr(data[3]),
        application_indicator=chr(data[4]),
        field_control_length=data[5:7].decode("latin-1"),
        base_address=base_address,
        char_set_indicator=data[12:15].decode("latin-1"),
        length_width=length_width,
        position_width=position_width,
        reserved=chr(data[17]),
        tag_width=tag_width,
    )


# -- Directory --

def parse_directory(data: bytes, leader: Leader) -> list[DirectoryEntry]:
    """Split the directory area into fixed-width (tag, length, position) entries."""
    width = leader.entry_width
    if width == 0:
        raise BadDirectoryData("leader entry map has zero width")

    tag_end = leader.tag_width
    len_end = tag_end + leader.length_width
    entries = []
    for pos in range(0, len(data), width):
        chunk = data[pos:pos + width]
        if len(chunk) != width:
            raise BadDirectoryData(
                f"directory entry at byte {pos} is {len(chunk)} bytes, expected {width}"
            )
        entries.append(DirectoryEntry(
            tag=decode_text(chunk[:tag_end]),
            length=parse_to_int(chunk[tag_end:len_end]),
            offset=parse_to_int(chunk[len_end:]),
        ))
    return entries


def field_window(field_area: bytes, entry: DirectoryEntry) -> bytes:
    """Slice a field out of the field area, terminator included."""
    end = entry.offset + entry.length
    if entry.length == 0 or end > len(field_area):
        raise FieldOutOfBounds(entry.tag, entry.offset, entry.length, len(field_area))
    window = field_area[entry.offset:end]
    if window[-1] not in SEPARATORS:
        raise MissingFieldTerminator(entry.tag)
    return window


# -- Field controls --

def parse_field_controls(data: bytes) -> FieldControls:
    if len(data) != FIELD_CONTROLS_SIZE:
        raise BadFieldControl(
            f"field controls need {FIELD_CONTROLS_SIZE} bytes, got {len(data)}"
        )
    try:
        structure = DataStructureCode.from_code(decode_text(data[0:1]))
        data_type = DataTypeCode.from_code(decode_text(data[1:2]))
        escape = TruncEscSeq.from_code(decode_text(data[6:9]))
    except ISO8211Error as err:
        raise BadFieldControl() from err

    return FieldControls(
        structure=structure,
        data_type=data_type,
        auxiliary=decode_text(data[2:4]),
        printable=decode_text(data[4:6]),
        escape=escape,
    )


# -- Array descriptors / format controls --

def parse_array_descriptors(data: bytes, names: ReservedNames = DEFAULT_NAMES) -> list[str]:
    """Split the array descriptor into subfield tags.

    The record identifier field has an unnamed descriptor; it gets the
    reserved record-id name so it can be used as a key.
    """
    if not data:
        return [names.record_id_subfield]
    return decode_text(data).split(ARRAY_DESCRIPTOR_DELIMITER)


def parse_format_controls(data: bytes) -> list[FormatSpec]:
    """Decode ``(A(2),2I(10),2R)`` into a flat, repeat-expanded spec list."""
    if len(data) < 2:
        raise EmptyFormatControls()
    text = decode_text(data)
    if not (text.startswith("(") and text.endswith(")")):
        raise BadFormatControl(text)

    specs: list[FormatSpec] = []
    for element in text[1:-1].split(FORMAT_CONTROL_DELIMITER):
        count, spec = parse_format_spec(element)
        specs.extend([spec] * count)
    return specs


# -- Data descriptive fields --

def parse_ddf(data: bytes, names: ReservedNames = DEFAULT_NAMES) -> DDFEntry:
    """Decode one data descriptive field (without its trailing terminator)."""
    parts = data.split(bytes([UNIT_SEPARATOR]))
    if len(parts[0]) < FIELD_CONTROLS_SIZE:
        raise InvalidHeader()

    controls_bytes = parts[0][:FIELD_CONTROLS_SIZE]
    try:
        name = decode_text(parts[0][FIELD_CONTROLS_SIZE:])
    except TextEncodingError as err:
        raise CouldNotParseName() from err

    if len(parts) < 3:
        raise InvalidDDF(name) from InvalidHeader(
            f"expected 3 unit-separated segments, got {len(parts)}"
        )

    try:
        controls = parse_field_controls(controls_bytes)
        tags = parse_array_descriptors(parts[1], names)
        specs = parse_format_controls(parts[2])
    except ISO8211Error as err:
        raise InvalidDDF(name) from err

    if len(tags) != len(specs):
        raise InvalidDDF(name) from FormatControlError(
            f"{len(tags)} subfield tags but {len(specs)} format controls"
        )
    return DDFEntry(controls=controls, name=name, subfields=tuple(zip(tags, specs)))


def parse_file_control_field(data: bytes, tag_width: int) -> FileControlField:
    """Decode the file control field: controls, title, and field tag pairs."""
    parts = data.split(bytes([UNIT_SEPARATOR]))
    head = parts[0]
    if len(head) < FIELD_CONTROLS_SIZE:
        raise BadFileControlField("file control field is shorter than its controls")

    try:
        controls = parse_field_controls(head[:FIELD_CONTROLS_SIZE])
        title = decode_text(head[FIELD_CONTROLS_SIZE:])
        pair_text = decode_text(parts[1]) if len(parts) > 1 else ""
    except ISO8211Error as err:
        raise BadFileControlField() from err

    pair_width = 2 * tag_width
    if pair_width == 0 or len(pair_text) % pair_width:
        raise BadFileControlField(
            f"tag pair list of {len(pair_text)} chars is not a multiple of {pair_width}"
        )
    pairs = tuple(
        (pair_text[i:i + tag_width], pair_text[i + tag_width:i + pair_width])
        for i in range(0, len(pair_text), pair_width)
    )
    return FileControlField(controls=controls, title=title, tag_pairs=pairs)


def parse_ddfs(
    field_area: bytes,
    directory: list[DirectoryEntry],
    names: ReservedNames = DEFAULT_NAMES,
) -> dict[str, DDFEntry]:
    """Decode every data descriptive field except the leading file control field."""
    ddfs = {}
    for entry in directory[1:]:
        window = field_window(field_area, entry)
        ddfs[entry.tag] = parse_ddf(window[:-1], names)
    return ddfs


def parse_ddr(
    leader: Leader,
    directory: list[DirectoryEntry],
    field_area: bytes,
    names: ReservedNames = DEFAULT_NAMES,
) -> DDR:
    """Build the schema from an already framed first record."""
    if leader.leader_id != LEADER_ID_DDR:
        log.warning("DDR leader identifier is %r, expected %r", leader.leader_id, LEADER_ID_DDR)

    file_control = None
    try:
        if directory and directory[0].tag == names.file_control_tag:
            window = field_window(field_area, directory[0])
            try:
                file_control = parse_file_control_field(window[:-1], leader.tag_width)
            except BadFileControlField as err:
                log.warning("File control field not decoded: %s", format_error_chain(err))
        fields = parse_ddfs(field_area, directory, names)
    except ISO8211Error as err:
        raise InvalidDDR() from err

    return DDR(
        leader=leader,
        directory=tuple(directory),
        fields=fields,
        file_control=file_control,
    )
