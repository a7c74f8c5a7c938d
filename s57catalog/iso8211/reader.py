"""Record-by-record reader for S-57 catalog (ISO 8211) files.

The first physical record is decoded as the DDR and kept as the schema.
Every following record is decoded lazily against it on iteration.
"""
from __future__ import annotations

import errno
import io
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator

from s57catalog.iso8211.constants import (
    DEFAULT_NAMES,
    LEADER_BODY_SIZE,
    LEADER_SIZE,
    LENGTH_PREFIX_SIZE,
    RECORD_SEPARATOR,
    SEPARATORS,
    ReservedNames,
)
from s57catalog.iso8211.decoders import (
    field_window,
    parse_ddr,
    parse_directory,
    parse_leader,
    parse_to_int,
)
from s57catalog.iso8211.errors import (
    BadDirectoryData,
    CouldNotParseCatalog,
    EndOfStream,
    InvalidDR,
    InvalidLeader,
    ISO8211Error,
    MissingFieldTerminator,
    StreamIOError,
    UnexpectedEndOfStream,
)
from s57catalog.iso8211.formats import decode_value
from s57catalog.iso8211.records import DDFEntry, DDR, DirectoryEntry, Field, Leader, Record

log = logging.getLogger(__name__)


def _error_kind(err: OSError) -> str:
    """Symbolic errno name (``ENOENT``), or the exception type name."""
    if err.errno:
        return errno.errorcode.get(err.errno, type(err).__name__)
    return type(err).__name__


def _read_bytes(source: BinaryIO, size: int) -> bytes:
    """Read up to ``size`` bytes, stopping early only at end of stream."""
    chunks = []
    remaining = size
    try:
        while remaining > 0:
            chunk = source.read(remaining)
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
    except OSError as err:
        kind = _error_kind(err)
        raise StreamIOError(kind, f"I/O error ({kind}): {err}") from err
    return b"".join(chunks)


def read_physical_record(source: BinaryIO) -> tuple[Leader, list[DirectoryEntry], bytes]:
    """Frame one record and return its leader, directory, and field area.

    Raises ``EndOfStream`` when the source is exhausted before the record
    starts.
    """
    prefix = _read_bytes(source, LENGTH_PREFIX_SIZE)
    if not prefix:
        raise EndOfStream()
    if len(prefix) != LENGTH_PREFIX_SIZE:
        raise UnexpectedEndOfStream(LENGTH_PREFIX_SIZE, len(prefix))

    length = parse_to_int(prefix)
    if length < LEADER_SIZE:
        raise InvalidLeader(f"record length {length} is shorter than the leader")

    body = _read_bytes(source, length - LENGTH_PREFIX_SIZE)
    if len(body) != length - LENGTH_PREFIX_SIZE:
        raise UnexpectedEndOfStream(length - LENGTH_PREFIX_SIZE, len(body))

    leader = parse_leader(body[:LEADER_BODY_SIZE], length)
    field_area_idx = body.find(bytes([RECORD_SEPARATOR]), LEADER_BODY_SIZE)
    if field_area_idx == -1:
        raise BadDirectoryData("no field terminator after the directory")

    directory = parse_directory(body[LEADER_BODY_SIZE:field_area_idx], leader)
    return leader, directory, body[field_area_idx + 1:]


def decode_field(tag: str, ddf: DDFEntry, window: bytes) -> Field:
    """Decode the subfields of one field window in schema order.

    The last byte of the window is the field terminator and is never decoded.
    """
    if not window or window[-1] not in SEPARATORS:
        raise MissingFieldTerminator(tag)
    body = window[:-1]
    cur = io.BytesIO(body)
    field = {name: decode_value(spec, cur) for name, spec in ddf.subfields}

    if cur.tell() < len(body):
        # Subfields ended early; the next byte must still be a terminator
        terminator = cur.read(1)
        if terminator[0] not in SEPARATORS:
            raise MissingFieldTerminator(tag)
        leftover = len(body) - cur.tell()
        if leftover:
            log.warning("Field %s: %d bytes after the terminator were not decoded", tag, leftover)
    return field


class CatalogReader:
    """Forward-only iterator of Records from a catalog byte stream.

    The reader owns ``source`` for its whole life. Iteration cannot be
    restarted; after the end of the stream or any error it stays exhausted.
    """

    def __init__(self, source: BinaryIO, names: ReservedNames = DEFAULT_NAMES):
        self._source = source
        self.names = names
        self._exhausted = False
        self._count = 0
        try:
            self.ddr: DDR = parse_ddr(*read_physical_record(source), names=names)
        except ISO8211Error as err:
            raise CouldNotParseCatalog() from err
        log.debug("Catalog schema has %d fields: %s", len(self.ddr.fields), ", ".join(self.ddr.tags))

    def __iter__(self) -> CatalogReader:
        return self

    def __next__(self) -> Record:
        if self._exhausted:
            raise StopIteration
        try:
            record = self._parse_dr()
        except EndOfStream:
            self._exhausted = True
            log.debug("End of catalog after %d records", self._count)
            raise StopIteration from None
        except ISO8211Error:
            self._exhausted = True
            raise
        self._count += 1
        return record

    def __copy__(self):
        raise TypeError(f"{type(self).__name__} cannot be copied; its source position is not restorable")

    def __deepcopy__(self, memo):
        raise TypeError(f"{type(self).__name__} cannot be copied; its source position is not restorable")

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def iter_records(self) -> Iterator[Record]:
        """Iterate over the remaining data records."""
        return self

    def parse_all(self) -> list[Record]:
        """Decode all remaining records into a list."""
        return list(self)

    def _parse_dr(self) -> Record:
        _, directory, field_area = read_physical_record(self._source)
        record = Record(names=self.names)
        for entry in directory:
            ddf = self.ddr.get(entry.tag)
            if ddf is None:
                raise InvalidDR(entry.tag, "tag is not described by the DDR")
            try:
                window = field_window(field_area, entry)
                record.fields[entry.tag] = decode_field(entry.tag, ddf, window)
            except ISO8211Error as err:
                raise InvalidDR(entry.tag) from err
        log.debug("Decoded record %s with %d fields", record.id, len(record))
        return record


def _open_binary(path: Path) -> BinaryIO:
    try:
        return open(path, "rb")
    except OSError as err:
        kind = _error_kind(err)
        raise StreamIOError(kind, f"I/O error ({kind}): {err}") from err


@contextmanager
def open_catalog(path: Path, names: ReservedNames = DEFAULT_NAMES) -> Iterator[CatalogReader]:
    """Open a catalog file and yield a reader over it; the file closes on exit."""
    try:
        f = _open_binary(path)
    except StreamIOError as err:
        raise CouldNotParseCatalog(f"could not open {path}") from err
    with f:
        yield CatalogReader(f, names)
