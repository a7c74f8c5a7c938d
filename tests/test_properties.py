"""
Property-based tests for the structural decoders.

Run with:
    pytest tests/test_properties.py -v --hypothesis-show-statistics
"""

import io

import pytest
from hypothesis import assume, given
from hypothesis import strategies as st

from conftest import build_ddr, build_dr, catd_payload, ddf

from s57catalog.iso8211.constants import DRID
from s57catalog.iso8211.decoders import (
    parse_array_descriptors,
    parse_ddf,
    parse_directory,
    parse_format_controls,
)
from s57catalog.iso8211.errors import BadDirectoryData, EmptyFormatControls, InvalidDDF
from s57catalog.iso8211.reader import CatalogReader
from s57catalog.iso8211.records import DirectoryEntry, Leader


# =============================================================================
# Strategies
# =============================================================================

tags = st.text(alphabet="ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789", min_size=4, max_size=4)
widths = st.integers(min_value=1, max_value=6)

spec_elements = st.tuples(
    st.integers(min_value=1, max_value=4),
    st.sampled_from("AIR"),
    st.one_of(st.none(), st.integers(min_value=1, max_value=20)),
)


def make_leader(tag_width, length_width, position_width):
    return Leader(
        record_length=0, interchange_level="3", leader_id="L", extension_indicator="E",
        version="1", application_indicator=" ", field_control_length="09", base_address=0,
        char_set_indicator=" ! ", length_width=length_width, position_width=position_width,
        reserved="0", tag_width=tag_width,
    )


def render_format_controls(elements):
    parts = []
    for count, letter, width in elements:
        prefix = str(count) if count > 1 else ""
        suffix = f"({width})" if width is not None else ""
        parts.append(f"{prefix}{letter}{suffix}")
    return ("(" + ",".join(parts) + ")").encode("ascii")


# =============================================================================
# Directory
# =============================================================================

@given(
    length_width=widths,
    position_width=widths,
    entries=st.lists(
        st.tuples(tags, st.integers(min_value=0), st.integers(min_value=0)),
        max_size=20,
    ),
)
def test_directory_whole_chunks_yield_entries_in_order(length_width, position_width, entries):
    leader = make_leader(4, length_width, position_width)
    entries = [
        (tag, length % 10 ** length_width, offset % 10 ** position_width)
        for tag, length, offset in entries
    ]
    raw = b"".join(
        f"{tag}{length:0{length_width}d}{offset:0{position_width}d}".encode("ascii")
        for tag, length, offset in entries
    )
    parsed = parse_directory(raw, leader)
    assert parsed == [DirectoryEntry(tag, length, offset) for tag, length, offset in entries]


@given(
    tag_width=widths,
    length_width=widths,
    position_width=widths,
    data=st.binary(min_size=1, max_size=200),
)
def test_directory_partial_chunk_always_fails(tag_width, length_width, position_width, data):
    width = tag_width + length_width + position_width
    assume(len(data) % width != 0)
    with pytest.raises(BadDirectoryData):
        parse_directory(data, make_leader(tag_width, length_width, position_width))


@given(raw=st.binary(min_size=10, max_size=60))
def test_directory_decoding_is_deterministic(raw):
    leader = make_leader(4, 3, 3)
    try:
        first = parse_directory(raw, leader)
    except Exception as err:
        with pytest.raises(type(err)):
            parse_directory(raw, leader)
    else:
        assert parse_directory(raw, leader) == first


# =============================================================================
# Schema consistency
# =============================================================================

@given(
    elements=st.lists(spec_elements, min_size=1, max_size=8),
    extra=st.integers(min_value=-3, max_value=3),
)
def test_descriptor_count_must_match_expanded_formats(elements, extra):
    expanded = sum(count for count, _, _ in elements)
    n_tags = expanded + extra
    assume(n_tags >= 1)
    descriptor = "!".join(f"T{i:03d}" for i in range(n_tags)).encode("ascii")
    raw = ddf(b"1600;&   ", b"Field", descriptor, render_format_controls(elements))[:-1]

    if extra == 0:
        entry = parse_ddf(raw)
        assert [tag for tag, _ in entry.subfields] == descriptor.decode().split("!")
        assert [spec for _, spec in entry.subfields] == parse_format_controls(
            render_format_controls(elements)
        )
    else:
        with pytest.raises(InvalidDDF):
            parse_ddf(raw)


@given(elements=st.lists(spec_elements, min_size=1, max_size=8))
def test_format_controls_expand_repeat_counts(elements):
    specs = parse_format_controls(render_format_controls(elements))
    assert len(specs) == sum(count for count, _, _ in elements)


@given(raw=st.binary(max_size=1))
def test_short_format_controls_always_fail(raw):
    with pytest.raises(EmptyFormatControls):
        parse_format_controls(raw)


@given(descriptor=st.lists(tags, min_size=1, max_size=12))
def test_array_descriptor_never_yields_empty_key(descriptor):
    raw = "!".join(descriptor).encode("ascii")
    assert parse_array_descriptors(raw) == descriptor
    assert parse_array_descriptors(b"") == [DRID]


# =============================================================================
# End to end
# =============================================================================

@given(
    rows=st.lists(
        st.tuples(
            st.integers(min_value=1, max_value=99999),
            st.text(alphabet="ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789._/", max_size=30),
        ),
        max_size=10,
    )
)
def test_stream_yields_every_record(rows):
    raw = build_ddr() + b"".join(
        build_dr(rcid, catd_payload(rcid, name.encode("ascii"))) for rcid, name in rows
    )
    records = list(CatalogReader(io.BytesIO(raw)))
    assert [r.id for r in records] == [rcid for rcid, _ in rows]
    assert [r["CATD"]["FILE"] for r in records] == [name for _, name in rows]
