"""
pytest configuration and fixtures for the catalog reader tests.

Provides byte builders for synthetic ISO 8211 records and a small
three-record catalog, plus Hypothesis profiles.
"""

import os

import pytest
from hypothesis import settings

from s57catalog.iso8211.constants import RECORD_SEPARATOR, UNIT_SEPARATOR

UT = bytes([UNIT_SEPARATOR])
FT = bytes([RECORD_SEPARATOR])

settings.register_profile("default", max_examples=100, deadline=None)
settings.register_profile("ci", max_examples=500, deadline=None)
settings.register_profile("dev", max_examples=10, deadline=None)
settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "default"))


CATD_DESCRIPTOR = b"RCNM!RCID!FILE!LFIL!VOLM!IMPL!SLAT!WLON!NLAT!ELON!CRCS!COMT"
CATD_FORMATS = b"(A(2),I(10),3A,A(3),4R,2A)"


def build_record(fields, leader_id="D", interchange_level=" ", field_control_length="  ",
                 length_width=3, position_width=4, tag_width=4):
    """Assemble one physical ISO 8211 record from (tag, payload) pairs."""
    directory = b""
    area = b""
    for tag, payload in fields:
        directory += tag.encode("ascii")
        directory += f"{len(payload):0{length_width}d}".encode("ascii")
        directory += f"{len(area):0{position_width}d}".encode("ascii")
        area += payload
    directory += FT
    base = 24 + len(directory)
    total = base + len(area)
    leader = (
        f"{total:05d}{interchange_level}{leader_id}E1 {field_control_length}"
        f"{base:05d} ! {length_width}{position_width}0{tag_width}"
    ).encode("ascii")
    assert len(leader) == 24
    return leader + directory + area


def ddf(controls, name, descriptor, formats):
    return controls + name + UT + descriptor + UT + formats + FT


def build_ddr(catd_formats=CATD_FORMATS, catd_descriptor=CATD_DESCRIPTOR, extra=()):
    fields = [
        ("0000", b"0000;&   " + UT + b"0001CATD" + FT),
        ("0001", ddf(b"0100;&   ", b"DDF RECORD IDENTIFIER", b"", b"(I(5))")),
        ("CATD", ddf(b"1600;&   ", b"Catalog Directory field", catd_descriptor, catd_formats)),
        *extra,
    ]
    return build_record(fields, leader_id="L", interchange_level="3", field_control_length="09")


def catd_payload(rcid, file, lfil=b"", volm=b"V01X01", impl=b"BIN",
                 slat=b"", wlon=b"", nlat=b"", elon=b"", crcs=b"", comt=b""):
    return (
        b"CD" + f"{rcid:010d}".encode("ascii")
        + file + UT + lfil + UT + volm + UT + impl
        + slat + UT + wlon + UT + nlat + UT + elon + UT
        + crcs + UT + comt + UT + FT
    )


def build_dr(rcid, catd):
    return build_record([
        ("0001", f"{rcid:05d}".encode("ascii") + FT),
        ("CATD", catd),
    ])


@pytest.fixture
def catalog_bytes():
    """A DDR and three catalog directory records."""
    return b"".join([
        build_ddr(),
        build_dr(1, catd_payload(1, b"CATALOG.031", impl=b"ASC")),
        build_dr(2, catd_payload(2, b"US5GA20M/US5GA20M.000", lfil=b"US5GA20M.000",
                                 slat=b"31.9", wlon=b"-81.2", nlat=b"32.1", elon=b"-80.8",
                                 crcs=b"A1B2C3D4")),
        build_dr(3, catd_payload(3, b"README.TXT", impl=b"TXT", comt=b"Notes")),
    ])


@pytest.fixture
def catalog_file(tmp_path, catalog_bytes):
    root = tmp_path / "ENC_ROOT"
    root.mkdir()
    path = root / "CATALOG.031"
    path.write_bytes(catalog_bytes)
    return path
