import io

import pytest

from pcdstruct.enum import DataKind, ValueKind
from pcdstruct.exceptions import (
    CountError,
    HeaderError,
    PointCountError,
    UnsupportedFormatError,
    UnsupportedVersionError,
)
from pcdstruct.header import HeaderParser, Metadata, ViewPoint, format_header, parse_header
from pcdstruct.schema import Schema
from pcdstruct.streams import Stream


def parse(data):
    return parse_header(Stream(data))


def test_parse(build_header, xyz_schema):
    header = build_header()
    metadata, offset = parse(header + b'1 2 3\n')

    assert offset == len(header)
    assert metadata.version == '0.7'
    assert metadata.schema == xyz_schema
    assert metadata.width == 3
    assert metadata.height == 1
    assert metadata.point_count == 3
    assert metadata.viewpoint == ViewPoint()
    assert metadata.data_kind == DataKind.ASCII
    assert not metadata.is_organized


def test_parse_leaves_stream_at_data(build_header):
    stream = Stream(build_header(data=b'binary') + b'\x01\x02')
    HeaderParser(stream).parse()

    assert stream.read() == b'\x01\x02'


def test_parse_comments_and_short_version(build_header):
    header = build_header(VERSION=b'# a comment\nVERSION .7', WIDTH=b'WIDTH 3 # trailing comment')
    metadata, _ = parse(header)

    assert metadata.version == '0.7'
    assert metadata.width == 3


def test_parse_schema_kinds(build_header):
    header = build_header(
        FIELDS=b'FIELDS x rgb _',
        SIZE=b'SIZE 8 1 2',
        TYPE=b'TYPE F U I',
        COUNT=b'COUNT 1 3 2',
    )
    metadata, _ = parse(header)

    assert metadata.schema == Schema.from_tuples([
        ('x', ValueKind.F64, 1),
        ('rgb', ValueKind.U8, 3),
        ('_', ValueKind.I16, 2),
    ])


def test_unsupported_version(build_header):
    with pytest.raises(UnsupportedVersionError) as excinfo:
        parse(build_header(VERSION=b'VERSION 0.6'))

    assert isinstance(excinfo.value, HeaderError)
    assert excinfo.value.found == '0.6'
    assert excinfo.value.line == 2


@pytest.mark.parametrize('data', [b'binary_compressed', b'zip'])
def test_unsupported_format(build_header, data):
    """The DATA keyword is checked before touching the data."""
    with pytest.raises(UnsupportedFormatError):
        parse(build_header(data=data) + b'\xff\xff\xff')


def test_points_mismatch(build_header):
    with pytest.raises(PointCountError) as excinfo:
        parse(build_header(POINTS=b'POINTS 4'))

    assert isinstance(excinfo.value, HeaderError)
    assert isinstance(excinfo.value, CountError)
    assert excinfo.value.expected == 3
    assert excinfo.value.actual == 4


@pytest.mark.parametrize('lines', [
    {'SIZE': b'SIZE 4 4'},                      # fewer values than FIELDS
    {'TYPE': b'TYPE F F X'},                    # invalid type
    {'SIZE': b'SIZE 4 4 2'},                    # F2 doesn't exist
    {'COUNT': b'COUNT 1 0 1'},                  # empty field
    {'WIDTH': b'WIDTH -3'},
    {'WIDTH': b'WIDTH 3 1'},
    {'VIEWPOINT': b'VIEWPOINT 0 0 0 1 0 0'},
    {'HEIGHT': b'WIDTH 1'},                     # out of order
    {'HEIGHT': b''},                            # blank line
])
def test_malformed(build_header, lines):
    with pytest.raises(HeaderError):
        parse(build_header(**lines))


def test_truncated(build_header):
    header = build_header()

    with pytest.raises(HeaderError) as excinfo:
        parse(header[:header.index(b'POINTS')])

    assert excinfo.value.expected == 'POINTS'


def test_metadata():
    schema = Schema.from_tuples([('x', ValueKind.F32, 1)])
    metadata = Metadata(width=4, height=2, data_kind=DataKind.BINARY, schema=schema)

    assert metadata.point_count == 8
    assert metadata.is_organized
    assert metadata == Metadata(4, 2, DataKind.BINARY, schema, viewpoint=ViewPoint())

    with pytest.raises(AttributeError):
        metadata.width = 3

    with pytest.raises(PointCountError):
        Metadata(width=4, height=2, data_kind=DataKind.BINARY, schema=schema, point_count=7)


def test_format_header(xyz_schema):
    metadata = Metadata(
        width=3, height=1, data_kind=DataKind.ASCII, schema=xyz_schema,
        viewpoint=ViewPoint(1.0, 2.5, 0.0, 1.0, 0.0, 0.0, 0.0))

    assert format_header(metadata) == (
        b'# .PCD v0.7 - Point Cloud Data file format\n'
        b'VERSION 0.7\n'
        b'FIELDS x y z\n'
        b'SIZE 4 4 4\n'
        b'TYPE F F F\n'
        b'COUNT 1 1 1\n'
        b'WIDTH 3\n'
        b'HEIGHT 1\n'
        b'VIEWPOINT 1.0 2.5 0.0 1.0 0.0 0.0 0.0\n'
        b'POINTS 3\n'
        b'DATA ascii\n'
    )

    assert parse(format_header(metadata))[0] == metadata


def test_header_from_fileobj(build_header):
    metadata, _ = parse_header(Stream(io.BytesIO(build_header())))

    assert metadata.point_count == 3
