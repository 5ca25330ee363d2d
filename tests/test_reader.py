import io
import logging
import struct

import pytest

from pcdstruct.enum import DataKind, ReaderPhase, ValueKind
from pcdstruct.exceptions import DataError, HeaderError, PcdIOError, UnsupportedFormatError
from pcdstruct.reader import Reader
from pcdstruct.values import Field, Record


def xyz(x, y, z):
    return Record([Field(ValueKind.F32, [_]) for _ in (x, y, z)])


def test_read_ascii(ascii_xyz):
    reader = Reader(ascii_xyz)

    assert reader.meta.data_kind == DataKind.ASCII
    assert len(reader) == 3
    assert reader.read_all() == [xyz(1, 2, 3), xyz(4, 5, 6), xyz(7, 8, 9)]
    assert [_.kind for _ in xyz(1, 2, 3)] == [ValueKind.F32] * 3


def test_read_binary(build_header):
    data = build_header(data=b'binary') + b''.join(
        struct.pack('=3f', *_) for _ in ((1, 2, 3), (4, 5, 6), (7, 8, 9)))

    assert [_.to_xyz() for _ in Reader(data)] == [(1.0, 2.0, 3.0), (4.0, 5.0, 6.0), (7.0, 8.0, 9.0)]


def test_phases(ascii_xyz):
    reader = Reader(ascii_xyz)

    assert reader.phase == ReaderPhase.OPENED
    assert reader.point_index == 0

    next(reader)

    assert reader.phase == ReaderPhase.STREAMING
    assert reader.point_index == 1

    next(reader)
    next(reader)

    assert reader.phase == ReaderPhase.EXHAUSTED

    with pytest.raises(StopIteration):
        next(reader)

    assert reader.read() is None


def test_empty_cloud(build_header):
    reader = Reader(build_header(WIDTH=b'WIDTH 0', POINTS=b'POINTS 0'))

    assert reader.meta.point_count == 0
    assert reader.read_all() == []
    assert reader.phase == ReaderPhase.EXHAUSTED


def test_failure_is_terminal(build_header):
    reader = Reader(build_header() + b'1.0 2.0 3.0\n4.0 five 6.0\n7.0 8.0 9.0\n')

    assert next(reader) == xyz(1, 2, 3)

    with pytest.raises(DataError) as excinfo:
        next(reader)

    assert excinfo.value.point_index == 1
    assert excinfo.value.field_name == 'y'
    assert reader.phase == ReaderPhase.FAILED

    with pytest.raises(StopIteration):
        next(reader)


def test_truncated_binary(build_header):
    data = build_header(data=b'binary') + struct.pack('=3f', 1, 2, 3) + struct.pack('=2f', 4, 5)
    reader = Reader(data)

    assert reader.read() == xyz(1, 2, 3)

    with pytest.raises(DataError) as excinfo:
        reader.read()

    assert excinfo.value.point_index == 1
    assert excinfo.value.field_name == 'z'


def test_missing_points(build_header):
    reader = Reader(build_header() + b'1 2 3\n')

    next(reader)

    with pytest.raises(DataError):
        next(reader)


def test_unsupported_format_never_decodes(build_header):
    with pytest.raises(UnsupportedFormatError):
        Reader(build_header(data=b'lzf') + b'1 2 3\n')


def test_trailing_data(ascii_xyz, caplog):
    reader = Reader(ascii_xyz + b'10 11 12\n')

    with caplog.at_level(logging.WARNING, logger='pcdstruct.reader'):
        assert len(reader.read_all()) == 3

    assert 'more data' in caplog.text


def test_trailing_data_of_caller_stream(ascii_xyz, caplog):
    """A stream passed by the caller is not read past the last point."""
    f = io.BytesIO(ascii_xyz + b'10 11 12\n')

    with caplog.at_level(logging.WARNING, logger='pcdstruct.reader'):
        assert len(Reader(f).read_all()) == 3

    assert 'more data' not in caplog.text
    assert f.read() == b'10 11 12\n'


def test_open_path(tmp_path, ascii_xyz):
    path = tmp_path / 'cloud.pcd'
    path.write_bytes(ascii_xyz)

    with Reader.open(path) as reader:
        records = list(reader)

    assert len(records) == 3

    with Reader.open(str(path)) as reader:
        assert reader.read() == xyz(1, 2, 3)


def test_open_fileobj(tmp_path, ascii_xyz):
    path = tmp_path / 'cloud.pcd'
    path.write_bytes(ascii_xyz)

    with open(path, 'rb') as f:
        with Reader(f) as reader:
            assert len(reader.read_all()) == 3

        # the reader doesn't close what it didn't open
        assert not f.closed


def test_open_missing(tmp_path):
    with pytest.raises(PcdIOError):
        Reader.open(tmp_path / 'missing.pcd')


def test_header_error_closes(build_header):
    with pytest.raises(HeaderError):
        Reader(build_header(VERSION=b'VERSION 0.5'))
