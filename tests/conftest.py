import logging
import os

import pytest

from pcdstruct.enum import ValueKind
from pcdstruct.schema import Schema


if os.environ.get('DEBUG'):
    logging.basicConfig(level=logging.DEBUG)


XYZ_HEADER = (
    b'# .PCD v0.7 - Point Cloud Data file format\n'
    b'VERSION 0.7\n'
    b'FIELDS x y z\n'
    b'SIZE 4 4 4\n'
    b'TYPE F F F\n'
    b'COUNT 1 1 1\n'
    b'WIDTH 3\n'
    b'HEIGHT 1\n'
    b'VIEWPOINT 0 0 0 1 0 0 0\n'
    b'POINTS 3\n'
    b'DATA %s\n'
)


def _build_header(data=b'ascii', **lines):
    '''Returns the XYZ header with some of its lines replaced, for example
    build_header(VERSION=b'VERSION 0.6').'''
    header = XYZ_HEADER % data
    for keyword, line in lines.items():
        header = b'\n'.join(
            line if _.split(b' ', 1)[0] == keyword.encode() else _
            for _ in header.split(b'\n')
        )
    return header


@pytest.fixture
def xyz_schema():
    return Schema.from_tuples([
        ('x', ValueKind.F32, 1),
        ('y', ValueKind.F32, 1),
        ('z', ValueKind.F32, 1),
    ])


@pytest.fixture
def ascii_xyz():
    return _build_header() + b'1.0 2.0 3.0\n4.0 5.0 6.0\n7.0 8.0 9.0\n'


@pytest.fixture
def build_header():
    return _build_header
