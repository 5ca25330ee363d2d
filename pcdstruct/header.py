"""
# PCD header

The header is ASCII text, one declaration per line, in this exact order

    VERSION 0.7
    FIELDS x y z rgb
    SIZE 4 4 4 4
    TYPE F F F U
    COUNT 1 1 1 1
    WIDTH 213
    HEIGHT 1
    VIEWPOINT 0 0 0 1 0 0 0
    POINTS 213
    DATA ascii

The data starts right after the DATA line. Lines starting with '#' are
comments and can appear anywhere in the header.

See <https://pointclouds.org/documentation/tutorials/pcd_file_format.html>.
"""
import logging
from typing import NamedTuple, List, Tuple

from .codec import INTEGER_TOKEN, FLOAT_TOKEN, format_float64
from .enum import DataKind, TypeKind, ValueKind
from .exceptions import (
    HeaderError,
    PointCountError,
    UnsupportedFormatError,
    UnsupportedVersionError,
)
from .schema import FieldDef, Schema


SUPPORTED_VERSION = '0.7'
VERSION_SPELLINGS = ('0.7', '.7')


class ViewPoint(NamedTuple):
    '''Acquisition pose: translation plus a scalar-first quaternion.'''
    tx: float = 0.0
    ty: float = 0.0
    tz: float = 0.0
    qw: float = 1.0
    qx: float = 0.0
    qy: float = 0.0
    qz: float = 0.0


class Metadata(object):
    '''Everything the header declares. It's immutable once built.'''

    __slots__ = ('version', 'width', 'height', 'viewpoint', 'data_kind', 'schema', 'point_count')

    def __init__(self, width: int, height: int, data_kind: DataKind, schema: Schema,
                 viewpoint: ViewPoint = None, point_count: int = None, version: str = SUPPORTED_VERSION):
        if point_count is None:
            point_count = width * height

        if point_count != width * height:
            raise PointCountError(
                f'POINTS is {point_count} but WIDTH * HEIGHT is {width * height}',
                expected=width * height, actual=point_count)

        for name, value in (('version', version),
                            ('width', width),
                            ('height', height),
                            ('viewpoint', viewpoint if viewpoint is not None else ViewPoint()),
                            ('data_kind', data_kind),
                            ('schema', schema),
                            ('point_count', point_count)):
            object.__setattr__(self, name, value)

    def __setattr__(self, name, value):
        raise AttributeError(f"'{self.__class__.__name__}' is immutable")

    def __repr__(self):
        return '<%s(version=%s, width=%d, height=%d, points=%d, data=%s, schema=%r)>' % (
            self.__class__.__name__,
            self.version,
            self.width,
            self.height,
            self.point_count,
            self.data_kind.value,
            self.schema,
        )

    def __eq__(self, other):
        if not isinstance(other, Metadata):
            return NotImplemented
        return all(getattr(self, _) == getattr(other, _) for _ in self.__slots__)

    def __hash__(self):
        return hash(tuple(getattr(self, _) for _ in self.__slots__))

    @property
    def is_organized(self) -> bool:
        return self.height > 1


class HeaderParser(object):
    '''Consume the header lines from a binary stream in the fixed order.

    After parse() the stream is positioned at the first byte of the data
    and `offset` holds the number of bytes consumed.'''

    def __init__(self, stream):
        self.stream = stream
        self.line_count = 0
        self.offset = 0
        self.logger = logging.getLogger(__name__)

    def _readline(self) -> str:
        raw = self.stream.readline()
        self.line_count += 1
        self.offset += len(raw)

        try:
            return raw.decode('ascii')
        except UnicodeDecodeError:
            raise HeaderError('the header contains non ASCII characters', line=self.line_count) from None

    def _next_line(self, expected: str) -> List[str]:
        '''Returns the tokens of the next declaration, that must be the expected one.'''
        while True:
            line = self._readline()

            if line == '':
                raise HeaderError(
                    f"unexpected end of file while looking for the {expected} line",
                    line=self.line_count, expected=expected, found=None)

            if line.lstrip().startswith('#'):
                self.logger.debug('skipping comment at line %d: %s' % (self.line_count, line.strip()))
                continue

            tokens = line.split('#', 1)[0].split()

            if not tokens:
                raise HeaderError('empty line in the header', line=self.line_count, expected=expected, found='')

            if tokens[0] != expected:
                raise HeaderError(
                    f"expected {expected} line, found '{tokens[0]}'",
                    line=self.line_count, expected=expected, found=tokens[0])

            self.logger.debug('parsed %s line: %s' % (expected, tokens[1:]))

            return tokens

    def _error(self, msg, expected=None, found=None):
        return HeaderError(msg, line=self.line_count, expected=expected, found=found)

    def _single(self, tokens):
        if len(tokens) != 2:
            raise self._error(f'{tokens[0]} line takes exactly one value, found {len(tokens) - 1}',
                              expected=tokens[0])
        return tokens[1]

    def _array(self, tokens, n_fields=None):
        values = tokens[1:]
        if not values:
            raise self._error(f'{tokens[0]} line has no values', expected=tokens[0])

        if n_fields is not None and len(values) != n_fields:
            raise self._error(
                f'{tokens[0]} line has {len(values)} values but FIELDS declares {n_fields}',
                expected=tokens[0])

        return values

    def _integer(self, keyword, token) -> int:
        if not INTEGER_TOKEN.match(token) or token.startswith('-'):
            raise self._error(f"'{token}' in {keyword} line is not a non-negative integer", expected=keyword)
        return int(token)

    def _float(self, keyword, token) -> float:
        if not FLOAT_TOKEN.match(token):
            raise self._error(f"'{token}' in {keyword} line is not a number", expected=keyword)
        return float(token)

    def parse_version(self) -> str:
        version = self._single(self._next_line('VERSION'))

        if version not in VERSION_SPELLINGS:
            raise UnsupportedVersionError(
                f"unsupported version '{version}', supported version is {SUPPORTED_VERSION}",
                line=self.line_count, expected=SUPPORTED_VERSION, found=version)

        return SUPPORTED_VERSION

    def parse_schema(self) -> Schema:
        names = self._array(self._next_line('FIELDS'))
        n_fields = len(names)

        sizes = [self._integer('SIZE', _) for _ in self._array(self._next_line('SIZE'), n_fields)]

        types = []
        for token in self._array(self._next_line('TYPE'), n_fields):
            try:
                types.append(TypeKind(token))
            except ValueError:
                raise self._error(f"invalid type character '{token}' in TYPE line", expected='TYPE') from None

        kinds = []
        for name, type_kind, size in zip(names, types, sizes):
            try:
                kinds.append(ValueKind.from_type_size(type_kind, size))
            except ValueError as e:
                raise self._error(f"field '{name}': {e}", expected='TYPE') from None

        counts = [self._integer('COUNT', _) for _ in self._array(self._next_line('COUNT'), n_fields)]
        for name, count in zip(names, counts):
            if count < 1:
                raise self._error(f"field '{name}' has COUNT {count}, it must be at least 1", expected='COUNT')

        return Schema(FieldDef(name, kind, count) for name, kind, count in zip(names, kinds, counts))

    def parse_viewpoint(self) -> ViewPoint:
        tokens = self._next_line('VIEWPOINT')
        if len(tokens) != 8:
            raise self._error(f'VIEWPOINT line takes 7 values, found {len(tokens) - 1}', expected='VIEWPOINT')

        return ViewPoint(*[self._float('VIEWPOINT', _) for _ in tokens[1:]])

    def parse_data_kind(self) -> DataKind:
        keyword = self._single(self._next_line('DATA'))

        try:
            data_kind = DataKind(keyword)
        except ValueError:
            raise UnsupportedFormatError(
                f"unsupported data representation '{keyword}'",
                line=self.line_count, expected='ascii|binary', found=keyword) from None

        if not data_kind.is_supported:
            raise UnsupportedFormatError(
                f"compressed data representation '{keyword}' is not supported",
                line=self.line_count, expected='ascii|binary', found=keyword)

        return data_kind

    def parse(self) -> Tuple[Metadata, int]:
        version = self.parse_version()
        schema = self.parse_schema()
        width = self._integer('WIDTH', self._single(self._next_line('WIDTH')))
        height = self._integer('HEIGHT', self._single(self._next_line('HEIGHT')))
        viewpoint = self.parse_viewpoint()
        point_count = self._integer('POINTS', self._single(self._next_line('POINTS')))

        if point_count != width * height:
            raise PointCountError(
                f'POINTS is {point_count} but WIDTH * HEIGHT is {width * height}',
                line=self.line_count, expected=width * height, actual=point_count)

        data_kind = self.parse_data_kind()

        metadata = Metadata(
            width=width,
            height=height,
            data_kind=data_kind,
            schema=schema,
            viewpoint=viewpoint,
            point_count=point_count,
            version=version,
        )

        self.logger.debug('header parsed, data starts at offset %d: %r' % (self.offset, metadata))

        return metadata, self.offset


def parse_header(stream) -> Tuple[Metadata, int]:
    return HeaderParser(stream).parse()


def format_header(metadata: Metadata) -> bytes:
    schema = metadata.schema
    lines = [
        '# .PCD v0.7 - Point Cloud Data file format',
        'VERSION %s' % metadata.version,
        'FIELDS %s' % ' '.join(schema.names),
        'SIZE %s' % ' '.join(str(_.kind.size) for _ in schema),
        'TYPE %s' % ' '.join(_.kind.type_kind.value for _ in schema),
        'COUNT %s' % ' '.join(str(_.count) for _ in schema),
        'WIDTH %d' % metadata.width,
        'HEIGHT %d' % metadata.height,
        'VIEWPOINT %s' % ' '.join(format_float64(float(_)) for _ in metadata.viewpoint),
        'POINTS %d' % metadata.point_count,
        'DATA %s' % metadata.data_kind.value,
    ]

    return ('\n'.join(lines) + '\n').encode('ascii')
