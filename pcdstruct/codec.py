"""
Per-field conversion between the on-disk representations and Field values.

A FieldCodec is built from a FieldDef and knows how to

 1. unpack()/pack(): the binary representation, i.e. `count` fixed-width
    values in native byte order, exactly `size * count` bytes;
 2. parse()/format(): the text representation, i.e. `count` whitespace
    separated tokens.
"""
import math
import re
import struct
from typing import List, Sequence

from .enum import ValueKind
from .exceptions import DataError
from .schema import FieldDef
from .values import Field


INTEGER_TOKEN = re.compile(r'^[+-]?[0-9]+$')
FLOAT_TOKEN = re.compile(
    r'^[+-]?(?:'
    r'(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?'
    r'|inf|infinity|nan'
    r')$',
    re.IGNORECASE,
)


def format_float32(value: float) -> str:
    '''Shortest decimal representation that parses back to the same 32-bit float.'''
    if not math.isfinite(value):
        return repr(value)

    packed = struct.pack('=f', value)
    for precision in range(1, 10):
        text = '%.*g' % (precision, value)
        if struct.pack('=f', float(text)) == packed:
            return repr(float(text))

    return repr(value)  # unreachable: 9 significant digits are always enough


def format_float64(value: float) -> str:
    # repr() is the shortest string that round-trips a double
    return repr(value)


class FieldCodec(object):
    '''Encoder/decoder of a single field, for both representations.'''

    def __init__(self, field_def: FieldDef):
        self.field_def = field_def
        self._struct = struct.Struct('=%d%s' % (field_def.count, field_def.kind.format))

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.field_def!r})>'

    @property
    def kind(self) -> ValueKind:
        return self.field_def.kind

    @property
    def size(self) -> int:
        return self._struct.size

    def _error(self, msg, point_index):
        return DataError(msg, point_index=point_index, field_name=self.field_def.name)

    # binary

    def unpack(self, buffer, offset: int = 0, point_index=None) -> Field:
        available = len(buffer) - offset
        if available < self.size:
            raise self._error(
                f'truncated point, expected {self.size} bytes but only {max(available, 0)} are available',
                point_index)

        values = self._struct.unpack_from(buffer, offset)

        return Field(self.kind, values)

    def pack(self, field: Field) -> bytes:
        return self._struct.pack(*field.values)

    def pack_into(self, buffer, offset: int, field: Field) -> None:
        self._struct.pack_into(buffer, offset, *field.values)

    # text

    def _parse_integer(self, token: str, point_index) -> int:
        if not INTEGER_TOKEN.match(token):
            raise self._error(f"'{token}' is not a valid {self.kind.name} literal", point_index)

        value = int(token)
        low, high = self.kind.bounds
        if not low <= value <= high:
            raise self._error(f'{value} is out of range for {self.kind.name} [{low}, {high}]', point_index)

        return value

    def _parse_float(self, token: str, point_index) -> float:
        if not FLOAT_TOKEN.match(token):
            raise self._error(f"'{token}' is not a valid {self.kind.name} literal", point_index)

        value = float(token)
        if self.kind == ValueKind.F32 and math.isfinite(value):
            try:
                struct.pack('=f', value)
            except OverflowError:
                raise self._error(f"'{token}' is out of range for F32", point_index) from None

        return value

    def parse(self, tokens: Sequence[str], point_index=None) -> Field:
        if len(tokens) != self.field_def.count:
            raise self._error(
                f'expected {self.field_def.count} tokens, found {len(tokens)}', point_index)

        parse = self._parse_float if self.kind.is_float else self._parse_integer

        return Field(self.kind, [parse(_, point_index) for _ in tokens])

    def format(self, field: Field) -> List[str]:
        if self.kind == ValueKind.F32:
            return [format_float32(_) for _ in field.values]

        if self.kind == ValueKind.F64:
            return [format_float64(_) for _ in field.values]

        return [str(_) for _ in field.values]
