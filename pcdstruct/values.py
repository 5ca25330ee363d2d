"""
Schema-free representation of the points: a Record is an ordered list of
Field, each Field is a tagged sequence of primitive values.
"""
import math
import struct
from typing import Iterable, List, Optional, Tuple

from .enum import ValueKind


def _to_float32(value: float) -> float:
    '''Round a python float to the nearest value representable as a 32-bit float.'''
    return struct.unpack('=f', struct.pack('=f', value))[0]


class Field(object):
    '''A tagged value: the ValueKind plus exactly the values of that kind.

    Values of F32 fields are rounded to single precision when the field is
    built, so what you read back from the field is exactly what is going
    to be written.'''
    __slots__ = ('kind', 'values')

    def __init__(self, kind: ValueKind, values: Iterable):
        if not isinstance(kind, ValueKind):
            raise ValueError(f'{kind!r} is not a ValueKind')

        self.kind = kind
        self.values = [self._coerce(_) for _ in values]

    def _coerce(self, value):
        kind = self.kind
        if isinstance(value, bool):
            raise ValueError(f'booleans are not valid {kind.name} values')

        if kind.is_float:
            if not isinstance(value, (int, float)):
                raise ValueError(f'{value!r} is not a valid {kind.name} value')
            try:
                value = float(value)
            except OverflowError:
                raise ValueError(f'integer is out of range for {kind.name}') from None

            if kind == ValueKind.F32 and math.isfinite(value):
                try:
                    value = _to_float32(value)
                except OverflowError:
                    raise ValueError(f'{value!r} is out of range for {kind.name}') from None
            return value

        if not isinstance(value, int):
            raise ValueError(f'{value!r} is not a valid {kind.name} value')

        low, high = kind.bounds
        if not low <= value <= high:
            raise ValueError(f'{value} is out of range for {kind.name} [{low}, {high}]')

        return value

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.kind.name}, {self.values!r})>'

    def __eq__(self, other):
        if not isinstance(other, Field):
            return NotImplemented
        return self.kind == other.kind and self.values == other.values

    def __len__(self):
        return len(self.values)

    def __iter__(self):
        return iter(self.values)

    def __getitem__(self, item):
        return self.values[item]

    @property
    def count(self) -> int:
        return len(self.values)

    def to_value(self):
        '''Returns the value of a field with a single element, None otherwise.'''
        if len(self.values) != 1:
            return None

        return self.values[0]


class Record(object):
    '''One point: a Field for each FieldDef of the schema, in the same order.'''
    __slots__ = ('fields',)

    def __init__(self, fields: Iterable[Field]):
        self.fields: List[Field] = list(fields)

    def __repr__(self):
        return f'<{self.__class__.__name__}({", ".join(repr(_) for _ in self.fields)})>'

    def __eq__(self, other):
        if not isinstance(other, Record):
            return NotImplemented
        return self.fields == other.fields

    def __len__(self):
        return len(self.fields)

    def __iter__(self):
        return iter(self.fields)

    def __getitem__(self, item):
        return self.fields[item]

    def is_consistent_with(self, schema) -> bool:
        if len(self.fields) != len(schema):
            return False

        return all(
            field.kind == field_def.kind and field.count == field_def.count
            for field, field_def in zip(self.fields, schema)
        )

    def to_xyz(self) -> Optional[Tuple]:
        '''Returns the first three fields as (x, y, z) when they are
        single-valued fields of the same kind.'''
        if len(self.fields) < 3:
            return None

        x, y, z = self.fields[:3]
        if not (x.kind == y.kind == z.kind):
            return None

        if not (x.count == y.count == z.count == 1):
            return None

        return x.values[0], y.values[0], z.values[0]
