"""
The schema is the ordered list of field definitions of a PCD file: it drives
both the order of the tokens in a text line and the byte layout of a binary
point.
"""
from collections import namedtuple
from typing import Iterable, List, Tuple

from .enum import ValueKind
from .exceptions import SchemaError, AmbiguousFieldError


# the name used in the FIELDS line for a column without meaning
PLACEHOLDER_NAME = '_'


Layout = namedtuple('Layout', ['stride', 'offsets'])


class FieldDef(object):
    '''Name, primitive kind and number of elements of a single field.'''
    __slots__ = ('name', 'kind', 'count')

    def __init__(self, name: str, kind: ValueKind, count: int = 1):
        if not isinstance(kind, ValueKind):
            raise SchemaError(f'{kind!r} is not a ValueKind', field_name=name)

        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise SchemaError(f'the count must be a positive integer, found {count!r}',
                              field_name=name, found=count)

        object.__setattr__(self, 'name', name)
        object.__setattr__(self, 'kind', kind)
        object.__setattr__(self, 'count', count)

    def __setattr__(self, name, value):
        raise AttributeError(f"'{self.__class__.__name__}' is immutable")

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.name!r}, {self.kind.name}, {self.count})>'

    def __eq__(self, other):
        if not isinstance(other, FieldDef):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __hash__(self):
        return hash(self.as_tuple())

    def as_tuple(self) -> Tuple[str, ValueKind, int]:
        return self.name, self.kind, self.count

    @property
    def size(self) -> int:
        '''Bytes occupied by the field in a binary point.'''
        return self.kind.size * self.count

    @property
    def is_placeholder(self) -> bool:
        return self.name == PLACEHOLDER_NAME


def compute_layout(field_defs: Iterable[FieldDef]) -> Layout:
    '''Returns the stride and the offset of each field for the binary representation.

    Fields are packed back to back without any padding.'''
    offsets = []
    stride = 0
    for field_def in field_defs:
        offsets.append(stride)
        stride += field_def.size

    return Layout(stride, tuple(offsets))


class Schema(object):
    '''Immutable ordered sequence of FieldDef.

    Duplicated names are allowed (the placeholder is usually repeated) but
    looking up a duplicated name fails.'''

    def __init__(self, field_defs: Iterable[FieldDef]):
        self._fields = tuple(field_defs)

        if not self._fields:
            raise SchemaError('a schema needs at least one field')

        for field_def in self._fields:
            if not isinstance(field_def, FieldDef):
                raise SchemaError(f'{field_def!r} is not a FieldDef')

        self._layout = compute_layout(self._fields)

    @classmethod
    def from_tuples(cls, specs: Iterable[Tuple[str, ValueKind, int]]) -> "Schema":
        return cls(FieldDef(*spec) for spec in specs)

    def __repr__(self):
        return f'<{self.__class__.__name__}({", ".join(repr(_) for _ in self._fields)})>'

    def __len__(self):
        return len(self._fields)

    def __iter__(self):
        return iter(self._fields)

    def __getitem__(self, item):
        return self._fields[item]

    def __eq__(self, other):
        if not isinstance(other, Schema):
            return NotImplemented
        return self._fields == other._fields

    def __hash__(self):
        return hash(self._fields)

    @property
    def fields(self) -> Tuple[FieldDef, ...]:
        return self._fields

    @property
    def names(self) -> List[str]:
        return [_.name for _ in self._fields]

    @property
    def layout(self) -> Layout:
        return self._layout

    @property
    def stride(self) -> int:
        return self._layout.stride

    @property
    def offsets(self) -> Tuple[int, ...]:
        return self._layout.offsets

    @property
    def total_count(self) -> int:
        '''Number of tokens of a text line.'''
        return sum(_.count for _ in self._fields)

    def index_of(self, name: str) -> int:
        indexes = [idx for idx, field_def in enumerate(self._fields) if field_def.name == name]

        if not indexes:
            raise SchemaError(f"no field named '{name}'", field_name=name)

        if len(indexes) > 1:
            raise AmbiguousFieldError(
                f"field name '{name}' appears {len(indexes)} times (positions {indexes})",
                field_name=name)

        return indexes[0]
