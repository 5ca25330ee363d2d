"""
Declarations used to describe a typed point, for example

    class Point(PointRecord):
        x         = fields.StructField('f')
        y         = fields.StructField('f')
        z         = fields.StructField('f')
        normal    = fields.ArrayField('f', n=3)
        intensity = fields.StructField('B', rename='i')
        label     = fields.StructField('I', ignore=True)

The format is the struct character of the primitive kind (b B h H i I f d).
"""
from typing import List

from .enum import ValueKind
from .meta import FieldBase
from .schema import FieldDef
from .values import Field


class StructField(FieldBase):
    """
    Simplest of the fields: a single primitive value.

    Use "rename" when the attribute name differs from the name in the
    FIELDS line, and "ignore" to keep the attribute out of the file
    entirely (it gets the default value when reading).
    """

    def __init__(self, format, default=None, rename=None, ignore=False):
        self.format = format
        self.kind = ValueKind.from_format(format)
        self.rename = rename
        self.ignore = ignore
        self.name = None
        self.default = default

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.format!r}, name={self.name!r})>'

    @property
    def count(self) -> int:
        return 1

    @property
    def pcd_name(self) -> str:
        '''The name of the field inside the PCD file.'''
        return self.rename if self.rename is not None else self.name

    @property
    def field_def(self) -> FieldDef:
        return FieldDef(self.pcd_name, self.kind, self.count)

    def value_from_default(self):
        if self.default is not None:
            return self.default

        return 0.0 if self.kind.is_float else 0

    def to_field(self, value) -> Field:
        return Field(self.kind, [value])

    def from_field(self, field: Field):
        return field.values[0]


class ArrayField(StructField):
    '''Fixed number of primitive values of the same kind.'''

    def __init__(self, format, n, **kw):
        if isinstance(n, bool) or not isinstance(n, int) or n < 1:
            raise ValueError(f'n must be a positive integer, not {n!r}')

        self.n = n
        super().__init__(format, **kw)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.format!r}, n={self.n}, name={self.name!r})>'

    @property
    def count(self) -> int:
        return self.n

    def value_from_default(self) -> List:
        if self.default is not None:
            return list(self.default)

        return [super().value_from_default()] * self.n

    def to_field(self, value) -> Field:
        return Field(self.kind, value)

    def from_field(self, field: Field) -> List:
        return list(field.values)
