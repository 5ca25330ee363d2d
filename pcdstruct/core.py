"""
Core module for the typed points

"""
from typing import List

from .exceptions import SchemaError
from .meta import MetaRecord
from .schema import FieldDef, Schema
from .values import Record


class PointRecord(object, metaclass=MetaRecord):
    """
    Base class of the typed points: subclass it declaring the fields with
    the classes in pcdstruct.fields and you have both the Serializable and
    the Deserializable contracts for free.

        class Point(PointRecord):
            x = fields.StructField('f')
            y = fields.StructField('f')
            z = fields.StructField('f')

        point = Point(x=1.0, y=2.0, z=3.0)

    Positional arguments follow the declaration order.
    """

    def __init__(self, *args, **kwargs):
        names = list(self._meta.fields)

        if len(args) > len(names):
            raise TypeError(f'{self.__class__.__name__}() takes at most {len(names)} positional arguments')

        values = dict(zip(names, args))
        for name, value in kwargs.items():
            if name not in self._meta.fields:
                raise TypeError(f"{self.__class__.__name__}() got an unexpected field '{name}'")
            if name in values:
                raise TypeError(f"{self.__class__.__name__}() got multiple values for field '{name}'")
            values[name] = value

        for name, declaration in self._meta.fields.items():
            setattr(self, name, values[name] if name in values else declaration.value_from_default())

    def get_ordered_fields_name(self) -> List[str]:
        return list(self._meta.fields)

    def get_fields(self):
        '''It returns a list of couples (name, value) for each field.'''
        return [(_, getattr(self, _)) for _ in self.get_ordered_fields_name()]

    def __repr__(self):
        msg = []
        for field_name, value in self.get_fields():
            msg.append('%s=%r' % (field_name, value))
        return '<%s(%s)>' % (self.__class__.__name__, ', '.join(msg))

    def __eq__(self, other):
        if other.__class__ is not self.__class__:
            return NotImplemented
        return self.get_fields() == other.get_fields()

    # Serializable

    @classmethod
    def write_schema(cls) -> Schema:
        return Schema(_.field_def for _ in cls._meta.active_fields)

    def to_record(self) -> Record:
        fields = []
        for declaration in self._meta.active_fields:
            try:
                fields.append(declaration.to_field(getattr(self, declaration.name)))
            except (TypeError, ValueError) as e:
                raise SchemaError(
                    f"attribute '{declaration.name}' of {self.__class__.__name__}: {e}",
                    field_name=declaration.pcd_name) from e

        return Record(fields)

    # Deserializable

    @classmethod
    def read_spec(cls) -> List[FieldDef]:
        return [_.field_def for _ in cls._meta.active_fields]

    @classmethod
    def from_record(cls, record: Record) -> "PointRecord":
        values = {
            declaration.name: declaration.from_field(field)
            for declaration, field in zip(cls._meta.active_fields, record)
        }

        return cls(**values)
