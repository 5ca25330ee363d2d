"""
Bridge between the schema-free Record and typed values.

A typed value takes part in reading and writing through two contracts

 - Serializable: `write_schema()` (class level) declares the FieldDefs
   written for it and `to_record()` converts an instance into a Record
   in that order;
 - Deserializable: `read_spec()` (class level) declares the FieldDefs it
   needs and `from_record(record)` builds an instance from a Record whose
   fields are in the read_spec() order.

Any class providing the methods satisfies the contract, there is no need to
inherit from the abstract classes (see PointRecord for the declarative way).

The matching against the file is done by name, once, when the reader is
created: the RecordCodec keeps decoding the full file schema by position and
ReadBridge picks the fields the typed value asked for.
"""
import logging
from abc import ABC, abstractmethod
from typing import List

from .exceptions import SchemaError
from .schema import FieldDef, Schema
from .values import Record


logger = logging.getLogger(__name__)


def _has_methods(cls, names):
    return all(any(name in klass.__dict__ for klass in cls.__mro__) for name in names)


class Serializable(ABC):

    @classmethod
    @abstractmethod
    def write_schema(cls) -> Schema:
        pass

    @abstractmethod
    def to_record(self) -> Record:
        pass

    @classmethod
    def __subclasshook__(cls, subclass):
        if cls is Serializable:
            return _has_methods(subclass, ('write_schema', 'to_record'))
        return NotImplemented


class Deserializable(ABC):

    @classmethod
    @abstractmethod
    def read_spec(cls) -> List[FieldDef]:
        pass

    @classmethod
    @abstractmethod
    def from_record(cls, record: Record):
        pass

    @classmethod
    def __subclasshook__(cls, subclass):
        if cls is Deserializable:
            return _has_methods(subclass, ('read_spec', 'from_record'))
        return NotImplemented


class ReadBridge(object):
    '''Resolve the read spec of a typed value against the schema of a file.

    The check happens in the constructor, convert() is then a plain
    positional selection.'''

    def __init__(self, record_cls, schema: Schema):
        if not issubclass(record_cls, Deserializable):
            raise TypeError(f"'{record_cls.__name__}' doesn't implement read_spec() and from_record()")

        self.record_cls = record_cls
        self.schema = schema
        self.indexes = self.resolve(record_cls.read_spec(), schema)

        logger.debug('%s reads file fields at positions %s' % (record_cls.__name__, self.indexes))

    @staticmethod
    def resolve(read_spec: List[FieldDef], schema: Schema) -> List[int]:
        indexes = []
        for expected in read_spec:
            if expected.is_placeholder:
                raise SchemaError(
                    f"field '{expected.name}' is the placeholder name, a typed record can't read it",
                    field_name=expected.name,
                    expected=(expected.kind, expected.count),
                )

            if expected.name not in schema.names:
                raise SchemaError(
                    f"field '{expected.name}' ({expected.kind.name}[{expected.count}]) is missing from the file",
                    field_name=expected.name,
                    expected=(expected.kind, expected.count),
                    found=None,
                )

            index = schema.index_of(expected.name)
            found = schema[index]

            if (found.kind, found.count) != (expected.kind, expected.count):
                raise SchemaError(
                    f"field '{expected.name}' expects {expected.kind.name}[{expected.count}],"
                    f" the file has {found.kind.name}[{found.count}]",
                    field_name=expected.name,
                    expected=(expected.kind, expected.count),
                    found=(found.kind, found.count),
                )

            indexes.append(index)

        return indexes

    @property
    def projected_schema(self) -> Schema:
        '''The positional schema seen by the typed value.'''
        return Schema(self.schema[_] for _ in self.indexes)

    def convert(self, record: Record):
        return self.record_cls.from_record(Record(record[_] for _ in self.indexes))


class WriteBridge(object):
    '''The schema of a writer inferred from a typed value.'''

    def __init__(self, record_cls):
        if not issubclass(record_cls, Serializable):
            raise TypeError(f"'{record_cls.__name__}' doesn't implement write_schema() and to_record()")

        self.record_cls = record_cls
        self.schema = record_cls.write_schema()

    def convert(self, value) -> Record:
        if not isinstance(value, self.record_cls):
            raise SchemaError(
                f"expected an instance of '{self.record_cls.__name__}', found '{value.__class__.__name__}'",
                expected=self.record_cls.__name__, found=value.__class__.__name__)

        return value.to_record()
