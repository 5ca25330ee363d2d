"""
Conversion between Records and numpy structured arrays.

The dtype built from a schema has the same byte layout of a binary point
(same offsets, same itemsize, native byte order) so an array can be seen as
the DATA section of a binary file. Fields with more than one element become
sub-array fields, i.e. `normal` with count 3 is `array['normal'].shape == (N, 3)`.
"""
import logging
from typing import Iterable, List

import numpy as np

from .exceptions import AmbiguousFieldError, SchemaError
from .enum import ValueKind
from .records import validate_record
from .schema import Schema
from .values import Field, Record


logger = logging.getLogger(__name__)


def kind_dtype(kind: ValueKind) -> np.dtype:
    '''The numpy scalar type with the same representation of the kind.'''
    return np.dtype('%s%d' % (kind.type_kind.value.lower(), kind.size))


def schema_dtype(schema: Schema) -> np.dtype:
    names = schema.names
    for name in set(names):
        if names.count(name) > 1:
            raise AmbiguousFieldError(
                f"field name '{name}' appears {names.count(name)} times, it can't be a dtype field",
                field_name=name)

    formats = []
    for field_def in schema:
        base = kind_dtype(field_def.kind)
        formats.append(base if field_def.count == 1 else (base, (field_def.count,)))

    return np.dtype({
        'names': names,
        'formats': formats,
        'offsets': list(schema.offsets),
        'itemsize': schema.stride,
    })


def records_to_array(records: Iterable[Record], schema: Schema) -> np.ndarray:
    records = list(records)
    array = np.zeros(len(records), dtype=schema_dtype(schema))

    for index, record in enumerate(records):
        if not isinstance(record, Record):
            raise SchemaError(f"point {index} is not a Record but '{record.__class__.__name__}'",
                              expected='Record', found=record.__class__.__name__)

        validate_record(record, schema, point_index=index)

        for field, field_def in zip(record, schema):
            array[field_def.name][index] = field.values if field_def.count > 1 else field.values[0]

    logger.debug('built array of %d points with dtype %s' % (len(records), array.dtype))

    return array


def array_to_records(array: np.ndarray, schema: Schema) -> List[Record]:
    missing = [_ for _ in schema.names if array.dtype.names is None or _ not in array.dtype.names]
    if missing:
        raise SchemaError(f'the array has no field(s) {missing}', found=array.dtype.names)

    # tolist() gives back python scalars, the Field wants int and float
    columns = [array[_].tolist() for _ in schema.names]

    records = []
    for index in range(len(array)):
        fields = []
        for column, field_def in zip(columns, schema):
            value = column[index]
            try:
                fields.append(Field(field_def.kind, value if field_def.count > 1 else [value]))
            except ValueError as e:
                raise SchemaError(f"point {index}, field '{field_def.name}': {e}", field_name=field_def.name) from e

        records.append(Record(fields))

    return records


def read_array(reader) -> np.ndarray:
    '''Read all the remaining points of an untyped Reader into an array.'''
    return records_to_array(reader, reader.meta.schema)
