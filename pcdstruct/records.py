"""
Whole-record encoding and decoding.

A RecordCodec is driven only by the order of the schema: it doesn't know
anything about typed records, renamed or ignored fields.
"""
import logging
from typing import Optional

from .enum import DataKind
from .exceptions import DataError, SchemaError, UnsupportedFormatError
from .codec import FieldCodec
from .schema import Schema
from .values import Record


def validate_record(record: Record, schema: Schema, point_index=None) -> None:
    '''Check the record has a field for each FieldDef with the same kind and count.'''
    if len(record) != len(schema):
        raise SchemaError(
            f'record has {len(record)} fields but the schema defines {len(schema)}'
            + (f' (point {point_index})' if point_index is not None else ''),
            expected=len(schema),
            found=len(record),
        )

    for field, field_def in zip(record, schema):
        if field.kind != field_def.kind:
            raise SchemaError(
                f"field '{field_def.name}' expects kind {field_def.kind.name}, found {field.kind.name}",
                field_name=field_def.name,
                expected=(field_def.kind, field_def.count),
                found=(field.kind, field.count),
            )

        if field.count != field_def.count:
            raise SchemaError(
                f"field '{field_def.name}' expects {field_def.count} elements, found {field.count}",
                field_name=field_def.name,
                expected=(field_def.kind, field_def.count),
                found=(field.kind, field.count),
            )


class RecordCodec(object):
    '''Base class: decodes records from a stream up to the declared number
    of points and encodes records to bytes.'''

    data_kind: DataKind = None

    def __init__(self, schema: Schema, point_count: int = 0):
        self.schema = schema
        self.point_count = point_count
        self.point_index = 0
        self.codecs = [FieldCodec(_) for _ in schema]
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def create(data_kind: DataKind, schema: Schema, point_count: int = 0) -> "RecordCodec":
        if data_kind == DataKind.ASCII:
            return TextRecordCodec(schema, point_count)
        if data_kind == DataKind.BINARY:
            return BinaryRecordCodec(schema, point_count)

        raise UnsupportedFormatError(f"data representation '{data_kind.value}' is not supported")

    @property
    def is_exhausted(self) -> bool:
        return self.point_index >= self.point_count

    def read(self, stream) -> Optional[Record]:
        '''Decode the next record, None once all the declared points are read.'''
        if self.is_exhausted:
            return None

        record = self._decode(stream, self.point_index)
        self.point_index += 1
        if self.is_exhausted:
            self.logger.debug("decoded all the %d declared points", self.point_count)

        return record

    def encode(self, record: Record, point_index=None) -> bytes:
        validate_record(record, self.schema, point_index=point_index)
        return self._encode(record)

    def _decode(self, stream, point_index) -> Record:
        raise NotImplementedError(f'method {self.__class__.__name__}._decode() not implemented')

    def _encode(self, record: Record) -> bytes:
        raise NotImplementedError(f'method {self.__class__.__name__}._encode() not implemented')


class TextRecordCodec(RecordCodec):
    '''One line per point, whitespace separated tokens.'''

    data_kind = DataKind.ASCII

    def _decode(self, stream, point_index) -> Record:
        raw = stream.readline()
        if not raw:
            raise DataError('unexpected end of data', point_index=point_index)

        try:
            line = raw.decode('ascii')
        except UnicodeDecodeError:
            raise DataError('the line contains non ASCII characters', point_index=point_index) from None

        tokens = line.split()
        expected = self.schema.total_count
        if len(tokens) != expected:
            raise DataError(
                f'the line has {len(tokens)} tokens but the schema needs {expected}',
                point_index=point_index)

        fields = []
        start = 0
        for codec in self.codecs:
            end = start + codec.field_def.count
            fields.append(codec.parse(tokens[start:end], point_index=point_index))
            start = end

        return Record(fields)

    def _encode(self, record: Record) -> bytes:
        tokens = []
        for codec, field in zip(self.codecs, record):
            tokens.extend(codec.format(field))

        return (' '.join(tokens) + '\n').encode('ascii')


class BinaryRecordCodec(RecordCodec):
    '''Points packed back to back, each one `stride` bytes long.'''

    data_kind = DataKind.BINARY

    def __init__(self, schema: Schema, point_count: int = 0):
        super().__init__(schema, point_count)
        self._buffer = bytearray(schema.stride)

    def _fill(self, stream) -> int:
        '''Read into the reusable buffer until it's full or the stream ends.'''
        view = memoryview(self._buffer)
        filled = 0
        while filled < len(self._buffer):
            chunk = stream.read(len(self._buffer) - filled)
            if not chunk:
                break
            view[filled:filled + len(chunk)] = chunk
            filled += len(chunk)

        return filled

    def _decode(self, stream, point_index) -> Record:
        filled = self._fill(stream)
        data = memoryview(self._buffer)[:filled]

        return Record(
            codec.unpack(data, offset, point_index=point_index)
            for codec, offset in zip(self.codecs, self.schema.offsets)
        )

    def _encode(self, record: Record) -> bytes:
        buffer = bytearray(self.schema.stride)
        for codec, offset, field in zip(self.codecs, self.schema.offsets, record):
            codec.pack_into(buffer, offset, field)

        return bytes(buffer)
