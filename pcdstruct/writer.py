"""
Sequential writing of PCD data.

The header, number of points included, is written as soon as the writer is
built so everything must be known up front:

    schema = Schema.from_tuples([('x', ValueKind.F32, 1), ('rgb', ValueKind.U8, 3)])

    with Writer.create('cloud.pcd', width=2, height=1, data_kind=DataKind.BINARY, schema=schema) as writer:
        writer.push(Record([Field(ValueKind.F32, [1.0]), Field(ValueKind.U8, [255, 0, 0])]))
        writer.push(Record([Field(ValueKind.F32, [2.0]), Field(ValueKind.U8, [0, 255, 0])]))

Instead of a schema you can pass `record_cls` (a Serializable, usually a
PointRecord subclass): the schema comes from its write_schema() and push()
accepts its instances.
"""
import logging

from .bridge import WriteBridge
from .enum import DataKind, WriterPhase
from .exceptions import ConfigurationError, CountError, SchemaError, WriterStateError
from .header import Metadata, ViewPoint, format_header
from .records import RecordCodec
from .schema import Schema
from .streams import Stream
from .values import Record


def check_schema(schema: Schema) -> None:
    '''The names must survive the round trip through the FIELDS line.'''
    for field_def in schema:
        name = field_def.name
        if not isinstance(name, str) or not name:
            raise ConfigurationError('field names must be non-empty strings', field_name=name)

        if any(_.isspace() for _ in name) or '#' in name:
            raise ConfigurationError(f"field name '{name}' can't contain whitespaces or '#'", field_name=name)

        if not name.isascii():
            raise ConfigurationError(f"field name '{name}' must be ASCII", field_name=name)


class Writer(object):

    def __init__(self, sink, width: int, height: int, data_kind: DataKind,
                 schema: Schema = None, record_cls=None, viewpoint: ViewPoint = None):
        self.logger = logging.getLogger(__name__)

        if (schema is None) == (record_cls is None):
            raise ConfigurationError('exactly one between schema and record_cls must be indicated')

        if not isinstance(data_kind, DataKind) or not data_kind.is_supported:
            raise ConfigurationError(f'data representation {data_kind!r} is not supported for writing')

        for name, value in (('width', width), ('height', height)):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigurationError(f'{name} must be a non-negative integer, not {value!r}')

        self._bridge = None
        if record_cls is not None:
            self._bridge = WriteBridge(record_cls)
            schema = self._bridge.schema

        if not isinstance(schema, Schema):
            raise ConfigurationError(f'{schema!r} is not a Schema')

        check_schema(schema)

        if viewpoint is None:
            viewpoint = ViewPoint()

        self._meta = Metadata(
            width=width,
            height=height,
            data_kind=data_kind,
            schema=schema,
            viewpoint=ViewPoint(*viewpoint),
        )
        self._codec = RecordCodec.create(data_kind, schema)
        self._written = 0

        self._stream = Stream(sink, flags='w')
        try:
            self._stream.write(format_header(self._meta))
        except Exception:
            self._stream.close()
            raise

        self._phase = WriterPhase.INITIALIZED
        self.logger.debug('header written for %r' % self._meta)

    @classmethod
    def create(cls, path, width: int, height: int, data_kind: DataKind,
               schema: Schema = None, record_cls=None, viewpoint: ViewPoint = None) -> "Writer":
        '''Create (or truncate) the file at path.'''
        return cls(path, width, height, data_kind, schema=schema, record_cls=record_cls, viewpoint=viewpoint)

    def __repr__(self):
        return f'<{self.__class__.__name__}(phase={self._phase.name}, written={self._written}/{self._meta.point_count})>'

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if exc_type is not None:
            self.close()
            return

        if self._phase != WriterPhase.FINISHED:
            self.finish()

    @property
    def meta(self) -> Metadata:
        return self._meta

    @property
    def phase(self) -> WriterPhase:
        return self._phase

    @property
    def written(self) -> int:
        return self._written

    def _to_record(self, value) -> Record:
        if self._bridge is not None:
            return self._bridge.convert(value)

        if not isinstance(value, Record):
            raise SchemaError(f"expected a Record, found '{value.__class__.__name__}'",
                              expected='Record', found=value.__class__.__name__)

        return value

    def push(self, value) -> None:
        if self._phase == WriterPhase.FINISHED:
            raise WriterStateError('push() called on a finished writer')

        if self._written >= self._meta.point_count:
            raise CountError(
                f'the header declares {self._meta.point_count} points, no room for another one',
                expected=self._meta.point_count, actual=self._written + 1)

        data = self._codec.encode(self._to_record(value), point_index=self._written)
        self._stream.write(data)

        self._written += 1
        self._phase = WriterPhase.WRITING

    def extend(self, values) -> None:
        for value in values:
            self.push(value)

    def finish(self) -> None:
        if self._phase == WriterPhase.FINISHED:
            raise WriterStateError('finish() called twice')

        self._phase = WriterPhase.FINISHED

        try:
            if self._written != self._meta.point_count:
                raise CountError(
                    f'the header declares {self._meta.point_count} points but {self._written} were written',
                    expected=self._meta.point_count, actual=self._written)

            self._stream.flush()
            self.logger.debug('finished after %d points' % self._written)
        finally:
            self._stream.close()

    def close(self) -> None:
        '''Release the sink without checking the number of points.'''
        self._stream.close()
