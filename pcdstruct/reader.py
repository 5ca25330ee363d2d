"""
Sequential reading of PCD data.

    with Reader.open('cloud.pcd') as reader:
        print(reader.meta)
        for record in reader:
            print(record.to_xyz())

Passing `record_cls` (a Deserializable, usually a PointRecord subclass) the
reader yields typed values instead of Records; the compatibility between
the class and the file is checked when the reader is built.

The reader is a cursor over the data: it's finite and can't be restarted,
open a new one from the beginning of the source for a second pass.
"""
import logging
from typing import List, Optional

from .bridge import ReadBridge
from .enum import ReaderPhase
from .exceptions import PcdException
from .header import HeaderParser, Metadata
from .records import RecordCodec
from .streams import Stream


class Reader(object):

    def __init__(self, source, record_cls=None):
        '''source can be a path, raw bytes or a binary file object'''
        self.logger = logging.getLogger(__name__)
        self._stream = Stream(source, flags='r')

        try:
            parser = HeaderParser(self._stream)
            self._meta, self.data_offset = parser.parse()
            self._bridge = ReadBridge(record_cls, self._meta.schema) if record_cls is not None else None
            self._codec = RecordCodec.create(self._meta.data_kind, self._meta.schema, self._meta.point_count)
        except Exception:
            self._stream.close()
            raise

        self._phase = ReaderPhase.OPENED
        self.logger.debug('opened %r' % self._meta)

    @classmethod
    def open(cls, path, record_cls=None) -> "Reader":
        return cls(path, record_cls=record_cls)

    def __repr__(self):
        return f'<{self.__class__.__name__}(phase={self._phase.name}, point={self.point_index}/{len(self)})>'

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __len__(self):
        '''The number of points declared by the header.'''
        return self._meta.point_count

    def __iter__(self):
        return self

    def __next__(self):
        if self._phase in (ReaderPhase.EXHAUSTED, ReaderPhase.FAILED):
            raise StopIteration

        if self._codec.is_exhausted:
            self._exhaust()
            raise StopIteration

        try:
            record = self._codec.read(self._stream)
            value = self._bridge.convert(record) if self._bridge is not None else record
        except PcdException as e:
            self.logger.debug('reading failed at point %d: %s' % (self._codec.point_index, e))
            self._phase = ReaderPhase.FAILED
            raise

        if self._codec.is_exhausted:
            self._exhaust()
        else:
            self._phase = ReaderPhase.STREAMING

        return value

    def _exhaust(self):
        self._phase = ReaderPhase.EXHAUSTED

        # a caller's stream is left positioned right after the last point
        if not self._stream.owned:
            return

        trailing = self._stream.read(1)
        if trailing:
            self.logger.warning(
                'all the %d declared points were read but the source has more data' % self._meta.point_count)

    @property
    def meta(self) -> Metadata:
        return self._meta

    @property
    def phase(self) -> ReaderPhase:
        return self._phase

    @property
    def point_index(self) -> int:
        '''Index of the next point to decode.'''
        return self._codec.point_index

    def read(self) -> Optional[object]:
        '''Returns the next point or None when there are no more.'''
        return next(self, None)

    def read_all(self) -> List:
        return list(self)

    def close(self):
        self._stream.close()
