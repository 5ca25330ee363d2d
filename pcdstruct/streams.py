import io
import logging
import os

from .exceptions import PcdIOError


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around path/bytes/file object to
    uniform its properties: the reader needs read() and readline(), the
    writer needs write() and flush(), and both need to know if they are
    responsible for closing the underlying object.

    Any OSError coming from the underlying object is raised as PcdIOError.'''
    def __init__(self, obj, flags='r'):
        '''Here we normalize the object in order to be accessed as a binary file object'''
        if flags not in ('r', 'w'):
            raise ValueError(f"flags must be 'r' or 'w', not {flags!r}")

        self.flags = flags
        self.obj = obj
        self.owned = False  # True when we built the underlying object ourselves

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, self.init_fileobj)

        init_method()

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.obj!r}, flags={self.flags!r})>'

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def _open(self, path):
        logger.debug('opening path \'%s\' with flags \'%s\'' % (path, self.flags))
        try:
            self.obj = open(path, self.flags + 'b')
        except OSError as e:
            raise PcdIOError(f"cannot open '{path}': {e}", path=path) from e
        self.owned = True

    def init_str(self):
        '''We think this is a path'''
        self._open(self.obj)

    def init_PosixPath(self):
        self._open(os.fspath(self.obj))

    def init_WindowsPath(self):
        self._open(os.fspath(self.obj))

    def init_bytes(self):
        '''We think these are raw bytes'''
        if self.flags != 'r':
            raise ValueError('raw bytes can only be read')
        self.obj = io.BytesIO(self.obj)
        self.owned = True

    def init_bytearray(self):
        self.init_bytes()

    def init_fileobj(self):
        '''Anything else must quack like a binary file'''
        needed = 'read' if self.flags == 'r' else 'write'
        if not hasattr(self.obj, needed):
            raise ValueError(f"'{self.obj.__class__.__name__}' can't be used as a stream, it has no {needed}()")

        if isinstance(self.obj, io.TextIOBase):
            raise ValueError('text streams are not supported, open the file in binary mode')

    def read(self, size=-1) -> bytes:
        try:
            return self.obj.read(size)
        except OSError as e:
            raise PcdIOError(f'read failed: {e}') from e

    def readline(self) -> bytes:
        try:
            return self.obj.readline()
        except OSError as e:
            raise PcdIOError(f'read failed: {e}') from e

    def write(self, data: bytes) -> int:
        try:
            return self.obj.write(data)
        except OSError as e:
            raise PcdIOError(f'write failed: {e}') from e

    def flush(self):
        if not hasattr(self.obj, 'flush'):
            return

        try:
            self.obj.flush()
        except OSError as e:
            raise PcdIOError(f'flush failed: {e}') from e

    def close(self):
        '''Close the underlying object only if we opened it.'''
        if not self.owned:
            return

        logger.debug('closing %r' % self.obj)
        self.owned = False
        try:
            self.obj.close()
        except OSError as e:
            raise PcdIOError(f'close failed: {e}') from e
