import struct
from enum import Enum, auto


class TypeKind(Enum):
    '''The one-letter tag used by the TYPE line of the header.'''
    I = 'I'
    U = 'U'
    F = 'F'


class ValueKind(Enum):
    '''The primitive kinds a PCD field can hold.

    The value of each member is the struct format character of the kind,
    this makes possible to build the binary codec directly from it.'''
    I8  = 'b'
    I16 = 'h'
    I32 = 'i'
    U8  = 'B'
    U16 = 'H'
    U32 = 'I'
    F32 = 'f'
    F64 = 'd'

    @property
    def format(self) -> str:
        return self.value

    @property
    def size(self) -> int:
        # '=' means native order with standard sizes and no alignment
        return struct.calcsize('=' + self.value)

    @property
    def type_kind(self) -> TypeKind:
        if self in (ValueKind.F32, ValueKind.F64):
            return TypeKind.F
        if self in (ValueKind.U8, ValueKind.U16, ValueKind.U32):
            return TypeKind.U
        return TypeKind.I

    @property
    def is_float(self) -> bool:
        return self.type_kind == TypeKind.F

    @property
    def bounds(self):
        '''Inclusive range of the integer kinds, None for floating point.'''
        if self.is_float:
            return None

        bits = self.size * 8
        if self.type_kind == TypeKind.U:
            return 0, (1 << bits) - 1

        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1

    @classmethod
    def from_type_size(cls, type_kind: TypeKind, size: int) -> "ValueKind":
        for kind in cls:
            if kind.type_kind == type_kind and kind.size == size:
                return kind

        raise ValueError(f'field type {type_kind.value} with size {size} is not supported')

    @classmethod
    def from_format(cls, fmt: str) -> "ValueKind":
        try:
            return cls(fmt)
        except ValueError:
            raise ValueError(f"'{fmt}' is not a struct format usable for a PCD field") from None


class DataKind(Enum):
    '''How the points are stored after the header.'''
    ASCII = 'ascii'
    BINARY = 'binary'
    BINARY_COMPRESSED = 'binary_compressed'

    @property
    def is_supported(self) -> bool:
        return self != DataKind.BINARY_COMPRESSED


class ReaderPhase(Enum):
    OPENED    = 0
    STREAMING = auto()
    EXHAUSTED = auto()
    FAILED    = auto()


class WriterPhase(Enum):
    INITIALIZED = 0
    WRITING     = auto()
    FINISHED    = auto()
