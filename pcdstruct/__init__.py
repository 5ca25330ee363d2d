"""
# PCD reader and writer.

A PCD file is a textual header followed by the points, either one line of
whitespace separated tokens for each point (DATA ascii) or a packed sequence
of fixed size binary records (DATA binary).

The header describes the points with a schema, i.e. an ordered list of
fields, each with a name, a primitive kind (signed, unsigned or floating
point of a given size) and a number of elements. The same order drives both
the tokens of a text line and the byte layout of a binary point.

Two main operations are defined:

 1. reading: parse the header and then decode one point at a time, as a
    schema-free Record or as a typed value (see PointRecord);

 2. writing: emit the header up front and then encode one point at a time,
    the number of points pushed must match the one declared.

A reader is in one of the states OPENED, STREAMING, EXHAUSTED or FAILED; a
writer in one of INITIALIZED, WRITING or FINISHED.
"""
from .core import PointRecord
from .enum import DataKind, ReaderPhase, TypeKind, ValueKind, WriterPhase
from .header import Metadata, ViewPoint
from .reader import Reader
from .schema import FieldDef, Schema
from .values import Field, Record
from .writer import Writer
