import struct

import pytest

from pcdstruct.codec import FieldCodec, format_float32, format_float64
from pcdstruct.enum import ValueKind
from pcdstruct.exceptions import DataError
from pcdstruct.schema import FieldDef
from pcdstruct.values import Field


def test_format_float32_shortest():
    assert format_float32(struct.unpack('=f', struct.pack('=f', 0.1))[0]) == '0.1'
    assert format_float32(1.0) == '1.0'
    assert format_float32(float('inf')) == 'inf'
    assert format_float64(0.1) == '0.1'


def test_binary():
    codec = FieldCodec(FieldDef('rgb', ValueKind.U16, 3))

    assert codec.size == 6

    field = Field(ValueKind.U16, [1, 2, 0xffff])
    raw = codec.pack(field)

    assert raw == struct.pack('=3H', 1, 2, 0xffff)
    assert codec.unpack(b'\x00' + raw, offset=1) == field


def test_binary_truncated():
    codec = FieldCodec(FieldDef('x', ValueKind.F64))

    with pytest.raises(DataError) as excinfo:
        codec.unpack(b'\x00' * 5, point_index=7)

    assert excinfo.value.point_index == 7
    assert excinfo.value.field_name == 'x'
    assert str(excinfo.value).startswith("point 7, field 'x': ")


def test_text():
    codec = FieldCodec(FieldDef('x', ValueKind.F32, 2))

    field = codec.parse(['1.5', '-2e3'])

    assert field == Field(ValueKind.F32, [1.5, -2000.0])
    assert codec.format(field) == ['1.5', '-2000.0']

    codec = FieldCodec(FieldDef('label', ValueKind.I8))

    assert codec.parse(['+12']).values == [12]
    assert codec.format(Field(ValueKind.I8, [-3])) == ['-3']


@pytest.mark.parametrize('kind,tokens', [
    (ValueKind.U8, ['256']),
    (ValueKind.U8, ['-1']),
    (ValueKind.I32, ['1.0']),
    (ValueKind.F32, ['one']),
    (ValueKind.F32, ['1e39']),
    (ValueKind.F64, ['1', '2']),
])
def test_text_invalid(kind, tokens):
    codec = FieldCodec(FieldDef('field', kind))

    with pytest.raises(DataError):
        codec.parse(tokens, point_index=0)
