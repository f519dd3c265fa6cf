import numpy as np
import pytest

from tmj_tiles.byteorder import bytes_to_array, i32_to_le_bytes, le_bytes_to_i32
from tmj_tiles.errors import ByteAlignmentError


def test_little_endian_signed():
    buf = bytes.fromhex("02000000" "ffffffff" "00000080" "ffffff7f")
    assert le_bytes_to_i32(buf) == [2, -1, -2147483648, 2147483647]


def test_document_order_is_preserved():
    tiles = [5, 0, 0, 3, 1, 7]
    assert le_bytes_to_i32(i32_to_le_bytes(tiles)) == tiles


@pytest.mark.parametrize("length", [1, 2, 3, 5, 7, 4097])
def test_length_must_be_multiple_of_four(length):
    with pytest.raises(ByteAlignmentError) as excinfo:
        le_bytes_to_i32(b"\x00" * length)
    assert excinfo.value.length == length
    assert excinfo.value.element_size == 4
    assert "not a multiple of element size" in str(excinfo.value)


def test_other_widths_and_byte_orders():
    buf = bytes.fromhex("0102" "0304")
    assert bytes_to_array(buf, "<u2").tolist() == [0x0201, 0x0403]
    assert bytes_to_array(buf, ">u2").tolist() == [0x0102, 0x0304]
    assert bytes_to_array(buf, ">i4").tolist() == [0x01020304]
    with pytest.raises(ByteAlignmentError):
        bytes_to_array(buf, "<i8")


def test_result_owns_its_data():
    buf = bytearray(i32_to_le_bytes([1, 2]))
    arr = bytes_to_array(buf, "<i4")
    buf[0] = 9
    assert arr.tolist() == [1, 2]
    assert arr.flags.writeable


def test_empty_buffer():
    arr = bytes_to_array(b"", np.int32)
    assert arr.size == 0
    assert le_bytes_to_i32(b"") == []
