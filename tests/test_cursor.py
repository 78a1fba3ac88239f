import pytest

from cursor import ByteCursor, read_u8, read_u16, read_u32
from errors import ExtabError, OutOfBounds


DATA = bytes([0x12, 0x34, 0x56, 0x78, 0x9A, 0xBC])


def test_module_reads_return_new_offset():
    assert read_u8(DATA, 0) == (0x12, 1)
    assert read_u16(DATA, 1) == (0x3456, 3)
    assert read_u32(DATA, 2) == (0x56789ABC, 6)


def test_module_read_past_end():
    with pytest.raises(OutOfBounds) as e:
        read_u32(DATA, 3)

    assert e.value.offset == 3
    assert e.value.width == 4
    assert e.value.length == 6


def test_negative_offset():
    with pytest.raises(OutOfBounds):
        read_u8(DATA, -1)


def test_cursor_advances():
    c = ByteCursor(DATA)
    assert c.read_u16() == 0x1234
    assert c.tell() == 2
    assert c.read_u8() == 0x56
    assert c.read_u8() == 0x78
    assert c.remaining() == 2
    assert not c.at_end()
    assert c.read_u16() == 0x9ABC
    assert c.at_end()


def test_peek_does_not_advance():
    c = ByteCursor(DATA)
    assert c.peek_u32() == 0x12345678
    assert c.read_u32(advance=False) == 0x12345678
    assert c.peek_u16() == 0x1234
    assert c.tell() == 0


def test_failed_read_leaves_offset():
    c = ByteCursor(DATA, 4)
    with pytest.raises(OutOfBounds):
        c.read_u32()
    assert c.tell() == 4


def test_take_and_skip():
    c = ByteCursor(DATA)
    c.skip(1)
    assert c.take(3) == bytes([0x34, 0x56, 0x78])
    assert c.tell() == 4

    with pytest.raises(OutOfBounds):
        c.take(3)

    assert c.take(0) == b''
    assert c.take(2) == bytes([0x9A, 0xBC])


def test_out_of_bounds_is_extab_error():
    with pytest.raises(ExtabError):
        ByteCursor(b'').read_u8()
