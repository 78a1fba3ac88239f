import struct
from errors import OutOfBounds


U8 = struct.Struct('>B')
U16 = struct.Struct('>H')
U32 = struct.Struct('>I')


def _read(fmt, data, offset):
    if offset < 0 or offset + fmt.size > len(data):
        raise OutOfBounds(offset, fmt.size, len(data))

    return fmt.unpack_from(data, offset)[0], offset + fmt.size


def read_u8(data, offset):
    return _read(U8, data, offset)


def read_u16(data, offset):
    return _read(U16, data, offset)


def read_u32(data, offset):
    return _read(U32, data, offset)


class ByteCursor:
    """Big-endian reader over a table buffer.

    Every read is bounds checked and either advances the offset by the
    width read, or leaves it alone for a look-ahead.
    """

    def __init__(self, data, offset=0):
        self.data = bytes(data)
        self.offset = offset

    def __len__(self):
        return len(self.data)

    def tell(self):
        return self.offset

    def remaining(self):
        return len(self.data) - self.offset

    def at_end(self):
        return self.offset >= len(self.data)

    def _read(self, fn, advance):
        val, offset = fn(self.data, self.offset)
        if advance:
            self.offset = offset
        return val

    def read_u8(self, advance=True):
        return self._read(read_u8, advance)

    def read_u16(self, advance=True):
        return self._read(read_u16, advance)

    def read_u32(self, advance=True):
        return self._read(read_u32, advance)

    def peek_u16(self):
        return self.read_u16(advance=False)

    def peek_u32(self):
        return self.read_u32(advance=False)

    def take(self, size):
        end = self.offset + size
        if size < 0 or end > len(self.data):
            raise OutOfBounds(self.offset, size, len(self.data))

        chunk = self.data[self.offset:end]
        self.offset = end
        return chunk

    def skip(self, size):
        self.take(size)
