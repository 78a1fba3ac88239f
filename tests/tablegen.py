import struct

TERMINATOR = bytes(4)


def header(flag_val=0, et_field=0):
    return struct.pack('>HH', flag_val, et_field)


def pc_range(start_pc, size, action_offset):
    return struct.pack('>IHH', start_pc, size >> 2, action_offset)


def action(action_type, param=0, payload=b'', end=False):
    type_byte = int(action_type) | (0x80 if end else 0)
    return bytes([type_byte, param]) + payload


def table(flag_val=0, et_field=0, ranges=(), actions=()):
    data = header(flag_val, et_field)
    for r in ranges:
        data += pc_range(*r)
    data += TERMINATOR
    for a in actions:
        data += a
    return data


def flags(elf_vector=False, large_frame=False, frame_pointer=False,
          saved_cr=False, fpr=0, gpr=0):
    return ((int(elf_vector) << 1) | (int(large_frame) << 3) |
            (int(frame_pointer) << 4) | (int(saved_cr) << 5) |
            (fpr << 6) | (gpr << 11))
