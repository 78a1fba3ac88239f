import logging
import struct
from collections import namedtuple
from enum import IntEnum

from cursor import ByteCursor
from errors import InvalidActionType, InvalidEmptyTable, OutOfBounds, TableTooShort


class ExAction(IntEnum):
    EndOfList = 0
    Branch = 1
    DestroyLocal = 2
    DestroyLocalCond = 3
    DestroyLocalPointer = 4
    DestroyLocalArray = 5
    DestroyBase = 6
    DestroyMember = 7
    DestroyMemberCond = 8
    DestroyMemberArray = 9
    DeletePointer = 10
    DeletePointerCond = 11
    CatchBlock = 12
    ActiveCatchBlock = 13
    Terminate = 14
    Specification = 15
    CatchBlock32 = 16

    @classmethod
    def from_int(cls, val, offset=None):
        try:
            return cls(val)
        except ValueError:
            raise InvalidActionType(val, offset) from None

    def name_of(self):
        return ACTION_NAMES[self]


ACTION_NAMES = [
    'NULL',
    'BRANCH',
    'DESTROYLOCAL',
    'DESTROYLOCALCOND',
    'DESTROYLOCALPOINTER',
    'DESTROYLOCALARRAY',
    'DESTROYBASE',
    'DESTROYMEMBER',
    'DESTROYMEMBERCOND',
    'DESTROYMEMBERARRAY',
    'DELETEPOINTER',
    'DELETEPOINTERCOND',
    'CATCHBLOCK (Small)',
    'ACTIVECATCHBLOCK',
    'TERMINATE',
    'SPECIFICATION',
    'CATCHBLOCK (Large)',
]

no_dtor_actions = {
    ExAction.Branch,
    ExAction.CatchBlock,
    ExAction.ActiveCatchBlock,
    ExAction.Terminate,
    ExAction.Specification,
    ExAction.CatchBlock32,
}


def has_dtor_ref(action_type):
    if action_type == ExAction.EndOfList:
        logging.warning('Null action passed to has_dtor_ref()')
        return False

    return action_type not in no_dtor_actions


# Payload variants, one per action type. The layout of each follows the
# type and param bytes of the record.
EndOfList = namedtuple('EndOfList', [])
Branch = namedtuple('Branch', ['target_offset'])
DestroyLocal = namedtuple('DestroyLocal', ['local_offset', 'dtor'])
DestroyLocalCond = namedtuple('DestroyLocalCond', ['condition', 'local_offset', 'dtor'])
DestroyLocalPointer = namedtuple('DestroyLocalPointer', ['local_pointer', 'dtor'])
DestroyLocalArray = namedtuple('DestroyLocalArray', ['local_array', 'elements', 'element_size', 'dtor'])
DestroyBase = namedtuple('DestroyBase', ['object_pointer', 'member_offset', 'dtor'])
DestroyMember = namedtuple('DestroyMember', ['object_pointer', 'member_offset', 'dtor'])
DestroyMemberCond = namedtuple('DestroyMemberCond', ['condition', 'object_pointer', 'member_offset', 'dtor'])
DestroyMemberArray = namedtuple('DestroyMemberArray', ['object_pointer', 'member_offset', 'elements',
                                                       'element_size', 'dtor'])
DeletePointer = namedtuple('DeletePointer', ['object_pointer', 'dtor'])
DeletePointerCond = namedtuple('DeletePointerCond', ['condition', 'object_pointer', 'dtor'])
CatchBlock = namedtuple('CatchBlock', ['catch_type', 'catch_pc_offset', 'cinfo_ref'])
ActiveCatchBlock = namedtuple('ActiveCatchBlock', ['cinfo_ref'])
Terminate = namedtuple('Terminate', [])
Specification = namedtuple('Specification', ['type_count', 'pc_offset', 'cinfo_ref', 'types'])
CatchBlock32 = namedtuple('CatchBlock32', ['catch_type', 'catch_pc_offset', 'cinfo_ref'])

payload_formats = {
    ExAction.EndOfList:           ('>',       EndOfList),
    ExAction.Branch:              ('>H',      Branch),
    ExAction.DestroyLocal:        ('>HI',     DestroyLocal),
    ExAction.DestroyLocalCond:    ('>HHI',    DestroyLocalCond),
    ExAction.DestroyLocalPointer: ('>HI',     DestroyLocalPointer),
    ExAction.DestroyLocalArray:   ('>HHHI',   DestroyLocalArray),
    ExAction.DestroyBase:         ('>HII',    DestroyBase),
    ExAction.DestroyMember:       ('>HII',    DestroyMember),
    ExAction.DestroyMemberCond:   ('>HHII',   DestroyMemberCond),
    ExAction.DestroyMemberArray:  ('>HIIII',  DestroyMemberArray),
    ExAction.DeletePointer:       ('>HI',     DeletePointer),
    ExAction.DeletePointerCond:   ('>HHI',    DeletePointerCond),
    ExAction.CatchBlock:          ('>2xIHH',  CatchBlock),
    ExAction.ActiveCatchBlock:    ('>H',      ActiveCatchBlock),
    ExAction.Terminate:           ('>',       Terminate),
    ExAction.Specification:       ('>HII',    Specification),
    ExAction.CatchBlock32:        ('>2xIII',  CatchBlock32),
}

SPEC_TYPE = struct.Struct('>I')


def action_payload_size(action_type, cursor):
    """Size of the payload following the type and param bytes.

    The cursor must sit at the start of the payload. For a Specification
    record the type list length is peeked from it without advancing.
    """
    fmt, _ = payload_formats[action_type]
    size = struct.calcsize(fmt)

    if action_type == ExAction.Specification:
        size += cursor.peek_u16() * SPEC_TYPE.size

    return size


def decode_payload(action_type, payload):
    action_type = ExAction.from_int(action_type)
    fmt, variant = payload_formats[action_type]

    size = struct.calcsize(fmt)
    if len(payload) < size:
        raise OutOfBounds(0, size, len(payload))

    fields = struct.unpack_from(fmt, payload)

    if action_type == ExAction.Specification:
        count = fields[0]
        end = size + count * SPEC_TYPE.size
        if len(payload) < end:
            raise OutOfBounds(size, count * SPEC_TYPE.size, len(payload))

        types = [t[0] for t in SPEC_TYPE.iter_unpack(payload[size:end])]
        return Specification(count, fields[1], fields[2], types)

    return variant(*fields)


PCAction = namedtuple('PCAction', ['start_pc', 'end_pc', 'action_offset'])


class ExceptionAction(namedtuple('ExceptionAction', ['action_offset', 'action_type', 'action_param',
                                                     'has_end_bit', 'bytes'])):
    __slots__ = ()

    def has_dtor_ref(self):
        return has_dtor_ref(self.action_type)

    def decode(self):
        return decode_payload(self.action_type, self.bytes)


def _bit(value, shift):
    return ((value >> shift) & 1) == 1


class ExceptionTableData(namedtuple('ExceptionTableData', ['flag_val', 'et_field',
                                                           'pc_actions', 'exception_actions'])):
    """A decoded exception table.

    The flag fields are all views of flag_val:

      bit 1       has_elf_vector
      bit 3       large_frame
      bit 4       has_frame_pointer
      bit 5       saved_cr
      bits 6-10   fpr_save_range
      bits 11-15  gpr_save_range
    """
    __slots__ = ()

    @property
    def has_elf_vector(self):
        return _bit(self.flag_val, 1)

    @property
    def large_frame(self):
        return _bit(self.flag_val, 3)

    @property
    def has_frame_pointer(self):
        return _bit(self.flag_val, 4)

    @property
    def saved_cr(self):
        return _bit(self.flag_val, 5)

    @property
    def fpr_save_range(self):
        return (self.flag_val >> 6) & 0b11111

    @property
    def gpr_save_range(self):
        return (self.flag_val >> 11) & 0b11111

    def dtor_actions(self):
        for action in self.exception_actions:
            if action.has_dtor_ref():
                yield action

    def dtor_count(self):
        return sum(1 for _ in self.dtor_actions())


def iter_pc_actions(cursor):
    # Ranges run until a zero word, which is left for the caller to skip
    while cursor.peek_u32() != 0:
        start_pc = cursor.read_u32()
        # Range size is stored as size >> 2
        range_size = cursor.read_u16() * 4
        action_offset = cursor.read_u16()
        yield PCAction(start_pc, start_pc + range_size, action_offset)


def parse_action_entry(cursor):
    action_offset = cursor.tell()
    type_byte = cursor.read_u8()
    action_type = ExAction.from_int(type_byte & 0x7F, action_offset)
    action_param = cursor.read_u8()

    size = action_payload_size(action_type, cursor)
    payload = cursor.take(size)

    return ExceptionAction(action_offset, action_type, action_param,
                           (type_byte & 0x80) != 0, payload)


def iter_exception_actions(cursor):
    while not cursor.at_end():
        yield parse_action_entry(cursor)


def decode_extab(data):
    cursor = ByteCursor(data)
    if len(cursor) < 8:
        raise TableTooShort(len(cursor))

    flag_val = cursor.read_u16()
    et_field = cursor.read_u16()
    logging.debug('extab header: flags %04X, et_field %04X', flag_val, et_field)

    if len(cursor) == 8:
        terminator = cursor.peek_u32()
        if terminator != 0:
            raise InvalidEmptyTable(terminator)

    pc_actions = tuple(iter_pc_actions(cursor))
    cursor.skip(4)

    exception_actions = tuple(iter_exception_actions(cursor))
    logging.debug('Decoded %d PC actions, %d exception actions',
                  len(pc_actions), len(exception_actions))

    return ExceptionTableData(flag_val, et_field, pc_actions, exception_actions)
