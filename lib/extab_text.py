from errors import MissingFunctionName
from extab import ExAction, decode_extab


class FunctionNames:
    """Dtor names, handed out in the order dtor-bearing actions appear."""

    def __init__(self, names):
        self.names = list(names)
        self.index = 0

    def next_name(self):
        if self.index >= len(self.names):
            raise MissingFunctionName(self.index, len(self.names))

        name = self.names[self.index]
        self.index += 1
        return name


def yes_no(val):
    return 'Yes' if val else 'No'


def format_save_range(count, prefix):
    # The top N registers of the bank are saved
    start = 31 - (count - 1)
    if start == 31:
        return f'{prefix}31'
    return f'{prefix}{start}-{prefix}31'


def format_flags(table):
    lines = [
        'Flag values:',
        f'Has Elf Vector: {yes_no(table.has_elf_vector)}',
        f'Large Frame: {yes_no(table.large_frame)}',
        f'Has Frame Pointer: {yes_no(table.has_frame_pointer)}',
        f'Saved CR: {yes_no(table.saved_cr)}',
    ]

    if table.fpr_save_range != 0:
        lines.append(f'Saved FPR range: {format_save_range(table.fpr_save_range, "fp")}')

    if table.gpr_save_range != 0:
        lines.append(f'Saved GPR range: {format_save_range(table.gpr_save_range, "r")}')

    return '\n'.join(lines) + '\n'


def format_pc_actions(table):
    lines = ['PC actions:']
    for action in table.pc_actions:
        if action.start_pc != action.end_pc:
            lines.append(f'PC={action.start_pc:08X}:{action.end_pc:08X}, Action: {action.action_offset:06X}')
        else:
            lines.append(f'PC={action.start_pc:08X}, Action: {action.action_offset:06X}')

    return '\n'.join(lines) + '\n'


def local(offset, reg):
    return f'0x{offset:X}({reg})'


def cond_line(condition, register_mode, reg):
    if register_mode:
        return f'Cond: r{condition}'
    return f'Cond: {local(condition, reg)}'


def member_line(object_pointer, member_offset, register_mode, reg):
    if register_mode:
        return f'Member: 0x{member_offset:X}(r{object_pointer})'
    return f'Member: {local(object_pointer, reg)}+0x{member_offset:X}'


def format_action_fields(action, reg):
    """Return the field lines of one action, decoded from its payload.

    Bit 7 of action_param selects register addressing for the pointer or
    member operand. The conditional variants use bit 7 for the condition
    and bit 6 for the operand.
    """
    atype = action.action_type
    param = action.action_param
    mode7 = (param & 0x80) != 0
    mode6 = (param & 0x40) != 0
    data = action.decode()

    if atype == ExAction.Branch:
        return [f'Action: {data.target_offset:06X}']

    if atype == ExAction.DestroyLocal:
        return [f'Local: {local(data.local_offset, reg)}']

    if atype == ExAction.DestroyLocalCond:
        return [f'Local: {local(data.local_offset, reg)}',
                cond_line(data.condition, mode7, reg)]

    if atype == ExAction.DestroyLocalPointer:
        if mode7:
            return [f'Pointer: r{data.local_pointer}']
        return [f'Pointer: {local(data.local_pointer, reg)}']

    if atype == ExAction.DestroyLocalArray:
        return [f'Array: {local(data.local_array, reg)}',
                f'Elements: {data.elements}',
                f'Size: {data.element_size}']

    if atype in (ExAction.DestroyBase, ExAction.DestroyMember):
        return [member_line(data.object_pointer, data.member_offset, mode7, reg)]

    if atype == ExAction.DestroyMemberCond:
        return [member_line(data.object_pointer, data.member_offset, mode6, reg),
                cond_line(data.condition, mode7, reg)]

    if atype == ExAction.DestroyMemberArray:
        if mode7:
            member = member_line(data.object_pointer, data.member_offset, True, reg)
        else:
            # Existing reports print this offset in decimal
            member = f'Member: {local(data.object_pointer, reg)}+0x{data.member_offset}'
        return [member,
                f'Elements: {data.elements}',
                f'Size: {data.element_size}']

    if atype in (ExAction.DeletePointer, ExAction.DeletePointerCond):
        register_mode = mode7 if atype == ExAction.DeletePointer else mode6
        if register_mode:
            # Trailing ')' matches existing reports
            lines = [f'Pointer: r{data.object_pointer})']
        else:
            lines = [f'Pointer: {local(data.object_pointer, reg)}']

        if atype == ExAction.DeletePointerCond:
            lines.append(cond_line(data.condition, mode7, reg))
        return lines

    if atype in (ExAction.CatchBlock, ExAction.CatchBlock32):
        return [f'Local: {local(data.cinfo_ref, reg)}',
                f'PC: {data.catch_pc_offset:08X}',
                f'catch_type_addr: {data.catch_type:08X}']

    if atype == ExAction.ActiveCatchBlock:
        return [f'Local: {local(data.cinfo_ref, reg)}']

    if atype == ExAction.Specification:
        return [f'Local: {local(data.cinfo_ref, reg)}',
                f'PC: {data.pc_offset:08X}',
                f'Types: {data.type_count}']

    # EndOfList and Terminate carry no fields
    return []


def format_exception_action(action, reg, names):
    entry = f'{action.action_offset:06X}:\nType: {action.action_type.name_of()}\n'

    lines = format_action_fields(action, reg)
    if action.has_dtor_ref():
        lines.append(f'Dtor: "{names.next_name()}"')
    entry += '\n'.join(lines)

    if action.has_end_bit:
        entry += '.'

    return entry + '\n'


def format_exception_actions(table, names):
    reg = 'FP' if table.has_frame_pointer else 'SP'

    s = 'Exception actions:\n'
    for action in table.exception_actions:
        s += format_exception_action(action, reg, names)

    return s


def format_extab(table, func_names):
    names = FunctionNames(func_names)

    s = format_flags(table) + '\n'

    if table.pc_actions:
        s += format_pc_actions(table) + '\n'

    if table.exception_actions:
        s += format_exception_actions(table, names)

    return s


def decode_extab_to_text(data, func_names):
    return format_extab(decode_extab(data), func_names)
