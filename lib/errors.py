class ExtabError(Exception):
    pass


class TableTooShort(ExtabError):
    def __init__(self, length):
        super().__init__(f'Table is {length} bytes long, must be at least 8 bytes')
        self.length = length


class InvalidEmptyTable(ExtabError):
    def __init__(self, terminator):
        super().__init__('Invalid extab table, table is 8 bytes long but '
                         f'terminator is not zero ({terminator:08X})')
        self.terminator = terminator


class InvalidActionType(ExtabError):
    def __init__(self, value, offset=None):
        msg = f'Invalid action value {value}'
        if offset is not None:
            msg += f' at offset {offset:06X}'
        super().__init__(msg)
        self.value = value
        self.offset = offset


class OutOfBounds(ExtabError):
    def __init__(self, offset, width, length):
        super().__init__(f'Read of {width} bytes at offset {offset:#x} '
                         f'runs past end of {length} byte table')
        self.offset = offset
        self.width = width
        self.length = length


class MissingFunctionName(ExtabError):
    def __init__(self, index, count):
        super().__init__(f'No function name for dtor reference {index}, '
                         f'only {count} names supplied')
        self.index = index
        self.count = count


class DirectiveError(ExtabError):
    def __init__(self, lineno, line, reason):
        super().__init__(f'line {lineno}: {reason}: {line.strip()!r}')
        self.lineno = lineno
        self.line = line
        self.reason = reason
