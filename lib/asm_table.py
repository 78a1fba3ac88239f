import logging
import re
from errors import DirectiveError


directive_widths = {
    '.byte': 1,
    '.2byte': 2,
    '.4byte': 4,
}

label_re = re.compile(r'^[\w.@$]+:$')


def is_skipped(line):
    if not line:
        return True

    if line.startswith('#') or line.startswith('//'):
        return True

    return label_re.match(line) is not None


def parse_value(token, width, lineno, line):
    try:
        val = int(token[2:], 16)
    except ValueError:
        raise DirectiveError(lineno, line, 'bad hex value') from None

    if val >= 1 << (width * 8):
        raise DirectiveError(lineno, line, f'value does not fit in {width} bytes')

    return val.to_bytes(width, 'big')


def parse_table_lines(lines):
    """Convert a directive listing into table bytes and dtor names.

    Numeric operands must be 0x-prefixed hex. Any other operand is a
    function name: it is collected, in order, and zero bytes are emitted
    in its place.
    """
    data = bytearray()
    names = []

    for lineno, line in enumerate(lines, start=1):
        stripped = line.strip()
        if is_skipped(stripped):
            continue

        tokens = stripped.split(None, 1)
        width = directive_widths.get(tokens[0])
        if width is None:
            raise DirectiveError(lineno, line, 'expected .byte, .2byte or .4byte')

        if len(tokens) < 2:
            raise DirectiveError(lineno, line, 'missing operand')

        value = tokens[1].strip()
        if value.lower().startswith('0x'):
            data += parse_value(value, width, lineno, line)
            continue

        if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
            value = value[1:-1]

        logging.debug('line %d: function name %s', lineno, value)
        names.append(value)
        data += bytes(width)

    return bytes(data), names


def read_table_file(path):
    with open(path) as f:
        return parse_table_lines(f)
