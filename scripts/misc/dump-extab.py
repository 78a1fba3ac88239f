#!/usr/bin/python3
#
# Dump a CodeWarrior PowerPC exception table (extab) in readable form.
#
# The table is given as a listing of .4byte/.2byte/.byte directives, with
# dtor addresses replaced by quoted function names, eg:
#
#   .4byte 0x18080000
#   .4byte 0x00000000
#   .4byte 0x82000008
#   .4byte "__dt__8MyObjectFv"
#
# $ ./scripts/misc/dump-extab.py extab.s
#
# Or as raw table bytes, with the names passed in order:
#
# $ ./scripts/misc/dump-extab.py --binary -n __dt__8MyObjectFv extab.bin

import argparse
import logging
import os
import sys
sys.path.append(f'{os.path.dirname(os.path.realpath(sys.argv[0]))}/../../lib')
from asm_table import read_table_file
from errors import ExtabError
from extab_text import decode_extab_to_text
from utils import setup_logging, get_table_path, read_binary_table


def main(args):
    parser = argparse.ArgumentParser(description='Dump a PowerPC exception table')
    parser.add_argument('-v', dest='verbose', action='store_true', help='Verbose logging')
    parser.add_argument('--binary', action='store_true', help='Table file holds raw bytes')
    parser.add_argument('-n', '--name', dest='names', action='append', default=[],
                        help='Dtor function name, in table order (with --binary)')
    parser.add_argument('path', nargs='?', help='Table file (default $EXTAB_TABLE)')
    args = parser.parse_args(args)

    path = args.path
    if path is None:
        path = get_table_path()
        if path is None:
            logging.error('No table file given and $EXTAB_TABLE not set')
            return 1

    logging.debug('Reading table from %s', path)

    try:
        if args.binary:
            data = read_binary_table(path)
            names = args.names
        else:
            data, names = read_table_file(path)
            names += args.names

        text = decode_extab_to_text(data, names)
    except OSError as e:
        logging.error(f'Failed to open file "{path}": {e.strerror}')
        return 1
    except ExtabError as e:
        logging.error(f'Failed to decode extab data: {e}')
        return 1

    print(text, end='')
    return 0


setup_logging()

try:
    sys.exit(main(sys.argv[1:]))
except (KeyboardInterrupt, BrokenPipeError):
    pass
