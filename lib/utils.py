import os
import logging
import sys


def setup_logging(format='%(levelname)s: %(message)s'):
    level = logging.INFO
    if '-v' in sys.argv:
        level = logging.DEBUG

    logging.basicConfig(format=format, level=level, stream=sys.stdout)


def debug_level():
    return logging.getLogger().getEffectiveLevel() <= logging.DEBUG


def get_env_var(name, default=None):
    val = os.environ.get(name, None)
    if val:
        logging.debug("Using env[%s] = '%s'", name, val)
        return val

    return default


def get_table_path():
    path = get_env_var('EXTAB_TABLE', None)
    if path:
        return path

    path = 'extab.s'
    if os.path.isfile(path):
        return path

    return None


def read_binary_table(path):
    with open(path, 'rb') as f:
        return f.read()
