import logging
import os
import pexpect
import re
import sys
from utils import debug_level


base_dir = os.path.realpath(f'{os.path.dirname(os.path.realpath(__file__))}/..')
dump_script = f'{base_dir}/scripts/misc/dump-extab.py'


class PexpectHelper:
    default_error_patterns = [
        r'Traceback \(most recent call last\):',
        r'ERROR: [^\r\n]*',
    ]

    def __init__(self):
        self.child = None
        self.error_patterns = self.default_error_patterns

    def spawn(self, *args, **kwargs):
        logging.debug("Spawning '%s'", args)
        self.child = pexpect.spawn(*args, timeout=30, encoding='utf-8', echo=False, **kwargs)
        if debug_level():
            self.log_to(sys.stdout)

    def log_to(self, output_file):
        self.child.logfile_read = output_file

    def wait_for_exit(self):
        self.child.expect(pexpect.EOF)
        self.child.wait()
        return self.child.exitstatus

    def terminate(self):
        self.child.terminate()
        self.wait_for_exit()

    def get_match(self, i=0):
        return self.child.match.group(i)

    def matches(self):
        return self.child.match.groups()

    def expect(self, patterns, timeout=-1):
        if type(patterns) is str:
            patterns = [patterns]

        patterns = list(patterns) + self.error_patterns
        idx = self.child.expect(patterns, timeout=timeout)
        logging.debug("Matched: '%s' %s", self.get_match(), self.matches())

        if idx >= len(patterns) - len(self.error_patterns):
            msg = f'Error: saw {self.get_match()!r} while expecting'
            logging.error(msg)
            self.terminate()
            raise Exception(msg)

        return idx

    def expect_error(self, pattern, timeout=-1):
        self.child.expect(f'ERROR: {pattern}', timeout=timeout)
        return self.get_match()

    def expect_line(self, line):
        self.expect(re_line(line))


def re_line(line):
    # The pty hands back \r\n line endings
    return re.escape(line) + '\r\n'


def spawn_dump(p, table_path, *args, **kwargs):
    cmd_args = [dump_script] + list(args)
    if table_path is not None:
        cmd_args.append(table_path)

    p.spawn(sys.executable, cmd_args, **kwargs)


def expect_flags(p, frame_pointer=False):
    p.expect_line('Flag values:')
    p.expect(r'Has Elf Vector: (Yes|No)\r\n')
    p.expect(r'Large Frame: (Yes|No)\r\n')
    p.expect_line(f'Has Frame Pointer: {"Yes" if frame_pointer else "No"}')
    p.expect(r'Saved CR: (Yes|No)\r\n')
