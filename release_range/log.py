# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


from copy import copy
import logging
import sys

import termcolor


class RangeFormatter(logging.Formatter):
    level_colors = {
        logging.DEBUG: 'blue',
        logging.INFO: 'green',
        logging.WARNING: 'yellow',
        logging.ERROR: 'red',
        logging.CRITICAL: 'red',
    }

    def __init__(self, *args, stream=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.stream = stream or sys.stderr

    def color_level_name(self, level_name, level_number):
        if not (color := self.level_colors.get(level_number)):
            return str(level_name)

        return termcolor.colored(level_name, color, attrs=['bold'])

    def formatMessage(self, record):
        record_copy = copy(record)
        levelname = record_copy.levelname
        if self.stream.isatty():
            levelname = self.color_level_name(levelname, record_copy.levelno)
        record_copy.__dict__['levelprefix'] = levelname
        return super().formatMessage(record_copy)


def configure_default_logging(
    stdout_level=None,
    force=True,
    print_thread_id=False,
    custom_format_string: str = '',
    stream=None,
):
    if not stdout_level:
        stdout_level = logging.INFO
    if not stream:
        stream = sys.stderr # keep stdout reserved for results

    # make sure to have a clean root logger (in case setup is called multiple times)
    if force:
        handlers = logging.root.handlers
        for h in handlers[:]:
            logging.root.removeHandler(h)
            h.close()

    sh = logging.StreamHandler(stream=stream)
    sh.setLevel(stdout_level)

    fmt = custom_format_string or default_fmt_string(print_thread_id=print_thread_id)
    sh.setFormatter(RangeFormatter(fmt=fmt, stream=stream))

    logging.root.addHandler(hdlr=sh)
    logging.root.setLevel(level=stdout_level)

    # GitPython logs every spawned git-command at debug-level
    logging.getLogger('git').setLevel(logging.WARNING)


def default_fmt_string(print_thread_id: bool=False):
    ptid = print_thread_id
    return f'%(asctime)s [%(levelprefix)s] {"TID:%(thread)d " if ptid else ""}%(name)s: %(message)s'
