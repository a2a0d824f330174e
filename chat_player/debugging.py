"""Debugging module for chat_player"""

import sys
import os

from .metadata import __program__ as logger_name
from .utils.core import pause

from enum import Enum


class TestingException(Exception):
    """Raised when something unexpected happens while in testing mode"""


class TestingModes(Enum):
    EXIT_ON_DEBUG = 2
    PAUSE_ON_DEBUG = 1
    NONE = 0


TESTING_MODE = TestingModes.NONE


def set_testing_mode(new_mode):
    global TESTING_MODE
    TESTING_MODE = new_mode


def log(level, items, to_pause=False, to_exit=False):
    logger_at_level = getattr(logger, level, None)
    if logger_at_level:
        if not isinstance(items, (tuple, list)):
            items = [items]
        for item in items:
            logger_at_level(item)

        if to_exit and TESTING_MODE == TestingModes.EXIT_ON_DEBUG:
            raise TestingException(
                'Testing exception encountered, exiting program')

        if to_pause and TESTING_MODE == TestingModes.PAUSE_ON_DEBUG:
            pause()


def debug_log(*items):
    """Method which simplifies the logging of debugging messages"""
    log('debug', items, True, True)


try:
    import colorama
    colorama.init()
except (ImportError, OSError):
    HAS_COLORAMA = False
else:
    HAS_COLORAMA = True


def supports_colour():
    """
    Return True if the running system's terminal supports colour,
    and False otherwise.
    """
    # isatty is not always implemented
    is_a_tty = hasattr(sys.stdout, 'isatty') and sys.stdout.isatty()

    return is_a_tty and (
        sys.platform != 'win32' or
        HAS_COLORAMA or
        'ANSICON' in os.environ or
        'WT_SESSION' in os.environ or
        os.environ.get('TERM_PROGRAM') == 'vscode'
    )


if supports_colour():
    import colorlog as log_module
    handler = log_module.StreamHandler()
    handler.setFormatter(log_module.ColoredFormatter(
        '[%(log_color)s%(levelname)s%(reset)s] %(message)s',
        log_colors={
            'DEBUG': 'cyan',
            'INFO': 'green',
            'WARNING': 'yellow',
            'ERROR': 'red',
            'CRITICAL': 'bold_red',
        })
    )

else:  # fallback support
    import logging as log_module
    handler = log_module.StreamHandler()
    handler.setFormatter(log_module.Formatter('[%(levelname)s] %(message)s'))

# Create logger object for this module
logger = log_module.getLogger(logger_name)

# Define which loggers to display
loggers = [log_module.getLogger(name) for name in (logger_name, 'urllib3')]
for _logger in loggers:
    _logger.addHandler(handler)


def set_log_level(level):
    level_name = level.upper()
    for _logger in loggers:
        _logger.setLevel(level_name)


def disable_logger():
    logger.disabled = True
