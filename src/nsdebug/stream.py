"""Default sink and terminal capability checks.

Messages go to whatever ``sys.stderr`` is at call time, so redirection
(and pytest's capsys) is honored without re-creating loggers.
"""

import os
import sys

from .formatting import BASIC_COLORS, EXTENDED_COLORS


def log_to_stderr(text: str) -> None:
    """Write one formatted message line to stderr."""
    print(text, file=sys.stderr)


def stream_is_tty(stream=None) -> bool:
    """True when the stream (default: stderr) is an interactive terminal."""
    stream = stream if stream is not None else sys.stderr
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        # Closed or file-like objects without a terminal
        return False


def color_palette(environ=None) -> tuple:
    """Pick the 256-color palette when the terminal advertises it."""
    environ = os.environ if environ is None else environ
    term = environ.get('TERM', '')
    colorterm = environ.get('COLORTERM', '').lower()
    if '256' in term or colorterm in ('truecolor', '24bit'):
        return EXTENDED_COLORS
    return BASIC_COLORS
