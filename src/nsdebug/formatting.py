"""
Message formatting for namespaced loggers.

Two stages run for every emitted message:

1. format_message() expands %-verbs in the first argument, consuming one
   positional argument per known verb, and appends leftovers.
2. format_args() decorates the text with the namespace label and the
   elapsed time since that logger's previous message.

Verbs are looked up in a plain mapping (verb letter → callable taking
the value and the logger). Add a verb by adding a key:

    registry.formatters['h'] = lambda value, logger: value.hex()
"""

import json
import math
import pprint
import re
import traceback
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Sequence


_VERB = re.compile(r'%([a-zA-Z%])')

_RESET = '\x1b[0m'

# Basic ANSI foreground colors (cyan, green, yellow, blue, magenta, red)
BASIC_COLORS = (6, 2, 3, 4, 5, 1)

# 256-color palette entries, skipping hues too dark or too close to white
EXTENDED_COLORS = (
    20, 21, 26, 27, 32, 33, 38, 39, 40, 41, 42, 43, 44, 45, 56, 57, 62, 63,
    68, 69, 74, 75, 76, 77, 78, 79, 80, 81, 92, 93, 98, 99, 112, 113, 128,
    129, 134, 135, 148, 149, 160, 161, 162, 163, 164, 165, 166, 167, 168,
    169, 170, 171, 172, 173, 178, 179, 184, 185, 196, 197, 198, 199, 200,
    201, 202, 203, 204, 205, 206, 207, 208, 209, 214, 215, 220, 221,
)

_SECOND = 1000
_MINUTE = _SECOND * 60
_HOUR = _MINUTE * 60
_DAY = _HOUR * 24

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


# =============================================================================
# Helpers
# =============================================================================

def humanize(ms: float) -> str:
    """Render a millisecond duration in its largest whole unit.

    Examples: 0 → '0ms', 1500 → '2s', 90000 → '2m', 3600000 → '1h'.
    """
    magnitude = abs(ms)
    for size, unit in ((_DAY, 'd'), (_HOUR, 'h'), (_MINUTE, 'm'), (_SECOND, 's')):
        if magnitude >= size:
            return f"{math.floor(ms / size + 0.5)}{unit}"
    return f"{math.floor(ms + 0.5)}ms"


def select_color(namespace: str, palette: Sequence[int] = BASIC_COLORS) -> int:
    """Pick a palette entry from a 32-bit hash of the namespace.

    The same namespace always gets the same color for a given palette.
    """
    h = 0
    for ch in namespace:
        h = ((h << 5) - h) + ord(ch)
        h = (h + 2**31) % 2**32 - 2**31
    return palette[abs(h) % len(palette)]


def coerce(value: Any) -> Any:
    """Replace an error object with its stack text.

    Objects carrying a string ``stack`` attribute use it verbatim; other
    exceptions render as their formatted traceback. Anything else is
    returned unchanged.
    """
    stack = getattr(value, 'stack', None)
    if isinstance(stack, str) and (isinstance(value, BaseException)
                                   or hasattr(value, 'message')):
        return stack
    if isinstance(value, BaseException):
        lines = traceback.format_exception(type(value), value, value.__traceback__)
        return ''.join(lines).rstrip('\n')
    return value


def iso_timestamp(now_ms: float) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a 'Z' suffix."""
    dt = _EPOCH + timedelta(milliseconds=int(now_ms))
    return dt.strftime('%Y-%m-%dT%H:%M:%S.') + f"{dt.microsecond // 1000:03d}Z"


# =============================================================================
# Verbs
# =============================================================================

def _inspect(value, logger) -> str:
    depth = logger.inspect_opts.get('depth')
    if not isinstance(depth, int) or isinstance(depth, bool):
        depth = None
    return pprint.pformat(value, depth=depth, sort_dicts=False)


def _format_str(value, logger) -> str:
    return str(value)


def _format_int(value, logger) -> str:
    try:
        return str(int(value))
    except (TypeError, ValueError, OverflowError):
        pass
    try:
        return str(int(float(value)))
    except (TypeError, ValueError, OverflowError):
        return 'NaN'


def _format_float(value, logger) -> str:
    try:
        return str(float(value))
    except (TypeError, ValueError, OverflowError):
        return 'NaN'


def _format_json(value, logger) -> str:
    try:
        return json.dumps(value, default=str)
    except TypeError:
        # Keys json cannot encode, e.g. tuples
        return str(value)
    except ValueError as e:
        if 'Circular' in str(e):
            return '[Circular]'
        raise


def _format_inline(value, logger) -> str:
    return ' '.join(line.strip() for line in _inspect(value, logger).splitlines())


FORMATTERS: Dict[str, Callable[[Any, Any], str]] = {
    's': _format_str,
    'd': _format_int,
    'i': _format_int,
    'f': _format_float,
    'j': _format_json,
    'o': _format_inline,
    'O': _inspect,
}


# =============================================================================
# Message assembly
# =============================================================================

def _render_extra(value, logger) -> str:
    return value if isinstance(value, str) else _inspect(value, logger)


def format_message(logger, args: Sequence[Any]) -> str:
    """Expand %-verbs in args[0] and append unconsumed arguments.

    A non-string first argument skips verb expansion entirely; every
    argument is then rendered on its own and joined with spaces.

    Args:
        logger: Logger whose registry supplies formatters and inspect options
        args: Positional arguments of the logging call

    Returns:
        The message text without namespace or timing decoration
    """
    if not args:
        return ''
    first, rest = args[0], list(args[1:])
    if not isinstance(first, str):
        return ' '.join(_render_extra(v, logger) for v in args)

    formatters = logger.formatters

    def expand(match):
        verb = match.group(1)
        if verb == '%':
            return '%'
        formatter = formatters.get(verb)
        if formatter is None or not rest:
            return match.group(0)
        return formatter(rest.pop(0), logger)

    text = _VERB.sub(expand, first)
    return ' '.join([text] + [_render_extra(v, logger) for v in rest])


def format_args(logger, text: str, now_ms: float) -> str:
    """Decorate a formatted message with the namespace and elapsed time.

    Color mode prefixes every line with the colored namespace and ends
    with a colored '+<elapsed>' marker. Plain mode prefixes an ISO
    timestamp, or, when inspect_opts['hide_date'] is set, drops the
    timestamp and ends with ' +<elapsed>' instead.
    """
    name = logger.namespace
    elapsed = humanize(logger.diff)
    if logger.use_colors:
        c = logger.color
        code = '\x1b[3' + (str(c) if c < 8 else f'8;5;{c}')
        prefix = f"  {code};1m{name} {_RESET}"
        body = prefix + text.replace('\n', '\n' + prefix)
        return f"{body} {code}m+{elapsed}{_RESET}"
    if logger.inspect_opts.get('hide_date'):
        return f"{name} {text} +{elapsed}"
    return f"{iso_timestamp(now_ms)} {name} {text}"
