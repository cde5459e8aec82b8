"""Environment configuration for nsdebug.

Two-layer resolution (highest priority wins):
  1. Explicit arguments: passed to LoggerRegistry / init_registry()
  2. Environment: DEBUG for the pattern, DEBUG_* for inspect options

Inspect options are read from every DEBUG_<NAME> variable. The name is
lowercased into the option key and the value coerced:

    DEBUG_COLORS=no        →  {'colors': False}
    DEBUG_HIDE_DATE=on     →  {'hide_date': True}
    DEBUG_DEPTH=3          →  {'depth': 3}
    DEBUG_ANYTHING=null    →  {'anything': None}
"""

import os
import re


ENV_VAR = "DEBUG"
OPTION_PREFIX = "DEBUG_"

_TRUE = re.compile(r'^(yes|on|true|enabled)$', re.IGNORECASE)
_FALSE = re.compile(r'^(no|off|false|disabled)$', re.IGNORECASE)


# ---------------------------------------------------------------------------
# Namespace pattern
# ---------------------------------------------------------------------------
def load_namespaces(environ=None):
    """Return the pattern stored in $DEBUG, or '' when unset."""
    environ = os.environ if environ is None else environ
    return environ.get(ENV_VAR, '')


def save_namespaces(namespaces, environ=None):
    """Store the pattern in $DEBUG so child processes inherit it.

    An empty pattern removes the variable instead of leaving it blank.
    """
    environ = os.environ if environ is None else environ
    if namespaces:
        environ[ENV_VAR] = namespaces
    else:
        environ.pop(ENV_VAR, None)


# ---------------------------------------------------------------------------
# Inspect options
# ---------------------------------------------------------------------------
def parse_env_value(value):
    """Coerce an environment string into a bool, None, number, or text."""
    if _TRUE.match(value):
        return True
    if _FALSE.match(value):
        return False
    if value == 'null':
        return None
    for convert in (int, float):
        try:
            return convert(value)
        except ValueError:
            continue
    return value


def load_inspect_opts(environ=None):
    """Collect DEBUG_* variables into an options dict.

    Returns:
        Dict keyed by the lowercased suffix after DEBUG_
    """
    environ = os.environ if environ is None else environ
    opts = {}
    for key in sorted(environ):
        if not key.upper().startswith(OPTION_PREFIX):
            continue
        name = key[len(OPTION_PREFIX):].lower()
        if name:
            opts[name] = parse_env_value(environ[key])
    return opts


def resolve_use_colors(inspect_opts, stream_is_tty):
    """Decide color mode: an explicit 'colors' option beats tty detection."""
    if 'colors' in inspect_opts:
        return bool(inspect_opts['colors'])
    return bool(stream_is_tty)
