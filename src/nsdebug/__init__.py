"""
nsdebug: namespaced conditional debug logging.

Loggers are cheap callables bound to a namespace. They stay silent
unless the namespace matches the active pattern set, which comes from
$DEBUG at startup and from enable() at runtime:

    DEBUG='app:*,-app:noisy' python myapp.py

    import nsdebug
    log = nsdebug.create_logger('app:db')
    log('connected to %s', host)

Public API:
    create_logger     logger for a namespace (cached)
    enable            replace the active pattern set
    disable           disable everything, returning the previous patterns
    enabled           test a namespace against the active patterns
    names / skips     active enable / disable pattern texts
    init_registry     (re)build the default registry from the environment
    get_registry      access the default registry
    LoggerRegistry    independent registry (tests, embedding)
    Logger            the logger type
    trace             function tracing decorator
    humanize          millisecond duration formatting
    coerce            exception → stack text conversion
    FORMATTERS        default %-verb mapping
"""

from nsdebug._version import __version__, __app_name__
from nsdebug.formatting import FORMATTERS, coerce, humanize, select_color
from nsdebug.logger import Logger
from nsdebug.patterns import (
    Matcher, MatcherSet, compile_patterns, is_enabled, serialize_patterns,
    stringify,
)
from nsdebug.registry import LoggerRegistry, get_registry, init_registry
from nsdebug.trace import trace


def create_logger(namespace) -> Logger:
    """Return the default registry's logger for ``namespace``."""
    return get_registry().get_logger(namespace)


def enable(namespaces) -> None:
    """Replace the default registry's active patterns."""
    get_registry().enable(namespaces)


def disable() -> str:
    """Disable all namespaces, returning the previously active patterns."""
    return get_registry().disable()


def enabled(namespace) -> bool:
    """Check a namespace against the default registry's patterns."""
    return get_registry().enabled(namespace)


def names() -> list:
    """Enable patterns active in the default registry."""
    return get_registry().names


def skips() -> list:
    """Disable patterns active in the default registry."""
    return get_registry().skips


__all__ = [
    "__version__", "__app_name__",
    "create_logger", "enable", "disable", "enabled", "names", "skips",
    "init_registry", "get_registry", "LoggerRegistry", "Logger",
    "Matcher", "MatcherSet", "compile_patterns", "is_enabled",
    "serialize_patterns", "stringify",
    "trace", "humanize", "coerce", "select_color", "FORMATTERS",
]
