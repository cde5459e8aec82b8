"""
LoggerRegistry: owner of the active patterns and every created logger.

Pattern changes must reach loggers that already exist, so the registry
caches each Logger by namespace and recomputes ``enabled`` on all of
them whenever enable() or disable() runs. Nothing is recomputed on a
plain call: a logger's flag only changes on those two mutations (or
when assigned directly).

Registries are independent. Tests and embedders can build their own;
the module-level singleton (init_registry / get_registry) is the one
behind the package-level API and the only one wired to the environment.

Not safe for concurrent enable()/disable() from several threads;
callers must serialize those.
"""

import time
from typing import Any, Callable, Dict, Optional, Sequence

from .config import (
    load_inspect_opts, load_namespaces, resolve_use_colors, save_namespaces,
)
from .formatting import BASIC_COLORS, FORMATTERS
from .logger import Logger
from .patterns import (
    EMPTY, MatcherSet, compile_patterns, is_enabled, serialize_patterns,
    stringify,
)
from .stream import color_palette, log_to_stderr, stream_is_tty


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class LoggerRegistry:
    """Pattern state plus the cache of loggers it governs.

    Usage::

        reg = LoggerRegistry()
        reg.enable('app:*,-app:noisy')
        log = reg.get_logger('app:db')
        log('ready')
        previous = reg.disable()     # 'app:*,-app:noisy'
    """

    def __init__(
        self,
        namespaces: Any = '',
        log: Callable[[str], Any] = None,
        use_colors: bool = False,
        colors: Sequence[int] = BASIC_COLORS,
        inspect_opts: Dict[str, Any] = None,
        formatters: Dict[str, Callable] = None,
        clock: Callable[[], float] = None,
        persist: Optional[Callable[[str], Any]] = None,
    ):
        self.log = log if log is not None else log_to_stderr
        self.use_colors = use_colors
        self.colors = tuple(colors)
        self.inspect_opts: Dict[str, Any] = dict(inspect_opts or {})
        self.formatters = dict(FORMATTERS if formatters is None else formatters)
        self.clock = clock if clock is not None else _now_ms
        self.persist = persist
        self.namespaces = ''
        self._patterns: MatcherSet = EMPTY
        self._loggers: Dict[str, Logger] = {}
        if namespaces:
            self.enable(namespaces)

    # -- pattern state -----------------------------------------------------

    @property
    def patterns(self) -> MatcherSet:
        """The MatcherSet currently in force."""
        return self._patterns

    @property
    def names(self) -> list:
        return self._patterns.names

    @property
    def skips(self) -> list:
        return self._patterns.skips

    def enable(self, namespaces: Any) -> None:
        """Replace the active patterns and refresh every cached logger.

        Args:
            namespaces: Pattern string; non-strings are coerced with
                stringify() (so enable(True) enables the name 'True')
        """
        text = stringify(namespaces)
        if self.persist is not None:
            self.persist(text)
        self.namespaces = text
        self._patterns = compile_patterns(text)
        self._refresh()

    def disable(self) -> str:
        """Disable everything, returning the patterns that were active."""
        previous = serialize_patterns(self._patterns)
        self.enable('')
        return previous

    def enabled(self, namespace: Any) -> bool:
        """Check a namespace against the active patterns."""
        return is_enabled(stringify(namespace), self._patterns)

    def _refresh(self) -> None:
        for namespace, logger in self._loggers.items():
            logger.enabled = is_enabled(namespace, self._patterns)

    # -- loggers -----------------------------------------------------------

    def get_logger(self, namespace: Any) -> Logger:
        """Return the logger for a namespace, creating it on first use."""
        namespace = stringify(namespace)
        logger = self._loggers.get(namespace)
        if logger is None:
            logger = Logger(namespace, self,
                            enabled=is_enabled(namespace, self._patterns))
            self._loggers[namespace] = logger
        return logger

    @property
    def loggers(self) -> Dict[str, Logger]:
        """Snapshot of the cached loggers keyed by namespace."""
        return dict(self._loggers)

    def now(self) -> float:
        """Current time in milliseconds from the registry clock."""
        return self.clock()


# =============================================================================
# Module-level singleton
# =============================================================================

_registry: Optional[LoggerRegistry] = None


def init_registry(environ=None, stream=None, **overrides) -> LoggerRegistry:
    """Initialize the module-level LoggerRegistry from the environment.

    $DEBUG supplies the initial pattern, DEBUG_* the inspect options,
    and the stderr tty check (or DEBUG_COLORS) the color mode. Keyword
    overrides win over anything read from the environment. The
    registry writes every enable() back to $DEBUG.

    Args:
        environ: Mapping to read/write instead of os.environ
        stream: Stream whose tty-ness decides color mode (default stderr)
        **overrides: Any LoggerRegistry constructor argument

    Returns:
        The initialized LoggerRegistry instance
    """
    global _registry

    inspect_opts = load_inspect_opts(environ)
    settings = {
        'namespaces': load_namespaces(environ),
        'inspect_opts': inspect_opts,
        'use_colors': resolve_use_colors(inspect_opts, stream_is_tty(stream)),
        'colors': color_palette(environ),
        'persist': lambda text: save_namespaces(text, environ),
    }
    settings.update(overrides)

    _registry = LoggerRegistry(**settings)
    return _registry


def get_registry() -> LoggerRegistry:
    """Get the module-level LoggerRegistry, creating it if needed."""
    global _registry
    if _registry is None:
        _registry = init_registry()
    return _registry
