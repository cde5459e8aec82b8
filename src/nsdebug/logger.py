"""
Logger: a callable bound to one namespace.

A Logger does nothing unless its ``enabled`` flag is set. The flag is a
snapshot: the owning registry recomputes it for every cached logger on
each enable()/disable(), and callers may also assign it directly.

Usage::

    log = registry.get_logger('app:db')
    log('connected to %s in %dms', host, took)
    log(err)                      # exceptions render as their stack

    query_log = log.extend('query')       # namespace 'app:db:query'
"""

from typing import Any, Callable, Optional

from .formatting import coerce, format_args, format_message, select_color
from .patterns import stringify


class Logger:
    """Conditional, namespaced message emitter.

    Attributes:
        namespace: Namespace this logger matches against patterns
        enabled: Whether calls currently reach the sink
        color: Palette entry derived from the namespace
        use_colors: Color mode for this logger's output
        diff: Milliseconds between the last two emissions
        prev: Timestamp (ms) of the emission before the last one
        curr: Timestamp (ms) of the last emission
        log: Per-logger sink; None means the registry's sink
    """

    def __init__(self, namespace: str, registry, enabled: bool = False):
        self.namespace = namespace
        self.enabled = enabled
        self.color = select_color(namespace, registry.colors)
        self.use_colors = registry.use_colors
        self.diff = 0
        self.prev: Optional[float] = None
        self.curr: Optional[float] = None
        self.log: Optional[Callable[[str], Any]] = None
        self._registry = registry

    @property
    def registry(self):
        """The LoggerRegistry that owns this logger."""
        return self._registry

    @property
    def formatters(self):
        return self._registry.formatters

    @property
    def inspect_opts(self):
        return self._registry.inspect_opts

    def __call__(self, *args: Any) -> None:
        if not self.enabled:
            return

        now = self._registry.now()
        self.diff = now - (self.curr if self.curr is not None else now)
        self.prev = self.curr
        self.curr = now

        if args:
            args = (coerce(args[0]),) + args[1:]
        text = format_args(self, format_message(self, args), now)

        sink = self.log or self._registry.log
        sink(text)

    def extend(self, suffix: Any, delimiter: Any = ':') -> 'Logger':
        """Return the child logger for namespace + delimiter + suffix.

        The child shares this logger's sink and starts with its current
        enabled state.
        """
        child = self._registry.get_logger(
            self.namespace + stringify(delimiter) + stringify(suffix))
        child.log = self.log
        child.enabled = self.enabled
        return child

    def __repr__(self) -> str:
        state = 'enabled' if self.enabled else 'disabled'
        return f"<Logger {self.namespace!r} ({state})>"
