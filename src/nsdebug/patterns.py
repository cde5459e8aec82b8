"""
Namespace pattern compilation, matching, and serialization.

A pattern string is a list of segments separated by commas and/or
whitespace. Segments prefixed with '-' are skips (disable patterns),
everything else is a name (enable pattern).

Pattern syntax:
    app:*               # every namespace under app:
    app:*,-app:noisy    # ...except app:noisy
    *                   # everything
    -*                  # nothing, even if also named

Within a segment '*' matches any run of characters (including none and
including ':' or ','). Every other character is literal.

The emit rule is:
    skip matches   →  disabled (always wins)
    name matches   →  enabled
    otherwise      →  disabled
"""

import re
from dataclasses import dataclass
from typing import Any, Pattern, Tuple


_SEPARATORS = re.compile(r'[\s,]+')


def stringify(value: Any) -> str:
    """Coerce a namespace or pattern argument to text.

    None becomes the empty string and bytes are decoded as UTF-8;
    anything else goes through str().
    """
    if value is None:
        return ''
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        return value.decode('utf-8', errors='replace')
    return str(value)


@dataclass(frozen=True)
class Matcher:
    """One compiled pattern segment.

    Attributes:
        source: Segment text as written (without the '-' skip prefix)
        regex: Anchored expression equivalent to the wildcard segment
    """
    source: str
    regex: Pattern

    @classmethod
    def from_source(cls, source: str) -> 'Matcher':
        body = '.*'.join(re.escape(part) for part in source.split('*'))
        return cls(source=source, regex=re.compile(body, re.DOTALL))

    def matches(self, namespace: str) -> bool:
        """True when the whole namespace matches this segment."""
        return self.regex.fullmatch(namespace) is not None

    def __str__(self) -> str:
        return self.source


@dataclass(frozen=True)
class MatcherSet:
    """Enable and disable matchers in declaration order."""
    enabled: Tuple[Matcher, ...] = ()
    disabled: Tuple[Matcher, ...] = ()

    @property
    def names(self) -> list:
        """Source texts of the enable matchers."""
        return [m.source for m in self.enabled]

    @property
    def skips(self) -> list:
        """Source texts of the disable matchers (without '-')."""
        return [m.source for m in self.disabled]

    def __bool__(self) -> bool:
        return bool(self.enabled or self.disabled)


EMPTY = MatcherSet()


def split_patterns(text: Any) -> list:
    """Split a pattern string into its non-empty segments."""
    return [seg for seg in _SEPARATORS.split(stringify(text).strip()) if seg]


def compile_patterns(text: Any) -> MatcherSet:
    """Compile a pattern string into a MatcherSet.

    Never raises: anything that is not '*' is matched literally.

    Args:
        text: Pattern string like "app:*,-app:noisy" (non-strings are
            coerced with stringify())

    Returns:
        MatcherSet with names and skips in declaration order
    """
    enabled = []
    disabled = []
    for segment in split_patterns(text):
        if segment.startswith('-'):
            disabled.append(Matcher.from_source(segment[1:]))
        else:
            enabled.append(Matcher.from_source(segment))
    return MatcherSet(enabled=tuple(enabled), disabled=tuple(disabled))


def is_enabled(namespace: Any, matcher_set: MatcherSet) -> bool:
    """Decide whether a namespace is enabled under a MatcherSet.

    Skips are checked first and win regardless of declaration order.
    """
    namespace = stringify(namespace)
    if any(m.matches(namespace) for m in matcher_set.disabled):
        return False
    return any(m.matches(namespace) for m in matcher_set.enabled)


def serialize_patterns(matcher_set: MatcherSet) -> str:
    """Rebuild the pattern string for a MatcherSet.

    Names come first, then skips with their '-' prefix restored, so
    compile_patterns(serialize_patterns(s)) reproduces s.
    """
    parts = matcher_set.names + ['-' + skip for skip in matcher_set.skips]
    return ','.join(parts)
