"""
Function tracing decorator.

Routes call entry, return value, and raised exceptions through a
namespaced Logger. When the logger is disabled the wrapped function
runs with no argument formatting at all.
"""

import functools
import inspect
from pathlib import Path


def _short_repr(value):
    if isinstance(value, Path):
        return f"Path('{value}')"
    if isinstance(value, str) and len(value) > 50:
        return f"'{value[:47]}...'"
    if isinstance(value, list) and len(value) > 3:
        return f"[...{len(value)} items...]"
    return repr(value)


def trace(logger):
    """Decorator factory tracing calls through ``logger``.

    Shows function entry/exit with arguments and return values while
    ``logger.enabled`` is set::

        log = create_logger('app:trace')

        @trace(log)
        def load(path, retries=3):
            ...
    """
    def decorator(func):
        module = inspect.getmodule(func)
        module_name = module.__name__ if module else "unknown"
        func_name = func.__name__

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if not logger.enabled:
                return func(*args, **kwargs)

            args_repr = [_short_repr(arg) for arg in args]
            args_repr.extend(f"{key}={_short_repr(value)}"
                             for key, value in kwargs.items())

            logger(">> %s.%s(%s)", module_name, func_name, ', '.join(args_repr))

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger("!! %s.%s raised: %s: %s",
                       module_name, func_name, type(e).__name__, str(e))
                raise

            if result is not None:
                logger("<< %s.%s returned: %s",
                       module_name, func_name, _short_repr(result))
            return result

        return wrapper
    return decorator
