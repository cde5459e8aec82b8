"""
Tests for nsdebug.logger: emission, error rendering, elapsed time,
and namespace extension.
"""

import re

import pytest

from nsdebug.formatting import EXTENDED_COLORS, select_color
from nsdebug.registry import LoggerRegistry


# =============================================================================
# Emission
# =============================================================================

class TestEmit:
    """Test basic logger calls."""

    def test_sanity(self, registry):
        """An enabled logger with a no-op sink does not raise."""
        log = registry.get_logger("test")
        log.enabled = True
        log.log = lambda text: None
        log("hello world")

    def test_custom_log_function(self, registry):
        """Each call reaches the per-logger sink exactly once."""
        log = registry.get_logger("test")
        log.enabled = True
        received = []
        log.log = received.append

        log("using custom log function")
        log("using custom log function again")
        log("%O", 12345)

        assert len(received) == 3
        assert received[2].endswith("test 12345")

    def test_registry_sink_is_default(self, registry, messages):
        """Without a per-logger sink the registry sink is used."""
        log = registry.get_logger("test")
        log.enabled = True
        log("hi")
        assert messages == ["1970-01-01T00:00:00.000Z test hi"]

    def test_disabled_is_silent(self, registry, messages, clock):
        """A disabled logger never formats, reads the clock, or emits."""
        def explode(value, logger):
            raise AssertionError("formatter called while disabled")

        registry.formatters["s"] = explode
        log = registry.get_logger("test")
        log("%s", "value")
        log(ValueError("boom"))
        assert messages == []
        assert clock.reads == 0

    def test_sink_errors_propagate(self, registry):
        """Exceptions raised by the sink reach the caller."""
        def broken(text):
            raise RuntimeError("sink down")

        log = registry.get_logger("test")
        log.enabled = True
        log.log = broken
        with pytest.raises(RuntimeError, match="sink down"):
            log("hello")

    def test_no_arguments(self, registry, messages):
        """Calling with no arguments still emits the decorated line."""
        log = registry.get_logger("test")
        log.enabled = True
        log()
        assert messages == ["1970-01-01T00:00:00.000Z test "]

    def test_repr(self, registry):
        assert repr(registry.get_logger("app")) == "<Logger 'app' (disabled)>"


# =============================================================================
# Errors
# =============================================================================

class TestErrors:
    """Test rendering of error objects passed as the first argument."""

    @pytest.fixture
    def fake_error(self):
        err = Exception("test")
        err.stack = "Error: test\n    at test:1:1"
        return err

    def test_error_with_full_stack(self, registry, fake_error):
        """An error's stack replaces it, prefixed by the ISO date."""
        log = registry.get_logger("test")
        log.use_colors = False
        log.enabled = True
        received = []
        log.log = received.append

        log(fake_error)

        assert received == [
            "1970-01-01T00:00:00.000Z test Error: test\n    at test:1:1"
        ]

    def test_error_with_hidden_date(self, clock, fake_error):
        """With hide_date the line ends in the elapsed marker."""
        received = []
        reg = LoggerRegistry(log=received.append, clock=clock,
                             inspect_opts={"hide_date": True})
        log = reg.get_logger("test")
        log.enabled = True

        log(fake_error)

        assert received == ["test Error: test\n    at test:1:1 +0ms"]

    def test_raised_exception_has_traceback(self, registry, messages):
        """Caught exceptions render with their traceback."""
        log = registry.get_logger("test")
        log.enabled = True
        try:
            raise ValueError("boom")
        except ValueError as e:
            log(e)
        assert "Traceback (most recent call last)" in messages[0]
        assert messages[0].endswith("ValueError: boom")

    def test_unraised_exception(self, registry, messages):
        """Exceptions never raised render as 'Type: message'."""
        log = registry.get_logger("test")
        log.enabled = True
        log(KeyError("missing"))
        assert messages == ["1970-01-01T00:00:00.000Z test KeyError: 'missing'"]

    def test_only_first_argument_is_coerced(self, registry, messages):
        """Later exception arguments are formatted normally."""
        log = registry.get_logger("test")
        log.enabled = True
        log("failed: %s", ValueError("boom"))
        assert messages == ["1970-01-01T00:00:00.000Z test failed: boom"]


# =============================================================================
# Timing
# =============================================================================

class TestElapsed:
    """Test elapsed-time bookkeeping between emissions."""

    def test_first_call_is_zero(self, registry, clock):
        clock.now = 5000
        log = registry.get_logger("test")
        log.enabled = True
        log("first")
        assert log.diff == 0
        assert log.prev is None
        assert log.curr == 5000

    def test_diff_between_calls(self, clock):
        """diff is the gap to the previous emission of the same logger."""
        received = []
        reg = LoggerRegistry(log=received.append, clock=clock,
                             inspect_opts={"hide_date": True})
        log = reg.get_logger("test")
        log.enabled = True

        clock.now = 1000
        log("a")
        clock.advance(1500)
        log("b")

        assert log.prev == 1000
        assert log.curr == 2500
        assert log.diff == 1500
        assert received == ["test a +0ms", "test b +2s"]

    def test_disabled_calls_do_not_reset_timer(self, registry, clock):
        """Suppressed calls leave prev/curr untouched."""
        log = registry.get_logger("test")
        log.enabled = True
        log("a")
        log.enabled = False
        clock.advance(300)
        log("ignored")
        log.enabled = True
        clock.advance(200)
        log("b")
        assert log.diff == 500

    def test_loggers_time_independently(self, registry, clock):
        one = registry.get_logger("one")
        two = registry.get_logger("two")
        one.enabled = two.enabled = True
        one("x")
        clock.advance(100)
        two("y")
        assert one.diff == 0
        assert two.diff == 0


# =============================================================================
# Color mode
# =============================================================================

class TestColorMode:
    """Test ANSI decoration in color mode."""

    def test_colored_prefix_and_suffix(self, clock):
        received = []
        reg = LoggerRegistry(log=received.append, clock=clock, use_colors=True)
        log = reg.get_logger("foo")
        log.enabled = True
        c = select_color("foo")
        assert log.color == c

        log("hello")

        assert received == [
            f"  \x1b[3{c};1mfoo \x1b[0mhello \x1b[3{c}m+0ms\x1b[0m"
        ]

    def test_every_line_prefixed(self, clock):
        received = []
        reg = LoggerRegistry(log=received.append, clock=clock, use_colors=True)
        log = reg.get_logger("foo")
        log.enabled = True
        log("one\ntwo")
        prefix = f"  \x1b[3{log.color};1mfoo \x1b[0m"
        assert received[0].startswith(prefix + "one\n" + prefix + "two ")

    def test_extended_palette_codes(self, clock):
        """256-color entries use the 38;5;N sequence."""
        received = []
        reg = LoggerRegistry(log=received.append, clock=clock,
                             use_colors=True, colors=EXTENDED_COLORS)
        log = reg.get_logger("foo")
        log.enabled = True
        log("hi")
        assert log.color in EXTENDED_COLORS
        assert received[0].startswith(f"  \x1b[38;5;{log.color};1mfoo ")


# =============================================================================
# extend
# =============================================================================

class TestExtend:
    """Test hierarchical namespace extension."""

    def test_extend_namespace(self, registry):
        log = registry.get_logger("foo")
        log.enabled = True
        log.log = lambda text: None
        assert log.extend("bar").namespace == "foo:bar"

    def test_custom_delimiter(self, registry):
        log = registry.get_logger("foo")
        assert log.extend("bar", "--").namespace == "foo--bar"

    def test_empty_delimiter(self, registry):
        log = registry.get_logger("foo")
        assert log.extend("bar", "").namespace == "foobar"

    def test_keeps_log_function(self, registry):
        """The child shares its parent's sink."""
        log = registry.get_logger("foo")
        log.log = lambda text: None
        assert log.extend("bar").log is log.log

    def test_inherits_enabled(self, registry):
        """The child starts from the parent's current flag."""
        log = registry.get_logger("foo")
        log.enabled = True
        assert log.extend("bar").enabled is True

    def test_child_is_registered(self, registry):
        """Extended loggers are cached and refreshed like any other."""
        child = registry.get_logger("foo").extend("bar")
        assert registry.get_logger("foo:bar") is child
        registry.enable("foo:*")
        assert child.enabled is True

    def test_non_string_delimiter(self, registry):
        """The delimiter is coerced like the suffix; None joins directly."""
        log = registry.get_logger("foo")
        assert log.extend("bar", None).namespace == "foobar"
        assert log.extend("bar", 0).namespace == "foo0bar"

    def test_non_string_suffix(self, registry):
        assert registry.get_logger("job").extend(7).namespace == "job:7"


# =============================================================================
# Live refresh
# =============================================================================

class TestReenable:
    """Existing instances follow enable()/disable() calls."""

    def test_reenabling_existing_instances(self, registry):
        registry.disable()
        inst = registry.get_logger("foo")
        received = []
        inst.log = lambda msg: received.append(
            re.sub(r"^[^@]*@([^@]+)@.*$", r"\1", msg, flags=re.DOTALL))

        inst("@test@")
        assert received == []
        registry.enable("foo")
        assert received == []
        inst("@test2@")
        assert received == ["test2"]
        inst("@test3@")
        assert received == ["test2", "test3"]
        registry.disable()
        inst("@test4@")
        assert received == ["test2", "test3"]
