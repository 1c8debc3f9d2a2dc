# -*- coding: utf-8; -*-
"""General utilities."""

__all__ = ["NestingLevelTracker", "format_value"]

from contextlib import contextmanager


class NestingLevelTracker:
    """Track the nesting level of re-entrant calls, e.g. for indenting debug output."""
    def __init__(self, start=0):
        """start: int, initial level"""
        self.stack = [start]

    def _get_value(self):
        return self.stack[-1]
    value = property(fget=_get_value, doc="The current level. Read-only. Use `set_to` or `changed_by` to change.")

    def set_to(self, value):
        """Context manager. Run a section of code with the level set to `value`.

        Example::

            t = NestingLevelTracker()
            assert t.value == 0
            with t.set_to(42):
                assert t.value == 42
            assert t.value == 0
        """
        if not isinstance(value, int):
            raise TypeError(f"Expected integer `value`, got {type(value)} with value {repr(value)}")
        if value < 0:
            raise ValueError(f"`value` must be >= 0, got {repr(value)}")
        @contextmanager
        def _set_to():
            self.stack.append(value)
            try:
                yield
            finally:
                self.stack.pop()
                assert self.stack  # postcondition
        return _set_to()

    def changed_by(self, delta):
        """Context manager. Run a section of code with the level incremented by `delta`."""
        return self.set_to(self.value + delta)


def format_value(value, maxlen=60):
    """Return `repr(value)`, truncated to at most `maxlen` characters."""
    text = repr(value)
    if len(text) > maxlen:
        text = text[:maxlen - 3] + "..."
    return text
