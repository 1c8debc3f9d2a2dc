# -*- coding: utf-8; -*-

__all__ = ["Bunch"]

from collections.abc import MutableMapping


class Bunch(MutableMapping):
    """A bunch of named values, accessible both as attributes and as items.

    Used for the color scheme, and for the `_data` pronoun of a data mask.

    Example::

        b = Bunch(x=1, y=2)
        assert b.x == 1
        assert b["y"] == 2

    A missing name raises `KeyError`, whether accessed as an attribute or as
    an item, so that `_data.x` reports a missing data column the same way as
    `_data["x"]`.
    """
    def __init__(self, **bindings):
        object.__setattr__(self, "_data", bindings)

    def copy(self):
        """Return a shallow copy of this `Bunch`."""
        return Bunch(**self._data)

    def replace(self, other):
        """Replace all data in this `Bunch` with (a shallow copy of) the data from the `other` one."""
        if not isinstance(other, Bunch):
            raise TypeError(f"expected Bunch, got {type(other)} with value {repr(other)}")
        object.__setattr__(self, "_data", dict(other._data))

    def __getattr__(self, name):
        if name.startswith("__") or name == "_data":  # don't confuse `copy`, `pickle` et al.
            raise AttributeError(name)
        return self._data[name]

    def __setattr__(self, name, value):
        if hasattr(type(self), name):  # prevent shadowing keys, items, et al.
            raise AttributeError(f"Cannot write to reserved attribute '{name}'")
        self._data[name] = value

    def __delattr__(self, name):
        del self._data[name]

    # Mapping
    def __getitem__(self, name):
        return self._data[name]

    def __iter__(self):
        return iter(self._data)

    def __len__(self):
        return len(self._data)

    # MutableMapping
    def __setitem__(self, name, value):
        self._data[name] = value

    def __delitem__(self, name):
        del self._data[name]

    def __eq__(self, other):
        if isinstance(other, Bunch):
            other = other._data
        return self._data == other

    def __ne__(self, other):
        return not self.__eq__(other)

    __hash__ = None

    def __repr__(self):  # pragma: no cover
        bindings = [f"{name:s}={repr(value)}" for name, value in self._data.items()]
        return f"Bunch({', '.join(bindings)})"
