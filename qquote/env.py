# -*- coding: utf-8; -*-
"""Environments: ordered, parent-linked name-to-value mappings used for lookup."""

__all__ = ["Environment", "baseenv", "as_environment", "caller_env", "operators"]

import builtins
from collections.abc import Mapping, MutableMapping
import inspect
import operator
import sys

_sentinel = object()
_notfound = object()


class Environment(MutableMapping):
    """An ordered mapping from name to value, with a single parent link.

    Lookups fall through to the parent on a miss. Writes (`env[k] = v`,
    `define`, `del`) always go to this environment's own bindings, never to
    a parent.

    Iteration yields every visible name once, nearest binding first.

    Environments are not thread-safe; each logical call chain should own its
    environments.
    """
    def __init__(self, bindings=None, parent=None):
        """`bindings`: a mapping used as-is (not copied) as the local frame; a new `dict` if `None`.

        `parent`: an `Environment`, or `None` for a root environment.
        """
        if bindings is None:
            bindings = {}
        if not isinstance(bindings, Mapping):
            raise TypeError(f"expected bindings to be a mapping, got {type(bindings)} with value {repr(bindings)}")
        if parent is not None and not isinstance(parent, Environment):
            raise TypeError(f"expected parent to be an Environment or None, got {type(parent)} with value {repr(parent)}")
        self.bindings = bindings
        self.parent = parent

    @classmethod
    def from_frame(cls, frame):
        """Create an environment that views the Python stack frame `frame`.

        Lookup order is the frame's locals, then its globals, then `baseenv`.

        If `frame` runs a lazy function (see `qquote.capture.lazy`) that has
        a variadic parameter, the name `...` is bound to that parameter, so
        that a call argument `...` forwards the function's own variadic
        arguments.
        """
        globalenv = cls(frame.f_globals, parent=baseenv)
        if frame.f_locals is frame.f_globals:  # module level
            return globalenv
        bindings = dict(frame.f_locals)
        dots = _find_dots(frame, bindings)
        if dots is not None:
            bindings["..."] = dots
        return cls(bindings, parent=globalenv)

    def frames(self):
        """Iterate over this environment and its ancestors, innermost first."""
        env = self
        while env is not None:
            yield env
            env = env.parent

    def find(self, name, default=_sentinel):
        """Look up `name` along the parent chain.

        If not found, return `default` if given, else raise `KeyError`.
        """
        for env in self.frames():
            if name in env.bindings:
                return env.bindings[name]
        if default is _sentinel:
            raise KeyError(name)
        return default

    def lookup(self, name):
        """Look up `name` along the parent chain. If not found, raise `NameError`."""
        value = self.find(name, _notfound)
        if value is _notfound:
            raise NameError(f"name '{name}' is not defined")
        return value

    def is_bound_locally(self, name):
        """Return whether `name` is bound in this environment itself (ignoring parents)."""
        return name in self.bindings

    def define(self, name, value):
        """Bind `name` to `value` in this environment. Return `value`."""
        self.bindings[name] = value
        return value

    def child(self, bindings=None, **kwargs):
        """Return a new environment whose parent is this one.

        Bindings can be given as a mapping, as keyword arguments, or both.
        """
        newbindings = dict(bindings or {})
        newbindings.update(kwargs)
        return Environment(newbindings, parent=self)

    # Mapping
    def __getitem__(self, name):
        return self.find(name)

    def __contains__(self, name):
        return any(name in env.bindings for env in self.frames())

    def __iter__(self):
        seen = set()
        for env in self.frames():
            for name in env.bindings:
                if name not in seen:
                    seen.add(name)
                    yield name

    def __len__(self):
        return sum(1 for _ in self)

    # MutableMapping
    def __setitem__(self, name, value):
        self.bindings[name] = value

    def __delitem__(self, name):
        del self.bindings[name]

    def __eq__(self, other):
        return self is other

    def __hash__(self):
        return id(self)

    def __repr__(self):  # pragma: no cover
        depth = sum(1 for _ in self.frames()) - 1
        return f"<Environment 0x{id(self):x}: {len(self.bindings)} local bindings, depth {depth}>"


def _find_dots(frame, bindings):
    """Return the variadic arguments of the lazy function running in `frame`, or `None`."""
    code = frame.f_code
    if not code.co_flags & inspect.CO_VARARGS:
        return None
    varargs_name = code.co_varnames[code.co_argcount + code.co_kwonlyargcount]
    dots = bindings.get(varargs_name)
    from .capture import Promise  # avoid import cycle
    # Only the evaluator fills a variadic parameter with promises.
    if isinstance(dots, tuple) and all(isinstance(x, Promise) for x in dots):
        return dots
    return None

# --------------------------------------------------------------------------------
# The root environment.
#
# Trees read from Python syntax refer to operators by their surface spelling,
# e.g. `a + b` reads as `Call(Reference("+"), [a, b])`. Those names live here.

def _plus(a, *b):
    if not b:
        return operator.pos(a)
    return operator.add(a, *b)

def _minus(a, *b):
    if not b:
        return operator.neg(a)
    return operator.sub(a, *b)

def _dict_display(*items):
    if len(items) % 2:
        raise TypeError(f"dict display needs an even number of items (key, value, ...), got {len(items)}")
    return dict(zip(items[0::2], items[1::2]))

operators = {"+": _plus,
             "-": _minus,
             "*": operator.mul,
             "/": operator.truediv,
             "//": operator.floordiv,
             "%": operator.mod,
             "**": operator.pow,
             "@": operator.matmul,
             "<<": operator.lshift,
             ">>": operator.rshift,
             "&": operator.and_,
             "|": operator.or_,
             "^": operator.xor,
             "~": operator.invert,
             "not": operator.not_,
             "==": operator.eq,
             "!=": operator.ne,
             "<": operator.lt,
             "<=": operator.le,
             ">": operator.gt,
             ">=": operator.ge,
             "is": operator.is_,
             "is not": operator.is_not,
             "in": lambda a, b: a in b,
             "not in": lambda a, b: a not in b,
             "[": operator.getitem,
             "[]": lambda *elts: list(elts),
             "()": lambda *elts: tuple(elts),
             "{}": _dict_display}

# Lazy builtins (`and`, `or`, `if`, `quote`) are added by `qquote.evaluator`
# and `qquote.quotes` when they load.
baseenv = Environment(dict(vars(builtins)), parent=None)
baseenv.bindings.update(operators)


def as_environment(env):
    """Coerce `env` into an `Environment`.

    `None` gives a fresh child of `baseenv`. An `Environment` is returned as-is.
    Any other mapping is wrapped (not copied) as the local frame of a new
    environment whose parent is `baseenv`.
    """
    if env is None:
        return baseenv.child()
    if isinstance(env, Environment):
        return env
    if isinstance(env, Mapping):
        return Environment(env, parent=baseenv)
    raise TypeError(f"expected an Environment or a mapping, got {type(env)} with value {repr(env)}")


def caller_env(depth=1):
    """Return an environment viewing the frame `depth` levels up from the caller of this function.

    `caller_env()` views the frame of whoever called `caller_env`.
    """
    return Environment.from_frame(sys._getframe(depth))
