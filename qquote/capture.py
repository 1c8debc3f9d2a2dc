# -*- coding: utf-8; -*-
"""The capture layer. Obtain trees for code, without evaluating that code.

There are two capture modes:

  - *Immediate*: `quote_now` builds a tree from an expression written right
    here, at the call site of `quote_now` itself.

  - *Deferred*: `quote_caller` retrieves the tree of an argument, exactly as
    the caller of the current function wrote it, together with the
    environment in which the caller would have evaluated it.

Python evaluates call arguments eagerly, so deferred capture is available to
functions that are called by the evaluator (`qquote.evaluator.evaluate`) and
that opt in with the `@lazy` decorator. Such a function receives a `Promise`
for each argument instead of its value::

    @lazy
    def show(x):
        capture = quote_caller(x)
        return capture.node

    evaluate(quote_now("show(a + b)"))  # --> Call(Reference('+'), [Reference('a'), Reference('b')])

A promise is forced (evaluated, once) by accessing its `value`, or via `force`.
"""

__all__ = ["CaptureResult", "Promise", "MISSING", "lazy", "is_lazy", "is_quoting", "force",
           "quote_now", "quote_caller", "quote_caller_all", "quote_caller_all_results"]

import sys

from .core import NoCapturableArgument
from .env import Environment, as_environment
from .markers import QuasiquoteMarker
from .nodes import Node, Reference

_unforced = object()


class CaptureResult:
    """A captured tree, together with the environment active at the point of capture.

    The environment is referenced, not owned; it is not copied.

    When inlined into a tree (see `qquote.nodes.to_node`), a capture evaluates
    in its own environment, not in the environment of the surrounding tree.
    """
    __slots__ = ("node", "env")

    def __init__(self, node, env):
        if not isinstance(node, Node):
            raise TypeError(f"expected a tree node, got {type(node)} with value {repr(node)}")
        if not isinstance(env, Environment):
            raise TypeError(f"expected an Environment, got {type(env)} with value {repr(env)}")
        object.__setattr__(self, "node", node)
        object.__setattr__(self, "env", env)

    def __setattr__(self, name, value):
        raise AttributeError(f"CaptureResult is immutable; cannot set attribute '{name}'")

    def __iter__(self):
        yield self.node
        yield self.env

    def __eq__(self, other):
        if not isinstance(other, CaptureResult):
            return NotImplemented
        return self.node == other.node and self.env is other.env

    def __hash__(self):
        return hash((self.node, id(self.env)))

    def with_node(self, node):
        """Return a new capture of `node` in this capture's environment."""
        return CaptureResult(node, self.env)

    def evaluate(self, mask=None):
        """Evaluate the captured tree in the captured environment, with an optional data mask."""
        from .evaluator import evaluate
        return evaluate(self, mask=mask)

    def __repr__(self):
        return f"CaptureResult({self.node!r}, <Environment 0x{id(self.env):x}>)"


class _Missing:
    """The type of `MISSING`, passed for parameters of a lazy function that the caller did not supply."""
    def __repr__(self):
        return "MISSING"

    def __bool__(self):
        return False

MISSING = _Missing()


class Promise:
    """An unevaluated argument of a lazy function.

    `node`: the argument tree, as written at the call site.
    `env`: the environment of the call site.
    `mask`: the data mask in effect at the call site, or `None`.
    `name`: the argument name as written at the call site, or `None` if positional.

    The value is computed on first access of `value`, and then cached, so the
    argument is evaluated at most once, no matter how many times it is used.
    """
    def __init__(self, node, env, mask=None, name=None):
        self.node = node
        self.env = env
        self.mask = mask
        self.name = name
        self._value = _unforced

    @property
    def forced(self):
        """Whether the value has already been computed."""
        return self._value is not _unforced

    @property
    def value(self):
        """The value of the argument. Evaluated on first access."""
        if self._value is _unforced:
            from .evaluator import evaluate
            self._value = evaluate(self.node, self.env, self.mask)
        return self._value

    def __repr__(self):
        name = f"{self.name}=" if self.name is not None else ""
        state = "forced" if self.forced else "unforced"
        return f"<Promise {name}{self.node!r} ({state})>"


def force(x):
    """Return the value of `x` if it is a `Promise`; otherwise return `x` itself."""
    if isinstance(x, Promise):
        return x.value
    return x


def lazy(function):
    """[decorator] Make `function` receive its arguments unevaluated, when called by the evaluator.

    When the evaluator calls a lazy function, each argument is passed as a
    `Promise`. Arguments are matched to parameters as follows:

      - Named arguments bind the parameter of the same name.
      - Positional arguments fill the remaining parameters, in order.
      - Any arguments left over, whether named or not, go into the variadic
        parameter (`*args`), in call order. Each of these promises keeps its
        own `name`, so names may repeat and interleave with positional ones.
      - A parameter that receives no argument, and has no default, receives
        `MISSING`.

    When called directly from Python, the function receives ordinary values,
    just like any other function; deferred capture is then unavailable, and
    `quote_caller` raises `NoCapturableArgument`.
    """
    if not callable(function):
        raise TypeError(f"expected a callable, got {type(function)} with value {repr(function)}")
    function.__qquote_lazy__ = True
    return function


def is_lazy(function):
    """Return whether `function` was declared `@lazy`."""
    return bool(getattr(function, "__qquote_lazy__", False))


def is_quoting(function):
    """Return whether the lazy `function` quotes its arguments, like `qquote.quotes.quote`.

    The arguments of a quoting function may carry quasiquote markers, which it
    resolves itself; the evaluator does not reject them.
    """
    return is_lazy(function) and bool(getattr(function, "__qquote_quoting__", False))

# --------------------------------------------------------------------------------

def quote_now(source, env=None):
    """Immediate capture. Build a tree from `source`, written right here.

    `source` is Python source code for an expression (`str`), which is read
    into a tree by `qquote.reader.read`, or an already built tree.

    Any quasiquote markers in the tree (`u[...]`, `s[...]`, `d[...]` in source
    code) are resolved against `env`. If `env` is `None`, the environment is
    the Python frame that called `quote_now`, so local variables are visible
    to the unquoted expressions::

        x = 42
        quote_now("f(u[x], x)")  # --> Call(Reference('f'), [Literal(42), Reference('x')])

    Note the second `x` stays a `Reference`; only the unquoted one is evaluated.

    The result is a finished tree, with no markers remaining.
    """
    from .quotes import resolve
    from .reader import read

    if isinstance(source, str):
        tree = read(source)
    elif isinstance(source, (Node, QuasiquoteMarker)):
        tree = source
    else:
        raise TypeError(f"expected source code (str) or a tree, got {type(source)} with value {repr(source)}")
    if env is None:
        env = Environment.from_frame(sys._getframe(1))
    return resolve(tree, as_environment(env))


def _capture_promise(argument_slot, label):
    if argument_slot is MISSING:
        raise NoCapturableArgument(f"{label}: argument was not supplied by the caller")
    if not isinstance(argument_slot, Promise):
        raise NoCapturableArgument(f"{label}: expected a lazy argument (was the function called directly, instead of by the evaluator?); got {type(argument_slot)} with value {repr(argument_slot)}")
    return argument_slot


def quote_caller(argument_slot):
    """Deferred capture. Return the tree the caller wrote for `argument_slot`, as a `CaptureResult`.

    `argument_slot` is a parameter of a `@lazy` function, i.e. a `Promise`.
    Its tree and environment are returned; nothing is evaluated.

    If the caller merely passed on a parameter of its own (that is, the
    argument is a bare name bound to another promise), capture continues
    from that promise. So a function can transparently relay another
    function's unevaluated argument.

    Raises `NoCapturableArgument` if the parameter was not supplied (it is
    `MISSING`), or if there is no caller to capture from (the value is not a
    promise, because the function was called directly from Python).
    """
    promise = _capture_promise(argument_slot, "quote_caller")
    seen = {id(promise)}
    while type(promise.node) is Reference:
        name = promise.node.name
        if promise.mask is not None and name in promise.mask:
            break
        target = promise.env.find(name, None)
        if target is MISSING:
            raise NoCapturableArgument(f"quote_caller: argument '{name}' forwarded by the caller was not supplied")
        if not isinstance(target, Promise) or id(target) in seen:
            break
        seen.add(id(target))
        promise = target
    return CaptureResult(promise.node, promise.env)


def quote_caller_all_results(args):
    """Deferred capture of a variadic parameter. Return a `list` of `(name, CaptureResult)`.

    `args` is the tuple received by the `*args` parameter of a `@lazy` function.

    Arguments relayed from an enclosing function's variadic parameter (via a
    `...` argument) are reported as written at their origin, in the
    environment of their origin. Arguments written at this call site are
    reported as written here.
    """
    out = []
    for k, argument_slot in enumerate(args):
        promise = _capture_promise(argument_slot, f"quote_caller_all (argument at index {k})")
        out.append((promise.name, CaptureResult(promise.node, promise.env)))
    return out


def quote_caller_all(args):
    """Deferred capture of a variadic parameter. Return a `list` of `(name, Node)` pairs.

    Like `quote_caller_all_results`, but without the environments.
    """
    return [(name, capture.node) for name, capture in quote_caller_all_results(args)]
